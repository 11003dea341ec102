"""
Domain layer package.

Record query building, error translation and bundle rules. Pure Python:
no framework imports and no IO; the outside world is reached only
through the ports each bounded context declares.
"""
