"""
Application layer for the records bounded context.

One use case per CRUD verb. Use cases validate the request context,
build SQL through the query builder and run it through the RecordStore port.
"""
