"""
Interfaces layer package.

FastAPI routers, dependency wiring and response schemas. Routes resolve
the request into use case input and return the result; they hold no
business logic.
"""
