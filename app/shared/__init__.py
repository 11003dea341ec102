"""
Shared module package.

Cross-cutting concerns used by the API and the command line: error
mapping, security middleware, rate limiting and logging configuration.
"""
