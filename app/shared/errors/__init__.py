"""
Shared error handling package.

Translates records and bundle errors into API responses in one place.
"""
