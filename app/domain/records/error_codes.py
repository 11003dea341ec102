"""
Database error code translation.

Maps PostgreSQL SQLSTATE codes to HTTP status codes. The mapping is
total: an exact code is looked up first, then its two-character class,
and anything else (including an empty or missing code) is a 500.
"""

from typing import Optional

DEFAULT_HTTP_STATUS = 500

# Exact SQLSTATE -> HTTP status
SQLSTATE_HTTP_STATUS: dict[str, int] = {
    "23505": 409,  # unique_violation
    "23503": 409,  # foreign_key_violation
    "23P01": 409,  # exclusion_violation
    "23502": 400,  # not_null_violation
    "23514": 400,  # check_violation
    "42501": 403,  # insufficient_privilege
    "42P01": 404,  # undefined_table
    "3F000": 404,  # invalid_schema_name
    "42883": 404,  # undefined_function
    "42703": 400,  # undefined_column
    "28000": 403,  # invalid_authorization_specification
    "28P01": 403,  # invalid_password
    "P0001": 400,  # raise_exception
    "P0002": 404,  # no_data_found
    "40001": 409,  # serialization_failure
    "40P01": 409,  # deadlock_detected
    "57014": 504,  # query_canceled
}

# SQLSTATE class (first two characters) -> HTTP status
SQLSTATE_CLASS_HTTP_STATUS: dict[str, int] = {
    "08": 503,  # connection exception
    "22": 400,  # data exception
    "23": 409,  # integrity constraint violation
    "42": 400,  # syntax error or access rule violation
    "53": 503,  # insufficient resources
    "57": 503,  # operator intervention
}


def http_status_for(db_code: Optional[str]) -> int:
    """Translate a database error code into an HTTP status code.

    Args:
        db_code: A five-character SQLSTATE, or None/empty when unknown.

    Returns:
        The HTTP status for the code, DEFAULT_HTTP_STATUS when unmapped.
    """
    code = (db_code or "").strip().upper()
    if not code:
        return DEFAULT_HTTP_STATUS
    if code in SQLSTATE_HTTP_STATUS:
        return SQLSTATE_HTTP_STATUS[code]
    return SQLSTATE_CLASS_HTTP_STATUS.get(code[:2], DEFAULT_HTTP_STATUS)
