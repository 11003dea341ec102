"""
Extraction of SQLSTATE codes and messages from driver errors.
"""

from sqlalchemy.exc import DBAPIError


def sqlstate(exc: DBAPIError) -> str:
    """Return the PostgreSQL SQLSTATE carried by a wrapped driver error."""
    return getattr(exc.orig, "pgcode", None) or ""


def primary_message(exc: DBAPIError) -> str:
    """Return the server's primary message, without driver decoration."""
    diag = getattr(exc.orig, "diag", None)
    message = getattr(diag, "message_primary", None)
    if message:
        return message
    text = str(exc.orig).strip()
    return text.splitlines()[0] if text else type(exc.orig).__name__
