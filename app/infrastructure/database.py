"""
SQLAlchemy engine wiring.

One shared engine serves API requests; it is created lazily on first use
and disposed at application shutdown. Administrative work (bundle
installation) builds its own superuser engine per operation.
"""

import logging
import threading
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from app.core.config import settings

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_engine_lock = threading.Lock()


def build_engine(dsn: str, statement_timeout_ms: int = 0) -> Engine:
    """Build a SQLAlchemy engine for ``dsn``.

    Args:
        dsn: SQLAlchemy database URL.
        statement_timeout_ms: Server-side statement timeout, 0 for none.
    """
    connect_args = {}
    if statement_timeout_ms > 0:
        connect_args["options"] = f"-c statement_timeout={statement_timeout_ms}"
    return create_engine(dsn, pool_pre_ping=True, connect_args=connect_args)


def get_engine() -> Engine:
    """Return the shared request-serving engine, creating it on first use."""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = build_engine(
                    settings.get_database_dsn(), settings.statement_timeout_ms
                )
                logger.info(
                    "Database engine created for %s",
                    _engine.url.render_as_string(hide_password=True),
                )
    return _engine


def dispose_engine() -> None:
    """Close every pooled connection of the shared engine."""
    global _engine
    with _engine_lock:
        if _engine is None:
            return
        _engine.dispose()
        _engine = None


def build_superuser_engine() -> Engine:
    """Build a dedicated engine for one administrative operation."""
    return build_engine(settings.get_superuser_dsn())
