"""
Adapter: PostgreSQL schema provisioning.

Implements the SchemaProvisioner port with SQLAlchemy on a superuser
engine. PostgreSQL DDL is transactional, so a provisioning session is a
single transaction on a single connection: nothing it did survives unless
``commit`` is reached.

Bundle files are sent to the server verbatim (no bind parameter parsing)
so they may contain any SQL, including colons and percent signs.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.engine import Connection, Engine, RootTransaction
from sqlalchemy.exc import DBAPIError

from app.domain.bundles.errors import SchemaProvisionError
from app.domain.bundles.ports import ProvisioningSession, SchemaProvisioner
from app.infrastructure.db_errors import primary_message, sqlstate

logger = logging.getLogger(__name__)

VERBATIM = {"no_parameters": True}


def _run(conn: Connection, bundle_name: str, step: str, sql: str) -> None:
    try:
        conn.exec_driver_sql(sql, execution_options=VERBATIM)
    except DBAPIError as exc:
        raise SchemaProvisionError(
            bundle_name, step, primary_message(exc), db_code=sqlstate(exc)
        ) from exc


class SqlProvisioningSession(ProvisioningSession):
    """Provisioning steps bound to one open transaction."""

    def __init__(
        self,
        conn: Connection,
        transaction: RootTransaction,
        bundle_name: str,
        admin_role: str,
    ) -> None:
        self._conn = conn
        self._transaction = transaction
        self._bundle_name = bundle_name
        self._admin_role = admin_role
        self._quote = conn.dialect.identifier_preparer.quote_identifier

    def create_schema(self, schema: str) -> None:
        sql = f"CREATE SCHEMA {self._quote(schema)}"
        _run(self._conn, self._bundle_name, "Schema creation", sql)

    def grant_admin_privileges(self, schema: str) -> None:
        target, role = self._quote(schema), self._quote(self._admin_role)
        sql = "\n".join(
            [
                f"GRANT ALL PRIVILEGES ON SCHEMA {target} TO {role};",
                f"ALTER DEFAULT PRIVILEGES IN SCHEMA {target} GRANT ALL ON TABLES TO {role};",
                f"ALTER DEFAULT PRIVILEGES IN SCHEMA {target} GRANT ALL ON SEQUENCES TO {role};",
                f"ALTER DEFAULT PRIVILEGES IN SCHEMA {target} GRANT ALL ON FUNCTIONS TO {role};",
            ]
        )
        _run(self._conn, self._bundle_name, "Admin privileges", sql)

    def set_search_path(self, schema: str) -> None:
        # public stays reachable for extension types and functions.
        sql = f"SET LOCAL search_path TO {self._quote(schema)}, public"
        _run(self._conn, self._bundle_name, "Search path", sql)

    def execute_script(self, name: str, sql: str) -> None:
        _run(self._conn, self._bundle_name, f"Installation of '{name}'", sql)

    def commit(self) -> None:
        try:
            self._transaction.commit()
        except DBAPIError as exc:
            raise SchemaProvisionError(
                self._bundle_name, "Commit", primary_message(exc), db_code=sqlstate(exc)
            ) from exc


class SqlSchemaProvisioner(SchemaProvisioner):
    """Creates and drops bundle schemas on a superuser engine."""

    def __init__(self, engine: Engine, admin_role: str) -> None:
        self._engine = engine
        self._admin_role = admin_role

    @contextmanager
    def session(self, bundle_name: str) -> Iterator[SqlProvisioningSession]:
        try:
            conn = self._engine.connect()
        except DBAPIError as exc:
            raise SchemaProvisionError(
                bundle_name, "Connection", primary_message(exc), db_code=sqlstate(exc)
            ) from exc

        with conn:
            transaction = conn.begin()
            try:
                yield SqlProvisioningSession(conn, transaction, bundle_name, self._admin_role)
            finally:
                if transaction.is_active:
                    logger.info("Rolling back installation of bundle %s", bundle_name)
                    transaction.rollback()

    def drop_schema(self, schema: str) -> None:
        try:
            with self._engine.begin() as conn:
                quoted = conn.dialect.identifier_preparer.quote_identifier(schema)
                _run(conn, schema, "Schema drop", f"DROP SCHEMA IF EXISTS {quoted} CASCADE")
        except DBAPIError as exc:
            raise SchemaProvisionError(
                schema, "Schema drop", primary_message(exc), db_code=sqlstate(exc)
            ) from exc
