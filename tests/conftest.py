"""
Shared in-memory fakes of the domain ports.

They behave like the real adapters closely enough to check orchestration:
the fake provisioner applies nothing until a session commits, exactly like
a PostgreSQL transaction.
"""

from contextlib import contextmanager
from typing import Optional

import pytest

from app.domain.bundles.entities import BundleFile
from app.domain.bundles.errors import (
    BundleFilesError,
    BundleNotFoundError,
    BundleRegistryError,
    SchemaProvisionError,
)
from app.domain.bundles.ports import (
    BundleFileSource,
    BundleRegistry,
    ProvisioningSession,
    SchemaProvisioner,
)
from app.domain.records.entities import BuiltQuery, QueryContext
from app.domain.records.ports import RecordStore


class FakeRecordStore(RecordStore):
    """Returns canned results and remembers every query it was given."""

    def __init__(self, payload: Optional[str] = None, rowcount: int = 0, error=None) -> None:
        self.payload = payload
        self.rowcount = rowcount
        self.error = error
        self.queries: list[BuiltQuery] = []

    def fetch_json(self, query: BuiltQuery) -> Optional[str]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.payload

    def execute(self, query: BuiltQuery) -> int:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.rowcount


class FakeBundleFiles(BundleFileSource):
    """Bundle folders held in dictionaries."""

    def __init__(
        self,
        install: Optional[dict[str, list[str]]] = None,
        demo: Optional[dict[str, list[str]]] = None,
        panels: Optional[dict[tuple[str, str], str]] = None,
    ) -> None:
        self.install = install or {}
        self.demo = demo or {}
        self.panels = panels or {}

    def install_files(self, bundle_name: str) -> list[BundleFile]:
        names = self.install.get(bundle_name)
        if not names:
            raise BundleNotFoundError(bundle_name)
        return [BundleFile(name=n, path=f"{bundle_name}/install/{n}") for n in names]

    def demo_files(self, bundle_name: str) -> list[BundleFile]:
        names = self.demo.get(bundle_name)
        if not names:
            raise BundleFilesError("No demo data files", bundle_name)
        return [BundleFile(name=n, path=f"{bundle_name}/demodata/{n}") for n in names]

    def read(self, bundle_file: BundleFile) -> str:
        return f"-- {bundle_file.path}"

    def read_admin_panel(self, bundle_name: str, panel: str) -> Optional[str]:
        return self.panels.get((bundle_name, panel))


class FakeSession(ProvisioningSession):
    def __init__(self, provisioner: "FakeProvisioner", bundle_name: str) -> None:
        self._provisioner = provisioner
        self._bundle_name = bundle_name
        self.staged: dict[str, list[str]] = {}
        self.committed = False

    def create_schema(self, schema: str) -> None:
        self._provisioner.log.append(("create", schema))
        if schema in self._provisioner.schemas:
            raise SchemaProvisionError(schema, "Schema creation", "already exists", "42P06")
        self.staged[schema] = []

    def grant_admin_privileges(self, schema: str) -> None:
        self._provisioner.log.append(("grant", schema))

    def set_search_path(self, schema: str) -> None:
        self._provisioner.log.append(("search_path", schema))

    def execute_script(self, name: str, sql: str) -> None:
        self._provisioner.log.append(("script", name))
        if name in self._provisioner.failing_scripts:
            raise SchemaProvisionError(
                self._bundle_name, f"Installation of '{name}'", "syntax error", "42601"
            )
        self.staged[self._bundle_name].append(name)

    def commit(self) -> None:
        self._provisioner.schemas.update(self.staged)
        self.committed = True


class FakeProvisioner(SchemaProvisioner):
    """Schemas as a dict of schema name -> executed script names."""

    def __init__(self, failing_scripts: tuple[str, ...] = ()) -> None:
        self.schemas: dict[str, list[str]] = {}
        self.log: list[tuple[str, str]] = []
        self.failing_scripts = failing_scripts
        self.rollbacks = 0

    @contextmanager
    def session(self, bundle_name: str):
        session = FakeSession(self, bundle_name)
        try:
            yield session
        finally:
            if not session.committed:
                self.rollbacks += 1

    def drop_schema(self, schema: str) -> None:
        self.log.append(("drop", schema))
        self.schemas.pop(schema, None)


class FakeRegistry(BundleRegistry):
    def __init__(self, installed: Optional[list[str]] = None, broken: bool = False) -> None:
        self.installed = list(installed or [])
        self.broken = broken

    def mark_installed(self, bundle_name: str) -> None:
        if self.broken or bundle_name in self.installed:
            raise BundleRegistryError("cannot record install", bundle_name)
        self.installed.append(bundle_name)

    def mark_uninstalled(self, bundle_name: str) -> None:
        if self.broken or bundle_name not in self.installed:
            raise BundleRegistryError("cannot record uninstall", bundle_name)
        self.installed.remove(bundle_name)

    def list_installed(self) -> list[str]:
        if self.broken:
            raise BundleRegistryError("registry unreadable")
        return list(self.installed)


@pytest.fixture
def table_context() -> QueryContext:
    return QueryContext(role="web", user_id="42", schema="shop", table="orders")


@pytest.fixture
def record_context() -> QueryContext:
    return QueryContext(role="web", user_id="42", schema="shop", table="orders", record="7")
