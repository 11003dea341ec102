"""
Tests for the bundles application layer (use cases).

Use cases run against in-memory ports. The fake provisioner only keeps
what a committed session created, so rollback behaves like PostgreSQL.
"""

import pytest
from conftest import FakeBundleFiles, FakeProvisioner, FakeRegistry

from app.application.bundles.aggregate_admin_panel import AggregateAdminPanelUseCase
from app.application.bundles.dtos import InstallBundleCommand, UninstallBundleCommand
from app.application.bundles.install_bundle import InstallBundleUseCase
from app.application.bundles.uninstall_bundle import UninstallBundleUseCase
from app.domain.bundles.errors import (
    BundleFilesError,
    BundleNotFoundError,
    BundleRegistryError,
    InvalidBundleNameError,
    InvalidPanelNameError,
    SchemaProvisionError,
)

SHOP_FILES = {"shop": ["01-tables.sql", "02-policies.sql"]}


def _install(files=None, provisioner=None, registry=None):
    files = files or FakeBundleFiles(install=SHOP_FILES, demo={"shop": ["demo.sql"]})
    provisioner = provisioner or FakeProvisioner()
    registry = registry or FakeRegistry()
    return InstallBundleUseCase(files, provisioner, registry), provisioner, registry


class TestInstallBundleUseCase:
    """Tests for InstallBundleUseCase."""

    def test_installs_in_order(self) -> None:
        use_case, provisioner, registry = _install()
        result = use_case.execute(InstallBundleCommand(bundle_name="shop"))

        assert result.installed_files == ["01-tables.sql", "02-policies.sql"]
        assert result.demo_files == []
        assert result.registry_updated is True
        assert provisioner.schemas == {"shop": ["01-tables.sql", "02-policies.sql"]}
        assert provisioner.log[:3] == [
            ("create", "shop"),
            ("grant", "shop"),
            ("search_path", "shop"),
        ]
        assert registry.installed == ["shop"]

    def test_demo_data(self) -> None:
        use_case, provisioner, _ = _install()
        result = use_case.execute(InstallBundleCommand(bundle_name="shop", install_demo_data=True))
        assert result.demo_files == ["demo.sql"]
        assert provisioner.schemas["shop"][-1] == "demo.sql"

    def test_failure_rolls_back_everything(self) -> None:
        """A failing file leaves no schema and no registry entry."""
        provisioner = FakeProvisioner(failing_scripts=("02-policies.sql",))
        use_case, provisioner, registry = _install(provisioner=provisioner)

        with pytest.raises(SchemaProvisionError) as exc_info:
            use_case.execute(InstallBundleCommand(bundle_name="shop"))

        assert exc_info.value.db_code == "42601"
        assert provisioner.schemas == {}
        assert provisioner.rollbacks == 1
        assert provisioner.log[-1] == ("drop", "shop")
        assert registry.installed == []

    def test_missing_demo_data_rolls_back(self) -> None:
        files = FakeBundleFiles(install=SHOP_FILES)
        use_case, provisioner, registry = _install(files=files)

        with pytest.raises(BundleFilesError):
            use_case.execute(InstallBundleCommand(bundle_name="shop", install_demo_data=True))

        assert provisioner.schemas == {}
        assert ("drop", "shop") in provisioner.log
        assert registry.installed == []

    def test_missing_install_folder_touches_nothing(self) -> None:
        """No schema is ever created for a bundle without install files."""
        use_case, provisioner, registry = _install()
        with pytest.raises(BundleNotFoundError):
            use_case.execute(InstallBundleCommand(bundle_name="blog"))
        assert provisioner.log == []
        assert registry.installed == []

    def test_existing_schema_is_left_alone(self) -> None:
        """A failed CREATE SCHEMA never drops the schema already there."""
        use_case, provisioner, _ = _install()
        use_case.execute(InstallBundleCommand(bundle_name="shop"))

        with pytest.raises(SchemaProvisionError):
            use_case.execute(InstallBundleCommand(bundle_name="shop"))

        assert ("drop", "shop") not in provisioner.log
        assert provisioner.schemas == {"shop": ["01-tables.sql", "02-policies.sql"]}

    def test_reinstall_matches_fresh_install(self) -> None:
        use_case, provisioner, registry = _install()
        use_case.execute(InstallBundleCommand(bundle_name="shop", install_demo_data=True))
        fresh = dict(provisioner.schemas)

        use_case.execute(
            InstallBundleCommand(
                bundle_name="shop", install_demo_data=True, reinstall=True, confirmed=True
            )
        )

        assert provisioner.schemas == fresh
        assert registry.installed == ["shop"]

    def test_reinstall_of_absent_bundle(self) -> None:
        """The uninstall half of a reinstall may fail harmlessly."""
        use_case, provisioner, registry = _install()
        result = use_case.execute(
            InstallBundleCommand(bundle_name="shop", reinstall=True, confirmed=True)
        )
        assert result.registry_updated is True
        assert "shop" in provisioner.schemas
        assert registry.installed == ["shop"]

    def test_registry_failure_is_not_fatal(self) -> None:
        use_case, provisioner, _ = _install(registry=FakeRegistry(broken=True))
        result = use_case.execute(InstallBundleCommand(bundle_name="shop"))
        assert result.registry_updated is False
        assert "shop" in provisioner.schemas

    @pytest.mark.parametrize(
        "name", ["", "public", "pg_catalog", "bad name", "9lives", "a;b", "shop\n"]
    )
    def test_invalid_names(self, name: str) -> None:
        use_case, provisioner, _ = _install()
        with pytest.raises(InvalidBundleNameError):
            use_case.execute(InstallBundleCommand(bundle_name=name))
        assert provisioner.log == []


class TestUninstallBundleUseCase:
    """Tests for UninstallBundleUseCase."""

    def test_unconfirmed_does_nothing(self) -> None:
        provisioner = FakeProvisioner()
        provisioner.schemas["shop"] = []
        registry = FakeRegistry(installed=["shop"])

        result = UninstallBundleUseCase(provisioner, registry).execute(
            UninstallBundleCommand(bundle_name="shop")
        )

        assert result.performed is False
        assert "shop" in provisioner.schemas
        assert registry.installed == ["shop"]

    def test_confirmed_drops_schema(self) -> None:
        provisioner = FakeProvisioner()
        provisioner.schemas["shop"] = []
        registry = FakeRegistry(installed=["shop"])

        result = UninstallBundleUseCase(provisioner, registry).execute(
            UninstallBundleCommand(bundle_name="shop", confirmed=True)
        )

        assert result.performed is True
        assert result.registry_updated is True
        assert provisioner.schemas == {}
        assert registry.installed == []

    def test_unregistered_bundle(self) -> None:
        """Dropping a bundle the registry never knew is still a success."""
        result = UninstallBundleUseCase(FakeProvisioner(), FakeRegistry()).execute(
            UninstallBundleCommand(bundle_name="shop", confirmed=True)
        )
        assert result.performed is True
        assert result.registry_updated is False

    def test_drop_failure_propagates(self) -> None:
        provisioner = FakeProvisioner()

        def fail(schema: str) -> None:
            raise SchemaProvisionError(schema, "Schema drop", "connection refused", "08006")

        provisioner.drop_schema = fail
        with pytest.raises(SchemaProvisionError):
            UninstallBundleUseCase(provisioner, FakeRegistry()).execute(
                UninstallBundleCommand(bundle_name="shop", confirmed=True)
            )


class TestAggregateAdminPanelUseCase:
    """Tests for AggregateAdminPanelUseCase."""

    def test_keys_by_bundle_in_registry_order(self) -> None:
        files = FakeBundleFiles(
            panels={
                ("crm", "menus"): '[{"label": "Contacts"}]',
                ("shop", "menus"): '[{"label": "Orders"}]',
                ("blog", "menus"): "not json",
            }
        )
        registry = FakeRegistry(installed=["shop", "blog", "crm", "wiki"])

        combined = AggregateAdminPanelUseCase(files, registry).execute("menus")

        assert list(combined) == ["shop", "crm"]
        assert combined["crm"] == [{"label": "Contacts"}]

    @pytest.mark.parametrize("panel", ["", "../secrets", "views.json", "a b", "menus\n"])
    def test_invalid_panel(self, panel: str) -> None:
        with pytest.raises(InvalidPanelNameError):
            AggregateAdminPanelUseCase(FakeBundleFiles(), FakeRegistry()).execute(panel)

    def test_unreadable_registry(self) -> None:
        with pytest.raises(BundleRegistryError):
            AggregateAdminPanelUseCase(FakeBundleFiles(), FakeRegistry(broken=True)).execute(
                "views"
            )
