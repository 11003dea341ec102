"""
Use case: Install a bundle into its own database schema.

Input: InstallBundleCommand (bundle_name, install_demo_data, reinstall, confirmed)
Output: InstallResult
Side effects: Creates and populates the bundle schema, updates the registry.
Failure cases: InvalidBundleNameError, BundleNotFoundError, BundleFilesError,
    SchemaProvisionError.

Installation is all-or-nothing: the schema, privileges, search path and
every install (and demo-data) file run in one transaction on one
connection, and once the schema has been created any failure is followed
by a compensating drop of the schema. Two installs of the same bundle
must not run at the same time; callers serialize them.
"""

import logging

from app.application.bundles.dtos import InstallBundleCommand, UninstallBundleCommand
from app.application.bundles.uninstall_bundle import UninstallBundleUseCase
from app.domain.bundles.entities import BundleFile, InstallResult, validate_bundle_name
from app.domain.bundles.errors import BundleError, BundleRegistryError, SchemaProvisionError
from app.domain.bundles.ports import (
    BundleFileSource,
    BundleRegistry,
    ProvisioningSession,
    SchemaProvisioner,
)

logger = logging.getLogger(__name__)


class InstallBundleUseCase:
    """Orchestrates the ordered, rollback-on-failure installation of a bundle."""

    def __init__(
        self,
        files: BundleFileSource,
        provisioner: SchemaProvisioner,
        registry: BundleRegistry,
    ) -> None:
        self._files = files
        self._provisioner = provisioner
        self._registry = registry
        self._uninstall = UninstallBundleUseCase(provisioner, registry)

    def execute(self, command: InstallBundleCommand) -> InstallResult:
        """Run the installation.

        Args:
            command: What to install and how.

        Returns:
            The files executed and whether the registry recorded the install.
        """
        name = validate_bundle_name(command.bundle_name)

        # Fails before anything touches the database.
        install_files = self._files.install_files(name)

        if command.reinstall:
            logger.info("Uninstalling bundle %s before reinstalling", name)
            try:
                self._uninstall.execute(
                    UninstallBundleCommand(bundle_name=name, confirmed=command.confirmed)
                )
            except BundleError as exc:
                logger.warning("Uninstall before reinstall of %s failed: %s", name, exc.message)

        logger.info("Installing bundle '%s'", name)
        schema_created = False
        installed: list[str] = []
        demo: list[str] = []
        try:
            with self._provisioner.session(name) as session:
                session.create_schema(name)
                schema_created = True
                session.grant_admin_privileges(name)
                session.set_search_path(name)
                installed = self._run_files(session, install_files)

                if command.install_demo_data:
                    logger.info("Installing demo data")
                    demo = self._run_files(session, self._files.demo_files(name))

                session.commit()
        except Exception as exc:
            if schema_created:
                self._drop_after_failure(name)
            logger.error("Installation of bundle '%s' failed: %s", name, exc)
            raise

        registry_updated = True
        try:
            self._registry.mark_installed(name)
        except BundleRegistryError as exc:
            registry_updated = False
            logger.warning("Error recording bundle %s in registry: %s", name, exc.message)

        logger.info("Installation of bundle %s completed", name)
        return InstallResult(
            bundle_name=name,
            installed_files=installed,
            demo_files=demo,
            registry_updated=registry_updated,
        )

    def _run_files(self, session: ProvisioningSession, files: list[BundleFile]) -> list[str]:
        executed = []
        for bundle_file in files:
            session.execute_script(bundle_file.name, self._files.read(bundle_file))
            logger.info("%s installed OK", bundle_file.name)
            executed.append(bundle_file.name)
        return executed

    def _drop_after_failure(self, name: str) -> None:
        try:
            self._provisioner.drop_schema(name)
        except SchemaProvisionError as exc:
            logger.error("Could not drop schema of failed bundle %s: %s", name, exc.message)
        else:
            logger.info("Schema of failed bundle %s dropped", name)
