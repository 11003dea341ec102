"""
Use case: Remove a bundle by dropping its schema.

Input: UninstallBundleCommand (bundle_name, confirmed)
Output: UninstallResult
Side effects: Drops the bundle schema, updates the bundle registry.
Failure cases: InvalidBundleNameError, SchemaProvisionError.
"""

import logging

from app.application.bundles.dtos import UninstallBundleCommand
from app.domain.bundles.entities import UninstallResult, validate_bundle_name
from app.domain.bundles.errors import BundleRegistryError
from app.domain.bundles.ports import BundleRegistry, SchemaProvisioner

logger = logging.getLogger(__name__)


class UninstallBundleUseCase:
    """Drops a bundle schema unconditionally once the caller confirmed.

    A schema that does not exist is not an error. The registry update is
    best-effort: a failure is logged and reported in the result only.
    """

    def __init__(self, provisioner: SchemaProvisioner, registry: BundleRegistry) -> None:
        self._provisioner = provisioner
        self._registry = registry

    def execute(self, command: UninstallBundleCommand) -> UninstallResult:
        name = validate_bundle_name(command.bundle_name)
        if not command.confirmed:
            logger.info("Uninstallation of bundle %s not confirmed, nothing done", name)
            return UninstallResult(bundle_name=name, performed=False)

        self._provisioner.drop_schema(name)

        registry_updated = True
        try:
            self._registry.mark_uninstalled(name)
        except BundleRegistryError as exc:
            registry_updated = False
            logger.warning("Error uninstalling bundle %s from registry: %s", name, exc.message)

        logger.info("Uninstallation of bundle %s completed", name)
        return UninstallResult(bundle_name=name, performed=True, registry_updated=registry_updated)
