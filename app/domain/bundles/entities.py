"""
Domain entities for the bundles bounded context.

They contain no framework imports and no IO operations.
"""

import re
from dataclasses import dataclass, field

from app.domain.bundles.errors import InvalidBundleNameError, InvalidPanelNameError

BUNDLE_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_\-]{0,62}")
PANEL_NAME_PATTERN = re.compile(r"[A-Za-z0-9_\-]+")
RESERVED_SCHEMAS = frozenset({"public", "information_schema"})
RESERVED_SCHEMA_PREFIX = "pg_"


def validate_bundle_name(name: str) -> str:
    """Return ``name`` if it can safely be used as a bundle schema name.

    Raises:
        InvalidBundleNameError: If the name is not an identifier or collides
            with a reserved system schema.
    """
    if not name or not BUNDLE_NAME_PATTERN.fullmatch(name):
        raise InvalidBundleNameError(
            name, "must be a letter or underscore followed by letters, digits, '_' or '-'"
        )
    lowered = name.lower()
    if lowered in RESERVED_SCHEMAS or lowered.startswith(RESERVED_SCHEMA_PREFIX):
        raise InvalidBundleNameError(name, "collides with a reserved system schema")
    return name


def validate_panel_name(panel: str) -> str:
    """Return ``panel`` if it is a plain admin-panel file stem."""
    if not panel or not PANEL_NAME_PATTERN.fullmatch(panel):
        raise InvalidPanelNameError(panel)
    return panel


@dataclass(frozen=True)
class BundleFile:
    """One SQL file of a bundle, identified by name, read only when executed."""

    name: str
    path: str


@dataclass(frozen=True)
class InstallResult:
    """Outcome of a completed installation.

    Attributes:
        bundle_name: Name of the installed bundle (and its schema).
        installed_files: Install files executed, in order.
        demo_files: Demo-data files executed, in order.
        registry_updated: False when the registry could not record the install.
    """

    bundle_name: str
    installed_files: list[str] = field(default_factory=list)
    demo_files: list[str] = field(default_factory=list)
    registry_updated: bool = True


@dataclass(frozen=True)
class UninstallResult:
    """Outcome of an uninstall request.

    Attributes:
        bundle_name: Name of the bundle.
        performed: False when the caller did not confirm the removal.
        registry_updated: False when the registry could not record the removal.
    """

    bundle_name: str
    performed: bool
    registry_updated: bool = False
