"""
Domain-specific errors for the bundles bounded context.

Install errors abort the whole operation; registry errors are only
ever logged. No framework imports allowed.
"""


class BundleError(Exception):
    """Base error for all bundle lifecycle errors."""

    def __init__(self, message: str, bundle_name: str = "") -> None:
        self.message = message
        self.bundle_name = bundle_name
        super().__init__(self.message)


class InvalidBundleNameError(BundleError):
    """Raised when a bundle name is not usable as a schema name."""

    def __init__(self, bundle_name: str, reason: str) -> None:
        super().__init__(f"Invalid bundle name {bundle_name!r}: {reason}", bundle_name)
        self.reason = reason


class BundleNotFoundError(BundleError):
    """Raised when a bundle's install folder is missing, unreadable or empty."""

    def __init__(self, bundle_name: str, reason: str = "") -> None:
        message = f"Bundle '{bundle_name}' install folder not found or unreadable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, bundle_name)


class BundleFilesError(BundleError):
    """Raised when bundle files cannot be listed or read during installation."""


class SchemaProvisionError(BundleError):
    """Raised when a database step of an installation fails.

    Attributes:
        step: The installation step that failed.
        db_code: SQLSTATE reported by the database, if any.
    """

    def __init__(self, bundle_name: str, step: str, reason: str, db_code: str = "") -> None:
        super().__init__(f"{step} failed for bundle '{bundle_name}': {reason}", bundle_name)
        self.step = step
        self.reason = reason
        self.db_code = db_code


class BundleRegistryError(BundleError):
    """Raised when the bundle registry cannot record a change."""


class InvalidPanelNameError(BundleError):
    """Raised when an admin panel name is not a plain file stem."""

    def __init__(self, panel: str) -> None:
        super().__init__(f"Invalid admin panel name: {panel!r}")
        self.panel = panel
