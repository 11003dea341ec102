"""
Data Transfer Objects for the bundles application layer.

DTOs carry data between the interface (CLI, HTTP) and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class InstallBundleCommand:
    """Input DTO for installing a bundle.

    Attributes:
        bundle_name: Bundle folder name, also used as the schema name.
        install_demo_data: Also run the bundle's demodata files.
        reinstall: Uninstall the bundle first.
        confirmed: The caller agreed to lose existing data when reinstalling.
    """

    bundle_name: str
    install_demo_data: bool = False
    reinstall: bool = False
    confirmed: bool = False


@dataclass(frozen=True)
class UninstallBundleCommand:
    """Input DTO for removing a bundle.

    Attributes:
        bundle_name: Bundle (and schema) name.
        confirmed: The caller agreed to lose all data in the bundle schema.
    """

    bundle_name: str
    confirmed: bool = False
