"""
Port interfaces (ABCs) for the bundles bounded context.

The installer depends on three collaborators: the bundle files on disk,
the database that receives the bundle schema, and the registry of
installed bundles.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional

from app.domain.bundles.entities import BundleFile


class BundleFileSource(ABC):
    """Port for reading a bundle's files."""

    @abstractmethod
    def install_files(self, bundle_name: str) -> list[BundleFile]:
        """Return the bundle's install files in directory-listing order.

        Raises:
            BundleNotFoundError: If the install folder is missing, unreadable
                or holds no files.
        """
        raise NotImplementedError

    @abstractmethod
    def demo_files(self, bundle_name: str) -> list[BundleFile]:
        """Return the bundle's demo-data files in directory-listing order.

        Raises:
            BundleFilesError: If the demodata folder is missing, unreadable
                or holds no files.
        """
        raise NotImplementedError

    @abstractmethod
    def read(self, bundle_file: BundleFile) -> str:
        """Return the whole content of a bundle file.

        Raises:
            BundleFilesError: If the file cannot be read.
        """
        raise NotImplementedError

    @abstractmethod
    def read_admin_panel(self, bundle_name: str, panel: str) -> Optional[str]:
        """Return a bundle's admin panel fragment, or None if it has none."""
        raise NotImplementedError


class ProvisioningSession(ABC):
    """One connection and one transaction used to build a bundle schema.

    Leaving the session without calling ``commit`` rolls everything back.
    Every method raises SchemaProvisionError on a database failure.
    """

    @abstractmethod
    def create_schema(self, schema: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def grant_admin_privileges(self, schema: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_search_path(self, schema: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def execute_script(self, name: str, sql: str) -> None:
        """Run a whole SQL file as one batch."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        raise NotImplementedError


class SchemaProvisioner(ABC):
    """Port for creating and dropping bundle schemas."""

    @abstractmethod
    def session(self, bundle_name: str) -> AbstractContextManager[ProvisioningSession]:
        """Open a provisioning session on a dedicated connection."""
        raise NotImplementedError

    @abstractmethod
    def drop_schema(self, schema: str) -> None:
        """Drop ``schema`` and everything in it. A missing schema is not an error.

        Raises:
            SchemaProvisionError: If the database refuses the drop.
        """
        raise NotImplementedError


class BundleRegistry(ABC):
    """Port for the record of installed bundles."""

    @abstractmethod
    def mark_installed(self, bundle_name: str) -> None:
        """Record a bundle as installed.

        Raises:
            BundleRegistryError: If the change cannot be recorded.
        """
        raise NotImplementedError

    @abstractmethod
    def mark_uninstalled(self, bundle_name: str) -> None:
        """Remove a bundle from the installed list.

        Raises:
            BundleRegistryError: If the change cannot be recorded.
        """
        raise NotImplementedError

    @abstractmethod
    def list_installed(self) -> list[str]:
        """Return installed bundle names in installation order."""
        raise NotImplementedError
