"""
Adapter: Bundle files on the local filesystem.

Implements the BundleFileSource port. A bundle lives in
``<bundles_dir>/<name>/`` with ``install/`` and optional ``demodata/``
folders of SQL files and an optional ``admin-panel/`` folder of JSON
fragments. Sub-directories are skipped; files are listed by name.
"""

import logging
from pathlib import Path
from typing import Optional

from app.domain.bundles.entities import BundleFile
from app.domain.bundles.errors import BundleFilesError, BundleNotFoundError
from app.domain.bundles.ports import BundleFileSource

logger = logging.getLogger(__name__)

INSTALL_DIR = "install"
DEMO_DATA_DIR = "demodata"
ADMIN_PANEL_DIR = "admin-panel"


class LocalBundleFileSource(BundleFileSource):
    """Reads bundle folders below ``bundles_dir``."""

    def __init__(self, bundles_dir: Path) -> None:
        self._bundles_dir = Path(bundles_dir)

    def install_files(self, bundle_name: str) -> list[BundleFile]:
        directory = self._bundles_dir / bundle_name / INSTALL_DIR
        if not directory.is_dir():
            raise BundleNotFoundError(bundle_name)
        try:
            files = self._list(directory)
        except OSError as exc:
            raise BundleNotFoundError(bundle_name, str(exc)) from exc
        if not files:
            raise BundleNotFoundError(bundle_name, "no installation files")
        return files

    def demo_files(self, bundle_name: str) -> list[BundleFile]:
        directory = self._bundles_dir / bundle_name / DEMO_DATA_DIR
        try:
            files = self._list(directory)
        except OSError as exc:
            raise BundleFilesError(
                f"No demo data files could be read for bundle '{bundle_name}': {exc}",
                bundle_name,
            ) from exc
        if not files:
            raise BundleFilesError(
                f"No demo data files could be read for bundle '{bundle_name}'", bundle_name
            )
        return files

    def read(self, bundle_file: BundleFile) -> str:
        try:
            return Path(bundle_file.path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise BundleFilesError(f"Could not read {bundle_file.name}: {exc}") from exc

    def read_admin_panel(self, bundle_name: str, panel: str) -> Optional[str]:
        path = self._bundles_dir / bundle_name / ADMIN_PANEL_DIR / f"{panel}.json"
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return None

    @staticmethod
    def _list(directory: Path) -> list[BundleFile]:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
        return [BundleFile(name=p.name, path=str(p)) for p in entries if not p.is_dir()]
