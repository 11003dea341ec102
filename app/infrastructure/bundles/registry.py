"""
Adapter: JSON file bundle registry.

Implements the BundleRegistry port. The registry is a JSON document
holding a ``bundles_installed`` list; any other keys in the document are
preserved on rewrite.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from app.domain.bundles.errors import BundleRegistryError
from app.domain.bundles.ports import BundleRegistry

logger = logging.getLogger(__name__)

INSTALLED_KEY = "bundles_installed"


class JsonFileBundleRegistry(BundleRegistry):
    """Keeps the installed-bundles list in a JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def mark_installed(self, bundle_name: str) -> None:
        document = self._load()
        installed = document[INSTALLED_KEY]
        if bundle_name in installed:
            raise BundleRegistryError(f"Bundle {bundle_name} is already installed", bundle_name)
        installed.append(bundle_name)
        self._save(document)
        logger.info("Registry %s updated: %s installed", self._path, bundle_name)

    def mark_uninstalled(self, bundle_name: str) -> None:
        document = self._load()
        installed = document[INSTALLED_KEY]
        if bundle_name not in installed:
            raise BundleRegistryError(f"Bundle {bundle_name} is not installed", bundle_name)
        installed.remove(bundle_name)
        self._save(document)
        logger.info("Registry %s updated: %s uninstalled", self._path, bundle_name)

    def list_installed(self) -> list[str]:
        return list(self._load()[INSTALLED_KEY])

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {INSTALLED_KEY: []}
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise BundleRegistryError(f"Cannot read bundle registry {self._path}: {exc}") from exc
        if not isinstance(document, dict):
            raise BundleRegistryError(f"Bundle registry {self._path} is not a JSON object")
        installed = document.get(INSTALLED_KEY) or []
        if not isinstance(installed, list):
            raise BundleRegistryError(f"'{INSTALLED_KEY}' in {self._path} is not a list")
        document[INSTALLED_KEY] = [str(name) for name in installed]
        return document

    def _save(self, document: dict[str, Any]) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(document, indent="\t") + "\n", encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise BundleRegistryError(f"Cannot write bundle registry {self._path}: {exc}") from exc
