"""
Use case: Combine one admin panel fragment from every installed bundle.

Input: panel name (e.g. "views", "menus")
Output: mapping of bundle name -> parsed JSON fragment
Side effects: None.
Failure cases: InvalidPanelNameError, BundleRegistryError.
"""

import json
import logging
from typing import Any

from app.domain.bundles.entities import validate_panel_name
from app.domain.bundles.ports import BundleFileSource, BundleRegistry

logger = logging.getLogger(__name__)


class AggregateAdminPanelUseCase:
    """Reads ``admin-panel/<panel>.json`` of each installed bundle.

    Bundles without the fragment, or with an unreadable or invalid one,
    are skipped.
    """

    def __init__(self, files: BundleFileSource, registry: BundleRegistry) -> None:
        self._files = files
        self._registry = registry

    def execute(self, panel: str) -> dict[str, Any]:
        validate_panel_name(panel)
        combined: dict[str, Any] = {}
        for bundle_name in self._registry.list_installed():
            raw = self._files.read_admin_panel(bundle_name, panel)
            if raw is None:
                continue
            try:
                combined[bundle_name] = json.loads(raw)
            except json.JSONDecodeError as exc:
                logger.warning("Skipping %s panel of bundle %s: %s", panel, bundle_name, exc)
        return combined
