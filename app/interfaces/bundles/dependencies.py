"""
Dependency injection for the bundles bounded context.

Bundle folders and the installed-bundles registry are both located
through application settings.
"""

from app.application.bundles.aggregate_admin_panel import AggregateAdminPanelUseCase
from app.core.config import settings
from app.infrastructure.bundles.file_source import LocalBundleFileSource
from app.infrastructure.bundles.registry import JsonFileBundleRegistry


def get_aggregate_admin_panel_use_case() -> AggregateAdminPanelUseCase:
    """Build AggregateAdminPanelUseCase with its infrastructure dependencies."""
    return AggregateAdminPanelUseCase(
        files=LocalBundleFileSource(settings.bundles_dir),
        registry=JsonFileBundleRegistry(settings.bundle_registry_path),
    )
