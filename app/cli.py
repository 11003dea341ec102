"""
Command line entry point for bundle administration.

Usage:
    # Install a bundle
    bundlebase install shop

    # Install with demo data, dropping any previous install first
    bundlebase install shop --demodata --reinstall

    # Drop a bundle schema and everything in it
    bundlebase uninstall shop

    # List installed bundles
    bundlebase installed

    # Check the administrative database connection
    bundlebase ping

    # Run the HTTP API
    bundlebase serve --port 8000

Destructive commands ask for confirmation unless --noprompt is given.
Every command exits 0 on success and 1 on an unrecoverable error.
"""

import argparse
import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.application.bundles.dtos import InstallBundleCommand, UninstallBundleCommand
from app.application.bundles.install_bundle import InstallBundleUseCase
from app.application.bundles.uninstall_bundle import UninstallBundleUseCase
from app.core.config import settings
from app.domain.bundles.errors import BundleError
from app.infrastructure.bundles.file_source import LocalBundleFileSource
from app.infrastructure.bundles.registry import JsonFileBundleRegistry
from app.infrastructure.bundles.schema_provisioner import SqlSchemaProvisioner
from app.infrastructure.database import build_superuser_engine
from app.shared.logging import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def confirm(
    prompt: str, noprompt: bool, ask: Optional[Callable[[str], str]] = None
) -> bool:
    """Ask a yes/no question on the terminal, defaulting to no.

    ``noprompt`` answers yes without asking.
    """
    if noprompt:
        return True
    try:
        answer = (ask or input)(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


@contextmanager
def superuser_engine() -> Iterator[Engine]:
    """Yield a dedicated superuser engine, disposed when the command ends."""
    engine = build_superuser_engine()
    try:
        yield engine
    finally:
        engine.dispose()


def _registry() -> JsonFileBundleRegistry:
    return JsonFileBundleRegistry(settings.bundle_registry_path)


def cmd_install(args: argparse.Namespace) -> int:
    """Install a bundle, optionally with demo data or over a previous install."""
    if args.reinstall and not confirm(
        f"Reinstalling drops schema '{args.bundle}' and all of its data. Continue?",
        args.noprompt,
    ):
        logger.info("Reinstallation of %s cancelled", args.bundle)
        return EXIT_OK

    with superuser_engine() as engine:
        use_case = InstallBundleUseCase(
            files=LocalBundleFileSource(settings.bundles_dir),
            provisioner=SqlSchemaProvisioner(engine, settings.bundle_admin_role),
            registry=_registry(),
        )
        result = use_case.execute(
            InstallBundleCommand(
                bundle_name=args.bundle,
                install_demo_data=args.demodata,
                reinstall=args.reinstall,
                confirmed=True,
            )
        )

    logger.info(
        "Bundle %s installed: %d files, %d demo data files",
        result.bundle_name,
        len(result.installed_files),
        len(result.demo_files),
    )
    if not result.registry_updated:
        logger.warning(
            "Bundle %s is installed but missing from %s",
            result.bundle_name,
            settings.bundle_registry_path,
        )
    return EXIT_OK


def cmd_uninstall(args: argparse.Namespace) -> int:
    """Drop a bundle schema after confirmation."""
    confirmed = confirm(
        f"Uninstalling drops schema '{args.bundle}' and all of its data. Continue?",
        args.noprompt,
    )
    with superuser_engine() as engine:
        use_case = UninstallBundleUseCase(
            provisioner=SqlSchemaProvisioner(engine, settings.bundle_admin_role),
            registry=_registry(),
        )
        result = use_case.execute(
            UninstallBundleCommand(bundle_name=args.bundle, confirmed=confirmed)
        )

    if not result.performed:
        logger.info("Uninstallation of %s cancelled", result.bundle_name)
    return EXIT_OK


def cmd_installed(args: argparse.Namespace) -> int:
    """Print the installed bundles, one per line."""
    for name in _registry().list_installed():
        print(name)
    return EXIT_OK


def cmd_ping(args: argparse.Namespace) -> int:
    """Open an administrative connection and run a trivial query."""
    with superuser_engine() as engine:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    logger.info("Database connection OK")
    return EXIT_OK


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API."""
    import uvicorn

    logger.info("Starting %s at http://%s:%d", settings.project_name, args.host, args.port)
    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=False)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bundlebase", description="Bundlebase bundle administration"
    )
    parser.add_argument(
        "-n", "--noprompt", action="store_true",
        help="Do not ask for confirmation before destructive steps",
    )
    # Also accepted after the subcommand; SUPPRESS keeps a root -n intact.
    prompt_options = argparse.ArgumentParser(add_help=False)
    prompt_options.add_argument(
        "-n", "--noprompt", action="store_true", default=argparse.SUPPRESS,
        help="Do not ask for confirmation before destructive steps",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Install
    install_parser = subparsers.add_parser(
        "install", help="Install a bundle", parents=[prompt_options]
    )
    install_parser.add_argument("bundle", help="Bundle folder name (also the schema name)")
    install_parser.add_argument(
        "--demodata", action="store_true",
        help="Also run the files of the bundle's demodata folder",
    )
    install_parser.add_argument(
        "-r", "--reinstall", action="store_true",
        help="Uninstall the bundle first",
    )
    install_parser.set_defaults(func=cmd_install)

    # Uninstall
    uninstall_parser = subparsers.add_parser(
        "uninstall", help="Uninstall a bundle", parents=[prompt_options]
    )
    uninstall_parser.add_argument("bundle", help="Bundle name")
    uninstall_parser.set_defaults(func=cmd_uninstall)

    # Installed
    installed_parser = subparsers.add_parser("installed", help="List installed bundles")
    installed_parser.set_defaults(func=cmd_installed)

    # Ping
    ping_parser = subparsers.add_parser("ping", help="Check the administrative connection")
    ping_parser.set_defaults(func=cmd_ping)

    # Serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument(
        "--host", default="127.0.0.1", help="Bind address (default 127.0.0.1)"
    )
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default 8000)")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    configure_logging(level=settings.log_level, stream=sys.stderr)
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except BundleError as exc:
        logger.error("%s", exc.message)
    except SQLAlchemyError as exc:
        logger.error("Database error: %s", exc)
    return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
