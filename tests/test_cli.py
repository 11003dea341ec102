"""
Tests for the bundle administration command line.

Use cases and the superuser engine are patched; the tests check argument
handling, confirmation prompts and exit codes.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from app import cli
from app.application.bundles.dtos import InstallBundleCommand, UninstallBundleCommand
from app.core.config import settings
from app.domain.bundles.entities import InstallResult, UninstallResult
from app.domain.bundles.errors import BundleNotFoundError, SchemaProvisionError


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("app.cli.configure_logging"):
        yield


@pytest.fixture
def engine():
    engine = MagicMock()
    with patch("app.cli.build_superuser_engine", return_value=engine):
        yield engine


@pytest.fixture
def install_use_case(engine):
    with patch("app.cli.InstallBundleUseCase") as use_case_cls:
        use_case_cls.return_value.execute.return_value = InstallResult(
            bundle_name="shop", installed_files=["01.sql"]
        )
        yield use_case_cls.return_value


@pytest.fixture
def uninstall_use_case(engine):
    with patch("app.cli.UninstallBundleUseCase") as use_case_cls:
        use_case_cls.return_value.execute.side_effect = lambda command: UninstallResult(
            bundle_name=command.bundle_name, performed=command.confirmed
        )
        yield use_case_cls.return_value


class TestConfirm:
    """Tests for the confirmation prompt."""

    @pytest.mark.parametrize(
        "answer, expected", [("y", True), ("YES ", True), ("", False), ("n", False)]
    )
    def test_answers(self, answer: str, expected: bool) -> None:
        assert cli.confirm("Continue?", False, ask=lambda _prompt: answer) is expected

    def test_noprompt_never_asks(self) -> None:
        ask = MagicMock()
        assert cli.confirm("Continue?", True, ask=ask) is True
        ask.assert_not_called()

    def test_end_of_input_declines(self) -> None:
        def ask(_prompt: str) -> str:
            raise EOFError

        assert cli.confirm("Continue?", False, ask=ask) is False


class TestParser:
    """Tests for argument parsing."""

    @pytest.mark.parametrize(
        "argv",
        [
            ["uninstall", "shop", "-n"],
            ["install", "shop", "-r", "-n"],
            ["install", "shop", "--noprompt"],
            ["-n", "uninstall", "shop"],
        ],
    )
    def test_noprompt_before_or_after_command(self, argv: list[str]) -> None:
        assert cli.build_parser().parse_args(argv).noprompt is True

    @pytest.mark.parametrize("argv", [["uninstall", "shop"], ["install", "shop", "-r"]])
    def test_prompt_by_default(self, argv: list[str]) -> None:
        assert cli.build_parser().parse_args(argv).noprompt is False

    def test_install_flags(self) -> None:
        args = cli.build_parser().parse_args(["install", "shop", "-r", "-n"])
        assert (args.bundle, args.reinstall, args.demodata) == ("shop", True, False)


class TestInstallCommand:
    """Tests for `bundlebase install`."""

    def test_install(self, install_use_case, engine) -> None:
        assert cli.main(["install", "shop", "--demodata"]) == cli.EXIT_OK
        install_use_case.execute.assert_called_once_with(
            InstallBundleCommand(
                bundle_name="shop", install_demo_data=True, reinstall=False, confirmed=True
            )
        )
        engine.dispose.assert_called_once()

    def test_reinstall_declined(self, install_use_case) -> None:
        with patch("builtins.input", return_value="n"):
            assert cli.main(["install", "shop", "-r"]) == cli.EXIT_OK
        install_use_case.execute.assert_not_called()

    def test_reinstall_without_prompt(self, install_use_case) -> None:
        with patch("builtins.input") as prompt:
            assert cli.main(["-n", "install", "shop", "--reinstall"]) == cli.EXIT_OK
        prompt.assert_not_called()
        command = install_use_case.execute.call_args.args[0]
        assert command.reinstall is True
        assert command.confirmed is True

    @pytest.mark.parametrize(
        "error",
        [
            BundleNotFoundError("shop"),
            SchemaProvisionError("shop", "Installation of '01.sql'", "syntax error", "42601"),
        ],
    )
    def test_failures_exit_nonzero(self, install_use_case, engine, error) -> None:
        install_use_case.execute.side_effect = error
        assert cli.main(["install", "shop"]) == cli.EXIT_FAILURE
        engine.dispose.assert_called_once()


class TestUninstallCommand:
    """Tests for `bundlebase uninstall`."""

    def test_confirmed(self, uninstall_use_case) -> None:
        with patch("builtins.input", return_value="y"):
            assert cli.main(["uninstall", "shop"]) == cli.EXIT_OK
        uninstall_use_case.execute.assert_called_once_with(
            UninstallBundleCommand(bundle_name="shop", confirmed=True)
        )

    def test_noprompt_after_bundle(self, uninstall_use_case) -> None:
        with patch("builtins.input") as prompt:
            assert cli.main(["uninstall", "shop", "-n"]) == cli.EXIT_OK
        prompt.assert_not_called()
        uninstall_use_case.execute.assert_called_once_with(
            UninstallBundleCommand(bundle_name="shop", confirmed=True)
        )

    def test_declined(self, uninstall_use_case) -> None:
        with patch("builtins.input", return_value=""):
            assert cli.main(["uninstall", "shop"]) == cli.EXIT_OK
        command = uninstall_use_case.execute.call_args.args[0]
        assert command.confirmed is False


class TestInstalledCommand:
    """Tests for `bundlebase installed`."""

    def test_lists_registry(self, tmp_path: Path, monkeypatch, capsys) -> None:
        path = tmp_path / "bundles.json"
        path.write_text(json.dumps({"bundles_installed": ["shop", "crm"]}), encoding="utf-8")
        monkeypatch.setattr(settings, "bundle_registry_path", path)

        assert cli.main(["installed"]) == cli.EXIT_OK
        lines = capsys.readouterr().out.splitlines()
        assert "shop" in lines
        assert "crm" in lines

    def test_corrupt_registry(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "bundles.json"
        path.write_text("{", encoding="utf-8")
        monkeypatch.setattr(settings, "bundle_registry_path", path)
        assert cli.main(["installed"]) == cli.EXIT_FAILURE


class TestPingCommand:
    """Tests for `bundlebase ping`."""

    def test_ok(self, engine) -> None:
        assert cli.main(["ping"]) == cli.EXIT_OK
        engine.connect.return_value.__enter__.return_value.execute.assert_called_once()

    def test_unreachable(self, engine) -> None:
        engine.connect.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
        assert cli.main(["ping"]) == cli.EXIT_FAILURE
        engine.dispose.assert_called_once()

    def test_unknown_command(self) -> None:
        with pytest.raises(SystemExit):
            cli.main(["frobnicate"])


class TestServeCommand:
    """Tests for `bundlebase serve`."""

    def test_runs_uvicorn(self) -> None:
        with patch("uvicorn.run") as run:
            assert cli.main(["serve", "--port", "9000"]) == cli.EXIT_OK
        run.assert_called_once_with("app.main:app", host="127.0.0.1", port=9000, reload=False)
