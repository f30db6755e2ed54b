from __future__ import annotations

import logging
import re
import sys
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from aci_zones import __version__
from aci_zones.cli import app
from aci_zones.engine.errors import ApplyError, ExternalAdapterError
from aci_zones.resources.zone import Zone, ZoneType

if TYPE_CHECKING:
    from pathlib import Path

runner = CliRunner()

_YAML = """\
provider:
  host: https://apic.example.com
  username: admin
fabrics: [F1]
zones:
  - {name: T1, type: Default, fabric: F1}
  - {name: Z1, type: ZoneOfZones, fabric: F1, parent: T1}
"""


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def _zone(name: str, zone_type: ZoneType = ZoneType.DEFAULT) -> Zone:
    return Zone(
        resource_uri=f"/ODIM/v1/Fabrics/F1/Zones/{name.lower()}",
        id=name.lower(),
        name=name,
        zone_type=zone_type,
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "aci-zones.yaml"
    path.write_text(_YAML)
    return path


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"aci-zones {__version__}" in result.output

    def test_short_version_flag(self) -> None:
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestValidate:
    def test_valid_config(self, config_file: Path) -> None:
        result = runner.invoke(app, ["validate", "-c", str(config_file), "--no-color"])
        assert result.exit_code == 0
        assert "Configuration is valid (2 zones)." in result.output

    def test_single_zone(self, tmp_path: Path) -> None:
        path = tmp_path / "one.yaml"
        path.write_text(
            "provider: {}\nfabrics: [F1]\nzones:\n"
            "  - {name: T1, type: Default, fabric: F1}\n"
        )

        result = runner.invoke(app, ["validate", "-c", str(path), "--no-color"])

        assert result.exit_code == 0
        assert "(1 zone)." in result.output

    def test_hierarchy_error(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(
            "provider: {}\nfabrics: [F1]\nzones:\n"
            "  - {name: Z1, type: ZoneOfZones, fabric: F1}\n"
        )

        result = runner.invoke(app, ["validate", "-c", str(path), "--no-color"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output
        assert "requires a Default parent" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["validate", "-c", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "Configuration error" in result.output


class TestApply:
    @patch("aci_zones.config.apply")
    def test_auto_approve(self, mock_apply: MagicMock, config_file: Path) -> None:
        mock_apply.return_value = [_zone("T1"), _zone("Z1", ZoneType.ZONE_OF_ZONES)]

        result = runner.invoke(
            app, ["apply", "-c", str(config_file), "--auto-approve", "--no-color"]
        )

        assert result.exit_code == 0
        output = _strip_ansi(result.output)
        assert "Zones to create:" in output
        assert "+ T1 (Default, fabric F1: tenant T1)" in output
        assert "Apply complete! 2 zones created." in output
        mock_apply.assert_called_once()

    @patch("aci_zones.config.apply")
    def test_progress_lines(self, mock_apply: MagicMock, config_file: Path) -> None:
        def _fake_apply(cfg: object, *, progress: object) -> list[Zone]:
            for spec in cfg.zones:  # type: ignore[attr-defined]
                progress(spec, "start")  # type: ignore[operator]
                progress(spec, "done")  # type: ignore[operator]
            return [_zone("T1"), _zone("Z1", ZoneType.ZONE_OF_ZONES)]

        mock_apply.side_effect = _fake_apply

        result = runner.invoke(
            app, ["apply", "-c", str(config_file), "--auto-approve", "--no-color"]
        )

        assert result.exit_code == 0
        assert "T1: Creation complete" in result.output
        assert "Z1: Creation complete" in result.output

    @patch("aci_zones.config.apply")
    def test_user_decline_aborts(self, mock_apply: MagicMock, config_file: Path) -> None:
        result = runner.invoke(app, ["apply", "-c", str(config_file)], input="n\n")

        assert result.exit_code == 1
        assert "Apply canceled." in result.output
        mock_apply.assert_not_called()

    @patch("aci_zones.config.apply")
    def test_user_confirms(self, mock_apply: MagicMock, config_file: Path) -> None:
        mock_apply.return_value = [_zone("T1")]

        result = runner.invoke(app, ["apply", "-c", str(config_file), "--no-color"], input="y\n")

        assert result.exit_code == 0
        assert "Apply complete! 1 zone created." in result.output

    def test_no_zones(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("provider: {}\n")

        result = runner.invoke(app, ["apply", "-c", str(path)])

        assert result.exit_code == 0
        assert "No zones declared." in result.output

    @patch("aci_zones.config.apply")
    def test_apply_error_shows_partial(self, mock_apply: MagicMock, config_file: Path) -> None:
        cause = ExternalAdapterError("VRF quota exceeded", partial=["ApplicationProfile T1/Z1"])
        err = ApplyError(created=[_zone("T1")], zone_name="Z1", message=str(cause))
        err.__cause__ = cause
        mock_apply.side_effect = err

        result = runner.invoke(
            app, ["apply", "-c", str(config_file), "--auto-approve", "--no-color"]
        )

        assert result.exit_code == 1
        assert "Apply failed" in result.output
        assert "Left on the controller: ApplicationProfile T1/Z1." in result.output
        assert "Partial result: 1 created (T1)." in result.output

    def test_missing_credentials(self, config_file: Path) -> None:
        result = runner.invoke(
            app, ["apply", "-c", str(config_file), "--auto-approve", "--no-color"]
        )

        assert result.exit_code == 1
        assert "provider.password is required" in result.output


class TestLogging:
    """Pytest's logging plugin owns the root handler, so basicConfig is mocked."""

    @patch("logging.basicConfig")
    def test_verbose_flag_configures_info(self, mock_bc: MagicMock) -> None:
        from aci_zones.cli import _LOG_FORMAT, _configure_logging

        _configure_logging(1)
        mock_bc.assert_called_once_with(
            level=logging.WARNING,
            format=_LOG_FORMAT,
            stream=sys.stderr,
            force=True,
        )
        assert logging.getLogger("aci_zones").level == logging.INFO

    @patch("logging.basicConfig")
    def test_double_verbose_configures_debug(self, mock_bc: MagicMock) -> None:
        from aci_zones.cli import _configure_logging

        _configure_logging(2)
        mock_bc.assert_called_once()
        assert logging.getLogger("aci_zones").level == logging.DEBUG

    @patch("logging.basicConfig")
    def test_no_verbose_stays_unconfigured(self, mock_bc: MagicMock) -> None:
        from aci_zones.cli import _configure_logging

        _configure_logging(0)
        mock_bc.assert_not_called()

    @patch("logging.basicConfig")
    def test_env_var(self, mock_bc: MagicMock, monkeypatch: pytest.MonkeyPatch) -> None:
        from aci_zones.cli import _configure_logging

        monkeypatch.setenv("ACI_ZONES_LOG", "debug")
        _configure_logging(0)
        mock_bc.assert_called_once()
        assert logging.getLogger("aci_zones").level == logging.DEBUG

    @patch("logging.basicConfig")
    def test_invalid_env_var_defaults_to_info(
        self,
        mock_bc: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        from aci_zones.cli import _configure_logging

        monkeypatch.setenv("ACI_ZONES_LOG", "loud")
        _configure_logging(0)

        assert "Ignoring ACI_ZONES_LOG='loud'" in capsys.readouterr().err
        assert logging.getLogger("aci_zones").level == logging.INFO
