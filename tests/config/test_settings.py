"""Tests for PayrailsSettings — flags, env vars, and the TOML source."""

from pathlib import Path

import click
import pytest

from payrails.config.settings import PayrailsSettings
from payrails.domain.types import RtgsSystem


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = PayrailsSettings.from_cli(start=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.sync is True
        assert settings.ach.company_name == "PAYRAILS"
        assert settings.rails.rtgs_system is RtgsSystem.FEDWIRE
        assert settings.cutoffs.enforce is False

    def test_frozen(self, tmp_path: Path) -> None:
        settings = PayrailsSettings.from_cli(start=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_sparse_override(self, tmp_path: Path) -> None:
        (tmp_path / "payrails.toml").write_text(
            '[ach]\ncompany_name = "ACME"\n\n[selector]\nbase_score = 40.0\n'
        )
        settings = PayrailsSettings.from_cli(start=tmp_path)
        assert settings.ach.company_name == "ACME"
        assert settings.ach.company_id == "1234567890"
        assert settings.selector.base_score == 40.0
        assert settings.selector.cost_step == 3.0

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "conf" / "rails.toml"
        custom.parent.mkdir()
        custom.write_text('[rails]\nrtgs_system = "target2"\n')
        settings = PayrailsSettings.from_cli(config_path=str(custom))
        assert settings.config_path == custom
        assert settings.rails.rtgs_system is RtgsSystem.TARGET2

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            PayrailsSettings.from_cli(config_path=str(tmp_path / "nope.toml"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "payrails.toml").write_text("[ach\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            PayrailsSettings.from_cli(start=tmp_path)

    def test_pyproject_tool_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.payrails.cutoffs]\nenforce = true\n")
        settings = PayrailsSettings.from_cli(start=tmp_path)
        assert settings.cutoffs.enforce is True


class TestPriority:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "payrails.toml").write_text('[ach]\ncompany_name = "FROM TOML"\n')
        monkeypatch.setenv("PAYRAILS_ACH__COMPANY_NAME", "FROM ENV")
        settings = PayrailsSettings.from_cli(start=tmp_path)
        assert settings.ach.company_name == "FROM ENV"

    def test_cli_flags_beat_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAYRAILS_QUIET", "false")
        settings = PayrailsSettings.from_cli(start=tmp_path, quiet=True, json_output=True)
        assert settings.quiet is True
        assert settings.json_output is True


class TestToConfig:
    def test_sections_carried(self, tmp_path: Path) -> None:
        (tmp_path / "payrails.toml").write_text("[plugins]\ndisabled = [\"audit\"]\n")
        config = PayrailsSettings.from_cli(start=tmp_path).to_config()
        assert config.plugins.disabled == ["audit"]
        assert config.rails.ach is True
