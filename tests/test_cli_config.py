"""Tests for layered CLI configuration files."""

from __future__ import annotations

from pathlib import Path

import pytest

from idempiere_cli.core.cli_config import (
    CONFIG_ENV_VAR,
    KEY_IDEMPIERE_VERSION,
    KEY_VENDOR,
    ConfigError,
    config_layers,
    find_project_config,
    global_config_path,
    load_config,
    set_global_value,
)
from idempiere_cli.core.platform_version import LATEST_MAJOR


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadConfig:
    """Later layers override earlier ones key by key."""

    def test_built_in_defaults(self, tmp_path: Path, isolated_home: Path) -> None:
        config = load_config(start=tmp_path / "work", home=isolated_home)
        assert config.vendor == ""
        assert config.idempiere_version == LATEST_MAJOR
        assert config.sources == []

    def test_global_file(self, tmp_path: Path, isolated_home: Path) -> None:
        _write(isolated_home / ".idempiere-cli.yaml", "defaults:\n  vendor: Global Inc\n  idempiereVersion: 12\n")
        config = load_config(start=tmp_path / "work", home=isolated_home)
        assert config.vendor == "Global Inc"
        assert config.idempiere_version == 12

    def test_project_file_overrides_global(self, tmp_path: Path, isolated_home: Path) -> None:
        _write(isolated_home / ".idempiere-cli.yaml", "defaults:\n  vendor: Global Inc\n  idempiereVersion: 12\n")
        project = tmp_path / "work" / "project"
        _write(project / ".idempiere-cli.yml", "defaults:\n  vendor: Project Ltd\n")

        config = load_config(start=project / "nested", home=isolated_home)

        assert config.vendor == "Project Ltd"
        assert config.idempiere_version == 12
        assert len(config.sources) == 2

    def test_env_and_explicit_files(
        self,
        tmp_path: Path,
        isolated_home: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        env_file = _write(tmp_path / "env.yaml", "defaults:\n  vendor: From Env\n  idempiereVersion: 12\n")
        explicit = _write(tmp_path / "explicit.yaml", "defaults:\n  vendor: From Flag\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_file))

        assert load_config(start=tmp_path / "work", home=isolated_home).vendor == "From Env"
        config = load_config(start=tmp_path / "work", explicit=explicit, home=isolated_home)
        assert config.vendor == "From Flag"
        assert config.idempiere_version == 12

    def test_malformed_file_is_skipped(
        self,
        tmp_path: Path,
        isolated_home: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _write(isolated_home / ".idempiere-cli.yaml", "defaults: [unclosed\n")
        config = load_config(start=tmp_path / "work", home=isolated_home)
        assert config.vendor == ""
        assert "Ignoring malformed config file" in capsys.readouterr().out

    def test_unsupported_version_is_skipped(
        self,
        tmp_path: Path,
        isolated_home: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _write(isolated_home / ".idempiere-cli.yaml", "defaults:\n  vendor: Global Inc\n  idempiereVersion: 9\n")
        config = load_config(start=tmp_path / "work", home=isolated_home)
        assert config.vendor == "Global Inc"
        assert config.idempiere_version == LATEST_MAJOR
        assert "Ignoring idempiereVersion" in capsys.readouterr().out

    def test_missing_explicit_file_warns(
        self,
        tmp_path: Path,
        isolated_home: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        load_config(start=tmp_path / "work", explicit=tmp_path / "absent.yaml", home=isolated_home)
        assert "Config file not found" in capsys.readouterr().out

    def test_get_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="Unknown config key"):
            load_config().get("defaults.colour")


class TestLayers:
    """Layer discovery."""

    def test_global_file_is_not_a_project_file(self, isolated_home: Path) -> None:
        _write(isolated_home / ".idempiere-cli.yaml", "defaults: {}\n")
        assert find_project_config(isolated_home / "projects", home=isolated_home) is None

    def test_layers_are_deduplicated(self, tmp_path: Path, isolated_home: Path) -> None:
        global_file = _write(isolated_home / ".idempiere-cli.yaml", "defaults: {}\n")
        layers = config_layers(start=tmp_path / "work", explicit=global_file, home=isolated_home)
        assert layers == [global_config_path(isolated_home)]


class TestSetGlobalValue:
    """``config set`` keeps the rest of the file intact."""

    def test_creates_global_file(self, isolated_home: Path) -> None:
        path = set_global_value(KEY_VENDOR, "ACME Corp", home=isolated_home)
        assert path == isolated_home / ".idempiere-cli.yaml"
        assert load_config(home=isolated_home).vendor == "ACME Corp"

    def test_preserves_comments(self, isolated_home: Path) -> None:
        path = _write(
            isolated_home / ".idempiere-cli.yaml",
            "# team defaults\ndefaults:\n  vendor: Old Name  # legal entity\n",
        )
        set_global_value(KEY_IDEMPIERE_VERSION, "12", home=isolated_home)

        content = path.read_text(encoding="utf-8")
        assert "# team defaults" in content
        assert "# legal entity" in content
        config = load_config(home=isolated_home)
        assert config.vendor == "Old Name"
        assert config.idempiere_version == 12

    def test_unknown_key(self, isolated_home: Path) -> None:
        with pytest.raises(ConfigError, match="Unknown config key"):
            set_global_value("defaults.colour", "blue", home=isolated_home)

    @pytest.mark.parametrize("value", ["9", "latest"])
    def test_invalid_version(self, isolated_home: Path, value: str) -> None:
        with pytest.raises(ConfigError):
            set_global_value(KEY_IDEMPIERE_VERSION, value, home=isolated_home)
        assert not (isolated_home / ".idempiere-cli.yaml").exists()
