"""Tests for configuration loading."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from monocle.config import ConfigManager, MonocleConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MONOCLE_DEFAULT_LANGUAGE", "MONOCLE_LOG_LEVEL", "MONOCLE_INDENTATION", "MONOCLE_MAX_FRAGMENTS"):
        monkeypatch.delenv(name, raising=False)


class TestMonocleConfig:
    def test_defaults(self) -> None:
        config = MonocleConfig()
        assert config.default_language == "plaintext"
        assert config.log_level == "WARNING"
        assert config.indentation is None
        assert config.max_fragments == 50

    def test_language_for_path(self) -> None:
        config = MonocleConfig()
        assert config.language_id_for_path(Path("a/b/style.CSS")) == "css"
        assert config.language_id_for_path(Path("data.json")) == "json"
        assert config.language_id_for_path(Path("notes.md")) == "plaintext"


class TestConfigManager:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = ConfigManager(tmp_path).load_config()
        assert config.default_language == "plaintext"

    def test_file_values(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text(
            yaml.safe_dump({
                "default_language": "json",
                "log_level": "debug",
                "indentation": "  ",
                "extension_languages": {".jsonc": "json"},
            })
        )
        config = ConfigManager(tmp_path).load_config()
        assert config.default_language == "json"
        assert config.log_level == "DEBUG"
        assert config.indentation == "  "
        assert config.language_id_for_path(Path("x.jsonc")) == "json"
        assert config.language_id_for_path(Path("x.css")) == "css"

    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "config.yaml").write_text("default_language: json\nmax_fragments: 5\n")
        monkeypatch.setenv("MONOCLE_DEFAULT_LANGUAGE", "css")
        monkeypatch.setenv("MONOCLE_MAX_FRAGMENTS", "7")
        config = ConfigManager(tmp_path).load_config()
        assert config.default_language == "css"
        assert config.max_fragments == 7

    def test_invalid_environment_number_is_ignored(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MONOCLE_MAX_FRAGMENTS", "many")
        assert ConfigManager(tmp_path).load_config().max_fragments == 50

    def test_invalid_file_number_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("default_language: json\nmax_fragments: lots\n")
        config = ConfigManager(tmp_path).load_config()
        assert config.max_fragments == 50
        assert config.default_language == "json"

    def test_unreadable_file_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("default_language: [unclosed\n")
        assert ConfigManager(tmp_path).load_config().default_language == "plaintext"

    def test_non_mapping_file_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("- just\n- a list\n")
        assert ConfigManager(tmp_path).load_config().default_language == "plaintext"

    def test_config_is_cached(self, tmp_path: Path) -> None:
        manager = ConfigManager(tmp_path)
        assert manager.load_config() is manager.load_config()

    def test_save_and_reload(self, tmp_path: Path) -> None:
        config_dir = tmp_path / "nested"
        manager = ConfigManager(config_dir)
        manager.save_config(MonocleConfig(default_language="math", max_fragments=3))
        reloaded = ConfigManager(config_dir).load_config()
        assert reloaded.default_language == "math"
        assert reloaded.max_fragments == 3

    def test_create_default_config(self, tmp_path: Path) -> None:
        manager = ConfigManager(tmp_path)
        manager.create_default_config()
        data = yaml.safe_load((tmp_path / "config.yaml").read_text())
        assert data["default_language"] == "plaintext"

    def test_config_info(self, tmp_path: Path) -> None:
        info = ConfigManager(tmp_path).get_config_info()
        assert info["config_exists"] is False
        assert info["config_file"] == str(tmp_path / "config.yaml")
        assert ".json" in info["extensions"]
