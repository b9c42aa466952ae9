"""Tests for Settings loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from jgrants_finder.config import DEFAULT_API_BASE_URL, DEFAULT_MAX_ATTACHMENT_BYTES, Settings


class TestSettingsLoad:
    """Tests for Settings.load."""

    def test_defaults(self) -> None:
        settings = Settings.load(environ={})
        assert settings.api_base_url == DEFAULT_API_BASE_URL
        assert settings.max_attachment_bytes == 25 * 1024 * 1024
        assert settings.files_dir.is_absolute()
        assert settings.files_dir.name == "jgrants_files"

    def test_env_overrides(self, tmp_path: Path) -> None:
        settings = Settings.load(
            environ={
                "API_BASE_URL": "https://api.example.test",
                "JGRANTS_FILES_DIR": str(tmp_path / "store"),
                "MAX_ATTACHMENT_BYTES": "1024",
                "JGRANTS_LOG_LEVEL": "debug",
            }
        )
        assert settings.api_base_url == "https://api.example.test"
        assert settings.files_dir == (tmp_path / "store").resolve()
        assert settings.max_attachment_bytes == 1024
        assert settings.log_level == "debug"

    @pytest.mark.parametrize("value", ["", "abc", "-5", "0"])
    def test_invalid_max_bytes_uses_default(self, value: str) -> None:
        settings = Settings.load(environ={"MAX_ATTACHMENT_BYTES": value})
        assert settings.max_attachment_bytes == DEFAULT_MAX_ATTACHMENT_BYTES

    def test_yaml_then_env(self, tmp_path: Path) -> None:
        """YAML supplies values; environment wins where both are set."""
        config = tmp_path / "settings.yaml"
        config.write_text(
            f"files_dir: {tmp_path / 'yaml_files'}\nmax_attachment_bytes: 2048\napi_base_url: https://yaml.test\n",
            encoding="utf-8",
        )
        settings = Settings.load(config, environ={"API_BASE_URL": "https://env.test"})
        assert settings.files_dir == (tmp_path / "yaml_files").resolve()
        assert settings.max_attachment_bytes == 2048
        assert settings.api_base_url == "https://env.test"

    def test_empty_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "empty.yaml"
        config.write_text("", encoding="utf-8")
        assert Settings.load(config, environ={}).max_attachment_bytes == DEFAULT_MAX_ATTACHMENT_BYTES

    def test_non_mapping_yaml_rejected(self, tmp_path: Path) -> None:
        config = tmp_path / "list.yaml"
        config.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            Settings.load(config, environ={})

    def test_invalid_yaml_value_rejected(self, tmp_path: Path) -> None:
        config = tmp_path / "bad.yaml"
        config.write_text("max_attachment_bytes: 0\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            Settings.load(config, environ={})
