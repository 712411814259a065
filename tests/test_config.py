"""
Tests for configuration loading — devstrap.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from devstrap.core.config.loader import ConfigError, Settings, load_settings


@pytest.fixture
def valid_config(tmp_path: Path) -> Path:
    path = tmp_path / "devstrap.yml"
    path.write_text(textwrap.dedent("""\
        git:
          name: Ada Lovelace
          email: ada@example.com
        extra_packages:
          - jq
          - tmux
    """))
    return path


class TestLoadSettings:
    def test_no_path_gives_defaults(self):
        settings = load_settings(None)
        assert settings == Settings()
        assert settings.git.name == ""
        assert settings.extra_packages == []

    def test_valid(self, valid_config: Path):
        settings = load_settings(valid_config)
        assert settings.git.name == "Ada Lovelace"
        assert settings.git.email == "ada@example.com"
        assert settings.extra_packages == ["jq", "tmux"]

    def test_partial(self, tmp_path: Path):
        path = tmp_path / "devstrap.yml"
        path.write_text("git:\n  email: ada@example.com\n")
        settings = load_settings(path)
        assert settings.git.name == ""
        assert settings.git.email == "ada@example.com"

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "devstrap.yml"
        path.write_text("")
        assert load_settings(path) == Settings()

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "devstrap.yml"
        path.write_text("git: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "devstrap.yml"
        path.write_text("- jq\n- tmux\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_settings(path)

    def test_wrong_types(self, tmp_path: Path):
        path = tmp_path / "devstrap.yml"
        path.write_text("extra_packages: 42\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(path)
