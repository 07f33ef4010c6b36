"""Tests for settings loading."""

from pathlib import Path

import pytest

from bwchezmoi.config import (
    Settings,
    get_config_dir,
    load_settings,
    write_default_settings,
)
from bwchezmoi.exceptions import ConfigError
from bwchezmoi.naming import CollisionPolicy


def test_defaults_without_file(temp_dir):
    settings = load_settings(temp_dir)
    assert settings == Settings()
    assert settings.output_dir == Path("chezmoi-templates-generated")
    assert settings.collision_policy is CollisionPolicy.SUFFIX


def test_load_from_file(temp_dir):
    (temp_dir / "config.toml").write_text(
        'output_dir = "templates"\n'
        'usage_format = "yaml"\n'
        'collision_policy = "skip"\n'
        "preview_length = 8\n"
    )
    settings = load_settings(temp_dir)
    assert settings.output_dir == Path("templates")
    assert settings.usage_format == "yaml"
    assert settings.collision_policy is CollisionPolicy.SKIP
    assert settings.preview_length == 8


def test_invalid_toml(temp_dir):
    (temp_dir / "config.toml").write_text("output_dir = \n")
    with pytest.raises(ConfigError, match="Failed to read"):
        load_settings(temp_dir)


@pytest.mark.parametrize(
    "content",
    [
        'usage_format = "xml"\n',
        'collision_policy = "merge"\n',
        "preview_length = -1\n",
        'unknown_key = "x"\n',
    ],
)
def test_invalid_values(temp_dir, content):
    (temp_dir / "config.toml").write_text(content)
    with pytest.raises(ConfigError, match="Invalid settings"):
        load_settings(temp_dir)


def test_write_default_settings(temp_dir):
    config_dir = temp_dir / "cfg"
    path = write_default_settings(config_dir)
    assert path == config_dir / "config.toml"
    assert load_settings(config_dir) == Settings()

    # Existing files are left alone
    assert write_default_settings(config_dir) is None


def test_merged_overrides():
    settings = Settings().merged(usage_format="env", output_dir=None)
    assert settings.usage_format == "env"
    assert settings.output_dir == Path("chezmoi-templates-generated")


def test_merged_invalid():
    with pytest.raises(ConfigError):
        Settings().merged(collision_policy="merge")


def test_config_dir_resolution(monkeypatch, temp_dir):
    monkeypatch.setenv("BWCHEZMOI_CONFIG_DIR", str(temp_dir / "env"))
    assert get_config_dir(temp_dir / "explicit") == temp_dir / "explicit"
    assert get_config_dir() == temp_dir / "env"


def test_config_dir_xdg(monkeypatch, temp_dir):
    monkeypatch.delenv("BWCHEZMOI_CONFIG_DIR", raising=False)
    monkeypatch.setattr("bwchezmoi.config.platform.system", lambda: "Linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir))
    assert get_config_dir() == temp_dir / "bwchezmoi"
