"""Unit tests for search-path configuration."""

import os
from pathlib import Path

import pytest

from instrument import ControlContext
from instrument.config import default_control_path, load_instrument_config


@pytest.mark.unit
def test_default_control_path_is_current_directory(monkeypatch):
    """Test the search path when nothing is configured."""
    monkeypatch.delenv("INSTRUMENT_APP_ROOT", raising=False)
    monkeypatch.delenv("INSTRUMENT_CONTROL_PATH", raising=False)

    assert default_control_path() == [Path(".")]


@pytest.mark.unit
def test_app_root_goes_first(monkeypatch):
    """Test that the application controls directory precedes the defaults."""
    monkeypatch.setenv("INSTRUMENT_APP_ROOT", "/srv/shop")
    monkeypatch.setenv("INSTRUMENT_CONTROL_PATH", os.pathsep.join(["shared", "vendor"]))

    assert default_control_path() == [
        Path("/srv/shop/app/controls"),
        Path("shared"),
        Path("vendor"),
        Path("."),
    ]


@pytest.mark.unit
def test_explicit_arguments_override_environment(monkeypatch):
    """Test that arguments take priority over environment variables."""
    monkeypatch.setenv("INSTRUMENT_APP_ROOT", "/srv/shop")

    assert default_control_path(app_root="", extra_paths="lib") == [Path("lib"), Path(".")]


@pytest.mark.unit
def test_load_config_control_path(tmp_path):
    """Test that relative entries resolve against the config file's directory."""
    config_file = tmp_path / "instrument.yaml"
    config_file.write_text("control_path:\n  - templates\n  - /opt/controls\n", encoding="utf-8")

    config = load_instrument_config(config_file)

    assert config["control_path"] == [tmp_path / "templates", Path("/opt/controls")]
    assert config["app_root"] is None


@pytest.mark.unit
def test_load_config_app_root(tmp_path):
    """Test that app_root prepends its controls directory."""
    config_file = tmp_path / "instrument.yaml"
    config_file.write_text("app_root: /srv/shop\ncontrol_path: [templates]\n", encoding="utf-8")

    config = load_instrument_config(config_file)

    assert config["control_path"] == [Path("/srv/shop/app/controls"), tmp_path / "templates"]


@pytest.mark.unit
def test_load_config_interpolation(tmp_path):
    """Test that OmegaConf interpolations are resolved."""
    config_file = tmp_path / "instrument.yaml"
    config_file.write_text(
        "app_root: /srv/shop\ncontrol_path:\n  - ${app_root}/extra\n", encoding="utf-8"
    )

    config = load_instrument_config(config_file)

    assert Path("/srv/shop/extra") in config["control_path"]


@pytest.mark.unit
def test_load_config_rejects_scalar_path(tmp_path):
    """Test that control_path must be a list."""
    config_file = tmp_path / "instrument.yaml"
    config_file.write_text("control_path: templates\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_instrument_config(config_file)


@pytest.mark.unit
def test_context_from_config(tmp_path):
    """Test building a context from a config file."""
    config_file = tmp_path / "instrument.yaml"
    config_file.write_text("control_path: [templates]\n", encoding="utf-8")

    context = ControlContext.from_config(config_file)

    assert context.search_path == [tmp_path / "templates"]
    assert "jinja" in context.engines
    assert len(context.variants) == 0


@pytest.mark.unit
def test_load_config_rejects_top_level_list(tmp_path):
    """Test that a config file must be a mapping."""
    config_file = tmp_path / "instrument.yaml"
    config_file.write_text("- templates\n- vendor\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must contain a mapping"):
        load_instrument_config(config_file)
