"""
Instrument configuration.

Search-path defaults come from the environment (.env is loaded on import):

    INSTRUMENT_APP_ROOT       Application root; <root>/app/controls goes first
    INSTRUMENT_CONTROL_PATH   Extra template directories, os.pathsep-separated

A YAML config file can override both:

    app_root: /srv/shop
    control_path:
      - templates/controls
      - .
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

APP_CONTROLS_SUBDIR = Path("app") / "controls"


def app_controls_dir(app_root: Path) -> Path:
    """Template directory contributed by a hosting application."""
    return Path(app_root) / APP_CONTROLS_SUBDIR


def default_control_path(
    app_root: Optional[str] = None, extra_paths: Optional[str] = None
) -> List[Path]:
    """
    Build the default search path.

    Order: application controls directory, INSTRUMENT_CONTROL_PATH entries,
    then the current directory.

    Args:
        app_root: Defaults to INSTRUMENT_APP_ROOT
        extra_paths: Defaults to INSTRUMENT_CONTROL_PATH

    Returns:
        List of directories
    """
    if app_root is None:
        app_root = os.getenv("INSTRUMENT_APP_ROOT")
    if extra_paths is None:
        extra_paths = os.getenv("INSTRUMENT_CONTROL_PATH", "")

    control_path = [Path(".")]
    control_path[:0] = [Path(p) for p in extra_paths.split(os.pathsep) if p]
    if app_root:
        control_path.insert(0, app_controls_dir(app_root))

    return control_path


def load_instrument_config(config_path: Path) -> Dict[str, Any]:
    """
    Load an instrument YAML config.

    Relative control_path entries are resolved against the config file's
    directory. When the file names no control_path, the default search path
    (honoring its app_root) is used.

    Args:
        config_path: Path to the YAML file

    Returns:
        Dict with 'control_path' (list of Path) and 'app_root' (str or None)

    Raises:
        ValueError: If the file is not a mapping or control_path is not a list
    """
    config_path = Path(config_path)
    raw = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{config_path} must contain a mapping, got {type(raw).__name__}")

    app_root = raw.get("app_root")
    control_path = raw.get("control_path")

    if control_path is None:
        control_path = default_control_path(app_root=app_root)
    elif not isinstance(control_path, list):
        raise ValueError(f"'control_path' must be a list in {config_path}")
    else:
        control_path = [config_path.parent / Path(p) for p in control_path]
        if app_root:
            control_path.insert(0, app_controls_dir(app_root))

    return {"control_path": control_path, "app_root": app_root}
