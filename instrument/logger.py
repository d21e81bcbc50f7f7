"""
Instrument logger.

Provides the logging interface for control resolution and rendering with an
automatic [instrument] prefix. Modules in this package import from here, not
from utils.logger directly.

Records stay disabled until an application calls setup_instrument_logger.
"""

import sys
from pathlib import Path

from loguru import logger

from instrument.utils.logger import setup_logger

CONTEXT_PREFIX = "[instrument]"

logger.disable("instrument")


def setup_instrument_logger(log_dir: Path, control_name: str = None, context=None) -> Path:
    """
    Setup logger for a rendering session and write a provenance header.

    Args:
        log_dir: Directory for this session
        control_name: Control being rendered
        context: ControlContext whose search path and engines are recorded

    Returns:
        Path to log file
    """
    from instrument import __version__

    log_file = setup_logger(log_dir / "instrument.log", package="instrument")

    _log_info("=" * 80)
    _log_info(f"instrument {__version__} on Python {sys.version.split()[0]}")
    _log_info(f"Command: {' '.join(sys.argv)}")
    _log_info(f"Working directory: {Path.cwd()}")
    if control_name:
        _log_info(f"Control: {control_name}")
    if context is not None:
        _log_info(f"Search path: {', '.join(str(p) for p in context.search_path)}")
        _log_info(f"Engines: {', '.join(sorted(context.engines.tags()))}")
    _log_info("=" * 80)

    return log_file


# Wrapper functions with automatic [instrument] prefix


def _log_info(message: str) -> None:
    """Log info message with [instrument] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [instrument] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [instrument] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering helpers


def log_template_resolved(control_name: str, format: str, path: Path, candidates: int) -> None:
    """Log which template file a (control, format) pair resolved to."""
    if candidates > 1:
        _log_warning(
            f"{candidates} templates match '{control_name}.{format}.*' in {path.parent}; "
            f"using {path.name}"
        )
    _log_debug(f"Resolved {control_name}.{format} -> {path}")


def log_render_result(template_label: str, output=None, error: BaseException = None) -> None:
    """
    Log the outcome of a single engine invocation.

    Args:
        template_label: '<name>.<format>.<tag>' of the rendered template
        output: Whatever the engine returned, when it succeeded
        error: Exception raised by the engine, when it failed
    """
    if error is not None:
        _log_debug(f"Rendering {template_label} raised {type(error).__name__}: {error}")
    elif isinstance(output, str):
        _log_debug(f"Rendered {template_label} ({len(output)} chars)")
    else:
        _log_debug(f"Rendered {template_label} (returned {type(output).__name__})")
