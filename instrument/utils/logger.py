"""
Generic logger setup utilities.

Configures loguru sinks for a logging session. The instrument-specific
wrapper (prefix, provenance header) lives in instrument/logger.py.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

# Default level colors for console output
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
}


def setup_logger(
    log_file: Path,
    package: str,
    console_level: str = "INFO",
    level_colors: Optional[dict] = None,
) -> Path:
    """
    Replace loguru's sinks with a DEBUG file sink and a stderr console sink.

    Libraries disable their own records on import; this enables `package`
    again, so call it from scripts rather than from library code.

    Args:
        log_file: File that receives every record
        package: Package whose records are enabled (e.g., "instrument")
        console_level: Minimum level shown on stderr
        level_colors: Override default level colors (e.g., {"INFO": "<cyan>"})

    Returns:
        Path to log file
    """
    log_file.parent.mkdir(exist_ok=True, parents=True)

    logger.remove()
    logger.enable(package)

    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    # stdout is reserved for rendered output
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    return log_file
