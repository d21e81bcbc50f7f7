"""
Shared utilities for instrument.

Common functionality used outside the core:
- Logger sink setup
"""

from instrument.utils.logger import setup_logger

__all__ = ["setup_logger"]
