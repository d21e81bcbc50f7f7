"""Custom exceptions for control lookup and template rendering."""

from pathlib import Path
from typing import Iterable, List, Optional


class InstrumentError(Exception):
    """Base class for all errors raised by instrument."""

    pass


class UnknownEngineError(InstrumentError, ValueError):
    """
    Exception raised when a template engine tag has no registered handler.

    Attributes:
        tag: The engine tag that was requested
        valid_tags: Sorted list of the tags that are registered
    """

    def __init__(self, tag: str, valid_tags: Iterable[str] = ()):
        self.tag = tag
        self.valid_tags = sorted(valid_tags)

        parts = [f"Unrecognized template type: {tag!r}"]
        parts.append("Valid types: [" + ", ".join(repr(t) for t in self.valid_tags) + "]")

        super().__init__("\n".join(parts))


class ResourceNotFoundError(InstrumentError, FileNotFoundError):
    """
    Exception raised when no template file exists for a control and format.

    Attributes:
        control_name: Name of the control being rendered (e.g., 'select_control')
        format: Requested output format (e.g., 'xhtml')
        search_path: Directories that were scanned
    """

    def __init__(
        self,
        control_name: Optional[str],
        format: str,
        search_path: Optional[List[Path]] = None,
    ):
        self.control_name = control_name
        self.format = format
        self.search_path = list(search_path or [])

        parts = [f"Template not found: '{control_name}.{format}.*'"]

        if self.search_path:
            parts.append("Searched: " + ", ".join(str(p) for p in self.search_path))

        super().__init__("\n".join(parts))


class UnsupportedOperationError(InstrumentError, AttributeError):
    """
    Exception raised when an operation cannot be resolved by dynamic dispatch.

    Subclasses AttributeError so that getattr() defaults and hasattr() keep
    working on controls.

    Attributes:
        operation: Name of the operation that was requested
        owner: Class name of the object the operation was requested on
    """

    def __init__(self, operation: str, owner: str):
        self.operation = operation
        self.owner = owner
        super().__init__(f"undefined operation '{operation}' for {owner}")


class TemplateRenderError(InstrumentError):
    """
    Exception raised when a builder template finishes without producing output.

    Attributes:
        message: Error description
        filename: Path to the template file
    """

    def __init__(self, message: str, filename: Optional[str] = None):
        self.message = message
        self.filename = filename

        parts = [message]

        if filename:
            parts.append(f"Template: {filename}")

        super().__init__("\n".join(parts))
