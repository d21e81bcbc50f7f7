"""
Instrument - templated controls

Maps a control's class name to template files on a search path, picks the
template engine from the file extension and renders the template with the
control as its context.

Layout:
- control: Control base class, name derivation and dynamic dispatch
- control_builder: Mixin for creating controls by name
- context: ControlContext (search path, engines, registered controls)
- resolver: Template lookup with path-containment checks
- engines: Engine registry and the Jinja2 / dominate / lxml adapters
"""

from instrument.context import DEFAULT_CONTEXT, ControlContext, VariantRegistry
from instrument.control import Control, register_control
from instrument.control_builder import ControlBuilder
from instrument.engines import EngineRegistry, default_engine_registry
from instrument.exceptions import (
    InstrumentError,
    ResourceNotFoundError,
    TemplateRenderError,
    UnknownEngineError,
    UnsupportedOperationError,
)

__version__ = "0.1.0"

__all__ = [
    # Controls
    "Control",
    "ControlBuilder",
    "register_control",
    # Registries
    "ControlContext",
    "DEFAULT_CONTEXT",
    "EngineRegistry",
    "VariantRegistry",
    "default_engine_registry",
    # Errors
    "InstrumentError",
    "ResourceNotFoundError",
    "TemplateRenderError",
    "UnknownEngineError",
    "UnsupportedOperationError",
]
