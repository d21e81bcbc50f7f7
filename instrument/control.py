"""
Control

Base class for renderable, name-addressable units. A control's class name maps
to its template files, the template extension selects the engine, and the
control itself is the template's data context.

Example:
    @register_control
    class SelectControl(Control):
        @property
        def element_id(self):
            return self.options.get("id") or self.options.get("name")

    select_control = SelectControl(name="base", selections=["One", "Two"])
    xhtml_output = select_control.to_xhtml()   # renders select_control.xhtml.*
"""

import functools
import inspect
import re
from typing import Any, Callable, Mapping, Optional, Set

from instrument.context import DEFAULT_CONTEXT, ControlContext
from instrument.exceptions import UnsupportedOperationError
from instrument.logger import log_render_result
from instrument.resolver import engine_tag, find_template, list_formats

FORMAT_PREFIX = "to_"
_MISSING = object()


def has_static_attribute(obj: Any, name: str) -> bool:
    """Check for a real attribute without running properties or __getattr__."""
    return inspect.getattr_static(obj, name, _MISSING) is not _MISSING


class Control:
    """
    A renderable unit whose templates are found by name.

    Unknown attributes are resolved dynamically:
    - to_<format>: a callable rendering the control as <format>
    - a registered control name: that control class, so
      control.select_control(name="base") builds a SelectControl
    - an attribute of options["delegate"]: forwarded to the delegate
    Anything else raises UnsupportedOperationError.
    """

    context: ControlContext = DEFAULT_CONTEXT

    def __init__(self, options: Optional[Mapping[str, Any]] = None, block: Callable = None, **extra):
        """
        Create a control. Subclasses should not override this.

        Args:
            options: Options used by the control; stored as given
            block: Optional callable used by the control
            **extra: Additional options, merged over options into a new dict
        """
        if options is None:
            options = {}
        if extra:
            options = {**options, **extra}

        self._options = options
        self._block = block

    @property
    def options(self) -> Mapping[str, Any]:
        """The options the control was created with."""
        return self._options

    @property
    def block(self) -> Optional[Callable]:
        """The callable supplied when the control was created."""
        return self._block

    @classmethod
    def control_name(cls) -> Optional[str]:
        """
        Get the control's name, used to find its templates.

        By default this is the class name in snake_case (SelectControl ->
        select_control). The base class has no name. Subclasses may override.
        """
        if cls is Control:
            return None

        name = cls.__qualname__.rsplit(".", 1)[-1]
        name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
        name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
        return name.replace("-", "_").lower()

    @classmethod
    def lookup(cls, control_name: str) -> Optional[type]:
        """Find a registered control class by name, or None."""
        return cls.context.lookup(control_name)

    @classmethod
    def formats(cls) -> Set[str]:
        """Get the formats this control has templates for."""
        return list_formats(cls.context.search_path, cls.control_name())

    def render(self, format: str) -> Any:
        """
        Render the control in a specific format.

        Args:
            format: Format name for the output (e.g., 'xhtml')

        Returns:
            Whatever the engine returns (a string for the bundled engines)

        Raises:
            ResourceNotFoundError: If the template is missing
            UnknownEngineError: If the template's extension has no engine
            Exception: Anything the engine raises, re-raised unchanged (same type,
                same str(e)) with "Error occurred while rendering '<name>.<format>.<tag>'"
                appended to e.__notes__
        """
        context = self.context
        control_name = self.control_name()

        path = find_template(context.search_path, control_name, format)
        tag = engine_tag(path)
        engine = context.engines.resolve(tag)
        raw_content = path.read_text(encoding="utf-8")

        template_label = f"{control_name}.{format}.{tag}"
        try:
            output = engine(raw_content, {"context": self, "filename": str(path)})
        except Exception as e:
            log_render_result(template_label, error=e)
            e.add_note(f"Error occurred while rendering '{template_label}'")
            raise

        log_render_result(template_label, output=output)
        return output

    def _resolve_operation(self, name: str) -> Any:
        if name.startswith(FORMAT_PREFIX):
            return functools.partial(self.render, name[len(FORMAT_PREFIX) :])

        control_class = self.lookup(name)
        if control_class is not None:
            return control_class

        delegate = self._options.get("delegate")
        if delegate is not None and hasattr(delegate, name):
            return getattr(delegate, name)

        raise UnsupportedOperationError(name, type(self).__name__)

    def __getattr__(self, name: str) -> Any:
        # Private and dunder lookups (copy, pickle, jinja's __html__) never dispatch
        if name.startswith("_"):
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        return self._resolve_operation(name)

    def invoke(self, name: str, *args, **kwargs) -> Any:
        """
        Call an operation by name, including dynamically resolved ones.

        Example:
            control.invoke("to_xhtml")
            control.invoke("select_control", name="base")
        """
        return getattr(self, name)(*args, **kwargs)

    def responds_to(self, name: str) -> bool:
        """
        Check whether the control can handle an operation, without calling it.

        to_<format> is only supported when a template exists for the format.
        """
        if has_static_attribute(self, name):
            return True
        if name.startswith("_"):
            return False

        if name.startswith(FORMAT_PREFIX):
            return name[len(FORMAT_PREFIX) :] in self.formats()

        if self.lookup(name) is not None:
            return True

        delegate = self._options.get("delegate")
        return delegate is not None and hasattr(delegate, name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} options={self._options!r}>"


def register_control(control_class: type) -> type:
    """Register a control class on Control.context (class decorator)."""
    return Control.context.register(control_class)
