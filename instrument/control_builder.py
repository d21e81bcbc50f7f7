"""
Control Builder

Mixin for abbreviated control creation.

Example:
    class Page(ControlBuilder):
        def body(self):
            return self.select_control(name="base", selections=["One", "Two"]).to_xhtml()
"""

from typing import Optional

from instrument.context import ControlContext
from instrument.control import Control, has_static_attribute
from instrument.exceptions import UnsupportedOperationError


class ControlBuilder:
    """Resolves unknown attributes to registered control classes by name."""

    # None means Control.context, looked up at call time
    control_context: Optional[ControlContext] = None

    def _control_context(self) -> ControlContext:
        if self.control_context is not None:
            return self.control_context
        return Control.context

    def __getattr__(self, name: str) -> type:
        if name.startswith("_"):
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

        control_class = self._control_context().lookup(name)
        if control_class is None:
            raise UnsupportedOperationError(name, type(self).__name__)
        return control_class

    def responds_to(self, name: str) -> bool:
        """Check whether name is a real attribute or a registered control."""
        if has_static_attribute(self, name):
            return True
        return not name.startswith("_") and self._control_context().lookup(name) is not None
