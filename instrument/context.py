"""
Control Context

Owns the state that control lookup and rendering depend on:
- search_path: directories scanned for templates, in priority order
- engines: EngineRegistry mapping template extensions to engines
- variants: VariantRegistry of the control classes addressable by name

Controls use Control.context, which defaults to DEFAULT_CONTEXT. Build a
separate ControlContext to isolate a set of controls (tests, embedded apps).
"""

from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from instrument.config import default_control_path, load_instrument_config
from instrument.engines import EngineRegistry, default_engine_registry
from instrument.logger import _log_debug


class VariantRegistry:
    """Ordered registry of control classes, looked up by control name."""

    def __init__(self):
        self._variants: List[type] = []

    def register(self, variant: type) -> type:
        """
        Register a control class. Registering the same class again is a no-op.

        Returns the class, so this works as a class decorator.
        """
        if not any(existing is variant for existing in self._variants):
            self._variants.append(variant)
            _log_debug(f"Registered control {variant.__name__} as '{variant.control_name()}'")
        return variant

    def lookup(self, name: str) -> Optional[type]:
        """
        Find the first registered class whose control_name() equals name.

        Args:
            name: Control name (e.g., 'select_control')

        Returns:
            The control class, or None
        """
        for variant in self._variants:
            control_name = variant.control_name()
            if control_name is not None and control_name == name:
                return variant
        return None

    def names(self) -> List[str]:
        """Control names of all registered classes, in registration order."""
        return [v.control_name() for v in self._variants if v.control_name() is not None]

    def __iter__(self) -> Iterator[type]:
        return iter(list(self._variants))

    def __len__(self) -> int:
        return len(self._variants)

    def __contains__(self, variant: type) -> bool:
        return any(existing is variant for existing in self._variants)


class ControlContext:
    """Search path, engine registry and variant registry used by controls."""

    def __init__(
        self,
        search_path: Optional[Iterable[Path]] = None,
        engines: Optional[EngineRegistry] = None,
        variants: Optional[VariantRegistry] = None,
    ):
        """
        Args:
            search_path: Template directories. Defaults to default_control_path()
            engines: Engine registry. Defaults to one with the bundled engines
            variants: Variant registry. Defaults to an empty one
        """
        if search_path is None:
            search_path = default_control_path()

        self.search_path: List[Path] = [Path(p) for p in search_path]
        self.engines = engines if engines is not None else default_engine_registry()
        self.variants = variants if variants is not None else VariantRegistry()

    @classmethod
    def from_config(cls, config_path: Optional[Path] = None) -> "ControlContext":
        """
        Build a context from a YAML config file, or from the environment if None.
        """
        if config_path is None:
            return cls()
        config = load_instrument_config(config_path)
        return cls(search_path=config["control_path"])

    def register(self, variant: type) -> type:
        """Register a control class; usable as a class decorator."""
        return self.variants.register(variant)

    def lookup(self, name: str) -> Optional[type]:
        """Find a registered control class by control name."""
        return self.variants.lookup(name)

    def __repr__(self) -> str:
        paths = ", ".join(str(p) for p in self.search_path)
        return (
            f"ControlContext(search_path=[{paths}], engines={sorted(self.engines.tags())}, "
            f"variants={self.variants.names()})"
        )


DEFAULT_CONTEXT = ControlContext()
