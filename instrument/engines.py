"""
Template Engines

Registry mapping engine tags (template file extensions) to rendering functions,
plus the default adapters for Jinja2, dominate and lxml.

An engine is any callable taking the raw template source and an options dict
and returning the rendered output:

    engine(content: str, options: {"context": control, "filename": str}) -> str

Default tags:
- jinja: Jinja2 with HTML autoescaping
- j2, tmpl: Jinja2 without autoescaping (JSON, plain text, ...)
- dom: Python source building an HTML tree with dominate
- pyxml: Python source building an XML tree with lxml's ElementMaker
"""

from typing import Any, Callable, Dict, Iterable, Set, Union

import dominate.tags
import dominate.util
from jinja2 import Environment, FunctionLoader, StrictUndefined
from lxml import etree
from lxml.builder import ElementMaker

from instrument.exceptions import TemplateRenderError, UnknownEngineError

Engine = Callable[[str, Dict[str, Any]], str]


def normalize_tag(tag: Any) -> str:
    """Normalize an engine tag: 'Jinja', '.jinja' and ' jinja ' all map to 'jinja'."""
    return str(tag).strip().lower().lstrip(".")


class EngineRegistry:
    """
    Registry of template engines keyed by normalized tag.

    Registering a tag twice replaces the earlier engine. A fresh registry is
    empty; use default_engine_registry() for one with the bundled adapters.
    """

    def __init__(self):
        self._engines: Dict[str, Engine] = {}

    def register(self, tags: Union[str, Iterable[str]], engine: Engine) -> None:
        """
        Associate every tag in tags with engine.

        Args:
            tags: A single tag or an iterable of tags (e.g., {"j2", "tmpl"})
            engine: Callable (content, options) -> str
        """
        if isinstance(tags, str):
            tags = [tags]

        for tag in tags:
            self._engines[normalize_tag(tag)] = engine

    def engine(self, *tags: str) -> Callable[[Engine], Engine]:
        """
        Decorator form of register().

        Example:
            @registry.engine("md", "markdown")
            def render_markdown(content, options):
                ...
        """

        def decorator(func: Engine) -> Engine:
            self.register(tags, func)
            return func

        return decorator

    def tags(self) -> Set[str]:
        """Return the set of registered tags."""
        return set(self._engines)

    def resolve(self, tag: Any) -> Engine:
        """
        Get the engine registered for a tag.

        Raises:
            UnknownEngineError: If the tag is not registered
        """
        key = normalize_tag(tag)
        if key not in self._engines:
            raise UnknownEngineError(key, self.tags())
        return self._engines[key]

    def __contains__(self, tag: Any) -> bool:
        return normalize_tag(tag) in self._engines

    def __len__(self) -> int:
        return len(self._engines)


# Default engines


def _jinja_environment(content: str, filename: str, autoescape: bool) -> Environment:
    """Build a one-shot Jinja2 environment whose only template is content."""
    return Environment(
        loader=FunctionLoader(lambda name: (content, filename, lambda: True)),
        autoescape=autoescape,
        # Catches silent failures
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def _render_jinja(content: str, options: Dict[str, Any], autoescape: bool) -> str:
    control = options["context"]
    filename = str(options["filename"])
    template = _jinja_environment(content, filename, autoescape).get_template(filename)
    return template.render(control=control, options=control.options)


def render_jinja_html(content: str, options: Dict[str, Any]) -> str:
    """Render an autoescaped Jinja2 HTML template with the control as `control`."""
    return _render_jinja(content, options, autoescape=True)


def render_jinja_text(content: str, options: Dict[str, Any]) -> str:
    """Render a Jinja2 template without escaping (JSON, plain text)."""
    return _render_jinja(content, options, autoescape=False)


def render_dominate(content: str, options: Dict[str, Any]) -> str:
    """
    Execute a dominate template.

    The template is Python source. Tags created at the top level are collected
    in a container, so the template needs no explicit root element:

        with tags.select(id=control.element_id):
            for option in control.selections:
                tags.option(option.label, value=option.value)
    """
    control = options["context"]
    code = compile(content, str(options["filename"]), "exec")
    namespace = {
        "control": control,
        "options": control.options,
        "tags": dominate.tags,
        "util": dominate.util,
    }

    root = dominate.util.container()
    with root:
        exec(code, namespace)
    return root.render()


def render_xml_builder(content: str, options: Dict[str, Any]) -> str:
    """
    Execute an lxml builder template.

    The template is Python source that must bind `document` to an element,
    usually built with the `E` element factory:

        document = E.feed(E.title("Select Control"))
    """
    control = options["context"]
    filename = str(options["filename"])
    code = compile(content, filename, "exec")
    namespace = {
        "control": control,
        "options": control.options,
        "E": ElementMaker(),
        "etree": etree,
    }

    exec(code, namespace)

    document = namespace.get("document")
    if document is None:
        raise TemplateRenderError("XML builder template did not assign 'document'", filename)
    return etree.tostring(document, pretty_print=True, encoding="unicode")


def register_default_engines(registry: EngineRegistry) -> EngineRegistry:
    """Register the bundled engines on registry and return it."""
    registry.register("jinja", render_jinja_html)
    registry.register(("j2", "tmpl"), render_jinja_text)
    registry.register("dom", render_dominate)
    registry.register("pyxml", render_xml_builder)
    return registry


def default_engine_registry() -> EngineRegistry:
    """Create a registry with the bundled engines."""
    return register_default_engines(EngineRegistry())
