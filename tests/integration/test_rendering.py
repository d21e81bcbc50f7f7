"""
Integration tests rendering SelectControl through every bundled engine.
Templates live in tests/control_templates.
"""

import json

import pytest

from instrument import Control, ResourceNotFoundError, UnknownEngineError
from sample_controls import SelectControl, SuperSelectControl

SELECTIONS = ["First", "Second", "Third", "Home"]


@pytest.fixture
def select_control(control_context):
    return SelectControl(name="base", selections=SELECTIONS)


@pytest.mark.integration
def test_formats(control_context):
    """Test the formats available from the fixture templates."""
    assert SelectControl.formats() == {"atom", "html", "json", "txt", "xhtml", "xml"}
    assert SuperSelectControl.formats() == set()
    assert Control.formats() == set()


@pytest.mark.integration
def test_xhtml_with_jinja(select_control):
    """Test rendering XHTML with the Jinja2 HTML engine."""
    xhtml = select_control.to_xhtml()

    assert '<select id="base" name="base">' in xhtml
    for selection in SELECTIONS:
        assert f'<option value="{selection}">{selection}</option>' in xhtml
    assert xhtml.count("<option") == len(SELECTIONS)


@pytest.mark.integration
def test_html_with_dominate(select_control):
    """Test rendering HTML with the dominate engine."""
    html = select_control.to_html()

    assert "<select" in html
    assert 'id="base"' in html
    assert 'name="base"' in html
    for selection in SELECTIONS:
        assert f'<option value="{selection}"' in html


@pytest.mark.integration
def test_atom_with_xml_builder(select_control):
    """Test rendering Atom with the lxml builder engine."""
    atom = select_control.to_atom()

    assert "<title>Select Control</title>" in atom
    for selection in SELECTIONS:
        assert f"<title>{selection}</title>" in atom


@pytest.mark.integration
def test_json_with_text_template(select_control):
    """Test rendering JSON with the unescaped Jinja2 engine."""
    output = select_control.to_json()

    assert '"id": "base"' in output
    assert '"name": "base"' in output

    data = json.loads(output)
    assert data["selections"] == [{"label": s, "value": s} for s in SELECTIONS]


@pytest.mark.integration
def test_dict_selections(control_context):
    """Test that label/value selections render both parts."""
    control = SelectControl(
        name="base", id="choice", selections=[{"label": "One", "value": "1"}]
    )

    assert '<select id="choice" name="base">' in control.to_xhtml()
    assert '<option value="1">One</option>' in control.render("xhtml")


@pytest.mark.integration
def test_render_missing_format(control_context):
    """Test that a format without a template raises ResourceNotFoundError."""
    with pytest.raises(ResourceNotFoundError):
        SelectControl().to_bogus()


@pytest.mark.integration
def test_render_directory_match(control_context):
    """Test that a directory named like a template raises ResourceNotFoundError."""
    with pytest.raises(ResourceNotFoundError):
        SelectControl().to_directory()


@pytest.mark.integration
def test_render_unknown_engine(control_context):
    """Test that a template with an unregistered extension raises UnknownEngineError."""
    with pytest.raises(UnknownEngineError) as excinfo:
        SelectControl().to_txt()

    assert excinfo.value.tag == "bogus"
    assert "jinja" in excinfo.value.valid_tags


@pytest.mark.integration
def test_engine_error_keeps_its_type(control_context):
    """Test that engine exceptions propagate unchanged in kind with a note."""
    with pytest.raises(ZeroDivisionError) as excinfo:
        SelectControl().to_xml()

    assert "Error occurred while rendering 'select_control.xml.pyxml'" in excinfo.value.__notes__


@pytest.mark.integration
def test_custom_engine(control_context, tmp_path):
    """Test that registered engines receive the source, control and filename."""
    template = tmp_path / "select_control.txt.upper"
    template.write_text("hello", encoding="utf-8")
    control_context.search_path.insert(0, tmp_path)

    seen = {}

    @control_context.engines.engine("upper")
    def render_upper(content, options):
        seen.update(options)
        return content.upper()

    control = SelectControl()
    assert control.to_txt() == "HELLO"
    assert seen["context"] is control
    assert seen["filename"] == str(template)


@pytest.mark.integration
def test_render_reads_file_each_time(control_context, tmp_path):
    """Test that templates are not cached between renders."""
    template = tmp_path / "select_control.txt.tmpl"
    control_context.search_path.insert(0, tmp_path)

    template.write_text("one", encoding="utf-8")
    assert SelectControl().to_txt() == "one"

    template.write_text("two", encoding="utf-8")
    assert SelectControl().to_txt() == "two"


@pytest.mark.integration
def test_nested_controls(control_context, tmp_path):
    """Test that a template can build and render other controls by name."""
    template = tmp_path / "super_select_control.html.jinja"
    template.write_text(
        "<div>{{ control.select_control(name=options.name, selections=['A']).to_xhtml()|safe }}</div>",
        encoding="utf-8",
    )
    control_context.search_path.insert(0, tmp_path)

    html = SuperSelectControl(name="outer").to_html()

    assert html.startswith("<div>")
    assert '<select id="outer" name="outer">' in html


@pytest.mark.integration
def test_custom_engine_returning_non_string(control_context, tmp_path, log_messages):
    """Test that a non-string engine result is returned as is and logged by type."""
    (tmp_path / "select_control.data.dict").write_text("ignored", encoding="utf-8")
    control_context.search_path.insert(0, tmp_path)
    control_context.engines.register(["dict"], lambda content, options: {"id": "base"})
    control_context.engines.register(["none"], lambda content, options: None)

    assert SelectControl().to_data() == {"id": "base"}
    assert any("Rendered select_control.data.dict (returned dict)" in m for m in log_messages)

    (tmp_path / "select_control.data.dict").unlink()
    (tmp_path / "select_control.data.none").write_text("ignored", encoding="utf-8")

    assert SelectControl().to_data() is None
