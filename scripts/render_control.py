#!/usr/bin/env python3
"""
Command-line interface for rendering controls.

Controls are registered by importing the module that defines them (--module).

Commands:
    controls - List registered controls and their formats
    engines  - List registered template engine tags
    render   - Render a control in a format
"""

import importlib
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from omegaconf import OmegaConf

from instrument import Control, ControlContext, InstrumentError
from instrument.logger import setup_instrument_logger

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    add_completion=False,
    help="Render templated controls",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load_context(config: Optional[Path], module: Optional[str]) -> ControlContext:
    """
    Install a context built from config on Control, then import the control module.

    A module imported earlier in this process is reloaded, so its
    @register_control decorators run again against the new context.
    """
    try:
        context = ControlContext.from_config(config)
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    Control.context = context

    if module:
        try:
            if module in sys.modules:
                importlib.reload(sys.modules[module])
            else:
                importlib.import_module(module)
        except ImportError as e:
            typer.secho(f"Error: cannot import {module}: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

    return context


CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="YAML config with control_path / app_root", exists=True
)
MODULE_OPTION = typer.Option(
    None, "--module", "-m", help="Python module that registers the controls"
)


@app.command("controls")
def controls_command(
    module: Optional[str] = MODULE_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
):
    """
    List registered controls with the formats they can be rendered as.

    Example:\n

        $ render_control.py controls -m myapp.controls
    """
    context = _load_context(config, module)

    if not len(context.variants):
        typer.secho("No controls registered", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\nControls ({len(context.variants)}):", fg=typer.colors.BLUE, bold=True)
    for control_class in context.variants:
        name = control_class.control_name()
        if name is None:
            continue
        formats = ", ".join(sorted(control_class.formats())) or "-"
        typer.echo(f"  • {name}: {formats}")


@app.command("engines")
def engines_command(config: Optional[Path] = CONFIG_OPTION):
    """List registered template engine tags."""
    context = _load_context(config, None)

    typer.secho("\nEngines:", fg=typer.colors.BLUE, bold=True)
    for tag in sorted(context.engines.tags()):
        typer.echo(f"  • {tag}")


@app.command("render")
def render_command(
    control_name: str = typer.Argument(..., help="Control name (e.g., select_control)"),
    format: str = typer.Argument(..., help="Output format (e.g., xhtml)"),
    module: Optional[str] = MODULE_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    options_file: Optional[Path] = typer.Option(
        None, "--options", "-o", help="YAML file with the control's options", exists=True
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", help="Write output to this file instead of stdout"
    ),
    log: bool = typer.Option(False, "--log", help="Write a session log under LOGS_PATH"),
):
    """
    Render a control in the given format.

    Examples:\n

        $ render_control.py render select_control xhtml -m myapp.controls -o select.yaml

        $ render_control.py render select_control json -m myapp.controls --output out.json
    """
    context = _load_context(config, module)

    if log:
        log_file = setup_instrument_logger(LOGS_PATH / f"render_{control_name}", control_name, context)
        typer.echo(f"Log file: {log_file}", err=True)

    control_class = context.lookup(control_name)
    if control_class is None:
        known = ", ".join(context.variants.names()) or "none"
        typer.secho(
            f"Error: unknown control '{control_name}' (registered: {known})",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    options = {}
    if options_file:
        options = OmegaConf.to_container(OmegaConf.load(options_file), resolve=True)

    try:
        rendered = control_class(options).render(format)
    except Exception as e:
        # Engine errors keep their own type; the template name is in the notes
        message = str(e) if isinstance(e, InstrumentError) else f"{type(e).__name__}: {e}"
        typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
        for note in getattr(e, "__notes__", []):
            typer.secho(f"  {note}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if output:
        output.write_text(rendered, encoding="utf-8")
        typer.secho(f"✓ Wrote {output}", fg=typer.colors.GREEN, err=True)
    else:
        typer.echo(rendered, nl=False)


if __name__ == "__main__":
    app()
