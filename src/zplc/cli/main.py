"""CLI entry point for zplc.

Invoked as::

    zplc [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m zplc.cli.main

Commands
--------
compile     Compile a design file to ZPL
preview     Render a design through the Labelary API
fields      List the built-in dynamic fields
presets     List the label size presets
version     Show version information
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

if TYPE_CHECKING:
    from zplc.config import CompilerConfig
    from zplc.model.nodes import LabelDesign

console = Console()
err_console = Console(stderr=True)


def _load_design_or_exit(path: str, config: "CompilerConfig") -> "LabelDesign":
    """Load a design file, printing errors and exiting on failure."""
    from zplc.model import DesignError, GeometryError, load_design

    try:
        return load_design(path, default_page=config.default_page())
    except (DesignError, GeometryError) as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)


def _parse_bind(values: tuple[str, ...]) -> dict[str, str]:
    """Turn ``key=value`` options into a dict."""
    bindings: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--bind")
        bindings[key] = value
    return bindings


def _read_bindings(path: str | None) -> list[dict[str, Any]] | None:
    """Read a bindings file holding one mapping or a list of mappings."""
    if path is None:
        return None
    try:
        text = Path(path).read_text(encoding="utf-8")
        data = json.loads(text) if path.endswith(".json") else yaml.safe_load(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        err_console.print(f"[red]Error:[/red] Cannot read bindings {path}: {exc}")
        sys.exit(1)
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list) and all(isinstance(item, dict) for item in data):
        return data
    err_console.print(
        f"[red]Error:[/red] {path} must hold a mapping or a list of mappings"
    )
    sys.exit(1)


def _binding_sets(bind: tuple[str, ...], bindings_file: str | None) -> list[dict[str, Any]]:
    """Merge ``--bind`` values over every set from ``--bindings``."""
    overrides = _parse_bind(bind)
    sets = _read_bindings(bindings_file) or [{}]
    return [{**item, **overrides} for item in sets]


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="zplc")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file overriding the packaged defaults",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Compile vector label designs into ZPL for thermal label printers."""
    from zplc.config import ConfigError, load_config

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    try:
        ctx.obj = load_config(config_path)
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from zplc import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]zplc[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# compile command
# ---------------------------------------------------------------------------


@cli.command(name="compile")
@click.argument("file", type=click.Path(exists=False))
@click.option("--bind", "-b", multiple=True, help="Field value as KEY=VALUE (repeatable)")
@click.option(
    "--bindings",
    "bindings_file",
    default=None,
    help="YAML/JSON file with one mapping, or a list of mappings for a batch",
)
@click.option("--copies", type=click.IntRange(min=1), default=1, help="Print quantity per label")
@click.option(
    "--catalog/--no-catalog",
    default=False,
    help="Format bound values with the built-in field catalog",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
@click.pass_obj
def compile_command(
    config: "CompilerConfig",
    file: str,
    bind: tuple[str, ...],
    bindings_file: str | None,
    copies: int,
    catalog: bool,
    output: str | None,
) -> None:
    """Compile a design file to ZPL.

    FILE is a YAML or JSON design, or a saved Fabric.js canvas.

    Examples:

    \b
        zplc compile label.yaml --bind ct_number=CT00000001234
        zplc compile label.yaml --bindings batch.yaml -o labels.zpl
    """
    from zplc.compiler.zpl_target import ZplTarget
    from zplc.fields import default_catalog

    design = _load_design_or_exit(file, config)
    sets = _binding_sets(bind, bindings_file)

    target = ZplTarget.from_config(
        config,
        catalog=default_catalog() if catalog else None,
        copies=copies,
    )
    zpl = target.compile_batch(design, sets)

    if output:
        Path(output).write_text(zpl + "\n", encoding="utf-8")
        err_console.print(
            f"[green]Written:[/green] {output} "
            f"[dim]({len(sets)} label(s), {len(design.elements)} element(s))[/dim]"
        )
    else:
        click.echo(zpl)


# ---------------------------------------------------------------------------
# preview command
# ---------------------------------------------------------------------------


@cli.command(name="preview")
@click.argument("file", type=click.Path(exists=False))
@click.option("--bind", "-b", multiple=True, help="Field value as KEY=VALUE (repeatable)")
@click.option("--bindings", "bindings_file", default=None, help="YAML/JSON bindings file")
@click.option("--output", "-o", required=True, help="Where to write the rendered image")
@click.option("--pdf", is_flag=True, default=False, help="Request a PDF instead of a PNG")
@click.pass_obj
def preview_command(
    config: "CompilerConfig",
    file: str,
    bind: tuple[str, ...],
    bindings_file: str | None,
    output: str,
    pdf: bool,
) -> None:
    """Render FILE through the Labelary API and save the result.

    Only the first binding set is rendered.
    """
    from zplc.compiler.zpl_target import ZplTarget
    from zplc.preview import LabelaryClient, PreviewError

    design = _load_design_or_exit(file, config)
    bindings = _binding_sets(bind, bindings_file)[0]
    zpl = ZplTarget.from_config(config).compile(design, bindings).text

    accept = "application/pdf" if pdf else "image/png"
    try:
        with LabelaryClient(config.preview_url, timeout=config.preview_timeout_s) as client:
            image = client.render_page(zpl, design.page, accept=accept)
    except PreviewError as exc:
        err_console.print(f"[red]Preview failed:[/red] {exc}")
        sys.exit(1)

    Path(output).write_bytes(image)
    console.print(f"[green]Preview written to[/green] {output}")


# ---------------------------------------------------------------------------
# fields command
# ---------------------------------------------------------------------------


@cli.command(name="fields")
def fields_command() -> None:
    """List the built-in dynamic fields."""
    from zplc.fields import DYNAMIC_FIELDS

    table = Table(title="Dynamic fields")
    table.add_column("Key", style="bold")
    table.add_column("Label")
    table.add_column("Category")
    table.add_column("Format")
    table.add_column("Prefix")
    for spec in DYNAMIC_FIELDS:
        table.add_row(
            spec.key,
            spec.label,
            spec.category.value,
            spec.format or "",
            spec.prefix,
        )
    console.print(table)


# ---------------------------------------------------------------------------
# presets command
# ---------------------------------------------------------------------------


@cli.command(name="presets")
@click.pass_obj
def presets_command(config: "CompilerConfig") -> None:
    """List the label size presets with their size in dots."""
    from zplc.config import LABEL_SIZE_PRESETS

    table = Table(title=f"Label sizes at {config.dpi} dpi")
    table.add_column("Name", style="bold")
    table.add_column("Size")
    table.add_column("Dots")
    for preset in LABEL_SIZE_PRESETS:
        page = preset.page(config.dpi)
        table.add_row(
            preset.name,
            f"{preset.width:g} x {preset.height:g} {preset.unit.value}",
            f"{page.width_dots} x {page.height_dots}",
        )
    console.print(table)


if __name__ == "__main__":
    cli()
