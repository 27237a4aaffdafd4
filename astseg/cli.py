"""astseg CLI — the main entry point for the AST segmentation pipeline."""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from astseg import __version__
from astseg.config import ConfigError, resolve_config
from astseg.emit.json_writer import SerializationError
from astseg.frontend.clang_parser import ParseError
from astseg.frontend.wire import WireFormatError

console = Console()

DEFAULT_SOURCE = "test.c"


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=None, help="Pipeline config YAML file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool):
    """astseg — turn a C file's clang AST into segmented IR.

    Parses the source with libclang, saves the AST as protobuf, builds a
    control-flow annotated IR, prunes block wrappers and splits the result
    into per-declaration segments with resolved dependencies.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        ctx.obj = resolve_config(config_path)
    except (ConfigError, OSError) as e:
        _fail(f"Failed to load config: {e}")


def _fail(message: str):
    console.print(f"[red]Error:[/] {escape(message)}")
    raise SystemExit(1)


def _label(node) -> str:
    return f"[cyan]{escape(node.kind)}[/] {escape(node.name)}".rstrip()


def _ast_tree(root) -> Tree:
    tree = Tree(_label(root))
    stack = [(root, tree)]
    while stack:
        node, branch = stack.pop()
        for child in node.children:
            stack.append((child, branch.add(_label(child))))
    return tree


# ── Parse ────────────────────────────────────────────────────────────


@main.command()
@click.argument("source", default=DEFAULT_SOURCE)
@click.option("--show", is_flag=True, help="Print the parsed AST")
@click.pass_obj
def parse(config, source: str, show: bool):
    """Parse SOURCE and save its AST in protobuf wire format."""
    from astseg.frontend.clang_parser import parse_source
    from astseg.frontend.wire import write_ast

    console.print(f"\n[bold blue]astseg[/] — Parsing: {source}\n")

    try:
        ast = parse_source(source, config.clang_args)
        config.output.directory.mkdir(parents=True, exist_ok=True)
        path = write_ast(ast, config.output.ast_path)
    except (ParseError, WireFormatError, OSError) as e:
        _fail(str(e))

    if show:
        console.print(_ast_tree(ast))

    console.print(f"[green]AST saved to[/] {path} ({ast.size} nodes)")


# ── IR ───────────────────────────────────────────────────────────────


@main.command()
@click.argument("source", default=DEFAULT_SOURCE)
@click.option("--optimize/--no-optimize", default=True, help="Prune block wrappers")
@click.pass_obj
def ir(config, source: str, optimize: bool):
    """Build the IR tree for SOURCE and save it as JSON."""
    from astseg.pipeline import Stage, process_file

    console.print(f"\n[bold blue]astseg[/] — Building IR: {source}\n")

    stage = Stage.OPTIMIZED if optimize else Stage.IR
    try:
        result = process_file(source, config, stage)
    except (ParseError, WireFormatError, SerializationError, OSError) as e:
        _fail(str(e))

    for path in result.written:
        console.print(f"  [green]v[/] {path}")


# ── Segment ──────────────────────────────────────────────────────────


@main.command(name="segment")
@click.argument("source", default=DEFAULT_SOURCE)
@click.pass_obj
def segment_cmd(config, source: str):
    """Split SOURCE into per-declaration IR segments with resolved dependencies."""
    from astseg.pipeline import Stage, process_file

    console.print(f"\n[bold blue]astseg[/] — Segmenting: {source}\n")

    try:
        result = process_file(source, config, Stage.SEGMENTS)
    except (ParseError, WireFormatError, SerializationError, OSError) as e:
        _fail(str(e))

    if not result.segments:
        console.print("[yellow]No declarations found.[/]")
        return

    table = Table(title=f"Segments ({len(result.segments)} found)")
    table.add_column("#", style="dim", width=4)
    table.add_column("Kind", style="cyan")
    table.add_column("Name")
    table.add_column("Deps", justify="right", style="green")
    table.add_column("Branches", justify="right")

    for i, seg in enumerate(result.segments):
        branches = sum(1 for n in seg.walk() if n.is_branch)
        table.add_row(str(i), seg.kind, seg.name, str(len(seg.dependencies)), str(branches))

    console.print(table)
    console.print(f"\n[green]Segments written to:[/] {config.output.directory}")


# ── Decode ───────────────────────────────────────────────────────────


@main.command()
@click.argument("wire_file", type=click.Path(exists=True, dir_okay=False))
def decode(wire_file: str):
    """Decode a protobuf AST file and print it."""
    from astseg.frontend.wire import read_ast

    try:
        ast = read_ast(wire_file)
    except WireFormatError as e:
        _fail(str(e))

    if ast is None:
        console.print("[yellow]Wire file has no root node.[/]")
        return

    console.print(_ast_tree(ast))


if __name__ == "__main__":
    main()
