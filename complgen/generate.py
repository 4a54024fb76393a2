"""
Generate the embeddable completion table from a CLI definition file.

read -> parse -> build -> complete -> serialize -> write. Every stage raises
a ComplgenException subclass tagged with its name; nothing is written unless
all earlier stages succeeded.
"""

from pathlib import Path
from typing import Dict, Tuple

from .printer import cons
from .common import OutOfDateError, file_write, load_document
from .state import ARG
from .cli.schema import CliDef
from .cli.builder import CommandNode, build_command
from .completion import Shell, generate_all
from .embed import render_table


def load_definition(filepath: str) -> CliDef:
    return CliDef.from_dict(load_document(filepath))


def build_table(cli: CliDef) -> Tuple[CommandNode, Dict[Shell, bytes]]:
    root = build_command(cli.command)
    return root, generate_all(root)


def render_file(filepath: str) -> Tuple[CommandNode, Dict[Shell, bytes], str]:
    """Run every in-memory stage for the definition at filepath."""
    root, table = build_table(load_definition(filepath))
    return root, table, render_table(table)


def _check_or_write(path: Path, content: str, check_mode: bool, if_different: bool) -> None:
    """Check that path is up to date, or write content to it."""
    if check_mode:
        if not path.exists():
            raise OutOfDateError(f"{path} does not exist")
        try:
            current = path.read_text(encoding="utf-8")
        except (IOError, UnicodeDecodeError) as exc:
            raise OutOfDateError(f"Failed to read {path}: {exc}") from exc
        if current != content:
            raise OutOfDateError(f"{path} is out of date")
        cons.print(f"[green]OK[/green] {path.name} is up to date")
        return

    if file_write(str(path), content, if_different=if_different):
        cons.print(f"[green]Generated[/green] {path}")
    else:
        cons.print(f"[dim]Unchanged[/dim] {path}")


def _print_summary(root: CommandNode, table: Dict[Shell, bytes]) -> None:
    cons.print(f"[bold]Completions for [magenta]{root.name}[/magenta][/bold]")
    cons.indent()
    for shell, buf in table.items():
        cons.print(f"{str(shell).ljust(10)} [cyan]{len(buf)}[/cyan] bytes")
    cons.unindent()


def generate(input_path: str = None, output_path: str = None) -> Dict[Shell, bytes]:
    """Generate (or with --check, verify) the output table from the parsed arguments."""
    input_path  = input_path  if input_path  is not None else ARG("input")
    output_path = output_path if output_path is not None else ARG("output")

    root, table, source = render_file(input_path)

    _print_summary(root, table)
    _check_or_write(Path(output_path), source, ARG("check", False), ARG("if_different", False))

    return table
