"""
CLI Definition Model and Command-Tree Builder.

This package reads the declarative CLI definition, resolves value-parsing
strategies and rebuilds the executable command tree that the completion
generators consume.

Usage:
    from complgen.cli import CliDef, build_command
    from complgen.cli.argparse_gen import generate_parser
"""

from .schema import (
    CliDef,
    CommandDef,
    OptionDef,
    ArgumentDef,
)
from .value_types import (
    ValueKind,
    ValueParser,
    resolve_value_parser,
)
from .builder import (
    CommandNode,
    OptionNode,
    PositionalNode,
    CommandContext,
    build_command,
    walk_commands,
)

__all__ = [
    "CliDef",
    "CommandDef",
    "OptionDef",
    "ArgumentDef",
    "ValueKind",
    "ValueParser",
    "resolve_value_parser",
    "CommandNode",
    "OptionNode",
    "PositionalNode",
    "CommandContext",
    "build_command",
    "walk_commands",
]
