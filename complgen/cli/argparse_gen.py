"""
Generate argparse parsers from the executable command tree.

This module turns a CommandNode tree into ArgumentParsers so that a
definition can actually be exercised against a command line.
"""

import argparse
from typing import Dict, Tuple

from .builder import CommandNode, OptionNode, PositionalNode, walk_commands


def get_subcommand_dest(path: Tuple[str, ...]) -> str:
    """Return the namespace key holding the subcommand chosen under path."""
    return ".".join(path + ("subcommand",))


def _add_option(parser: argparse.ArgumentParser, opt: OptionNode, inherited: bool = False):
    """Add a single option to parser."""
    kwargs: Dict = {
        "help": opt.help,
        "dest": opt.get_dest(),
    }

    if opt.takes_value:
        kwargs["type"]    = opt.value_parser
        kwargs["metavar"] = opt.name.upper()
    else:
        kwargs["action"] = "store_true"

    if inherited:
        # Keep the value parsed by the ancestor unless repeated here.
        kwargs["default"] = argparse.SUPPRESS
    elif opt.required:
        kwargs["required"] = True

    parser.add_argument(*opt.get_flags(), **kwargs)


def _add_positional(parser: argparse.ArgumentParser, pos: PositionalNode):
    """Add a positional argument to parser."""
    kwargs: Dict = {
        "help": pos.help,
        "metavar": pos.name.upper(),
        "type": pos.value_parser,
    }

    if not pos.required:
        kwargs["nargs"] = "?"

    parser.add_argument(pos.get_dest(), **kwargs)


def generate_parser(
    root: CommandNode
) -> Tuple[argparse.ArgumentParser, Dict[Tuple[str, ...], argparse.ArgumentParser]]:
    """
    Generate a complete argparse parser from a command tree.

    Args:
        root: The root of the executable command tree

    Returns:
        Tuple of (root parser, dict mapping command paths to their parsers)
    """
    parsers: Dict[Tuple[str, ...], argparse.ArgumentParser] = {}
    subparsers = {}

    for ctx in walk_commands(root):
        if len(ctx.path) == 1:
            parser = argparse.ArgumentParser(
                prog=ctx.name,
                description=ctx.node.help,
                add_help=False,
                allow_abbrev=False,
            )
        else:
            parser = subparsers[ctx.path[:-1]].add_parser(
                name=ctx.name,
                help=ctx.node.help,
                description=ctx.node.help,
                add_help=False,
                allow_abbrev=False,
            )

        for pos in ctx.node.positionals:
            _add_positional(parser, pos)

        for opt in ctx.inherited:
            _add_option(parser, opt, inherited=True)

        for opt in ctx.node.options:
            _add_option(parser, opt)

        if ctx.node.subcommands:
            subparsers[ctx.path] = parser.add_subparsers(dest=get_subcommand_dest(ctx.path))

        parsers[ctx.path] = parser

    return parsers[(root.name,)], parsers
