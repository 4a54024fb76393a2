"""
Build the executable command tree from CLI definitions.

build_command() walks a CommandDef recursively and produces CommandNode
objects whose options and positionals carry a resolved ValueParser. The tree
is consumed by the argparse and shell-completion generators and then thrown
away.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from ..common import NamingConflictError
from .schema import ArgumentDef, CommandDef, OptionDef
from .value_types import ValueParser, resolve_value_parser


def to_dest(name: str) -> str:
    """Return the argparse namespace key for an option or argument name."""
    return name.replace("-", "_")


@dataclass
class OptionNode:  # pylint: disable=too-many-instance-attributes
    name: str
    help: str
    value_parser: ValueParser
    takes_value: bool
    short_aliases: List[str] = field(default_factory=list)
    long_aliases: List[str] = field(default_factory=list)
    required: bool = False
    global_: bool = False

    def get_long_flags(self) -> List[str]:
        return [f"--{self.name}"] + [f"--{alias}" for alias in self.long_aliases]

    def get_short_flags(self) -> List[str]:
        return [f"-{alias}" for alias in self.short_aliases]

    def get_flags(self) -> List[str]:
        """Return every flag string that selects this option, long forms first."""
        return self.get_long_flags() + self.get_short_flags()

    def get_dest(self) -> str:
        return to_dest(self.name)


@dataclass
class PositionalNode:
    name: str
    help: str
    value_parser: ValueParser
    required: bool = False
    global_: bool = False

    def get_dest(self) -> str:
        return to_dest(self.name)


@dataclass
class CommandNode:
    name: str
    help: str = ""
    options: List[OptionNode] = field(default_factory=list)
    positionals: List[PositionalNode] = field(default_factory=list)
    subcommands: List["CommandNode"] = field(default_factory=list)

    def get_subcommand(self, name: str) -> "CommandNode":
        for sub in self.subcommands:
            if sub.name == name:
                return sub
        return None


@dataclass
class CommandContext:
    """A command as seen from the root: its word path and every option it accepts."""
    path: Tuple[str, ...]
    node: CommandNode
    options: List[OptionNode]
    inherited: List[OptionNode]

    @property
    def name(self) -> str:
        return self.path[-1]


def _build_option(opt: OptionDef) -> OptionNode:
    return OptionNode(
        name=opt.name,
        help=opt.description,
        value_parser=resolve_value_parser(opt.possible_values, opt.value_type),
        takes_value=bool(opt.possible_values) or opt.value_type is not None,
        short_aliases=list(opt.short_names),
        long_aliases=list(opt.long_names),
        required=opt.required,
        global_=opt.global_,
    )


def _build_positional(arg: ArgumentDef) -> PositionalNode:
    return PositionalNode(
        name=arg.name,
        help=arg.description,
        value_parser=resolve_value_parser(arg.possible_values, arg.value_type),
        required=arg.required,
        global_=arg.global_,
    )


def _check_conflicts(cmd: CommandDef, path: Tuple[str, ...], options: List[OptionNode]):
    where = " ".join(path)

    seen: Dict[str, Tuple[str, str]] = {}
    for kind, name in [("option", o.name) for o in cmd.options] + \
                      [("argument", a.name) for a in cmd.arguments]:
        dest = to_dest(name)
        if dest in seen:
            other_kind, other_name = seen[dest]
            raise NamingConflictError(
                f"'{where}': {kind} '{name}' collides with {other_kind} '{other_name}'")
        seen[dest] = (kind, name)

    flags: Dict[str, str] = {}
    for opt in options:
        for flag in opt.get_flags():
            if flag in flags and flags[flag] != opt.name:
                raise NamingConflictError(
                    f"'{where}': flag '{flag}' is claimed by options '{flags[flag]}' and '{opt.name}'")
            flags[flag] = opt.name

    names = set()
    for sub in cmd.subcommands:
        if sub.name in names:
            raise NamingConflictError(f"'{where}': subcommand '{sub.name}' is defined twice")
        names.add(sub.name)


def build_command(cmd: CommandDef, parent_path: Tuple[str, ...] = ()) -> CommandNode:
    """
    Convert a CommandDef into a CommandNode, recursing into subcommands.

    Declaration order of options, positionals and subcommands is preserved.
    No --help or --version flag is added; anything of the sort has to be
    declared explicitly.

    Raises NamingConflictError when two options, two arguments, or an option
    and an argument map to the same argparse namespace key (names equal once
    "-" is read as "_"), when two sibling subcommands share a name, or when
    two options claim the same flag.
    """
    path = parent_path + (cmd.name,)

    options = [_build_option(o) for o in cmd.options]
    _check_conflicts(cmd, path, options)

    return CommandNode(
        name=cmd.name,
        help=cmd.description,
        options=options,
        positionals=[_build_positional(a) for a in cmd.arguments],
        subcommands=[build_command(sub, path) for sub in cmd.subcommands],
    )


def walk_commands(root: CommandNode) -> Iterator[CommandContext]:
    """
    Yield every command of the tree depth first, in declaration order.

    Global options declared on an ancestor are inherited by all descendants
    unless a descendant declares an option or argument with the same
    namespace key, or an option with an overlapping flag.
    """
    def _walk(node: CommandNode, path: Tuple[str, ...], globals_: List[OptionNode]):
        own       = {o.get_dest() for o in node.options} | {p.get_dest() for p in node.positionals}
        own_flags = {f for o in node.options for f in o.get_flags()}
        inherited = [
            o for o in globals_
            if o.get_dest() not in own and own_flags.isdisjoint(o.get_flags())
        ]

        yield CommandContext(path=path, node=node, options=inherited + node.options, inherited=inherited)

        passed_down = inherited + [o for o in node.options if o.global_]
        for sub in node.subcommands:
            yield from _walk(sub, path + (sub.name,), passed_down)

    yield from _walk(root, (root.name,), [])
