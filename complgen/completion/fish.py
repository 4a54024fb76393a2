"""
Fish completion script generator.
"""

from typing import List

from ..cli.builder import CommandContext, CommandNode, OptionNode, walk_commands
from ..cli.value_types import ValueKind
from .helpers import command_id, first_line, sanitize_identifier, value_kind


def _quote(text: str) -> str:
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _value_args(kind: ValueKind, values) -> List[str]:
    if kind == ValueKind.CHOICES:
        return ["-f", "-a", _quote(" ".join(values))]
    if kind == ValueKind.DIR:
        return ["-f", "-a", "'(__fish_complete_directories)'"]
    if kind.is_path():
        return ["-F"]
    return []


def _option_line(prefix: str, opt: OptionNode) -> str:
    parts = [prefix]
    parts.extend(f"-s {_quote(s)}" for s in opt.short_aliases)
    parts.append(f"-l {_quote(opt.name)}")
    parts.extend(f"-l {_quote(alias)}" for alias in opt.long_aliases)

    desc = first_line(opt.help)
    if desc:
        parts.append(f"-d {_quote(desc)}")

    if opt.takes_value:
        parts.append("-r")
        parts.extend(_value_args(value_kind(opt.value_parser), opt.value_parser.completion_values()))

    return " ".join(parts)


def _generate_command_lines(ctx: CommandContext, bin_name: str, using: str) -> List[str]:
    prefix = f"complete -c {_quote(bin_name)} -n {_quote(f'{using} {command_id(ctx.path)}')}"

    lines = [_option_line(prefix, opt) for opt in ctx.options]

    wants_files = False
    for pos in ctx.node.positionals:
        kind = value_kind(pos.value_parser)
        if kind == ValueKind.CHOICES:
            line = f"{prefix} -f -a {_quote(' '.join(pos.value_parser.completion_values()))}"
            desc = first_line(pos.help)
            if desc:
                line += f" -d {_quote(desc)}"
            lines.append(line)
        elif kind.is_path():
            wants_files = True

    for sub in ctx.node.subcommands:
        line = f"{prefix} -f -a {_quote(sub.name)}"
        desc = first_line(sub.help)
        if desc:
            line += f" -d {_quote(desc)}"
        lines.append(line)

    if not wants_files:
        lines.append(f"{prefix} -f")

    return lines


def generate_fish_completion(root: CommandNode, bin_name: str) -> str:
    """Generate the fish completion script for the tree rooted at root."""
    ident   = sanitize_identifier(bin_name)
    current = f"__fish_{ident}_current_command"
    using   = f"__fish_{ident}_using_command"

    lines = [
        f'function {current}',
        '    set -l tokens (commandline -opc)',
        '    set -e tokens[1]',
        f"    set -l cmd {_quote(command_id((root.name,)))}",
        '    for token in $tokens',
        '        switch "$cmd,$token"',
    ]

    for ctx in walk_commands(root):
        for sub in ctx.node.subcommands:
            lines.append(f"            case {_quote(command_id(ctx.path) + ',' + sub.name)}")
            lines.append(f"                set cmd {_quote(command_id(ctx.path + (sub.name,)))}")

    lines.extend([
        '        end',
        '    end',
        '    echo $cmd',
        'end',
        '',
        f'function {using}',
        f'    test ({current}) = "$argv[1]"',
        'end',
        '',
    ])

    for ctx in walk_commands(root):
        lines.extend(_generate_command_lines(ctx, bin_name, using))

    lines.append('')
    return '\n'.join(lines)
