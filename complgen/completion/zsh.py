"""
Zsh completion script generator.

Every command of the tree gets its own function driving _arguments. Commands
with subcommands hand the remaining words to the matching child function
through the "->args" state.
"""

from typing import List

from ..cli.builder import CommandContext, CommandNode, OptionNode, PositionalNode, walk_commands
from ..cli.value_types import ValueKind, ValueParser
from .helpers import command_id, first_line, sanitize_identifier, value_kind


def _escape_help(text: str) -> str:
    """Escape help text for a single-quoted _arguments description."""
    text = first_line(text)
    for ch, repl in (('\\', '\\\\'), ("'", "'\\''"), ('[', '\\['), (']', '\\]'),
                     (':', '\\:'), ('$', '\\$'), ('`', '\\`')):
        text = text.replace(ch, repl)
    return text


def _escape_value(text: str) -> str:
    """Escape a literal value for a single-quoted (a b c) action list."""
    for ch, repl in (('\\', '\\\\'), ("'", "'\\''"), ('[', '\\['), (']', '\\]'),
                     (':', '\\:'), ('$', '\\$'), ('`', '\\`'), ('(', '\\('),
                     (')', '\\)'), (' ', '\\ ')):
        text = text.replace(ch, repl)
    return text


def _action_for(parser: ValueParser) -> str:
    kind = value_kind(parser)
    if kind == ValueKind.CHOICES:
        return f'({" ".join(_escape_value(v) for v in parser.completion_values())})'
    if kind == ValueKind.DIR:
        return '_files -/'
    if kind.is_path():
        return '_files'
    return '_default'


def _option_specs(opt: OptionNode) -> List[str]:
    desc = _escape_help(opt.help)
    specs = []
    for flag in opt.get_flags():
        # --long=VALUE or --long VALUE; -sVALUE or -s VALUE
        suffix = "=" if flag.startswith("--") else "+"
        flag = _escape_value(flag)
        if opt.takes_value:
            specs.append(f"'{flag}{suffix}[{desc}]:{_escape_value(opt.name.upper())}:{_action_for(opt.value_parser)}'")
        else:
            specs.append(f"'{flag}[{desc}]'")
    return specs


def _positional_spec(pos: PositionalNode) -> str:
    optional = "" if pos.required else ":"
    desc = _escape_help(pos.help)
    message = f"{_escape_value(pos.name)} -- {desc}" if desc else _escape_value(pos.name)
    return f"'{optional}:{message}:{_action_for(pos.value_parser)}'"


def _generate_command_function(ctx: CommandContext, bin_name: str) -> List[str]:
    func = f"_{command_id(ctx.path)}"

    specs = []
    for opt in ctx.options:
        specs.extend(_option_specs(opt))
    for pos in ctx.node.positionals:
        specs.append(_positional_spec(pos))
    if ctx.node.subcommands:
        specs.append(f"': :{func}_commands'")
        specs.append("'*:: :->args'")

    lines = [
        f'{func}() {{',
        '    local context curcontext="$curcontext" state state_descr line',
        '    typeset -A opt_args',
        '    local ret=1',
        '',
        '    _arguments -s -C : \\',
    ]
    lines.extend(f'        {spec} \\' for spec in specs)
    lines.append('        && ret=0')

    if ctx.node.subcommands:
        lines.extend([
            '',
            '    case $state in',
            '        args)',
            f'            curcontext="${{curcontext%:*:*}}:{sanitize_identifier(bin_name)}-command-$words[1]:"',
            '            case $words[1] in',
        ])
        for sub in ctx.node.subcommands:
            lines.append(f"                ({_escape_value(sub.name)})")
            lines.append(f"                    _{command_id(ctx.path + (sub.name,))} && ret=0")
            lines.append("                    ;;")
        lines.extend([
            '            esac',
            '            ;;',
            '    esac',
        ])

    lines.extend([
        '',
        '    return ret',
        '}',
        '',
    ])

    if ctx.node.subcommands:
        lines.append(f'{func}_commands() {{')
        lines.append('    local commands; commands=(')
        for sub in ctx.node.subcommands:
            entry = _escape_value(sub.name)
            desc = _escape_help(sub.help)
            lines.append(f"        '{entry}:{desc}'" if desc else f"        '{entry}'")
        lines.append('    )')
        lines.append(f"    _describe -t commands '{_escape_help(' '.join(ctx.path))} commands' commands \"$@\"")
        lines.append('}')
        lines.append('')

    return lines


def generate_zsh_completion(root: CommandNode, bin_name: str) -> str:
    """Generate the zsh completion script for the tree rooted at root."""
    func = f"_{command_id((root.name,))}"

    lines = [
        f'#compdef {bin_name}',
        '',
    ]

    for ctx in walk_commands(root):
        lines.extend(_generate_command_function(ctx, bin_name))

    lines.extend([
        f'if [ "$funcstack[1]" = "{func}" ]; then',
        f'    {func} "$@"',
        'else',
        f'    compdef {func} {bin_name}',
        'fi',
        '',
    ])

    return '\n'.join(lines)
