"""
Bash completion script generator.

The script walks COMP_WORDS to find the deepest subcommand typed so far,
then completes that command's flags, the value of the flag right before the
cursor, or its subcommands and positional values.
"""

from typing import List

from ..cli.builder import CommandContext, CommandNode, walk_commands
from ..cli.value_types import ValueKind
from .helpers import command_id, sanitize_identifier, value_kind, value_options


def _dq(text: str) -> str:
    """Escape text for use inside a bash double-quoted string."""
    for ch in ('\\', '"', '$', '`'):
        text = text.replace(ch, f"\\{ch}")
    return text


def _compreply_for(kind: ValueKind, words: List[str]) -> str:
    if kind == ValueKind.CHOICES:
        return f'COMPREPLY=( $(compgen -W "{_dq(" ".join(words))}" -- "${{cur}}") )'
    if kind == ValueKind.DIR:
        return 'COMPREPLY=( $(compgen -d -- "${cur}") )'
    if kind in (ValueKind.FILE, ValueKind.PATH):
        return 'COMPREPLY=( $(compgen -f -- "${cur}") )'
    return 'COMPREPLY=()'


def _generate_dispatch_cases(root: CommandNode) -> List[str]:
    lines = [
        '            ",$1")',
        f'                cmd="{command_id((root.name,))}"',
        '                ;;',
    ]

    for ctx in walk_commands(root):
        for sub in ctx.node.subcommands:
            parent = command_id(ctx.path)
            lines.append(f'            "{parent},{_dq(sub.name)}")')
            lines.append(f'                cmd="{command_id(ctx.path + (sub.name,))}"')
            lines.append('                ;;')

    return lines


def _generate_command_case(ctx: CommandContext) -> List[str]:
    lines = [f'        "{command_id(ctx.path)}")']

    flags = [flag for opt in ctx.options for flag in opt.get_flags()]
    words = [sub.name for sub in ctx.node.subcommands]
    has_path_positional = False
    for pos in ctx.node.positionals:
        kind = value_kind(pos.value_parser)
        if kind == ValueKind.CHOICES:
            words.extend(pos.value_parser.completion_values())
        elif kind.is_path():
            has_path_positional = True

    lines.append(f'            opts="{_dq(" ".join(flags))}"')
    lines.append('            if [[ ${cur} == -* ]] ; then')
    lines.append('                COMPREPLY=( $(compgen -W "${opts}" -- "${cur}") )')
    lines.append('                return 0')
    lines.append('            fi')

    takes_value = value_options(ctx.options)
    if takes_value:
        lines.append('            case "${prev}" in')
        for opt in takes_value:
            pattern = "|".join(f'"{_dq(flag)}"' for flag in opt.get_flags())
            kind = value_kind(opt.value_parser)
            lines.append(f'                {pattern})')
            lines.append(f'                    {_compreply_for(kind, list(opt.value_parser.completion_values()))}')
            lines.append('                    return 0')
            lines.append('                    ;;')
        lines.append('            esac')

    lines.append(f'            COMPREPLY=( $(compgen -W "{_dq(" ".join(words))}" -- "${{cur}}") )')
    if has_path_positional:
        lines.append('            COMPREPLY+=( $(compgen -f -- "${cur}") )')
    lines.append('            return 0')
    lines.append('            ;;')
    return lines


def generate_bash_completion(root: CommandNode, bin_name: str) -> str:
    """Generate the bash completion script for the tree rooted at root."""
    func = f"_{sanitize_identifier(bin_name)}"

    lines = [
        f'{func}() {{',
        '    local i cur prev opts cmd',
        '    COMPREPLY=()',
        '    cur="${COMP_WORDS[COMP_CWORD]}"',
        '    prev="${COMP_WORDS[COMP_CWORD-1]}"',
        '    cmd=""',
        '    opts=""',
        '',
        '    for i in "${COMP_WORDS[@]:0:COMP_CWORD}"',
        '    do',
        '        case "${cmd},${i}" in',
    ]
    lines.extend(_generate_dispatch_cases(root))
    lines.extend([
        '            *)',
        '                ;;',
        '        esac',
        '    done',
        '',
        '    case "${cmd}" in',
    ])

    for ctx in walk_commands(root):
        lines.extend(_generate_command_case(ctx))

    lines.extend([
        '    esac',
        '}',
        '',
        'if [[ "${BASH_VERSINFO[0]}" -eq 4 && "${BASH_VERSINFO[1]}" -ge 4 || "${BASH_VERSINFO[0]}" -gt 4 ]]; then',
        f'    complete -F {func} -o nosort -o bashdefault -o default "{_dq(bin_name)}"',
        'else',
        f'    complete -F {func} -o bashdefault -o default "{_dq(bin_name)}"',
        'fi',
        '',
    ])

    return '\n'.join(lines)
