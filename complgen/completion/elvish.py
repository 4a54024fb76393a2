"""
Elvish completion script generator.
"""

from typing import List

from ..cli.builder import CommandContext, CommandNode, walk_commands
from .helpers import first_line, single_quote, value_options


def _quote(text: str) -> str:
    return single_quote(text, "''")


def _cand(text: str, desc: str) -> str:
    return f"cand {_quote(text)} {_quote(first_line(desc))}"


def _generate_command_entry(ctx: CommandContext) -> List[str]:
    lines = [f"        &{_quote(';'.join(ctx.path))}= {{"]

    for opt in ctx.options:
        for flag in opt.get_flags():
            lines.append(f"            {_cand(flag, opt.help)}")
    for sub in ctx.node.subcommands:
        lines.append(f"            {_cand(sub.name, sub.help)}")
    for pos in ctx.node.positionals:
        for value in pos.value_parser.completion_values():
            lines.append(f"            {_cand(value, pos.help)}")

    lines.append("        }")
    return lines


def _generate_value_entries(ctx: CommandContext) -> List[str]:
    lines = []
    for opt in value_options(ctx.options):
        values = opt.value_parser.completion_values()
        if not values:
            continue
        for flag in opt.get_flags():
            lines.append(f"        &{_quote(';'.join(ctx.path) + '>' + flag)}= {{")
            lines.extend(f"            {_cand(value, opt.help)}" for value in values)
            lines.append("        }")
    return lines


def generate_elvish_completion(root: CommandNode, bin_name: str) -> str:
    """Generate the elvish completion script for the tree rooted at root."""
    lines = [
        'use builtin;',
        'use str;',
        '',
        f'set edit:completion:arg-completer[{_quote(bin_name)}] = {{|@words|',
        '    fn spaces {|n|',
        "        builtin:repeat $n ' ' | str:join ''",
        '    }',
        '    fn cand {|text desc|',
        "        edit:complex-candidate $text &display=$text' '(spaces (- 14 (wcswidth $text)))$desc",
        '    }',
        f'    var command = {_quote(root.name)}',
        "    var previous = ''",
        '    for word $words[1..-1] {',
        "        if (str:has-prefix $word '-') {",
        '            break',
        '        }',
        "        set command = $command';'$word",
        '    }',
        '    if (> (count $words) 2) {',
        '        set previous = $words[-2]',
        '    }',
    ]

    values = [line for ctx in walk_commands(root) for line in _generate_value_entries(ctx)]
    if values:
        lines.append('    var values = [')
        lines.extend(values)
        lines.append('    ]')
    else:
        lines.append('    var values = [&]')

    lines.extend([
        '    var completions = [',
    ])

    for ctx in walk_commands(root):
        lines.extend(_generate_command_entry(ctx))

    lines.extend([
        '    ]',
        "    var key = $command'>'$previous",
        '    if (has-key $values $key) {',
        '        $values[$key]',
        '    } elif (has-key $completions $command) {',
        '        $completions[$command]',
        '    }',
        '}',
        '',
    ])

    return '\n'.join(lines)
