"""
PowerShell completion script generator.

The command path is rebuilt from the bare words typed so far and joined
with ';'. Each known path maps to the list of CompletionResult entries it
offers.
"""

from typing import List

from ..cli.builder import CommandContext, CommandNode, walk_commands
from .helpers import first_line, single_quote, value_options


def _quote(text: str) -> str:
    return single_quote(text, "''")


def _result(text: str, kind: str, tooltip: str) -> str:
    # CompletionResult rejects an empty tooltip.
    tooltip = first_line(tooltip) or text
    return (f"[CompletionResult]::new({_quote(text)}, {_quote(text)}, "
            f"[CompletionResultType]::{kind}, {_quote(tooltip)})")


def _path_key(ctx: CommandContext) -> str:
    return ";".join(ctx.path)


def _generate_command_case(ctx: CommandContext) -> List[str]:
    lines = [f"        {_quote(_path_key(ctx))} {{"]

    for opt in ctx.options:
        for flag in opt.get_flags():
            lines.append(f"            {_result(flag, 'ParameterName', opt.help)}")

    for sub in ctx.node.subcommands:
        lines.append(f"            {_result(sub.name, 'ParameterValue', sub.help)}")

    for pos in ctx.node.positionals:
        for value in pos.value_parser.completion_values():
            lines.append(f"            {_result(value, 'ParameterValue', pos.help)}")

    lines.append("            break")
    lines.append("        }")
    return lines


def _generate_value_case(ctx: CommandContext) -> List[str]:
    lines = []
    for opt in value_options(ctx.options):
        values = opt.value_parser.completion_values()
        if not values:
            continue
        for flag in opt.get_flags():
            lines.append(f"        {_quote(_path_key(ctx) + '>' + flag)} {{")
            for value in values:
                lines.append(f"            {_result(value, 'ParameterValue', opt.help)}")
            lines.append("            break")
            lines.append("        }")
    return lines


def generate_powershell_completion(root: CommandNode, bin_name: str) -> str:
    """Generate the PowerShell completion script for the tree rooted at root."""
    lines = [
        'using namespace System.Management.Automation',
        'using namespace System.Management.Automation.Language',
        '',
        f'Register-ArgumentCompleter -Native -CommandName {_quote(bin_name)} -ScriptBlock {{',
        '    param($wordToComplete, $commandAst, $cursorPosition)',
        '',
        '    $commandElements = $commandAst.CommandElements',
        '    $previous = $null',
        '    $command = @(',
        f'        {_quote(root.name)}',
        '        for ($i = 1; $i -lt $commandElements.Count; $i++) {',
        '            $element = $commandElements[$i]',
        '            if ($element -isnot [StringConstantExpressionAst] -or',
        '                $element.StringConstantType -ne [StringConstantType]::BareWord -or',
        '                $element.Value.StartsWith(\'-\') -or',
        '                $element.Value -eq $wordToComplete) {',
        '                break',
        '            }',
        '            $element.Value',
        '        }) -join \';\'',
        '',
        '    for ($i = 1; $i -lt $commandElements.Count; $i++) {',
        '        if ($commandElements[$i].Extent.EndOffset -lt $cursorPosition -and',
        '            $commandElements[$i].Extent.Text -ne $wordToComplete) {',
        '            $previous = $commandElements[$i].Extent.Text',
        '        }',
        '    }',
        '',
        '    $completions = @(switch ("$command>$previous") {',
    ]

    for ctx in walk_commands(root):
        lines.extend(_generate_value_case(ctx))

    lines.extend([
        '        default { }',
        '    })',
        '',
        '    if ($completions.Count -eq 0) {',
        '        $completions = @(switch ($command) {',
    ])

    for ctx in walk_commands(root):
        lines.extend('    ' + line for line in _generate_command_case(ctx))

    lines.extend([
        '            default { }',
        '        })',
        '    }',
        '',
        '    $completions.Where{ $_.CompletionText -like "$wordToComplete*" } |',
        '        Sort-Object -Property ListItemText',
        '}',
        '',
    ])

    return '\n'.join(lines)
