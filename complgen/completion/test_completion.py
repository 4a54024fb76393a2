"""
Tests for the per-shell completion generators.
"""

import unittest
from unittest.mock import patch

from ..common import CompletionGenerationError
from ..cli.schema import CliDef, CommandDef
from ..cli.builder import build_command
from . import SHELL_GENERATORS, Shell, generate, generate_all
from .helpers import command_id, sanitize_identifier


def _tool_tree():
    return build_command(CliDef.from_dict({
        "command": {
            "name": "tool",
            "description": "Example tool",
            "options": [
                {"name": "verbose", "short_names": ["v"], "description": "Verbose output", "global": True},
            ],
            "arguments": [
                {"name": "file", "description": "Input file", "value_type": "path", "required": True},
            ],
            "subcommands": [
                {
                    "name": "list",
                    "description": "List things",
                    "options": [
                        {"name": "format", "description": "Output format", "possible_values": ["json", "text"]},
                        {"name": "out-dir", "description": "Where to write", "value_type": "dir"},
                    ],
                },
            ],
        }
    }).command)


class TestShell(unittest.TestCase):
    """Tests for the Shell enumeration."""

    def test_fixed_order(self):
        self.assertEqual([str(s) for s in Shell], ["bash", "zsh", "fish", "powershell", "elvish"])

    def test_every_shell_has_generator(self):
        self.assertEqual(list(SHELL_GENERATORS.keys()), list(Shell))


class TestGenerateAll(unittest.TestCase):
    """Tests for the multi-shell fan-out."""

    def test_one_entry_per_shell(self):
        table = generate_all(_tool_tree())
        self.assertEqual(list(table.keys()), list(Shell))
        for shell, buf in table.items():
            self.assertIsInstance(buf, bytes)
            self.assertGreater(len(buf), 0, str(shell))

    def test_empty_tree(self):
        """A bare root command still yields a script for every shell."""
        table = generate_all(build_command(CommandDef(name="tool")))
        self.assertEqual(list(table.keys()), list(Shell))
        for buf in table.values():
            self.assertIn(b"tool", buf)

    def test_deterministic(self):
        self.assertEqual(generate_all(_tool_tree()), generate_all(_tool_tree()))

    def test_same_program_name_everywhere(self):
        table = generate_all(_tool_tree())
        for buf in table.values():
            self.assertIn(b"tool", buf)

    def test_generator_failure_is_fatal(self):
        """An exception from one shell aborts with CompletionGenerationError."""
        def _boom(root, bin_name):
            raise RuntimeError("boom")

        with patch.dict(SHELL_GENERATORS, {Shell.FISH: _boom}):
            with self.assertRaises(CompletionGenerationError) as ctx:
                generate_all(_tool_tree())
        self.assertIn("fish", str(ctx.exception))

    def test_generate_encodes_utf8(self):
        root = build_command(CommandDef(name="tool", description="Ünïcödé"))
        root.subcommands.append(build_command(CommandDef(name="sub", description="Ünïcödé")))
        self.assertIn("Ünïcödé".encode("utf-8"), generate(Shell.ZSH, root, "tool"))


class TestCommandIds(unittest.TestCase):
    """Command paths must map to distinct shell identifiers."""

    def test_punctuation_variants_stay_distinct(self):
        names = ["a-b", "a_b", "a.b", "a__b", "ab"]
        self.assertEqual(len({sanitize_identifier(n) for n in names}), len(names))
        self.assertEqual(sanitize_identifier("list"), "list")

    def test_separator_not_confused_with_name(self):
        self.assertNotEqual(command_id(("tool", "a__b")), command_id(("tool", "a", "b")))
        self.assertNotEqual(command_id(("tool", "a_", "b")), command_id(("tool", "a", "_b")))

    def test_identifier_is_shell_safe(self):
        self.assertRegex(command_id(("my-tool", "sub.cmd", "x_y")), r"^[A-Za-z0-9_]+$")


class TestSimilarSiblings(unittest.TestCase):
    """Subcommands a-b and a_b each keep their own completions."""

    @classmethod
    def setUpClass(cls):
        root = build_command(CommandDef.from_dict({"name": "tool", "subcommands": [
            {"name": "a-b", "options": [{"name": "alpha", "description": "Alpha"}]},
            {"name": "a_b", "options": [{"name": "beta", "description": "Beta"}]},
        ]}))
        cls.dash = command_id(("tool", "a-b"))
        cls.underscore = command_id(("tool", "a_b"))
        cls.scripts = { shell: buf.decode("utf-8") for shell, buf in generate_all(root).items() }

    def test_bash(self):
        script = self.scripts[Shell.BASH]
        self.assertEqual(script.count(f'"{self.dash}")'), 1)
        self.assertEqual(script.count(f'"{self.underscore}")'), 1)

        dash_case = script[script.index(f'"{self.dash}")'):script.index(f'"{self.underscore}")')]
        self.assertIn("--alpha", dash_case)
        self.assertNotIn("--beta", dash_case)

    def test_zsh(self):
        script = self.scripts[Shell.ZSH]
        self.assertEqual(script.count(f"_{self.dash}() {{"), 1)
        self.assertEqual(script.count(f"_{self.underscore}() {{"), 1)

    def test_fish(self):
        script = self.scripts[Shell.FISH]
        self.assertIn(f"-n '__fish_tool_using_command {self.dash}' -l 'alpha'", script)
        self.assertIn(f"-n '__fish_tool_using_command {self.underscore}' -l 'beta'", script)
        self.assertNotIn(f"-n '__fish_tool_using_command {self.dash}' -l 'beta'", script)


class TestScripts(unittest.TestCase):
    """Spot checks of the generated script text."""

    @classmethod
    def setUpClass(cls):
        table = generate_all(_tool_tree())
        cls.scripts = { shell: buf.decode("utf-8") for shell, buf in table.items() }

    def test_bash(self):
        script = self.scripts[Shell.BASH]
        self.assertIn("_tool() {", script)
        self.assertIn('"tool,list")', script)
        self.assertIn('compgen -W "json text"', script)
        self.assertIn('"--format")', script)
        self.assertIn('"--out-dir")', script)
        self.assertIn("compgen -d", script)
        self.assertIn("compgen -f", script)
        self.assertIn("complete -F _tool", script)
        # global option offered under the subcommand too
        list_case = script[script.index('"tool__list")'):]
        self.assertIn("--verbose -v", list_case)

    def test_zsh(self):
        script = self.scripts[Shell.ZSH]
        self.assertTrue(script.startswith("#compdef tool\n"))
        self.assertIn("'--format=[Output format]:FORMAT:(json text)'", script)
        self.assertIn("'--verbose[Verbose output]'", script)
        self.assertIn("'-v[Verbose output]'", script)
        self.assertIn("':file -- Input file:_files'", script)
        self.assertIn(":_files -/", script)
        self.assertIn("_tool__list() {", script)
        self.assertIn("'list:List things'", script)
        self.assertIn("compdef _tool tool", script)

    def test_fish(self):
        script = self.scripts[Shell.FISH]
        self.assertIn("function __fish_tool_current_command", script)
        self.assertIn("case 'tool,list'", script)
        self.assertIn(
            "complete -c 'tool' -n '__fish_tool_using_command tool__list' -l 'format' "
            "-d 'Output format' -r -f -a 'json text'", script)
        self.assertIn("-s 'v' -l 'verbose'", script)
        self.assertIn("-f -a 'list' -d 'List things'", script)

    def test_powershell(self):
        script = self.scripts[Shell.POWERSHELL]
        self.assertIn("Register-ArgumentCompleter -Native -CommandName 'tool'", script)
        self.assertIn("'tool;list' {", script)
        self.assertIn("'tool;list>--format' {", script)
        self.assertIn("[CompletionResult]::new('json', 'json', [CompletionResultType]::ParameterValue, 'Output format')", script)

    def test_elvish(self):
        script = self.scripts[Shell.ELVISH]
        self.assertIn("set edit:completion:arg-completer['tool'] = {|@words|", script)
        self.assertIn("&'tool;list'= {", script)
        self.assertIn("&'tool;list>--format'= {", script)
        self.assertIn("cand 'json' 'Output format'", script)

    def test_elvish_empty_value_map(self):
        script = generate(Shell.ELVISH, build_command(CommandDef(name="tool")), "tool").decode()
        self.assertIn("var values = [&]", script)

    def test_quoting(self):
        """Quotes in help text must not break out of the shell strings."""
        root = build_command(CommandDef.from_dict({"name": "tool", "options": [
            {"name": "name", "description": "It's [the] name", "value_type": "integer"}]}))
        self.assertIn("It'\\''s \\[the\\] name", generate(Shell.ZSH, root, "tool").decode())
        self.assertIn("'It\\'s [the] name'", generate(Shell.FISH, root, "tool").decode())
        self.assertIn("'It''s [the] name'", generate(Shell.POWERSHELL, root, "tool").decode())
        self.assertIn("'It''s [the] name'", generate(Shell.ELVISH, root, "tool").decode())


if __name__ == "__main__":
    unittest.main()
