"""
Multi-shell completion script generation.

generate_all() renders the executable command tree once per supported shell,
always in Shell declaration order, and returns the raw script bytes.
"""

from enum import Enum, unique
from typing import Callable, Dict

from ..common import CompletionGenerationError
from ..cli.builder import CommandNode
from .bash import generate_bash_completion
from .zsh import generate_zsh_completion
from .fish import generate_fish_completion
from .powershell import generate_powershell_completion
from .elvish import generate_elvish_completion


@unique
class Shell(Enum):
    BASH       = "bash"
    ZSH        = "zsh"
    FISH       = "fish"
    POWERSHELL = "powershell"
    ELVISH     = "elvish"

    def __str__(self) -> str:
        return self.value


SHELL_GENERATORS: Dict[Shell, Callable[[CommandNode, str], str]] = {
    Shell.BASH:       generate_bash_completion,
    Shell.ZSH:        generate_zsh_completion,
    Shell.FISH:       generate_fish_completion,
    Shell.POWERSHELL: generate_powershell_completion,
    Shell.ELVISH:     generate_elvish_completion,
}


def generate(shell: Shell, root: CommandNode, bin_name: str) -> bytes:
    """Render the completion script of one shell as UTF-8 bytes."""
    try:
        script = SHELL_GENERATORS[shell](root, bin_name)
    except Exception as exc:  # pylint: disable=broad-except
        raise CompletionGenerationError(f"{shell} completion for '{bin_name}' failed: {exc}") from exc

    return script.encode("utf-8")


def generate_all(root: CommandNode) -> Dict[Shell, bytes]:
    """Render every supported shell, keyed and ordered by Shell."""
    return { shell: generate(shell, root, root.name) for shell in Shell }


__all__ = [
    "Shell",
    "SHELL_GENERATORS",
    "generate",
    "generate_all",
    "generate_bash_completion",
    "generate_zsh_completion",
    "generate_fish_completion",
    "generate_powershell_completion",
    "generate_elvish_completion",
]
