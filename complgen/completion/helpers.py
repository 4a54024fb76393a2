import re
from typing import List, Tuple

from ..cli.builder import OptionNode
from ..cli.value_types import ValueKind, ValueParser


_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9]")


def sanitize_identifier(name: str) -> str:
    """
    Turn a command name into something usable inside a shell function name.

    Letters and digits are kept; every other character, "_" included, becomes
    "_<hex code point>x" (so "a-b" is "a_2dxb" and "a_b" is "a_5fxb"). Distinct
    names give distinct identifiers, and an identifier never contains "__".
    """
    return _IDENTIFIER_RE.sub(lambda m: f"_{ord(m.group(0)):x}x", name)


def command_id(path: Tuple[str, ...]) -> str:
    """Join a command path into one identifier; "__" only ever separates words."""
    return "__".join(sanitize_identifier(p) for p in path)


def first_line(text: str) -> str:
    return text.strip().split("\n", maxsplit=1)[0] if text else ""


def value_options(options: List[OptionNode]) -> List[OptionNode]:
    return [o for o in options if o.takes_value]


def value_kind(parser: ValueParser) -> ValueKind:
    """Collapse the parser kind into what a shell can do with it."""
    if parser.completion_values():
        return ValueKind.CHOICES
    return parser.kind


def single_quote(text: str, escaped_quote: str) -> str:
    return "'" + text.replace("'", escaped_quote) + "'"
