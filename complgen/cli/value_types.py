"""
Value-parsing strategies for options and positional arguments.

resolve_value_parser() picks exactly one strategy per option or argument.
A non-empty set of possible values always wins over a declared value type,
and a value type this module does not know about falls back to free text
without raising.
"""

import argparse
from enum import Enum, unique
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@unique
class ValueKind(Enum):
    STRING  = "string"
    FILE    = "file"
    DIR     = "dir"
    PATH    = "path"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT   = "float"
    CHOICES = "choices"

    def is_path(self) -> bool:
        return self in (ValueKind.FILE, ValueKind.DIR, ValueKind.PATH)


# Declared value_type strings that map to something other than free text.
VALUE_TYPE_KINDS = {
    "file":    ValueKind.FILE,
    "dir":     ValueKind.DIR,
    "path":    ValueKind.PATH,
    "boolean": ValueKind.BOOLEAN,
    "integer": ValueKind.INTEGER,
    "float":   ValueKind.FLOAT,
}

BOOLEAN_LITERALS = ("true", "false")


class ValueParser:
    """A concrete parsing strategy. Instances are callable like argparse types."""

    def __init__(self, kind: ValueKind, choices: Iterable[str] = ()):
        self.kind    = kind
        self.choices: Tuple[str, ...] = tuple(choices)

    def completion_values(self) -> Tuple[str, ...]:
        """Literal candidates a shell may offer for this value, if any."""
        if self.kind == ValueKind.CHOICES:
            return self.choices
        if self.kind == ValueKind.BOOLEAN:
            return BOOLEAN_LITERALS
        return ()

    def __call__(self, text: str) -> Any:
        if self.kind == ValueKind.CHOICES:
            if text not in self.choices:
                raise argparse.ArgumentTypeError(
                    f"invalid value '{text}' (choose from {', '.join(self.choices)})")
            return text

        if self.kind.is_path():
            if len(text) == 0:
                raise argparse.ArgumentTypeError("path must not be empty")
            return Path(text)

        if self.kind == ValueKind.BOOLEAN:
            if text not in BOOLEAN_LITERALS:
                raise argparse.ArgumentTypeError(f"invalid value '{text}' (expected true or false)")
            return text == "true"

        if self.kind == ValueKind.INTEGER:
            try:
                value = int(text, 10)
            except ValueError as exc:
                raise argparse.ArgumentTypeError(f"invalid integer '{text}'") from exc
            if not INT64_MIN <= value <= INT64_MAX:
                raise argparse.ArgumentTypeError(f"integer '{text}' is out of range")
            return value

        if self.kind == ValueKind.FLOAT:
            try:
                return float(text)
            except ValueError as exc:
                raise argparse.ArgumentTypeError(f"invalid float '{text}'") from exc

        if len(text) == 0:
            raise argparse.ArgumentTypeError("value must not be empty")
        return text

    def __eq__(self, other) -> bool:
        if not isinstance(other, ValueParser):
            return NotImplemented
        return self.kind == other.kind and self.choices == other.choices

    def __hash__(self) -> int:
        return hash((self.kind, self.choices))

    def __repr__(self) -> str:
        if self.kind == ValueKind.CHOICES:
            return f"ValueParser(choices={list(self.choices)})"
        return f"ValueParser({self.kind.value})"


def resolve_value_parser(possible_values: Iterable[str], value_type: Optional[str]) -> ValueParser:
    possible_values = tuple(possible_values or ())
    if possible_values:
        return ValueParser(ValueKind.CHOICES, possible_values)

    return ValueParser(VALUE_TYPE_KINDS.get(value_type, ValueKind.STRING))
