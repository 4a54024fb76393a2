"""
CLI Definition Dataclasses.

This module defines the declarative, library-neutral description of a command
tree: commands, named options and positional arguments. A document holds a
single root command under the "command" key:

    {
        "command": {
            "name": "tool",
            "description": "...",
            "options":     [ { "name": "verbose", "short_names": ["v"], ... } ],
            "arguments":   [ { "name": "file", "value_type": "path", ... } ],
            "subcommands": [ { "name": "list", ... } ]
        }
    }

Definitions are immutable once parsed; every list is stored as a tuple.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ..common import SchemaError, isspace


def _field_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _require_mapping(data: Any, path: str) -> dict:
    if not isinstance(data, dict):
        raise SchemaError(f"'{path or '<document>'}' must be an object, got {type(data).__name__}")
    return data


def _get_str(data: dict, key: str, path: str, required: bool, default: Optional[str] = None) -> Optional[str]:
    if key not in data or data[key] is None:
        if required:
            raise SchemaError(f"'{_field_path(path, key)}' is required")
        return default

    value = data[key]
    if not isinstance(value, str):
        raise SchemaError(f"'{_field_path(path, key)}' must be a string, got {type(value).__name__}")
    return value


def _get_name(data: dict, key: str, path: str) -> str:
    value = _get_str(data, key, path, required=True)
    if isspace(value):
        raise SchemaError(f"'{_field_path(path, key)}' must not be empty")
    return value


def _get_bool(data: dict, key: str, path: str) -> bool:
    value = data.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise SchemaError(f"'{_field_path(path, key)}' must be a boolean, got {type(value).__name__}")
    return value


def _get_list(data: dict, key: str, path: str) -> list:
    value = data.get(key, [])
    if value is None:
        return []
    if not isinstance(value, list):
        raise SchemaError(f"'{_field_path(path, key)}' must be a list, got {type(value).__name__}")
    return value


def _get_str_list(data: dict, key: str, path: str, single_char: bool = False) -> Tuple[str, ...]:
    items = []
    for i, item in enumerate(_get_list(data, key, path)):
        item_path = f"{_field_path(path, key)}[{i}]"
        if not isinstance(item, str):
            raise SchemaError(f"'{item_path}' must be a string, got {type(item).__name__}")
        if single_char and len(item) != 1:
            raise SchemaError(f"'{item_path}' must be a single character, got '{item}'")
        if not single_char and len(item) == 0:
            raise SchemaError(f"'{item_path}' must not be empty")
        items.append(item)

    return tuple(items)


@dataclass(frozen=True)
class ArgumentDef:
    """Definition of a positional argument."""
    name: str
    description: str
    value_type: Optional[str] = None
    possible_values: Tuple[str, ...] = ()
    required: bool = False
    global_: bool = False               # "global" in the document

    @staticmethod
    def from_dict(data: Any, path: str = "argument") -> "ArgumentDef":
        data = _require_mapping(data, path)

        return ArgumentDef(
            name=_get_name(data, "name", path),
            description=_get_str(data, "description", path, required=True),
            value_type=_get_str(data, "value_type", path, required=False),
            possible_values=_get_str_list(data, "possible_values", path),
            required=_get_bool(data, "required", path),
            global_=_get_bool(data, "global", path),
        )


@dataclass(frozen=True)
class OptionDef:  # pylint: disable=too-many-instance-attributes
    """
    Definition of a named option.

    The canonical name is exposed as --name; short_names become -c aliases
    and long_names become --word aliases.
    """
    name: str
    description: str
    short_names: Tuple[str, ...] = ()
    long_names: Tuple[str, ...] = ()
    value_type: Optional[str] = None
    possible_values: Tuple[str, ...] = ()
    required: bool = False
    global_: bool = False

    @staticmethod
    def from_dict(data: Any, path: str = "option") -> "OptionDef":
        data = _require_mapping(data, path)

        return OptionDef(
            name=_get_name(data, "name", path),
            description=_get_str(data, "description", path, required=True),
            short_names=_get_str_list(data, "short_names", path, single_char=True),
            long_names=_get_str_list(data, "long_names", path),
            value_type=_get_str(data, "value_type", path, required=False),
            possible_values=_get_str_list(data, "possible_values", path),
            required=_get_bool(data, "required", path),
            global_=_get_bool(data, "global", path),
        )


@dataclass(frozen=True)
class CommandDef:
    """A node of the command tree. Each command owns its children outright."""
    name: str
    description: str = ""
    options: Tuple[OptionDef, ...] = ()
    subcommands: Tuple["CommandDef", ...] = ()
    arguments: Tuple[ArgumentDef, ...] = ()

    @staticmethod
    def from_dict(data: Any, path: str = "command") -> "CommandDef":
        data = _require_mapping(data, path)
        name = _get_name(data, "name", path)

        options = tuple(
            OptionDef.from_dict(o, f"{path}.options[{i}]")
            for i, o in enumerate(_get_list(data, "options", path))
        )
        arguments = tuple(
            ArgumentDef.from_dict(a, f"{path}.arguments[{i}]")
            for i, a in enumerate(_get_list(data, "arguments", path))
        )
        subcommands = tuple(
            CommandDef.from_dict(c, f"{path}.subcommands[{i}]")
            for i, c in enumerate(_get_list(data, "subcommands", path))
        )

        return CommandDef(
            name=name,
            description=_get_str(data, "description", path, required=False, default=""),
            options=options,
            subcommands=subcommands,
            arguments=arguments,
        )


@dataclass(frozen=True)
class CliDef:
    """The top-level declarative document."""
    command: CommandDef

    @staticmethod
    def from_dict(data: Any) -> "CliDef":
        data = _require_mapping(data, "")
        if "command" not in data:
            raise SchemaError("'command' is required")

        return CliDef(command=CommandDef.from_dict(data["command"], "command"))
