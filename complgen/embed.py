"""
Embed completion scripts into a C++ translation unit.

render_table() writes every script as a std::vector<std::uint8_t> literal,
twelve hex bytes per line, inside a std::map keyed by shell name:

    #define SHELLS "bash","zsh",...
    const std::map<std::string, std::vector<std::uint8_t>> shell_complete = {
    { "bash", {
        0x5F, 0x74, ...
    }},
    };

decode_table() reads such a file back into raw bytes.
"""

import re
from typing import Dict, List

from .common import SerializationError
from .completion import Shell


BYTES_PER_LINE = 12
TABLE_NAME     = "shell_complete"
INCLUDES       = ("string", "vector", "cstdint", "map")

_SHELLS_RE = re.compile(r'^#define SHELLS (.*)$', re.MULTILINE)
_ENTRY_RE  = re.compile(r'^\{ "([^"]*)", \{\n(.*?)^\}\},$', re.MULTILINE | re.DOTALL)
_BYTE_RE   = re.compile(r'0x([0-9A-Fa-f]{2}),')


def _render_bytes(buf: bytes) -> List[str]:
    lines = []
    for start in range(0, len(buf), BYTES_PER_LINE):
        chunk = buf[start:start + BYTES_PER_LINE]
        lines.append("    " + "".join(f"0x{b:02X}, " for b in chunk))
    return lines


def render_table(table: Dict[Shell, bytes]) -> str:
    """
    Render the per-shell scripts as C++ source.

    The table must hold exactly one entry per Shell, in Shell order; anything
    else raises SerializationError.
    """
    if list(table.keys()) != list(Shell):
        raise SerializationError(
            f"expected one entry per shell in order {[str(s) for s in Shell]}, "
            f"got {[str(s) for s in table.keys()]}")

    shells = ",".join(f'"{shell}"' for shell in Shell)

    lines = [f"#include <{header}>" for header in INCLUDES]
    lines.append("")
    lines.append(f"#define SHELLS {shells}")
    lines.append(f"const std::map<std::string, std::vector<std::uint8_t>> {TABLE_NAME} = {{")

    for shell, buf in table.items():
        if not isinstance(buf, (bytes, bytearray)):
            raise SerializationError(f"{shell} script must be bytes, got {type(buf).__name__}")

        lines.append(f'{{ "{shell}", {{')
        lines.extend(_render_bytes(buf))
        lines.append("}},")

    lines.append("};")
    lines.append("")

    return "\n".join(lines)


def decode_table(source: str) -> Dict[str, bytes]:
    """Parse the output of render_table() back into shell name -> bytes."""
    match = _SHELLS_RE.search(source)
    if match is None:
        raise SerializationError("no SHELLS definition found")
    shells = [s.strip().strip('"') for s in match.group(1).split(",")]

    table: Dict[str, bytes] = {}
    for name, body in _ENTRY_RE.findall(source):
        if name in table:
            raise SerializationError(f"shell '{name}' appears twice")
        table[name] = bytes(int(h, 16) for h in _BYTE_RE.findall(body))

    if list(table.keys()) != shells:
        raise SerializationError(f"table entries {list(table.keys())} do not match SHELLS {shells}")

    return table
