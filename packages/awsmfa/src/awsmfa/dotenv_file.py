"""Line-preserving model of a dotenv file.

A document is a list of line records, one per input line, in file order:
- Entry: a recognized KEY=VALUE line
- Verbatim: anything else (comments, blank lines, malformed lines)

Rendering a document that was not modified reproduces the input with
line endings normalized to "\n" and no trailing terminator.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Union

LINE_SPLIT_RE = re.compile(r"\r\n|\r|\n")
ENTRY_RE = re.compile(r"^[\s\ufeff]*([A-Za-z0-9_.-]+)\s*=\s*(.*)?\s*$")


@dataclass(frozen=True)
class Verbatim:
    """A line passed through unchanged."""

    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class Entry:
    """A KEY=VALUE line. The value is stored trimmed."""

    key: str
    value: str

    def render(self) -> str:
        return f"{self.key}={self.value}"


Line = Union[Verbatim, Entry]


def parse_line(line: str) -> Line:
    match = ENTRY_RE.match(line)
    if match is None:
        return Verbatim(line)
    return Entry(match.group(1), (match.group(2) or "").strip())


def parse(contents: Union[str, bytes]) -> list[Line]:
    """Parse dotenv contents into a list of line records.

    Args:
        contents: File contents; bytes are decoded as UTF-8, undecodable
            bytes are kept as surrogate escapes and written back unchanged

    Returns:
        One record per line. A trailing terminator yields a final empty
        Verbatim record, and empty contents yield a single one.
    """
    if isinstance(contents, bytes):
        contents = contents.decode("utf-8", errors="surrogateescape")
    return [parse_line(line) for line in LINE_SPLIT_RE.split(contents)]


def render(lines: Iterable[Line]) -> str:
    """Render line records joined by "\\n", without a trailing terminator.

    The empty record parse() emits for a trailing terminator is dropped,
    so the output never ends with "\\n" for that reason alone.
    """
    lines = list(lines)
    if lines and lines[-1] == Verbatim(""):
        lines.pop()
    return "\n".join(line.render() for line in lines)


def keys(lines: Iterable[Line]) -> list[str]:
    """Keys declared in a document, in file order."""
    return [line.key for line in lines if isinstance(line, Entry)]
