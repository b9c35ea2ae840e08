"""Tagged line model shared by the structural patchers.

Files are never parsed as YAML or glob lists. Each physical line is kept
verbatim (including its line ending) and tagged with just enough
classification for positional edits.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Line:
    raw: str            # exact text including the line ending, if any
    indent: int         # leading spaces/tabs
    is_blank: bool
    is_comment: bool

    @property
    def text(self) -> str:
        """Line content without the trailing line ending."""
        return self.raw.rstrip("\r\n")

    @property
    def has_newline(self) -> bool:
        return self.raw.endswith("\n")

    @property
    def at_column_zero(self) -> bool:
        return not self.is_blank and self.indent == 0


def classify(raw: str) -> Line:
    text = raw.rstrip("\r\n")
    stripped = text.lstrip(" \t")
    return Line(
        raw=raw,
        indent=len(text) - len(stripped),
        is_blank=not stripped,
        is_comment=stripped.startswith("#"),
    )


def split_lines(text: str) -> list[Line]:
    # str.splitlines would also break on form feeds and unicode separators.
    raws: list[str] = []
    start = 0
    while True:
        idx = text.find("\n", start)
        if idx == -1:
            if start < len(text):
                raws.append(text[start:])
            break
        raws.append(text[start:idx + 1])
        start = idx + 1
    return [classify(r) for r in raws]


def join_lines(lines: list[Line]) -> str:
    return "".join(line.raw for line in lines)


def detect_newline(lines: list[Line]) -> str:
    for line in lines:
        if line.raw.endswith("\r\n"):
            return "\r\n"
        if line.raw.endswith("\n"):
            return "\n"
    return "\n"


def terminated(line: Line, newline: str) -> Line:
    """Return ``line`` with a line ending, adding ``newline`` if it has none."""
    if line.has_newline:
        return line
    return classify(line.raw + newline)


def read_lines(path) -> list[Line]:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return split_lines(f.read())


def write_lines(path, lines: list[Line]) -> None:
    """Write the complete new content in a single call."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(join_lines(lines))


__all__ = [
    "Line",
    "classify",
    "split_lines",
    "join_lines",
    "detect_newline",
    "terminated",
    "read_lines",
    "write_lines",
]
