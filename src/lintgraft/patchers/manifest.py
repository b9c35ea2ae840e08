"""Dependency injection into a YAML-like project manifest (e.g. pubspec.yaml).

This is positional line editing, not YAML: comments, blank lines, key order
and quoting of everything outside the inserted lines survive byte for byte.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path

from ..errors import ManifestPatchError
from .lines import Line, classify, detect_newline, read_lines, terminated, write_lines

logger = logging.getLogger(__name__)

DEFAULT_INDENT = "  "


class PatchResult(Enum):
    ALREADY_PRESENT = "already_present"
    INSERTED = "inserted"
    SECTION_CREATED = "section_created"


def _key_pattern(key: str) -> re.Pattern[str]:
    # Whole-key match: `very_good_analysis:` but not `very_good_analysis_extra:`.
    return re.compile(rf"^[ \t]*{re.escape(key)}[ \t]*:")


def _header_text(line: Line) -> str:
    return line.text.split("#", 1)[0].rstrip()


def find_key(lines: list[Line], key: str) -> int | None:
    pattern = _key_pattern(key)
    for idx, line in enumerate(lines):
        if line.is_blank or line.is_comment:
            continue
        if pattern.match(line.text):
            return idx
    return None


def find_section(lines: list[Line], header: str) -> int | None:
    """Index of the column-0 line declaring ``header``, or None."""
    wanted = header.rstrip()
    for idx, line in enumerate(lines):
        if line.at_column_zero and not line.is_comment and _header_text(line) == wanted:
            return idx
    return None


def section_end(lines: list[Line], header_idx: int) -> int:
    """Index of the section's end boundary: the first unindented non-blank line, or EOF.

    Blank and indented lines are members, so trailing blank lines stay
    inside the section and an insertion lands directly above the boundary.
    """
    for idx in range(header_idx + 1, len(lines)):
        line = lines[idx]
        if not line.is_blank and line.indent == 0:
            return idx
    return len(lines)


def sibling_indent(lines: list[Line], header_idx: int, end_idx: int) -> str:
    for idx in range(header_idx + 1, end_idx):
        line = lines[idx]
        if not line.is_blank and not line.is_comment:
            return line.text[:line.indent]
    return DEFAULT_INDENT


def _entry(indent: str, key: str, value: str, newline: str) -> Line:
    return classify(f"{indent}{key}: {value}{newline}")


def inject_dependency(
    file_path: str | Path,
    section_header: str,
    key: str,
    value: str,
    anchors: tuple[str, ...] = (),
) -> PatchResult:
    """Add ``key: value`` under ``section_header`` unless ``key`` exists anywhere.

    When the section is missing it is created in front of the first anchor
    section found (so it lands in a predictable spot), or at end of file.
    """
    path = Path(file_path)
    if not path.is_file():
        raise ManifestPatchError(
            f"{path.name} not found",
            remediation=f"Expected the project manifest at {path}",
        )

    try:
        lines = read_lines(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestPatchError(f"Could not read {path.name}: {e}") from e

    if find_key(lines, key) is not None:
        logger.debug("%s: %s already present", path.name, key)
        return PatchResult.ALREADY_PRESENT

    newline = detect_newline(lines)
    header_idx = find_section(lines, section_header)

    if header_idx is not None:
        end = section_end(lines, header_idx)
        indent = sibling_indent(lines, header_idx, end)
        lines[end - 1] = terminated(lines[end - 1], newline)
        lines.insert(end, _entry(indent, key, value, newline))
        result = PatchResult.INSERTED
    else:
        block = [
            classify(newline),
            classify(f"{section_header.rstrip()}{newline}"),
            _entry(DEFAULT_INDENT, key, value, newline),
        ]
        found = [i for i in (find_section(lines, a) for a in anchors) if i is not None]
        anchor_idx = min(found) if found else None
        if anchor_idx is not None:
            lines[anchor_idx:anchor_idx] = block
        else:
            if lines:
                lines[-1] = terminated(lines[-1], newline)
            else:
                block = block[1:]
            lines.extend(block)
        result = PatchResult.SECTION_CREATED

    try:
        write_lines(path, lines)
    except OSError as e:
        raise ManifestPatchError(
            f"Could not write {path.name}: {e}",
            remediation=f"Add '{key}: {value}' under '{section_header}' manually",
        ) from e

    logger.debug("%s: %s (%s)", path.name, key, result.value)
    return result


__all__ = [
    "PatchResult",
    "DEFAULT_INDENT",
    "find_key",
    "find_section",
    "section_end",
    "sibling_indent",
    "inject_dependency",
]
