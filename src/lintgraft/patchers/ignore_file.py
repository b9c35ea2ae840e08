"""Append-only merge of ignore files (.gitignore and friends)."""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from ..contracts import TargetLayout
from .lines import Line, classify, detect_newline, read_lines, terminated, write_lines

logger = logging.getLogger(__name__)


@dataclass
class IgnoreMergeResult:
    created: bool = False
    appended: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.created or bool(self.appended)


def pattern_lines(lines: list[Line]) -> list[str]:
    return [line.text for line in lines if not line.is_blank and not line.is_comment]


def missing_patterns(existing: list[Line], incoming: list[Line]) -> list[str]:
    """Incoming patterns absent from ``existing``, in incoming order.

    Equality is exact string equality: ``build/`` and ``build`` differ.
    """
    seen = set(pattern_lines(existing))
    out: list[str] = []
    for pattern in pattern_lines(incoming):
        if pattern in seen:
            continue
        seen.add(pattern)
        out.append(pattern)
    return out


def merge_ignore_file(
    existing_path: str | Path,
    bundle_path: str | Path,
    marker: str = TargetLayout.IGNORE_MARKER,
) -> IgnoreMergeResult:
    """Merge ``bundle_path`` into ``existing_path`` without reordering or duplicating.

    A missing target is created as a verbatim copy of the bundle file.
    Otherwise the original lines stay untouched and new patterns are
    appended after a single marker comment. Nothing is written when there
    is nothing to append.
    """
    existing_path = Path(existing_path)
    bundle_path = Path(bundle_path)

    if not existing_path.exists():
        existing_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(bundle_path, existing_path)
        return IgnoreMergeResult(created=True)

    existing = read_lines(existing_path)
    additions = missing_patterns(existing, read_lines(bundle_path))
    if not additions:
        logger.debug("%s: nothing to append", existing_path.name)
        return IgnoreMergeResult()

    newline = detect_newline(existing)
    lines = list(existing)
    if lines:
        lines[-1] = terminated(lines[-1], newline)
    lines.append(classify(marker + newline))
    lines.extend(classify(p + newline) for p in additions)
    write_lines(existing_path, lines)

    logger.debug("%s: appended %d pattern(s)", existing_path.name, len(additions))
    return IgnoreMergeResult(appended=additions)


__all__ = ["IgnoreMergeResult", "pattern_lines", "missing_patterns", "merge_ignore_file"]
