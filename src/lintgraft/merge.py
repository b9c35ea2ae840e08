"""Merge engine: reconcile a staged bundle against an existing project.

Every decision is recomputed from what is on disk right now; nothing is
remembered between runs. Re-running against the engine's own output is a
no-op, which is also the recovery path after an interrupted run.

Usage:
    from lintgraft.merge import MergeOptions, reconcile

    report = reconcile(bundle, project_root, MergeOptions(prompter=ask_user))
    for outcome in report.failed:
        print(outcome.path, outcome.detail)
"""
from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from .bundle import Bundle, BundleEntry, FileClass
from .errors import ManifestPatchError
from .patchers.ignore_file import merge_ignore_file
from .patchers.manifest import PatchResult, inject_dependency

logger = logging.getLogger(__name__)

# (question) -> yes/no. Injected so tests and non-interactive runs never
# touch stdin.
Prompter = Callable[[str], bool]


def accept_all(_question: str) -> bool:
    return True


def decline_all(_question: str) -> bool:
    return False


# =============================================================================
# DECISIONS AND REPORT
# =============================================================================

class DecisionKind(Enum):
    COPY = "copy"
    SKIP = "skip"
    PROMPTED_OVERWRITE = "prompted_overwrite"
    MERGED = "merged"


@dataclass(frozen=True)
class ReconciliationDecision:
    kind: DecisionKind
    # Only meaningful for PROMPTED_OVERWRITE.
    accepted: bool | None = None

    def __str__(self) -> str:
        if self.kind is DecisionKind.PROMPTED_OVERWRITE:
            return f"prompted_overwrite({'yes' if self.accepted else 'no'})"
        return self.kind.value


COPY = ReconciliationDecision(DecisionKind.COPY)
SKIP = ReconciliationDecision(DecisionKind.SKIP)
MERGED = ReconciliationDecision(DecisionKind.MERGED)


def prompted(accepted: bool) -> ReconciliationDecision:
    return ReconciliationDecision(DecisionKind.PROMPTED_OVERWRITE, accepted=accepted)


class OutcomeStatus(Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class FileOutcome:
    path: str
    file_class: FileClass
    status: OutcomeStatus
    decision: ReconciliationDecision | None = None
    detail: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "file_class": self.file_class.value,
            "status": self.status.value,
            "decision": str(self.decision) if self.decision else None,
            "detail": self.detail,
        }


@dataclass
class StepResult:
    """One orchestrator step (fetch, merge, install, ...)."""
    name: str
    ok: bool
    detail: str = ""
    skipped: bool = False


@dataclass
class RunReport:
    outcomes: list[FileOutcome] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    steps: list[StepResult] = field(default_factory=list)

    def add(self, outcome: FileOutcome) -> FileOutcome:
        self.outcomes.append(outcome)
        return outcome

    def _with(self, status: OutcomeStatus) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.status is status]

    @property
    def succeeded(self) -> list[FileOutcome]:
        return self._with(OutcomeStatus.SUCCEEDED)

    @property
    def skipped(self) -> list[FileOutcome]:
        return self._with(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> list[FileOutcome]:
        return self._with(OutcomeStatus.FAILED)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)

    def outcome_for(self, path: str) -> FileOutcome | None:
        for o in self.outcomes:
            if o.path == path:
                return o
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": [o.to_dict() for o in self.outcomes],
            "succeeded": len(self.succeeded),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
            "warnings": list(self.warnings),
            "steps": [
                {"name": s.name, "ok": s.ok, "skipped": s.skipped, "detail": s.detail}
                for s in self.steps
            ],
        }


# =============================================================================
# FILE OPERATIONS
# =============================================================================

def make_executable(path: Path) -> None:
    """chmod +x: grant execute wherever read is granted (no-op on Windows)."""
    if os.name == "nt":
        return
    mode = path.stat().st_mode
    new_mode = mode | 0o100
    if mode & 0o040:
        new_mode |= 0o010
    if mode & 0o004:
        new_mode |= 0o001
    if new_mode != mode:
        os.chmod(path, new_mode)


def _copy_payload(entry: BundleEntry, dest: Path) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(entry.source, dest)


def _same_content(entry: BundleEntry, dest: Path) -> bool:
    return dest.is_file() and dest.read_bytes() == entry.read_bytes()


# =============================================================================
# ENGINE
# =============================================================================

@dataclass
class MergeOptions:
    prompter: Prompter = decline_all


class MergeEngine:
    """Apply one reconciliation strategy per bundle entry, in manifest order."""

    def __init__(self, options: MergeOptions | None = None):
        self.options = options or MergeOptions()
        self._handlers: dict[FileClass, Callable[[BundleEntry, Path], FileOutcome]] = {
            FileClass.ROOT: self._root,
            FileClass.MERGEABLE_IGNORE: self._ignore,
            FileClass.MERGEABLE_MANIFEST_DEPENDENCY: self._manifest,
            FileClass.HOOK_SCRIPT: self._overwrite,
            FileClass.WORKFLOW_DEFINITION: self._overwrite,
            FileClass.DOC_PAYLOAD: self._overwrite,
        }

    def reconcile(self, bundle: Bundle, target_root: str | Path) -> RunReport:
        root = Path(target_root)
        report = RunReport()
        for entry in bundle:
            dest = root / entry.relative_path
            try:
                outcome = self._handlers[entry.file_class](entry, dest)
            except ManifestPatchError as e:
                outcome = self._failed(entry, str(e) + (f" ({e.remediation})" if e.remediation else ""))
            except (OSError, UnicodeError) as e:
                outcome = self._failed(entry, f"{type(e).__name__}: {e}")
            logger.debug("%s -> %s %s", entry.relative_path, outcome.status.value, outcome.decision or "")
            report.add(outcome)
        return report

    # -- strategies ---------------------------------------------------------

    def _root(self, entry: BundleEntry, dest: Path) -> FileOutcome:
        if not dest.exists():
            _copy_payload(entry, dest)
            return self._ok(entry, COPY, "created")

        if not entry.sensitive:
            _copy_payload(entry, dest)
            return self._ok(entry, COPY, "overwritten")

        if _same_content(entry, dest):
            return self._skip(entry, SKIP, "already up to date")

        accepted = bool(self.options.prompter(f"{entry.relative_path} already exists. Overwrite?"))
        if not accepted:
            return self._skip(entry, prompted(False), "kept existing file")
        _copy_payload(entry, dest)
        return self._ok(entry, prompted(True), "overwritten")

    def _ignore(self, entry: BundleEntry, dest: Path) -> FileOutcome:
        if not dest.exists():
            _copy_payload(entry, dest)
            return self._ok(entry, COPY, "created")

        result = merge_ignore_file(dest, entry.source)
        if not result.appended:
            return self._skip(entry, SKIP, "already up to date")
        return self._ok(entry, MERGED, f"appended {len(result.appended)} entr{'y' if len(result.appended) == 1 else 'ies'}")

    def _manifest(self, entry: BundleEntry, dest: Path) -> FileOutcome:
        dep = entry.dependency
        # A missing manifest raises ManifestPatchError: the project owns it,
        # so it is never created from scratch.
        result = inject_dependency(dest, dep.section, dep.key, dep.value, dep.anchors)
        if result is PatchResult.ALREADY_PRESENT:
            return self._skip(entry, SKIP, f"{dep.key} already present")
        if result is PatchResult.SECTION_CREATED:
            return self._ok(entry, MERGED, f"added {dep.section} with {dep.key}")
        return self._ok(entry, MERGED, f"added {dep.key} to {dep.section}")

    def _overwrite(self, entry: BundleEntry, dest: Path) -> FileOutcome:
        existed = dest.exists()
        _copy_payload(entry, dest)
        if entry.file_class is FileClass.HOOK_SCRIPT:
            make_executable(dest)
        return self._ok(entry, COPY, "overwritten" if existed else "created")

    # -- outcome helpers ----------------------------------------------------

    @staticmethod
    def _ok(entry: BundleEntry, decision: ReconciliationDecision, detail: str) -> FileOutcome:
        return FileOutcome(entry.relative_path, entry.file_class, OutcomeStatus.SUCCEEDED, decision, detail)

    @staticmethod
    def _skip(entry: BundleEntry, decision: ReconciliationDecision, detail: str) -> FileOutcome:
        return FileOutcome(entry.relative_path, entry.file_class, OutcomeStatus.SKIPPED, decision, detail)

    @staticmethod
    def _failed(entry: BundleEntry, detail: str) -> FileOutcome:
        return FileOutcome(entry.relative_path, entry.file_class, OutcomeStatus.FAILED, None, detail)


def reconcile(bundle: Bundle, target_root: str | Path, options: MergeOptions | None = None) -> RunReport:
    return MergeEngine(options).reconcile(bundle, target_root)


__all__ = [
    "Prompter",
    "accept_all",
    "decline_all",
    "DecisionKind",
    "ReconciliationDecision",
    "COPY",
    "SKIP",
    "MERGED",
    "prompted",
    "OutcomeStatus",
    "FileOutcome",
    "StepResult",
    "RunReport",
    "MergeOptions",
    "MergeEngine",
    "make_executable",
    "reconcile",
]
