"""lintgraft - merge code quality tooling into existing app projects.

Fetches a per-ecosystem template bundle (lint config, git hooks, CI
workflows, docs) and reconciles it with the target project so that running
the installer again changes nothing.
"""
from __future__ import annotations

from .contracts import LINTGRAFT_VERSION as __version__
from .detector import TargetProject, detect, validate
from .errors import (
    DownstreamCommandError,
    FetchError,
    LintgraftError,
    ManifestPatchError,
    NotAProjectError,
    UnknownEcosystemError,
)
from .merge import MergeOptions, RunReport, reconcile
from .orchestrator import RunOptions, install, run

__all__ = [
    "__version__",
    "TargetProject",
    "detect",
    "validate",
    "LintgraftError",
    "FetchError",
    "NotAProjectError",
    "UnknownEcosystemError",
    "ManifestPatchError",
    "DownstreamCommandError",
    "MergeOptions",
    "RunReport",
    "reconcile",
    "RunOptions",
    "install",
    "run",
]
