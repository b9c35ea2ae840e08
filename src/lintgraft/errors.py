"""Error taxonomy for the installer.

Fetch and detection errors abort a run before the target is touched.
Manifest patch errors are collected per file. Downstream command errors are
reported as warnings at the end of a run.
"""
from __future__ import annotations


class LintgraftError(Exception):
    """Base class. ``remediation`` is shown to the user instead of a traceback."""

    def __init__(self, message: str, remediation: str = ""):
        super().__init__(message)
        self.remediation = remediation


class FetchError(LintgraftError):
    """Raised when the template bundle cannot be retrieved."""


class NotAProjectError(LintgraftError):
    """Raised when the target directory lacks the ecosystem marker files."""


class UnknownEcosystemError(LintgraftError):
    """Raised for a language name that is not in the ecosystem table."""


class ManifestPatchError(LintgraftError):
    """Raised when the project manifest is missing or cannot be written."""


class DownstreamCommandError(LintgraftError):
    """Raised when an external tool (npm, flutter, husky, git) fails."""

    def __init__(self, message: str, remediation: str = "", returncode: int | None = None):
        super().__init__(message, remediation)
        self.returncode = returncode


__all__ = [
    "LintgraftError",
    "FetchError",
    "NotAProjectError",
    "UnknownEcosystemError",
    "ManifestPatchError",
    "DownstreamCommandError",
]
