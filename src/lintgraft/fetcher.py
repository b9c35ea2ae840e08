"""Bundle fetcher: shallow-clone the template repository into a staging dir.

The fetcher owns its staging directory. Callers must call ``cleanup()`` on
every exit path; the orchestrator does so in a ``finally`` block.
"""
from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Protocol

from .errors import FetchError
from .redact import redact_secrets, redact_url
from .utils import CommandRunner, ToolLookup, output_tail, run_subprocess, which

logger = logging.getLogger(__name__)


class BundleFetcher(Protocol):
    def fetch(self, repo_url: str, branch: str, bundle_name: str) -> Path: ...

    def cleanup(self) -> None: ...


class GitBundleFetcher:
    """Fetch a bundle folder from a git repository with ``git clone --depth 1``."""

    def __init__(self, runner: CommandRunner = run_subprocess, lookup: ToolLookup = which):
        self.runner = runner
        self.lookup = lookup
        self.staging_dir: Path | None = None

    def fetch(self, repo_url: str, branch: str, bundle_name: str) -> Path:
        if not self.lookup("git"):
            raise FetchError("git is not installed", remediation="Install git from https://git-scm.com")

        self.staging_dir = Path(tempfile.mkdtemp(prefix="lintgraft-"))
        clone_dir = self.staging_dir / "repo"
        safe_url = redact_url(repo_url)
        logger.info("cloning %s (branch %s)", safe_url, branch)

        argv = ["git", "clone", "--depth", "1", "--branch", branch, repo_url, str(clone_dir)]
        try:
            proc = self.runner(argv, cwd=self.staging_dir)
        except FileNotFoundError as e:
            raise FetchError(f"git could not be executed: {e}") from e
        if proc.returncode != 0:
            detail = redact_secrets(output_tail(proc))
            raise FetchError(
                f"Failed to clone {safe_url} (branch {branch})" + (f": {detail}" if detail else ""),
                remediation="Check the repository URL, the branch name and your access rights",
            )

        bundle_dir = clone_dir / bundle_name
        if not bundle_dir.is_dir():
            available = sorted(
                p.name for p in clone_dir.iterdir() if p.is_dir() and not p.name.startswith(".")
            ) if clone_dir.is_dir() else []
            raise FetchError(
                f"Bundle folder '{bundle_name}' not found in {safe_url}",
                remediation="Available folders: " + (", ".join(available) or "(none)"),
            )
        return bundle_dir

    def cleanup(self) -> None:
        if self.staging_dir is not None:
            shutil.rmtree(self.staging_dir, ignore_errors=True)
            logger.debug("removed staging dir %s", self.staging_dir)
            self.staging_dir = None


class LocalBundleFetcher:
    """Use an already checked-out bundle repository (``--from-dir``).

    Nothing is staged, so ``cleanup`` has nothing to remove.
    """

    def __init__(self, source_root: str | Path):
        self.source_root = Path(source_root)

    def fetch(self, repo_url: str, branch: str, bundle_name: str) -> Path:
        bundle_dir = self.source_root / bundle_name
        if not bundle_dir.is_dir():
            raise FetchError(
                f"Bundle folder '{bundle_name}' not found in {self.source_root}",
                remediation="Point --from-dir at a checkout of the bundle repository",
            )
        return bundle_dir

    def cleanup(self) -> None:
        return None


__all__ = ["BundleFetcher", "GitBundleFetcher", "LocalBundleFetcher"]
