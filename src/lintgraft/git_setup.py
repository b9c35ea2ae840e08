"""Optional interactive tail: remote, initial commit, standard branches, push.

Only ever runs interactively. Every failure here is a warning; by this point
the project files are already in place.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from .contracts import EnvContract
from .downstream import Downstream
from .errors import DownstreamCommandError
from .merge import Prompter
from .redact import redact_url
from .utils import CommandRunner, ToolLookup, run_subprocess, which

logger = logging.getLogger(__name__)

# (question) -> answer; an empty answer means "skip".
TextAsker = Callable[[str], str]

MAIN_BRANCH = "main"
STANDARD_BRANCHES = ("develop", "uat", "prod")
WORKING_BRANCH = "develop"

INITIAL_COMMIT_MESSAGE = """chore: set up code quality standards

- Add Husky hooks for commit message validation and quality checks
- Add GitHub Actions workflows for CI/CD
- Add code quality scripts and configuration
- Add engineering documentation
- Configure version pinning"""


class GitSetup:
    def __init__(
        self,
        root: str | Path,
        confirm: Prompter,
        ask_text: TextAsker,
        runner: CommandRunner = run_subprocess,
        lookup: ToolLookup = which,
    ):
        self.root = Path(root)
        self.confirm = confirm
        self.ask_text = ask_text
        self.git = Downstream(self.root, runner, lookup)
        self.warnings: list[str] = []
        self.actions: list[str] = []

    # -- queries ------------------------------------------------------------

    def _ok(self, argv: list[str]) -> bool:
        try:
            self.git.run(argv)
        except DownstreamCommandError:
            return False
        return True

    def remote_url(self) -> str | None:
        try:
            proc = self.git.run(["git", "remote", "get-url", "origin"])
        except DownstreamCommandError:
            return None
        return proc.stdout.strip() or None

    def branch_exists(self, branch: str) -> bool:
        return self._ok(["git", "rev-parse", "--verify", "--quiet", branch])

    # -- steps --------------------------------------------------------------

    def configure_remote(self) -> None:
        url = (self.ask_text("GitHub repository URL (leave empty to skip):") or "").strip()
        if not url:
            return
        current = self.remote_url()
        if current is None:
            self.git.run(["git", "remote", "add", "origin", url])
            self.actions.append(f"added remote origin {redact_url(url)}")
        elif current != url and self.confirm(f"Remote 'origin' already exists ({redact_url(current)}). Update it?"):
            self.git.run(["git", "remote", "set-url", "origin", url])
            self.actions.append(f"updated remote origin to {redact_url(url)}")

    def initial_commit(self) -> None:
        self.git.run(["git", "add", "."])
        if self._ok(["git", "commit", "-m", INITIAL_COMMIT_MESSAGE]):
            self.actions.append("created initial commit")
        else:
            # Nothing staged, or already committed on a re-run.
            logger.info("initial commit skipped (nothing to commit)")

    def ensure_main(self) -> None:
        if self.branch_exists(MAIN_BRANCH):
            self.git.run(["git", "checkout", MAIN_BRANCH])
        elif self.branch_exists("master"):
            self.git.run(["git", "checkout", "master"])
            self.git.run(["git", "branch", "-m", "master", MAIN_BRANCH])
            self.actions.append("renamed master to main")
        else:
            self.git.run(["git", "checkout", "-b", MAIN_BRANCH])
            self.actions.append("created branch main")

    def create_branches(self) -> None:
        self.ensure_main()
        for branch in STANDARD_BRANCHES:
            if self.branch_exists(branch):
                logger.info("branch %s already exists", branch)
                continue
            self.git.run(["git", "branch", branch, MAIN_BRANCH])
            self.actions.append(f"created branch {branch}")
        self.git.run(["git", "checkout", WORKING_BRANCH])

    def push_branches(self) -> None:
        env = {EnvContract.ENV_ALLOW_PROTECTED_BRANCHES: "true"}
        for branch in (MAIN_BRANCH,) + STANDARD_BRANCHES:
            if not self.branch_exists(branch):
                continue
            try:
                self.git.run(["git", "push", "-u", "origin", branch], env=env)
                self.actions.append(f"pushed {branch}")
            except DownstreamCommandError as e:
                self.warnings.append(f"Failed to push {branch}: {e}")

    # -- driver -------------------------------------------------------------

    def run(self) -> list[str]:
        """Walk the prompts; returns warnings."""
        try:
            self.configure_remote()
            if not self.confirm("Create initial commit and standard branches?"):
                return self.warnings
            self.initial_commit()
            self.create_branches()
            if self.remote_url() and self.confirm("Push all branches to the remote?"):
                self.push_branches()
        except DownstreamCommandError as e:
            self.warnings.append(str(e))
        return self.warnings


__all__ = ["TextAsker", "GitSetup", "MAIN_BRANCH", "STANDARD_BRANCHES", "WORKING_BRANCH"]
