"""Downstream tool steps run after the merge: package install and hook registration.

Every step reports failure through ``DownstreamCommandError``. The public
entry points collect those into warning strings so one failing tool does not
stop the next; none of them is fatal to a run.
"""
from __future__ import annotations

import logging
from pathlib import Path

from .contracts import TargetLayout
from .errors import DownstreamCommandError
from .redact import redact_secrets
from .utils import CommandRunner, ToolLookup, output_tail, run_subprocess, which

logger = logging.getLogger(__name__)


class Downstream:
    """Runs package-manager and git/husky commands inside one project root."""

    def __init__(
        self,
        root: str | Path,
        runner: CommandRunner = run_subprocess,
        lookup: ToolLookup = which,
    ):
        self.root = Path(root)
        self.runner = runner
        self.lookup = lookup

    def _require(self, tool: str, remediation: str) -> None:
        if not self.lookup(tool):
            raise DownstreamCommandError(f"{tool} is not installed or not on PATH", remediation=remediation)

    def run(self, argv: list[str], remediation: str = "", env: dict[str, str] | None = None):
        """Run ``argv`` in the project root; non-zero exit raises."""
        logger.debug("running: %s", " ".join(argv))
        try:
            proc = self.runner(argv, cwd=self.root, env=env)
        except FileNotFoundError as e:
            raise DownstreamCommandError(f"{argv[0]} not found: {e}", remediation=remediation) from e
        if proc.returncode != 0:
            tail = redact_secrets(output_tail(proc))
            msg = f"`{' '.join(argv)}` exited with {proc.returncode}"
            if tail:
                msg += f": {tail}"
            raise DownstreamCommandError(msg, remediation=remediation, returncode=proc.returncode)
        return proc

    # -- package install ----------------------------------------------------

    def flutter_pub_get(self) -> str:
        """Fetch Dart packages, through fvm when the project pins a version.

        Returns the command used.
        """
        remediation = "Run 'flutter pub get' manually"
        if self.lookup("fvm") and (self.root / TargetLayout.FVM_CONFIG).is_file():
            argv = ["fvm", "flutter", "pub", "get"]
        elif self.lookup("flutter"):
            argv = ["flutter", "pub", "get"]
        else:
            raise DownstreamCommandError(
                "Flutter not found, skipping pub get",
                remediation=remediation,
            )
        self.run(argv, remediation=remediation)
        return " ".join(argv)

    def npm_install(self) -> None:
        remediation = "Install Node.js (https://nodejs.org) and run 'npm install'"
        self._require("npm", remediation)
        self.run(["npm", "install"], remediation="Run 'npm install' manually")

    def install_packages(self, ecosystem_id: str) -> list[str]:
        """Install dependencies for ``ecosystem_id``; returns warnings."""
        steps = [self.npm_install]
        if ecosystem_id == "flutter":
            steps.insert(0, self.flutter_pub_get)
        return self._collect(steps)

    # -- hook registration --------------------------------------------------

    def ensure_git_repo(self) -> bool:
        """``git init`` when the project is not a repository. True if created."""
        if (self.root / TargetLayout.GIT_DIR).exists():
            return False
        self._require("git", "Install git and run 'git init'")
        self.run(["git", "init"], remediation="Run 'git init' manually")
        logger.info("initialized git repository in %s", self.root)
        return True

    def hooks_path(self) -> str:
        try:
            proc = self.runner(["git", "config", "core.hooksPath"], cwd=self.root, env=None)
        except FileNotFoundError as e:
            raise DownstreamCommandError(f"git not found: {e}", remediation="Install git") from e
        # `git config` exits 1 when the key is unset.
        return (proc.stdout or "").strip() if proc.returncode == 0 else ""

    def set_hooks_path(self) -> None:
        self.run(
            ["git", "config", "core.hooksPath", TargetLayout.HUSKY_DIR],
            remediation=f"Run 'git config core.hooksPath {TargetLayout.HUSKY_DIR}'",
        )

    def husky_install(self) -> None:
        """Register hooks with husky, or point git at .husky directly."""
        try:
            self._require("npx", "Install Node.js to get npx")
            self.run(["npx", "husky", "install"])
        except DownstreamCommandError as e:
            logger.info("husky install failed (%s), setting core.hooksPath directly", e)
            self.set_hooks_path()

    def verify_hooks_path(self) -> None:
        if TargetLayout.HUSKY_DIR not in self.hooks_path():
            logger.info("core.hooksPath does not include %s, fixing", TargetLayout.HUSKY_DIR)
            self.set_hooks_path()

    def register_hooks(self) -> list[str]:
        """Initialize git if needed and activate the .husky hooks; returns warnings."""
        try:
            self.ensure_git_repo()
        except DownstreamCommandError as e:
            # Nothing below works without a repository.
            return [self._describe(e)]
        return self._collect([self.husky_install, self.verify_hooks_path])

    # -- helpers ------------------------------------------------------------

    @staticmethod
    def _describe(e: DownstreamCommandError) -> str:
        return f"{e} ({e.remediation})" if e.remediation else str(e)

    def _collect(self, steps) -> list[str]:
        warnings: list[str] = []
        for step in steps:
            try:
                step()
            except DownstreamCommandError as e:
                logger.warning("%s", e)
                warnings.append(self._describe(e))
        return warnings


def install_packages(root: str | Path, ecosystem_id: str, runner: CommandRunner = run_subprocess,
                     lookup: ToolLookup = which) -> list[str]:
    return Downstream(root, runner, lookup).install_packages(ecosystem_id)


def register_hooks(root: str | Path, runner: CommandRunner = run_subprocess,
                   lookup: ToolLookup = which) -> list[str]:
    return Downstream(root, runner, lookup).register_hooks()


__all__ = ["Downstream", "install_packages", "register_hooks"]
