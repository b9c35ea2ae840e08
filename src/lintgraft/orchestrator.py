"""Run sequencing: fetch, validate, merge, downstream tools, git tail, cleanup.

Usage:
    from lintgraft.orchestrator import RunOptions, install

    result = install("flutter", repo_url, "main", project_dir, RunOptions(prompter=ask))
    raise SystemExit(int(result.exit_code))

Fatal errors (fetch, detection, unknown ecosystem) stop the run before the
project is touched and map to their own exit code. Failed files make the run
a partial failure. Downstream problems are warnings only. The staging
directory is removed on every exit path, including Ctrl-C.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .bundle import load_bundle
from .contracts import ExitCode
from .detector import TargetProject, detect, validate
from .downstream import Downstream
from .ecosystems import EcosystemSpec, ecosystem_spec
from .errors import FetchError, LintgraftError, NotAProjectError, UnknownEcosystemError
from .fetcher import BundleFetcher, GitBundleFetcher
from .git_setup import GitSetup, TextAsker
from .merge import MergeOptions, Prompter, RunReport, StepResult, decline_all, reconcile
from .utils import CommandRunner, ToolLookup, run_subprocess, which

logger = logging.getLogger(__name__)

STEP_FETCH = "fetch"
STEP_VALIDATE = "validate"
STEP_MERGE = "merge"
STEP_INSTALL = "install"
STEP_HOOKS = "hooks"
STEP_GIT = "git"

_FATAL_CODES: dict[type, ExitCode] = {
    FetchError: ExitCode.FETCH_FAILED,
    NotAProjectError: ExitCode.NOT_A_PROJECT,
    UnknownEcosystemError: ExitCode.UNKNOWN_ECOSYSTEM,
}


@dataclass
class RunOptions:
    prompter: Prompter = decline_all
    # Required for the git tail; without it the tail is skipped.
    ask_text: TextAsker | None = None
    interactive: bool = False
    skip_downstream: bool = False
    skip_git_setup: bool = False
    # Called after every step, for live progress output.
    on_step: Callable[[StepResult], None] | None = None


@dataclass
class InstallResult:
    exit_code: ExitCode
    report: RunReport = field(default_factory=RunReport)
    project: TargetProject | None = None
    error: LintgraftError | None = None


class Orchestrator:
    def __init__(
        self,
        fetcher: BundleFetcher | None = None,
        runner: CommandRunner = run_subprocess,
        lookup: ToolLookup = which,
    ):
        self.runner = runner
        self.lookup = lookup
        self.fetcher = fetcher or GitBundleFetcher(runner=runner, lookup=lookup)

    def _step(self, report: RunReport, options: RunOptions, name: str, ok: bool,
              detail: str = "", skipped: bool = False) -> None:
        step = StepResult(name=name, ok=ok, detail=detail, skipped=skipped)
        report.steps.append(step)
        if options.on_step is not None:
            options.on_step(step)

    def _resolve(self, language: str | None, root: Path) -> EcosystemSpec:
        if language:
            return ecosystem_spec(language)
        return detect(root).ecosystem

    def install(
        self,
        language: str | None,
        repo_url: str,
        branch: str,
        target_root: str | Path,
        options: RunOptions | None = None,
    ) -> InstallResult:
        options = options or RunOptions()
        root = Path(target_root).resolve()
        report = RunReport()
        logger.info("installing %s into %s", language or "detected ecosystem", root)
        result = InstallResult(exit_code=ExitCode.OK, report=report)

        try:
            try:
                spec = self._resolve(language, root)
                bundle_dir = self.fetcher.fetch(repo_url, branch, spec.bundle_name)
                self._step(report, options, STEP_FETCH, True, spec.bundle_name)
                project = validate(root, spec.ecosystem_id)
                self._step(report, options, STEP_VALIDATE, True, project.ecosystem.label)
            except LintgraftError as e:
                if type(e) not in _FATAL_CODES:
                    raise
                name = STEP_FETCH if isinstance(e, FetchError) else STEP_VALIDATE
                self._step(report, options, name, False, str(e))
                result.error = e
                result.exit_code = _FATAL_CODES[type(e)]
                return result

            result.project = project
            bundle = load_bundle(bundle_dir, spec.manifest, name=spec.bundle_name)
            merged = reconcile(bundle, root, MergeOptions(prompter=options.prompter))
            report.outcomes.extend(merged.outcomes)
            self._step(
                report, options, STEP_MERGE, not merged.has_failures,
                f"{len(merged.succeeded)} updated, {len(merged.skipped)} skipped, {len(merged.failed)} failed",
            )

            self._downstream(project, report, options)
            self._git_tail(project, report, options)

            if report.has_failures:
                result.exit_code = ExitCode.PARTIAL_FAILURE
            return result
        finally:
            self.fetcher.cleanup()

    def _downstream(self, project: TargetProject, report: RunReport, options: RunOptions) -> None:
        if options.skip_downstream:
            self._step(report, options, STEP_INSTALL, True, "skipped", skipped=True)
            self._step(report, options, STEP_HOOKS, True, "skipped", skipped=True)
            return
        tools = Downstream(project.root, self.runner, self.lookup)

        warnings = tools.install_packages(project.ecosystem_id)
        report.warnings.extend(warnings)
        self._step(report, options, STEP_INSTALL, not warnings, "; ".join(warnings))

        warnings = tools.register_hooks()
        report.warnings.extend(warnings)
        self._step(report, options, STEP_HOOKS, not warnings, "; ".join(warnings))

    def _git_tail(self, project: TargetProject, report: RunReport, options: RunOptions) -> None:
        if options.skip_git_setup or not options.interactive or options.ask_text is None:
            self._step(report, options, STEP_GIT, True, "skipped", skipped=True)
            return
        setup = GitSetup(project.root, options.prompter, options.ask_text, self.runner, self.lookup)
        warnings = setup.run()
        report.warnings.extend(warnings)
        self._step(report, options, STEP_GIT, not warnings, "; ".join(setup.actions + warnings))


def install(
    language: str | None,
    repo_url: str,
    branch: str,
    target_root: str | Path,
    options: RunOptions | None = None,
    fetcher: BundleFetcher | None = None,
    runner: CommandRunner = run_subprocess,
    lookup: ToolLookup = which,
) -> InstallResult:
    return Orchestrator(fetcher, runner, lookup).install(language, repo_url, branch, target_root, options)


def run(
    language: str | None,
    repo_url: str,
    branch: str,
    target_root: str | Path,
    options: RunOptions | None = None,
    fetcher: BundleFetcher | None = None,
    runner: CommandRunner = run_subprocess,
    lookup: ToolLookup = which,
) -> ExitCode:
    return install(language, repo_url, branch, target_root, options, fetcher, runner, lookup).exit_code


__all__ = [
    "STEP_FETCH",
    "STEP_VALIDATE",
    "STEP_MERGE",
    "STEP_INSTALL",
    "STEP_HOOKS",
    "STEP_GIT",
    "RunOptions",
    "InstallResult",
    "Orchestrator",
    "install",
    "run",
]
