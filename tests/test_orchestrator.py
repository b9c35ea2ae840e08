from __future__ import annotations

from pathlib import Path

import pytest

from lintgraft.contracts import ExitCode
from lintgraft.errors import FetchError
from lintgraft.orchestrator import RunOptions, install, run

from conftest import FakeRunner, StubFetcher, lookup_of, snapshot

URL = "https://example.com/templates.git"


def test_full_run_on_flutter_project(flutter_project: Path, bundle_root: Path) -> None:
    fetcher = StubFetcher(bundle_root)
    runner = FakeRunner({("git", "config", "core.hooksPath"): (0, ".husky\n", "")})
    steps = []

    result = install(
        "flutter", URL, "main", flutter_project,
        RunOptions(on_step=steps.append),
        fetcher=fetcher, runner=runner, lookup=lookup_of("flutter", "npm", "npx", "git"),
    )

    assert result.exit_code is ExitCode.OK
    assert fetcher.fetched == [(URL, "main", "linter-workflow-flutter")]
    assert fetcher.cleaned
    assert [s.name for s in steps] == ["fetch", "validate", "merge", "install", "hooks", "git"]
    assert steps[-1].skipped
    assert runner.ran("flutter", "pub", "get")
    assert runner.ran("npm", "install")
    assert (flutter_project / ".husky" / "commit-msg").is_file()


def test_rerun_is_a_no_op(flutter_project: Path, bundle_root: Path) -> None:
    opts = RunOptions(skip_downstream=True)
    assert run("flutter", URL, "main", flutter_project, opts, fetcher=StubFetcher(bundle_root)) is ExitCode.OK
    once = snapshot(flutter_project)

    result = install("flutter", URL, "main", flutter_project, opts, fetcher=StubFetcher(bundle_root))

    assert result.exit_code is ExitCode.OK
    assert snapshot(flutter_project) == once


def test_language_is_detected_when_not_given(rn_project: Path, bundle_root: Path) -> None:
    fetcher = StubFetcher(bundle_root)
    result = install(None, URL, "main", rn_project, RunOptions(skip_downstream=True), fetcher=fetcher)

    assert result.exit_code is ExitCode.OK
    assert result.project.ecosystem_id == "reactnative"
    assert fetcher.fetched[0][2] == "linter-workflow-reactnative"


def test_fetch_failure_is_fatal_and_touches_nothing(flutter_project: Path, bundle_root: Path) -> None:
    before = snapshot(flutter_project)
    fetcher = StubFetcher(bundle_root, error=FetchError("clone failed", remediation="check the URL"))

    result = install("flutter", URL, "main", flutter_project, fetcher=fetcher)

    assert result.exit_code is ExitCode.FETCH_FAILED
    assert result.error.remediation == "check the URL"
    assert fetcher.cleaned
    assert snapshot(flutter_project) == before


def test_wrong_project_type_is_fatal(rn_project: Path, bundle_root: Path) -> None:
    before = snapshot(rn_project)
    fetcher = StubFetcher(bundle_root)

    result = install("flutter", URL, "main", rn_project, fetcher=fetcher)

    assert result.exit_code is ExitCode.NOT_A_PROJECT
    assert "pubspec.yaml" in result.error.remediation
    assert fetcher.cleaned
    assert snapshot(rn_project) == before


def test_unknown_language_never_fetches(flutter_project: Path, bundle_root: Path) -> None:
    fetcher = StubFetcher(bundle_root)

    result = install("kotlin", URL, "main", flutter_project, fetcher=fetcher)

    assert result.exit_code is ExitCode.UNKNOWN_ECOSYSTEM
    assert fetcher.fetched == []


def test_no_markers_without_language(tmp_path: Path, bundle_root: Path) -> None:
    result = install(None, URL, "main", tmp_path, fetcher=StubFetcher(bundle_root))
    assert result.exit_code is ExitCode.NOT_A_PROJECT


def test_downstream_failures_are_warnings(flutter_project: Path, bundle_root: Path) -> None:
    runner = FakeRunner({("npm", "install"): (1, "", "ERESOLVE")})

    result = install(
        "flutter", URL, "main", flutter_project,
        fetcher=StubFetcher(bundle_root), runner=runner, lookup=lookup_of("npm", "npx", "git"),
    )

    assert result.exit_code is ExitCode.OK
    assert any("ERESOLVE" in w for w in result.report.warnings)
    assert any("Flutter not found" in w for w in result.report.warnings)


def test_failed_file_makes_partial_failure(flutter_project: Path, bundle_root: Path) -> None:
    # A file where the workflows directory should go.
    (flutter_project / ".github").write_text("not a directory\n")
    fetcher = StubFetcher(bundle_root)

    result = install("flutter", URL, "main", flutter_project, RunOptions(skip_downstream=True), fetcher=fetcher)

    assert result.exit_code is ExitCode.PARTIAL_FAILURE
    assert {o.path for o in result.report.failed} == {
        ".github/workflows/quality.yml",
        ".github/workflows/deploy-uat.yml",
        ".github/workflows/deploy-prod.yml",
        ".github/workflows/merge-prod-to-main.yml",
        ".github/workflows/README.md",
    }
    assert (flutter_project / ".husky" / "pre-push").is_file()


def test_interrupt_still_cleans_up(flutter_project: Path, bundle_root: Path) -> None:
    (flutter_project / "package.json").write_text('{"name": "mine"}\n')
    fetcher = StubFetcher(bundle_root)

    def interrupted(question: str) -> bool:
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        install("flutter", URL, "main", flutter_project, RunOptions(prompter=interrupted), fetcher=fetcher)
    assert fetcher.cleaned


def test_git_tail_runs_only_when_interactive(flutter_project: Path, bundle_root: Path) -> None:
    runner = FakeRunner({("git", "remote", "get-url", "origin"): (2, "", "")})
    asked = []

    result = install(
        "flutter", URL, "main", flutter_project,
        RunOptions(
            prompter=lambda q: asked.append(q) or False,
            ask_text=lambda q: "",
            interactive=True,
            skip_downstream=True,
        ),
        fetcher=StubFetcher(bundle_root), runner=runner, lookup=lookup_of("git"),
    )

    assert result.exit_code is ExitCode.OK
    assert asked == ["Create initial commit and standard branches?"]
