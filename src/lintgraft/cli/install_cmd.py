"""lintgraft install - merge the lint/hook/workflow bundle into a project.

Usage:
    lintgraft install                       # detect or ask for the project type
    lintgraft install --language flutter
    lintgraft install --yes --no-input      # CI: never prompt, overwrite package.json
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from ..config import InstallerConfig
from ..contracts import ExitCode
from ..fetcher import LocalBundleFetcher
from ..merge import accept_all, decline_all
from ..orchestrator import InstallResult, RunOptions, install
from ..redact import redact_secrets, redact_url
from . import tui


def _is_interactive(no_input: bool, json_output: bool) -> bool:
    return not no_input and not json_output and sys.stdin.isatty() and sys.stdout.isatty()


def _payload(result: InstallResult, target: Path, repo_url: str, branch: str) -> dict:
    payload = {
        "exit_code": int(result.exit_code),
        "target": str(target),
        "ecosystem": result.project.ecosystem_id if result.project else None,
        "repo_url": redact_url(repo_url),
        "branch": branch,
    }
    payload.update(result.report.to_dict())
    if result.error is not None:
        payload["error"] = {
            "type": type(result.error).__name__,
            "message": redact_secrets(str(result.error)),
            "remediation": result.error.remediation,
        }
    return payload


@click.command("install")
@click.argument("path", type=click.Path(exists=True, file_okay=False), default=".")
@click.option("--language", "-l", help="Project type: flutter or reactnative (default: detect)")
@click.option("--repo-url", help="Template repository URL")
@click.option("--branch", "-b", help="Template repository branch")
@click.option(
    "--from-dir",
    type=click.Path(exists=True, file_okay=False),
    help="Use a local checkout of the template repository instead of cloning",
)
@click.option("--yes", "-y", "assume_yes", is_flag=True,
              help="Overwrite package.json without asking")
@click.option("--no-input", is_flag=True, help="Never prompt (keeps package.json unless --yes)")
@click.option("--skip-downstream", is_flag=True, help="Do not run package install or hook registration")
@click.option("--skip-git-setup", is_flag=True, help="Do not offer remote/branch setup")
@click.option("--json", "json_output", is_flag=True, help="Output JSON summary")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def install_command(
    path: str,
    language: str | None,
    repo_url: str | None,
    branch: str | None,
    from_dir: str | None,
    assume_yes: bool,
    no_input: bool,
    skip_downstream: bool,
    skip_git_setup: bool,
    json_output: bool,
    verbose: bool,
) -> None:
    """Install code quality tooling into a Flutter or React Native project.

    Safe to re-run: existing files are merged, never duplicated.

    \b
    Environment:
        LINTGRAFT_REPO_URL, LINTGRAFT_BRANCH, LINTGRAFT_LANGUAGE,
        LINTGRAFT_ASSUME_YES, LINTGRAFT_LOG_LEVEL
    """
    config = InstallerConfig.from_env().override(
        repo_url=repo_url,
        branch=branch,
        language=language,
        assume_yes=assume_yes or None,
    )
    tui.configure_logging(verbose, config.log_level)

    target = Path(path).resolve()
    interactive = _is_interactive(no_input, json_output)

    if config.assume_yes:
        prompter = accept_all
    elif interactive:
        prompter = tui.confirm
    else:
        prompter = decline_all

    fetcher = LocalBundleFetcher(from_dir) if from_dir else None

    try:
        if interactive:
            tui.print_header(str(target))
        chosen = config.language or None
        if chosen is None and interactive:
            chosen = tui.select_ecosystem()

        options = RunOptions(
            prompter=prompter,
            ask_text=tui.ask_text if interactive else None,
            interactive=interactive,
            skip_downstream=skip_downstream,
            skip_git_setup=skip_git_setup,
            on_step=tui.show_step if not json_output else None,
        )
        result = install(chosen, config.repo_url, config.branch, target, options, fetcher=fetcher)
    except KeyboardInterrupt:
        click.echo("\nAborted.")
        raise SystemExit(int(ExitCode.ABORTED))

    if json_output:
        click.echo(json.dumps(_payload(result, target, config.repo_url, config.branch), indent=2))
    elif result.error is not None:
        tui.print_error(redact_secrets(str(result.error)), result.error.remediation)
    else:
        tui.render_summary(result.report, verbose=verbose)
        if result.report.warnings:
            tui.print_box("Warnings", [redact_secrets(w) for w in result.report.warnings])
        if result.exit_code == ExitCode.OK:
            tui.print_box("Next steps", [
                "lintgraft doctor          verify the setup",
                "npm run quality:check     run the quality checks",
                "Protect main, develop, uat and prod in your Git host settings",
            ])

    if result.exit_code != ExitCode.OK:
        raise SystemExit(int(result.exit_code))
