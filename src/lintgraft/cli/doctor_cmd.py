"""lintgraft doctor - Check that an installed project is wired up correctly.

Usage:
    lintgraft doctor              # Check current directory
    lintgraft doctor /path/to/project --json
"""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path

import click

from ..contracts import TargetLayout
from ..detector import detect
from ..ecosystems import VERY_GOOD_ANALYSIS
from ..errors import NotAProjectError
from ..patchers.lines import read_lines
from ..patchers.manifest import find_key
from ..utils import run_subprocess, which

CYAN = "\033[96m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
RESET = "\033[0m"

OK = "ok"
WARN = "warn"
ERROR = "error"

_HOOKS = ("pre-commit", "pre-push", "commit-msg")

_REQUIRED_FILES = {
    "flutter": ("package.json", "pubspec.yaml", "analysis_options.yaml", "commitlint.config.js", "tool/quality.sh"),
    "reactnative": ("package.json", "app.json", "commitlint.config.js", "tool/quality.sh"),
}


@dataclass
class Check:
    label: str
    status: str
    detail: str = ""


def _tool_checks(ecosystem_id: str) -> list[Check]:
    checks = []
    for tool, hint in (("node", "https://nodejs.org"), ("npm", "comes with Node.js"), ("git", "https://git-scm.com")):
        path = which(tool)
        checks.append(Check(tool, OK if path else ERROR, path or f"not installed ({hint})"))
    if ecosystem_id == "flutter":
        found = which("flutter") or which("dart")
        checks.append(Check("flutter/dart", OK if found else ERROR, found or "not installed (https://flutter.dev)"))
        if not which("fvm"):
            checks.append(Check("fvm", WARN, "not installed (optional, pins the Flutter version)"))
    return checks


def _hooks_path(root: Path) -> str:
    try:
        proc = run_subprocess(["git", "config", "core.hooksPath"], cwd=root)
    except FileNotFoundError:
        return ""
    return proc.stdout.strip() if proc.returncode == 0 else ""


def _executable(path: Path) -> bool:
    return path.is_file() and (os.name == "nt" or os.access(path, os.X_OK))


def run_checks(root: Path) -> tuple[str | None, list[Check]]:
    """Return (ecosystem id, checks) for the project at ``root``."""
    try:
        project = detect(root)
    except NotAProjectError as e:
        return None, [Check("project", ERROR, f"{e}. {e.remediation}")]

    eid = project.ecosystem_id
    checks = [Check("project", OK, project.ecosystem.label)]
    checks.extend(_tool_checks(eid))

    for rel in _REQUIRED_FILES[eid]:
        exists = (root / rel).is_file()
        checks.append(Check(rel, OK if exists else ERROR, "found" if exists else "missing (run: lintgraft install)"))

    husky = root / TargetLayout.HUSKY_DIR
    checks.append(Check(".husky", OK if husky.is_dir() else ERROR, "found" if husky.is_dir() else "missing"))

    node_modules = root / TargetLayout.NODE_MODULES
    if not node_modules.is_dir():
        checks.append(Check("node_modules", ERROR, "missing (run: npm install)"))
    elif not (node_modules / "husky").is_dir():
        checks.append(Check("node_modules", ERROR, "husky not installed (run: npm install)"))
    else:
        checks.append(Check("node_modules", OK, "husky installed"))

    if eid == "flutter":
        dart_tool = (root / TargetLayout.DART_TOOL_DIR).is_dir()
        checks.append(Check(".dart_tool", OK if dart_tool else WARN,
                            "found" if dart_tool else "missing (run: flutter pub get)"))
        pubspec = root / "pubspec.yaml"
        has_dep = find_key(read_lines(pubspec), VERY_GOOD_ANALYSIS.key) is not None
        checks.append(Check(VERY_GOOD_ANALYSIS.key, OK if has_dep else ERROR,
                            "in pubspec.yaml" if has_dep else "not in pubspec.yaml (run: lintgraft install)"))

    hooks_path = _hooks_path(root)
    configured = TargetLayout.HUSKY_DIR in hooks_path
    checks.append(Check("core.hooksPath", OK if configured else ERROR,
                        hooks_path if configured else
                        f"not set to {TargetLayout.HUSKY_DIR} (run: git config core.hooksPath {TargetLayout.HUSKY_DIR})"))

    for hook in _HOOKS:
        path = husky / hook
        if not path.is_file():
            checks.append(Check(f"hook {hook}", ERROR, "missing"))
        elif not _executable(path):
            checks.append(Check(f"hook {hook}", ERROR, f"not executable (run: chmod +x {path.relative_to(root)})"))
        else:
            checks.append(Check(f"hook {hook}", OK, "executable"))

    return eid, checks


def _echo(check: Check) -> None:
    mark = {OK: f"{GREEN}✓{RESET}", WARN: f"{YELLOW}⚠{RESET}", ERROR: f"{RED}✗{RESET}"}[check.status]
    click.echo(f"  {check.label + ':':<22}{mark} {check.detail}")


@click.command("doctor")
@click.argument("path", type=click.Path(exists=True, file_okay=False), default=".")
@click.option("--json", "output_json", is_flag=True, help="Output JSON")
def doctor_command(path: str, output_json: bool) -> None:
    """Check that the code quality setup of a project is complete.

    Checks required tools, installed files, git hooks and the
    manifest dependency. Exits 1 when any check fails.

    \b
    Examples:
        lintgraft doctor
        lintgraft doctor /path/to/project
    """
    target = Path(path).expanduser().resolve()
    eid, checks = run_checks(target)
    errors = [c for c in checks if c.status == ERROR]
    warnings = [c for c in checks if c.status == WARN]

    if output_json:
        click.echo(json.dumps({
            "target": str(target),
            "ecosystem": eid,
            "ok": not errors,
            "checks": [asdict(c) for c in checks],
        }, indent=2))
    else:
        click.echo()
        click.echo(f"{CYAN}{'═' * 55}{RESET}")
        click.echo(f"{CYAN}  LINTGRAFT DOCTOR{RESET}")
        click.echo(f"{CYAN}{'═' * 55}{RESET}")
        click.echo(f"  Project:              {target}")
        click.echo()
        for check in checks:
            _echo(check)
        click.echo()
        if errors:
            click.echo(f"  {RED}{len(errors)} error(s){RESET}, {len(warnings)} warning(s)")
        else:
            click.echo(f"  {GREEN}All checks passed{RESET}" + (f" ({len(warnings)} warning(s))" if warnings else ""))
        click.echo(f"{CYAN}{'═' * 55}{RESET}")

    if errors:
        raise SystemExit(1)
