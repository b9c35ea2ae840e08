"""Terminal UI for the installer: rich output and questionary prompts."""
from __future__ import annotations

import logging

import questionary
from questionary import Style
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..contracts import LINTGRAFT_VERSION
from ..ecosystems import EcosystemId, all_specs
from ..merge import SKIP, OutcomeStatus, RunReport, StepResult

console = Console()
err_console = Console(stderr=True)

# ── Styling ──────────────────────────────────────────────────────────────────

LINTGRAFT_STYLE = Style([
    ("qmark", "fg:cyan bold"),
    ("question", "fg:white bold"),
    ("answer", "fg:cyan bold"),
    ("pointer", "fg:cyan bold"),
    ("highlighted", "fg:cyan bold"),
    ("selected", "fg:cyan"),
    ("separator", "fg:#666666"),
    ("instruction", "fg:#888888"),
    ("text", "fg:white"),
    ("disabled", "fg:#666666 italic"),
])

_STATUS_STYLE = {
    OutcomeStatus.SUCCEEDED: "[green]✓[/green]",
    OutcomeStatus.SKIPPED: "[yellow]–[/yellow]",
    OutcomeStatus.FAILED: "[red]✗[/red]",
}

_STEP_LABELS = {
    "fetch": "Fetch bundle",
    "validate": "Validate project",
    "merge": "Merge files",
    "install": "Install packages",
    "hooks": "Register git hooks",
    "git": "Remote and branches",
}


def configure_logging(verbose: bool = False, level: str = "WARNING") -> None:
    """Route library logging through rich; ``-v`` means DEBUG."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, markup=False)],
        force=True,
    )


# ── Flow markers ─────────────────────────────────────────────────────────────

def print_header(target: str) -> None:
    console.print()
    console.print(f"┌  [bold]lintgraft[/bold] [dim]v{LINTGRAFT_VERSION}[/dim]")
    console.print(f"│  [dim]Target: {target}[/dim]")


def print_step(label: str, detail: str = "") -> None:
    console.print(f"│\n◇  [bold]{label}[/bold]")
    if detail:
        console.print(f"│  [dim]{detail}[/dim]")


def print_success(msg: str) -> None:
    console.print(f"│  [green]✓[/green] {msg}")


def print_warn(msg: str) -> None:
    console.print(f"│  [yellow]⚠[/yellow] {msg}")


def print_error(msg: str, remediation: str = "") -> None:
    console.print(f"│  [red]✗[/red] {msg}")
    if remediation:
        console.print(f"│    [dim]{remediation}[/dim]")


def print_box(title: str, lines: list[str]) -> None:
    content = "\n".join(f"  {line}" for line in lines)
    panel = Panel(
        content,
        title=f"[bold]{title}[/bold]",
        title_align="left",
        border_style="cyan",
        padding=(1, 2),
        expand=False,
    )
    console.print("│")
    console.print(panel)


def show_step(step: StepResult) -> None:
    """Live progress callback for the orchestrator."""
    label = _STEP_LABELS.get(step.name, step.name)
    if step.skipped:
        console.print(f"│\n◇  [bold]{label}[/bold] [dim](skipped)[/dim]")
        return
    print_step(label)
    if step.ok:
        print_success(step.detail or "done")
    else:
        for part in (step.detail or "failed").split("; "):
            print_warn(part)


# ── Prompts ──────────────────────────────────────────────────────────────────
# unsafe_ask() lets Ctrl-C propagate as KeyboardInterrupt instead of
# returning None.

def confirm(question: str) -> bool:
    return bool(questionary.confirm(question, default=False, style=LINTGRAFT_STYLE).unsafe_ask())


def ask_text(question: str) -> str:
    return questionary.text(question, style=LINTGRAFT_STYLE).unsafe_ask() or ""


def select_ecosystem(default: EcosystemId | None = None) -> EcosystemId:
    choices = [questionary.Choice(spec.label, value=spec.ecosystem_id) for spec in all_specs()]
    return questionary.select(
        "Which project type is this?",
        choices=choices,
        default=default,
        style=LINTGRAFT_STYLE,
    ).unsafe_ask()


# ── Summary ──────────────────────────────────────────────────────────────────

def render_summary(report: RunReport, verbose: bool = False) -> None:
    table = Table(title="Files", show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("", width=1)
    table.add_column("Path")
    table.add_column("Decision", style="dim")
    table.add_column("Detail", style="dim")
    for outcome in report.outcomes:
        # Unchanged files are noise unless asked for.
        if outcome.decision == SKIP and not verbose:
            continue
        table.add_row(
            _STATUS_STYLE[outcome.status],
            outcome.path,
            str(outcome.decision) if outcome.decision else "",
            outcome.detail,
        )
    console.print("│")
    console.print(table)

    counts = Table.grid(padding=(0, 2))
    counts.add_row("[green]succeeded[/green]", str(len(report.succeeded)))
    counts.add_row("[yellow]skipped[/yellow]", str(len(report.skipped)))
    counts.add_row("[red]failed[/red]", str(len(report.failed)))
    counts.add_row("[yellow]warnings[/yellow]", str(len(report.warnings)))
    console.print(Panel(counts, title="[bold]Summary[/bold]", title_align="left",
                        border_style="red" if report.has_failures else "cyan", expand=False))


__all__ = [
    "console",
    "LINTGRAFT_STYLE",
    "configure_logging",
    "print_header",
    "print_step",
    "print_success",
    "print_warn",
    "print_error",
    "print_box",
    "show_step",
    "confirm",
    "ask_text",
    "select_ecosystem",
    "render_summary",
]
