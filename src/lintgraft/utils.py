"""Subprocess and tool lookup helpers shared by the fetcher and downstream steps."""
from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Optional

# (argv, cwd=..., env=...) -> CompletedProcess. Swapped for a fake in tests.
CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]
ToolLookup = Callable[[str], Optional[str]]


def run_subprocess(
    cmd: list[str],
    cwd: str | Path | None = None,
    env: dict[str, str] | None = None,
    capture_output: bool = True,
    text: bool = True,
    check: bool = False,
    **kwargs,
) -> "subprocess.CompletedProcess[str]":
    """Run ``cmd`` and return the completed process.

    Enforces argv discipline (list only, no shell strings). There is no
    timeout: package installs and clones can legitimately take minutes and
    Ctrl-C is the only cancellation.

    ``env`` entries are layered on top of the current environment rather than
    replacing it.

    Raises:
        TypeError: If cmd is not a list
        FileNotFoundError: If the executable does not exist
        subprocess.CalledProcessError: If check=True and non-zero exit
    """
    if isinstance(cmd, (str, bytes)):
        raise TypeError(
            "cmd must be a list of args, not a shell string. "
            "Pass ['git', 'status'] not 'git status'"
        )

    full_env = None
    if env:
        full_env = dict(os.environ)
        full_env.update(env)

    return subprocess.run(
        cmd,
        cwd=str(cwd) if cwd is not None else None,
        env=full_env,
        capture_output=capture_output,
        text=text,
        check=check,
        **kwargs,
    )


def which(tool: str) -> str | None:
    return shutil.which(tool)


def output_tail(proc: "subprocess.CompletedProcess[str]", limit: int = 5) -> str:
    """Last few non-empty lines of stderr (or stdout) for error messages."""
    text = (proc.stderr or "").strip() or (proc.stdout or "").strip()
    lines = [ln for ln in text.splitlines() if ln.strip()]
    return "\n".join(lines[-limit:])


__all__ = ["CommandRunner", "ToolLookup", "run_subprocess", "which", "output_tail"]
