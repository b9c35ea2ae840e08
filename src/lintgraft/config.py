"""Installer configuration resolved from the environment.

CLI options take precedence; ``InstallerConfig.from_env()`` supplies the
values used when an option is not given.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace

from .contracts import DEFAULT_BRANCH, DEFAULT_REPO_URL, EnvContract


def _env_str(name: str, *, default: str = "") -> str:
    return (os.environ.get(name) or default).strip() or default


def _env_bool(name: str, *, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    return default


@dataclass(frozen=True)
class InstallerConfig:
    repo_url: str = DEFAULT_REPO_URL
    branch: str = DEFAULT_BRANCH
    # Empty: choose interactively, or detect from marker files.
    language: str = ""
    assume_yes: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "InstallerConfig":
        return cls(
            repo_url=_env_str(EnvContract.ENV_REPO_URL, default=DEFAULT_REPO_URL),
            branch=_env_str(EnvContract.ENV_BRANCH, default=DEFAULT_BRANCH),
            language=_env_str(EnvContract.ENV_LANGUAGE),
            assume_yes=_env_bool(EnvContract.ENV_ASSUME_YES, default=False),
            log_level=_env_str(EnvContract.ENV_LOG_LEVEL, default="WARNING").upper(),
        )

    def override(self, **values) -> "InstallerConfig":
        """Copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in values.items() if v is not None})


__all__ = ["InstallerConfig"]
