"""lintgraft contracts - stable names shared by the installer and its CLI.

Contract Categories:
- VERSION: package version
- CLI_SURFACE: exit codes that CI scripts may rely on
- ENVIRONMENT: environment variables read by the configuration layer
- TARGET_LAYOUT: files and directories the installer touches in a project
"""
from __future__ import annotations

from enum import IntEnum

# =============================================================================
# VERSION CONTRACTS
# =============================================================================

LINTGRAFT_VERSION = "0.3.0"


# =============================================================================
# CLI SURFACE CONTRACT
# =============================================================================

class ExitCode(IntEnum):
    """
    Stable exit codes for CI integration.

    New codes may be added, but existing codes are immutable.
    """
    OK = 0                  # Run completed (downstream warnings allowed)
    ABORTED = 1             # Interrupted by the user
    FETCH_FAILED = 2        # Bundle could not be fetched
    NOT_A_PROJECT = 3       # Ecosystem marker files missing
    UNKNOWN_ECOSYSTEM = 4   # Language name not in the ecosystem table
    PARTIAL_FAILURE = 5     # At least one file failed to reconcile


# =============================================================================
# ENVIRONMENT CONTRACT
# =============================================================================

class EnvContract:
    """Environment variables understood by ``lintgraft.config``."""
    ENV_REPO_URL = "LINTGRAFT_REPO_URL"
    ENV_BRANCH = "LINTGRAFT_BRANCH"
    ENV_LANGUAGE = "LINTGRAFT_LANGUAGE"
    ENV_ASSUME_YES = "LINTGRAFT_ASSUME_YES"
    ENV_LOG_LEVEL = "LINTGRAFT_LOG_LEVEL"

    # Exported to `git push` so the branch-protection hooks let the
    # initial push of protected branches through.
    ENV_ALLOW_PROTECTED_BRANCHES = "ALLOW_PROTECTED_BRANCHES"


DEFAULT_REPO_URL = "https://github.com/aShrestha-Outcode/linter-workflow-package.git"
DEFAULT_BRANCH = "main"


# =============================================================================
# TARGET LAYOUT CONTRACT
# =============================================================================

class TargetLayout:
    """Paths inside the target project, relative to its root."""
    HUSKY_DIR = ".husky"
    GIT_DIR = ".git"
    NODE_MODULES = "node_modules"
    DART_TOOL_DIR = ".dart_tool"
    FVM_CONFIG = ".fvmrc"
    DART_DEFINES_DIR = ".dart_defines"

    # Marker line written once above entries appended to an ignore file
    IGNORE_MARKER = "# Added by lintgraft"

    # env name -> env file consumed by the build scripts
    ENV_FILES = {
        "dev": ".dev.env",
        "uat": ".uat.env",
        "prod": ".prod.env",
    }


__all__ = [
    "LINTGRAFT_VERSION",
    "DEFAULT_REPO_URL",
    "DEFAULT_BRANCH",
    "ExitCode",
    "EnvContract",
    "TargetLayout",
]
