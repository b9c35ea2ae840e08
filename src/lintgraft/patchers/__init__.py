"""Structural patchers: targeted, non-parsing edits of project files."""
from __future__ import annotations

from .env_args import dart_define_args, to_build_args, write_defines_file
from .ignore_file import IgnoreMergeResult, merge_ignore_file
from .manifest import PatchResult, inject_dependency

__all__ = [
    "PatchResult",
    "inject_dependency",
    "IgnoreMergeResult",
    "merge_ignore_file",
    "to_build_args",
    "dart_define_args",
    "write_defines_file",
]
