"""Pytest configuration and fixtures for lintgraft tests."""
from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from lintgraft.bundle import FileClass, load_bundle
from lintgraft.ecosystems import ecosystem_spec

PUBSPEC = """name: demo_app
description: A demo app.
version: 1.0.0+1

environment:
  sdk: ">=3.0.0 <4.0.0"

dependencies:
  flutter:
    sdk: flutter

dev_dependencies:
  flutter_test:
    sdk: flutter
  flutter_lints: ^3.0.0

flutter:
  uses-material-design: true
"""

BUNDLE_GITIGNORE = """# Node
node_modules/
.dart_defines/
# Env
.dev.env
.uat.env
.prod.env
"""

BUNDLE_PACKAGE_JSON = '{\n  "name": "quality-tooling",\n  "private": true\n}\n'


def _payload(rel: str) -> str:
    if rel == ".gitignore":
        return BUNDLE_GITIGNORE
    if rel == "package.json":
        return BUNDLE_PACKAGE_JSON
    if rel.startswith(".husky/") or rel.endswith(".sh"):
        return f"#!/bin/sh\n# {rel}\nexit 0\n"
    return f"# bundle copy of {rel}\n"


def write_bundle(root: Path, ecosystem: str) -> Path:
    """Materialize a staged bundle folder for ``ecosystem`` under ``root``."""
    spec = ecosystem_spec(ecosystem)
    bundle_dir = root / spec.bundle_name
    for item in spec.manifest:
        if item.file_class is FileClass.MERGEABLE_MANIFEST_DEPENDENCY:
            continue
        path = bundle_dir / item.relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_payload(item.relative_path))
    return bundle_dir


def snapshot(root: Path) -> dict[str, bytes]:
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


class FakeRunner:
    """Stands in for run_subprocess; records argv and replays canned results.

    ``results`` maps an argv prefix (tuple) to (returncode, stdout, stderr).
    The longest matching prefix wins; unmatched commands succeed silently.
    """

    def __init__(self, results: dict[tuple[str, ...], tuple[int, str, str]] | None = None):
        self.results = dict(results or {})
        self.calls: list[list[str]] = []
        self.envs: list[dict[str, str] | None] = []

    def __call__(self, argv, cwd=None, env=None, **kwargs):
        self.calls.append(list(argv))
        self.envs.append(env)
        best = None
        for prefix, result in self.results.items():
            if tuple(argv[: len(prefix)]) == prefix and (best is None or len(prefix) > len(best[0])):
                best = (prefix, result)
        code, out, err = best[1] if best else (0, "", "")
        return subprocess.CompletedProcess(argv, code, out, err)

    def ran(self, *prefix: str) -> bool:
        return any(tuple(c[: len(prefix)]) == prefix for c in self.calls)


def lookup_of(*available: str):
    return lambda tool: f"/usr/bin/{tool}" if tool in available else None


class StubFetcher:
    """Fetcher over a prepared bundle root; tracks cleanup."""

    def __init__(self, source_root: Path, error: Exception | None = None):
        self.source_root = source_root
        self.error = error
        self.fetched: list[tuple[str, str, str]] = []
        self.cleaned = False

    def fetch(self, repo_url: str, branch: str, bundle_name: str) -> Path:
        self.fetched.append((repo_url, branch, bundle_name))
        if self.error is not None:
            raise self.error
        return self.source_root / bundle_name

    def cleanup(self) -> None:
        self.cleaned = True


@pytest.fixture
def flutter_project(tmp_path):
    project = tmp_path / "app"
    project.mkdir()
    (project / "pubspec.yaml").write_text(PUBSPEC)
    return project


@pytest.fixture
def rn_project(tmp_path):
    project = tmp_path / "rn_app"
    project.mkdir()
    (project / "package.json").write_text('{\n  "name": "rn-app"\n}\n')
    (project / "app.json").write_text('{\n  "name": "rn-app"\n}\n')
    return project


@pytest.fixture
def bundle_root(tmp_path):
    """A template repository checkout with both ecosystem folders."""
    root = tmp_path / "template-repo"
    write_bundle(root, "flutter")
    write_bundle(root, "reactnative")
    return root


@pytest.fixture
def flutter_bundle(bundle_root):
    spec = ecosystem_spec("flutter")
    return load_bundle(bundle_root / spec.bundle_name, spec.manifest, name=spec.bundle_name)


@pytest.fixture
def rn_bundle(bundle_root):
    spec = ecosystem_spec("reactnative")
    return load_bundle(bundle_root / spec.bundle_name, spec.manifest, name=spec.bundle_name)


@pytest.fixture
def fake_runner():
    return FakeRunner()
