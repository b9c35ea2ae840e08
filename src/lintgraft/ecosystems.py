from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from .bundle import DependencySpec, FileClass, ManifestItem
from .errors import UnknownEcosystemError

EcosystemId = Literal["flutter", "reactnative"]


@dataclass(frozen=True)
class EcosystemSpec:
    ecosystem_id: EcosystemId
    label: str
    # Folder name of the bundle inside the template repository.
    bundle_name: str
    # Every marker must exist in the project root for the ecosystem to match.
    markers: tuple[str, ...]
    manifest: tuple[ManifestItem, ...]


def _items(file_class: FileClass, *paths: str) -> tuple[ManifestItem, ...]:
    return tuple(ManifestItem(p, file_class) for p in paths)


_HOOKS = (
    ".husky/commit-msg",
    ".husky/pre-commit",
    ".husky/pre-push",
    ".husky/pre-commit-branch-protection",
    ".husky/pre-push-branch-protection",
)

_WORKFLOWS = (
    ".github/workflows/quality.yml",
    ".github/workflows/deploy-uat.yml",
    ".github/workflows/deploy-prod.yml",
    ".github/workflows/merge-prod-to-main.yml",
    ".github/workflows/README.md",
)

_DOCS = (
    "docs/engineering/outcode-git-branching-strategy.md",
    "docs/engineering/outcode-husky-hooks-standard.md",
)

VERY_GOOD_ANALYSIS = DependencySpec(
    section="dev_dependencies:",
    key="very_good_analysis",
    value="^10.0.0",
    anchors=("flutter:",),
)

_FLUTTER_MANIFEST: tuple[ManifestItem, ...] = (
    ManifestItem("package.json", FileClass.ROOT, sensitive=True),
    *_items(
        FileClass.ROOT,
        "analysis_options.yaml",
        "commitlint.config.js",
        ".fvmrc",
        ".nvmrc",
    ),
    ManifestItem(".gitignore", FileClass.MERGEABLE_IGNORE),
    *_items(FileClass.HOOK_SCRIPT, *_HOOKS),
    *_items(FileClass.WORKFLOW_DEFINITION, *_WORKFLOWS),
    # Quality scripts are run directly by the hooks, so they get the
    # executable bit like the hooks do.
    *_items(FileClass.HOOK_SCRIPT, "tool/quality.sh", "tool/validate-setup.sh"),
    *_items(FileClass.DOC_PAYLOAD, *_DOCS),
    ManifestItem(
        "pubspec.yaml",
        FileClass.MERGEABLE_MANIFEST_DEPENDENCY,
        dependency=VERY_GOOD_ANALYSIS,
    ),
)

_REACTNATIVE_MANIFEST: tuple[ManifestItem, ...] = (
    ManifestItem("package.json", FileClass.ROOT, sensitive=True),
    *_items(
        FileClass.ROOT,
        ".eslintrc.js",
        "commitlint.config.js",
        ".nvmrc",
    ),
    ManifestItem(".gitignore", FileClass.MERGEABLE_IGNORE),
    *_items(FileClass.HOOK_SCRIPT, *_HOOKS),
    *_items(FileClass.WORKFLOW_DEFINITION, *_WORKFLOWS),
    *_items(FileClass.HOOK_SCRIPT, "tool/quality.sh", "tool/validate-setup.sh"),
    *_items(FileClass.DOC_PAYLOAD, *_DOCS),
)

# Detection priority follows insertion order.
_DEFAULT_SPECS: dict[EcosystemId, EcosystemSpec] = {
    "flutter": EcosystemSpec(
        ecosystem_id="flutter",
        label="Flutter",
        bundle_name="linter-workflow-flutter",
        markers=("pubspec.yaml",),
        manifest=_FLUTTER_MANIFEST,
    ),
    "reactnative": EcosystemSpec(
        ecosystem_id="reactnative",
        label="React Native",
        bundle_name="linter-workflow-reactnative",
        markers=("package.json", "app.json"),
        manifest=_REACTNATIVE_MANIFEST,
    ),
}


def parse_ecosystem_id(raw: Any) -> EcosystemId | None:
    v = str(raw or "").strip().lower()
    for sep in ("-", "_", " "):
        v = v.replace(sep, "")
    if v in _DEFAULT_SPECS:
        return v  # type: ignore[return-value]
    return None


def ecosystem_ids() -> list[EcosystemId]:
    return list(_DEFAULT_SPECS)


def all_specs() -> list[EcosystemSpec]:
    return list(_DEFAULT_SPECS.values())


def ecosystem_spec(raw: Any) -> EcosystemSpec:
    """Look up an ecosystem by name.

    Unlike a folder-name fallback, an unknown name is an error: the template
    repository is never probed for arbitrary directories.
    """
    eid = parse_ecosystem_id(raw)
    if eid is None:
        supported = ", ".join(_DEFAULT_SPECS)
        raise UnknownEcosystemError(
            f"Unknown language: {raw!r}",
            remediation=f"Supported languages: {supported}",
        )
    return _DEFAULT_SPECS[eid]


__all__ = [
    "EcosystemId",
    "EcosystemSpec",
    "VERY_GOOD_ANALYSIS",
    "parse_ecosystem_id",
    "ecosystem_ids",
    "all_specs",
    "ecosystem_spec",
]
