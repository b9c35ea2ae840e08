"""Bundle model: the staged template files for one ecosystem."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


class FileClass(Enum):
    """How a bundle file is reconciled against the target project."""
    ROOT = "root"
    MERGEABLE_IGNORE = "mergeable_ignore"
    MERGEABLE_MANIFEST_DEPENDENCY = "mergeable_manifest_dependency"
    HOOK_SCRIPT = "hook_script"
    WORKFLOW_DEFINITION = "workflow_definition"
    DOC_PAYLOAD = "doc_payload"


@dataclass(frozen=True)
class DependencySpec:
    """A dependency line to inject into the project manifest."""
    section: str
    key: str
    value: str
    # Top-level sections a newly created section is placed in front of.
    anchors: tuple[str, ...] = ()


@dataclass(frozen=True)
class ManifestItem:
    """One declared entry of an ecosystem's bundle manifest."""
    relative_path: str
    file_class: FileClass
    sensitive: bool = False
    dependency: DependencySpec | None = None


@dataclass(frozen=True)
class BundleEntry:
    relative_path: str
    file_class: FileClass
    # None for manifest dependency entries, which carry no payload file.
    source: Path | None = None
    sensitive: bool = False
    dependency: DependencySpec | None = None

    def read_bytes(self) -> bytes:
        if self.source is None:
            raise ValueError(f"{self.relative_path} has no payload file")
        return self.source.read_bytes()


@dataclass(frozen=True)
class Bundle:
    """Ordered, immutable set of entries staged after a fetch."""
    name: str
    root: Path
    entries: tuple[BundleEntry, ...]

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def paths(self) -> list[str]:
        return [e.relative_path for e in self.entries]


def load_bundle(root: Path, manifest: Iterable[ManifestItem], name: str | None = None) -> Bundle:
    """Build a Bundle from a staged directory, in declared manifest order.

    Declared payload files that the staged directory does not contain are
    left out. Dependency entries are always kept: their target is the
    project's own manifest, not a payload file.
    """
    root = Path(root)
    entries: list[BundleEntry] = []
    for item in manifest:
        if item.file_class is FileClass.MERGEABLE_MANIFEST_DEPENDENCY:
            if item.dependency is None:
                raise ValueError(f"{item.relative_path}: dependency entry without DependencySpec")
            entries.append(BundleEntry(
                relative_path=item.relative_path,
                file_class=item.file_class,
                dependency=item.dependency,
            ))
            continue

        source = root / item.relative_path
        if not source.is_file():
            logger.debug("bundle %s: %s not shipped, skipping", root.name, item.relative_path)
            continue
        entries.append(BundleEntry(
            relative_path=item.relative_path,
            file_class=item.file_class,
            source=source,
            sensitive=item.sensitive,
        ))

    return Bundle(name=name or root.name, root=root, entries=tuple(entries))


__all__ = [
    "FileClass",
    "DependencySpec",
    "ManifestItem",
    "BundleEntry",
    "Bundle",
    "load_bundle",
]
