"""Project detection by ecosystem marker files."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .ecosystems import EcosystemSpec, all_specs, ecosystem_spec
from .errors import NotAProjectError


@dataclass(frozen=True)
class TargetProject:
    root: Path
    ecosystem: EcosystemSpec

    @property
    def ecosystem_id(self) -> str:
        return self.ecosystem.ecosystem_id


def _missing_markers(root: Path, spec: EcosystemSpec) -> list[str]:
    return [m for m in spec.markers if not (root / m).is_file()]


def _marker_hint(spec: EcosystemSpec) -> str:
    return " + ".join(spec.markers)


def detect(cwd: str | Path) -> TargetProject:
    """Identify the ecosystem of ``cwd`` from its marker files.

    Ecosystems are tried in table order; the first whose markers are all
    present wins. Only ``cwd`` itself is inspected, parents are not searched.
    Read-only.
    """
    root = Path(cwd).resolve()
    for spec in all_specs():
        if not _missing_markers(root, spec):
            return TargetProject(root=root, ecosystem=spec)

    expected = "; ".join(f"{s.label}: {_marker_hint(s)}" for s in all_specs())
    raise NotAProjectError(
        f"{root} is not a recognized project",
        remediation=f"Run from the project root. Expected marker files ({expected})",
    )


def validate(cwd: str | Path, ecosystem: str) -> TargetProject:
    """Check that ``cwd`` is a project of the requested ecosystem."""
    spec = ecosystem_spec(ecosystem)
    root = Path(cwd).resolve()
    missing = _missing_markers(root, spec)
    if missing:
        raise NotAProjectError(
            f"Not in a {spec.label} project directory: {root}",
            remediation=(
                f"Run from your {spec.label} project root "
                f"(where {_marker_hint(spec)} is located). Missing: {', '.join(missing)}"
            ),
        )
    return TargetProject(root=root, ecosystem=spec)


__all__ = ["TargetProject", "detect", "validate"]
