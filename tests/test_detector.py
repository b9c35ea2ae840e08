from __future__ import annotations

from pathlib import Path

import pytest

from lintgraft.detector import detect, validate
from lintgraft.ecosystems import ecosystem_spec, parse_ecosystem_id
from lintgraft.errors import NotAProjectError, UnknownEcosystemError

from conftest import snapshot


def test_detects_flutter(flutter_project: Path) -> None:
    project = detect(flutter_project)
    assert project.ecosystem_id == "flutter"
    assert project.root == flutter_project.resolve()


def test_detects_react_native(rn_project: Path) -> None:
    assert detect(rn_project).ecosystem_id == "reactnative"


def test_flutter_wins_when_both_marker_sets_present(rn_project: Path) -> None:
    (rn_project / "pubspec.yaml").write_text("name: hybrid\n")
    assert detect(rn_project).ecosystem_id == "flutter"


def test_package_json_alone_is_not_react_native(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{}\n")
    with pytest.raises(NotAProjectError):
        detect(tmp_path)


def test_no_markers_fails_without_writing(tmp_path: Path) -> None:
    (tmp_path / "README.md").write_text("hello\n")
    before = snapshot(tmp_path)

    with pytest.raises(NotAProjectError) as exc:
        detect(tmp_path)

    assert snapshot(tmp_path) == before
    assert "pubspec.yaml" in exc.value.remediation
    assert "app.json" in exc.value.remediation


def test_parent_directories_are_not_searched(flutter_project: Path) -> None:
    nested = flutter_project / "lib"
    nested.mkdir()
    with pytest.raises(NotAProjectError):
        detect(nested)


def test_validate_names_missing_markers(rn_project: Path) -> None:
    (rn_project / "app.json").unlink()
    with pytest.raises(NotAProjectError) as exc:
        validate(rn_project, "reactnative")
    assert "app.json" in exc.value.remediation


def test_validate_rejects_unknown_language(flutter_project: Path) -> None:
    with pytest.raises(UnknownEcosystemError) as exc:
        validate(flutter_project, "kotlin")
    assert "flutter" in exc.value.remediation


@pytest.mark.parametrize("raw", ["reactnative", "react-native", "React Native", "react_native"])
def test_language_aliases(raw: str) -> None:
    assert parse_ecosystem_id(raw) == "reactnative"


def test_bundle_folder_comes_from_the_table() -> None:
    assert ecosystem_spec("flutter").bundle_name == "linter-workflow-flutter"
    assert ecosystem_spec("reactnative").bundle_name == "linter-workflow-reactnative"
    with pytest.raises(UnknownEcosystemError):
        ecosystem_spec("linter-workflow-flutter")
