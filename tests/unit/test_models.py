"""Tests for domain models and section-kind classification."""

from dataclasses import replace

import pytest

from report_outliner.core.tree.operations import classify
from report_outliner.models.kind import SectionKind, strip_kind_prefix
from report_outliner.models.section import HistorySnapshot, Project, SectionNode
from tests.unit.sample_data import T1, build_sample_sections


def test_section_is_frozen() -> None:
    section = SectionNode(id="a", name="Intro")
    with pytest.raises(AttributeError):
        section.name = "changed"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("name", "kind"),
    [
        ("Diagram: Pipeline", SectionKind.DIAGRAM),
        ("diagram: x", SectionKind.DIAGRAM),
        ("Figure 3: Result", SectionKind.FIGURE),
        ("figure: screenshot", SectionKind.FIGURE),
        ("Figure 3.2: Accuracy curve", SectionKind.FIGURE),
        ("Table: Results", SectionKind.TABLE),
        ("Flowchart 1: Login", SectionKind.FLOWCHART),
        ("FLOWCHART 2: Checkout", SectionKind.FLOWCHART),
        ("Overview", SectionKind.PLAIN),
        ("Figures and results", SectionKind.PLAIN),
        ("Tables of data", SectionKind.PLAIN),
        ("1.2 Diagram: not a prefix", SectionKind.PLAIN),
    ],
)
def test_classify_by_name_prefix(name: str, kind: SectionKind) -> None:
    assert classify(name) is kind
    assert classify(SectionNode(id="x", name=name)) is kind


def test_kind_is_computed_from_name_and_follows_renames() -> None:
    section = SectionNode(id="a", name="Overview")
    assert section.kind is SectionKind.PLAIN
    assert replace(section, name="Table: Costs").kind is SectionKind.TABLE


@pytest.mark.parametrize(
    ("name", "stripped"),
    [
        ("Diagram: Pipeline", "Pipeline"),
        ("Figure 3: Result", "Result"),
        ("flowchart 1:  Login flow ", "Login flow"),
        ("  Overview ", "Overview"),
    ],
)
def test_strip_kind_prefix(name: str, stripped: str) -> None:
    assert strip_kind_prefix(name) == stripped


def test_snapshot_ignores_project_timestamps() -> None:
    project = Project(id="p", title="T", sections=build_sample_sections())
    later = replace(project, updated_at=T1)
    assert HistorySnapshot.from_project(project) == HistorySnapshot.from_project(later)


def test_snapshot_restores_fields_but_keeps_identity() -> None:
    original = Project(id="p", title="Old title", context="ctx", sections=build_sample_sections())
    snapshot = HistorySnapshot.from_project(original)
    edited = replace(original, title="New title", sections=(), max_depth=4)

    restored = snapshot.restore_into(edited)

    assert restored.id == "p"
    assert restored.title == "Old title"
    assert restored.max_depth == original.max_depth
    assert restored.sections is original.sections
