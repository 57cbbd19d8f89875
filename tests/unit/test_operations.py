"""Tests for structural section-tree operations."""

import pytest

from report_outliner.core.tree.operations import (
    delete,
    ensure_default_subsection,
    find,
    insert_child,
    numbering,
    update,
    walk,
)
from report_outliner.models.kind import SectionKind
from report_outliner.models.section import SectionNode, Sections, SectionSeed
from tests.unit.sample_data import T0, T1


def test_find_returns_nested_section(sample_sections: Sections) -> None:
    found = find(sample_sections, "stats")
    assert found is not None
    assert found.name == "Table: Dataset statistics"


def test_find_missing_id_returns_none(sample_sections: Sections) -> None:
    assert find(sample_sections, "nope") is None


@pytest.mark.parametrize("op", ["update", "delete", "insert"])
def test_missing_id_returns_same_tuple(sample_sections: Sections, op: str) -> None:
    """Operations on an unknown id are no-ops signalled by reference equality."""
    if op == "update":
        result = update(sample_sections, "nope", name="X")
    elif op == "delete":
        result = delete(sample_sections, "nope")
    else:
        result = insert_child(sample_sections, "nope", SectionSeed(name="X"))
    assert result is sample_sections


def test_update_changes_target_and_refreshes_ancestor_path(sample_sections: Sections) -> None:
    result = update(sample_sections, "stats", now=T1, content="rows: 42")

    intro, methods, concl = result
    data = methods.children[0]
    stats = data.children[0]

    assert stats.content == "rows: 42"
    assert stats.updated_at == T1
    assert data.updated_at == T1
    assert methods.updated_at == T1
    # Untouched fields survive
    assert stats.prompt == "prompt stats"
    assert stats.id == "stats"


def test_update_preserves_identity_of_untouched_subtrees(sample_sections: Sections) -> None:
    """Only the root-to-target path is rebuilt; sibling branches stay the same objects."""
    result = update(sample_sections, "bg", now=T1, prompt="new prompt")

    assert result is not sample_sections
    assert result[1] is sample_sections[1]  # methods branch
    assert result[2] is sample_sections[2]  # conclusion
    assert result[0] is not sample_sections[0]
    assert result[0].children[1] is sample_sections[0].children[1]  # arch, sibling of bg
    assert result[0].updated_at == T1
    assert sample_sections[0].children[0].prompt == "prompt bg"  # input untouched


def test_update_rejects_structural_fields(sample_sections: Sections) -> None:
    with pytest.raises(ValueError, match="children"):
        update(sample_sections, "bg", children=())
    with pytest.raises(ValueError, match="id"):
        update(sample_sections, "bg", id="other")


def test_rename_reclassifies_section(sample_sections: Sections) -> None:
    result = update(sample_sections, "bg", name="Figure 2: Background photo")
    bg = find(result, "bg")
    assert bg is not None
    assert bg.kind is SectionKind.FIGURE


def test_insert_child_appends_by_default(sample_sections: Sections) -> None:
    seed = SectionSeed(name="Motivation")
    result = insert_child(sample_sections, "intro", seed, now=T1)

    intro = result[0]
    assert [c.name for c in intro.children] == ["Background", "Diagram: Architecture", "Motivation"]
    new = intro.children[-1]
    assert new.id == seed.id
    assert new.updated_at == T1
    assert new.content == ""
    assert new.last_generated_at is None
    assert intro.updated_at == T1
    assert result[1] is sample_sections[1]


def test_insert_child_at_position(sample_sections: Sections) -> None:
    result = insert_child(sample_sections, "intro", SectionSeed(name="Motivation"), 0)
    assert [c.name for c in result[0].children] == [
        "Motivation",
        "Background",
        "Diagram: Architecture",
    ]


def test_insert_child_gives_default_prompt_from_parent(sample_sections: Sections) -> None:
    seed = SectionSeed(name="Sampling")
    result = insert_child(sample_sections, "data", seed)
    new = find(result, seed.id)
    assert new is not None
    assert new.prompt == "Generate content for Sampling as part of Data."


def test_insert_child_keeps_explicit_prompt(sample_sections: Sections) -> None:
    seed = SectionSeed(name="Sampling", prompt="Explain stratified sampling")
    new = find(insert_child(sample_sections, "data", seed), seed.id)
    assert new is not None
    assert new.prompt == "Explain stratified sampling"


def test_insert_child_at_root_level(sample_sections: Sections) -> None:
    seed = SectionSeed(name="Appendix")
    result = insert_child(sample_sections, None, seed)
    assert len(result) == 4
    assert result[-1].id == seed.id
    assert all(a is b for a, b in zip(result[:3], sample_sections, strict=True))


def test_insert_child_refuses_duplicate_id(sample_sections: Sections) -> None:
    seed = SectionSeed(name="Clone", id="bg")
    assert insert_child(sample_sections, "methods", seed) is sample_sections


def test_seeds_mint_distinct_ids() -> None:
    assert SectionSeed(name="A").id != SectionSeed(name="A").id


def test_delete_removes_whole_subtree(sample_sections: Sections) -> None:
    result = delete(sample_sections, "methods")
    assert [s.id for s in result] == ["intro", "concl"]
    assert find(result, "data") is None
    assert find(result, "stats") is None
    assert result[0] is sample_sections[0]


def test_delete_nested_refreshes_ancestors(sample_sections: Sections) -> None:
    result = delete(sample_sections, "stats", now=T1)
    data = find(result, "data")
    assert data is not None
    assert data.children == ()
    assert data.updated_at == T1
    assert result[1].updated_at == T1
    assert result[0] is sample_sections[0]
    assert sample_sections[0].updated_at == T0


def test_numbering_of_nested_sections(sample_sections: Sections) -> None:
    assert numbering(sample_sections, "intro") == "1"
    assert numbering(sample_sections, "arch") == "1.2"
    assert numbering(sample_sections, "stats") == "2.1.1"
    assert numbering(sample_sections, "concl") == "3"
    assert numbering(sample_sections, "nope") == ""


def test_numbering_follows_insertion_order() -> None:
    sections: Sections = ()
    seeds = [SectionSeed(name=f"Section {i}") for i in range(5)]
    for seed in seeds:
        sections = insert_child(sections, None, seed)

    assert [numbering(sections, s.id) for s in seeds] == ["1", "2", "3", "4", "5"]


def test_inserting_before_position_shifts_numbering() -> None:
    sections: Sections = ()
    seeds = [SectionSeed(name=f"Section {i}") for i in range(4)]
    for seed in seeds:
        sections = insert_child(sections, None, seed)

    early = SectionSeed(name="Inserted")
    sections = insert_child(sections, None, early, 2)

    assert numbering(sections, early.id) == "3"
    assert numbering(sections, seeds[1].id) == "2"
    assert numbering(sections, seeds[2].id) == "4"
    assert numbering(sections, seeds[3].id) == "5"


def test_walk_yields_display_order_with_depth(sample_sections: Sections) -> None:
    visited = [(num, depth, node.id) for num, depth, node in walk(sample_sections)]
    assert visited == [
        ("1", 0, "intro"),
        ("1.1", 1, "bg"),
        ("1.2", 1, "arch"),
        ("2", 0, "methods"),
        ("2.1", 1, "data"),
        ("2.1.1", 2, "stats"),
        ("3", 0, "concl"),
    ]


def test_ensure_default_subsection_adds_overview_to_plain_leaf() -> None:
    section = SectionNode(id="s", name="Results")
    result = ensure_default_subsection(section, "4")
    assert len(result.children) == 1
    assert result.children[0].name == "4.1 Overview"
    assert '"Results"' in result.children[0].prompt


def test_ensure_default_subsection_skips_specialised_and_parents(
    sample_sections: Sections,
) -> None:
    diagram = SectionNode(id="d", name="Diagram: Flow")
    assert ensure_default_subsection(diagram, "1") is diagram
    intro = sample_sections[0]
    assert ensure_default_subsection(intro, "1") is intro
