"""Structural operations on section trees.

Every function takes the tuple of root sections and returns either a query result
or a new tuple. Only the path from the root down to the changed node is rebuilt;
untouched subtrees are carried over as the very same objects. A caller can
therefore use ``new is old`` to detect a no-op, and ``branch is old_branch`` to
skip work for branches that did not change.

None of these functions raise for an unknown section id.
"""

from collections.abc import Callable, Iterator
from dataclasses import replace
from datetime import datetime

from loguru import logger

from report_outliner.models.kind import SectionKind, classify_name
from report_outliner.models.section import (
    SectionNode,
    Sections,
    SectionSeed,
    new_section_id,
    utc_now,
)

_PATCHABLE_FIELDS = frozenset({"name", "prompt", "content", "last_generated_at"})


def classify(section: SectionNode | str) -> SectionKind:
    """Return the kind of a section (or of a bare section name)."""
    name = section if isinstance(section, str) else section.name
    return classify_name(name)


def find(sections: Sections, section_id: str) -> SectionNode | None:
    """Depth-first search for a section by id."""
    for section in sections:
        if section.id == section_id:
            return section
        found = find(section.children, section_id)
        if found is not None:
            return found
    return None


def update(
    sections: Sections,
    section_id: str,
    *,
    now: datetime | None = None,
    **patch: object,
) -> Sections:
    """Apply ``patch`` to one section, refreshing ``updated_at`` up to the root.

    Only ``name``, ``prompt``, ``content`` and ``last_generated_at`` can be patched.

    Returns:
        The new root tuple, or ``sections`` itself if the id is not in the tree.
    """
    unknown = set(patch) - _PATCHABLE_FIELDS
    if unknown:
        msg = f"Cannot patch section fields: {sorted(unknown)!r}"
        raise ValueError(msg)

    stamp = now or utc_now()
    return _rewrite(
        sections,
        section_id,
        lambda node: replace(node, **patch, updated_at=stamp),  # type: ignore[arg-type]
        stamp,
    )


def insert_child(
    sections: Sections,
    parent_id: str | None,
    seed: SectionSeed,
    position: int | None = None,
    *,
    now: datetime | None = None,
) -> Sections:
    """Insert a new section built from ``seed`` under ``parent_id``.

    Args:
        sections: Root sections.
        parent_id: Parent section id, or None for the root level.
        seed: Name/prompt/content for the new section. Its id is used as-is.
        position: Index among the new siblings (None = append).
        now: Timestamp for the new node and its ancestors.

    Returns:
        The new root tuple, or ``sections`` itself if the parent is missing.
    """
    if find(sections, seed.id) is not None:
        logger.warning("Section id {} is already in the tree, not inserting", seed.id)
        return sections

    stamp = now or utc_now()
    if parent_id is None:
        return _insert_at(sections, _node_from_seed(seed, None, stamp), position)

    return _rewrite(
        sections,
        parent_id,
        lambda parent: replace(
            parent,
            children=_insert_at(parent.children, _node_from_seed(seed, parent, stamp), position),
            updated_at=stamp,
        ),
        stamp,
    )


def delete(sections: Sections, section_id: str, *, now: datetime | None = None) -> Sections:
    """Remove the subtree rooted at ``section_id`` wherever it occurs."""
    return _delete(sections, section_id, now or utc_now())


def numbering(sections: Sections, section_id: str) -> str:
    """Return the dotted 1-based position of a section (e.g. ``"2.1.3"``), or ``""``."""
    return _numbering(sections, section_id, "")


def walk(sections: Sections) -> Iterator[tuple[str, int, SectionNode]]:
    """Yield ``(numbering, depth, node)`` for every section in display order."""
    yield from _walk(sections, "", 0)


def collect_ids(sections: Sections) -> set[str]:
    return {node.id for _num, _depth, node in walk(sections)}


def ensure_default_subsection(section: SectionNode, base_numbering: str) -> SectionNode:
    """Give a plain, childless section a single "Overview" sub-section to write into."""
    if section.kind is not SectionKind.PLAIN or section.children:
        return section

    sub_name = f"{base_numbering}.1 Overview"
    overview = SectionNode(
        id=new_section_id(),
        name=sub_name,
        prompt=(
            f'Generate an overview or main content for the "{section.name}" section, '
            f'specifically focusing on what would be covered in "{sub_name}".'
        ),
        updated_at=section.updated_at,
    )
    return replace(section, children=(overview,))


def _rewrite(
    sections: Sections,
    section_id: str,
    rewrite: Callable[[SectionNode], SectionNode],
    stamp: datetime,
) -> Sections:
    for index, section in enumerate(sections):
        if section.id == section_id:
            new_section = rewrite(section)
        else:
            new_children = _rewrite(section.children, section_id, rewrite, stamp)
            if new_children is section.children:
                continue
            new_section = replace(section, children=new_children, updated_at=stamp)
        return (*sections[:index], new_section, *sections[index + 1 :])
    return sections


def _delete(sections: Sections, section_id: str, stamp: datetime) -> Sections:
    changed = False
    kept: list[SectionNode] = []
    for section in sections:
        if section.id == section_id:
            changed = True
            continue
        new_children = _delete(section.children, section_id, stamp)
        if new_children is not section.children:
            section = replace(section, children=new_children, updated_at=stamp)
            changed = True
        kept.append(section)
    return tuple(kept) if changed else sections


def _insert_at(siblings: Sections, node: SectionNode, position: int | None) -> Sections:
    if position is None or position >= len(siblings):
        return (*siblings, node)
    index = max(position, 0)
    return (*siblings[:index], node, *siblings[index:])


def _node_from_seed(seed: SectionSeed, parent: SectionNode | None, stamp: datetime) -> SectionNode:
    prompt = seed.prompt
    if not prompt:
        if parent is None:
            prompt = "Generate content for this new section."
        else:
            prompt = f"Generate content for {seed.name} as part of {parent.name}."
    return SectionNode(
        id=seed.id,
        name=seed.name,
        prompt=prompt,
        content=seed.content,
        updated_at=stamp,
    )


def _numbering(sections: Sections, section_id: str, prefix: str) -> str:
    for index, section in enumerate(sections, start=1):
        current = f"{prefix}.{index}" if prefix else str(index)
        if section.id == section_id:
            return current
        found = _numbering(section.children, section_id, current)
        if found:
            return found
    return ""


def _walk(sections: Sections, prefix: str, depth: int) -> Iterator[tuple[str, int, SectionNode]]:
    for index, section in enumerate(sections, start=1):
        current = f"{prefix}.{index}" if prefix else str(index)
        yield current, depth, section
        yield from _walk(section.children, current, depth + 1)
