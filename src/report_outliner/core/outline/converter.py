"""Turn a validated outline into project sections."""

from dataclasses import replace
from datetime import datetime

from loguru import logger

from report_outliner.core.tree.operations import collect_ids, ensure_default_subsection
from report_outliner.models.kind import SectionKind, classify_name, strip_kind_prefix
from report_outliner.models.section import (
    OutlineNode,
    Project,
    SectionNode,
    Sections,
    new_section_id,
    utc_now,
)

NO_CONTEXT_PLACEHOLDER = "[No context provided by user]"

_PROMPT_TEMPLATES: dict[SectionKind, str] = {
    SectionKind.DIAGRAM: "Generate Mermaid code for: {name}",
    SectionKind.FLOWCHART: "Generate Mermaid flowchart code for: {name}",
    SectionKind.FIGURE: "Describe the figure to include for: {name}",
    SectionKind.TABLE: "Generate a markdown table for: {name}",
    SectionKind.PLAIN: (
        'Generate the {name} section for the project titled "{title}". Context: {context}.'
    ),
}


def default_prompt(kind: SectionKind, name: str, project: Project) -> str:
    """Build the generation prompt a new section of ``kind`` starts with."""
    return _PROMPT_TEMPLATES[kind].format(
        name=strip_kind_prefix(name),
        title=project.title,
        context=project.context.strip() or NO_CONTEXT_PLACEHOLDER,
    )


def convert(
    outline: tuple[OutlineNode, ...] | list[OutlineNode],
    project: Project,
    *,
    now: datetime | None = None,
) -> Sections:
    """Build fresh sections for ``outline``, which must already have passed validation.

    When ``project.constrained`` is set, children deeper than ``project.max_depth``
    levels are dropped with a warning. Plain sections that end up without
    children get a default "Overview" sub-section, unless that would itself go
    past the depth limit.

    Returns:
        New root sections. No id in the result is used anywhere in ``project``.
    """
    used_ids = collect_ids(project.sections)
    return _convert_level(outline, project, 0, "", used_ids, now or utc_now())


def _convert_level(
    outline: tuple[OutlineNode, ...] | list[OutlineNode],
    project: Project,
    depth: int,
    prefix: str,
    used_ids: set[str],
    stamp: datetime,
) -> Sections:
    sections: list[SectionNode] = []
    may_nest = not project.constrained or depth < project.max_depth
    for index, entry in enumerate(outline, start=1):
        if not isinstance(entry, OutlineNode):
            msg = f"convert() needs validated OutlineNode entries, got {type(entry).__name__}"
            raise TypeError(msg)

        name = entry.name.strip()
        number = f"{prefix}.{index}" if prefix else str(index)
        section_id = _fresh_id(used_ids)

        children: Sections = ()
        if entry.children:
            if may_nest:
                children = _convert_level(entry.children, project, depth + 1, number, used_ids, stamp)
            else:
                logger.warning(
                    "Sub-sections of {!r} ignored due to depth limit ({})",
                    name,
                    project.max_depth,
                )

        section = SectionNode(
            id=section_id,
            name=name,
            prompt=default_prompt(classify_name(name), name, project),
            updated_at=stamp,
            children=children,
        )
        if may_nest and not children:
            section = _with_overview(section, number, used_ids)
        sections.append(section)
    return tuple(sections)


def _with_overview(section: SectionNode, number: str, used_ids: set[str]) -> SectionNode:
    section = ensure_default_subsection(section, number)
    if not section.children:
        return section
    (overview,) = section.children
    return replace(section, children=(replace(overview, id=_fresh_id(used_ids)),))


def _fresh_id(used_ids: set[str]) -> str:
    section_id = new_section_id()
    while section_id in used_ids:
        section_id = new_section_id()
    used_ids.add(section_id)
    return section_id
