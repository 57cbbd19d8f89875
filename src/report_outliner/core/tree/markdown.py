"""Render section trees as markdown."""

import io

from report_outliner.core.tree.operations import find, numbering, walk
from report_outliner.models.kind import SectionKind
from report_outliner.models.section import Sections

_MERMAID_KINDS = {SectionKind.DIAGRAM, SectionKind.FLOWCHART}


def render_sections_as_markdown(
    sections: Sections,
    *,
    section_id: str | None = None,
    max_depth: int | None = None,
    include_content: bool = True,
) -> str:
    """Render numbered sections (or one section's subtree) as markdown headings.

    Args:
        sections: Root sections of a project.
        section_id: Render only this section and its descendants (None = everything).
        max_depth: Max levels below the start to include (None = unlimited).
        include_content: Whether to write each section's content under its heading.

    Returns:
        Markdown string, empty if ``section_id`` is not in the tree.
    """
    start_number = ""
    roots = sections
    if section_id is not None:
        start = find(sections, section_id)
        if start is None:
            return ""
        roots = (start,)
        start_number = numbering(sections, section_id)

    out = io.StringIO()
    for number, depth, node in walk(roots):
        if max_depth is not None and depth > max_depth:
            continue
        if start_number:
            # walk() numbers the start node "1"; put its real number back.
            number = start_number + number[1:]

        level = number.count(".") + 2
        out.write(f"{'#' * min(level, 6)} {number} {node.name}\n\n")

        if include_content:
            if not node.content:
                out.write("[Empty Section]\n\n")
            elif node.kind in _MERMAID_KINDS:
                out.write(f"```mermaid\n{node.content}\n```\n\n")
            else:
                out.write(f"{node.content}\n\n")

        # Truncation indicator when children are cut off by max_depth
        if max_depth is not None and depth == max_depth and node.children:
            count = len(node.children)
            noun = "sub-section" if count == 1 else "sub-sections"
            out.write(f"... ({count} more {noun}, id={node.id})\n\n")

    return out.getvalue()
