"""Convert projects to and from JSON-compatible dicts."""

from datetime import datetime
from typing import Any

from report_outliner.config import DEFAULT_MAX_DEPTH, DEFAULT_MIN_SECTIONS
from report_outliner.models.section import Project, SectionNode, utc_now


def _dt(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def section_to_dict(section: SectionNode) -> dict[str, Any]:
    return {
        "id": section.id,
        "name": section.name,
        "prompt": section.prompt,
        "content": section.content,
        "updatedAt": _dt(section.updated_at),
        "lastGeneratedAt": _dt(section.last_generated_at),
        "children": [section_to_dict(child) for child in section.children],
    }


def section_from_dict(data: dict[str, Any]) -> SectionNode:
    return SectionNode(
        id=data["id"],
        name=data["name"],
        prompt=data.get("prompt", ""),
        content=data.get("content", ""),
        updated_at=_parse_dt(data.get("updatedAt")) or utc_now(),
        last_generated_at=_parse_dt(data.get("lastGeneratedAt")),
        children=tuple(section_from_dict(child) for child in data.get("children") or ()),
    )


def project_to_dict(project: Project) -> dict[str, Any]:
    """Serialize a project, sections included."""
    return {
        "id": project.id,
        "title": project.title,
        "context": project.context,
        "teamDetails": project.team_details,
        "instituteName": project.institute_name,
        "minSections": project.min_sections,
        "maxDepth": project.max_depth,
        "constrained": project.constrained,
        "createdAt": _dt(project.created_at),
        "updatedAt": _dt(project.updated_at),
        "sections": [section_to_dict(section) for section in project.sections],
    }


def project_from_dict(data: dict[str, Any]) -> Project:
    """Rebuild a project from ``project_to_dict`` output.

    Raises:
        KeyError, TypeError, ValueError: If the data is not a serialized project.
    """
    return Project(
        id=data["id"],
        title=data["title"],
        context=data.get("context", ""),
        sections=tuple(section_from_dict(section) for section in data.get("sections") or ()),
        team_details=data.get("teamDetails", ""),
        institute_name=data.get("instituteName", ""),
        min_sections=int(data.get("minSections", DEFAULT_MIN_SECTIONS)),
        max_depth=int(data.get("maxDepth", DEFAULT_MAX_DEPTH)),
        constrained=bool(data.get("constrained", True)),
        created_at=_parse_dt(data.get("createdAt")) or utc_now(),
        updated_at=_parse_dt(data.get("updatedAt")) or utc_now(),
    )
