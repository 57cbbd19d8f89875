"""Domain models for report outlines."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from report_outliner.config import DEFAULT_MAX_DEPTH, DEFAULT_MIN_SECTIONS
from report_outliner.models.kind import SectionKind, classify_name


def utc_now() -> datetime:
    return datetime.now(UTC)


def new_section_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class SectionNode:
    """A single section in a project outline tree.

    ``kind`` is not a constructor argument: it is computed from ``name`` when the
    node is built, so ``dataclasses.replace(node, name=...)`` reclassifies it.
    ``updated_at`` is bookkeeping and does not take part in equality.
    """

    id: str
    name: str
    prompt: str = ""
    content: str = ""
    updated_at: datetime = field(default_factory=utc_now, compare=False)
    last_generated_at: datetime | None = None
    children: tuple["SectionNode", ...] = ()
    kind: SectionKind = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", classify_name(self.name))


Sections = tuple[SectionNode, ...]


@dataclass(frozen=True)
class SectionSeed:
    """Data for a section about to be inserted; the id is minted up front."""

    name: str
    prompt: str = ""
    content: str = ""
    id: str = field(default_factory=new_section_id)


@dataclass(frozen=True)
class Project:
    """A report project: metadata plus the root-level section list."""

    id: str
    title: str
    context: str = ""
    sections: Sections = ()
    team_details: str = ""
    institute_name: str = ""
    min_sections: int = DEFAULT_MIN_SECTIONS
    max_depth: int = DEFAULT_MAX_DEPTH
    constrained: bool = True
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class OutlineNode:
    """A validated entry of an externally produced outline."""

    name: str
    children: tuple["OutlineNode", ...] = ()


@dataclass(frozen=True)
class HistorySnapshot:
    """Everything needed to put a project back into an earlier state."""

    sections: Sections
    title: str
    context: str
    team_details: str
    institute_name: str
    min_sections: int
    max_depth: int
    constrained: bool

    @classmethod
    def from_project(cls, project: Project) -> "HistorySnapshot":
        return cls(
            sections=project.sections,
            title=project.title,
            context=project.context,
            team_details=project.team_details,
            institute_name=project.institute_name,
            min_sections=project.min_sections,
            max_depth=project.max_depth,
            constrained=project.constrained,
        )

    def restore_into(self, project: Project) -> Project:
        """Return ``project`` with this snapshot's fields put back."""
        return replace(
            project,
            sections=self.sections,
            title=self.title,
            context=self.context,
            team_details=self.team_details,
            institute_name=self.institute_name,
            min_sections=self.min_sections,
            max_depth=self.max_depth,
            constrained=self.constrained,
        )
