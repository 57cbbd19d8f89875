"""Section-tree editing core for AI-assisted report outlines."""

from report_outliner.core.history.manager import HistoryManager, HistoryState
from report_outliner.core.outline.converter import convert
from report_outliner.core.outline.validator import Ok, Rejected, validate
from report_outliner.editor import EditResult, ProjectEditor, create_project
from report_outliner.models.kind import SectionKind
from report_outliner.models.section import (
    HistorySnapshot,
    OutlineNode,
    Project,
    SectionNode,
    SectionSeed,
)
from report_outliner.protocols import (
    ContentGeneratorProtocol,
    OutlineGeneratorProtocol,
    ProjectStoreProtocol,
)

__all__ = [
    "ContentGeneratorProtocol",
    "EditResult",
    "HistoryManager",
    "HistorySnapshot",
    "HistoryState",
    "Ok",
    "OutlineGeneratorProtocol",
    "OutlineNode",
    "Project",
    "ProjectEditor",
    "ProjectStoreProtocol",
    "Rejected",
    "SectionKind",
    "SectionNode",
    "SectionSeed",
    "convert",
    "create_project",
    "validate",
]
