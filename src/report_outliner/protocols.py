"""Protocols for the editor's external collaborators."""

from typing import Any, Protocol, runtime_checkable

from report_outliner.models.kind import SectionKind
from report_outliner.models.section import Project


@runtime_checkable
class ProjectStoreProtocol(Protocol):
    """Persisted, device-local store of projects keyed by id."""

    def get(self, project_id: str) -> Project | None:
        """Return the last written project, or None."""
        ...

    def set(self, project: Project) -> None:
        """Write (create or replace) a project."""
        ...

    def delete(self, project_id: str) -> bool:
        """Remove a project, returning whether it existed."""
        ...

    def list_projects(self) -> list[Project]:
        """Return all stored projects."""
        ...


@runtime_checkable
class OutlineGeneratorProtocol(Protocol):
    """Produces a raw, untrusted outline for a project."""

    def generate_outline(
        self,
        *,
        title: str,
        context: str,
        min_sections: int | None = None,
        max_depth: int | None = None,
    ) -> Any:
        """Return a nested outline payload; raise RuntimeError on failure."""
        ...


@runtime_checkable
class ContentGeneratorProtocol(Protocol):
    """Produces the content of a single section."""

    def generate_content(self, kind: SectionKind, prompt: str) -> str:
        """Return content to store verbatim; raise RuntimeError on failure."""
        ...
