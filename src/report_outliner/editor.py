"""Editing session for a single project.

A ``ProjectEditor`` owns the live copy of one project. Every change goes through
``_write``, which records history and writes the project through to the store.
Structural edits and generation results are committing edits (one undo step
each); prompt/content/detail typing is not, and is folded into the current
undo step until ``commit_point`` is called.
"""

import uuid
from dataclasses import dataclass, replace
from typing import Any

from loguru import logger

from report_outliner.config import MAX_HISTORY_LENGTH, MIN_CONTEXT_LENGTH, MIN_CONTEXT_WORDS
from report_outliner.core.history.manager import HistoryManager
from report_outliner.core.importer.json_reader import extract_outline
from report_outliner.core.outline.converter import convert
from report_outliner.core.outline.validator import Rejected, validate
from report_outliner.core.tree import operations as tree
from report_outliner.models.section import HistorySnapshot, Project, SectionSeed, utc_now
from report_outliner.protocols import (
    ContentGeneratorProtocol,
    OutlineGeneratorProtocol,
    ProjectStoreProtocol,
)

_DETAIL_TEXT_FIELDS = frozenset({"title", "context", "team_details", "institute_name"})
_DETAIL_INT_FIELDS = frozenset({"min_sections", "max_depth"})


@dataclass(frozen=True)
class EditResult:
    """Outcome of an editor action; ``message`` is meant for the user."""

    success: bool
    message: str = ""
    section_id: str | None = None


def create_project(store: ProjectStoreProtocol, *, title: str, context: str = "", **details: Any) -> Project:
    """Create an empty project and store it."""
    project = Project(id=uuid.uuid4().hex, title=title, context=context, **details)
    store.set(project)
    logger.info("Created project {} ({!r})", project.id, project.title)
    return project


class ProjectEditor:
    """Edits one project, keeping undo history and the store in sync."""

    def __init__(
        self,
        store: ProjectStoreProtocol,
        project: Project,
        *,
        max_history: int = MAX_HISTORY_LENGTH,
    ) -> None:
        self._store = store
        self._project = project
        self._history = HistoryManager(max_length=max_history)
        self._history.commit(HistorySnapshot.from_project(project))

    @classmethod
    def load(
        cls,
        store: ProjectStoreProtocol,
        project_id: str,
        *,
        max_history: int = MAX_HISTORY_LENGTH,
    ) -> "ProjectEditor | None":
        """Open an editor on a stored project, or return None if it does not exist."""
        project = store.get(project_id)
        if project is None:
            logger.warning("Project {} not found", project_id)
            return None
        return cls(store, project, max_history=max_history)

    @property
    def project(self) -> Project:
        return self._project

    @property
    def history(self) -> HistoryManager:
        return self._history

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    # --- Committing edits ---

    def rename_section(self, section_id: str, name: str) -> EditResult:
        name = name.strip()
        if not name:
            return EditResult(False, "Section name cannot be empty.", section_id)
        sections = tree.update(self._project.sections, section_id, name=name)
        if sections is self._project.sections:
            return _not_found(section_id)
        self._write(replace(self._project, sections=sections), commit=True)
        return EditResult(True, f'Section "{name}" renamed.', section_id)

    def add_section(self, name: str | None = None, *, position: int | None = None) -> EditResult:
        """Add a root section (appended unless ``position`` is given).

        A plain section gets a default "Overview" sub-section.
        """
        count = len(self._project.sections)
        index = count if position is None else min(max(position, 0), count)
        seed = SectionSeed(
            name=(name or "").strip() or f"New Section {count + 1}",
            prompt="Generate content for this new section.",
        )
        sections = tree.insert_child(self._project.sections, None, seed, index)
        added = tree.ensure_default_subsection(sections[index], str(index + 1))
        sections = (*sections[:index], added, *sections[index + 1 :])
        self._write(replace(self._project, sections=sections), commit=True)
        return EditResult(True, f'"{seed.name}" added.', seed.id)

    def add_subsection(
        self,
        parent_id: str,
        name: str,
        *,
        prompt: str = "",
        position: int | None = None,
    ) -> EditResult:
        name = name.strip()
        if not name:
            return EditResult(False, "Section name cannot be empty.", parent_id)
        seed = SectionSeed(name=name, prompt=prompt)
        sections = tree.insert_child(self._project.sections, parent_id, seed, position)
        if sections is self._project.sections:
            return _not_found(parent_id)
        self._write(replace(self._project, sections=sections), commit=True)
        return EditResult(True, f'"{name}" added.', seed.id)

    def delete_section(self, section_id: str) -> EditResult:
        """Delete a section together with all of its sub-sections."""
        sections = tree.delete(self._project.sections, section_id)
        if sections is self._project.sections:
            return _not_found(section_id)
        self._write(replace(self._project, sections=sections), commit=True)
        return EditResult(True, "Section deleted.", section_id)

    def apply_outline(self, raw: Any) -> EditResult:
        """Replace all sections with a converted outline.

        The outline is validated first; a rejected outline leaves the project and
        its history untouched. In constrained mode, outlines deeper than the
        project's ``max_depth`` are rejected rather than truncated.
        """
        max_depth = self._project.max_depth if self._project.constrained else None
        result = validate(extract_outline(raw), max_depth)
        if isinstance(result, Rejected):
            logger.warning("Outline rejected: {}", result.reason)
            return EditResult(False, f"Invalid outline: {result.reason}")
        if not result.outline:
            return EditResult(False, "The outline does not contain any sections.")

        sections = convert(result.outline, self._project)
        self._write(replace(self._project, sections=sections), commit=True)
        logger.info("Applied outline with {} root sections", len(sections))
        return EditResult(True, f"Project sections replaced ({len(sections)} root sections).")

    def generate_outline(self, generator: OutlineGeneratorProtocol) -> EditResult:
        """Ask ``generator`` for an outline and apply it."""
        context = self._project.context.strip()
        if len(context) < MIN_CONTEXT_LENGTH or len(context.split()) < MIN_CONTEXT_WORDS:
            return EditResult(
                False,
                f"Project context is too short to generate an outline "
                f"(need at least {MIN_CONTEXT_LENGTH} characters and {MIN_CONTEXT_WORDS} words).",
            )

        try:
            payload = generator.generate_outline(
                title=self._project.title,
                context=context,
                min_sections=self._project.min_sections,
                max_depth=self._project.max_depth,
            )
        except RuntimeError as e:
            logger.warning("Outline generation failed: {}", e)
            return EditResult(False, str(e))

        return self.apply_outline(payload)

    def generate_section(self, section_id: str, generator: ContentGeneratorProtocol) -> EditResult:
        """Generate content for one section from its prompt."""
        section = tree.find(self._project.sections, section_id)
        if section is None:
            return _not_found(section_id)

        prompt = section.prompt or f"Content for {section.name}"
        try:
            content = generator.generate_content(section.kind, prompt)
        except RuntimeError as e:
            logger.warning("Content generation for {} failed: {}", section_id, e)
            return EditResult(False, str(e), section_id)

        return self._store_generated(section_id, content, f'"{section.name}" content updated.')

    def save_diagram(self, section_id: str, code: str) -> EditResult:
        """Store diagram code produced outside the editor as a section's content."""
        section = tree.find(self._project.sections, section_id)
        if section is None:
            return _not_found(section_id)
        return self._store_generated(section_id, code, f'Diagram code saved for "{section.name}".')

    def commit_point(self) -> EditResult:
        """Turn pending live edits into an undo step (e.g. when an input loses focus)."""
        self._write(self._project, commit=True)
        return EditResult(True)

    def undo(self) -> EditResult:
        snapshot = self._history.undo()
        if snapshot is None:
            return EditResult(False, "Nothing to undo")
        # The write below would normally record a commit; the restore must not.
        with self._history.restoring():
            self._write(snapshot.restore_into(self._project), commit=True)
        logger.info("Undo: restored history step {}", self._history.cursor)
        return EditResult(True, "Undo successful")

    # --- Live (non-committing) edits ---

    def set_prompt(self, section_id: str, prompt: str) -> EditResult:
        return self._live_section_edit(section_id, prompt=prompt)

    def set_content(self, section_id: str, content: str) -> EditResult:
        return self._live_section_edit(section_id, content=content)

    def update_details(self, **fields: Any) -> EditResult:
        """Change project metadata (title, context, team/institute details, constraints)."""
        changes: dict[str, Any] = {}
        for key, value in fields.items():
            if key in _DETAIL_TEXT_FIELDS:
                changes[key] = str(value)
            elif key in _DETAIL_INT_FIELDS:
                try:
                    changes[key] = max(0, int(value or 0))
                except (TypeError, ValueError):
                    return EditResult(False, f"{key} must be a number, got {value!r}")
            elif key == "constrained":
                changes[key] = bool(value)
            else:
                msg = f"Unknown project detail: {key!r}"
                raise ValueError(msg)
        self._write(replace(self._project, **changes), commit=False)
        return EditResult(True)

    # --- Internals ---

    def _live_section_edit(self, section_id: str, **patch: Any) -> EditResult:
        sections = tree.update(self._project.sections, section_id, **patch)
        if sections is self._project.sections:
            return _not_found(section_id)
        self._write(replace(self._project, sections=sections), commit=False)
        return EditResult(True, section_id=section_id)

    def _store_generated(self, section_id: str, content: str, message: str) -> EditResult:
        now = utc_now()
        sections = tree.update(
            self._project.sections,
            section_id,
            now=now,
            content=content,
            last_generated_at=now,
        )
        self._write(replace(self._project, sections=sections), commit=True)
        return EditResult(True, message, section_id)

    def _write(self, project: Project, *, commit: bool) -> None:
        project = replace(project, updated_at=utc_now())
        self._project = project
        snapshot = HistorySnapshot.from_project(project)
        if commit:
            self._history.commit(snapshot)
        else:
            self._history.replace_current(snapshot)
        self._store.set(project)


def _not_found(section_id: str) -> EditResult:
    return EditResult(False, f"Section {section_id} not found.", section_id)
