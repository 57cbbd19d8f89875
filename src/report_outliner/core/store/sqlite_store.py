"""Device-local project store backed by SQLite."""

import json
import sqlite3

from loguru import logger

from report_outliner.core.store.serialization import project_from_dict, project_to_dict
from report_outliner.models.section import Project


class SqliteProjectStore:
    """Key/value store of serialized projects, keyed by project id.

    Every ``set`` is committed immediately (write-through).
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def get(self, project_id: str) -> Project | None:
        """Return the stored project, or None if missing or unreadable.

        Rows that cannot be decoded are removed so they do not break later reads.
        """
        row = self.conn.execute("SELECT data FROM projects WHERE id = ?", (project_id,)).fetchone()
        if row is None:
            return None
        try:
            return project_from_dict(json.loads(row[0]))
        except (ValueError, KeyError, TypeError):
            logger.exception("Discarding unreadable stored project {}", project_id)
            self.delete(project_id)
            return None

    def set(self, project: Project) -> None:
        self.conn.execute(
            """INSERT OR REPLACE INTO projects (id, title, data, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?)""",
            (
                project.id,
                project.title,
                json.dumps(project_to_dict(project), ensure_ascii=False),
                project.created_at.isoformat(),
                project.updated_at.isoformat(),
            ),
        )
        self.conn.commit()
        logger.debug("Stored project {} ({} root sections)", project.id, len(project.sections))

    def delete(self, project_id: str) -> bool:
        cursor = self.conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
        self.conn.commit()
        return cursor.rowcount > 0

    def list_projects(self) -> list[Project]:
        """Return all readable projects, most recently updated first."""
        rows = self.conn.execute("SELECT id FROM projects ORDER BY updated_at DESC").fetchall()
        projects = [self.get(row[0]) for row in rows]
        return [p for p in projects if p is not None]

    def find_by_title(self, title: str) -> list[Project]:
        """Return projects whose title matches ``title`` ignoring case, newest first."""
        rows = self.conn.execute(
            "SELECT id FROM projects WHERE title = ? COLLATE NOCASE ORDER BY updated_at DESC",
            (title.strip(),),
        ).fetchall()
        projects = [self.get(row[0]) for row in rows]
        return [p for p in projects if p is not None]
