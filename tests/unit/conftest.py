"""Shared test fixtures."""

import sqlite3
from collections.abc import Iterator

import pytest
from loguru import logger

from report_outliner.core.database.schema import create_schema
from report_outliner.models.section import Project, Sections
from tests.unit.fakes import InMemoryProjectStore
from tests.unit.sample_data import PROJECT_CONTEXT, T0, build_sample_sections


@pytest.fixture
def sample_sections() -> Sections:
    return build_sample_sections()


@pytest.fixture
def project() -> Project:
    return Project(
        id="proj1",
        title="Expense Splitter",
        context=PROJECT_CONTEXT,
        created_at=T0,
        updated_at=T0,
    )


@pytest.fixture
def store(project: Project) -> InMemoryProjectStore:
    """In-memory store already holding ``project``."""
    s = InMemoryProjectStore()
    s.set(project)
    s.writes.clear()
    return s


@pytest.fixture
def db() -> sqlite3.Connection:
    """Return an in-memory DB with the project schema."""
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    return conn


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages at WARNING and above."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
