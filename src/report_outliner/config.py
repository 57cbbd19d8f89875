"""Configuration constants for report-outliner."""

import os
from pathlib import Path

# Directory with the project database. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/report-outliner").expanduser(),
    Path("~/.report-outliner").expanduser(),
    Path("~/.config/report-outliner").expanduser(),
]

# Overrides DATA_DIRECTORIES when set.
DATA_DIR_ENV_VAR: str = "REPORT_OUTLINER_DATA_DIR"

DATABASE_FILENAME: str = "projects.db"

# Undo depth; older snapshots are evicted first.
MAX_HISTORY_LENGTH: int = 10

# Outline generation constraints for new projects.
DEFAULT_MIN_SECTIONS: int = 5
DEFAULT_MAX_DEPTH: int = 2

# Outline generation is refused below this much project context.
MIN_CONTEXT_LENGTH: int = 30
MIN_CONTEXT_WORDS: int = 5

# Outlines nested deeper than this are rejected whatever the project's max_depth.
MAX_OUTLINE_NESTING: int = 32


def resolve_data_directory() -> Path:
    """Return the data directory: env override, first existing candidate, or the default."""
    override = os.environ.get(DATA_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]
