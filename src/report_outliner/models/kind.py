"""Section kinds and the naming convention that selects them."""

import enum
import re


class SectionKind(enum.Enum):
    """What a section holds, derived from its name."""

    PLAIN = "plain"
    DIAGRAM = "diagram"
    FLOWCHART = "flowchart"
    FIGURE = "figure"
    TABLE = "table"


# Checked in this order; the first match wins.
_KIND_PREFIXES: tuple[tuple[SectionKind, re.Pattern[str]], ...] = (
    (SectionKind.DIAGRAM, re.compile(r"^\s*diagram\s*:\s*", re.IGNORECASE)),
    (SectionKind.FLOWCHART, re.compile(r"^\s*flowchart(?:\s+\d+(?:\.\d+)*)?\s*:\s*", re.IGNORECASE)),
    (SectionKind.FIGURE, re.compile(r"^\s*figure(?:\s+\d+(?:\.\d+)*)?\s*:\s*", re.IGNORECASE)),
    (SectionKind.TABLE, re.compile(r"^\s*table(?:\s+\d+(?:\.\d+)*)?\s*:\s*", re.IGNORECASE)),
)


def classify_name(name: str) -> SectionKind:
    """Return the kind encoded by a section name's prefix."""
    for kind, pattern in _KIND_PREFIXES:
        if pattern.match(name):
            return kind
    return SectionKind.PLAIN


def strip_kind_prefix(name: str) -> str:
    """Return ``name`` without its kind prefix (e.g. ``"Figure 3: Result"`` -> ``"Result"``)."""
    for _kind, pattern in _KIND_PREFIXES:
        m = pattern.match(name)
        if m:
            return name[m.end() :].strip()
    return name.strip()
