"""Gatekeeping for untrusted outlines.

Outlines come from a language model or from text the user pasted, so nothing
about their shape can be assumed. ``validate`` walks the raw data depth-first,
left to right, and either returns typed ``OutlineNode`` objects or the first
problem it found. It never repairs anything.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from report_outliner.config import MAX_OUTLINE_NESTING
from report_outliner.models.section import OutlineNode

# The generator's own key for nested entries; read as an alias of "children".
_CHILD_KEYS = ("children", "subSections")


@dataclass(frozen=True)
class Ok:
    """The outline passed validation."""

    outline: tuple[OutlineNode, ...]


@dataclass(frozen=True)
class Rejected:
    """The outline failed validation; ``reason`` is shown to the user verbatim."""

    reason: str


ValidationResult = Ok | Rejected


class _Rejection(Exception):
    pass


def validate(raw: Any, max_depth: int | None = None) -> ValidationResult:
    """Validate a raw nested outline.

    Args:
        raw: List of ``{"name": str, "children": [...]}`` dicts, or None.
        max_depth: If given, nodes at this depth or deeper must not have children.
            Root-level nodes are at depth 0. Independently of it, nothing may be
            nested more than ``MAX_OUTLINE_NESTING`` levels deep.

    Returns:
        ``Ok`` with the parsed outline, or ``Rejected`` with the first failure.
    """
    try:
        return Ok(_validate_level(raw, 0, max_depth))
    except _Rejection as e:
        return Rejected(str(e))


def _validate_level(raw: Any, depth: int, max_depth: int | None) -> tuple[OutlineNode, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise _Rejection(f"not an array at depth {depth}")

    nodes: list[OutlineNode] = []
    for index, item in enumerate(raw):
        name = item.get("name") if isinstance(item, Mapping) else None
        if not isinstance(name, str) or not name.strip():
            raise _Rejection(f"missing/invalid name at depth {depth}, index {index}")

        children_raw = _children_of(item)
        if children_raw is not None and not isinstance(children_raw, list):
            raise _Rejection(f"children is not an array at depth {depth}, index {index}")

        if max_depth is not None and depth >= max_depth and children_raw:
            raise _Rejection(
                f"would exceed maximum depth {max_depth} at depth {depth}, index {index}"
            )
        if children_raw and depth + 1 >= MAX_OUTLINE_NESTING:
            raise _Rejection(
                f"nested deeper than {MAX_OUTLINE_NESTING} levels at depth {depth}, index {index}"
            )

        children = _validate_level(children_raw, depth + 1, max_depth)
        nodes.append(OutlineNode(name=name, children=children))
    return tuple(nodes)


def _children_of(item: Mapping[str, Any]) -> Any:
    for key in _CHILD_KEYS:
        if key in item:
            return item[key]
    return None
