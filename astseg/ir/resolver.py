"""Dependency resolver — one-hop expansion of segment dependency sets.

Phase 1 snapshots each segment root's direct dependencies into a table
keyed by root name. Phase 2 grows every segment's set with the table
entries of the names it already depends on. The expansion is a single hop:
names reached through the table are not looked up again.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from astseg.ir.models import IrNode

logger = logging.getLogger(__name__)

DependencyTable = Mapping[str, frozenset[str]]


def build_dependency_table(segments: Sequence[IrNode]) -> DependencyTable:
    """Map each segment root name to its direct dependency set.

    When two segments share a root name, the later one wins.
    """
    table = {seg.name: frozenset(seg.dependencies) for seg in segments}
    return MappingProxyType(table)


def resolve_dependencies(
    segments: Sequence[IrNode], table: DependencyTable | None = None
) -> None:
    """Expand every segment's dependencies in place through the table.

    The table is built once before any segment changes, so the result does
    not depend on segment order.
    """
    if table is None:
        table = build_dependency_table(segments)

    for seg in segments:
        resolved: set[str] = set()
        for name in seg.dependencies:
            resolved |= table.get(name, frozenset())

        added = resolved - seg.dependencies
        seg.dependencies |= resolved
        if added:
            logger.debug("Segment %r gained %d dependencies", seg.name, len(added))
