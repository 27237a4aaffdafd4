"""IR optimizer — prunes grouping/block wrappers from the tree in place.

A pruned grouping node takes its whole subtree with it; its children are
not reattached to the former parent.
"""

from __future__ import annotations

import logging

from astseg.ir.models import DEFAULT_VOCABULARY, IrNode, KindVocabulary

logger = logging.getLogger(__name__)


def optimize(node: IrNode, vocabulary: KindVocabulary = DEFAULT_VOCABULARY) -> None:
    """Remove every grouping-kind node from the tree, bottom-up."""
    before = count_nodes(node)

    # Reversed pre-order visits every child before its parent.
    for current in reversed(list(node.walk())):
        current.children = [c for c in current.children if not vocabulary.is_grouping(c.kind)]

    logger.debug("Optimized IR: %d -> %d nodes", before, count_nodes(node))


def count_nodes(node: IrNode) -> int:
    return sum(1 for _ in node.walk())
