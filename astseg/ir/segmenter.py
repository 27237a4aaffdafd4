"""Segmenter — splits an optimized IR tree into per-declaration segments."""

from __future__ import annotations

import logging

from astseg.ir.models import DEFAULT_VOCABULARY, IrNode, KindVocabulary

logger = logging.getLogger(__name__)


def segment(root: IrNode, vocabulary: KindVocabulary = DEFAULT_VOCABULARY) -> list[IrNode]:
    """Extract every declaration-rooted subtree as an independent copy.

    Traversal is depth-first pre-order and continues below a match, so
    nested declarations yield their own segments after the enclosing one.
    The source tree is only read.
    """
    segments = [node.clone() for node in root.walk() if vocabulary.is_declaration(node.kind)]
    logger.debug("Extracted %d segments", len(segments))
    return segments
