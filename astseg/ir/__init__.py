"""Intermediate Representation (IR) built from a clang AST snapshot.

The IR layer sits between the generic AST and the per-declaration output:
- Builder: AST -> IR, tagging conditional/loop constructs
- Optimizer: prunes grouping/block wrappers in place
- Segmenter: extracts declaration subtrees as independent segments
- Resolver: expands segment dependencies by one hop
"""

from astseg.ir.builder import build_ir
from astseg.ir.models import DEFAULT_VOCABULARY, ControlFlow, IrNode, KindVocabulary
from astseg.ir.optimizer import optimize
from astseg.ir.resolver import build_dependency_table, resolve_dependencies
from astseg.ir.segmenter import segment

__all__ = [
    "DEFAULT_VOCABULARY",
    "ControlFlow",
    "IrNode",
    "KindVocabulary",
    "build_dependency_table",
    "build_ir",
    "optimize",
    "resolve_dependencies",
    "segment",
]
