"""IR builder — converts an AST snapshot into an IR tree, node for node."""

from __future__ import annotations

import logging

from astseg.frontend.models import AstNode
from astseg.ir.models import DEFAULT_VOCABULARY, ControlFlow, IrNode, KindVocabulary

logger = logging.getLogger(__name__)


def build_ir(ast: AstNode, vocabulary: KindVocabulary = DEFAULT_VOCABULARY) -> IrNode:
    """Build the IR tree for an AST.

    Children are built first and kept in source order; each child's name is
    recorded in the parent's dependency set. Conditional and loop kinds get
    the Branch control-flow tag. Traversal uses an explicit stack, so tree
    depth is not bounded by the interpreter's recursion limit.
    """
    # Post-order: a node is finished once every child IrNode exists.
    done: list[IrNode] = []
    stack: list[tuple[AstNode, int]] = [(ast, 0)]
    while stack:
        src, next_child = stack[-1]
        if next_child < len(src.children):
            stack[-1] = (src, next_child + 1)
            stack.append((src.children[next_child], 0))
            continue

        stack.pop()
        start = len(done) - len(src.children)
        children = done[start:]
        del done[start:]
        done.append(_make_node(src, children, vocabulary))

    root = done[0]
    logger.debug("Built IR for %s %r", root.kind, root.name)
    return root


def _make_node(ast: AstNode, children: list[IrNode], vocabulary: KindVocabulary) -> IrNode:
    node = IrNode(kind=ast.kind, name=ast.name)

    for ir_child in children:
        node.dependencies.add(ir_child.name)
        node.children.append(ir_child)

    if vocabulary.is_branch(node.kind):
        node.control_flow = ControlFlow.BRANCH

    return node
