"""IR data models — the annotated tree the pipeline stages operate on.

An IrNode mirrors one AST node and adds a coarse control-flow tag plus the
set of names of its direct children. The reserved kind labels the stages
key on live in a KindVocabulary so they can be overridden from config.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ControlFlow(Enum):
    BRANCH = "Branch"  # Conditional or loop construct


@dataclass(frozen=True)
class KindVocabulary:
    """Kind labels with special meaning to the IR stages."""

    branch_kinds: frozenset[str] = frozenset({"IfStmt", "WhileStmt"})
    grouping_kind: str = "CompoundStmt"
    declaration_kinds: frozenset[str] = frozenset({"FunctionDecl", "StructDecl"})

    def is_branch(self, kind: str) -> bool:
        return kind in self.branch_kinds

    def is_grouping(self, kind: str) -> bool:
        return kind == self.grouping_kind

    def is_declaration(self, kind: str) -> bool:
        return kind in self.declaration_kinds


DEFAULT_VOCABULARY = KindVocabulary()


@dataclass
class IrNode:
    """A node of the IR tree. Each node exclusively owns its children."""

    kind: str
    name: str = ""
    children: list[IrNode] = field(default_factory=list)
    control_flow: ControlFlow | None = None
    dependencies: set[str] = field(default_factory=set)

    @property
    def is_branch(self) -> bool:
        return self.control_flow is ControlFlow.BRANCH

    def walk(self):
        """Yield this node and every descendant, depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def shallow_copy(self) -> IrNode:
        """Copy of this node without its children."""
        return IrNode(
            kind=self.kind,
            name=self.name,
            control_flow=self.control_flow,
            dependencies=set(self.dependencies),
        )

    def clone(self) -> IrNode:
        """Independent copy of the whole subtree."""
        root = self.shallow_copy()
        stack = [(self, root)]
        while stack:
            src, dst = stack.pop()
            for child in src.children:
                copied = child.shallow_copy()
                dst.children.append(copied)
                stack.append((child, copied))
        return root
