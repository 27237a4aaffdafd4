"""AST snapshot model — the generic tree handed over by the parsing collaborator."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AstNode:
    """One node of the parsed source tree. Read-only once built."""

    kind: str
    name: str = ""
    children: tuple[AstNode, ...] = ()

    def walk(self):
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def size(self) -> int:
        """Total number of nodes in this subtree."""
        return sum(1 for _ in self.walk())
