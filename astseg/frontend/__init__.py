"""Front end — the AST snapshot, the libclang collaborator and the wire codec."""

from astseg.frontend.models import AstNode

__all__ = ["AstNode"]
