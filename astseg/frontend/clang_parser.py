"""Clang front end — builds an AST snapshot from a C source file via libclang.

libclang does the actual parsing; this module only walks the resulting
cursor tree and copies out each cursor's kind, spelling and children.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from astseg.frontend.models import AstNode

logger = logging.getLogger(__name__)


class ParseError(RuntimeError):
    """The source file could not be turned into an AST."""


# Words whose clang spelling is not plain capitalization
WORD_OVERRIDES = {
    "CSTYLE": "CStyle",
    "OBJC": "ObjC",
}


def kind_label(kind) -> str:
    """Render a cursor kind in CamelCase, e.g. IF_STMT -> IfStmt."""
    raw = getattr(kind, "name", None) or str(kind).rsplit(".", 1)[-1]
    return "".join(
        WORD_OVERRIDES.get(part, part.capitalize()) for part in raw.split("_") if part
    )


def ast_from_cursor(cursor) -> AstNode:
    """Convert a cursor and all of its descendants into AstNodes."""
    # Each frame: cursor, its child iterator, the AstNodes built for its children.
    stack = [(cursor, iter(cursor.get_children()), [])]
    while True:
        current, pending, built = stack[-1]
        child = next(pending, None)
        if child is not None:
            stack.append((child, iter(child.get_children()), []))
            continue

        stack.pop()
        node = AstNode(
            kind=kind_label(current.kind),
            name=current.spelling or "",
            children=tuple(built),
        )
        if not stack:
            return node
        stack[-1][2].append(node)


def parse_source(file_path: str | Path, args: Sequence[str] = ()) -> AstNode:
    """Parse a C file and return the root AstNode of its translation unit.

    Args:
        file_path: Path to the source file.
        args: Extra command-line arguments passed to clang.
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise ParseError(f"Source file not found: {file_path}")

    try:
        from clang import cindex
    except ImportError as e:
        raise ParseError(
            "libclang Python bindings are required. Install them with: pip install libclang"
        ) from e

    try:
        index = cindex.Index.create()
        unit = index.parse(str(file_path), args=list(args))
    except cindex.TranslationUnitLoadError as e:
        raise ParseError(f"Error parsing C file '{file_path}': {e}") from e
    except cindex.LibclangError as e:
        raise ParseError(f"Could not load libclang: {e}") from e

    for diag in unit.diagnostics:
        if diag.severity >= cindex.Diagnostic.Error:
            logger.warning("%s: %s", file_path, diag.spelling)

    root = ast_from_cursor(unit.cursor)
    logger.info("Parsed %s into %d AST nodes", file_path, root.size)
    return root
