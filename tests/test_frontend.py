"""Tests for the front end (cursor conversion, clang parsing, wire format)."""

import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import pytest

from astseg.frontend.clang_parser import ParseError, ast_from_cursor, kind_label, parse_source
from astseg.frontend.models import AstNode
from astseg.frontend.wire import (
    AstMessage,
    MAX_DECODE_DEPTH,
    WireFormatError,
    decode_ast,
    encode_ast,
    read_ast,
    write_ast,
)


class FakeKind(Enum):
    TRANSLATION_UNIT = 1
    FUNCTION_DECL = 2
    PARM_DECL = 3
    COMPOUND_STMT = 4
    CSTYLE_CAST_EXPR = 5
    PAREN_EXPR = 6


@dataclass
class FakeCursor:
    """Stands in for clang.cindex.Cursor."""

    kind: FakeKind
    spelling: str | None = ""
    children: list = field(default_factory=list)

    def get_children(self):
        return iter(self.children)


def _chain(depth: int) -> AstNode:
    node = AstNode(kind="IntegerLiteral", name="1")
    for i in range(depth - 1):
        node = AstNode(kind="BinaryOperator", name=f"op{i}", children=(node,))
    return node


def _sample_ast() -> AstNode:
    return AstNode(
        kind="TranslationUnit",
        name="test.c",
        children=(
            AstNode(
                kind="FunctionDecl",
                name="main",
                children=(AstNode(kind="ParmDecl", name="argc"), AstNode(kind="CompoundStmt")),
            ),
            AstNode(kind="StructDecl", name="point"),
        ),
    )


# --- Cursor Conversion Tests ---


def test_kind_label_camel_case():
    assert kind_label(FakeKind.FUNCTION_DECL) == "FunctionDecl"
    assert kind_label(FakeKind.TRANSLATION_UNIT) == "TranslationUnit"
    assert kind_label("CursorKind.IF_STMT") == "IfStmt"
    assert kind_label(FakeKind.CSTYLE_CAST_EXPR) == "CStyleCastExpr"
    assert kind_label("CursorKind.OBJC_MESSAGE_EXPR") == "ObjCMessageExpr"


def test_ast_from_cursor():
    cursor = FakeCursor(
        FakeKind.TRANSLATION_UNIT,
        "test.c",
        [
            FakeCursor(
                FakeKind.FUNCTION_DECL,
                "main",
                [FakeCursor(FakeKind.PARM_DECL, "argc"), FakeCursor(FakeKind.COMPOUND_STMT, None)],
            )
        ],
    )
    ast = ast_from_cursor(cursor)
    assert ast.kind == "TranslationUnit"
    assert ast.name == "test.c"
    fn = ast.children[0]
    assert fn.kind == "FunctionDecl"
    assert [c.kind for c in fn.children] == ["ParmDecl", "CompoundStmt"]
    assert fn.children[1].name == ""
    assert ast.size == 4


def test_ast_from_deep_cursor_chain():
    cursor = FakeCursor(FakeKind.PAREN_EXPR, "leaf")
    for _ in range(1499):
        cursor = FakeCursor(FakeKind.PAREN_EXPR, "", [cursor])

    ast = ast_from_cursor(FakeCursor(FakeKind.TRANSLATION_UNIT, "deep.c", [cursor]))
    assert ast.size == 1501
    assert list(ast.walk())[-1].name == "leaf"


def test_parse_missing_file():
    with pytest.raises(ParseError):
        parse_source("/nonexistent/missing.c")


def test_parse_real_source():
    cindex = pytest.importorskip("clang.cindex")
    try:
        cindex.Index.create()
    except cindex.LibclangError:
        pytest.skip("libclang shared library not available")

    code = """
struct point { int x; };
int main(int argc) {
    if (argc) { return 1; }
    while (argc) { argc--; }
    return 0;
}
"""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "test.c"
        path.write_text(code)
        ast = parse_source(path)

    assert ast.kind == "TranslationUnit"
    kinds = {n.kind for n in ast.walk()}
    assert {"FunctionDecl", "StructDecl", "IfStmt", "WhileStmt", "CompoundStmt"} <= kinds
    names = {n.name for n in ast.walk() if n.kind == "FunctionDecl"}
    assert "main" in names


# --- Wire Format Tests ---


def test_wire_round_trip():
    ast = _sample_ast()
    assert decode_ast(encode_ast(ast)) == ast


def test_wire_round_trip_file():
    ast = _sample_ast()
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_ast(ast, Path(tmpdir) / "ast_output.pb")
        assert path.exists()
        assert read_ast(path) == ast


def test_wire_envelope_fields():
    msg = AstMessage()
    msg.ParseFromString(encode_ast(_sample_ast()))
    assert msg.HasField("root")
    assert msg.root.node_type == "TranslationUnit"
    assert msg.root.children[0].name == "main"
    assert len(msg.root.children[0].children) == 2


def test_wire_empty_envelope():
    assert decode_ast(b"") is None


def test_wire_empty_root_is_kept():
    assert decode_ast(encode_ast(AstNode(kind=""))) == AstNode(kind="")


def test_wire_invalid_bytes():
    with pytest.raises(WireFormatError):
        decode_ast(b"\x0a\xff\xff\xff")


def test_wire_round_trip_nested_chain():
    ast = _chain(50)
    assert decode_ast(encode_ast(ast)) == ast


def test_wire_encodes_deep_tree():
    ast = _chain(150)
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_ast(ast, Path(tmpdir) / "ast_output.pb")
        data = path.read_bytes()

    assert data == encode_ast(ast)
    assert data.startswith(b"\x0a")
    assert len(data) > 150


def test_wire_decode_depth_limit():
    with pytest.raises(WireFormatError):
        decode_ast(encode_ast(_chain(MAX_DECODE_DEPTH + 50)))
