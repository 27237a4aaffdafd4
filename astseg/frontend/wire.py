"""Protobuf wire format for AST snapshots.

The schema matches protos/ast.proto. Message classes are created at import
time from a FileDescriptorProto, so no protoc step is needed.
"""

from __future__ import annotations

import logging
from pathlib import Path

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError, EncodeError

from astseg.frontend.models import AstNode

logger = logging.getLogger(__name__)

PACKAGE = "ast_proto"

# Nesting limit applied by the protobuf runtimes when parsing
MAX_DECODE_DEPTH = 100

_Field = descriptor_pb2.FieldDescriptorProto


class WireFormatError(ValueError):
    """An AST that cannot be encoded, or bytes that do not decode as an Ast message."""


def _file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto(
        name="ast.proto", package=PACKAGE, syntax="proto3"
    )

    node = fdp.message_type.add(name="AstNode")
    node.field.add(
        name="node_type", number=1, type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL
    )
    node.field.add(name="name", number=2, type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL)
    node.field.add(
        name="children",
        number=3,
        type=_Field.TYPE_MESSAGE,
        label=_Field.LABEL_REPEATED,
        type_name=f".{PACKAGE}.AstNode",
    )

    envelope = fdp.message_type.add(name="Ast")
    envelope.field.add(
        name="root",
        number=1,
        type=_Field.TYPE_MESSAGE,
        label=_Field.LABEL_OPTIONAL,
        type_name=f".{PACKAGE}.AstNode",
    )
    return fdp


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_file_descriptor().SerializeToString())

AstNodeMessage = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.AstNode"))
AstMessage = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.Ast"))


def fill_message(msg, node: AstNode) -> None:
    """Copy an AST into `msg`, creating each child inside its parent."""
    stack = [(msg, node)]
    while stack:
        target, src = stack.pop()
        target.node_type = src.kind
        target.name = src.name
        for child in src.children:
            stack.append((target.children.add(), child))


def from_message(msg) -> AstNode:
    """Convert an AstNode message back into the model.

    Raises WireFormatError when nesting exceeds MAX_DECODE_DEPTH.
    """
    stack = [(msg, 0, [])]
    while True:
        current, next_child, built = stack[-1]
        if next_child < len(current.children):
            if len(stack) >= MAX_DECODE_DEPTH:
                raise WireFormatError(f"AST nesting exceeds {MAX_DECODE_DEPTH} levels")
            stack[-1] = (current, next_child + 1, built)
            stack.append((current.children[next_child], 0, []))
            continue

        stack.pop()
        node = AstNode(kind=current.node_type, name=current.name, children=tuple(built))
        if not stack:
            return node
        stack[-1][2].append(node)


def encode_ast(root: AstNode) -> bytes:
    """Serialize an AST wrapped in the single-field Ast envelope."""
    envelope = AstMessage()
    envelope.root.SetInParent()
    fill_message(envelope.root, root)
    try:
        return envelope.SerializeToString()
    except EncodeError as e:
        raise WireFormatError(f"Could not encode AST: {e}") from e


def decode_ast(data: bytes) -> AstNode | None:
    """Decode an Ast envelope. Returns None when no root is present.

    Decoding is capped at MAX_DECODE_DEPTH levels of nesting, as the protobuf
    runtimes cap it; encoding has no such limit.
    """
    envelope = AstMessage()
    try:
        envelope.ParseFromString(data)
    except DecodeError as e:
        raise WireFormatError(f"Invalid AST wire data: {e}") from e

    if not envelope.HasField("root"):
        return None
    return from_message(envelope.root)


def write_ast(root: AstNode, path: str | Path) -> Path:
    path = Path(path)
    path.write_bytes(encode_ast(root))
    logger.info("AST saved to %s", path)
    return path


def read_ast(path: str | Path) -> AstNode | None:
    return decode_ast(Path(path).read_bytes())
