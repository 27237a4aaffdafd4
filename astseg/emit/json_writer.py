"""JSON writer for IR trees and segments."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from astseg.ir.models import ControlFlow, IrNode

logger = logging.getLogger(__name__)

SEGMENT_FILE_PATTERN = "ir_segment_{index}.json"


class SerializationError(ValueError):
    """IR tree that the json module cannot render."""


def _node_dict(node: IrNode) -> dict:
    return {
        "node_type": node.kind,
        "name": node.name,
        "children": [],
        "control_flow": node.control_flow.value if node.control_flow else None,
        "dependencies": sorted(node.dependencies),
    }


def ir_to_dict(node: IrNode) -> dict:
    root = _node_dict(node)
    stack = [(node, root)]
    while stack:
        src, dst = stack.pop()
        for child in src.children:
            child_dict = _node_dict(child)
            dst["children"].append(child_dict)
            stack.append((child, child_dict))
    return root


def ir_from_dict(data: dict) -> IrNode:
    control_flow = data.get("control_flow")
    return IrNode(
        kind=data["node_type"],
        name=data.get("name", ""),
        children=[ir_from_dict(c) for c in data.get("children", [])],
        control_flow=ControlFlow(control_flow) if control_flow else None,
        dependencies=set(data.get("dependencies", [])),
    )


def write_ir(node: IrNode, path: str | Path) -> Path:
    """Write one IR tree as indented JSON.

    The json module renders nesting recursively, so a tree deeper than the
    interpreter's recursion limit raises SerializationError and nothing is
    written.
    """
    path = Path(path)
    try:
        text = json.dumps(ir_to_dict(node), indent=2)
    except RecursionError as e:
        raise SerializationError(f"IR tree too deeply nested to write as JSON: {path}") from e

    path.write_text(text)
    logger.info("IR saved to %s", path)
    return path


def write_segments(segments: Sequence[IrNode], out_dir: str | Path) -> list[Path]:
    """Write each segment to ir_segment_<index>.json, in sequence order."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    return [
        write_ir(seg, out_dir / SEGMENT_FILE_PATTERN.format(index=i))
        for i, seg in enumerate(segments)
    ]
