"""Pipeline — runs the AST -> IR -> segments stages and writes their outputs.

Each stage consumes the full output of the previous one. I/O happens only
at the two ends: parsing the source and writing the output files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from astseg.config import PipelineConfig
from astseg.emit.json_writer import write_ir, write_segments
from astseg.frontend.clang_parser import parse_source
from astseg.frontend.models import AstNode
from astseg.frontend.wire import write_ast
from astseg.ir.builder import build_ir
from astseg.ir.models import IrNode
from astseg.ir.optimizer import optimize
from astseg.ir.resolver import resolve_dependencies
from astseg.ir.segmenter import segment

logger = logging.getLogger(__name__)


class Stage(Enum):
    """How far the pipeline runs."""

    IR = "ir"
    OPTIMIZED = "optimized"
    SEGMENTS = "segments"


@dataclass
class PipelineResult:
    ast: AstNode
    ir: IrNode
    stage: Stage
    segments: list[IrNode] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)


def run_pipeline(
    ast: AstNode, config: PipelineConfig | None = None, stage: Stage = Stage.SEGMENTS
) -> PipelineResult:
    """Run the in-memory stages up to and including `stage`."""
    config = config or PipelineConfig()
    vocabulary = config.vocabulary

    ir = build_ir(ast, vocabulary)
    result = PipelineResult(ast=ast, ir=ir, stage=stage)
    if stage is Stage.IR:
        return result

    optimize(ir, vocabulary)
    if stage is Stage.OPTIMIZED:
        return result

    result.segments = segment(ir, vocabulary)
    resolve_dependencies(result.segments)
    logger.info("Pipeline produced %d segments", len(result.segments))
    return result


def process_file(
    source: str | Path,
    config: PipelineConfig | None = None,
    stage: Stage = Stage.SEGMENTS,
    write: bool = True,
) -> PipelineResult:
    """Parse a source file, run the pipeline and write every output file.

    The AST wire file is always written first. IR stages write the full tree
    to the configured IR file; the segment stage writes one file per segment.
    """
    config = config or PipelineConfig()
    ast = parse_source(source, config.clang_args)
    result = run_pipeline(ast, config, stage)

    if not write:
        return result

    out = config.output
    out.directory.mkdir(parents=True, exist_ok=True)
    result.written.append(write_ast(ast, out.ast_path))

    if stage is Stage.SEGMENTS:
        result.written.extend(write_segments(result.segments, out.directory))
    else:
        result.written.append(write_ir(result.ir, out.ir_path))

    return result
