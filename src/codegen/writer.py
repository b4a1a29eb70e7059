# src/codegen/writer.py — v1
"""Generate modules: replace every marked class with its synthesized source."""

from __future__ import annotations

import ast
import asyncio
import logging
import textwrap
from pathlib import Path
from typing import TYPE_CHECKING

from bodyforge.cache.file_store import atomic_write_text
from bodyforge.codegen.scanner import AnnotatedDeclaration, find_declarations
from bodyforge.core.errors import GenerationValidationError
from bodyforge.llm.retry import RetryConfig, with_retry
from bodyforge.logging.context import set_file_context
from bodyforge.pipeline.models import SynthesisResult

if TYPE_CHECKING:
    from bodyforge.pipeline.runner import Pipeline

logger = logging.getLogger(__name__)

GENERATED_SUFFIX = "_impl"
HEADER = "# Generated by bodyforge from {source}. Do not edit.\n"


def default_output_path(source_path: Path, output_dir: Path | None = None) -> Path:
    """`<stem>_impl.py` next to the source, or inside output_dir."""
    name = f"{source_path.stem}{GENERATED_SUFFIX}{source_path.suffix or '.py'}"
    return (output_dir or source_path.parent) / name


def splice(
    source: str,
    declarations: list[AnnotatedDeclaration],
    results: list[SynthesisResult],
) -> str:
    """Replace each declaration's line range with its synthesized class."""
    lines = source.splitlines(keepends=True)
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"
    pairs = sorted(zip(declarations, results), key=lambda p: p[0].start_line, reverse=True)
    for decl, result in pairs:
        replacement = textwrap.indent(result.source, " " * decl.col_offset)
        lines[decl.start_line - 1 : decl.end_line] = [replacement]
    return "".join(lines)


async def generate_module(
    source: str,
    pipeline: Pipeline,
    filename: str = "<source>",
    retry: RetryConfig | None = None,
    semaphore: asyncio.Semaphore | None = None,
) -> str:
    """Run the pipeline for every marked class and return the new module text.

    Declarations are independent and run concurrently; any failure fails the
    whole module (nothing partial is returned).
    """
    set_file_context(filename)
    declarations = find_declarations(source, filename=filename)
    if not declarations:
        logger.info("No @implement declarations in %s", filename)

    async def run_one(decl: AnnotatedDeclaration) -> SynthesisResult:
        if semaphore is None:
            return await with_retry(
                pipeline.run, decl.node, decl.params, label=decl.name, config=retry
            )
        async with semaphore:
            return await with_retry(
                pipeline.run, decl.node, decl.params, label=decl.name, config=retry
            )

    results = list(await asyncio.gather(*(run_one(d) for d in declarations)))
    output = HEADER.format(source=filename) + splice(source, declarations, results)

    try:
        ast.parse(output, filename=filename)
    except SyntaxError as e:
        raise GenerationValidationError(
            f"generated module for {filename} does not parse: {e.msg}"
        ) from e
    return output


async def generate_file(
    source_path: Path,
    output_path: Path,
    pipeline: Pipeline,
    retry: RetryConfig | None = None,
    semaphore: asyncio.Semaphore | None = None,
) -> Path:
    """Generate one file and write it atomically."""
    source = source_path.read_text(encoding="utf-8")
    output = await generate_module(
        source, pipeline, filename=str(source_path), retry=retry, semaphore=semaphore
    )
    atomic_write_text(output_path, output)
    logger.info("Wrote %s", output_path)
    return output_path
