# src/main.py — v3
"""CLI entry point: generate, key, clean-cache commands.

Usage:
    bodyforge generate <file>... [options]
    bodyforge key <file>...
    bodyforge clean-cache

Typical build step: run `bodyforge generate` over the annotated sources,
then import / package the generated `*_impl.py` modules as usual.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from bodyforge.core.errors import BodyforgeError
from bodyforge.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = _load_settings(args)
    except (BodyforgeError, ValueError) as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Configuration error: %s", exc)
        return 2
    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except BodyforgeError as exc:
        logger.error("%s", exc)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="bodyforge",
        description=f"bodyforge v{__version__} - generate method bodies for marked classes",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- generate ---
    p_generate = subparsers.add_parser(
        "generate", help="Generate implementations for marked classes",
    )
    p_generate.add_argument("files", nargs="+", type=Path, help="Annotated source files")
    p_generate.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output directory (default: next to each source as <stem>_impl.py)",
    )
    p_generate.add_argument(
        "--offline", action="store_true",
        help="Use cached generations only (same as LLM_OFFLINE=1)",
    )
    p_generate.add_argument(
        "--no-network", action="store_true",
        help="Build flag forcing offline mode (same as LLM_NO_NETWORK=1)",
    )
    p_generate.add_argument(
        "-j", "--jobs", type=int, default=4,
        help="Maximum concurrent declarations (default: 4)",
    )
    p_generate.add_argument(
        "--retries", type=int, default=0,
        help="Re-run a declaration this many times on backend errors (default: 0)",
    )
    p_generate.set_defaults(func=_cmd_generate)

    # --- key ---
    p_key = subparsers.add_parser(
        "key", help="Print cache keys of marked classes",
    )
    p_key.add_argument("files", nargs="+", type=Path, help="Annotated source files")
    p_key.set_defaults(func=_cmd_key)

    # --- clean-cache ---
    p_clean = subparsers.add_parser(
        "clean-cache", help="Remove all cached generations",
    )
    p_clean.set_defaults(func=_cmd_clean_cache)

    return parser


def _load_settings(args: argparse.Namespace):
    from bodyforge.config.settings import load_settings

    overrides: dict[str, object] = {}
    if getattr(args, "offline", False):
        overrides["llm_offline"] = True
    if getattr(args, "no_network", False):
        overrides["llm_no_network"] = True
    return load_settings(**overrides)


async def _cmd_generate(args: argparse.Namespace, settings) -> int:
    """Generate every file; each file succeeds or fails on its own."""
    from bodyforge.codegen.writer import default_output_path, generate_file
    from bodyforge.llm.retry import RetryConfig
    from bodyforge.pipeline.runner import Pipeline

    missing = [f for f in args.files if not f.is_file()]
    for f in missing:
        logger.error("File not found: %s", f)
    if missing:
        return 1

    targets = [default_output_path(f, args.output) for f in args.files]
    claimed: dict[Path, Path] = {}
    collisions = 0
    for source, target in zip(args.files, targets):
        resolved = target.resolve()
        if resolved in claimed:
            collisions += 1
            logger.error(
                "%s and %s would both write %s", claimed[resolved], source, target
            )
        else:
            claimed[resolved] = source
    if collisions:
        return 1

    pipeline = Pipeline(settings)
    try:
        if pipeline.mode.offline:
            logger.info("Offline mode (%s): cache only", ", ".join(pipeline.mode.reasons))

        semaphore = asyncio.Semaphore(max(1, args.jobs))
        retry = RetryConfig(max_retries=max(0, args.retries))

        outcomes = await asyncio.gather(
            *(
                generate_file(f, target, pipeline, retry=retry, semaphore=semaphore)
                for f, target in zip(args.files, targets)
            ),
            return_exceptions=True,
        )
    finally:
        pipeline.close()

    failed = 0
    for source, outcome in zip(args.files, outcomes):
        if isinstance(outcome, BodyforgeError):
            failed += 1
            logger.error("%s: %s", source, outcome)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            print(f"{source} -> {outcome}")
    return 1 if failed else 0


async def _cmd_key(args: argparse.Namespace, settings) -> int:
    """Print `<key>  <file>:<Class>` for each marked class."""
    from bodyforge.cache.fingerprint import derive_key
    from bodyforge.codegen.scanner import find_declarations
    from bodyforge.declaration.extractor import extract_context

    for path in args.files:
        source = path.read_text(encoding="utf-8")
        for decl in find_declarations(source, filename=str(path)):
            context = extract_context(decl.node, hint=decl.params.hint)
            print(f"{derive_key(context)}  {path}:{decl.name}")
    return 0


async def _cmd_clean_cache(args: argparse.Namespace, settings) -> int:
    """Remove every cached generation."""
    from bodyforge.cache.cache_factory import create_cache_store

    store = create_cache_store(settings)
    try:
        removed = await store.clear()
    finally:
        store.close()
    print(f"Removed {removed} cached generation(s) from {settings.resolved_cache_dir}")
    return 0


def _setup_logging(settings, verbose: bool) -> None:
    """Configure logging from settings; --verbose forces DEBUG."""
    from bodyforge.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    raise SystemExit(main())
