# src/main.py — v2
"""CLI entry point — enrich and order commands.

Usage:
    txflow enrich <raw.json> [--network-id N] [--json]
    txflow order
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from txflow.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    _setup_logging(args.verbose)

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="txflow",
        description=f"txflow v{__version__} — dependency-ordered transaction enrichment",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- enrich ---
    p_enrich = subparsers.add_parser(
        "enrich", help="Enrich one raw transaction JSON file",
    )
    p_enrich.add_argument("file", type=Path, help="Path to raw transaction JSON")
    p_enrich.add_argument(
        "--network-id", type=int, default=None,
        help="Override the network id found in the file",
    )
    p_enrich.add_argument(
        "--json", dest="as_json", action="store_true",
        help="Print the full result as JSON instead of the prompt context",
    )
    p_enrich.set_defaults(func=_cmd_enrich)

    # --- order ---
    p_order = subparsers.add_parser(
        "order", help="Show the execution order of the default pipeline",
    )
    p_order.set_defaults(func=_cmd_order)

    return parser


async def _cmd_enrich(args: argparse.Namespace) -> int:
    """Run the default pipeline on a raw transaction file."""
    from txflow.api.facade import enrich_transaction

    file_path: Path = args.file
    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        return 1

    try:
        raw_data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON in %s: %s", file_path, exc)
        return 1
    if not isinstance(raw_data, dict):
        logger.error("Expected a JSON object in %s", file_path)
        return 1
    if args.network_id is not None:
        raw_data["network_id"] = args.network_id

    result = await enrich_transaction(raw_data)

    if args.as_json:
        payload = {
            "run_id": result.run_id,
            "tx_hash": result.tx_hash,
            "network_id": result.network_id,
            "execution_order": result.execution_order,
            "baggage": result.baggage_json(),
            "rag_context": result.rag_context.model_dump(mode="json"),
            "duration_ms": result.run.duration_ms,
        }
        print(json.dumps(payload, indent=2, default=str))
    else:
        print(result.prompt_context or "(no context produced)")
    return 0


async def _cmd_order(args: argparse.Namespace) -> int:
    """Print the default pipeline's execution order."""
    from txflow.api.facade import build_default_pipeline

    pipeline = build_default_pipeline()
    for line in pipeline.describe_order():
        print(line)
    return 0


def _setup_logging(verbose: bool) -> None:
    """Configure logging from settings; -v forces DEBUG."""
    from txflow.config.settings import Settings
    from txflow.logging.logger import setup_logging_from_settings

    try:
        settings = Settings()
    except Exception as exc:
        logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, stream=sys.stderr)
        logger.warning("Invalid settings, using basic logging: %s", exc)
        return
    setup_logging_from_settings(settings, verbose=verbose)


if __name__ == "__main__":
    sys.exit(main())
