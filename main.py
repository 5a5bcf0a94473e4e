#!/usr/bin/env python3
"""
Repository Graph Builder - CLI Entry Point

Scans a workspace and prints its graph of files, declarations and URLs as
JSON on stdout.
"""

import argparse
import json
import sys
from pathlib import Path

from repograph.config import settings
from repograph.graph.aggregator import build_workspace_graph
from repograph.utils.logger import app_logger, setup_logging


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def main():
    """Main entry point for the graph builder."""
    parser = argparse.ArgumentParser(description="Repository Graph Builder")
    parser.add_argument("root", nargs="?", default=None, help="Workspace root (default: current directory)")
    parser.add_argument("--workers", type=positive_int, default=settings.max_workers, help="Number of worker threads")
    parser.add_argument("--stats", action="store_true", help="Print a summary instead of the full graph")
    parser.add_argument("--log-level", default=settings.log_level, help="Log level")

    args = parser.parse_args()

    logger = app_logger
    if args.log_level.upper() != settings.log_level:
        logger = setup_logging(args.log_level.upper(), settings.log_file)

    root = Path(args.root).resolve() if args.root else Path.cwd().resolve()
    if not root.is_dir():
        logger.error(f"Workspace root is not a directory: {root}")
        sys.exit(1)

    try:
        result = build_workspace_graph(str(root), max_workers=args.workers)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        sys.exit(130)

    if args.stats:
        summary = dict(result.metadata)
        summary["failures"] = [failure.to_dict() for failure in result.failures]
        print(json.dumps(summary, indent=2))
    else:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
