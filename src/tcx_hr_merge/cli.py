"""Command-line entry point.

Enriches a master TCX file with the heart rate recorded in a second TCX file
and writes the merged document to stdout.

Usage:
    tcx-hr-merge --master-tcx run.tcx --bpm-tcx strap.tcx > merged.tcx
    python -m tcx_hr_merge --master-tcx run.tcx --bpm-tcx strap.tcx
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from tcx_hr_merge.config import DEFAULT_INDENT, get_config
from tcx_hr_merge.errors import TcxMergeError
from tcx_hr_merge.merge.pipeline import merge_documents
from tcx_hr_merge.tcx.reader import read_document
from tcx_hr_merge.tcx.writer import write_document
from tcx_hr_merge.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="tcx-hr-merge",
        description="Enrich a TCX activity with heart-rate samples from a second TCX file.",
    )
    parser.add_argument(
        "--master-tcx",
        required=True,
        metavar="PATH",
        help="file name of the tcx that should be enriched with heartbeat data",
    )
    parser.add_argument(
        "--bpm-tcx",
        required=True,
        metavar="PATH",
        help="file name of the tcx that contains bpm information",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the merge and return the process exit status."""
    args = create_parser().parse_args(argv)

    config = get_config()
    warnings = config.validate()
    try:
        setup_logging(level=config.log_level, log_dir=config.log_dir)
    except OSError as e:
        print(f"error: cannot set up log file in {config.log_dir}: {e}", file=sys.stderr)
        return 1
    for warning in warnings:
        logger.warning(warning)

    indent = config.indent if config.indent_is_valid else DEFAULT_INDENT

    try:
        master = read_document(args.master_tcx)
        heart_rate = read_document(args.bpm_tcx)
        merged = merge_documents(master, heart_rate)
        write_document(merged, sys.stdout.buffer, indent=indent)
    except TcxMergeError as e:
        logger.debug(f"{type(e).__name__} aborted the merge", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
