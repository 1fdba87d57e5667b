#!/usr/bin/env python3
"""Blinky – fuse diagnosis shown as control-board blink codes.

Reads ``fuse0.txt`` and ``fuse1.txt``, and blinks the code of the first
faulty fuse on the console.  The exit status is 0 in every case; the blink
code (or the listing) is the report.

Usage
-----
    python main.py              # diagnose now
    python main.py --codes      # list every blink code and its meaning
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from configs.loaders import get_section, load_blinky_config
from core.exceptions import BlinkCancelled
from core.logging_setup import setup_logging
from display.blinker import BlinkRenderer
from display.console import DEFAULT_MARKER, ConsoleDisplay
from health.fault_codes import print_codes
from health.fuse_reader import FuseReader
from pipeline.diagnostic_loop import DiagnosticLoop, DiagnosticResult

logger = logging.getLogger("blinky")


CODES_FLAGS = ("-c", "--codes")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Select the run mode.

    Only an exact ``-c`` / ``--codes`` as the first argument selects the
    code listing.  Every other argument set, including ``-h``, abbreviations
    and ``--codes=...``, selects diagnosis and is otherwise ignored.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    codes = bool(args) and args[0] in CODES_FLAGS
    return argparse.Namespace(codes=codes, ignored=args[1:] if codes else args)


def build_loop(cfg: Dict[str, Any]) -> DiagnosticLoop:
    """Wire the reader, display and renderer from the config."""
    fuses_cfg = get_section(cfg, "fuses")
    display_cfg = get_section(cfg, "display")

    reader = FuseReader(
        fuses_cfg.get("directory", "."),
        fuses_cfg.get("filename_template", "fuse{index}.txt"),
    )
    display = ConsoleDisplay(marker=display_cfg.get("marker", DEFAULT_MARKER))
    renderer = BlinkRenderer(display)
    return DiagnosticLoop(reader, renderer)


def _install_stop_signal(cancel: asyncio.Event) -> None:
    """Set *cancel* on SIGTERM so a running blink stops before its next pulse."""
    try:
        asyncio.get_running_loop().add_signal_handler(signal.SIGTERM, cancel.set)
    except (NotImplementedError, RuntimeError):
        logger.debug("SIGTERM handler unavailable; blink runs to completion")


async def diagnose(loop: DiagnosticLoop) -> DiagnosticResult:
    cancel = asyncio.Event()
    _install_stop_signal(cancel)
    result = await loop.run(cancel=cancel)
    if result.healthy:
        logger.info("Diagnosis: all fuses operational")
    else:
        logger.info("Diagnosis: %s (code %s)", result.description, result.code)
    return result


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    if args.codes:
        print_codes()
        return 0

    cfg = load_blinky_config()
    setup_logging(get_section(cfg, "logging"))
    logger.info("Blinky starting (fuse dir=%s)", get_section(cfg, "fuses").get("directory", "."))

    loop = build_loop(cfg)
    try:
        asyncio.run(diagnose(loop))
    except KeyboardInterrupt:
        logger.warning("Interrupted during %s", loop.state.value)
    except BlinkCancelled as exc:
        logger.warning("%s", exc)
    return 0


if __name__ == "__main__":
    sys.exit(main())
