"""Fuse reader – classifies one fuse from its on-disk status record.

A fuse is a small JSON file (``fuse0.txt``, ``fuse1.txt``) holding a record
such as ``{"status": true}``:

    file absent                       -> Fault(MISSING, fuse)
    content not a valid record        -> Fault(BROKEN, fuse)
    valid record, status false        -> Fault(BROKEN, fuse)
    valid record, status true         -> Operational(fuse)

Each call performs exactly one read; nothing is cached or retried.  Any
other I/O failure (permissions, a directory in place of the file) is not a
fuse fault and propagates to the caller.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.exceptions import FuseRecordError
from health.fault_codes import Classification, Fault, FaultKind, FuseIndex, Operational

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FuseRecord:
    status: bool = False


def parse_fuse_record(text: str) -> FuseRecord:
    """Parse the JSON body of a fuse record.

    A missing ``status`` key defaults to false.  A ``status`` that is not a
    JSON boolean, or a body that is not a JSON object, raises FuseRecordError.
    """
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FuseRecordError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise FuseRecordError(f"Expected a JSON object, got {type(data).__name__}")
    status = data.get("status", False)
    if not isinstance(status, bool):
        raise FuseRecordError(f"'status' must be a boolean, got {status!r}")
    return FuseRecord(status=status)


class FuseReader:
    """Reads fuse status records from a directory.

    Parameters
    ----------
    fuse_dir : str or Path
        Directory holding the fuse records.
    filename_template : str
        File name pattern, formatted with ``index``.
    """

    def __init__(self, fuse_dir: str | Path = ".", filename_template: str = "fuse{index}.txt"):
        self._dir = Path(fuse_dir)
        self._template = filename_template
        self.read_counts: Counter = Counter()

    def path_for(self, index: FuseIndex) -> Path:
        return self._dir / self._template.format(index=int(index))

    def read_fuse(self, index: FuseIndex) -> Classification:
        """Read and classify one fuse."""
        index = FuseIndex(index)
        path = self.path_for(index)
        self.read_counts[index] += 1
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.info("Fuse %d: no status record at %s", index, path)
            return Fault(FaultKind.MISSING, index)

        try:
            record = parse_fuse_record(raw.decode("utf-8-sig"))
        except UnicodeDecodeError as exc:
            logger.info("Fuse %d: undecodable record (%s)", index, exc)
            return Fault(FaultKind.BROKEN, index)
        except FuseRecordError as exc:
            logger.info("Fuse %d: unparsable record (%s)", index, exc)
            return Fault(FaultKind.BROKEN, index)

        if not record.status:
            logger.info("Fuse %d: status false", index)
            return Fault(FaultKind.BROKEN, index)

        logger.debug("Fuse %d: operational", index)
        return Operational(index)
