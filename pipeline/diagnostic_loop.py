"""Diagnostic loop – scans both fuses and blinks the first fault found.

State machine:
    IDLE -> READING_FUSE0 -> READING_FUSE1 -> DONE
                 |                 |
                 +---> RENDERING <-+
                           |
                           v
                          DONE

Fuse 0 is always read to completion before fuse 1.  A fault on fuse 0 short
circuits the scan: fuse 1 is never read.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from core.exceptions import DiagnosticError
from display.blinker import BlinkRenderer
from health.fault_codes import Fault, FuseIndex, Operational, get_fault_code
from health.fuse_reader import FuseReader

logger = logging.getLogger(__name__)


class DiagnosticState(enum.Enum):
    IDLE = "IDLE"
    READING_FUSE0 = "READING_FUSE0"
    READING_FUSE1 = "READING_FUSE1"
    RENDERING = "RENDERING"
    DONE = "DONE"


_READ_STATES = {
    FuseIndex.FUSE_0: DiagnosticState.READING_FUSE0,
    FuseIndex.FUSE_1: DiagnosticState.READING_FUSE1,
}


@dataclass
class DiagnosticResult:
    """Outcome of one diagnostic run."""
    fault: Optional[Fault] = None
    code: Optional[str] = None
    states: List[DiagnosticState] = field(default_factory=list)

    @property
    def healthy(self) -> bool:
        return self.fault is None

    @property
    def description(self) -> str:
        if self.fault is None:
            return "All fuses operational"
        return get_fault_code(self.fault).description


class DiagnosticLoop:
    """Runs a single diagnosis: read fuse 0, then fuse 1, then blink.

    Parameters
    ----------
    reader : FuseReader
        Classifier for the fuse status records.
    renderer : BlinkRenderer
        Blink renderer that owns the display while a code is shown.
    """

    def __init__(self, reader: FuseReader, renderer: BlinkRenderer):
        self._reader = reader
        self._renderer = renderer
        self._state = DiagnosticState.IDLE
        self.history: List[DiagnosticState] = [DiagnosticState.IDLE]

    @property
    def state(self) -> DiagnosticState:
        return self._state

    async def run(self, cancel: Optional[asyncio.Event] = None) -> DiagnosticResult:
        """Diagnose both fuses and blink the first fault, if any."""
        if self._state != DiagnosticState.IDLE:
            raise DiagnosticError(f"Diagnostic loop already ran (state={self._state.value})")

        fault = self._scan()
        if fault is None:
            self._transition(DiagnosticState.DONE, "all fuses operational")
            return DiagnosticResult(states=list(self.history))

        fc = get_fault_code(fault)
        self._transition(DiagnosticState.RENDERING, f"{fc.description} -> {fc.code}")
        await self._renderer.blink_code(fc.pulses, cancel=cancel)
        self._transition(DiagnosticState.DONE, "code rendered")
        return DiagnosticResult(fault=fault, code=fc.code, states=list(self.history))

    # -- internal transitions ------------------------------------------------

    def _scan(self) -> Optional[Fault]:
        for index in FuseIndex:
            self._transition(_READ_STATES[index], "reading fuse %d" % index)
            result = self._reader.read_fuse(index)
            if isinstance(result, Fault):
                return result
            if not isinstance(result, Operational):
                raise DiagnosticError(f"Unexpected classification {result!r} for fuse {int(index)}")
        return None

    def _transition(self, new_state: DiagnosticState, reason: str) -> None:
        logger.info("Diagnostic: %s -> %s (%s)", self._state.value, new_state.value, reason)
        self._state = new_state
        self.history.append(new_state)
