"""Blink renderer – plays an error code on the indicator.

Every pulse is: marker on, hold for the pulse duration, line cleared, hold
for the fixed gap.  A code of n pulses therefore takes
``sum(pulse durations) + n * GAP_MS``.  The holds are the only suspension
points; nothing else yields to the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from core.exceptions import BlinkCancelled
from display.console import Display
from health.fault_codes import ErrorCode, PulseKind, render

logger = logging.getLogger(__name__)

LONG_MS = 1500
SHORT_MS = 500
GAP_MS = 500

_DURATIONS_MS = {
    PulseKind.LONG: LONG_MS,
    PulseKind.SHORT: SHORT_MS,
}


def pulse_duration(pulse: PulseKind) -> int:
    return _DURATIONS_MS[pulse]


def code_duration(error_code: ErrorCode) -> int:
    """Total time-units needed to render *error_code*, trailing gap included."""
    return sum(pulse_duration(p) + GAP_MS for p in error_code)


class BlinkRenderer:
    """Drives a display one pulse at a time with exact timing.

    Parameters
    ----------
    display : Display
        Indicator primitive (``write_marker`` / ``clear_line``).
    sleep : callable
        Coroutine function used for every hold; ``asyncio.sleep`` by default.
    time_unit_s : float
        Seconds per time-unit (milliseconds by default).
    """

    def __init__(
        self,
        display: Display,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        time_unit_s: float = 0.001,
    ):
        self._display = display
        self._sleep = sleep
        self._unit = time_unit_s
        self._lit = False

    @property
    def lit(self) -> bool:
        return self._lit

    async def _hold(self, units: int) -> None:
        await self._sleep(units * self._unit)

    async def blink(self, pulse: PulseKind) -> None:
        """Render one pulse followed by the inter-pulse gap."""
        self._display.write_marker()
        self._lit = True
        try:
            await self._hold(pulse_duration(pulse))
        finally:
            self._blank()
        await self._hold(GAP_MS)

    async def blink_code(
        self,
        error_code: ErrorCode,
        cancel: Optional[asyncio.Event] = None,
    ) -> None:
        """Render every pulse of *error_code* in order.

        If *cancel* is set, rendering stops before the next pulse and
        BlinkCancelled is raised.  A hold already in progress runs out.
        """
        if not error_code:
            raise ValueError("Error code must contain at least one pulse")
        code = render(error_code)
        logger.info("Blinking code %s (%d ms)", code, code_duration(error_code))
        for emitted, pulse in enumerate(error_code):
            if cancel is not None and cancel.is_set():
                logger.warning("Blink code %s cancelled after %d pulses", code, emitted)
                raise BlinkCancelled(emitted, len(error_code))
            await self.blink(pulse)
        logger.debug("Blink code %s complete", code)

    def _blank(self) -> None:
        if self._lit:
            self._display.clear_line()
            self._lit = False
