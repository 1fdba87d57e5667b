"""Fault code registry for the fuse diagnostic subsystem.

Each fuse fault maps to a fixed four-pulse blink code.  Every code starts
with a long "start" pulse; the remaining pulses are read left to right:

    fault      fuse 0    fuse 1
    missing    L S S S   L S S L
    broken     L L S S   L L S L

The registry is built from the full product of ``FaultKind x FuseIndex`` at
import time, so adding a fault kind or a fuse without a code fails loudly.
"""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, TextIO, Tuple, Union


class FuseIndex(enum.IntEnum):
    FUSE_0 = 0
    FUSE_1 = 1

    @classmethod
    def from_flag(cls, flag: bool) -> "FuseIndex":
        """Map the boolean fuse flag (true selects fuse 1) to an index."""
        return cls.FUSE_1 if flag else cls.FUSE_0


class FaultKind(enum.Enum):
    MISSING = "missing"
    BROKEN = "broken"


class PulseKind(enum.Enum):
    LONG = "L"
    SHORT = "S"


ErrorCode = Tuple[PulseKind, ...]


@dataclass(frozen=True)
class Fault:
    kind: FaultKind
    fuse: FuseIndex


@dataclass(frozen=True)
class Operational:
    fuse: FuseIndex


Classification = Union[Operational, Fault]


@dataclass(frozen=True)
class FaultCode:
    fault: Fault
    pulses: ErrorCode

    @property
    def code(self) -> str:
        return render(self.pulses)

    @property
    def description(self) -> str:
        return description(self.fault)


_L, _S = PulseKind.LONG, PulseKind.SHORT

_PULSES: Dict[Tuple[FaultKind, FuseIndex], ErrorCode] = {
    (FaultKind.MISSING, FuseIndex.FUSE_0): (_L, _S, _S, _S),
    (FaultKind.MISSING, FuseIndex.FUSE_1): (_L, _S, _S, _L),
    (FaultKind.BROKEN, FuseIndex.FUSE_0): (_L, _L, _S, _S),
    (FaultKind.BROKEN, FuseIndex.FUSE_1): (_L, _L, _S, _L),
}

# Order used by the ``--codes`` listing.
ENUMERATION_ORDER: Tuple[Fault, ...] = (
    Fault(FaultKind.MISSING, FuseIndex.FUSE_1),
    Fault(FaultKind.MISSING, FuseIndex.FUSE_0),
    Fault(FaultKind.BROKEN, FuseIndex.FUSE_1),
    Fault(FaultKind.BROKEN, FuseIndex.FUSE_0),
)


def _build_registry() -> Dict[Fault, FaultCode]:
    registry: Dict[Fault, FaultCode] = {}
    seen: Dict[ErrorCode, Fault] = {}
    for kind in FaultKind:
        for fuse in FuseIndex:
            fault = Fault(kind, fuse)
            pulses = _PULSES[(kind, fuse)]
            if not pulses or pulses[0] is not PulseKind.LONG:
                raise ValueError(f"Code for {fault} must start with a long pulse")
            if pulses in seen:
                raise ValueError(f"Code {render(pulses)} assigned to both {seen[pulses]} and {fault}")
            seen[pulses] = fault
            registry[fault] = FaultCode(fault, pulses)
    return registry


def render(error_code: ErrorCode) -> str:
    """Render a pulse sequence as a compact ``L``/``S`` string."""
    return "".join(pulse.value for pulse in error_code)


def description(fault: Fault) -> str:
    return f"Fuse {int(fault.fuse)} is {fault.kind.value}"


FAULT_CODES: Dict[Fault, FaultCode] = _build_registry()


def get_fault_code(fault: Fault) -> FaultCode:
    return FAULT_CODES[fault]


def to_error_code(fault: Fault) -> ErrorCode:
    """Map a fault to its blink code."""
    return FAULT_CODES[fault].pulses


def lookup_code(code: str) -> Optional[Fault]:
    """Reverse lookup: return the fault whose rendered code is *code*, or None."""
    for fc in FAULT_CODES.values():
        if fc.code == code.upper():
            return fc.fault
    return None


def list_codes() -> List[str]:
    """Return ``"<code> : <description>"`` lines in enumeration order."""
    return [
        f"{FAULT_CODES[fault].code} : {FAULT_CODES[fault].description}"
        for fault in ENUMERATION_ORDER
    ]


def print_codes(stream: Optional[TextIO] = None) -> None:
    out = stream if stream is not None else sys.stdout
    for line in list_codes():
        out.write(line + "\n")
    out.flush()
