"""Scenario tests for pipeline.diagnostic_loop."""

import asyncio
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from conftest import write_fuse
from core.exceptions import BlinkCancelled, DiagnosticError
from health.fault_codes import Fault, FaultKind, FuseIndex, Operational, render, to_error_code
from pipeline.diagnostic_loop import DiagnosticLoop, DiagnosticState

IDLE = DiagnosticState.IDLE
FUSE0 = DiagnosticState.READING_FUSE0
FUSE1 = DiagnosticState.READING_FUSE1
RENDERING = DiagnosticState.RENDERING
DONE = DiagnosticState.DONE


def _blinked_code(events) -> str:
    """Recover the L/S code from recorded display events."""
    code = ""
    for i, ev in enumerate(events):
        if ev == ("on",):
            code += "L" if events[i + 1] == ("hold", 1500) else "S"
    return code


class TestScenarios:
    def test_fuse0_missing_skips_fuse1(self, reader, renderer, fuse_dir, events):
        write_fuse(fuse_dir, 1, '{"status": true}')
        loop = DiagnosticLoop(reader, renderer)
        result = asyncio.run(loop.run())

        assert result.fault == Fault(FaultKind.MISSING, FuseIndex.FUSE_0)
        assert result.code == "LSSS"
        assert _blinked_code(events) == "LSSS"
        assert reader.read_counts[FuseIndex.FUSE_0] == 1
        assert reader.read_counts[FuseIndex.FUSE_1] == 0
        assert result.states == [IDLE, FUSE0, RENDERING, DONE]

    def test_fuse1_missing(self, reader, renderer, fuse_dir, events):
        write_fuse(fuse_dir, 0, '{"status": true}')
        result = asyncio.run(DiagnosticLoop(reader, renderer).run())

        assert result.fault == Fault(FaultKind.MISSING, FuseIndex.FUSE_1)
        assert _blinked_code(events) == "LSSL"
        assert result.states == [IDLE, FUSE0, FUSE1, RENDERING, DONE]

    def test_fuse1_broken(self, reader, renderer, fuse_dir, events):
        write_fuse(fuse_dir, 0, '{"status": true}')
        write_fuse(fuse_dir, 1, '{"status": false}')
        result = asyncio.run(DiagnosticLoop(reader, renderer).run())

        assert result.fault == Fault(FaultKind.BROKEN, FuseIndex.FUSE_1)
        assert result.description == "Fuse 1 is broken"
        assert _blinked_code(events) == "LLSL"

    def test_fuse0_broken_skips_fuse1(self, reader, renderer, fuse_dir, events):
        write_fuse(fuse_dir, 0, "garbage")
        result = asyncio.run(DiagnosticLoop(reader, renderer).run())

        assert result.fault == Fault(FaultKind.BROKEN, FuseIndex.FUSE_0)
        assert result.code == render(to_error_code(result.fault)) == "LLSS"
        assert _blinked_code(events) == "LLSS"
        assert reader.read_counts[FuseIndex.FUSE_1] == 0

    def test_all_operational_no_render(self, reader, renderer, fuse_dir, events, fake_sleep):
        write_fuse(fuse_dir, 0, '{"status": true}')
        write_fuse(fuse_dir, 1, '{"status": true}')
        loop = DiagnosticLoop(reader, renderer)
        result = asyncio.run(loop.run())

        assert result.healthy
        assert result.fault is None and result.code is None
        assert result.description == "All fuses operational"
        assert events == []
        assert fake_sleep.durations == []
        assert loop.state == DONE
        assert result.states == [IDLE, FUSE0, FUSE1, DONE]


class TestScanOrder:
    def test_fuse0_read_before_fuse1(self, fuse_dir, renderer):
        order = []

        class SpyReader:
            def read_fuse(self, index):
                order.append(index)
                return Operational(index)

        asyncio.run(DiagnosticLoop(SpyReader(), renderer).run())
        assert order == [FuseIndex.FUSE_0, FuseIndex.FUSE_1]

    def test_reads_happen_before_rendering(self, reader, renderer, fuse_dir, events):
        write_fuse(fuse_dir, 0, '{"status": true}')
        original = reader.read_fuse

        def spy(index):
            events.append(("read", int(index)))
            return original(index)

        reader.read_fuse = spy
        asyncio.run(DiagnosticLoop(reader, renderer).run())
        assert events[:2] == [("read", 0), ("read", 1)]
        assert ("read", 1) not in events[2:]

    def test_unexpected_classification(self, renderer):
        class BadReader:
            def read_fuse(self, index):
                return "ok"

        with pytest.raises(DiagnosticError):
            asyncio.run(DiagnosticLoop(BadReader(), renderer).run())


class TestLifecycle:
    def test_runs_once(self, reader, renderer, fuse_dir):
        write_fuse(fuse_dir, 0, '{"status": true}')
        write_fuse(fuse_dir, 1, '{"status": true}')
        loop = DiagnosticLoop(reader, renderer)
        asyncio.run(loop.run())
        with pytest.raises(DiagnosticError):
            asyncio.run(loop.run())

    def test_cancel_signal_stops_rendering(self, reader, renderer, events):
        cancel = asyncio.Event()
        cancel.set()
        loop = DiagnosticLoop(reader, renderer)
        with pytest.raises(BlinkCancelled):
            asyncio.run(loop.run(cancel=cancel))
        assert loop.state == RENDERING
        assert events == []
