"""Shared pytest fixtures for Blinky tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Ensure project root is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from display.blinker import BlinkRenderer
from health.fuse_reader import FuseReader


class RecordingDisplay:
    """Display double that logs every primitive call as an event."""

    def __init__(self, events: Optional[List[tuple]] = None):
        self.events: List[tuple] = events if events is not None else []

    def write_marker(self) -> None:
        self.events.append(("on",))

    def clear_line(self) -> None:
        self.events.append(("off",))


class FakeSleep:
    """Coroutine-compatible sleep that records durations instead of waiting."""

    def __init__(self, events: List[tuple], on_sleep=None):
        self.events = events
        self.durations: List[float] = []
        self._on_sleep = on_sleep

    async def __call__(self, seconds: float) -> None:
        self.durations.append(seconds)
        self.events.append(("hold", round(seconds * 1000)))
        if self._on_sleep is not None:
            self._on_sleep(len(self.durations))

    @property
    def total_ms(self) -> int:
        return round(sum(self.durations) * 1000)


@pytest.fixture
def events() -> List[tuple]:
    return []


@pytest.fixture
def display(events) -> RecordingDisplay:
    return RecordingDisplay(events)


@pytest.fixture
def fake_sleep(events) -> FakeSleep:
    return FakeSleep(events)


@pytest.fixture
def renderer(display, fake_sleep) -> BlinkRenderer:
    return BlinkRenderer(display, sleep=fake_sleep)


@pytest.fixture
def fuse_dir(tmp_path) -> Path:
    return tmp_path


def write_fuse(directory: Path, index: int, content: str) -> Path:
    path = directory / f"fuse{int(index)}.txt"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def reader(fuse_dir) -> FuseReader:
    return FuseReader(fuse_dir)


@pytest.fixture
def blinky_cfg(fuse_dir, tmp_path) -> dict:
    """Minimal runtime configuration for testing."""
    return {
        "fuses": {"directory": str(fuse_dir), "filename_template": "fuse{index}.txt"},
        "display": {"marker": "*"},
        "logging": {"level": "DEBUG", "file": str(tmp_path / "test_blinky.log"), "console": False},
    }
