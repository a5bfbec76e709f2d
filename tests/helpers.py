from __future__ import annotations

import random
from collections import deque
from typing import Iterable, List, Optional, Sequence

from gemcascade.engine import MatchEngine
from gemcascade.snapshot import StateChange

TYPES = ['red', 'green', 'blue', 'yellow', 'purple']


class ScriptedRandom(random.Random):
    """Seeded generator whose ``choice`` first replays a queued script of values."""

    def __init__(self, seed: int = 0, script: Iterable[str] = ()):
        super().__init__(seed)
        self.script: deque[str] = deque(script)

    def queue(self, values: Iterable[str]) -> None:
        self.script.extend(values)

    def choice(self, seq):
        if self.script:
            value = self.script.popleft()
            assert value in seq, f"scripted value {value!r} not among {list(seq)}"
            return value
        return super().choice(seq)


def filler_layout(rows: int, cols: int) -> List[List[Optional[str]]]:
    """Layout without any two equal neighbours: type index (row + 2*col) % 5."""
    return [[TYPES[(r + 2 * c) % 5] for c in range(cols)] for r in range(rows)]


def with_overrides(layout: Sequence[Sequence[Optional[str]]], overrides: dict) -> List[List[Optional[str]]]:
    copied = [list(row) for row in layout]
    for (r, c), value in overrides.items():
        copied[r][c] = value
    return copied


def drive_ticks(engine: MatchEngine, count: int = 60, dt: float = 1 / 60) -> List[StateChange]:
    events: List[StateChange] = []
    for _ in range(count):
        events.extend(engine.step(dt))
    return events


def step_until(engine: MatchEngine, name: str, dt: float = 1 / 60, limit: int = 600) -> List[StateChange]:
    """Step until an event called ``name`` has been produced; return everything seen."""
    events: List[StateChange] = []
    for _ in range(limit):
        batch = engine.step(dt)
        events.extend(batch)
        if any(event.name == name for event in batch):
            return events
    raise AssertionError(f"{name} not emitted within {limit} steps")


def named(events: Sequence[StateChange], name: str) -> List[dict]:
    return [event.payload for event in events if event.name == name]
