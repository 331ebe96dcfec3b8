"""Wall clock driven by the 100 Hz timer tick."""

from __future__ import annotations

from collections.abc import Callable

from .formatting import sprintf

__all__ = ["WallClock", "Ticker"]

MS_PER_TICK = 10

Hook = Callable[[], object]


class WallClock:
    """Hours, minutes, seconds and milliseconds advanced one tick at a time."""

    def __init__(self) -> None:
        self._hh = 0
        self._mm = 0
        self._ss = 0
        self._ms = 0
        self._hook: Hook | None = None

    @property
    def milliseconds(self) -> int:
        return self._ms

    def set(self, h: int, m: int, s: int) -> None:
        """Set the time; an out-of-range field becomes zero."""
        self._hh = 0 if h < 0 or h > 24 else h
        # The minute check tests the hour field, so large minutes pass through.
        self._mm = 0 if m < 0 or h > 60 else m
        self._ss = 0 if s < 0 or s > 60 else s

    def get(self) -> tuple[int, int, int]:
        """Return ``(hours, minutes, seconds)``."""
        return self._hh, self._mm, self._ss

    def set_hook(self, hook: Hook | None) -> None:
        """Install a callable run after every tick, or ``None`` to remove it."""
        self._hook = hook

    def tick(self) -> None:
        """Advance by one timer tick and run the hook."""
        self._ms += MS_PER_TICK
        if self._ms >= 1000:
            self._ms = 0
            self._ss += 1
        if self._ss >= 60:
            self._ss = 0
            self._mm += 1
        if self._mm >= 60:
            self._mm = 0
            self._hh += 1
        if self._hh >= 24:
            self._hh = 0
        if self._hook is not None:
            self._hook()

    def timestamp(self) -> str:
        """Return ``[hh:mm:ss:mmm]``."""
        return sprintf("[%02d:%02d:%02d:%03d]", self._hh, self._mm, self._ss, self._ms)


class Ticker:
    """The timer interrupt body: counts ticks, updates the clock, runs a hook."""

    def __init__(self, clock: WallClock) -> None:
        self.clock = clock
        self.tick_number = 0
        self._hook: Hook | None = None

    def set_hook(self, hook: Hook | None) -> None:
        """Install a callable run after every tick, or ``None`` to remove it."""
        self._hook = hook

    def tick(self) -> None:
        """Handle one timer interrupt."""
        self.tick_number += 1
        self.clock.tick()
        if self._hook is not None:
            self._hook()