"""Timing of the polling cycles and a small named-timeout scheduler."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from .protocol import DEFER_SCHEDULE_UPDATE_LOOP_DELAY, LOG_CYCLE_TAG, TAG

_log = logging.getLogger(TAG)
_cycle_log = logging.getLogger(LOG_CYCLE_TAG)

Clock = Callable[[], int]


def monotonic_ms() -> int:
    """Milliseconds from a monotonic clock."""
    return time.monotonic_ns() // 1_000_000


class CycleManager:
    """Tracks the start and end of request/response polling cycles."""

    def __init__(self, clock: Clock = monotonic_ms) -> None:
        self._clock = clock
        self.cycle_running = False
        self.last_cycle_start_ms = 0
        self.last_complete_cycle_ms = 0

    def reset(self) -> None:
        """No cycle running; the last one counts as complete now."""
        self.cycle_running = False
        self.last_complete_cycle_ms = self._clock()

    def running(self) -> bool:
        return self.cycle_running

    def cycle_started(self) -> None:
        _cycle_log.info("1: Cycle start")
        self.last_cycle_start_ms = self._clock()
        self.cycle_running = True

    def cycle_ended(self, timed_out: bool = False) -> None:
        self.cycle_running = False
        now = self._clock()
        # A deferred cycle keeps its completion time in the future.
        if self.last_complete_cycle_ms < now:
            self.last_complete_cycle_ms = now
        _cycle_log.info(
            "6: Cycle ended in %.1f seconds (with timeout?: %s)",
            (self.last_complete_cycle_ms - self.last_cycle_start_ms) / 1000.0,
            "YES" if timed_out else " NO",
        )

    def has_update_interval_passed(self, update_interval: int) -> bool:
        now = self._clock()
        if now < self.last_complete_cycle_ms:
            return False
        return now - self.last_complete_cycle_ms > update_interval

    def does_cycle_time_out(self, update_interval: int) -> bool:
        now = self._clock()
        if now < self.last_cycle_start_ms:
            return False
        return now - self.last_cycle_start_ms > 2 * update_interval + 1000

    def defer_cycle(self, debug: bool = True) -> None:
        """Push the next cycle back to give the heat pump time to process a write."""
        delay = DEFER_SCHEDULE_UPDATE_LOOP_DELAY * 2 if debug else DEFER_SCHEDULE_UPDATE_LOOP_DELAY
        _cycle_log.info("Defering cycle trigger of %d ms", delay)
        self.last_complete_cycle_ms = self._clock() + delay

    def check_timeout(self, update_interval: int) -> bool:
        """End the cycle if it has run too long; return whether it did."""
        if self.does_cycle_time_out(update_interval):
            _log.warning("Cycle timeout, reseting cycle...")
            self.cycle_ended(True)
            return True
        return False


@dataclass
class _Timeout:
    due_ms: int
    seq: int
    callback: Callable[[], None]


class Scheduler:
    """Named one-shot timeouts; a new timeout replaces one of the same name."""

    def __init__(self, clock: Clock = monotonic_ms) -> None:
        self._clock = clock
        self._timeouts: dict[str, _Timeout] = {}
        self._seq = 0

    def set_timeout(self, name: str, delay_ms: int, callback: Callable[[], None]) -> None:
        self._seq += 1
        self._timeouts[name] = _Timeout(self._clock() + delay_ms, self._seq, callback)

    def cancel(self, name: str) -> bool:
        """Remove a pending timeout; return whether one existed."""
        return self._timeouts.pop(name, None) is not None

    def __contains__(self, name: object) -> bool:
        return name in self._timeouts

    def run_due(self) -> int:
        """Run every timeout that is due, in due order; return how many ran."""
        now = self._clock()
        due = sorted(
            ((name, t) for name, t in self._timeouts.items() if t.due_ms <= now),
            key=lambda item: (item[1].due_ms, item[1].seq),
        )
        ran = 0
        for name, timeout in due:
            # A callback run earlier may have cancelled or replaced this one.
            if self._timeouts.get(name) is not timeout:
                continue
            del self._timeouts[name]
            timeout.callback()
            ran += 1
        return ran