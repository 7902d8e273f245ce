"""One-shot timers driven by the game's millisecond tick count."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

TimerCallback = Callable[[int, Any], None]

_MAX_TIMER_ID = 2 ** 31 - 1


@dataclass
class _Timer:
    target_time: int
    caller: Any
    callback: Optional[TimerCallback]
    timer_id: int


class TimerQueue:
    """A bounded queue of timers ordered by their due tick.

    Set ``ticks`` to the current game time in milliseconds before calling
    :meth:`check`. Timer id 0 never names a timer; :meth:`set` returns it when
    the queue is full and :meth:`kill` returns it when no timer was removed.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("timer capacity must be positive")
        self.capacity = capacity
        self.ticks = 0
        self._next_id = 1
        self._active: List[_Timer] = []

    def __len__(self) -> int:
        return len(self._active)

    def set(self, time: float, caller: Any, callback: Optional[TimerCallback]) -> int:
        """Schedule callback(timer_id, caller) after `time` seconds; return the id."""
        if len(self._active) >= self.capacity:
            return 0
        target = self.ticks + int(time * 1000.0)
        position = next(
            (i for i, t in enumerate(self._active) if target < t.target_time),
            len(self._active),
        )
        timer = _Timer(target, caller, callback, self._next_id)
        self._active.insert(position, timer)
        self._next_id += 1
        if self._next_id > _MAX_TIMER_ID:
            self._next_id = 1
        return timer.timer_id

    def kill(self, timer_id: int) -> int:
        """Cancel a pending timer; return its id, or 0 if it was not pending."""
        for position, timer in enumerate(self._active):
            if timer.timer_id == timer_id:
                del self._active[position]
                return timer_id
        return 0

    def _fire_first(self) -> None:
        timer = self._active.pop(0)
        if timer.callback is not None:
            timer.callback(timer.timer_id, timer.caller)

    def check(self) -> int:
        """Fire due timers and return how many fired.

        At most two timers fire per call, plus any that are at least 100 ms late.
        """
        fired = 0
        while self._active and self.ticks >= self._active[0].target_time:
            self._fire_first()
            fired += 1
            if fired > 1:
                break
        while self._active and self.ticks >= self._active[0].target_time + 100:
            self._fire_first()
            fired += 1
        return fired