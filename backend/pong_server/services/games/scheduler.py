import logging
import time
from typing import Callable, Dict, Optional


TickCallback = Callable[[str, 'TickHandle'], None]


class TickHandle:
    """Handle for one room's repeating tick timer."""

    def __init__(self, room_id: str):
        self.room_id = room_id
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def __repr__(self):
        state = 'cancelled' if self._cancelled else 'active'
        return f"<TickHandle room={self.room_id} {state}>"


class BackgroundTickScheduler:
    """One Socket.IO background task per playing room.

    The worker sleeps to a fixed cadence and stops as soon as its handle is
    cancelled; it never runs the callback for a cancelled handle.
    """

    def __init__(self, socketio, logger: Optional[logging.Logger] = None):
        self._socketio = socketio
        self._logger = logger or logging.getLogger(__name__)

    def start(self, room_id: str, interval: float, on_tick: TickCallback) -> TickHandle:
        handle = TickHandle(room_id)
        self._logger.info(f"[timer-start] room={room_id} interval={interval:.4f}s")
        self._socketio.start_background_task(self._worker, handle, interval, on_tick)
        return handle

    def _worker(self, handle: TickHandle, interval: float, on_tick: TickCallback) -> None:
        next_at = time.monotonic()
        while not handle.cancelled:
            next_at += interval
            delay = next_at - time.monotonic()
            if delay > 0:
                self._socketio.sleep(delay)
            else:
                # Fell behind; restart the cadence instead of bursting.
                next_at = time.monotonic()
            if handle.cancelled:
                break
            try:
                on_tick(handle.room_id, handle)
            except Exception:
                self._logger.exception(f"[tick-error] room={handle.room_id} worker stopping")
                handle.cancel()
                break
        self._logger.info(f"[timer-stop] room={handle.room_id}")


class ManualTickScheduler:
    """Scheduler whose ticks are fired explicitly with ``advance``."""

    def __init__(self):
        self._timers: Dict[str, tuple] = {}

    def start(self, room_id: str, interval: float, on_tick: TickCallback) -> TickHandle:
        handle = TickHandle(room_id)
        self._timers[room_id] = (handle, on_tick)
        return handle

    def active_rooms(self):
        return [rid for rid, (h, _) in self._timers.items() if not h.cancelled]

    def advance(self, ticks: int = 1, room_id: Optional[str] = None) -> int:
        """Fire ``ticks`` rounds of callbacks; return how many callbacks ran."""
        fired = 0
        for _ in range(ticks):
            self._timers = {rid: t for rid, t in self._timers.items() if not t[0].cancelled}
            targets = [room_id] if room_id else list(self._timers)
            for rid in targets:
                entry = self._timers.get(rid)
                if not entry or entry[0].cancelled:
                    continue
                handle, on_tick = entry
                on_tick(rid, handle)
                fired += 1
        return fired
