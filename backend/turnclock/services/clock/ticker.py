"""Periodic tick sources for the turn clock engine.

A clock calls ``callback(generation)`` once per interval after ``start``.
Every ``start``/``stop`` bumps the generation, so the engine can drop ticks
from a loop that was already cancelled when it woke up.
"""
import logging
import threading
import time
from typing import Callable, Protocol


logger = logging.getLogger(__name__)

TickCallback = Callable[[int], None]


class Clock(Protocol):
    interval_ms: int

    @property
    def running(self) -> bool: ...

    @property
    def generation(self) -> int: ...

    def start(self, callback: TickCallback) -> None: ...

    def stop(self) -> None: ...


class SocketIOClock:
    """Tick loop run as a Socket.IO background task.

    Uses ``socketio.sleep`` so it works under threading, eventlet and gevent.
    """

    def __init__(self, socketio, interval_ms: int = 1000, heartbeat_sec: int = 0):
        self._socketio = socketio
        self.interval_ms = interval_ms
        self._heartbeat_sec = heartbeat_sec
        self._generation = 0
        self._running = False
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def generation(self) -> int:
        return self._generation

    def start(self, callback: TickCallback) -> None:
        with self._lock:
            self._generation += 1
            self._running = True
            gen = self._generation
        logger.info(f"[clock-start] generation={gen} interval={self.interval_ms}ms")
        self._socketio.start_background_task(self._worker, gen, callback)

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._generation += 1
            self._running = False
        logger.info(f"[clock-stop] generation={self._generation}")

    def _worker(self, generation: int, callback: TickCallback) -> None:
        delay = self.interval_ms / 1000.0
        every = max(1, (self._heartbeat_sec * 1000) // self.interval_ms) if self._heartbeat_sec else 0
        ticks = 0
        deadline = time.monotonic()
        while generation == self._generation:
            # Sleep to the next deadline so callback time does not accumulate as drift
            deadline += delay
            self._socketio.sleep(max(0.0, deadline - time.monotonic()))
            if generation != self._generation:
                break
            try:
                callback(generation)
            except Exception:
                logger.exception(f"[tick-error] generation={generation}")
            ticks += 1
            if every and ticks % every == 0:
                logger.info(f"[clock-heartbeat] generation={generation} ticks={ticks}")
        logger.debug(f"[clock-exit] generation={generation} ticks={ticks}")


class ManualClock:
    """Clock that only ticks when told to. Used in TESTING mode."""

    def __init__(self, interval_ms: int = 1000):
        self.interval_ms = interval_ms
        self._generation = 0
        self._running = False
        self._callback = None
        self.starts = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def generation(self) -> int:
        return self._generation

    def start(self, callback: TickCallback) -> None:
        self._generation += 1
        self._running = True
        self._callback = callback
        self.starts += 1

    def stop(self) -> None:
        if self._running:
            self._generation += 1
            self._running = False

    def advance(self, ticks: int = 1) -> int:
        """Fire up to ``ticks`` ticks; stops early once the clock is stopped.

        Returns the number of ticks delivered.
        """
        fired = 0
        for _ in range(ticks):
            if not self._running or self._callback is None:
                break
            self._callback(self._generation)
            fired += 1
        return fired
