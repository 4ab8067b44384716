# -*- coding: utf-8 -*-

import logging
from contextlib import nullcontext
from threading import Lock, Timer
from typing import Callable, ContextManager, Optional

logger = logging.getLogger(__name__)


class Ticker:
    """
    One-second repeating clock backed by a chain of daemon threading.Timer.

    At most one timer is armed at any moment; start() while running is a no-op.
    Each start()/stop() bumps a generation number and every timer carries the
    generation it was armed in, so a fire that lost the race against a
    stop()+start() pair is dropped instead of ticking right after the restart.

    If `lock` is given, the fire path holds it while it checks the generation
    and runs the callback. Pass the same (reentrant) lock that guards the
    calls to start()/stop().
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval: float = 1.0,
        lock: Optional[ContextManager] = None,
    ):
        if interval <= 0:
            raise ValueError("Tick interval must be positive.")
        self.callback = callback
        self.interval = float(interval)
        self._outer = lock if lock is not None else nullcontext()
        self._lock = Lock()
        self._timer: Optional[Timer] = None
        self._running = False
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def generation(self) -> int:
        return self._generation

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            self._arm_unlocked()
        logger.debug("ticker started (%.3fs)", self.interval)

    def stop(self) -> None:
        with self._lock:
            self._running = False
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        logger.debug("ticker stopped")

    def _arm_unlocked(self) -> None:
        self._timer = Timer(self.interval, self._fire, args=(self._generation,))
        self._timer.daemon = True
        self._timer.start()

    def _fire(self, generation: int) -> None:
        with self._outer:
            with self._lock:
                if not self._running or generation != self._generation:
                    logger.debug("stale tick dropped")
                    return
                self._timer = None
            try:
                self.callback()
            finally:
                with self._lock:
                    if (
                        self._running
                        and self._timer is None
                        and generation == self._generation
                    ):
                        self._arm_unlocked()
