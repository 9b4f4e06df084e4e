"""
Cooperative pause switch shared by every active stream.

Pausing never closes a vendor connection: streams simply stop pulling the
next upstream event until the switch is cleared. One controller is meant to
be shared, so its state is guarded by a lock and waiters may live on any
event loop.
"""

import asyncio
import logging
import threading
from typing import Callable, Dict, List, Optional, Set

from ..errors import PauseAbortError

logger = logging.getLogger(__name__)

PauseListener = Callable[[], None]


class PauseController:
    """A single pause switch with async wait and change notifications."""

    def __init__(self):
        self._paused = False
        self._lock = threading.Lock()
        self._waiters: Set[asyncio.Future] = set()
        self._listeners: Dict[str, List[PauseListener]] = {"paused": [], "resumed": []}

    def is_paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        with self._lock:
            if self._paused:
                return
            self._paused = True
        logger.info("Streams paused")
        self._notify("paused")

    def resume(self) -> None:
        with self._lock:
            if not self._paused:
                return
            self._paused = False
            waiters = list(self._waiters)
            self._waiters.clear()
        for waiter in waiters:
            loop = waiter.get_loop()
            if not loop.is_closed():
                loop.call_soon_threadsafe(_wake, waiter)
        logger.info("Streams resumed")
        self._notify("resumed")

    def on(self, event: str, listener: PauseListener) -> None:
        """Register a listener for ``paused`` or ``resumed``."""
        if event not in self._listeners:
            raise ValueError(f"Unknown pause event: {event}")
        self._listeners[event].append(listener)

    def off(self, event: str, listener: PauseListener) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    async def wait_while_paused(self, cancel_event: Optional[asyncio.Event] = None) -> None:
        """Return once the switch is clear.

        Raises:
            PauseAbortError: ``cancel_event`` fired before the pause cleared
        """
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise PauseAbortError()
            with self._lock:
                if not self._paused:
                    return
                waiter = asyncio.get_running_loop().create_future()
                self._waiters.add(waiter)

            cancel_task = None
            try:
                if cancel_event is None:
                    await waiter
                else:
                    cancel_task = asyncio.ensure_future(cancel_event.wait())
                    await asyncio.wait({waiter, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                if cancel_task is not None:
                    cancel_task.cancel()
                with self._lock:
                    self._waiters.discard(waiter)
                if not waiter.done():
                    waiter.cancel()

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners[event]):
            try:
                listener()
            except Exception as e:
                logger.error("Pause listener for %s failed: %s", event, e)


def _wake(waiter: asyncio.Future) -> None:
    if not waiter.done():
        waiter.set_result(None)


_controller: Optional[PauseController] = None


def get_pause_controller() -> PauseController:
    """Process-wide controller used when none is passed explicitly."""
    global _controller
    if _controller is None:
        _controller = PauseController()
    return _controller


def set_pause_controller(controller: Optional[PauseController]) -> None:
    global _controller
    _controller = controller
