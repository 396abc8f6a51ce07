import logging
from typing import Any, Callable, Optional

from obs_timer import socketio

logger = logging.getLogger(__name__)


class Repeater:
    """Call ``fn`` every ``interval`` seconds on a background task until cancelled.

    ``spawn`` and ``sleep`` default to the Socket.IO background-task helpers so
    the loop cooperates with whichever async mode the server runs in.
    Cancellation is final: a cancelled repeater never calls ``fn`` again, even
    if its task was already scheduled.
    """

    def __init__(self, fn: Callable[[], Any], interval: float, *, name: str = 'repeat',
                 spawn: Optional[Callable] = None, sleep: Optional[Callable[[float], Any]] = None):
        self._fn = fn
        self.interval = interval
        self.name = name
        self._spawn = spawn or socketio.start_background_task
        self._sleep = sleep or socketio.sleep
        self._started = False
        self._cancelled = False

    @property
    def active(self) -> bool:
        return self._started and not self._cancelled

    def start(self) -> 'Repeater':
        if self._started or self._cancelled:
            return self
        self._started = True
        self._spawn(self._run)
        logger.debug(f"[repeat-start] {self.name} every {self.interval}s")
        return self

    def cancel(self) -> None:
        if not self._cancelled:
            self._cancelled = True
            logger.debug(f"[repeat-cancel] {self.name}")

    def _run(self) -> None:
        while not self._cancelled:
            try:
                self._fn()
            except Exception:
                logger.exception(f"[repeat-error] {self.name}")
            if self._cancelled:
                break
            self._sleep(self.interval)

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.cancel()
        return False
