import logging
import threading
from datetime import tzinfo
from typing import Any, Callable, Dict, Mapping, Optional

from obs_timer.services.timer import format_time, now_ms, sample
from .scheduler import Repeater

logger = logging.getLogger(__name__)

# Fields whose change invalidates the current ticking schedule
_TICK_FIELDS = ('mode', 'isRunning', 'startTime', 'pausedAt', 'duration', 'showMilliseconds')


class DisplaySurface:
    """Read-only renderer for one session.

    Holds at most one ticker and one poller. The ticker is rebuilt whenever a
    timing field changes and is dropped while there is nothing to advance
    (idle or paused timers, expired countdowns). ``unmount`` cancels both.
    """

    def __init__(self, render: Callable[[str], Any], fetch: Optional[Callable[[], Optional[Mapping]]] = None, *,
                 clock: Callable[[], int] = now_ms, tz: Optional[tzinfo] = None,
                 poll_interval: float = 5.0, fine_tick: float = 0.01, coarse_tick: float = 1.0,
                 spawn: Optional[Callable] = None, sleep: Optional[Callable] = None):
        self._render = render
        self._fetch = fetch
        self._clock = clock
        self._tz = tz
        self.poll_interval = poll_interval
        self.fine_tick = fine_tick
        self.coarse_tick = coarse_tick
        self._spawn = spawn
        self._sleep = sleep

        self.session: Optional[Dict[str, Any]] = None
        self.text = ''
        self.expired = False
        self.error: Optional[str] = None
        self._tick_key = None
        # Reentrant: a render callback may deliver an update mid-tick
        self._lock = threading.RLock()
        self._ticker: Optional[Repeater] = None
        self._poller: Optional[Repeater] = None

    @property
    def repeaters(self):
        return [r for r in (self._ticker, self._poller) if r is not None and r.active]

    def tick_interval(self) -> float:
        if not self.session:
            return self.coarse_tick
        if self.session.get('mode') != 'clock' and self.session.get('showMilliseconds'):
            return self.fine_tick
        return self.coarse_tick

    def _needs_ticking(self) -> bool:
        if self.session.get('mode') == 'clock':
            return True
        return bool(self.session.get('isRunning')) and not self.expired

    def mount(self, session: Optional[Mapping] = None) -> 'DisplaySurface':
        with self._lock:
            if session is not None:
                self.update(session)
            if self._fetch is not None and self._poller is None:
                self._poller = Repeater(self.refresh, self.poll_interval, name='display-poll',
                                        spawn=self._spawn, sleep=self._sleep).start()
        return self

    def unmount(self) -> None:
        with self._lock:
            self._stop_ticker()
            if self._poller is not None:
                self._poller.cancel()
                self._poller = None

    def refresh(self) -> None:
        try:
            session = self._fetch()
        except Exception as exc:
            self.error = 'Failed to fetch timer session. Retrying.'
            logger.warning(f"[poll-error] display fetch failed: {exc}")
            return
        if session is None:
            self.error = 'Timer session not found'
            return
        self.error = None
        self.update(session)

    def update(self, session: Mapping) -> None:
        with self._lock:
            self.session = dict(session)
            key = tuple(self.session.get(f) for f in _TICK_FIELDS)
            if key == self._tick_key:
                return
            self._tick_key = key
            self._stop_ticker()
            self.expired = False
            self.tick()
            if self._needs_ticking():
                self._ticker = Repeater(self.tick, self.tick_interval(), name='display-tick',
                                        spawn=self._spawn, sleep=self._sleep).start()

    def tick(self) -> str:
        with self._lock:
            session, key = self.session, self._tick_key
            if session is None:
                return self.text
            result = sample(session, self._clock())
            text = format_time(session.get('mode'), result.display_ms,
                               bool(session.get('showMilliseconds')), self._tz)
            self.text = text
            self._render(text)
            # Only the session that was sampled may stop its own ticker
            if key != self._tick_key:
                return text
            if result.expired and session.get('isRunning') and not self.expired:
                self.expired = True
                self._stop_ticker()
            return text

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def __enter__(self):
        return self.mount()

    def __exit__(self, exc_type, exc, tb):
        self.unmount()
        return False
