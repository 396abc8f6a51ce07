import logging
from typing import Any, Callable, Dict, Mapping, Optional

from obs_timer.services.timer import SessionStateMachine, now_ms
from obs_timer.services.timer.state_machine import duration_from_parts
from .scheduler import Repeater

logger = logging.getLogger(__name__)


class ControlPanel:
    """Issues user actions for one session and keeps a polled copy of it.

    ``fetch()`` returns the session (or None when it no longer exists) and
    ``send(patch)`` persists a patch and returns the authoritative session.
    Both may raise; failures put the panel in an error state and polling
    carries on. Whatever the server returns replaces the local copy.
    """

    def __init__(self, fetch: Callable[[], Optional[Mapping]], send: Callable[[Dict[str, Any]], Optional[Mapping]], *,
                 machine: Optional[SessionStateMachine] = None, clock: Callable[[], int] = now_ms,
                 poll_interval: float = 5.0, spawn: Optional[Callable] = None, sleep: Optional[Callable] = None):
        self._fetch = fetch
        self._send = send
        self.machine = machine or SessionStateMachine()
        self._clock = clock
        self.poll_interval = poll_interval
        self._spawn = spawn
        self._sleep = sleep

        self.session: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None
        self.loading = True
        self._poller: Optional[Repeater] = None

    @property
    def repeaters(self):
        return [self._poller] if self._poller is not None and self._poller.active else []

    def mount(self) -> 'ControlPanel':
        if self._poller is None:
            self._poller = Repeater(self.refresh, self.poll_interval, name='control-poll',
                                    spawn=self._spawn, sleep=self._sleep).start()
        return self

    def unmount(self) -> None:
        if self._poller is not None:
            self._poller.cancel()
            self._poller = None

    def refresh(self) -> None:
        try:
            session = self._fetch()
        except Exception as exc:
            self.error = 'Failed to fetch timer session. Please try again.'
            logger.warning(f"[poll-error] control fetch failed: {exc}")
        else:
            if session is None:
                self.error = 'Session not found'
            else:
                self.session = dict(session)
                self.error = None
        self.loading = False

    def _submit(self, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not patch:
            return self.session
        try:
            updated = self._send(patch)
        except Exception as exc:
            self.error = 'Failed to update timer settings. Please try again.'
            logger.warning(f"[update-error] fields={sorted(patch)}: {exc}")
            return self.session
        if updated is None:
            self.error = 'Session not found'
            return self.session
        self.session = dict(updated)
        self.error = None
        return self.session

    def start(self):
        if self.session is None:
            return None
        return self._submit(self.machine.start(self.session, self._clock()))

    def pause(self):
        if self.session is None:
            return None
        return self._submit(self.machine.pause(self.session, self._clock()))

    def reset(self):
        if self.session is None:
            return None
        return self._submit(self.machine.reset(self.session))

    def set_countdown_duration(self, duration_ms: int):
        if self.session is None:
            return None
        return self._submit(self.machine.set_countdown_duration(self.session, duration_ms))

    def apply_custom_duration(self, hours: Any, minutes: Any, seconds: Any):
        return self.set_countdown_duration(duration_from_parts(hours, minutes, seconds))

    def change_mode(self, mode: str, duration_ms: Optional[int] = None):
        if self.session is None:
            return None
        return self._submit(self.machine.change_mode(self.session, mode, duration_ms))

    def configure(self, **fields):
        if self.session is None:
            return None
        return self._submit(self.machine.configure(self.session, fields))

    def __enter__(self):
        return self.mount()

    def __exit__(self, exc_type, exc, tb):
        self.unmount()
        return False
