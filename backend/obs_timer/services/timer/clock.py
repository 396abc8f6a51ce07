"""Derive the displayed quantity of a session from its anchors.

Sessions are passed in their wire form (the camelCase dict produced by
``TimerSession.to_dict``). Sampling is stateless: the same ``(session, now)``
pair always yields the same :class:`Sample`.
"""

import time
from typing import Any, Mapping, NamedTuple, Optional


class Sample(NamedTuple):
    display_ms: int
    expired: bool = False

    def to_dict(self):
        return {'displayMs': self.display_ms, 'expired': self.expired}


def now_ms() -> int:
    return int(time.time() * 1000)


def _anchors(session: Mapping[str, Any]):
    start: Optional[int] = session.get('startTime')
    paused: Optional[int] = session.get('pausedAt')
    running = bool(session.get('isRunning')) and start is not None
    return running, start, paused


def elapsed_ms(session: Mapping[str, Any], now: int) -> Optional[int]:
    """Milliseconds of run time accumulated so far, or None when never started."""
    running, start, paused = _anchors(session)
    if running:
        return max(0, now - start)
    if start is not None and paused is not None:
        return max(0, paused - start)
    return None


def sample(session: Mapping[str, Any], now: int) -> Sample:
    mode = session.get('mode')

    if mode == 'clock':
        # Nothing to derive: the wall instant itself is what gets formatted.
        return Sample(now)

    elapsed = elapsed_ms(session, now)

    if mode == 'countdown':
        duration = session.get('duration') or 0
        if elapsed is None:
            return Sample(duration)
        remaining = max(0, duration - elapsed)
        return Sample(remaining, remaining == 0)

    return Sample(elapsed or 0)
