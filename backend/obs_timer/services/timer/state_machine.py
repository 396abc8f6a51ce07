"""Session transitions.

States
------
idle      never started, or reset: no anchors
running   ``isRunning`` with a ``startTime`` anchor
paused    stopped with both ``startTime`` and ``pausedAt`` anchors

Every action returns a *patch*: the complete set of fields it owns, with
``None`` meaning "clear". The machine never touches storage; the caller
persists the patch. Actions that do not apply in the current state return
an empty patch.
"""

from typing import Any, Dict, Mapping, Optional

from .errors import InvalidConfiguration, InvalidTransition
from .validation import (
    COSMETIC_FIELDS,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    validate_duration,
    validate_font_size,
    validate_mode,
    validate_theme,
)

IDLE = 'idle'
RUNNING = 'running'
PAUSED = 'paused'

DEFAULT_COUNTDOWN_MS = 5 * 60 * 1000

COUNTDOWN_PRESETS = (
    ('5 min', 5 * 60 * 1000),
    ('15 min', 15 * 60 * 1000),
    ('30 min', 30 * 60 * 1000),
    ('1 hour', 60 * 60 * 1000),
)

ACTIONS = ('start', 'pause', 'reset', 'setCountdownDuration', 'changeMode', 'configure')

Patch = Dict[str, Any]


def state_of(session: Mapping[str, Any]) -> str:
    start = session.get('startTime')
    if session.get('isRunning') and start is not None:
        return RUNNING
    if start is not None and session.get('pausedAt') is not None:
        return PAUSED
    return IDLE


def duration_from_parts(hours: Any, minutes: Any, seconds: Any) -> int:
    """Total milliseconds from form-style parts; unparseable parts count as 0."""
    def _part(value):
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            return 0

    total = (_part(hours) * 3600 + _part(minutes) * 60 + _part(seconds)) * 1000
    return validate_duration(total)


def merge(session: Mapping[str, Any], patch: Patch) -> Dict[str, Any]:
    """Apply a patch to a session snapshot without touching storage."""
    merged = dict(session)
    merged.update(patch)
    return merged


class SessionStateMachine:

    def __init__(self, default_countdown_ms: int = DEFAULT_COUNTDOWN_MS,
                 font_size_min: int = FONT_SIZE_MIN, font_size_max: int = FONT_SIZE_MAX):
        self.default_countdown_ms = default_countdown_ms
        self.font_size_min = font_size_min
        self.font_size_max = font_size_max

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'SessionStateMachine':
        return cls(
            default_countdown_ms=int(config.get('DEFAULT_COUNTDOWN_MS', DEFAULT_COUNTDOWN_MS)),
            font_size_min=int(config.get('FONT_SIZE_MIN', FONT_SIZE_MIN)),
            font_size_max=int(config.get('FONT_SIZE_MAX', FONT_SIZE_MAX)),
        )

    def start(self, session: Mapping[str, Any], now: int) -> Patch:
        state = state_of(session)
        if state == RUNNING:
            return {}
        if session.get('mode') == 'clock':
            return {'isRunning': True}
        if state == PAUSED:
            # Shift the anchor so the time already run is preserved.
            elapsed_before_pause = max(0, session['pausedAt'] - session['startTime'])
            return {'isRunning': True, 'startTime': now - elapsed_before_pause, 'pausedAt': None}
        return {'isRunning': True, 'startTime': now, 'pausedAt': None}

    def pause(self, session: Mapping[str, Any], now: int) -> Patch:
        if session.get('mode') == 'clock':
            return {'isRunning': False, 'pausedAt': now} if session.get('isRunning') else {}
        if state_of(session) != RUNNING:
            return {}
        # pausedAt never precedes startTime
        return {'isRunning': False, 'pausedAt': max(now, session['startTime'])}

    def reset(self, session: Optional[Mapping[str, Any]] = None) -> Patch:
        return {'isRunning': False, 'startTime': None, 'pausedAt': None}

    def set_countdown_duration(self, session: Mapping[str, Any], duration_ms: Any) -> Patch:
        if session.get('mode') != 'countdown':
            raise InvalidTransition('Duration can only be set on a countdown timer')
        patch = self.reset(session)
        patch['duration'] = validate_duration(duration_ms)
        return patch

    def change_mode(self, session: Mapping[str, Any], mode: Any, duration_ms: Any = None) -> Patch:
        mode = validate_mode(mode)
        if session.get('mode') == mode:
            return {}
        patch = self.reset(session)
        patch['mode'] = mode
        if mode == 'countdown':
            patch['duration'] = (
                self.default_countdown_ms if duration_ms is None else validate_duration(duration_ms)
            )
        elif duration_ms is not None:
            raise InvalidConfiguration('duration only applies to countdown timers')
        return patch

    def configure(self, session: Mapping[str, Any], fields: Mapping[str, Any]) -> Patch:
        """Merge cosmetic settings; timing anchors are never touched."""
        unknown = set(fields) - set(COSMETIC_FIELDS)
        if unknown:
            raise InvalidConfiguration(f"Not a display setting: {', '.join(sorted(unknown))}")
        patch: Patch = {}
        if 'showMilliseconds' in fields:
            if not isinstance(fields['showMilliseconds'], bool):
                raise InvalidConfiguration('showMilliseconds must be true or false')
            patch['showMilliseconds'] = fields['showMilliseconds']
        if 'fontSize' in fields:
            patch['fontSize'] = validate_font_size(fields['fontSize'], self.font_size_min, self.font_size_max)
        if 'theme' in fields:
            patch['theme'] = validate_theme(fields['theme'])
        return patch

    def apply(self, session: Mapping[str, Any], command: Mapping[str, Any], now: int) -> Patch:
        """Dispatch a tagged command such as ``{'action': 'changeMode', 'mode': 'countdown'}``."""
        action = command.get('action')
        if action not in ACTIONS:
            raise InvalidTransition(f'Unknown action: {action}')
        if action == 'start':
            return self.start(session, now)
        if action == 'pause':
            return self.pause(session, now)
        if action == 'reset':
            return self.reset(session)
        if action == 'setCountdownDuration':
            return self.set_countdown_duration(session, command.get('duration'))
        if action == 'changeMode':
            return self.change_mode(session, command.get('mode'), command.get('duration'))
        fields = {k: v for k, v in command.items() if k not in ('action', 'now')}
        return self.configure(session, fields)
