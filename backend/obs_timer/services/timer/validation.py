"""Input validation shared by the store, the state machine and the routes."""

import re
from typing import Any, Dict, Optional

from .errors import InvalidConfiguration, InvalidMode

MODES = ('clock', 'stopwatch', 'countdown')
BASE_THEMES = ('light', 'dark', 'green-screen')

FONT_SIZE_MIN = 24
FONT_SIZE_MAX = 120
BORDER_WIDTH_MAX = 20

COSMETIC_FIELDS = ('showMilliseconds', 'fontSize', 'theme')
TIMING_FIELDS = ('isRunning', 'startTime', 'pausedAt', 'duration')
PATCHABLE_FIELDS = ('mode',) + TIMING_FIELDS + COSMETIC_FIELDS

_COLOR_RE = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')
_THEME_COLOR_KEYS = ('textColor', 'backgroundColor', 'borderColor')


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_mode(mode: Any) -> str:
    if mode not in MODES:
        raise InvalidMode('Invalid timer mode')
    return mode


def validate_font_size(size: Any, lo: int = FONT_SIZE_MIN, hi: int = FONT_SIZE_MAX) -> int:
    """Out-of-range sizes are rejected, never clamped."""
    if not _is_int(size):
        raise InvalidConfiguration('fontSize must be an integer')
    if size < lo or size > hi:
        raise InvalidConfiguration(f'fontSize must be between {lo} and {hi}')
    return size


def validate_theme(theme: Any):
    """Accept a base theme name or an extended palette mapping.

    The value is returned as given so it round-trips through storage unchanged.
    """
    if isinstance(theme, str):
        if theme not in BASE_THEMES:
            raise InvalidConfiguration(f'Unknown theme: {theme}')
        return theme
    if not isinstance(theme, dict):
        raise InvalidConfiguration('theme must be a name or an object')

    allowed = {'base', 'borderWidth', 'shadow'} | set(_THEME_COLOR_KEYS)
    unknown = set(theme) - allowed
    if unknown:
        raise InvalidConfiguration(f"Unknown theme keys: {', '.join(sorted(unknown))}")
    if 'base' in theme and theme['base'] not in BASE_THEMES:
        raise InvalidConfiguration(f"Unknown theme: {theme['base']}")
    for key in _THEME_COLOR_KEYS:
        if key in theme and not (isinstance(theme[key], str) and _COLOR_RE.match(theme[key])):
            raise InvalidConfiguration(f'{key} must be a hex color')
    if 'borderWidth' in theme:
        width = theme['borderWidth']
        if not _is_int(width) or width < 0 or width > BORDER_WIDTH_MAX:
            raise InvalidConfiguration(f'borderWidth must be between 0 and {BORDER_WIDTH_MAX}')
    if 'shadow' in theme and not isinstance(theme['shadow'], bool):
        raise InvalidConfiguration('shadow must be true or false')
    return theme


def validate_duration(duration: Any) -> int:
    if not _is_int(duration) or duration <= 0:
        raise InvalidConfiguration('duration must be a positive number of milliseconds')
    return duration


def optional_instant(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if not _is_int(value) or value < 0:
        raise InvalidConfiguration(f'{name} must be an epoch millisecond timestamp')
    return value


def validate_patch(fields: Any, font_min: int = FONT_SIZE_MIN, font_max: int = FONT_SIZE_MAX) -> Dict[str, Any]:
    """Check a free-form partial update before it reaches the store.

    ``None`` on an anchor or on ``duration`` means "clear the field".
    """
    if not isinstance(fields, dict):
        raise InvalidConfiguration('Update body must be an object')
    unknown = set(fields) - set(PATCHABLE_FIELDS)
    if unknown:
        raise InvalidConfiguration(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    clean: Dict[str, Any] = {}
    for key, value in fields.items():
        if key == 'mode':
            clean[key] = validate_mode(value)
        elif key == 'isRunning' or key == 'showMilliseconds':
            if not isinstance(value, bool):
                raise InvalidConfiguration(f'{key} must be true or false')
            clean[key] = value
        elif key in ('startTime', 'pausedAt'):
            clean[key] = optional_instant(key, value)
        elif key == 'duration':
            clean[key] = None if value is None else validate_duration(value)
        elif key == 'fontSize':
            clean[key] = validate_font_size(value, font_min, font_max)
        elif key == 'theme':
            clean[key] = validate_theme(value)
    return clean
