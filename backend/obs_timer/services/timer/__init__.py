"""Timer domain: formatting, clock sampling and session transitions.

Everything in this package is pure and storage-free so it can be shared by
HTTP routes, socket handlers, CLI commands and the tick/poll surfaces.
"""

from .clock import Sample, now_ms, sample
from .errors import InvalidConfiguration, InvalidMode, InvalidTransition, TimerError
from .formatter import format_time
from .state_machine import SessionStateMachine
from .validation import BASE_THEMES, MODES
