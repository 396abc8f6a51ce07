"""Client-side surfaces: the ticking display and the polling control panel.

Both own their repeating tasks and release them on teardown; nothing here
is shared at module level.
"""

from .control import ControlPanel
from .display import DisplaySurface
from .scheduler import Repeater
