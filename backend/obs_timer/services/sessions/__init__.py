"""Session persistence: the keyed store that routes, sockets and the CLI share.

Every function here expects an active application context.
"""

from .store import apply_command, create_session, get_session, patch_session
