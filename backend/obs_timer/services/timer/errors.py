class TimerError(Exception):
    """Base class for rejected timer operations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidMode(TimerError):
    pass


class InvalidConfiguration(TimerError):
    pass


class InvalidTransition(TimerError):
    pass
