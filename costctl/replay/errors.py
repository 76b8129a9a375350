"""Error taxonomy for session replay."""

from typing import Optional


class ReplayError(Exception):
    """Base class for replay failures."""


class ValidationError(ReplayError):
    """Bad user input during interactive replay. Recoverable."""


class UnrecognizedCommandError(ValidationError):
    """Input line did not match any replay command."""

    def __init__(self, command: str):
        self.command = command
        super().__init__('Invalid command. Type "h" for help.')


class FetchError(ReplayError):
    """The session could not be obtained from the API."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)
