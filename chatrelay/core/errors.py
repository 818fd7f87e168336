# chatrelay/core/errors.py


class ChatRelayError(Exception):
    """Base class for errors reported back to a connection."""


class NameConflictError(ChatRelayError):
    """Join attempted with a username that is already active."""

    def __init__(self, message: str = "Username is already taken") -> None:
        super().__init__(message)
        self.message = message
