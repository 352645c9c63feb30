# server/botapi/errors.py
from __future__ import annotations
from typing import Optional


class BotApiError(Exception):
    """Base class for failures talking to a remote bot API."""
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticationFailed(BotApiError):
    """The bot rejected the stored credentials (HTTP 401). Never retried."""
    status_code = 401

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        super().__init__("Bot API authentication failed: invalid credentials")


class RemoteApiError(BotApiError):
    """Non-2xx (other than 401) answer, or a body that isn't JSON."""

    def __init__(self, endpoint: str, remote_status: Optional[int], reason: str = ""):
        self.endpoint = endpoint
        self.remote_status = remote_status
        msg = f"Bot API error: {remote_status}" if remote_status is not None else "Bot API error"
        if reason:
            msg = f"{msg} {reason}"
        super().__init__(msg)


class RemoteUnavailable(BotApiError):
    """All attempts used up; `last_error` is what the final attempt raised."""

    def __init__(self, endpoint: str, attempts: int, last_error: Optional[BaseException]):
        self.endpoint = endpoint
        self.attempts = attempts
        self.last_error = last_error
        cause = (str(last_error) or last_error.__class__.__name__) if last_error else "unknown error"
        super().__init__(f"Bot API unavailable after {attempts} attempts: {cause}")
