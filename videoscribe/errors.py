"""Error kinds shared by the gateway, the storage layer and the client session."""

from typing import Optional

GENERIC_MESSAGE = "Error processing request"


class VideoscribeError(Exception):
    """Base error. Carries the HTTP status and the message safe to show to callers."""

    status_code = 500

    @property
    def public_message(self) -> str:
        if self.status_code < 500:
            return str(self)
        return GENERIC_MESSAGE


class MissingInput(VideoscribeError):
    status_code = 400


class UnsupportedMediaType(VideoscribeError):
    status_code = 400


class InvalidLocator(VideoscribeError, ValueError):
    status_code = 400


class TransportFailure(VideoscribeError):
    """A network or storage call failed. `status` is the upstream HTTP status, if any."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class RequestTimeout(TransportFailure):
    pass


class InternalError(VideoscribeError):
    pass
