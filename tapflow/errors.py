"""Error taxonomy for tapflow workflows."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .contracts import ErrorInfo, PaymentIntent, SetupIntent


class ErrorCode(str, Enum):
    """Error codes reported by the terminal SDK."""

    CANCELED = "canceled"
    DECLINED = "declined"
    TIMEOUT = "timeout"
    NETWORK = "network"
    NOT_CONNECTED = "not_connected"
    INVALID_REQUEST = "invalid_request"
    UNEXPECTED = "unexpected"


class TapflowError(Exception):
    """Base class for all tapflow errors."""


class ValidationError(TapflowError):
    """Raised when intent parameters cannot be built."""


class SDKOperationError(TapflowError):
    """A create, collect, confirm or cancel call failed."""

    default_code = ErrorCode.UNEXPECTED

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        intent: Optional[Union["PaymentIntent", "SetupIntent"]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.intent = intent

    @property
    def is_cancellation(self) -> bool:
        return self.code == ErrorCode.CANCELED

    def to_info(self) -> "ErrorInfo":
        """Serializable snapshot of this error for the event log."""
        from .contracts import ErrorInfo

        return ErrorInfo(
            code=self.code.value,
            message=self.message,
            error_type=type(self).__name__,
        )


class CancellationError(SDKOperationError):
    """The operation was canceled, usually at the user's request."""

    default_code = ErrorCode.CANCELED

    def __init__(self, message: str = "The operation was canceled.", **kwargs) -> None:
        kwargs.setdefault("code", ErrorCode.CANCELED)
        super().__init__(message, **kwargs)


class ForwardingError(SDKOperationError):
    """An offline payment could not be forwarded to the server."""

    default_code = ErrorCode.NETWORK
