"""Core data contracts shared by the tapflow workflow layer."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


class LogMethod(str, Enum):
    """Workflow step names recorded in the event log."""

    CREATE_PAYMENT_INTENT = "createPaymentIntent"
    COLLECT_PAYMENT_METHOD = "collectPaymentMethod"
    CONFIRM_PAYMENT_INTENT = "confirmPaymentIntent"
    CANCEL_PAYMENT_INTENT = "cancelPaymentIntent"
    CREATE_SETUP_INTENT = "createSetupIntent"
    COLLECT_SETUP_INTENT_PAYMENT_METHOD = "collectSetupIntentPaymentMethod"
    CONFIRM_SETUP_INTENT = "confirmSetupIntent"
    CANCEL_SETUP_INTENT = "cancelSetupIntent"


class LogResult(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    ERRORED = "errored"


class PaymentIntentStatus(str, Enum):
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_CAPTURE = "requires_capture"
    PROCESSING = "processing"
    CANCELED = "canceled"
    SUCCEEDED = "succeeded"


class SetupIntentStatus(str, Enum):
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_ACTION = "requires_action"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    CANCELED = "canceled"


class NetworkStatus(str, Enum):
    UNKNOWN = "unknown"
    OFFLINE = "offline"
    ONLINE = "online"


class OfflineDetails(BaseModel):
    """Details attached to a payment collected while offline."""

    stripe_id: Optional[str] = None
    stored_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    requires_upload: bool = True


class PaymentIntent(BaseModel):
    """Snapshot of a payment intent as returned by the terminal SDK."""

    stripe_id: Optional[str] = None
    amount: int
    currency: str
    status: PaymentIntentStatus = PaymentIntentStatus.REQUIRES_PAYMENT_METHOD
    capture_method: str = "automatic"
    offline_details: Optional[OfflineDetails] = None
    metadata: Dict[str, str] = Field(default_factory=dict)

    @property
    def display_id(self) -> Optional[str]:
        """Identifier shown to users, preferring the offline id."""
        if self.offline_details and self.offline_details.stripe_id:
            return self.offline_details.stripe_id
        return self.stripe_id


class SetupIntent(BaseModel):
    """Snapshot of a setup intent as returned by the terminal SDK."""

    stripe_id: Optional[str] = None
    status: SetupIntentStatus = SetupIntentStatus.REQUIRES_PAYMENT_METHOD
    customer: Optional[str] = None
    usage: str = "off_session"
    metadata: Dict[str, str] = Field(default_factory=dict)


class PaymentIntentParameters(BaseModel):
    amount: int
    currency: str
    capture_method: str = "automatic"
    description: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)


class SetupIntentParameters(BaseModel):
    customer: Optional[str] = None
    usage: str = "off_session"
    description: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)


class ErrorInfo(BaseModel):
    """Serializable form of an error recorded in the event log."""

    code: str
    message: str
    error_type: str = "SDKOperationError"


class OfflineStatus(BaseModel):
    """Offline state reported by the terminal SDK."""

    network_status: NetworkStatus = NetworkStatus.UNKNOWN
    offline_payments_count: int = Field(default=0, ge=0)


class Reader(BaseModel):
    """A card reader returned by discovery."""

    serial_number: str
    device_type: str = "simulated"
    label: Optional[str] = None
    location_id: Optional[str] = None
    simulated: bool = True


LogObject = Union[PaymentIntent, SetupIntent, ErrorInfo]


class LogEvent(BaseModel):
    """One step of a workflow together with its outcome."""

    method: LogMethod
    result: LogResult = LogResult.PENDING
    object: Optional[LogObject] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_finished(self) -> bool:
        return self.result != LogResult.PENDING

    def succeeded(self, obj: Optional[Any] = None) -> "LogEvent":
        """Return a finalized copy recording success."""
        return self.model_copy(update={"result": LogResult.SUCCEEDED, "object": obj})

    def errored(self, obj: Optional[Any] = None) -> "LogEvent":
        """Return a finalized copy recording failure."""
        return self.model_copy(update={"result": LogResult.ERRORED, "object": obj})

    def describe(self) -> str:
        """Short human-readable summary used by presenters."""
        detail = ""
        if isinstance(self.object, ErrorInfo):
            detail = f" ({self.object.message})"
        elif isinstance(self.object, (PaymentIntent, SetupIntent)):
            ident = self.object.stripe_id or "unsaved"
            detail = f" ({ident}: {self.object.status.value})"
        return f"{self.method.value}: {self.result.value}{detail}"
