"""Builders that validate intent parameters before any SDK call."""

from __future__ import annotations

from typing import Dict, Optional

from .contracts import PaymentIntentParameters, SetupIntentParameters
from .errors import ValidationError

CAPTURE_METHODS = ("automatic", "manual")
SETUP_USAGES = ("on_session", "off_session")


class PaymentIntentParametersBuilder:
    """Collects payment intent fields and validates them on ``build()``."""

    def __init__(self, amount: int, currency: str) -> None:
        self._amount = amount
        self._currency = currency
        self._capture_method = "automatic"
        self._description: Optional[str] = None
        self._metadata: Dict[str, str] = {}

    def set_capture_method(self, capture_method: str) -> "PaymentIntentParametersBuilder":
        self._capture_method = capture_method
        return self

    def set_description(self, description: Optional[str]) -> "PaymentIntentParametersBuilder":
        self._description = description
        return self

    def set_metadata(self, metadata: Dict[str, str]) -> "PaymentIntentParametersBuilder":
        self._metadata = dict(metadata)
        return self

    def build(self) -> PaymentIntentParameters:
        """Return validated parameters.

        Raises:
            ValidationError: If the amount, currency or capture method is invalid.
        """
        if isinstance(self._amount, bool) or not isinstance(self._amount, int):
            raise ValidationError(f"Amount must be an integer, got {self._amount!r}")
        if self._amount <= 0:
            raise ValidationError(f"Amount must be positive, got {self._amount}")
        currency = (self._currency or "").strip().lower()
        if len(currency) != 3 or not currency.isalpha():
            raise ValidationError(f"Invalid currency code: {self._currency!r}")
        if self._capture_method not in CAPTURE_METHODS:
            raise ValidationError(f"Unsupported capture method: {self._capture_method!r}")
        return PaymentIntentParameters(
            amount=self._amount,
            currency=currency,
            capture_method=self._capture_method,
            description=self._description,
            metadata=self._metadata,
        )


class SetupIntentParametersBuilder:
    """Collects setup intent fields and validates them on ``build()``."""

    def __init__(self, customer: Optional[str] = None, usage: str = "off_session") -> None:
        self._customer = customer
        self._usage = usage
        self._description: Optional[str] = None
        self._metadata: Dict[str, str] = {}

    def set_description(self, description: Optional[str]) -> "SetupIntentParametersBuilder":
        self._description = description
        return self

    def set_metadata(self, metadata: Dict[str, str]) -> "SetupIntentParametersBuilder":
        self._metadata = dict(metadata)
        return self

    def build(self) -> SetupIntentParameters:
        if self._customer is not None and not self._customer.strip():
            raise ValidationError("Customer id must not be blank")
        if self._usage not in SETUP_USAGES:
            raise ValidationError(f"Unsupported setup intent usage: {self._usage!r}")
        return SetupIntentParameters(
            customer=self._customer,
            usage=self._usage,
            description=self._description,
            metadata=self._metadata,
        )
