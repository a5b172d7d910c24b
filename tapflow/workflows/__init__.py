"""Intent workflows driving the terminal step by step."""

from .base import IntentWorkflow, WorkflowOutcome, WorkflowState
from .payment import PaymentIntentWorkflow
from .setup import SetupIntentWorkflow

__all__ = [
    "IntentWorkflow",
    "PaymentIntentWorkflow",
    "SetupIntentWorkflow",
    "WorkflowOutcome",
    "WorkflowState",
]
