"""tapflow: payment workflow orchestration for card-reader terminals."""

from .config import TapflowConfig, load_config
from .contracts import LogEvent, LogMethod, LogResult, PaymentIntent, SetupIntent
from .events import EventLog
from .offline import ForwardingCounters, OfflineForwardingCoordinator
from .terminal import BaseTerminal, SimulatedTerminal, get_terminal
from .ui import ConsolePresenter, IndicatorState, Presenter
from .workflows import (
    PaymentIntentWorkflow,
    SetupIntentWorkflow,
    WorkflowOutcome,
    WorkflowState,
)

__version__ = "0.1.0"
__all__ = [
    "BaseTerminal",
    "ConsolePresenter",
    "EventLog",
    "ForwardingCounters",
    "IndicatorState",
    "LogEvent",
    "LogMethod",
    "LogResult",
    "OfflineForwardingCoordinator",
    "PaymentIntent",
    "PaymentIntentWorkflow",
    "Presenter",
    "SetupIntent",
    "SetupIntentWorkflow",
    "SimulatedTerminal",
    "TapflowConfig",
    "WorkflowOutcome",
    "WorkflowState",
    "get_terminal",
    "load_config",
]
