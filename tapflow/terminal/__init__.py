"""Terminal factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import TapflowConfig, load_config
from .base import BaseTerminal, Cancelable, OfflineDelegate
from .simulated import SimulatedTerminal


def get_terminal(
    backend: Optional[str] = None, config: Optional[TapflowConfig] = None
) -> BaseTerminal:
    """Factory function to get the configured terminal backend."""

    config = config or load_config()
    backend = (
        backend
        or os.getenv("TAPFLOW_TERMINAL")
        or config.terminal.backend
    ).lower()

    if backend == "simulated":
        sim_conf = config.terminal.simulated
        return SimulatedTerminal(
            collect_delay=sim_conf.collect_delay,
            start_offline=sim_conf.start_offline,
            location_id=sim_conf.location_id,
        )
    else:
        raise ValueError(f"Unsupported terminal backend: {backend}")


__all__ = [
    "BaseTerminal",
    "Cancelable",
    "OfflineDelegate",
    "SimulatedTerminal",
    "get_terminal",
]
