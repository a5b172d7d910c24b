from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field

from .constants import DEFAULT_CONFIG_FILE


class SimulatedTerminalConfig(BaseModel):
    """Options for the in-process simulated terminal."""

    collect_delay: float = Field(default=0.0, ge=0)
    start_offline: bool = False
    location_id: Optional[str] = "tml_simulated"


class TerminalConfig(BaseModel):
    """Terminal backend configuration settings."""

    backend: Literal["simulated"] = "simulated"
    simulated: SimulatedTerminalConfig = SimulatedTerminalConfig()


class WorkflowConfig(BaseModel):
    """Defaults used when building intent parameters."""

    amount: int = 100
    currency: str = "usd"
    capture_method: Literal["automatic", "manual"] = "automatic"
    customer_consent_collected: bool = True


class TapflowConfig(BaseModel):
    """Top-level configuration model."""

    terminal: TerminalConfig = TerminalConfig()
    workflow: WorkflowConfig = WorkflowConfig()
    log_level: str = "INFO"


def load_config(path: Optional[str] = None) -> TapflowConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to TAPFLOW_CONFIG env
            variable or 'tapflow.yaml' in the current directory.
    """

    config_path = path or os.getenv("TAPFLOW_CONFIG", DEFAULT_CONFIG_FILE)
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = TapflowConfig(**data)
    else:
        config = TapflowConfig()

    env_log_level = os.getenv("TAPFLOW_LOG_LEVEL")
    if env_log_level:
        config.log_level = env_log_level.upper()
    return config
