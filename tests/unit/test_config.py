"""Tests for configuration loading."""

from tapflow.config import load_config
from tapflow.terminal import SimulatedTerminal, get_terminal


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
terminal:
  backend: simulated
  simulated:
    collect_delay: 0.5
    start_offline: true
workflow:
  amount: 2500
  currency: eur
log_level: DEBUG
"""
    )
    monkeypatch.setenv("TAPFLOW_CONFIG", str(config_path))

    config = load_config()
    assert config.terminal.simulated.collect_delay == 0.5
    assert config.terminal.simulated.start_offline is True
    assert config.workflow.amount == 2500
    assert config.workflow.currency == "eur"
    assert config.log_level == "DEBUG"


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.setenv("TAPFLOW_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("TAPFLOW_LOG_LEVEL", "warning")

    config = load_config()
    assert config.terminal.backend == "simulated"
    assert config.workflow.customer_consent_collected is True
    assert config.log_level == "WARNING"


def test_get_terminal_uses_config(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
terminal:
  simulated:
    start_offline: true
    location_id: tml_store
"""
    )
    monkeypatch.setenv("TAPFLOW_CONFIG", str(config_path))

    terminal = get_terminal()
    assert isinstance(terminal, SimulatedTerminal)
    assert terminal.location_id == "tml_store"
    assert terminal.offline_status.network_status.value == "offline"
