import json

from typer.testing import CliRunner

from tapflow.cli import app


def _isolate(tmp_path, monkeypatch):
    monkeypatch.setenv("TAPFLOW_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.delenv("TAPFLOW_TERMINAL", raising=False)


def test_payment_command_prints_event_log(tmp_path, monkeypatch):
    _isolate(tmp_path, monkeypatch)
    runner = CliRunner()
    result = runner.invoke(app, ["payment", "--amount", "1200"])
    assert result.exit_code == 0, f"Output: {result.output}"
    assert "createPaymentIntent: succeeded" in result.output
    assert "confirmPaymentIntent: succeeded" in result.output
    assert "Workflow succeeded" in result.output


def test_payment_command_json(tmp_path, monkeypatch):
    _isolate(tmp_path, monkeypatch)
    runner = CliRunner()
    result = runner.invoke(app, ["payment", "--json"])
    assert result.exit_code == 0, f"Output: {result.output}"
    line = next(line for line in result.output.splitlines() if line.startswith("["))
    events = json.loads(line)
    assert [event["method"] for event in events] == [
        "createPaymentIntent",
        "collectPaymentMethod",
        "confirmPaymentIntent",
    ]


def test_setup_without_consent_fails(tmp_path, monkeypatch):
    _isolate(tmp_path, monkeypatch)
    runner = CliRunner()
    result = runner.invoke(app, ["setup", "--no-consent"])
    assert result.exit_code == 1
    assert "collectSetupIntentPaymentMethod: errored" in result.output


def test_readers_command(tmp_path, monkeypatch):
    _isolate(tmp_path, monkeypatch)
    runner = CliRunner()
    result = runner.invoke(app, ["readers"])
    assert result.exit_code == 0
    assert "SIM-0001" in result.output


def test_offline_command_reports_summary(tmp_path, monkeypatch):
    _isolate(tmp_path, monkeypatch)
    runner = CliRunner()
    result = runner.invoke(app, ["offline", "--payments", "3", "--failures", "1"])
    assert result.exit_code == 0, f"Output: {result.output}"
    assert "Forwarded 2 payments" in result.output
    assert "Failed to forward 1 payment" in result.output
