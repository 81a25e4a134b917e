"""Tests for CLI commands."""

import signal

import pytest
from typer.testing import CliRunner

from easykill.cli import app
from easykill.errors import ProcessListingError, TerminalIOError
from easykill.processes import KillResult, PidRange, ProcessInfo
from easykill.ui.checkbox import Checkbox

runner = CliRunner()

PROCS = [
    ProcessInfo(pid=420, user="alice", command="python -m http.server"),
    ProcessInfo(pid=1337, user="bob", command="python worker.py"),
]


@pytest.fixture
def cli_env(monkeypatch):
    """Fake process table, checkbox and kill; records what the CLI asked for."""
    calls = {"list": [], "menu": [], "kill": []}
    state = {"procs": PROCS, "selection": [], "kill_result": None}

    def fake_list(pattern, pid_range=None, ps_command=None):
        calls["list"].append((pattern.pattern, pid_range, ps_command))
        return state["procs"]

    def fake_interact(self):
        calls["menu"].append({"labels": self.labels, "clear": self._clear, "default": self._default})
        if isinstance(state["selection"], Exception):
            raise state["selection"]
        return state["selection"]

    def fake_terminate(pid, sig=signal.SIGTERM):
        calls["kill"].append((pid, sig))
        return state["kill_result"] or KillResult(pid=pid, ok=True)

    monkeypatch.setattr("easykill.processes.list_processes", fake_list)
    monkeypatch.setattr("easykill.processes.terminate", fake_terminate)
    monkeypatch.setattr(Checkbox, "interact", fake_interact)
    return calls, state


class TestCliBasics:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0, result.output
        assert "Select processes matching" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "easykill version" in result.stdout

    def test_no_pattern(self, cli_env):
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "no pattern given!" in result.stdout

    def test_invalid_regex(self, cli_env):
        result = runner.invoke(app, ["("])
        assert result.exit_code == 2
        assert "Invalid pattern" in result.stdout

    def test_invalid_pid_range(self, cli_env):
        result = runner.invoke(app, ["-r", "20-10", "python"])
        assert result.exit_code == 2
        calls, _ = cli_env
        assert calls["list"] == []

    def test_unknown_signal(self, cli_env):
        result = runner.invoke(app, ["--signal", "BOGUS", "python"])
        assert result.exit_code == 2
        assert "Unknown signal" in result.stdout


class TestCliFlow:
    def test_no_process_found(self, cli_env):
        calls, state = cli_env
        state["procs"] = []
        result = runner.invoke(app, ["python"])
        assert result.exit_code == 0
        assert "WARNING: no process found!" in result.stdout
        assert calls["menu"] == []

    def test_menu_gets_process_labels(self, cli_env):
        calls, _ = cli_env
        runner.invoke(app, ["python"])
        assert calls["menu"][0]["labels"] == [
            "ALL",
            "[420]: python -m http.server",
            "[1337]: python worker.py",
        ]
        assert calls["menu"][0]["clear"] is True
        assert calls["menu"][0]["default"] is False

    def test_nothing_selected(self, cli_env):
        calls, _ = cli_env
        result = runner.invoke(app, ["python"])
        assert result.exit_code == 0
        assert "You did not select anything :(" in result.stdout
        assert calls["kill"] == []

    def test_selected_processes_are_terminated(self, cli_env):
        calls, state = cli_env
        state["selection"] = [1]
        result = runner.invoke(app, ["python"])
        assert result.exit_code == 0
        assert "You selected these processes:" in result.stdout
        assert "success [1337]: python worker.py" in result.stdout
        assert calls["kill"] == [(1337, signal.SIGTERM)]

    def test_kill_failure_is_reported(self, cli_env):
        _, state = cli_env
        state["selection"] = [0]
        state["kill_result"] = KillResult(pid=420, ok=False, errno=1, error="Operation not permitted")
        result = runner.invoke(app, ["python"])
        assert result.exit_code == 0
        assert "failed(1: Operation not permitted) [420]: python -m http.server" in result.stdout

    def test_signal_option(self, cli_env):
        calls, state = cli_env
        state["selection"] = [0, 1]
        runner.invoke(app, ["--signal", "KILL", "python"])
        assert calls["kill"] == [(420, signal.SIGKILL), (1337, signal.SIGKILL)]

    def test_options_reach_menu_and_listing(self, cli_env):
        calls, _ = cli_env
        runner.invoke(app, ["-s", "--no-clear", "-r", "100-2000", "python"])
        assert calls["menu"][0]["default"] is True
        assert calls["menu"][0]["clear"] is False
        assert calls["list"] == [("python", PidRange(100, 2000), ["ps", "aux"])]

    def test_config_env_overrides(self, cli_env, monkeypatch):
        calls, state = cli_env
        monkeypatch.setenv("EASYKILL_PRESELECT", "1")
        monkeypatch.setenv("EASYKILL_CLEAR_ON_EXIT", "false")
        monkeypatch.setenv("EASYKILL_SIGNAL", "INT")
        state["selection"] = [0]
        runner.invoke(app, ["python"])
        assert calls["menu"][0]["default"] is True
        assert calls["menu"][0]["clear"] is False
        assert calls["kill"] == [(420, signal.SIGINT)]

    def test_listing_error(self, cli_env, monkeypatch):
        def broken(*args, **kwargs):
            raise ProcessListingError("run `ps aux` failed")

        monkeypatch.setattr("easykill.processes.list_processes", broken)
        result = runner.invoke(app, ["python"])
        assert result.exit_code == 1
        assert "ERROR" in result.stdout

    def test_terminal_error(self, cli_env):
        _, state = cli_env
        state["selection"] = TerminalIOError("no tty")
        result = runner.invoke(app, ["python"])
        assert result.exit_code == 1
        assert "no tty" in result.stdout
