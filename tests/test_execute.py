from __future__ import annotations

import errno
import os
import signal
from pathlib import Path

import pytest

from treefind import execute
from treefind.execute import (
    ExecutionError,
    classify_status,
    describe_outcome,
    run_and_report,
    wait_for_child,
)
from treefind.models import Continued, Exited, Killed, Stopped

# Raw wait statuses as encoded by Linux
EXITED_3 = 3 << 8
KILLED_9 = signal.SIGKILL
STOPPED = (signal.SIGSTOP << 8) | 0x7F
CONTINUED = 0xFFFF


def test_classify_status():
    assert classify_status(0) == Exited(0)
    assert classify_status(EXITED_3) == Exited(3)
    assert classify_status(KILLED_9) == Killed(signal.SIGKILL)
    assert classify_status(STOPPED) == Stopped(signal.SIGSTOP)
    assert classify_status(CONTINUED) == Continued()


def test_only_exit_and_kill_are_terminal():
    assert Exited(0).terminal
    assert Killed(9).terminal
    assert not Stopped(19).terminal
    assert not Continued().terminal


def test_describe_outcome():
    assert describe_outcome(Exited(0)) == "Normal exited, status = 0"
    assert describe_outcome(Killed(9)) == "Was killed by signal 9"
    assert describe_outcome(Stopped(19)) == "Was stopped by signal 19"
    assert describe_outcome(Continued()) == "Was continued"


def test_wait_keeps_waiting_after_stop_and_continue(monkeypatch: pytest.MonkeyPatch):
    statuses = [STOPPED, CONTINUED, EXITED_3]
    calls: list[tuple[int, int]] = []

    def fake_waitpid(pid: int, options: int) -> tuple[int, int]:
        calls.append((pid, options))
        return pid, statuses.pop(0)

    monkeypatch.setattr(execute.os, "waitpid", fake_waitpid)
    lines: list[str] = []

    outcome = wait_for_child(1234, lines.append)

    assert outcome == Exited(3)
    assert lines == [
        f"Was stopped by signal {int(signal.SIGSTOP)}",
        "Was continued",
        "Normal exited, status = 3",
    ]
    assert calls == [(1234, os.WUNTRACED | os.WCONTINUED)] * 3


def test_wait_failure_is_fatal(monkeypatch: pytest.MonkeyPatch):
    def fake_waitpid(pid: int, options: int) -> tuple[int, int]:
        raise ChildProcessError(errno.ECHILD, "No child processes")

    monkeypatch.setattr(execute.os, "waitpid", fake_waitpid)

    with pytest.raises(ExecutionError, match="waitpid: No child processes"):
        wait_for_child(1234, lambda line: None)


def test_fork_failure_is_fatal(monkeypatch: pytest.MonkeyPatch):
    def fake_fork() -> int:
        raise BlockingIOError(errno.EAGAIN, "Resource temporarily unavailable")

    monkeypatch.setattr(execute.os, "fork", fake_fork)

    with pytest.raises(ExecutionError, match="fork: Resource temporarily unavailable"):
        run_and_report("/bin/true", ["a"], lambda line: None)


def test_run_true_with_two_paths(tmp_path: Path):
    lines: list[str] = []

    outcome = run_and_report("/bin/true", [f"{tmp_path}/a", f"{tmp_path}/b"], lines.append)

    assert outcome == Exited(0)
    assert lines == ["Normal exited, status = 0"]


def test_argument_list_is_the_whole_argv():
    lines: list[str] = []

    # argv[0] is "sh" as given, so "-c" is the first real argument
    outcome = run_and_report("/bin/sh", ["sh", "-c", "exit 3"], lines.append)

    assert outcome == Exited(3)
    assert lines == ["Normal exited, status = 3"]


def test_killed_child():
    lines: list[str] = []

    outcome = run_and_report("/bin/sh", ["sh", "-c", "kill -9 $$"], lines.append)

    assert outcome == Killed(signal.SIGKILL)
    assert lines == [f"Was killed by signal {int(signal.SIGKILL)}"]


def test_exec_failure_stays_in_child(tmp_path: Path):
    lines: list[str] = []

    outcome = run_and_report(str(tmp_path / "missing"), ["x"], lines.append)

    assert outcome == Exited(1)
    assert lines == ["Normal exited, status = 1"]


def test_no_matches_still_runs_target():
    lines: list[str] = []

    assert run_and_report("/bin/true", [], lines.append) == Exited(0)
