import os
import sys
from collections.abc import Callable, Sequence

import typer

from .models import Continued, Exited, Killed, ProcessOutcome, Stopped

EXIT_FAILURE: int = 1

Reporter = Callable[[str], None]


class ExecutionError(Exception):
    """The child process could not be created or waited for."""


def spawn(executable_path: str, argv: Sequence[str]) -> int:
    """
    Fork a child that replaces itself with `executable_path`.

    `argv` becomes the child's complete argument vector; the program name
    is not prepended. Python refuses an empty argument vector, so the
    executable path stands in when there is nothing to pass.

    A failure to load the executable is reported by the child, which then
    exits with status 1. Only a failing fork raises in the parent.
    """
    args: list[str] = list(argv) or [executable_path]

    # Buffered output would otherwise be written twice
    sys.stdout.flush()
    sys.stderr.flush()

    try:
        pid: int = os.fork()
    except OSError as e:
        raise ExecutionError(f"fork: {e.strerror}") from e

    if pid == 0:
        try:
            os.execv(executable_path, args)
        except OSError as e:
            typer.echo(f"execv: {e.strerror}", err=True)
        finally:
            os._exit(EXIT_FAILURE)

    return pid


def classify_status(status: int) -> ProcessOutcome:
    if os.WIFEXITED(status):
        return Exited(code=os.WEXITSTATUS(status))
    if os.WIFSIGNALED(status):
        return Killed(signal=os.WTERMSIG(status))
    if os.WIFSTOPPED(status):
        return Stopped(signal=os.WSTOPSIG(status))
    if os.WIFCONTINUED(status):
        return Continued()

    raise ValueError(f"Unrecognised wait status: {status:#x}")


def describe_outcome(outcome: ProcessOutcome) -> str:
    if isinstance(outcome, Exited):
        return f"Normal exited, status = {outcome.code}"
    if isinstance(outcome, Killed):
        return f"Was killed by signal {outcome.signal}"
    if isinstance(outcome, Stopped):
        return f"Was stopped by signal {outcome.signal}"
    return "Was continued"


def wait_for_child(pid: int, report: Reporter = typer.echo) -> ProcessOutcome:
    """
    Block until the child exits or is killed, reporting every status change.

    Stop and continue notifications are reported and the wait goes on.
    """
    while True:
        try:
            _, status = os.waitpid(pid, os.WUNTRACED | os.WCONTINUED)
        except OSError as e:
            raise ExecutionError(f"waitpid: {e.strerror}") from e

        outcome: ProcessOutcome = classify_status(status)
        report(describe_outcome(outcome))

        if outcome.terminal:
            return outcome


def run_and_report(
    executable_path: str, argument_list: Sequence[str], report: Reporter = typer.echo
) -> ProcessOutcome:
    pid: int = spawn(executable_path, argument_list)
    return wait_for_child(pid, report)
