"""Run build-tool commands while streaming their output line by line.

Provides the module-level run_cmd() function plus a CommandRunner class
that delegates to it, so callers can inject a fake runner in tests.
"""

import subprocess
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, Tuple

import click

from releaser.errors import CommandFailed, LaunchError


@dataclass(frozen=True)
class CommandInvocation:
    """A single command to run, with the label its output is echoed under."""
    label: str
    cwd: str
    program: str
    args: Tuple[str, ...] = ()
    ignore_errors: Tuple[str, ...] = ()

    @property
    def argv(self):
        return [self.program, *self.args]


@dataclass(frozen=True)
class ExecutionOutcome:
    """Status of a command after its process has terminated."""
    exit_code: int
    success: bool
    tolerated_failure_seen: bool = False


def _exit_code(returncode) -> int:
    # Signal terminations have no exit status.
    if returncode is None or returncode < 0:
        return 1
    return returncode


def _stream_lines(process):
    for line in process.stdout:
        yield line.rstrip("\r\n")


def run_invocation(invocation: CommandInvocation, sink: Callable[[str], None] = click.echo) -> ExecutionOutcome:
    """Run a command, echoing each merged stdout/stderr line to sink.

    Every line is passed to sink as "<label>: <line>". If any line contains
    one of invocation.ignore_errors, a non-zero exit is treated as success.

    Raises:
        LaunchError: If the process cannot be spawned or waited on.
        CommandFailed: If the process exits non-zero and no tolerated
            substring was seen.
    """
    try:
        process = subprocess.Popen(
            invocation.argv,
            cwd=invocation.cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise LaunchError(f"launching command {invocation.program}: {e}") from e

    found_ignore_string = False
    with process:
        for line in _stream_lines(process):
            if any(s in line for s in invocation.ignore_errors):
                found_ignore_string = True
            sink(f"{invocation.label}: {line}")

        try:
            returncode = process.wait()
        except OSError as e:
            raise LaunchError(f"waiting on process {invocation.program}: {e}") from e

    code = _exit_code(returncode)
    outcome = ExecutionOutcome(
        exit_code=code,
        success=code == 0 or found_ignore_string,
        tolerated_failure_seen=found_ignore_string,
    )
    if not outcome.success:
        raise CommandFailed(invocation, outcome)
    return outcome


def run_cmd(
    label: str,
    cwd,
    program: str,
    args: Iterable[str] = (),
    ignore_errors: Sequence[str] = (),
    sink: Callable[[str], None] = click.echo,
) -> ExecutionOutcome:
    """Convenience wrapper building a CommandInvocation and running it."""
    invocation = CommandInvocation(
        label=label,
        cwd=str(cwd),
        program=program,
        args=tuple(str(a) for a in args),
        ignore_errors=tuple(ignore_errors),
    )
    return run_invocation(invocation, sink=sink)


def echo_to_stderr(text: str) -> None:
    click.echo(text, err=True)


class CommandRunner:
    """Runs CommandInvocations, echoing output to the configured sink."""

    def __init__(self, sink: Callable[[str], None] = click.echo):
        self._sink = sink

    def run(self, invocation: CommandInvocation) -> ExecutionOutcome:
        return run_invocation(invocation, sink=self._sink)
