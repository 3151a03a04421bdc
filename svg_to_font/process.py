"""Blocking execution of the external font tools.

Output is buffered silently by default; in verbose mode both pipes are
streamed to the parent's stdout/stderr while still being captured, so a
failure can always be reported with the tool's own diagnostics.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import signal
import subprocess
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Mapping, Sequence

from .errors import CommandFailedError, CommandNotFoundError, CommandTimeoutError

logger = logging.getLogger(__name__)

NO_OUTPUT = "No output captured."

# How long to keep reading a killed tool's pipes before giving up on them.
PUMP_GRACE_SECONDS = 1.0


@dataclass(frozen=True)
class CommandResult:
    command: str
    exit_code: int
    stdout: str
    stderr: str


def failure_detail(stdout: str, stderr: str) -> str:
    """Pick the most useful captured stream for a failure report."""
    if stderr.strip():
        return stderr.strip()
    if stdout.strip():
        # Some tools report errors on stdout.
        return stdout.strip()
    return NO_OUTPUT


def _pump(stream: IO[bytes], sink: IO[str], chunks: list[str]) -> None:
    for raw in iter(stream.readline, b""):
        text = raw.decode(errors="replace")
        chunks.append(text)
        sink.write(text)
        sink.flush()
    stream.close()


def _kill_process_tree(proc: subprocess.Popen) -> None:
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        proc.kill()


class ProcessRunner:
    def __init__(self, verbose: bool = False, timeout: float | None = None) -> None:
        self.verbose = verbose
        self.timeout = timeout

    def _build_env(
        self,
        env: Mapping[str, str] | None,
        extra_path: Iterable[str | Path] | None,
    ) -> dict[str, str]:
        environment = dict(os.environ)
        if env:
            environment.update(env)
        if extra_path:
            entries = [str(p) for p in extra_path]
            current = environment.get("PATH", "")
            if current:
                entries.append(current)
            environment["PATH"] = os.pathsep.join(entries)
        return environment

    def execute(
        self,
        command: str | Path,
        args: Sequence[str | Path] = (),
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
        extra_path: Iterable[str | Path] | None = None,
    ) -> CommandResult:
        """Run ``command`` to completion and return its captured output.

        Raises:
            CommandNotFoundError: the program could not be started.
            CommandTimeoutError: the runner timeout elapsed; the child is killed.
            CommandFailedError: the program exited with a non-zero status.
        """
        name = Path(str(command)).name
        environment = self._build_env(env, extra_path)
        executable = shutil.which(str(command), path=environment.get("PATH")) or str(command)
        cmd = [executable, *(str(arg) for arg in args)]
        logger.debug("EXEC: %s", shlex.join(cmd))

        try:
            if self.verbose:
                exit_code, stdout, stderr = self._stream(cmd, cwd, environment)
            else:
                proc = subprocess.run(
                    cmd,
                    cwd=cwd,
                    env=environment,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    timeout=self.timeout,
                )
                exit_code = proc.returncode
                stdout = proc.stdout.decode(errors="replace")
                stderr = proc.stderr.decode(errors="replace")
        except subprocess.TimeoutExpired as exc:
            raise CommandTimeoutError(name, self.timeout or 0) from exc
        except OSError as exc:
            raise CommandNotFoundError(name, exc.strerror or str(exc)) from exc

        if exit_code != 0:
            detail = failure_detail(stdout, stderr)
            if not self.verbose:
                # The user has not seen the tool output yet.
                logger.error("Command failed (exit code %d):\n%s", exit_code, detail)
            raise CommandFailedError(name, exit_code, detail)

        return CommandResult(command=name, exit_code=exit_code, stdout=stdout, stderr=stderr)

    def _stream(
        self,
        cmd: list[str],
        cwd: str | Path | None,
        environment: dict[str, str],
    ) -> tuple[int, str, str]:
        proc = subprocess.Popen(
            cmd,
            cwd=cwd,
            env=environment,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            # Own process group, so a timeout can take down everything the tool spawned.
            start_new_session=os.name == "posix",
        )
        stdout_chunks: list[str] = []
        stderr_chunks: list[str] = []
        pumps = [
            threading.Thread(target=_pump, args=(proc.stdout, sys.stdout, stdout_chunks), daemon=True),
            threading.Thread(target=_pump, args=(proc.stderr, sys.stderr, stderr_chunks), daemon=True),
        ]
        for pump in pumps:
            pump.start()

        try:
            exit_code = proc.wait(timeout=self.timeout)
        except BaseException:
            _kill_process_tree(proc)
            proc.wait()
            # A descendant outside the group may still hold the pipes open.
            for pump in pumps:
                pump.join(PUMP_GRACE_SECONDS)
            raise

        # Both pipes must be drained before the exit code is final.
        for pump in pumps:
            pump.join()
        return exit_code, "".join(stdout_chunks), "".join(stderr_chunks)
