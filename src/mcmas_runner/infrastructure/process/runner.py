"""Supervised execution of the external verifier."""

import errno
import os
import signal
import subprocess
import threading
import time
from pathlib import Path
from typing import Optional, Tuple

from mcmas_runner.domain.exceptions import ProcessLaunchError
from mcmas_runner.domain.models import RunResult
from mcmas_runner.infrastructure.storage.capture_storage import CaptureStorage
from mcmas_runner.shared.logging import get_logger
from mcmas_runner.shared.types import PathLike

logger = get_logger(__name__)

# Spawn failures that mean the machine cannot start processes at all,
# as opposed to a broken or missing verifier binary.
FATAL_SPAWN_ERRNOS = frozenset({errno.EAGAIN, errno.ENOMEM, errno.EMFILE, errno.ENFILE})


class ProcessRunner:
    """
    Runs ``executable <input_path>`` once under a wall-clock deadline.

    Combined stdout/stderr is written to a private capture file. The wait
    resolves exactly once, on whichever comes first: process exit, the
    deadline, or the cancel event. A process still alive at that point is
    terminated. On POSIX the verifier runs in its own session, and once it
    has exited anything left in that process group is killed, so no helper
    it spawned outlives the run. The capture file is removed on every exit
    path.
    """

    def __init__(
        self,
        capture_storage: Optional[CaptureStorage] = None,
        settle_seconds: float = 0.01,
        poll_interval: float = 0.05,
        terminate_grace: float = 2.0,
    ):
        """
        Initialize runner.

        Args:
            capture_storage: Where capture files are created (defaults to system temp)
            settle_seconds: Pause between process exit and reading the capture file
            poll_interval: How often the cancel event is checked while waiting
            terminate_grace: Seconds between SIGTERM and SIGKILL
        """
        self._storage = capture_storage or CaptureStorage()
        self._settle_seconds = settle_seconds
        self._poll_interval = poll_interval
        self._terminate_grace = terminate_grace
        self._logger = get_logger(__name__)

    def run(
        self,
        executable: PathLike,
        input_path: PathLike,
        timeout: float,
        cancel_event: Optional[threading.Event] = None
    ) -> RunResult:
        """
        Run the verifier on one input file.

        Args:
            executable: Verifier binary
            input_path: File passed as the sole positional argument
            timeout: Wall-clock limit in seconds
            cancel_event: Optional event that aborts the run when set

        Returns:
            RunResult; ``exit_code`` is None when the binary could not be started

        Raises:
            ProcessLaunchError: If the OS refuses to spawn any process
        """
        start = time.monotonic()

        try:
            capture = self._storage.create_capture()
        except OSError as e:
            self._logger.error(f"Cannot create capture file: {e}")
            return RunResult(
                output=f"Error: cannot create output capture file: {e}",
                exit_code=None,
                elapsed_seconds=time.monotonic() - start,
            )

        proc = None
        try:
            with open(capture, 'wb') as sink:
                try:
                    proc = self._spawn(Path(executable), Path(input_path), sink)
                except OSError as e:
                    if e.errno in FATAL_SPAWN_ERRNOS:
                        raise ProcessLaunchError(f"Cannot spawn verifier process: {e}") from e
                    self._logger.warning(f"Failed to launch {executable}: {e}")
                    return RunResult(
                        output=f"Error: {e}",
                        exit_code=None,
                        elapsed_seconds=time.monotonic() - start,
                    )

                self._logger.debug(f"Started verifier pid={proc.pid} input={input_path}")
                timed_out, cancelled = self._wait(proc, timeout, cancel_event)

            elapsed = time.monotonic() - start

            # Let the filesystem catch up before reading
            if self._settle_seconds > 0:
                time.sleep(self._settle_seconds)
            output = self._storage.read_capture(capture)

            if timed_out:
                self._logger.warning(f"Verifier exceeded {timeout:g}s on {input_path}, terminated")
            elif cancelled:
                self._logger.info(f"Verifier run on {input_path} cancelled")

            return RunResult(
                output=output,
                exit_code=proc.returncode,
                elapsed_seconds=elapsed,
                timed_out=timed_out,
                cancelled=cancelled,
            )
        finally:
            if proc is not None:
                if proc.poll() is None:
                    self._terminate(proc)
                self._kill_group(proc)
            self._storage.discard(capture)

    def _spawn(self, executable: Path, input_path: Path, sink) -> subprocess.Popen:
        return subprocess.Popen(
            [str(executable), str(input_path)],
            stdin=subprocess.DEVNULL,
            stdout=sink,
            stderr=subprocess.STDOUT,
            start_new_session=(os.name == 'posix'),
        )

    def _wait(
        self,
        proc: subprocess.Popen,
        timeout: float,
        cancel_event: Optional[threading.Event]
    ) -> Tuple[bool, bool]:
        """Block until exit, deadline or cancellation. Returns (timed_out, cancelled)."""
        deadline = time.monotonic() + timeout

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                if proc.poll() is not None:
                    return False, False
                self._terminate(proc)
                return True, False

            try:
                proc.wait(timeout=min(remaining, self._poll_interval))
                return False, False
            except subprocess.TimeoutExpired:
                if cancel_event is not None and cancel_event.is_set():
                    self._terminate(proc)
                    return False, True

    def _terminate(self, proc: subprocess.Popen) -> None:
        """Stop the process (and its group), escalating to SIGKILL after the grace period."""
        self._signal(proc, signal.SIGTERM)
        try:
            proc.wait(timeout=self._terminate_grace)
            return
        except subprocess.TimeoutExpired:
            self._logger.warning(f"pid={proc.pid} ignored SIGTERM, killing")

        self._signal(proc, getattr(signal, 'SIGKILL', signal.SIGTERM))
        proc.wait()

    def _kill_group(self, proc: subprocess.Popen) -> None:
        """
        SIGKILL whatever is left of the verifier's process group.

        Runs after the direct child has exited, on every path. Helpers the
        verifier started (a wrapping shell, background workers, children
        that ignore SIGTERM) share the group and must not outlive the run.
        """
        if os.name != 'posix':
            return
        try:
            os.killpg(proc.pid, signal.SIGKILL)
            self._logger.debug(f"Killed leftover processes in group {proc.pid}")
        except ProcessLookupError:
            pass
        except PermissionError as e:
            # macOS reports EPERM for a group holding only zombies
            self._logger.debug(f"Could not signal group {proc.pid}: {e}")

    def _signal(self, proc: subprocess.Popen, sig: int) -> None:
        try:
            if os.name == 'posix':
                os.killpg(proc.pid, sig)
            elif sig == signal.SIGTERM:
                proc.terminate()
            else:
                proc.kill()
        except ProcessLookupError:
            pass
