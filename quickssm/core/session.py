"""Lifecycle of the interactive SSM session subprocess."""

from __future__ import annotations

import logging
import queue
import shutil
import signal
import subprocess
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from quickssm.constants import AWS_CLI_INSTALL_URL, DEFAULT_LAUNCHER, SESSION_EVENT_POLL_SECONDS
from quickssm.core.signals import InterruptSource, SignalInterruptSource

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """States of a session controller."""

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    COMPLETED = "completed"
    TERMINATING = "terminating"
    TERMINATED = "terminated"
    ERROR = "error"


class SessionLaunchError(RuntimeError):
    """Raised when the session process cannot be created."""


class LauncherNotFoundError(SessionLaunchError):
    """Raised when the session launcher is not on PATH."""

    def __init__(self, launcher: str) -> None:
        super().__init__(
            f"{launcher} not found. Please install it and try again. {AWS_CLI_INSTALL_URL}"
        )
        self.launcher = launcher


@dataclass(frozen=True)
class SessionResult:
    """Final outcome of one session.

    Attributes
    ----------
    state : SessionState
        COMPLETED, TERMINATED or ERROR
    returncode : int | None
        Exit status of the session process
    interrupted : bool
        Whether an interrupt was forwarded to the process
    error : str | None
        Error description for ERROR results
    """

    state: SessionState
    returncode: int | None
    interrupted: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.state in (SessionState.COMPLETED, SessionState.TERMINATED)


class _EventKind(Enum):
    EXIT = "exit"
    INTERRUPT = "interrupt"


@dataclass(frozen=True)
class _SessionEvent:
    kind: _EventKind
    value: int


class SessionController:
    """Start one SSM session and manage it until the process is reaped.

    The controller waits on a single queue fed by two sources: a waiter
    thread posting the process exit status, and the interrupt source posting
    signals. Whichever event arrives first decides how the session ends. On
    interrupt, SIGINT is forwarded to the process and the controller keeps
    waiting for its exit, so :meth:`start` never returns while the process
    is alive.

    Parameters
    ----------
    launcher : str
        Executable starting the session (default: ``aws``)
    region : str | None
        Region passed as ``--region`` when set
    profile : str | None
        Profile passed as ``--profile`` when set
    popen_factory : Callable[..., Any] | None
        Factory creating the process. If None, uses subprocess.Popen
    interrupt_source : InterruptSource | None
        Source of interrupt requests. If None, uses SIGINT/SIGTERM handlers
    which : Callable[[str], str | None] | None
        Executable lookup. If None, uses shutil.which
    """

    def __init__(
        self,
        launcher: str = DEFAULT_LAUNCHER,
        region: str | None = None,
        profile: str | None = None,
        popen_factory: Callable[..., Any] | None = None,
        interrupt_source: InterruptSource | None = None,
        which: Callable[[str], str | None] | None = None,
    ) -> None:
        self.launcher = launcher
        self.region = region
        self.profile = profile
        self.popen_factory = popen_factory or subprocess.Popen
        self.interrupt_source = interrupt_source or SignalInterruptSource()
        self.which = which or shutil.which
        self._state = SessionState.IDLE

    @property
    def state(self) -> SessionState:
        return self._state

    def build_command(self, instance_id: str) -> list[str]:
        """Build the launcher command line for an instance."""
        command = [self.launcher, "ssm", "start-session", "--target", instance_id]
        if self.region:
            command += ["--region", self.region]
        if self.profile:
            command += ["--profile", self.profile]
        return command

    def ensure_launcher(self) -> str:
        """Return the launcher path.

        Raises
        ------
        LauncherNotFoundError
            If the launcher is not on PATH
        """
        path = self.which(self.launcher)
        if path is None:
            raise LauncherNotFoundError(self.launcher)
        return path

    def start(self, instance_id: str) -> SessionResult:
        """Run an interactive session bound to the current terminal.

        Parameters
        ----------
        instance_id : str
            Target instance

        Returns
        -------
        SessionResult
            COMPLETED on clean exit, TERMINATED after a forwarded interrupt,
            ERROR when the process exits with a failure status

        Raises
        ------
        LauncherNotFoundError
            If the launcher is missing; no process is created
        SessionLaunchError
            If the process cannot be created
        RuntimeError
            If this controller already ran a session
        """
        if self._state is not SessionState.IDLE:
            raise RuntimeError(f"Session controller is {self._state.value}, not idle")

        self._state = SessionState.STARTING

        try:
            self.ensure_launcher()
        except LauncherNotFoundError:
            self._state = SessionState.ERROR
            raise

        command = self.build_command(instance_id)
        events: queue.SimpleQueue[_SessionEvent] = queue.SimpleQueue()

        self.interrupt_source.install(
            lambda signum: events.put(_SessionEvent(_EventKind.INTERRUPT, signum))
        )
        try:
            logger.debug("Executing: %s", " ".join(command))
            try:
                process = self.popen_factory(command)
            except OSError as e:
                self._state = SessionState.ERROR
                raise SessionLaunchError(f"Failed to start SSM session: {e}") from e

            self._state = SessionState.RUNNING

            waiter = threading.Thread(
                target=lambda: events.put(_SessionEvent(_EventKind.EXIT, process.wait())),
                name=f"quickssm-session-{instance_id}",
                daemon=True,
            )
            waiter.start()

            result = self._supervise(process, events)
            waiter.join()
            return result
        finally:
            self.interrupt_source.restore()

    def _supervise(self, process: Any, events: queue.SimpleQueue) -> SessionResult:
        event = self._next_event(events)

        if event.kind is _EventKind.EXIT:
            return self._finish(event.value)

        self._state = SessionState.TERMINATING
        logger.info("Received interrupt signal, terminating SSM session...")
        self._forward_interrupt(process)

        event = self._next_event(events)
        while event.kind is not _EventKind.EXIT:
            logger.debug("Session already terminating, ignoring signal %d", event.value)
            event = self._next_event(events)

        self._state = SessionState.TERMINATED
        return SessionResult(SessionState.TERMINATED, returncode=event.value, interrupted=True)

    def _finish(self, returncode: int) -> SessionResult:
        if returncode == 0:
            self._state = SessionState.COMPLETED
            return SessionResult(SessionState.COMPLETED, returncode=0)

        self._state = SessionState.ERROR
        return SessionResult(
            SessionState.ERROR,
            returncode=returncode,
            error=f"SSM session ended with error: exit status {returncode}",
        )

    def _forward_interrupt(self, process: Any) -> None:
        try:
            process.send_signal(signal.SIGINT)
        except ProcessLookupError:
            logger.debug("Session process already exited before interrupt was forwarded")

    @staticmethod
    def _next_event(events: queue.SimpleQueue) -> _SessionEvent:
        while True:
            try:
                return events.get(timeout=SESSION_EVENT_POLL_SECONDS)
            except queue.Empty:
                continue
