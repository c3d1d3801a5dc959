"""Interrupt notification sources for the session controller."""

from __future__ import annotations

import logging
import signal
import threading
import types
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)

InterruptCallback = Callable[[int], None]

DEFAULT_INTERRUPT_SIGNALS: tuple[int, ...] = (signal.SIGINT, signal.SIGTERM)


class InterruptSource(Protocol):
    """Delivers operator interrupt requests to a callback."""

    def install(self, notify: InterruptCallback) -> None:
        """Start delivering interrupts to ``notify``."""
        ...

    def restore(self) -> None:
        """Stop delivering interrupts and restore the previous behaviour."""
        ...


class SignalInterruptSource:
    """Interrupt source backed by process signal handlers.

    Handlers are installed for the lifetime of one session only and the
    previous handlers are put back by :meth:`restore`. The callback runs in
    the main thread, inside the signal handler, so it must be reentrant.

    Parameters
    ----------
    signals : tuple[int, ...]
        Signals treated as interrupt requests (default: SIGINT, SIGTERM)
    """

    def __init__(self, signals: tuple[int, ...] = DEFAULT_INTERRUPT_SIGNALS) -> None:
        self.signals = signals
        self._lock = threading.Lock()
        self._previous: dict[int, Any] = {}

    @property
    def installed(self) -> bool:
        with self._lock:
            return bool(self._previous)

    def install(self, notify: InterruptCallback) -> None:
        """Install handlers that call ``notify`` with the signal number.

        Signal handlers can only be set from the main thread; elsewhere the
        source stays inactive and logs a debug message.

        Parameters
        ----------
        notify : InterruptCallback
            Reentrant callback receiving the signal number
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not in main thread, interrupt signals will not be intercepted")
            return

        def handler(signum: int, frame: types.FrameType | None) -> None:
            notify(signum)

        with self._lock:
            for signum in self.signals:
                self._previous[signum] = signal.signal(signum, handler)

    def restore(self) -> None:
        """Restore the handlers that were active before :meth:`install`."""
        with self._lock:
            for signum, previous in self._previous.items():
                signal.signal(signum, previous if previous is not None else signal.SIG_DFL)
            self._previous.clear()
