"""Core quickssm functionality."""

from __future__ import annotations

from quickssm.core.interfaces import IdentityProvider, InventoryProvider, NetworkProvider
from quickssm.core.models import InstanceRecord
from quickssm.core.naming import resolve_display_names
from quickssm.core.session import (
    LauncherNotFoundError,
    SessionController,
    SessionLaunchError,
    SessionResult,
    SessionState,
)
from quickssm.core.signals import InterruptSource, SignalInterruptSource

__all__ = [
    "IdentityProvider",
    "InventoryProvider",
    "NetworkProvider",
    "InstanceRecord",
    "resolve_display_names",
    "LauncherNotFoundError",
    "SessionController",
    "SessionLaunchError",
    "SessionResult",
    "SessionState",
    "InterruptSource",
    "SignalInterruptSource",
]
