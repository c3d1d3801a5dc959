"""AWS implementations of the quickssm capabilities."""

from __future__ import annotations

from quickssm.providers.aws.identity import IdentityInspector
from quickssm.providers.aws.inventory import InventoryClient
from quickssm.providers.aws.network import NetworkInspector

__all__ = ["IdentityInspector", "InventoryClient", "NetworkInspector"]
