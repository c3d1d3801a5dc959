"""Data models shared between the inventory client and the CLI."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InstanceRecord:
    """One instance as listed for the operator.

    Attributes
    ----------
    instance_id : str
        Unique instance identifier
    name : str
        Raw name taken from the ``Name`` tag, ``"unknown"`` when absent
    display_name : str
        Label shown in the listing, unique within one listing. Empty until
        resolved by :func:`quickssm.core.naming.resolve_display_names`.
    """

    instance_id: str
    name: str
    display_name: str = ""
