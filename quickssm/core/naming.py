"""Unique display names for instance listings."""

from __future__ import annotations

import dataclasses
from collections import defaultdict
from collections.abc import Iterable

from quickssm.core.models import InstanceRecord


def resolve_display_names(records: Iterable[InstanceRecord]) -> list[InstanceRecord]:
    """Assign a unique display name to every record.

    Records are grouped by raw name, and each group is ordered by ascending
    instance id. The first member of a group keeps the raw name, the others
    get ``" (2)"``, ``" (3)"`` and so on. A generated label that equals some
    other record's raw name is skipped and the counter moves on, so display
    names are always pairwise unique.

    Parameters
    ----------
    records : Iterable[InstanceRecord]
        Listed instances, in any order

    Returns
    -------
    list[InstanceRecord]
        New records with ``display_name`` set, ordered by ``(name, instance_id)``

    Raises
    ------
    ValueError
        If a record has no instance id
    """
    groups: dict[str, list[InstanceRecord]] = defaultdict(list)
    for record in records:
        if not record.instance_id:
            raise ValueError(f"Instance record without id: {record!r}")
        groups[record.name].append(record)

    taken = set(groups)
    resolved = []

    for name in sorted(groups):
        members = sorted(groups[name], key=lambda r: r.instance_id)
        resolved.append(dataclasses.replace(members[0], display_name=name))

        counter = 1
        for record in members[1:]:
            counter += 1
            label = f"{name} ({counter})"
            while label in taken:
                counter += 1
                label = f"{name} ({counter})"
            taken.add(label)
            resolved.append(dataclasses.replace(record, display_name=label))

    return resolved
