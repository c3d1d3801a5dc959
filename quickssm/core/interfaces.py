"""Capability protocols consumed by the diagnostic engine and the CLI.

The AWS implementations live in :mod:`quickssm.providers.aws`; tests supply
fakes that satisfy the same protocols.
"""

from __future__ import annotations

from typing import Any, Protocol

from quickssm.core.models import InstanceRecord


class InventoryProvider(Protocol):
    """Lists instances and describes one instance."""

    def list_instances(self, page_size: int | None = None) -> list[InstanceRecord]:
        """List all instances with their raw names."""
        ...

    def describe_instance(self, instance_id: str) -> dict[str, Any]:
        """Return the full description of one instance."""
        ...


class IdentityProvider(Protocol):
    """Answers attached-role and policy-membership questions."""

    def get_caller_identity(self) -> dict[str, str]:
        """Return ``account`` and ``arn`` of the caller."""
        ...

    def get_instance_profile_role(self, profile_name: str) -> str | None:
        """Return the role name in an instance profile."""
        ...

    def list_attached_policy_arns(self, role_name: str) -> list[str]:
        """Return ARNs of managed policies attached to a role."""
        ...

    def list_inline_policy_documents(self, role_name: str) -> list[dict[str, Any]]:
        """Return parsed inline policy documents of a role."""
        ...


class NetworkProvider(Protocol):
    """Answers subnet, route table and security group questions."""

    def get_subnet(self, subnet_id: str) -> dict[str, Any] | None:
        """Return a subnet, or None if it does not exist."""
        ...

    def list_route_tables(self, vpc_id: str) -> list[dict[str, Any]]:
        """Return all route tables of a VPC."""
        ...

    def list_security_groups(self, group_ids: list[str]) -> list[dict[str, Any]]:
        """Return the described security groups."""
        ...
