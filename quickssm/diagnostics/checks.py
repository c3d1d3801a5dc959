"""SSM readiness checks.

Each check is a function ``(InstanceContext) -> DiagnosticCheckResult``.
Provider errors raised while looking up data are reported as WARN by the
check itself, never propagated.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from quickssm.diagnostics.models import CheckName, DiagnosticCheckResult, InstanceContext
from quickssm.providers.aws.constants import (
    ALL_TRAFFIC_PROTOCOL,
    HTTPS_PORT,
    INTERNET_GATEWAY_PREFIX,
    OPEN_CIDRS,
    SSM_ACTION_PREFIX,
    SSM_MANAGED_POLICY_IDENTIFIER,
    TCP_PROTOCOLS,
)
from quickssm.providers.aws.utils import profile_name_from_arn
from quickssm.providers.exceptions import ProviderError

logger = logging.getLogger(__name__)

Check = Callable[[InstanceContext], DiagnosticCheckResult]


def check_identity_attachment(context: InstanceContext) -> DiagnosticCheckResult:
    """Check that an instance profile with SSM permissions is attached."""
    name = CheckName.IDENTITY_ATTACHMENT

    if not context.profile_arn:
        return DiagnosticCheckResult.failed(
            name, "No IAM instance profile attached to the instance"
        )

    profile_name = profile_name_from_arn(context.profile_arn)
    if not profile_name:
        return DiagnosticCheckResult.warned(
            name,
            "IAM profile attached but could not extract profile name from ARN: "
            f"{context.profile_arn}",
        )

    try:
        role_name = context.identity.get_instance_profile_role(profile_name)
    except ProviderError as e:
        return DiagnosticCheckResult.warned(
            name, f"IAM profile '{profile_name}' attached but could not resolve its role: {e}"
        )

    if role_name is None:
        return DiagnosticCheckResult.failed(
            name, f"IAM profile '{profile_name}' attached but contains no IAM role"
        )

    try:
        has_permissions = role_has_ssm_permissions(context, role_name)
    except ProviderError as e:
        return DiagnosticCheckResult.warned(
            name,
            f"IAM role '{role_name}' attached but could not verify SSM permissions: {e}",
        )

    if has_permissions:
        return DiagnosticCheckResult.passed(
            name, f"IAM role '{role_name}' attached with SSM permissions"
        )

    return DiagnosticCheckResult.failed(
        name, f"IAM role '{role_name}' attached but missing required SSM permissions"
    )


def role_has_ssm_permissions(context: InstanceContext, role_name: str) -> bool:
    """Look for the SSM managed policy, then for SSM actions in inline policies."""
    for arn in context.identity.list_attached_policy_arns(role_name):
        if SSM_MANAGED_POLICY_IDENTIFIER in arn:
            return True

    for document in context.identity.list_inline_policy_documents(role_name):
        if document_allows_ssm(document):
            return True

    return False


def document_allows_ssm(document: dict[str, Any]) -> bool:
    """Return True if any Allow statement grants an ``ssm:`` action or ``*``."""
    statements = document.get("Statement", [])
    if isinstance(statements, dict):
        statements = [statements]

    for statement in statements:
        if statement.get("Effect", "Allow") != "Allow":
            continue
        for action in _as_list(statement.get("Action")):
            action = action.lower()
            if action == "*" or action.startswith(SSM_ACTION_PREFIX):
                return True

    return False


def check_network_egress_route(context: InstanceContext) -> DiagnosticCheckResult:
    """Check that the instance subnet routes 0.0.0.0/0 to an internet gateway."""
    name = CheckName.NETWORK_EGRESS_ROUTE

    if not context.subnet_id:
        return DiagnosticCheckResult.failed(name, "Instance has no subnet ID")

    try:
        subnet = context.network.get_subnet(context.subnet_id)
    except ProviderError as e:
        return DiagnosticCheckResult.warned(name, f"Could not retrieve subnet details: {e}")

    if subnet is None:
        return DiagnosticCheckResult.failed(name, "Subnet not found")

    vpc_id = subnet.get("VpcId") or context.vpc_id

    try:
        route_tables = context.network.list_route_tables(vpc_id)
    except ProviderError as e:
        return DiagnosticCheckResult.warned(name, f"Could not check route tables: {e}")

    for route_table in subnet_route_tables(route_tables, context.subnet_id):
        if has_internet_gateway_route(route_table):
            return DiagnosticCheckResult.passed(
                name, "Subnet has internet gateway route (0.0.0.0/0)"
            )

    return DiagnosticCheckResult.failed(
        name,
        "Subnet lacks internet gateway route (0.0.0.0/0) - "
        "instance may not have internet access",
    )


def subnet_route_tables(
    route_tables: list[dict[str, Any]], subnet_id: str
) -> list[dict[str, Any]]:
    """Return the route tables governing a subnet.

    A subnet without an explicit association uses the VPC main route table.
    """
    explicit = [
        table
        for table in route_tables
        if any(assoc.get("SubnetId") == subnet_id for assoc in table.get("Associations", []))
    ]
    if explicit:
        return explicit

    return [
        table
        for table in route_tables
        if any(assoc.get("Main") for assoc in table.get("Associations", []))
    ]


def has_internet_gateway_route(route_table: dict[str, Any]) -> bool:
    for route in route_table.get("Routes", []):
        destination = route.get("DestinationCidrBlock") or route.get("DestinationIpv6CidrBlock")
        gateway_id = route.get("GatewayId") or ""
        if destination in OPEN_CIDRS and gateway_id.startswith(INTERNET_GATEWAY_PREFIX):
            return True
    return False


def check_traffic_rules(context: InstanceContext) -> DiagnosticCheckResult:
    """Check that security groups allow outbound HTTPS to the SSM endpoints."""
    name = CheckName.TRAFFIC_RULES

    if not context.security_group_ids:
        return DiagnosticCheckResult.failed(name, "Instance has no security groups")

    try:
        groups = context.network.list_security_groups(list(context.security_group_ids))
    except ProviderError as e:
        return DiagnosticCheckResult.warned(
            name, f"Could not retrieve security group details: {e}"
        )

    egress_rules = [rule for group in groups for rule in group.get("IpPermissionsEgress", [])]

    if any(allows_all_traffic(rule) for rule in egress_rules):
        return DiagnosticCheckResult.passed(
            name, "Security groups allow all traffic outbound (includes SSM requirements)"
        )

    if any(allows_https(rule) for rule in egress_rules):
        return DiagnosticCheckResult.passed(
            name, "Security groups allow HTTPS outbound traffic (required for SSM)"
        )

    return DiagnosticCheckResult.failed(
        name, "Security groups do not allow HTTPS outbound traffic (required for SSM)"
    )


def allows_all_traffic(rule: dict[str, Any]) -> bool:
    return rule.get("IpProtocol") == ALL_TRAFFIC_PROTOCOL and has_open_destination(rule)


def allows_https(rule: dict[str, Any]) -> bool:
    if rule.get("IpProtocol") not in TCP_PROTOCOLS:
        return False

    from_port = rule.get("FromPort")
    to_port = rule.get("ToPort")
    if from_port is None or to_port is None:
        return False

    return from_port <= HTTPS_PORT <= to_port and has_open_destination(rule)


def has_open_destination(rule: dict[str, Any]) -> bool:
    cidrs = [r.get("CidrIp") for r in rule.get("IpRanges", [])]
    cidrs += [r.get("CidrIpv6") for r in rule.get("Ipv6Ranges", [])]
    return any(cidr in OPEN_CIDRS for cidr in cidrs)


def _as_list(value: Any) -> Iterable[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


CHECKS: tuple[tuple[CheckName, Check], ...] = (
    (CheckName.IDENTITY_ATTACHMENT, check_identity_attachment),
    (CheckName.NETWORK_EGRESS_ROUTE, check_network_egress_route),
    (CheckName.TRAFFIC_RULES, check_traffic_rules),
)
"""Registered checks in declaration order."""
