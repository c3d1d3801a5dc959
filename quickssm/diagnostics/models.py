"""Data models for diagnostic checks and reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from quickssm.core.interfaces import IdentityProvider, NetworkProvider


class CheckName(str, Enum):
    """Diagnostic checks, in report order."""

    IDENTITY_ATTACHMENT = "IAM Role Attachment"
    NETWORK_EGRESS_ROUTE = "Internet Connectivity"
    TRAFFIC_RULES = "SSM Traffic Rules"


class CheckStatus(str, Enum):
    """Outcome of one diagnostic check."""

    PASS = "PASS"
    FAIL = "FAIL"
    WARN = "WARN"


class Verdict(str, Enum):
    """Overall outcome of a diagnostic report."""

    ALL_PASS = "all_pass"
    HAS_FAIL = "has_fail"
    WARN_ONLY = "warn_only"


@dataclass(frozen=True)
class DiagnosticCheckResult:
    """Result of a single check."""

    check: CheckName
    status: CheckStatus
    message: str

    @classmethod
    def passed(cls, check: CheckName, message: str) -> DiagnosticCheckResult:
        return cls(check, CheckStatus.PASS, message)

    @classmethod
    def failed(cls, check: CheckName, message: str) -> DiagnosticCheckResult:
        return cls(check, CheckStatus.FAIL, message)

    @classmethod
    def warned(cls, check: CheckName, message: str) -> DiagnosticCheckResult:
        return cls(check, CheckStatus.WARN, message)


@dataclass(frozen=True)
class DiagnosticReport:
    """Ordered check results for one instance.

    Counts and verdict are computed from ``results`` on access and are never
    stored separately.

    Attributes
    ----------
    instance_id : str
        Diagnosed instance
    results : tuple[DiagnosticCheckResult, ...]
        Results in check declaration order
    """

    instance_id: str
    results: tuple[DiagnosticCheckResult, ...]

    def count(self, status: CheckStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def pass_count(self) -> int:
        return self.count(CheckStatus.PASS)

    @property
    def fail_count(self) -> int:
        return self.count(CheckStatus.FAIL)

    @property
    def warn_count(self) -> int:
        return self.count(CheckStatus.WARN)

    @property
    def verdict(self) -> Verdict:
        """Overall verdict: any failure wins over warnings."""
        if self.fail_count:
            return Verdict.HAS_FAIL
        if self.warn_count:
            return Verdict.WARN_ONLY
        return Verdict.ALL_PASS


@dataclass(frozen=True)
class InstanceContext:
    """Facts about one instance plus the capabilities to look up more.

    Attributes
    ----------
    instance_id : str
        Instance identifier
    identity : IdentityProvider
        IAM lookups
    network : NetworkProvider
        EC2 network lookups
    profile_arn : str | None
        ARN of the attached instance profile
    subnet_id : str | None
        Subnet the primary interface lives in
    vpc_id : str | None
        VPC of the instance
    security_group_ids : tuple[str, ...]
        Attached security groups
    """

    instance_id: str
    identity: IdentityProvider
    network: NetworkProvider
    profile_arn: str | None = None
    subnet_id: str | None = None
    vpc_id: str | None = None
    security_group_ids: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_instance(
        cls,
        instance: dict[str, Any],
        identity: IdentityProvider,
        network: NetworkProvider,
    ) -> InstanceContext:
        """Build a context from a DescribeInstances instance dictionary."""
        profile = instance.get("IamInstanceProfile") or {}
        return cls(
            instance_id=instance["InstanceId"],
            identity=identity,
            network=network,
            profile_arn=profile.get("Arn"),
            subnet_id=instance.get("SubnetId"),
            vpc_id=instance.get("VpcId"),
            security_group_ids=tuple(
                group["GroupId"] for group in instance.get("SecurityGroups") or []
            ),
        )
