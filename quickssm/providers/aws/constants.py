"""AWS-specific constants for inventory, identity and network inspection.

This module contains constants specific to AWS, including the identifiers the
diagnostic checks look for when deciding whether an instance can be reached
through SSM Session Manager.
"""

NAME_TAG_KEY = "Name"
"""EC2 tag key holding the human-readable instance name."""

UNKNOWN_INSTANCE_NAME = "unknown"
"""Name used for instances without a ``Name`` tag."""

SSM_MANAGED_POLICY_IDENTIFIER = "AmazonSSMManagedInstanceCore"
"""Identifier of the AWS managed policy granting SSM agent permissions.

An attached policy whose ARN contains this identifier is treated as granting
the managed-session capability, which also matches customer-managed copies
that keep the name.
"""

SSM_ACTION_PREFIX = "ssm:"
"""IAM action prefix of the Systems Manager service.

Used when scanning inline policy documents for SSM permissions.
"""

OPEN_IPV4_CIDR = "0.0.0.0/0"
"""IPv4 destination matching every address."""

OPEN_IPV6_CIDR = "::/0"
"""IPv6 destination matching every address."""

OPEN_CIDRS = frozenset((OPEN_IPV4_CIDR, OPEN_IPV6_CIDR))
"""Destinations treated as "open" for routes and security group rules."""

INTERNET_GATEWAY_PREFIX = "igw-"
"""Resource id prefix of EC2 internet gateways."""

ALL_TRAFFIC_PROTOCOL = "-1"
"""Security group protocol value meaning all protocols."""

TCP_PROTOCOLS = frozenset(("tcp", "6"))
"""Security group protocol values meaning TCP."""

HTTPS_PORT = 443
"""Port used by the SSM agent to reach the Systems Manager endpoints."""

CREDENTIALS_ERROR_CODES = frozenset(
    (
        "AuthFailure",
        "ExpiredToken",
        "ExpiredTokenException",
        "InvalidClientTokenId",
        "RequestExpired",
        "SignatureDoesNotMatch",
        "UnrecognizedClientException",
    )
)
"""AWS error codes that indicate unusable credentials.

These abort the invocation as credential errors instead of being reported
as generic API failures.
"""
