"""AWS-specific utility functions for quickssm."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import boto3

from quickssm.providers.aws.constants import NAME_TAG_KEY, UNKNOWN_INSTANCE_NAME
from quickssm.providers.aws.errors import handle_aws_errors


def extract_instance_from_response(response: dict[str, Any]) -> dict[str, Any]:
    """Extract first instance from AWS describe_instances response.

    Parameters
    ----------
    response : dict[str, Any]
        Response from boto3 describe_instances call

    Returns
    -------
    dict[str, Any]
        The first instance dictionary

    Raises
    ------
    ValueError
        If response has no reservations or instances
    """
    if not response.get("Reservations"):
        raise ValueError("No reservations in response")
    if not response["Reservations"][0].get("Instances"):
        raise ValueError("No instances in reservation")
    return response["Reservations"][0]["Instances"][0]


def get_name_tag(instance: dict[str, Any]) -> str:
    """Return the value of the ``Name`` tag, or ``"unknown"`` when absent."""
    for tag in instance.get("Tags") or []:
        if tag.get("Key") == NAME_TAG_KEY and tag.get("Value") is not None:
            return tag["Value"]
    return UNKNOWN_INSTANCE_NAME


def profile_name_from_arn(arn: str) -> str:
    """Extract the instance profile name from an instance profile ARN.

    ARN format is ``arn:aws:iam::<account>:instance-profile/<path>/<name>``.

    Parameters
    ----------
    arn : str
        Instance profile ARN

    Returns
    -------
    str
        Profile name, or empty string if the ARN has no resource path
    """
    parts = arn.split("/")
    if len(parts) >= 2:
        return parts[-1]
    return ""


def make_client_factory(profile: str | None = None) -> Callable[..., Any]:
    """Build a boto3 client factory bound to an optional named profile.

    Parameters
    ----------
    profile : str | None
        AWS shared-config profile name, or None for the default chain

    Returns
    -------
    Callable[..., Any]
        Factory with the ``boto3.client`` signature

    Raises
    ------
    ValueError
        If the profile is not defined in the AWS config files
    """
    if profile is None:
        return boto3.client
    with handle_aws_errors():
        return boto3.Session(profile_name=profile).client


def get_aws_credentials_error_message() -> str:
    """Get standard AWS credentials error message.

    Returns
    -------
    str
        Formatted AWS credentials error message
    """
    return (
        "AWS credentials not found or no longer valid\n\n"
        "Configure your credentials:\n"
        "  aws configure\n\n"
        "Or, when using AWS SSO:\n"
        "  aws sso login\n\n"
        "Or set environment variables:\n"
        "  export AWS_ACCESS_KEY_ID=...\n"
        "  export AWS_SECRET_ACCESS_KEY=..."
    )
