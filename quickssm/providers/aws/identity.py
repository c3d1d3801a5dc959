"""IAM and STS lookups used by the header and the identity check."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import unquote

import boto3

from quickssm.providers.aws.errors import handle_aws_errors
from quickssm.providers.exceptions import ProviderError

logger = logging.getLogger(__name__)


class IdentityInspector:
    """Read caller identity, instance profiles and role policies."""

    def __init__(
        self,
        region: str | None = None,
        boto3_client_factory: Callable[..., Any] | None = None,
    ) -> None:
        """Initialize IdentityInspector.

        Parameters
        ----------
        region : str | None
            AWS region used for the STS endpoint
        boto3_client_factory : Callable[..., Any] | None
            Optional factory for creating boto3 clients. If None, uses boto3.client
        """
        self.region = region
        self.boto3_client_factory = boto3_client_factory or boto3.client
        self.iam_client = self.boto3_client_factory("iam", region_name=region)
        self._sts_client: Any = None

    @property
    def sts_client(self) -> Any:
        """STS client, created on first use."""
        if self._sts_client is None:
            self._sts_client = self.boto3_client_factory("sts", region_name=self.region)
        return self._sts_client

    def get_caller_identity(self) -> dict[str, str]:
        """Return the account id and ARN of the calling principal.

        Returns
        -------
        dict[str, str]
            Dictionary with ``account`` and ``arn`` keys

        Raises
        ------
        ProviderCredentialsError
            If credentials are missing or rejected
        """
        with handle_aws_errors():
            response = self.sts_client.get_caller_identity()

        return {"account": response["Account"], "arn": response["Arn"]}

    def get_instance_profile_role(self, profile_name: str) -> str | None:
        """Resolve the IAM role contained in an instance profile.

        Parameters
        ----------
        profile_name : str
            Instance profile name

        Returns
        -------
        str | None
            Role name, or None if the profile contains no role
        """
        with handle_aws_errors():
            response = self.iam_client.get_instance_profile(InstanceProfileName=profile_name)

        roles = response["InstanceProfile"].get("Roles", [])
        if not roles:
            return None
        return roles[0]["RoleName"]

    def list_attached_policy_arns(self, role_name: str) -> list[str]:
        """List ARNs of managed policies attached to a role."""
        arns = []
        with handle_aws_errors():
            paginator = self.iam_client.get_paginator("list_attached_role_policies")
            for page in paginator.paginate(RoleName=role_name):
                for policy in page.get("AttachedPolicies", []):
                    if policy.get("PolicyArn"):
                        arns.append(policy["PolicyArn"])
        return arns

    def list_inline_policy_documents(self, role_name: str) -> list[dict[str, Any]]:
        """Fetch the documents of all inline policies of a role.

        Policies whose document cannot be fetched are skipped; failing to list
        the policy names raises.

        Parameters
        ----------
        role_name : str
            IAM role name

        Returns
        -------
        list[dict[str, Any]]
            Parsed policy documents
        """
        with handle_aws_errors():
            paginator = self.iam_client.get_paginator("list_role_policies")
            policy_names = [
                name for page in paginator.paginate(RoleName=role_name)
                for name in page.get("PolicyNames", [])
            ]

        documents = []
        for policy_name in policy_names:
            try:
                with handle_aws_errors():
                    response = self.iam_client.get_role_policy(
                        RoleName=role_name, PolicyName=policy_name
                    )
            except ProviderError as e:
                logger.debug("Skipping inline policy %s of %s: %s", policy_name, role_name, e)
                continue

            documents.append(parse_policy_document(response["PolicyDocument"]))

        return documents


def parse_policy_document(document: str | dict[str, Any]) -> dict[str, Any]:
    """Normalize a policy document to a dictionary.

    boto3 decodes policy documents already; raw API responses carry them
    URL-encoded JSON.
    """
    if isinstance(document, dict):
        return document
    return json.loads(unquote(document))
