"""EC2 instance inventory for quickssm."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import boto3

from quickssm.core.models import InstanceRecord
from quickssm.providers.aws.errors import handle_aws_errors
from quickssm.providers.aws.utils import extract_instance_from_response, get_name_tag
from quickssm.providers.exceptions import InstanceNotFoundError, ProviderAPIError

logger = logging.getLogger(__name__)

NOT_FOUND_ERROR_CODES = frozenset(("InvalidInstanceID.NotFound", "InvalidInstanceID.Malformed"))


class InventoryClient:
    """Read EC2 instances of the current account and region."""

    def __init__(
        self,
        region: str | None = None,
        boto3_client_factory: Callable[..., Any] | None = None,
    ) -> None:
        """Initialize the inventory client.

        Parameters
        ----------
        region : str | None
            AWS region to query, or None for the configured default
        boto3_client_factory : Callable[..., Any] | None
            Optional factory for creating boto3 clients. If None, uses boto3.client
        """
        self.region = region
        self.boto3_client_factory = boto3_client_factory or boto3.client
        self.ec2_client = self.boto3_client_factory("ec2", region_name=region)

    def list_instances(self, page_size: int | None = None) -> list[InstanceRecord]:
        """List every instance, following pagination until exhausted.

        Parameters
        ----------
        page_size : int | None
            Optional page size passed to the paginator

        Returns
        -------
        list[InstanceRecord]
            Records without display names, in API order

        Raises
        ------
        ProviderCredentialsError
            If AWS credentials are not usable
        ProviderAPIError
            If the DescribeInstances call fails
        """
        pagination_config = {"PageSize": page_size} if page_size else {}
        records = []

        with handle_aws_errors():
            paginator = self.ec2_client.get_paginator("describe_instances")
            page_count = 0

            for page in paginator.paginate(PaginationConfig=pagination_config):
                page_count += 1
                for reservation in page.get("Reservations", []):
                    for instance in reservation.get("Instances", []):
                        records.append(
                            InstanceRecord(
                                instance_id=instance["InstanceId"],
                                name=get_name_tag(instance),
                            )
                        )

        logger.debug("Fetched %d instances in %d pages", len(records), page_count)
        return records

    def describe_instance(self, instance_id: str) -> dict[str, Any]:
        """Get the full description of one instance.

        Parameters
        ----------
        instance_id : str
            Instance identifier

        Returns
        -------
        dict[str, Any]
            Instance dictionary as returned by DescribeInstances

        Raises
        ------
        InstanceNotFoundError
            If no instance has this id
        """
        try:
            with handle_aws_errors():
                response = self.ec2_client.describe_instances(InstanceIds=[instance_id])
        except ProviderAPIError as e:
            if e.error_code in NOT_FOUND_ERROR_CODES:
                raise InstanceNotFoundError(instance_id) from e
            raise

        try:
            return extract_instance_from_response(response)
        except ValueError as e:
            raise InstanceNotFoundError(instance_id) from e
