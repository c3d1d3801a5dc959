"""Subnet, route table and security group lookups for EC2 instances."""

import logging
from typing import Any

from quickssm.providers.aws.errors import handle_aws_errors

logger = logging.getLogger(__name__)


class NetworkInspector:
    """Read EC2 network resources (subnets, route tables, security groups)."""

    def __init__(self, ec2_client: Any) -> None:
        """Initialize NetworkInspector.

        Parameters
        ----------
        ec2_client : Any
            Boto3 EC2 client
        """
        self.ec2_client = ec2_client

    def get_subnet(self, subnet_id: str) -> dict[str, Any] | None:
        """Get a subnet by id.

        Parameters
        ----------
        subnet_id : str
            Subnet identifier

        Returns
        -------
        dict[str, Any] | None
            Subnet dictionary, or None if the response lists no subnet
        """
        with handle_aws_errors():
            response = self.ec2_client.describe_subnets(SubnetIds=[subnet_id])

        subnets = response.get("Subnets", [])
        return subnets[0] if subnets else None

    def list_route_tables(self, vpc_id: str) -> list[dict[str, Any]]:
        """List all route tables of a VPC.

        Parameters
        ----------
        vpc_id : str
            VPC identifier

        Returns
        -------
        list[dict[str, Any]]
            Route table dictionaries including routes and associations
        """
        route_tables = []
        with handle_aws_errors():
            paginator = self.ec2_client.get_paginator("describe_route_tables")
            for page in paginator.paginate(Filters=[{"Name": "vpc-id", "Values": [vpc_id]}]):
                route_tables.extend(page.get("RouteTables", []))

        logger.debug("VPC %s has %d route tables", vpc_id, len(route_tables))
        return route_tables

    def list_security_groups(self, group_ids: list[str]) -> list[dict[str, Any]]:
        """Describe security groups by id.

        Parameters
        ----------
        group_ids : list[str]
            Security group identifiers

        Returns
        -------
        list[dict[str, Any]]
            Security group dictionaries including egress permissions
        """
        with handle_aws_errors():
            response = self.ec2_client.describe_security_groups(GroupIds=group_ids)

        return response.get("SecurityGroups", [])
