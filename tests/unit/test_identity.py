"""Tests for IAM and STS lookups."""

import json
from urllib.parse import quote

import pytest
from moto import mock_aws

from quickssm.diagnostics.checks import check_identity_attachment
from quickssm.diagnostics.models import CheckStatus, InstanceContext
from quickssm.providers.aws.identity import IdentityInspector, parse_policy_document
from quickssm.providers.exceptions import ProviderAPIError
from tests.unit.fakes.fake_capabilities import FakeNetwork

ASSUME_ROLE_POLICY = json.dumps(
    {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"Service": "ec2.amazonaws.com"},
                "Action": "sts:AssumeRole",
            }
        ],
    }
)

SSM_INLINE_POLICY = {
    "Version": "2012-10-17",
    "Statement": [
        {"Effect": "Allow", "Action": ["ssm:UpdateInstanceInformation"], "Resource": "*"}
    ],
}


@pytest.fixture
def identity(aws_credentials):
    """Return an IdentityInspector backed by moto."""
    with mock_aws():
        yield IdentityInspector(region="us-east-1")


def _role_with_profile(iam_client, role_name: str, profile_name: str) -> str:
    iam_client.create_role(RoleName=role_name, AssumeRolePolicyDocument=ASSUME_ROLE_POLICY)
    response = iam_client.create_instance_profile(InstanceProfileName=profile_name)
    iam_client.add_role_to_instance_profile(
        InstanceProfileName=profile_name, RoleName=role_name
    )
    return response["InstanceProfile"]["Arn"]


def test_get_caller_identity(identity) -> None:
    caller = identity.get_caller_identity()

    assert caller["account"] == "123456789012"
    assert caller["arn"].startswith("arn:aws:")


def test_get_instance_profile_role(identity) -> None:
    _role_with_profile(identity.iam_client, "app-role", "app-profile")

    assert identity.get_instance_profile_role("app-profile") == "app-role"


def test_get_instance_profile_without_role(identity) -> None:
    identity.iam_client.create_instance_profile(InstanceProfileName="empty-profile")

    assert identity.get_instance_profile_role("empty-profile") is None


def test_unknown_instance_profile_raises_api_error(identity) -> None:
    with pytest.raises(ProviderAPIError) as exc_info:
        identity.get_instance_profile_role("missing-profile")

    assert exc_info.value.error_code == "NoSuchEntity"


def test_list_attached_policy_arns(identity) -> None:
    iam = identity.iam_client
    iam.create_role(RoleName="app-role", AssumeRolePolicyDocument=ASSUME_ROLE_POLICY)
    policy_arn = iam.create_policy(
        PolicyName="AmazonSSMManagedInstanceCore",
        PolicyDocument=json.dumps(SSM_INLINE_POLICY),
    )["Policy"]["Arn"]
    iam.attach_role_policy(RoleName="app-role", PolicyArn=policy_arn)

    assert identity.list_attached_policy_arns("app-role") == [policy_arn]


def test_list_inline_policy_documents(identity) -> None:
    iam = identity.iam_client
    iam.create_role(RoleName="app-role", AssumeRolePolicyDocument=ASSUME_ROLE_POLICY)
    iam.put_role_policy(
        RoleName="app-role",
        PolicyName="ssm-inline",
        PolicyDocument=json.dumps(SSM_INLINE_POLICY),
    )

    documents = identity.list_inline_policy_documents("app-role")

    assert len(documents) == 1
    assert documents[0]["Statement"][0]["Action"] == ["ssm:UpdateInstanceInformation"]


def test_identity_check_against_moto_role(identity) -> None:
    iam = identity.iam_client
    profile_arn = _role_with_profile(iam, "app-role", "app-profile")
    iam.put_role_policy(
        RoleName="app-role",
        PolicyName="ssm-inline",
        PolicyDocument=json.dumps(SSM_INLINE_POLICY),
    )
    context = InstanceContext(
        instance_id="i-0abc",
        identity=identity,
        network=FakeNetwork(),
        profile_arn=profile_arn,
    )

    result = check_identity_attachment(context)

    assert result.status is CheckStatus.PASS
    assert "'app-role'" in result.message


def test_parse_policy_document_accepts_url_encoded_json() -> None:
    encoded = quote(json.dumps(SSM_INLINE_POLICY))

    assert parse_policy_document(encoded) == SSM_INLINE_POLICY
    assert parse_policy_document(SSM_INLINE_POLICY) is SSM_INLINE_POLICY
