"""Tests for IAM role provisioning."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from eb_deploy.core.deployments.elastic_beanstalk import (
    DeploymentWorkspace,
    ProvisioningError,
    ensure_roles,
)
from eb_deploy.core.deployments.elastic_beanstalk.iam import (
    INSTANCE_ROLE_POLICIES,
    SERVICE_ROLE_POLICIES,
)


@pytest.fixture
def workspace(tmp_path: Path):
    workspace = DeploymentWorkspace(tmp_path / "options.json")
    yield workspace
    workspace.cleanup()


def _attached(policy_arns) -> dict:
    return {"AttachedPolicies": [{"PolicyArn": arn} for arn in policy_arns]}


def test_creates_missing_roles_and_instance_profile(
    session, make_config, workspace, reporter, client_error
) -> None:
    iam = session.client("iam")
    iam.get_role.side_effect = client_error("NoSuchEntity")
    iam.get_instance_profile.side_effect = client_error("NoSuchEntity")
    sleep = MagicMock()

    ensure_roles(session, make_config(), workspace, reporter, sleep=sleep)

    created = [call.kwargs["RoleName"] for call in iam.create_role.call_args_list]
    assert created == ["aws-elasticbeanstalk-service-role", "aws-elasticbeanstalk-ec2-role"]
    principals = [
        json.loads(call.kwargs["AssumeRolePolicyDocument"])["Statement"][0]["Principal"]
        for call in iam.create_role.call_args_list
    ]
    assert principals == [
        {"Service": "elasticbeanstalk.amazonaws.com"},
        {"Service": "ec2.amazonaws.com"},
    ]
    attached = [
        (call.kwargs["RoleName"], call.kwargs["PolicyArn"])
        for call in iam.attach_role_policy.call_args_list
    ]
    assert attached == [
        *(("aws-elasticbeanstalk-service-role", arn) for arn in SERVICE_ROLE_POLICIES),
        *(("aws-elasticbeanstalk-ec2-role", arn) for arn in INSTANCE_ROLE_POLICIES),
    ]
    iam.create_instance_profile.assert_called_once_with(
        InstanceProfileName="aws-elasticbeanstalk-ec2-role"
    )
    iam.add_role_to_instance_profile.assert_called_once_with(
        InstanceProfileName="aws-elasticbeanstalk-ec2-role",
        RoleName="aws-elasticbeanstalk-ec2-role",
    )
    sleep.assert_called_once_with(10)
    assert len(workspace.transient_files) == 2


def test_existing_roles_are_left_alone(session, make_config, workspace, reporter) -> None:
    iam = session.client("iam")
    iam.get_role.return_value = {"Role": {"Arn": "arn:aws:iam::123:role/x"}}
    iam.list_attached_role_policies.side_effect = [
        _attached(SERVICE_ROLE_POLICIES),
        _attached(INSTANCE_ROLE_POLICIES),
    ]
    iam.get_instance_profile.return_value = {
        "InstanceProfile": {"Roles": [{"RoleName": "aws-elasticbeanstalk-ec2-role"}]}
    }
    sleep = MagicMock()

    ensure_roles(session, make_config(), workspace, reporter, sleep=sleep)

    iam.create_role.assert_not_called()
    iam.attach_role_policy.assert_not_called()
    iam.create_instance_profile.assert_not_called()
    iam.add_role_to_instance_profile.assert_not_called()
    sleep.assert_not_called()
    assert workspace.transient_files == []


def test_profile_without_role_gets_role_added(session, make_config, workspace, reporter) -> None:
    iam = session.client("iam")
    iam.get_role.return_value = {"Role": {}}
    iam.get_instance_profile.return_value = {"InstanceProfile": {"Roles": []}}
    sleep = MagicMock()

    ensure_roles(session, make_config(), workspace, reporter, sleep=sleep)

    iam.create_instance_profile.assert_not_called()
    iam.add_role_to_instance_profile.assert_called_once()
    sleep.assert_called_once()


def test_unexpected_read_error_aborts(
    session, make_config, workspace, reporter, client_error
) -> None:
    iam = session.client("iam")
    iam.get_role.side_effect = client_error("AccessDenied")

    with pytest.raises(ProvisioningError, match="Failed to read role"):
        ensure_roles(session, make_config(), workspace, reporter, sleep=MagicMock())

    iam.create_role.assert_not_called()


def test_create_failure_aborts_before_attaching(
    session, make_config, workspace, reporter, client_error
) -> None:
    iam = session.client("iam")
    iam.get_role.side_effect = client_error("NoSuchEntity")
    iam.create_role.side_effect = client_error("LimitExceeded")

    with pytest.raises(ProvisioningError, match="Failed to create role"):
        ensure_roles(session, make_config(), workspace, reporter, sleep=MagicMock())

    iam.attach_role_policy.assert_not_called()


def test_existing_role_without_policies_is_repaired(
    session, make_config, workspace, reporter
) -> None:
    iam = session.client("iam")
    iam.get_role.return_value = {"Role": {}}
    iam.list_attached_role_policies.side_effect = [
        _attached(SERVICE_ROLE_POLICIES[:1]),
        {"AttachedPolicies": []},
    ]
    iam.get_instance_profile.return_value = {
        "InstanceProfile": {"Roles": [{"RoleName": "aws-elasticbeanstalk-ec2-role"}]}
    }

    ensure_roles(session, make_config(), workspace, reporter, sleep=MagicMock())

    iam.create_role.assert_not_called()
    listed = [call.kwargs["RoleName"] for call in iam.list_attached_role_policies.call_args_list]
    assert listed == ["aws-elasticbeanstalk-service-role", "aws-elasticbeanstalk-ec2-role"]
    attached = [
        (call.kwargs["RoleName"], call.kwargs["PolicyArn"])
        for call in iam.attach_role_policy.call_args_list
    ]
    assert attached == [
        ("aws-elasticbeanstalk-service-role", SERVICE_ROLE_POLICIES[1]),
        *(("aws-elasticbeanstalk-ec2-role", arn) for arn in INSTANCE_ROLE_POLICIES),
    ]
