"""IAM role helpers for Elastic Beanstalk deployment."""

import logging
import time
from collections.abc import Callable, Iterable
from typing import Any

from botocore.exceptions import ClientError

from eb_deploy.core.deployments.elastic_beanstalk.errors import ProvisioningError
from eb_deploy.core.deployments.elastic_beanstalk.models import DeploymentConfig, Reporter
from eb_deploy.core.deployments.elastic_beanstalk.session import error_code
from eb_deploy.core.deployments.elastic_beanstalk.workspace import DeploymentWorkspace

logger = logging.getLogger(__name__)

SERVICE_ROLE_POLICIES = (
    "arn:aws:iam::aws:policy/service-role/AWSElasticBeanstalkEnhancedHealth",
    "arn:aws:iam::aws:policy/service-role/AWSElasticBeanstalkService",
)
INSTANCE_ROLE_POLICIES = (
    "arn:aws:iam::aws:policy/AWSElasticBeanstalkWebTier",
    "arn:aws:iam::aws:policy/AWSElasticBeanstalkWorkerTier",
    "arn:aws:iam::aws:policy/AWSElasticBeanstalkMulticontainerDocker",
)


def ensure_roles(
    session: Any,
    config: DeploymentConfig,
    workspace: DeploymentWorkspace,
    reporter: Reporter,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Ensure the service role, instance role and instance profile exist."""
    iam = session.client("iam")

    service_role = config.service_role_name
    reporter.info(f"Checking if service role '{service_role}' exists...")
    if _role_exists(iam, service_role):
        reporter.info(f"Service role '{service_role}' already exists.")
    else:
        reporter.info(f"Creating service role '{service_role}'...")
        trust_policy = _trust_policy("elasticbeanstalk.amazonaws.com")
        _create_role(iam, service_role, workspace.write_trust_policy(service_role, trust_policy))
        reporter.success(f"Successfully created service role '{service_role}'")
    if _attach_missing_policies(iam, service_role, SERVICE_ROLE_POLICIES):
        reporter.info(f"Attached managed policies to service role '{service_role}'.")

    # The instance role and its profile share one name.
    instance_role = config.instance_profile_name
    reporter.info(f"Checking if instance profile '{instance_role}' exists...")
    if _role_exists(iam, instance_role):
        reporter.info(f"Instance role '{instance_role}' already exists.")
    else:
        reporter.info("Creating EC2 role for instance profile...")
        trust_policy = _trust_policy("ec2.amazonaws.com")
        _create_role(iam, instance_role, workspace.write_trust_policy(instance_role, trust_policy))
    if _attach_missing_policies(iam, instance_role, INSTANCE_ROLE_POLICIES):
        reporter.info(f"Attached managed policies to EC2 role '{instance_role}'.")

    if _ensure_instance_profile(iam, instance_role, instance_role, reporter):
        reporter.info("Waiting for instance profile to be ready...")
        sleep(config.role_settle_seconds)
        reporter.success(f"Successfully created instance profile '{instance_role}'")
    else:
        reporter.info(f"Instance profile '{instance_role}' already exists.")


def _role_exists(iam: Any, role_name: str) -> bool:
    """Return true when the role exists."""
    try:
        iam.get_role(RoleName=role_name)
    except ClientError as exc:
        if error_code(exc) != "NoSuchEntity":
            raise ProvisioningError(f"Failed to read role {role_name}: {exc}") from exc
        return False
    return True


def _create_role(iam: Any, role_name: str, trust_policy: str) -> None:
    """Create a role with the given trust policy document."""
    try:
        iam.create_role(RoleName=role_name, AssumeRolePolicyDocument=trust_policy)
    except ClientError as exc:
        raise ProvisioningError(f"Failed to create role {role_name}: {exc}") from exc
    logger.debug("Created role %s", role_name)


def _attach_missing_policies(iam: Any, role_name: str, policy_arns: Iterable[str]) -> bool:
    """Attach the managed policies the role does not have yet.

    Returns:
        True when at least one policy was attached.
    """
    try:
        response = iam.list_attached_role_policies(RoleName=role_name)
    except ClientError as exc:
        raise ProvisioningError(f"Failed to list policies of role {role_name}: {exc}") from exc
    attached = {policy["PolicyArn"] for policy in response.get("AttachedPolicies", [])}

    missing = [policy_arn for policy_arn in policy_arns if policy_arn not in attached]
    for policy_arn in missing:
        try:
            iam.attach_role_policy(RoleName=role_name, PolicyArn=policy_arn)
        except ClientError as exc:
            raise ProvisioningError(
                f"Failed to attach policy {policy_arn} to {role_name}: {exc}"
            ) from exc
        logger.debug("Attached %s to %s", policy_arn, role_name)
    return bool(missing)


def _ensure_instance_profile(
    iam: Any,
    profile_name: str,
    role_name: str,
    reporter: Reporter,
) -> bool:
    """Ensure the instance profile exists and wraps the role.

    Returns:
        True when the profile or its role binding had to be created.
    """
    try:
        response = iam.get_instance_profile(InstanceProfileName=profile_name)
        bound_roles = {
            role["RoleName"] for role in response["InstanceProfile"].get("Roles", [])
        }
    except ClientError as exc:
        if error_code(exc) != "NoSuchEntity":
            raise ProvisioningError(
                f"Failed to read instance profile {profile_name}: {exc}"
            ) from exc
        reporter.info(f"Creating instance profile '{profile_name}'...")
        try:
            iam.create_instance_profile(InstanceProfileName=profile_name)
        except ClientError as create_exc:
            raise ProvisioningError(
                f"Failed to create instance profile {profile_name}: {create_exc}"
            ) from create_exc
        bound_roles = set()

    if role_name in bound_roles:
        return False

    reporter.info("Adding role to instance profile...")
    try:
        iam.add_role_to_instance_profile(InstanceProfileName=profile_name, RoleName=role_name)
    except ClientError as exc:
        raise ProvisioningError(
            f"Failed to add role {role_name} to instance profile {profile_name}: {exc}"
        ) from exc
    return True


def _trust_policy(service_principal: str) -> dict[str, Any]:
    """Return a trust policy allowing one AWS service to assume the role."""
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"Service": service_principal},
                "Action": "sts:AssumeRole",
            }
        ],
    }
