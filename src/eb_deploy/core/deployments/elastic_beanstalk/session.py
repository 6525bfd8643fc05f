"""AWS session helpers."""

from typing import Any

import boto3
from botocore.exceptions import ClientError

from eb_deploy.core.deployments.elastic_beanstalk.errors import ProvisioningError
from eb_deploy.core.deployments.elastic_beanstalk.models import DeploymentConfig


def create_session(config: DeploymentConfig) -> boto3.session.Session:
    """Create a boto3 session for the configured region and optional profile."""
    options: dict[str, Any] = {"region_name": config.region}
    if config.aws_profile:
        options["profile_name"] = config.aws_profile
    return boto3.session.Session(**options)


def get_identity(session: Any) -> dict[str, str]:
    """Return the account id and ARN of the calling identity."""
    try:
        response = session.client("sts").get_caller_identity()
    except ClientError as exc:
        raise ProvisioningError(f"Failed to read AWS identity: {exc}") from exc

    account = str(response.get("Account") or "")
    if not account:
        raise ProvisioningError("AWS identity did not include an account id")
    return {"Account": account, "Arn": str(response.get("Arn", ""))}


def error_code(exc: ClientError) -> str:
    """Return the provider error code of a client error."""
    return str(exc.response.get("Error", {}).get("Code", ""))
