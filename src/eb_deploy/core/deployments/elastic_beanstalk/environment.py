"""Create-or-update reconciliation for Elastic Beanstalk environments."""

import logging
from typing import Any

from botocore.exceptions import ClientError

from eb_deploy.core.deployments.elastic_beanstalk.errors import ProvisioningError
from eb_deploy.core.deployments.elastic_beanstalk.models import (
    DeploymentConfig,
    EnvironmentAction,
    EnvironmentSnapshot,
    NetworkTopology,
    Reporter,
)
from eb_deploy.core.deployments.elastic_beanstalk.options import (
    NAMESPACE_VPC,
    build_option_settings,
    to_api,
)
from eb_deploy.core.deployments.elastic_beanstalk.workspace import DeploymentWorkspace

logger = logging.getLogger(__name__)

TERMINATED_STATUS = "Terminated"
ACTIVE_STATUSES = frozenset({"Ready", "Updating", "Launching"})


def describe_environment(
    eb: Any,
    application_name: str,
    environment_name: str,
) -> EnvironmentSnapshot:
    """Return the observed state of the matching environment that is not terminated.

    A reused name keeps its terminated records around for a while, so those
    are skipped.
    """
    response = eb.describe_environments(
        ApplicationName=application_name,
        EnvironmentNames=[environment_name],
    )
    environments = [
        environment
        for environment in response.get("Environments", [])
        if environment.get("Status") != TERMINATED_STATUS
    ]
    if not environments:
        return EnvironmentSnapshot(status=None)
    environment = environments[0]
    return EnvironmentSnapshot(
        status=environment.get("Status"),
        health=environment.get("Health"),
        endpoint_url=environment.get("EndpointURL"),
        cname=environment.get("CNAME"),
    )


def environment_exists(eb: Any, application_name: str, environment_name: str) -> bool:
    """Return true when a live environment with the name exists."""
    response = eb.describe_environments(
        ApplicationName=application_name,
        EnvironmentNames=[environment_name],
    )
    statuses = [
        environment.get("Status")
        for environment in response.get("Environments", [])
        if environment.get("Status") != TERMINATED_STATUS
    ]
    return any(status in ACTIVE_STATUSES for status in statuses)


def current_vpc_id(eb: Any, application_name: str, environment_name: str) -> str | None:
    """Return the VPC an existing environment is bound to."""
    response = eb.describe_configuration_settings(
        ApplicationName=application_name,
        EnvironmentName=environment_name,
    )
    configurations = response.get("ConfigurationSettings", [])
    if not configurations:
        return None
    for option in configurations[0].get("OptionSettings", []):
        if option.get("Namespace") == NAMESPACE_VPC and option.get("OptionName") == "VPCId":
            value = option.get("Value")
            return str(value) if value else None
    return None


def reconcile_environment(
    session: Any,
    config: DeploymentConfig,
    network: NetworkTopology,
    workspace: DeploymentWorkspace,
    reporter: Reporter,
) -> EnvironmentAction:
    """Create the environment, or update it to the new version if it exists.

    The VPC binding of an environment cannot change after creation, so
    network settings are only sent with a create call.
    """
    eb = session.client("elasticbeanstalk")
    app, env = config.application_name, config.environment_name

    reporter.info(f"Checking if environment '{env}' exists...")
    try:
        exists = environment_exists(eb, app, env)
    except ClientError as exc:
        raise ProvisioningError(f"Failed to describe environment {env}: {exc}") from exc

    if exists:
        reporter.info(
            f"Environment '{env}' already exists. Updating to version '{config.version_label}'..."
        )
        reporter.info("Retrieving current environment configuration...")
        try:
            existing_vpc_id = current_vpc_id(eb, app, env)
        except ClientError as exc:
            raise ProvisioningError(
                f"Failed to read configuration of environment {env}: {exc}"
            ) from exc

        if existing_vpc_id and network.vpc_id != existing_vpc_id:
            reporter.warning("VPC ID cannot be changed for existing environments")
            reporter.warning(
                f"Current VPC ID: {existing_vpc_id}, Requested VPC ID: {network.vpc_id}"
            )
            reporter.warning(
                "The existing VPC ID will be used and the requested VPC ID will be ignored"
            )

        settings = to_api(build_option_settings(config, network=None))
        path = workspace.write_options(settings)
        reporter.success(f"Successfully wrote option settings to {path}")

        reporter.info("Updating existing environment without VPC settings...")
        try:
            eb.update_environment(
                ApplicationName=app,
                EnvironmentName=env,
                VersionLabel=config.version_label,
                OptionSettings=settings,
            )
        except ClientError as exc:
            raise ProvisioningError(f"Failed to update environment {env}: {exc}") from exc
        return EnvironmentAction.UPDATED

    reporter.info(f"Creating new environment '{env}'...")
    settings = to_api(build_option_settings(config, network=network))
    path = workspace.write_options(settings)
    reporter.success(f"Successfully wrote option settings to {path}")
    try:
        eb.create_environment(
            ApplicationName=app,
            EnvironmentName=env,
            SolutionStackName=config.solution_stack,
            VersionLabel=config.version_label,
            OptionSettings=settings,
        )
    except ClientError as exc:
        raise ProvisioningError(f"Failed to create environment {env}: {exc}") from exc
    logger.debug("Requested creation of %s with %d option settings", env, len(settings))
    return EnvironmentAction.CREATED
