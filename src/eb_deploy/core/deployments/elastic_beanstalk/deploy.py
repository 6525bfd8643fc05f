"""Deployment entrypoint for Elastic Beanstalk."""

import time
from collections.abc import Callable
from typing import Any

from eb_deploy.core.deployments.elastic_beanstalk.application import register_version
from eb_deploy.core.deployments.elastic_beanstalk.artifact import validate_artifact
from eb_deploy.core.deployments.elastic_beanstalk.environment import reconcile_environment
from eb_deploy.core.deployments.elastic_beanstalk.iam import ensure_roles
from eb_deploy.core.deployments.elastic_beanstalk.models import (
    DeploymentConfig,
    DeploymentResult,
    Reporter,
)
from eb_deploy.core.deployments.elastic_beanstalk.network import ensure_network
from eb_deploy.core.deployments.elastic_beanstalk.options import build_option_settings
from eb_deploy.core.deployments.elastic_beanstalk.readiness import (
    get_environment_info,
    wait_for_environment,
)
from eb_deploy.core.deployments.elastic_beanstalk.session import create_session, get_identity
from eb_deploy.core.deployments.elastic_beanstalk.storage import bucket_name, ensure_bucket
from eb_deploy.core.deployments.elastic_beanstalk.workspace import DeploymentWorkspace


def deploy_application(
    config: DeploymentConfig,
    workspace: DeploymentWorkspace,
    reporter: Reporter,
    session: Any | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> DeploymentResult:
    """Deploy the artifact and wait for the environment to become healthy.

    Steps run in a fixed order and any failure aborts the run. Cleanup of
    the workspace is left to the caller so that it also runs on interrupt.
    """
    validate_artifact(config.artifact_path, reporter)
    # Reject bad option values before anything is provisioned.
    build_option_settings(config, network=None)

    session = session or create_session(config)
    identity = get_identity(session)
    reporter.info(f"Using AWS account {identity['Account']} ({identity['Arn']})")

    ensure_roles(session, config, workspace, reporter, sleep=sleep)

    bucket = bucket_name(config.region, identity["Account"])
    ensure_bucket(session, bucket, config.region, reporter)
    artifact = register_version(session, config, bucket, reporter)

    network = ensure_network(session, config, reporter)

    action = reconcile_environment(session, config, network, workspace, reporter)
    wait_for_environment(
        session,
        config.application_name,
        config.environment_name,
        reporter,
        poll_interval_seconds=config.poll_interval_seconds,
        max_attempts=config.max_poll_attempts,
        sleep=sleep,
    )
    environment = get_environment_info(
        session,
        config.application_name,
        config.environment_name,
        reporter,
    )

    return DeploymentResult(
        action=action,
        artifact=artifact,
        network=network,
        environment=environment,
    )
