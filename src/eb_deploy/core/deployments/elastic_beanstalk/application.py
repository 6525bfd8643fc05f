"""Application and application version helpers."""

from datetime import UTC, datetime
from typing import Any

from botocore.exceptions import ClientError

from eb_deploy.core.deployments.elastic_beanstalk.errors import ProvisioningError
from eb_deploy.core.deployments.elastic_beanstalk.models import (
    ArtifactLocation,
    DeploymentConfig,
    Reporter,
)
from eb_deploy.core.deployments.elastic_beanstalk.storage import artifact_key, upload_artifact


def ensure_application(session: Any, application_name: str, reporter: Reporter) -> bool:
    """Ensure the application exists.

    Returns:
        True when the application was created by this call.
    """
    eb = session.client("elasticbeanstalk")
    try:
        response = eb.describe_applications(ApplicationNames=[application_name])
    except ClientError as exc:
        raise ProvisioningError(f"Failed to read application {application_name}: {exc}") from exc
    if response.get("Applications"):
        return False

    reporter.info(f"Application '{application_name}' does not exist. Creating now...")
    try:
        eb.create_application(
            ApplicationName=application_name,
            Description="Application created by eb-deploy",
        )
    except ClientError as exc:
        raise ProvisioningError(
            f"Failed to create application {application_name}: {exc}"
        ) from exc
    reporter.success(f"Successfully created application '{application_name}'")
    return True


def register_version(
    session: Any,
    config: DeploymentConfig,
    bucket: str,
    reporter: Reporter,
) -> ArtifactLocation:
    """Upload the artifact and register it as a new application version."""
    reporter.info(
        f"Creating application version '{config.version_label}' "
        f"for application '{config.application_name}'..."
    )
    ensure_application(session, config.application_name, reporter)

    location = ArtifactLocation(
        bucket=bucket,
        key=artifact_key(config.application_name, config.version_label),
    )
    upload_artifact(session, config.artifact_path, location, reporter)

    reporter.info("Creating application version...")
    eb = session.client("elasticbeanstalk")
    deployed_at = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S %Z")
    try:
        eb.create_application_version(
            ApplicationName=config.application_name,
            VersionLabel=config.version_label,
            Description=f"Version {config.version_label} deployed on {deployed_at}",
            SourceBundle={"S3Bucket": location.bucket, "S3Key": location.key},
            AutoCreateApplication=True,
        )
    except ClientError as exc:
        raise ProvisioningError(
            f"Failed to create application version {config.version_label}: {exc}"
        ) from exc

    reporter.success(f"Successfully created application version '{config.version_label}'")
    return location
