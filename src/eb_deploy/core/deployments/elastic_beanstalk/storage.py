"""S3 helpers for the deployment artifact bucket."""

import logging
from pathlib import Path
from typing import Any

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError

from eb_deploy.core.deployments.elastic_beanstalk.errors import StorageError
from eb_deploy.core.deployments.elastic_beanstalk.models import ArtifactLocation, Reporter
from eb_deploy.core.deployments.elastic_beanstalk.session import error_code

logger = logging.getLogger(__name__)

# us-east-1 rejects an explicit LocationConstraint.
_DEFAULT_BUCKET_REGION = "us-east-1"
_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


def bucket_name(region: str, account_id: str) -> str:
    """Return the artifact bucket name for a region and account."""
    return f"elasticbeanstalk-{region}-{account_id}"


def artifact_key(application_name: str, version_label: str) -> str:
    """Return the object key for an application version bundle."""
    return f"{application_name}/{version_label}.zip"


def ensure_bucket(session: Any, name: str, region: str, reporter: Reporter) -> bool:
    """Ensure the artifact bucket exists.

    Returns:
        True when the bucket was created by this call.
    """
    s3 = session.client("s3")
    reporter.info(f"Checking if S3 bucket '{name}' exists...")
    try:
        s3.head_bucket(Bucket=name)
        reporter.info(f"S3 bucket '{name}' already exists.")
        return False
    except ClientError as exc:
        if error_code(exc) not in _MISSING_BUCKET_CODES:
            raise StorageError(f"Failed to read S3 bucket {name}: {exc}") from exc

    reporter.info(f"Creating S3 bucket '{name}' in region '{region}'...")
    request: dict[str, Any] = {"Bucket": name}
    if region != _DEFAULT_BUCKET_REGION:
        request["CreateBucketConfiguration"] = {"LocationConstraint": region}

    try:
        s3.create_bucket(**request)
        s3.put_bucket_versioning(
            Bucket=name,
            VersioningConfiguration={"Status": "Enabled"},
        )
    except ClientError as exc:
        raise StorageError(f"Failed to create S3 bucket {name}: {exc}") from exc

    reporter.success(f"Successfully created S3 bucket '{name}'")
    return True


def upload_artifact(
    session: Any,
    artifact_path: Path,
    location: ArtifactLocation,
    reporter: Reporter,
) -> ArtifactLocation:
    """Upload the deployment artifact."""
    s3 = session.client("s3")
    reporter.info(f"Uploading deployment package to {location.uri}...")
    try:
        s3.upload_file(str(artifact_path), location.bucket, location.key)
    except (ClientError, S3UploadFailedError) as exc:
        raise StorageError(f"Failed to upload deployment package to S3: {exc}") from exc

    logger.debug("Uploaded %s to %s", artifact_path, location.uri)
    return location
