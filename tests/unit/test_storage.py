"""Tests for the artifact bucket and upload."""

from pathlib import Path

import pytest
from boto3.exceptions import S3UploadFailedError

from eb_deploy.core.deployments.elastic_beanstalk import (
    ArtifactLocation,
    StorageError,
    bucket_name,
    ensure_bucket,
    upload_artifact,
)


def test_bucket_name_is_region_and_account_scoped() -> None:
    assert bucket_name("eu-west-1", "123456789012") == "elasticbeanstalk-eu-west-1-123456789012"


def test_existing_bucket_is_reused(session, reporter) -> None:
    s3 = session.client("s3")

    assert ensure_bucket(session, "bucket", "us-east-1", reporter) is False

    s3.create_bucket.assert_not_called()
    s3.put_bucket_versioning.assert_not_called()


def test_missing_bucket_in_us_east_1_has_no_location_constraint(
    session, reporter, client_error
) -> None:
    s3 = session.client("s3")
    s3.head_bucket.side_effect = client_error("404", "HeadObject")

    assert ensure_bucket(session, "bucket", "us-east-1", reporter) is True

    s3.create_bucket.assert_called_once_with(Bucket="bucket")
    s3.put_bucket_versioning.assert_called_once_with(
        Bucket="bucket",
        VersioningConfiguration={"Status": "Enabled"},
    )


def test_missing_bucket_elsewhere_sets_location_constraint(
    session, reporter, client_error
) -> None:
    s3 = session.client("s3")
    s3.head_bucket.side_effect = client_error("NoSuchBucket")

    ensure_bucket(session, "bucket", "eu-west-2", reporter)

    s3.create_bucket.assert_called_once_with(
        Bucket="bucket",
        CreateBucketConfiguration={"LocationConstraint": "eu-west-2"},
    )


def test_forbidden_bucket_aborts(session, reporter, client_error) -> None:
    s3 = session.client("s3")
    s3.head_bucket.side_effect = client_error("403")

    with pytest.raises(StorageError, match="Failed to read S3 bucket"):
        ensure_bucket(session, "bucket", "us-east-1", reporter)

    s3.create_bucket.assert_not_called()


def test_upload_failure_raises_storage_error(session, reporter, artifact: Path) -> None:
    s3 = session.client("s3")
    s3.upload_file.side_effect = S3UploadFailedError("boom")
    location = ArtifactLocation(bucket="bucket", key="my-app/v1.zip")

    with pytest.raises(StorageError, match="Failed to upload"):
        upload_artifact(session, artifact, location, reporter)


def test_upload_targets_location(session, reporter, artifact: Path) -> None:
    s3 = session.client("s3")
    location = ArtifactLocation(bucket="bucket", key="my-app/v1.zip")

    assert upload_artifact(session, artifact, location, reporter) == location
    s3.upload_file.assert_called_once_with(str(artifact), "bucket", "my-app/v1.zip")
    assert location.uri == "s3://bucket/my-app/v1.zip"
