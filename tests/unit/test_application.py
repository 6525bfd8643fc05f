"""Tests for application version registration."""

import pytest
from boto3.exceptions import S3UploadFailedError

from eb_deploy.core.deployments.elastic_beanstalk import (
    ProvisioningError,
    StorageError,
    register_version,
)


def test_creates_application_uploads_and_registers(session, make_config, reporter) -> None:
    eb = session.client("elasticbeanstalk")
    s3 = session.client("s3")
    eb.describe_applications.return_value = {"Applications": []}
    config = make_config()

    location = register_version(session, config, "bucket", reporter)

    eb.create_application.assert_called_once()
    assert eb.create_application.call_args.kwargs["ApplicationName"] == "my-app"
    s3.upload_file.assert_called_once_with(
        str(config.artifact_path), "bucket", "my-app/v1.0.0-20260101-000000.zip"
    )
    kwargs = eb.create_application_version.call_args.kwargs
    assert kwargs["ApplicationName"] == "my-app"
    assert kwargs["VersionLabel"] == "v1.0.0-20260101-000000"
    assert kwargs["SourceBundle"] == {
        "S3Bucket": "bucket",
        "S3Key": "my-app/v1.0.0-20260101-000000.zip",
    }
    assert kwargs["AutoCreateApplication"] is True
    assert location.key == "my-app/v1.0.0-20260101-000000.zip"


def test_existing_application_is_not_recreated(session, make_config, reporter) -> None:
    eb = session.client("elasticbeanstalk")
    eb.describe_applications.return_value = {"Applications": [{"ApplicationName": "my-app"}]}

    register_version(session, make_config(), "bucket", reporter)

    eb.create_application.assert_not_called()
    eb.create_application_version.assert_called_once()


def test_upload_failure_skips_version_registration(session, make_config, reporter) -> None:
    eb = session.client("elasticbeanstalk")
    eb.describe_applications.return_value = {"Applications": [{"ApplicationName": "my-app"}]}
    session.client("s3").upload_file.side_effect = S3UploadFailedError("denied")

    with pytest.raises(StorageError):
        register_version(session, make_config(), "bucket", reporter)

    eb.create_application_version.assert_not_called()


def test_duplicate_version_label_aborts(session, make_config, reporter, client_error) -> None:
    eb = session.client("elasticbeanstalk")
    eb.describe_applications.return_value = {"Applications": [{"ApplicationName": "my-app"}]}
    eb.create_application_version.side_effect = client_error("InvalidParameterValue")

    with pytest.raises(ProvisioningError, match="Failed to create application version"):
        register_version(session, make_config(), "bucket", reporter)
