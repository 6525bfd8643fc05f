"""Tests for deployment artifact validation."""

from pathlib import Path

import pytest

from eb_deploy.core.deployments.elastic_beanstalk import ArtifactError, validate_artifact


def test_valid_artifact_returns_size(artifact: Path, reporter) -> None:
    assert validate_artifact(artifact, reporter) == artifact.stat().st_size
    assert reporter.by_level("success") == ["Deployment package validation successful."]


def test_missing_artifact_is_rejected(tmp_path: Path, reporter) -> None:
    with pytest.raises(ArtifactError, match="not found"):
        validate_artifact(tmp_path / "missing.zip", reporter)


def test_empty_artifact_is_rejected(tmp_path: Path, reporter) -> None:
    empty = tmp_path / "empty.zip"
    empty.touch()

    with pytest.raises(ArtifactError, match="is empty"):
        validate_artifact(empty, reporter)


def test_directory_is_not_an_artifact(tmp_path: Path, reporter) -> None:
    with pytest.raises(ArtifactError, match="not found"):
        validate_artifact(tmp_path, reporter)
