"""Shared fixtures for deployment unit tests."""

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from eb_deploy.core.deployments.elastic_beanstalk import DeploymentConfig


class RecordingReporter:
    """Collects reported messages by level."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def by_level(self, level: str) -> list[str]:
        return [message for recorded_level, message in self.messages if recorded_level == level]


class FakeSession:
    """A boto3 session stand-in handing out one MagicMock per service."""

    def __init__(self) -> None:
        self.clients: dict[str, MagicMock] = {}

    def client(self, service_name: str) -> MagicMock:
        if service_name not in self.clients:
            self.clients[service_name] = MagicMock(name=service_name)
        return self.clients[service_name]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client_error() -> Callable[..., ClientError]:
    def _make(code: str, operation: str = "Operation") -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": f"{code} raised"}}, operation)

    return _make


@pytest.fixture
def artifact(tmp_path: Path) -> Path:
    path = tmp_path / "app.zip"
    path.write_bytes(b"PK\x03\x04 bundle")
    return path


@pytest.fixture
def make_config(tmp_path: Path, artifact: Path) -> Callable[..., DeploymentConfig]:
    def _make(**overrides: Any) -> DeploymentConfig:
        values: dict[str, Any] = {
            "application_name": "my-app",
            "environment_name": "my-env",
            "version_label": "v1.0.0-20260101-000000",
            "region": "us-east-1",
            "artifact_path": artifact,
            "instance_type": "t3.small",
            "options_path": tmp_path / "options.json",
            "role_settle_seconds": 10,
        }
        values.update(overrides)
        return DeploymentConfig(**values)

    return _make
