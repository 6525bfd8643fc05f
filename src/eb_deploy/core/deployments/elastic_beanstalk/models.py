"""Data models for Elastic Beanstalk deployment."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Protocol

SERVICE_ROLE_NAME = "aws-elasticbeanstalk-service-role"
INSTANCE_PROFILE_NAME = "aws-elasticbeanstalk-ec2-role"
DEFAULT_SOLUTION_STACK = "64bit Amazon Linux 2023 v4.5.0 running Python 3.11"


def default_version_label(now: datetime | None = None) -> str:
    """Return a timestamped version label."""
    moment = now or datetime.now(UTC)
    return f"v1.0.0-{moment.strftime('%Y%m%d-%H%M%S')}"


class Reporter(Protocol):
    """Receives progress messages from deployment steps."""

    def info(self, message: str) -> None:
        """Report routine progress."""

    def warning(self, message: str) -> None:
        """Report a non-fatal problem."""

    def success(self, message: str) -> None:
        """Report a completed step."""

    def error(self, message: str) -> None:
        """Report a fatal problem."""


@dataclass(frozen=True)
class DeploymentConfig:
    """Configuration for an Elastic Beanstalk deployment."""

    application_name: str
    environment_name: str
    version_label: str
    region: str
    artifact_path: Path
    instance_type: str
    aws_profile: str | None = None
    solution_stack: str = DEFAULT_SOLUTION_STACK
    vpc_id: str | None = None
    public_subnet_1: str | None = None
    public_subnet_2: str | None = None
    private_subnet_1: str | None = None
    private_subnet_2: str | None = None
    clean_all: bool = False
    service_role_name: str = SERVICE_ROLE_NAME
    instance_profile_name: str = INSTANCE_PROFILE_NAME
    options_path: Path = Path("options.json")
    poll_interval_seconds: float = 20
    max_poll_attempts: int = 30
    role_settle_seconds: float = 10
    application_environment: tuple[tuple[str, str], ...] = (
        ("ENVIRONMENT", "production"),
        ("LOG_LEVEL", "info"),
    )

    @property
    def public_subnet_ids(self) -> tuple[str, str] | None:
        """Return the caller-supplied public subnets when both are set."""
        if self.public_subnet_1 and self.public_subnet_2:
            return self.public_subnet_1, self.public_subnet_2
        return None

    @property
    def private_subnet_ids(self) -> tuple[str, str] | None:
        """Return the caller-supplied private subnets when both are set."""
        if self.private_subnet_1 and self.private_subnet_2:
            return self.private_subnet_1, self.private_subnet_2
        return None


@dataclass(frozen=True)
class NetworkTopology:
    """Resolved network resources for the environment."""

    vpc_id: str
    public_subnet_ids: tuple[str, str]
    internet_gateway_id: str
    route_table_id: str


@dataclass(frozen=True)
class ArtifactLocation:
    """Location of an uploaded deployment artifact."""

    bucket: str
    key: str

    @property
    def uri(self) -> str:
        """Return the S3 URI of the artifact."""
        return f"s3://{self.bucket}/{self.key}"


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Observed state of an Elastic Beanstalk environment."""

    status: str | None
    health: str | None = None
    endpoint_url: str | None = None
    cname: str | None = None


@dataclass(frozen=True)
class EnvironmentEvent:
    """A recent event reported for an environment."""

    event_date: str
    severity: str
    message: str


class EnvironmentAction(Enum):
    """Provisioning call issued for the environment."""

    CREATED = "created"
    UPDATED = "updated"


class ReadinessState(Enum):
    """Classification of a single readiness poll."""

    WAITING = "waiting"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class DeploymentResult:
    """Summary of a completed deployment."""

    action: EnvironmentAction
    artifact: ArtifactLocation
    network: NetworkTopology
    environment: EnvironmentSnapshot
