"""Errors raised by Elastic Beanstalk deployment steps."""

from eb_deploy.core.deployments.elastic_beanstalk.models import EnvironmentEvent


class DeploymentError(RuntimeError):
    """Base class for fatal deployment errors."""


class ConfigError(DeploymentError):
    """Settings or option values are invalid."""


class ArtifactError(DeploymentError):
    """The local deployment artifact is unusable."""


class ProvisioningError(DeploymentError):
    """A provider call failed while provisioning a resource."""


class NetworkError(ProvisioningError):
    """Network prerequisites could not be resolved or created."""


class StorageError(ProvisioningError):
    """The artifact bucket or upload failed."""


class EnvironmentFailedError(DeploymentError):
    """The environment reached a failed or unhealthy state."""

    def __init__(self, message: str, events: list[EnvironmentEvent] | None = None) -> None:
        super().__init__(message)
        self.events = events or []


class ReadinessTimeoutError(DeploymentError):
    """The environment did not become ready within the polling budget."""
