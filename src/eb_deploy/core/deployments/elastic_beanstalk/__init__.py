"""AWS Elastic Beanstalk deployment helpers."""

from eb_deploy.core.deployments.elastic_beanstalk.application import (
    ensure_application,
    register_version,
)
from eb_deploy.core.deployments.elastic_beanstalk.artifact import validate_artifact
from eb_deploy.core.deployments.elastic_beanstalk.deploy import deploy_application
from eb_deploy.core.deployments.elastic_beanstalk.environment import (
    current_vpc_id,
    environment_exists,
    reconcile_environment,
)
from eb_deploy.core.deployments.elastic_beanstalk.errors import (
    ArtifactError,
    ConfigError,
    DeploymentError,
    EnvironmentFailedError,
    NetworkError,
    ProvisioningError,
    ReadinessTimeoutError,
    StorageError,
)
from eb_deploy.core.deployments.elastic_beanstalk.iam import ensure_roles
from eb_deploy.core.deployments.elastic_beanstalk.models import (
    ArtifactLocation,
    DeploymentConfig,
    DeploymentResult,
    EnvironmentAction,
    EnvironmentEvent,
    EnvironmentSnapshot,
    NetworkTopology,
    ReadinessState,
    Reporter,
    default_version_label,
)
from eb_deploy.core.deployments.elastic_beanstalk.network import ensure_network
from eb_deploy.core.deployments.elastic_beanstalk.options import (
    OptionSetting,
    OptionSettingsBuilder,
    build_option_settings,
)
from eb_deploy.core.deployments.elastic_beanstalk.readiness import (
    classify_readiness,
    get_environment_info,
    wait_for_environment,
)
from eb_deploy.core.deployments.elastic_beanstalk.session import create_session, get_identity
from eb_deploy.core.deployments.elastic_beanstalk.storage import (
    bucket_name,
    ensure_bucket,
    upload_artifact,
)
from eb_deploy.core.deployments.elastic_beanstalk.workspace import DeploymentWorkspace

__all__ = [
    "ArtifactError",
    "ArtifactLocation",
    "ConfigError",
    "DeploymentConfig",
    "DeploymentError",
    "DeploymentResult",
    "DeploymentWorkspace",
    "EnvironmentAction",
    "EnvironmentEvent",
    "EnvironmentFailedError",
    "EnvironmentSnapshot",
    "NetworkError",
    "NetworkTopology",
    "OptionSetting",
    "OptionSettingsBuilder",
    "ProvisioningError",
    "ReadinessState",
    "ReadinessTimeoutError",
    "Reporter",
    "StorageError",
    "bucket_name",
    "build_option_settings",
    "classify_readiness",
    "create_session",
    "current_vpc_id",
    "default_version_label",
    "deploy_application",
    "ensure_application",
    "ensure_bucket",
    "ensure_network",
    "ensure_roles",
    "environment_exists",
    "get_environment_info",
    "get_identity",
    "reconcile_environment",
    "register_version",
    "upload_artifact",
    "validate_artifact",
    "wait_for_environment",
]
