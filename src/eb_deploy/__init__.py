"""eb-deploy - deploy application bundles to AWS Elastic Beanstalk."""

from eb_deploy.core.deployments.elastic_beanstalk import (
    DeploymentConfig,
    DeploymentResult,
    deploy_application,
)
from eb_deploy.core.settings import DeploySettings, get_settings

__all__ = [
    "DeploymentConfig",
    "DeploymentResult",
    "DeploySettings",
    "deploy_application",
    "get_settings",
]
