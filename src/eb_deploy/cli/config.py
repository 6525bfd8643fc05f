"""Build deployment configuration from CLI options."""

from pathlib import Path

from eb_deploy.core.deployments.elastic_beanstalk import DeploymentConfig, default_version_label
from eb_deploy.core.settings import DeploySettings


def deployment_config_from_cli(
    settings: DeploySettings,
    *,
    app_name: str,
    env_name: str,
    version_label: str | None = None,
    region: str | None = None,
    package: Path | None = None,
    instance_type: str | None = None,
    profile: str | None = None,
    solution_stack: str | None = None,
    vpc_id: str | None = None,
    public_subnet_1: str | None = None,
    public_subnet_2: str | None = None,
    private_subnet_1: str | None = None,
    private_subnet_2: str | None = None,
    clean_all: bool = False,
) -> DeploymentConfig:
    """Merge CLI options over settings defaults.

    Args:
        settings: Defaults loaded from the environment.
        app_name: Application name.
        env_name: Environment name.
        version_label: Version label, timestamped when omitted.
        region: AWS region.
        package: Deployment artifact path.
        instance_type: EC2 instance type.
        profile: AWS named profile.
        solution_stack: Elastic Beanstalk platform solution stack.
        vpc_id: Existing VPC to deploy into.
        public_subnet_1: First public subnet ID.
        public_subnet_2: Second public subnet ID.
        private_subnet_1: First private subnet ID.
        private_subnet_2: Second private subnet ID.
        clean_all: Remove the options document during cleanup.

    Returns:
        The immutable deployment configuration.
    """
    return DeploymentConfig(
        application_name=app_name,
        environment_name=env_name,
        version_label=version_label or default_version_label(),
        region=region or settings.region,
        artifact_path=package or settings.package,
        instance_type=instance_type or settings.instance_type,
        aws_profile=profile or settings.profile,
        solution_stack=solution_stack or settings.solution_stack,
        vpc_id=vpc_id or None,
        public_subnet_1=public_subnet_1 or None,
        public_subnet_2=public_subnet_2 or None,
        private_subnet_1=private_subnet_1 or None,
        private_subnet_2=private_subnet_2 or None,
        clean_all=clean_all,
        service_role_name=settings.service_role_name,
        instance_profile_name=settings.instance_profile_name,
        options_path=settings.options_file,
        poll_interval_seconds=settings.poll_interval_seconds,
        max_poll_attempts=settings.max_poll_attempts,
        role_settle_seconds=settings.role_settle_seconds,
        application_environment=tuple(settings.application_environment.items()),
    )
