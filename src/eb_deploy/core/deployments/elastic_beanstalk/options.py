"""Typed option settings for Elastic Beanstalk environments."""

from dataclasses import dataclass

from eb_deploy.core.deployments.elastic_beanstalk.errors import ConfigError
from eb_deploy.core.deployments.elastic_beanstalk.models import DeploymentConfig, NetworkTopology

NAMESPACE_ENVIRONMENT = "aws:elasticbeanstalk:environment"
NAMESPACE_LAUNCH = "aws:autoscaling:launchconfiguration"
NAMESPACE_APP_ENVIRONMENT = "aws:elasticbeanstalk:application:environment"
NAMESPACE_VPC = "aws:ec2:vpc"


@dataclass(frozen=True)
class OptionSetting:
    """A single (namespace, option name, value) entry."""

    namespace: str
    option_name: str
    value: str

    def to_api(self) -> dict[str, str]:
        """Return the shape expected by the Elastic Beanstalk API."""
        return {
            "Namespace": self.namespace,
            "OptionName": self.option_name,
            "Value": self.value,
        }


class OptionSettingsBuilder:
    """Accumulates option settings in order, rejecting invalid or duplicate entries."""

    def __init__(self) -> None:
        self._settings: list[OptionSetting] = []

    def add(
        self,
        namespace: str,
        option_name: str,
        value: str,
        allow_empty: bool = False,
    ) -> "OptionSettingsBuilder":
        """Append a setting.

        Application environment variables may be empty; platform options may not.
        """
        if not namespace or not option_name:
            raise ValueError("Option settings need both a namespace and an option name.")
        if not value and not allow_empty:
            raise ValueError(f"Option {namespace}/{option_name} has an empty value.")
        if any(
            setting.namespace == namespace and setting.option_name == option_name
            for setting in self._settings
        ):
            raise ValueError(f"Option {namespace}/{option_name} is already set.")
        self._settings.append(OptionSetting(namespace, option_name, value))
        return self

    def build(self) -> tuple[OptionSetting, ...]:
        """Return the accumulated settings."""
        return tuple(self._settings)


def build_option_settings(
    config: DeploymentConfig,
    network: NetworkTopology | None,
) -> tuple[OptionSetting, ...]:
    """Build the environment option settings.

    Network settings are only included when ``network`` is given, which the
    caller does only for a brand-new environment.

    Raises:
        ConfigError: When the configuration yields an invalid setting.
    """
    try:
        return _build(config, network)
    except ValueError as exc:
        raise ConfigError(f"Invalid environment option settings: {exc}") from exc


def _build(config: DeploymentConfig, network: NetworkTopology | None) -> tuple[OptionSetting, ...]:
    builder = (
        OptionSettingsBuilder()
        .add(NAMESPACE_ENVIRONMENT, "ServiceRole", config.service_role_name)
        .add(NAMESPACE_LAUNCH, "IamInstanceProfile", config.instance_profile_name)
        .add(NAMESPACE_LAUNCH, "InstanceType", config.instance_type)
        .add(NAMESPACE_ENVIRONMENT, "EnvironmentType", "LoadBalanced")
        .add(NAMESPACE_ENVIRONMENT, "LoadBalancerType", "application")
    )
    for name, value in config.application_environment:
        builder.add(NAMESPACE_APP_ENVIRONMENT, name, value, allow_empty=True)

    if network is not None:
        subnets = ",".join(network.public_subnet_ids)
        builder.add(NAMESPACE_VPC, "VPCId", network.vpc_id)
        builder.add(NAMESPACE_VPC, "Subnets", subnets)
        builder.add(NAMESPACE_VPC, "ELBSubnets", subnets)
        builder.add(NAMESPACE_VPC, "AssociatePublicIpAddress", "true")
        if config.private_subnet_ids:
            builder.add(NAMESPACE_VPC, "DBSubnets", ",".join(config.private_subnet_ids))

    return builder.build()


def to_api(settings: tuple[OptionSetting, ...]) -> list[dict[str, str]]:
    """Serialize settings for a provider call."""
    return [setting.to_api() for setting in settings]
