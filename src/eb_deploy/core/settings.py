"""Runtime settings for eb-deploy."""

from pathlib import Path

from platformdirs import user_config_dir
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from eb_deploy.core.deployments.elastic_beanstalk.errors import ConfigError
from eb_deploy.core.deployments.elastic_beanstalk.models import (
    DEFAULT_SOLUTION_STACK,
    INSTANCE_PROFILE_NAME,
    SERVICE_ROLE_NAME,
)

APP_NAME = "eb-deploy"

# Optional per-user defaults, e.g. ~/.config/eb-deploy/.env on Linux.
ENV_FILE_PATH = str(Path(user_config_dir(APP_NAME)) / ".env")


class DeploySettings(BaseSettings):
    """Defaults for a deployment, overridable from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="EB_DEPLOY_",
        env_file=ENV_FILE_PATH,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    region: str = Field(default="us-east-1", description="AWS region")
    profile: str | None = Field(default=None, description="AWS named profile")
    instance_type: str = Field(default="t3.small", description="EC2 instance type")
    solution_stack: str = Field(
        default=DEFAULT_SOLUTION_STACK,
        description="Elastic Beanstalk platform solution stack",
    )
    package: Path = Field(default=Path("python.zip"), description="Deployment artifact")
    options_file: Path = Field(
        default=Path("options.json"),
        description="Where the generated option settings document is written",
    )
    service_role_name: str = Field(default=SERVICE_ROLE_NAME)
    instance_profile_name: str = Field(default=INSTANCE_PROFILE_NAME)

    # Readiness polling: 30 attempts at 20s is roughly ten minutes.
    poll_interval_seconds: float = Field(default=20, gt=0)
    max_poll_attempts: int = Field(default=30, gt=0)
    role_settle_seconds: float = Field(default=10, ge=0)

    application_environment: dict[str, str] = Field(
        default_factory=lambda: {"ENVIRONMENT": "production", "LOG_LEVEL": "info"},
        description="Variables exposed to the application",
    )

    @field_validator("application_environment")
    @classmethod
    def check_variable_names(cls, value: dict[str, str]) -> dict[str, str]:
        """Reject blank variable names. Empty values are allowed."""
        blank = [name for name in value if not name.strip()]
        if blank:
            raise ValueError("application environment variable names must not be blank")
        return value


def get_settings() -> DeploySettings:
    """Load deployment defaults from the environment and the user env file.

    Raises:
        ConfigError: When a value fails validation.
    """
    try:
        return DeploySettings()
    except (ValidationError, SettingsError) as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc
