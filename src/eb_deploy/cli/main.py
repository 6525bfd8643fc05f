"""CLI entrypoint for eb-deploy."""

import signal
from pathlib import Path
from types import FrameType

import click
from botocore.exceptions import BotoCoreError, ClientError

from eb_deploy.cli.config import deployment_config_from_cli
from eb_deploy.cli.errors import report_deploy_error
from eb_deploy.cli.reporting import ConsoleReporter, configure_logging
from eb_deploy.core.deployments.elastic_beanstalk import (
    DeploymentConfig,
    DeploymentError,
    DeploymentWorkspace,
    Reporter,
    deploy_application,
)
from eb_deploy.core.settings import get_settings

EXAMPLES = """\b
Examples:
  eb-deploy -a MyApp -e MyEnv -v v1.0.0 -r us-west-2 -p app.zip
  eb-deploy -a MyApp -e MyEnv --vpc-id vpc-12345 \\
      --public-subnet-1 subnet-abc --public-subnet-2 subnet-def
"""


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EXAMPLES,
)
@click.option("-a", "--app-name", help="Application name (required).")
@click.option("-e", "--env-name", help="Environment name (required).")
@click.option("-v", "--version-label", help="Version label (default: timestamped).")
@click.option("-r", "--region", help="AWS region (default: us-east-1).")
@click.option(
    "-p",
    "--package",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Deployment package file (default: python.zip).",
)
@click.option("-t", "--instance-type", help="EC2 instance type (default: t3.small).")
@click.option("--vpc-id", help="VPC ID for deployment.")
@click.option("--public-subnet-1", help="Public subnet 1 ID.")
@click.option("--public-subnet-2", help="Public subnet 2 ID.")
@click.option("--private-subnet-1", help="Private subnet 1 ID.")
@click.option("--private-subnet-2", help="Private subnet 2 ID.")
@click.option("--clean-all", is_flag=True, help="Remove all generated files during cleanup.")
@click.option("--profile", help="AWS named profile to use.")
@click.option("--solution-stack", help="Elastic Beanstalk solution stack name.")
@click.option("--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    app_name: str | None,
    env_name: str | None,
    version_label: str | None,
    region: str | None,
    package: Path | None,
    instance_type: str | None,
    vpc_id: str | None,
    public_subnet_1: str | None,
    public_subnet_2: str | None,
    private_subnet_1: str | None,
    private_subnet_2: str | None,
    clean_all: bool,
    profile: str | None,
    solution_stack: str | None,
    verbose: bool,
) -> None:
    """Deploy an application to AWS Elastic Beanstalk.

    Args:
        ctx: Click context for the command invocation.
        app_name: Application name.
        env_name: Environment name.
        version_label: Version label for the new application version.
        region: AWS region.
        package: Deployment artifact path.
        instance_type: EC2 instance type.
        vpc_id: Existing VPC to deploy into.
        public_subnet_1: First public subnet ID.
        public_subnet_2: Second public subnet ID.
        private_subnet_1: First private subnet ID.
        private_subnet_2: Second private subnet ID.
        clean_all: Remove the options document during cleanup.
        profile: AWS named profile.
        solution_stack: Elastic Beanstalk platform solution stack.
        verbose: Enable debug logging.
    """
    configure_logging(verbose)
    reporter = ConsoleReporter()

    if not app_name or not env_name:
        reporter.error("Application name (-a) and environment name (-e) are required!")
        click.echo(ctx.get_help())
        ctx.exit(1)

    try:
        settings = get_settings()
    except DeploymentError as exc:
        report_deploy_error(exc)
        ctx.exit(1)

    config = deployment_config_from_cli(
        settings,
        app_name=app_name,
        env_name=env_name,
        version_label=version_label,
        region=region,
        package=package,
        instance_type=instance_type,
        profile=profile,
        solution_stack=solution_stack,
        vpc_id=vpc_id,
        public_subnet_1=public_subnet_1,
        public_subnet_2=public_subnet_2,
        private_subnet_1=private_subnet_1,
        private_subnet_2=private_subnet_2,
        clean_all=clean_all,
    )

    exit_code = run_deployment(config, reporter)
    if exit_code:
        ctx.exit(exit_code)


def run_deployment(config: DeploymentConfig, reporter: Reporter) -> int:
    """Run a deployment and always clean up local files.

    Args:
        config: Deployment configuration.
        reporter: Progress reporter.

    Returns:
        The process exit code.
    """
    reporter.info("Starting Elastic Beanstalk deployment")
    print_parameters(config, reporter)

    workspace = DeploymentWorkspace(config.options_path, clean_all=config.clean_all)
    previous_handler = signal.signal(signal.SIGTERM, _raise_interrupt)
    exit_code = 1
    try:
        result = deploy_application(config, workspace, reporter)
    except KeyboardInterrupt:
        reporter.error("Deployment interrupted. Cleaning up...")
    except (DeploymentError, BotoCoreError, ClientError) as exc:
        report_deploy_error(exc)
    else:
        exit_code = 0
        reporter.success("Deployment completed successfully!")
        reporter.info(
            f"Your application '{config.application_name}' has been deployed to "
            f"environment '{config.environment_name}' ({result.action.value})"
        )
    finally:
        signal.signal(signal.SIGTERM, previous_handler)
        cleanup(workspace, reporter, exit_code)

    return exit_code


def cleanup(workspace: DeploymentWorkspace, reporter: Reporter, exit_code: int) -> None:
    """Remove local files generated during the run.

    Args:
        workspace: Workspace tracking generated files.
        reporter: Progress reporter.
        exit_code: Exit code the run is about to finish with.
    """
    reporter.info("Performing cleanup operations...")
    for path in workspace.cleanup():
        reporter.info(f"Removed {path}")
    reporter.info("Cleanup completed.")
    if exit_code != 0:
        reporter.error(f"Deployment failed with exit code {exit_code}")


def print_parameters(config: DeploymentConfig, reporter: Reporter) -> None:
    """Print the deployment parameters.

    Args:
        config: Deployment configuration.
        reporter: Progress reporter.
    """
    reporter.info("Deploying with the following parameters:")
    reporter.info(f"  Application Name: {config.application_name}")
    reporter.info(f"  Environment Name: {config.environment_name}")
    reporter.info(f"  Version Label: {config.version_label}")
    reporter.info(f"  AWS Region: {config.region}")
    reporter.info(f"  Deployment Package: {config.artifact_path}")
    reporter.info(f"  Instance Type: {config.instance_type}")
    if config.vpc_id:
        reporter.info(f"  VPC Configuration: {config.vpc_id}")
        reporter.info(f"  Public Subnets: {config.public_subnet_1}, {config.public_subnet_2}")
        reporter.info(f"  Private Subnets: {config.private_subnet_1}, {config.private_subnet_2}")
    else:
        reporter.info("  Network: Default VPC")


def _raise_interrupt(signum: int, frame: FrameType | None) -> None:
    """Turn SIGTERM into KeyboardInterrupt so cleanup runs."""
    raise KeyboardInterrupt


def main() -> None:
    """Run the CLI."""
    cli()
