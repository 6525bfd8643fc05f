"""Local deployment artifact checks."""

from pathlib import Path

from eb_deploy.core.deployments.elastic_beanstalk.errors import ArtifactError
from eb_deploy.core.deployments.elastic_beanstalk.models import Reporter


def validate_artifact(path: Path, reporter: Reporter) -> int:
    """Ensure the artifact exists and is non-empty, returning its size in bytes."""
    reporter.info(f"Validating deployment package '{path}'...")

    if not path.is_file():
        raise ArtifactError(
            f"Deployment package '{path}' not found! "
            "Make sure the deployment package exists at the given path."
        )

    size = path.stat().st_size
    if size == 0:
        raise ArtifactError(f"Deployment package '{path}' is empty!")

    reporter.success("Deployment package validation successful.")
    return size
