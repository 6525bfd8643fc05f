"""Deployment error rendering for the CLI."""

from collections.abc import Iterator
from enum import Enum

from botocore.exceptions import (
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    NoRegionError,
    ProfileNotFound,
)
from rich.markup import escape
from rich.table import Table

from eb_deploy.cli.ui import console
from eb_deploy.core.deployments.elastic_beanstalk import (
    ConfigError,
    EnvironmentEvent,
    EnvironmentFailedError,
    ReadinessTimeoutError,
)
from eb_deploy.core.deployments.elastic_beanstalk.session import error_code
from eb_deploy.core.settings import ENV_FILE_PATH

AUTH_ERROR_CODES = {
    "ExpiredToken",
    "ExpiredTokenException",
    # spellchecker:ignore-next-line
    "UnrecognizedClientException",
    "InvalidClientTokenId",
    "InvalidSignatureException",
    "AccessDenied",
    "AccessDeniedException",
}


class FailureKind(Enum):
    """What went wrong, as far as the user can act on it."""

    AUTH = "auth"
    ENDPOINT = "endpoint"
    REGION = "region"
    CONFIG = "config"
    TIMEOUT = "timeout"
    OTHER = "other"


HEADLINES = {
    FailureKind.AUTH: (
        "AWS authentication failed. Your credentials are missing, "
        "invalid, expired, or lack permission for this action."
    ),
    FailureKind.ENDPOINT: "Could not reach AWS endpoint from this environment.",
    FailureKind.REGION: "No AWS region configured. Pass --region.",
}

HINTS = {
    FailureKind.AUTH: (
        "If using an AWS profile/SSO, run: aws sso login --profile <profile>. "
        "If using temporary keys, refresh AWS_SESSION_TOKEN and retry."
    ),
    FailureKind.ENDPOINT: "Check network connectivity and the --region value.",
    FailureKind.CONFIG: f"Check the EB_DEPLOY_* environment variables and {ENV_FILE_PATH}.",
    FailureKind.TIMEOUT: (
        "The environment may still finish updating. "
        "Check it in the Elastic Beanstalk console."
    ),
}


def report_deploy_error(exc: BaseException) -> None:
    """Render deployment errors with actionable guidance.

    Args:
        exc: Raised exception from a deployment step.
    """
    chain = list(exception_chain(exc))
    kind = classify_failure(chain)

    console.print(f"[red]\\[ERROR] {escape(HEADLINES.get(kind, str(exc)))}[/red]")
    if kind is FailureKind.AUTH:
        console.print(f"[dim]{escape(str(exc))}[/dim]")
    if kind in HINTS:
        console.print(f"[dim]{escape(HINTS[kind])}[/dim]")

    events = next(
        (item.events for item in chain if isinstance(item, EnvironmentFailedError)),
        [],
    )
    if events:
        print_events(events)


def classify_failure(chain: list[BaseException]) -> FailureKind:
    """Pick the most actionable failure kind in an exception chain.

    Args:
        chain: Exceptions from the raised error down to its root cause.

    Returns:
        The failure kind. Credential problems win over everything else.
    """
    if any(_is_auth_failure(item) for item in chain):
        return FailureKind.AUTH
    if any(isinstance(item, EndpointConnectionError) for item in chain):
        return FailureKind.ENDPOINT
    if any(isinstance(item, NoRegionError) for item in chain):
        return FailureKind.REGION
    if isinstance(chain[0], ConfigError):
        return FailureKind.CONFIG
    if isinstance(chain[0], ReadinessTimeoutError):
        return FailureKind.TIMEOUT
    return FailureKind.OTHER


def _is_auth_failure(exc: BaseException) -> bool:
    """Return true for missing, expired or rejected credentials."""
    if isinstance(exc, (NoCredentialsError, ProfileNotFound)):
        return True
    if isinstance(exc, ClientError) and error_code(exc) in AUTH_ERROR_CODES:
        return True
    return "security token included in the request is expired" in str(exc).lower()


def exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield an exception followed by its causes, stopping at cycles."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def print_events(events: list[EnvironmentEvent]) -> None:
    """Print recent environment events as a table.

    Args:
        events: Events to display, newest first.
    """
    table = Table(title="Recent environment events", show_header=True, header_style="bold cyan")
    table.add_column("Time", style="white", no_wrap=True)
    table.add_column("Severity", style="white", no_wrap=True)
    table.add_column("Message", style="bright_white")

    for event in events:
        severity_style = "red" if event.severity in {"ERROR", "FATAL"} else "white"
        table.add_row(
            event.event_date,
            f"[{severity_style}]{escape(event.severity)}[/{severity_style}]",
            escape(event.message),
        )

    console.print(table)
