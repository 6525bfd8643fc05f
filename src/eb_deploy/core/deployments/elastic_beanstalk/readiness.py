"""Polling for environment readiness and health."""

import logging
import time
from collections.abc import Callable
from typing import Any

from botocore.exceptions import ClientError

from eb_deploy.core.deployments.elastic_beanstalk.environment import describe_environment
from eb_deploy.core.deployments.elastic_beanstalk.errors import (
    EnvironmentFailedError,
    ProvisioningError,
    ReadinessTimeoutError,
)
from eb_deploy.core.deployments.elastic_beanstalk.models import (
    EnvironmentEvent,
    EnvironmentSnapshot,
    ReadinessState,
    Reporter,
)

logger = logging.getLogger(__name__)

READY_STATUS = "Ready"
FAILED_STATUS = "Failed"
HEALTHY = "Green"
UNHEALTHY = "Red"
RECENT_EVENT_COUNT = 10


def classify_readiness(snapshot: EnvironmentSnapshot) -> ReadinessState:
    """Classify one observation of an environment.

    Health is only meaningful once the status is Ready; a Failed status is
    fatal regardless of health.
    """
    if snapshot.status == FAILED_STATUS:
        return ReadinessState.FAILED
    if snapshot.status != READY_STATUS:
        return ReadinessState.WAITING
    if snapshot.health == HEALTHY:
        return ReadinessState.READY
    if snapshot.health == UNHEALTHY:
        return ReadinessState.FAILED
    return ReadinessState.WAITING


def wait_for_environment(
    session: Any,
    application_name: str,
    environment_name: str,
    reporter: Reporter,
    poll_interval_seconds: float = 20,
    max_attempts: int = 30,
    sleep: Callable[[float], None] = time.sleep,
) -> EnvironmentSnapshot:
    """Poll until the environment is ready and healthy.

    Raises:
        EnvironmentFailedError: The environment failed or is unhealthy.
        ReadinessTimeoutError: No terminal state within ``max_attempts`` polls.
    """
    eb = session.client("elasticbeanstalk")
    reporter.info(f"Waiting for environment '{environment_name}' to reach Ready state...")

    for attempt in range(1, max_attempts + 1):
        try:
            snapshot = describe_environment(eb, application_name, environment_name)
        except ClientError as exc:
            raise ProvisioningError(
                f"Failed to describe environment {environment_name}: {exc}"
            ) from exc

        state = classify_readiness(snapshot)
        if snapshot.status == READY_STATUS:
            reporter.info(f"Environment status: {snapshot.status}, Health: {snapshot.health}")
        else:
            reporter.info(
                f"Environment status: {snapshot.status} (attempt {attempt}/{max_attempts})"
            )

        if state is ReadinessState.READY:
            reporter.success(f"Environment '{environment_name}' is ready and healthy!")
            return snapshot

        if state is ReadinessState.FAILED:
            events = recent_events(eb, application_name, environment_name)
            raise EnvironmentFailedError(
                f"Environment '{environment_name}' deployment failed or is unhealthy "
                f"(status {snapshot.status}, health {snapshot.health}).",
                events,
            )

        if attempt < max_attempts:
            sleep(poll_interval_seconds)

    raise ReadinessTimeoutError(
        f"Timed out waiting for environment '{environment_name}' to become ready "
        f"after {max_attempts} attempts."
    )


def recent_events(
    eb: Any,
    application_name: str,
    environment_name: str,
    max_records: int = RECENT_EVENT_COUNT,
) -> list[EnvironmentEvent]:
    """Fetch the most recent events for an environment."""
    try:
        response = eb.describe_events(
            ApplicationName=application_name,
            EnvironmentName=environment_name,
            MaxRecords=max_records,
        )
    except ClientError as exc:
        logger.warning("Could not fetch events for %s: %s", environment_name, exc)
        return []

    return [
        EnvironmentEvent(
            event_date=str(event.get("EventDate", "")),
            severity=str(event.get("Severity", "")),
            message=str(event.get("Message", "")),
        )
        for event in response.get("Events", [])
    ]


def get_environment_info(
    session: Any,
    application_name: str,
    environment_name: str,
    reporter: Reporter,
) -> EnvironmentSnapshot:
    """Report the endpoint URL of the environment."""
    reporter.info(f"Getting information for environment '{environment_name}'...")
    eb = session.client("elasticbeanstalk")
    try:
        snapshot = describe_environment(eb, application_name, environment_name)
    except ClientError as exc:
        raise ProvisioningError(
            f"Could not retrieve environment information for {environment_name}: {exc}"
        ) from exc

    if snapshot.endpoint_url:
        reporter.success(f"Environment URL: {snapshot.endpoint_url}")
    elif snapshot.cname:
        reporter.success(f"Environment URL: {snapshot.cname}")
    else:
        reporter.warning("Could not determine environment URL.")
    return snapshot
