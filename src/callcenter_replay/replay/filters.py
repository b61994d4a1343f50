"""
Replay Filters
==============

Selects which calls and activities enter the replay, and which captured
snapshots are kept as training samples.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import time

from .models import AgentActivity, Call
from .snapshot import SystemSnapshot

logger = logging.getLogger(__name__)


@dataclass
class FilterConfig:
    """Business rules for data preparation.

    Attributes:
        open_time: First moment of the business day (inclusive).
        close_time: Last moment of the business day (inclusive).
        open_weekdays: Open days, 0=Mon ... 6=Sun.
        min_service_calls: Complete calls a service needs to be kept.
        max_services: How many of the busiest services to keep.
        max_wait_seconds: Samples must wait strictly less than this.
        max_queue_length: Samples must see a queue strictly shorter than this.
    """
    open_time: time = time(8, 0)
    close_time: time = time(20, 0)
    open_weekdays: frozenset[int] = frozenset({0, 1, 2, 3, 4})
    min_service_calls: int = 200
    max_services: int = 5
    max_wait_seconds: float = 7200.0
    max_queue_length: int = 500


def within_business_hours(calls: Iterable[Call], config: FilterConfig) -> list[Call]:
    """Keep calls that arrived on an open weekday during opening hours."""
    kept = [
        call for call in calls
        if call.arrival is not None
        and call.arrival.weekday() in config.open_weekdays
        and config.open_time <= call.arrival.time() <= config.close_time
    ]
    logger.info(f"Calls within business hours: {len(kept)}")
    return kept


def select_principal_services(calls: Iterable[Call], config: FilterConfig) -> list[str]:
    """Busiest services by number of complete calls.

    Args:
        calls: Candidate calls.
        config: Provides the volume threshold and the number to keep.

    Returns:
        Service names ordered by descending complete-call volume.
    """
    volumes = Counter(
        call.service for call in calls
        if call.service is not None and call.is_complete
    )
    eligible = [
        (service, count) for service, count in volumes.items()
        if count >= config.min_service_calls
    ]
    eligible.sort(key=lambda item: item[1], reverse=True)
    services = [service for service, _ in eligible[: config.max_services]]
    logger.info(f"Principal services retained: {services}")
    return services


def replay_calls(calls: Iterable[Call], services: Iterable[str]) -> list[Call]:
    """Complete calls of the retained services, sorted by arrival."""
    wanted = set(services)
    kept = [call for call in calls if call.service in wanted and call.is_complete]
    kept.sort(key=lambda call: call.arrival)
    return kept


def replay_activities(activities: Iterable[AgentActivity]) -> list[AgentActivity]:
    """Activities with both a start and an end, sorted by start."""
    kept = [a for a in activities if a.start is not None and a.end is not None]
    kept.sort(key=lambda a: a.start)
    return kept


def is_valid_sample(snapshot: SystemSnapshot, config: FilterConfig) -> bool:
    return (
        0 <= snapshot.observed_wait < config.max_wait_seconds
        and snapshot.principal_queue < config.max_queue_length
        and snapshot.free_agents > 0
    )
