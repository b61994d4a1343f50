"""
Replay Engine
=============

Rebuilds queue and agent state from historical logs, one call at a time,
and captures a SystemSnapshot just before each call is answered.

Per-call protocol (calls in ascending arrival order):
    snapshot = engine.capture_state(call, call.arrival)
    engine.record_outcome(call)

capture_state:
    advance activity cursor to `now` -> purge answered calls ->
    read queue lengths -> count compatible free agents -> baselines
record_outcome:
    enqueue call -> mark agent busy until hangup -> update histories
"""

import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from .agent_state import AgentAvailability
from .baselines import avg_les_estimate, les_estimate
from .history import BoundedHistory
from .models import AgentActivity, Call
from .snapshot import SystemSnapshot

logger = logging.getLogger(__name__)


@dataclass
class ReplayConfig:
    """Tunable constants of the replay.

    Attributes:
        default_service_seconds: Mean service time assumed before any
            call of a service has been answered.
        default_wait_seconds: Mean wait assumed before any history exists.
        history_capacity: Samples kept per service and per history.
        auxiliary_queue_count: Width of the auxiliary queue array.
        load_factor: Weight of the queue-per-agent load in Avg-LES.
        unknown_wait: Observed-wait value for calls never answered.
        available_codes: Activity codes after which the agent is available.
        unavailable_codes: Activity codes during which the agent is away.
    """
    default_service_seconds: float = 180.0
    default_wait_seconds: float = 60.0
    history_capacity: int = 200
    auxiliary_queue_count: int = 5
    load_factor: float = 0.1
    unknown_wait: float = -1.0
    available_codes: frozenset[int] = field(
        default_factory=lambda: frozenset({3, 16})
    )
    unavailable_codes: frozenset[int] = field(
        default_factory=lambda: frozenset(
            {2, 7, 8, 35, 39, 40, 41, 42, 43, 44, 61, 71}
        )
    )


class ReplayEngine:
    """Chronological replay of a call center's queues and agents.

    Owns all mutable state: per-service pending queues, per-agent
    availability, bounded wait/service histories and a cursor into the
    time-sorted activity log. The cursor only moves forward, so each
    activity is applied exactly once.

    Example:
        >>> engine = ReplayEngine(["A", "B"], calls, activities)
        >>> for call in calls:
        ...     snapshot = engine.capture_state(call, call.arrival)
        ...     engine.record_outcome(call)
    """

    def __init__(
        self,
        services: Sequence[str],
        calls: Sequence[Call],
        activities: Sequence[AgentActivity],
        config: ReplayConfig | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            services: Configured service names, in the order used for
                auxiliary queues and one-hot encoding.
            calls: Every historical call; used to derive which services
                each agent can answer.
            activities: Agent activities; sorted here once by start time.
            config: Replay constants; defaults to ReplayConfig().
        """
        self.config = config or ReplayConfig()
        self.services: tuple[str, ...] = tuple(services)

        self._queues: dict[str, deque[Call]] = {s: deque() for s in self.services}
        self._wait_history: dict[str, BoundedHistory] = {}
        self._service_history: dict[str, BoundedHistory] = {}
        for s in self.services:
            self._wait_history[s] = BoundedHistory(self.config.history_capacity)
            self._service_history[s] = BoundedHistory(self.config.history_capacity)

        self._activities: list[AgentActivity] = sorted(activities, key=lambda a: a.start)
        self._cursor = 0

        self.agents: dict[int, AgentAvailability] = self._build_agents(calls)
        logger.info(f"Agents initialised: {len(self.agents)}")

    def _build_agents(self, calls: Sequence[Call]) -> dict[int, AgentAvailability]:
        capabilities: dict[int, set[str]] = {}
        for call in calls:
            if call.agent_id is None:
                continue
            capabilities.setdefault(call.agent_id, set()).add(call.service)
        return {
            agent_id: AgentAvailability(services)
            for agent_id, services in capabilities.items()
        }

    # ------------------------------------------------------------------
    # State advancement
    # ------------------------------------------------------------------

    @property
    def activity_cursor(self) -> int:
        """Number of activities already applied."""
        return self._cursor

    def advance_to(self, now: datetime) -> int:
        """Apply every pending activity that started at or before ``now``.

        Returns:
            How many activities were applied by this call.
        """
        applied = 0
        while (
            self._cursor < len(self._activities)
            and self._activities[self._cursor].start <= now
        ):
            self._apply_activity(self._activities[self._cursor])
            self._cursor += 1
            applied += 1
        return applied

    def _apply_activity(self, activity: AgentActivity) -> None:
        agent = self.agents.get(activity.agent_id)
        if agent is None or activity.end is None:
            return

        # Codes in neither set leave the agent untouched
        if activity.activity_id in self.config.available_codes:
            agent.mark_available_after(activity.end)
        elif activity.activity_id in self.config.unavailable_codes:
            agent.mark_unavailable_before(activity.end)
        else:
            return
        logger.debug(
            f"Activity {activity.activity_id} applied to agent "
            f"{activity.agent_id} (ends {activity.end})"
        )

    def _purge_answered(self, now: datetime) -> None:
        for service, queue in self._queues.items():
            if not queue:
                continue
            self._queues[service] = deque(
                call for call in queue
                if call.answered is None or call.answered >= now
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def queue_length(self, service: str) -> int:
        queue = self._queues.get(service)
        return len(queue) if queue is not None else 0

    def auxiliary_queue_lengths(self, service: str) -> tuple[int, ...]:
        """Lengths of the other configured queues, padded/truncated to size."""
        size = self.config.auxiliary_queue_count
        lengths = [self.queue_length(s) for s in self.services if s != service]
        lengths = lengths[:size]
        lengths += [0] * (size - len(lengths))
        return tuple(lengths)

    def compatible_free_agents(self, service: str, now: datetime) -> int:
        """Agents able to answer ``service`` and available at ``now``."""
        return sum(
            1
            for agent in self.agents.values()
            if agent.accepts_service(service) and agent.is_available(now)
        )

    def wait_history(self, service: str) -> BoundedHistory:
        history = self._wait_history.get(service)
        if history is None:
            return BoundedHistory(self.config.history_capacity)
        return history

    def service_history(self, service: str) -> BoundedHistory:
        history = self._service_history.get(service)
        if history is None:
            return BoundedHistory(self.config.history_capacity)
        return history

    # ------------------------------------------------------------------
    # Per-call API
    # ------------------------------------------------------------------

    def capture_state(self, call: Call, now: datetime) -> SystemSnapshot:
        """Snapshot the system as it stood for ``call`` at ``now``.

        Does not enqueue the call; that happens in record_outcome.

        Args:
            call: The arriving call.
            now: Evaluation time, normally the call's arrival.

        Returns:
            SystemSnapshot with queue lengths, free agents, observed wait
            and both baseline estimates.
        """
        service = call.service

        self.advance_to(now)
        self._purge_answered(now)

        principal = self.queue_length(service)
        auxiliary = self.auxiliary_queue_lengths(service)
        free_agents = max(1, self.compatible_free_agents(service, now))

        observed = call.wait_seconds
        if observed is None:
            observed = self.config.unknown_wait

        avg_service = self.service_history(service).mean(
            self.config.default_service_seconds
        )
        avg_wait = self.wait_history(service).mean(self.config.default_wait_seconds)

        return SystemSnapshot(
            service=service,
            principal_queue=principal,
            aux_queues=auxiliary,
            timestamp=now,
            free_agents=free_agents,
            observed_wait=observed,
            les=les_estimate(principal, avg_service, free_agents),
            avg_les=avg_les_estimate(
                principal, avg_wait, free_agents, self.config.load_factor
            ),
            services=self.services,
        )

    def record_outcome(self, call: Call) -> None:
        """Fold a call's real outcome back into the engine state.

        The call is queued even if already answered; the next capture
        purges it once its pickup time has passed.
        """
        service = call.service
        self._queues.setdefault(service, deque()).append(call)

        if call.agent_id is None or call.answered is None:
            return

        agent = self.agents.get(call.agent_id)
        if agent is not None and call.hangup is not None:
            agent.mark_busy_until(call.hangup)

        wait = call.wait_seconds
        if wait is not None:
            self._wait_history.setdefault(
                service, BoundedHistory(self.config.history_capacity)
            ).append(wait)

        handled = call.service_seconds
        if handled is not None:
            self._service_history.setdefault(
                service, BoundedHistory(self.config.history_capacity)
            ).append(handled)
