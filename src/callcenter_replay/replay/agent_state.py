"""Per-agent availability windows rebuilt during replay."""

from datetime import datetime


class AgentAvailability:
    """Tracks whether one agent could take a call at a given moment.

    Three thresholds gate availability; each starts at ``datetime.min``
    (no restriction). An agent is available at ``t`` only when ``t`` is at
    or past all three.

    Updates overwrite rather than merge: the most recently applied fact
    wins even if it moves a threshold back in time.
    """

    def __init__(self, services: set[str] | frozenset[str]) -> None:
        """Initialize the agent.

        Args:
            services: Service names the agent has answered historically.
        """
        self.services = frozenset(services)
        self.available_after: datetime = datetime.min
        self.unavailable_before: datetime = datetime.min
        self.busy_until: datetime = datetime.min

    def accepts_service(self, name: str) -> bool:
        return name in self.services

    def is_available(self, t: datetime) -> bool:
        return (
            t >= self.available_after
            and t >= self.unavailable_before
            and t >= self.busy_until
        )

    def mark_available_after(self, t: datetime) -> None:
        self.available_after = t

    def mark_unavailable_before(self, t: datetime) -> None:
        self.unavailable_before = t

    def mark_busy_until(self, t: datetime) -> None:
        self.busy_until = t

    def __repr__(self) -> str:
        return (
            f"AgentAvailability(services={sorted(self.services)}, "
            f"available_after={self.available_after}, "
            f"unavailable_before={self.unavailable_before}, "
            f"busy_until={self.busy_until})"
        )
