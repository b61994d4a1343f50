"""
Replay Data Model
=================

Plain records for the two historical logs the replay consumes:
customer calls and agent activities.
"""

from dataclasses import dataclass
from datetime import datetime


def _whole_seconds(start: datetime | None, end: datetime | None) -> float | None:
    if start is None or end is None:
        return None
    # Truncate toward zero, like a seconds-between on two timestamps
    return float(int((end - start).total_seconds()))


@dataclass
class Call:
    """One customer call from the calls log.

    Attributes:
        arrival: When the call reached the queue.
        service: Name of the queue/service the customer asked for.
        agent_id: Agent who answered, if any.
        answered: When an agent picked up.
        consulted: When the agent started a consultation.
        transferred: When the call was transferred.
        hangup: When the call ended.
    """
    arrival: datetime
    service: str
    agent_id: int | None = None
    answered: datetime | None = None
    consulted: datetime | None = None
    transferred: datetime | None = None
    hangup: datetime | None = None

    @property
    def wait_seconds(self) -> float | None:
        """Seconds between arrival and pickup, or None if never answered."""
        return _whole_seconds(self.arrival, self.answered)

    @property
    def service_seconds(self) -> float | None:
        """Seconds between pickup and hangup, or None if unknown."""
        return _whole_seconds(self.answered, self.hangup)

    @property
    def is_complete(self) -> bool:
        return (
            self.arrival is not None
            and self.answered is not None
            and self.hangup is not None
        )


@dataclass
class AgentActivity:
    """One row of the agent activity log.

    The activity id doubles as the activity-type code the replay engine
    uses to decide whether the agent became available or unavailable.

    Attributes:
        activity_id: Activity-type code.
        agent_id: Agent the activity belongs to.
        start: When the activity began.
        end: When the activity ended.
        user_id: Source-system user id (informational).
        campaign_id: Campaign the agent was logged into (informational).
    """
    activity_id: int
    agent_id: int | None
    start: datetime
    end: datetime | None = None
    user_id: int | None = None
    campaign_id: int | None = None

    @property
    def duration_minutes(self) -> float | None:
        if self.end is None:
            return None
        return (self.end - self.start).total_seconds() / 60.0
