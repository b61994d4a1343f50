"""
System Snapshot
===============

Point-in-time state captured just before a call is matched to its outcome,
and its encoding as a fixed-width feature vector.

Feature layout (13 columns, stable order):
    service one-hot x5 | principal_queue | aux_queue_1 | aux_queue_2 |
    arrival_hour | day_of_week | free_agents | les | avg_les
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

import numpy as np

SERVICE_SLOTS = 5
ENCODED_AUX_QUEUES = 2

STATE_COLUMNS = [
    "principal_queue",
    "aux_queue_1",
    "aux_queue_2",
    "arrival_hour",
    "day_of_week",
    "free_agents",
    "les",
    "avg_les",
]


def feature_columns(services: Sequence[str]) -> list[str]:
    """Column names matching ``SystemSnapshot.to_feature_vector``.

    Args:
        services: Configured service names, in configured order.

    Returns:
        One ``service_<name>`` column per one-hot slot (``service_slot_<k>``
        for slots with no configured service), then the state columns.
    """
    slots = [f"service_{name}" for name in list(services)[:SERVICE_SLOTS]]
    for k in range(len(slots) + 1, SERVICE_SLOTS + 1):
        slots.append(f"service_slot_{k}")
    return slots + STATE_COLUMNS


@dataclass
class SystemSnapshot:
    """State of the call center as seen by one arriving call.

    Attributes:
        service: Service the call asked for.
        principal_queue: Calls waiting in that service's queue.
        aux_queues: Queue lengths of the other configured services,
            always exactly five entries.
        timestamp: Moment the state was captured.
        free_agents: Compatible available agents, floored at 1.
        observed_wait: Real wait in seconds, or -1 when unknown.
        les: LES baseline estimate in seconds.
        avg_les: Avg-LES baseline estimate in seconds.
        services: Configured services, used for the one-hot encoding.
    """
    service: str
    principal_queue: int
    aux_queues: tuple[int, ...]
    timestamp: datetime
    free_agents: int
    observed_wait: float = -1.0
    les: float = 0.0
    avg_les: float = 0.0
    services: tuple[str, ...] = field(default_factory=tuple)

    def attach_observed_wait(self, seconds: float) -> None:
        self.observed_wait = seconds

    @property
    def has_observed_wait(self) -> bool:
        return self.observed_wait >= 0

    def to_feature_vector(self) -> np.ndarray:
        """Encode the snapshot in the ``feature_columns`` order."""
        one_hot = [0.0] * SERVICE_SLOTS
        for slot, name in enumerate(self.services[:SERVICE_SLOTS]):
            if name == self.service:
                one_hot[slot] = 1.0

        aux = list(self.aux_queues[:ENCODED_AUX_QUEUES])
        aux += [0] * (ENCODED_AUX_QUEUES - len(aux))

        return np.array(
            one_hot
            + [float(self.principal_queue)]
            + [float(a) for a in aux]
            + [
                float(self.timestamp.hour),
                float(self.timestamp.isoweekday()),
                float(self.free_agents),
                self.les,
                self.avg_les,
            ],
            dtype=float,
        )

    def column_names(self) -> list[str]:
        return feature_columns(self.services)

    def __str__(self):
        return (
            f"[{self.timestamp}] {self.service} | "
            f"Queue: {self.principal_queue} | "
            f"Free agents: {self.free_agents} | "
            f"LES: {self.les:.1f}s | "
            f"Avg-LES: {self.avg_les:.1f}s | "
            f"Observed: {self.observed_wait:.1f}s"
        )
