"""
Baseline Wait-Time Predictors
=============================

Two queueing heuristics computed for every snapshot. They are the yardstick
a learned wait-time model has to beat.

Mathematical Context:
    LES (single-server queue position):
        q == 0  ->  avg_service / agents
        q  > 0  ->  ((q + 1) / 2) * avg_service / agents
    Avg-LES (recent waits scaled by load):
        avg_wait * (1 + (q / agents) * load_factor)

``agents`` is always the compatible free-agent count floored at 1.
"""


def les_estimate(queue_length: int, avg_service: float, free_agents: int) -> float:
    """Expected wait from the caller's position in the queue.

    Args:
        queue_length: Calls already waiting in the caller's service.
        avg_service: Mean recent service duration in seconds.
        free_agents: Compatible available agents (floored at 1).

    Returns:
        Estimated wait in seconds.
    """
    agents = max(1, free_agents)
    if queue_length == 0:
        return avg_service / agents
    position = (queue_length + 1) / 2.0
    return position * avg_service / agents


def avg_les_estimate(
    queue_length: int,
    avg_wait: float,
    free_agents: int,
    load_factor: float = 0.1,
) -> float:
    """Recent mean wait inflated by the queue-per-agent load."""
    agents = max(1, free_agents)
    load = queue_length / agents
    return avg_wait * (1 + load * load_factor)
