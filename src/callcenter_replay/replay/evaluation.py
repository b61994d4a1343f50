"""
Baseline Evaluation
===================

Measures how well the LES and Avg-LES heuristics predict the observed
wait on the replayed samples.

    RMSE  = sqrt(mean((observed - predicted)^2))
    RRMSE = RMSE / mean(observed)
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from sklearn.metrics import mean_squared_error

from .snapshot import SystemSnapshot


@dataclass
class BaselineReport:
    """Accuracy of the baseline predictors over a set of samples.

    Attributes:
        sample_count: Number of samples evaluated.
        mean_wait: Mean observed wait in seconds.
        mean_queue: Mean principal queue length.
        les_rmse: RMSE of LES in seconds.
        les_rrmse: LES RMSE relative to the mean wait.
        avg_les_rmse: RMSE of Avg-LES in seconds.
        avg_les_rrmse: Avg-LES RMSE relative to the mean wait.
    """
    sample_count: int
    mean_wait: float
    mean_queue: float
    les_rmse: float
    les_rrmse: float
    avg_les_rmse: float
    avg_les_rrmse: float

    def __str__(self):
        return (
            f"Samples: {self.sample_count} | "
            f"Mean wait: {self.mean_wait:.1f}s | "
            f"Mean queue: {self.mean_queue:.1f} | "
            f"LES RMSE: {self.les_rmse:.2f}s (RRMSE {self.les_rrmse:.3f}) | "
            f"Avg-LES RMSE: {self.avg_les_rmse:.2f}s (RRMSE {self.avg_les_rrmse:.3f})"
        )


def _rmse(observed: np.ndarray, predicted: np.ndarray) -> float:
    return float(np.sqrt(mean_squared_error(observed, predicted)))


def evaluate_baselines(snapshots: Sequence[SystemSnapshot]) -> BaselineReport:
    """Score LES and Avg-LES against the observed waits.

    Args:
        snapshots: Samples with a known observed wait.

    Returns:
        BaselineReport; all figures are zero when there are no samples.
    """
    if not snapshots:
        return BaselineReport(0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    observed = np.array([s.observed_wait for s in snapshots], dtype=float)
    les = np.array([s.les for s in snapshots], dtype=float)
    avg_les = np.array([s.avg_les for s in snapshots], dtype=float)
    queues = np.array([s.principal_queue for s in snapshots], dtype=float)

    mean_wait = float(observed.mean())
    # Avoid dividing by a zero mean wait
    scale = mean_wait if mean_wait > 0 else 1.0

    les_rmse = _rmse(observed, les)
    avg_les_rmse = _rmse(observed, avg_les)

    return BaselineReport(
        sample_count=len(snapshots),
        mean_wait=mean_wait,
        mean_queue=float(queues.mean()),
        les_rmse=les_rmse,
        les_rrmse=les_rmse / scale,
        avg_les_rmse=avg_les_rmse,
        avg_les_rrmse=avg_les_rmse / scale,
    )
