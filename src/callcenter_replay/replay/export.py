"""Training-set export for captured snapshots."""

import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np
import pandas as pd

from .snapshot import SystemSnapshot, feature_columns

logger = logging.getLogger(__name__)

TARGET_COLUMN = "observed_wait"


def snapshots_to_frame(
    snapshots: Sequence[SystemSnapshot],
    services: Sequence[str],
) -> pd.DataFrame:
    """One row per snapshot: the feature vector plus the observed wait."""
    columns = feature_columns(services) + [TARGET_COLUMN]
    if not snapshots:
        return pd.DataFrame(columns=columns, dtype=float)

    rows = np.vstack(
        [np.append(s.to_feature_vector(), s.observed_wait) for s in snapshots]
    )
    return pd.DataFrame(rows, columns=columns)


def export_training_set(
    snapshots: Sequence[SystemSnapshot],
    services: Sequence[str],
    output_path: str | Path,
) -> Path:
    """Write the training set as CSV with two-decimal floats.

    Returns:
        The path written.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    frame = snapshots_to_frame(snapshots, services)
    frame.to_csv(output_path, index=False, float_format="%.2f")
    logger.info(f"Exported {len(frame)} training rows to {output_path}")
    return output_path
