"""
Data Loader
===========

Reads the calls and agent-activity CSV exports into replay records.

Calls CSV columns:
    date_received, queue_name, agent_number, answered, consult, transfer, hangup
Activities CSV columns:
    id, user_id, dnd_id, campaign_id, extension, last_call_id,
    startdatetime, enddatetime, agent_id

Timestamps are ``YYYY-MM-DD HH:MM:SS``. Unparseable optional fields become
None; rows missing a mandatory field are skipped with a warning.
"""

import logging
from datetime import datetime

import numpy as np
import pandas as pd

from .models import AgentActivity, Call

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

CALL_COLUMNS = [
    "date_received",
    "queue_name",
    "agent_number",
    "answered",
    "consult",
    "transfer",
    "hangup",
]

ACTIVITY_COLUMNS = [
    "id",
    "user_id",
    "dnd_id",
    "campaign_id",
    "extension",
    "last_call_id",
    "startdatetime",
    "enddatetime",
    "agent_id",
]


def _require_columns(df: pd.DataFrame, columns: list[str], source: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{source} is missing required columns: {missing}")


def _parse_timestamps(series: pd.Series) -> pd.Series:
    return pd.to_datetime(series, format=TIMESTAMP_FORMAT, errors="coerce")


def _parse_integers(series: pd.Series) -> pd.Series:
    # Agent numbers are sometimes exported as decimals ("12.0")
    numeric = pd.to_numeric(series, errors="coerce")
    return numeric.round()


def _to_datetime(value) -> datetime | None:
    if pd.isna(value):
        return None
    return value.to_pydatetime()


def _to_int(value) -> int | None:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    return int(value)


def _to_service(value) -> str | None:
    if pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def read_calls(path) -> list[Call]:
    """Load the calls log.

    Args:
        path: Path (or buffer) of the calls CSV.

    Returns:
        Calls in file order. Rows without a parseable arrival are dropped.

    Raises:
        ValueError: If a required column is absent.
    """
    raw = pd.read_csv(path, dtype=str, keep_default_na=True)
    _require_columns(raw, CALL_COLUMNS, "Calls file")

    arrival = _parse_timestamps(raw["date_received"])
    answered = _parse_timestamps(raw["answered"])
    consulted = _parse_timestamps(raw["consult"])
    transferred = _parse_timestamps(raw["transfer"])
    hangup = _parse_timestamps(raw["hangup"])
    agents = _parse_integers(raw["agent_number"])

    calls: list[Call] = []
    skipped = 0
    for i in range(len(raw)):
        if pd.isna(arrival.iat[i]):
            skipped += 1
            continue
        calls.append(
            Call(
                arrival=_to_datetime(arrival.iat[i]),
                service=_to_service(raw["queue_name"].iat[i]),
                agent_id=_to_int(agents.iat[i]),
                answered=_to_datetime(answered.iat[i]),
                consulted=_to_datetime(consulted.iat[i]),
                transferred=_to_datetime(transferred.iat[i]),
                hangup=_to_datetime(hangup.iat[i]),
            )
        )

    if skipped:
        logger.warning(f"Skipped {skipped} call rows without a valid arrival time")
    logger.info(f"Calls read: {len(calls)}")
    return calls


def read_activities(path) -> list[AgentActivity]:
    """Load the agent activity log.

    Rows without an activity id or a parseable start are dropped.

    Raises:
        ValueError: If a required column is absent.
    """
    raw = pd.read_csv(path, dtype=str, keep_default_na=True)
    _require_columns(raw, ACTIVITY_COLUMNS, "Activities file")

    ids = pd.to_numeric(raw["id"], errors="coerce")
    start = _parse_timestamps(raw["startdatetime"])
    end = _parse_timestamps(raw["enddatetime"])
    agents = pd.to_numeric(raw["agent_id"], errors="coerce")
    users = pd.to_numeric(raw["user_id"], errors="coerce")
    campaigns = pd.to_numeric(raw["campaign_id"], errors="coerce")

    activities: list[AgentActivity] = []
    skipped = 0
    for i in range(len(raw)):
        if pd.isna(ids.iat[i]) or pd.isna(start.iat[i]):
            skipped += 1
            continue
        activities.append(
            AgentActivity(
                activity_id=int(ids.iat[i]),
                agent_id=_to_int(agents.iat[i]),
                start=_to_datetime(start.iat[i]),
                end=_to_datetime(end.iat[i]),
                user_id=_to_int(users.iat[i]),
                campaign_id=_to_int(campaigns.iat[i]),
            )
        )

    if skipped:
        logger.warning(f"Skipped {skipped} activity rows without an id or start time")
    logger.info(f"Activities read: {len(activities)}")
    return activities
