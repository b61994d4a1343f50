"""
Pytest configuration for the replay tests.

Puts src/ on the path and provides small builders for calls and activities.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add src directory to path for imports
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from callcenter_replay.replay import AgentActivity, Call  # noqa: E402

# A Monday morning inside business hours
BASE = datetime(2014, 3, 3, 9, 0, 0)


def at(seconds: float) -> datetime:
    return BASE + timedelta(seconds=seconds)


def make_call(service, arrival, agent=None, wait=None, handle=None):
    """Call arriving ``arrival`` seconds after BASE, answered after ``wait``."""
    answered = at(arrival + wait) if wait is not None else None
    hangup = at(arrival + wait + handle) if wait is not None and handle is not None else None
    return Call(
        arrival=at(arrival),
        service=service,
        agent_id=agent,
        answered=answered,
        hangup=hangup,
    )


def make_activity(code, agent, start, end):
    return AgentActivity(activity_id=code, agent_id=agent, start=at(start), end=at(end))


@pytest.fixture
def base_time():
    return BASE
