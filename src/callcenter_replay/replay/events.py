"""
Replay Events
=============

A call arrival or an agent-activity start, wrapped so both logs can be
walked as a single chronological stream.

Both inputs arrive sorted by time; merging is a two-cursor walk.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from .models import AgentActivity, Call


@dataclass(frozen=True)
class CallArrival:
    call: Call

    @property
    def timestamp(self) -> datetime:
        return self.call.arrival


@dataclass(frozen=True)
class ActivityStart:
    activity: AgentActivity

    @property
    def timestamp(self) -> datetime:
        return self.activity.start


Event = Union[CallArrival, ActivityStart]


def merge_chronologically(
    calls: Sequence[Call],
    activities: Sequence[AgentActivity],
) -> Iterator[Event]:
    """Yield calls and activities as one stream ordered by timestamp.

    Args:
        calls: Calls sorted ascending by arrival.
        activities: Activities sorted ascending by start.

    Yields:
        CallArrival and ActivityStart events in non-decreasing time order.
        When a call and an activity share a timestamp the call comes first.
    """
    call_index = 0
    activity_index = 0

    while call_index < len(calls) and activity_index < len(activities):
        call = calls[call_index]
        activity = activities[activity_index]
        if call.arrival <= activity.start:
            yield CallArrival(call)
            call_index += 1
        else:
            yield ActivityStart(activity)
            activity_index += 1

    for call in calls[call_index:]:
        yield CallArrival(call)
    for activity in activities[activity_index:]:
        yield ActivityStart(activity)
