"""
Call Center Replay
==================

Core components for rebuilding historical call-center state:

1. ReplayEngine - Replays calls and agent activities in wall-clock order
2. AgentAvailability - Per-agent availability windows
3. SystemSnapshot - Per-call state and its feature-vector encoding
4. ReplayPipeline - Orchestrates load, filter, replay, export, evaluate

Data Flow:
    calls.csv + activities.csv -> read_calls() / read_activities()
                                        |
                                        v
                  ReplayPipeline.prepare() -> services, sorted calls/activities
                                        |
                                        v
    for each call:  ReplayEngine.capture_state(call, arrival) -> SystemSnapshot
                    ReplayEngine.record_outcome(call)
                                        |
                                        v
          export_training_set(samples)  +  evaluate_baselines(samples)
"""

from .agent_state import AgentAvailability
from .data_loader import read_activities, read_calls
from .engine import ReplayConfig, ReplayEngine
from .evaluation import BaselineReport, evaluate_baselines
from .events import ActivityStart, CallArrival, Event, merge_chronologically
from .export import export_training_set, snapshots_to_frame
from .filters import FilterConfig
from .history import BoundedHistory
from .models import AgentActivity, Call
from .pipeline import PipelineConfig, ReplayPipeline, ReplayResult
from .snapshot import SystemSnapshot, feature_columns

__all__ = [
    "ActivityStart",
    "AgentActivity",
    "AgentAvailability",
    "BaselineReport",
    "BoundedHistory",
    "Call",
    "CallArrival",
    "Event",
    "FilterConfig",
    "PipelineConfig",
    "ReplayConfig",
    "ReplayEngine",
    "ReplayPipeline",
    "ReplayResult",
    "SystemSnapshot",
    "evaluate_baselines",
    "export_training_set",
    "feature_columns",
    "merge_chronologically",
    "read_activities",
    "read_calls",
    "snapshots_to_frame",
]
