"""
Pipeline Module (The Driver)
============================

Orchestrates the full workflow: Load -> Filter -> Replay -> Export -> Evaluate.
Connects the data loader, filters and ReplayEngine into an end-to-end run.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .data_loader import read_activities, read_calls
from .engine import ReplayConfig, ReplayEngine
from .evaluation import BaselineReport, evaluate_baselines
from .events import ActivityStart, CallArrival, merge_chronologically
from .export import export_training_set
from .filters import (
    FilterConfig,
    is_valid_sample,
    replay_activities,
    replay_calls,
    select_principal_services,
    within_business_hours,
)
from .models import AgentActivity, Call
from .snapshot import SystemSnapshot

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Settings for one replay run.

    Attributes:
        replay: Constants handed to the ReplayEngine.
        filters: Data preparation and sample validity rules.
        progress_every: Log progress after this many calls.
    """
    replay: ReplayConfig = field(default_factory=ReplayConfig)
    filters: FilterConfig = field(default_factory=FilterConfig)
    progress_every: int = 200_000


@dataclass
class ReplayResult:
    """Complete result from running the pipeline.

    Attributes:
        services: Principal services the replay was configured with.
        samples: Valid training snapshots, in arrival order.
        calls_replayed: Number of calls pushed through the engine.
        report: Baseline accuracy on the samples.
        output_path: Where the training set was written, if exported.
    """
    services: list[str]
    samples: list[SystemSnapshot]
    calls_replayed: int
    report: BaselineReport
    output_path: Path | None = None


class ReplayPipeline:
    """Turns raw call and activity logs into a labelled training set.

    Workflow (run method):
        1. Read both CSV logs
        2. Keep business-hour calls, pick the principal services,
           keep complete calls and bounded activities
        3. Replay the merged event stream through a ReplayEngine
        4. Export valid samples and score the baselines
    """

    def __init__(self, config: PipelineConfig | None = None) -> None:
        self.config = config or PipelineConfig()

    def prepare(
        self,
        calls: Sequence[Call],
        activities: Sequence[AgentActivity],
    ) -> tuple[list[str], list[Call], list[AgentActivity]]:
        """Apply the data filters.

        Returns:
            (services, replay-ready calls, replay-ready activities)

        Raises:
            ValueError: If no service has enough complete calls.
        """
        open_calls = within_business_hours(calls, self.config.filters)
        services = select_principal_services(open_calls, self.config.filters)
        if not services:
            raise ValueError(
                "No service has at least "
                f"{self.config.filters.min_service_calls} complete calls."
            )

        kept_calls = replay_calls(open_calls, services)
        kept_activities = replay_activities(activities)
        logger.info(f"Calls kept for replay: {len(kept_calls)}")
        logger.info(f"Activities kept for replay: {len(kept_activities)}")
        return services, kept_calls, kept_activities

    def replay(
        self,
        services: Sequence[str],
        calls: Sequence[Call],
        activities: Sequence[AgentActivity],
    ) -> tuple[list[SystemSnapshot], int]:
        """Replay calls and activities in wall-clock order.

        Args:
            services: Configured service names.
            calls: Calls sorted by arrival.
            activities: Activities sorted by start.

        Returns:
            (valid samples, number of calls replayed)
        """
        engine = ReplayEngine(services, calls, activities, self.config.replay)
        samples: list[SystemSnapshot] = []
        total = len(calls)
        replayed = 0

        for event in merge_chronologically(calls, activities):
            if isinstance(event, ActivityStart):
                engine.advance_to(event.timestamp)
                continue

            call = event.call
            snapshot = engine.capture_state(call, call.arrival)
            if is_valid_sample(snapshot, self.config.filters):
                samples.append(snapshot)
            engine.record_outcome(call)

            replayed += 1
            if replayed % self.config.progress_every == 0 or replayed == total:
                logger.info(
                    f"Progress: {replayed}/{total} calls replayed "
                    f"({100.0 * replayed / total:.1f}%)"
                )

        return samples, replayed

    def run(
        self,
        calls_path: str | Path,
        activities_path: str | Path,
        output_path: str | Path | None = None,
    ) -> ReplayResult:
        """Execute the full load-to-evaluation workflow.

        Args:
            calls_path: Calls CSV.
            activities_path: Agent activities CSV.
            output_path: Training-set CSV to write; skipped when None.

        Returns:
            ReplayResult with the samples and baseline report.
        """
        # Step 1: Load
        calls = read_calls(calls_path)
        activities = read_activities(activities_path)

        # Step 2: Filter
        services, kept_calls, kept_activities = self.prepare(calls, activities)

        # Step 3: Replay
        samples, replayed = self.replay(services, kept_calls, kept_activities)

        # Step 4: Export and evaluate
        written = None
        if output_path is not None:
            written = export_training_set(samples, services, output_path)

        return ReplayResult(
            services=services,
            samples=samples,
            calls_replayed=replayed,
            report=evaluate_baselines(samples),
            output_path=written,
        )
