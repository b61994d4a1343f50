"""
Run the full historical replay:
  1. Load the calls and agent-activity CSV logs
  2. Filter to business hours and the principal services
  3. Replay every call, capturing a state snapshot before pickup
  4. Export the training set and report LES / Avg-LES accuracy

Usage:
    cd scripts/
    python run_replay.py --calls calls.csv --activities activities.csv
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to the Python path so callcenter_replay is importable
_SRC = Path(__file__).resolve().parent.parent / "src"
sys.path.insert(0, str(_SRC))

from callcenter_replay.replay import (
    FilterConfig,
    PipelineConfig,
    ReplayConfig,
    ReplayPipeline,
    evaluate_baselines,
    export_training_set,
    read_activities,
    read_calls,
)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def main():
    parser = argparse.ArgumentParser(
        description="Replay call-center logs into a wait-time training set"
    )
    parser.add_argument(
        "--calls",
        type=str,
        default=str(DATA_DIR / "calls.csv"),
        help="Path to the calls CSV",
    )
    parser.add_argument(
        "--activities",
        type=str,
        default=str(DATA_DIR / "activities.csv"),
        help="Path to the agent activities CSV",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="replay_training_set.csv",
        help="Where to write the training set",
    )
    parser.add_argument(
        "--min_calls",
        type=int,
        default=200,
        help="Complete calls a service needs to be kept",
    )
    parser.add_argument(
        "--max_services",
        type=int,
        default=5,
        help="Number of busiest services to keep",
    )
    parser.add_argument(
        "--history",
        type=int,
        default=200,
        help="Recent samples kept per service for the baselines",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pipeline = ReplayPipeline(
        PipelineConfig(
            replay=ReplayConfig(history_capacity=args.history),
            filters=FilterConfig(
                min_service_calls=args.min_calls,
                max_services=args.max_services,
            ),
        )
    )

    # ---------------------------------------------------------------
    # Step 1: Load the logs
    # ---------------------------------------------------------------
    print("=" * 70)
    print("STEP 1: LOADING CALL AND ACTIVITY LOGS")
    print("=" * 70)

    calls = read_calls(args.calls)
    activities = read_activities(args.activities)
    print(f"\n  Calls loaded:      {len(calls)}")
    print(f"  Activities loaded: {len(activities)}")

    # ---------------------------------------------------------------
    # Step 2: Filter
    # ---------------------------------------------------------------
    print("\n" + "=" * 70)
    print("STEP 2: FILTERING TO BUSINESS HOURS AND PRINCIPAL SERVICES")
    print("=" * 70)

    try:
        services, kept_calls, kept_activities = pipeline.prepare(calls, activities)
    except ValueError as e:
        print(f"\n  {e} Exiting.")
        return

    print(f"\n  Principal services: {services}")
    print(f"  Calls to replay:    {len(kept_calls)}")
    print(f"  Activities:         {len(kept_activities)}")

    # ---------------------------------------------------------------
    # Step 3: Replay
    # ---------------------------------------------------------------
    print("\n" + "=" * 70)
    print("STEP 3: REPLAYING CALLS IN WALL-CLOCK ORDER")
    print("=" * 70)

    samples, replayed = pipeline.replay(services, kept_calls, kept_activities)
    print(f"\n  Calls replayed:    {replayed}")
    print(f"  Valid samples:     {len(samples)}")

    if not samples:
        print("No valid samples generated. Exiting.")
        return

    # ---------------------------------------------------------------
    # Step 4: Export and evaluate
    # ---------------------------------------------------------------
    output = export_training_set(samples, services, args.output)
    report = evaluate_baselines(samples)

    print(f"\n{'='*80}")
    print("  BASELINE PREDICTORS")
    print(f"{'='*80}")
    print(f"\n  Example sample     : {samples[0]}")
    print(f"  Samples            : {report.sample_count}")
    print(f"  Mean wait          : {report.mean_wait:.1f}s")
    print(f"  Mean queue length  : {report.mean_queue:.1f}")
    print(f"\n{'Predictor':<12} {'RMSE (s)':<12} {'RRMSE':<10}")
    print("-" * 34)
    print(f"{'LES':<12} {report.les_rmse:<12.2f} {report.les_rrmse:<10.3f}")
    print(f"{'Avg-LES':<12} {report.avg_les_rmse:<12.2f} {report.avg_les_rrmse:<10.3f}")
    print(f"\n  Training set written to {output}")


if __name__ == "__main__":
    main()
