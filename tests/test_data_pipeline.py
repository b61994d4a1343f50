"""
Tests for the data boundary: CSV loading, filters, export, baseline
evaluation and the end-to-end ReplayPipeline.
"""

from datetime import datetime, time, timedelta

import pandas as pd
import pytest

from callcenter_replay.replay import (
    FilterConfig,
    PipelineConfig,
    ReplayPipeline,
    SystemSnapshot,
    evaluate_baselines,
    export_training_set,
    read_activities,
    read_calls,
    snapshots_to_frame,
)
from callcenter_replay.replay.filters import (
    is_valid_sample,
    replay_activities,
    replay_calls,
    select_principal_services,
    within_business_hours,
)

from conftest import BASE, make_activity, make_call

CALLS_HEADER = "date_received,queue_name,agent_number,answered,consult,transfer,hangup\n"
ACTIVITIES_HEADER = (
    "id,user_id,dnd_id,campaign_id,extension,last_call_id,"
    "startdatetime,enddatetime,agent_id\n"
)


def _fmt(ts):
    return ts.strftime("%Y-%m-%d %H:%M:%S")


def _snapshot(observed, les, avg_les, queue=0, free=1):
    return SystemSnapshot(
        service="A",
        principal_queue=queue,
        aux_queues=(0, 0, 0, 0, 0),
        timestamp=BASE,
        free_agents=free,
        observed_wait=observed,
        les=les,
        avg_les=avg_les,
        services=("A",),
    )


# =============================================================================
# Test: CSV loading
# =============================================================================

class TestReadCalls:

    def test_parses_all_fields(self, tmp_path):
        path = tmp_path / "calls.csv"
        path.write_text(
            CALLS_HEADER
            + "2014-03-03 09:00:00,30175,12.0,2014-03-03 09:00:40,,"
            "2014-03-03 09:03:00,2014-03-03 09:04:00\n"
        )
        calls = read_calls(path)

        assert len(calls) == 1
        call = calls[0]
        assert call.arrival == datetime(2014, 3, 3, 9, 0, 0)
        assert call.service == "30175"
        assert call.agent_id == 12
        assert call.answered == datetime(2014, 3, 3, 9, 0, 40)
        assert call.consulted is None
        assert call.transferred == datetime(2014, 3, 3, 9, 3, 0)
        assert call.wait_seconds == 40.0
        assert call.service_seconds == 200.0

    def test_skips_rows_without_arrival(self, tmp_path):
        path = tmp_path / "calls.csv"
        path.write_text(
            CALLS_HEADER
            + "not a date,30175,,,,,\n"
            + "2014-03-03 09:00:00,30175,,,,,\n"
        )
        calls = read_calls(path)
        assert len(calls) == 1
        assert calls[0].agent_id is None
        assert calls[0].answered is None

    def test_bad_optional_fields_become_none(self, tmp_path):
        path = tmp_path / "calls.csv"
        path.write_text(CALLS_HEADER + "2014-03-03 09:00:00,30175,abc,garbage,,,\n")
        call = read_calls(path)[0]
        assert call.agent_id is None
        assert call.answered is None

    def test_missing_columns_rejected(self, tmp_path):
        path = tmp_path / "calls.csv"
        path.write_text("date_received,queue_name\n2014-03-03 09:00:00,30175\n")
        with pytest.raises(ValueError, match="missing required columns"):
            read_calls(path)


class TestReadActivities:

    def test_parses_rows(self, tmp_path):
        path = tmp_path / "activities.csv"
        path.write_text(
            ACTIVITIES_HEADER
            + "3,7,,11,2007,,2014-03-03 08:30:00,2014-03-03 08:31:00,1007\n"
            + "7,7,,11,2007,,2014-03-03 10:00:00,,1007\n"
        )
        activities = read_activities(path)

        assert len(activities) == 2
        first = activities[0]
        assert first.activity_id == 3
        assert first.agent_id == 1007
        assert first.campaign_id == 11
        assert first.start == datetime(2014, 3, 3, 8, 30, 0)
        assert first.duration_minutes == pytest.approx(1.0)
        assert activities[1].end is None

    def test_skips_rows_without_start_or_id(self, tmp_path):
        path = tmp_path / "activities.csv"
        path.write_text(
            ACTIVITIES_HEADER
            + ",7,,11,2007,,2014-03-03 08:30:00,2014-03-03 08:31:00,1007\n"
            + "3,7,,11,2007,,,2014-03-03 08:31:00,1007\n"
        )
        assert read_activities(path) == []


# =============================================================================
# Test: Filters
# =============================================================================

class TestFilters:

    def test_business_hours_inclusive(self):
        config = FilterConfig()
        monday = datetime(2014, 3, 3)
        calls = [
            make_call("A", 0),
        ]
        for arrival in (
            monday.replace(hour=8),
            monday.replace(hour=20),
            monday.replace(hour=20, second=1),
            monday.replace(hour=7, minute=59, second=59),
            datetime(2014, 3, 8, 12),  # Saturday
        ):
            calls.append(make_call("A", (arrival - BASE).total_seconds()))

        kept = within_business_hours(calls, config)
        assert [c.arrival.time() for c in kept] == [time(9), time(8), time(20)]

    def test_principal_services_ranked_and_thresholded(self):
        config = FilterConfig(min_service_calls=2, max_services=2)
        calls = (
            [make_call("A", i, agent=1, wait=1, handle=1) for i in range(3)]
            + [make_call("B", i, agent=1, wait=1, handle=1) for i in range(5)]
            + [make_call("C", i, agent=1, wait=1, handle=1) for i in range(2)]
            + [make_call("D", 0, agent=1, wait=1, handle=1)]
            # Incomplete calls do not count towards volume
            + [make_call("D", i) for i in range(10)]
        )
        assert select_principal_services(calls, config) == ["B", "A"]

    def test_replay_calls_complete_and_sorted(self):
        calls = [
            make_call("A", 50, agent=1, wait=1, handle=1),
            make_call("A", 10, agent=1, wait=1, handle=1),
            make_call("A", 20),
            make_call("Z", 0, agent=1, wait=1, handle=1),
        ]
        kept = replay_calls(calls, ["A"])
        assert [c.arrival for c in kept] == [calls[1].arrival, calls[0].arrival]

    def test_replay_activities_bounded_and_sorted(self):
        late = make_activity(3, 1, 100, 200)
        early = make_activity(3, 1, 0, 10)
        open_ended = make_activity(3, 1, 50, 60)
        open_ended.end = None
        assert replay_activities([late, open_ended, early]) == [early, late]

    @pytest.mark.parametrize(
        "observed, queue, valid",
        [
            (0.0, 0, True),
            (7199.0, 499, True),
            (-1.0, 0, False),
            (7200.0, 0, False),
            (10.0, 500, False),
        ],
    )
    def test_sample_validity(self, observed, queue, valid):
        snapshot = _snapshot(observed, 0.0, 0.0, queue=queue)
        assert is_valid_sample(snapshot, FilterConfig()) is valid


# =============================================================================
# Test: Export and evaluation
# =============================================================================

class TestExport:

    def test_frame_has_feature_and_target_columns(self):
        frame = snapshots_to_frame([_snapshot(30.0, 90.0, 60.0)], ["A"])
        assert list(frame.columns)[-1] == "observed_wait"
        assert len(frame.columns) == 14
        assert frame.loc[0, "service_A"] == 1.0
        assert frame.loc[0, "observed_wait"] == 30.0

    def test_empty_frame_keeps_columns(self):
        frame = snapshots_to_frame([], ["A"])
        assert len(frame) == 0
        assert "les" in frame.columns

    def test_csv_written_with_two_decimals(self, tmp_path):
        output = export_training_set(
            [_snapshot(30.0, 90.123, 60.0)], ["A"], tmp_path / "out" / "train.csv"
        )
        text = output.read_text().splitlines()
        assert text[0].endswith("les,avg_les,observed_wait")
        assert "90.12" in text[1]
        assert pd.read_csv(output).shape == (1, 14)


class TestEvaluateBaselines:

    def test_rmse_and_rrmse(self):
        samples = [
            _snapshot(10.0, 13.0, 10.0, queue=1),
            _snapshot(30.0, 26.0, 30.0, queue=3),
        ]
        report = evaluate_baselines(samples)

        assert report.sample_count == 2
        assert report.mean_wait == pytest.approx(20.0)
        assert report.mean_queue == pytest.approx(2.0)
        assert report.les_rmse == pytest.approx(((9 + 16) / 2) ** 0.5)
        assert report.les_rrmse == pytest.approx(report.les_rmse / 20.0)
        assert report.avg_les_rmse == pytest.approx(0.0)

    def test_no_samples(self):
        report = evaluate_baselines([])
        assert report.sample_count == 0
        assert report.les_rmse == 0.0


# =============================================================================
# Test: End-to-end pipeline
# =============================================================================

class TestReplayPipeline:

    @pytest.fixture
    def logs(self, tmp_path):
        """Two services on a Monday morning, a low-volume service and a weekend call."""
        calls_path = tmp_path / "calls.csv"
        activities_path = tmp_path / "activities.csv"

        rows = []
        for i in range(6):
            arrival = BASE + timedelta(minutes=2 * i)
            answered = arrival + timedelta(seconds=20 + i)
            hangup = answered + timedelta(seconds=90)
            rows.append(f"{_fmt(arrival)},A,1,{_fmt(answered)},,,{_fmt(hangup)}\n")
        for i in range(4):
            arrival = BASE + timedelta(minutes=2 * i + 1)
            answered = arrival + timedelta(seconds=10)
            hangup = answered + timedelta(seconds=60)
            rows.append(f"{_fmt(arrival)},B,2,{_fmt(answered)},,,{_fmt(hangup)}\n")
        # Only one complete call: below the volume threshold
        rows.append(f"{_fmt(BASE)},C,3,{_fmt(BASE)},,,{_fmt(BASE + timedelta(seconds=5))}\n")
        # Saturday call
        saturday = datetime(2014, 3, 8, 10)
        rows.append(f"{_fmt(saturday)},A,1,{_fmt(saturday)},,,{_fmt(saturday)}\n")
        calls_path.write_text(CALLS_HEADER + "".join(rows))

        activities_path.write_text(
            ACTIVITIES_HEADER
            + f"3,1,,11,2001,,{_fmt(BASE - timedelta(minutes=30))},{_fmt(BASE - timedelta(minutes=29))},1\n"
            + f"7,2,,11,2002,,{_fmt(BASE + timedelta(minutes=4))},{_fmt(BASE + timedelta(minutes=30))},2\n"
        )
        return calls_path, activities_path

    def test_run_end_to_end(self, logs, tmp_path):
        calls_path, activities_path = logs
        config = PipelineConfig(filters=FilterConfig(min_service_calls=3))
        output = tmp_path / "training.csv"

        result = ReplayPipeline(config).run(calls_path, activities_path, output)

        assert result.services == ["A", "B"]
        assert result.calls_replayed == 10
        assert len(result.samples) == 10
        assert result.output_path == output
        assert pd.read_csv(output).shape == (10, 14)
        assert result.report.sample_count == 10

        first = result.samples[0]
        assert first.service == "A"
        assert first.principal_queue == 0
        assert first.les == pytest.approx(180.0)
        assert first.avg_les == pytest.approx(60.0)

        # Agent 2 is on a break from minute 4; the free count floors at 1
        last_b = [s for s in result.samples if s.service == "B"][-1]
        assert last_b.free_agents == 1
        assert last_b.les == pytest.approx(60.0)
        assert last_b.avg_les == pytest.approx(10.0)

    def test_samples_in_arrival_order(self, logs):
        calls_path, activities_path = logs
        config = PipelineConfig(filters=FilterConfig(min_service_calls=3))
        result = ReplayPipeline(config).run(calls_path, activities_path)

        stamps = [s.timestamp for s in result.samples]
        assert stamps == sorted(stamps)
        assert result.output_path is None

    def test_no_principal_service_raises(self, logs):
        calls_path, activities_path = logs
        with pytest.raises(ValueError, match="No service"):
            ReplayPipeline().run(calls_path, activities_path)
