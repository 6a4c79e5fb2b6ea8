from __future__ import annotations

from pathlib import Path

import pytest

from rt_cli.utils.parsing import (
    InputError,
    activity_from_payload,
    history_from_payload,
    load_activity_input,
    load_history_input,
)


def test_load_activity_input_json_object(write_temp_json, interval_payload) -> None:
    path = write_temp_json("activity.json", interval_payload)
    payloads = load_activity_input(path)
    assert len(payloads) == 1
    assert payloads[0]["id"] == 1001


def test_load_activity_input_list_and_wrapper(write_temp_json, interval_payload, long_run_payload) -> None:
    listed = write_temp_json("list.json", [interval_payload, "junk", long_run_payload])
    assert [p["id"] for p in load_activity_input(listed)] == [1001, 1002]

    wrapped = write_temp_json("wrapped.json", {"activities": [long_run_payload]})
    assert [p["id"] for p in load_activity_input(wrapped)] == [1002]


def test_load_activity_input_yaml(tmp_path: Path) -> None:
    path = tmp_path / "activity.yaml"
    path.write_text(
        """
name: Rodaje
distance: 5000
moving_time: 1500
splits_metric:
  - {distance: 1000, moving_time: 300, elapsed_time: 300, average_speed: 3.33}
"""
    )
    payloads = load_activity_input(path)
    assert payloads[0]["name"] == "Rodaje"
    assert len(payloads[0]["splits_metric"]) == 1


@pytest.mark.parametrize("content, name", [("{broken", "bad.json"), ("a: [1, 2", "bad.yaml"), ("42", "scalar.json")])
def test_load_activity_input_errors(tmp_path: Path, content: str, name: str) -> None:
    path = tmp_path / name
    path.write_text(content)
    with pytest.raises(InputError):
        load_activity_input(path)


def test_load_activity_input_missing_file(tmp_path: Path) -> None:
    with pytest.raises(InputError):
        load_activity_input(tmp_path / "nope.json")


def test_activity_from_payload_reads_laps_and_splits(interval_payload, long_run_payload) -> None:
    intervals = activity_from_payload(interval_payload)
    assert intervals.activity_id == "1001"
    assert intervals.name == "Pista martes"
    assert len(intervals.laps) == 10
    assert intervals.laps[0].elapsed_time == 180
    assert intervals.splits == ()

    long_run = activity_from_payload(long_run_payload)
    assert len(long_run.splits) == 20
    assert long_run.distance == 20000


def test_activity_from_payload_falls_back_to_splits_key() -> None:
    activity = activity_from_payload(
        {"distance": 2000, "moving_time": 600, "splits": [{"distance": 1000, "moving_time": 300}] * 2}
    )
    assert len(activity.splits) == 2
    assert activity.average_speed == pytest.approx(2000 / 600)


def test_activity_from_payload_tolerates_bad_numbers() -> None:
    activity = activity_from_payload(
        {
            "distance": "n/a",
            "moving_time": None,
            "average_heartrate": "abc",
            "total_elevation_gain": float("nan"),
            "splits_metric": [
                {"distance": 1000, "moving_time": "300", "elapsed_time": 310, "average_speed": "3.33"},
                {"distance": 1000, "moving_time": 290, "elevation_difference": "x"},
                "not a split",
            ],
        }
    )
    assert activity.distance == 2000
    assert activity.moving_time == 590
    assert activity.average_heartrate is None
    assert activity.total_elevation_gain is None
    assert activity.splits[0].moving_time == 300
    assert activity.splits[1].elevation_difference is None


def test_history_from_payload(history_payload) -> None:
    records = history_from_payload(
        history_payload + [{"distance": 5000, "moving_time": 1500, "average_heartrate": 150, "workout_type": "RODAJE"}]
    )
    assert len(records) == 5
    assert records[0].label == "RODAJE"
    assert records[0].avg_heartrate == 140
    assert records[-1].duration == 1500
    assert records[-1].avg_heartrate == 150
    assert records[-1].label == "RODAJE"


def test_load_history_input(write_temp_json, history_payload) -> None:
    path = write_temp_json("history.json", history_payload)
    records = load_history_input(path)
    assert [r.label for r in records] == ["RODAJE", "RODAJE", "SERIES", "TEMPO"]
