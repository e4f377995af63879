#!/usr/bin/env python3
"""Tests for dataset summaries and the aggregation helpers behind them."""
import json

import pytest

from ezchart.aggregates import (
    decimal_places, extent, max_decimal_place, stable_union, thresholds, totals_by_key
)
from ezchart.config import SummarySettings
from ezchart.errors import EmptyDatasetError, NonNumericValueError
from ezchart.series import DataType
from ezchart.transform import analyze

EXAMPLE = [
    {"key": "A", "values": [{"key": "x", "value": 1}, {"key": "y", "value": 2}]},
    {"key": "B", "values": [{"key": "x", "value": 3}, {"key": "y", "value": 4}]},
]

FRUIT = {
    "key": "Fruit Sold",
    "values": [
        {"key": "Apples", "value": 9, "x": 1, "y": 4},
        {"key": "Oranges", "value": 3, "x": 2, "y": 7},
        {"key": "Pears", "value": 5.5, "x": 3},
    ],
}


def test_multi_series_example():
    """Totals, keys and extent for the two by two example."""
    summary = analyze(EXAMPLE).summary()

    assert summary.data_type == DataType.MULTI_SERIES
    assert summary.row_keys == ("A", "B")
    assert summary.row_totals == {"A": 3, "B": 7}
    assert summary.row_totals_max == 7
    assert summary.column_keys == ("x", "y")
    assert summary.column_totals == {"x": 4, "y": 6}
    assert summary.column_totals_max == 6
    assert summary.value_extent == (1, 4)
    assert summary.row_values_keys == ("key", "value")
    assert summary.max_decimal_place == 0
    assert summary.thresholds == (1.0, 2.0, 3.0, 4.0)

    assert summary.row_key is None
    assert summary.row_total is None


def test_single_series_summary():
    summary = analyze(FRUIT).summary()

    assert summary.data_type == DataType.SINGLE_SERIES
    assert summary.row_key == "Fruit Sold"
    assert summary.row_total == 17.5
    assert summary.column_keys == ("Apples", "Oranges", "Pears")
    assert summary.value_min == 3
    assert summary.value_max == 9
    assert summary.row_values_keys == ("key", "value", "x", "y")

    # Multi-series only fields stay undefined
    assert summary.row_keys is None
    assert summary.row_totals is None
    assert summary.column_totals is None
    assert summary.max_decimal_place is None


def test_coordinate_extents_skip_missing_axes():
    summary = analyze(FRUIT).summary()

    assert summary.coordinates_extent["x"] == (1, 3)
    assert summary.coordinates_extent["y"] == (4, 7)
    assert summary.coordinates_min["z"] is None
    assert summary.coordinates_max["z"] is None
    assert summary.coordinates_extent["z"] == (None, None)


def test_numeric_strings_are_coerced():
    summary = analyze({"key": "S", "values": [
        {"key": "a", "value": "10"},
        {"key": "b", "value": "2.5", "x": "4"},
    ]}).summary()

    assert summary.row_total == 12.5
    assert summary.value_extent == (2.5, 10)
    assert summary.coordinates_extent["x"] == (4, 4)


def test_repeated_series_keys_accumulate():
    summary = analyze([
        {"key": "A", "values": [{"key": "x", "value": 1}]},
        {"key": "A", "values": [{"key": "y", "value": 2}]},
        {"key": "B", "values": [{"key": "x", "value": 3}]},
    ]).summary()

    assert summary.row_keys == ("A", "A", "B")
    assert summary.row_totals == {"A": 3, "B": 3}
    assert summary.column_totals == {"x": 4, "y": 2}


def test_column_keys_first_seen_order():
    summary = analyze([
        {"key": "A", "values": [{"key": "x", "value": 1}, {"key": "y", "value": 1}]},
        {"key": "B", "values": [{"key": "z", "value": 1}, {"key": "x", "value": 1}]},
        {"key": "C", "values": [{"key": "w", "value": 1}, {"key": "y", "value": 1}]},
    ]).summary()

    assert summary.column_keys == ("x", "y", "z", "w")


def test_totals_max_matches_totals():
    summary = analyze([
        {"key": "A", "values": [{"key": "x", "value": 5}, {"key": "y", "value": -2}]},
        {"key": "B", "values": [{"key": "x", "value": 1}, {"key": "z", "value": 8}]},
    ]).summary()

    assert summary.row_totals_max == max(summary.row_totals.values())
    assert summary.column_totals_max == max(summary.column_totals.values())


def test_decimal_precision_drives_threshold_rounding():
    summary = analyze([
        {"key": "A", "values": [{"key": "x", "value": 1.25}, {"key": "y", "value": 2.5}]},
        {"key": "B", "values": [{"key": "x", "value": 0.1}, {"key": "y", "value": 3}]},
    ]).summary()

    assert summary.max_decimal_place == 2
    assert len(summary.thresholds) == 4
    for t in summary.thresholds:
        assert round(t, 2) == t
        assert summary.value_min <= t <= summary.value_max
    assert list(summary.thresholds) == sorted(summary.thresholds)


def test_single_series_thresholds_stay_inside_extent():
    """Whole-number rounding is clamped back into the value range."""
    summary = analyze({"key": "S", "values": [
        {"key": "a", "value": 0.2},
        {"key": "b", "value": 0.8},
    ]}).summary()

    assert summary.thresholds == (0.2, 0.2, 0.8, 0.8)


def test_flat_dataset_has_tied_thresholds():
    summary = analyze([{"key": "A", "values": [{"key": "x", "value": 5}, {"key": "y", "value": 5}]}]).summary()

    assert summary.value_extent == (5, 5)
    assert summary.thresholds == (5.0, 5.0, 5.0, 5.0)


def test_custom_threshold_bands():
    settings = SummarySettings(threshold_bands=[0.0, 0.5, 1.0])
    summary = analyze(EXAMPLE, settings).summary()

    assert summary.thresholds == (1.0, 3.0, 4.0)


def test_decimal_place_cap():
    dataset = [{"key": "A", "values": [{"key": "x", "value": 1e-25}, {"key": "y", "value": 1}]}]

    assert analyze(dataset).summary().max_decimal_place == 20
    assert analyze(dataset, SummarySettings(decimal_place_cap=5)).summary().max_decimal_place == 5


def test_row_values_keys_skip_empty_series():
    summary = analyze([
        {"key": "A", "values": []},
        {"key": "B", "values": [{"key": "x", "value": 1, "z": 2}]},
    ]).summary()

    assert summary.row_values_keys == ("key", "value", "z")


def test_threshold_halves_round_up():
    summary = analyze([
        {"key": "A", "values": [{"key": "x", "value": 0}, {"key": "y", "value": 30}]},
    ]).summary()

    # raw breakpoints are 4.5, 12.0, 16.5 and 27.0
    assert summary.thresholds == (5.0, 12.0, 17.0, 27.0)


def test_threshold_halves_round_away_from_zero():
    assert thresholds(-30, 0) == (-26.0, -18.0, -14.0, -3.0)
    assert thresholds(0, 0.1, places=2, bands=[0.25]) == (0.03,)


def test_row_values_keys_follow_first_point_order():
    summary = analyze([
        {"key": "A", "values": [{"value": 1, "label": "l", "key": "a", "x": 2}]},
    ]).summary()

    assert summary.row_values_keys == ("value", "label", "key", "x")


@pytest.mark.parametrize("dataset", [
    [],
    [{"key": "A", "values": []}],
    {"key": "A", "values": []},
])
def test_empty_dataset_raises(dataset):
    with pytest.raises(EmptyDatasetError):
        analyze(dataset).summary()


def test_non_numeric_value_raises():
    dataset = [
        {"key": "A", "values": [{"key": "x", "value": 1}]},
        {"key": "B", "values": [{"key": "x", "value": 2}, {"key": "y", "value": "n/a"}]},
    ]

    with pytest.raises(NonNumericValueError) as excinfo:
        analyze(dataset).summary()
    assert excinfo.value.series_key == "B"
    assert excinfo.value.index == 1


def test_missing_value_raises():
    with pytest.raises(NonNumericValueError) as excinfo:
        analyze({"key": "A", "values": [{"key": "x"}]}).summary()
    assert excinfo.value.field == "value"


def test_non_numeric_coordinate_raises():
    with pytest.raises(NonNumericValueError) as excinfo:
        analyze({"key": "A", "values": [{"key": "p", "value": 1, "y": "north"}]}).summary()
    assert excinfo.value.field == "y"


def test_summary_is_idempotent_and_read_only():
    transform = analyze(EXAMPLE)
    first = transform.summary()
    second = transform.summary()

    assert first == second
    assert first is not second
    with pytest.raises(TypeError):
        first.row_totals["A"] = 0


def test_summary_does_not_alias_input():
    dataset = [{"key": "A", "values": [{"key": "x", "value": 1}]}]
    summary = analyze(dataset).summary()
    dataset[0]["values"][0]["value"] = 100

    assert summary.value_max == 1


def test_as_dict_is_json_ready():
    result = analyze(EXAMPLE).summary().as_dict()

    assert result["dataType"] == 2
    assert result["rowTotals"] == {"A": 3, "B": 7}
    assert result["columnKeys"] == ["x", "y"]
    assert result["valueExtent"] == [1, 4]
    assert result["coordinatesExtent"]["x"] == [None, None]
    assert result["rowKey"] is None
    json.dumps(result)


@pytest.mark.parametrize("num, expected", [
    (1.230, 2),
    ("1.5e-2", 3),
    (0.015, 3),
    (1.5e-7, 8),
    (100, 0),
    (1e16, 0),
    ("12.50", 2),
])
def test_decimal_places(num, expected):
    assert decimal_places(num) == expected


def test_max_decimal_place_defaults_to_zero():
    assert max_decimal_place([]) == 0
    assert max_decimal_place([1, 2.5, 0.125]) == 3


def test_stable_union():
    assert stable_union([["b", "a"], ["c", "a", "b"], ["d"]]) == ("b", "a", "c", "d")
    assert stable_union([]) == ()


def test_totals_by_key():
    totals = totals_by_key([("a", 1), ("b", 2), ("a", 3.5)])
    assert totals == {"a": 4.5, "b": 2}


def test_extent_returns_actual_elements():
    values = [3, 1.5, 7, -2]
    low, high = extent(values)

    assert (low, high) == (-2, 7)
    assert type(low) is int
    assert extent([]) == (None, None)


def test_thresholds_helper():
    assert thresholds(0, 100) == (15.0, 40.0, 55.0, 90.0)
    assert thresholds(0, 1, places=2) == (0.15, 0.4, 0.55, 0.9)
