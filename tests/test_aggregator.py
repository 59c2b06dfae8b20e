"""Tests for grouping and summary statistics."""

from __future__ import annotations

import math

import pandas as pd
import pytest

from analytics.aggregator import (
    count_by,
    cross_tabulate,
    group_summary,
    safe_float,
    summarize_group,
    summarize_prices,
)
from analytics.data_filter import filter_listings
from analytics.dataset import price_per_area
from conftest import make_frame, make_listing


def test_group_summary_counts_and_prices(listings: pd.DataFrame) -> None:
    """Groups come back in ascending key order with price statistics."""

    groups = group_summary(listings, "bedrooms")

    assert [group["bedrooms"] for group in groups] == [1, 2, 3, 4, 5]
    assert [group["count"] for group in groups] == [1, 2, 3, 2, 1]
    two_bed = groups[1]
    assert two_bed["mean_price"] == pytest.approx(3_200_000)
    assert two_bed["median_price"] == pytest.approx(3_200_000)
    assert groups[0]["mean_price_per_area"] == pytest.approx(600)


@pytest.mark.parametrize(
    "keys",
    ["bedrooms", "furnishingstatus", "airconditioning", ["bedrooms", "bathrooms"], ["stories", "parking"]],
)
def test_group_counts_sum_to_input_size(listings: pd.DataFrame, keys) -> None:
    groups = group_summary(listings, keys)
    assert sum(group["count"] for group in groups) == len(listings)


def test_filter_then_group_matches_group_then_discard(listings: pd.DataFrame) -> None:
    """Aggregating a filtered subset equals the matching groups of the full set."""

    filtered_groups = group_summary(filter_listings(listings, bedrooms="small"), "bedrooms")
    full_groups = [group for group in group_summary(listings, "bedrooms") if 1 <= group["bedrooms"] <= 2]

    assert filtered_groups == full_groups


def test_group_summary_keeps_small_groups_by_default(listings: pd.DataFrame) -> None:
    assert len(group_summary(listings, "bedrooms")) == 5


def test_group_summary_drops_groups_below_threshold(listings: pd.DataFrame) -> None:
    groups = group_summary(listings, "bedrooms", min_samples=2)
    assert [group["bedrooms"] for group in groups] == [2, 3, 4]


def test_group_summary_returns_native_key_types(listings: pd.DataFrame) -> None:
    groups = group_summary(listings, ["airconditioning", "bedrooms"])
    assert all(type(group["airconditioning"]) is bool for group in groups)
    assert all(type(group["bedrooms"]) is int for group in groups)


def test_count_by_preserves_first_seen_order(listings: pd.DataFrame) -> None:
    counts = count_by(listings, "furnishingstatus")
    assert list(counts.items()) == [("unfurnished", 2), ("semi-furnished", 5), ("furnished", 2)]


def test_count_by_accepts_row_function(listings: pd.DataFrame) -> None:
    counts = count_by(listings, lambda row: "AC" if row["airconditioning"] else "No AC")
    assert counts == {"No AC": 6, "AC": 3}


def test_count_by_returns_native_labels(listings: pd.DataFrame) -> None:
    counts = count_by(listings, "airconditioning")

    assert counts == {False: 6, True: 3}
    assert all(type(label) is bool for label in counts)


def test_price_per_area_guards_zero_area() -> None:
    frame = make_frame([make_listing(price=500_000, area=1000), make_listing(area=0.0)])
    ratios = price_per_area(frame)

    assert ratios.iloc[0] == pytest.approx(500)
    assert math.isnan(ratios.iloc[1])
    assert summarize_group(frame)["mean_price_per_area"] == pytest.approx(500)


def test_cross_tabulate_cells(listings: pd.DataFrame) -> None:
    cells = cross_tabulate(listings, "bedrooms", "bathrooms")

    assert [(cell["x"], cell["y"], cell["count"]) for cell in cells] == [
        (1, 1, 1),
        (2, 1, 2),
        (3, 1, 1),
        (3, 2, 2),
        (4, 2, 1),
        (4, 3, 1),
        (5, 3, 1),
    ]
    assert cells[3]["avg_price"] == pytest.approx(6_350_000)


def test_summarize_prices(listings: pd.DataFrame) -> None:
    stats = summarize_prices(listings)
    assert stats["count"] == 9
    assert stats["min_price"] == 1_800_000
    assert stats["max_price"] == 12_000_000
    assert stats["median_price"] == 5_500_000


def test_empty_input_yields_zero_counts_without_nan(empty_listings: pd.DataFrame) -> None:
    """Every aggregation path tolerates an empty subset."""

    assert group_summary(empty_listings, "bedrooms") == []
    assert group_summary(empty_listings, ["bedrooms", "bathrooms"]) == []
    assert count_by(empty_listings, "furnishingstatus") == {}
    assert cross_tabulate(empty_listings, "stories", "parking") == []

    stats = summarize_prices(empty_listings)
    assert stats["count"] == 0
    assert all(value is None for key, value in stats.items() if key != "count")


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), None, "abc"])
def test_safe_float_maps_invalid_values_to_none(value) -> None:
    assert safe_float(value) is None


def test_safe_float_keeps_finite_values() -> None:
    result = safe_float(pd.Series([2.5]).iloc[0])
    assert result == 2.5
    assert not math.isnan(result)
