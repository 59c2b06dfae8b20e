"""Tests for the listing filters and the dashboard's named segments."""

from __future__ import annotations

import pandas as pd
import pytest

from analytics.data_filter import (
    filter_by_amenity,
    filter_by_bedrooms,
    filter_by_min_parking,
    filter_by_price,
    filter_listings,
)


def test_filter_by_bedrooms_is_inclusive(listings: pd.DataFrame) -> None:
    """Both bedroom bounds are kept."""

    filtered = filter_by_bedrooms(listings, 2, 3)
    assert sorted(filtered["bedrooms"].tolist()) == [2, 2, 3, 3, 3]


def test_filter_by_price_open_upper_bound(listings: pd.DataFrame) -> None:
    """A missing maximum keeps everything at or above the minimum."""

    filtered = filter_by_price(listings, 8_000_000, None)
    assert filtered["price"].tolist() == [8_000_000, 9_500_000, 12_000_000]


def test_filter_by_amenity_and_parking(listings: pd.DataFrame) -> None:
    """Boolean amenities keep flagged rows; parking means at least one space."""

    assert len(filter_by_amenity(listings, "airconditioning")) == 3
    assert len(filter_by_amenity(listings, "parking")) == 6
    assert len(filter_by_min_parking(listings, 2)) == 4


def test_filter_by_amenity_rejects_unknown_column(listings: pd.DataFrame) -> None:
    with pytest.raises(KeyError):
        filter_by_amenity(listings, "pool")


@pytest.mark.parametrize(
    ("bedrooms", "price", "amenity", "expected"),
    [
        ("all", "all", "all", 9),
        ("small", "all", "all", 3),
        ("medium", "all", "all", 3),
        ("large", "all", "all", 3),
        ("all", "affordable", "all", 4),
        ("all", "premium", "all", 4),
        ("all", "luxury", "all", 3),
        ("all", "all", "ac", 3),
        ("all", "all", "basement", 2),
        ("all", "all", "parking", 4),
        ("medium", "premium", "all", 3),
        ("medium", "premium", "ac", 2),
    ],
)
def test_filter_listings_segments(
    listings: pd.DataFrame, bedrooms: str, price: str, amenity: str, expected: int
) -> None:
    """Named segments combine with AND."""

    filtered = filter_listings(listings, bedrooms=bedrooms, price=price, amenity=amenity)
    assert len(filtered) == expected


def test_filter_listings_does_not_mutate_source(listings: pd.DataFrame) -> None:
    """Filtering returns a new frame and leaves the source untouched."""

    before = listings.copy(deep=True)
    filtered = filter_listings(listings, bedrooms="large")
    filtered.loc[:, "price"] = 0.0

    pd.testing.assert_frame_equal(listings, before)


def test_filter_listings_can_return_empty(listings: pd.DataFrame) -> None:
    filtered = filter_listings(listings, bedrooms="small", price="luxury")
    assert filtered.empty
    assert list(filtered.columns) == list(listings.columns)
