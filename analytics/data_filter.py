from __future__ import annotations

from typing import Dict, Tuple

import pandas as pd

from .dataset import AMENITY_COLUMNS

ALL = "all"

BEDROOM_SEGMENTS: Dict[str, Tuple[int, int]] = {
    "small": (1, 2),
    "medium": (3, 3),
    "large": (4, 6),
}

PRICE_SEGMENTS: Dict[str, Tuple[float, float | None]] = {
    "affordable": (0, 4_000_000),
    "premium": (4_000_000, 8_000_000),
    "luxury": (8_000_000, None),
}

# preset name -> (amenity column, minimum parking spaces)
AMENITY_PRESETS: Dict[str, Tuple[str | None, int | None]] = {
    "ac": ("airconditioning", None),
    "basement": ("basement", None),
    "parking": (None, 2),
}


def _all_rows(frame: pd.DataFrame | pd.Series) -> pd.Series:
    return pd.Series([True] * len(frame), index=frame.index, dtype=bool)


def _range_mask(series: pd.Series, minimum: float | None, maximum: float | None) -> pd.Series:
    mask = _all_rows(series)
    if minimum is not None:
        mask &= series >= minimum
    if maximum is not None:
        mask &= series <= maximum
    return mask


def filter_by_bedrooms(
    df: pd.DataFrame,
    min_bedrooms: int | None = None,
    max_bedrooms: int | None = None,
) -> pd.DataFrame:
    """
    Keep listings whose bedroom count falls inside the inclusive range.
    """
    return df[_range_mask(df["bedrooms"], min_bedrooms, max_bedrooms)].reset_index(drop=True)


def filter_by_price(
    df: pd.DataFrame,
    min_price: float | None = None,
    max_price: float | None = None,
) -> pd.DataFrame:
    """
    Keep listings priced inside the inclusive range; a missing bound is open.
    """
    return df[_range_mask(df["price"], min_price, max_price)].reset_index(drop=True)


def _amenity_mask(df: pd.DataFrame, amenity: str) -> pd.Series:
    if amenity == "parking":
        return df["parking"] >= 1
    if amenity not in AMENITY_COLUMNS:
        raise KeyError(f"Unknown amenity '{amenity}'")
    return df[amenity].astype(bool)


def filter_by_amenity(df: pd.DataFrame, amenity: str) -> pd.DataFrame:
    """
    Keep listings that have the amenity. ``parking`` means at least one space.
    """
    return df[_amenity_mask(df, amenity)].reset_index(drop=True)


def filter_by_min_parking(df: pd.DataFrame, min_spaces: int) -> pd.DataFrame:
    return df[df["parking"] >= min_spaces].reset_index(drop=True)


def filter_listings(
    df: pd.DataFrame,
    bedrooms: str = ALL,
    price: str = ALL,
    amenity: str = ALL,
) -> pd.DataFrame:
    """
    Apply the dashboard's named segments; every selected control must match.
    """
    mask = _all_rows(df)

    if bedrooms != ALL:
        low, high = BEDROOM_SEGMENTS[bedrooms]
        mask &= _range_mask(df["bedrooms"], low, high)

    if price != ALL:
        low, high = PRICE_SEGMENTS[price]
        mask &= _range_mask(df["price"], low, high)

    if amenity != ALL:
        column, min_parking = AMENITY_PRESETS[amenity]
        if column is not None:
            mask &= _amenity_mask(df, column)
        if min_parking is not None:
            mask &= df["parking"] >= min_parking

    return df[mask].copy().reset_index(drop=True)
