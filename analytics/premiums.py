"""
Amenity premium calculations.

A premium compares listings that have an amenity against those that lack it,
using the median (or mean) price-per-area so that larger homes do not skew
the comparison.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List

import pandas as pd

from .aggregator import safe_float, safe_mean, safe_median
from .dataset import price_per_area

logger = logging.getLogger(__name__)

DEFAULT_MIN_SAMPLE_SIZE = 5
STATISTICS = ("median", "mean")
BASES = ("price_per_area", "price")

AMENITIES: Dict[str, str] = {
    "airconditioning": "Air Conditioning",
    "parking": "Parking Available",
    "prefarea": "Preferred Area",
    "hotwaterheating": "Hot Water Heating",
    "guestroom": "Guest Room",
    "basement": "Basement",
    "mainroad": "Main Road Access",
}


@dataclass(frozen=True)
class FeaturePremium:
    key: str
    name: str
    with_value: float
    without_value: float
    premium: float
    premium_percent: float | None
    sample_size: int
    comparison_size: int
    typical_area: float | None
    base_price: float | None
    with_feature_price: float | None
    typical_premium: float | None

    def as_dict(self) -> Dict:
        return asdict(self)


def _has_amenity(df: pd.DataFrame, amenity: str) -> pd.Series:
    if amenity == "parking":
        return df["parking"] >= 1
    return df[amenity].astype(bool)


def _metric_values(df: pd.DataFrame, basis: str) -> pd.Series:
    if basis == "price":
        return df["price"]
    return price_per_area(df).dropna()


def _central(values: pd.Series, statistic: str) -> float | None:
    return safe_median(values) if statistic == "median" else safe_mean(values)


def _scale(value: float | None, factor: float | None) -> float | None:
    if value is None or factor is None:
        return None
    return safe_float(value * factor)


def compute_premium(
    df: pd.DataFrame,
    amenity: str,
    statistic: str = "median",
    basis: str = "price_per_area",
) -> FeaturePremium | None:
    """
    Compare listings with and without ``amenity``.

    Returns ``None`` when either side of the split is empty or its central
    value cannot be computed.
    """
    if statistic not in STATISTICS:
        raise ValueError(f"statistic must be one of {', '.join(STATISTICS)}")
    if basis not in BASES:
        raise ValueError(f"basis must be one of {', '.join(BASES)}")
    if df.empty:
        return None

    has = _has_amenity(df, amenity)
    with_feature = df[has]
    without_feature = df[~has]
    if with_feature.empty or without_feature.empty:
        return None

    with_value = _central(_metric_values(with_feature, basis), statistic)
    without_value = _central(_metric_values(without_feature, basis), statistic)
    if with_value is None or without_value is None:
        return None

    premium = with_value - without_value
    premium_percent = (premium / without_value) * 100 if without_value != 0 else None

    typical_area = safe_median(df["area"])
    factor = typical_area if basis == "price_per_area" else 1.0

    return FeaturePremium(
        key=amenity,
        name=AMENITIES.get(amenity, amenity),
        with_value=with_value,
        without_value=without_value,
        premium=premium,
        premium_percent=safe_float(premium_percent),
        sample_size=int(len(with_feature)),
        comparison_size=int(len(without_feature)),
        typical_area=typical_area,
        base_price=_scale(without_value, factor),
        with_feature_price=_scale(with_value, factor),
        typical_premium=_scale(premium, factor),
    )


def rank_feature_premiums(
    df: pd.DataFrame,
    min_sample_size: int = DEFAULT_MIN_SAMPLE_SIZE,
    statistic: str = "median",
    basis: str = "price_per_area",
    positive_only: bool = False,
) -> List[FeaturePremium]:
    """
    Premiums for every amenity with enough listings, largest premium first.
    """
    ranked: List[FeaturePremium] = []
    for amenity in AMENITIES:
        result = compute_premium(df, amenity, statistic=statistic, basis=basis)
        if result is None:
            logger.debug("Insufficient data for %s premium", amenity)
            continue
        if result.sample_size < min_sample_size:
            logger.debug(
                "Skipping %s premium: %d listings below minimum %d",
                amenity,
                result.sample_size,
                min_sample_size,
            )
            continue
        if positive_only and result.premium <= 0:
            continue
        ranked.append(result)

    # sorted() is stable, so ties keep amenity order
    return sorted(ranked, key=lambda item: item.premium, reverse=True)
