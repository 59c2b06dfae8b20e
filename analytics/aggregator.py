"""
Grouping and summary statistics over listing frames.

Every statistic returned here is a plain ``float``/``int`` or ``None``; an
empty group never produces NaN or infinity.
"""
from __future__ import annotations

from math import isfinite
from typing import Callable, Dict, Hashable, List, Sequence

import pandas as pd

from .dataset import price_per_area


def safe_float(value) -> float | None:
    """Convert a numeric scalar to ``float``, mapping NaN/inf/None to ``None``."""
    if value is None:
        return None
    try:
        converted = float(value)
    except (TypeError, ValueError):
        return None
    return converted if isfinite(converted) else None


def safe_mean(series: pd.Series) -> float | None:
    if series.empty:
        return None
    return safe_float(series.mean())


def safe_median(series: pd.Series) -> float | None:
    if series.empty:
        return None
    return safe_float(series.median())


def _native(value):
    return value.item() if hasattr(value, "item") else value


def summarize_group(df: pd.DataFrame) -> Dict[str, float | int | None]:
    """Count plus price statistics for one group of listings."""
    return {
        "count": int(len(df)),
        "mean_price": safe_mean(df["price"]),
        "median_price": safe_median(df["price"]),
        "mean_price_per_area": safe_mean(price_per_area(df).dropna()),
    }


def group_summary(
    df: pd.DataFrame,
    keys: str | Sequence[str],
    min_samples: int = 0,
) -> List[Dict]:
    """
    Summarize listings per observed key (or key tuple) in ascending key order.

    Groups with fewer than ``min_samples`` listings are dropped only when a
    positive threshold is given.
    """
    key_list = [keys] if isinstance(keys, str) else list(keys)
    records: List[Dict] = []
    if df.empty:
        return records

    for group_key, group_df in df.groupby(key_list, sort=True, dropna=False):
        if not isinstance(group_key, tuple):
            group_key = (group_key,)
        if min_samples > 0 and len(group_df) < min_samples:
            continue
        record = {column: _native(value) for column, value in zip(key_list, group_key)}
        record.update(summarize_group(group_df))
        records.append(record)
    return records


def count_by(
    df: pd.DataFrame,
    key: str | Callable[[pd.Series], Hashable],
) -> Dict[Hashable, int]:
    """
    Count listings per label in first-seen order.

    ``key`` is either a column name or a function mapping a row to its label.
    """
    if df.empty:
        return {}
    labels = df[key] if isinstance(key, str) else df.apply(key, axis=1)
    sizes = labels.groupby(labels, sort=False).size()
    return {_native(label): int(count) for label, count in sizes.items()}


def cross_tabulate(df: pd.DataFrame, x: str, y: str) -> List[Dict]:
    """
    Count and mean price for every observed ``(x, y)`` pair.
    """
    return [
        {
            "x": record[x],
            "y": record[y],
            "count": record["count"],
            "avg_price": record["mean_price"],
        }
        for record in group_summary(df, [x, y])
    ]


def summarize_prices(df: pd.DataFrame) -> Dict[str, float | int | None]:
    """Overall statistics for a listing subset."""
    if df.empty:
        return {
            "count": 0,
            "mean_price": None,
            "median_price": None,
            "min_price": None,
            "max_price": None,
            "mean_area": None,
        }
    return {
        "count": int(len(df)),
        "mean_price": safe_mean(df["price"]),
        "median_price": safe_median(df["price"]),
        "min_price": safe_float(df["price"].min()),
        "max_price": safe_float(df["price"].max()),
        "mean_area": safe_mean(df["area"]),
    }
