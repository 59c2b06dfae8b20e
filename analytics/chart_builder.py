from __future__ import annotations

from typing import Dict, Iterable, List

import numpy as np
import pandas as pd

from .aggregator import count_by, cross_tabulate, group_summary, safe_float
from .dataset import with_derived_columns
from .premiums import DEFAULT_MIN_SAMPLE_SIZE, rank_feature_premiums

SCATTER_COLOR_OPTIONS = (
    "bedrooms",
    "bathrooms",
    "stories",
    "furnishingstatus",
    "airconditioning",
    "parking",
)
HISTOGRAM_VARIABLES = (
    "price",
    "area",
    "price_per_area",
    "bedrooms",
    "bathrooms",
    "total_rooms",
)
DONUT_ANALYSES = ("furnishingstatus", "stories", "bedrooms", "location")
HEATMAP_VIEWS = {
    "bedrooms": ("bedrooms", "bathrooms"),
    "bathrooms": ("bathrooms", "stories"),
    "stories": ("stories", "parking"),
}

DEFAULT_BIN_COUNT = 15
DOMAIN_PADDING = 0.05
PARKING_CAP = 3
BEDROOM_DISPLAY_ORDER = (2, 1, 3, 6, 4, 5)


def _sanitize_values(values: Iterable[float | int | None]) -> List[float | None]:
    return [safe_float(value) for value in values]


def _padded_domain(series: pd.Series) -> List[float] | None:
    if series.empty:
        return None
    low, high = float(series.min()), float(series.max())
    padding = (high - low) * DOMAIN_PADDING
    return [max(0.0, low - padding), high + padding]


def _scatter_group(row: pd.Series, color_by: str):
    if color_by == "airconditioning":
        return "With AC" if row["airconditioning"] else "No AC"
    if color_by == "parking":
        return "With Parking" if row["parking"] else "No Parking"
    value = row[color_by]
    return value.item() if hasattr(value, "item") else value


def _legend_order(groups: set) -> List:
    if all(isinstance(group, (int, float)) and not isinstance(group, bool) for group in groups):
        return sorted(groups)
    return sorted(groups, key=str)


def build_scatter_chart(df: pd.DataFrame, color_by: str = "bedrooms") -> Dict:
    """
    Price against area, one point per listing, grouped for colouring.
    """
    points = [
        {
            "area": safe_float(row["area"]),
            "price": safe_float(row["price"]),
            "group": _scatter_group(row, color_by),
        }
        for _, row in df.iterrows()
    ]
    return {
        "color_by": color_by,
        "points": points,
        "x_domain": _padded_domain(df["area"]),
        "y_domain": _padded_domain(df["price"]),
        "legend": _legend_order({point["group"] for point in points}),
    }


def build_histogram(
    df: pd.DataFrame,
    variable: str = "price",
    bin_count: int = DEFAULT_BIN_COUNT,
) -> Dict:
    """
    Uniform-width bins between the variable's min and max; the last bin is closed.
    """
    values = with_derived_columns(df)[variable].dropna().astype(float)
    if values.empty:
        return {"variable": variable, "bins": [], "max_count": 0}

    low, high = float(values.min()), float(values.max())
    width = (high - low) / bin_count
    edges = [low + index * width for index in range(bin_count)] + [high]
    if width:
        counts = [int(count) for count in np.histogram(values.to_numpy(), bins=np.array(edges))[0]]
    else:
        # zero-width range: every value sits on the closed upper edge
        counts = [0] * (bin_count - 1) + [len(values)]

    bins = [
        {"x0": edges[index], "x1": edges[index + 1], "count": counts[index]}
        for index in range(bin_count)
    ]

    return {
        "variable": variable,
        "bins": bins,
        "max_count": max(item["count"] for item in bins),
    }


def _donut_label(row: pd.Series, analysis: str) -> str:
    if analysis == "stories":
        stories = int(row["stories"])
        return f"{stories} {'Story' if stories == 1 else 'Stories'}"
    if analysis == "bedrooms":
        bedrooms = int(row["bedrooms"])
        return f"{bedrooms} {'Bedroom' if bedrooms == 1 else 'Bedrooms'}"
    if analysis == "location":
        return "Preferred Area" if row["prefarea"] else "Standard Area"
    return str(row["furnishingstatus"])


def _bedroom_rank(label: str) -> int:
    count = int(label.split(" ")[0])
    if count in BEDROOM_DISPLAY_ORDER:
        return BEDROOM_DISPLAY_ORDER.index(count)
    return len(BEDROOM_DISPLAY_ORDER)


def build_donut_chart(df: pd.DataFrame, analysis: str = "furnishingstatus") -> Dict:
    """
    Share of listings per category.
    """
    counts = count_by(df, lambda row: _donut_label(row, analysis))
    labels = list(counts)
    if analysis == "bedrooms":
        labels = sorted(labels, key=_bedroom_rank)

    total = len(df)
    segments = [
        {
            "label": label,
            "count": counts[label],
            "percent": safe_float(counts[label] / total * 100) if total else None,
        }
        for label in labels
    ]
    return {"analysis": analysis, "total": total, "segments": segments}


def build_heatmap(df: pd.DataFrame, view: str = "bedrooms") -> Dict:
    """
    Listing count and mean price for each configuration pair.
    """
    x_column, y_column = HEATMAP_VIEWS[view]
    working = df.copy()
    if y_column == "parking":
        working["parking"] = working["parking"].clip(upper=PARKING_CAP)
        y_domain = list(range(PARKING_CAP + 1))
    else:
        y_domain = sorted(int(value) for value in working[y_column].unique())
    x_domain = sorted(int(value) for value in working[x_column].unique())

    cells = cross_tabulate(working, x_column, y_column)
    prices = [cell["avg_price"] for cell in cells if cell["avg_price"] is not None]
    return {
        "view": view,
        "x_key": x_column,
        "y_key": y_column,
        "x_domain": x_domain,
        "y_domain": y_domain,
        "cells": cells,
        "max_avg_price": max(prices) if prices else None,
    }


def build_feature_premium_chart(
    df: pd.DataFrame,
    min_sample_size: int = DEFAULT_MIN_SAMPLE_SIZE,
    statistic: str = "median",
    basis: str = "price_per_area",
) -> Dict:
    """
    Ranked positive amenity premiums for the ROI bar chart.
    """
    premiums = rank_feature_premiums(
        df,
        min_sample_size=min_sample_size,
        statistic=statistic,
        basis=basis,
        positive_only=True,
    )
    return {
        "statistic": statistic,
        "basis": basis,
        "min_sample_size": min_sample_size,
        "features": [premium.as_dict() for premium in premiums],
    }


def build_bar_chart(labels: List[str], values: List[float | int | None]) -> Dict[str, List]:
    """
    Building a simple bar chart payload.
    """
    return {"labels": labels, "values": _sanitize_values(values)}


def build_price_by_bedrooms_chart(df: pd.DataFrame) -> Dict[str, List]:
    """
    Mean price per bedroom count, ascending by bedrooms.
    """
    records = group_summary(df, "bedrooms")
    return build_bar_chart(
        [str(record["bedrooms"]) for record in records],
        [record["mean_price"] for record in records],
    )


def build_bathroom_ratio_chart(df: pd.DataFrame) -> Dict:
    """
    Bathroom-to-bedroom ratio against price; listings without bedrooms are skipped.
    """
    working = with_derived_columns(df[df["bedrooms"] > 0])
    points = [
        {
            "ratio": safe_float(row["bathrooms"] / row["bedrooms"]),
            "price": safe_float(row["price"]),
            "price_per_area": safe_float(row["price_per_area"]),
            "bedrooms": int(row["bedrooms"]),
        }
        for _, row in working.iterrows()
    ]
    return {"points": points, "bedroom_groups": sorted({point["bedrooms"] for point in points})}
