"""
Generate lightweight natural language summaries without external APIs.
"""
from __future__ import annotations

from math import isfinite
from typing import Dict, List

import pandas as pd

from .aggregator import summarize_prices
from .query_parser import FilterSelection

INSUFFICIENT_DATA = "Insufficient data: no listings match the current filters."

SEGMENT_LABELS = {
    "small": "compact (1-2 bedroom)",
    "medium": "family (3 bedroom)",
    "large": "luxury (4+ bedroom)",
    "affordable": "affordable (under $4M)",
    "premium": "premium ($4M-$8M)",
    "luxury": "luxury ($8M+)",
    "ac": "air-conditioned",
    "basement": "basement",
    "parking": "2+ parking space",
}

HISTOGRAM_LABELS = {
    "price": "price",
    "area": "area",
    "price_per_area": "price per sq ft",
    "bedrooms": "bedroom count",
    "bathrooms": "bathroom count",
    "total_rooms": "total rooms",
}


def _format_value(value: float | int | None) -> str:
    if value is None:
        return "N/A"
    if not isinstance(value, (int, float)):
        return str(value)
    if not isfinite(value):
        return "N/A"

    absolute = abs(value)
    if absolute >= 1_000_000_000:
        return f"{value / 1_000_000_000:.2f}B"
    if absolute >= 1_000_000:
        return f"{value / 1_000_000:.2f}M"
    if absolute >= 1_000:
        return f"{value / 1_000:.1f}K"
    if float(absolute).is_integer():
        return f"{int(value)}"
    return f"{value:.2f}"


def _format_currency(value: float | int | None) -> str:
    formatted = _format_value(value)
    if formatted == "N/A":
        return formatted
    if formatted.startswith("-"):
        return f"-${formatted[1:]}"
    return f"${formatted}"


def _scope_phrase(selection: FilterSelection | None) -> str:
    if selection is None or selection.is_default:
        return "across all listings"
    parts: List[str] = [
        SEGMENT_LABELS[value]
        for value in (selection.bedrooms, selection.price, selection.amenity)
        if value in SEGMENT_LABELS
    ]
    return "across " + ", ".join(parts) + " listings"


def dataset_overview(df: pd.DataFrame) -> Dict:
    """
    Headline figures for the stats panel: totals, averages and the price range.
    """
    stats = summarize_prices(df)
    return {
        "total_listings": stats["count"],
        "average_price": stats["mean_price"],
        "average_area": stats["mean_area"],
        "min_price": stats["min_price"],
        "max_price": stats["max_price"],
        "formatted": {
            "average_price": _format_currency(stats["mean_price"]),
            "average_area": (
                f"{round(stats['mean_area']):,} sq ft" if stats["mean_area"] is not None else "N/A"
            ),
            "price_range": (
                f"{_format_currency(stats['min_price'])} - {_format_currency(stats['max_price'])}"
            ),
        },
    }


def _scatter_sentence(payload: Dict) -> str:
    return (
        f"Plotting price against area for {len(payload['points'])} listings, "
        f"coloured by {payload['color_by']}"
    )


def _histogram_sentence(payload: Dict) -> str:
    label = HISTOGRAM_LABELS.get(payload["variable"], payload["variable"])
    peak = max(payload["bins"], key=lambda item: item["count"])
    return (
        f"The most common {label} band is {_format_value(peak['x0'])} to "
        f"{_format_value(peak['x1'])} with {peak['count']} listings"
    )


def _donut_sentence(payload: Dict) -> str:
    largest = max(payload["segments"], key=lambda item: item["count"])
    return (
        f"{largest['label']} is the largest group with {largest['count']} listings "
        f"({largest['percent']:.1f}%)"
    )


def _heatmap_sentence(payload: Dict) -> str:
    priced = [cell for cell in payload["cells"] if cell["avg_price"] is not None]
    top = max(priced, key=lambda cell: cell["avg_price"])
    return (
        f"{top['x']} {payload['x_key']} with {top['y']} {payload['y_key']} commands the highest "
        f"average price at {_format_currency(top['avg_price'])} over {top['count']} listings"
    )


def _premium_sentence(payload: Dict) -> str:
    if not payload["features"]:
        return (
            "No amenity shows a positive premium with at least "
            f"{payload['min_sample_size']} listings"
        )
    top = payload["features"][0]
    percent = top["premium_percent"]
    percent_phrase = f" (+{percent:.1f}%)" if percent is not None else ""
    return (
        f"{top['name']} carries the largest premium, about "
        f"{_format_currency(top['typical_premium'])}{percent_phrase} for a typical home"
    )


def _bar_sentence(payload: Dict) -> str:
    pairs = [
        (label, value) for label, value in zip(payload["labels"], payload["values"]) if value is not None
    ]
    label, value = max(pairs, key=lambda pair: pair[1])
    return f"{label}-bedroom homes have the highest average price at {_format_currency(value)}"


def _ratio_sentence(payload: Dict) -> str:
    return f"Comparing bathroom-to-bedroom ratios for {len(payload['points'])} listings"


SENTENCE_BUILDERS = {
    "scatter": _scatter_sentence,
    "histogram": _histogram_sentence,
    "donut": _donut_sentence,
    "heatmap": _heatmap_sentence,
    "feature-premium": _premium_sentence,
    "price-by-bedrooms": _bar_sentence,
    "bathroom-ratio": _ratio_sentence,
}


def generate_summary(
    chart: str,
    payload: Dict,
    listing_count: int,
    selection: FilterSelection | None = None,
) -> str:
    """
    Produce a deterministic, human-readable summary for a chart payload.
    """
    if listing_count == 0:
        return INSUFFICIENT_DATA
    builder = SENTENCE_BUILDERS.get(chart)
    if builder is None:
        return f"Showing {chart} {_scope_phrase(selection)}."
    return f"{builder(payload)} {_scope_phrase(selection)}."
