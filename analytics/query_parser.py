"""
Rule-based parsing of dashboard query-string parameters into filter
selections and per-chart options.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from .chart_builder import (
    DEFAULT_BIN_COUNT,
    DONUT_ANALYSES,
    HEATMAP_VIEWS,
    HISTOGRAM_VARIABLES,
    SCATTER_COLOR_OPTIONS,
)
from .data_filter import ALL, AMENITY_PRESETS, BEDROOM_SEGMENTS, PRICE_SEGMENTS
from .premiums import BASES, STATISTICS

MIN_BINS = 1
MAX_BINS = 100

BEDROOM_CHOICES = (ALL,) + tuple(BEDROOM_SEGMENTS)
PRICE_CHOICES = (ALL,) + tuple(PRICE_SEGMENTS)
AMENITY_CHOICES = (ALL,) + tuple(AMENITY_PRESETS)


class InvalidQueryError(ValueError):
    """Raised when a query parameter holds an unsupported value."""


@dataclass(frozen=True)
class FilterSelection:
    bedrooms: str = ALL
    price: str = ALL
    amenity: str = ALL

    @property
    def is_default(self) -> bool:
        return self.bedrooms == ALL and self.price == ALL and self.amenity == ALL

    def as_dict(self) -> dict:
        return {"bedrooms": self.bedrooms, "price": self.price, "amenity": self.amenity}


@dataclass(frozen=True)
class ChartOptions:
    color_by: str = "bedrooms"
    variable: str = "price"
    bins: int = DEFAULT_BIN_COUNT
    analysis: str = "furnishingstatus"
    view: str = "bedrooms"
    statistic: str = "median"
    basis: str = "price_per_area"


def _choice(params: Mapping[str, str], name: str, choices: Sequence[str], default: str) -> str:
    raw = params.get(name)
    if raw is None or not str(raw).strip():
        return default
    value = str(raw).strip().lower()
    if value not in choices:
        raise InvalidQueryError(
            f"Unsupported value '{raw}' for '{name}'. Expected one of: {', '.join(choices)}."
        )
    return value


def _bins(params: Mapping[str, str], default: int) -> int:
    raw = params.get("bins")
    if raw is None or not str(raw).strip():
        return default
    try:
        value = int(str(raw).strip())
    except ValueError as exc:
        raise InvalidQueryError(f"'bins' must be an integer, got '{raw}'.") from exc
    if not MIN_BINS <= value <= MAX_BINS:
        raise InvalidQueryError(f"'bins' must be between {MIN_BINS} and {MAX_BINS}.")
    return value


def parse_filters(params: Mapping[str, str]) -> FilterSelection:
    """
    Read the bedroom, price and amenity segment controls.
    """
    return FilterSelection(
        bedrooms=_choice(params, "bedrooms", BEDROOM_CHOICES, ALL),
        price=_choice(params, "price", PRICE_CHOICES, ALL),
        amenity=_choice(params, "amenity", AMENITY_CHOICES, ALL),
    )


def parse_chart_options(params: Mapping[str, str], default_bins: int = DEFAULT_BIN_COUNT) -> ChartOptions:
    """
    Read the chart-specific knobs; unspecified values fall back to defaults.
    """
    defaults = ChartOptions(bins=default_bins)
    return ChartOptions(
        color_by=_choice(params, "color_by", SCATTER_COLOR_OPTIONS, defaults.color_by),
        variable=_choice(params, "variable", HISTOGRAM_VARIABLES, defaults.variable),
        bins=_bins(params, defaults.bins),
        analysis=_choice(params, "analysis", DONUT_ANALYSES, defaults.analysis),
        view=_choice(params, "view", tuple(HEATMAP_VIEWS), defaults.view),
        statistic=_choice(params, "statistic", STATISTICS, defaults.statistic),
        basis=_choice(params, "basis", BASES, defaults.basis),
    )
