from __future__ import annotations

import csv
import logging
from typing import Callable, Dict, List

import pandas as pd
from django.conf import settings
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET

from analytics.aggregator import group_summary
from analytics.chart_builder import (
    build_bathroom_ratio_chart,
    build_donut_chart,
    build_feature_premium_chart,
    build_heatmap,
    build_histogram,
    build_price_by_bedrooms_chart,
    build_scatter_chart,
)
from analytics.data_filter import filter_listings
from analytics.dataset import COUNT_COLUMNS, DatasetError, get_dataframe
from analytics.query_parser import (
    ChartOptions,
    FilterSelection,
    InvalidQueryError,
    parse_chart_options,
    parse_filters,
)
from analytics.summary_generator import dataset_overview, generate_summary

logger = logging.getLogger(__name__)

GROUPABLE_COLUMNS = COUNT_COLUMNS + (
    "furnishingstatus",
    "mainroad",
    "guestroom",
    "basement",
    "hotwaterheating",
    "airconditioning",
    "prefarea",
)
MAX_GROUP_KEYS = 2


def _premium_min_sample_size() -> int:
    return getattr(settings, "PREMIUM_MIN_SAMPLE_SIZE", 5)


def _scatter(df: pd.DataFrame, options: ChartOptions) -> Dict:
    return build_scatter_chart(df, color_by=options.color_by)


def _histogram(df: pd.DataFrame, options: ChartOptions) -> Dict:
    return build_histogram(df, variable=options.variable, bin_count=options.bins)


def _donut(df: pd.DataFrame, options: ChartOptions) -> Dict:
    return build_donut_chart(df, analysis=options.analysis)


def _heatmap(df: pd.DataFrame, options: ChartOptions) -> Dict:
    return build_heatmap(df, view=options.view)


def _feature_premium(df: pd.DataFrame, options: ChartOptions) -> Dict:
    return build_feature_premium_chart(
        df,
        min_sample_size=_premium_min_sample_size(),
        statistic=options.statistic,
        basis=options.basis,
    )


def _price_by_bedrooms(df: pd.DataFrame, options: ChartOptions) -> Dict:
    return build_price_by_bedrooms_chart(df)


def _bathroom_ratio(df: pd.DataFrame, options: ChartOptions) -> Dict:
    return build_bathroom_ratio_chart(df)


# chart slug -> (chart type for the front end, payload builder, table rows key)
CHART_HANDLERS: Dict[str, tuple[str, Callable[[pd.DataFrame, ChartOptions], Dict], str | None]] = {
    "scatter": ("scatter", _scatter, "points"),
    "histogram": ("histogram", _histogram, "bins"),
    "donut": ("donut", _donut, "segments"),
    "heatmap": ("heatmap", _heatmap, "cells"),
    "feature-premium": ("horizontal_bar", _feature_premium, "features"),
    "price-by-bedrooms": ("bar", _price_by_bedrooms, None),
    "bathroom-ratio": ("scatter", _bathroom_ratio, "points"),
}


def _build_response(summary: str, chart_type: str, chart_data: Dict, table_data: List[Dict]) -> JsonResponse:
    return JsonResponse(
        {
            "summary": summary,
            "chart_type": chart_type,
            "chart_data": chart_data,
            "table_data": table_data,
        }
    )


def _error(detail: str, status: int) -> JsonResponse:
    return JsonResponse({"detail": detail}, status=status)


def _filtered_listings(selection: FilterSelection) -> pd.DataFrame:
    return filter_listings(
        get_dataframe(),
        bedrooms=selection.bedrooms,
        price=selection.price,
        amenity=selection.amenity,
    )


def _table_rows(chart_data: Dict, rows_key: str | None) -> List[Dict]:
    if rows_key is None:
        return [
            {"label": label, "value": value}
            for label, value in zip(chart_data["labels"], chart_data["values"])
        ]
    return list(chart_data[rows_key])


@require_GET
def overview(request):
    try:
        selection = parse_filters(request.GET)
        df = _filtered_listings(selection)
    except InvalidQueryError as exc:
        logger.debug("Rejected overview query: %s", exc)
        return _error(str(exc), 400)
    except DatasetError as exc:
        logger.error("Listings dataset unavailable: %s", exc)
        return _error("Listings dataset is unavailable.", 503)

    payload = dataset_overview(df)
    payload["filters"] = selection.as_dict()
    return JsonResponse(payload)


@require_GET
def chart_data(request, chart: str):
    handler = CHART_HANDLERS.get(chart)
    if handler is None:
        return _error(f"Unknown chart '{chart}'.", 404)
    chart_type, build, rows_key = handler

    try:
        selection = parse_filters(request.GET)
        options = parse_chart_options(
            request.GET,
            default_bins=getattr(settings, "HISTOGRAM_DEFAULT_BINS", 15),
        )
        df = _filtered_listings(selection)
    except InvalidQueryError as exc:
        logger.debug("Rejected %s chart query: %s", chart, exc)
        return _error(str(exc), 400)
    except DatasetError as exc:
        logger.error("Listings dataset unavailable: %s", exc)
        return _error("Listings dataset is unavailable.", 503)

    payload = build(df, options)
    summary = generate_summary(chart, payload, len(df), selection)
    return _build_response(summary, chart_type, payload, _table_rows(payload, rows_key))


@require_GET
def group_data(request):
    keys = [key.strip().lower() for key in request.GET.getlist("by") if key.strip()]
    if not keys:
        return _error("At least one 'by' query parameter is required.", 400)
    if len(keys) > MAX_GROUP_KEYS:
        return _error(f"At most {MAX_GROUP_KEYS} grouping keys are supported.", 400)
    unknown = [key for key in keys if key not in GROUPABLE_COLUMNS]
    if unknown:
        return _error(
            f"Cannot group by {', '.join(unknown)}. Expected one of: {', '.join(GROUPABLE_COLUMNS)}.",
            400,
        )

    try:
        selection = parse_filters(request.GET)
        df = _filtered_listings(selection)
    except InvalidQueryError as exc:
        return _error(str(exc), 400)
    except DatasetError as exc:
        logger.error("Listings dataset unavailable: %s", exc)
        return _error("Listings dataset is unavailable.", 503)

    groups = group_summary(df, keys, min_samples=getattr(settings, "GROUP_MIN_SAMPLE_SIZE", 0))
    return JsonResponse(
        {
            "keys": keys,
            "total": int(len(df)),
            "filters": selection.as_dict(),
            "groups": groups,
        }
    )


@require_GET
def download_filtered_csv(request):
    try:
        selection = parse_filters(request.GET)
        filtered_df = _filtered_listings(selection)
    except InvalidQueryError as exc:
        return _error(str(exc), 400)
    except DatasetError as exc:
        logger.error("Listings dataset unavailable: %s", exc)
        return _error("Listings dataset is unavailable.", 503)

    csv_buffer = filtered_df.to_csv(index=False, quoting=csv.QUOTE_MINIMAL)

    response = HttpResponse(csv_buffer, content_type="text/csv; charset=utf-8")
    suffix = "all" if selection.is_default else "_".join(
        value for value in (selection.bedrooms, selection.price, selection.amenity) if value != "all"
    )
    response["Content-Disposition"] = f'attachment; filename="listings_{suffix}.csv"'
    return response
