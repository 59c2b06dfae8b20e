"""
Utility to load the listings dataset once and expose safe accessors.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

import numpy as np
import pandas as pd
from django.conf import settings

logger = logging.getLogger(__name__)

NUMERIC_COLUMNS = ("price", "area", "bedrooms", "bathrooms", "stories", "parking")
COUNT_COLUMNS = ("bedrooms", "bathrooms", "stories", "parking")
AMENITY_COLUMNS = (
    "mainroad",
    "guestroom",
    "basement",
    "hotwaterheating",
    "airconditioning",
    "prefarea",
)
FURNISHING_STATUSES = ("furnished", "semi-furnished", "unfurnished")
REQUIRED_COLUMNS = NUMERIC_COLUMNS + AMENITY_COLUMNS + ("furnishingstatus",)

_TRUE_VALUES = {"yes", "y", "true", "t", "1"}
_FALSE_VALUES = {"no", "n", "false", "f", "0"}


class DatasetError(RuntimeError):
    """Raised when the listings file cannot be read or lacks required columns."""


def _dataset_path() -> Path:
    return Path(
        getattr(settings, "DATASET_FILE_PATH", settings.BASE_DIR / "media" / "housing.csv")
    )


def _read_file(path: Path) -> pd.DataFrame:
    try:
        if path.suffix.lower() in (".xlsx", ".xls"):
            return pd.read_excel(path)
        return pd.read_csv(path)
    except FileNotFoundError as exc:
        raise DatasetError(f"Listings file not found at {path}") from exc
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError, ValueError, OSError) as exc:
        raise DatasetError(f"Listings file at {path} could not be read") from exc


def _parse_flag(value) -> bool | None:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def normalize_listings(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Coerce a raw frame into the listing schema, dropping malformed rows.
    """
    df = raw.copy()
    df.columns = [str(column).strip().lower() for column in df.columns]

    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise DatasetError(f"Listings data is missing columns: {', '.join(missing)}")

    df = df[list(REQUIRED_COLUMNS)].copy()
    for column in NUMERIC_COLUMNS:
        df[column] = pd.to_numeric(df[column], errors="coerce")
    for column in AMENITY_COLUMNS:
        df[column] = df[column].map(_parse_flag)
    df["furnishingstatus"] = df["furnishingstatus"].astype(str).str.strip().str.lower()

    valid = df[list(NUMERIC_COLUMNS + AMENITY_COLUMNS)].notna().all(axis=1)
    valid &= (df["price"] > 0) & (df["area"] > 0)
    valid &= (df[list(COUNT_COLUMNS)] >= 0).all(axis=1)
    valid &= (df[list(COUNT_COLUMNS)] % 1 == 0).all(axis=1)
    valid &= df["furnishingstatus"].isin(FURNISHING_STATUSES)

    dropped = int((~valid).sum())
    if dropped:
        logger.warning("Dropped %d malformed listing rows", dropped)

    df = df[valid].reset_index(drop=True)
    df["price"] = df["price"].astype(float)
    df["area"] = df["area"].astype(float)
    for column in COUNT_COLUMNS:
        df[column] = df[column].astype(int)
    for column in AMENITY_COLUMNS:
        df[column] = df[column].astype(bool)
    return df


def load_listings(path: Path | str) -> pd.DataFrame:
    """Read and normalize a CSV or Excel listings file."""
    path = Path(path)
    df = normalize_listings(_read_file(path))
    logger.info("Loaded %d listings from %s", len(df), path)
    return df


@lru_cache(maxsize=4)
def _cached_listings(path: str) -> pd.DataFrame:
    return load_listings(path)


def get_dataframe() -> pd.DataFrame:
    """Return a deep copy of the in-memory listings frame."""
    return _cached_listings(str(_dataset_path())).copy(deep=True)


def reload_dataframe() -> None:
    """Forget the cached frame so the next access rereads the configured file."""
    _cached_listings.cache_clear()


def price_per_area(df: pd.DataFrame) -> pd.Series:
    """Price divided by area, NaN where the area is zero."""
    area = df["area"].where(df["area"] != 0)
    return df["price"] / area


def with_derived_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Attach price-per-area and total room columns on a copy of ``df``.
    """
    working = df.copy()
    working["price_per_area"] = price_per_area(working)
    working["total_rooms"] = working["bedrooms"] + working["bathrooms"]
    return working

