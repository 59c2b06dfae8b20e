"""Pytest fixtures shared across the analytics and API tests."""

from __future__ import annotations

import pandas as pd
import pytest

from analytics.dataset import reload_dataframe

COLUMNS = (
    "price",
    "area",
    "bedrooms",
    "bathrooms",
    "stories",
    "mainroad",
    "guestroom",
    "basement",
    "hotwaterheating",
    "airconditioning",
    "parking",
    "prefarea",
    "furnishingstatus",
)

DTYPES = {
    "price": float,
    "area": float,
    "bedrooms": int,
    "bathrooms": int,
    "stories": int,
    "parking": int,
    "mainroad": bool,
    "guestroom": bool,
    "basement": bool,
    "hotwaterheating": bool,
    "airconditioning": bool,
    "prefarea": bool,
    "furnishingstatus": str,
}


def make_listing(**overrides) -> dict:
    """Return one listing row with neutral defaults."""

    row = {
        "price": 4_000_000.0,
        "area": 5000.0,
        "bedrooms": 3,
        "bathrooms": 1,
        "stories": 2,
        "mainroad": True,
        "guestroom": False,
        "basement": False,
        "hotwaterheating": False,
        "airconditioning": False,
        "parking": 0,
        "prefarea": False,
        "furnishingstatus": "semi-furnished",
    }
    row.update(overrides)
    return row


def make_frame(rows: list[dict]) -> pd.DataFrame:
    """Build a listings frame in the normalized column order."""

    return pd.DataFrame(rows, columns=list(COLUMNS)).astype(DTYPES)


@pytest.fixture
def listings() -> pd.DataFrame:
    """A small hand-built market with every bedroom segment represented."""

    return make_frame(
        [
            make_listing(price=1_800_000, area=3000, bedrooms=1, furnishingstatus="unfurnished"),
            make_listing(price=2_500_000, area=3500, bedrooms=2, basement=True, furnishingstatus="unfurnished"),
            make_listing(price=3_900_000, area=4000, bedrooms=2, parking=1),
            make_listing(price=4_000_000, area=5000, bedrooms=3, airconditioning=True, parking=2),
            make_listing(price=5_500_000, area=5500, bedrooms=3, bathrooms=2, stories=3, prefarea=True),
            make_listing(
                price=7_200_000,
                area=6000,
                bedrooms=3,
                bathrooms=2,
                airconditioning=True,
                basement=True,
                parking=3,
                furnishingstatus="furnished",
            ),
            make_listing(price=8_000_000, area=7000, bedrooms=4, bathrooms=2, parking=5),
            make_listing(
                price=9_500_000,
                area=7400,
                bedrooms=4,
                bathrooms=3,
                stories=4,
                airconditioning=True,
                prefarea=True,
                parking=2,
                furnishingstatus="furnished",
            ),
            make_listing(price=12_000_000, area=9000, bedrooms=5, bathrooms=3, guestroom=True, parking=1),
        ]
    )


@pytest.fixture
def empty_listings() -> pd.DataFrame:
    return make_frame([])


@pytest.fixture(autouse=True)
def _fresh_dataset_cache():
    """Each test sees the dataset file configured for it."""

    reload_dataframe()
    yield
    reload_dataframe()
