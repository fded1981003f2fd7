"""Dataset identifiers and the raw time-series table layout."""

from __future__ import annotations

from enum import Enum

# Leading header columns of a JHU CSSE global time-series table
PROVINCE_COLUMN = "Province/State"
REGION_COLUMN = "Country/Region"
LATITUDE_COLUMN = "Lat"
LONGITUDE_COLUMN = "Long"

REQUIRED_COLUMNS: tuple[str, ...] = (
    PROVINCE_COLUMN,
    REGION_COLUMN,
    LATITUDE_COLUMN,
    LONGITUDE_COLUMN,
)


class Dataset(str, Enum):
    """Datasets the report downloads."""

    CONFIRMED = "confirmed"
    DEATHS = "deaths"
