"""Pydantic schemas and column names for the preparation pipeline.

Preparation config is:
- Immutable (frozen=True) so one run uses one configuration
- Hashable (config_hash) for log correlation
"""

from __future__ import annotations

import hashlib

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Tidy / joined / daily column names
REGION = "region"
DATE = "date"
VALUE = "value"
CUMULATIVE_CASES = "cumulative_cases"
CUMULATIVE_DEATHS = "cumulative_deaths"
DAILY_CASES = "daily_cases"
DAILY_DEATHS = "daily_deaths"

# Header format of the date columns, e.g. "1/22/20"
DATE_HEADER_FORMAT = "%m/%d/%y"


def average_column(column: str, window: int) -> str:
    """Name of the trailing-average column, e.g. daily_cases_avg7."""
    return f"{column}_avg{window}"


class PreparationConfig(BaseModel):
    """Configuration for reshaping, joining, differencing and smoothing.

    Attributes:
        regions: Region allow-list (values of the Country/Region column).
        window: Trailing moving-average window size.
        strict_join: Raise JoinError when cases and deaths share no rows.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    regions: tuple[str, ...] = Field(
        default=("US", "India"),
        description="Regions to keep, in report order",
    )
    window: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Trailing moving-average window in days",
    )
    strict_join: bool = Field(default=False)

    @field_validator("regions")
    @classmethod
    def validate_regions(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Ensure the allow-list is non-empty and has no duplicates."""
        if not v:
            raise ValueError("At least one region must be specified")
        if len(set(v)) != len(v):
            raise ValueError("Regions must be unique")
        return v

    def config_hash(self) -> str:
        """Generate deterministic hash of configuration.

        Returns:
            16-character hex string hash of config JSON.
        """
        config_json = self.model_dump_json()
        return hashlib.sha256(config_json.encode()).hexdigest()[:16]
