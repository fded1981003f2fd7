"""Application configuration via Pydantic Settings v2."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

JHU_BASE_URL = (
    "https://raw.githubusercontent.com/CSSEGISandData/COVID-19/master/"
    "csse_covid_19_data/csse_covid_19_time_series"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "EpiTrend"
    app_env: Literal["development", "testing", "staging", "production"] = "development"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    # Loader
    confirmed_cases_url: str = f"{JHU_BASE_URL}/time_series_covid19_confirmed_global.csv"
    deaths_url: str = f"{JHU_BASE_URL}/time_series_covid19_deaths_global.csv"
    fetch_timeout_seconds: float = 60.0

    # Preparation
    regions: list[str] = ["US", "India"]
    moving_average_window: int = 7

    # Forecasting
    forecast_region: str = "US"
    forecast_horizon: int = 30
    forecast_seasonal_period: int = 365
    forecast_confidence_levels: list[float] = [0.80, 0.95]
    forecast_min_observations: int = 10
    arima_max_p: int = 3
    arima_max_d: int = 2
    arima_max_q: int = 3
    arima_information_criterion: Literal["aicc", "aic", "bic"] = "aicc"

    # Reporting
    report_output_dir: str = "./artifacts/report"
    report_save_figures: bool = True
    report_history_days: int = 120
    report_include_holdout: bool = True

    @field_validator("regions")
    @classmethod
    def validate_regions(cls, v: list[str]) -> list[str]:
        """Validate the region allow-list.

        Args:
            v: Region identifiers as they appear in the Country/Region column.

        Returns:
            Validated region list.

        Raises:
            ValueError: If the list is empty or has duplicates.
        """
        if not v:
            raise ValueError("regions must name at least one region")
        if len(set(v)) != len(v):
            raise ValueError(f"regions must be unique, got {v}")
        return v

    @field_validator("forecast_confidence_levels")
    @classmethod
    def validate_confidence_levels(cls, v: list[float]) -> list[float]:
        """Ensure every confidence level lies strictly between 0 and 1."""
        if not v:
            raise ValueError("forecast_confidence_levels must not be empty")
        for level in v:
            if not 0.0 < level < 1.0:
                raise ValueError(f"Confidence level {level} must be in (0, 1)")
        return sorted(set(v))

    @field_validator("moving_average_window", "forecast_horizon")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Reject non-positive window and horizon sizes."""
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_forecast_region(self) -> "Settings":
        """The forecast region has to be one of the filtered regions."""
        if self.forecast_region not in self.regions:
            raise ValueError(
                f"forecast_region '{self.forecast_region}' is not in regions {self.regions}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
