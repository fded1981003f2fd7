"""Pipeline exceptions.

Every error is fatal to a report run. Each exception records the pipeline
stage that raised it so the driver can tell the user where the run stopped.
"""

from typing import Any

# =============================================================================
# Exception Classes
# =============================================================================


class EpiTrendError(Exception):
    """Base exception for EpiTrend pipeline errors.

    All pipeline-specific exceptions inherit from this class.
    """

    default_stage: str = "pipeline"

    def __init__(
        self,
        message: str,
        code: str = "PIPELINE_ERROR",
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize pipeline error.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code.
            stage: Pipeline stage that failed (defaults to the class stage).
            details: Additional error context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.stage = stage or self.default_stage
        self.details = details or {}

    @property
    def title(self) -> str:
        """Short summary of the problem type."""
        return self.code.replace("_", " ").title()

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


class FetchError(EpiTrendError):
    """Remote or local source could not be read as a table.

    Raised for unreachable URLs, HTTP error statuses and non-tabular payloads.
    """

    default_stage = "loader"

    def __init__(
        self,
        message: str = "Failed to fetch dataset",
        stage: str | None = None,
        details: dict[str, Any] | None = None,
        code: str = "FETCH_ERROR",
    ) -> None:
        super().__init__(message=message, code=code, stage=stage, details=details)


class SchemaError(FetchError):
    """Expected header columns are absent from a fetched table."""

    def __init__(
        self,
        message: str = "Dataset is missing expected columns",
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, stage=stage, details=details, code="SCHEMA_ERROR")


class ParseError(EpiTrendError):
    """A date header or a numeric cell could not be parsed."""

    default_stage = "reshaper"

    def __init__(
        self,
        message: str = "Failed to parse dataset",
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="PARSE_ERROR", stage=stage, details=details)


class JoinError(EpiTrendError):
    """The cases and deaths tables share no (region, date) rows.

    Only raised when a strict join is requested; the default join treats an
    empty overlap as a degenerate empty result.
    """

    default_stage = "merger"

    def __init__(
        self,
        message: str = "No overlapping rows between cases and deaths",
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="JOIN_ERROR", stage=stage, details=details)


class ModelFitError(EpiTrendError):
    """Forecasting input is degenerate or no candidate model could be fitted."""

    default_stage = "forecaster"

    def __init__(
        self,
        message: str = "Failed to fit forecasting model",
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="MODEL_FIT_ERROR", stage=stage, details=details)
