"""Schemas for conversion submission, results and options."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pdf_craft.schemas.enums import FormatType, PollingStrategy
from pdf_craft.schemas.upload_schemas import ProgressCallback

DEFAULT_MAX_WAIT_MS = 7_200_000
DEFAULT_CHECK_INTERVAL_MS = 1_000
DEFAULT_MAX_CHECK_INTERVAL_MS = 5_000
DEFAULT_BACKOFF_FACTOR = 1.5


class SubmitResponse(BaseModel):
    """Response of the submit endpoint."""

    success: bool = False
    session_id: Optional[str] = Field(None, alias="sessionID")
    error: Optional[str] = None


class ConversionResultData(BaseModel):
    """Payload of a completed conversion."""

    download_url: Optional[str] = Field(None, alias="downloadURL")


class ConversionResult(BaseModel):
    """Response of the result endpoint.

    ``state`` is kept as the raw wire string so unknown states can be treated
    as still pending.
    """

    state: str
    data: Optional[ConversionResultData] = None
    error: Optional[str] = None


class PollingOptions(BaseModel):
    """Timing configuration for the completion poller, in milliseconds."""

    model_config = ConfigDict(extra="forbid")

    max_wait_ms: int = Field(default=DEFAULT_MAX_WAIT_MS, gt=0, description="Total deadline")
    check_interval_ms: int = Field(
        default=DEFAULT_CHECK_INTERVAL_MS, gt=0, description="Initial polling interval"
    )
    max_check_interval_ms: int = Field(
        default=DEFAULT_MAX_CHECK_INTERVAL_MS, gt=0, description="Polling interval ceiling"
    )
    backoff_factor: float = Field(
        default=DEFAULT_BACKOFF_FACTOR,
        ge=1.0,
        description="Interval multiplier per iteration, see PollingStrategy",
    )

    @field_validator("backoff_factor", mode="before")
    @classmethod
    def _coerce_strategy(cls, value: Any) -> Any:
        if isinstance(value, PollingStrategy):
            return value.value
        return value

    @model_validator(mode="after")
    def _check_ceiling(self) -> "PollingOptions":
        if self.max_check_interval_ms < self.check_interval_ms:
            raise ValueError("max_check_interval_ms must be >= check_interval_ms")
        return self

    def polling_options(self) -> "PollingOptions":
        """Return only the polling fields of this object."""
        return PollingOptions(
            max_wait_ms=self.max_wait_ms,
            check_interval_ms=self.check_interval_ms,
            max_check_interval_ms=self.max_check_interval_ms,
            backoff_factor=self.backoff_factor,
        )


class ConversionOptions(PollingOptions):
    """Options for a conversion request."""

    format_type: FormatType = Field(default=FormatType.MARKDOWN, description="Output format")
    model: Optional[str] = Field(default=None, description="Conversion model, settings default if unset")
    wait: bool = Field(default=True, description="Wait for completion and return the download URL")
    includes_footnotes: bool = Field(default=False, description="Process footnotes")
    ignore_pdf_errors: bool = Field(default=True, description="Ignore PDF parsing errors")
    ignore_ocr_errors: bool = Field(default=True, description="Ignore OCR recognition errors")


class LocalConversionOptions(ConversionOptions):
    """Options for converting a local file, including upload settings."""

    progress_callback: Optional[ProgressCallback] = Field(default=None, exclude=True)
    upload_max_retries: Optional[int] = Field(default=None, ge=1)
