"""Wire-level enumerations."""

import enum


class FormatType(str, enum.Enum):
    """Conversion output format."""

    MARKDOWN = "markdown"
    EPUB = "epub"


class PollingStrategy(float, enum.Enum):
    """Backoff factor presets for the completion poller."""

    FIXED = 1.0
    EXPONENTIAL = 1.5
    AGGRESSIVE = 2.0


class ConversionState(str, enum.Enum):
    """State reported by the conversion result endpoint."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class BatchStatus(str, enum.Enum):
    """Batch status."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    PAUSED = "paused"

    @property
    def is_terminal(self) -> bool:
        return self in (BatchStatus.COMPLETED, BatchStatus.FAILED, BatchStatus.CANCELLED)


class JobStatus(str, enum.Enum):
    """Status of a single job inside a batch."""

    PENDING = "pending"
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    PAUSED = "paused"
