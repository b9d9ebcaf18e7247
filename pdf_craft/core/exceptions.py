"""Custom exceptions for the PDF Craft client."""

from typing import Optional


class PDFCraftException(Exception):
    """Base exception for all PDF Craft client errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        """Initialize exception with message and optional details.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationException(PDFCraftException):
    """Configuration error."""

    pass


class InputException(PDFCraftException):
    """Local source file is missing or unreadable."""

    def __init__(self, message: str, path: Optional[str] = None, details: dict | None = None) -> None:
        """Initialize with the offending path."""
        super().__init__(message, details)
        self.path = path
        if path is not None:
            self.details.setdefault("path", path)


class APIException(PDFCraftException):
    """API call failed at the HTTP or transport level."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        details: dict | None = None,
    ) -> None:
        """Initialize API exception.

        Args:
            message: Error message
            status_code: HTTP status code, 0 for transport faults
            details: Additional error details
        """
        super().__init__(message, details)
        self.status_code = status_code


class ProtocolException(PDFCraftException):
    """Remote response is missing required fields or is malformed."""

    pass


class ConversionFailedException(ProtocolException):
    """Conversion job reported a failed state."""

    def __init__(self, job_id: str, reason: str) -> None:
        """Initialize with job identifier and server-reported reason."""
        super().__init__(
            f"Conversion failed: {reason}",
            details={"job_id": job_id, "reason": reason},
        )
        self.job_id = job_id
        self.reason = reason


class TransferException(PDFCraftException):
    """A part upload failed after exhausting its retries."""

    def __init__(self, part_number: int, attempts: int, details: dict | None = None) -> None:
        """Initialize with the failed part number and attempt count."""
        super().__init__(
            f"Failed to upload part {part_number} after {attempts} attempts",
            details={"part_number": part_number, "attempts": attempts, **(details or {})},
        )
        self.part_number = part_number
        self.attempts = attempts


class ConversionTimeoutException(PDFCraftException, TimeoutError):
    """Polling deadline was reached before the job finished."""

    def __init__(self, job_id: str, elapsed_ms: float, max_wait_ms: int) -> None:
        """Initialize with job identifier and elapsed time."""
        super().__init__(
            f"Conversion timeout for job {job_id} after {elapsed_ms:.0f}ms "
            f"(limit {max_wait_ms}ms)",
            details={"job_id": job_id, "elapsed_ms": elapsed_ms, "max_wait_ms": max_wait_ms},
        )
        self.job_id = job_id
        self.elapsed_ms = elapsed_ms
        self.max_wait_ms = max_wait_ms
