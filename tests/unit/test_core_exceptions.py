"""Tests for core exceptions module."""

from pdf_craft.core.exceptions import (
    APIException,
    ConfigurationException,
    ConversionFailedException,
    ConversionTimeoutException,
    InputException,
    PDFCraftException,
    ProtocolException,
    TransferException,
)


def test_base_exception() -> None:
    """Test base PDFCraftException."""
    exc = PDFCraftException("Test error", details={"key": "value"})

    assert str(exc) == "Test error"
    assert exc.message == "Test error"
    assert exc.details == {"key": "value"}


def test_base_exception_no_details() -> None:
    """Test base exception without details."""
    exc = PDFCraftException("Test error")

    assert exc.details == {}


def test_hierarchy() -> None:
    """Test that every error kind derives from the base exception."""
    for exc in (
        APIException("api"),
        ProtocolException("protocol"),
        ConfigurationException("config"),
        InputException("input"),
        TransferException(1, 3),
        ConversionTimeoutException("job", 10.0, 5),
        ConversionFailedException("job", "reason"),
    ):
        assert isinstance(exc, PDFCraftException)

    assert isinstance(ConversionFailedException("job", "reason"), ProtocolException)


def test_api_exception_with_status() -> None:
    """Test API exception with status code."""
    exc = APIException("API error", status_code=502, details={"url": "https://x"})

    assert exc.status_code == 502
    assert exc.details == {"url": "https://x"}
    assert APIException("transport").status_code == 0


def test_transfer_exception_names_part() -> None:
    """Test that TransferException identifies the failed part."""
    exc = TransferException(4, 3, details={"last_error": "boom"})

    assert exc.part_number == 4
    assert "part 4" in str(exc)
    assert exc.details == {"part_number": 4, "attempts": 3, "last_error": "boom"}


def test_timeout_exception_is_builtin_timeout() -> None:
    """Test that ConversionTimeoutException can be caught as TimeoutError."""
    exc = ConversionTimeoutException("job-1", 3100.0, 3000)

    assert isinstance(exc, TimeoutError)
    assert exc.job_id == "job-1"
    assert exc.details["elapsed_ms"] == 3100.0
    assert "job-1" in str(exc)


def test_conversion_failed_carries_reason() -> None:
    """Test that the server-reported reason is in the message."""
    exc = ConversionFailedException("job-2", "bad scan")

    assert "bad scan" in str(exc)
    assert exc.reason == "bad scan"
    assert exc.details["job_id"] == "job-2"


def test_input_exception_path() -> None:
    """Test InputException records the path."""
    exc = InputException("File not found", path="/tmp/missing.pdf")

    assert exc.path == "/tmp/missing.pdf"
    assert exc.details == {"path": "/tmp/missing.pdf"}
