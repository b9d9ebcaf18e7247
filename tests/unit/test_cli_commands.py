"""Tests for CLI commands."""

from collections.abc import Iterator

import pytest
from pytest_mock import MockerFixture
from typer.testing import CliRunner

from pdf_craft import __version__
from pdf_craft.cli.commands import app
from pdf_craft.client import PDFCraftClient
from pdf_craft.core.config import get_settings
from pdf_craft.core.exceptions import ConversionFailedException
from pdf_craft.schemas import BatchStatus, ConversionResult, FormatType, LocalConversionOptions
from pdf_craft.schemas.batch_schemas import BatchDetail

runner = CliRunner()


@pytest.fixture(autouse=True)
def api_key_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Provide credentials through the environment."""
    monkeypatch.setenv("PDF_CRAFT_API_KEY", "cli-key")
    monkeypatch.setenv("PDF_CRAFT_BASE_URL", "https://api.test/v1")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_version() -> None:
    """Test version command."""
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_convert_waits_for_download_url(mocker: MockerFixture) -> None:
    """Test convert prints the download URL."""
    mock_convert = mocker.patch.object(PDFCraftClient, "convert_source", return_value="https://cdn.test/o.md")

    result = runner.invoke(app, ["convert", "cache://a.pdf", "--format", "epub", "--footnotes"])

    assert result.exit_code == 0
    assert "https://cdn.test/o.md" in result.stdout
    source, options = mock_convert.call_args.args
    assert source == "cache://a.pdf"
    assert isinstance(options, LocalConversionOptions)
    assert options.format_type == FormatType.EPUB
    assert options.includes_footnotes is True
    assert options.max_wait_ms == 7_200_000


def test_convert_no_wait_prints_session(mocker: MockerFixture) -> None:
    """Test convert --no-wait prints the session ID."""
    mock_convert = mocker.patch.object(PDFCraftClient, "convert_source", return_value="sess-7")

    result = runner.invoke(app, ["convert", "cache://a.pdf", "--no-wait", "--backoff-factor", "2"])

    assert result.exit_code == 0
    assert "sess-7" in result.stdout
    options = mock_convert.call_args.args[1]
    assert options.wait is False
    assert options.backoff_factor == 2.0


def test_convert_failure_exits_nonzero(mocker: MockerFixture) -> None:
    """Test that client errors exit with code 1."""
    mocker.patch.object(
        PDFCraftClient,
        "convert_source",
        side_effect=ConversionFailedException("sess-1", "bad scan"),
    )

    result = runner.invoke(app, ["convert", "cache://a.pdf"])

    assert result.exit_code == 1


def test_convert_invalid_polling_options(mocker: MockerFixture) -> None:
    """Test that an interval ceiling below the initial interval is rejected."""
    mock_convert = mocker.patch.object(PDFCraftClient, "convert_source")

    result = runner.invoke(
        app,
        ["convert", "cache://a.pdf", "--check-interval-ms", "6000", "--max-check-interval-ms", "5000"],
    )

    assert result.exit_code == 1
    mock_convert.assert_not_called()


def test_missing_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that running without credentials fails cleanly."""
    monkeypatch.delenv("PDF_CRAFT_API_KEY")
    get_settings.cache_clear()

    result = runner.invoke(app, ["status", "sess-1"])

    assert result.exit_code == 1


def test_status(mocker: MockerFixture) -> None:
    """Test status command output."""
    mock_result = mocker.patch.object(
        PDFCraftClient,
        "get_conversion_result",
        return_value=ConversionResult.model_validate(
            {"state": "completed", "data": {"downloadURL": "https://cdn.test/o.md"}}
        ),
    )

    result = runner.invoke(app, ["status", "sess-1"])

    assert result.exit_code == 0
    assert "completed" in result.stdout
    assert "https://cdn.test/o.md" in result.stdout
    mock_result.assert_called_once_with("sess-1", FormatType.MARKDOWN)


def test_batch_status(mocker: MockerFixture) -> None:
    """Test batch-status command output."""
    mocker.patch.object(
        PDFCraftClient,
        "get_batch",
        return_value=BatchDetail.model_validate(
            {
                "id": "b-1",
                "userId": "u-1",
                "status": "processing",
                "outputFormat": "markdown",
                "totalFiles": 4,
                "completedFiles": 2,
                "failedFiles": 1,
                "progress": 75,
                "createdAt": "2024-01-01T00:00:00Z",
                "updatedAt": "2024-01-01T00:01:00Z",
            }
        ),
    )

    result = runner.invoke(app, ["batch-status", "b-1"])

    assert result.exit_code == 0
    assert BatchStatus.PROCESSING.value in result.stdout
    assert "2/4" in result.stdout
