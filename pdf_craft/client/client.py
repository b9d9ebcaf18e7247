"""Client for the PDF Craft conversion API."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Optional, TypeVar

import httpx
from pydantic import ValidationError

from pdf_craft.client.base import parse_model, unwrap_envelope
from pdf_craft.client.batch import BatchOperationsMixin
from pdf_craft.core.config import Settings
from pdf_craft.core.exceptions import APIException, ConfigurationException, ProtocolException
from pdf_craft.core.logging import get_logger
from pdf_craft.polling.outcome import JobOutcome, interpret_conversion_result
from pdf_craft.polling.poller import CompletionPoller
from pdf_craft.schemas.conversion_schemas import (
    ConversionOptions,
    ConversionResult,
    LocalConversionOptions,
    PollingOptions,
    SubmitResponse,
)
from pdf_craft.schemas.enums import FormatType
from pdf_craft.schemas.upload_schemas import ProgressCallback, UploadPlan, UploadUrlResponse
from pdf_craft.upload.engine import UploadEngine

logger = get_logger(__name__)

OptionsT = TypeVar("OptionsT", bound=PollingOptions)

REMOTE_SCHEMES = ("http://", "https://", "cache://")


def is_remote_location(source: str | Path) -> bool:
    """True if ``source`` is a location the service can fetch by itself."""
    return isinstance(source, str) and source.lower().startswith(REMOTE_SCHEMES)


def _resolve_options(options: Optional[PollingOptions], cls: type[OptionsT], overrides: dict[str, Any]) -> OptionsT:
    try:
        if options is None:
            return cls(**overrides)
        if not isinstance(options, cls):
            return cls.model_validate({**dict(options), **overrides})
        if overrides:
            return type(options).model_validate({**dict(options), **overrides})
        return options
    except ValidationError as e:
        raise ConfigurationException(f"Invalid options: {e}") from e


class PDFCraftClient(BatchOperationsMixin):
    """Client for the PDF Craft API.

    Example:
        >>> async with PDFCraftClient(api_key="...") as client:
        ...     url = await client.convert_local_pdf("document.pdf")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        transfer_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize PDF Craft client.

        Args:
            api_key: Bearer token (default from settings)
            base_url: API base URL (default from settings)
            timeout: Request timeout in seconds (default from settings)
            settings: Settings instance (default: cached environment settings)
            http_client: Pre-built client for API calls
            transfer_client: Pre-built client for part uploads
            clock: Monotonic clock used by the poller
            sleep: Coroutine used for polling and retry waits
        """
        super().__init__(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            settings=settings,
            http_client=http_client,
            transfer_client=transfer_client,
            clock=clock,
            sleep=sleep,
        )

    async def __aenter__(self) -> "PDFCraftClient":
        """Enter async context manager."""
        await self._ensure_client()
        return self

    # Upload

    async def init_upload(self, file_size: int, file_extension: str) -> UploadPlan:
        """Request a multipart upload plan.

        Args:
            file_size: Size of the file in bytes
            file_extension: Extension hint, e.g. ``pdf``

        Returns:
            Upload plan with pre-signed part destinations
        """
        data = await self._request(
            "POST",
            self.settings.upload_init_path,
            json={"fileSize": file_size, "fileExtension": file_extension},
        )
        return parse_model(UploadPlan, unwrap_envelope(data), "upload init")

    async def get_upload_url(self, upload_id: str) -> str:
        """Finalize a multipart upload and return its addressable location."""
        data = await self._request(
            "POST",
            self.settings.upload_url_path,
            json={"uploadId": upload_id},
        )
        return parse_model(UploadUrlResponse, unwrap_envelope(data), "upload url").url

    async def _upload_engine(self, max_retries: Optional[int] = None) -> UploadEngine:
        return UploadEngine(
            planner=self,
            transfer_client=await self._ensure_transfer_client(),
            max_retries=max_retries or self.settings.upload_max_retries,
            sleep=self._sleep,
        )

    async def upload_file(
        self,
        file_path: str | Path,
        progress_callback: Optional[ProgressCallback] = None,
        max_retries: Optional[int] = None,
    ) -> str:
        """Upload a local file and return its addressable location.

        Args:
            file_path: Path to the local file
            progress_callback: Called after each part
            max_retries: Attempts per part (default from settings)

        Returns:
            Location usable as conversion input, e.g. a ``cache://`` URL
        """
        logger.info("uploading_file", path=str(file_path))
        engine = await self._upload_engine(max_retries)
        return await engine.upload_file(file_path, progress_callback=progress_callback)

    async def upload_stream(
        self,
        source: Any,
        total_size: int,
        file_extension: str = "pdf",
        progress_callback: Optional[ProgressCallback] = None,
        max_retries: Optional[int] = None,
    ) -> str:
        """Upload a forward-only byte source of known size."""
        engine = await self._upload_engine(max_retries)
        return await engine.upload_stream(
            source,
            total_size,
            file_extension=file_extension,
            progress_callback=progress_callback,
        )

    # Conversion

    async def submit_conversion(
        self,
        pdf_url: str,
        format_type: FormatType = FormatType.MARKDOWN,
        model: Optional[str] = None,
        includes_footnotes: bool = False,
        ignore_pdf_errors: bool = True,
        ignore_ocr_errors: bool = True,
    ) -> str:
        """Submit a PDF conversion task.

        Args:
            pdf_url: Addressable location of the PDF
            format_type: Output format
            model: Conversion model (default from settings)
            includes_footnotes: Process footnotes
            ignore_pdf_errors: Ignore PDF parsing errors
            ignore_ocr_errors: Ignore OCR recognition errors

        Returns:
            Session ID of the submitted task

        Raises:
            APIException: If the request fails or the service rejects it
            ProtocolException: If an accepted submission has no session ID
        """
        format_value = FormatType(format_type).value
        path = self.settings.submit_path.format(format=format_value)
        payload = {
            "pdfURL": pdf_url,
            "model": model or self.settings.default_model,
            "includesFootnotes": includes_footnotes,
            "ignorePdfErrors": ignore_pdf_errors,
            "ignoreOcrErrors": ignore_ocr_errors,
        }

        logger.info("submitting_conversion", pdf_url=pdf_url, format=format_value, model=payload["model"])
        data = await self._request("POST", path, json=payload)
        result = parse_model(SubmitResponse, data, "submit")

        if not result.success:
            raise APIException(
                f"Failed to submit task: {result.error or 'Unknown error'}",
                details={"pdf_url": pdf_url, "error": result.error},
            )
        if not result.session_id:
            raise ProtocolException(
                "Submission accepted but sessionID missing in response",
                details={"pdf_url": pdf_url},
            )

        logger.info("conversion_submitted", session_id=result.session_id)
        return result.session_id

    async def get_conversion_result(
        self,
        session_id: str,
        format_type: FormatType = FormatType.MARKDOWN,
    ) -> ConversionResult:
        """Query the current state of a conversion task."""
        path = self.settings.result_path.format(
            format=FormatType(format_type).value,
            session_id=session_id,
        )
        data = await self._request("GET", path)
        return parse_model(ConversionResult, data, "conversion result")

    async def wait_for_completion(
        self,
        session_id: str,
        format_type: FormatType = FormatType.MARKDOWN,
        options: Optional[PollingOptions] = None,
        **overrides: Any,
    ) -> str:
        """Poll a conversion task until it finishes.

        Args:
            session_id: Session ID from submit_conversion
            format_type: Output format the task was submitted with
            options: Polling configuration
            **overrides: Individual PollingOptions fields

        Returns:
            Download URL of the converted document

        Raises:
            ConversionFailedException: If the task fails
            ConversionTimeoutException: If max_wait_ms elapses first
            ProtocolException: If a completed task has no download URL
        """
        base = options.polling_options() if options is not None else None
        polling = _resolve_options(base, PollingOptions, overrides)
        poller = CompletionPoller(polling, clock=self._clock, sleep=self._sleep)

        async def check() -> JobOutcome:
            result = await self.get_conversion_result(session_id, format_type)
            return interpret_conversion_result(session_id, result)

        return await poller.wait(session_id, check)

    async def _submit_and_wait(self, pdf_url: str, options: ConversionOptions) -> str:
        session_id = await self.submit_conversion(
            pdf_url,
            format_type=options.format_type,
            model=options.model,
            includes_footnotes=options.includes_footnotes,
            ignore_pdf_errors=options.ignore_pdf_errors,
            ignore_ocr_errors=options.ignore_ocr_errors,
        )
        if not options.wait:
            return session_id
        return await self.wait_for_completion(session_id, options.format_type, options)

    async def convert(
        self,
        pdf_url: str,
        options: Optional[ConversionOptions] = None,
        **overrides: Any,
    ) -> str:
        """Convert a PDF that is already reachable by the service.

        Returns the download URL when ``wait`` is true (default), otherwise the
        session ID.
        """
        resolved = _resolve_options(options, ConversionOptions, overrides)
        return await self._submit_and_wait(pdf_url, resolved)

    async def convert_local_pdf(
        self,
        file_path: str | Path,
        options: Optional[LocalConversionOptions] = None,
        **overrides: Any,
    ) -> str:
        """Upload a local PDF, then convert it.

        Returns the download URL when ``wait`` is true (default), otherwise the
        session ID.
        """
        resolved = _resolve_options(options, LocalConversionOptions, overrides)
        location = await self.upload_file(
            file_path,
            progress_callback=resolved.progress_callback,
            max_retries=resolved.upload_max_retries,
        )
        return await self._submit_and_wait(location, resolved)

    async def convert_source(
        self,
        source: str | Path,
        options: Optional[LocalConversionOptions] = None,
        **overrides: Any,
    ) -> str:
        """Convert a remote location or a local path, uploading only the latter."""
        if is_remote_location(source):
            resolved = _resolve_options(options, LocalConversionOptions, overrides)
            return await self._submit_and_wait(str(source), resolved)
        return await self.convert_local_pdf(source, options, **overrides)
