"""Multipart upload engine with resumable, sequential part transfer."""

import asyncio
import os
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Optional, Protocol

import aiofiles
import httpx

from pdf_craft.core.exceptions import InputException, ProtocolException, TransferException
from pdf_craft.core.logging import get_logger
from pdf_craft.schemas.upload_schemas import ProgressCallback, UploadPlan, UploadProgress
from pdf_craft.upload.chunk_reader import ChunkReader

logger = get_logger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_EXTENSION = "pdf"


class UploadPlanner(Protocol):
    """Remote side of a multipart upload."""

    async def init_upload(self, file_size: int, file_extension: str) -> UploadPlan:
        """Request an upload plan for a file of the given size."""
        ...

    async def get_upload_url(self, upload_id: str) -> str:
        """Finalize the upload and return its addressable location."""
        ...


def file_extension_hint(file_path: str | Path) -> str:
    """Content-type hint sent to the planner: lower-case extension without the dot."""
    return Path(file_path).suffix.lstrip(".").lower() or DEFAULT_EXTENSION


class UploadEngine:
    """Uploads a byte source part by part according to a server-issued plan.

    Parts are processed strictly in ascending order because the source is read
    forward only. Parts the plan reports as already uploaded are skipped but
    still counted towards progress.
    """

    def __init__(
        self,
        planner: UploadPlanner,
        transfer_client: httpx.AsyncClient,
        max_retries: int = DEFAULT_MAX_RETRIES,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize upload engine.

        Args:
            planner: Provides upload plans and finalizes uploads
            transfer_client: HTTP client used for PUTs to pre-signed destinations
            max_retries: Attempts per part
            sleep: Coroutine used for backoff delays
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.planner = planner
        self.transfer_client = transfer_client
        self.max_retries = max_retries
        self._sleep = sleep

    async def upload_file(
        self,
        file_path: str | Path,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> str:
        """Upload a local file.

        Args:
            file_path: Path to the file
            progress_callback: Called after each part with an UploadProgress

        Returns:
            Addressable location of the uploaded file

        Raises:
            InputException: If the file is missing or unreadable
            TransferException: If a part fails after all retries
        """
        path = Path(file_path)
        if not path.is_file():
            raise InputException(f"File not found: {path}", path=str(path))
        if not os.access(path, os.R_OK):
            raise InputException(f"File is not readable: {path}", path=str(path))

        try:
            file_size = path.stat().st_size
            handle = await aiofiles.open(path, "rb")
        except OSError as e:
            raise InputException(f"Cannot read file {path}: {e}", path=str(path)) from e

        try:
            return await self.upload_stream(
                handle,
                file_size,
                file_extension=file_extension_hint(path),
                progress_callback=progress_callback,
            )
        finally:
            await handle.close()

    async def upload_stream(
        self,
        source: Any,
        total_size: int,
        file_extension: str = DEFAULT_EXTENSION,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> str:
        """Upload a forward-only byte source of known size.

        Args:
            source: Object with a ``read(size)`` method, sync or async
            total_size: Number of bytes the source holds
            file_extension: Content-type hint for the planner
            progress_callback: Called after each part with an UploadProgress

        Returns:
            Addressable location of the uploaded file
        """
        plan = await self.planner.init_upload(total_size, file_extension)
        logger.info(
            "upload_plan_received",
            upload_id=plan.upload_id,
            total_bytes=total_size,
            part_size=plan.part_size,
            total_parts=plan.total_parts,
            already_uploaded=len(plan.uploaded_parts),
        )

        reader = ChunkReader(source, total_size=total_size)
        uploaded_bytes = 0

        for part_number in range(1, plan.total_parts + 1):
            if plan.is_uploaded(part_number):
                await reader.skip(plan.part_size)
                uploaded_bytes = min(uploaded_bytes + plan.part_size, total_size)
                logger.debug("upload_part_skipped", upload_id=plan.upload_id, part=part_number)
            else:
                destination = plan.destination_for(part_number)
                if not destination:
                    raise ProtocolException(
                        f"Upload plan has no destination for part {part_number}",
                        details={"upload_id": plan.upload_id, "part_number": part_number},
                    )

                chunk = await reader.read(plan.part_size)
                await self._transfer_part(part_number, destination, chunk)
                uploaded_bytes += len(chunk)

            if progress_callback is not None:
                progress_callback(
                    UploadProgress(
                        uploaded_bytes=uploaded_bytes,
                        total_bytes=total_size,
                        current_part=part_number,
                        total_parts=plan.total_parts,
                    )
                )

        if uploaded_bytes != total_size:
            raise ProtocolException(
                f"Upload plan covers {uploaded_bytes} of {total_size} bytes",
                details={
                    "upload_id": plan.upload_id,
                    "uploaded_bytes": uploaded_bytes,
                    "total_bytes": total_size,
                    "part_size": plan.part_size,
                    "total_parts": plan.total_parts,
                },
            )

        location = await self.planner.get_upload_url(plan.upload_id)
        logger.info("upload_complete", upload_id=plan.upload_id, uploaded_bytes=uploaded_bytes)
        return location

    async def _transfer_part(self, part_number: int, destination: str, chunk: bytes) -> None:
        """PUT one part with retry and exponential backoff.

        Raises:
            TransferException: If all attempts fail
        """
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                response = await self.transfer_client.put(destination, content=chunk)
                if not response.is_success:
                    raise httpx.HTTPStatusError(
                        f"Unexpected status {response.status_code} for part {part_number}",
                        request=response.request,
                        response=response,
                    )

                logger.debug("upload_part_done", part=part_number, size=len(chunk), attempt=attempt + 1)
                return

            except httpx.HTTPError as e:
                last_error = e
                logger.warning(
                    "upload_part_failed",
                    part=part_number,
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    error=str(e),
                )

            # Exponential backoff
            if attempt < self.max_retries - 1:
                wait_time = 2**attempt
                logger.debug("retrying_upload_part", part=part_number, wait_time=wait_time)
                await self._sleep(wait_time)

        raise TransferException(
            part_number,
            self.max_retries,
            details={"last_error": str(last_error)},
        ) from last_error
