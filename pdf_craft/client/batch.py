"""Batch management operations."""

from collections.abc import Iterable
from typing import Any, Optional, Union

from pdf_craft.client.base import BaseAPIClient, parse_model, unwrap_envelope
from pdf_craft.core.logging import get_logger
from pdf_craft.polling.outcome import Completed, JobOutcome, StillPending
from pdf_craft.polling.poller import CompletionPoller
from pdf_craft.schemas.batch_schemas import (
    BatchDetail,
    BatchFile,
    BatchListResponse,
    ConcurrentStatus,
    CreateBatchResponse,
    JobDetail,
    JobListResponse,
    OperationResponse,
)
from pdf_craft.schemas.conversion_schemas import PollingOptions
from pdf_craft.schemas.enums import BatchStatus, FormatType, JobStatus

logger = get_logger(__name__)


class BatchOperationsMixin(BaseAPIClient):
    """Batch and job endpoints of the PDF Craft API."""

    def _batches(self, *parts: str) -> str:
        return "/".join([self.settings.batches_path.rstrip("/"), *parts])

    def _jobs(self, *parts: str) -> str:
        return "/".join([self.settings.jobs_path.rstrip("/"), *parts])

    async def create_batch(
        self,
        files: Iterable[Union[BatchFile, dict[str, Any]]],
        format_type: FormatType = FormatType.MARKDOWN,
        includes_footnotes: bool = False,
    ) -> CreateBatchResponse:
        """Create a batch of conversion jobs.

        Args:
            files: Files to convert, each with an addressable ``url``
            format_type: Output format for every job
            includes_footnotes: Process footnotes

        Returns:
            Created batch summary
        """
        entries = [f if isinstance(f, BatchFile) else BatchFile.model_validate(f) for f in files]
        payload = {
            "files": [entry.model_dump(by_alias=True, exclude_none=True) for entry in entries],
            "outputFormat": FormatType(format_type).value,
            "includesFootnotes": includes_footnotes,
        }

        logger.info("creating_batch", files=len(entries), format=payload["outputFormat"])
        data = await self._request("POST", self._batches(), json=payload)
        return parse_model(CreateBatchResponse, unwrap_envelope(data), "create batch")

    async def get_batch(self, batch_id: str) -> BatchDetail:
        """Get batch details."""
        data = await self._request("GET", self._batches(batch_id))
        return parse_model(BatchDetail, unwrap_envelope(data), "batch detail")

    async def get_batches(
        self,
        page: int = 1,
        page_size: int = 20,
        status: Optional[BatchStatus] = None,
    ) -> BatchListResponse:
        """List batches, optionally filtered by status."""
        params: dict[str, Any] = {"page": page, "pageSize": page_size}
        if status is not None:
            params["status"] = BatchStatus(status).value

        data = await self._request("GET", self._batches(), params=params)
        return parse_model(BatchListResponse, unwrap_envelope(data), "batch list")

    async def get_batch_jobs(
        self,
        batch_id: str,
        page: int = 1,
        page_size: int = 20,
        status: Optional[JobStatus] = None,
    ) -> JobListResponse:
        """List jobs of a batch, optionally filtered by status."""
        params: dict[str, Any] = {"page": page, "pageSize": page_size}
        if status is not None:
            params["status"] = JobStatus(status).value

        data = await self._request("GET", self._batches(batch_id, "jobs"), params=params)
        return parse_model(JobListResponse, unwrap_envelope(data), "job list")

    async def get_job(self, job_id: str) -> JobDetail:
        """Get details of a single job."""
        data = await self._request("GET", self._jobs(job_id))
        return parse_model(JobDetail, unwrap_envelope(data), "job detail")

    async def _batch_action(self, batch_id: str, action: str) -> OperationResponse:
        logger.info("batch_action", batch_id=batch_id, action=action)
        data = await self._request("POST", self._batches(batch_id, action))
        return parse_model(OperationResponse, unwrap_envelope(data), f"batch {action}")

    async def _job_action(self, job_id: str, action: str) -> OperationResponse:
        logger.info("job_action", job_id=job_id, action=action)
        data = await self._request("POST", self._jobs(job_id, action))
        return parse_model(OperationResponse, unwrap_envelope(data), f"job {action}")

    async def start_batch(self, batch_id: str) -> OperationResponse:
        """Queue all jobs of a batch."""
        return await self._batch_action(batch_id, "start")

    async def pause_batch(self, batch_id: str) -> OperationResponse:
        """Pause a running batch."""
        return await self._batch_action(batch_id, "pause")

    async def resume_batch(self, batch_id: str) -> OperationResponse:
        """Resume a paused batch."""
        return await self._batch_action(batch_id, "resume")

    async def cancel_batch(self, batch_id: str) -> OperationResponse:
        """Cancel a batch."""
        return await self._batch_action(batch_id, "cancel")

    async def retry_failed_jobs(self, batch_id: str) -> OperationResponse:
        """Retry every failed job of a batch."""
        return await self._batch_action(batch_id, "retry")

    async def cancel_job(self, job_id: str) -> OperationResponse:
        """Cancel a single job."""
        return await self._job_action(job_id, "cancel")

    async def retry_job(self, job_id: str) -> OperationResponse:
        """Retry a single failed job."""
        return await self._job_action(job_id, "retry")

    async def get_concurrent_status(self) -> ConcurrentStatus:
        """Get the account's concurrency limits and usage."""
        data = await self._request("GET", self._batches("concurrent-status"))
        return parse_model(ConcurrentStatus, unwrap_envelope(data), "concurrent status")

    async def wait_for_batch(
        self,
        batch_id: str,
        options: Optional[PollingOptions] = None,
        poller: Optional[CompletionPoller] = None,
    ) -> BatchDetail:
        """Poll a batch until it is completed, failed or cancelled.

        A failed or cancelled batch is returned, not raised, so per-job
        results can still be inspected.

        Raises:
            ConversionTimeoutException: If the deadline passes first
        """
        poller = poller or CompletionPoller(options, clock=self._clock, sleep=self._sleep)

        async def check() -> JobOutcome:
            detail = await self.get_batch(batch_id)
            logger.debug(
                "batch_progress",
                batch_id=batch_id,
                status=detail.status.value,
                progress=detail.progress,
            )
            if detail.status.is_terminal:
                return Completed(detail)
            return StillPending(detail.status.value)

        return await poller.wait(batch_id, check)
