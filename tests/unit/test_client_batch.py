"""Tests for batch management operations."""

import json

import httpx
import pytest

from pdf_craft.core.exceptions import APIException, ConversionTimeoutException
from pdf_craft.schemas import BatchFile, BatchStatus, FormatType, JobStatus, PollingOptions
from tests.conftest import FakeClock, json_response


def batch_payload(status: str = "processing", **extra) -> dict:
    payload = {
        "id": "b-1",
        "userId": "u-1",
        "status": status,
        "outputFormat": "markdown",
        "totalFiles": 2,
        "completedFiles": 1,
        "failedFiles": 0,
        "progress": 50,
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-01T00:01:00Z",
    }
    payload.update(extra)
    return payload


def job_payload(status: str = "completed") -> dict:
    return {
        "id": "j-1",
        "batchId": "b-1",
        "userId": "u-1",
        "outputFormat": "markdown",
        "sourceUrl": "https://example.test/a.pdf",
        "fileName": "a.pdf",
        "status": status,
        "resultUrl": "https://cdn.test/a.md",
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-01T00:01:00Z",
    }


PAGINATION = {"page": 1, "pageSize": 20, "total": 1, "totalPages": 1}


class Recorder:
    """MockTransport handler returning queued responses and recording requests."""

    def __init__(self, *payloads: dict) -> None:
        self.payloads = list(payloads)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        payload = self.payloads[0] if len(self.payloads) == 1 else self.payloads.pop(0)
        return json_response(payload)


@pytest.mark.asyncio
async def test_create_batch(make_client) -> None:
    """Test batch creation payload and response parsing."""
    recorder = Recorder(
        {
            "data": {
                "batchId": "b-1",
                "totalFiles": 2,
                "status": "pending",
                "outputFormat": "epub",
                "createdAt": "2024-01-01T00:00:00Z",
            }
        }
    )
    client = make_client(recorder)

    created = await client.create_batch(
        [
            BatchFile(url="cache://a.pdf", file_name="a.pdf", file_size=10),
            {"url": "https://example.test/b.pdf", "fileName": "b.pdf"},
        ],
        format_type=FormatType.EPUB,
    )

    assert created.batch_id == "b-1"
    assert created.total_files == 2
    request = recorder.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/batches"
    assert json.loads(request.content) == {
        "files": [
            {"url": "cache://a.pdf", "fileName": "a.pdf", "fileSize": 10},
            {"url": "https://example.test/b.pdf", "fileName": "b.pdf"},
        ],
        "outputFormat": "epub",
        "includesFootnotes": False,
    }


@pytest.mark.asyncio
async def test_get_batch(make_client) -> None:
    """Test batch detail retrieval."""
    client = make_client(Recorder({"data": batch_payload()}))

    detail = await client.get_batch("b-1")

    assert detail.id == "b-1"
    assert detail.status == BatchStatus.PROCESSING
    assert detail.progress == 50


@pytest.mark.asyncio
async def test_get_batches_with_filter(make_client) -> None:
    """Test pagination and status query parameters."""
    recorder = Recorder({"data": {"batches": [batch_payload()], "pagination": PAGINATION}})
    client = make_client(recorder)

    listing = await client.get_batches(page=2, page_size=5, status=BatchStatus.PROCESSING)

    assert len(listing.batches) == 1
    assert listing.pagination.total_pages == 1
    params = recorder.requests[0].url.params
    assert params["page"] == "2"
    assert params["pageSize"] == "5"
    assert params["status"] == "processing"


@pytest.mark.asyncio
async def test_get_batch_jobs_and_job(make_client) -> None:
    """Test job listing and single job retrieval."""
    recorder = Recorder(
        {"data": {"jobs": [job_payload()], "pagination": PAGINATION}},
        {"data": job_payload("failed")},
    )
    client = make_client(recorder)

    jobs = await client.get_batch_jobs("b-1", status=JobStatus.COMPLETED)
    job = await client.get_job("j-1")

    assert jobs.jobs[0].result_url == "https://cdn.test/a.md"
    assert job.status == JobStatus.FAILED
    assert [r.url.path for r in recorder.requests] == ["/v1/batches/b-1/jobs", "/v1/jobs/j-1"]
    assert recorder.requests[0].url.params["status"] == "completed"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("start_batch", "/v1/batches/b-1/start"),
        ("pause_batch", "/v1/batches/b-1/pause"),
        ("resume_batch", "/v1/batches/b-1/resume"),
        ("cancel_batch", "/v1/batches/b-1/cancel"),
        ("retry_failed_jobs", "/v1/batches/b-1/retry"),
    ],
)
async def test_batch_actions(make_client, method: str, path: str) -> None:
    """Test batch control endpoints."""
    recorder = Recorder({"data": {"batchId": "b-1", "queuedJobs": 2}})
    client = make_client(recorder)

    response = await getattr(client, method)("b-1")

    assert response.batch_id == "b-1"
    assert recorder.requests[0].method == "POST"
    assert recorder.requests[0].url.path == path


@pytest.mark.asyncio
async def test_job_actions(make_client) -> None:
    """Test single job control endpoints."""
    recorder = Recorder({"data": {"jobId": "j-1", "status": "cancelled"}})
    client = make_client(recorder)

    cancelled = await client.cancel_job("j-1")
    await client.retry_job("j-1")

    assert cancelled.job_id == "j-1"
    assert [r.url.path for r in recorder.requests] == ["/v1/jobs/j-1/cancel", "/v1/jobs/j-1/retry"]


@pytest.mark.asyncio
async def test_concurrent_status(make_client) -> None:
    """Test concurrency status retrieval."""
    client = make_client(
        Recorder({"data": {"maxConcurrentJobs": 5, "currentRunningJobs": 2, "canSubmitNewJob": True}})
    )

    status = await client.get_concurrent_status()

    assert status.max_concurrent_jobs == 5
    assert status.can_submit_new_job is True


@pytest.mark.asyncio
async def test_batch_not_found(make_client) -> None:
    """Test that a missing batch surfaces the HTTP status."""
    client = make_client(lambda request: json_response({"message": "not found"}, status_code=404))

    with pytest.raises(APIException) as exc_info:
        await client.get_batch("missing")

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_wait_for_batch(make_client, fake_clock: FakeClock) -> None:
    """Test polling a batch until it reaches a terminal status."""
    recorder = Recorder(
        {"data": batch_payload("pending")},
        {"data": batch_payload("processing")},
        {"data": batch_payload("failed", failedFiles=1)},
    )
    client = make_client(recorder)

    detail = await client.wait_for_batch("b-1")

    assert detail.status == BatchStatus.FAILED
    assert detail.failed_files == 1
    assert len(recorder.requests) == 3
    assert fake_clock.sleeps == [1.0, 1.5]


@pytest.mark.asyncio
async def test_wait_for_batch_timeout(make_client) -> None:
    """Test that a batch that never settles times out."""
    client = make_client(Recorder({"data": batch_payload("processing")}))

    with pytest.raises(ConversionTimeoutException) as exc_info:
        await client.wait_for_batch("b-1", PollingOptions(max_wait_ms=2000))

    assert exc_info.value.job_id == "b-1"
