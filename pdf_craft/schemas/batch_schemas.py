"""Schemas for batch management endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pdf_craft.schemas.enums import BatchStatus, JobStatus


class CamelSchema(BaseModel):
    """Base schema accepting camelCase wire names and snake_case attributes."""

    model_config = ConfigDict(populate_by_name=True)


class BatchFile(CamelSchema):
    """File entry when creating a batch."""

    url: str = Field(..., description="Addressable location of the PDF")
    file_name: str = Field(..., alias="fileName", description="Display file name")
    file_size: Optional[int] = Field(None, alias="fileSize", description="File size in bytes")


class CreateBatchResponse(CamelSchema):
    """Response of batch creation."""

    batch_id: str = Field(..., alias="batchId")
    total_files: int = Field(..., alias="totalFiles")
    status: str
    output_format: str = Field(..., alias="outputFormat")
    created_at: str = Field(..., alias="createdAt")


class BatchDetail(CamelSchema):
    """Batch details."""

    id: str
    user_id: str = Field(..., alias="userId")
    status: BatchStatus
    output_format: str = Field(..., alias="outputFormat")
    includes_footnotes: bool = Field(False, alias="includesFootnotes")
    total_files: int = Field(..., alias="totalFiles")
    completed_files: int = Field(0, alias="completedFiles")
    failed_files: int = Field(0, alias="failedFiles")
    progress: float = 0
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")


class JobDetail(CamelSchema):
    """Single job inside a batch."""

    id: str
    batch_id: str = Field(..., alias="batchId")
    user_id: str = Field(..., alias="userId")
    output_format: str = Field(..., alias="outputFormat")
    source_url: str = Field(..., alias="sourceUrl")
    file_name: str = Field(..., alias="fileName")
    file_size: Optional[int] = Field(None, alias="fileSize")
    status: JobStatus
    result_url: Optional[str] = Field(None, alias="resultUrl")
    error_message: Optional[str] = Field(None, alias="errorMessage")
    progress: Optional[float] = None
    retry_count: Optional[int] = Field(None, alias="retryCount")
    task_id: Optional[str] = Field(None, alias="taskId")
    started_at: Optional[str] = Field(None, alias="startedAt")
    completed_at: Optional[str] = Field(None, alias="completedAt")
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")


class Pagination(CamelSchema):
    """Pagination info."""

    page: int
    page_size: int = Field(..., alias="pageSize")
    total: int
    total_pages: int = Field(..., alias="totalPages")


class BatchListResponse(CamelSchema):
    """Paginated batch list."""

    batches: list[BatchDetail]
    pagination: Pagination


class JobListResponse(CamelSchema):
    """Paginated job list."""

    jobs: list[JobDetail]
    pagination: Pagination


class ConcurrentStatus(CamelSchema):
    """Account concurrency limits."""

    max_concurrent_jobs: int = Field(..., alias="maxConcurrentJobs")
    current_running_jobs: int = Field(..., alias="currentRunningJobs")
    can_submit_new_job: bool = Field(..., alias="canSubmitNewJob")
    available_slots: Optional[int] = Field(None, alias="availableSlots")
    queued_jobs: Optional[int] = Field(None, alias="queuedJobs")


class OperationResponse(CamelSchema):
    """Response of batch and job control operations."""

    batch_id: Optional[str] = Field(None, alias="batchId")
    job_id: Optional[str] = Field(None, alias="jobId")
    queued_jobs: Optional[int] = Field(None, alias="queuedJobs")
    cancelled_jobs: Optional[int] = Field(None, alias="cancelledJobs")
    retried_jobs: Optional[int] = Field(None, alias="retriedJobs")
    paused_jobs: Optional[int] = Field(None, alias="pausedJobs")
    resumed_jobs: Optional[int] = Field(None, alias="resumedJobs")
    status: Optional[str] = None
