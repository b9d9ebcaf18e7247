"""Pydantic schemas and enumerations for the PDF Craft API."""

from pdf_craft.schemas.batch_schemas import (
    BatchDetail,
    BatchFile,
    BatchListResponse,
    ConcurrentStatus,
    CreateBatchResponse,
    JobDetail,
    JobListResponse,
    OperationResponse,
    Pagination,
)
from pdf_craft.schemas.conversion_schemas import (
    ConversionOptions,
    ConversionResult,
    ConversionResultData,
    LocalConversionOptions,
    PollingOptions,
    SubmitResponse,
)
from pdf_craft.schemas.enums import (
    BatchStatus,
    ConversionState,
    FormatType,
    JobStatus,
    PollingStrategy,
)
from pdf_craft.schemas.upload_schemas import (
    ProgressCallback,
    UploadPlan,
    UploadProgress,
    UploadUrlResponse,
)

__all__ = [
    "BatchDetail",
    "BatchFile",
    "BatchListResponse",
    "BatchStatus",
    "ConcurrentStatus",
    "ConversionOptions",
    "ConversionResult",
    "ConversionResultData",
    "ConversionState",
    "CreateBatchResponse",
    "FormatType",
    "JobDetail",
    "JobListResponse",
    "JobStatus",
    "LocalConversionOptions",
    "OperationResponse",
    "Pagination",
    "PollingOptions",
    "PollingStrategy",
    "ProgressCallback",
    "SubmitResponse",
    "UploadPlan",
    "UploadProgress",
    "UploadUrlResponse",
]
