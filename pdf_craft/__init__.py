"""Python client for the PDF Craft document conversion service."""

__version__ = "0.1.0"

from pdf_craft.client import PDFCraftClient  # noqa: E402
from pdf_craft.core.exceptions import (  # noqa: E402
    APIException,
    ConfigurationException,
    ConversionFailedException,
    ConversionTimeoutException,
    InputException,
    PDFCraftException,
    ProtocolException,
    TransferException,
)
from pdf_craft.schemas import (  # noqa: E402
    BatchFile,
    BatchStatus,
    ConversionOptions,
    FormatType,
    JobStatus,
    LocalConversionOptions,
    PollingOptions,
    PollingStrategy,
    UploadProgress,
)

__all__ = [
    "APIException",
    "BatchFile",
    "BatchStatus",
    "ConfigurationException",
    "ConversionFailedException",
    "ConversionOptions",
    "ConversionTimeoutException",
    "FormatType",
    "InputException",
    "JobStatus",
    "LocalConversionOptions",
    "PDFCraftClient",
    "PDFCraftException",
    "PollingOptions",
    "PollingStrategy",
    "ProtocolException",
    "TransferException",
    "UploadProgress",
    "__version__",
]
