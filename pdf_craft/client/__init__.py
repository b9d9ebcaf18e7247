"""PDF Craft API clients."""

from pdf_craft.client.batch import BatchOperationsMixin
from pdf_craft.client.client import PDFCraftClient, is_remote_location

__all__ = ["BatchOperationsMixin", "PDFCraftClient", "is_remote_location"]
