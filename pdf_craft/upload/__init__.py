"""Multipart upload engine."""

from pdf_craft.upload.chunk_reader import ChunkReader
from pdf_craft.upload.engine import UploadEngine, UploadPlanner, file_extension_hint

__all__ = ["ChunkReader", "UploadEngine", "UploadPlanner", "file_extension_hint"]
