"""Schemas for the multipart upload endpoints."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator


class UploadPlan(BaseModel):
    """Upload plan issued by the remote planner.

    Part indices are 1-based. ``uploaded_parts`` lists parts the server already
    holds from an earlier, interrupted upload of the same file.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    upload_id: str = Field(..., min_length=1, alias="uploadId")
    part_size: PositiveInt = Field(..., alias="partSize")
    total_parts: PositiveInt = Field(..., alias="totalParts")
    uploaded_parts: frozenset[int] = Field(default_factory=frozenset, alias="uploadedParts")
    part_destinations: dict[int, str] = Field(default_factory=dict, alias="presignedUrls")

    @field_validator("uploaded_parts", mode="before")
    @classmethod
    def _default_uploaded_parts(cls, value: Any) -> Any:
        return value or []

    @field_validator("part_destinations", mode="before")
    @classmethod
    def _index_destinations(cls, value: Any) -> Any:
        # some deployments send a plain list ordered by part number
        if isinstance(value, list):
            return {index: url for index, url in enumerate(value, start=1)}
        return value or {}

    def is_uploaded(self, part_number: int) -> bool:
        return part_number in self.uploaded_parts

    def destination_for(self, part_number: int) -> Optional[str]:
        return self.part_destinations.get(part_number)


class UploadUrlResponse(BaseModel):
    """Response of the finalize endpoint."""

    url: str = Field(..., min_length=1)


@dataclass(frozen=True)
class UploadProgress:
    """Snapshot emitted after each part is processed."""

    uploaded_bytes: int
    total_bytes: int
    current_part: int
    total_parts: int

    @property
    def percentage(self) -> float:
        if self.total_bytes == 0:
            return 100.0
        return self.uploaded_bytes / self.total_bytes * 100

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "uploaded_bytes": self.uploaded_bytes,
            "total_bytes": self.total_bytes,
            "current_part": self.current_part,
            "total_parts": self.total_parts,
            "percentage": self.percentage,
        }


ProgressCallback = Callable[[UploadProgress], None]
