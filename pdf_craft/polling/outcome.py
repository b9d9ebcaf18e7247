"""Outcome of a single status check."""

from dataclasses import dataclass
from typing import Any, Union

from pdf_craft.core.exceptions import ProtocolException
from pdf_craft.schemas.conversion_schemas import ConversionResult
from pdf_craft.schemas.enums import ConversionState

UNKNOWN_REASON = "unknown"


@dataclass(frozen=True)
class Completed:
    """Job finished; ``result`` is the download URL for conversions."""

    result: Any


@dataclass(frozen=True)
class Failed:
    """Job failed with a server-reported reason."""

    reason: str


@dataclass(frozen=True)
class StillPending:
    """Job has not reached a terminal state yet."""

    state: str


JobOutcome = Union[Completed, Failed, StillPending]


def interpret_conversion_result(job_id: str, result: ConversionResult) -> JobOutcome:
    """Map a result endpoint response onto a JobOutcome.

    Raises:
        ProtocolException: If a completed job carries no download URL
    """
    if result.state == ConversionState.COMPLETED.value:
        if result.data is None or not result.data.download_url:
            raise ProtocolException(
                "Task completed but downloadURL missing in response",
                details={"job_id": job_id, "response": result.model_dump(by_alias=True)},
            )
        return Completed(result.data.download_url)

    if result.state == ConversionState.FAILED.value:
        return Failed(result.error or UNKNOWN_REASON)

    return StillPending(result.state)
