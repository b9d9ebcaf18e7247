"""Completion polling."""

from pdf_craft.polling.outcome import (
    Completed,
    Failed,
    JobOutcome,
    StillPending,
    interpret_conversion_result,
)
from pdf_craft.polling.poller import CompletionPoller, PollState, interval_schedule, next_interval

__all__ = [
    "Completed",
    "CompletionPoller",
    "Failed",
    "JobOutcome",
    "PollState",
    "StillPending",
    "interpret_conversion_result",
    "interval_schedule",
    "next_interval",
]
