"""Pydantic models and dataclasses for request/response types."""
from __future__ import annotations
from dataclasses import dataclass

from pydantic import BaseModel

QUOTA_EXCEEDED_CODE = "insufficient_quota"
SUMMARIZATION_FAILED_CODE = "summarization_failed"
SERVER_BUSY_CODE = "server_busy"


class SummarizeIn(BaseModel):
    # Optional here so a missing field reaches the handler's own validation.
    text: str | None = None


class SummarizeOut(BaseModel):
    summary: str


class ErrorOut(BaseModel):
    error: str
    message: str
    code: str


@dataclass
class SummaryRecord:
    """A stored summarization result."""
    id: int
    text: str
    summary: str
    timestamp: str
