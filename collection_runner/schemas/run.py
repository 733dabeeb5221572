"""
Pydantic schemas for the run endpoint.
"""

from typing import Any

from pydantic import BaseModel

from .report import BatchSummary, ExecutionResult


class RunRequest(BaseModel):
    """Schema for running a collection supplied in the request body."""
    collection: dict[str, Any]
    variables: dict[str, str] = {}
    fail_on_http_error: bool | None = None


class RunResponse(BaseModel):
    """
    Schema for a completed run.

    Contains per-request results in collection order, the summary and any
    warnings raised while parsing the collection.
    """
    collection_name: str | None
    results: list[ExecutionResult]
    summary: BatchSummary
    warnings: list[str] = []
