"""
Pydantic schemas for execution results and the batch summary.

These are pure data carriers handed to the presentation layer: it iterates
results in order and then renders the summary.
"""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Success(BaseModel):
    """The transport produced a response."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    status_code: int
    body: str | None = None


class Failure(BaseModel):
    """The request failed before or during transport."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    status_code: int | None = None
    error_message: str
    body: str | None = None


Outcome = Union[Success, Failure]


class ExecutionResult(BaseModel):
    """
    Outcome of one request.

    Attributes:
        name: Copied from the descriptor for correlation
        method: HTTP method that was sent
        url: URL that was requested
        outcome: Success or Failure
        elapsed_millis: Duration of the transport call in milliseconds
        warnings: Non-fatal diagnostics raised while preparing the request
    """
    model_config = ConfigDict(frozen=True)

    name: str
    method: str
    url: str
    outcome: Outcome = Field(discriminator="kind")
    elapsed_millis: float = 0.0
    warnings: tuple[str, ...] = ()

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, Success)


class BatchSummary(BaseModel):
    """Aggregate statistics for one batch."""
    model_config = ConfigDict(frozen=True)

    total_requests: int = 0
    success_count: int = 0
    failure_count: int = 0
    total_elapsed_millis: float = 0.0
    average_success_millis: float = 0.0


class BatchReport(BaseModel):
    """Results in input order plus the summary."""
    model_config = ConfigDict(frozen=True)

    results: tuple[ExecutionResult, ...] = ()
    summary: BatchSummary = BatchSummary()
