"""
Pydantic schemas package.

Exports descriptor, report and run schemas.
"""

from .descriptor import (
    ApiKeyAuth,
    BearerAuth,
    BasicAuth,
    NoAuth,
    UnknownAuth,
    AuthDescriptor,
    RequestDescriptor,
    CollectionInfo,
    ParsedCollection,
)

from .report import (
    Success,
    Failure,
    Outcome,
    ExecutionResult,
    BatchSummary,
    BatchReport,
)

from .run import (
    RunRequest,
    RunResponse,
)

__all__ = [
    # Descriptor schemas
    "ApiKeyAuth",
    "BearerAuth",
    "BasicAuth",
    "NoAuth",
    "UnknownAuth",
    "AuthDescriptor",
    "RequestDescriptor",
    "CollectionInfo",
    "ParsedCollection",
    # Report schemas
    "Success",
    "Failure",
    "Outcome",
    "ExecutionResult",
    "BatchSummary",
    "BatchReport",
    # Run schemas
    "RunRequest",
    "RunResponse",
]
