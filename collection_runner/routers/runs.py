"""
Collection run API routes.

Provides an endpoint that parses a collection supplied in the request body,
executes every request in it concurrently and returns the report.
"""

import json
import logging

from fastapi import APIRouter, Depends, Request

from ..config import Settings
from ..exceptions import ErrorResponse
from ..schemas.run import RunRequest, RunResponse
from ..services.batch_runner import run_batch
from ..services.collection_parser import parse_collection
from ..services.transport import HttpxTransport, Transport


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/runs", tags=["runs"])


def _json_escaped(variables: dict[str, str]) -> dict[str, str]:
    """Escape values so they stay valid inside JSON string literals."""
    return {name: json.dumps(value)[1:-1] for name, value in variables.items()}


def get_settings(request: Request) -> Settings:
    """Dependency returning the settings loaded at startup."""
    return request.app.state.settings


def get_environment(request: Request) -> dict[str, str]:
    """Dependency returning the environment snapshot taken at startup."""
    return request.app.state.environment


def get_transport(request: Request) -> Transport:
    """
    Dependency returning the transport for a run.

    Uses the HTTP client created in the application lifespan so connections
    are pooled across runs.
    """
    return HttpxTransport(
        request.app.state.http_client,
        fail_on_http_error=request.app.state.settings.fail_on_http_error,
    )


@router.post(
    "",
    response_model=RunResponse,
    responses={
        200: {"model": RunResponse, "description": "Collection executed"},
        400: {"model": ErrorResponse, "description": "Invalid collection"},
        422: {"model": ErrorResponse, "description": "Invalid request body"},
    }
)
async def run_collection(
    run_request: RunRequest,
    settings: Settings = Depends(get_settings),
    environment: dict[str, str] = Depends(get_environment),
    transport: Transport = Depends(get_transport)
):
    """
    Run a collection.

    Placeholders in the collection are substituted from the server's
    environment snapshot overlaid with the variables in the request body.
    Values are JSON-escaped, so quotes and control characters arrive in
    the request unchanged.

    The per-run fail_on_http_error override applies to the httpx transport
    only; any other transport keeps its own status policy.

    Args:
        run_request: The collection, extra variables and options
        settings: Runner settings
        environment: Environment snapshot
        transport: Transport used for every request in the run

    Returns:
        RunResponse with results in collection order and the summary

    Raises:
        CollectionFormatError: 400 if the collection is structurally invalid
    """
    variables = _json_escaped({**environment, **run_request.variables})
    parsed = parse_collection(json.dumps(run_request.collection), variables)

    if run_request.fail_on_http_error is not None:
        if isinstance(transport, HttpxTransport):
            transport = transport.with_http_error_policy(run_request.fail_on_http_error)
        else:
            logger.debug(
                "Ignoring fail_on_http_error=%s for transport %s",
                run_request.fail_on_http_error,
                type(transport).__name__,
            )

    report = await run_batch(
        parsed.requests,
        parsed.info.auth,
        transport,
        baseline_headers=settings.baseline_headers,
    )

    return RunResponse(
        collection_name=parsed.info.name,
        results=list(report.results),
        summary=report.summary,
        warnings=list(parsed.warnings),
    )
