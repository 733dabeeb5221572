"""
Request execution service for running a single descriptor.

execute() never raises: every failure, whether from auth resolution, the
transport or anything unexpected, is captured in the returned result.
"""

import logging
import time
from collections.abc import Mapping

from ..config import COMMON_HEADERS
from ..exceptions import AuthResolutionError, TransportError
from ..schemas.descriptor import AuthDescriptor, RequestDescriptor
from ..schemas.report import ExecutionResult, Failure, Success
from .header_assembler import build_headers
from .transport import Transport, TransportRequest


logger = logging.getLogger(__name__)


async def execute(
    descriptor: RequestDescriptor,
    global_auth: AuthDescriptor | None,
    transport: Transport,
    baseline_headers: Mapping[str, str] = COMMON_HEADERS
) -> ExecutionResult:
    """
    Execute one request and classify its outcome.

    Elapsed time covers only the transport call; a request that fails while
    its headers are prepared reports 0.

    Args:
        descriptor: The request to execute
        global_auth: Collection-level auth, used when the request declares none
        transport: Transport used to send the request
        baseline_headers: Default headers beneath the request's own headers

    Returns:
        ExecutionResult with a Success or Failure outcome
    """
    warnings: list[str] = []
    elapsed_millis = 0.0

    def _result(outcome: Success | Failure) -> ExecutionResult:
        return ExecutionResult(
            name=descriptor.name,
            method=descriptor.method,
            url=descriptor.url,
            outcome=outcome,
            elapsed_millis=elapsed_millis,
            warnings=tuple(warnings),
        )

    try:
        headers, auth_warnings = build_headers(descriptor, global_auth, baseline_headers)
        warnings.extend(auth_warnings)
        request = TransportRequest(
            method=descriptor.method.upper(),
            url=descriptor.url,
            headers=headers,
            body=descriptor.body or None,
        )
        logger.debug("Sending %s %s for %r", request.method, request.url, descriptor.name)

        start_time = time.perf_counter()
        try:
            response = await transport.send(request)
        finally:
            elapsed_millis = (time.perf_counter() - start_time) * 1000

    except TransportError as e:
        logger.warning("Request %r failed: %s", descriptor.name, e.message)
        return _result(Failure(status_code=e.status_code, error_message=e.message, body=e.body))
    except AuthResolutionError as e:
        logger.warning("Request %r failed: %s", descriptor.name, e)
        return _result(Failure(error_message=str(e)))
    except Exception as e:
        logger.warning("Request %r failed unexpectedly: %s", descriptor.name, e, exc_info=True)
        return _result(Failure(error_message=str(e) or type(e).__name__))

    logger.info("Request %r completed", descriptor.name)
    return _result(Success(status_code=response.status_code, body=response.body))
