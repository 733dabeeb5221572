"""
Batch runner for executing every request of a collection concurrently.

All requests are dispatched at once and the runner waits for every one of
them to settle before computing the summary. Results keep the input order
regardless of completion order.
"""

import asyncio
import logging
import time
from collections.abc import Mapping, Sequence

from ..config import COMMON_HEADERS
from ..schemas.descriptor import AuthDescriptor, RequestDescriptor
from ..schemas.report import BatchReport, BatchSummary, ExecutionResult, Failure
from .request_executor import execute
from .transport import Transport


logger = logging.getLogger(__name__)


def summarize(results: Sequence[ExecutionResult], total_elapsed_millis: float) -> BatchSummary:
    """
    Compute aggregate statistics for a finished batch.

    Args:
        results: Results of every request in the batch
        total_elapsed_millis: Wall-clock span of the whole batch

    Returns:
        BatchSummary; the average covers successful requests only and is 0
        when nothing succeeded
    """
    success_times = [result.elapsed_millis for result in results if result.succeeded]
    success_count = len(success_times)

    return BatchSummary(
        total_requests=len(results),
        success_count=success_count,
        failure_count=len(results) - success_count,
        total_elapsed_millis=total_elapsed_millis,
        average_success_millis=sum(success_times) / success_count if success_count else 0.0,
    )


async def run_batch(
    descriptors: Sequence[RequestDescriptor],
    global_auth: AuthDescriptor | None,
    transport: Transport,
    baseline_headers: Mapping[str, str] = COMMON_HEADERS
) -> BatchReport:
    """
    Execute all descriptors concurrently and collect their results.

    Args:
        descriptors: Requests to execute
        global_auth: Collection-level auth
        transport: Transport shared by all requests
        baseline_headers: Default headers for every request

    Returns:
        BatchReport where results[i] belongs to descriptors[i]
    """
    logger.info("Executing %d requests concurrently", len(descriptors))
    start_time = time.perf_counter()

    outcomes = await asyncio.gather(
        *(execute(descriptor, global_auth, transport, baseline_headers) for descriptor in descriptors),
        return_exceptions=True,
    )

    total_elapsed_millis = (time.perf_counter() - start_time) * 1000

    results: list[ExecutionResult] = []
    for descriptor, outcome in zip(descriptors, outcomes):
        if isinstance(outcome, ExecutionResult):
            results.append(outcome)
            continue
        # execute() captures its own errors; anything here escaped it (e.g. cancellation)
        logger.warning("Request %r did not settle normally: %r", descriptor.name, outcome)
        results.append(
            ExecutionResult(
                name=descriptor.name,
                method=descriptor.method,
                url=descriptor.url,
                outcome=Failure(error_message=str(outcome) or type(outcome).__name__),
            )
        )

    summary = summarize(results, total_elapsed_millis)
    logger.info(
        "Batch finished: %d succeeded, %d failed in %.2f ms",
        summary.success_count,
        summary.failure_count,
        summary.total_elapsed_millis,
    )
    return BatchReport(results=tuple(results), summary=summary)
