"""
Console rendering of batch reports.
"""

from ..schemas.report import BatchReport, BatchSummary, ExecutionResult, Success


def _status_text(status_code: int | None) -> str:
    return str(status_code) if status_code is not None else "-"


def format_result(result: ExecutionResult) -> str:
    """Render one result as two lines followed by a blank line."""
    outcome = result.outcome
    if isinstance(outcome, Success):
        return (
            f"✅ [{result.name}] - Success {outcome.status_code}\n"
            f"   Time Taken: {result.elapsed_millis:.2f} ms\n"
        )
    return (
        f"❌ [{result.name}] - Failed {_status_text(outcome.status_code)}\n"
        f"   Error: {outcome.error_message}\n"
    )


def format_summary(summary: BatchSummary) -> str:
    """Render the summary block. Times are shown in seconds."""
    return "\n".join([
        "Summary Report:",
        f"Total Requests: {summary.total_requests}",
        f"Successful Requests: {summary.success_count}",
        f"Failed Requests: {summary.failure_count}",
        f"Total Execution Time: {summary.total_elapsed_millis / 1000:.3f} s",
        f"Average Time per Request: {summary.average_success_millis / 1000:.3f} s",
    ])


def format_report(report: BatchReport, collection_name: str | None = None) -> str:
    """Render a full report: collection name, results in order, then the summary."""
    sections: list[str] = []
    if collection_name:
        sections.append(f"Collection Name: {collection_name}\n")
    sections.append("Execution Results:\n")
    sections.extend(format_result(result) for result in report.results)
    sections.append(format_summary(report.summary))
    return "\n".join(sections)
