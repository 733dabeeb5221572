# Services package

from .variable_substitution import substitute
from .collection_parser import load_collection, parse_collection
from .auth_resolver import resolve
from .header_assembler import assemble, build_headers
from .transport import HttpxTransport, Transport, TransportRequest, TransportResponse, create_client
from .request_executor import execute
from .batch_runner import run_batch, summarize
from .report_formatter import format_report

__all__ = [
    "substitute",
    "load_collection",
    "parse_collection",
    "resolve",
    "assemble",
    "build_headers",
    "HttpxTransport",
    "Transport",
    "TransportRequest",
    "TransportResponse",
    "create_client",
    "execute",
    "run_batch",
    "summarize",
    "format_report",
]
