"""
Header assembly for outgoing requests.

Layers, later wins on key collision: baseline headers, request-declared
headers, then the auth resolver's output. Keys are compared exactly; casing
is left to the HTTP client.
"""

from collections.abc import Iterable, Mapping

from ..schemas.descriptor import AuthDescriptor, RequestDescriptor
from .auth_resolver import resolve


def assemble(
    baseline_headers: Mapping[str, str],
    request_headers: Iterable[tuple[str, str]],
    resolved_auth_headers: Mapping[str, str]
) -> dict[str, str]:
    """
    Merge header layers into the final header set.

    Args:
        baseline_headers: Defaults sent with every request
        request_headers: Ordered (key, value) pairs declared on the request
        resolved_auth_headers: Headers produced by the auth resolver

    Returns:
        A new header dict
    """
    final = dict(baseline_headers)
    for key, value in request_headers:
        final[key] = value
    final.update(resolved_auth_headers)
    return final


def build_headers(
    descriptor: RequestDescriptor,
    global_auth: AuthDescriptor | None,
    baseline_headers: Mapping[str, str]
) -> tuple[dict[str, str], list[str]]:
    """
    Build the headers for one descriptor.

    Returns:
        Tuple of (final headers, auth warnings)

    Raises:
        AuthResolutionError: If the effective auth cannot be applied
    """
    declared = dict(descriptor.headers)
    auth_headers, warnings = resolve(declared, descriptor.auth, global_auth)
    return assemble(baseline_headers, descriptor.headers, auth_headers), warnings
