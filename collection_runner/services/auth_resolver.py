"""
Auth resolution for outgoing requests.

Picks the auth descriptor that applies to a request (request-level auth
overrides the collection-level auth, they are never merged) and returns a
new header set with that auth applied.
"""

import base64
import logging

from ..exceptions import AuthResolutionError
from ..schemas.descriptor import (
    ApiKeyAuth,
    AuthDescriptor,
    BasicAuth,
    BearerAuth,
    NoAuth,
    UnknownAuth,
)


logger = logging.getLogger(__name__)


def select_auth(
    request_auth: AuthDescriptor | None,
    global_auth: AuthDescriptor | None
) -> AuthDescriptor | None:
    """Return the auth that applies to a request."""
    return request_auth if request_auth is not None else global_auth


def basic_credentials(username: str, password: str) -> str:
    """Encode username and password for a Basic Authorization header."""
    return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")


def resolve(
    headers: dict[str, str],
    request_auth: AuthDescriptor | None,
    global_auth: AuthDescriptor | None
) -> tuple[dict[str, str], list[str]]:
    """
    Apply the effective auth to a copy of the given headers.

    Misconfigured API keys and unknown auth types are diagnostics: headers are
    returned unchanged and a warning is recorded. A bearer auth without a token
    cannot be applied at all and fails the request.

    Args:
        headers: Request headers; not modified
        request_auth: Auth declared on the request, if any
        global_auth: Auth declared on the collection, if any

    Returns:
        Tuple of (new header dict, list of warning messages)

    Raises:
        AuthResolutionError: If a bearer auth has no token
    """
    resolved = dict(headers)
    warnings: list[str] = []
    auth = select_auth(request_auth, global_auth)

    if auth is None or isinstance(auth, NoAuth):
        pass
    elif isinstance(auth, ApiKeyAuth):
        if auth.key_name and auth.key_value and auth.location == "header":
            resolved[auth.key_name] = auth.key_value
        else:
            warnings.append("Unsupported or missing API key configuration.")
    elif isinstance(auth, BearerAuth):
        if not auth.token:
            raise AuthResolutionError("Bearer auth is missing a token")
        resolved["Authorization"] = f"Bearer {auth.token}"
    elif isinstance(auth, BasicAuth):
        resolved["Authorization"] = f"Basic {basic_credentials(auth.username, auth.password)}"
    elif isinstance(auth, UnknownAuth):
        warnings.append(f"Unsupported auth type: {auth.type}")
    else:
        raise TypeError(f"Unhandled auth descriptor: {type(auth).__name__}")

    for warning in warnings:
        logger.warning(warning)

    return resolved, warnings
