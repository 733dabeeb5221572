"""
Collection parser for turning a Postman collection into request descriptors.

Provides functions for:
- Substituting environment placeholders into the raw collection text
- Flattening nested folders of requests into an ordered list
- Converting Postman auth blocks into auth descriptors
"""

import json
import logging
from pathlib import Path
from typing import Any

from ..exceptions import CollectionFormatError
from ..schemas.descriptor import (
    ApiKeyAuth,
    AuthDescriptor,
    BasicAuth,
    BearerAuth,
    CollectionInfo,
    NoAuth,
    ParsedCollection,
    RequestDescriptor,
    UnknownAuth,
)
from .variable_substitution import substitute


logger = logging.getLogger(__name__)


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value) if isinstance(value, (dict, list)) else str(value)


def _auth_entries(block: Any) -> dict[str, str | None]:
    """
    Normalize a Postman auth attribute block into a key -> value mapping.

    Collection v2.1 stores attributes as a list of {"key", "value"} entries,
    v2.0 as a plain object.
    """
    if isinstance(block, dict):
        return {key: _as_text(value) for key, value in block.items()}
    entries: dict[str, str | None] = {}
    if isinstance(block, list):
        for entry in block:
            if isinstance(entry, dict) and "key" in entry:
                entries[entry["key"]] = _as_text(entry.get("value"))
    return entries


def parse_auth(auth: Any) -> AuthDescriptor | None:
    """
    Convert a Postman auth object into an auth descriptor.

    Args:
        auth: The "auth" value of a collection or request, or None

    Returns:
        The matching descriptor variant, or None when no auth is declared
    """
    if not isinstance(auth, dict) or not auth.get("type"):
        return None

    auth_type = str(auth["type"])

    if auth_type == "apikey":
        entries = _auth_entries(auth.get("apikey"))
        return ApiKeyAuth(
            key_name=entries.get("key"),
            key_value=entries.get("value"),
            location=entries.get("in"),
        )

    if auth_type == "bearer":
        block = auth.get("bearer")
        entries = _auth_entries(block)
        token = entries.get("token")
        if token is None and isinstance(block, list) and block and isinstance(block[0], dict):
            token = _as_text(block[0].get("value"))
        return BearerAuth(token=token)

    if auth_type == "basic":
        entries = _auth_entries(auth.get("basic"))
        return BasicAuth(
            username=entries.get("username") or "",
            password=entries.get("password") or "",
        )

    if auth_type == "noauth":
        return NoAuth()

    return UnknownAuth(type=auth_type)


def _parse_url(name: str, url: Any) -> str:
    if url is None:
        return ""
    if isinstance(url, dict):
        return _as_text(url.get("raw")) or ""
    if isinstance(url, str):
        return url
    raise CollectionFormatError(f"Invalid url in item {name!r}")


def _parse_headers(headers: Any) -> tuple[tuple[str, str], ...]:
    pairs: list[tuple[str, str]] = []
    if not isinstance(headers, list):
        return ()
    for header in headers:
        if not isinstance(header, dict) or "key" not in header:
            continue
        if header.get("disabled"):
            continue
        pairs.append((str(header["key"]), _as_text(header.get("value")) or ""))
    return tuple(pairs)


def _parse_body(name: str, body: Any) -> str | None:
    if body is None:
        return None
    if isinstance(body, dict):
        return _as_text(body.get("raw"))
    raise CollectionFormatError(f"Invalid body in item {name!r}")


def _parse_request(name: str, request: Any) -> RequestDescriptor:
    # Postman allows a bare URL string as shorthand for a GET request
    if isinstance(request, str):
        return RequestDescriptor(name=name, method="GET", url=request)
    if not isinstance(request, dict):
        raise CollectionFormatError(f"Invalid request in item {name!r}")

    return RequestDescriptor(
        name=name,
        method=str(request.get("method") or "GET").upper(),
        url=_parse_url(name, request.get("url")),
        headers=_parse_headers(request.get("header")),
        body=_parse_body(name, request.get("body")),
        auth=parse_auth(request.get("auth")),
    )


def flatten_items(items: list[Any]) -> list[RequestDescriptor]:
    """
    Flatten a tree of collection items into request descriptors.

    Items are visited depth-first in document order. An item holding a
    "request" yields one descriptor; an item holding "item" is a folder and
    is recursed into. An item may hold both.

    Args:
        items: The "item" list of a collection or folder

    Returns:
        Descriptors in document order
    """
    descriptors: list[RequestDescriptor] = []

    def _walk(level: list[Any]) -> None:
        for item in level:
            if not isinstance(item, dict):
                continue
            if item.get("request"):
                descriptors.append(_parse_request(str(item.get("name") or ""), item["request"]))
            if isinstance(item.get("item"), list):
                _walk(item["item"])

    _walk(items)
    return descriptors


def parse_collection_data(collection: Any) -> tuple[CollectionInfo, list[RequestDescriptor]]:
    """
    Extract collection info and request descriptors from decoded JSON.

    Raises:
        CollectionFormatError: If "info" or "item" is missing
    """
    if not isinstance(collection, dict):
        raise CollectionFormatError("Invalid Postman collection format.")

    info = collection.get("info")
    items = collection.get("item")
    if not info or not isinstance(items, list):
        raise CollectionFormatError("Invalid Postman collection format.")

    collection_info = CollectionInfo(
        name=info.get("name") if isinstance(info, dict) else None,
        auth=parse_auth(collection.get("auth")),
    )
    return collection_info, flatten_items(items)


def parse_collection(raw_text: str, variables: dict[str, str]) -> ParsedCollection:
    """
    Parse a collection document after substituting placeholders.

    Args:
        raw_text: Collection JSON text that may contain {{variable}} placeholders
        variables: Environment snapshot used for substitution

    Returns:
        ParsedCollection with info, descriptors and substitution warnings

    Raises:
        CollectionFormatError: If the text is not a valid collection
    """
    text, unmatched = substitute(raw_text, variables)
    warnings = [f"Environment variable not found: {name}" for name in unmatched]

    try:
        collection = json.loads(text)
    except json.JSONDecodeError as e:
        raise CollectionFormatError(f"Collection is not valid JSON: {e}") from e

    info, requests = parse_collection_data(collection)
    logger.info("Parsed collection %r with %d requests", info.name, len(requests))

    return ParsedCollection(info=info, requests=tuple(requests), warnings=tuple(warnings))


def load_collection(path: str | Path, variables: dict[str, str]) -> ParsedCollection:
    """
    Read and parse a collection file.

    Raises:
        CollectionFormatError: If the file cannot be read or is not a valid collection
    """
    try:
        raw_text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise CollectionFormatError(f"Cannot read collection file {path}: {e}") from e
    return parse_collection(raw_text, variables)
