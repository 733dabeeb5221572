"""
Pydantic schemas for request descriptors and auth descriptors.

A descriptor is the normalized form of one request from a collection,
independent of the collection file format. All schemas are frozen: they
are created once by the parser and never modified afterwards.
"""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict


class ApiKeyAuth(BaseModel):
    """API key auth. Only applied when location is "header"."""
    model_config = ConfigDict(frozen=True)

    type: Literal["apikey"] = "apikey"
    key_name: str | None = None
    key_value: str | None = None
    location: str | None = None


class BearerAuth(BaseModel):
    """Bearer token auth."""
    model_config = ConfigDict(frozen=True)

    type: Literal["bearer"] = "bearer"
    token: str | None = None


class BasicAuth(BaseModel):
    """HTTP basic auth."""
    model_config = ConfigDict(frozen=True)

    type: Literal["basic"] = "basic"
    username: str = ""
    password: str = ""


class NoAuth(BaseModel):
    """Explicitly disables auth, including any inherited collection auth."""
    model_config = ConfigDict(frozen=True)

    type: Literal["noauth"] = "noauth"


class UnknownAuth(BaseModel):
    """An auth kind the runner recognizes but cannot apply."""
    model_config = ConfigDict(frozen=True)

    type: str


AuthDescriptor = Union[ApiKeyAuth, BearerAuth, BasicAuth, NoAuth, UnknownAuth]


class RequestDescriptor(BaseModel):
    """
    One request to execute.

    Attributes:
        name: Display name, not necessarily unique
        method: HTTP method
        url: Fully resolved URL
        headers: Ordered (key, value) pairs; later duplicates win
        body: Raw request body, or None for no body
        auth: Request-level auth, or None to inherit the collection auth
    """
    model_config = ConfigDict(frozen=True)

    name: str
    method: str = "GET"
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: str | None = None
    auth: AuthDescriptor | None = None


class CollectionInfo(BaseModel):
    """Collection-wide information."""
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    auth: AuthDescriptor | None = None


class ParsedCollection(BaseModel):
    """Result of parsing a collection file."""
    model_config = ConfigDict(frozen=True)

    info: CollectionInfo
    requests: tuple[RequestDescriptor, ...] = ()
    warnings: tuple[str, ...] = ()
