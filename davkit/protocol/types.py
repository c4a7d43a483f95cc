"""
Core protocol types for the Sans-I/O WebDAV layer.

These dataclasses represent HTTP requests and responses at the protocol
level, and the parsed multistatus structure, independent of any I/O
implementation.
"""

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from requests.structures import CaseInsensitiveDict

from lxml.etree import _Element


class DAVMethod(Enum):
    """HTTP methods used by WebDAV and its extensions."""

    GET = "GET"
    HEAD = "HEAD"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    PROPFIND = "PROPFIND"
    PROPPATCH = "PROPPATCH"
    MKCOL = "MKCOL"
    COPY = "COPY"
    MOVE = "MOVE"
    LOCK = "LOCK"
    UNLOCK = "UNLOCK"
    REPORT = "REPORT"
    SEARCH = "SEARCH"
    ACL = "ACL"
    BIND = "BIND"
    UNBIND = "UNBIND"
    VERSION_CONTROL = "VERSION-CONTROL"
    CHECKOUT = "CHECKOUT"
    CHECKIN = "CHECKIN"
    UNCHECKOUT = "UNCHECKOUT"
    BASELINE_CONTROL = "BASELINE-CONTROL"
    MKBASELINE = "MKBASELINE"


@dataclass(frozen=True)
class DAVRequest:
    """
    Represents an HTTP request to be made.

    This is a pure data structure with no I/O. It describes what request
    should be made, but does not make it.

    Attributes:
        method: HTTP method (GET, PUT, PROPFIND, etc.)
        url: Full URL for the request
        headers: HTTP headers as dict
        body: Request body; bytes, or an iterable yielding bytes for
              streamed uploads
    """

    method: DAVMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | Iterable[bytes] | None = None

    @property
    def replayable(self) -> bool:
        """
        A request can only be sent twice if the body is buffered.  An
        iterator is consumed by the first attempt.
        """
        return self.body is None or isinstance(self.body, (bytes, str))

    def with_header(self, name: str, value: str) -> "DAVRequest":
        """Return new request with additional header."""
        new_headers = {**self.headers, name: value}
        return DAVRequest(
            method=self.method,
            url=self.url,
            headers=new_headers,
            body=self.body,
        )


@dataclass(frozen=True)
class DAVResponse:
    """
    Represents an HTTP response received.

    Attributes:
        status: HTTP status code
        headers: HTTP headers, case insensitive
        body: Response body as bytes (empty for streamed responses)
        reason: reason phrase from the status line
        stream: for streamed responses, an iterator over the raw
                (still content-encoded) body chunks
        closer: releases the underlying connection of a streamed response
    """

    status: int
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""
    reason: str = ""
    stream: Iterator[bytes] | None = field(default=None, compare=False, repr=False)
    closer: Callable[[], None] | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            object.__setattr__(self, "headers", CaseInsensitiveDict(self.headers))

    @property
    def ok(self) -> bool:
        """True if status indicates success (2xx)."""
        return 200 <= self.status < 300

    def header(self, name: str) -> str | None:
        return self.headers.get(name)

    def close(self) -> None:
        if self.closer is not None:
            self.closer()


@dataclass
class Propstat:
    """
    One group of properties sharing a status within a response.

    Attributes:
        status: numeric status of this property group
        properties: property local name -> text value (None for empty
                    properties, "collection" for a collection resourcetype)
        elements: property local name -> the raw lxml element, for
                  structured properties (acl, lockdiscovery, ...)
        description: responsedescription, if given
    """

    status: int
    properties: dict[str, str | None] = field(default_factory=dict)
    elements: dict[str, _Element] = field(
        default_factory=dict, compare=False, repr=False
    )
    description: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass
class Response:
    """
    The outcome for one resource in a multistatus.

    Either ``status`` is set (the simple case, i.e. a deleted member in a
    sync-collection report) or there is at least one Propstat.
    """

    href: str
    status: int | None = None
    propstats: list[Propstat] = field(default_factory=list)
    error: list[str] = field(default_factory=list)
    description: str | None = None
    location: str | None = None

    def properties(self, only_ok: bool = True) -> dict[str, str | None]:
        """Properties merged over the propstats, by default only the successful ones"""
        ret: dict[str, str | None] = {}
        for propstat in self.propstats:
            if propstat.ok or not only_ok:
                ret.update(propstat.properties)
        return ret

    def element(self, name: str) -> _Element | None:
        """The raw element of a successfully returned property"""
        for propstat in self.propstats:
            if propstat.ok and name in propstat.elements:
                return propstat.elements[name]
        return None


@dataclass
class Multistatus:
    """
    Parsed 207 Multi-Status response.

    Attributes:
        responses: per-resource responses, in document order
        sync_token: sync token if present (for sync-collection)
        description: top level responsedescription
    """

    responses: list[Response] = field(default_factory=list)
    sync_token: str | None = None
    description: str | None = None

    def __iter__(self) -> Iterator[Response]:
        return iter(self.responses)

    def __len__(self) -> int:
        return len(self.responses)


@dataclass
class SyncCollectionResult:
    """
    Parsed result of a sync-collection REPORT.

    Attributes:
        changed: changed or new resources
        deleted: hrefs of members that are gone (404 in the report)
        sync_token: new sync token for the next sync
    """

    changed: list[Any] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    sync_token: str | None = None
