#!/usr/bin/env python
"""
Plain value objects returned by the client.  They hold what was parsed
from a server response and know how to convert themselves to and from
JSON-friendly dicts; nothing more.
"""
from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from urllib.parse import unquote
from urllib.parse import urlsplit

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DIRECTORY_CONTENT_TYPE = "httpd/unix-directory"


def _dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass(frozen=True)
class DavResource:
    """
    A resource as described by a multistatus response.  Two resources
    are equal if their URLs are equal.
    """

    href: str
    status: int = field(default=200, compare=False)
    content_type: str = field(default=DEFAULT_CONTENT_TYPE, compare=False)
    content_length: int = field(default=0, compare=False)
    etag: Optional[str] = field(default=None, compare=False)
    display_name: Optional[str] = field(default=None, compare=False)
    resource_types: List[str] = field(default_factory=list, compare=False)
    created: Optional[datetime] = field(default=None, compare=False)
    modified: Optional[datetime] = field(default=None, compare=False)
    content_language: Optional[str] = field(default=None, compare=False)
    custom_properties: Dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def is_directory(self) -> bool:
        ## Servers differ in how they flag collections, so both are checked
        return (
            "collection" in self.resource_types
            or self.content_type == DIRECTORY_CONTENT_TYPE
        )

    @property
    def is_file(self) -> bool:
        return not self.is_directory

    @property
    def path(self) -> str:
        return urlsplit(self.href).path

    @property
    def name(self) -> str:
        path = self.path.rstrip("/")
        return unquote(path.rsplit("/", 1)[-1])

    def to_dict(self) -> Dict[str, Any]:
        ret = asdict(self)
        ret["created"] = self.created.isoformat() if self.created else None
        ret["modified"] = self.modified.isoformat() if self.modified else None
        return ret

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DavResource":
        data = dict(data)
        data["created"] = _dt(data.get("created"))
        data["modified"] = _dt(data.get("modified"))
        return cls(**data)


@dataclass(frozen=True)
class ActiveLock:
    """One entry of the lockdiscovery property"""

    token: Optional[str] = None
    scope: str = "exclusive"
    type: str = "write"
    depth: str = "0"
    owner: Optional[str] = None
    timeout: Optional[str] = None
    root: Optional[str] = None

    @property
    def exclusive(self) -> bool:
        return self.scope == "exclusive"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActiveLock":
        return cls(**data)


## The principals an ACE may refer to without an href
SPECIAL_PRINCIPALS = (
    "DAV:all",
    "DAV:authenticated",
    "DAV:unauthenticated",
    "DAV:self",
)


@dataclass(frozen=True)
class DavAce:
    """
    An access control entry.  ``principal`` is either an href or one of
    the SPECIAL_PRINCIPALS, i.e. ``DAV:all``.
    """

    principal: str
    grant: bool = True
    privileges: frozenset = frozenset()
    inherited: bool = False
    protected: bool = False

    @property
    def is_deny(self) -> bool:
        return not self.grant

    def has_privilege(self, privilege: str) -> bool:
        return privilege in self.privileges

    def to_dict(self) -> Dict[str, Any]:
        ret = asdict(self)
        ret["privileges"] = sorted(self.privileges)
        return ret

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DavAce":
        data = dict(data)
        data["privileges"] = frozenset(data.get("privileges", ()))
        return cls(**data)


@dataclass(frozen=True)
class DavAcl:
    aces: List[DavAce] = field(default_factory=list)
    resource_url: Optional[str] = None

    def aces_for_principal(self, principal: str) -> List[DavAce]:
        return [ace for ace in self.aces if ace.principal == principal]

    def has_privilege(self, principal: str, privilege: str) -> bool:
        """Deny entries take precedence over grant entries"""
        mine = [a for a in self.aces_for_principal(principal) if a.has_privilege(privilege)]
        if any(a.is_deny for a in mine):
            return False
        return any(a.grant for a in mine)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resource_url": self.resource_url,
            "aces": [ace.to_dict() for ace in self.aces],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DavAcl":
        return cls(
            aces=[DavAce.from_dict(x) for x in data.get("aces", [])],
            resource_url=data.get("resource_url"),
        )


@dataclass(frozen=True)
class DavPrincipal:
    url: str
    display_name: Optional[str] = None
    type: str = "user"
    properties: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DavPrincipal":
        return cls(**data)


@dataclass(frozen=True)
class DavQuota:
    """
    Quota of a collection.  ``available_bytes`` is None when the server
    reports no limit.
    """

    available_bytes: Optional[int] = None
    used_bytes: int = 0
    resource_url: Optional[str] = None

    @property
    def total_bytes(self) -> Optional[int]:
        if self.available_bytes is None:
            return None
        return self.available_bytes + self.used_bytes

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DavQuota":
        return cls(**data)
