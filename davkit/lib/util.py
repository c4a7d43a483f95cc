#!/usr/bin/env python
import base64
import logging
import mimetypes
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Optional

from davkit.resources import DEFAULT_CONTENT_TYPE

log = logging.getLogger(__name__)

## Depth handling.  There are exactly three legal values on the wire.
DEPTH_INFINITY = -1


def depth_to_string(depth: int) -> str:
    """
    Maps an integer depth to the Depth header token.  Anything else
    than 0, 1 and -1 (infinity) silently becomes "1".
    """
    if depth == 0:
        return "0"
    if depth == DEPTH_INFINITY:
        return "infinity"
    if depth != 1:
        log.debug(f"depth {depth} is not representable, using 1")
    return "1"


def parse_depth(value: Optional[str]) -> int:
    if value is None:
        return 1
    value = value.strip().lower()
    if value == "0":
        return 0
    if value == "infinity":
        return DEPTH_INFINITY
    return 1


def basic_auth(username: str, password: str) -> str:
    """Value of an Authorization header for HTTP Basic auth"""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8"))
    return "Basic " + token.decode("ascii")


def guess_content_type(name: str) -> str:
    content_type, _ = mimetypes.guess_type(name)
    return content_type or DEFAULT_CONTENT_TYPE


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parses the two date formats met in WebDAV properties,
    RFC 1123 (getlastmodified) and ISO 8601 (creationdate).
    Unparseable dates gives None.
    """
    if not value:
        return None
    value = value.strip()
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        log.debug(f"could not parse date {value!r}")
        return None


def format_timeout(seconds: Optional[int]) -> str:
    if seconds is None or seconds < 0:
        return "Infinite"
    return "Second-%i" % seconds


def overwrite_header(overwrite: bool) -> str:
    return "T" if overwrite else "F"


def if_header(token: str, resource: Optional[str] = None) -> str:
    """
    Value of an If header submitting a lock token, optionally tagged
    with the resource the lock belongs to.
    """
    if resource:
        return "<%s> (<%s>)" % (resource, token)
    return "(<%s>)" % token


def lock_token_header(token: str) -> str:
    """Value of the Lock-Token header of an UNLOCK request"""
    if token.startswith("<"):
        return token
    return "<%s>" % token


def strip_lock_token(value: Optional[str]) -> Optional[str]:
    """The token inside a Lock-Token response header"""
    if not value:
        return None
    return value.strip().lstrip("<").rstrip(">") or None
