#!/usr/bin/env python
"""
URL juggling.  Addresses handed to the client may be one out of two:

1) a fully qualified URL, i.e. "https://dav.example.com/remote.php/dav/files/joe/a.txt",
   which is used verbatim.

2) a path, i.e. "files/joe/a.txt" or "/files/joe/a.txt", which is appended to
   the base URL of the client, with exactly one slash in between.

Hrefs found in server responses are usually absolute paths; they are
resolved against the URL of the request that produced them, so the
resulting resource URLs are always fully qualified.
"""
from typing import Optional
from typing import Tuple
from urllib.parse import unquote
from urllib.parse import urljoin
from urllib.parse import urlsplit
from urllib.parse import urlunsplit


def is_absolute(url: str) -> bool:
    return bool(urlsplit(url).scheme)


def strip_trailing_slash(url: str) -> str:
    if url.endswith("/"):
        return url[:-1]
    return url


def resolve(base: Optional[str], target: str) -> str:
    """
    Resolves ``target`` against ``base``.  Absolute targets are returned
    unchanged; without a base, the target is returned as-is.
    """
    if is_absolute(target) or not base:
        return target
    return join_paths(base, target)


def join_paths(base: str, path: str) -> str:
    """
    Joins two path fragments with exactly one slash in between

    >>> join_paths("https://example.com/dav/", "/a.txt")
    'https://example.com/dav/a.txt'
    """
    if not path:
        return base
    if not base:
        return path
    return "%s/%s" % (base.rstrip("/"), path.lstrip("/"))


def absolutize_href(request_url: str, href: str) -> str:
    """
    Hrefs in a multistatus may be absolute paths or full URLs.  Make it
    a full URL, using the request url as reference.
    """
    if not href:
        return request_url
    return urljoin(request_url, href)


def split_auth(url: str) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Returns the url without user information, together with the
    (unquoted) username and password found in it.
    """
    parts = urlsplit(url)
    if parts.username is None:
        return url, None, None
    netloc = parts.netloc.rsplit("@", 1)[1]
    stripped = urlunsplit(
        (parts.scheme, netloc, parts.path, parts.query, parts.fragment)
    )
    password = unquote(parts.password) if parts.password is not None else None
    return stripped, unquote(parts.username), password


def path_of(url: str) -> str:
    return urlsplit(url).path or "/"


def last_segment(url: str) -> str:
    """The last non-empty path segment, i.e. the name of a resource"""
    path = strip_trailing_slash(path_of(url))
    return unquote(path.rsplit("/", 1)[-1])


def parent(url: str) -> str:
    """The url of the collection containing ``url``, with trailing slash"""
    parts = urlsplit(url)
    path = strip_trailing_slash(parts.path)
    path = path.rsplit("/", 1)[0] + "/"
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))
