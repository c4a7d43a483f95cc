"""
I/O layer for the WebDAV protocol.

This module provides the implementation executing DAVRequest objects
and returning DAVResponse objects.

The I/O layer is intentionally thin - it only handles HTTP transport.
All protocol logic (XML building/parsing) is in davkit.protocol, and
authentication and status handling is done by davkit.davclient.

Example:
    from davkit.protocol import WebDAVProtocol
    from davkit.io import SyncIO

    protocol = WebDAVProtocol(base_url="https://dav.example.com")
    with SyncIO() as io:
        request = protocol.propfind_request("/files/", ["displayname"])
        response = io.execute(request)
"""

from .base import SyncIOProtocol
from .sync import SyncIO

__all__ = [
    "SyncIOProtocol",
    "SyncIO",
]
