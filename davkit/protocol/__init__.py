"""
Sans-I/O WebDAV protocol implementation.

This module provides protocol-level operations without any I/O.
It builds requests and parses responses as pure data transformations.

The protocol layer is organized into:
- types: Core data structures (DAVRequest, DAVResponse, Multistatus)
- xml_builders: Pure functions to build XML request bodies
- xml_parsers: Pure functions to parse XML response bodies
- operations: WebDAVProtocol class building complete requests

Example usage:

    from davkit.protocol import WebDAVProtocol, parse_resources

    protocol = WebDAVProtocol(base_url="https://dav.example.com/files")

    # Build a request (no I/O)
    request = protocol.propfind_request("docs/", ["displayname"], depth=1)

    # Execute via your preferred I/O (the SyncIO shell, or a mock)
    response = your_http_client.execute(request)

    # Parse response (no I/O)
    resources = parse_resources(response.body, request.url)
"""

from .operations import WebDAVProtocol
from .types import (
    DAVMethod,
    DAVRequest,
    DAVResponse,
    Multistatus,
    Propstat,
    Response,
    SyncCollectionResult,
)
from .xml_builders import (
    build_acl_body,
    build_lockinfo_body,
    build_propfind_body,
    build_proppatch_body,
    build_search_body,
    build_sync_collection_body,
    property_tag,
)
from .xml_parsers import (
    parse_acl,
    parse_active_locks,
    parse_error_body,
    parse_lock_token,
    parse_multistatus,
    parse_resources,
    parse_sync_collection_response,
)

__all__ = [
    "WebDAVProtocol",
    "DAVMethod",
    "DAVRequest",
    "DAVResponse",
    "Multistatus",
    "Propstat",
    "Response",
    "SyncCollectionResult",
    "build_acl_body",
    "build_lockinfo_body",
    "build_propfind_body",
    "build_proppatch_body",
    "build_search_body",
    "build_sync_collection_body",
    "property_tag",
    "parse_acl",
    "parse_active_locks",
    "parse_error_body",
    "parse_lock_token",
    "parse_multistatus",
    "parse_resources",
    "parse_sync_collection_response",
]
