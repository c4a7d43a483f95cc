"""
WebDAV protocol operations: request building without any I/O.

``WebDAVProtocol`` knows the base URL and how each WebDAV verb is put
on the wire (headers and XML bodies).  Authentication and transport are
the business of the client executing the requests.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from davkit.lib import url as urls
from davkit.lib.util import (
    depth_to_string,
    format_timeout,
    if_header,
    lock_token_header,
    overwrite_header,
)
from davkit.resources import DavAce

from .types import DAVMethod, DAVRequest
from .xml_builders import (
    build_acl_body,
    build_baseline_control_body,
    build_bind_body,
    build_checkin_body,
    build_checkout_body,
    build_lockinfo_body,
    build_mkbaseline_body,
    build_propfind_body,
    build_proppatch_body,
    build_search_body,
    build_sync_collection_body,
    build_uncheckout_body,
    build_unbind_body,
    build_version_control_body,
    build_version_tree_body,
)

XML_CONTENT_TYPE = "application/xml; charset=utf-8"


class WebDAVProtocol:
    """
    Sans-I/O WebDAV request builder.

    Example:
        protocol = WebDAVProtocol(base_url="https://dav.example.com/files")
        request = protocol.propfind_request("docs/", ["displayname"], depth=1)
        response = io.execute(request)
    """

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url

    @property
    def base_url(self) -> str:
        return self._base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        ## One trailing slash is removed, resolve() adds exactly one back
        self._base_url = urls.strip_trailing_slash(value) if value else ""

    def resolve_url(self, path: str) -> str:
        """
        Resolve a path to a full URL.

        Args:
            path: Relative path, absolute path or full URL

        Returns:
            Full URL
        """
        if not path:
            return self.base_url
        return urls.resolve(self.base_url, path)

    def _xml_request(
        self,
        method: DAVMethod,
        path: str,
        body: bytes,
        headers: Mapping[str, str] | None = None,
    ) -> DAVRequest:
        all_headers = {"Content-Type": XML_CONTENT_TYPE}
        all_headers.update(headers or {})
        return DAVRequest(
            method=method, url=self.resolve_url(path), headers=all_headers, body=body
        )

    def _request(
        self,
        method: DAVMethod,
        path: str,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> DAVRequest:
        return DAVRequest(
            method=method, url=self.resolve_url(path), headers=dict(headers or {}), body=body
        )

    # =========================================================================
    # Properties, reports and searching
    # =========================================================================

    def propfind_request(
        self,
        path: str,
        props: Iterable[str] | None = None,
        depth: int = 0,
        allprop: bool = False,
    ) -> DAVRequest:
        """
        Build a PROPFIND request.

        Args:
            path: Resource path or URL
            props: Property names to retrieve
            depth: 0, 1 or -1 (infinity)
            allprop: ask for all properties instead
        """
        return self._xml_request(
            DAVMethod.PROPFIND,
            path,
            build_propfind_body(props, allprop=allprop),
            {"Depth": depth_to_string(depth)},
        )

    def proppatch_request(
        self,
        path: str,
        set_props: Mapping[str, Any] | None = None,
        remove_props: Iterable[str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> DAVRequest:
        return self._xml_request(
            DAVMethod.PROPPATCH,
            path,
            build_proppatch_body(set_props, remove_props),
            headers,
        )

    def report_request(
        self,
        path: str,
        body: bytes | str,
        depth: int = 0,
        headers: Mapping[str, str] | None = None,
    ) -> DAVRequest:
        if isinstance(body, str):
            body = body.encode("utf-8")
        all_headers = {"Depth": depth_to_string(depth)}
        all_headers.update(headers or {})
        return self._xml_request(DAVMethod.REPORT, path, body, all_headers)

    def version_tree_request(
        self, path: str, props: Iterable[str] | None = None, depth: int = 1
    ) -> DAVRequest:
        return self.report_request(path, build_version_tree_body(props), depth)

    def sync_collection_request(
        self,
        path: str,
        sync_token: str | None = None,
        props: Iterable[str] | None = None,
        depth: int = 1,
        limit: int | None = None,
    ) -> DAVRequest:
        return self.report_request(
            path,
            build_sync_collection_body(sync_token, props, depth=depth, limit=limit),
            depth,
        )

    def search_request(
        self, path: str, query: str, language: str = "davbasic"
    ) -> DAVRequest:
        return self._xml_request(
            DAVMethod.SEARCH, path, build_search_body(query, language)
        )

    # =========================================================================
    # Content and namespace operations
    # =========================================================================

    def get_request(
        self, path: str, headers: Mapping[str, str] | None = None
    ) -> DAVRequest:
        return self._request(DAVMethod.GET, path, headers)

    def head_request(self, path: str) -> DAVRequest:
        return self._request(DAVMethod.HEAD, path)

    def options_request(self, path: str) -> DAVRequest:
        return self._request(DAVMethod.OPTIONS, path)

    def put_request(
        self,
        path: str,
        body: Any,
        content_type: str | None = None,
        content_length: int | None = None,
        headers: Mapping[str, str] | None = None,
        lock_token: str | None = None,
        expect_continue: bool = False,
    ) -> DAVRequest:
        """
        Build a PUT request.  ``body`` is bytes, or an iterable of bytes
        for streamed uploads.
        """
        all_headers: dict[str, str] = {}
        if content_type:
            all_headers["Content-Type"] = content_type
        if content_length is None and isinstance(body, (bytes, str)):
            content_length = len(body.encode("utf-8") if isinstance(body, str) else body)
        if content_length is not None and content_length >= 0:
            all_headers["Content-Length"] = str(content_length)
        if expect_continue:
            all_headers["Expect"] = "100-continue"
        if lock_token:
            all_headers["If"] = if_header(lock_token)
        all_headers.update(headers or {})
        return self._request(DAVMethod.PUT, path, all_headers, body)

    def delete_request(
        self, path: str, lock_token: str | None = None, headers: Mapping[str, str] | None = None
    ) -> DAVRequest:
        all_headers = {"If": if_header(lock_token)} if lock_token else {}
        all_headers.update(headers or {})
        return self._request(DAVMethod.DELETE, path, all_headers)

    def mkcol_request(self, path: str) -> DAVRequest:
        return self._request(DAVMethod.MKCOL, path)

    def _copy_or_move_request(
        self,
        method: DAVMethod,
        source: str,
        destination: str,
        overwrite: bool = False,
        lock_token: str | None = None,
        depth: int | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> DAVRequest:
        all_headers = {
            "Destination": self.resolve_url(destination),
            "Overwrite": overwrite_header(overwrite),
        }
        if lock_token:
            all_headers["If"] = if_header(lock_token)
        if depth is not None:
            all_headers["Depth"] = depth_to_string(depth)
        all_headers.update(headers or {})
        return self._request(method, source, all_headers)

    def copy_request(self, source: str, destination: str, **kwargs) -> DAVRequest:
        return self._copy_or_move_request(DAVMethod.COPY, source, destination, **kwargs)

    def move_request(self, source: str, destination: str, **kwargs) -> DAVRequest:
        return self._copy_or_move_request(DAVMethod.MOVE, source, destination, **kwargs)

    # =========================================================================
    # Locking
    # =========================================================================

    def lock_request(
        self,
        path: str,
        timeout: int | None = 3600,
        owner: str | None = None,
        shared: bool = False,
        depth: int = 0,
    ) -> DAVRequest:
        return self._xml_request(
            DAVMethod.LOCK,
            path,
            build_lockinfo_body(owner, shared=shared),
            {"Timeout": format_timeout(timeout), "Depth": depth_to_string(depth)},
        )

    def refresh_lock_request(
        self, path: str, token: str, timeout: int | None = 3600
    ) -> DAVRequest:
        """A refresh is a LOCK without body, submitting the token"""
        return self._request(
            DAVMethod.LOCK,
            path,
            {"If": if_header(token), "Timeout": format_timeout(timeout)},
        )

    def unlock_request(self, path: str, token: str) -> DAVRequest:
        return self._request(
            DAVMethod.UNLOCK, path, {"Lock-Token": lock_token_header(token)}
        )

    # =========================================================================
    # Access control, binding, versioning
    # =========================================================================

    def acl_request(self, path: str, aces: Iterable[DavAce]) -> DAVRequest:
        return self._xml_request(DAVMethod.ACL, path, build_acl_body(aces))

    def bind_request(
        self, source: str, target: str, overwrite: bool = False
    ) -> DAVRequest:
        """
        BIND is sent to the collection that gets the new member, the
        last path segment of ``target`` is the name of the new binding.
        """
        target_url = self.resolve_url(target)
        return self._xml_request(
            DAVMethod.BIND,
            urls.parent(target_url),
            build_bind_body(urls.last_segment(target_url), self.resolve_url(source)),
            {"Overwrite": overwrite_header(overwrite)},
        )

    def unbind_request(self, path: str, segment: str) -> DAVRequest:
        return self._xml_request(DAVMethod.UNBIND, path, build_unbind_body(segment))

    def version_control_request(self, path: str, version: str | None = None) -> DAVRequest:
        return self._xml_request(
            DAVMethod.VERSION_CONTROL, path, build_version_control_body(version)
        )

    def checkout_request(self, path: str, activity: str | None = None) -> DAVRequest:
        return self._xml_request(DAVMethod.CHECKOUT, path, build_checkout_body(activity))

    def checkin_request(self, path: str, keep_checked_out: bool = False) -> DAVRequest:
        return self._xml_request(
            DAVMethod.CHECKIN, path, build_checkin_body(keep_checked_out)
        )

    def uncheckout_request(self, path: str) -> DAVRequest:
        return self._xml_request(DAVMethod.UNCHECKOUT, path, build_uncheckout_body())

    def baseline_control_request(
        self, path: str, baseline: str | None = None
    ) -> DAVRequest:
        return self._xml_request(
            DAVMethod.BASELINE_CONTROL, path, build_baseline_control_body(baseline)
        )

    def mkbaseline_request(self, path: str) -> DAVRequest:
        return self._xml_request(DAVMethod.MKBASELINE, path, build_mkbaseline_body())
