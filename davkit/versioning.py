#!/usr/bin/env python
"""
Versioning (RFC 3253): version control, checkout/checkin, baselines
and retrieval of old versions.
"""
import logging
from typing import List
from typing import Optional
from typing import TYPE_CHECKING

from davkit.lib import error
from davkit.lib.url import absolutize_href
from davkit.lib.url import join_paths
from davkit.protocol.types import DAVRequest
from davkit.protocol.types import DAVResponse
from davkit.protocol.xml_parsers import first_href
from davkit.protocol.xml_parsers import parse_hrefs
from davkit.protocol.xml_parsers import parse_multistatus

if TYPE_CHECKING:
    from davkit.davclient import DAVClient

log = logging.getLogger(__name__)


class VersionManager:
    def __init__(self, client: "DAVClient") -> None:
        self.client = client

    def _version_history_url(self, path: str) -> Optional[str]:
        request = self.client.protocol.propfind_request(
            path, ["version-history"], depth=0
        )
        response = self.client.request(request)
        multistatus = parse_multistatus(response.body, huge_tree=self.client.huge_tree)
        for r in multistatus:
            hrefs = parse_hrefs(r.element("version-history"))
            if hrefs:
                return absolutize_href(request.url, hrefs[0])
            value = r.properties().get("version-history")
            if value:
                return absolutize_href(request.url, value)
        return None

    def get_version(self, path: str, version: str) -> bytes:
        """
        Fetches the content of an old version of a resource.

        The version history collection is looked up first, and the
        version fetched from it.  If the server does not tell where the
        history is, or the lookup fails, the resource itself is fetched
        with a version selecting header instead.  Errors from that last
        request are raised as usual.
        """
        try:
            history = self._version_history_url(path)
        except error.DAVError as e:
            log.debug(f"version-history lookup failed ({e}), using version header")
            history = None

        if history:
            try:
                return self.client.get(join_paths(history, version))
            except error.DAVError as e:
                log.debug(f"version not found in history ({e}), using version header")

        return self.client.get(path, headers={"DAV:version": version})

    def get_version_history(self, path: str) -> List[str]:
        """hrefs of all versions of a resource"""
        request = self.client.protocol.version_tree_request(path, depth=0)
        response = self.client.request(request)
        multistatus = parse_multistatus(response.body, huge_tree=self.client.huge_tree)
        return [absolutize_href(request.url, r.href) for r in multistatus]

    def _location(self, request: DAVRequest, response: DAVResponse) -> str:
        """
        Where the server put the result: the Location header, the first
        href of the body, or the request URL itself.
        """
        location = response.header("Location")
        if location:
            return absolutize_href(request.url, location)
        try:
            href = first_href(response.body)
        except error.MalformedResponseError:
            href = None
        if href:
            return absolutize_href(request.url, href)
        return request.url

    def version_control(self, path: str, version: Optional[str] = None) -> None:
        self.client.request(self.client.protocol.version_control_request(path, version))

    def checkout(self, path: str, activity: Optional[str] = None) -> str:
        request = self.client.protocol.checkout_request(path, activity)
        return self._location(request, self.client.request(request))

    def checkin(self, path: str, keep_checked_out: bool = False) -> str:
        request = self.client.protocol.checkin_request(path, keep_checked_out)
        return self._location(request, self.client.request(request))

    def uncheckout(self, path: str) -> None:
        self.client.request(self.client.protocol.uncheckout_request(path))

    def baseline_control(self, path: str, baseline: Optional[str] = None) -> None:
        self.client.request(
            self.client.protocol.baseline_control_request(path, baseline)
        )

    def make_baseline(self, path: str) -> str:
        request = self.client.protocol.mkbaseline_request(path)
        return self._location(request, self.client.request(request))
