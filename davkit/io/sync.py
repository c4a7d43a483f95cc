"""
Synchronous I/O implementation using the requests library.
"""

from http.cookiejar import CookiePolicy
from typing import Optional, Union

import requests
import urllib3

from davkit.lib import error
from davkit.protocol.types import DAVRequest, DAVResponse

## Size of the chunks handed out for streamed responses
CHUNK_SIZE = 64 * 1024


class BlockAllCookies(CookiePolicy):
    """Cookie policy refusing to store or send any cookie"""

    return_ok = set_ok = domain_return_ok = path_return_ok = (
        lambda self, *args, **kwargs: False
    )
    netscape = True
    rfc2965 = hide_cookie2 = False


class SyncIO:
    """
    Synchronous I/O shell using the requests library.

    This is a thin wrapper that executes DAVRequest objects via HTTP
    and returns DAVResponse objects.  Transport failures are raised as
    ``davkit.lib.error.NetworkError``.

    Example:
        io = SyncIO()
        request = protocol.propfind_request("/files/", ["displayname"])
        response = io.execute(request)
        resources = parse_resources(response.body, request.url)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        verify: Union[bool, str] = True,
        cert: Union[str, tuple, None] = None,
        proxy: Optional[str] = None,
    ):
        """
        Initialize the sync I/O handler.

        Args:
            session: Existing requests Session to use (creates new if None)
            timeout: Request timeout in seconds
            verify: Verify SSL certificates, or path to a CA bundle
            cert: client certificate, passed on to requests
            proxy: proxy URL used for both http and https
        """
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.verify = verify
        self.cert = cert
        self.proxy = proxy

    def block_cookies(self) -> None:
        self.session.cookies.set_policy(BlockAllCookies())
        self.session.cookies.clear()

    def _proxies(self) -> Optional[dict]:
        if self.proxy is None:
            return None
        return {"http": self.proxy, "https": self.proxy}

    def execute(self, request: DAVRequest, stream: bool = False) -> DAVResponse:
        """
        Execute a DAVRequest and return DAVResponse.

        Args:
            request: The request to execute
            stream: leave the body unread.  The response gets an iterator
                    over the raw (still content-encoded) body and a closer
                    releasing the connection.  Error responses are always
                    read completely.

        Returns:
            DAVResponse with status, headers, and body
        """
        try:
            r = self.session.request(
                method=request.method.value,
                url=request.url,
                headers=request.headers,
                data=request.body,
                timeout=self.timeout,
                verify=self.verify,
                cert=self.cert,
                proxies=self._proxies(),
                stream=stream,
            )
            if stream and r.status_code < 300:
                return DAVResponse(
                    status=r.status_code,
                    headers=r.headers,
                    reason=r.reason or "",
                    stream=r.raw.stream(CHUNK_SIZE, decode_content=False),
                    closer=r.close,
                )
            body = r.content
        except requests.exceptions.Timeout as e:
            raise error.NetworkTimeoutError(
                url=request.url, method=request.method.value, cause=e
            ) from e
        except (
            requests.exceptions.RequestException,
            urllib3.exceptions.HTTPError,
            OSError,
        ) as e:
            raise error.NetworkError(
                url=request.url, method=request.method.value, cause=e
            ) from e

        return DAVResponse(
            status=r.status_code,
            headers=r.headers,
            body=body,
            reason=r.reason or "",
        )

    def close(self) -> None:
        """Close the session if we created it."""
        if self._owns_session and self.session:
            self.session.close()

    def __enter__(self) -> "SyncIO":
        """Context manager entry."""
        return self

    def __exit__(self, *args) -> None:
        """Context manager exit."""
        self.close()
