"""
Authentication for WebDAV clients.

This module holds the pluggable authentication handlers and the
``Authenticator``, which decides what goes into the Authorization
header of each request and what to answer to a 401 challenge.

Exactly one credential mode is active at any time: either plain
credentials (username, password, optionally domain and workstation) or
a handler.  Setting one clears the other.  Mutating the authenticator
while requests are in flight on other threads gives undefined results;
callers must serialize that themselves.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass
from typing import Mapping, Protocol, runtime_checkable

from requests.auth import HTTPDigestAuth
from requests.utils import parse_dict_header

from davkit.lib.util import basic_auth
from davkit.protocol.types import DAVRequest

log = logging.getLogger(__name__)


def extract_auth_types(header: str) -> set[str]:
    """
    Extract authentication types from WWW-Authenticate header.

    Parses the WWW-Authenticate header value and extracts the
    authentication scheme names (e.g., "basic", "digest", "bearer").

    Args:
        header: WWW-Authenticate header value from server response.

    Returns:
        Set of lowercase auth type strings.

    Example:
        >>> extract_auth_types('Basic realm="test", Digest realm="test"')
        {'basic', 'digest'}

    Reference:
        https://developer.mozilla.org/en-US/docs/Web/HTTP/Headers/WWW-Authenticate#syntax
    """
    return {h.split()[0] for h in header.lower().split(",") if h.strip()}


def _challenge_for(scheme: str, header: str) -> str:
    """The part of a WWW-Authenticate value belonging to ``scheme``"""
    lower = header.lower()
    start = lower.find(scheme.lower())
    if start < 0:
        return header
    return header[start:]


@runtime_checkable
class AuthenticationHandler(Protocol):
    """
    Interface of a pluggable authentication scheme.

    ``handle_challenge`` is called with the request that got a 401 and
    the headers of the 401 response.  It returns the Authorization
    value to retry with, or None if it has no better answer.
    ``preemptive_value`` gives the Authorization value to send before
    any challenge, or None if the scheme cannot do that.
    """

    scheme_name: str

    def can_handle(self, scheme: str) -> bool: ...

    def preemptive_value(self, request: DAVRequest) -> str | None: ...

    def handle_challenge(
        self, request: DAVRequest, challenge_headers: Mapping[str, str]
    ) -> str | None: ...


class BasicAuthenticationHandler:
    """HTTP Basic (RFC 7617), with ``DOMAIN\\username`` when a domain is given"""

    scheme_name = "Basic"

    def __init__(
        self, username: str, password: str, domain: str | None = None
    ) -> None:
        self.username = username
        self.password = password
        self.domain = domain

    def can_handle(self, scheme: str) -> bool:
        return "basic" in scheme.lower()

    def _value(self) -> str:
        user = f"{self.domain}\\{self.username}" if self.domain else self.username
        return basic_auth(user, self.password)

    def preemptive_value(self, request: DAVRequest) -> str | None:
        return self._value()

    def handle_challenge(
        self, request: DAVRequest, challenge_headers: Mapping[str, str]
    ) -> str | None:
        return self._value()


class BearerAuthenticationHandler:
    scheme_name = "Bearer"

    def __init__(self, token: str) -> None:
        self.token = token

    def __eq__(self, other: object) -> bool:
        return self.token == getattr(other, "token", None)

    def __ne__(self, other: object) -> bool:
        return not self == other

    def can_handle(self, scheme: str) -> bool:
        return "bearer" in scheme.lower()

    def preemptive_value(self, request: DAVRequest) -> str | None:
        return f"Bearer {self.token}"

    def handle_challenge(
        self, request: DAVRequest, challenge_headers: Mapping[str, str]
    ) -> str | None:
        return f"Bearer {self.token}"


class DigestAuthenticationHandler:
    """
    HTTP Digest (RFC 7616).  Digest needs the nonce from the server, so
    it can only answer challenges.  The response is computed by
    requests' own HTTPDigestAuth.
    """

    scheme_name = "Digest"

    def __init__(self, username: str, password: str) -> None:
        self.username = username
        self.password = password
        self._digest = HTTPDigestAuth(username, password)

    def can_handle(self, scheme: str) -> bool:
        return "digest" in scheme.lower()

    def preemptive_value(self, request: DAVRequest) -> str | None:
        return None

    def handle_challenge(
        self, request: DAVRequest, challenge_headers: Mapping[str, str]
    ) -> str | None:
        header = challenge_headers.get("WWW-Authenticate") or ""
        challenge = _challenge_for("digest", header)
        if not challenge.lower().startswith("digest"):
            return None
        ## HTTPDigestAuth only reads the challenge from its per-thread state
        ## (requests >= 2.11), there is no public setter for it
        self._digest.init_per_thread_state()
        self._digest._thread_local.chal = parse_dict_header(challenge[len("digest ") :])
        return self._digest.build_digest_header(request.method.value, request.url)


class NTLMAuthenticationHandler(abc.ABC):
    """
    Skeleton for NTLM.  The message encoding is left to a subclass
    (typically wrapping an NTLM library); this class does the handshake
    bookkeeping: a bare ``NTLM`` challenge is answered with a type 1
    message, ``NTLM <type 2>`` with a type 3 message.
    """

    scheme_name = "NTLM"

    def __init__(
        self, username: str, password: str, domain: str, workstation: str
    ) -> None:
        self.username = username
        self.password = password
        self.domain = domain
        self.workstation = workstation

    @abc.abstractmethod
    def create_type1_message(self) -> str:
        """base64 encoded negotiate message"""

    @abc.abstractmethod
    def create_type3_message(self, type2_challenge: str) -> str:
        """base64 encoded authenticate message answering the server's challenge"""

    def can_handle(self, scheme: str) -> bool:
        return "ntlm" in scheme.lower()

    def preemptive_value(self, request: DAVRequest) -> str | None:
        return None

    def handle_challenge(
        self, request: DAVRequest, challenge_headers: Mapping[str, str]
    ) -> str | None:
        challenge = _challenge_for(
            "ntlm", challenge_headers.get("WWW-Authenticate") or ""
        ).strip()
        if challenge.lower() == "ntlm":
            return "NTLM " + self.create_type1_message()
        if challenge.lower().startswith("ntlm "):
            return "NTLM " + self.create_type3_message(challenge[5:].strip())
        return None


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str
    domain: str | None = None
    workstation: str | None = None

    @property
    def qualified_username(self) -> str:
        if self.domain:
            return f"{self.domain}\\{self.username}"
        return self.username

    def basic(self) -> str:
        return basic_auth(self.qualified_username, self.password)


class Authenticator:
    """
    Keeps the active credential mode and computes Authorization headers.

    With ``preemptive`` set, credentials are sent with every request;
    otherwise they are only sent when the server asks with a 401.
    """

    def __init__(self) -> None:
        self._credentials: Credentials | None = None
        self._handler: AuthenticationHandler | None = None
        self.preemptive = False

    @property
    def credentials(self) -> Credentials | None:
        return self._credentials

    @property
    def handler(self) -> AuthenticationHandler | None:
        return self._handler

    @property
    def username(self) -> str | None:
        return self._credentials.username if self._credentials else None

    @property
    def has_authentication(self) -> bool:
        return self._credentials is not None or self._handler is not None

    def set_credentials(
        self, username: str, password: str, preemptive: bool = False
    ) -> None:
        self.set_credentials_with_domain(username, password, preemptive=preemptive)

    def set_credentials_with_domain(
        self,
        username: str,
        password: str,
        domain: str | None = None,
        workstation: str | None = None,
        preemptive: bool = False,
    ) -> None:
        self._handler = None
        self._credentials = Credentials(username, password, domain or None, workstation or None)
        self.preemptive = preemptive

    def set_handler(
        self, handler: AuthenticationHandler, preemptive: bool = False
    ) -> None:
        self._credentials = None
        self._handler = handler
        self.preemptive = preemptive

    def clear(self) -> None:
        self._credentials = None
        self._handler = None
        self.preemptive = False

    def headers_for_request(self, request: DAVRequest) -> dict[str, str]:
        """Headers to attach before sending ``request``"""
        headers: dict[str, str] = {}
        creds = self._credentials
        if creds is not None and creds.workstation:
            headers["X-Workstation"] = creds.workstation
        if not self.preemptive:
            return headers

        if self._handler is not None:
            try:
                value = self._handler.preemptive_value(request)
            except Exception as e:
                log.warning(
                    f"{self._handler.scheme_name} handler failed to produce a preemptive value: {e}"
                )
                value = None
            if value:
                headers["Authorization"] = value
        elif creds is not None:
            headers["Authorization"] = creds.basic()
        return headers

    def respond_to_challenge(
        self, request: DAVRequest, challenge_headers: Mapping[str, str]
    ) -> str | None:
        """
        The Authorization value to retry ``request`` with after a 401,
        or None if there is nothing new to try.
        """
        www_authenticate = challenge_headers.get("WWW-Authenticate")
        schemes = extract_auth_types(www_authenticate) if www_authenticate else set()
        value = None

        if self._handler is not None:
            if not schemes or any(self._handler.can_handle(s) for s in schemes):
                try:
                    value = self._handler.handle_challenge(request, challenge_headers)
                except Exception as e:
                    log.warning(
                        f"{self._handler.scheme_name} handler failed on challenge: {e}"
                    )
                    value = None
            else:
                log.debug(
                    f"{self._handler.scheme_name} handler can not handle {sorted(schemes)}"
                )

        if value is None and self._credentials is not None:
            if schemes and "basic" not in schemes:
                log.debug(f"server offers {sorted(schemes)}, trying basic anyway")
            value = self._credentials.basic()

        if value is not None and value == request.headers.get("Authorization"):
            ## The very same credentials were just rejected
            return None
        return value
