#!/usr/bin/env python
import logging
import os
from typing import Dict
from typing import List
from typing import Optional
from typing import Type
from typing import Union

from davkit import __version__

## Environmental variables prepended with "PYTHON_DAVKIT" are used for debug purposes,
## environmental variables prepended with "DAVKIT_" are for connection parameters
debug_dump_communication = os.environ.get("PYTHON_DAVKIT_COMMDUMP", False)
## one of DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("PYTHON_DAVKIT_DEBUGMODE")
if not debugmode:
    if "dev" in __version__:
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("davkit")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)


def weirdness(*reasons) -> None:
    """The server did something legal-but-odd, or outright wrong, that we can live with"""
    reason = " : ".join([str(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")


class DAVError(Exception):
    """
    Base class for everything davkit raises.

    All errors know which request failed (``method`` and ``url``).
    Errors caused by a server response additionally carry the
    ``status``, the raw ``body`` and the condition names found in an
    embedded ``DAV:error`` element, if any.
    """

    url: Optional[str] = None
    method: Optional[str] = None
    reason: str = "no reason"
    status: Optional[int] = None
    body: Optional[bytes] = None
    description: Optional[str] = None

    def __init__(
        self,
        url: Optional[str] = None,
        reason: Optional[str] = None,
        method: Optional[str] = None,
        status: Optional[int] = None,
        body: Union[bytes, str, None] = None,
        conditions: Optional[List[str]] = None,
        description: Optional[str] = None,
    ) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason
        if method:
            self.method = method
        if status is not None:
            self.status = status
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.body = body
        self.conditions = list(conditions or [])
        if description:
            self.description = description
        super().__init__(self.reason)

    def __str__(self) -> str:
        return "%s at '%s' (%s), reason %s" % (
            self.__class__.__name__,
            self.url,
            self.method,
            self.reason,
        )

    @property
    def first_condition(self) -> Optional[str]:
        return self.conditions[0] if self.conditions else None

    @property
    def is_client_error(self) -> bool:
        return self.status is not None and 400 <= self.status < 500

    @property
    def is_server_error(self) -> bool:
        return self.status is not None and 500 <= self.status < 600


class NetworkError(DAVError):
    """
    We could not talk to the server at all: DNS failure, refused or
    reset connection, broken stream.  The original exception is kept
    in ``cause``.  Retrying is up to the caller.
    """

    def __init__(self, *largs, cause: Optional[BaseException] = None, **kwargs) -> None:
        self.cause = cause
        if cause is not None and not kwargs.get("reason"):
            kwargs["reason"] = "%s: %s" % (cause.__class__.__name__, cause)
        super().__init__(*largs, **kwargs)


class NetworkTimeoutError(NetworkError):
    pass


class ProtocolError(DAVError):
    """
    The server answered, but not with a success status.
    """

    pass


class ClientError(ProtocolError):
    pass


class ForbiddenError(ClientError):
    pass


class NotFoundError(ClientError):
    pass


class ConflictError(ClientError):
    pass


class PreconditionFailedError(ClientError):
    pass


class LockedError(ClientError):
    pass


class ServerError(ProtocolError):
    pass


class AuthenticationError(DAVError):
    """
    The server insists on credentials we could not provide: the single
    retry after a 401 challenge was rejected as well, there were no
    usable credentials, or the request body was a stream that cannot be
    sent twice.
    """

    pass


class MalformedResponseError(DAVError):
    """
    The server response could not be parsed, or lacks elements the
    protocol requires.
    """

    pass


exception_by_status: Dict[int, Type[ProtocolError]] = {
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    412: PreconditionFailedError,
    423: LockedError,
}


def protocol_error(
    method: str,
    url: str,
    status: int,
    body: Union[bytes, str, None] = None,
    reason: Optional[str] = None,
) -> ProtocolError:
    """
    Builds the right ProtocolError subclass for a failed response.  If
    the body contains a ``DAV:error`` element, the condition names and
    the description are attached to the exception.
    """
    from davkit.protocol.xml_parsers import parse_error_body

    if status in exception_by_status:
        cls: Type[ProtocolError] = exception_by_status[status]
    elif 500 <= status < 600:
        cls = ServerError
    elif 400 <= status < 500:
        cls = ClientError
    else:
        cls = ProtocolError

    conditions, description = parse_error_body(body)
    message = "%s failed with status %i" % (method, status)
    if reason:
        message += " " + reason
    if description:
        message += ": " + description
    elif conditions:
        message += ": " + ", ".join(conditions)
    return cls(
        url=url,
        method=method,
        status=status,
        body=body,
        reason=message,
        conditions=conditions,
        description=description,
    )
