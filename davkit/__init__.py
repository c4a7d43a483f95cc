#!/usr/bin/env python
import logging

__version__ = "0.9.0"

# Silence notification of no default logging handler
log = logging.getLogger("davkit")


class NullHandler(logging.Handler):
    def emit(self, record) -> None:
        pass


log.addHandler(NullHandler())

from .davclient import DAVClient  # noqa: E402
from .davclient import get_davclient  # noqa: E402
from .lib.auth import BasicAuthenticationHandler  # noqa: E402
from .lib.auth import BearerAuthenticationHandler  # noqa: E402
from .lib.auth import DigestAuthenticationHandler  # noqa: E402

__all__ = [
    "__version__",
    "DAVClient",
    "get_davclient",
    "BasicAuthenticationHandler",
    "BearerAuthenticationHandler",
    "DigestAuthenticationHandler",
]
