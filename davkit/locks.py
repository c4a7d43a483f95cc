#!/usr/bin/env python
"""
Lock token lifecycle (RFC 4918 section 9.10 and 9.11).

Tokens are opaque strings, only held for the duration of whatever the
caller wants to guard.  Nothing is persisted.
"""
import logging
from typing import List
from typing import Optional
from typing import TYPE_CHECKING

from davkit.lib import error
from davkit.lib.util import strip_lock_token
from davkit.protocol.xml_parsers import parse_active_locks
from davkit.protocol.xml_parsers import parse_lock_token
from davkit.protocol.xml_parsers import parse_multistatus
from davkit.resources import ActiveLock

if TYPE_CHECKING:
    from davkit.davclient import DAVClient

log = logging.getLogger(__name__)

DEFAULT_OWNER = "python-davkit"


class LockManager:
    def __init__(self, client: "DAVClient") -> None:
        self.client = client

    def lock(
        self,
        path: str,
        timeout: Optional[int] = 3600,
        owner: Optional[str] = None,
        shared: bool = False,
        depth: int = 0,
    ) -> str:
        """
        Takes a write lock on a resource.

        Args:
            path: resource to lock
            timeout: requested lifetime in seconds, None for infinite
            owner: free text, defaults to the username
            shared: shared instead of exclusive lock
            depth: 0, or -1 to lock a collection with all its members

        Returns:
            the lock token
        """
        if owner is None:
            owner = self.client.authenticator.username or DEFAULT_OWNER
        request = self.client.protocol.lock_request(
            path, timeout=timeout, owner=owner, shared=shared, depth=depth
        )
        response = self.client.request(request)
        token = parse_lock_token(response.body) or strip_lock_token(
            response.header("Lock-Token")
        )
        if not token:
            raise error.MalformedResponseError(
                url=request.url,
                method=request.method.value,
                reason="LOCK response without lock token",
            )
        log.debug(f"locked {request.url} with token {token}")
        return token

    def refresh_lock(
        self, path: str, token: str, timeout: Optional[int] = 3600
    ) -> str:
        """
        Refreshes a lock.  If the server hands out a new token, that one
        is returned, otherwise the given one.
        """
        request = self.client.protocol.refresh_lock_request(path, token, timeout)
        response = self.client.request(request)
        try:
            new_token = parse_lock_token(response.body)
        except error.MalformedResponseError:
            error.weirdness("unparseable body in lock refresh response", request.url)
            new_token = None
        if new_token and new_token != token:
            log.debug(f"lock on {request.url} refreshed with new token {new_token}")
            return new_token
        return token

    def unlock(self, path: str, token: str) -> None:
        self.client.request(self.client.protocol.unlock_request(path, token))

    def discover_locks(self, path: str) -> List[ActiveLock]:
        request = self.client.protocol.propfind_request(path, ["lockdiscovery"], depth=0)
        response = self.client.request(request)
        multistatus = parse_multistatus(response.body, huge_tree=self.client.huge_tree)
        locks: List[ActiveLock] = []
        for r in multistatus:
            locks.extend(parse_active_locks(r.element("lockdiscovery")))
        return locks

    def is_locked(self, path: str) -> bool:
        return bool(self.discover_locks(path))

    def get_lock_token(self, path: str) -> Optional[str]:
        """Token of the first active lock on a resource, if any is visible"""
        for lock in self.discover_locks(path):
            if lock.token:
                return lock.token
        return None
