#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from .base import ValuedBaseElement
from davkit.lib.namespace import ns


# Operations
class Propfind(BaseElement):
    tag: ClassVar[str] = ns("D", "propfind")


class PropertyUpdate(BaseElement):
    tag: ClassVar[str] = ns("D", "propertyupdate")


class LockInfo(BaseElement):
    tag: ClassVar[str] = ns("D", "lockinfo")


class Acl(BaseElement):
    tag: ClassVar[str] = ns("D", "acl")


class SearchRequest(BaseElement):
    tag: ClassVar[str] = ns("D", "searchrequest")


class SyncCollection(BaseElement):
    tag: ClassVar[str] = ns("D", "sync-collection")


class Bind(BaseElement):
    tag: ClassVar[str] = ns("D", "bind")


class Unbind(BaseElement):
    tag: ClassVar[str] = ns("D", "unbind")


class VersionControl(BaseElement):
    tag: ClassVar[str] = ns("D", "version-control")


class Checkout(BaseElement):
    tag: ClassVar[str] = ns("D", "checkout")


class Checkin(BaseElement):
    tag: ClassVar[str] = ns("D", "checkin")


class Uncheckout(BaseElement):
    tag: ClassVar[str] = ns("D", "uncheckout")


class BaselineControl(BaseElement):
    tag: ClassVar[str] = ns("D", "baseline-control")


class MkBaseline(BaseElement):
    tag: ClassVar[str] = ns("D", "mkbaseline")


class VersionTree(BaseElement):
    tag: ClassVar[str] = ns("D", "version-tree")


# Propfind / proppatch components
class Prop(BaseElement):
    tag: ClassVar[str] = ns("D", "prop")


class Allprop(BaseElement):
    tag: ClassVar[str] = ns("D", "allprop")


class PropName(BaseElement):
    tag: ClassVar[str] = ns("D", "propname")


class Set(BaseElement):
    tag: ClassVar[str] = ns("D", "set")


class Remove(BaseElement):
    tag: ClassVar[str] = ns("D", "remove")


# Locking
class LockScope(BaseElement):
    tag: ClassVar[str] = ns("D", "lockscope")


class Exclusive(BaseElement):
    tag: ClassVar[str] = ns("D", "exclusive")


class Shared(BaseElement):
    tag: ClassVar[str] = ns("D", "shared")


class LockType(BaseElement):
    tag: ClassVar[str] = ns("D", "locktype")


class Write(BaseElement):
    tag: ClassVar[str] = ns("D", "write")


class Owner(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "owner")


# Access control
class Ace(BaseElement):
    tag: ClassVar[str] = ns("D", "ace")


class Principal(BaseElement):
    tag: ClassVar[str] = ns("D", "principal")


class All(BaseElement):
    tag: ClassVar[str] = ns("D", "all")


class Authenticated(BaseElement):
    tag: ClassVar[str] = ns("D", "authenticated")


class Unauthenticated(BaseElement):
    tag: ClassVar[str] = ns("D", "unauthenticated")


class PrincipalSelf(BaseElement):
    tag: ClassVar[str] = ns("D", "self")


class Grant(BaseElement):
    tag: ClassVar[str] = ns("D", "grant")


class Deny(BaseElement):
    tag: ClassVar[str] = ns("D", "deny")


class Privilege(BaseElement):
    tag: ClassVar[str] = ns("D", "privilege")


# Search
class BasicSearch(BaseElement):
    tag: ClassVar[str] = ns("D", "basicsearch")


class Select(BaseElement):
    tag: ClassVar[str] = ns("D", "select")


class From(BaseElement):
    tag: ClassVar[str] = ns("D", "from")


class Scope(BaseElement):
    tag: ClassVar[str] = ns("D", "scope")


class Where(BaseElement):
    tag: ClassVar[str] = ns("D", "where")


class Contains(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "contains")


class Sql(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "sql")


class Depth(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "depth")


# Sync
class SyncToken(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "sync-token")


class SyncLevel(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "sync-level")


class Limit(BaseElement):
    tag: ClassVar[str] = ns("D", "limit")


class NResults(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "nresults")


# Binding
class Segment(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "segment")


# Versioning
class Version(BaseElement):
    tag: ClassVar[str] = ns("D", "version")


class ActivitySet(BaseElement):
    tag: ClassVar[str] = ns("D", "activity-set")


class KeepCheckedOut(BaseElement):
    tag: ClassVar[str] = ns("D", "keep-checked-out")


class Baseline(BaseElement):
    tag: ClassVar[str] = ns("D", "baseline")


# Properties and generic containers
class Href(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "href")
