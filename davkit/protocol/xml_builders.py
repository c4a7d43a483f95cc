"""
Pure functions for building WebDAV XML request bodies.

All functions in this module are pure - they take data in and return XML
out, with no side effects or I/O.

Property names may be given as a bare local name (``displayname``), in
Clark notation (``{http://example.com/ns}color``) or with one of the
known prefixes (``D:displayname``).  Bare names are DAV: properties when
asked for in a PROPFIND.  When set or removed through PROPPATCH, bare
names that are not live DAV: properties go into the custom namespace.
"""
from collections.abc import Iterable, Mapping
from typing import Any

from lxml import etree

from davkit.elements import dav
from davkit.elements.base import BaseElement
from davkit.elements.base import PropertyElement
from davkit.lib.namespace import CUSTOM_NAMESPACE, ns, nsmap2
from davkit.resources import DavAce

## Properties defined by RFC 4918 and the extensions supported here.
DAV_PROPERTIES = frozenset(
    (
        "creationdate",
        "displayname",
        "getcontentlanguage",
        "getcontentlength",
        "getcontenttype",
        "getetag",
        "getlastmodified",
        "lockdiscovery",
        "resourcetype",
        "supportedlock",
        "quota-available-bytes",
        "quota-used-bytes",
        "acl",
        "owner",
        "group",
        "current-user-privilege-set",
        "supported-privilege-set",
        "principal-collection-set",
        "principal-URL",
        "supported-report-set",
        "version-history",
        "version-name",
        "creator-displayname",
        "successor-set",
        "predecessor-set",
        "checked-in",
        "checked-out",
        "sync-token",
    )
)

DEFAULT_LIST_PROPERTIES = (
    "getcontentlength",
    "getlastmodified",
    "creationdate",
    "displayname",
    "getcontenttype",
    "resourcetype",
    "getetag",
    "lockdiscovery",
)

VERSION_TREE_PROPERTIES = (
    "version-name",
    "creator-displayname",
    "creationdate",
    "successor-set",
    "predecessor-set",
)

SYNC_PROPERTIES = ("getetag", "getcontentlength", "getlastmodified")


def _to_xml(root: BaseElement) -> bytes:
    return etree.tostring(root.xmlelement(), encoding="utf-8", xml_declaration=True)


def property_tag(name: str, custom_namespace: str | None = None) -> str:
    """
    Resolves a property name to an lxml (Clark notation) tag.

    Args:
        name: property name, bare, prefixed or in Clark notation
        custom_namespace: namespace for bare names outside DAV:.  If None,
            bare names always resolve to DAV:

    Returns:
        tag like ``{DAV:}displayname``
    """
    if name.startswith("{"):
        return name
    if ":" in name:
        prefix, local = name.split(":", 1)
        if prefix not in nsmap2:
            raise ValueError(
                "unknown namespace prefix in property name %r, use a bare name, "
                "one of the prefixes %s or Clark notation ({namespace}name)"
                % (name, ", ".join("%s:" % p for p in nsmap2))
            )
        return ns(prefix, local)
    if custom_namespace is None or name in DAV_PROPERTIES:
        return ns("D", name)
    return "{%s}%s" % (custom_namespace, name)


def _prop(names: Iterable[str]) -> dav.Prop:
    return dav.Prop() + [PropertyElement(property_tag(n)) for n in names]


def build_propfind_body(
    props: Iterable[str] | None = None,
    allprop: bool = False,
    propname: bool = False,
) -> bytes:
    """
    Build PROPFIND request body XML.

    Args:
        props: Property names to retrieve.  If None and allprop=False,
               an empty prop element is sent.
        allprop: If True, request all properties.
        propname: If True, request the property names only.

    Returns:
        UTF-8 encoded XML bytes
    """
    if allprop:
        propfind = dav.Propfind() + dav.Allprop()
    elif propname:
        propfind = dav.Propfind() + dav.PropName()
    else:
        propfind = dav.Propfind() + _prop(props or [])
    return _to_xml(propfind)


def build_proppatch_body(
    set_props: Mapping[str, Any] | None = None,
    remove_props: Iterable[str] | None = None,
    custom_namespace: str = CUSTOM_NAMESPACE,
) -> bytes:
    """
    Build PROPPATCH request body.

    All properties to be set go into one set/prop block, the properties
    to be removed are listed without value in one remove/prop block.
    Removing a property that does not exist is not an error here; the
    server will say so in the multistatus.

    Args:
        set_props: Properties to set (name -> value)
        remove_props: Names of properties to remove
        custom_namespace: namespace used for bare non-DAV names

    Returns:
        UTF-8 encoded XML bytes
    """
    propertyupdate = dav.PropertyUpdate()

    if set_props:
        set_elements = [
            PropertyElement(property_tag(name, custom_namespace), value)
            for name, value in set_props.items()
        ]
        propertyupdate += dav.Set() + (dav.Prop() + set_elements)

    remove_props = list(remove_props or [])
    if remove_props:
        remove_elements = [
            PropertyElement(property_tag(name, custom_namespace))
            for name in remove_props
        ]
        propertyupdate += dav.Remove() + (dav.Prop() + remove_elements)

    return _to_xml(propertyupdate)


def build_lockinfo_body(owner: str | None = None, shared: bool = False) -> bytes:
    """
    Build LOCK request body for a write lock.

    Args:
        owner: free text identifying the lock owner
        shared: shared instead of exclusive lock
    """
    scope = dav.Shared() if shared else dav.Exclusive()
    lockinfo = dav.LockInfo() + [
        dav.LockScope() + scope,
        dav.LockType() + dav.Write(),
    ]
    if owner:
        lockinfo += dav.Owner(owner)
    return _to_xml(lockinfo)


def _principal(principal: str) -> dav.Principal:
    special = {
        "DAV:all": dav.All,
        "DAV:authenticated": dav.Authenticated,
        "DAV:unauthenticated": dav.Unauthenticated,
        "DAV:self": dav.PrincipalSelf,
    }
    if principal in special:
        return dav.Principal() + special[principal]()
    return dav.Principal() + dav.Href(principal)


def build_acl_body(aces: Iterable[DavAce]) -> bytes:
    """
    Build ACL request body.

    Inherited and protected entries can not be set by a client, they
    are left out.
    """
    acl = dav.Acl()
    for ace in aces:
        if ace.inherited or ace.protected:
            continue
        privileges = [
            dav.Privilege() + PropertyElement(ns("D", p)) for p in sorted(ace.privileges)
        ]
        kind = dav.Grant() if ace.grant else dav.Deny()
        acl += dav.Ace() + [_principal(ace.principal), kind + privileges]
    return _to_xml(acl)


def build_search_body(query: str, language: str = "davbasic", scope: str = "/") -> bytes:
    """
    Build SEARCH request body.

    With the ``davbasic`` language, a basicsearch selecting all
    properties of resources under ``scope`` containing ``query`` is
    made.  Any other language sends the query verbatim in a DAV:sql
    element.
    """
    if language == "davbasic":
        search = dav.BasicSearch() + [
            dav.Select() + dav.Allprop(),
            dav.From() + (dav.Scope() + [dav.Href(scope), dav.Depth("infinity")]),
            dav.Where() + dav.Contains(query),
        ]
    else:
        search = dav.Sql(query)
    return _to_xml(dav.SearchRequest() + search)


def build_sync_collection_body(
    sync_token: str | None = None,
    props: Iterable[str] | None = None,
    depth: int = 1,
    limit: int | None = None,
) -> bytes:
    """
    Build sync-collection REPORT body (RFC 6578).

    Args:
        sync_token: token from the previous sync, None or "" for initial sync
        props: properties to return for changed members
        depth: 1 for immediate members, -1 for the full subtree
        limit: maximum number of results the server should return
    """
    level = "infinite" if depth == -1 else "1"
    sync = dav.SyncCollection() + [dav.SyncToken(sync_token or ""), dav.SyncLevel(level)]
    if limit is not None:
        sync += dav.Limit() + dav.NResults(limit)
    sync += _prop(props if props is not None else SYNC_PROPERTIES)
    return _to_xml(sync)


def build_version_tree_body(props: Iterable[str] | None = None) -> bytes:
    return _to_xml(
        dav.VersionTree() + _prop(props if props is not None else VERSION_TREE_PROPERTIES)
    )


def build_bind_body(segment: str, href: str) -> bytes:
    return _to_xml(dav.Bind() + [dav.Segment(segment), dav.Href(href)])


def build_unbind_body(segment: str) -> bytes:
    return _to_xml(dav.Unbind() + dav.Segment(segment))


def build_version_control_body(version: str | None = None) -> bytes:
    body = dav.VersionControl()
    if version:
        body += dav.Version() + dav.Href(version)
    return _to_xml(body)


def build_checkout_body(activity: str | None = None) -> bytes:
    body = dav.Checkout()
    if activity:
        body += dav.ActivitySet() + dav.Href(activity)
    return _to_xml(body)


def build_checkin_body(keep_checked_out: bool = False) -> bytes:
    body = dav.Checkin()
    if keep_checked_out:
        body += dav.KeepCheckedOut()
    return _to_xml(body)


def build_uncheckout_body() -> bytes:
    return _to_xml(dav.Uncheckout())


def build_baseline_control_body(baseline: str | None = None) -> bytes:
    body = dav.BaselineControl()
    if baseline:
        body += dav.Baseline() + dav.Href(baseline)
    return _to_xml(body)


def build_mkbaseline_body() -> bytes:
    return _to_xml(dav.MkBaseline())
