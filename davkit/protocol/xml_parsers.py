"""
Pure functions for parsing WebDAV XML responses.

All functions in this module are pure - they take XML bytes in and
return structured data out, with no side effects or I/O.  Elements are
matched by local name only (see davkit.lib.xmlutil), since servers are
not consistent about namespace prefixes.
"""

import logging

from lxml import etree
from lxml.etree import _Element

from davkit.lib import error
from davkit.lib import xmlutil as xu
from davkit.lib.url import absolutize_href
from davkit.lib.util import parse_date
from davkit.resources import DEFAULT_CONTENT_TYPE, ActiveLock, DavAce, DavAcl, DavResource

from .types import Multistatus, Propstat, Response, SyncCollectionResult

log = logging.getLogger(__name__)

## Value stored for a resourcetype property flagging a collection
COLLECTION = "collection"
## Value stored for a property that came back present but without text
EMPTY_PROPERTY = ""


def _parse_xml(body: bytes | str, huge_tree: bool = False) -> _Element:
    if isinstance(body, str):
        body = body.encode("utf-8")
    try:
        return etree.fromstring(
            body, etree.XMLParser(remove_blank_text=True, huge_tree=huge_tree)
        )
    except etree.XMLSyntaxError as e:
        raise error.MalformedResponseError(reason=f"invalid XML: {e}") from e


def _status_to_code(status_line: str | None) -> int:
    """
    Extracts the numeric code from a status line like "HTTP/1.1 200 OK".
    """
    if not status_line:
        raise error.MalformedResponseError(reason="empty status element")
    parts = status_line.split()
    if len(parts) >= 2 and parts[1].isdigit():
        return int(parts[1])
    if parts[0].isdigit():
        error.weirdness("status line without protocol", status_line)
        return int(parts[0])
    raise error.MalformedResponseError(reason=f"unparseable status {status_line!r}")


def _resource_types(element: _Element) -> list[str]:
    """
    Local names of everything inside a resourcetype.  The collection
    marker may be nested inside server specific elements, so all
    descendants are scanned.
    """
    types: list[str] = []
    for e in element.iterdescendants():
        name = xu.localname(e)
        if name and name not in types:
            types.append(name)
    return types


def _property_value(element: _Element) -> str | None:
    name = xu.localname(element)
    if name == "resourcetype":
        types = _resource_types(element)
        if COLLECTION in types:
            return COLLECTION
        return " ".join(types) or None
    return xu.text_content(element)


def _parse_propstat(element: _Element) -> Propstat:
    prop = xu.first_child_by_localname(element, "prop")
    status = xu.first_child_by_localname(element, "status")
    if prop is None or status is None:
        raise error.MalformedResponseError(
            reason="propstat without %s" % ("prop" if prop is None else "status")
        )
    propstat = Propstat(
        status=_status_to_code(xu.text_content(status)),
        description=xu.text_of_first_descendant(element, "responsedescription"),
    )
    for child in xu.child_elements(prop):
        name = xu.localname(child)
        propstat.properties[name] = _property_value(child)
        propstat.elements[name] = child
    return propstat


def _parse_response_element(element: _Element) -> Response:
    href = xu.first_child_by_localname(element, "href")
    if href is None:
        raise error.MalformedResponseError(reason="response without href")

    status = xu.first_child_by_localname(element, "status")
    propstats = [
        _parse_propstat(p) for p in xu.children_by_localname(element, "propstat")
    ]
    if status is None and not propstats:
        raise error.MalformedResponseError(
            reason="response for %s has neither status nor propstat" % href.text
        )

    error_element = xu.first_child_by_localname(element, "error")
    location = xu.first_child_by_localname(element, "location")
    return Response(
        href=(href.text or "").strip(),
        status=_status_to_code(xu.text_content(status)) if status is not None else None,
        propstats=propstats,
        error=_conditions(error_element) if error_element is not None else [],
        description=xu.text_content(
            xu.first_child_by_localname(element, "responsedescription")
        ),
        location=xu.text_of_first_descendant(location, "href")
        if location is not None
        else None,
    )


def _strip_to_multistatus(tree: _Element) -> _Element:
    """
    Some servers wrap the multistatus in other elements.  Find it.
    """
    multistatus = xu.self_or_descendant_by_localname(tree, "multistatus")
    if multistatus is None:
        raise error.MalformedResponseError(
            reason="expected multistatus, got %s" % xu.localname(tree)
        )
    return multistatus


def parse_multistatus(body: bytes | str, huge_tree: bool = False) -> Multistatus:
    """
    Parse a 207 Multi-Status response body.

    Args:
        body: Raw XML response bytes
        huge_tree: Allow parsing very large XML documents

    Returns:
        Multistatus with one Response per response element, in order

    Raises:
        MalformedResponseError: if the body is not XML, has no
            multistatus root, or a response lacks required elements
    """
    multistatus = _strip_to_multistatus(_parse_xml(body, huge_tree))
    result = Multistatus()
    for elem in xu.child_elements(multistatus):
        name = xu.localname(elem)
        if name == "response":
            result.responses.append(_parse_response_element(elem))
        elif name == "sync-token":
            result.sync_token = xu.text_content(elem)
        elif name == "responsedescription":
            result.description = xu.text_content(elem)
    return result


def _int_or_default(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        error.weirdness("non-numeric value", value)
        return default


def response_to_resource(request_url: str, response: Response) -> DavResource:
    """
    Builds a DavResource from the successful propstats of a response.
    """
    props = response.properties()
    resourcetype = response.element("resourcetype")
    resource_types = _resource_types(resourcetype) if resourcetype is not None else []
    return DavResource(
        href=absolutize_href(request_url, response.href),
        status=response.status or 200,
        content_type=props.get("getcontenttype") or DEFAULT_CONTENT_TYPE,
        content_length=_int_or_default(props.get("getcontentlength"), 0),
        etag=props.get("getetag"),
        display_name=props.get("displayname"),
        resource_types=resource_types,
        created=parse_date(props.get("creationdate")),
        modified=parse_date(props.get("getlastmodified")),
        content_language=props.get("getcontentlanguage"),
        custom_properties={
            k: EMPTY_PROPERTY if v is None else v for k, v in props.items()
        },
    )


def parse_resources(
    body: bytes | str, request_url: str, huge_tree: bool = False
) -> list[DavResource]:
    """Parse a multistatus body into resource descriptors"""
    multistatus = parse_multistatus(body, huge_tree=huge_tree)
    return [response_to_resource(request_url, r) for r in multistatus]


def parse_sync_collection_response(
    body: bytes | str, request_url: str, huge_tree: bool = False
) -> SyncCollectionResult:
    """
    Parse a sync-collection REPORT response.  Members reported with a
    404 status are deleted ones.
    """
    multistatus = parse_multistatus(body, huge_tree=huge_tree)
    result = SyncCollectionResult(sync_token=multistatus.sync_token)
    for response in multistatus:
        if response.status == 404:
            result.deleted.append(absolutize_href(request_url, response.href))
        else:
            result.changed.append(response_to_resource(request_url, response))
    return result


def _conditions(element: _Element) -> list[str]:
    return [
        xu.localname(c)
        for c in xu.child_elements(element)
        if xu.localname(c) != "responsedescription"
    ]


def parse_error_body(body: bytes | str | None) -> tuple[list[str], str | None]:
    """
    Extracts precondition/postcondition names from a DAV:error body.

    Error bodies are optional and frequently not XML at all (HTML error
    pages and such), so anything unparseable simply gives no conditions.

    Returns:
        (list of condition local names, description or None)
    """
    if not body:
        return [], None
    if isinstance(body, str):
        body = body.encode("utf-8")
    if b"error" not in body:
        return [], None
    try:
        tree = etree.fromstring(body)
    except etree.XMLSyntaxError:
        log.debug("error body is not XML")
        return [], None
    error_element = xu.self_or_descendant_by_localname(tree, "error")
    if error_element is None:
        return [], None
    description = xu.text_of_first_descendant(error_element, "responsedescription")
    return _conditions(error_element), description


def parse_lock_token(body: bytes | str | None) -> str | None:
    """
    Returns the token of a LOCK response (lockdiscovery/activelock/locktoken/href).
    """
    if not body:
        return None
    tree = _parse_xml(body)
    locktoken = xu.self_or_descendant_by_localname(tree, "locktoken")
    if locktoken is None:
        return None
    return xu.text_of_first_descendant(locktoken, "href")


def _active_lock(element: _Element) -> ActiveLock:
    def _first_child_name(name: str, default: str) -> str:
        container = xu.first_descendant_by_localname(element, name)
        if container is None:
            return default
        for child in xu.child_elements(container):
            return xu.localname(child)
        return default

    locktoken = xu.first_descendant_by_localname(element, "locktoken")
    lockroot = xu.first_descendant_by_localname(element, "lockroot")
    owner = xu.first_descendant_by_localname(element, "owner")
    return ActiveLock(
        token=xu.text_of_first_descendant(locktoken, "href")
        if locktoken is not None
        else None,
        scope=_first_child_name("lockscope", "exclusive"),
        type=_first_child_name("locktype", "write"),
        depth=xu.text_of_first_descendant(element, "depth") or "0",
        owner=xu.text_content(owner),
        timeout=xu.text_of_first_descendant(element, "timeout"),
        root=xu.text_of_first_descendant(lockroot, "href")
        if lockroot is not None
        else None,
    )


def parse_active_locks(element: _Element | None) -> list[ActiveLock]:
    """Parse the activelock entries of a lockdiscovery element"""
    if element is None:
        return []
    return [
        _active_lock(a) for a in xu.descendants_by_localname(element, "activelock")
    ]


def _privilege_names(element: _Element) -> list[str]:
    names: list[str] = []
    for privilege in xu.descendants_by_localname(element, "privilege"):
        for child in xu.child_elements(privilege):
            names.append(xu.localname(child))
            break
    return names


def _principal_string(principal: _Element) -> str:
    href = xu.first_child_by_localname(principal, "href")
    if href is not None:
        return (href.text or "").strip()
    for child in xu.child_elements(principal):
        name = xu.localname(child)
        if name == "property":
            for prop in xu.child_elements(child):
                return "property:" + xu.localname(prop)
        return "DAV:" + name
    raise error.MalformedResponseError(reason="empty principal in ace")


def parse_acl(element: _Element | None, resource_url: str | None = None) -> DavAcl:
    """Parse a DAV:acl property element"""
    if element is None:
        return DavAcl(resource_url=resource_url)
    aces: list[DavAce] = []
    for ace in xu.descendants_by_localname(element, "ace"):
        principal = xu.first_child_by_localname(ace, "principal")
        if principal is None:
            raise error.MalformedResponseError(reason="ace without principal")
        grant = xu.first_child_by_localname(ace, "grant")
        deny = xu.first_child_by_localname(ace, "deny")
        kind = grant if grant is not None else deny
        privileges = _privilege_names(kind) if kind is not None else []
        aces.append(
            DavAce(
                principal=_principal_string(principal),
                grant=grant is not None,
                privileges=frozenset(privileges),
                inherited=xu.first_child_by_localname(ace, "inherited") is not None,
                protected=xu.first_child_by_localname(ace, "protected") is not None,
            )
        )
    return DavAcl(aces=aces, resource_url=resource_url)


def parse_privileges(element: _Element | None) -> list[str]:
    """Parse a current-user-privilege-set element into privilege names"""
    if element is None:
        return []
    return _privilege_names(element)


def parse_supported_reports(element: _Element | None) -> list[str]:
    """Parse a supported-report-set element into report names"""
    if element is None:
        return []
    names: list[str] = []
    for report in xu.descendants_by_localname(element, "report"):
        for child in xu.child_elements(report):
            names.append(xu.localname(child))
            break
    return names


def parse_hrefs(element: _Element | None) -> list[str]:
    """All non-empty hrefs below an element"""
    if element is None:
        return []
    ret = []
    for href in xu.descendants_by_localname(element, "href"):
        text = (href.text or "").strip()
        if text:
            ret.append(text)
    return ret


def first_href(body: bytes | str | None) -> str | None:
    """The first href found anywhere in a response body, if it is XML"""
    if not body:
        return None
    tree = _parse_xml(body)
    if xu.localname(tree) == "href":
        return xu.text_content(tree)
    return xu.text_of_first_descendant(tree, "href")
