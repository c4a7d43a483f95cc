"""
Unit tests for Sans-I/O protocol layer.

These tests verify protocol logic without any HTTP mocking required.
All tests are pure - they test data transformations only.
"""

import pytest
from lxml import etree

from davkit.lib import error
from davkit.lib.util import depth_to_string
from davkit.lib.util import parse_depth
from davkit.protocol import (
    # Types
    DAVMethod,
    DAVRequest,
    DAVResponse,
    WebDAVProtocol,
    # Builders
    build_acl_body,
    build_lockinfo_body,
    build_propfind_body,
    build_proppatch_body,
    build_search_body,
    build_sync_collection_body,
    property_tag,
    # Parsers
    parse_acl,
    parse_active_locks,
    parse_error_body,
    parse_lock_token,
    parse_multistatus,
    parse_resources,
    parse_sync_collection_response,
)
from davkit.protocol.xml_builders import DAV_PROPERTIES
from davkit.protocol.xml_builders import build_bind_body
from davkit.protocol.xml_builders import build_version_tree_body
from davkit.protocol.xml_parsers import first_href
from davkit.protocol.xml_parsers import parse_privileges
from davkit.protocol.xml_parsers import parse_supported_reports
from davkit.resources import DavAce

BASE = "https://dav.example.com/files/"

## The same multistatus, with {p} replaced by the element prefix and
## {decl} by the matching namespace declaration
LISTING_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<{p}multistatus {decl}>
  <{p}response>
    <{p}href>/files/</{p}href>
    <{p}propstat>
      <{p}prop>
        <{p}displayname>files</{p}displayname>
        <{p}resourcetype><{p}collection/></{p}resourcetype>
        <{p}getlastmodified>Mon, 12 Jan 2015 10:00:00 GMT</{p}getlastmodified>
      </{p}prop>
      <{p}status>HTTP/1.1 200 OK</{p}status>
    </{p}propstat>
  </{p}response>
  <{p}response>
    <{p}href>/files/report.pdf</{p}href>
    <{p}propstat>
      <{p}prop>
        <{p}displayname>report.pdf</{p}displayname>
        <{p}getcontentlength>1024</{p}getcontentlength>
        <{p}getcontenttype>application/pdf</{p}getcontenttype>
        <{p}getetag>"abc"</{p}getetag>
        <{p}resourcetype/>
        <{p}creationdate>2015-01-12T10:00:00Z</{p}creationdate>
      </{p}prop>
      <{p}status>HTTP/1.1 200 OK</{p}status>
    </{p}propstat>
  </{p}response>
</{p}multistatus>
"""

PREFIX_VARIANTS = [
    ("D:", 'xmlns:D="DAV:"'),
    ("d:", 'xmlns:d="DAV:"'),
    ("", 'xmlns="DAV:"'),
]


def listing(prefix, decl):
    return LISTING_TEMPLATE.format(p=prefix, decl=decl).encode("utf-8")


def summary(resources):
    return [
        (
            r.href,
            r.is_directory,
            r.content_length,
            r.content_type,
            r.display_name,
            r.etag,
            r.modified,
            r.created,
        )
        for r in resources
    ]


class TestDAVTypes:
    """Test core DAV types."""

    def test_dav_request_immutable(self):
        """DAVRequest should be immutable (frozen dataclass)."""
        request = DAVRequest(
            method=DAVMethod.GET,
            url="https://example.com/",
            headers={},
        )
        with pytest.raises(AttributeError):
            request.url = "https://other.com/"

    def test_dav_request_with_header(self):
        """with_header should return new request with added header."""
        request = DAVRequest(
            method=DAVMethod.GET,
            url="https://example.com/",
            headers={"Accept": "text/html"},
        )
        new_request = request.with_header("Authorization", "Bearer token")

        # Original unchanged
        assert "Authorization" not in request.headers
        # New has both headers
        assert new_request.headers["Accept"] == "text/html"
        assert new_request.headers["Authorization"] == "Bearer token"

    def test_replayable(self):
        """Only buffered bodies can be sent twice."""
        url = "https://example.com/a"
        assert DAVRequest(DAVMethod.GET, url).replayable
        assert DAVRequest(DAVMethod.PUT, url, body=b"data").replayable
        assert not DAVRequest(DAVMethod.PUT, url, body=iter([b"data"])).replayable

    def test_dav_response_ok(self):
        """ok property should return True for 2xx status codes."""
        assert DAVResponse(status=200, headers={}, body=b"").ok
        assert DAVResponse(status=201, headers={}, body=b"").ok
        assert DAVResponse(status=207, headers={}, body=b"").ok
        assert not DAVResponse(status=404, headers={}, body=b"").ok
        assert not DAVResponse(status=500, headers={}, body=b"").ok

    def test_dav_response_headers_case_insensitive(self):
        """Header lookups should not care about case."""
        response = DAVResponse(status=200, headers={"Lock-Token": "<x>"})
        assert response.header("lock-token") == "<x>"
        assert response.header("LOCK-TOKEN") == "<x>"
        assert response.header("Location") is None


class TestDepth:
    def test_depth_to_string(self):
        """The three legal depths, and the fallback for anything else."""
        assert depth_to_string(0) == "0"
        assert depth_to_string(1) == "1"
        assert depth_to_string(-1) == "infinity"
        assert depth_to_string(2) == "1"
        assert depth_to_string(-7) == "1"

    def test_parse_depth_is_left_inverse(self):
        """Parsing the header token gives back the depth."""
        for depth in (0, 1, -1):
            assert parse_depth(depth_to_string(depth)) == depth
        assert parse_depth("Infinity") == -1


class TestXMLBuilders:
    """Test XML building functions."""

    def test_property_tag(self):
        """Bare, prefixed and Clark notation names."""
        assert property_tag("displayname") == "{DAV:}displayname"
        assert property_tag("D:getetag") == "{DAV:}getetag"
        assert property_tag("{urn:x}color") == "{urn:x}color"
        assert property_tag("color", "SAR:") == "{SAR:}color"
        assert property_tag("displayname", "SAR:") == "{DAV:}displayname"
        assert property_tag("S:color") == "{SAR:}color"

    def test_property_tag_unknown_prefix(self):
        """Unknown prefixes are refused instead of producing a broken tag."""
        with pytest.raises(ValueError, match="oc:fileid"):
            property_tag("oc:fileid")
        with pytest.raises(ValueError):
            build_propfind_body(["displayname", "oc:fileid"])
        assert property_tag("{http://owncloud.org/ns}fileid") == "{http://owncloud.org/ns}fileid"

    def test_build_propfind_body_props(self):
        """Properties should be requested in DAV: namespace."""
        body = build_propfind_body(["displayname", "getetag"])
        tree = etree.fromstring(body)
        assert tree.tag == "{DAV:}propfind"
        prop = tree.find("{DAV:}prop")
        assert [c.tag for c in prop] == ["{DAV:}displayname", "{DAV:}getetag"]

    def test_build_propfind_body_allprop(self):
        """allprop replaces the prop element."""
        tree = etree.fromstring(build_propfind_body(allprop=True))
        assert tree.find("{DAV:}allprop") is not None
        assert tree.find("{DAV:}prop") is None

    def test_build_proppatch_body(self):
        """Set and remove go into separate blocks, custom names into the custom namespace."""
        body = build_proppatch_body(
            {"displayname": "New name", "color": "red"}, ["obsolete"]
        )
        tree = etree.fromstring(body)
        assert tree.tag == "{DAV:}propertyupdate"
        assert [c.tag for c in tree] == ["{DAV:}set", "{DAV:}remove"]

        set_prop = tree.find("{DAV:}set/{DAV:}prop")
        assert set_prop.find("{DAV:}displayname").text == "New name"
        assert set_prop.find("{SAR:}color").text == "red"

        removed = tree.find("{DAV:}remove/{DAV:}prop/{SAR:}obsolete")
        assert removed is not None
        assert removed.text is None
        assert len(removed) == 0

    def test_build_proppatch_body_remove_only(self):
        """No set block if nothing is set."""
        tree = etree.fromstring(build_proppatch_body(remove_props=["{urn:x}gone"]))
        assert [c.tag for c in tree] == ["{DAV:}remove"]
        assert tree.find("{DAV:}remove/{DAV:}prop/{urn:x}gone") is not None

    def test_build_lockinfo_body(self):
        """Exclusive write lock with owner."""
        tree = etree.fromstring(build_lockinfo_body("joe"))
        assert tree.tag == "{DAV:}lockinfo"
        assert tree.find("{DAV:}lockscope/{DAV:}exclusive") is not None
        assert tree.find("{DAV:}locktype/{DAV:}write") is not None
        assert tree.find("{DAV:}owner").text == "joe"

    def test_build_lockinfo_body_shared(self):
        tree = etree.fromstring(build_lockinfo_body(shared=True))
        assert tree.find("{DAV:}lockscope/{DAV:}shared") is not None
        assert tree.find("{DAV:}owner") is None

    def test_build_acl_body(self):
        """Special principals become empty elements, inherited ACEs are skipped."""
        aces = [
            DavAce("DAV:all", grant=True, privileges=frozenset(["read"])),
            DavAce("/principals/joe/", grant=False, privileges=frozenset(["write"])),
            DavAce(
                "/principals/admin/",
                grant=True,
                privileges=frozenset(["all"]),
                inherited=True,
            ),
        ]
        tree = etree.fromstring(build_acl_body(aces))
        found = tree.findall("{DAV:}ace")
        assert len(found) == 2
        assert found[0].find("{DAV:}principal/{DAV:}all") is not None
        assert found[0].find("{DAV:}grant/{DAV:}privilege/{DAV:}read") is not None
        assert found[1].find("{DAV:}principal/{DAV:}href").text == "/principals/joe/"
        assert found[1].find("{DAV:}deny/{DAV:}privilege/{DAV:}write") is not None

    def test_build_search_body(self):
        tree = etree.fromstring(build_search_body("budget"))
        assert tree.tag == "{DAV:}searchrequest"
        assert tree.find("{DAV:}basicsearch/{DAV:}where/{DAV:}contains").text == "budget"

    def test_build_sync_collection_body(self):
        """Initial sync sends an empty token, infinite depth maps to sync-level infinite."""
        tree = etree.fromstring(build_sync_collection_body(depth=-1, limit=10))
        assert tree.tag == "{DAV:}sync-collection"
        assert not tree.find("{DAV:}sync-token").text
        assert tree.find("{DAV:}sync-level").text == "infinite"
        assert tree.find("{DAV:}limit/{DAV:}nresults").text == "10"

        tree = etree.fromstring(build_sync_collection_body("token-1", depth=1))
        assert tree.find("{DAV:}sync-token").text == "token-1"
        assert tree.find("{DAV:}sync-level").text == "1"
        assert tree.find("{DAV:}limit") is None

    def test_build_version_tree_body(self):
        """The default version-tree report asks for DAV: live properties only."""
        tree = etree.fromstring(build_version_tree_body())
        asked = [c.tag for c in tree.find("{DAV:}prop")]
        assert "{DAV:}creationdate" in asked
        assert "{DAV:}version-name" in asked
        assert all(etree.QName(t).localname in DAV_PROPERTIES for t in asked)

    def test_build_bind_body(self):
        tree = etree.fromstring(build_bind_body("alias", "https://dav.example.com/a"))
        assert tree.tag == "{DAV:}bind"
        assert tree.find("{DAV:}segment").text == "alias"
        assert tree.find("{DAV:}href").text == "https://dav.example.com/a"


class TestMultistatusParsing:
    """Test parsing of multistatus responses."""

    @pytest.mark.parametrize("prefix,decl", PREFIX_VARIANTS)
    def test_listing(self, prefix, decl):
        """The listing is decoded whatever the prefix."""
        resources = parse_resources(listing(prefix, decl), BASE)
        assert len(resources) == 2
        collection, pdf = resources
        assert collection.href == BASE
        assert collection.is_directory
        assert collection.content_length == 0
        assert collection.content_type == "application/octet-stream"
        assert collection.modified.year == 2015
        assert pdf.href == BASE + "report.pdf"
        assert pdf.is_file
        assert pdf.name == "report.pdf"
        assert pdf.content_length == 1024
        assert pdf.content_type == "application/pdf"
        assert pdf.etag == '"abc"'
        assert pdf.created.year == 2015

    def test_prefix_variants_identical(self):
        """All three prefix variants give identical resources."""
        decoded = [summary(parse_resources(listing(p, d), BASE)) for p, d in PREFIX_VARIANTS]
        assert decoded[0] == decoded[1] == decoded[2]

    def test_nested_collection_marker(self):
        """A collection marker nested in an extension element still counts."""
        body = b"""<d:multistatus xmlns:d="DAV:" xmlns:x="urn:x">
          <d:response><d:href>/cal/</d:href>
            <d:propstat>
              <d:prop><d:resourcetype><x:wrapper><d:collection/></x:wrapper></d:resourcetype></d:prop>
              <d:status>HTTP/1.1 200 OK</d:status>
            </d:propstat>
          </d:response>
        </d:multistatus>"""
        (resource,) = parse_resources(body, BASE)
        assert resource.is_directory
        assert resource.custom_properties["resourcetype"] == "collection"

    def test_directory_content_type(self):
        """httpd/unix-directory marks a directory without resourcetype."""
        body = b"""<multistatus xmlns="DAV:"><response><href>/files/dir</href>
          <propstat><prop><getcontenttype>httpd/unix-directory</getcontenttype></prop>
          <status>HTTP/1.1 200 OK</status></propstat></response></multistatus>"""
        (resource,) = parse_resources(body, BASE)
        assert resource.is_directory

    def test_mixed_propstat_statuses(self):
        """A 200 and a 403 propstat for one href stay two propstats."""
        body = b"""<d:multistatus xmlns:d="DAV:" xmlns:x="urn:x">
          <d:response>
            <d:href>/files/a.txt</d:href>
            <d:propstat>
              <d:prop><d:displayname>a</d:displayname></d:prop>
              <d:status>HTTP/1.1 200 OK</d:status>
            </d:propstat>
            <d:propstat>
              <d:prop><x:secret/></d:prop>
              <d:status>HTTP/1.1 403 Forbidden</d:status>
            </d:propstat>
          </d:response>
        </d:multistatus>"""
        multistatus = parse_multistatus(body)
        assert len(multistatus) == 1
        response = multistatus.responses[0]
        assert [p.status for p in response.propstats] == [200, 403]
        assert response.propstats[0].properties == {"displayname": "a"}
        assert response.propstats[1].properties == {"secret": None}
        assert response.properties() == {"displayname": "a"}
        assert response.properties(only_ok=False) == {"displayname": "a", "secret": None}

        (resource,) = parse_resources(body, BASE)
        assert resource.display_name == "a"
        assert "secret" not in resource.custom_properties

    def test_empty_property_kept(self):
        """A property returned without text is kept as an empty marker."""
        body = b"""<d:multistatus xmlns:d="DAV:" xmlns:x="urn:x">
          <d:response><d:href>/files/a.txt</d:href>
            <d:propstat>
              <d:prop><x:flag/><x:color>red</x:color></d:prop>
              <d:status>HTTP/1.1 200 OK</d:status>
            </d:propstat>
          </d:response>
        </d:multistatus>"""
        (resource,) = parse_resources(body, BASE)
        assert resource.custom_properties["color"] == "red"
        assert resource.custom_properties["flag"] == ""

    def test_propfind_round_trip(self):
        """Properties asked for come back as decoded property names."""
        names = {"displayname", "getetag", "getcontentlength", "lockdiscovery"}
        request = etree.fromstring(build_propfind_body(sorted(names)))
        asked = {etree.QName(c).localname for c in request.find("{DAV:}prop")}
        assert asked == names

        props = "".join(f"<D:{n}>v</D:{n}>" for n in asked)
        body = (
            '<D:multistatus xmlns:D="DAV:"><D:response><D:href>/x</D:href>'
            f"<D:propstat><D:prop>{props}</D:prop>"
            "<D:status>HTTP/1.1 200 OK</D:status></D:propstat>"
            "</D:response></D:multistatus>"
        )
        response = parse_multistatus(body).responses[0]
        assert set(response.properties()) == names

    def test_response_with_status_only(self):
        """The simple shape: a status instead of propstats."""
        body = b"""<D:multistatus xmlns:D="DAV:"><D:response>
          <D:href>/files/gone.txt</D:href><D:status>HTTP/1.1 404 Not Found</D:status>
        </D:response></D:multistatus>"""
        response = parse_multistatus(body).responses[0]
        assert response.status == 404
        assert response.propstats == []

    def test_malformed(self):
        """Missing required elements and bad XML are reported."""
        with pytest.raises(error.MalformedResponseError):
            parse_multistatus(b"this is not xml")
        with pytest.raises(error.MalformedResponseError):
            parse_multistatus(b'<D:prop xmlns:D="DAV:"/>')
        with pytest.raises(error.MalformedResponseError):
            parse_multistatus(
                b'<D:multistatus xmlns:D="DAV:"><D:response>'
                b"<D:status>HTTP/1.1 200 OK</D:status></D:response></D:multistatus>"
            )
        with pytest.raises(error.MalformedResponseError):
            parse_multistatus(
                b'<D:multistatus xmlns:D="DAV:"><D:response><D:href>/a</D:href>'
                b"<D:propstat><D:prop/></D:propstat></D:response></D:multistatus>"
            )
        with pytest.raises(error.MalformedResponseError):
            parse_multistatus(
                b'<D:multistatus xmlns:D="DAV:"><D:response><D:href>/a</D:href>'
                b"</D:response></D:multistatus>"
            )

    def test_sync_collection_response(self):
        """404 members are deleted, the rest changed, and the new token is kept."""
        body = b"""<d:multistatus xmlns:d="DAV:">
          <d:response><d:href>/files/new.txt</d:href>
            <d:propstat><d:prop><d:getetag>"1"</d:getetag></d:prop>
            <d:status>HTTP/1.1 200 OK</d:status></d:propstat></d:response>
          <d:response><d:href>/files/old.txt</d:href>
            <d:status>HTTP/1.1 404 Not Found</d:status></d:response>
          <d:sync-token>http://example.com/sync/2</d:sync-token>
        </d:multistatus>"""
        result = parse_sync_collection_response(body, BASE)
        assert [r.href for r in result.changed] == [BASE + "new.txt"]
        assert result.changed[0].etag == '"1"'
        assert result.deleted == [BASE + "old.txt"]
        assert result.sync_token == "http://example.com/sync/2"


class TestOtherParsers:
    @pytest.mark.parametrize("prefix,decl", PREFIX_VARIANTS)
    def test_parse_lock_token(self, prefix, decl):
        """The token is the href inside locktoken, whatever the prefix."""
        body = (
            f"<{prefix}prop {decl}><{prefix}lockdiscovery><{prefix}activelock>"
            f"<{prefix}locktoken><{prefix}href>opaquelocktoken:1234</{prefix}href></{prefix}locktoken>"
            f"</{prefix}activelock></{prefix}lockdiscovery></{prefix}prop>"
        )
        assert parse_lock_token(body) == "opaquelocktoken:1234"

    def test_parse_lock_token_missing(self):
        assert parse_lock_token(b"") is None
        assert parse_lock_token(b'<D:prop xmlns:D="DAV:"/>') is None

    def test_parse_active_locks(self):
        body = b"""<D:lockdiscovery xmlns:D="DAV:"><D:activelock>
            <D:locktype><D:write/></D:locktype>
            <D:lockscope><D:shared/></D:lockscope>
            <D:depth>infinity</D:depth>
            <D:owner>joe</D:owner>
            <D:timeout>Second-3600</D:timeout>
            <D:locktoken><D:href>opaquelocktoken:abc</D:href></D:locktoken>
            <D:lockroot><D:href>/files/a.txt</D:href></D:lockroot>
        </D:activelock></D:lockdiscovery>"""
        (lock,) = parse_active_locks(etree.fromstring(body))
        assert lock.token == "opaquelocktoken:abc"
        assert lock.scope == "shared"
        assert not lock.exclusive
        assert lock.type == "write"
        assert lock.depth == "infinity"
        assert lock.owner == "joe"
        assert lock.timeout == "Second-3600"
        assert lock.root == "/files/a.txt"

    def test_parse_error_body(self):
        """Condition names and description are extracted."""
        body = b"""<d:error xmlns:d="DAV:"><d:lock-token-submitted>
            <d:href>/files/a.txt</d:href></d:lock-token-submitted>
            <d:responsedescription>locked</d:responsedescription></d:error>"""
        assert parse_error_body(body) == (["lock-token-submitted"], "locked")

    def test_parse_error_body_not_xml(self):
        """HTML error pages give no conditions."""
        assert parse_error_body(b"<html><body>error</html") == ([], None)
        assert parse_error_body(b"") == ([], None)
        assert parse_error_body(None) == ([], None)

    def test_parse_acl(self):
        body = b"""<D:acl xmlns:D="DAV:">
          <D:ace>
            <D:principal><D:href>/principals/joe/</D:href></D:principal>
            <D:grant><D:privilege><D:read/></D:privilege><D:privilege><D:write/></D:privilege></D:grant>
          </D:ace>
          <D:ace>
            <D:principal><D:all/></D:principal>
            <D:deny><D:privilege><D:write/></D:privilege></D:deny>
            <D:protected/>
          </D:ace>
          <D:ace>
            <D:principal><D:property><D:owner/></D:property></D:principal>
            <D:grant><D:privilege><D:all/></D:privilege></D:grant>
            <D:inherited><D:href>/</D:href></D:inherited>
          </D:ace>
        </D:acl>"""
        acl = parse_acl(etree.fromstring(body), BASE)
        assert acl.resource_url == BASE
        assert [a.principal for a in acl.aces] == [
            "/principals/joe/",
            "DAV:all",
            "property:owner",
        ]
        assert acl.aces[0].privileges == frozenset(["read", "write"])
        assert acl.aces[1].is_deny
        assert acl.aces[1].protected
        assert acl.aces[2].inherited
        assert acl.has_privilege("/principals/joe/", "write")
        assert not acl.has_privilege("DAV:all", "write")

    def test_parse_acl_missing_principal(self):
        body = b'<D:acl xmlns:D="DAV:"><D:ace><D:grant/></D:ace></D:acl>'
        with pytest.raises(error.MalformedResponseError):
            parse_acl(etree.fromstring(body))

    def test_parse_privileges_and_reports(self):
        privileges = etree.fromstring(
            b'<d:current-user-privilege-set xmlns:d="DAV:">'
            b"<d:privilege><d:read/></d:privilege><d:privilege><d:write-content/></d:privilege>"
            b"</d:current-user-privilege-set>"
        )
        assert parse_privileges(privileges) == ["read", "write-content"]
        reports = etree.fromstring(
            b'<supported-report-set xmlns="DAV:"><supported-report><report>'
            b"<version-tree/></report></supported-report><supported-report><report>"
            b"<sync-collection/></report></supported-report></supported-report-set>"
        )
        assert parse_supported_reports(reports) == ["version-tree", "sync-collection"]

    def test_first_href(self):
        assert first_href(b'<D:checkout-response xmlns:D="DAV:"><D:href>/v/1</D:href></D:checkout-response>') == "/v/1"
        assert first_href(b"") is None


class TestWebDAVProtocol:
    """Test the request builder."""

    def test_resolve_url(self):
        """Exactly one slash between base and path, absolute URLs verbatim."""
        protocol = WebDAVProtocol(base_url="https://dav.example.com/files/")
        assert protocol.base_url == "https://dav.example.com/files"
        assert protocol.resolve_url("a.txt") == "https://dav.example.com/files/a.txt"
        assert protocol.resolve_url("/a.txt") == "https://dav.example.com/files/a.txt"
        assert protocol.resolve_url("https://other.example.com/x") == "https://other.example.com/x"
        assert protocol.resolve_url("") == "https://dav.example.com/files"

    def test_propfind_request(self):
        protocol = WebDAVProtocol(base_url=BASE)
        request = protocol.propfind_request("docs/", ["displayname"], depth=-1)
        assert request.method == DAVMethod.PROPFIND
        assert request.url == BASE + "docs/"
        assert request.headers["Depth"] == "infinity"
        assert "application/xml" in request.headers["Content-Type"]
        assert b"displayname" in request.body

    def test_copy_and_move_requests(self):
        """Destination is absolute, Overwrite is T or F."""
        protocol = WebDAVProtocol(base_url=BASE)
        request = protocol.move_request("a.txt", "b.txt", lock_token="opaquelocktoken:1")
        assert request.method == DAVMethod.MOVE
        assert request.headers["Destination"] == BASE + "b.txt"
        assert request.headers["Overwrite"] == "F"
        assert request.headers["If"] == "(<opaquelocktoken:1>)"
        request = protocol.copy_request("dir/", "copy/", overwrite=True, depth=0)
        assert request.headers["Overwrite"] == "T"
        assert request.headers["Depth"] == "0"

    def test_lock_requests(self):
        protocol = WebDAVProtocol(base_url=BASE)
        request = protocol.lock_request("a.txt", timeout=600, owner="joe")
        assert request.headers["Timeout"] == "Second-600"
        assert request.headers["Depth"] == "0"
        assert b"joe" in request.body

        request = protocol.refresh_lock_request("a.txt", "opaquelocktoken:1")
        assert request.method == DAVMethod.LOCK
        assert request.body is None
        assert request.headers["If"] == "(<opaquelocktoken:1>)"

        request = protocol.unlock_request("a.txt", "opaquelocktoken:1")
        assert request.headers["Lock-Token"] == "<opaquelocktoken:1>"

    def test_put_request(self):
        protocol = WebDAVProtocol(base_url=BASE)
        request = protocol.put_request(
            "a.txt", b"hello", content_type="text/plain", expect_continue=True
        )
        assert request.headers["Content-Length"] == "5"
        assert request.headers["Content-Type"] == "text/plain"
        assert request.headers["Expect"] == "100-continue"
        assert request.replayable

    def test_bind_request(self):
        """BIND goes to the parent of the target, with its last segment."""
        protocol = WebDAVProtocol(base_url=BASE)
        request = protocol.bind_request("a.txt", "links/alias.txt")
        assert request.method == DAVMethod.BIND
        assert request.url == BASE + "links/"
        tree = etree.fromstring(request.body)
        assert tree.find("{DAV:}segment").text == "alias.txt"
        assert tree.find("{DAV:}href").text == BASE + "a.txt"

    def test_versioning_methods(self):
        protocol = WebDAVProtocol(base_url=BASE)
        assert protocol.version_control_request("a").method.value == "VERSION-CONTROL"
        assert protocol.baseline_control_request("a").method.value == "BASELINE-CONTROL"
        assert protocol.checkin_request("a", keep_checked_out=True).body.count(b"keep-checked-out") == 1
