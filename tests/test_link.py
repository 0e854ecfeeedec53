"""Tests for hyperlink parsing and following."""

from __future__ import annotations

from typing import Any

import pytest

from vcloud_director.errors import MalformedLinkError, TransportError
from vcloud_director.link import Link
from vcloud_director.node import NodeState, ResourceNode

VDC_HREF = "https://vcd.example.com/api/vdc/42"


def _owner(transport: Any) -> ResourceNode:
    return ResourceNode({"Org": {"href": "https://vcd.example.com/api/org/1"}}, transport)


def test_xml_link_is_classified(fake_transport: Any) -> None:
    """Given an XML vendor media type, when parsed, then the short type is set and not JSON."""
    link = Link.from_raw(
        {"href": VDC_HREF, "rel": "down", "type": "application/vnd.vendor.widget+xml"},
        _owner(fake_transport),
    )

    assert link.type == "widget"
    assert link.is_json is False
    assert link.mime_type == "application/vnd.vendor.widget+xml"


def test_json_link_is_classified(fake_transport: Any) -> None:
    link = Link.from_raw(
        {
            "href": VDC_HREF,
            "rel": "down",
            "name": "Main VDC",
            "type": "application/vnd.vmware.vcloud.vdc+json",
        },
        _owner(fake_transport),
    )

    assert link.type == "vdc"
    assert link.is_json is True
    assert link.name == "Main VDC"


def test_opaque_media_type_is_kept_but_unclassified(fake_transport: Any) -> None:
    """Given a non-vendor media type, when parsed, then only the raw mime type is kept."""
    link = Link.from_raw(
        {"href": VDC_HREF, "rel": "alternate", "type": "text/html"}, _owner(fake_transport)
    )

    assert link.mime_type == "text/html"
    assert link.type is None
    assert link.is_json is None


@pytest.mark.parametrize(  # type: ignore[misc]
    "raw",
    [
        {"rel": "down"},
        {"href": VDC_HREF},
        {"href": "", "rel": "down"},
    ],
)
def test_missing_href_or_rel_is_malformed(fake_transport: Any, raw: dict[str, str]) -> None:
    with pytest.raises(MalformedLinkError):
        Link.from_raw(raw, _owner(fake_transport))


def test_link_keeps_weak_reference_to_owner(fake_transport: Any) -> None:
    owner = _owner(fake_transport)
    link = Link.from_raw({"href": VDC_HREF, "rel": "down"}, owner)

    assert link.owner is owner
    assert link.transport is fake_transport


def test_fetch_returns_inflated_resource(fake_transport: Any) -> None:
    """Given a link, when fetched, then the target is GET and wrapped as an inflated node."""
    fake_transport.responses[VDC_HREF] = {
        "href": VDC_HREF,
        "name": "Main VDC",
        "type": "application/vnd.vmware.vcloud.vdc+json",
    }
    link = Link.from_raw({"href": VDC_HREF, "rel": "down"}, _owner(fake_transport))

    node = link.fetch()

    assert node.state is NodeState.INFLATED
    assert node.type == "vdc"
    assert node.name == "Main VDC"
    assert fake_transport.calls == [("GET", VDC_HREF, None, None)]


def test_write_requests_use_link_media_type(fake_transport: Any) -> None:
    mime = "application/vnd.vmware.vcloud.vdc+json"
    link = Link.from_raw({"href": VDC_HREF, "rel": "edit", "type": mime}, _owner(fake_transport))

    assert link.update({"name": "renamed"}) is None
    assert link.create({"name": "new"}) is None
    assert link.remove() is None

    assert fake_transport.calls == [
        ("PUT", VDC_HREF, {"name": "renamed"}, mime),
        ("POST", VDC_HREF, {"name": "new"}, mime),
        ("DELETE", VDC_HREF, None, None),
    ]


def test_invalid_field_is_named_in_error(fake_transport: Any) -> None:
    """Given a non-string name, when parsed, then the error names the offending field."""
    with pytest.raises(MalformedLinkError, match="name: Input should be a valid string"):
        Link.from_raw({"href": VDC_HREF, "rel": "down", "name": 5}, _owner(fake_transport))


def test_transport_errors_propagate_unchanged(fake_transport: Any) -> None:
    """Given a failing target, when followed, then the transport's own error reaches the caller."""
    error = TransportError("GET", VDC_HREF, 500, "internal error")
    fake_transport.failures[VDC_HREF] = error
    owner = ResourceNode(
        {
            "href": "https://vcd.example.com/api/org/1",
            "link": {
                "href": VDC_HREF,
                "rel": "down",
                "type": "application/vnd.vmware.vcloud.vdc+json",
            },
        },
        fake_transport,
    )
    (link,) = owner.links()

    with pytest.raises(TransportError) as from_link:
        link.fetch()
    with pytest.raises(TransportError) as from_fetch_links:
        owner.fetch_links(type="vdc")

    assert from_link.value is error
    assert from_fetch_links.value is error


def test_failed_inflation_leaves_stub(fake_transport: Any) -> None:
    error = TransportError("GET", VDC_HREF, 500, "internal error")
    fake_transport.failures[VDC_HREF] = error
    stub = ResourceNode({"Vdc": {"href": VDC_HREF}}, fake_transport, state=NodeState.STUB)

    with pytest.raises(TransportError) as from_inflate:
        stub.inflate()
    with pytest.raises(TransportError) as from_links:
        stub.links()

    assert from_inflate.value is error
    assert from_links.value is error
    assert stub.state is NodeState.STUB
    assert stub.is_stub
    assert fake_transport.fetches(VDC_HREF) == 2
