#!/usr/bin/env python
"""
Namespace-agnostic lookups in lxml trees.

WebDAV servers disagree about namespace prefixes (``D:``, ``d:``, a
default namespace, or occasionally no namespace at all).  Every parser
in davkit matches elements through the helpers in this module, comparing
the local part of the tag only.
"""
from typing import Iterator
from typing import List
from typing import Optional

from lxml import etree
from lxml.etree import _Element


def localname(element: _Element) -> Optional[str]:
    """
    Returns the tag name of ``element`` without its namespace.

    Comments and processing instructions have no name, ``None`` is
    returned for those.
    """
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def child_elements(element: _Element) -> Iterator[_Element]:
    """Direct element children, skipping comments and such"""
    for child in element:
        if isinstance(child.tag, str):
            yield child


def children_by_localname(element: _Element, name: str) -> List[_Element]:
    return [c for c in child_elements(element) if localname(c) == name]


def first_child_by_localname(element: _Element, name: str) -> Optional[_Element]:
    for child in child_elements(element):
        if localname(child) == name:
            return child
    return None


def descendants_by_localname(element: _Element, name: str) -> List[_Element]:
    """
    All descendants (not including ``element`` itself) with the given
    local name, in document order.
    """
    return [
        e for e in element.iterdescendants() if isinstance(e.tag, str) and localname(e) == name
    ]


def first_descendant_by_localname(
    element: _Element, name: str
) -> Optional[_Element]:
    for e in element.iterdescendants():
        if isinstance(e.tag, str) and localname(e) == name:
            return e
    return None


def text_content(element: Optional[_Element]) -> Optional[str]:
    """
    All text inside ``element`` (including text of nested elements),
    stripped.  Empty content gives ``None``.
    """
    if element is None:
        return None
    text = "".join(element.itertext()).strip()
    return text or None


def text_of_first_descendant(element: _Element, name: str) -> Optional[str]:
    return text_content(first_descendant_by_localname(element, name))


def self_or_descendant_by_localname(
    element: _Element, name: str
) -> Optional[_Element]:
    if localname(element) == name:
        return element
    return first_descendant_by_localname(element, name)
