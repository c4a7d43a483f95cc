#!/usr/bin/env python
import sys
from collections.abc import Iterable
from typing import ClassVar
from typing import Dict
from typing import List
from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element

from davkit.lib.namespace import nsmap
from davkit.lib.namespace import nsmap2

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self


def _to_text(value: Union[str, bytes, int, None]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


class BaseElement:
    children: Optional[List[Self]] = None
    tag: ClassVar[Optional[str]] = None
    value: Optional[str] = None
    attributes: Optional[dict] = None

    def __init__(
        self, name: Optional[str] = None, value: Union[str, bytes, int, None] = None
    ) -> None:
        self.children = []
        self.attributes = {}
        self.value = _to_text(value)
        if name is not None:
            self.attributes["name"] = name

    def __add__(
        self, other: Union["BaseElement", Iterable["BaseElement"]]
    ) -> "BaseElement":
        return self.append(other)

    def __str__(self) -> str:
        utf8 = etree.tostring(
            self.xmlelement(), encoding="utf-8", xml_declaration=True, pretty_print=True
        )
        return str(utf8, "utf-8")

    def _nsmap(self) -> Dict[str, str]:
        return nsmap

    def xmlelement(self) -> _Element:
        if self.tag is None:
            raise ValueError("Unexpected value None for self.tag")

        if self.attributes is None:
            raise ValueError("Unexpected value None for self.attributes")

        root = etree.Element(self.tag, nsmap=self._nsmap())
        if self.value is not None:
            root.text = self.value

        for k in self.attributes:
            root.set(k, self.attributes[k])

        self.xmlchildren(root)
        return root

    def xmlchildren(self, root: _Element) -> None:
        if self.children is None:
            raise ValueError("Unexpected value None for self.children")

        for c in self.children:
            root.append(c.xmlelement())

    def append(self, element: Union[Self, Iterable[Self]]) -> Self:
        if self.children is None:
            raise ValueError("Unexpected value None for self.children")

        if isinstance(element, Iterable):
            self.children.extend(element)
        else:
            self.children.append(element)

        return self


class ValuedBaseElement(BaseElement):
    def __init__(self, value: Union[str, bytes, int, None] = None) -> None:
        super(ValuedBaseElement, self).__init__(value=value)


class PropertyElement(BaseElement):
    """
    An element with a tag decided at runtime, i.e. a property name given
    by the caller in Clark notation (``{namespace}name``).
    """

    def __init__(self, tag: str, value: Union[str, bytes, int, None] = None) -> None:
        super(PropertyElement, self).__init__(value=value)
        self.tag = tag

    def _nsmap(self) -> Dict[str, str]:
        ns = etree.QName(self.tag).namespace
        for prefix, uri in nsmap2.items():
            if uri == ns:
                return {prefix: uri}
        return {}
