"""
Attribute and name helpers for element nodes.

Names are handled in Clark notation ("{uri}local"), which both lxml and
xml.etree use for tags and attribute keys. lxml elements remember the
prefixes of the source document through their nsmap; xml.etree drops
them, so for those the URI-to-prefix mapping has to come from the caller
(typically the engine's namespace context or collect_namespaces()).
"""

import io
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from xml.etree import ElementTree as ET

XML_NS_URI = "http://www.w3.org/XML/1998/namespace"
XML_NS_PREFIX = "xml"


@dataclass(frozen=True)
class QName:
    """Qualified name of an element or attribute."""

    namespace_uri: str
    local_part: str
    prefix: str = ""

    @classmethod
    def from_clark(cls, name: str, uri_to_prefix: Optional[Mapping[str, str]] = None) -> "QName":
        """
        Build a QName from an ElementTree name.

        Args:
            name: "local" or "{uri}local"
            uri_to_prefix: Mapping used to restore the prefix

        Returns:
            QName with an empty prefix when the URI is not mapped
        """
        if not name.startswith("{"):
            return cls("", name)

        uri, local = name[1:].split("}", 1)
        prefix = (uri_to_prefix or {}).get(uri)
        if prefix is None and uri == XML_NS_URI:
            prefix = XML_NS_PREFIX
        return cls(uri, local, prefix or "")

    def prefixed(self) -> str:
        """Render as "prefix:local", or just "local" without prefix."""
        return f"{self.prefix}:{self.local_part}" if self.prefix else self.local_part

    def __str__(self) -> str:
        if self.namespace_uri:
            return f"{{{self.namespace_uri}}}{self.local_part}"
        return self.local_part


def namespaces_of(element: Any) -> Dict[str, str]:
    """
    URI-to-prefix mapping in scope for an element.

    Read from lxml's nsmap; xml.etree elements (and None) yield {}.
    The default namespace maps to "".
    """
    nsmap = getattr(element, "nsmap", None)
    if not nsmap:
        return {}

    uri_to_prefix: Dict[str, str] = {}
    # Non-default prefixes first so "ns:attr" style names win over ""
    for prefix, uri in sorted(nsmap.items(), key=lambda item: item[0] is None):
        uri_to_prefix.setdefault(uri, prefix or "")
    return uri_to_prefix


def get_attributes(
    element: Any, uri_to_prefix: Optional[Mapping[str, str]] = None
) -> Dict[QName, str]:
    """
    Map an element's attributes to {QName: value}, in document order.

    Namespace declarations never show up here since neither lxml nor
    xml.etree reports xmlns attributes.
    """
    if uri_to_prefix is None:
        uri_to_prefix = namespaces_of(element)
    return {
        QName.from_clark(name, uri_to_prefix): value for name, value in element.attrib.items()
    }


def node_name(element: Any, uri_to_prefix: Optional[Mapping[str, str]] = None) -> str:
    """Name of the element as written in the source, when the prefix is known."""
    prefix = getattr(element, "prefix", None)
    if uri_to_prefix is None and prefix:
        return f"{prefix}:{QName.from_clark(element.tag).local_part}"

    if uri_to_prefix is None:
        uri_to_prefix = namespaces_of(element)
    qname = QName.from_clark(element.tag, uri_to_prefix)
    if qname.namespace_uri and not qname.prefix:
        return str(qname)
    return qname.prefixed()


def collect_namespaces(xml_text: str) -> Dict[str, str]:
    """
    Collect the namespace declarations of a document as {uri: prefix}.

    The first prefix declared for a URI wins; the default namespace maps
    to "".
    """
    uri_to_prefix: Dict[str, str] = {}
    for _event, (prefix, uri) in ET.iterparse(io.StringIO(xml_text), events=("start-ns",)):
        uri_to_prefix.setdefault(uri, prefix)
    return uri_to_prefix
