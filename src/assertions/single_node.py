"""
Fluent assertions on a single element node.

The node may be an lxml element, an xml.etree element, or XML source
text, which is parsed with lxml so the document's prefixes are kept.

Example:
    >>> assert_that('<a xmlns:ns="urn:x" ns:attr="1" id="7"/>').has_attribute("ns:attr", "1")
"""

from typing import Any, Mapping, Optional, Tuple, Union

from lxml import etree

from src.assertions.nodes import QName, get_attributes, namespaces_of, node_name

_ANY_VALUE = object()


def should_have_attribute(node: str, attribute: str) -> str:
    return f"\nExpecting:\n <{node}>\nto have attribute:\n <{attribute}>"


def should_have_attribute_with_value(node: str, attribute: str, value: Optional[str]) -> str:
    shown = "null" if value is None else value
    return f"{should_have_attribute(node, attribute)}\nwith value:\n <{shown}>"


def match_qname(qname: QName, name: str) -> bool:
    """A name matches the full form, the prefixed form or the local part."""
    return str(qname) == name or qname.prefixed() == name or qname.local_part == name


def parse_node(source: Union[str, bytes]) -> Any:
    """Parse XML source into an lxml root element."""
    if isinstance(source, str):
        source = source.encode("utf-8")
    return etree.fromstring(source)


class SingleNodeAssert:
    """Assertions about one node; every check returns self for chaining."""

    def __init__(self, actual: Any, uri_to_prefix: Optional[Mapping[str, str]] = None):
        self.actual = actual
        if uri_to_prefix is None:
            self.uri_to_prefix = namespaces_of(actual)
        else:
            self.uri_to_prefix = dict(uri_to_prefix)

    def is_not_none(self) -> "SingleNodeAssert":
        if self.actual is None:
            raise AssertionError("\nExpecting actual not to be null")
        return self

    def has_attribute(self, attribute_name: str, attribute_value: Any = _ANY_VALUE) -> "SingleNodeAssert":
        """
        Assert the node has the attribute, optionally with the given value.

        An explicit None value never matches, since attributes always carry
        a string value.

        Raises:
            AssertionError: If no attribute matches the name, or the first
                match carries a different value
        """
        self.is_not_none()

        entry = self._attribute_for_name(attribute_name)
        name = node_name(self.actual, self.uri_to_prefix)

        if attribute_value is _ANY_VALUE:
            if entry is None:
                raise AssertionError(should_have_attribute(name, attribute_name))
        elif entry is None or entry[1] != attribute_value:
            raise AssertionError(
                should_have_attribute_with_value(name, attribute_name, attribute_value)
            )

        return self

    def _attribute_for_name(self, attribute_name: str) -> Optional[Tuple[QName, str]]:
        for qname, value in get_attributes(self.actual, self.uri_to_prefix).items():
            if match_qname(qname, attribute_name):
                return qname, value
        return None


def assert_that(
    node: Any, uri_to_prefix: Optional[Mapping[str, str]] = None
) -> SingleNodeAssert:
    """
    Start assertions on node.

    Args:
        node: lxml or xml.etree element, XML source text, or None
        uri_to_prefix: Prefixes to use instead of the ones the node knows
    """
    if isinstance(node, (str, bytes)):
        node = parse_node(node)
    return SingleNodeAssert(node, uri_to_prefix)
