"""Assertion helpers on top of xml.etree nodes."""

from .nodes import QName, get_attributes, node_name, namespaces_of, collect_namespaces
from .single_node import SingleNodeAssert, assert_that, parse_node

__all__ = [
    "QName",
    "get_attributes",
    "node_name",
    "namespaces_of",
    "collect_namespaces",
    "SingleNodeAssert",
    "assert_that",
    "parse_node",
]
