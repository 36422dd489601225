"""
Comparison model for the difference engine.

A Comparison pairs one detail of the control document with the matching
detail of the test document. The engine classifies it into a
ComparisonResult; non-EQUAL outcomes travel to the comparison controller
wrapped in a Difference.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ComparisonResult(Enum):
    """Outcome of a single comparison."""

    EQUAL = "equal"
    SIMILAR = "similar"
    DIFFERENT = "different"


class ComparisonType(Enum):
    """The semantic unit a comparison is about."""

    NODE_TYPE = "node_type"
    NAMESPACE_URI = "namespace_uri"
    NAMESPACE_PREFIX = "namespace_prefix"
    HAS_DOCTYPE_DECLARATION = "has_doctype_declaration"
    XML_VERSION = "xml_version"
    XML_STANDALONE = "xml_standalone"
    XML_ENCODING = "xml_encoding"
    TEXT_VALUE = "text_value"
    PROCESSING_INSTRUCTION_TARGET = "processing_instruction_target"
    PROCESSING_INSTRUCTION_DATA = "processing_instruction_data"
    ELEMENT_TAG_NAME = "element_tag_name"
    ELEMENT_NUM_ATTRIBUTES = "element_num_attributes"
    ATTR_VALUE = "attr_value"
    ATTR_NAME_LOOKUP = "attr_name_lookup"
    CHILD_NODELIST_LENGTH = "child_nodelist_length"
    CHILD_NODELIST_SEQUENCE = "child_nodelist_sequence"
    CHILD_LOOKUP = "child_lookup"
    SCHEMA_LOCATION = "schema_location"
    NO_NAMESPACE_SCHEMA_LOCATION = "no_namespace_schema_location"


@dataclass(frozen=True)
class Detail:
    """
    One side of a comparison.

    Attributes:
        target: The node the value was taken from (may be None)
        xpath: Location of the target, for reporting only
        value: The value compared for equality (may be None)
        parent_xpath: Location of the target's parent, for reporting only
    """

    target: Any = None
    xpath: Optional[str] = None
    value: Any = None
    parent_xpath: Optional[str] = None


@dataclass(frozen=True)
class Comparison:
    """One atomic control-vs-test value pairing awaiting classification."""

    type: ComparisonType
    control_details: Detail
    test_details: Detail

    @classmethod
    def of(
        cls,
        comparison_type: ComparisonType,
        control_value: Any,
        test_value: Any,
        control_xpath: Optional[str] = None,
        test_xpath: Optional[str] = None,
    ) -> "Comparison":
        """Build a comparison from bare values, without target nodes."""
        return cls(
            type=comparison_type,
            control_details=Detail(xpath=control_xpath, value=control_value),
            test_details=Detail(xpath=test_xpath, value=test_value),
        )

    def __str__(self) -> str:
        return (
            f"{self.type.value}: expected {self.control_details.value!r} "
            f"at {self.control_details.xpath} but was {self.test_details.value!r} "
            f"at {self.test_details.xpath}"
        )


@dataclass(frozen=True)
class Difference:
    """A comparison together with its non-EQUAL classification."""

    comparison: Comparison
    result: ComparisonResult

    def __str__(self) -> str:
        return f"{self.comparison} ({self.result.name})"
