"""
Difference Engine Core Module

Classifies atomic comparisons between a control and a test document:
- Computes null-safe raw equality of the two detail values
- Lets the difference evaluator reclassify the raw result
- Notifies comparison listeners in evaluation order
- Asks the comparison controller whether a difference stops the process
- Returns a ComparisonState that tree walkers chain with and_then

Tree walkers subclass DifferenceEngine (or hold one) and issue one
compare() call per semantic unit; this module never decides which nodes
get compared.
"""

import logging
import math
from typing import Any, Mapping, Optional

from src.diff import state
from src.diff.comparison import Comparison, ComparisonResult, Difference
from src.diff.controllers import ComparisonController
from src.diff.evaluators import DifferenceEvaluator
from src.diff.listeners import ComparisonListener, ComparisonListenerSupport
from src.diff.matchers import NodeMatcher
from src.diff.policies import DiffPolicies
from src.diff.state import ComparisonState
from src.diff.xpath import XPathSource
from src.diff.xpath import get_xpath as _get_xpath
from src.utils.logger import describe_value, get_logger

logger = get_logger(__name__)


def values_equal(control_value: Any, test_value: Any) -> bool:
    """
    Null-safe value equality.

    Two None values are equal, one None is not. Otherwise values compare
    with ==, except that a value is always equal to itself and two float
    NaNs are equal to each other.
    """
    if control_value is None or test_value is None:
        return control_value is test_value
    if control_value is test_value:
        return True
    if isinstance(control_value, float) and isinstance(test_value, float):
        if math.isnan(control_value) and math.isnan(test_value):
            return True
    return bool(control_value == test_value)


class DifferenceEngine:
    """
    Base implementation shared by tree-walking difference engines.

    Features:
    - Listener registration for all comparisons, matches and differences
    - Validated node matcher, evaluator, controller and namespace context
    - compare(): the single place where ComparisonResults are assigned

    Policies and listeners are expected to be configured before the first
    comparison; an engine instance is not meant for concurrent use.
    """

    def __init__(self) -> None:
        self.listeners = ComparisonListenerSupport()
        self.policies = DiffPolicies()

    # Listener registration

    def add_comparison_listener(self, listener: ComparisonListener) -> None:
        self.listeners.add_comparison_listener(listener)

    def add_match_listener(self, listener: ComparisonListener) -> None:
        self.listeners.add_match_listener(listener)

    def add_difference_listener(self, listener: ComparisonListener) -> None:
        self.listeners.add_difference_listener(listener)

    # Policy registration

    def set_node_matcher(self, matcher: NodeMatcher) -> None:
        self.policies.set_node_matcher(matcher)

    def set_difference_evaluator(self, evaluator: DifferenceEvaluator) -> None:
        self.policies.set_difference_evaluator(evaluator)

    def set_comparison_controller(self, controller: ComparisonController) -> None:
        self.policies.set_comparison_controller(controller)

    def set_namespace_context(self, uri_to_prefix: Mapping[str, str]) -> None:
        self.policies.set_namespace_context(uri_to_prefix)

    @property
    def node_matcher(self) -> NodeMatcher:
        return self.policies.node_matcher

    @property
    def difference_evaluator(self) -> DifferenceEvaluator:
        return self.policies.difference_evaluator

    @property
    def comparison_controller(self) -> ComparisonController:
        return self.policies.comparison_controller

    @property
    def namespace_context(self) -> Mapping[str, str]:
        return self.policies.namespace_context

    # Comparison

    def compare(self, comparison: Comparison) -> ComparisonState:
        """
        Classify one comparison.

        Compares the detail values for equality, lets the difference
        evaluator and comparison controller judge the outcome, and notifies
        all listeners before returning.

        Args:
            comparison: Comparison issued by the tree walker

        Returns:
            FINISHED state if the outcome is not EQUAL and the controller
            asks to stop, ONGOING state otherwise. Both carry the evaluated
            result.
        """
        control_value = comparison.control_details.value
        test_value = comparison.test_details.value

        equal = values_equal(control_value, test_value)

        initial = ComparisonResult.EQUAL if equal else ComparisonResult.DIFFERENT
        outcome = self.policies.difference_evaluator(comparison, initial)

        log_context = {
            "comparison_type": comparison.type.value,
            "control_xpath": comparison.control_details.xpath,
            "test_xpath": comparison.test_details.xpath,
            "initial": initial.name,
            "outcome": outcome.name,
        }
        if logger.is_enabled_for(logging.DEBUG):
            logger.debug(
                f"Compared {describe_value(control_value)} with {describe_value(test_value)}",
                operation="compare",
                context=log_context,
            )

        self.listeners.fire_comparison_performed(comparison, outcome)

        if outcome != ComparisonResult.EQUAL and self.policies.comparison_controller(
            Difference(comparison, outcome)
        ):
            logger.info(
                f"Comparison controller stopped diffing on {outcome.name} "
                f"{comparison.type.value}",
                operation="compare",
                context=log_context,
            )
            return self.finished(outcome)

        return self.ongoing(outcome)

    def ongoing(self, result: ComparisonResult = ComparisonResult.EQUAL) -> ComparisonState:
        """ONGOING state bound to this engine, the usual start of a chain."""
        return state.ongoing(result, self.compare)

    def finished(self, result: ComparisonResult) -> ComparisonState:
        """FINISHED state bound to this engine."""
        return state.finished(result, self.compare)

    @staticmethod
    def get_xpath(ctx: Optional[XPathSource]) -> Optional[str]:
        """Return the path of an XPath context, None if there is none."""
        return _get_xpath(ctx)
