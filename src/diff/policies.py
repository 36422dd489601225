"""
Policy registry for the difference engine.

Holds the four pluggable strategies with validated defaults:
- node matcher: pairs control/test children for tree walkers
- difference evaluator: (comparison, outcome) -> final outcome
- comparison controller: (difference) -> stop?
- namespace context: immutable URI-to-prefix snapshot
"""

from types import MappingProxyType
from typing import Mapping

from src.diff import controllers, evaluators
from src.diff.controllers import ComparisonController
from src.diff.evaluators import DifferenceEvaluator
from src.diff.matchers import DefaultNodeMatcher, NodeMatcher
from src.utils.logger import get_logger

logger = get_logger(__name__)


def _require(value, name: str) -> None:
    if value is None:
        raise ValueError(f"{name} must not be null")


class DiffPolicies:
    """
    Owned configuration of one difference engine.

    Every setter validates its argument before replacing the current policy,
    so a rejected call leaves the previous policy in place.
    """

    def __init__(self) -> None:
        self._node_matcher: NodeMatcher = DefaultNodeMatcher()
        self._difference_evaluator: DifferenceEvaluator = evaluators.default
        self._comparison_controller: ComparisonController = controllers.default
        self._namespace_context: Mapping[str, str] = MappingProxyType({})

    @property
    def node_matcher(self) -> NodeMatcher:
        return self._node_matcher

    @property
    def difference_evaluator(self) -> DifferenceEvaluator:
        return self._difference_evaluator

    @property
    def comparison_controller(self) -> ComparisonController:
        return self._comparison_controller

    @property
    def namespace_context(self) -> Mapping[str, str]:
        """Read-only URI-to-prefix snapshot taken by set_namespace_context."""
        return self._namespace_context

    def set_node_matcher(self, matcher: NodeMatcher) -> None:
        """
        Replace the node matcher.

        Raises:
            ValueError: If matcher is None
            TypeError: If matcher has no callable match method
        """
        _require(matcher, "node matcher")
        if not callable(getattr(matcher, "match", None)):
            raise TypeError(f"Node matcher must provide a match method, got {type(matcher)}")

        self._node_matcher = matcher
        logger.debug(
            "Node matcher replaced",
            operation="set_node_matcher",
            context={"policy": repr(matcher)},
        )

    def set_difference_evaluator(self, evaluator: DifferenceEvaluator) -> None:
        """
        Replace the difference evaluator.

        Raises:
            ValueError: If evaluator is None
            TypeError: If evaluator is not callable
        """
        _require(evaluator, "difference evaluator")
        if not callable(evaluator):
            raise TypeError(f"Difference evaluator must be callable, got {type(evaluator)}")

        self._difference_evaluator = evaluator
        logger.debug(
            "Difference evaluator replaced",
            operation="set_difference_evaluator",
            context={"policy": getattr(evaluator, "__name__", repr(evaluator))},
        )

    def set_comparison_controller(self, controller: ComparisonController) -> None:
        """
        Replace the comparison controller.

        Raises:
            ValueError: If controller is None
            TypeError: If controller is not callable
        """
        _require(controller, "comparison controller")
        if not callable(controller):
            raise TypeError(f"Comparison controller must be callable, got {type(controller)}")

        self._comparison_controller = controller
        logger.debug(
            "Comparison controller replaced",
            operation="set_comparison_controller",
            context={"policy": getattr(controller, "__name__", repr(controller))},
        )

    def set_namespace_context(self, uri_to_prefix: Mapping[str, str]) -> None:
        """
        Store an immutable copy of the URI-to-prefix mapping.

        Later changes to the caller's mapping are not visible here.

        Raises:
            ValueError: If uri_to_prefix is None
        """
        _require(uri_to_prefix, "namespace context")

        self._namespace_context = MappingProxyType(dict(uri_to_prefix))
        logger.debug(
            "Namespace context replaced",
            operation="set_namespace_context",
            context={"namespaces": len(self._namespace_context)},
        )
