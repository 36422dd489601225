"""
Unit Tests for the Difference Engine classifier

Tests cover:
- Null-safe raw equality
- Difference evaluator as final authority on the result
- Comparison controller consulted only for non-EQUAL results
- Listener notification before the stop decision
- Short-circuiting chains stop notifying after the controller stops
"""

import logging
from unittest.mock import Mock

import pytest

from src.diff import controllers, evaluators
from src.diff.comparison import (
    Comparison,
    ComparisonResult,
    ComparisonType,
    Detail,
    Difference,
)
from src.diff.engine import DifferenceEngine, values_equal
from src.diff.state import StateKind, finished, ongoing
from src.diff.xpath import XPathContext


def text_comparison(control, test):
    return Comparison.of(ComparisonType.TEXT_VALUE, control, test, "/a[1]/text()[1]", "/a[1]/text()[1]")


@pytest.fixture
def engine():
    return DifferenceEngine()


class TestRawEquality:
    """Null-safe equality of control and test values"""

    def test_both_null_is_equal(self, engine):
        """Two null values compare EQUAL and keep going"""
        state = engine.compare(text_comparison(None, None))

        assert state == ongoing(ComparisonResult.EQUAL)
        assert state.result == ComparisonResult.EQUAL

    def test_control_null_is_different(self, engine):
        state = engine.compare(text_comparison(None, "a"))
        assert state.result == ComparisonResult.DIFFERENT

    def test_test_null_is_different(self, engine):
        state = engine.compare(text_comparison("a", None))
        assert state.result == ComparisonResult.DIFFERENT

    def test_equal_values(self, engine):
        state = engine.compare(text_comparison("a", "a"))
        assert state == ongoing(ComparisonResult.EQUAL)

    def test_value_equality_not_identity(self, engine):
        """Distinct but equal objects are EQUAL"""
        state = engine.compare(text_comparison([1, 2], [1, 2]))
        assert state.result == ComparisonResult.EQUAL

    def test_different_values_default_policies(self, engine):
        """'a' vs 'b' with default evaluator and controller"""
        state = engine.compare(text_comparison("a", "b"))

        assert state == ongoing(ComparisonResult.DIFFERENT)
        assert state.is_finished is False

    def test_xpath_does_not_affect_equality(self, engine):
        comparison = Comparison(
            type=ComparisonType.ATTR_VALUE,
            control_details=Detail(xpath="/a[1]/@x", value="1"),
            test_details=Detail(xpath="/b[7]/@y", value="1"),
        )
        assert engine.compare(comparison).result == ComparisonResult.EQUAL

    def test_nan_equals_nan(self, engine):
        """Two distinct NaN values compare EQUAL, like any value with itself"""
        state = engine.compare(text_comparison(float("nan"), float("nan")))
        assert state.result == ComparisonResult.EQUAL

    def test_same_nan_object_is_equal(self, engine):
        nan = float("nan")
        assert engine.compare(text_comparison(nan, nan)).result == ComparisonResult.EQUAL

    def test_nan_vs_number_is_different(self, engine):
        state = engine.compare(text_comparison(float("nan"), 1.0))
        assert state.result == ComparisonResult.DIFFERENT


class TestValuesEqual:
    def test_null_handling(self):
        assert values_equal(None, None) is True
        assert values_equal(None, 0) is False
        assert values_equal("", None) is False

    def test_nan(self):
        assert values_equal(float("nan"), float("nan")) is True
        assert values_equal(float("nan"), 0.0) is False

    def test_plain_equality(self):
        assert values_equal("a", "a") is True
        assert values_equal(1, 1.0) is True
        assert values_equal("1", 1) is False


class TestDifferenceEvaluator:
    """The evaluator decides the final result"""

    def test_evaluator_receives_raw_result(self, engine):
        evaluator = Mock(return_value=ComparisonResult.DIFFERENT)
        engine.set_difference_evaluator(evaluator)
        comparison = text_comparison("a", "b")

        engine.compare(comparison)

        evaluator.assert_called_once_with(comparison, ComparisonResult.DIFFERENT)

    def test_state_carries_evaluated_result(self, engine):
        """Evaluator output, not the raw result, ends up in the state"""
        engine.set_difference_evaluator(lambda c, r: ComparisonResult.SIMILAR)

        state = engine.compare(text_comparison("a", "a"))

        assert state.result == ComparisonResult.SIMILAR

    def test_evaluator_can_demote_to_equal(self, engine):
        engine.set_difference_evaluator(evaluators.accept)
        controller = Mock(return_value=True)
        engine.set_comparison_controller(controller)

        state = engine.compare(text_comparison("a", "b"))

        assert state == ongoing(ComparisonResult.EQUAL)
        controller.assert_not_called()

    def test_evaluator_exception_propagates(self, engine):
        def broken(comparison, outcome):
            raise RuntimeError("evaluator failed")

        engine.set_difference_evaluator(broken)
        listener = Mock()
        engine.add_comparison_listener(listener)

        with pytest.raises(RuntimeError, match="evaluator failed"):
            engine.compare(text_comparison("a", "b"))
        listener.assert_not_called()


class TestComparisonController:
    """Stop decisions for non-EQUAL results"""

    def test_equal_result_never_consults_controller(self, engine):
        controller = Mock(return_value=True)
        engine.set_comparison_controller(controller)

        state = engine.compare(text_comparison("a", "a"))

        assert state.kind is StateKind.ONGOING
        controller.assert_not_called()

    def test_controller_receives_difference(self, engine):
        controller = Mock(return_value=False)
        engine.set_comparison_controller(controller)
        comparison = text_comparison("a", "b")

        engine.compare(comparison)

        controller.assert_called_once_with(Difference(comparison, ComparisonResult.DIFFERENT))

    def test_stopping_controller_finishes(self, engine):
        """'a' vs 'b' with a controller that stops on DIFFERENT"""
        engine.set_comparison_controller(controllers.stop_when_different)

        state = engine.compare(text_comparison("a", "b"))

        assert state == finished(ComparisonResult.DIFFERENT)
        assert state.is_finished is True

    def test_similar_does_not_stop_when_different_controller(self, engine):
        engine.set_difference_evaluator(evaluators.downgrade_differences_to_similar())
        engine.set_comparison_controller(controllers.stop_when_different)

        state = engine.compare(text_comparison("a", "b"))

        assert state == ongoing(ComparisonResult.SIMILAR)

    def test_controller_sees_evaluated_result(self, engine):
        engine.set_difference_evaluator(evaluators.downgrade_differences_to_similar())
        controller = Mock(return_value=True)
        engine.set_comparison_controller(controller)

        state = engine.compare(text_comparison("a", "b"))

        difference = controller.call_args[0][0]
        assert difference.result == ComparisonResult.SIMILAR
        assert state == finished(ComparisonResult.SIMILAR)

    def test_controller_exception_propagates(self, engine):
        def broken(difference):
            raise RuntimeError("controller failed")

        engine.set_comparison_controller(broken)

        with pytest.raises(RuntimeError, match="controller failed"):
            engine.compare(text_comparison("a", "b"))


class TestNotification:
    """Listeners fire once per classification, before the stop decision"""

    def test_listener_fires_with_evaluated_result(self, engine):
        engine.set_difference_evaluator(lambda c, r: ComparisonResult.SIMILAR)
        listener = Mock()
        engine.add_comparison_listener(listener)
        comparison = text_comparison("a", "a")

        engine.compare(comparison)

        listener.assert_called_once_with(comparison, ComparisonResult.SIMILAR)

    def test_listener_fires_before_controller(self, engine):
        calls = []
        engine.add_difference_listener(lambda c, r: calls.append("listener"))
        engine.set_comparison_controller(lambda d: calls.append("controller") or True)

        engine.compare(text_comparison("a", "b"))

        assert calls == ["listener", "controller"]

    def test_listener_fires_even_when_stopping(self, engine):
        engine.set_comparison_controller(controllers.stop_when_different)
        listener = Mock()
        engine.add_difference_listener(listener)

        engine.compare(text_comparison("a", "b"))

        assert listener.call_count == 1

    def test_chain_stops_notifying_after_first_stopping_difference(self, engine):
        """Exactly k notifications when comparison k is the first to stop"""
        engine.set_comparison_controller(controllers.stop_when_different)
        listener = Mock()
        engine.add_comparison_listener(listener)
        comparisons = [
            text_comparison("a", "a"),
            text_comparison("b", "b"),
            text_comparison("c", "x"),
            text_comparison("d", "d"),
            text_comparison("e", "y"),
        ]

        state = engine.ongoing()
        for comparison in comparisons:
            state = state.and_then(comparison)

        assert listener.call_count == 3
        assert [call.args[0] for call in listener.call_args_list] == comparisons[:3]
        assert state == finished(ComparisonResult.DIFFERENT)

    def test_chain_without_stop_notifies_every_comparison(self, engine):
        listener = Mock()
        engine.add_comparison_listener(listener)

        state = (
            engine.ongoing()
            .and_then(text_comparison("a", "x"))
            .and_then(text_comparison("b", "b"))
            .and_then(text_comparison("c", "y"))
        )

        assert listener.call_count == 3
        assert state == ongoing(ComparisonResult.DIFFERENT)

    def test_skipped_chained_comparison_never_evaluated(self, engine):
        engine.set_comparison_controller(controllers.stop_when_different)
        evaluator = Mock(side_effect=lambda c, r: r)
        engine.set_difference_evaluator(evaluator)

        state = engine.compare(text_comparison("a", "b")).and_then(text_comparison("c", "c"))

        assert evaluator.call_count == 1
        assert state == finished(ComparisonResult.DIFFERENT)


class TestEngineAccessors:
    """Registry passthrough and reporting helpers"""

    def test_default_policies(self, engine):
        assert engine.difference_evaluator is evaluators.default
        assert engine.comparison_controller is controllers.default
        assert dict(engine.namespace_context) == {}

    def test_namespace_context_passthrough(self, engine):
        engine.set_namespace_context({"urn:x": "x"})
        assert engine.namespace_context["urn:x"] == "x"

    def test_null_policies_rejected(self, engine):
        with pytest.raises(ValueError, match="must not be null"):
            engine.set_comparison_controller(None)
        with pytest.raises(ValueError, match="must not be null"):
            engine.set_difference_evaluator(None)
        with pytest.raises(ValueError, match="must not be null"):
            engine.set_node_matcher(None)
        with pytest.raises(ValueError, match="must not be null"):
            engine.add_match_listener(None)

    def test_engines_do_not_share_policies(self):
        first_engine = DifferenceEngine()
        second_engine = DifferenceEngine()

        first_engine.set_comparison_controller(controllers.stop_when_different)

        assert second_engine.comparison_controller is controllers.default
        assert first_engine.node_matcher is not second_engine.node_matcher

    def test_get_xpath(self):
        ctx = XPathContext()
        ctx.navigate_to_child("root")

        assert DifferenceEngine.get_xpath(ctx) == "/root[1]"
        assert DifferenceEngine.get_xpath(None) is None

    def test_stop_decision_logged(self, engine, caplog):
        engine.set_comparison_controller(controllers.stop_when_different)

        with caplog.at_level(logging.INFO, logger="src.diff.engine"):
            engine.compare(text_comparison("a", "b"))

        assert "stopped diffing" in caplog.text
