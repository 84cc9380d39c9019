"""
Tests for the Learning System — feedback integration, weights, user
sensitivity, pattern discovery, and metrics.
"""

from datetime import datetime, timedelta, timezone

import pytest

from biaswatch.errors import FeedbackValidationError
from biaswatch.patterns.learned import LearningSystem
from biaswatch.schemas import BiasFeedback, BiasLocation, BiasType, DetectedBias


T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _bias(bias_type=BiasType.CONFIRMATION, severity=0.7):
    return DetectedBias(
        type=bias_type,
        severity=severity,
        confidence=0.75,
        evidence=["e"],
        location=BiasLocation(step_index=0, reasoning="r"),
        explanation="x",
    )


def _feedback(correct=True, user="u1", bias_type=BiasType.CONFIRMATION, timestamp=None):
    kwargs = {}
    if timestamp is not None:
        kwargs["timestamp"] = timestamp
    return BiasFeedback(detected_bias=_bias(bias_type), correct=correct, user_id=user, **kwargs)


@pytest.fixture
def learning():
    return LearningSystem(default_sensitivity=0.5, weight_min=0.1, weight_max=2.0)


# ============================================================
# FEEDBACK & SENSITIVITY
# ============================================================

class TestFeedback:

    def test_scenario_d_three_correct_raise_sensitivity(self, learning):
        for _ in range(3):
            learning.integrate_feedback(_feedback(True))
        assert learning.get_user_sensitivity("u1", BiasType.CONFIRMATION) == pytest.approx(0.55)

    def test_two_items_do_not_tune(self, learning):
        learning.integrate_feedback(_feedback(True))
        learning.integrate_feedback(_feedback(True))
        assert learning.get_user_sensitivity("u1", BiasType.CONFIRMATION) == 0.5
        assert learning.get_user_profile("u1") is None

    def test_mostly_incorrect_lowers_sensitivity(self, learning):
        for _ in range(3):
            learning.integrate_feedback(_feedback(False))
        assert learning.get_user_sensitivity("u1", BiasType.CONFIRMATION) == pytest.approx(0.45)

    def test_mixed_accuracy_leaves_sensitivity(self, learning):
        learning.integrate_feedback(_feedback(True))
        learning.integrate_feedback(_feedback(True))
        learning.integrate_feedback(_feedback(False))
        assert learning.get_user_sensitivity("u1", BiasType.CONFIRMATION) == 0.5

    def test_users_are_isolated(self, learning):
        for _ in range(3):
            learning.integrate_feedback(_feedback(True, user="alice"))
        assert learning.get_user_sensitivity("bob", BiasType.CONFIRMATION) == 0.5

    def test_instances_are_isolated(self):
        a, b = LearningSystem(), LearningSystem()
        a.integrate_feedback(_feedback(True))
        assert a.get_pattern_weight(BiasType.CONFIRMATION) == pytest.approx(1.1)
        assert b.get_pattern_weight(BiasType.CONFIRMATION) == 1.0

    def test_weight_nudges(self, learning):
        learning.integrate_feedback(_feedback(True))
        learning.integrate_feedback(_feedback(False, bias_type=BiasType.FRAMING))
        assert learning.get_pattern_weight(BiasType.CONFIRMATION) == pytest.approx(1.1)
        assert learning.get_pattern_weight(BiasType.FRAMING) == pytest.approx(0.9)

    def test_weights_stay_bounded(self, learning):
        for _ in range(30):
            learning.integrate_feedback(_feedback(True))
            learning.integrate_feedback(_feedback(False, bias_type=BiasType.FRAMING))
        assert learning.get_pattern_weight(BiasType.CONFIRMATION) == pytest.approx(2.0)
        assert learning.get_pattern_weight(BiasType.FRAMING) == pytest.approx(0.1)

    def test_accepts_dict(self, learning):
        learning.integrate_feedback({
            "detected_bias": _bias().model_dump(),
            "correct": True,
            "user_id": "u1",
        })
        assert learning.get_learning_metrics().total_feedback == 1

    @pytest.mark.parametrize("payload", [
        {"correct": True, "user_id": "u1"},
        {"detected_bias": {"type": "confirmation"}, "correct": True, "user_id": "u1"},
        {"detected_bias": None, "correct": True, "user_id": ""},
        "not feedback",
    ])
    def test_invalid_feedback_rejected(self, learning, payload):
        with pytest.raises(FeedbackValidationError):
            learning.integrate_feedback(payload)
        assert learning.get_learning_metrics().total_feedback == 0

    def test_invalid_feedback_is_value_error(self, learning):
        with pytest.raises(ValueError):
            learning.integrate_feedback({"correct": True})


class TestSensitivity:

    def test_adjust_clamps(self, learning):
        assert learning.adjust_sensitivity("u1", BiasType.FRAMING, 0.9) == 1.0
        assert learning.adjust_sensitivity("u1", BiasType.FRAMING, -5) == 0.0

    def test_profile_created_lazily(self, learning):
        learning.adjust_sensitivity("u1", BiasType.FRAMING, 0.1)
        profile = learning.get_user_profile("u1")
        assert profile.sensitivity_by_type[BiasType.FRAMING] == pytest.approx(0.6)

    def test_profile_is_a_copy(self, learning):
        learning.adjust_sensitivity("u1", BiasType.FRAMING, 0.1)
        profile = learning.get_user_profile("u1")
        profile.sensitivity_by_type[BiasType.FRAMING] = 0.0
        assert learning.get_user_sensitivity("u1", BiasType.FRAMING) == pytest.approx(0.6)

    def test_update_user_sensitivity_requires_three(self, learning):
        assert learning.update_user_sensitivity("u1", BiasType.CONFIRMATION) == 0.5

    def test_filter_for_user(self, learning):
        biases = [_bias(severity=0.3), _bias(severity=0.7)]
        # Default sensitivity 0.5: keep weighted severity >= 0.5
        assert [b.severity for b in learning.filter_for_user(biases, "u1")] == [0.7]
        learning.adjust_sensitivity("u1", BiasType.CONFIRMATION, 0.3)
        assert len(learning.filter_for_user(biases, "u1")) == 2


# ============================================================
# WEIGHTS & PATTERNS
# ============================================================

class TestWeights:

    def test_update_pattern_weights(self, learning):
        assert learning.update_pattern_weights(BiasType.ANCHORING, 0.9) == pytest.approx(1.1)
        assert learning.update_pattern_weights(BiasType.ANCHORING, 0.7) == pytest.approx(1.1)
        assert learning.update_pattern_weights(BiasType.ANCHORING, 0.5) == pytest.approx(0.95)

    def test_weighted_severity_clamped(self, learning):
        for _ in range(10):
            learning.update_pattern_weights(BiasType.CONFIRMATION, 1.0)
        assert learning.weighted_severity(_bias(severity=0.7)) == 1.0

    def test_prune(self, learning):
        learning.integrate_feedback(_feedback(False, bias_type=BiasType.RECENCY))
        learning.integrate_feedback(_feedback(True, bias_type=BiasType.RECENCY))
        learning.integrate_feedback(_feedback(True))
        # RECENCY: 1.0 - 0.1 + 0.1 = 1.0, error rate 0.5
        assert learning.prune_ineffective_patterns() == [BiasType.RECENCY]
        assert learning.get_pattern_weight(BiasType.RECENCY) == pytest.approx(0.8)
        assert learning.get_pattern_weight(BiasType.CONFIRMATION) == pytest.approx(1.1)

    def test_prune_respects_floor(self, learning):
        for _ in range(20):
            learning.integrate_feedback(_feedback(False, bias_type=BiasType.RECENCY))
        learning.prune_ineffective_patterns()
        assert learning.get_pattern_weight(BiasType.RECENCY) == pytest.approx(0.1)


class TestLearnNewPattern:

    def test_too_few_items(self, learning):
        assert learning.learn_new_pattern([_feedback(False), _feedback(False)]) is None

    def test_first_type_with_two_errors(self, learning):
        items = [
            _feedback(False, bias_type=BiasType.FRAMING),
            _feedback(False, bias_type=BiasType.ANCHORING),
            _feedback(False, bias_type=BiasType.ANCHORING),
            _feedback(False, bias_type=BiasType.FRAMING),
        ]
        pattern = learning.learn_new_pattern(items)
        assert pattern.bias_types == [BiasType.FRAMING]
        assert pattern.frequency == 2
        assert pattern.average_severity == pytest.approx(0.6)
        assert learning.get_learned_patterns() == [pattern]
        assert learning.get_learning_metrics().pattern_count == 1

    def test_no_error_cluster(self, learning):
        items = [_feedback(True), _feedback(True), _feedback(False)]
        assert learning.learn_new_pattern(items) is None


# ============================================================
# METRICS
# ============================================================

class TestMetrics:

    def test_accuracy_metrics(self, learning):
        learning.integrate_feedback(_feedback(True))
        learning.integrate_feedback(_feedback(True))
        learning.integrate_feedback(_feedback(False))
        learning.integrate_feedback(_feedback(False, bias_type=BiasType.FRAMING))

        overall = learning.get_accuracy_metrics()
        assert overall.true_positives == 2
        assert overall.false_positives == 2
        assert overall.precision == pytest.approx(0.5)
        assert overall.recall == overall.precision
        assert overall.f1_score == pytest.approx(0.5)
        assert overall.true_negatives == 0
        assert overall.false_negatives == 0

        confirmation = learning.get_accuracy_metrics(BiasType.CONFIRMATION)
        assert confirmation.precision == pytest.approx(2 / 3)

    def test_accuracy_metrics_empty(self, learning):
        metrics = learning.get_accuracy_metrics()
        assert metrics.precision == 0.0
        assert metrics.f1_score == 0.0

    def test_improvement_needs_ten_items(self, learning):
        for _ in range(9):
            learning.integrate_feedback(_feedback(True))
        assert learning.get_improvement_rate() == 0.0

    def test_improvement_all(self, learning):
        for i in range(5):
            learning.integrate_feedback(_feedback(False, user=f"a{i}", timestamp=T0))
        for i in range(5):
            learning.integrate_feedback(
                _feedback(True, user=f"b{i}", timestamp=T0 + timedelta(days=10))
            )
        assert learning.get_improvement_rate("all") == pytest.approx(1.0)
        assert learning.get_learning_metrics().accuracy_improvement == pytest.approx(1.0)

    def test_improvement_never_negative(self, learning):
        for i in range(5):
            learning.integrate_feedback(_feedback(True, user=f"a{i}", timestamp=T0))
        for i in range(5):
            learning.integrate_feedback(
                _feedback(False, user=f"b{i}", timestamp=T0 + timedelta(days=10))
            )
        assert learning.get_improvement_rate("all") == 0.0

    def test_improvement_by_week(self, learning):
        now = datetime.now(timezone.utc)
        for i in range(5):
            learning.integrate_feedback(
                _feedback(False, user=f"a{i}", timestamp=now - timedelta(days=30))
            )
        for i in range(5):
            learning.integrate_feedback(_feedback(True, user=f"b{i}", timestamp=now))
        assert learning.get_improvement_rate("week") == pytest.approx(1.0)

    def test_unknown_period(self, learning):
        for _ in range(10):
            learning.integrate_feedback(_feedback(True))
        with pytest.raises(ValueError):
            learning.get_improvement_rate("year")

    def test_learning_metrics(self, learning):
        for _ in range(3):
            learning.integrate_feedback(_feedback(True))
        metrics = learning.get_learning_metrics()
        assert metrics.total_feedback == 3
        assert metrics.user_count == 1
        assert metrics.pattern_count == 0
