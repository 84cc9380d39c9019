"""
Learning System — Feedback-Driven Adaptation

The adaptive layer around the fixed rule table. Detection rules never
change here; what changes is how much each bias type is trusted and
how strict detection is for each user.

State (process lifetime, owned by the instance):
  1. Feedback history (append-only)
  2. Weight per bias type, 1.0 initial, bounded to [WEIGHT_MIN, WEIGHT_MAX]
  3. Per-user sensitivity profiles, created lazily, bounded to [0, 1]
  4. Patterns discovered from clusters of incorrect detections

Every read-modify-write runs under one lock so concurrent feedback for
the same bias type or user cannot lose an update.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from pydantic import ValidationError

from biaswatch.config import settings
from biaswatch.errors import FeedbackValidationError
from biaswatch.rules import clamp01
from biaswatch.schemas.feedback import (
    AccuracyMetrics,
    BiasFeedback,
    LearningMetrics,
    TimePeriod,
    UserSensitivityProfile,
)
from biaswatch.schemas.reasoning import BiasPattern, BiasType, DetectedBias, utcnow

logger = logging.getLogger(__name__)


# --- Feedback nudges ---
FEEDBACK_WEIGHT_STEP = 0.1
SENSITIVITY_STEP = 0.05
MIN_USER_FEEDBACK = 3          # Per user and type before sensitivity moves
USER_HIGH_ACCURACY = 0.8
USER_LOW_ACCURACY = 0.5

# --- Direct weight adjustment ---
PATTERN_HIGH_ACCURACY = 0.8
PATTERN_LOW_ACCURACY = 0.6
WEIGHT_RAISE = 0.1
WEIGHT_CUT = 0.15

# --- Pruning and discovery ---
PRUNE_ERROR_RATE = 0.3
PRUNE_FACTOR = 0.8
MIN_PATTERN_FEEDBACK = 3
MIN_PATTERN_ERRORS = 2
LEARNED_PATTERN_SEVERITY = 0.6

MIN_IMPROVEMENT_SAMPLES = 10

PERIODS: dict[str, timedelta] = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
}


def _as_utc(ts: datetime) -> datetime:
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


def _accuracy(items: list[BiasFeedback]) -> float:
    if not items:
        return 0.0
    return sum(1 for f in items if f.correct) / len(items)


class LearningSystem:
    """
    Adapts bias-type weights and per-user sensitivity from feedback.

    Construct one per tenant (or per test); instances share nothing.
    """

    def __init__(
        self,
        default_sensitivity: Optional[float] = None,
        weight_min: Optional[float] = None,
        weight_max: Optional[float] = None,
    ):
        self.default_sensitivity = (
            settings.DEFAULT_SENSITIVITY if default_sensitivity is None else default_sensitivity
        )
        self.weight_min = settings.WEIGHT_MIN if weight_min is None else weight_min
        self.weight_max = settings.WEIGHT_MAX if weight_max is None else weight_max

        self._lock = threading.Lock()
        self._feedback: list[BiasFeedback] = []
        self._weights: dict[BiasType, float] = {t: 1.0 for t in BiasType}
        self._profiles: dict[str, UserSensitivityProfile] = {}
        self._patterns: dict[BiasType, BiasPattern] = {}

    # ============================================================
    # FEEDBACK
    # ============================================================

    def integrate_feedback(self, feedback: Union[BiasFeedback, dict]) -> None:
        """
        Record a feedback event and adapt.

        Nudges the type weight by +/-0.1, then re-tunes the user's
        sensitivity once they have at least three judgments for the type.

        Raises:
            FeedbackValidationError: required fields missing or invalid.
        """
        fb = self._validate(feedback)
        bias_type = fb.detected_bias.type

        with self._lock:
            self._feedback.append(fb)
            delta = FEEDBACK_WEIGHT_STEP if fb.correct else -FEEDBACK_WEIGHT_STEP
            weight = self._set_weight(bias_type, self._weights[bias_type] + delta)

            user_items = self._user_items(fb.user_id, bias_type)
            sensitivity = None
            if len(user_items) >= MIN_USER_FEEDBACK:
                sensitivity = self._tune_sensitivity(fb.user_id, bias_type, user_items)

        logger.info(
            "Feedback integrated",
            extra={
                "bias_type": bias_type.value,
                "user_id": fb.user_id,
                "weight": round(weight, 4),
                "sensitivity": sensitivity,
            },
        )

    def _validate(self, feedback) -> BiasFeedback:
        if isinstance(feedback, BiasFeedback):
            return feedback
        if not isinstance(feedback, dict):
            raise FeedbackValidationError(
                f"Feedback must be a BiasFeedback or dict, got {type(feedback).__name__}"
            )
        try:
            return BiasFeedback.model_validate(feedback)
        except ValidationError as e:
            raise FeedbackValidationError(f"Invalid feedback: {e}") from e

    def _user_items(self, user_id: str, bias_type: BiasType) -> list[BiasFeedback]:
        return [
            f for f in self._feedback
            if f.user_id == user_id and f.detected_bias.type == bias_type
        ]

    # ============================================================
    # SENSITIVITY
    # ============================================================

    def update_user_sensitivity(self, user_id: str, bias_type: BiasType) -> float:
        """
        Re-tune one user's sensitivity for a type from their feedback.
        Below three judgments nothing changes. Returns the sensitivity.
        """
        bias_type = BiasType(bias_type)
        with self._lock:
            items = self._user_items(user_id, bias_type)
            if len(items) < MIN_USER_FEEDBACK:
                return self._sensitivity(user_id, bias_type)
            return self._tune_sensitivity(user_id, bias_type, items)

    def _tune_sensitivity(
        self, user_id: str, bias_type: BiasType, items: list[BiasFeedback],
    ) -> float:
        accuracy = _accuracy(items)
        if accuracy > USER_HIGH_ACCURACY:
            return self._adjust(user_id, bias_type, SENSITIVITY_STEP)
        if accuracy < USER_LOW_ACCURACY:
            return self._adjust(user_id, bias_type, -SENSITIVITY_STEP)
        return self._sensitivity(user_id, bias_type)

    def adjust_sensitivity(self, user_id: str, bias_type: BiasType, delta: float) -> float:
        """Shift a user's sensitivity by delta, clamped to [0, 1]."""
        bias_type = BiasType(bias_type)
        with self._lock:
            return self._adjust(user_id, bias_type, delta)

    def _adjust(self, user_id: str, bias_type: BiasType, delta: float) -> float:
        profile = self._profiles.get(user_id)
        if profile is None:
            profile = UserSensitivityProfile(user_id=user_id)
            self._profiles[user_id] = profile

        current = profile.sensitivity_by_type.get(bias_type, self.default_sensitivity)
        updated = clamp01(current + delta)
        profile.sensitivity_by_type[bias_type] = updated
        profile.last_updated = utcnow()
        return updated

    def get_user_sensitivity(self, user_id: str, bias_type: BiasType) -> float:
        with self._lock:
            return self._sensitivity(user_id, BiasType(bias_type))

    def _sensitivity(self, user_id: str, bias_type: BiasType) -> float:
        profile = self._profiles.get(user_id)
        if profile is None:
            return self.default_sensitivity
        return profile.sensitivity_by_type.get(bias_type, self.default_sensitivity)

    def get_user_profile(self, user_id: str) -> Optional[UserSensitivityProfile]:
        with self._lock:
            profile = self._profiles.get(user_id)
            return profile.model_copy(deep=True) if profile else None

    # ============================================================
    # WEIGHTS
    # ============================================================

    def get_pattern_weight(self, bias_type: BiasType) -> float:
        with self._lock:
            return self._weights[BiasType(bias_type)]

    def update_pattern_weights(self, bias_type: BiasType, accuracy: float) -> float:
        """
        Direct adjustment from an externally measured accuracy:
        +0.1 above 0.8, -0.15 below 0.6, unchanged otherwise.
        """
        bias_type = BiasType(bias_type)
        with self._lock:
            weight = self._weights[bias_type]
            if accuracy > PATTERN_HIGH_ACCURACY:
                weight += WEIGHT_RAISE
            elif accuracy < PATTERN_LOW_ACCURACY:
                weight -= WEIGHT_CUT
            return self._set_weight(bias_type, weight)

    def _set_weight(self, bias_type: BiasType, weight: float) -> float:
        bounded = max(self.weight_min, min(self.weight_max, weight))
        self._weights[bias_type] = bounded
        return bounded

    def weighted_severity(self, bias: DetectedBias) -> float:
        return clamp01(bias.severity * self.get_pattern_weight(bias.type))

    def filter_for_user(self, biases: list[DetectedBias], user_id: str) -> list[DetectedBias]:
        """
        Keep the biases this user should see. Higher sensitivity lowers
        the bar: a bias survives when its weighted severity is at least
        1 - sensitivity.
        """
        return [
            b for b in biases
            if self.weighted_severity(b) >= 1 - self.get_user_sensitivity(user_id, b.type)
        ]

    # ============================================================
    # PATTERNS
    # ============================================================

    def learn_new_pattern(self, feedback: list[BiasFeedback]) -> Optional[BiasPattern]:
        """
        Discovery heuristic: the first bias type (in feedback order) with
        at least two incorrect judgments becomes a learned pattern.
        Needs at least three items.
        """
        if len(feedback) < MIN_PATTERN_FEEDBACK:
            return None

        by_type: dict[BiasType, list[BiasFeedback]] = {}
        for f in feedback:
            by_type.setdefault(f.detected_bias.type, []).append(f)

        for bias_type, items in by_type.items():
            incorrect = sum(1 for f in items if not f.correct)
            if incorrect >= MIN_PATTERN_ERRORS:
                pattern = BiasPattern(
                    bias_types=[bias_type],
                    frequency=incorrect,
                    average_severity=LEARNED_PATTERN_SEVERITY,
                )
                with self._lock:
                    self._patterns[bias_type] = pattern
                logger.info(
                    "Pattern learned",
                    extra={"bias_type": bias_type.value, "biases_count": incorrect},
                )
                return pattern
        return None

    def get_learned_patterns(self) -> list[BiasPattern]:
        with self._lock:
            return list(self._patterns.values())

    def prune_ineffective_patterns(self) -> list[BiasType]:
        """
        Down-weight (x0.8, floor WEIGHT_MIN) every type whose feedback is
        more than 30% incorrect. Returns the pruned types.
        """
        pruned = []
        with self._lock:
            by_type: dict[BiasType, list[BiasFeedback]] = {}
            for f in self._feedback:
                by_type.setdefault(f.detected_bias.type, []).append(f)

            for bias_type, items in by_type.items():
                error_rate = 1 - _accuracy(items)
                if error_rate > PRUNE_ERROR_RATE:
                    self._set_weight(bias_type, self._weights[bias_type] * PRUNE_FACTOR)
                    pruned.append(bias_type)

        for bias_type in pruned:
            logger.info("Bias type down-weighted", extra={"bias_type": bias_type.value})
        return pruned

    # ============================================================
    # METRICS
    # ============================================================

    def get_accuracy_metrics(self, bias_type: Optional[BiasType] = None) -> AccuracyMetrics:
        """
        Correct feedback counts as a true positive, incorrect as a false
        positive. Negatives are not part of the feedback contract, so
        recall is reported equal to precision.
        """
        with self._lock:
            items = list(self._feedback)
        if bias_type is not None:
            bias_type = BiasType(bias_type)
            items = [f for f in items if f.detected_bias.type == bias_type]

        tp = sum(1 for f in items if f.correct)
        fp = len(items) - tp
        precision = tp / (tp + fp) if items else 0.0
        recall = precision
        f1 = 2 * precision * recall / (precision + recall) if precision + recall > 0 else 0.0

        return AccuracyMetrics(
            true_positives=tp,
            false_positives=fp,
            precision=precision,
            recall=recall,
            f1_score=f1,
        )

    def get_improvement_rate(self, period: TimePeriod = "all") -> float:
        """
        Accuracy gain of recent feedback over earlier feedback.

        day/week/month split at now minus 1/7/30 days. "all" splits at the
        midpoint between the oldest and newest feedback. Returns 0 with
        fewer than ten items or when either side is empty.
        """
        with self._lock:
            items = list(self._feedback)
        if len(items) < MIN_IMPROVEMENT_SAMPLES:
            return 0.0

        if period == "all":
            stamps = [_as_utc(f.timestamp) for f in items]
            earliest, latest = min(stamps), max(stamps)
            cutoff = earliest + (latest - earliest) / 2
        elif period in PERIODS:
            cutoff = utcnow() - PERIODS[period]
        else:
            raise ValueError(f"Unknown period: {period}")

        early = [f for f in items if _as_utc(f.timestamp) < cutoff]
        recent = [f for f in items if _as_utc(f.timestamp) >= cutoff]
        if not early or not recent:
            return 0.0
        return max(0.0, _accuracy(recent) - _accuracy(early))

    def get_learning_metrics(self) -> LearningMetrics:
        with self._lock:
            total = len(self._feedback)
            pattern_count = len(self._patterns)
            user_count = len(self._profiles)
        return LearningMetrics(
            total_feedback=total,
            accuracy_improvement=self.get_improvement_rate("all"),
            pattern_count=pattern_count,
            user_count=user_count,
        )
