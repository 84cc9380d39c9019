"""
Feedback Schemas — User Judgments and Learning Metrics
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from biaswatch.schemas.reasoning import BiasType, DetectedBias, utcnow


TimePeriod = Literal["day", "week", "month", "all"]


class BiasFeedback(BaseModel):
    """A user's judgment on whether a detection was correct."""
    detected_bias: DetectedBias
    correct: bool
    user_id: str = Field(..., min_length=1)
    timestamp: datetime = Field(default_factory=utcnow)
    notes: Optional[str] = None


class UserSensitivityProfile(BaseModel):
    user_id: str
    sensitivity_by_type: dict[BiasType, float] = Field(default_factory=dict)
    last_updated: datetime = Field(default_factory=utcnow)


class AccuracyMetrics(BaseModel):
    """
    Classification metrics over feedback. Negatives are never recorded
    by the feedback contract, so true/false negatives are always zero
    and recall equals precision.
    """
    true_positives: int = 0
    false_positives: int = 0
    true_negatives: int = 0
    false_negatives: int = 0
    precision: float = 0.0
    recall: float = 0.0
    f1_score: float = 0.0


class LearningMetrics(BaseModel):
    total_feedback: int
    accuracy_improvement: float
    pattern_count: int
    user_count: int
