"""
Correction Schemas — Suggestions, Changes, and Corrected Chains
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from biaswatch.schemas.reasoning import (
    BiasLocation,
    BiasType,
    DetectedBias,
    Evidence,
    ReasoningChain,
    utcnow,
)


# ============================================================
# SUGGESTIONS (Corrector)
# ============================================================

class BiasCorrectionSuggestion(BaseModel):
    bias_type: str
    suggestion: str
    techniques: list[str]
    challenge_questions: list[str]


class BiasWithCorrection(BaseModel):
    bias: DetectedBias
    correction: BiasCorrectionSuggestion


# ============================================================
# DEVIL'S ADVOCATE
# ============================================================

class Argument(BaseModel):
    id: str
    content: str
    premises: list[str] = Field(default_factory=list)
    conclusion: str
    strength: float = Field(..., ge=0.0, le=1.0)


class AlternativePerspective(BaseModel):
    perspective: str
    counter_arguments: list[Argument] = Field(default_factory=list)
    alternative_evidence: list[Evidence] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)


# ============================================================
# CORRECTION RESULTS (CorrectionEngine)
# ============================================================

ReasoningChangeType = Literal[
    "evidence_reweight",
    "alternative_added",
    "counter_argument",
    "assumption_challenged",
]


class ReasoningChange(BaseModel):
    type: ReasoningChangeType
    location: BiasLocation
    before: str
    after: str
    rationale: str


class CorrectionApplication(BaseModel):
    bias: DetectedBias
    strategy: str
    changes: list[ReasoningChange]
    impact_reduction: float = Field(..., ge=0.0, le=1.0)


class CorrectedReasoning(BaseModel):
    original: ReasoningChain
    corrected: ReasoningChain
    biases_corrected: list[DetectedBias]
    corrections_applied: list[CorrectionApplication]
    effectiveness_score: float = Field(..., ge=0.0, le=1.0)
    timestamp: datetime = Field(default_factory=utcnow)
    # Deterministic diff of the rendered chains (diff-match-patch)
    diff_spans: list[dict] = Field(default_factory=list)


class UnsupportedCorrection(BaseModel):
    """Returned instead of a correction when no strategy exists for a type."""
    bias: DetectedBias
    bias_type: BiasType
    reason: str
    supported: Literal[False] = False


class ValidationResult(BaseModel):
    valid: bool
    issues: list[str]
    improvements: list[str]
    overall_quality: float = Field(..., ge=0.0, le=1.0)
