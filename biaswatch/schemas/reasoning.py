"""
Reasoning Schemas — Chains, Evidence, and Detections

Pydantic models for the artifacts the core consumes (reasoning chains)
and the detections it produces. Probability-like fields are bounded to
[0, 1] at construction; computed values are clamped before storage.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# BIAS TYPES
# ============================================================

class BiasType(str, Enum):
    """The nine canonical cognitive-bias categories."""
    CONFIRMATION = "confirmation"
    ANCHORING = "anchoring"
    AVAILABILITY = "availability"
    RECENCY = "recency"
    REPRESENTATIVENESS = "representativeness"
    FRAMING = "framing"
    SUNK_COST = "sunk_cost"
    ATTRIBUTION = "attribution"
    BANDWAGON = "bandwagon"


StepKind = Literal["hypothesis", "evidence", "inference", "conclusion", "assumption"]


# ============================================================
# REASONING CHAIN
# ============================================================

class ReasoningStep(BaseModel):
    id: str
    content: str
    type: StepKind
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    evidence: Optional[list[str]] = None
    timestamp: Optional[datetime] = None


class ReasoningBranch(BaseModel):
    """An alternative reasoning path that was considered."""
    id: str
    description: str
    steps: list[ReasoningStep] = Field(default_factory=list)
    selected: bool = False
    rationale: Optional[str] = None


class Assumption(BaseModel):
    id: str
    content: str
    explicit: bool = True
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    evidence: Optional[list[str]] = None


class Inference(BaseModel):
    id: str
    content: str
    premises: list[str] = Field(default_factory=list)
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    type: Literal["deductive", "inductive", "abductive"] = "deductive"


class Evidence(BaseModel):
    id: str
    content: str
    source: str = "unknown"
    reliability: Optional[float] = Field(None, ge=0.0, le=1.0)
    relevance: Optional[float] = Field(None, ge=0.0, le=1.0)
    timestamp: Optional[datetime] = None


class ReasoningChain(BaseModel):
    """
    The structured input artifact: steps, branches, assumptions,
    inferences, evidence, and a conclusion.

    Owned by the caller. Detectors only read it; the correction engine
    returns a modified copy and never touches the original.
    """
    id: str = ""
    steps: list[ReasoningStep] = Field(default_factory=list)
    branches: list[ReasoningBranch] = Field(default_factory=list)
    assumptions: list[Assumption] = Field(default_factory=list)
    inferences: list[Inference] = Field(default_factory=list)
    evidence: list[Evidence] = Field(default_factory=list)
    conclusion: str = ""
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    context: Optional[str] = None  # Problem context, used by pattern mining


# ============================================================
# DETECTIONS
# ============================================================

class BiasLocation(BaseModel):
    step_index: int = 0
    reasoning: str = ""
    context: Optional[str] = None


class DetectedBias(BaseModel):
    """A bias identified in a reasoning chain or raw text. Ephemeral."""
    type: BiasType
    severity: float = Field(..., ge=0.0, le=1.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    evidence: list[str] = Field(default_factory=list)
    location: BiasLocation = Field(default_factory=BiasLocation)
    explanation: str = ""
    detected_at: datetime = Field(default_factory=utcnow)


class BiasPattern(BaseModel):
    """A recurring combination of bias types across chains."""
    bias_types: list[BiasType]
    frequency: int = 0
    common_contexts: list[str] = Field(default_factory=list)
    average_severity: float = Field(0.0, ge=0.0, le=1.0)
    correction_success: Optional[float] = Field(None, ge=0.0, le=1.0)


class BiasDetectionConfig(BaseModel):
    """Reporting filters for PatternRecognizer.analyze."""
    min_confidence: float = Field(0.0, ge=0.0, le=1.0)
    min_severity: float = Field(0.0, ge=0.0, le=1.0)
    max_processing_time: float = Field(3000.0, gt=0)  # Soft budget, ms


class BiasDetectionResult(BaseModel):
    detected_biases: list[DetectedBias]
    patterns: list[BiasPattern]
    overall_bias_score: float = Field(..., ge=0.0, le=1.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    processing_time: float  # ms
    timestamp: datetime = Field(default_factory=utcnow)
