"""Data model shared by every BiasWatch component."""

from biaswatch.schemas.reasoning import (
    Assumption,
    BiasDetectionConfig,
    BiasDetectionResult,
    BiasLocation,
    BiasPattern,
    BiasType,
    DetectedBias,
    Evidence,
    Inference,
    ReasoningBranch,
    ReasoningChain,
    ReasoningStep,
    utcnow,
)
from biaswatch.schemas.correction import (
    AlternativePerspective,
    Argument,
    BiasCorrectionSuggestion,
    BiasWithCorrection,
    CorrectedReasoning,
    CorrectionApplication,
    ReasoningChange,
    UnsupportedCorrection,
    ValidationResult,
)
from biaswatch.schemas.feedback import (
    AccuracyMetrics,
    BiasFeedback,
    LearningMetrics,
    TimePeriod,
    UserSensitivityProfile,
)
from biaswatch.schemas.monitoring import AlertPriority, BiasAlert, MonitoringMetrics

__all__ = [
    "Assumption",
    "BiasDetectionConfig",
    "BiasDetectionResult",
    "BiasLocation",
    "BiasPattern",
    "BiasType",
    "DetectedBias",
    "Evidence",
    "Inference",
    "ReasoningBranch",
    "ReasoningChain",
    "ReasoningStep",
    "utcnow",
    "AlternativePerspective",
    "Argument",
    "BiasCorrectionSuggestion",
    "BiasWithCorrection",
    "CorrectedReasoning",
    "CorrectionApplication",
    "ReasoningChange",
    "UnsupportedCorrection",
    "ValidationResult",
    "AccuracyMetrics",
    "BiasFeedback",
    "LearningMetrics",
    "TimePeriod",
    "UserSensitivityProfile",
    "AlertPriority",
    "BiasAlert",
    "MonitoringMetrics",
]
