"""
BiasWatch — Cognitive Bias Analysis for Reasoning Chains

Deterministic detection of nine cognitive-bias categories in structured
reasoning chains and free text, with remediation, continuous monitoring,
and feedback-driven adaptation.

Public API:
  - PatternRecognizer: Structural and text detection, severity, pattern mining
  - Corrector:         Suggestion lookup and formatting per bias type
  - CorrectionEngine:  Strategy-based chain correction and devil's advocate
  - LearningSystem:    Feedback integration, weights, user sensitivity
  - MonitoringSystem:  Non-blocking monitoring with deduplicated alerts

Usage:
    from biaswatch import PatternRecognizer, ReasoningChain
    recognizer = PatternRecognizer()
    biases = recognizer.detect_biases(chain)
"""

__version__ = "1.0.0"

from biaswatch.config import settings
from biaswatch.correction_engine import CorrectionEngine, CORRECTION_STRATEGIES
from biaswatch.corrector import Corrector, CORRECTION_TEMPLATES
from biaswatch.errors import (
    BiasWatchError,
    FeedbackValidationError,
    NoCorrectionStrategyError,
)
from biaswatch.monitor import MonitoringConfig, MonitoringSystem
from biaswatch.patterns.learned import LearningSystem
from biaswatch.recognizer import ChainDetector, PatternRecognizer, TextDetector
from biaswatch.rules import CHAIN_RULES, TEXT_PATTERNS
from biaswatch.schemas import (
    BiasDetectionConfig,
    BiasFeedback,
    BiasType,
    DetectedBias,
    Evidence,
    ReasoningChain,
    ReasoningStep,
)

__all__ = [
    "settings",
    "CorrectionEngine",
    "CORRECTION_STRATEGIES",
    "Corrector",
    "CORRECTION_TEMPLATES",
    "BiasWatchError",
    "FeedbackValidationError",
    "NoCorrectionStrategyError",
    "MonitoringConfig",
    "MonitoringSystem",
    "LearningSystem",
    "ChainDetector",
    "PatternRecognizer",
    "TextDetector",
    "CHAIN_RULES",
    "TEXT_PATTERNS",
    "BiasDetectionConfig",
    "BiasFeedback",
    "BiasType",
    "DetectedBias",
    "Evidence",
    "ReasoningChain",
    "ReasoningStep",
]
