"""
Pattern Recognizer — Deterministic Bias Detection

Two interchangeable detection strategies behind one interface:
  - ChainDetector: the nine structural rules over a ReasoningChain.
  - TextDetector:  the phrase / keyword-set library over raw text.

PatternRecognizer composes both and adds severity assessment,
historical pattern mining, and a filtered analysis summary.

Everything here is pure: inputs are never mutated and no state is kept
between calls, so a single instance can be shared freely.
"""

from __future__ import annotations

import logging
import re
import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from biaswatch.rules import (
    CHAIN_RULES,
    EVIDENCE_BOOST_CAP,
    EVIDENCE_BOOST_STEP,
    TEXT_CONFIDENCE_CAP,
    TEXT_CONFIDENCE_MAX,
    TEXT_CONFIDENCE_STEP,
    TEXT_EXCERPT_CHARS,
    TEXT_PATTERNS,
    TEXT_SEVERITY_CAP,
    TEXT_SEVERITY_STEP,
    ChainRule,
    Match,
    TextPattern,
    clamp01,
    rule_catalog,
)
from biaswatch.schemas.reasoning import (
    BiasDetectionConfig,
    BiasDetectionResult,
    BiasLocation,
    BiasPattern,
    BiasType,
    DetectedBias,
    ReasoningChain,
    utcnow,
)

logger = logging.getLogger(__name__)


# ============================================================
# DETECTION STRATEGIES
# ============================================================

class BiasDetector(ABC):
    """A detection strategy. Sources differ; the output type does not."""

    @abstractmethod
    def detect(self, source) -> list[DetectedBias]:
        ...


class ChainDetector(BiasDetector):
    """
    Interpreter for the structural rule table.

    Each rule's check predicate decides which outcome fires and where;
    this class turns the Match into a DetectedBias using the outcome's
    constants.
    """

    def __init__(self, rules: tuple[ChainRule, ...] = CHAIN_RULES):
        self._rules = rules
        self._by_type = {r.bias_type: r for r in rules}

    def detect(
        self, source: ReasoningChain, now: Optional[datetime] = None,
    ) -> list[DetectedBias]:
        chain = source
        if not chain.steps and not chain.evidence:
            return []

        now = now or utcnow()
        results = []
        for rule in self._rules:
            bias = self._evaluate(rule, chain, now)
            if bias is not None:
                results.append(bias)
        return results

    def detect_one(
        self, bias_type: BiasType, chain: ReasoningChain, now: Optional[datetime] = None,
    ) -> Optional[DetectedBias]:
        """Run a single rule. Returns None when it does not fire."""
        rule = self._by_type.get(BiasType(bias_type))
        if rule is None:
            return None
        return self._evaluate(rule, chain, now or utcnow())

    def _evaluate(
        self, rule: ChainRule, chain: ReasoningChain, now: datetime,
    ) -> Optional[DetectedBias]:
        match = rule.check(rule, chain, now)
        if match is None:
            return None
        return self._emit(rule, match, chain)

    def _emit(self, rule: ChainRule, match: Match, chain: ReasoningChain) -> DetectedBias:
        outcome = rule.outcomes[match.outcome]

        reasoning = match.reasoning
        if reasoning is None:
            first = chain.steps[0].content if chain.steps else ""
            reasoning = first or outcome.fallback

        return DetectedBias(
            type=rule.bias_type,
            severity=clamp01(outcome.severity),
            confidence=clamp01(outcome.confidence),
            evidence=list(match.evidence if match.evidence is not None else outcome.evidence),
            location=BiasLocation(step_index=match.step_index, reasoning=reasoning),
            explanation=outcome.explanation,
        )


_NON_WORD = re.compile(r"[^\w\s']")


def extract_words(text: str) -> set[str]:
    """Lowercase token set. Apostrophes survive so "can't" stays one word."""
    return set(_NON_WORD.sub(" ", text.lower()).split())


class TextDetector(BiasDetector):
    """Phrase and keyword-set matching over unstructured text."""

    def __init__(self, patterns: tuple[TextPattern, ...] = TEXT_PATTERNS):
        self._patterns = patterns

    def detect(self, source: str, context: Optional[str] = None) -> list[DetectedBias]:
        text = source
        if not text or not text.strip():
            return []

        lower = text.lower()
        words = extract_words(text)
        excerpt = text[:TEXT_EXCERPT_CHARS]
        if len(text) > TEXT_EXCERPT_CHARS:
            excerpt += "..."

        results: list[DetectedBias] = []
        seen: set[BiasType] = set()
        for pattern in self._patterns:
            if pattern.bias_type in seen:
                continue
            matched = self._match(pattern, lower, words)
            if not matched:
                continue
            seen.add(pattern.bias_type)

            n = len(matched)
            severity = min(1.0, pattern.severity + min(n * TEXT_SEVERITY_STEP, TEXT_SEVERITY_CAP))
            confidence = min(
                TEXT_CONFIDENCE_MAX,
                pattern.confidence + min(n * TEXT_CONFIDENCE_STEP, TEXT_CONFIDENCE_CAP),
            )
            results.append(DetectedBias(
                type=pattern.bias_type,
                severity=severity,
                confidence=confidence,
                evidence=[f"Matched indicator: {m}" for m in matched],
                location=BiasLocation(step_index=0, reasoning=excerpt, context=context),
                explanation=pattern.explanation,
            ))
        return results

    def _match(self, pattern: TextPattern, lower: str, words: set[str]) -> list[str]:
        matched = [f'phrase: "{p}"' for p in pattern.phrases if p in lower]

        for keyword_set in pattern.keyword_sets:
            if not all(w in words for w in keyword_set):
                continue
            # A phrase already covering this set's lead word is enough
            if any(keyword_set[0] in m for m in matched):
                continue
            matched.append(f"keywords: [{', '.join(keyword_set)}]")
        return matched


# ============================================================
# PATTERN RECOGNIZER
# ============================================================

class PatternRecognizer:
    """
    Bias detection facade.

    Structural detection runs the nine chain rules in fixed order
    (confirmation, anchoring, availability, recency, representativeness,
    framing, sunk cost, attribution, bandwagon). Text detection is an
    independent pipeline that shares only the output type.
    """

    def __init__(
        self,
        chain_detector: Optional[ChainDetector] = None,
        text_detector: Optional[TextDetector] = None,
    ):
        self.chain_detector = chain_detector or ChainDetector()
        self.text_detector = text_detector or TextDetector()

    # --- Structural detection ---

    def detect_biases(
        self, chain: ReasoningChain, now: Optional[datetime] = None,
    ) -> list[DetectedBias]:
        biases = self.chain_detector.detect(chain, now=now)
        logger.debug(
            "Chain scanned",
            extra={"chain_id": chain.id, "biases_count": len(biases)},
        )
        return biases

    def detect_confirmation_bias(self, chain, now=None) -> Optional[DetectedBias]:
        return self.chain_detector.detect_one(BiasType.CONFIRMATION, chain, now)

    def detect_anchoring_bias(self, chain, now=None) -> Optional[DetectedBias]:
        return self.chain_detector.detect_one(BiasType.ANCHORING, chain, now)

    def detect_availability_bias(self, chain, now=None) -> Optional[DetectedBias]:
        return self.chain_detector.detect_one(BiasType.AVAILABILITY, chain, now)

    def detect_recency_bias(self, chain, now=None) -> Optional[DetectedBias]:
        return self.chain_detector.detect_one(BiasType.RECENCY, chain, now)

    def detect_representativeness_bias(self, chain, now=None) -> Optional[DetectedBias]:
        return self.chain_detector.detect_one(BiasType.REPRESENTATIVENESS, chain, now)

    def detect_framing_effects(self, chain, now=None) -> Optional[DetectedBias]:
        return self.chain_detector.detect_one(BiasType.FRAMING, chain, now)

    def detect_sunk_cost_fallacy(self, chain, now=None) -> Optional[DetectedBias]:
        return self.chain_detector.detect_one(BiasType.SUNK_COST, chain, now)

    def detect_attribution_bias(self, chain, now=None) -> Optional[DetectedBias]:
        return self.chain_detector.detect_one(BiasType.ATTRIBUTION, chain, now)

    def detect_bandwagon_bias(self, chain, now=None) -> Optional[DetectedBias]:
        return self.chain_detector.detect_one(BiasType.BANDWAGON, chain, now)

    # --- Text detection ---

    def detect_from_text(self, text: str, context: Optional[str] = None) -> list[DetectedBias]:
        return self.text_detector.detect(text, context=context)

    # --- Scoring and mining ---

    def assess_severity(self, bias: DetectedBias) -> float:
        """
        Weighted severity: severity x confidence, plus 0.1 per evidence
        string (capped at 0.3), clamped to [0, 1].
        """
        boost = min(len(bias.evidence) * EVIDENCE_BOOST_STEP, EVIDENCE_BOOST_CAP)
        return clamp01(bias.severity * bias.confidence + boost)

    def identify_patterns(self, history: list[ReasoningChain]) -> list[BiasPattern]:
        """
        Group historical chains by the sorted signature of their detected
        bias types. Most frequent signature first.
        """
        patterns: dict[tuple[str, ...], BiasPattern] = {}

        for chain in history:
            biases = self.detect_biases(chain)
            if not biases:
                continue

            types = sorted(b.type.value for b in biases)
            key = tuple(types)
            pattern = patterns.get(key)
            if pattern is None:
                pattern = BiasPattern(bias_types=[BiasType(t) for t in types])
                patterns[key] = pattern

            pattern.frequency += 1
            if chain.context and chain.context not in pattern.common_contexts:
                pattern.common_contexts.append(chain.context)

            chain_avg = sum(b.severity for b in biases) / len(biases)
            pattern.average_severity = clamp01(
                (pattern.average_severity * (pattern.frequency - 1) + chain_avg)
                / pattern.frequency
            )

        return sorted(patterns.values(), key=lambda p: p.frequency, reverse=True)

    def analyze(
        self, chain: ReasoningChain, config: Optional[BiasDetectionConfig] = None,
    ) -> BiasDetectionResult:
        """
        Detect, filter by the config's minimums, and summarize.

        The processing-time budget is soft: overruns are logged, never
        enforced.
        """
        config = config or BiasDetectionConfig()
        start = time.perf_counter()

        biases = [
            b for b in self.detect_biases(chain)
            if b.confidence >= config.min_confidence and b.severity >= config.min_severity
        ]

        if biases:
            overall = sum(self.assess_severity(b) for b in biases) / len(biases)
            confidence = sum(b.confidence for b in biases) / len(biases)
        else:
            overall = 0.0
            confidence = 0.0

        patterns = []
        if biases:
            patterns.append(BiasPattern(
                bias_types=sorted({b.type for b in biases}, key=lambda t: t.value),
                frequency=1,
                common_contexts=[chain.context] if chain.context else [],
                average_severity=clamp01(sum(b.severity for b in biases) / len(biases)),
            ))

        elapsed_ms = (time.perf_counter() - start) * 1000
        if elapsed_ms > config.max_processing_time:
            logger.warning(
                "Detection exceeded processing budget",
                extra={"chain_id": chain.id, "duration_ms": round(elapsed_ms, 2)},
            )

        return BiasDetectionResult(
            detected_biases=biases,
            patterns=patterns,
            overall_bias_score=clamp01(overall),
            confidence=clamp01(confidence),
            processing_time=elapsed_ms,
        )

    def get_rules(self) -> list[dict]:
        """Describe the active structural rules."""
        return rule_catalog()
