"""
Correction Engine — Strategy Dispatch over Reasoning Chains

Applies one correction per call to a detected bias:
  1. Look up the strategy for the bias type (eight are registered;
     bandwagon deliberately has none)
  2. Clone the chain (independent list copies, the original is untouched)
  3. Append the strategy's synthetic step and/or evidence item
  4. Record typed ReasoningChanges and the fixed impact reduction
  5. Compute deterministic diff spans between rendered chains

Also provides devil's-advocate generation, evidence reweighting,
and post-correction validation.

Sequential correction of several biases is the caller's job: feed the
corrected chain back in.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Optional, Union

import diff_match_patch as dmp_module

from biaswatch.errors import NoCorrectionStrategyError
from biaswatch.rules import DEFAULT_RELEVANCE
from biaswatch.schemas.correction import (
    AlternativePerspective,
    Argument,
    CorrectedReasoning,
    CorrectionApplication,
    ReasoningChange,
    UnsupportedCorrection,
    ValidationResult,
)
from biaswatch.schemas.reasoning import (
    BiasType,
    DetectedBias,
    Evidence,
    ReasoningChain,
    ReasoningStep,
)

logger = logging.getLogger(__name__)

# Singleton diff engine
_dmp = dmp_module.diff_match_patch()

MIN_EFFECTIVENESS = 0.4
QUALITY_PENALTY_PER_ISSUE = 0.2
LOW_STEP_CONFIDENCE = 0.5


# ============================================================
# STRATEGY TABLE
# ============================================================

@dataclass(frozen=True)
class StepTemplate:
    id_prefix: str
    content: str
    type: str
    confidence: float


@dataclass(frozen=True)
class EvidenceTemplate:
    id_prefix: str
    content: str
    source: str
    reliability: float
    relevance: float


@dataclass(frozen=True)
class ChangeTemplate:
    type: str
    before: str
    after: str
    rationale: str


@dataclass(frozen=True)
class CorrectionStrategy:
    """
    One bias type's correction.

    effectiveness is the strategy's nominal rating; impact_reduction is
    the estimate reported on each application and used as the result's
    effectiveness score.
    """
    bias_type: BiasType
    name: str
    effectiveness: float
    impact_reduction: float
    changes: tuple[ChangeTemplate, ...]
    evidence: Optional[EvidenceTemplate] = None
    step: Optional[StepTemplate] = None
    challenge_assumption: bool = False  # Also record the first assumption as challenged


CORRECTION_STRATEGIES: tuple[CorrectionStrategy, ...] = (
    CorrectionStrategy(
        bias_type=BiasType.CONFIRMATION,
        name="confirmation_bias_correction",
        effectiveness=0.75,
        impact_reduction=0.5,
        evidence=EvidenceTemplate(
            "contra", "Contradictory evidence that challenges the hypothesis",
            "bias-correction", 0.7, 0.8,
        ),
        step=StepTemplate(
            "alt", "Alternative hypothesis: The opposite may be true", "hypothesis", 0.6,
        ),
        changes=(
            ChangeTemplate(
                "evidence_reweight",
                "Only supporting evidence considered",
                "Added contradictory evidence for balance",
                "Reduce confirmation bias by considering opposing views",
            ),
            ChangeTemplate(
                "alternative_added",
                "Single hypothesis considered",
                "Multiple hypotheses evaluated",
                "Consider alternative explanations",
            ),
        ),
        challenge_assumption=True,
    ),
    CorrectionStrategy(
        bias_type=BiasType.ANCHORING,
        name="anchoring_bias_correction",
        effectiveness=0.7,
        impact_reduction=0.45,
        step=StepTemplate(
            "alt-anchor", "Alternative starting point: Consider different initial values",
            "hypothesis", 0.7,
        ),
        changes=(
            ChangeTemplate(
                "alternative_added",
                "Single anchor point",
                "Multiple reference points considered",
                "Reduce anchoring by providing alternatives",
            ),
        ),
    ),
    CorrectionStrategy(
        bias_type=BiasType.AVAILABILITY,
        name="availability_bias_correction",
        effectiveness=0.72,
        impact_reduction=0.48,
        evidence=EvidenceTemplate(
            "stat", "Statistical evidence from broader dataset",
            "bias-correction", 0.8, 0.75,
        ),
        changes=(
            ChangeTemplate(
                "evidence_reweight",
                "Only memorable cases considered",
                "Broader statistical evidence included",
                "Reduce availability bias with comprehensive data",
            ),
        ),
    ),
    CorrectionStrategy(
        bias_type=BiasType.RECENCY,
        name="recency_bias_correction",
        effectiveness=0.68,
        impact_reduction=0.42,
        step=StepTemplate(
            "historical", "Historical evidence shows different patterns", "evidence", 0.75,
        ),
        changes=(
            ChangeTemplate(
                "evidence_reweight",
                "Recent evidence weighted heavily",
                "Historical and recent evidence balanced",
                "Reduce recency bias with historical context",
            ),
        ),
    ),
    CorrectionStrategy(
        bias_type=BiasType.REPRESENTATIVENESS,
        name="representativeness_bias_correction",
        effectiveness=0.7,
        impact_reduction=0.46,
        step=StepTemplate(
            "base-rate", "Base rate analysis: Consider statistical probabilities",
            "inference", 0.8,
        ),
        changes=(
            ChangeTemplate(
                "alternative_added",
                "Judging by representativeness alone",
                "Incorporating base rate information",
                "Reduce representativeness bias with statistical reasoning",
            ),
        ),
    ),
    CorrectionStrategy(
        bias_type=BiasType.FRAMING,
        name="framing_bias_correction",
        effectiveness=0.73,
        impact_reduction=0.44,
        step=StepTemplate(
            "reframe", "Alternative framing: Consider as a loss instead of a gain",
            "hypothesis", 0.7,
        ),
        changes=(
            ChangeTemplate(
                "alternative_added",
                "Single frame of reference",
                "Multiple frames considered",
                "Reduce framing bias with alternative perspectives",
            ),
        ),
    ),
    CorrectionStrategy(
        bias_type=BiasType.SUNK_COST,
        name="sunk_cost_correction",
        effectiveness=0.76,
        impact_reduction=0.5,
        step=StepTemplate(
            "future-focus",
            "Focus on future value: Past costs are irrelevant to future decisions",
            "inference", 0.8,
        ),
        changes=(
            ChangeTemplate(
                "alternative_added",
                "Considering past investments",
                "Focusing on future value only",
                "Reduce sunk cost fallacy by ignoring past costs",
            ),
        ),
    ),
    CorrectionStrategy(
        bias_type=BiasType.ATTRIBUTION,
        name="attribution_bias_correction",
        effectiveness=0.69,
        impact_reduction=0.43,
        step=StepTemplate(
            "situational",
            "Situational analysis: External factors may explain the behavior",
            "inference", 0.75,
        ),
        changes=(
            ChangeTemplate(
                "alternative_added",
                "Attributing to internal characteristics",
                "Considering situational factors",
                "Reduce attribution bias with situational awareness",
            ),
        ),
    ),
)


# ============================================================
# HELPERS
# ============================================================

def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def clone_chain(chain: ReasoningChain) -> ReasoningChain:
    """Copy with independent list fields. List items are shared."""
    return chain.model_copy(update={
        "steps": list(chain.steps),
        "branches": list(chain.branches),
        "assumptions": list(chain.assumptions),
        "inferences": list(chain.inferences),
        "evidence": list(chain.evidence),
    })


def render_chain(chain: ReasoningChain) -> str:
    """Plain-text rendering used for diffing."""
    lines = [f"[{s.type}] {s.content}" for s in chain.steps]
    lines.extend(f"[evidence:{e.source}] {e.content}" for e in chain.evidence)
    lines.extend(f"[assumption] {a.content}" for a in chain.assumptions)
    if chain.conclusion:
        lines.append(f"[conclusion] {chain.conclusion}")
    return "\n".join(lines)


def _compute_diff_spans(original: str, corrected: str) -> list[dict]:
    """
    Compute deterministic text diffs between original and corrected.

    Returns spans with type (equal/delete/insert), text, and positions.
    """
    diffs = _dmp.diff_main(original, corrected)
    _dmp.diff_cleanupSemantic(diffs)

    spans = []
    orig_pos = 0
    corr_pos = 0

    for op, text in diffs:
        if op == dmp_module.diff_match_patch.DIFF_EQUAL:
            spans.append({
                "type": "equal",
                "text": text,
                "orig_start": orig_pos,
                "orig_end": orig_pos + len(text),
                "corr_start": corr_pos,
                "corr_end": corr_pos + len(text),
            })
            orig_pos += len(text)
            corr_pos += len(text)
        elif op == dmp_module.diff_match_patch.DIFF_DELETE:
            spans.append({
                "type": "delete",
                "text": text,
                "orig_start": orig_pos,
                "orig_end": orig_pos + len(text),
            })
            orig_pos += len(text)
        else:
            spans.append({
                "type": "insert",
                "text": text,
                "corr_start": corr_pos,
                "corr_end": corr_pos + len(text),
            })
            corr_pos += len(text)

    return spans


# ============================================================
# CORRECTION ENGINE
# ============================================================

class CorrectionEngine:
    """Dispatches detected biases to their correction strategies."""

    def __init__(self, strategies: tuple[CorrectionStrategy, ...] = CORRECTION_STRATEGIES):
        self._strategies: dict[BiasType, CorrectionStrategy] = {
            s.bias_type: s for s in strategies
        }

    def supported_types(self) -> list[BiasType]:
        return list(self._strategies)

    def get_strategy(self, bias_type) -> Optional[CorrectionStrategy]:
        try:
            return self._strategies.get(BiasType(bias_type))
        except ValueError:
            return None

    # --- Correction ---

    def correct_bias(self, bias: DetectedBias, chain: ReasoningChain) -> CorrectedReasoning:
        """
        Apply the registered strategy for bias.type to a clone of chain.

        Raises:
            NoCorrectionStrategyError: no strategy is registered for the type.
        """
        strategy = self.get_strategy(bias.type)
        if strategy is None:
            raise NoCorrectionStrategyError(bias.type)

        corrected = clone_chain(chain)
        changes: list[ReasoningChange] = []

        if strategy.evidence is not None:
            t = strategy.evidence
            corrected.evidence.append(Evidence(
                id=_new_id(t.id_prefix),
                content=t.content,
                source=t.source,
                reliability=t.reliability,
                relevance=t.relevance,
            ))
        if strategy.step is not None:
            t = strategy.step
            corrected.steps.append(ReasoningStep(
                id=_new_id(t.id_prefix),
                content=t.content,
                type=t.type,
                confidence=t.confidence,
            ))

        for i, template in enumerate(strategy.changes):
            changes.append(ReasoningChange(
                type=template.type,
                location=bias.location,
                before=template.before,
                after=template.after,
                rationale=template.rationale,
            ))
            if i == 0 and strategy.challenge_assumption and chain.assumptions:
                first = chain.assumptions[0].content
                changes.append(ReasoningChange(
                    type="assumption_challenged",
                    location=bias.location,
                    before=first,
                    after=f"Challenged: {first}",
                    rationale="Question assumptions that favor the hypothesis",
                ))

        application = CorrectionApplication(
            bias=bias,
            strategy=strategy.name,
            changes=changes,
            impact_reduction=strategy.impact_reduction,
        )

        logger.debug(
            "Correction applied",
            extra={
                "chain_id": chain.id,
                "bias_type": bias.type.value,
                "strategy": strategy.name,
            },
        )

        return CorrectedReasoning(
            original=chain,
            corrected=corrected,
            biases_corrected=[bias],
            corrections_applied=[application],
            effectiveness_score=strategy.impact_reduction,
            diff_spans=_compute_diff_spans(render_chain(chain), render_chain(corrected)),
        )

    def try_correct(
        self, bias: DetectedBias, chain: ReasoningChain,
    ) -> Union[CorrectedReasoning, UnsupportedCorrection]:
        """Like correct_bias, but returns UnsupportedCorrection instead of raising."""
        try:
            return self.correct_bias(bias, chain)
        except NoCorrectionStrategyError as e:
            return UnsupportedCorrection(
                bias=bias,
                bias_type=bias.type,
                reason=str(e),
            )

    # --- Devil's advocate ---

    def apply_devils_advocate(self, chain: ReasoningChain) -> list[AlternativePerspective]:
        """
        Build alternative perspectives: counter-arguments to the
        conclusion, challenges to each assumption, and structural
        weaknesses of the chain.
        """
        main = Argument(
            id="main",
            content=chain.conclusion,
            premises=[s.content for s in chain.steps],
            conclusion=chain.conclusion,
            strength=0.8,
        )

        perspectives = [AlternativePerspective(
            perspective="Devil's advocate: What if the opposite is true?",
            counter_arguments=self.generate_counter_arguments(main),
            alternative_evidence=[Evidence(
                id=_new_id("alt-evidence"),
                content="Alternative evidence that suggests a different conclusion",
                source="devil's-advocate",
                reliability=0.7,
                relevance=0.75,
            )],
            confidence=0.7,
        )]

        if chain.assumptions:
            perspectives.append(AlternativePerspective(
                perspective="Challenging key assumptions in the reasoning",
                counter_arguments=[
                    Argument(
                        id=f"counter-{a.id}",
                        content=f'What if assumption "{a.content}" is false?',
                        premises=["Alternative scenario", "Different context"],
                        conclusion="Conclusion may not hold",
                        strength=0.6,
                    )
                    for a in chain.assumptions
                ],
                confidence=0.65,
            ))

        weaknesses = self.identify_weaknesses(chain)
        if weaknesses:
            perspectives.append(AlternativePerspective(
                perspective=f"Identified {len(weaknesses)} potential weaknesses in reasoning",
                counter_arguments=[
                    Argument(
                        id=f"weakness-{i}",
                        content=w,
                        premises=["Logical analysis", "Critical evaluation"],
                        conclusion="Reasoning may be flawed",
                        strength=0.65,
                    )
                    for i, w in enumerate(weaknesses)
                ],
                confidence=0.7,
            ))

        return perspectives

    def generate_counter_arguments(self, argument: Argument) -> list[Argument]:
        counters = [Argument(
            id=f"counter-{argument.id}-1",
            content=f"Counter-argument: {argument.conclusion} may not be true",
            premises=[
                "Alternative interpretation of evidence",
                "Different assumptions lead to different conclusions",
            ],
            conclusion=f"Therefore, {argument.conclusion} is not necessarily correct",
            strength=0.6,
        )]

        if argument.premises:
            counters.append(Argument(
                id=f"counter-{argument.id}-2",
                content="Challenging the premises of the argument",
                premises=[
                    f'Premise "{argument.premises[0]}" may be questionable',
                    "Weak premises lead to weak conclusions",
                ],
                conclusion="The argument's foundation is uncertain",
                strength=0.55,
            ))
        return counters

    def identify_weaknesses(self, chain: ReasoningChain) -> list[str]:
        weaknesses = []
        if len(chain.steps) < 2:
            weaknesses.append("Insufficient reasoning steps")

        low = [
            s for s in chain.steps
            if s.confidence is not None and s.confidence < LOW_STEP_CONFIDENCE
        ]
        if low:
            weaknesses.append(f"{len(low)} steps have low confidence")
        if not chain.evidence:
            weaknesses.append("No evidence provided to support reasoning")
        if not chain.assumptions:
            weaknesses.append("No explicit assumptions identified")
        return weaknesses

    # --- Evidence reweighting ---

    def reweight_evidence(self, evidence: list[Evidence], bias: DetectedBias) -> list[Evidence]:
        """
        Boost the evidence a bias tends to neglect. Returns new items;
        untargeted items come back unchanged and the inputs are not mutated.
        """
        result = []
        for e in evidence:
            lower = e.content.lower()
            updates: dict = {}

            if bias.type == BiasType.CONFIRMATION:
                if "contradict" in lower or "against" in lower:
                    updates["relevance"] = min(1.0, _or_default(e.relevance) * 1.5)
                    updates["reliability"] = min(1.0, _or_default(e.reliability) * 1.3)

            elif bias.type == BiasType.AVAILABILITY:
                if "recent" not in lower and "memorable" not in lower:
                    updates["relevance"] = min(1.0, _or_default(e.relevance) * 1.4)

            result.append(e.model_copy(update=updates) if updates else e.model_copy())
        return result

    # --- Measurement ---

    def measure_correction_effectiveness(
        self, before: ReasoningChain, after: CorrectedReasoning,
    ) -> float:
        """Mean of the average impact reduction and the effectiveness score."""
        applied = after.corrections_applied
        avg_impact = sum(c.impact_reduction for c in applied) / max(1, len(applied))
        return (avg_impact + after.effectiveness_score) / 2

    def validate_correction(self, corrected: CorrectedReasoning) -> ValidationResult:
        issues: list[str] = []
        improvements: list[str] = []

        if not corrected.corrections_applied:
            issues.append("No corrections were applied")
        else:
            improvements.append(f"Applied {len(corrected.corrections_applied)} corrections")

        if corrected.effectiveness_score < MIN_EFFECTIVENESS:
            issues.append("Effectiveness score below 40% target")
        else:
            improvements.append(
                f"Achieved {corrected.effectiveness_score * 100:.1f}% effectiveness"
            )

        # Heuristic: no appended steps or evidence means nothing changed
        if (
            len(corrected.corrected.steps) == len(corrected.original.steps)
            and len(corrected.corrected.evidence) == len(corrected.original.evidence)
        ):
            issues.append("Reasoning chain appears unchanged")

        return ValidationResult(
            valid=not issues,
            issues=issues,
            improvements=improvements,
            overall_quality=max(0.0, 1 - QUALITY_PENALTY_PER_ISSUE * len(issues)),
        )


def _or_default(value: Optional[float]) -> float:
    return DEFAULT_RELEVANCE if value is None else value
