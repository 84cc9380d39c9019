"""
Corrector — Remediation Suggestions per Bias Type

A static table: one suggestion sentence, a set of debiasing techniques,
and a set of challenge questions for each of the nine bias types.
Lookups never fail; unknown types get a generic entry.

Pure and side-effect free.
"""

from __future__ import annotations

from biaswatch.schemas.correction import BiasCorrectionSuggestion, BiasWithCorrection
from biaswatch.schemas.reasoning import BiasType, DetectedBias


# ============================================================
# CORRECTION TEMPLATES
# ============================================================

CORRECTION_TEMPLATES: dict[BiasType, dict] = {
    BiasType.CONFIRMATION: {
        "suggestion": (
            "Actively seek disconfirming evidence and give it the same weight "
            "as evidence that supports your hypothesis."
        ),
        "techniques": [
            "List the evidence that would prove your hypothesis wrong, then look for it",
            "Steelman the strongest opposing position",
            "Ask someone who disagrees to review the reasoning",
            "Score supporting and contradicting evidence with the same criteria",
        ],
        "challenge_questions": [
            "What evidence would change my mind?",
            "Have I looked for information that contradicts my view?",
            "Would I accept this evidence if it supported the opposite conclusion?",
            "Am I dismissing contrary data too quickly?",
        ],
    },
    BiasType.ANCHORING: {
        "suggestion": (
            "Generate multiple independent estimates before settling on a value, "
            "and consider alternative starting points."
        ),
        "techniques": [
            "Produce an estimate from scratch without looking at the initial value",
            "Use reference class forecasting from comparable cases",
            "Consider multiple alternative anchors and compare outcomes",
            "Delay numeric judgments until the evidence has been reviewed",
        ],
        "challenge_questions": [
            "Where did my starting number come from?",
            "Would I reach the same estimate from a different starting point?",
            "Have I adjusted enough given the new information?",
        ],
    },
    BiasType.AVAILABILITY: {
        "suggestion": (
            "Look for statistical base rates instead of relying on examples "
            "that are easy to recall."
        ),
        "techniques": [
            "Find statistics or base rates for the event in question",
            "Collect cases systematically rather than from memory",
            "Consider less memorable but equally relevant examples",
        ],
        "challenge_questions": [
            "Is this example representative or just memorable?",
            "What do the statistics say about how often this happens?",
            "Am I reacting to a recent or vivid event?",
        ],
    },
    BiasType.RECENCY: {
        "suggestion": (
            "Weigh historical data alongside recent information and check "
            "whether long-term trends support the conclusion."
        ),
        "techniques": [
            "Plot the full history, not only the latest data points",
            "Apply explicit time weighting instead of implicit preference",
            "Review how similar recent signals played out in the past",
        ],
        "challenge_questions": [
            "Does the long-term trend agree with the latest data?",
            "Why would older evidence no longer apply?",
            "Would this conclusion hold if the recent data were an outlier?",
        ],
    },
    BiasType.REPRESENTATIVENESS: {
        "suggestion": (
            "Start from base rates and prior probabilities before judging "
            "how well a case fits a typical pattern."
        ),
        "techniques": [
            "State the base rate explicitly before evaluating the case",
            "Check sample size and variability",
            "Avoid stereotype matching as a substitute for probability",
        ],
        "challenge_questions": [
            "How common is this outcome in the general population?",
            "Am I judging by resemblance rather than likelihood?",
            "Is the sample large enough to support the pattern?",
        ],
    },
    BiasType.FRAMING: {
        "suggestion": (
            "Reframe the problem in both gain and loss terms and compare "
            "whether the decision changes."
        ),
        "techniques": [
            "Restate success rates as failure rates and vice versa",
            "Describe the options in neutral language",
            "Separate the facts from how they are presented",
        ],
        "challenge_questions": [
            "Would I decide differently if this were framed as a loss?",
            "What does the same data look like from the other side?",
            "Is the wording doing the persuading instead of the facts?",
        ],
    },
    BiasType.SUNK_COST: {
        "suggestion": (
            "Focus on future costs and benefits only; past investments "
            "cannot be recovered and should not drive the decision."
        ),
        "techniques": [
            "Evaluate the decision as if starting fresh today",
            "Compare expected future value of continuing vs stopping",
            "Account for opportunity costs of continuing",
            "Set exit criteria in advance",
        ],
        "challenge_questions": [
            "If I had invested nothing so far, would I start this now?",
            "What is the expected future value of continuing?",
            "Am I continuing only to avoid admitting a loss?",
        ],
    },
    BiasType.ATTRIBUTION: {
        "suggestion": (
            "Consider situational factors before attributing outcomes to "
            "personal traits, for others and for yourself alike."
        ),
        "techniques": [
            "List situational explanations for the behavior",
            "Apply the same standard to your own failures and to others'",
            "Seek multiple explanations before settling on one",
        ],
        "challenge_questions": [
            "What circumstances could explain this behavior?",
            "Would I explain my own behavior the same way?",
            "Am I blaming character when the situation played a role?",
        ],
    },
    BiasType.BANDWAGON: {
        "suggestion": (
            "Evaluate the option on its merit against your own requirements, "
            "independent of how many others have adopted it."
        ),
        "techniques": [
            "Write down your requirements before looking at what others use",
            "Compare options on features, cost, and fit",
            "Ask why the popular choice succeeded in its original context",
        ],
        "challenge_questions": [
            "Would this still be the right choice if nobody else used it?",
            "Do the adopters have the same needs we do?",
            "What evidence of merit do I have besides popularity?",
        ],
    },
}

GENERIC_TEMPLATE: dict = {
    "suggestion": "Review the reasoning for bias and consider alternative explanations.",
    "techniques": [
        "Review reasoning for logical consistency",
        "Seek additional evidence",
        "Consider alternative explanations",
    ],
    "challenge_questions": [
        "What assumptions am I making?",
        "What evidence would contradict this conclusion?",
        "How would someone with a different view see this?",
    ],
}


# ============================================================
# CORRECTOR
# ============================================================

class Corrector:
    """Lookup and formatting over CORRECTION_TEMPLATES."""

    def get_suggestion(self, bias_type) -> BiasCorrectionSuggestion:
        try:
            key = BiasType(bias_type)
        except ValueError:
            key = None
        template = CORRECTION_TEMPLATES.get(key, GENERIC_TEMPLATE)
        label = key.value if key is not None else str(bias_type)
        return BiasCorrectionSuggestion(
            bias_type=label,
            suggestion=template["suggestion"],
            techniques=list(template["techniques"]),
            challenge_questions=list(template["challenge_questions"]),
        )

    def get_concise_suggestion(self, bias_type) -> str:
        return self.get_suggestion(bias_type).suggestion

    def get_all_templates(self) -> dict[BiasType, BiasCorrectionSuggestion]:
        return {t: self.get_suggestion(t) for t in CORRECTION_TEMPLATES}

    def add_corrections(self, biases: list[DetectedBias]) -> list[BiasWithCorrection]:
        """Pair each bias with its suggestion, preserving input order."""
        return [
            BiasWithCorrection(bias=b, correction=self.get_suggestion(b.type))
            for b in biases
        ]

    def format_correction(self, suggestion: BiasCorrectionSuggestion) -> str:
        lines = [f"Suggestion: {suggestion.suggestion}", "", "Techniques:"]
        lines.extend(f"  • {t}" for t in suggestion.techniques)
        lines.append("")
        lines.append("Challenge Questions:")
        lines.extend(f"  • {q}" for q in suggestion.challenge_questions)
        return "\n".join(lines)
