"""
Rule Table — Canonical Bias Detection Configuration

This module is the single source of truth for WHAT the recognizer looks
for. Every phrase list, severity, confidence and explanation used by
detection lives here as data:

  1. CHAIN_RULES: nine structural rules over reasoning chains
     (one per bias type, in detector order)
  2. TEXT_PATTERNS: the phrase / keyword-set library for raw text
  3. Detection constants (recency window, relevance cut-offs, boosts)

A ChainRule pairs its data (cues + outcomes) with a small check
predicate. The predicate only decides WHICH outcome fires and WHERE;
the outcome's numbers come from the table. The recognizer
(recognizer.py) is the interpreter that turns a Match into a
DetectedBias.

Severity and confidence constants are calibrated values with no
closed-form derivation; keep them here
rather than in control flow.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Mapping, Optional

from biaswatch.schemas.reasoning import (
    BiasType,
    Evidence,
    ReasoningChain,
    ReasoningStep,
)


# ============================================================
# DETECTION CONSTANTS
# ============================================================

RECENT_DAYS = 7                    # Evidence younger than this is "recent"
DEFAULT_RELEVANCE = 0.5            # Missing relevance/reliability
SUPPORTING_RELEVANCE = 0.7         # relevance > this => supporting
CONTRADICTORY_RELEVANCE = 0.3      # relevance < this => contradictory / underweighted
ANCHOR_ADJUSTMENT_THRESHOLD = 0.10 # Relative change below this => insufficient adjustment
RECENCY_RELEVANCE_GAP = 0.3        # Recent avg relevance exceeding historical by more than this
BANDWAGON_MERIT_RATIO = 2          # Popularity mentions > ratio x merit mentions

# Raw-text boosts per matched indicator
TEXT_SEVERITY_STEP = 0.05
TEXT_SEVERITY_CAP = 0.2
TEXT_CONFIDENCE_STEP = 0.03
TEXT_CONFIDENCE_CAP = 0.15
TEXT_CONFIDENCE_MAX = 0.95
TEXT_EXCERPT_CHARS = 200

# assess_severity evidence boost
EVIDENCE_BOOST_STEP = 0.1
EVIDENCE_BOOST_CAP = 0.3


def clamp01(value: float) -> float:
    """Clamp to [0, 1]. NaN clamps to 0."""
    if value != value:
        return 0.0
    return max(0.0, min(1.0, value))


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class Outcome:
    """The constants one detector branch emits."""
    severity: float
    confidence: float
    evidence: tuple[str, ...]
    explanation: str
    fallback: str  # Location text when the chain has no usable first step


@dataclass(frozen=True)
class Match:
    """Which outcome of a rule fired, and where."""
    outcome: str
    step_index: int = 0
    reasoning: Optional[str] = None          # Overrides the default location text
    evidence: Optional[tuple[str, ...]] = None  # Overrides the outcome's evidence


@dataclass(frozen=True)
class ChainRule:
    """
    A structural detection rule over a reasoning chain.

    cues maps a cue name to lowercase phrases (or regex sources for
    cue names ending in "_regex"). check(rule, chain, now) returns a
    Match naming one of the rule's outcomes, or None.
    """
    bias_type: BiasType
    name: str
    description: str
    cues: Mapping[str, tuple[str, ...]]
    outcomes: Mapping[str, Outcome]
    check: Callable[["ChainRule", ReasoningChain, datetime], Optional[Match]]


@dataclass(frozen=True)
class TextPattern:
    """
    Phrase library for one bias type over raw text.

    phrases match as case-insensitive substrings. keyword_sets match when
    every word of the set appears in the text's token set, in any order.
    """
    bias_type: BiasType
    phrases: tuple[str, ...]
    keyword_sets: tuple[tuple[str, ...], ...]
    confidence: float
    severity: float
    explanation: str


@dataclass(frozen=True)
class EvidenceBalance:
    supporting_count: int
    contradictory_count: int
    has_contradictory_content: bool
    contradictory_underweighted: bool


# ============================================================
# SHARED PREDICATE HELPERS
# ============================================================

def contains_any(text: str, phrases: Iterable[str]) -> bool:
    lower = text.lower()
    return any(p in lower for p in phrases)


def _step_matching(steps: list[ReasoningStep], phrases: Iterable[str]) -> bool:
    phrases = tuple(phrases)
    return any(contains_any(s.content, phrases) for s in steps)


def relevance_of(evidence: Evidence) -> float:
    return DEFAULT_RELEVANCE if evidence.relevance is None else evidence.relevance


def age_in_days(timestamp: Optional[datetime], now: datetime) -> float:
    """Days since timestamp. Missing timestamps count as the epoch."""
    if timestamp is None:
        timestamp = datetime(1970, 1, 1, tzinfo=timezone.utc)
    elif timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return (now - timestamp).total_seconds() / 86400


def analyze_evidence_balance(
    evidence: list[Evidence], contradicting_cues: Iterable[str] = ("contradicting", "against"),
) -> EvidenceBalance:
    """Count supporting vs contradictory evidence by relevance."""
    contradicting_cues = tuple(contradicting_cues)
    supporting = contradictory = 0
    has_content = underweighted = False

    for e in evidence:
        relevance = relevance_of(e)
        if relevance > SUPPORTING_RELEVANCE:
            supporting += 1
        if relevance < CONTRADICTORY_RELEVANCE:
            contradictory += 1
        if contains_any(e.content, contradicting_cues):
            has_content = True
            if relevance < CONTRADICTORY_RELEVANCE:
                underweighted = True

    return EvidenceBalance(supporting, contradictory, has_content, underweighted)


_NUMBER = re.compile(r"\$?(\d+)")


# ============================================================
# CHECK PREDICATES (one per bias type)
# ============================================================

def _check_confirmation(rule: ChainRule, chain: ReasoningChain, now: datetime) -> Optional[Match]:
    if not chain.evidence:
        return None

    hypothesis_driven = any(
        s.type == "hypothesis" and contains_any(s.content, rule.cues["belief"])
        for s in chain.steps
    )
    balance = analyze_evidence_balance(chain.evidence, rule.cues["contradicting"])

    only_supporting = (
        balance.supporting_count > 0
        and balance.contradictory_count == 0
        and hypothesis_driven
    )
    underweighted = (
        balance.contradictory_underweighted
        and balance.has_contradictory_content
        and balance.supporting_count > 0
    )

    if only_supporting:
        return Match("only_supporting")
    if underweighted:
        return Match("contradictory_underweighted")
    return None


def _check_anchoring(rule: ChainRule, chain: ReasoningChain, now: datetime) -> Optional[Match]:
    steps = chain.steps
    if not steps:
        return None

    initial = next(
        (s for s in steps
         if s.type == "hypothesis" and contains_any(s.content, rule.cues["initial"])),
        None,
    )
    if initial is None:
        return None

    initial_match = _NUMBER.search(initial.content)
    final_match = _NUMBER.search(chain.conclusion)
    if initial_match and final_match:
        initial_value = int(initial_match.group(1))
        final_value = int(final_match.group(1))
        # A zero anchor has no meaningful relative change
        if initial_value != 0:
            adjustment = abs(final_value - initial_value) / initial_value
            if adjustment < ANCHOR_ADJUSTMENT_THRESHOLD:
                return Match(
                    "insufficient_adjustment",
                    step_index=steps.index(initial),
                    reasoning=initial.content,
                )

    if _step_matching(steps, rule.cues["anchor_language"]):
        return Match("anchor_language")
    return None


def _check_availability(rule: ChainRule, chain: ReasoningChain, now: datetime) -> Optional[Match]:
    if not chain.evidence:
        return None

    has_recent = any(age_in_days(e.timestamp, now) < RECENT_DAYS for e in chain.evidence)
    has_anecdote = _step_matching(chain.steps, rule.cues["anecdote"])
    statistics_underweighted = any(
        contains_any(e.content, rule.cues["statistical"])
        and relevance_of(e) < CONTRADICTORY_RELEVANCE
        for e in chain.evidence
    )

    if (has_recent and has_anecdote) or (has_anecdote and statistics_underweighted):
        return Match("vivid_events")
    return None


def _check_recency(rule: ChainRule, chain: ReasoningChain, now: datetime) -> Optional[Match]:
    dismissal = rule.cues["dismissal"]
    if _step_matching(chain.steps, dismissal) or contains_any(chain.conclusion, dismissal):
        return Match("historical_dismissed")

    if len(chain.evidence) < 2:
        return None

    recent = [e for e in chain.evidence if age_in_days(e.timestamp, now) < RECENT_DAYS]
    historical = [e for e in chain.evidence if age_in_days(e.timestamp, now) >= RECENT_DAYS]
    if not recent or not historical:
        return None

    recent_avg = sum(relevance_of(e) for e in recent) / len(recent)
    historical_avg = sum(relevance_of(e) for e in historical) / len(historical)
    if recent_avg > historical_avg + RECENCY_RELEVANCE_GAP:
        return Match("recent_overweighted")
    return None


def _check_representativeness(
    rule: ChainRule, chain: ReasoningChain, now: datetime,
) -> Optional[Match]:
    if _step_matching(chain.steps, rule.cues["stereotype"]):
        return Match("stereotype")

    base_rate_ignored = any(
        contains_any(e.content, rule.cues["base_rate"])
        and relevance_of(e) < CONTRADICTORY_RELEVANCE
        for e in chain.evidence
    )
    if base_rate_ignored:
        return Match("base_rate_ignored")
    return None


def _has_frame(steps: list[ReasoningStep], regexes: tuple[str, ...], words: tuple[str, ...]) -> bool:
    for step in steps:
        lower = step.content.lower()
        if any(re.search(rx, lower) for rx in regexes):
            return True
        if any(w in lower for w in words):
            return True
    return False


def _check_framing(rule: ChainRule, chain: ReasoningChain, now: datetime) -> Optional[Match]:
    positive = _has_frame(chain.steps, rule.cues["positive_regex"], rule.cues["positive"])
    negative = _has_frame(chain.steps, rule.cues["negative_regex"], rule.cues["negative"])

    if positive and negative:
        return None  # Balanced framing
    if positive:
        return Match("positive_frame")
    if negative:
        return Match("negative_frame")
    return None


def _check_sunk_cost(rule: ChainRule, chain: ReasoningChain, now: datetime) -> Optional[Match]:
    past_investment = _step_matching(chain.steps, rule.cues["past_investment"])
    if not past_investment:
        return None

    if contains_any(chain.conclusion, rule.cues["continuation"]):
        return Match("continuation")
    if not _step_matching(chain.steps, rule.cues["future_value"]):
        return Match("no_future_value")
    return None


def _check_attribution(rule: ChainRule, chain: ReasoningChain, now: datetime) -> Optional[Match]:
    steps = chain.steps
    if _step_matching(steps, rule.cues["balanced"]):
        return None

    internal_others = any(
        contains_any(s.content, rule.cues["others"])
        and contains_any(s.content, rule.cues["internal_traits"])
        for s in steps
    )
    if internal_others:
        return Match("internal_others")

    external_self = any(
        contains_any(s.content, rule.cues["self"])
        and contains_any(s.content, rule.cues["external_causes"])
        for s in steps
    )
    if external_self:
        return Match("external_self")
    return None


def count_phrase_hits(text: str, phrases: Iterable[str]) -> int:
    lower = text.lower()
    return sum(1 for p in phrases if p in lower)


def _check_bandwagon(rule: ChainRule, chain: ReasoningChain, now: datetime) -> Optional[Match]:
    popularity = rule.cues["popularity"]
    in_steps = _step_matching(chain.steps, popularity)
    in_conclusion = contains_any(chain.conclusion, popularity)
    if not (in_steps or in_conclusion):
        return None

    if not _step_matching(chain.steps, rule.cues["merit"]):
        evidence = []
        if in_steps:
            evidence.append("Appeal to popularity in reasoning steps")
        if in_conclusion:
            evidence.append("Appeal to popularity in conclusion")
        evidence.append("No merit-based evaluation found")
        first = chain.steps[0].content if chain.steps else ""
        return Match(
            "popularity",
            reasoning=first or chain.conclusion[:TEXT_EXCERPT_CHARS] or None,
            evidence=tuple(evidence),
        )

    bandwagon_count = sum(count_phrase_hits(s.content, popularity) for s in chain.steps)
    merit_count = sum(
        1 for s in chain.steps if contains_any(s.content, rule.cues["merit_count"])
    )
    if bandwagon_count > merit_count * BANDWAGON_MERIT_RATIO:
        return Match("popularity_outweighs_merit")
    return None


# ============================================================
# BANDWAGON PHRASE LIBRARY (structural detector)
# ============================================================

BANDWAGON_PHRASES: tuple[str, ...] = (
    "everyone",
    "everybody",
    "all the big companies",
    "all the big tech companies",
    "industry standard",
    "most people",
    "popular choice",
    "widely adopted",
    "common practice",
    "mainstream",
    "trending",
    "what others are doing",
    "following the crowd",
    "majority",
    "consensus",
    "competitors are doing",
    "market leaders",
    "top companies",
    "leading companies",
    "successful companies",
    "fortune 500",
    "faang",
    "tech giants",
    "millions of users",
    "thousands of companies",
    "widely used",
    "left behind",
    "keeping up with",
    "get on board",
    "bandwagon",
    "social proof",
    "nobody uses",
    "no one uses",
)

MERIT_PHRASES: tuple[str, ...] = (
    "evaluated",
    "analyzed",
    "compared features",
    "requirements",
    "our specific needs",
    "technical merit",
    "cost-benefit",
    "pros and cons",
)


# ============================================================
# CHAIN RULES
# ============================================================

CHAIN_RULES: tuple[ChainRule, ...] = (
    ChainRule(
        bias_type=BiasType.CONFIRMATION,
        name="Confirmation Bias",
        description="Only supporting evidence considered, or contradictory evidence underweighted.",
        cues={
            "belief": ("believe", "think"),
            "contradicting": ("contradicting", "against"),
        },
        outcomes={
            "only_supporting": Outcome(
                0.7, 0.75, ("Only supporting evidence considered",),
                "Reasoning shows confirmation bias by favoring supporting evidence",
                "Hypothesis formation",
            ),
            "contradictory_underweighted": Outcome(
                0.6, 0.75, ("Contradictory evidence underweighted",),
                "Reasoning shows confirmation bias by favoring supporting evidence",
                "Hypothesis formation",
            ),
        },
        check=_check_confirmation,
    ),
    ChainRule(
        bias_type=BiasType.ANCHORING,
        name="Anchoring Bias",
        description="Final estimate stays close to an initial value.",
        cues={
            "initial": ("initial", "estimate", "starting"),
            "anchor_language": ("starting point", "baseline", "adjusting from"),
        },
        outcomes={
            "insufficient_adjustment": Outcome(
                0.7, 0.8, ("Insufficient adjustment from anchor",),
                "Initial value heavily influenced final estimate with minimal adjustment",
                "Initial estimate",
            ),
            "anchor_language": Outcome(
                0.6, 0.7, ("Explicit reference to anchor point",),
                "Reasoning anchored to initial reference point",
                "Initial estimate",
            ),
        },
        check=_check_anchoring,
    ),
    ChainRule(
        bias_type=BiasType.AVAILABILITY,
        name="Availability Bias",
        description="Recent or vivid events dominate over statistical evidence.",
        cues={
            "anecdote": ("i know", "i heard", "recent"),
            "statistical": ("statistic", "odds", "probability"),
        },
        outcomes={
            "vivid_events": Outcome(
                0.65, 0.7, ("Overreliance on easily recalled events",),
                "Reasoning dominated by recent or vivid events rather than statistical evidence",
                "Recent event reference",
            ),
        },
        check=_check_availability,
    ),
    ChainRule(
        bias_type=BiasType.RECENCY,
        name="Recency Bias",
        description="Recent information overweighted relative to historical data.",
        cues={
            "dismissal": ("no longer relevant", "outdated", "latest"),
        },
        outcomes={
            "historical_dismissed": Outcome(
                0.65, 0.7, ("Historical evidence dismissed",),
                "Older evidence dismissed in favor of recent information",
                "Dismissal of historical data",
            ),
            "recent_overweighted": Outcome(
                0.6, 0.75, ("Recent information overweighted",),
                "Recent information given disproportionate weight compared to historical data",
                "Recent data emphasis",
            ),
        },
        check=_check_recency,
    ),
    ChainRule(
        bias_type=BiasType.REPRESENTATIVENESS,
        name="Representativeness Bias",
        description="Stereotype matching, or base rates ignored.",
        cues={
            "stereotype": ("stereotype", "typical", "fits"),
            "base_rate": ("base rate", "prevalence"),
        },
        outcomes={
            "stereotype": Outcome(
                0.65, 0.7, ("Stereotype-based reasoning",),
                "Reasoning based on stereotypes or typical patterns without considering base rates",
                "Stereotype application",
            ),
            "base_rate_ignored": Outcome(
                0.7, 0.75, ("Base rate information ignored",),
                "Base rate information underweighted in favor of pattern matching",
                "Base rate neglect",
            ),
        },
        check=_check_representativeness,
    ),
    ChainRule(
        bias_type=BiasType.FRAMING,
        name="Framing Effect",
        description="Only one of the positive/negative frames is considered.",
        cues={
            "positive_regex": (r"\d+%\s+success",),
            "positive": ("effective", "works"),
            "negative_regex": (r"\d+%\s+failure",),
            "negative": ("risky", "fails"),
        },
        outcomes={
            "positive_frame": Outcome(
                0.6, 0.7, ("Positive framing bias",),
                "Conclusion influenced by positive framing of information",
                "Positive frame",
            ),
            "negative_frame": Outcome(
                0.6, 0.7, ("Negative framing bias",),
                "Conclusion influenced by negative framing of information",
                "Negative frame",
            ),
        },
        check=_check_framing,
    ),
    ChainRule(
        bias_type=BiasType.SUNK_COST,
        name="Sunk Cost Fallacy",
        description="Past investment drives the decision instead of future value.",
        cues={
            "past_investment": ("invested", "spent", "already"),
            "continuation": ("continue", "must", "can't abandon", "waste"),
            "future_value": ("future", "expected value", "prospects"),
        },
        outcomes={
            "continuation": Outcome(
                0.7, 0.75, ("Past investment influencing decision",),
                "Decision driven by past investment rather than future value",
                "Past investment reference",
            ),
            "no_future_value": Outcome(
                0.65, 0.7, ("Past investment emphasized without future value analysis",),
                "Past investment considered without future value assessment",
                "Past investment focus",
            ),
        },
        check=_check_sunk_cost,
    ),
    ChainRule(
        bias_type=BiasType.ATTRIBUTION,
        name="Attribution Bias",
        description="Others' failures blamed on traits, own failures on circumstances.",
        cues={
            "balanced": ("both", "multiple factors", "circumstances"),
            "others": ("they", "their"),
            "internal_traits": ("incompetent", "lazy", "flaws"),
            "self": ("i ", "my "),
            "external_causes": ("luck", "circumstances", "situation"),
        },
        outcomes={
            "internal_others": Outcome(
                0.65, 0.7, ("Internal attribution for others",),
                "Others' failures attributed to internal characteristics",
                "Attribution to personal traits",
            ),
            "external_self": Outcome(
                0.65, 0.7, ("External attribution for self",),
                "Own failures attributed to external circumstances",
                "Attribution to circumstances",
            ),
        },
        check=_check_attribution,
    ),
    ChainRule(
        bias_type=BiasType.BANDWAGON,
        name="Bandwagon Bias",
        description="Popularity or social proof substitutes for evaluating merit.",
        cues={
            "popularity": BANDWAGON_PHRASES,
            "merit": MERIT_PHRASES,
            "merit_count": ("evaluated", "analyzed", "requirements"),
        },
        outcomes={
            "popularity": Outcome(
                0.65, 0.75, ("No merit-based evaluation found",),
                "Reasoning relies on popularity or what others are doing "
                "rather than independent merit evaluation",
                "Bandwagon reasoning",
            ),
            "popularity_outweighs_merit": Outcome(
                0.55, 0.65, ("Popularity-based reasoning outweighs merit-based evaluation",),
                "Reasoning emphasizes popularity over independent evaluation of merit",
                "Bandwagon-heavy reasoning",
            ),
        },
        check=_check_bandwagon,
    ),
)

RULES_BY_TYPE: dict[BiasType, ChainRule] = {r.bias_type: r for r in CHAIN_RULES}


# ============================================================
# TEXT PATTERN LIBRARY
# ============================================================

TEXT_PATTERNS: tuple[TextPattern, ...] = (
    TextPattern(
        bias_type=BiasType.CONFIRMATION,
        phrases=(
            "always used", "worked fine", "don't see why", "proves my point",
            "as i expected", "confirms what i", "knew it", "told you so",
            "obviously", "clearly shows", "just as i thought", "supports my view",
            "validates my", "i was right", "clearly supports", "all data supports",
            "data confirms", "evidence shows",
        ),
        keyword_sets=(
            ("all", "data", "supports"),
            ("all", "evidence", "supports"),
            ("data", "confirms", "hypothesis"),
            ("proves", "right"),
            ("confirms", "belief"),
            ("supports", "theory"),
            ("validates", "assumption"),
        ),
        confidence=0.7,
        severity=0.65,
        explanation=(
            "Reasoning shows confirmation bias by favoring information "
            "that confirms existing beliefs"
        ),
    ),
    # Status quo language is reported under framing
    TextPattern(
        bias_type=BiasType.FRAMING,
        phrases=(
            "we've always", "no need to change", "why fix what", "if it ain't broke",
            "worked before", "tradition", "the way we do things", "never had problems",
            "always done it this way", "don't rock the boat", "stick with what works",
            "tried and true", "why change", "keep things as they are",
        ),
        keyword_sets=(
            ("always", "done", "way"),
            ("no", "need", "change"),
            ("why", "change"),
            ("worked", "before"),
            ("never", "problems"),
        ),
        confidence=0.7,
        severity=0.6,
        explanation="Reasoning shows status quo bias by preferring the current state over change",
    ),
    TextPattern(
        bias_type=BiasType.BANDWAGON,
        phrases=(
            "everyone uses", "industry standard", "everyone knows", "most people",
            "popular choice", "widely adopted", "common practice", "mainstream",
            "trending", "what others are doing", "following the crowd",
            "majority agrees", "consensus is", "nobody does it that way",
            "everyone else is doing", "everyone is doing", "everyone does it",
            "others are doing", "they all do", "all the big companies",
            "all the big tech companies", "big tech companies are doing",
            "everyone else", "the trend", "jumping on the bandwagon", "get on board",
            "don't want to be left behind", "left behind", "keeping up with",
            "all my competitors", "competitors are doing", "market leaders",
            "top companies", "successful companies do", "best companies",
            "leading companies", "fortune 500", "faang", "tech giants",
            "social proof", "proven by adoption", "widely used", "millions of users",
            "thousands of companies", "everybody's doing it", "no one uses",
            "nobody uses",
        ),
        keyword_sets=(
            ("everyone", "uses"),
            ("everyone", "does"),
            ("everyone", "doing"),
            ("most", "people"),
            ("popular", "choice"),
            ("widely", "adopted"),
            ("industry", "standard"),
            ("all", "big", "companies"),
            ("big", "tech", "companies"),
            ("all", "companies", "doing"),
            ("competitors", "doing"),
            ("market", "leaders"),
            ("top", "companies"),
            ("leading", "companies"),
            ("successful", "companies"),
            ("left", "behind"),
            ("keeping", "up"),
            ("millions", "users"),
            ("thousands", "companies"),
            ("widely", "used"),
        ),
        confidence=0.75,
        severity=0.65,
        explanation=(
            "Reasoning shows bandwagon bias (social proof fallacy) by relying on "
            "popularity or what others are doing rather than evaluating merit independently"
        ),
    ),
    TextPattern(
        bias_type=BiasType.ANCHORING,
        phrases=(
            "starting from", "based on the initial", "original estimate",
            "first impression", "initially thought", "my first guess", "began with",
            "anchor point", "reference point", "baseline of", "starting point",
            "original price", "first offer", "initial value",
        ),
        keyword_sets=(
            ("initial", "estimate"),
            ("first", "offer"),
            ("starting", "point"),
            ("original", "price"),
            ("reference", "point"),
            ("based", "initial"),
        ),
        confidence=0.65,
        severity=0.6,
        explanation="Reasoning shows anchoring bias by over-relying on initial information",
    ),
    TextPattern(
        bias_type=BiasType.AVAILABILITY,
        phrases=(
            "i remember when", "just happened", "recent example", "i heard about",
            "in the news", "just saw", "recently read", "comes to mind",
            "easy to recall", "vivid example", "memorable case", "fresh in my mind",
            "just last week", "i know someone who",
        ),
        keyword_sets=(
            ("remember", "when"),
            ("just", "happened"),
            ("recent", "example"),
            ("heard", "about"),
            ("comes", "mind"),
            ("easy", "recall"),
        ),
        confidence=0.65,
        severity=0.6,
        explanation="Reasoning shows availability bias by overweighting easily recalled examples",
    ),
    TextPattern(
        bias_type=BiasType.SUNK_COST,
        phrases=(
            "already invested", "too much time", "can't give up now", "come this far",
            "wasted effort", "spent so much", "put in too much", "after all this work",
            "too late to stop", "committed to", "invested significant",
            "invested resources", "invested time", "invested money",
            "spent significant", "put significant",
        ),
        keyword_sets=(
            ("already", "invested"),
            ("too", "much", "time"),
            ("can't", "give", "up"),
            ("come", "this", "far"),
            ("wasted", "effort"),
            ("spent", "much"),
        ),
        confidence=0.75,
        severity=0.7,
        explanation=(
            "Reasoning shows sunk cost fallacy by letting past investments "
            "drive current decisions"
        ),
    ),
    TextPattern(
        bias_type=BiasType.ATTRIBUTION,
        phrases=(
            "they're just", "it's their fault", "they should have", "incompetent",
            "lazy", "not my fault", "circumstances beyond", "bad luck",
            "unfair situation",
        ),
        keyword_sets=(
            ("their", "fault"),
            ("they", "should"),
            ("not", "my", "fault"),
            ("bad", "luck"),
            ("unfair", "situation"),
        ),
        confidence=0.65,
        severity=0.6,
        explanation="Reasoning shows attribution bias in assigning causes to behavior",
    ),
)


def get_rule(bias_type: BiasType) -> ChainRule:
    return RULES_BY_TYPE[bias_type]


def rule_catalog() -> list[dict]:
    """Describe every structural rule. Used for introspection and docs."""
    return [
        {
            "bias_type": r.bias_type.value,
            "name": r.name,
            "description": r.description,
            "outcomes": {
                key: {"severity": o.severity, "confidence": o.confidence}
                for key, o in r.outcomes.items()
            },
        }
        for r in CHAIN_RULES
    ]
