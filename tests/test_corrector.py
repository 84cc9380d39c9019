"""
Tests for the Corrector — suggestion lookup, pairing, and formatting.
"""

import pytest

from biaswatch.corrector import CORRECTION_TEMPLATES, GENERIC_TEMPLATE, Corrector
from biaswatch.schemas import BiasLocation, BiasType, DetectedBias


@pytest.fixture
def corrector():
    return Corrector()


def _bias(bias_type):
    return DetectedBias(
        type=bias_type,
        severity=0.6,
        confidence=0.7,
        evidence=["e"],
        location=BiasLocation(step_index=0, reasoning="r"),
        explanation="x",
    )


# ============================================================
# TEMPLATE TABLE
# ============================================================

class TestTemplates:
    """Every bias type has a complete remediation entry."""

    def test_all_nine_types_covered(self):
        assert set(CORRECTION_TEMPLATES) == set(BiasType)

    @pytest.mark.parametrize("bias_type", list(BiasType))
    def test_entry_shape(self, corrector, bias_type):
        s = corrector.get_suggestion(bias_type)
        assert s.bias_type == bias_type.value
        assert s.suggestion
        assert len(s.techniques) >= 3
        assert len(s.challenge_questions) >= 3

    def test_confirmation_mentions_disconfirming(self, corrector):
        s = corrector.get_suggestion(BiasType.CONFIRMATION)
        assert "disconfirming" in s.suggestion.lower()

    @pytest.mark.parametrize("bias_type,keywords", [
        (BiasType.ANCHORING, ("alternative", "multiple")),
        (BiasType.AVAILABILITY, ("statistic",)),
        (BiasType.FRAMING, ("reframe",)),
        (BiasType.SUNK_COST, ("future",)),
        (BiasType.ATTRIBUTION, ("situational",)),
        (BiasType.BANDWAGON, ("merit",)),
    ])
    def test_suggestion_keywords(self, corrector, bias_type, keywords):
        text = corrector.get_suggestion(bias_type).suggestion.lower()
        assert any(k in text for k in keywords)

    def test_accepts_string_values(self, corrector):
        assert corrector.get_suggestion("sunk_cost").bias_type == "sunk_cost"

    def test_unknown_type_gets_generic(self, corrector):
        s = corrector.get_suggestion("hindsight")
        assert s.bias_type == "hindsight"
        assert s.suggestion == GENERIC_TEMPLATE["suggestion"]
        assert len(s.techniques) >= 3

    def test_lookup_returns_copies(self, corrector):
        s = corrector.get_suggestion(BiasType.FRAMING)
        s.techniques.append("mutated")
        assert "mutated" not in CORRECTION_TEMPLATES[BiasType.FRAMING]["techniques"]

    def test_concise(self, corrector):
        assert corrector.get_concise_suggestion(BiasType.RECENCY) == (
            CORRECTION_TEMPLATES[BiasType.RECENCY]["suggestion"]
        )

    def test_get_all_templates(self, corrector):
        all_templates = corrector.get_all_templates()
        assert set(all_templates) == set(BiasType)
        assert all_templates[BiasType.BANDWAGON].bias_type == "bandwagon"


# ============================================================
# PAIRING & FORMATTING
# ============================================================

class TestAddCorrections:

    def test_preserves_order(self, corrector):
        biases = [_bias(BiasType.FRAMING), _bias(BiasType.CONFIRMATION)]
        paired = corrector.add_corrections(biases)
        assert [p.bias.type for p in paired] == [BiasType.FRAMING, BiasType.CONFIRMATION]
        assert paired[1].correction.bias_type == "confirmation"

    def test_empty(self, corrector):
        assert corrector.add_corrections([]) == []


class TestFormatCorrection:

    def test_layout(self, corrector):
        s = corrector.get_suggestion(BiasType.SUNK_COST)
        text = corrector.format_correction(s)
        lines = text.split("\n")
        assert lines[0] == f"Suggestion: {s.suggestion}"
        assert "Techniques:" in lines
        assert "Challenge Questions:" in lines
        assert lines.index("Techniques:") < lines.index("Challenge Questions:")
        bullets = [l for l in lines if l.startswith("  • ")]
        assert len(bullets) == len(s.techniques) + len(s.challenge_questions)
