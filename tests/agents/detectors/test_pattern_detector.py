"""Tests for PatternDetector and the heuristic evaluate() boundary."""

import pytest

from authenticity_system.agents.detectors import PatternDetector
from authenticity_system.data_management.schemas import (
    AbstentionReason,
    Abstained,
    AgentResult,
    AgentVerdict,
    AnalysisRequest,
    Answered,
    ResultSource,
)


@pytest.fixture
def detector() -> PatternDetector:
    return PatternDetector()


def _score(detector: PatternDetector, text: str) -> AgentResult:
    return detector.detect(AnalysisRequest(text=text))


class TestPatternScoring:
    """Test each lexical signal."""

    def test_ai_self_reference_with_unqualified_praise(self, detector):
        result = _score(detector, "As an AI, I highly recommend this amazing perfect excellent app")

        # 40 AI reference + 15 superlative density + 25 unqualified praise
        assert result.confidence == 80.0
        assert result.verdict == AgentVerdict.FAKE
        assert result.agent_name == "pattern"
        assert result.source == ResultSource.PRIMARY
        assert any("AI self-reference" in e for e in result.evidence)
        assert any("Unqualified praise" in e for e in result.evidence)

    def test_natural_review_scores_zero(self, detector):
        result = _score(detector, "Used it for 3 weeks. Battery drain issue in v2.1.")

        assert result.confidence == 0.0
        assert result.verdict == AgentVerdict.GENUINE
        assert result.evidence == ["No lexical manipulation patterns found"]

    def test_caveat_blocks_unqualified_praise(self, detector):
        result = _score(detector, "amazing perfect excellent app but it crashes")
        assert result.confidence == 15.0

    def test_spam_links(self, detector):
        result = _score(detector, "Click here for a promo code at bit.ly/xyz")
        assert result.confidence == 30.0
        assert "Spam phrases or links present" in result.evidence

    def test_promotional_vocabulary(self, detector):
        result = _score(detector, "Buy now today, great deal on sale")
        assert result.confidence == 25.0
        assert result.raw_score["promotional_words"] == 5

    def test_excessive_exclamations(self, detector):
        assert _score(detector, "Nice!!!! app").confidence == 10.0

    def test_shouting(self, detector):
        result = _score(detector, "THIS APP IS TERRIBLE AND SLOW")
        assert result.confidence == 10.0
        assert any("Shouting" in e for e in result.evidence)

    def test_score_capped_at_100(self, detector):
        text = "As an AI: amazing perfect excellent fantastic! Buy now today deal! Click here!!!!"
        assert _score(detector, text).confidence == 100.0


class TestEvaluateBoundary:
    """Test that evaluate() wraps results and never raises."""

    def test_answered_outcome(self, detector):
        outcome = detector.evaluate(AnalysisRequest(text="Fine app"))
        assert isinstance(outcome, Answered)
        assert outcome.agent_id == "pattern"

    def test_exception_becomes_failed_abstention(self):
        class BrokenDetector(PatternDetector):
            def detect(self, request):
                raise RuntimeError("regex exploded")

        outcome = BrokenDetector().evaluate(AnalysisRequest(text="anything"))

        assert isinstance(outcome, Abstained)
        assert outcome.reason == AbstentionReason.FAILED
        assert "regex exploded" in outcome.detail

    def test_invalid_result_becomes_invalid_result_abstention(self):
        class OutOfRangeDetector(PatternDetector):
            def detect(self, request):
                return AgentResult.model_construct(
                    agent_name="pattern",
                    confidence=250.0,
                    verdict=AgentVerdict.FAKE,
                    evidence=[],
                    raw_score=None,
                    source=ResultSource.PRIMARY,
                )

        outcome = OutOfRangeDetector().evaluate(AnalysisRequest(text="anything"))

        assert isinstance(outcome, Abstained)
        assert outcome.reason == AbstentionReason.INVALID_RESULT

    def test_missing_agent_id_rejected(self):
        class Nameless(PatternDetector):
            AGENT_ID = ""

        with pytest.raises(TypeError):
            Nameless()
