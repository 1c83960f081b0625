"""Tests for DuplicateDetector reference comparison."""

import pytest

from authenticity_system.agents.detectors import DuplicateDetector
from authenticity_system.data_management.schemas import (
    AbstentionReason,
    Abstained,
    AgentVerdict,
    AnalysisRequest,
)

BASE = "This app is really great for tracking my daily habits"


@pytest.fixture
def detector() -> DuplicateDetector:
    return DuplicateDetector()


def _detect(detector: DuplicateDetector, text: str, references: list[str]):
    return detector.detect(AnalysisRequest(text=text, reference_texts=references))


class TestDuplicateScoring:
    """Test similarity bands."""

    def test_exact_duplicate_ignores_case_and_punctuation(self, detector):
        result = _detect(detector, "Great app, love it!", ["Something else", "great app love it"])
        assert result.confidence == 90.0
        assert result.verdict == AgentVerdict.FAKE
        assert result.evidence[0] == "Exact duplicate of reference review #1"

    def test_near_duplicate(self, detector):
        # 10 shared tokens out of 11
        result = _detect(detector, BASE, [BASE + " and"])
        assert result.confidence == 70.0
        assert result.raw_score["best_similarity"] == pytest.approx(10 / 11, abs=1e-4)

    def test_substantially_similar(self, detector):
        # 7 shared tokens out of 11
        result = _detect(detector, BASE, ["This app is really great for tracking workouts"])
        assert result.confidence == 45.0
        assert result.verdict == AgentVerdict.SUSPICIOUS

    def test_unrelated_references(self, detector):
        result = _detect(detector, "battery drains fast", ["lovely colors", "nice widgets"])
        assert result.confidence == 0.0
        assert result.evidence == ["No duplicates among 2 reference reviews"]

    def test_multiple_near_copies_reported(self, detector):
        result = _detect(detector, BASE, [BASE, BASE + "!", "unrelated"])
        assert "2 reference reviews are near-copies of this text" in result.evidence

    def test_reference_cap(self):
        result = _detect(DuplicateDetector(max_references=1), BASE, ["unrelated", BASE])
        assert result.raw_score["compared"] == 1
        assert result.raw_score["exact_matches"] == 0

    def test_blank_references_abstain(self, detector):
        outcome = detector.evaluate(AnalysisRequest(text=BASE, reference_texts=["  ", ""]))
        assert isinstance(outcome, Abstained)
        assert outcome.reason == AbstentionReason.NO_SIGNAL
