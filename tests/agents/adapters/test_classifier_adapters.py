"""Tests for the text classifier adapters: BERT, SayamAlt SVM and Developer306.

Normalization is tested directly on provider response bodies; the shared
call/retry/fallback lifecycle is covered in test_base_adapter.py.
"""

import pytest

from authenticity_system.agents.adapters import (
    BertAdapter,
    Developer306Adapter,
    SayamAdapter,
    analyze_sentiment,
    extract_svm_features,
)
from authenticity_system.agents.adapters.developer306_adapter import rating_mismatch, sentiment_label
from authenticity_system.data_management.schemas import (
    AgentVerdict,
    AnalysisRequest,
    ResultSource,
)
from authenticity_system.errors import MalformedResponseError


class TestBertNormalization:
    """Test CG probability mapping."""

    @pytest.fixture
    def adapter(self) -> BertAdapter:
        return BertAdapter("http://bert.test/classify")

    def test_high_probability(self, adapter):
        result = adapter.normalize(
            {"label": "CG", "cg_probability": 0.87}, AnalysisRequest(text="Best app ever!")
        )
        assert result.confidence == pytest.approx(87.0)
        assert result.verdict == AgentVerdict.FAKE
        assert result.evidence[0] == "Transformer detected 87% probability of computer-generated text"
        assert "Short text with high generated-text probability (common bot pattern)" in result.evidence

    def test_provider_split_point_decides_verdict(self, adapter):
        result = adapter.normalize({"cg_probability": 0.55}, AnalysisRequest(text="Decent app"))
        assert result.confidence == pytest.approx(55.0)
        assert result.verdict == AgentVerdict.FAKE

    def test_legacy_fake_score_field(self, adapter):
        result = adapter.normalize({"fake_score": 0.2}, AnalysisRequest(text="Decent app"))
        assert result.verdict == AgentVerdict.GENUINE

    @pytest.mark.parametrize(
        "body",
        [{"label": "CG"}, {"cg_probability": True}, {"cg_probability": "0.9"}, {"cg_probability": -0.1}],
    )
    def test_malformed(self, adapter, body):
        with pytest.raises(MalformedResponseError):
            adapter.normalize(body, AnalysisRequest(text="x"))

    def test_fallback_flags_ai_reference(self, adapter):
        result = adapter.fallback(AnalysisRequest(text="As an AI language model I recommend it"))
        assert result.source == ResultSource.FALLBACK
        assert "Text explicitly refers to itself as AI-generated" in result.evidence


class TestSayam:
    """Test SVM response mapping and feature approximation."""

    @pytest.fixture
    def adapter(self) -> SayamAdapter:
        return SayamAdapter("http://sayam.test/predict")

    def test_probability(self, adapter):
        result = adapter.normalize(
            {"prediction": "fake", "fake_probability": 0.82}, AnalysisRequest(text="x")
        )
        assert result.confidence == pytest.approx(82.0)
        assert result.verdict == AgentVerdict.FAKE
        assert "Predicted class: fake" in result.evidence

    def test_label_only(self, adapter):
        result = adapter.normalize({"prediction": "genuine"}, AnalysisRequest(text="x"))
        assert result.confidence == 25.0
        assert result.verdict == AgentVerdict.GENUINE

    @pytest.mark.parametrize("body", [{"prediction": "maybe"}, {"fake_probability": 1.5}])
    def test_malformed(self, adapter, body):
        with pytest.raises(MalformedResponseError):
            adapter.normalize(body, AnalysisRequest(text="x"))

    def test_short_text_fallback(self, adapter):
        result = adapter.fallback(AnalysisRequest(text="Nice"))
        assert result.confidence == 50.0

    def test_feature_weights(self):
        features = extract_svm_features("great app")
        assert features.generic == 15
        assert features.length == 70
        assert features.vocabulary == 20
        # 15 * 0.30 + 70 * 0.15 + 20 * 0.25
        assert features.weighted_score() == pytest.approx(20.0)

    def test_links_raise_pattern_feature(self):
        assert extract_svm_features("check out www.example.com").pattern == 25


class TestDeveloper306:
    """Test sentiment scoring, rating mismatch and response mapping."""

    @pytest.fixture
    def adapter(self) -> Developer306Adapter:
        return Developer306Adapter("http://dev306.test/analyze")

    def test_sentiment_compound(self):
        sentiment = analyze_sentiment("This is terrible and awful")
        assert sentiment.score == -6
        assert sentiment.compound == pytest.approx(-6 / 51 ** 0.5)
        assert sentiment_label(sentiment.compound) == "NEGATIVE"

    def test_neutral_text(self):
        assert analyze_sentiment("The icon is blue").compound == 0.0

    @pytest.mark.parametrize(
        "compound,rating,expected",
        [(-0.5, 5, True), (0.5, 1, True), (0.5, 5, False), (-0.5, 1, False), (0.0, 5, False)],
    )
    def test_rating_mismatch(self, compound, rating, expected):
        assert rating_mismatch(compound, rating) is expected

    def test_payload_includes_reviewer_signals(self, adapter):
        payload = adapter.build_payload(
            AnalysisRequest(text="ok", rating=4, user_context={"reviewCount": 12, "accountAgeDays": 3})
        )
        assert payload == {"text": "ok", "rating": 4.0, "user_review_count": 12.0, "account_age_days": 3.0}

    def test_normalize_with_mismatch(self, adapter):
        result = adapter.normalize(
            {"prediction": "fake", "probability": 0.7, "sentiment": {"compound": -0.6}},
            AnalysisRequest(text="bad", rating=5),
        )
        assert result.confidence == pytest.approx(70.0)
        assert result.verdict == AgentVerdict.FAKE
        assert "Review sentiment (NEGATIVE) doesn't match rating (5/5)" in result.evidence

    def test_normalize_requires_probability(self, adapter):
        with pytest.raises(MalformedResponseError):
            adapter.normalize({"prediction": "fake"}, AnalysisRequest(text="bad", rating=5))

    def test_fallback_decision_rules(self, adapter):
        result = adapter.fallback(AnalysisRequest(text="Bad app, slow and annoying", rating=5))
        # 30 sentiment/rating mismatch + 25 short text with high rating
        assert result.confidence == 55.0
        assert result.source == ResultSource.FALLBACK
