"""Tests for the listing context adapters: Cofacts, Check-up and Kitware."""

import httpx
import pytest

from authenticity_system.agents.adapters import (
    CheckupAdapter,
    CofactsAdapter,
    KitwareAdapter,
    create_http_client,
    extract_claims,
    scan_misinformation,
)
from authenticity_system.agents.adapters.cofacts_adapter import community_confidence
from authenticity_system.agents.adapters.kitware_adapter import combine_media_scores
from authenticity_system.data_management.schemas import (
    AbstentionReason,
    Abstained,
    AgentVerdict,
    AnalysisRequest,
    AppMedia,
    ResultSource,
)
from authenticity_system.errors import MalformedResponseError


def _edge(*reply_types, requests: int = 0) -> dict:
    return {
        "node": {
            "id": "a1",
            "text": "claim",
            "articleReplies": [{"reply": {"id": f"r{i}", "type": t}} for i, t in enumerate(reply_types)],
            "replyRequestCount": requests,
        },
        "score": 1.0,
    }


def _cofacts_body(*edges) -> dict:
    return {"data": {"ListArticles": {"edges": list(edges)}}}


class TestCofacts:
    """Test claim extraction and community consensus mapping."""

    @pytest.fixture
    def adapter(self) -> CofactsAdapter:
        return CofactsAdapter("http://cofacts.test/graphql")

    def test_extract_claims(self):
        description = "Our app is the best way to cure insomnia. It has a blue theme."
        assert extract_claims(description) == ["Our app is the best way to cure insomnia"]

    def test_extract_claims_falls_back_to_description(self):
        assert extract_claims("A simple notes app") == ["A simple notes app"]

    def test_payload(self, adapter):
        payload = adapter.build_payload(
            AnalysisRequest(app_description="Our app is the best way to cure insomnia. Blue theme.")
        )
        assert "ListArticles" in payload["query"]
        assert payload["variables"] == {"text": "Our app is the best way to cure insomnia", "limit": 10}

    @pytest.mark.parametrize(
        "rumor,not_rumor,expected",
        [(1.0, 0.0, 100.0), (0.5, 0.0, 55.0), (0.0, 1.0, 10.0), (0.2, 0.2, 30.0)],
    )
    def test_community_confidence(self, rumor, not_rumor, expected):
        assert community_confidence(rumor, not_rumor) == pytest.approx(expected)

    def test_rumor_consensus(self, adapter):
        body = _cofacts_body(_edge("RUMOR"), _edge("RUMOR", requests=12), _edge("NOT_RUMOR"))
        result = adapter.normalize(body, AnalysisRequest(app_description="x"))

        # rumor rate 2/3: 70 + (2/3 - 0.6) * 75
        assert result.confidence == pytest.approx(75.0)
        assert result.verdict == AgentVerdict.FAKE
        assert "High fact-check demand (12 requests)" in result.evidence

    def test_no_articles_is_no_signal(self, adapter):
        assert adapter.normalize(_cofacts_body(), AnalysisRequest(app_description="x")) is None

    def test_unreplied_articles_is_no_signal(self, adapter):
        assert adapter.normalize(_cofacts_body(_edge()), AnalysisRequest(app_description="x")) is None

    @pytest.mark.parametrize(
        "body",
        [{"errors": [{"message": "rate limited"}]}, {"data": None}, {"data": {"ListArticles": {}}}],
    )
    def test_malformed(self, adapter, body):
        with pytest.raises(MalformedResponseError):
            adapter.normalize(body, AnalysisRequest(app_description="x"))

    @pytest.mark.asyncio
    async def test_empty_community_data_abstains(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=_cofacts_body()))
        async with create_http_client(transport=transport) as client:
            outcome = await CofactsAdapter("http://cofacts.test/graphql", client).evaluate(
                AnalysisRequest(app_description="The best app"), 1.0
            )

        assert isinstance(outcome, Abstained)
        assert outcome.reason == AbstentionReason.NO_SIGNAL


class TestCheckup:
    """Test misinformation scoring."""

    @pytest.fixture
    def adapter(self) -> CheckupAdapter:
        return CheckupAdapter("http://checkup.test/scrape")

    def test_payload(self, adapter):
        payload = adapter.build_payload(AnalysisRequest(source_url="https://example.com/app"))
        assert payload["url"] == "https://example.com/app"
        assert payload["depth"] == 1

    def test_normalize(self, adapter):
        result = adapter.normalize(
            {
                "has_misinfo": True,
                "disinfo_score": 65,
                "flagged_claims": [{"text": "cures cancer", "category": "Health"}],
                "ads": list(range(6)),
            },
            AnalysisRequest(source_url="https://example.com"),
        )
        assert result.confidence == 65.0
        assert result.verdict == AgentVerdict.SUSPICIOUS
        assert result.evidence == [
            "1 misinformation claim(s): Health",
            'Health misinformation: "cures cancer"',
            "Excessive advertising (6 ads on page)",
        ]

    @pytest.mark.parametrize("body", [{"has_misinfo": True}, {"disinfo_score": 140}])
    def test_malformed(self, adapter, body):
        with pytest.raises(MalformedResponseError):
            adapter.normalize(body, AnalysisRequest(source_url="https://example.com"))

    def test_scan_misinformation(self):
        score, flagged = scan_misinformation("Miracle cure! Earn $500 per day. Only 3 left")
        assert score == 100
        assert {c["category"] for c in flagged} == {"Health", "Financial", "Urgency"}

    def test_fallback_scans_description(self, adapter):
        result = adapter.fallback(
            AnalysisRequest(source_url="https://example.com", app_description="This app cures diabetes")
        )
        assert result.confidence == 50.0
        assert result.source == ResultSource.FALLBACK

    def test_fallback_without_text(self, adapter):
        assert adapter.fallback(AnalysisRequest(source_url="https://example.com")) is None


class TestKitware:
    """Test media forensics mapping."""

    @pytest.fixture
    def adapter(self) -> KitwareAdapter:
        return KitwareAdapter("http://kitware.test/analyze")

    @pytest.fixture
    def media_request(self) -> AnalysisRequest:
        return AnalysisRequest(
            app_media=AppMedia(
                icon_url="https://www.shutterstock.com/icon.png",
                screenshots=["https://cdn.test/shot_photoshop.png"],
                promotional_video="https://cdn.test/promo.mp4",
            )
        )

    def test_combine_media_scores(self):
        assert combine_media_scores([80, 40], [0.9, 0.1]) == pytest.approx(72.0)
        assert combine_media_scores([], []) == 0.0

    def test_payload(self, adapter, media_request):
        payload = adapter.build_payload(media_request)
        assert [m["type"] for m in payload["media"]] == ["image", "image", "video"]
        assert payload["analysis_types"] == ["deepfake", "exif", "attribution"]

    def test_normalize(self, adapter, media_request):
        body = {
            "results": [
                {
                    "media_url": "a",
                    "is_manipulated": True,
                    "manipulation_score": 80,
                    "deepfake_prob": 0.9,
                    "exif_flags": [{"type": "software", "severity": "HIGH", "description": "Edited in Photoshop"}],
                },
                {"media_url": "b", "is_manipulated": False, "manipulation_score": 40, "deepfake_prob": 0.1},
            ]
        }
        result = adapter.normalize(body, media_request)

        assert result.confidence == pytest.approx(72.0)
        assert result.verdict == AgentVerdict.FAKE
        assert "1 media item(s) show signs of manipulation" in result.evidence
        assert "Deepfake probability up to 90%" in result.evidence
        assert "1 critical EXIF issue(s): Edited in Photoshop" in result.evidence

    def test_empty_results_is_no_signal(self, adapter, media_request):
        assert adapter.normalize({"results": []}, media_request) is None

    @pytest.mark.parametrize(
        "body",
        [{}, {"results": "none"}, {"results": [{"manipulation_score": 120}]}, {"results": [1]}],
    )
    def test_malformed(self, adapter, media_request, body):
        with pytest.raises(MalformedResponseError):
            adapter.normalize(body, media_request)

    def test_fallback_url_checks(self, adapter, media_request):
        result = adapter.fallback(media_request)
        # Per-item scores [40, 15, 0]; mean 18.33 * 0.6
        assert result.confidence == pytest.approx(11.0)
        assert "App uses 1 stock photo(s) instead of original content" in result.evidence
        assert "1 media file name(s) reference editing software" in result.evidence
