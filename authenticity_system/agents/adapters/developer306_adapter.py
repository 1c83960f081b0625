"""Adapter for the Developer306 sentiment + random forest review classifier.

Wire format:
    POST {endpoint}  {"text": ..., "rating": 1-5, "user_review_count": n, "account_age_days": n}
    -> {"prediction": "fake" | "real", "probability": 0.0-1.0,
        "sentiment": {"compound": -1.0..1.0}}

Fallback: lexicon sentiment scoring plus the classifier's decision rules
(sentiment/rating mismatch, short high-rated text, extreme sentiment, young
prolific accounts, shouting).
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from authenticity_system.agents.adapters.base_adapter import ExternalAgentAdapter
from authenticity_system.agents.detectors.behavior_detector import read_number
from authenticity_system.config.detection_patterns import SENTIMENT_LEXICON
from authenticity_system.data_management.schemas import (
    AgentResult,
    AnalysisRequest,
    ResultSource,
)
from authenticity_system.errors import MalformedResponseError
from authenticity_system.utils.text import clip, tokenize

# Normalization constant for compound sentiment (score / sqrt(score^2 + alpha))
COMPOUND_ALPHA = 15.0


@dataclass
class SentimentScore:
    """Lexicon sentiment of a text."""

    score: float
    compound: float
    positive: int
    negative: int


def analyze_sentiment(text: str) -> SentimentScore:
    """Sum lexicon valences and squash the total into [-1, 1]."""
    total = 0.0
    positive = negative = 0
    for token in tokenize(clip(text)):
        valence = SENTIMENT_LEXICON.get(token)
        if valence is None:
            continue
        total += valence
        if valence > 0:
            positive += 1
        else:
            negative += 1
    compound = total / math.sqrt(total * total + COMPOUND_ALPHA) if total else 0.0
    return SentimentScore(score=total, compound=compound, positive=positive, negative=negative)


def sentiment_label(compound: float) -> str:
    if compound > 0.2:
        return "POSITIVE"
    if compound < -0.2:
        return "NEGATIVE"
    return "NEUTRAL"


def rating_mismatch(compound: float, rating: float) -> bool:
    """High rating with negative sentiment, or low rating with positive sentiment."""
    return (rating >= 4 and compound < -0.2) or (rating <= 2 and compound > 0.2)


class Developer306Adapter(ExternalAgentAdapter):
    """Sentiment/rating consistency classifier."""

    AGENT_ID = "developer306"
    SERVICE_NAME = "Developer306 classifier"

    MISMATCH_POINTS = 30
    SHORT_HIGH_RATING_POINTS = 25
    EXTREME_SENTIMENT_POINTS = 15
    YOUNG_PROLIFIC_POINTS = 20
    SHOUTING_POINTS = 15

    def __init__(self, endpoint: str, http_client=None):
        super().__init__(
            endpoint,
            http_client,
            name="Developer306 Sentiment",
            description="Sentiment/rating mismatch random forest classifier",
        )

    def get_capabilities(self) -> list[str]:
        return ["sentiment_rating_mismatch", "fake_review_classification"]

    def build_payload(self, request: AnalysisRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {"text": clip(request.text or ""), "rating": request.rating}
        context = request.user_context or {}
        review_count = read_number(context, "reviewCount")
        age_days = read_number(context, "accountAgeDays")
        if review_count is not None:
            payload["user_review_count"] = review_count
        if age_days is not None:
            payload["account_age_days"] = age_days
        return payload

    def normalize(self, response: dict[str, Any], request: AnalysisRequest) -> Optional[AgentResult]:
        probability = response.get("probability")
        if isinstance(probability, bool) or not isinstance(probability, (int, float)):
            raise MalformedResponseError(self.agent_id, "missing probability")
        if not 0.0 <= probability <= 1.0:
            raise MalformedResponseError(self.agent_id, f"probability {probability} outside [0, 1]")

        confidence = float(probability) * 100
        evidence = [f"Random forest: {confidence:.0f}% fake probability"]

        sentiment = response.get("sentiment") or {}
        compound = sentiment.get("compound") if isinstance(sentiment, dict) else None
        if isinstance(compound, (int, float)) and request.rating is not None:
            if rating_mismatch(compound, request.rating):
                evidence.append(
                    f"Review sentiment ({sentiment_label(compound)}) doesn't match rating ({request.rating:g}/5)"
                )

        return self.build_result(
            confidence,
            evidence,
            raw_score={"prediction": response.get("prediction"), "probability": probability},
        )

    def fallback(self, request: AnalysisRequest) -> Optional[AgentResult]:
        text = request.text or ""
        rating = request.rating if request.rating is not None else 3.0
        sentiment = analyze_sentiment(text)
        words = text.split()
        context = request.user_context or {}

        score = 0
        evidence: list[str] = []

        if rating_mismatch(sentiment.compound, rating):
            score += self.MISMATCH_POINTS
            evidence.append(
                f"Review sentiment ({sentiment_label(sentiment.compound)}) doesn't match rating ({rating:g}/5)"
            )

        if len(words) < 10 and rating >= 4:
            score += self.SHORT_HIGH_RATING_POINTS
            evidence.append("Short review (< 10 words) with a high rating")

        if abs(sentiment.compound) > 0.9:
            score += self.EXTREME_SENTIMENT_POINTS
            evidence.append(f"Extreme sentiment (compound {sentiment.compound:.2f})")

        age_days = read_number(context, "accountAgeDays")
        review_count = read_number(context, "reviewCount")
        if age_days is not None and review_count is not None and age_days < 7 and review_count > 5:
            score += self.YOUNG_PROLIFIC_POINTS
            evidence.append("New account with many reviews")

        if text:
            caps_ratio = sum(1 for c in text if c.isupper()) / len(text)
            exclamation_ratio = text.count("!") / len(text)
            if caps_ratio > 0.3 or exclamation_ratio > 0.1:
                score += self.SHOUTING_POINTS
                evidence.append("Excessive capitals or exclamation marks")

        if not evidence:
            evidence.append("Sentiment consistent with rating")

        return self.build_result(
            score,
            evidence,
            raw_score={"compound": round(sentiment.compound, 4), "sentiment_score": sentiment.score},
            source=ResultSource.FALLBACK,
        )


__all__ = [
    "Developer306Adapter",
    "SentimentScore",
    "analyze_sentiment",
    "rating_mismatch",
    "sentiment_label",
]
