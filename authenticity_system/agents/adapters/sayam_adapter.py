"""Adapter for the SayamAlt TF-IDF + SVM fake review classifier.

Wire format:
    POST {endpoint}  {"text": ...}
    -> {"prediction": "fake" | "genuine", "fake_probability": 0.0-1.0}

When the service omits the probability, the prediction label maps to a fixed
confidence (LABEL_CONFIDENCE).
"""

from dataclasses import dataclass
from typing import Any, Optional

from authenticity_system.agents.adapters.base_adapter import ExternalAgentAdapter
from authenticity_system.config.detection_patterns import FAKE_INDICATORS, SVM_FEATURE_WEIGHTS
from authenticity_system.data_management.schemas import (
    AgentResult,
    AnalysisRequest,
    ResultSource,
)
from authenticity_system.errors import MalformedResponseError
from authenticity_system.utils.text import clip, tokenize


@dataclass
class SvmFeatures:
    """Feature scores (each 0-100) approximating the SVM decision boundary."""

    generic: float = 0.0
    length: float = 0.0
    vocabulary: float = 0.0
    pattern: float = 0.0
    tfidf: float = 0.0

    def weighted_score(self) -> float:
        return sum(getattr(self, name) * weight for name, weight in SVM_FEATURE_WEIGHTS.items())


def extract_svm_features(text: str) -> SvmFeatures:
    """Feature extraction mirroring the classifier's training-time features.

    The TF-IDF term needs the trained vocabulary and is always 0 locally.
    """
    lowered = clip(text).lower()
    tokens = tokenize(lowered)
    words = lowered.split()

    matches = sum(
        1 for phrases in FAKE_INDICATORS.values() for phrase in phrases if phrase in lowered
    )
    generic = min(matches * 15, 100)

    if len(words) < 10:
        length = 70
    elif len(words) > 200:
        length = 40
    elif len(words) < 30:
        length = 60
    else:
        length = 20

    if not tokens:
        vocabulary = 50
    else:
        diversity = len(set(tokens)) / len(tokens)
        vocabulary = 80 if diversity < 0.5 else 50 if diversity < 0.7 else 20

    pattern = 0
    if text.isupper() and len(text) > 20:
        pattern += 20
    if text.count("!") > 3:
        pattern += 15
    if words:
        counts: dict[str, int] = {}
        for w in words:
            counts[w] = counts.get(w, 0) + 1
        if max(counts.values()) > 3:
            pattern += 20
    if "http" in lowered or "www." in lowered or "bit.ly" in lowered:
        pattern += 25

    return SvmFeatures(
        generic=generic,
        length=length,
        vocabulary=vocabulary,
        pattern=min(pattern, 100),
        tfidf=0.0,
    )


class SayamAdapter(ExternalAgentAdapter):
    """SVM classifier over TF-IDF features."""

    AGENT_ID = "sayamML"
    SERVICE_NAME = "SayamAlt ML classifier"

    LABEL_CONFIDENCE = {
        "fake": 75.0,
        "deceptive": 75.0,
        "cg": 75.0,
        "genuine": 25.0,
        "real": 25.0,
        "or": 25.0,
    }
    MIN_TEXT_CHARS = 10

    def __init__(self, endpoint: str, http_client=None):
        super().__init__(
            endpoint,
            http_client,
            name="SayamAlt ML Classifier",
            description="TF-IDF + SVM fake review classifier",
        )

    def get_capabilities(self) -> list[str]:
        return ["fake_review_classification", "tfidf_features"]

    def build_payload(self, request: AnalysisRequest) -> dict[str, Any]:
        return {"text": clip(request.text or "")}

    def normalize(self, response: dict[str, Any], request: AnalysisRequest) -> Optional[AgentResult]:
        probability = response.get("fake_probability", response.get("probability"))
        label = str(response.get("prediction", response.get("label", ""))).lower()

        if isinstance(probability, (int, float)) and not isinstance(probability, bool):
            if not 0.0 <= probability <= 1.0:
                raise MalformedResponseError(self.agent_id, f"probability {probability} outside [0, 1]")
            confidence = float(probability) * 100
        elif label in self.LABEL_CONFIDENCE:
            confidence = self.LABEL_CONFIDENCE[label]
        else:
            raise MalformedResponseError(self.agent_id, "neither probability nor known prediction label")

        evidence = [f"SVM classifier: {confidence:.0f}% fake probability"]
        if label:
            evidence.append(f"Predicted class: {label}")
        return self.build_result(
            confidence,
            evidence,
            raw_score={"prediction": label or None, "probability": probability},
        )

    def fallback(self, request: AnalysisRequest) -> Optional[AgentResult]:
        text = request.text or ""
        if len(text.strip()) < self.MIN_TEXT_CHARS:
            return self.build_result(
                50.0,
                ["Text too short for feature extraction"],
                source=ResultSource.FALLBACK,
            )

        features = extract_svm_features(text)
        score = features.weighted_score()
        evidence = [f"SVM feature approximation: {score:.0f}% fake probability"]
        if features.generic >= 30:
            evidence.append("Multiple generic or promotional review phrases")
        if features.vocabulary >= 80:
            evidence.append("Very low vocabulary diversity")
        if features.pattern >= 25:
            evidence.append("Suspicious formatting (caps, exclamations, repetition or links)")
        return self.build_result(
            score,
            evidence,
            raw_score=features.__dict__.copy(),
            source=ResultSource.FALLBACK,
        )


__all__ = ["SayamAdapter", "SvmFeatures", "extract_svm_features"]
