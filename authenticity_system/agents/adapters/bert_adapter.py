"""Adapter for the BERT transformer computer-generated text classifier.

Wire format:
    POST {endpoint}  {"text": ..., "model": "bert-base-uncased", "return_attention": false}
    -> {"label": "CG" | "OR", "cg_probability": 0.0-1.0}

Older deployments report the probability as "fake_score". The label alone is
not trusted; a probability is required.

Fallback: linguistic approximation of what the transformer picks up on
(formal phrasing, template openings, unqualified praise, uniform sentence
length, generic phrases, vagueness, promotional density).
"""

from typing import Any, Optional

from authenticity_system.agents.adapters.base_adapter import ExternalAgentAdapter
from authenticity_system.config.detection_patterns import (
    AI_SELF_REFERENCE_PATTERNS,
    FORMAL_PATTERNS,
    GENERIC_PHRASES,
    NEGATIVE_WORDS,
    PROMOTIONAL_WORDS,
    SPECIFICITY_PATTERNS,
    SUPERLATIVE_WORDS,
    TEMPLATE_OPENING_PATTERNS,
)
from authenticity_system.data_management.schemas import (
    AgentResult,
    AgentVerdict,
    AnalysisRequest,
    ResultSource,
)
from authenticity_system.errors import MalformedResponseError
from authenticity_system.utils.text import (
    clip,
    compile_patterns,
    count_pattern_matches,
    count_phrases,
    matching_words,
    sentence_length_stats,
    tokenize,
)

_FORMAL = compile_patterns(FORMAL_PATTERNS)
_TEMPLATE_OPENINGS = compile_patterns(TEMPLATE_OPENING_PATTERNS)
_SPECIFICITY = compile_patterns(SPECIFICITY_PATTERNS)
_AI_REFERENCE = compile_patterns(AI_SELF_REFERENCE_PATTERNS)


def classify_generated_text(text: str) -> tuple[float, list[str]]:
    """
    Heuristic probability (0-100) that text is computer-generated.

    Returns:
        Tuple of (score, evidence)
    """
    text = clip(text).strip()
    tokens = tokenize(text)
    lowered = text.lower()
    score = 0.0
    evidence: list[str] = []

    formal = count_pattern_matches(_FORMAL, text)
    if formal:
        score += formal * 15
        evidence.append(f"Formal/robotic phrasing ({formal})")

    openings = count_pattern_matches(_TEMPLATE_OPENINGS, text)
    if openings:
        score += openings * 20
        evidence.append(f"Template-like structure ({openings})")

    positives = matching_words(SUPERLATIVE_WORDS, tokens)
    negatives = matching_words(NEGATIVE_WORDS, tokens)
    if len(positives) >= 3 and not negatives:
        score += 25
        evidence.append("Excessive perfection: praise without any caveat")

    sentences, mean_words, variance = sentence_length_stats(text)
    if sentences >= 3 and variance < 5 and mean_words > 10:
        score += 20
        evidence.append("Unnaturally consistent sentence length")

    generic = count_phrases(GENERIC_PHRASES, lowered)
    if generic:
        score += generic * 18
        evidence.append(f"Generic product description phrases ({generic})")

    if count_pattern_matches(_SPECIFICITY, text) == 0 and len(tokens) > 30:
        score += 15
        evidence.append("Long but vague: no specific details")

    if len(matching_words(PROMOTIONAL_WORDS, tokens)) >= 3:
        score += 25
        evidence.append("Promotional language density")

    return min(score, 100.0), evidence


class BertAdapter(ExternalAgentAdapter):
    """Transformer classifier for computer-generated (CG) vs original (OR) text."""

    AGENT_ID = "bertTransformer"
    SERVICE_NAME = "BERT API"

    MODEL_NAME = "bert-base-uncased"
    # CG probability at or above this split is FAKE, below is GENUINE
    CG_SPLIT = 0.5
    HIGH_CG_PROBABILITY = 0.7
    BREVITY_WORDS = 20

    def __init__(self, endpoint: str, http_client=None):
        super().__init__(
            endpoint,
            http_client,
            name="BERT Transformer",
            description="Transformer classifier for computer-generated text",
        )

    def get_capabilities(self) -> list[str]:
        return ["generated_text_classification"]

    def build_payload(self, request: AnalysisRequest) -> dict[str, Any]:
        return {
            "text": clip(request.text or ""),
            "model": self.MODEL_NAME,
            "return_attention": False,
        }

    def normalize(self, response: dict[str, Any], request: AnalysisRequest) -> Optional[AgentResult]:
        probability = response.get("cg_probability", response.get("fake_score"))
        if isinstance(probability, bool) or not isinstance(probability, (int, float)):
            raise MalformedResponseError(self.agent_id, "missing cg_probability")
        probability = float(probability)
        if not 0.0 <= probability <= 1.0:
            raise MalformedResponseError(self.agent_id, f"cg_probability {probability} outside [0, 1]")

        verdict = AgentVerdict.FAKE if probability >= self.CG_SPLIT else AgentVerdict.GENUINE
        evidence = self._red_flags(request.text or "", probability)
        return self.build_result(
            probability * 100,
            evidence,
            raw_score={"label": response.get("label"), "cg_probability": probability},
            verdict=verdict,
        )

    def fallback(self, request: AnalysisRequest) -> Optional[AgentResult]:
        score, evidence = classify_generated_text(request.text or "")
        probability = score / 100
        evidence.extend(self._red_flags(request.text or "", probability, include_summary=False))
        verdict = AgentVerdict.FAKE if probability >= self.CG_SPLIT else AgentVerdict.GENUINE
        return self.build_result(
            score,
            evidence,
            raw_score={"cg_probability": probability},
            verdict=verdict,
            source=ResultSource.FALLBACK,
        )

    def _red_flags(self, text: str, probability: float, include_summary: bool = True) -> list[str]:
        flags: list[str] = []
        if include_summary:
            if probability > self.HIGH_CG_PROBABILITY:
                flags.append(
                    f"Transformer detected {probability:.0%} probability of computer-generated text"
                )
            else:
                flags.append(f"Transformer estimates {probability:.0%} probability of generated text")
        if count_pattern_matches(_AI_REFERENCE, text):
            flags.append("Text explicitly refers to itself as AI-generated")
        if probability > self.CG_SPLIT and len(text.split()) < self.BREVITY_WORDS:
            flags.append("Short text with high generated-text probability (common bot pattern)")
        return flags


__all__ = ["BertAdapter", "classify_generated_text"]
