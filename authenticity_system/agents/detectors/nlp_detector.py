"""Linguistic heuristics for generated or templated text."""

from typing import Optional

from authenticity_system.agents.detectors.base_detector import HeuristicDetector
from authenticity_system.config.detection_patterns import (
    GENERIC_PHRASES,
    GPT_PHRASE_PATTERNS,
    SPECIFICITY_PATTERNS,
    TEMPLATE_PHRASES,
)
from authenticity_system.data_management.schemas import AgentResult, AnalysisRequest
from authenticity_system.utils.text import (
    clip,
    compile_patterns,
    count_pattern_matches,
    count_phrases,
    sentence_length_stats,
    tokenize,
)


class NlpDetector(HeuristicDetector):
    """
    Detects phrasing typical of language-model output and review templates.

    Signals:
        - Text under 10 characters scores a flat 50 (too short to judge)
        - >= 2 generated-text phrasings: +35
        - >= 3 template phrases: +25
        - Each generic product phrase: +18
        - >= 3 sentences, low length variance, long sentences: +20
        - Long text without any concrete detail: +15
        - Low vocabulary diversity: +15
    """

    AGENT_ID = "nlp"

    MIN_TEXT_CHARS = 10
    SHORT_TEXT_SCORE = 50

    GPT_MIN_MATCHES = 2
    GPT_POINTS = 35
    TEMPLATE_MIN_MATCHES = 3
    TEMPLATE_POINTS = 25
    GENERIC_POINTS_EACH = 18
    UNIFORMITY_POINTS = 20
    VAGUENESS_POINTS = 15
    LOW_DIVERSITY_POINTS = 15

    UNIFORMITY_MIN_SENTENCES = 3
    UNIFORMITY_MAX_VARIANCE = 5.0
    UNIFORMITY_MIN_MEAN_WORDS = 10.0
    VAGUENESS_MIN_WORDS = 30
    DIVERSITY_MIN_TOKENS = 20
    DIVERSITY_THRESHOLD = 0.5

    def __init__(self):
        super().__init__(
            name="NLP Analysis",
            description="Generated-text phrasing, templates and uniformity",
        )
        self.gpt_patterns = compile_patterns(GPT_PHRASE_PATTERNS)
        self.specificity_patterns = compile_patterns(SPECIFICITY_PATTERNS)

    def get_capabilities(self) -> list[str]:
        return ["generated_text_phrasing", "template_detection", "sentence_uniformity", "specificity"]

    def detect(self, request: AnalysisRequest) -> Optional[AgentResult]:
        text = clip((request.text or "").strip())
        if len(text) < self.MIN_TEXT_CHARS:
            return self.build_result(
                self.SHORT_TEXT_SCORE,
                [f"Text too short to carry linguistic signal ({len(text)} chars)"],
                raw_score={"length": len(text)},
            )

        lowered = text.lower()
        tokens = tokenize(text)
        score = 0
        evidence: list[str] = []

        gpt_matches = count_pattern_matches(self.gpt_patterns, text)
        if gpt_matches >= self.GPT_MIN_MATCHES:
            score += self.GPT_POINTS
            evidence.append(f"Generated-text phrasing ({gpt_matches} typical constructions)")

        template_matches = count_phrases(TEMPLATE_PHRASES, lowered)
        if template_matches >= self.TEMPLATE_MIN_MATCHES:
            score += self.TEMPLATE_POINTS
            evidence.append(f"Template review phrases ({template_matches})")

        generic_matches = count_phrases(GENERIC_PHRASES, lowered)
        if generic_matches:
            score += generic_matches * self.GENERIC_POINTS_EACH
            evidence.append(f"Generic product phrases ({generic_matches})")

        sentences, mean_words, variance = sentence_length_stats(text)
        if (
            sentences >= self.UNIFORMITY_MIN_SENTENCES
            and variance < self.UNIFORMITY_MAX_VARIANCE
            and mean_words > self.UNIFORMITY_MIN_MEAN_WORDS
        ):
            score += self.UNIFORMITY_POINTS
            evidence.append(
                f"Unnaturally uniform sentences (variance {variance:.1f}, mean {mean_words:.1f} words)"
            )

        specific_matches = count_pattern_matches(self.specificity_patterns, text)
        if specific_matches == 0 and len(tokens) > self.VAGUENESS_MIN_WORDS:
            score += self.VAGUENESS_POINTS
            evidence.append("Long text without concrete details (versions, durations, devices)")

        diversity = len(set(tokens)) / len(tokens) if tokens else 1.0
        if len(tokens) >= self.DIVERSITY_MIN_TOKENS and diversity < self.DIVERSITY_THRESHOLD:
            score += self.LOW_DIVERSITY_POINTS
            evidence.append(f"Low vocabulary diversity ({diversity:.2f})")

        if not evidence:
            evidence.append("Natural phrasing with concrete details")

        raw = {
            "gpt_matches": gpt_matches,
            "template_matches": template_matches,
            "generic_matches": generic_matches,
            "specificity_matches": specific_matches,
            "diversity": round(diversity, 3),
        }
        return self.build_result(score, evidence, raw_score=raw)


__all__ = ["NlpDetector"]
