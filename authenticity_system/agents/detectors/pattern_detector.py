"""Lexical pattern detector.

Scores keyword and regex density. Each signal adds a fixed amount and the sum
is capped at 100:

| Signal                                   | Points |
|------------------------------------------|--------|
| AI self-reference ("as an AI ...")       | +40    |
| Superlative density > 0.15               | +15    |
| >= 3 superlatives and no hedging words   | +25    |
| >= 3 promotional words                   | +25    |
| Spam phrases or links                    | +30    |
| > 3 exclamation marks                    | +10    |
| Shouting (> 50% uppercase letters)       | +10    |
"""

from typing import Optional

from authenticity_system.agents.detectors.base_detector import HeuristicDetector
from authenticity_system.config.detection_patterns import (
    AI_SELF_REFERENCE_PATTERNS,
    NEGATIVE_WORDS,
    PROMOTIONAL_WORDS,
    SPAM_PHRASES,
    SUPERLATIVE_WORDS,
)
from authenticity_system.data_management.schemas import AgentResult, AnalysisRequest
from authenticity_system.utils.text import (
    clip,
    compile_patterns,
    count_pattern_matches,
    count_phrases,
    matching_words,
    tokenize,
)


class PatternDetector(HeuristicDetector):
    """
    Keyword/regex density detector over the review text.

    Usage:
        detector = PatternDetector()
        outcome = detector.evaluate(AnalysisRequest(text="As an AI, ..."))
    """

    AGENT_ID = "pattern"

    AI_REFERENCE_POINTS = 40
    SUPERLATIVE_DENSITY_POINTS = 15
    TOO_PERFECT_POINTS = 25
    PROMOTIONAL_POINTS = 25
    SPAM_POINTS = 30
    EXCLAMATION_POINTS = 10
    SHOUTING_POINTS = 10

    SUPERLATIVE_DENSITY_THRESHOLD = 0.15
    MIN_SUPERLATIVES = 3
    MIN_PROMOTIONAL_WORDS = 3
    MAX_EXCLAMATIONS = 3
    SHOUTING_RATIO = 0.5
    MIN_LETTERS_FOR_SHOUTING = 20

    def __init__(self):
        super().__init__(
            name="Pattern Analysis",
            description="Keyword and regex density signals",
        )
        self.ai_patterns = compile_patterns(AI_SELF_REFERENCE_PATTERNS)
        self.superlatives = frozenset(SUPERLATIVE_WORDS)

    def get_capabilities(self) -> list[str]:
        return ["ai_self_reference", "superlative_density", "promotional_language", "spam_links"]

    def detect(self, request: AnalysisRequest) -> Optional[AgentResult]:
        text = clip(request.text or "")
        lowered = text.lower()
        tokens = tokenize(text)

        score = 0
        evidence: list[str] = []
        signals: dict[str, float] = {}

        if count_pattern_matches(self.ai_patterns, text):
            score += self.AI_REFERENCE_POINTS
            signals["ai_self_reference"] = 1
            evidence.append("AI self-reference: text describes itself as machine-generated")

        superlative_hits = [t for t in tokens if t in self.superlatives]
        distinct_superlatives = matching_words(SUPERLATIVE_WORDS, tokens)
        negatives = matching_words(NEGATIVE_WORDS, tokens)
        density = len(superlative_hits) / len(tokens) if tokens else 0.0
        signals["superlative_density"] = round(density, 3)

        if density > self.SUPERLATIVE_DENSITY_THRESHOLD:
            score += self.SUPERLATIVE_DENSITY_POINTS
            evidence.append(f"High superlative density ({density:.0%} of words)")

        if len(distinct_superlatives) >= self.MIN_SUPERLATIVES and not negatives:
            score += self.TOO_PERFECT_POINTS
            evidence.append(
                f"Unqualified praise: {', '.join(distinct_superlatives)} with no caveats"
            )

        promotional = matching_words(PROMOTIONAL_WORDS, tokens)
        if len(promotional) >= self.MIN_PROMOTIONAL_WORDS:
            score += self.PROMOTIONAL_POINTS
            signals["promotional_words"] = len(promotional)
            evidence.append(f"Promotional vocabulary: {', '.join(promotional)}")

        spam_hits = count_phrases(SPAM_PHRASES, lowered)
        if spam_hits:
            score += self.SPAM_POINTS
            signals["spam_phrases"] = spam_hits
            evidence.append("Spam phrases or links present")

        exclamations = text.count("!")
        if exclamations > self.MAX_EXCLAMATIONS:
            score += self.EXCLAMATION_POINTS
            evidence.append(f"Excessive exclamation marks ({exclamations})")

        letters = [c for c in text if c.isalpha()]
        if len(letters) >= self.MIN_LETTERS_FOR_SHOUTING:
            caps_ratio = sum(1 for c in letters if c.isupper()) / len(letters)
            if caps_ratio > self.SHOUTING_RATIO:
                score += self.SHOUTING_POINTS
                evidence.append(f"Shouting: {caps_ratio:.0%} uppercase letters")

        if not evidence:
            evidence.append("No lexical manipulation patterns found")

        self.log.debug("pattern_scored", score=score, signals=signals)
        return self.build_result(score, evidence, raw_score=signals)


__all__ = ["PatternDetector"]
