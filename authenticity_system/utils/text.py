"""Text helpers shared by heuristic detectors and adapter fallbacks."""

import re
from typing import Iterable, List, Pattern

from authenticity_system.config.scoring import MAX_ANALYZED_CHARS

_WORD_RE = re.compile(r"[a-z0-9']+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def clip(text: str, limit: int = MAX_ANALYZED_CHARS) -> str:
    """Truncate text so heuristic work stays bounded."""
    return text[:limit]


def tokenize(text: str) -> List[str]:
    """Lowercase word tokens."""
    return _WORD_RE.findall(text.lower())


def split_sentences(text: str) -> List[str]:
    """Non-empty sentences split on terminal punctuation."""
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]


def compile_patterns(patterns: Iterable[str]) -> List[Pattern[str]]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


def count_pattern_matches(patterns: Iterable[Pattern[str]], text: str) -> int:
    """Number of distinct patterns that match somewhere in text."""
    return sum(1 for p in patterns if p.search(text))


def count_phrases(phrases: Iterable[str], lowered_text: str) -> int:
    """Number of distinct phrases contained in already-lowercased text."""
    return sum(1 for phrase in phrases if phrase in lowered_text)


def matching_words(words: Iterable[str], tokens: Iterable[str]) -> List[str]:
    """Vocabulary words that occur as whole tokens, in vocabulary order."""
    token_set = set(tokens)
    return [w for w in words if w in token_set]


def sentence_length_stats(text: str) -> tuple[int, float, float]:
    """Return (sentence_count, mean_words, variance_words)."""
    lengths = [len(s.split()) for s in split_sentences(text)]
    if not lengths:
        return 0, 0.0, 0.0
    mean = sum(lengths) / len(lengths)
    variance = sum((n - mean) ** 2 for n in lengths) / len(lengths)
    return len(lengths), mean, variance


def jaccard_similarity(a: set, b: set) -> float:
    if not a and not b:
        return 1.0
    union = a | b
    return len(a & b) / len(union) if union else 0.0


__all__ = [
    "clip",
    "tokenize",
    "split_sentences",
    "compile_patterns",
    "count_pattern_matches",
    "count_phrases",
    "matching_words",
    "sentence_length_stats",
    "jaccard_similarity",
]
