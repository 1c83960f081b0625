"""Duplicate and near-duplicate review detection against a reference set."""

from typing import Optional

from authenticity_system.agents.detectors.base_detector import HeuristicDetector
from authenticity_system.config.scoring import MAX_REFERENCE_TEXTS
from authenticity_system.data_management.schemas import AgentResult, AnalysisRequest
from authenticity_system.utils.text import clip, jaccard_similarity, tokenize


def _normalize(text: str) -> str:
    return " ".join(tokenize(text))


class DuplicateDetector(HeuristicDetector):
    """
    Compares the review's token set with each reference review.

    Scoring (best match wins):
        - Exact duplicate (same normalized tokens): 90
        - Jaccard similarity > 0.85: 70
        - Jaccard similarity > 0.6: 45
        - Otherwise: 30 x best similarity

    At most MAX_REFERENCE_TEXTS references are compared.
    """

    AGENT_ID = "duplicate"

    EXACT_SCORE = 90
    NEAR_DUPLICATE_SCORE = 70
    SIMILAR_SCORE = 45
    BACKGROUND_SCALE = 30

    NEAR_DUPLICATE_THRESHOLD = 0.85
    SIMILAR_THRESHOLD = 0.6

    def __init__(self, max_references: int = MAX_REFERENCE_TEXTS):
        super().__init__(
            name="Duplicate Detection",
            description="Token-set similarity against reference reviews",
        )
        self.max_references = max_references

    def get_capabilities(self) -> list[str]:
        return ["exact_duplicates", "near_duplicates"]

    def detect(self, request: AnalysisRequest) -> Optional[AgentResult]:
        text = clip(request.text or "")
        normalized = _normalize(text)
        tokens = set(normalized.split())
        if not tokens:
            return None

        references = [
            (idx, r) for idx, r in enumerate((request.reference_texts or [])[: self.max_references])
            if r and r.strip()
        ]
        if not references:
            return None

        best_similarity = 0.0
        best_index = -1
        exact_indices: list[int] = []
        near_count = 0

        for idx, reference in references:
            ref_normalized = _normalize(clip(reference))
            if ref_normalized == normalized:
                exact_indices.append(idx)
                similarity = 1.0
            else:
                similarity = jaccard_similarity(tokens, set(ref_normalized.split()))
            if similarity > self.NEAR_DUPLICATE_THRESHOLD:
                near_count += 1
            if similarity > best_similarity:
                best_similarity = similarity
                best_index = idx

        evidence: list[str] = []
        if exact_indices:
            score = self.EXACT_SCORE
            evidence.append(f"Exact duplicate of reference review #{exact_indices[0]}")
        elif best_similarity > self.NEAR_DUPLICATE_THRESHOLD:
            score = self.NEAR_DUPLICATE_SCORE
            evidence.append(
                f"Near-duplicate of reference review #{best_index} (similarity {best_similarity:.2f})"
            )
        elif best_similarity > self.SIMILAR_THRESHOLD:
            score = self.SIMILAR_SCORE
            evidence.append(
                f"Substantially similar to reference review #{best_index} (similarity {best_similarity:.2f})"
            )
        else:
            score = round(self.BACKGROUND_SCALE * best_similarity, 2)
            evidence.append(f"No duplicates among {len(references)} reference reviews")

        if near_count > 1:
            evidence.append(f"{near_count} reference reviews are near-copies of this text")

        raw = {
            "best_similarity": round(best_similarity, 4),
            "best_index": best_index,
            "exact_matches": len(exact_indices),
            "compared": len(references),
        }
        return self.build_result(score, evidence, raw_score=raw)


__all__ = ["DuplicateDetector"]
