"""
Ranking of candidate vectors against a query vector.

rank() scores every candidate, drops those below the threshold, sorts
best-first, truncates to max_results and assigns dense 1-based ranks.

Ordering is fully deterministic: equal scores keep the candidates'
original relative order (the candidate index is an explicit secondary
sort key).
"""

import time
from typing import List, Mapping, Optional, Sequence, Union

from audiorank.core.logging import get_logger
from audiorank.core.models import (
    RankingResult,
    SimilarityMethod,
    SimilarityResult,
    interpret_similarity,
)
from audiorank.core.similarity import VectorLike, coerce_method, score

logger = get_logger(__name__)

# Confidence bonus per metric
METHOD_CONFIDENCE_BONUS = {
    SimilarityMethod.COSINE: 0.2,
    SimilarityMethod.WEIGHTED: 0.1,
    SimilarityMethod.EUCLIDEAN: 0.1,
    SimilarityMethod.JACCARD: 0.05,
}


class RankingError(Exception):
    """Raised when ranking parameters are invalid."""
    pass


def result_confidence(similarity: float, method: SimilarityMethod) -> float:
    """
    Confidence for a single ranked result.

    0.5 base, plus 0.4 x score, plus a per-metric bonus, clamped to [0, 1].
    """
    confidence = 0.5 + similarity * 0.4 + METHOD_CONFIDENCE_BONUS.get(method, 0.0)
    return max(min(confidence, 1.0), 0.0)


def rank(
    query: VectorLike,
    candidates: Sequence[VectorLike],
    method: Union[SimilarityMethod, str] = SimilarityMethod.COSINE,
    threshold: Optional[float] = 0.0,
    max_results: int = 10,
    include_details: bool = False,
    weights: Optional[Mapping[str, float]] = None,
    strict_dimensions: bool = False,
) -> RankingResult:
    """
    Rank candidate vectors by similarity to a query vector.

    Args:
        query: Query vector
        candidates: Candidate vectors, in caller order
        method: Similarity metric, enum or id string
        threshold: Minimum score to keep (scores strictly below are
                   dropped). The 0.0 default drops negative scores;
                   None keeps every candidate.
        max_results: Maximum number of results to return
        include_details: Attach ScoreDetails to each result
        weights: Band weights for the weighted metric
        strict_dimensions: Raise on dimension mismatch instead of scoring 0.0

    Returns:
        RankingResult with results best-first. processed_candidates counts
        survivors of the threshold before truncation; average_similarity
        is over the returned results only.

    Raises:
        UnsupportedMethodError: If the method id is unknown
        RankingError: If max_results is less than 1
    """
    method = coerce_method(method)
    if max_results < 1:
        raise RankingError(f"max_results must be at least 1, got {max_results}")

    start = time.perf_counter()

    # Step 1: Score every candidate in input order
    scored = []
    for index, candidate in enumerate(candidates):
        similarity, details = score(
            query,
            candidate,
            method,
            weights=weights,
            include_details=include_details,
            strict_dimensions=strict_dimensions,
        )
        # Step 2: Threshold filter
        if threshold is not None and similarity < threshold:
            continue
        scored.append((index, similarity, details))

    # Step 3: Best first, ties in original order
    scored.sort(key=lambda item: (-item[1], item[0]))

    # Step 4: Truncate and assign dense ranks
    results: List[SimilarityResult] = [
        SimilarityResult(
            candidate_index=index,
            score=similarity,
            rank=position + 1,
            confidence=result_confidence(similarity, method),
            details=details,
            interpretation=interpret_similarity(similarity),
        )
        for position, (index, similarity, details) in enumerate(scored[:max_results])
    ]

    average = sum(r.score for r in results) / len(results) if results else 0.0
    elapsed_ms = (time.perf_counter() - start) * 1000

    logger.info(
        "candidates_ranked",
        method=method.value,
        total_candidates=len(candidates),
        processed_candidates=len(scored),
        returned=len(results),
        processing_time_ms=round(elapsed_ms, 2),
    )

    return RankingResult(
        results=results,
        total_candidates=len(candidates),
        processed_candidates=len(scored),
        average_similarity=average,
        method=method,
        processing_time_ms=elapsed_ms,
    )
