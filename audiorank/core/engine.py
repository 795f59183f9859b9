"""
Main ranking engine orchestrating the full pipeline.

This module provides the high-level API for ranking candidate contents
against a query content. It coordinates:
1. Feature vector synthesis for the query
2. Feature vector synthesis for every candidate
3. Pairwise scoring, filtering, sorting and truncation

The primary entry point is rank_request(), which takes a RankingRequest
of raw descriptors and returns a structured RankingResult.

Design Principles:
- Orchestration only: delegates to the synthesizer and ranking modules
- Fail-fast: a bad query, candidate or method raises immediately
- Deterministic: same inputs produce same outputs
- No side effects: pure computation, no persistence or external calls
"""

from typing import List, Optional

from audiorank.core.config import Settings, get_settings
from audiorank.core.models import (
    ContentDescriptor,
    FeatureVector,
    RankingRequest,
    RankingResult,
)
from audiorank.core.ranking import rank
from audiorank.core.similarity import coerce_method
from audiorank.core.synthesizer import synthesize


# Boundary limits upstream callers are expected to enforce
MAX_TEXT_LENGTH = 100_000
MAX_CANDIDATES = 1000
MAX_RESULTS_LIMIT = 100


class RequestValidationError(ValueError):
    """Raised when a ranking request violates boundary limits."""
    pass


def validate_request(request: RankingRequest) -> None:
    """
    Validate a ranking request against boundary limits.

    Checks text lengths, candidate count, max_results and threshold range.
    The engine itself does not call this; it is for the layer that turns
    external input into requests.

    Args:
        request: The request to check

    Raises:
        RequestValidationError: On the first violated limit
    """
    if len(request.query.text or "") > MAX_TEXT_LENGTH:
        raise RequestValidationError(
            f"Query text exceeds {MAX_TEXT_LENGTH} characters"
        )

    if not request.candidates:
        raise RequestValidationError("At least one candidate is required")

    if len(request.candidates) > MAX_CANDIDATES:
        raise RequestValidationError(
            f"Too many candidates: {len(request.candidates)} (max {MAX_CANDIDATES})"
        )

    for i, candidate in enumerate(request.candidates):
        if len(candidate.text or "") > MAX_TEXT_LENGTH:
            raise RequestValidationError(
                f"Candidate at index {i} exceeds {MAX_TEXT_LENGTH} characters"
            )

    if not 1 <= request.max_results <= MAX_RESULTS_LIMIT:
        raise RequestValidationError(
            f"max_results must be between 1 and {MAX_RESULTS_LIMIT}, got {request.max_results}"
        )

    if request.threshold is not None and not 0.0 <= request.threshold <= 1.0:
        raise RequestValidationError(
            f"threshold must be between 0.0 and 1.0, got {request.threshold}"
        )


def embed_content(
    content: ContentDescriptor,
    settings: Optional[Settings] = None,
) -> FeatureVector:
    """
    Synthesize a feature vector using the configured dimensions and normalization.

    Args:
        content: Descriptor to synthesize
        settings: Settings to use; defaults to get_settings()

    Returns:
        FeatureVector for the content

    Raises:
        SynthesisError: If the content cannot be synthesized
    """
    settings = settings or get_settings()
    return synthesize(
        content,
        dimensions=settings.dimensions,
        normalize=settings.normalize,
    )


def rank_request(
    request: RankingRequest,
    settings: Optional[Settings] = None,
) -> RankingResult:
    """
    Rank a request's candidates against its query.

    This is the main entry point for the ranking engine. It:
    1. Checks the similarity method (before any synthesis)
    2. Synthesizes the query and each candidate
    3. Scores, filters, sorts and truncates via rank()

    Args:
        request: Query, candidates and ranking options
        settings: Settings to use; defaults to get_settings()

    Returns:
        RankingResult with results best-first

    Raises:
        UnsupportedMethodError: If the method id is unknown
        SynthesisError: If the query or any candidate cannot be synthesized

    Example:
        >>> request = RankingRequest(
        ...     query=ContentDescriptor("vocal tracking with a tube preamp",
        ...                             ContentType.SESSION_NOTES),
        ...     candidates=[ContentDescriptor(note, ContentType.SESSION_NOTES)
        ...                 for note in notes],
        ...     max_results=3,
        ... )
        >>> result = rank_request(request)
        >>> print(result.top.candidate_index, f"{result.top.score:.2f}")
    """
    settings = settings or get_settings()
    method = coerce_method(request.method)

    query_vector = embed_content(request.query, settings)
    candidate_vectors: List[FeatureVector] = [
        embed_content(candidate, settings) for candidate in request.candidates
    ]

    return rank(
        query_vector,
        candidate_vectors,
        method=method,
        threshold=request.threshold,
        max_results=request.max_results,
        include_details=request.include_details,
        weights=request.weights,
        strict_dimensions=settings.strict_dimensions,
    )
