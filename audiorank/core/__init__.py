"""
Core similarity ranking engine.

This module provides the foundational logic for:
- Feature vector synthesis from content text
- Similarity scoring (cosine, euclidean, jaccard, weighted)
- Threshold filtering, ordering and truncation of candidates
- Bounded-concurrency batch execution
"""

from audiorank.core.synthesizer import (
    synthesize,
    normalize_vector,
    SynthesisError,
    EmptyContentError,
    UnsupportedModelError,
    InvalidDimensionsError,
)
from audiorank.core.similarity import (
    score,
    cosine_similarity,
    UnsupportedMethodError,
    DimensionMismatchError,
)
from audiorank.core.ranking import rank, RankingError
from audiorank.core.engine import rank_request, embed_content, validate_request
from audiorank.core.batch import run_batch, embed_batch, rank_batch, rank_queries, JobFault
from audiorank.core.models import (
    ContentDescriptor,
    ContentType,
    EmbeddingModel,
    FeatureVector,
    RankingRequest,
    RankingResult,
    SimilarityMethod,
    SimilarityResult,
)

__all__ = [
    # Synthesis
    "synthesize",
    "normalize_vector",
    "SynthesisError",
    "EmptyContentError",
    "UnsupportedModelError",
    "InvalidDimensionsError",
    # Scoring
    "score",
    "cosine_similarity",
    "UnsupportedMethodError",
    "DimensionMismatchError",
    # Ranking
    "rank",
    "RankingError",
    "rank_request",
    "embed_content",
    "validate_request",
    # Batch
    "run_batch",
    "embed_batch",
    "rank_batch",
    "rank_queries",
    "JobFault",
    # Models
    "ContentDescriptor",
    "ContentType",
    "EmbeddingModel",
    "FeatureVector",
    "RankingRequest",
    "RankingResult",
    "SimilarityMethod",
    "SimilarityResult",
]
