"""
AudioRank - Similarity Ranking for Audio-Production Content

Compares a query document (session notes, plugin descriptions, client
feedback, technical specs) against candidate documents and returns the
most similar candidates with a numeric confidence.
"""

from audiorank.core.engine import rank_request, embed_content, validate_request, RequestValidationError
from audiorank.core.models import (
    ContentDescriptor,
    ContentType,
    EmbeddingModel,
    FeatureVector,
    RankingRequest,
    RankingResult,
    ScoreDetails,
    SimilarityMethod,
    SimilarityResult,
)
from audiorank.core.synthesizer import (
    synthesize,
    SynthesisError,
    EmptyContentError,
    UnsupportedModelError,
)
from audiorank.core.similarity import score, UnsupportedMethodError, DimensionMismatchError
from audiorank.core.ranking import rank
from audiorank.core.batch import (
    run_batch,
    embed_batch,
    rank_batch,
    rank_queries,
    BatchItem,
    BatchReport,
    JobFault,
)
from audiorank.core.config import Settings, get_settings
from audiorank.core.logging import configure_logging

__version__ = "0.1.0"
__all__ = [
    # Ranking pipeline
    "rank_request",
    "embed_content",
    "validate_request",
    "RequestValidationError",
    "synthesize",
    "score",
    "rank",
    # Batch
    "run_batch",
    "embed_batch",
    "rank_batch",
    "rank_queries",
    "BatchItem",
    "BatchReport",
    "JobFault",
    # Models
    "ContentDescriptor",
    "ContentType",
    "EmbeddingModel",
    "FeatureVector",
    "RankingRequest",
    "RankingResult",
    "ScoreDetails",
    "SimilarityMethod",
    "SimilarityResult",
    # Faults
    "SynthesisError",
    "EmptyContentError",
    "UnsupportedModelError",
    "UnsupportedMethodError",
    "DimensionMismatchError",
    # Ambient
    "Settings",
    "get_settings",
    "configure_logging",
]
