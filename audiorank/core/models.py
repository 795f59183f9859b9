"""
Data models for the similarity ranking engine.

These enums and dataclasses define the structured types used throughout
the ranking pipeline. They are intentionally simple and transparent:
descriptors go in, feature vectors and ranked results come out.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union
from enum import Enum
import numpy as np
from numpy.typing import NDArray


# Type alias for feature vectors
Vector = NDArray[np.float64]


class ContentType(Enum):
    """
    Kind of content being compared.

    The content type selects bias tokens, keyword tables and pattern
    blocks during synthesis. GENERIC is the fallback for anything the
    synthesizer has no dedicated tables for.
    """
    SESSION_NOTES = "session_notes"
    PLUGIN_DESCRIPTION = "plugin_description"
    FEEDBACK = "feedback"
    TECHNICAL_SPEC = "technical_spec"
    EQUIPMENT_LIST = "equipment_list"
    AUDIO_DESCRIPTION = "audio_description"
    MIX_NOTES = "mix_notes"
    GENERIC = "text"

    @classmethod
    def coerce(cls, value: Union["ContentType", str]) -> "ContentType":
        """Convert a string tag to a ContentType, falling back to GENERIC."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.GENERIC


class EmbeddingModel(Enum):
    """Synthesis strategy used to build a feature vector."""
    AUDIO_DOMAIN = "audio-domain"
    GENERAL = "general"
    TECHNICAL = "technical"
    SEMANTIC = "semantic"


class SimilarityMethod(Enum):
    """Similarity metric used to compare two feature vectors."""
    COSINE = "cosine"
    EUCLIDEAN = "euclidean"    # 1 - squared distance / approximate max
    JACCARD = "jaccard"        # Thresholded set overlap
    WEIGHTED = "weighted"      # Band-weighted cosine


@dataclass(frozen=True)
class ContentDescriptor:
    """
    A piece of content to be turned into a feature vector.

    Attributes:
        text: The raw content text
        content_type: Declared content type tag
        model: Synthesis model to use
    """
    text: str
    content_type: ContentType = ContentType.GENERIC
    model: EmbeddingModel = EmbeddingModel.AUDIO_DOMAIN


@dataclass(frozen=True, eq=False)
class FeatureVector:
    """
    Fixed-length numeric representation of a piece of content.

    The values array is made read-only on construction so a vector can be
    shared between workers without copying.

    Attributes:
        values: float64 array of length `dimensions`
        dimensions: Declared vector length
        model: Model that produced the vector
        content_type: Content type the vector was synthesized for
        normalized: Whether values were L2-normalized
        confidence: Heuristic synthesis confidence (0.0 to 1.0)
        tokens: Estimated token count of the source text
    """
    values: Vector
    dimensions: int
    model: EmbeddingModel = EmbeddingModel.AUDIO_DOMAIN
    content_type: ContentType = ContentType.GENERIC
    normalized: bool = False
    confidence: float = 1.0
    tokens: int = 0

    def __post_init__(self):
        values = np.array(self.values, dtype=np.float64)
        if values.ndim != 1 or values.shape[0] != self.dimensions:
            raise ValueError(
                f"Vector length {values.size} does not match declared "
                f"dimensions {self.dimensions}"
            )
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def magnitude(self) -> float:
        """Euclidean norm of the vector."""
        return float(np.linalg.norm(self.values))


@dataclass
class ScoreDetails:
    """
    Metric-specific breakdown of a single similarity score.

    Only the field matching the metric is populated. Useful for
    debugging and test assertions, never used for scoring.

    Attributes:
        method: Metric that produced the score
        cosine_similarity: Raw cosine (cosine and weighted metrics)
        squared_distance: Sum of squared differences (euclidean metric)
        jaccard_similarity: Raw set overlap ratio (jaccard metric)
        overlapping_features: Dimension indices present in both sets
        unique_features: Dimension indices present in only one set
        feature_weights: Resolved band weights (weighted metric)
        analysis_text: One-line description of what the metric means
    """
    method: SimilarityMethod
    cosine_similarity: Optional[float] = None
    squared_distance: Optional[float] = None
    jaccard_similarity: Optional[float] = None
    overlapping_features: List[str] = field(default_factory=list)
    unique_features: List[str] = field(default_factory=list)
    feature_weights: Dict[str, float] = field(default_factory=dict)
    analysis_text: str = ""

    def feature_summary(self) -> Optional[str]:
        """Overlap counts for set-based metrics, None for the others."""
        if self.method is not SimilarityMethod.JACCARD:
            return None
        return (
            f"Overlapping: {len(self.overlapping_features)} | "
            f"Unique: {len(self.unique_features)}"
        )


@dataclass
class SimilarityResult:
    """
    One ranked candidate.

    Attributes:
        candidate_index: Position of the candidate in the input sequence
        score: Similarity score (range depends on the metric)
        rank: Dense 1-based rank after filtering and truncation
        confidence: Heuristic confidence in the score (0.0 to 1.0)
        details: Optional metric breakdown
        interpretation: Human-readable label for the score
    """
    candidate_index: int
    score: float
    rank: int
    confidence: float
    details: Optional[ScoreDetails] = None
    interpretation: str = ""


@dataclass
class RankingResult:
    """
    Complete result of ranking a query against a candidate set.

    Attributes:
        results: Ranked results, best first
        total_candidates: Number of candidates supplied
        processed_candidates: Number surviving the threshold (before truncation)
        average_similarity: Mean score of the returned results
        method: Metric used for scoring
        processing_time_ms: Wall time spent ranking
    """
    results: List[SimilarityResult]
    total_candidates: int
    processed_candidates: int
    average_similarity: float
    method: SimilarityMethod = SimilarityMethod.COSINE
    processing_time_ms: float = 0.0

    @property
    def top(self) -> Optional[SimilarityResult]:
        """Best-ranked result, if any."""
        return self.results[0] if self.results else None

    def candidate_indices(self) -> List[int]:
        """Candidate indices in rank order."""
        return [r.candidate_index for r in self.results]


@dataclass
class RankingRequest:
    """
    A query plus the candidates to rank against it.

    Attributes:
        query: Content to find similar candidates for
        candidates: Candidate contents, in caller order
        method: Similarity metric
        max_results: Maximum number of results to return
        threshold: Minimum score to keep (default 0.0); None disables filtering
        include_details: Whether to attach ScoreDetails to each result
        weights: Band weights for the weighted metric
    """
    query: ContentDescriptor
    candidates: List[ContentDescriptor]
    method: SimilarityMethod = SimilarityMethod.COSINE
    max_results: int = 10
    threshold: Optional[float] = 0.0
    include_details: bool = False
    weights: Optional[Dict[str, float]] = None


# Interpretation thresholds for similarity scores.
# Heuristics for display only, calibrated against cosine scores of
# synthesized vectors rather than any ground truth.
SIMILARITY_THRESHOLDS = {
    "strong": 0.90,      # >= 0.90: Near-duplicate content
    "moderate": 0.75,    # 0.75-0.90: Related content
    "weak": 0.50,        # 0.50-0.75: Loosely related
    # < 0.50: Likely unrelated
}


def interpret_similarity(score: float) -> str:
    """
    Convert a similarity score to a human-readable interpretation.

    Args:
        score: Similarity score (typically 0.0 to 1.0)

    Returns:
        Human-readable interpretation string
    """
    if score >= SIMILARITY_THRESHOLDS["strong"]:
        return "Strong"
    elif score >= SIMILARITY_THRESHOLDS["moderate"]:
        return "Moderate"
    elif score >= SIMILARITY_THRESHOLDS["weak"]:
        return "Weak"
    else:
        return "Unrelated"
