"""
Similarity calculations between feature vectors.

Four metrics are supported:

Cosine:
    cos(theta) = (A . B) / (||A|| * ||B||), clamped to [-1, 1].
    Zero-magnitude input scores 0.0.

Euclidean (derived):
    d = sum((A_i - B_i)^2), similarity = 1 - d / (sqrt(n) * 2.0)
    The denominator is an approximation of the maximum distance, not a
    tight bound, and the result is not clamped: very
    dissimilar vectors score below zero.

Jaccard:
    Each vector becomes the set of dimension indices whose value
    exceeds 0.5; similarity = |A & B| / |A | B|, 0.0 for an empty union.

Weighted:
    Cosine over vectors multiplied element-wise by a band weight vector.
    Bands: "technical" = first quarter of dimensions, "semantic" = second
    quarter, "context" = third quarter. Unmapped dimensions weigh 1.0.

Dimension mismatch soft-fails to a score of 0.0 with no details unless
strict mode is requested, in which case DimensionMismatchError is raised.
"""

from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from audiorank.core.logging import get_logger
from audiorank.core.models import FeatureVector, ScoreDetails, SimilarityMethod, Vector

logger = get_logger(__name__)

# Component value above which a dimension counts as a Jaccard set member
JACCARD_THRESHOLD = 0.5

# Band names accepted by the weighted metric, in dimension order
WEIGHT_BANDS = ("technical", "semantic", "context")

ANALYSIS_TEXT = {
    SimilarityMethod.COSINE: (
        "Cosine similarity measures the cosine of the angle between two vectors. "
        "Higher values indicate greater similarity."
    ),
    SimilarityMethod.EUCLIDEAN: (
        "Euclidean similarity measures the straight-line distance between two points. "
        "Lower distances indicate higher similarity."
    ),
    SimilarityMethod.JACCARD: (
        "Jaccard similarity measures the ratio of intersection to union of two sets. "
        "Higher values indicate greater similarity."
    ),
    SimilarityMethod.WEIGHTED: (
        "Weighted similarity applies custom weights to different dimensions, "
        "allowing domain-specific emphasis."
    ),
}

VectorLike = Union[FeatureVector, Vector, Sequence[float]]
ScoreWithDetails = Tuple[float, Optional[ScoreDetails]]


class SimilarityError(Exception):
    """Raised when a similarity score cannot be computed."""
    pass


class UnsupportedMethodError(SimilarityError):
    """Raised when the similarity method id is unknown."""
    pass


class DimensionMismatchError(SimilarityError, ValueError):
    """Raised in strict mode when two vectors differ in length."""
    pass


def _as_array(vec: VectorLike) -> Vector:
    if isinstance(vec, FeatureVector):
        return vec.values
    return np.asarray(vec, dtype=np.float64)


def coerce_method(method: Union[SimilarityMethod, str]) -> SimilarityMethod:
    """
    Convert a method id to a SimilarityMethod.

    Raises:
        UnsupportedMethodError: If the id is not a known metric
    """
    if isinstance(method, SimilarityMethod):
        return method
    try:
        return SimilarityMethod(method)
    except ValueError:
        raise UnsupportedMethodError(f"Unsupported similarity method: {method!r}")


def _check_dimensions(vec_a: Vector, vec_b: Vector) -> None:
    if vec_a.shape != vec_b.shape:
        raise DimensionMismatchError(
            f"Vector dimension mismatch: {vec_a.shape} vs {vec_b.shape}"
        )


# =============================================================================
# Metric implementations
# =============================================================================

def _cosine(vec_a: Vector, vec_b: Vector, include_details: bool) -> ScoreWithDetails:
    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0, None

    similarity = float(np.clip(np.dot(vec_a, vec_b) / (norm_a * norm_b), -1.0, 1.0))
    details = ScoreDetails(
        method=SimilarityMethod.COSINE,
        cosine_similarity=similarity,
        analysis_text=ANALYSIS_TEXT[SimilarityMethod.COSINE],
    ) if include_details else None
    return similarity, details


def _euclidean(vec_a: Vector, vec_b: Vector, include_details: bool) -> ScoreWithDetails:
    distance = float(np.sum((vec_a - vec_b) ** 2))
    max_distance = np.sqrt(vec_a.size) * 2.0
    if max_distance == 0:
        return 0.0, None

    similarity = float(1.0 - distance / max_distance)
    details = ScoreDetails(
        method=SimilarityMethod.EUCLIDEAN,
        squared_distance=distance,
        analysis_text=ANALYSIS_TEXT[SimilarityMethod.EUCLIDEAN],
    ) if include_details else None
    return similarity, details


def _jaccard(vec_a: Vector, vec_b: Vector, include_details: bool) -> ScoreWithDetails:
    set_a = set(np.flatnonzero(vec_a > JACCARD_THRESHOLD).tolist())
    set_b = set(np.flatnonzero(vec_b > JACCARD_THRESHOLD).tolist())

    union = set_a | set_b
    if not union:
        return 0.0, None

    intersection = set_a & set_b
    similarity = len(intersection) / len(union)
    details = ScoreDetails(
        method=SimilarityMethod.JACCARD,
        jaccard_similarity=similarity,
        overlapping_features=[str(i) for i in sorted(intersection)],
        unique_features=[str(i) for i in sorted(union - intersection)],
        analysis_text=ANALYSIS_TEXT[SimilarityMethod.JACCARD],
    ) if include_details else None
    return similarity, details


def _resolved_weights(weights: Optional[Mapping[str, float]]) -> Dict[str, float]:
    weights = weights or {}
    return {band: float(weights.get(band, 1.0)) for band in WEIGHT_BANDS}


def build_weight_vector(dimensions: int, weights: Optional[Mapping[str, float]] = None) -> Vector:
    """
    Build a per-dimension weight vector from band weights.

    Args:
        dimensions: Vector length
        weights: Mapping of band name ("technical", "semantic", "context")
                 to weight. Unknown band names are ignored.

    Returns:
        Weight vector, 1.0 wherever no band weight applies
    """
    weight_vector = np.ones(dimensions, dtype=np.float64)
    if not weights:
        return weight_vector

    bounds = {
        "technical": (0, dimensions // 4),
        "semantic": (dimensions // 4, dimensions // 2),
        "context": (dimensions // 2, dimensions * 3 // 4),
    }
    for band, weight in weights.items():
        if band in bounds:
            start, end = bounds[band]
            weight_vector[start:end] = weight
    return weight_vector


def _weighted(
    vec_a: Vector,
    vec_b: Vector,
    weights: Optional[Mapping[str, float]],
    include_details: bool,
) -> ScoreWithDetails:
    weight_vector = build_weight_vector(vec_a.size, weights)
    weighted_a = vec_a * weight_vector
    weighted_b = vec_b * weight_vector
    if not np.any(weighted_a) or not np.any(weighted_b):
        return 0.0, None

    similarity, _ = _cosine(weighted_a, weighted_b, False)
    if not include_details:
        return similarity, None

    details = ScoreDetails(
        method=SimilarityMethod.WEIGHTED,
        cosine_similarity=similarity,
        feature_weights=_resolved_weights(weights),
        analysis_text=ANALYSIS_TEXT[SimilarityMethod.WEIGHTED],
    )
    return similarity, details


# =============================================================================
# Public API
# =============================================================================

def score(
    vec_a: VectorLike,
    vec_b: VectorLike,
    method: Union[SimilarityMethod, str] = SimilarityMethod.COSINE,
    weights: Optional[Mapping[str, float]] = None,
    include_details: bool = False,
    strict_dimensions: bool = False,
) -> ScoreWithDetails:
    """
    Score two vectors under the selected metric.

    Args:
        vec_a: First vector (FeatureVector or array-like)
        vec_b: Second vector
        method: Similarity metric, enum or id string
        weights: Band weights, used only by the weighted metric
        include_details: Whether to build a ScoreDetails breakdown
        strict_dimensions: Raise on length mismatch instead of scoring 0.0

    Returns:
        (score, details) where details is None unless requested and defined

    Raises:
        UnsupportedMethodError: If the method id is unknown
        DimensionMismatchError: On length mismatch in strict mode
    """
    method = coerce_method(method)
    a = _as_array(vec_a)
    b = _as_array(vec_b)

    if a.shape != b.shape:
        if strict_dimensions:
            _check_dimensions(a, b)
        logger.warning(
            "dimension_mismatch",
            method=method.value,
            dimensions_a=a.size,
            dimensions_b=b.size,
        )
        return 0.0, None

    if a.size == 0:
        return 0.0, None

    if method is SimilarityMethod.COSINE:
        return _cosine(a, b, include_details)
    if method is SimilarityMethod.EUCLIDEAN:
        return _euclidean(a, b, include_details)
    if method is SimilarityMethod.JACCARD:
        return _jaccard(a, b, include_details)
    return _weighted(a, b, weights, include_details)


def cosine_similarity(vec_a: VectorLike, vec_b: VectorLike) -> float:
    """
    Compute cosine similarity between two vectors.

    Args:
        vec_a: First vector
        vec_b: Second vector

    Returns:
        Cosine similarity in [-1.0, 1.0]; 0.0 if either vector is all zeros

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    a, b = _as_array(vec_a), _as_array(vec_b)
    _check_dimensions(a, b)
    return _cosine(a, b, False)[0]


def euclidean_similarity(vec_a: VectorLike, vec_b: VectorLike) -> float:
    """Euclidean-derived similarity; may be negative for distant vectors."""
    a, b = _as_array(vec_a), _as_array(vec_b)
    _check_dimensions(a, b)
    return _euclidean(a, b, False)[0]


def jaccard_similarity(vec_a: VectorLike, vec_b: VectorLike) -> float:
    """Jaccard overlap of the dimensions above JACCARD_THRESHOLD."""
    a, b = _as_array(vec_a), _as_array(vec_b)
    _check_dimensions(a, b)
    return _jaccard(a, b, False)[0]


def weighted_similarity(
    vec_a: VectorLike,
    vec_b: VectorLike,
    weights: Optional[Mapping[str, float]] = None,
) -> float:
    """Cosine similarity after applying band weights to both vectors."""
    a, b = _as_array(vec_a), _as_array(vec_b)
    _check_dimensions(a, b)
    return _weighted(a, b, weights, False)[0]


def compute_similarities(
    query_vec: VectorLike,
    candidate_vecs: Sequence[VectorLike],
    method: Union[SimilarityMethod, str] = SimilarityMethod.COSINE,
    weights: Optional[Mapping[str, float]] = None,
    include_details: bool = False,
    strict_dimensions: bool = False,
) -> List[ScoreWithDetails]:
    """
    Score a query vector against multiple candidate vectors.

    Returns:
        List of (score, details), same order as candidate_vecs
    """
    method = coerce_method(method)
    return [
        score(query_vec, candidate, method, weights, include_details, strict_dimensions)
        for candidate in candidate_vecs
    ]
