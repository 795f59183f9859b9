"""
Feature vector synthesis.

This module deterministically maps a content string plus a content-type
tag into a fixed-length float64 vector. It is a heuristic featurizer,
not a trained embedding model: vectors are useful for relative ranking
of similar audio-production content, nothing more.

Models:
- audio-domain: keyword weights from audio vocabularies, with a
  content-type pattern written into the leading 10 dimensions
- general: each distinct word hashed into one dimension, plus a
  lexical-diversity offset on dimensions 0-9
- technical: unit/frequency/timing terms hashed into dimensions, plus a
  content-type technical pattern on dimensions 20-29
- semantic: length, diversity and word-length spread in dimensions 0-2,
  plus an audio-context offset on dimensions 10-19

Dimensions no model writes to are padded with small noise in [-0.1, 0.1]
drawn from a generator seeded by the content itself, so identical
inputs always produce identical vectors.

Vectors are L2-normalized by default, which makes cosine similarity of
two synthesized vectors equal to their dot product.
"""

import hashlib
import re
import string
from typing import Callable, Dict, List, Tuple, Union

import numpy as np

from audiorank.core.config import DEFAULT_DIMENSIONS, MAX_DIMENSIONS, MIN_DIMENSIONS
from audiorank.core.keywords import (
    AUDIO_CONTEXT_WORDS,
    AUDIO_KEYWORDS,
    BIAS_TOKENS,
    CONTENT_TYPE_KEYWORDS,
    DEFAULT_DOMAIN_PATTERN,
    DEFAULT_TECHNICAL_PATTERN,
    DOMAIN_PATTERNS,
    PATTERN_BLOCK,
    TECHNICAL_PATTERNS,
    TECHNICAL_TERM_PATTERN,
    TECHNICAL_WORDS,
    WELL_SUPPORTED_TYPES,
)
from audiorank.core.logging import get_logger
from audiorank.core.models import (
    ContentDescriptor,
    ContentType,
    EmbeddingModel,
    FeatureVector,
    Vector,
)

logger = get_logger(__name__)

# Amplitude of the deterministic padding noise
PADDING_AMPLITUDE = 0.1

# Offsets of the overlay blocks used by the non-audio models
SEMANTIC_BLOCK_START = 0
CONTEXT_BLOCK_START = 10
TECHNICAL_BLOCK_START = 20

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


class SynthesisError(Exception):
    """Raised when a feature vector cannot be synthesized."""
    pass


class EmptyContentError(SynthesisError):
    """Raised when the content text is empty or whitespace."""
    pass


class UnsupportedModelError(SynthesisError):
    """Raised when the requested embedding model is unknown."""
    pass


class InvalidDimensionsError(SynthesisError):
    """Raised when the requested vector length is out of bounds."""
    pass


# =============================================================================
# Text helpers
# =============================================================================

def _tokenize(text: str) -> List[str]:
    """Lower-case, split on whitespace and strip surrounding punctuation."""
    tokens = (token.strip(string.punctuation) for token in text.lower().split())
    return [token for token in tokens if token]


def _stable_hash(token: str) -> int:
    """64-bit hash that is stable across processes (unlike hash())."""
    digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


def _hash_slot(token: str, dimensions: int) -> Tuple[int, float]:
    """Map a token to a dimension index and a value in [0, 1)."""
    h = _stable_hash(token)
    return h % dimensions, ((h >> 32) % 1000) / 1000.0


def _ratio(count: int, total: int) -> float:
    return count / total if total else 0.0


def preprocess_audio_content(text: str, content_type: ContentType) -> str:
    """
    Normalize text for the audio-domain model.

    Lower-cases, replaces non-alphanumerics with spaces, collapses
    whitespace and appends the content type's bias tokens.

    Args:
        text: Raw content text
        content_type: Content type selecting the bias tokens

    Returns:
        Preprocessed text
    """
    processed = _NON_ALNUM.sub(" ", text.lower())
    processed = _WHITESPACE.sub(" ", processed).strip()
    bias = BIAS_TOKENS.get(content_type)
    if bias:
        processed = f"{processed} {bias}".strip()
    return processed


def estimate_tokens(text: str) -> int:
    """Rough token estimate: word count plus 30% for punctuation and subwords."""
    words = len(text.split())
    return words + int(words * 0.3)


def compute_confidence(text: str, content_type: ContentType, model: EmbeddingModel) -> float:
    """
    Heuristic confidence that a synthesized vector represents its content.

    Starts at 0.8 and adjusts for content length, how well the content
    type is supported by the keyword tables, and whether the model suits
    the content type.

    Args:
        text: Content text
        content_type: Declared content type
        model: Synthesis model

    Returns:
        Confidence clamped to [0.0, 1.0]
    """
    confidence = 0.8

    length = len(text)
    if 50 < length < 10000:
        confidence += 0.1
    elif length < 20:
        confidence -= 0.2
    elif length > 20000:
        confidence -= 0.1

    if content_type in WELL_SUPPORTED_TYPES:
        confidence += 0.1
    else:
        confidence -= 0.05

    if model is EmbeddingModel.AUDIO_DOMAIN:
        confidence += 0.1
    elif model is EmbeddingModel.TECHNICAL and content_type is ContentType.TECHNICAL_SPEC:
        confidence += 0.1

    return max(min(confidence, 1.0), 0.0)


# =============================================================================
# Per-model feature builders
# =============================================================================
# Each builder returns (values, assigned) where `assigned` marks the
# dimensions it wrote to; everything else is padded afterwards.

def _audio_domain_features(
    text: str,
    content_type: ContentType,
    dimensions: int,
) -> Tuple[Vector, np.ndarray]:
    tokens = preprocess_audio_content(text, content_type).split()

    features = [AUDIO_KEYWORDS[t] for t in tokens if t in AUDIO_KEYWORDS]
    type_keywords = CONTENT_TYPE_KEYWORDS.get(content_type)
    if type_keywords:
        features.extend(type_keywords[t] for t in tokens if t in type_keywords)

    # Overflow keeps the first `dimensions` features
    features = features[:dimensions]

    values = np.zeros(dimensions, dtype=np.float64)
    assigned = np.zeros(dimensions, dtype=bool)
    values[:len(features)] = features
    assigned[:len(features)] = True

    pattern = DOMAIN_PATTERNS.get(content_type, DEFAULT_DOMAIN_PATTERN)
    values[:PATTERN_BLOCK] = pattern
    assigned[:PATTERN_BLOCK] = True
    return values, assigned


def _general_features(
    text: str,
    content_type: ContentType,
    dimensions: int,
) -> Tuple[Vector, np.ndarray]:
    words = _tokenize(text)
    values = np.zeros(dimensions, dtype=np.float64)
    assigned = np.zeros(dimensions, dtype=bool)

    for word in sorted(set(words)):
        index, value = _hash_slot(word, dimensions)
        values[index] = value
        assigned[index] = True

    diversity = _ratio(len(set(words)), len(words))
    block = slice(SEMANTIC_BLOCK_START, SEMANTIC_BLOCK_START + PATTERN_BLOCK)
    values[block] += diversity * 0.1
    assigned[block] = True
    return values, assigned


def _technical_features(
    text: str,
    content_type: ContentType,
    dimensions: int,
) -> Tuple[Vector, np.ndarray]:
    values = np.zeros(dimensions, dtype=np.float64)
    assigned = np.zeros(dimensions, dtype=bool)

    for term in TECHNICAL_TERM_PATTERN.findall(text):
        index, value = _hash_slot(_WHITESPACE.sub("", term.lower()), dimensions)
        values[index] = value
        assigned[index] = True

    words = _tokenize(text)
    technical_score = _ratio(sum(1 for w in words if w in TECHNICAL_WORDS), len(words))
    pattern = np.asarray(TECHNICAL_PATTERNS.get(content_type, DEFAULT_TECHNICAL_PATTERN))

    block = slice(TECHNICAL_BLOCK_START, TECHNICAL_BLOCK_START + PATTERN_BLOCK)
    values[block] += 0.1 * (technical_score + pattern)
    assigned[block] = True
    return values, assigned


def _word_length_spread(words: List[str]) -> float:
    """Standard deviation of word lengths, scaled to [0, 1]."""
    if not words:
        return 0.0
    lengths = np.array([len(w) for w in words], dtype=np.float64)
    return float(min(lengths.std() / 10.0, 1.0))


def _semantic_features(
    text: str,
    content_type: ContentType,
    dimensions: int,
) -> Tuple[Vector, np.ndarray]:
    words = _tokenize(text)
    values = np.zeros(dimensions, dtype=np.float64)
    assigned = np.zeros(dimensions, dtype=bool)

    values[0] = min(len(words) / 1000.0, 1.0)
    values[1] = _ratio(len(set(words)), len(words))
    values[2] = _word_length_spread(words)
    assigned[:3] = True

    context_score = _ratio(sum(1 for w in words if w in AUDIO_CONTEXT_WORDS), len(words))
    block = slice(CONTEXT_BLOCK_START, CONTEXT_BLOCK_START + PATTERN_BLOCK)
    values[block] += context_score * 0.1
    assigned[block] = True
    return values, assigned


_BUILDERS: Dict[EmbeddingModel, Callable[[str, ContentType, int], Tuple[Vector, np.ndarray]]] = {
    EmbeddingModel.AUDIO_DOMAIN: _audio_domain_features,
    EmbeddingModel.GENERAL: _general_features,
    EmbeddingModel.TECHNICAL: _technical_features,
    EmbeddingModel.SEMANTIC: _semantic_features,
}


# =============================================================================
# Public API
# =============================================================================

def normalize_vector(values: Vector) -> Vector:
    """
    L2-normalize a vector.

    A zero vector is returned unchanged rather than divided by zero.

    Args:
        values: Vector to normalize

    Returns:
        New array with unit length (or the zero vector)
    """
    values = np.asarray(values, dtype=np.float64)
    magnitude = np.linalg.norm(values)
    if magnitude == 0:
        return values.copy()
    return values / magnitude


def _padding(text: str, content_type: ContentType, model: EmbeddingModel, dimensions: int) -> Vector:
    seed = _stable_hash(f"{model.value}\x1f{content_type.value}\x1f{text}")
    rng = np.random.default_rng(seed)
    return rng.uniform(-PADDING_AMPLITUDE, PADDING_AMPLITUDE, size=dimensions)


def _coerce_model(model: Union[EmbeddingModel, str]) -> EmbeddingModel:
    if isinstance(model, EmbeddingModel):
        return model
    try:
        return EmbeddingModel(model)
    except ValueError:
        raise UnsupportedModelError(f"Unsupported embedding model: {model!r}")


def synthesize(
    content: ContentDescriptor,
    dimensions: int = DEFAULT_DIMENSIONS,
    normalize: bool = True,
) -> FeatureVector:
    """
    Synthesize a feature vector for a piece of content.

    Args:
        content: Text, content type and model to use
        dimensions: Output vector length (128 to 1536)
        normalize: Whether to L2-normalize the result

    Returns:
        FeatureVector with exactly `dimensions` values

    Raises:
        EmptyContentError: If the text is empty or whitespace
        UnsupportedModelError: If the model id is unknown
        InvalidDimensionsError: If dimensions is out of bounds
    """
    text = content.text
    if text is None or not text.strip():
        raise EmptyContentError("Content is empty or contains only whitespace")

    model = _coerce_model(content.model)
    content_type = ContentType.coerce(content.content_type)

    if not MIN_DIMENSIONS <= dimensions <= MAX_DIMENSIONS:
        raise InvalidDimensionsError(
            f"Dimensions must be between {MIN_DIMENSIONS} and {MAX_DIMENSIONS}, got {dimensions}"
        )

    values, assigned = _BUILDERS[model](text, content_type, dimensions)
    values = np.where(assigned, values, _padding(text, content_type, model, dimensions))

    if normalize:
        values = normalize_vector(values)

    vector = FeatureVector(
        values=values,
        dimensions=dimensions,
        model=model,
        content_type=content_type,
        normalized=normalize,
        confidence=compute_confidence(text, content_type, model),
        tokens=estimate_tokens(text),
    )
    logger.debug(
        "vector_synthesized",
        model=model.value,
        content_type=content_type.value,
        dimensions=dimensions,
        tokens=vector.tokens,
    )
    return vector
