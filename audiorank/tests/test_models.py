"""Tests for data models and interpretation functions."""

import numpy as np
import pytest
from audiorank.core.models import (
    ContentDescriptor,
    ContentType,
    EmbeddingModel,
    FeatureVector,
    RankingRequest,
    RankingResult,
    SimilarityMethod,
    SimilarityResult,
    interpret_similarity,
    SIMILARITY_THRESHOLDS,
)


class TestContentType:
    """Tests for content type coercion."""

    def test_coerce_known_value(self):
        """Known tags should map to their enum member."""
        assert ContentType.coerce("session_notes") is ContentType.SESSION_NOTES
        assert ContentType.coerce("mix_notes") is ContentType.MIX_NOTES

    def test_coerce_enum_passthrough(self):
        """Enum members should be returned unchanged."""
        assert ContentType.coerce(ContentType.FEEDBACK) is ContentType.FEEDBACK

    def test_coerce_unknown_falls_back_to_generic(self):
        """Unknown tags should fall back to the generic type."""
        assert ContentType.coerce("podcast_transcript") is ContentType.GENERIC

    def test_generic_value(self):
        """Generic content type should use the 'text' tag."""
        assert ContentType.GENERIC.value == "text"


class TestContentDescriptor:
    """Tests for the ContentDescriptor dataclass."""

    def test_defaults(self):
        """Descriptor should default to generic content and the audio-domain model."""
        descriptor = ContentDescriptor("vocal comp notes")
        assert descriptor.content_type is ContentType.GENERIC
        assert descriptor.model is EmbeddingModel.AUDIO_DOMAIN

    def test_immutable(self):
        """Descriptors should be frozen."""
        descriptor = ContentDescriptor("vocal comp notes")
        with pytest.raises(AttributeError):
            descriptor.text = "changed"


class TestFeatureVector:
    """Tests for the FeatureVector dataclass."""

    def test_creation(self):
        """FeatureVector should store values as float64."""
        vector = FeatureVector(values=[1, 2, 3], dimensions=3)
        assert vector.values.dtype == np.float64
        assert vector.dimensions == 3

    def test_length_mismatch_raises(self):
        """Values length must equal declared dimensions."""
        with pytest.raises(ValueError, match="does not match"):
            FeatureVector(values=np.zeros(4), dimensions=5)

    def test_values_are_read_only(self):
        """Values should not be writable after construction."""
        vector = FeatureVector(values=np.zeros(4), dimensions=4)
        with pytest.raises(ValueError):
            vector.values[0] = 1.0

    def test_values_are_copied(self):
        """Mutating the source array should not affect the vector."""
        source = np.zeros(4)
        vector = FeatureVector(values=source, dimensions=4)
        source[0] = 5.0
        assert vector.values[0] == 0.0

    def test_magnitude(self):
        """magnitude should be the Euclidean norm."""
        vector = FeatureVector(values=[3.0, 4.0], dimensions=2)
        assert vector.magnitude == pytest.approx(5.0)


class TestRankingResult:
    """Tests for the RankingResult dataclass."""

    def _result(self, index, score, rank):
        return SimilarityResult(candidate_index=index, score=score, rank=rank, confidence=0.9)

    def test_top_and_indices(self):
        """top should be the first result, candidate_indices in rank order."""
        result = RankingResult(
            results=[self._result(3, 0.9, 1), self._result(0, 0.5, 2)],
            total_candidates=4,
            processed_candidates=2,
            average_similarity=0.7,
            method=SimilarityMethod.COSINE,
        )
        assert result.top.candidate_index == 3
        assert result.candidate_indices() == [3, 0]

    def test_top_of_empty_result(self):
        """top should be None when nothing was returned."""
        result = RankingResult(
            results=[],
            total_candidates=0,
            processed_candidates=0,
            average_similarity=0.0,
        )
        assert result.top is None


class TestRankingRequest:
    """Tests for the RankingRequest dataclass."""

    def test_defaults(self):
        """Requests should default to cosine, ten results and a 0.0 threshold."""
        request = RankingRequest(
            query=ContentDescriptor("vocal comp notes"),
            candidates=[ContentDescriptor("drum bus notes")],
        )
        assert request.method is SimilarityMethod.COSINE
        assert request.max_results == 10
        assert request.threshold == 0.0
        assert request.include_details is False


class TestInterpretSimilarity:
    """Tests for the interpret_similarity function."""

    def test_strong(self):
        """Scores at or above the strong threshold should be Strong."""
        assert interpret_similarity(0.99) == "Strong"
        assert interpret_similarity(SIMILARITY_THRESHOLDS["strong"]) == "Strong"

    def test_moderate(self):
        """Scores between moderate and strong should be Moderate."""
        assert interpret_similarity(0.80) == "Moderate"

    def test_weak(self):
        """Scores between weak and moderate should be Weak."""
        assert interpret_similarity(0.60) == "Weak"

    def test_unrelated(self):
        """Scores below the weak threshold should be Unrelated."""
        assert interpret_similarity(0.1) == "Unrelated"
        assert interpret_similarity(-0.5) == "Unrelated"
