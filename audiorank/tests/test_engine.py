"""Tests for the main ranking engine.

These are integration-style tests that exercise the full pipeline:
descriptors are synthesized into vectors and then ranked.
"""

import pytest
from audiorank.core.config import Settings
from audiorank.core.engine import (
    rank_request,
    embed_content,
    validate_request,
    RequestValidationError,
    MAX_TEXT_LENGTH,
)
from audiorank.core.models import (
    ContentDescriptor,
    ContentType,
    EmbeddingModel,
    RankingRequest,
    RankingResult,
    SimilarityMethod,
)
from audiorank.core.similarity import UnsupportedMethodError
from audiorank.core.synthesizer import EmptyContentError, UnsupportedModelError


SESSION_NOTES = [
    "Mix session: bus compression on drums, parallel reverb on the snare.",
    "Vocal tracking with a tube preamp and large diaphragm condenser microphone.",
    "Mastering notes: integrated loudness -14 LUFS, true peak -1 dBTP.",
    "Guitar overdubs, two mics on the cabinet, checked phase before printing.",
]


def _session(text: str) -> ContentDescriptor:
    return ContentDescriptor(text, ContentType.SESSION_NOTES)


@pytest.fixture
def settings():
    return Settings(dimensions=256)


class TestRankRequest:
    """Tests for the rank_request entry point."""

    def test_returns_ranking_result(self, settings):
        """Should return a RankingResult covering every candidate."""
        request = RankingRequest(
            query=_session(SESSION_NOTES[1]),
            candidates=[_session(t) for t in SESSION_NOTES],
        )
        result = rank_request(request, settings)
        assert isinstance(result, RankingResult)
        assert result.total_candidates == 4
        assert len(result.results) == 4

    def test_identical_candidate_ranks_first(self, settings):
        """A candidate identical to the query should rank first."""
        request = RankingRequest(
            query=_session(SESSION_NOTES[1]),
            candidates=[_session(t) for t in SESSION_NOTES],
            max_results=2,
        )
        result = rank_request(request, settings)
        assert result.top.candidate_index == 1
        assert result.top.score == pytest.approx(1.0)
        assert result.top.rank == 1

    @pytest.mark.parametrize("method", list(SimilarityMethod))
    def test_all_methods(self, settings, method):
        """Every metric should run end to end."""
        request = RankingRequest(
            query=_session(SESSION_NOTES[0]),
            candidates=[_session(t) for t in SESSION_NOTES],
            method=method,
            weights={"technical": 2.0},
            include_details=True,
        )
        result = rank_request(request, settings)
        assert result.method is method
        assert len(result.results) == 4

    def test_mixed_models(self, settings):
        """Candidates may use different models than the query."""
        request = RankingRequest(
            query=ContentDescriptor(SESSION_NOTES[2], ContentType.TECHNICAL_SPEC, EmbeddingModel.TECHNICAL),
            candidates=[
                ContentDescriptor(t, ContentType.TECHNICAL_SPEC, EmbeddingModel.TECHNICAL)
                for t in SESSION_NOTES
            ],
        )
        result = rank_request(request, settings)
        assert result.top.candidate_index == 2

    def test_unknown_method_raises(self, settings):
        """Unknown methods should raise UnsupportedMethodError."""
        request = RankingRequest(
            query=_session(SESSION_NOTES[0]),
            candidates=[_session(SESSION_NOTES[1])],
            method="spearman",
        )
        with pytest.raises(UnsupportedMethodError):
            rank_request(request, settings)

    def test_empty_candidate_raises(self, settings):
        """A single bad candidate should fail the whole request."""
        request = RankingRequest(
            query=_session(SESSION_NOTES[0]),
            candidates=[_session(SESSION_NOTES[1]), _session("   ")],
        )
        with pytest.raises(EmptyContentError):
            rank_request(request, settings)

    def test_unknown_model_raises(self, settings):
        """An unknown query model should raise UnsupportedModelError."""
        request = RankingRequest(
            query=ContentDescriptor(SESSION_NOTES[0], model="bert"),
            candidates=[_session(SESSION_NOTES[1])],
        )
        with pytest.raises(UnsupportedModelError):
            rank_request(request, settings)


class TestEmbedContent:
    """Tests for embed_content."""

    def test_uses_settings_dimensions(self, settings):
        """Vectors should use the configured dimensions."""
        vector = embed_content(_session(SESSION_NOTES[0]), settings)
        assert vector.dimensions == 256
        assert vector.values.shape == (256,)

    def test_uses_settings_normalization(self):
        """normalize=False in settings should produce raw vectors."""
        vector = embed_content(_session(SESSION_NOTES[0]), Settings(normalize=False))
        assert vector.normalized is False


class TestValidateRequest:
    """Tests for boundary validation."""

    def _request(self, **overrides):
        fields = dict(
            query=_session(SESSION_NOTES[0]),
            candidates=[_session(SESSION_NOTES[1])],
        )
        fields.update(overrides)
        return RankingRequest(**fields)

    def test_valid_request(self):
        """A well-formed request should pass."""
        validate_request(self._request(threshold=0.5, max_results=100))

    def test_no_candidates(self):
        """An empty candidate list should fail."""
        with pytest.raises(RequestValidationError, match="candidate"):
            validate_request(self._request(candidates=[]))

    def test_too_many_candidates(self):
        """More than 1000 candidates should fail."""
        with pytest.raises(RequestValidationError, match="Too many"):
            validate_request(self._request(candidates=[_session("x")] * 1001))

    def test_query_too_long(self):
        """Query text over the limit should fail."""
        with pytest.raises(RequestValidationError, match="Query"):
            validate_request(self._request(query=_session("a" * (MAX_TEXT_LENGTH + 1))))

    def test_candidate_too_long(self):
        """Candidate text over the limit should name the candidate."""
        candidates = [_session("ok"), _session("a" * (MAX_TEXT_LENGTH + 1))]
        with pytest.raises(RequestValidationError, match="index 1"):
            validate_request(self._request(candidates=candidates))

    @pytest.mark.parametrize("max_results", [0, 101])
    def test_max_results_bounds(self, max_results):
        """max_results outside 1..100 should fail."""
        with pytest.raises(RequestValidationError, match="max_results"):
            validate_request(self._request(max_results=max_results))

    @pytest.mark.parametrize("threshold", [-0.1, 1.5])
    def test_threshold_bounds(self, threshold):
        """threshold outside [0, 1] should fail."""
        with pytest.raises(RequestValidationError, match="threshold"):
            validate_request(self._request(threshold=threshold))
