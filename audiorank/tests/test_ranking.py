"""Tests for ranking candidate vectors against a query."""

import numpy as np
import pytest
from audiorank.core.models import RankingResult, SimilarityMethod
from audiorank.core.ranking import rank, result_confidence, RankingError
from audiorank.core.similarity import UnsupportedMethodError


QUERY = np.array([1.0, 0.0])

# Cosine with QUERY equals the first component of each candidate
CANDIDATE_SCORES = [0.2, 0.95, 0.5, 0.1, 0.92, 0.3, 0.4, 0.6, 0.7, 0.8]


def _unit(cos_value: float) -> np.ndarray:
    return np.array([cos_value, np.sqrt(1.0 - cos_value ** 2)])


@pytest.fixture
def candidates():
    return [_unit(s) for s in CANDIDATE_SCORES]


class TestRank:
    """Tests for the rank function."""

    def test_returns_ranking_result(self, candidates):
        """Should return a RankingResult."""
        assert isinstance(rank(QUERY, candidates), RankingResult)

    def test_threshold_and_truncation(self, candidates):
        """Only two candidates exceed 0.9, so two results come back."""
        result = rank(QUERY, candidates, SimilarityMethod.COSINE, threshold=0.9, max_results=3)
        assert result.processed_candidates == 2
        assert len(result.results) == 2
        assert result.candidate_indices() == [1, 4]
        assert result.total_candidates == 10

    def test_truncates_to_max_results(self, candidates):
        """Results should be cut to max_results after sorting."""
        result = rank(QUERY, candidates, max_results=3)
        assert len(result.results) == 3
        assert result.candidate_indices() == [1, 4, 9]
        assert result.processed_candidates == 10

    def test_dense_ranks(self, candidates):
        """Ranks should be 1-based with no gaps."""
        result = rank(QUERY, candidates, max_results=5)
        assert [r.rank for r in result.results] == [1, 2, 3, 4, 5]

    def test_sorted_non_increasing(self, candidates):
        """Scores should never increase down the ranking."""
        scores = [r.score for r in rank(QUERY, candidates).results]
        assert scores == sorted(scores, reverse=True)

    def test_scores_meet_threshold(self, candidates):
        """Every returned score should be at least the threshold."""
        result = rank(QUERY, candidates, threshold=0.45)
        assert all(r.score >= 0.45 for r in result.results)
        assert result.processed_candidates == 6

    def test_average_over_returned_results(self, candidates):
        """average_similarity should use only the returned results."""
        result = rank(QUERY, candidates, max_results=3)
        assert result.average_similarity == pytest.approx((0.95 + 0.92 + 0.8) / 3)

    def test_ties_keep_input_order(self):
        """Equal scores should keep the original candidate order."""
        same = np.array([1.0, 0.0])
        result = rank(QUERY, [_unit(0.5), same, same, same], max_results=10)
        assert result.candidate_indices() == [1, 2, 3, 0]

    def test_deterministic(self, candidates):
        """Repeated calls should return identical orderings and scores."""
        first = rank(QUERY, candidates)
        second = rank(QUERY, candidates)
        assert first.candidate_indices() == second.candidate_indices()
        assert [r.score for r in first.results] == [r.score for r in second.results]

    def test_default_threshold_drops_negative_scores(self):
        """The default 0.0 threshold should drop negative scores."""
        result = rank(QUERY, [np.array([-1.0, 0.0]), np.array([1.0, 0.0])])
        assert result.processed_candidates == 1
        assert result.total_candidates == 2
        assert result.candidate_indices() == [1]

    def test_default_threshold_keeps_zero_scores(self):
        """A score exactly at the default threshold should be kept."""
        result = rank(QUERY, [np.array([0.0, 1.0])])
        assert result.processed_candidates == 1

    def test_default_threshold_drops_negative_euclidean(self):
        """Distant vectors scoring below zero under euclidean are dropped by default."""
        query = np.ones(4)
        result = rank(query, [-np.ones(4), np.ones(4)], method="euclidean")
        assert result.candidate_indices() == [1]

    def test_none_threshold_keeps_negative_scores(self):
        """threshold=None should not filter anything."""
        result = rank(QUERY, [np.array([-1.0, 0.0]), np.array([1.0, 0.0])], threshold=None)
        assert result.processed_candidates == 2
        assert result.candidate_indices() == [1, 0]

    def test_empty_candidates(self):
        """No candidates should give an empty result, not an error."""
        result = rank(QUERY, [])
        assert result.results == []
        assert result.total_candidates == 0
        assert result.processed_candidates == 0
        assert result.average_similarity == 0.0

    def test_unknown_method_raises(self, candidates):
        """Unknown methods should raise without partial output."""
        with pytest.raises(UnsupportedMethodError):
            rank(QUERY, candidates, method="pearson")

    def test_unknown_method_raises_with_no_candidates(self):
        """The method should be checked even when there is nothing to score."""
        with pytest.raises(UnsupportedMethodError):
            rank(QUERY, [], method="pearson")

    def test_invalid_max_results(self, candidates):
        """max_results below 1 should raise RankingError."""
        with pytest.raises(RankingError, match="max_results"):
            rank(QUERY, candidates, max_results=0)

    def test_details_attached_when_requested(self, candidates):
        """include_details should attach ScoreDetails to every result."""
        result = rank(QUERY, candidates, include_details=True, max_results=2)
        assert all(r.details is not None for r in result.results)
        assert result.results[0].details.cosine_similarity == pytest.approx(0.95)

    def test_method_recorded(self, candidates):
        """The result should record the metric used."""
        result = rank(QUERY, candidates, method="euclidean")
        assert result.method is SimilarityMethod.EUCLIDEAN

    def test_weighted_method_uses_weights(self):
        """Weights should be forwarded to the weighted metric."""
        query = np.array([1.0, 0.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0])
        candidate = np.array([0.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0])
        result = rank(query, [candidate], method="weighted", weights={"technical": 2.0})
        assert result.results[0].score == pytest.approx(0.6)

    def test_interpretation_labels(self, candidates):
        """Each result should carry an interpretation label."""
        result = rank(QUERY, candidates, max_results=1)
        assert result.results[0].interpretation == "Strong"


class TestResultConfidence:
    """Tests for per-result confidence."""

    def test_cosine_perfect_score_clamped(self):
        """0.5 + 0.4 + 0.2 should clamp to 1.0."""
        assert result_confidence(1.0, SimilarityMethod.COSINE) == 1.0

    def test_jaccard(self):
        """Jaccard gets the smallest bonus."""
        assert result_confidence(0.5, SimilarityMethod.JACCARD) == pytest.approx(0.75)

    def test_euclidean_negative_score(self):
        """Negative scores lower confidence, clamped at 0.0."""
        assert result_confidence(-1.0, SimilarityMethod.EUCLIDEAN) == pytest.approx(0.2)
        assert result_confidence(-3.0, SimilarityMethod.EUCLIDEAN) == 0.0

    def test_results_carry_confidence(self, candidates):
        """Ranked results should carry confidence in [0, 1]."""
        for r in rank(QUERY, candidates).results:
            assert 0.0 <= r.confidence <= 1.0
