"""
Bounded-concurrency batch execution.

run_batch() executes many independent jobs on a fixed-size thread pool:
at most `concurrency_limit` jobs run at once, submission never waits on
a job finishing, and one job's failure never cancels its siblings.

Every job settles into a BatchItem holding either its value or a
JobFault. Items are returned in submission order regardless of the order
in which jobs completed.

Synthesis and scoring are pure functions over read-only tables, so jobs
share nothing mutable.
"""

import time
import uuid
from functools import partial
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Mapping, Optional, Sequence, TypeVar, Union

from audiorank.core.config import DEFAULT_CONCURRENCY_LIMIT, Settings, get_settings
from audiorank.core.engine import embed_content, rank_request
from audiorank.core.logging import get_logger
from audiorank.core.models import (
    ContentDescriptor,
    FeatureVector,
    RankingRequest,
    RankingResult,
    SimilarityMethod,
)

logger = get_logger(__name__)

T = TypeVar("T")


class JobFault(Exception):
    """
    A single batch job's failure.

    Attributes:
        index: Submission index of the failed job
        cause: The exception the job raised
    """

    def __init__(self, index: int, cause: BaseException):
        super().__init__(f"Job {index} failed: {type(cause).__name__}: {cause}")
        self.index = index
        self.cause = cause


@dataclass
class BatchItem(Generic[T]):
    """
    Outcome of one batch job.

    Attributes:
        index: Submission index
        value: Job output on success
        error: JobFault on failure
        processing_time_ms: Wall time the job ran for
    """
    index: int
    value: Optional[T] = None
    error: Optional[JobFault] = None
    processing_time_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Whether the job succeeded."""
        return self.error is None


@dataclass
class BatchReport(Generic[T]):
    """
    Aggregate result of a batch, items in submission order.

    Attributes:
        items: One BatchItem per submitted job
        successful_count: Jobs that returned a value
        failed_count: Jobs that raised
        average_processing_time_ms: Mean per-job wall time
        total_processing_time_ms: Wall time for the whole batch
        average_confidence: Mean vector confidence over successful jobs
                            (embedding batches only)
        batch_id: Identifier for correlating logs
    """
    items: List[BatchItem[T]]
    successful_count: int
    failed_count: int
    average_processing_time_ms: float
    total_processing_time_ms: float
    average_confidence: Optional[float] = None
    batch_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def values(self) -> List[Optional[T]]:
        """Job outputs in submission order, None where a job failed."""
        return [item.value for item in self.items]

    def failures(self) -> List[JobFault]:
        """Faults of the failed jobs, in submission order."""
        return [item.error for item in self.items if item.error is not None]


def _run_job(index: int, job: Callable[[], T]) -> BatchItem[T]:
    start = time.perf_counter()
    try:
        value = job()
    except Exception as e:
        elapsed_ms = (time.perf_counter() - start) * 1000
        return BatchItem(index=index, error=JobFault(index, e), processing_time_ms=elapsed_ms)
    elapsed_ms = (time.perf_counter() - start) * 1000
    return BatchItem(index=index, value=value, processing_time_ms=elapsed_ms)


def run_batch(
    jobs: Sequence[Callable[[], T]],
    concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
) -> BatchReport[T]:
    """
    Execute independent jobs with bounded concurrency.

    Args:
        jobs: Zero-argument callables, in submission order
        concurrency_limit: Maximum jobs executing at once

    Returns:
        BatchReport with one item per job, in submission order

    Raises:
        ValueError: If concurrency_limit is less than 1
    """
    if concurrency_limit < 1:
        raise ValueError(f"concurrency_limit must be at least 1, got {concurrency_limit}")

    batch_id = uuid.uuid4().hex
    start = time.perf_counter()
    items: List[Optional[BatchItem[T]]] = [None] * len(jobs)

    if jobs:
        with ThreadPoolExecutor(max_workers=concurrency_limit) as executor:
            futures = [executor.submit(_run_job, index, job) for index, job in enumerate(jobs)]
            for future in as_completed(futures):
                item = future.result()
                items[item.index] = item
                if not item.ok:
                    logger.warning(
                        "batch_job_failed",
                        batch_id=batch_id,
                        index=item.index,
                        error=str(item.error.cause),
                        error_type=type(item.error.cause).__name__,
                    )

    settled: List[BatchItem[T]] = items  # all slots filled once the pool joins
    successful = sum(1 for item in settled if item.ok)
    failed = len(settled) - successful
    average_ms = (
        sum(item.processing_time_ms for item in settled) / len(settled) if settled else 0.0
    )
    total_ms = (time.perf_counter() - start) * 1000

    logger.info(
        "batch_completed",
        batch_id=batch_id,
        jobs=len(settled),
        successful=successful,
        failed=failed,
        concurrency_limit=concurrency_limit,
        total_processing_time_ms=round(total_ms, 2),
    )

    return BatchReport(
        items=settled,
        successful_count=successful,
        failed_count=failed,
        average_processing_time_ms=average_ms,
        total_processing_time_ms=total_ms,
        batch_id=batch_id,
    )


def embed_batch(
    contents: Sequence[ContentDescriptor],
    concurrency_limit: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> BatchReport[FeatureVector]:
    """
    Synthesize feature vectors for many contents.

    Args:
        contents: Descriptors to synthesize
        concurrency_limit: Jobs in flight; defaults to settings.concurrency_limit
        settings: Settings to use; defaults to get_settings()

    Returns:
        BatchReport of FeatureVector items, with average_confidence
        over the successful items (None when every job failed)
    """
    settings = settings or get_settings()
    jobs = [partial(embed_content, content, settings) for content in contents]
    report = run_batch(jobs, _limit(concurrency_limit, settings))

    confidences = [item.value.confidence for item in report.items if item.ok]
    if confidences:
        report.average_confidence = sum(confidences) / len(confidences)
    return report


def rank_batch(
    requests: Sequence[RankingRequest],
    concurrency_limit: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> BatchReport[RankingResult]:
    """
    Run many independent ranking requests.

    Args:
        requests: Ranking requests, each with its own query and candidates
        concurrency_limit: Jobs in flight; defaults to settings.concurrency_limit
        settings: Settings to use; defaults to get_settings()

    Returns:
        BatchReport of RankingResult items
    """
    settings = settings or get_settings()
    jobs = [partial(rank_request, request, settings) for request in requests]
    return run_batch(jobs, _limit(concurrency_limit, settings))


def rank_queries(
    queries: Sequence[ContentDescriptor],
    candidates: Sequence[ContentDescriptor],
    method: Union[SimilarityMethod, str] = SimilarityMethod.COSINE,
    max_results: int = 10,
    threshold: Optional[float] = 0.0,
    weights: Optional[Mapping[str, float]] = None,
    concurrency_limit: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> BatchReport[RankingResult]:
    """
    Rank one shared candidate set against several queries.

    Each query becomes its own job; a bad query fails only its own item.

    Returns:
        BatchReport with one RankingResult per query
    """
    requests = [
        RankingRequest(
            query=query,
            candidates=list(candidates),
            method=method,
            max_results=max_results,
            threshold=threshold,
            weights=dict(weights) if weights else None,
        )
        for query in queries
    ]
    return rank_batch(requests, concurrency_limit, settings)


def _limit(concurrency_limit: Optional[int], settings: Settings) -> int:
    return settings.concurrency_limit if concurrency_limit is None else concurrency_limit
