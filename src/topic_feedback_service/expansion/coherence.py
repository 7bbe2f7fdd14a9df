"""Coherence filtering of "junk" topics.

Topic models always produce a share of incoherent topics (stop-word piles,
formatting artifacts). Each topic carries a precomputed semantic coherence
score; topics scoring strictly below a threshold are dropped before any
selection happens.
"""

import math
from collections.abc import Sequence
from enum import Enum

from topic_feedback_service.exceptions import ThresholdRankError
from topic_feedback_service.logging_config import get_logger
from topic_feedback_service.store.base import TopicAffinity, TopicAssociation, TopicModelStore

logger = get_logger(__name__)


class TopicKind(str, Enum):
    """Which topic ID of an association record is being filtered.

    Values:
        ENRICHED: Document association, filter on topic_id
        RELATED: Topic affinity, filter on co_topic_id
    """

    ENRICHED = "enriched"
    RELATED = "related"


class CoherenceFilter:
    """Removes topics whose coherence score is below a threshold.

    Usage:
        coherence = CoherenceFilter(store)
        threshold = coherence.threshold_from_percentile(0.25)
        topic_ids = coherence.filter(associations, threshold, TopicKind.ENRICHED)
    """

    def __init__(self, store: TopicModelStore) -> None:
        self.store = store

    def filter(
        self,
        associations: Sequence[TopicAssociation | TopicAffinity],
        threshold: float,
        kind: TopicKind,
    ) -> list[int]:
        """Return the topic IDs of associations that pass the threshold.

        Args:
            associations: Ranked association records
            threshold: Minimum coherence score; a topic scoring exactly
                the threshold is kept
            kind: ENRICHED reads topic_id, RELATED reads co_topic_id

        Returns:
            Surviving topic IDs in the order of the input records
        """
        if kind is TopicKind.RELATED:
            topic_ids = [record.co_topic_id for record in associations]  # type: ignore[union-attr]
        else:
            topic_ids = [record.topic_id for record in associations]

        if not topic_ids:
            return []

        junk = set(self.store.topics_below_threshold(topic_ids, threshold))
        survivors = [topic_id for topic_id in topic_ids if topic_id not in junk]

        logger.debug(
            "coherence_filter.applied",
            kind=kind.value,
            threshold=threshold,
            candidates=len(topic_ids),
            removed=len(topic_ids) - len(survivors),
        )
        return survivors

    def threshold_from_percentile(self, percentile: float) -> float:
        """Derive a threshold from a percentile of all coherence scores.

        The threshold is the score at rank floor(percentile * N) - 1 of the
        ascending list of all N topic scores.

        Args:
            percentile: Fraction in (0, 1]

        Returns:
            Coherence score at the computed rank

        Raises:
            ThresholdRankError: If the rank falls outside the score list
        """
        scores = self.store.coherence_scores()
        total = len(scores)
        rank = math.floor(percentile * total) - 1
        if rank < 0 or rank >= total:
            raise ThresholdRankError(percentile=percentile, rank=rank, total=total)

        threshold = scores[rank].score
        logger.info(
            "coherence_filter.threshold_from_percentile",
            percentile=percentile,
            rank=rank,
            total=total,
            threshold=threshold,
        )
        return threshold
