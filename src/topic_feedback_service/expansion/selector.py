"""Topic selection from a pair of seed documents.

Two sets are built per request:

- Enriched topics: the strongest coherent topics of the two top-ranked
  result documents, at most two per document and four overall.
- Related topics: for every enriched topic, the two most covariant coherent
  co-topics from the precomputed topic affinity table.

Enriched Selection Algorithm:
1. Rank each document's topics by probability (stable, ties keep stored order)
2. Drop topics below the coherence threshold
3. Walk document 1 then document 2, adding up to two new topics each
4. If fewer than four topics were collected, walk both documents once more
5. Stop after the second pass regardless of size (sparse data is valid)
"""

from collections.abc import Sequence
from typing import Any

from topic_feedback_service.config import settings
from topic_feedback_service.exceptions import InsufficientCandidatesError, PreconditionError
from topic_feedback_service.logging_config import get_logger
from topic_feedback_service.store.base import TopicModelStore

from .coherence import CoherenceFilter, TopicKind

logger = get_logger(__name__)


class TopicSelector:
    """Builds the enriched and related topic sets.

    Holds configuration and collaborators only; each call returns a fresh
    list owned by the caller.
    """

    def __init__(
        self,
        store: TopicModelStore,
        coherence_filter: CoherenceFilter | None = None,
        enriched_limit: int | None = None,
        per_document: int | None = None,
        max_passes: int | None = None,
        related_per_topic: int | None = None,
    ) -> None:
        """Initialize topic selector.

        Args:
            store: Topic model store
            coherence_filter: Filter instance (created from store if None)
            enriched_limit: Maximum size of the enriched set
            per_document: New topics taken from each document per pass
            max_passes: Walks over both documents before giving up
            related_per_topic: Related topics taken per enriched topic
        """
        self.store = store
        self.coherence = coherence_filter or CoherenceFilter(store)
        self.enriched_limit = (
            enriched_limit if enriched_limit is not None else settings.enriched_topic_limit
        )
        self.per_document = (
            per_document if per_document is not None else settings.enriched_topics_per_document
        )
        self.max_passes = max_passes if max_passes is not None else settings.enriched_max_passes
        self.related_per_topic = (
            related_per_topic
            if related_per_topic is not None
            else settings.related_topics_per_topic
        )

    def select_enriched(self, document_1: Any, document_2: Any, threshold: float) -> list[int]:
        """Select the enriched topic set for two seed documents.

        Args:
            document_1: ID of the top-ranked result document
            document_2: ID of the second-ranked result document
            threshold: Coherence threshold

        Returns:
            Up to enriched_limit unique topic IDs in insertion order
        """
        ranked_per_document = [
            self._ranked_document_topics(document_id, threshold)
            for document_id in (document_1, document_2)
        ]

        enriched: list[int] = []
        for pass_number in range(1, self.max_passes + 1):
            for ranked in ranked_per_document:
                self._take_new_topics(ranked, enriched)
            if len(enriched) >= self.enriched_limit:
                break
            logger.debug(
                "topic_selector.enriched.short_pass",
                pass_number=pass_number,
                size=len(enriched),
            )

        logger.info(
            "topic_selector.enriched.selected",
            documents=[document_1, document_2],
            threshold=threshold,
            topics=enriched,
        )
        return enriched

    def select_related(
        self,
        enriched: Sequence[int] | None,
        threshold: float,
        skip_insufficient: bool | None = None,
    ) -> list[int]:
        """Select the related topic set for an enriched set.

        Args:
            enriched: Enriched topic IDs, in selection order
            threshold: Coherence threshold
            skip_insufficient: Skip (instead of raise for) topics with too
                few coherent co-topics

        Returns:
            related_per_topic topic IDs per enriched topic, in enriched order

        Raises:
            PreconditionError: If the enriched set is missing or empty
            InsufficientCandidatesError: If a topic has too few coherent
                co-topics and skip_insufficient is off
        """
        if not enriched:
            raise PreconditionError(
                "Related topics cannot be selected before an enriched topic set is established"
            )
        if skip_insufficient is None:
            skip_insufficient = settings.skip_insufficient_candidates

        related: list[int] = []
        for topic_id in enriched:
            affinities = sorted(
                self.store.related_topics(topic_id),
                key=lambda affinity: affinity.covariance,
                reverse=True,
            )
            survivors = self.coherence.filter(affinities, threshold, TopicKind.RELATED)

            if len(survivors) < self.related_per_topic:
                error = InsufficientCandidatesError(
                    topic_id=topic_id,
                    required=self.related_per_topic,
                    found=len(survivors),
                    kind="related topic",
                )
                if not skip_insufficient:
                    raise error
                logger.warning(
                    "topic_selector.related.skipped",
                    topic_id=topic_id,
                    reason=str(error),
                )
                continue

            related.extend(survivors[: self.related_per_topic])

        logger.info("topic_selector.related.selected", enriched=list(enriched), topics=related)
        return related

    def _ranked_document_topics(self, document_id: Any, threshold: float) -> list[int]:
        """Coherent topics of a document, most probable first."""
        associations = sorted(
            self.store.topics_for_document(document_id),
            key=lambda association: association.probability,
            reverse=True,
        )
        return self.coherence.filter(associations, threshold, TopicKind.ENRICHED)

    def _take_new_topics(self, ranked: list[int], enriched: list[int]) -> None:
        """Append up to per_document topics from ranked that are not yet in enriched."""
        added = 0
        for topic_id in ranked:
            if added >= self.per_document or len(enriched) >= self.enriched_limit:
                return
            if topic_id not in enriched:
                enriched.append(topic_id)
                added += 1
