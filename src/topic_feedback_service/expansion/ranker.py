"""Representative term selection per topic.

Each topic is shown to the user as a short label:
- one trigram (if the topic has any)
- two bigrams
- four unigrams

The unigrams double as query expansion words; a fifth unigram is added to
the expansion list when the topic has one.
"""

from topic_feedback_service.config import settings
from topic_feedback_service.logging_config import get_logger
from topic_feedback_service.store.base import NGram, TopicModelStore, Unigram

logger = get_logger(__name__)


class TermRanker:
    """Selects n-grams and unigrams for a topic."""

    def __init__(
        self,
        store: TopicModelStore,
        bigram_count: int | None = None,
        display_unigram_count: int | None = None,
        expansion_unigram_count: int | None = None,
    ) -> None:
        self.store = store
        self.bigram_count = (
            bigram_count if bigram_count is not None else settings.ngram_bigram_count
        )
        self.display_unigram_count = (
            display_unigram_count
            if display_unigram_count is not None
            else settings.display_unigram_count
        )
        self.expansion_unigram_count = (
            expansion_unigram_count
            if expansion_unigram_count is not None
            else settings.expansion_unigram_count
        )

    def select_ngrams(self, topic_id: int) -> list[NGram]:
        """Select the top trigram and top bigrams of a topic.

        N-grams are ranked by size descending, then score descending, so
        trigrams come first and the first trigram seen is the best one.

        Args:
            topic_id: Topic to label

        Returns:
            Trigram (if any) followed by up to bigram_count bigrams
        """
        ranked = sorted(
            self.store.ngrams_for_topic(topic_id),
            key=lambda ngram: (ngram.size, ngram.score),
            reverse=True,
        )

        trigram: NGram | None = None
        bigrams: list[NGram] = []
        for ngram in ranked:
            if trigram is None and ngram.size == 3:
                trigram = ngram
            elif ngram.size == 2 and len(bigrams) < self.bigram_count:
                bigrams.append(ngram)
            if len(bigrams) >= self.bigram_count:
                break

        selected = ([trigram] if trigram is not None else []) + bigrams
        logger.debug(
            "term_ranker.ngrams.selected",
            topic_id=topic_id,
            has_trigram=trigram is not None,
            bigrams=len(bigrams),
        )
        return selected

    def select_unigrams(self, topic_id: int) -> tuple[list[Unigram], list[str]]:
        """Select display unigrams and expansion words of a topic.

        Args:
            topic_id: Topic to label

        Returns:
            Tuple of (display unigrams, expansion words). The expansion list
            holds the display words plus the next word when available. Both
            lists are shorter for a topic with few unigrams.
        """
        ranked = sorted(
            self.store.unigrams_for_topic(topic_id),
            key=lambda unigram: unigram.probability,
            reverse=True,
        )
        display = ranked[: self.display_unigram_count]
        expansion_words = [unigram.word for unigram in ranked[: self.expansion_unigram_count]]

        if len(expansion_words) < self.expansion_unigram_count:
            logger.debug(
                "term_ranker.unigrams.short_list",
                topic_id=topic_id,
                display_unigrams=len(display),
                expansion_words=len(expansion_words),
            )
        return display, expansion_words
