"""Request-scoped state of one topic expansion."""

from dataclasses import dataclass, field
from typing import Any

from topic_feedback_service.store.base import NGram, Unigram

NO_TRIGRAM_LABEL = "(No trigrams found)"


@dataclass
class TopicTerms:
    """Selected n-grams and unigrams of one topic.

    Attributes:
        topic_id: Topic the terms belong to
        ngrams: Trigram (if any) followed by bigrams
        unigrams: Display unigrams, most probable first
        expansion_words: Words used for query expansion
    """

    topic_id: int
    ngrams: list[NGram] = field(default_factory=list)
    unigrams: list[Unigram] = field(default_factory=list)
    expansion_words: list[str] = field(default_factory=list)

    @property
    def trigram(self) -> NGram | None:
        if self.ngrams and self.ngrams[0].size == 3:
            return self.ngrams[0]
        return None

    @property
    def has_trigram(self) -> bool:
        return self.trigram is not None

    @property
    def bigrams(self) -> list[NGram]:
        return [ngram for ngram in self.ngrams if ngram.size == 2]

    @property
    def trigram_label(self) -> str:
        trigram = self.trigram
        return trigram.text if trigram is not None else NO_TRIGRAM_LABEL

    @property
    def bigrams_label(self) -> str:
        return ", ".join(ngram.text for ngram in self.bigrams)

    @property
    def unigrams_label(self) -> str:
        return ", ".join(unigram.word for unigram in self.unigrams)


@dataclass
class ExpansionContext:
    """Everything derived for a single query expansion request.

    Built by TopicExpansionEngine and discarded with the request; nothing in
    here is shared between requests.
    """

    documents: tuple[Any, Any]
    threshold: float
    enriched: list[int] = field(default_factory=list)
    related: list[int] = field(default_factory=list)
    latent_topics: list[int] = field(default_factory=list)
    topic_terms: dict[int, TopicTerms] = field(default_factory=dict)

    @property
    def expansion_words(self) -> dict[int, list[str]]:
        """topic ID -> expansion words, in latent topic order."""
        return {topic_id: terms.expansion_words for topic_id, terms in self.topic_terms.items()}
