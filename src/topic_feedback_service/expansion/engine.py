"""Topic expansion orchestration.

Wires coherence filtering, topic selection, term ranking and boost term
compilation into one request-scoped flow.

Flow:
1. Resolve the coherence threshold (absolute or percentile)
2. Select enriched topics from the two seed documents
3. Select related topics for every enriched topic
4. Rank n-grams and unigrams of every latent topic
5. Compile the chosen topics' words into boost terms of a DisMax query
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from topic_feedback_service.config import settings
from topic_feedback_service.logging_config import get_logger
from topic_feedback_service.store.base import TopicModelStore

from .boost_terms import UNSCOPED
from .coherence import CoherenceFilter
from .compiler import ExpansionCompiler
from .context import ExpansionContext, TopicTerms
from .ranker import TermRanker
from .selector import TopicSelector

if TYPE_CHECKING:
    from topic_feedback_service.search.dismax import DisMaxQuery

logger = get_logger(__name__)


class TopicExpansionEngine:
    """Facade over the topic expansion components.

    The engine holds configuration and collaborators only. Every result of
    a request lives in the ExpansionContext it returns.

    Usage:
        engine = TopicExpansionEngine(SQLTopicModelStore(db))
        context = engine.expand("doc-17", "doc-42")
        query = DisMaxQuery("environmental policy")
        expanded = engine.expand_boost_query(query, context, [134, 391])
    """

    def __init__(
        self,
        store: TopicModelStore,
        selector: TopicSelector | None = None,
        ranker: TermRanker | None = None,
        compiler: ExpansionCompiler | None = None,
        threshold: float | None = None,
        threshold_percentile: float | None = None,
        skip_insufficient: bool | None = None,
    ) -> None:
        """Initialize topic expansion engine.

        Args:
            store: Topic model store
            selector: Topic selector (created from store if None)
            ranker: Term ranker (created from store if None)
            compiler: Expansion compiler (created if None)
            threshold: Absolute coherence threshold (settings if None)
            threshold_percentile: Percentile used to derive the threshold;
                wins over the absolute threshold when set
            skip_insufficient: Skip topics with too few related topics
                instead of failing the request
        """
        self.store = store
        self.coherence = CoherenceFilter(store)
        self.selector = selector or TopicSelector(store, coherence_filter=self.coherence)
        self.ranker = ranker or TermRanker(store)
        self.compiler = compiler or ExpansionCompiler()
        self.threshold = threshold if threshold is not None else settings.topic_threshold
        self.threshold_percentile = (
            threshold_percentile
            if threshold_percentile is not None
            else settings.topic_threshold_percentile
        )
        self.skip_insufficient = (
            skip_insufficient
            if skip_insufficient is not None
            else settings.skip_insufficient_candidates
        )

    def resolve_threshold(
        self,
        threshold: float | None = None,
        percentile: float | None = None,
    ) -> float:
        """Return the coherence threshold for a request.

        Precedence: explicit threshold, explicit percentile, configured
        percentile, configured threshold.

        Raises:
            ThresholdRankError: If a percentile maps outside the score list
        """
        if threshold is not None:
            return threshold
        if percentile is not None:
            return self.coherence.threshold_from_percentile(percentile)
        if self.threshold_percentile is not None:
            return self.coherence.threshold_from_percentile(self.threshold_percentile)
        return self.threshold

    def select_latent_topics(
        self,
        document_1: Any,
        document_2: Any,
        threshold: float | None = None,
    ) -> ExpansionContext:
        """Select enriched and related topics for two seed documents.

        Latent topics are the enriched topics followed by the related
        topics not already present.

        Raises:
            PreconditionError: If no enriched topic survives the threshold
            InsufficientCandidatesError: If a topic has too few coherent
                co-topics and skipping is off
        """
        threshold = self.resolve_threshold(threshold)
        enriched = self.selector.select_enriched(document_1, document_2, threshold)
        related = self.selector.select_related(
            enriched, threshold, skip_insufficient=self.skip_insufficient
        )

        latent = list(enriched)
        for topic_id in related:
            if topic_id not in latent:
                latent.append(topic_id)

        return ExpansionContext(
            documents=(document_1, document_2),
            threshold=threshold,
            enriched=enriched,
            related=related,
            latent_topics=latent,
        )

    def select_topic_terms(self, context: ExpansionContext) -> ExpansionContext:
        """Rank n-grams and unigrams of every latent topic into the context.

        A topic with few unigrams keeps a short expansion list.
        """
        for topic_id in context.latent_topics:
            display, expansion_words = self.ranker.select_unigrams(topic_id)
            context.topic_terms[topic_id] = TopicTerms(
                topic_id=topic_id,
                ngrams=self.ranker.select_ngrams(topic_id),
                unigrams=display,
                expansion_words=expansion_words,
            )

        logger.info(
            "expansion_engine.topic_terms.selected",
            documents=list(context.documents),
            topics=context.latent_topics,
        )
        return context

    def expand(
        self,
        document_1: Any,
        document_2: Any,
        threshold: float | None = None,
    ) -> ExpansionContext:
        """Select latent topics and their terms in one call."""
        context = self.select_latent_topics(document_1, document_2, threshold)
        return self.select_topic_terms(context)

    def expand_boost_query(
        self,
        query: "DisMaxQuery",
        context: ExpansionContext,
        topic_ids: Iterable[int | str],
        field: str = UNSCOPED,
        boost: float | None = None,
        sign: str = "+",
    ) -> "DisMaxQuery":
        """Add the expansion words of topic_ids to a copy of query's boost terms.

        Args:
            query: Query to expand (left unchanged)
            context: Context returned by expand()
            topic_ids: Topics chosen by the user
            field: Field scope of the boost terms ("" for unscoped)
            boost: Boost of every term (query.default_boost if None)
            sign: '-' to push documents about the topics down

        Returns:
            New query carrying the merged boost terms
        """
        expanded = query.copy()
        terms = self._compile(query, context, topic_ids, boost, sign)
        if terms:
            expanded.boost_query = self.compiler.merge_into_field(query.boost_query, field, terms)
        return expanded

    def reset_boost_query(
        self,
        query: "DisMaxQuery",
        context: ExpansionContext,
        topic_ids: Iterable[int | str],
        field: str = UNSCOPED,
        boost: float | None = None,
    ) -> "DisMaxQuery":
        """Return a copy of query whose only boost terms are the words of topic_ids."""
        expanded = query.copy()
        terms = self._compile(query, context, topic_ids, boost, "+")
        if terms:
            expanded.boost_query = self.compiler.replace_field(field, terms)
        return expanded

    def _compile(
        self,
        query: "DisMaxQuery",
        context: ExpansionContext,
        topic_ids: Iterable[int | str],
        boost: float | None,
        sign: str,
    ) -> dict[str, float]:
        return self.compiler.compile(
            context.expansion_words,
            topic_ids,
            boost if boost is not None else query.default_boost,
            sign,
        )
