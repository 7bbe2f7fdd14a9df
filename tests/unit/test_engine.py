"""Unit tests for the topic expansion engine."""

import pytest

from topic_feedback_service.exceptions import PreconditionError, ThresholdRankError
from topic_feedback_service.expansion import NO_TRIGRAM_LABEL, TopicExpansionEngine
from topic_feedback_service.search.dismax import DisMaxQuery

from tests.fakes import InMemoryTopicStore, words

LATENT_TOPICS = [134, 474, 391, 81, 205, 310, 126, 247]


@pytest.fixture
def engine(scenario_store: InMemoryTopicStore) -> TopicExpansionEngine:
    return TopicExpansionEngine(scenario_store, threshold=-100.0, skip_insufficient=False)


class TestResolveThreshold:
    """Tests for TopicExpansionEngine.resolve_threshold()."""

    def test_configured_threshold(self, engine: TopicExpansionEngine) -> None:
        assert engine.resolve_threshold() == -100.0

    def test_explicit_threshold_wins(self, engine: TopicExpansionEngine) -> None:
        assert engine.resolve_threshold(threshold=-50.0, percentile=0.5) == -50.0

    def test_explicit_percentile(self, engine: TopicExpansionEngine) -> None:
        assert engine.resolve_threshold(percentile=0.5) == -80.0

    def test_configured_percentile_overrides_configured_threshold(
        self, scenario_store: InMemoryTopicStore
    ) -> None:
        engine = TopicExpansionEngine(scenario_store, threshold=-100.0, threshold_percentile=1.0)

        assert engine.resolve_threshold() == -38.0

    def test_out_of_range_percentile_raises(self, engine: TopicExpansionEngine) -> None:
        with pytest.raises(ThresholdRankError):
            engine.resolve_threshold(percentile=0.01)


class TestSelectLatentTopics:
    """Tests for TopicExpansionEngine.select_latent_topics()."""

    def test_enriched_then_new_related(self, engine: TopicExpansionEngine) -> None:
        """Test that latent topics list enriched first and skip repeated related topics."""
        context = engine.select_latent_topics("A", "B")

        assert context.documents == ("A", "B")
        assert context.threshold == -100.0
        assert context.enriched == [134, 474, 391, 81]
        assert context.related == [474, 205, 134, 310, 81, 126, 391, 247]
        assert context.latent_topics == LATENT_TOPICS

    def test_no_coherent_topics_raises(self, engine: TopicExpansionEngine) -> None:
        with pytest.raises(PreconditionError):
            engine.select_latent_topics("missing", "also-missing")

    def test_contexts_are_independent(self, engine: TopicExpansionEngine) -> None:
        """Test that two requests never share state."""
        first = engine.select_latent_topics("A", "B")
        second = engine.select_latent_topics("A", "B")

        first.latent_topics.append(1)

        assert second.latent_topics == LATENT_TOPICS


class TestExpand:
    """Tests for TopicExpansionEngine.expand()."""

    def test_terms_for_every_latent_topic(self, engine: TopicExpansionEngine) -> None:
        context = engine.expand("A", "B")

        assert list(context.topic_terms) == LATENT_TOPICS
        assert context.expansion_words[134] == ["issue", "policy", "public", "issues", "debate"]
        assert context.expansion_words[81] == ["united", "states", "trade", "tariff"]

    def test_display_labels(self, engine: TopicExpansionEngine) -> None:
        context = engine.expand("A", "B")

        terms = context.topic_terms[134]
        assert terms.has_trigram
        assert terms.trigram_label == "special interest group"
        assert terms.bigrams_label == "public opinion, conflict interest"
        assert terms.unigrams_label == "issue, policy, public, issues"

        assert context.topic_terms[474].trigram_label == NO_TRIGRAM_LABEL
        assert context.topic_terms[391].bigrams_label == ""

    def test_topic_with_few_unigrams_keeps_short_list(
        self, scenario_store: InMemoryTopicStore
    ) -> None:
        """Test that a sparse related topic stays latent with fewer words."""
        scenario_store.unigrams[310] = words("tax", "budget", "deficit")
        engine = TopicExpansionEngine(scenario_store, threshold=-100.0, skip_insufficient=False)

        context = engine.expand("A", "B")

        assert context.latent_topics == LATENT_TOPICS
        assert context.expansion_words[310] == ["tax", "budget", "deficit"]
        assert context.topic_terms[310].unigrams_label == "tax, budget, deficit"

    def test_short_list_compiles_into_boost_terms(
        self, scenario_store: InMemoryTopicStore
    ) -> None:
        scenario_store.unigrams[310] = words("tax", "budget")
        engine = TopicExpansionEngine(scenario_store, threshold=-100.0)
        context = engine.expand("A", "B")

        expanded = engine.expand_boost_query(DisMaxQuery("oil", default_boost=1.0), context, [310])

        assert expanded.boost_query == {"": {"tax": 1.0, "budget": 1.0}}


class TestBoostQuery:
    """Tests for expand_boost_query() and reset_boost_query()."""

    def test_expand_adds_unscoped_terms(self, engine: TopicExpansionEngine) -> None:
        context = engine.expand("A", "B")
        query = DisMaxQuery("oil spill", default_boost=1.0)

        expanded = engine.expand_boost_query(query, context, [81])

        assert expanded.boost_query == {
            "": {"united": 1.0, "states": 1.0, "trade": 1.0, "tariff": 1.0}
        }

    def test_expand_negative_field_terms(self, engine: TopicExpansionEngine) -> None:
        context = engine.expand("A", "B")
        query = DisMaxQuery("oil spill")

        expanded = engine.expand_boost_query(
            query, context, ["391"], field="text", boost=0.5, sign="-"
        )

        assert expanded.boost_query.terms("text") == {
            "-oil": 0.5,
            "-spill": 0.5,
            "-coast": 0.5,
            "-cleanup": 0.5,
            "-damage": 0.5,
        }
        assert expanded.boost_query_param().startswith("-text:oil^0.5 -text:spill^0.5")

    def test_expand_merges_with_existing_terms(self, engine: TopicExpansionEngine) -> None:
        context = engine.expand("A", "B")
        query = DisMaxQuery("oil spill").add_boost_query({"John": 0.5}, field="author")

        expanded = engine.expand_boost_query(query, context, [81], boost=2.0)

        # Unscoped terms join the only existing scope
        assert expanded.boost_query.fields() == ["author"]
        assert expanded.boost_query.terms("author")["united"] == 2.0
        assert query.boost_query == {"author": {"John": 0.5}}

    def test_reset_replaces_terms(self, engine: TopicExpansionEngine) -> None:
        context = engine.expand("A", "B")
        query = DisMaxQuery("oil spill").add_boost_query({"John": 0.5}, field="author")

        expanded = engine.reset_boost_query(query, context, [474], field="title", boost=1.5)

        assert expanded.boost_query == {
            "title": {"court": 1.5, "judge": 1.5, "ruling": 1.5, "appeal": 1.5, "justice": 1.5}
        }
        assert query.boost_query == {"author": {"John": 0.5}}

    def test_unselected_topic_raises(self, engine: TopicExpansionEngine) -> None:
        context = engine.expand("A", "B")

        with pytest.raises(PreconditionError):
            engine.expand_boost_query(DisMaxQuery("oil"), context, [12])
