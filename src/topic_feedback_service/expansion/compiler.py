"""Compilation of expansion words into boost terms.

Expansion words come from the unigrams selected per topic. The user picks a
set of topics; their words are concatenated and given one shared boost.
A '-' sign turns every word into a negative boost term ("-word"), which
pushes documents about the topic down instead of up.
"""

from collections.abc import Iterable, Mapping, Sequence

from topic_feedback_service.exceptions import PreconditionError
from topic_feedback_service.logging_config import get_logger

from .boost_terms import BoostTermMap

logger = get_logger(__name__)

NEGATIVE_SIGN = "-"


class ExpansionCompiler:
    """Builds term -> boost mappings and merges them into BoostTermMaps."""

    def build_boost_map(
        self,
        words: Iterable[str],
        boost: float,
        sign: str = "+",
    ) -> dict[str, float]:
        """Give every word the same boost, optionally as negative terms.

        Args:
            words: Expansion words in order
            boost: Boost applied to every term
            sign: '-' prefixes each term with '-'; anything else leaves terms as is

        Returns:
            term -> boost in word order; a repeated word keeps its first position
        """
        prefix = NEGATIVE_SIGN if sign == NEGATIVE_SIGN else ""
        return {f"{prefix}{word}": boost for word in words}

    def words_for_topics(
        self,
        expansion_words: Mapping[int, Sequence[str]],
        topic_ids: Iterable[int | str],
    ) -> list[str]:
        """Concatenate the expansion words of the given topics.

        No deduplication across topics is done.

        Args:
            expansion_words: topic ID -> expansion words
            topic_ids: Topics to expand with (numeric strings accepted)

        Raises:
            PreconditionError: If a topic has no selected expansion words
        """
        words: list[str] = []
        for raw_topic_id in topic_ids:
            try:
                topic_id = int(raw_topic_id)
            except (TypeError, ValueError) as e:
                raise PreconditionError(f"Invalid topic ID: {raw_topic_id!r}") from e
            if topic_id not in expansion_words:
                raise PreconditionError(
                    f"No expansion words selected for topic {topic_id}; select topic terms first"
                )
            words.extend(expansion_words[topic_id])
        return words

    def compile(
        self,
        expansion_words: Mapping[int, Sequence[str]],
        topic_ids: Iterable[int | str],
        boost: float,
        sign: str = "+",
    ) -> dict[str, float]:
        """Build the boost map for a set of topics."""
        words = self.words_for_topics(expansion_words, topic_ids)
        boost_map = self.build_boost_map(words, boost, sign)
        logger.debug(
            "expansion_compiler.compiled",
            words=len(words),
            terms=len(boost_map),
            boost=boost,
            sign=sign,
        )
        return boost_map

    def merge_into_field(
        self,
        existing: BoostTermMap,
        field: str,
        terms: Mapping[str, float],
    ) -> BoostTermMap:
        """Return a copy of existing with terms added to a field scope.

        Unscoped adds fall back to the last existing scope when no unscoped
        terms exist yet (see BoostTermMap.add).
        """
        return existing.copy().add(field, terms)

    def replace_field(self, field: str, terms: Mapping[str, float]) -> BoostTermMap:
        """Return a new map holding only terms under field."""
        return BoostTermMap().replace(field, terms)
