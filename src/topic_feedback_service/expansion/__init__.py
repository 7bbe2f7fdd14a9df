"""Topic expansion: topic selection, term ranking and boost term compilation."""

from .boost_terms import UNSCOPED, BoostTermMap
from .coherence import CoherenceFilter, TopicKind
from .compiler import ExpansionCompiler
from .context import NO_TRIGRAM_LABEL, ExpansionContext, TopicTerms
from .engine import TopicExpansionEngine
from .ranker import TermRanker
from .selector import TopicSelector

__all__ = [
    "NO_TRIGRAM_LABEL",
    "UNSCOPED",
    "BoostTermMap",
    "CoherenceFilter",
    "ExpansionCompiler",
    "ExpansionContext",
    "TermRanker",
    "TopicExpansionEngine",
    "TopicKind",
    "TopicSelector",
    "TopicTerms",
]
