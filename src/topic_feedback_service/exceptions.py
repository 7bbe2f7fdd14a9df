"""Custom exceptions for topic expansion.

Sparse data (fewer than four enriched topics, fewer than five expansion
words, a document without topics) is not an error and never raises.
"""


class TopicExpansionError(Exception):
    """Base exception for topic expansion errors."""

    pass


class PreconditionError(TopicExpansionError):
    """An operation was called before the state it depends on exists."""

    pass


class ThresholdRankError(PreconditionError):
    """Percentile maps to a rank outside the sorted coherence scores."""

    def __init__(self, percentile: float, rank: int, total: int) -> None:
        self.percentile = percentile
        self.rank = rank
        self.total = total
        super().__init__(
            f"Percentile {percentile} maps to rank {rank}, "
            f"outside the {total} available coherence scores"
        )


class InsufficientCandidatesError(TopicExpansionError):
    """A topic has fewer candidates than the selection requires.

    Recoverable: callers may skip the topic's contribution.
    """

    def __init__(self, topic_id: int, required: int, found: int, kind: str) -> None:
        self.topic_id = topic_id
        self.required = required
        self.found = found
        self.kind = kind
        super().__init__(
            f"Topic {topic_id} has {found} {kind} candidate(s), {required} required"
        )


class CollaboratorIOError(TopicExpansionError):
    """An external collaborator (store, search engine) failed."""

    pass


class TopicStoreError(CollaboratorIOError):
    """Topic model store unreachable or returned a malformed record."""

    pass


class SearchEngineError(CollaboratorIOError):
    """Search engine request failed or returned an unusable payload."""

    pass
