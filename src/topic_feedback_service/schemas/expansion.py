"""Topic expansion request and response schemas.

Two flows share these schemas:
- Topic browsing: seed documents in, latent topics with their terms out
- Query expansion: a user query in, the expanded DisMax query out
"""

from enum import Enum

from pydantic import BaseModel, Field


class ExpansionSign(str, Enum):
    """Direction of a boost.

    Values:
        PLUS: Push documents about the chosen topics up
        MINUS: Push documents about the chosen topics down
    """

    PLUS = "+"
    MINUS = "-"


class TopicsRequest(BaseModel):
    """Latent topic selection for two seed documents.

    Only the first two document IDs are used; callers usually pass the IDs
    of the top-ranked search results as returned by the search engine.
    """

    document_ids: list[str] = Field(
        ...,
        min_length=2,
        description="Seed document IDs, best first (first two are used)",
        examples=[["LA092590-0030", "FT934-13458"]],
    )
    threshold: float | None = Field(
        default=None,
        description="Absolute coherence threshold (overrides configuration)",
        examples=[-100.0],
    )
    threshold_percentile: float | None = Field(
        default=None,
        gt=0.0,
        le=1.0,
        description="Derive the threshold from this percentile of all coherence scores",
        examples=[0.25],
    )


class NGramResponse(BaseModel):
    text: str
    size: int = Field(..., ge=1, le=3)
    score: float


class UnigramResponse(BaseModel):
    word: str
    probability: float


class TopicTermsResponse(BaseModel):
    """Representative terms of one latent topic.

    Labels are ready for display: the trigram label reads
    "(No trigrams found)" when the topic has none.
    """

    topic_id: int
    ngrams: list[NGramResponse] = Field(
        default_factory=list,
        description="Trigram (if any) followed by bigrams",
    )
    unigrams: list[UnigramResponse] = Field(
        default_factory=list,
        description="Display unigrams, most probable first",
    )
    expansion_words: list[str] = Field(
        default_factory=list,
        description="Words used when this topic is chosen for expansion",
    )
    trigram_label: str
    bigrams_label: str
    unigrams_label: str


class LatentTopicsResponse(BaseModel):
    """Latent topics of two seed documents."""

    documents: list[str]
    threshold: float = Field(..., description="Coherence threshold that was applied")
    enriched: list[int] = Field(
        default_factory=list,
        description="Strongest coherent topics of the seed documents",
    )
    related: list[int] = Field(
        default_factory=list,
        description="Most covariant coherent co-topics of the enriched topics",
    )
    latent_topics: list[int] = Field(
        default_factory=list,
        description="Enriched topics followed by related topics not already present",
    )
    topics: list[TopicTermsResponse] = Field(default_factory=list)


class ExpandQueryRequest(BaseModel):
    """Query expansion request.

    The query runs on the search engine first; its two top results seed the
    topic selection. With no topic_ids the response only lists the latent
    topics, so a client can show them and come back with a choice.

    Examples:
        >>> request = ExpandQueryRequest(
        ...     query="environmental policy",
        ...     topic_ids=[134, 391],
        ...     field="text",
        ...     boost=0.5,
        ... )
    """

    query: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="User search query",
        examples=["environmental policy"],
    )
    query_fields: dict[str, float] | None = Field(
        default=None,
        description="Weighted query fields (qf), field -> boost",
        examples=[{"text": 1.0, "headline": 2.0}],
    )
    topic_ids: list[int] = Field(
        default_factory=list,
        description="Latent topics whose words boost the query",
    )
    field: str = Field(
        default="",
        max_length=255,
        description="Field scope of the boost terms (empty for the default field)",
    )
    boost: float | None = Field(
        default=None,
        description="Boost of every expansion term (configured default if omitted)",
    )
    sign: ExpansionSign = Field(
        default=ExpansionSign.PLUS,
        description="'-' turns the expansion terms into negative boosts",
    )
    reset: bool = Field(
        default=False,
        description="Replace existing boost terms instead of adding to them (sign is ignored)",
    )
    threshold: float | None = None
    threshold_percentile: float | None = Field(default=None, gt=0.0, le=1.0)
    rows: int | None = Field(
        default=None,
        ge=2,
        le=100,
        description="Number of search results to request",
    )


class ExpandQueryResponse(BaseModel):
    """Expanded DisMax query and the topics it was built from."""

    query: str
    seed_documents: list[str]
    params: dict[str, str] = Field(
        ...,
        description="Search engine request parameters",
        examples=[{"q": "environmental policy", "defType": "dismax", "bq": "united^1.0"}],
    )
    query_string: str = Field(..., description="URL-encoded parameters")
    boost_query: dict[str, dict[str, float]] = Field(
        default_factory=dict,
        description="Boost terms per field scope ('' for unscoped)",
    )
    topics: LatentTopicsResponse
