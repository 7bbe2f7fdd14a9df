"""Topic expansion API endpoints.

Endpoints:
- POST /api/v1/expansion/topics: Latent topics of two seed documents
- POST /api/v1/expansion/query: Run a query, derive latent topics from its
  top two results and expand the query with the chosen topics

Error mapping:
- PreconditionError -> 400 (bad input or missing prior state)
- InsufficientCandidatesError -> 422 (topic model too sparse for the request)
- CollaboratorIOError -> 502 (topic store or search engine failure)
"""

from collections.abc import Iterator

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from topic_feedback_service.config import settings
from topic_feedback_service.database import get_db
from topic_feedback_service.exceptions import (
    CollaboratorIOError,
    InsufficientCandidatesError,
    PreconditionError,
    TopicExpansionError,
)
from topic_feedback_service.expansion import ExpansionContext, TopicExpansionEngine, TopicTerms
from topic_feedback_service.logging_config import get_logger
from topic_feedback_service.schemas.expansion import (
    ExpandQueryRequest,
    ExpandQueryResponse,
    ExpansionSign,
    LatentTopicsResponse,
    NGramResponse,
    TopicsRequest,
    TopicTermsResponse,
    UnigramResponse,
)
from topic_feedback_service.search import DisMaxQuery, SolrClient, first_two_result_ids
from topic_feedback_service.store import SQLTopicModelStore, TopicModelStore

router = APIRouter(prefix=settings.api_v1_prefix, tags=["expansion"])
logger = get_logger(__name__)


def get_topic_store(db: Session = Depends(get_db)) -> TopicModelStore:
    """Topic model store bound to the request's database session."""
    return SQLTopicModelStore(db)


def get_engine(store: TopicModelStore = Depends(get_topic_store)) -> TopicExpansionEngine:
    return TopicExpansionEngine(store)


def get_search_client() -> Iterator[SolrClient]:
    """Solr client for one request, closed afterwards."""
    client = SolrClient()
    try:
        yield client
    finally:
        client.close()


@router.post(
    "/expansion/topics",
    response_model=LatentTopicsResponse,
    status_code=status.HTTP_200_OK,
    summary="Select latent topics of two seed documents",
    description="""
Select the enriched topics of the first two documents, their related
co-topics and the representative terms of every latent topic.

Topics scoring below the coherence threshold are never returned. The
threshold comes from the request (absolute or percentile) or from the
service configuration.
    """,
)
def select_topics(
    request: TopicsRequest,
    engine: TopicExpansionEngine = Depends(get_engine),
) -> LatentTopicsResponse:
    """Select latent topics and their terms.

    Raises:
        HTTPException 400: If no coherent topic is found or the percentile
            is out of range
        HTTPException 422: If a topic has too few related topics or unigrams
        HTTPException 502: If the topic store fails
    """
    document_1, document_2 = request.document_ids[:2]
    try:
        threshold = engine.resolve_threshold(request.threshold, request.threshold_percentile)
        context = engine.expand(document_1, document_2, threshold)
    except TopicExpansionError as e:
        raise _http_error(e, "expansion.topics.failed", documents=[document_1, document_2]) from e

    return _latent_topics_response(context)


@router.post(
    "/expansion/query",
    response_model=ExpandQueryResponse,
    status_code=status.HTTP_200_OK,
    summary="Expand a search query with latent topics",
    description="""
Run the query on the search engine, seed topic selection with the two
top-ranked results and add the expansion words of the chosen topics to the
query's boost terms.

- **sign** "-" pushes documents about the chosen topics down
- **reset** replaces existing boost terms instead of adding to them
- Without **topic_ids** only the latent topics are returned
    """,
)
def expand_query(
    request: ExpandQueryRequest,
    engine: TopicExpansionEngine = Depends(get_engine),
    solr: SolrClient = Depends(get_search_client),
) -> ExpandQueryResponse:
    """Expand a query with the words of chosen latent topics.

    Raises:
        HTTPException 400: If the search returned fewer than two results or
            a chosen topic is not a latent topic
        HTTPException 422: If a topic has too few related topics or unigrams
        HTTPException 502: If the topic store or the search engine fails
    """
    query = DisMaxQuery(request.query)
    if request.query_fields:
        query.set_query_fields(request.query_fields)

    try:
        results = solr.search(query, rows=request.rows)
        document_1, document_2 = first_two_result_ids(results, solr.id_field)
        threshold = engine.resolve_threshold(request.threshold, request.threshold_percentile)
        context = engine.expand(str(document_1), str(document_2), threshold)

        if request.topic_ids:
            if request.reset:
                query = engine.reset_boost_query(
                    query, context, request.topic_ids, field=request.field, boost=request.boost
                )
            else:
                query = engine.expand_boost_query(
                    query,
                    context,
                    request.topic_ids,
                    field=request.field,
                    boost=request.boost,
                    sign=request.sign.value,
                )
    except TopicExpansionError as e:
        raise _http_error(e, "expansion.query.failed", query=request.query[:100]) from e

    logger.info(
        "expansion.query.expanded",
        query=request.query[:100],
        topic_ids=request.topic_ids,
        negative=request.sign is ExpansionSign.MINUS,
        reset=request.reset,
        boost_terms=len(query.boost_query),
    )
    return ExpandQueryResponse(
        query=request.query,
        seed_documents=[str(document_1), str(document_2)],
        params=dict(query.to_params()),
        query_string=query.to_query_string(),
        boost_query=query.boost_query.as_dict(),
        topics=_latent_topics_response(context),
    )


def _http_error(error: TopicExpansionError, event: str, **context: object) -> HTTPException:
    """Log an expansion error and convert it to an HTTPException."""
    if isinstance(error, InsufficientCandidatesError):
        status_code = 422  # Unprocessable content
    elif isinstance(error, PreconditionError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, CollaboratorIOError):
        status_code = status.HTTP_502_BAD_GATEWAY
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    log = logger.error if status_code >= 500 else logger.warning
    log(event, error=str(error), error_type=type(error).__name__, **context)
    return HTTPException(status_code=status_code, detail=str(error))


def _topic_terms_response(terms: TopicTerms) -> TopicTermsResponse:
    return TopicTermsResponse(
        topic_id=terms.topic_id,
        ngrams=[
            NGramResponse(text=ngram.text, size=ngram.size, score=ngram.score)
            for ngram in terms.ngrams
        ],
        unigrams=[
            UnigramResponse(word=unigram.word, probability=unigram.probability)
            for unigram in terms.unigrams
        ],
        expansion_words=list(terms.expansion_words),
        trigram_label=terms.trigram_label,
        bigrams_label=terms.bigrams_label,
        unigrams_label=terms.unigrams_label,
    )


def _latent_topics_response(context: ExpansionContext) -> LatentTopicsResponse:
    return LatentTopicsResponse(
        documents=[str(document_id) for document_id in context.documents],
        threshold=context.threshold,
        enriched=context.enriched,
        related=context.related,
        latent_topics=context.latent_topics,
        topics=[
            _topic_terms_response(context.topic_terms[topic_id])
            for topic_id in context.latent_topics
        ],
    )
