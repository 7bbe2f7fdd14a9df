"""DisMax query builder.

Builds the request parameters of a Solr DisMax query, the query parser that
lets a plain user query be matched across weighted fields (qf) while extra
boost terms (bq) nudge the ranking without restricting the result set.

Parameter syntax:
- qf: "text^1.0 title^2.5"
- bq: "impact^1.0 author:John^0.5 -junk^1.0"

Usage:
    query = DisMaxQuery("environmental policy")
    query.set_query_field("text")
    query.add_boost_query({"united": 1.0, "states": 1.0})
    query.to_query_string()
    # "q=environmental+policy&defType=dismax&qf=text%5E1.0&bq=united%5E1.0+states%5E1.0"
"""

from collections.abc import Iterable, Mapping
from urllib.parse import urlencode

from topic_feedback_service.config import settings
from topic_feedback_service.expansion.boost_terms import UNSCOPED, BoostTermMap

DEF_TYPE = "defType"
DISMAX = "dismax"


class DisMaxParams:
    """Names of the parameters understood by the DisMax query parser."""

    ALTQ = "q.alt"
    QF = "qf"
    MM = "mm"
    PF = "pf"
    PS = "ps"
    QS = "qs"
    TIE = "tie"
    BQ = "bq"
    BF = "bf"


TermsInput = str | Iterable[str] | Mapping[str, float]


class DisMaxQuery:
    """Solr DisMax query with weighted query fields and boost terms.

    Query fields and boost terms are kept as structured maps; the
    parameter strings are rendered on demand by to_params().
    """

    def __init__(self, query: str = "", default_boost: float | None = None) -> None:
        self.query = query
        self.default_boost = (
            default_boost if default_boost is not None else settings.default_boost
        )
        self.query_fields: dict[str, float] = {}
        self.boost_query = BoostTermMap()
        self._params: dict[str, str] = {}

    # Query fields (qf)

    def set_query_field(self, field: str, boost: float | None = None) -> "DisMaxQuery":
        """Replace all query fields with a single field."""
        if not field:
            return self
        self.query_fields = {field: self._boost(boost)}
        return self

    def set_query_fields(self, fields: Iterable[str] | Mapping[str, float]) -> "DisMaxQuery":
        """Replace all query fields.

        Args:
            fields: Field names (default boost) or field -> boost mapping
        """
        weighted = self._weighted_fields(fields)
        if not weighted:
            return self
        self.query_fields = weighted
        return self

    def add_query_field(self, field: str, boost: float | None = None) -> "DisMaxQuery":
        """Add a query field, overwriting its boost if already present."""
        if not field:
            return self
        self.query_fields[field] = self._boost(boost)
        return self

    def add_query_fields(self, fields: Iterable[str] | Mapping[str, float]) -> "DisMaxQuery":
        self.query_fields.update(self._weighted_fields(fields))
        return self

    # Boost query (bq)

    def set_boost_query(
        self,
        terms: TermsInput,
        field: str = UNSCOPED,
        boost: float | None = None,
    ) -> "DisMaxQuery":
        """Replace every boost term with terms under field.

        Args:
            terms: A term, a list of terms (one shared boost) or term -> boost
            field: Field scope ("" for the default search field)
            boost: Boost for str/list input (default_boost if None)
        """
        boosted = self._boosted_terms(terms, boost)
        if not boosted:
            return self
        self.boost_query.replace(field, boosted)
        return self

    def add_boost_query(
        self,
        terms: TermsInput,
        field: str = UNSCOPED,
        boost: float | None = None,
    ) -> "DisMaxQuery":
        """Merge terms into the boost query.

        An unscoped add while only scoped terms exist goes into the most
        recently created scope (see BoostTermMap.add).
        """
        boosted = self._boosted_terms(terms, boost)
        if not boosted:
            return self
        self.boost_query.add(field, boosted)
        return self

    # Common params

    def set_param(self, name: str, value: str | int | float | bool) -> "DisMaxQuery":
        if isinstance(value, bool):
            value = "true" if value else "false"
        self._params[name] = str(value)
        return self

    def set_rows(self, rows: int) -> "DisMaxQuery":
        return self.set_param("rows", rows)

    def set_start(self, start: int) -> "DisMaxQuery":
        return self.set_param("start", start)

    def set_highlights(self, num: int, *fields: str) -> "DisMaxQuery":
        """Enable highlighting of up to num snippets on fields."""
        self.set_param("hl", True)
        self.set_param("hl.fl", ",".join(fields))
        return self.set_param("hl.snippets", num)

    # Rendering

    def query_fields_param(self) -> str:
        return " ".join(
            f"{field}^{_format_boost(boost)}" for field, boost in self.query_fields.items()
        )

    def boost_query_param(self) -> str:
        return " ".join(
            _format_boost_term(field, term, boost) for field, term, boost in self.boost_query
        )

    def to_params(self) -> list[tuple[str, str]]:
        """Render request parameters in a stable order."""
        params = [("q", self.query), (DEF_TYPE, DISMAX)]
        if self.query_fields:
            params.append((DisMaxParams.QF, self.query_fields_param()))
        if self.boost_query:
            params.append((DisMaxParams.BQ, self.boost_query_param()))
        params.extend(self._params.items())
        return params

    def to_query_string(self) -> str:
        return urlencode(self.to_params())

    def copy(self) -> "DisMaxQuery":
        clone = DisMaxQuery(self.query, default_boost=self.default_boost)
        clone.query_fields = dict(self.query_fields)
        clone.boost_query = self.boost_query.copy()
        clone._params = dict(self._params)
        return clone

    def _boost(self, boost: float | None) -> float:
        return self.default_boost if boost is None else boost

    def _weighted_fields(self, fields: Iterable[str] | Mapping[str, float]) -> dict[str, float]:
        if isinstance(fields, Mapping):
            return dict(fields)
        return {field: self.default_boost for field in fields if field}

    def _boosted_terms(self, terms: TermsInput | None, boost: float | None) -> dict[str, float]:
        if not terms:
            return {}
        if isinstance(terms, str):
            return {terms: self._boost(boost)}
        if isinstance(terms, Mapping):
            return dict(terms)
        return {term: self._boost(boost) for term in terms if term}

    def __repr__(self) -> str:
        return f"DisMaxQuery({self.to_query_string()!r})"


def _format_boost(boost: float) -> str:
    return str(float(boost))


def _format_boost_term(field: str, term: str, boost: float) -> str:
    """Render one bq clause; a negated term keeps its '-' in front of the field."""
    negated = term.startswith("-")
    bare = term[1:] if negated else term
    clause = f"{field}:{bare}" if field else bare
    return f"{'-' if negated else ''}{clause}^{_format_boost(boost)}"
