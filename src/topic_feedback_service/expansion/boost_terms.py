"""Field-scoped boost terms.

A boost query assigns a weight to terms, optionally restricted to a document
field. Terms are kept in a single table keyed by (field, term) so that one
scope can never alias another scope's term mapping.

    terms = BoostTermMap()
    terms.add("author", {"John": 0.5, "Doe": 0.5})
    terms.as_dict()  # {"author": {"John": 0.5, "Doe": 0.5}}
"""

from collections.abc import Iterator, Mapping

UNSCOPED = ""


class BoostTermMap:
    """Ordered mapping of field scope -> term -> boost.

    Scopes appear in the order their first term was inserted; terms keep
    insertion order within a scope. Writing an existing (field, term) pair
    overwrites its boost in place.
    """

    def __init__(self, terms: Mapping[str, Mapping[str, float]] | None = None) -> None:
        self._terms: dict[tuple[str, str], float] = {}
        if terms:
            for field, scoped in terms.items():
                self._put(field, scoped)

    def add(self, field: str, terms: Mapping[str, float]) -> "BoostTermMap":
        """Merge terms into a scope, overwriting same-named terms.

        Args:
            field: Field scope ("" for unscoped)
            terms: term -> boost

        Returns:
            self, for chaining
        """
        if not terms:
            return self
        self._put(self._merge_target(field), terms)
        return self

    def replace(self, field: str, terms: Mapping[str, float]) -> "BoostTermMap":
        """Discard every scope and term, then insert terms under field."""
        self._terms = {}
        self._put(field, terms)
        return self

    def clear(self) -> None:
        self._terms = {}

    def copy(self) -> "BoostTermMap":
        clone = BoostTermMap()
        clone._terms = dict(self._terms)
        return clone

    def fields(self) -> list[str]:
        """Field scopes in first-insertion order."""
        return list(dict.fromkeys(field for field, _term in self._terms))

    def terms(self, field: str) -> dict[str, float]:
        """term -> boost for one scope (empty if the scope is absent)."""
        return {term: boost for (scope, term), boost in self._terms.items() if scope == field}

    def as_dict(self) -> dict[str, dict[str, float]]:
        return {field: self.terms(field) for field in self.fields()}

    def _merge_target(self, field: str) -> str:
        # Compatibility quirk: an unscoped add while only scoped terms exist
        # lands in the most recently created scope instead of a new "" scope.
        fields = self.fields()
        if field == UNSCOPED and UNSCOPED not in fields and fields:
            return fields[-1]
        return field

    def _put(self, field: str, terms: Mapping[str, float]) -> None:
        for term, boost in terms.items():
            self._terms[(field, term)] = boost

    def __iter__(self) -> Iterator[tuple[str, str, float]]:
        for (field, term), boost in self._terms.items():
            yield field, term, boost

    def __len__(self) -> int:
        return len(self._terms)

    def __bool__(self) -> bool:
        return bool(self._terms)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BoostTermMap):
            return self.as_dict() == other.as_dict()
        if isinstance(other, Mapping):
            return self.as_dict() == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"BoostTermMap({self.as_dict()!r})"
