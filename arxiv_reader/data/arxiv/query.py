"""Request parameters for the arXiv query API.

The upstream service reads a literal ``+`` in ``search_query`` as the space
around boolean operators (``cat:cs.LG+OR+cat:cs.AI``). Percent-encoding that
``+`` makes the query silently match nothing, so the query string is assembled
here already encoded and must be sent verbatim.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import quote, unquote

from arxiv_reader.data.arxiv.constants import (
    LATEST_PRIMARY_PREFIXES,
    LATEST_SECONDARY_PREFIXES,
    LATEST_TERTIARY_PREFIXES,
    MAX_RESULTS_LIMIT,
    SORT_ORDER,
    Category,
    SortBy,
)
from arxiv_reader.data.arxiv.errors import InvalidRequestError

_SUBJECT_RE = re.compile(r"^[A-Za-z][A-Za-z-]*(\.[A-Za-z-]+)?$")
_OR = "+OR+"
_AND = "+AND+"


@dataclass(frozen=True, slots=True)
class FetchRequest:
    """What to fetch; passed explicitly into every fetch call."""

    category: Category | str = Category.LATEST
    count: int = 10
    sort_by: SortBy | str = SortBy.LAST_UPDATED_DATE
    query: str | None = None
    subject: str | None = None


@dataclass(frozen=True, slots=True)
class QueryParams:
    search_query: str
    max_results: int
    sort_by: SortBy = SortBy.LAST_UPDATED_DATE
    start: int = 0
    sort_order: str = SORT_ORDER

    def to_query_string(self) -> str:
        return (
            f"search_query={self.search_query}"
            f"&start={self.start}"
            f"&max_results={self.max_results}"
            f"&sortBy={self.sort_by.value}"
            f"&sortOrder={self.sort_order}"
        )

    def url(self, api_url: str) -> str:
        return f"{api_url}?{self.to_query_string()}"


@dataclass(frozen=True, slots=True)
class QueryTier:
    name: str
    params: QueryParams


def encode_search_term(term: str) -> str:
    """Percent-encode free text so that no character is read as query syntax."""
    return quote(term, safe="")


def decode_search_term(encoded: str) -> str:
    return unquote(encoded)


def subject_filter(prefixes: Iterable[str]) -> str:
    """OR together ``cat:`` clauses using the transport ``+`` token."""
    clauses = [f"cat:{prefix}" for prefix in prefixes]
    if not clauses:
        raise InvalidRequestError("Subject filter needs at least one prefix")
    return _OR.join(clauses)


def coerce_category(value: Category | str) -> Category:
    try:
        return Category(value)
    except ValueError as e:
        valid = ", ".join(c.value for c in Category)
        raise InvalidRequestError(f"Unknown category {value!r}; expected one of: {valid}") from e


def coerce_sort_by(value: SortBy | str) -> SortBy:
    try:
        return SortBy(value)
    except ValueError as e:
        valid = ", ".join(s.value for s in SortBy)
        raise InvalidRequestError(f"Unknown sort field {value!r}; expected one of: {valid}") from e


def build_query(request: FetchRequest) -> QueryParams:
    """
    Build the primary query for a request.

    Raises:
        InvalidRequestError: On unknown category or sort field, a count outside
            1..MAX_RESULTS_LIMIT, a missing search term, or a malformed subject.
    """
    return _build_tiers(request)[0].params


def plan_queries(request: FetchRequest) -> list[QueryTier]:
    """
    Return the ordered query tiers for a request.

    Only ``latest`` has fallback tiers; every other category yields a single
    primary query.
    """
    return _build_tiers(request)


def _build_tiers(request: FetchRequest) -> list[QueryTier]:
    category = coerce_category(request.category)
    sort_by = coerce_sort_by(request.sort_by)
    count = _validate_count(request.count)

    def params(search_query: str) -> QueryParams:
        return QueryParams(search_query=search_query, max_results=count, sort_by=sort_by)

    if category is Category.LATEST:
        return [
            QueryTier("primary", params(subject_filter(LATEST_PRIMARY_PREFIXES))),
            QueryTier("secondary", params(subject_filter(LATEST_SECONDARY_PREFIXES))),
            QueryTier("tertiary", params(subject_filter(LATEST_TERTIARY_PREFIXES))),
        ]

    if category is Category.SEARCH:
        return [QueryTier("primary", params(_search_expression(request.query, request.subject)))]

    return [QueryTier("primary", params(subject_filter([f"{category.value}*"])))]


def _search_expression(query: str | None, subject: str | None) -> str:
    term = (query or "").strip()
    if not term:
        raise InvalidRequestError("Search requires a non-empty query")

    expression = f"all:{encode_search_term(term)}"

    subject = (subject or "").strip()
    if subject:
        if not _SUBJECT_RE.match(subject):
            raise InvalidRequestError(f"Malformed subject filter: {subject!r}")
        expression = f"{expression}{_AND}{subject_filter([f'{subject}*'])}"

    return expression


def _validate_count(count: int) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidRequestError(f"Result count must be an integer, got {count!r}")
    if not 1 <= count <= MAX_RESULTS_LIMIT:
        raise InvalidRequestError(
            f"Result count must be between 1 and {MAX_RESULTS_LIMIT}, got {count}"
        )
    return count
