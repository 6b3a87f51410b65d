import pytest

from arxiv_reader.data.arxiv.constants import SUBJECT_CATEGORIES, Category, SortBy
from arxiv_reader.data.arxiv.errors import InvalidRequestError
from arxiv_reader.data.arxiv.query import (
    FetchRequest,
    build_query,
    decode_search_term,
    encode_search_term,
    plan_queries,
    subject_filter,
)


def test_latest_primary_query_string() -> None:
    params = build_query(FetchRequest(category="latest", count=10))

    assert params.to_query_string() == (
        "search_query=cat:cs.*+OR+cat:stat.*+OR+cat:math.*"
        "&start=0&max_results=10&sortBy=lastUpdatedDate&sortOrder=descending"
    )


def test_latest_has_three_tiers() -> None:
    tiers = plan_queries(FetchRequest(category=Category.LATEST, count=5))

    assert [t.name for t in tiers] == ["primary", "secondary", "tertiary"]
    assert tiers[1].params.search_query == "cat:cs.LG+OR+cat:cs.AI+OR+cat:cs.CV"
    assert tiers[2].params.search_query == "cat:cs.LG"
    assert all(t.params.max_results == 5 for t in tiers)


@pytest.mark.parametrize("category", SUBJECT_CATEGORIES)
def test_subject_categories_have_single_tier(category: Category) -> None:
    tiers = plan_queries(FetchRequest(category=category, count=10))

    assert len(tiers) == 1
    assert tiers[0].params.search_query == f"cat:{category.value}*"
    assert tiers[0].params.start == 0
    assert tiers[0].params.sort_order == "descending"


def test_eight_subject_categories() -> None:
    assert len(SUBJECT_CATEGORIES) == 8


def test_or_uses_literal_plus_not_percent_twenty() -> None:
    expression = subject_filter(["cs.LG", "cs.AI"])

    assert expression == "cat:cs.LG+OR+cat:cs.AI"
    assert "%20" not in expression
    assert " " not in expression


def test_sort_by_submitted_date() -> None:
    params = build_query(FetchRequest(category="cs", count=3, sort_by="submittedDate"))

    assert params.sort_by is SortBy.SUBMITTED_DATE
    assert "sortBy=submittedDate" in params.to_query_string()


def test_search_query_is_percent_encoded() -> None:
    params = build_query(FetchRequest(category="search", count=20, query="  graph neural networks "))

    assert params.search_query == "all:graph%20neural%20networks"


def test_search_with_subject() -> None:
    params = build_query(
        FetchRequest(category="search", count=20, query="transformers", subject="cs")
    )

    assert params.search_query == "all:transformers+AND+cat:cs*"


def test_search_with_dotted_subject() -> None:
    params = build_query(FetchRequest(category="search", query="llm", subject="cs.AI"))

    assert params.search_query == "all:llm+AND+cat:cs.AI*"


def test_search_term_special_characters_cannot_inject_operators() -> None:
    encoded = encode_search_term("a+OR+b & c")

    assert "+" not in encoded
    assert "&" not in encoded


@pytest.mark.parametrize(
    "term",
    ["graph neural networks", "quantum + error correction", "naïve Bayes 100%", "a/b?c=d"],
)
def test_search_term_round_trip(term: str) -> None:
    assert decode_search_term(encode_search_term(term)) == term


def test_url() -> None:
    params = build_query(FetchRequest(category="math", count=1))

    assert params.url("https://export.arxiv.org/api/query").startswith(
        "https://export.arxiv.org/api/query?search_query=cat:math*&start=0&max_results=1"
    )


@pytest.mark.parametrize(
    "request_",
    [
        FetchRequest(category="astrology"),
        FetchRequest(category="cs", count=0),
        FetchRequest(category="cs", count=2001),
        FetchRequest(category="cs", sort_by="relevance-ish"),
        FetchRequest(category="search", query=None),
        FetchRequest(category="search", query="   "),
        FetchRequest(category="search", query="x", subject="cs OR 1"),
    ],
)
def test_invalid_requests(request_: FetchRequest) -> None:
    with pytest.raises(InvalidRequestError):
        plan_queries(request_)
