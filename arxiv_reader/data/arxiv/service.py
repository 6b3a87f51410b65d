from dataclasses import dataclass, field
from typing import Any

from arxiv_reader.common.logging import get_logger
from arxiv_reader.common.settings import ArxivSettings
from arxiv_reader.data.arxiv.assembler import parse_feed
from arxiv_reader.data.arxiv.client import ArxivClient, ArxivClientConfig
from arxiv_reader.data.arxiv.constants import Category, SortBy
from arxiv_reader.data.arxiv.extractor import extract_total_results
from arxiv_reader.data.arxiv.parser import ParserOptions
from arxiv_reader.data.arxiv.query import FetchRequest, plan_queries
from arxiv_reader.data.arxiv.schemas import PaperRecord

logger = get_logger(__name__)


@dataclass
class TierAttempt:
    tier: str
    url: str
    fragments: int = 0
    records: int = 0
    dropped: int = 0
    total_results: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tier": self.tier,
            "url": self.url,
            "fragments": self.fragments,
            "records": self.records,
            "dropped": self.dropped,
            "total_results": self.total_results,
        }


@dataclass
class FetchDiagnostics:
    category: str
    attempts: list[TierAttempt] = field(default_factory=list)

    @property
    def requests(self) -> int:
        return len(self.attempts)

    @property
    def dropped(self) -> int:
        return sum(a.dropped for a in self.attempts)

    @property
    def tier_used(self) -> str | None:
        return self.attempts[-1].tier if self.attempts else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "requests": self.requests,
            "dropped": self.dropped,
            "tier_used": self.tier_used,
            "attempts": [a.to_dict() for a in self.attempts],
        }


class ArxivFeedService:
    """
    Fetch and assemble paper records for a category.

    ``latest`` walks a cascade of increasingly generic queries and stops at the
    first tier that yields records. Every other category makes one request.
    Only an empty successful response moves to the next tier: transport errors
    propagate immediately and end the call.
    """

    def __init__(
        self,
        client: ArxivClient | None = None,
        parser_options: ParserOptions | None = None,
    ) -> None:
        self._client = client or ArxivClient()
        self._parser_options = parser_options or ParserOptions()

    @classmethod
    def from_settings(cls, settings: ArxivSettings) -> "ArxivFeedService":
        return cls(
            client=ArxivClient(ArxivClientConfig.from_settings(settings)),
            parser_options=ParserOptions.from_settings(settings),
        )

    async def fetch(
        self,
        category: Category | str,
        count: int = 10,
        *,
        sort_by: SortBy | str = SortBy.LAST_UPDATED_DATE,
        query: str | None = None,
        subject: str | None = None,
    ) -> tuple[list[PaperRecord], FetchDiagnostics]:
        """
        Fetch records for a category.

        Args:
            category: "latest", a subject key (e.g. "cs") or "search".
            count: Maximum number of results per request.
            sort_by: Sort field; order is always descending.
            query: Free-text term, required for "search".
            subject: Optional subject filter ANDed into a search.

        Returns:
            Tuple of (records in feed order, diagnostics).

        Raises:
            InvalidRequestError: If the request cannot be built.
            TransportError: If any request fails.
            ParsingError: If a response body is not valid UTF-8.
        """
        request = FetchRequest(
            category=category,
            count=count,
            sort_by=sort_by,
            query=query,
            subject=subject,
        )
        return await self.fetch_request(request)

    async def search(
        self,
        query: str,
        count: int = 10,
        subject: str | None = None,
        sort_by: SortBy | str = SortBy.LAST_UPDATED_DATE,
    ) -> tuple[list[PaperRecord], FetchDiagnostics]:
        return await self.fetch(
            Category.SEARCH, count, sort_by=sort_by, query=query, subject=subject
        )

    async def fetch_request(
        self, request: FetchRequest
    ) -> tuple[list[PaperRecord], FetchDiagnostics]:
        tiers = plan_queries(request)
        diagnostics = FetchDiagnostics(category=str(request.category))
        records: list[PaperRecord] = []

        for index, tier in enumerate(tiers):
            body = await self._client.get_feed(tier.params)
            result = parse_feed(body, self._parser_options)

            diagnostics.attempts.append(
                TierAttempt(
                    tier=tier.name,
                    url=self._client.build_url(tier.params),
                    fragments=result.fragments,
                    records=len(result.records),
                    dropped=result.dropped,
                    total_results=extract_total_results(body),
                )
            )

            logger.info(
                "Category=%s tier=%s fragments=%d records=%d dropped=%d",
                request.category,
                tier.name,
                result.fragments,
                len(result.records),
                result.dropped,
            )

            records = result.records
            if records:
                break

            if index + 1 < len(tiers):
                logger.warning(
                    "Category=%s tier=%s returned no records; trying %s",
                    request.category,
                    tier.name,
                    tiers[index + 1].name,
                )

        return records, diagnostics

    async def aclose(self) -> None:
        await self._client.aclose()
