import asyncio
import json
import sys

from arxiv_reader.common.logging import get_logger
from arxiv_reader.common.settings import get_settings
from arxiv_reader.data.arxiv.constants import Category
from arxiv_reader.data.arxiv.errors import ArxivFeedError, InvalidRequestError
from arxiv_reader.data.arxiv.query import FetchRequest, plan_queries
from arxiv_reader.data.arxiv.scheduler import RefreshScheduler
from arxiv_reader.data.arxiv.schemas import PaperRecord
from arxiv_reader.data.arxiv.service import ArxivFeedService, FetchDiagnostics

logger = get_logger(__name__)


def fetch_papers(
    category: str | None = None,
    count: int | None = None,
    sort_by: str | None = None,
) -> None:
    settings = get_settings().arxiv
    if settings.auto_refresh:
        logger.info(
            "Auto-refresh enabled; re-fetching every %d minutes",
            settings.refresh_interval_minutes,
        )
        watch_papers(category=category, count=count, sort_by=sort_by)
        return

    request = FetchRequest(
        category=settings.default_category if category is None else category,
        count=settings.max_results if count is None else count,
        sort_by=settings.sort_by if sort_by is None else sort_by,
    )
    _run_once(request)


def search_papers(
    query: str,
    subject: str | None = None,
    count: int | None = None,
    sort_by: str | None = None,
) -> None:
    settings = get_settings().arxiv
    request = FetchRequest(
        category=Category.SEARCH,
        count=settings.max_results if count is None else count,
        sort_by=settings.sort_by if sort_by is None else sort_by,
        query=str(query),
        subject=subject,
    )
    _run_once(request)


def watch_papers(
    category: str | None = None,
    count: int | None = None,
    interval_minutes: float | None = None,
    iterations: int | None = None,
    sort_by: str | None = None,
) -> None:
    settings = get_settings().arxiv
    request = FetchRequest(
        category=settings.default_category if category is None else category,
        count=settings.max_results if count is None else count,
        sort_by=settings.sort_by if sort_by is None else sort_by,
    )
    try:
        plan_queries(request)
    except InvalidRequestError as e:
        logger.error("Invalid watch request: %s", e)
        sys.exit(1)

    interval = (
        interval_minutes * 60.0 if interval_minutes is not None else settings.refresh_interval_seconds
    )

    async def _watch() -> None:
        service = ArxivFeedService.from_settings(settings)
        scheduler = RefreshScheduler(
            service, request, interval, on_result=_emit, max_runs=iterations
        )
        try:
            scheduler.start()
            await scheduler.wait()
        finally:
            await scheduler.stop()
            await service.aclose()

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        logger.info("Interrupted")


def _run_once(request: FetchRequest) -> None:
    settings = get_settings().arxiv

    async def _fetch() -> tuple[list[PaperRecord], FetchDiagnostics]:
        service = ArxivFeedService.from_settings(settings)
        try:
            return await service.fetch_request(request)
        finally:
            await service.aclose()

    try:
        records, diagnostics = asyncio.run(_fetch())
    except ArxivFeedError as e:
        logger.error("Fetch failed: %s", e)
        sys.exit(1)

    _emit(records, diagnostics)


def _emit(records: list[PaperRecord], diagnostics: FetchDiagnostics) -> None:
    for record in records:
        print(json.dumps(record.to_dict(), ensure_ascii=False))

    logger.info(
        "Done: category=%s records=%d requests=%d dropped=%d tier=%s",
        diagnostics.category,
        len(records),
        diagnostics.requests,
        diagnostics.dropped,
        diagnostics.tier_used,
    )
