import asyncio
import inspect
from collections.abc import Awaitable, Callable

from arxiv_reader.common.logging import get_logger
from arxiv_reader.data.arxiv.errors import ArxivFeedError
from arxiv_reader.data.arxiv.query import FetchRequest
from arxiv_reader.data.arxiv.schemas import PaperRecord
from arxiv_reader.data.arxiv.service import ArxivFeedService, FetchDiagnostics

logger = get_logger(__name__)

ResultCallback = Callable[[list[PaperRecord], FetchDiagnostics], Awaitable[None] | None]


class RefreshScheduler:
    """
    Periodically re-run one fetch request on an asyncio task.

    A failed refresh is logged and the next tick still runs. ``stop()``
    cancels the task; a fetch in flight at that moment is abandoned and its
    result is never delivered.
    """

    def __init__(
        self,
        service: ArxivFeedService,
        request: FetchRequest,
        interval_seconds: float,
        on_result: ResultCallback,
        max_runs: int | None = None,
    ) -> None:
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval_seconds}")

        self._service = service
        self._request = request
        self._interval = interval_seconds
        self._on_result = on_result
        self._max_runs = max_runs
        self._task: asyncio.Task[None] | None = None
        self.runs = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task[None]:
        if self.running:
            raise RuntimeError("Refresh task already running")

        self._task = asyncio.create_task(self._run(), name=f"arxiv-refresh-{self._request.category}")
        logger.info(
            "Auto-refresh started: category=%s interval=%.0fs",
            self._request.category,
            self._interval,
        )
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None

        logger.info("Auto-refresh stopped after %d runs", self.runs)

    async def wait(self) -> None:
        """Wait for a bounded scheduler (``max_runs``) to finish."""
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        while self._max_runs is None or self.runs < self._max_runs:
            if self.runs:
                await asyncio.sleep(self._interval)

            self.runs += 1
            try:
                records, diagnostics = await self._service.fetch_request(self._request)
            except ArxivFeedError as e:
                self.failures += 1
                logger.warning("Auto-refresh %d failed: %s", self.runs, e)
                continue

            outcome = self._on_result(records, diagnostics)
            if inspect.isawaitable(outcome):
                await outcome
