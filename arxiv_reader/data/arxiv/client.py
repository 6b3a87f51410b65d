from dataclasses import dataclass
from types import TracebackType

import httpx

from arxiv_reader.common.logging import get_logger
from arxiv_reader.common.settings import ArxivSettings
from arxiv_reader.data.arxiv.errors import TransportError
from arxiv_reader.data.arxiv.query import QueryParams

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ArxivClientConfig:
    """Configuration for arXiv API client."""

    api_url: str = "https://export.arxiv.org/api/query"
    user_agent: str = "arxiv-reader/1.0"
    timeout_seconds: float = 30.0

    @classmethod
    def from_settings(cls, settings: ArxivSettings) -> "ArxivClientConfig":
        return cls(
            api_url=settings.api_url,
            user_agent=settings.user_agent,
            timeout_seconds=settings.timeout_seconds,
        )


class ArxivClient:
    """Single-shot HTTP transport for the arXiv query API. Never retries."""

    def __init__(
        self,
        config: ArxivClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or ArxivClientConfig()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self.config.timeout_seconds)

    def build_url(self, params: QueryParams) -> str:
        return params.url(self.config.api_url)

    async def get_feed(self, params: QueryParams) -> bytes:
        """
        Fetch one feed page.

        Returns:
            Raw response body of a 2xx response.

        Raises:
            TransportError: On non-2xx status, connection failure, timeout,
                redirect loop or an undecodable response body.
        """
        url = self.build_url(params)
        logger.info("arXiv query: %s", url)

        try:
            response = await self._client.get(
                url, headers={"User-Agent": self.config.user_agent}
            )
        except httpx.RequestError as e:
            raise TransportError(f"arXiv request failed: {e!r}", url=url) from e

        if not response.is_success:
            raise TransportError(
                f"arXiv returned HTTP {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        logger.debug("arXiv response: %d bytes", len(response.content))
        return response.content

    async def aclose(self) -> None:
        """Close HTTP client."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ArxivClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
