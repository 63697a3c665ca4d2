import asyncio
import logging
from typing import Callable, Dict, List, Optional

import httpx
from pydantic import BaseModel

from query_state import QueryState

logger = logging.getLogger(__name__)

# Quiet period before a changed search text is sent
SEARCH_DEBOUNCE_SECONDS = 0.5


class SearchResult(BaseModel):
    state: QueryState
    universities: List[Dict] = []
    pagination: Dict = {}
    ok: bool = True
    error: Optional[str] = None

    @classmethod
    def empty(cls, state: QueryState, error: str) -> "SearchResult":
        return cls(
            state=state,
            pagination={"total": 0, "page": state.page, "limit": state.limit, "totalPages": 0},
            ok=False,
            error=error,
        )


class UniversitySearchClient:
    """
    Fetches search pages for a stream of QueryStates.

    Search text changes wait for a quiet period before fetching; any other
    change fetches at once. A newer submission cancels the pending fetch, and
    a response from an older generation is discarded (latest wins).
    """

    def __init__(
        self,
        base_url: str,
        debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
        on_result: Optional[Callable[[SearchResult], None]] = None,
    ):
        self.debounce_seconds = debounce_seconds
        self.on_result = on_result
        self.latest: Optional[SearchResult] = None
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self._generation = 0
        self._pending: Optional[asyncio.Task] = None
        self._last_state = QueryState()

    async def __aenter__(self) -> "UniversitySearchClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._pending and not self._pending.done():
            self._pending.cancel()
        await self._client.aclose()

    def submit(self, state: QueryState) -> asyncio.Task:
        """Schedule a fetch for state, superseding any fetch still pending. Needs a running loop."""
        delay = self.debounce_seconds if state.search_changed(self._last_state) else 0.0
        self._last_state = state
        self._generation += 1

        if self._pending and not self._pending.done():
            logger.debug(f"Superseding pending search (generation {self._generation - 1})")
            self._pending.cancel()

        self._pending = asyncio.create_task(self._run(self._generation, state, delay))
        return self._pending

    async def wait(self) -> Optional[SearchResult]:
        """Wait until no fetch is pending and return the latest published result."""
        while self._pending is not None and not self._pending.done():
            await asyncio.wait({self._pending})
        return self.latest

    async def _run(self, generation: int, state: QueryState, delay: float) -> Optional[SearchResult]:
        if delay:
            await asyncio.sleep(delay)

        result = await self.fetch(state)
        if generation != self._generation:
            logger.debug(f"Discarding stale search result (generation {generation})")
            return None

        self.latest = result
        if self.on_result:
            self.on_result(result)
        return result

    async def fetch(self, state: QueryState) -> SearchResult:
        """One request to /api. Failures are logged and give an empty result."""
        try:
            response = await self._client.get("/api", params=state.to_params())
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching universities: {str(e)}")
            return SearchResult.empty(state, error=str(e))

        return SearchResult(
            state=state,
            universities=body.get("data", []),
            pagination=body.get("pagination", {}),
        )
