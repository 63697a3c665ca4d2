import asyncio

import httpx

from query_state import QueryState
from search_client import UniversitySearchClient

DEBOUNCE = 0.05


def api_response(request, data=None):
    return httpx.Response(200, json={
        "data": data if data is not None else [{"_id": request.url.params.get("search", "")}],
        "pagination": {"total": 1, "page": 1, "limit": 20, "totalPages": 1},
        "filters": {"applied": True, "count": 1},
    })


def make_client(handler, **kwargs):
    kwargs.setdefault("debounce_seconds", DEBOUNCE)
    return UniversitySearchClient(
        "http://testserver",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_search_typing_is_coalesced_into_one_request():
    requests = []

    def handler(request):
        requests.append(request)
        return api_response(request)

    async def scenario():
        async with make_client(handler) as client:
            state = QueryState()
            for text in ("o", "ox", "oxf"):
                state = state.with_changes(search=text)
                client.submit(state)
                await asyncio.sleep(DEBOUNCE / 5)
            return await client.wait()

    result = asyncio.run(scenario())

    assert len(requests) == 1
    assert requests[0].url.params["search"] == "oxf"
    assert result.ok
    assert result.universities == [{"_id": "oxf"}]


def test_non_text_change_fetches_immediately():
    requests = []

    def handler(request):
        requests.append(request)
        return api_response(request)

    async def scenario():
        async with make_client(handler, debounce_seconds=10) as client:
            client.submit(QueryState().with_changes(region="europe"))
            return await asyncio.wait_for(client.wait(), timeout=1)

    result = asyncio.run(scenario())

    assert len(requests) == 1
    assert requests[0].url.params["region"] == "europe"
    assert result.state.region == "europe"


def test_newer_state_supersedes_pending_request():
    published = []

    async def handler(request):
        if request.url.params.get("region") == "europe":
            await asyncio.sleep(0.2)
        return api_response(request, data=[{"_id": request.url.params.get("region")}])

    async def scenario():
        async with make_client(handler, on_result=published.append) as client:
            client.submit(QueryState(region="europe"))
            await asyncio.sleep(0.01)
            client.submit(QueryState(region="africa"))
            return await client.wait()

    result = asyncio.run(scenario())

    assert result.universities == [{"_id": "africa"}]
    assert [r.state.region for r in published] == ["africa"]


def test_stale_response_is_discarded():
    published = []

    def handler(request):
        return api_response(request)

    async def scenario():
        async with make_client(handler, on_result=published.append) as client:
            state = QueryState(region="europe")
            # Simulate a newer submission arriving while this fetch was in flight
            client._generation = 2
            return await client._run(1, state, 0.0)

    assert asyncio.run(scenario()) is None
    assert published == []


def test_failed_fetch_gives_empty_result():
    def handler(request):
        return httpx.Response(500, json={"error": "INTERNAL_SERVER_ERROR"})

    async def scenario():
        async with make_client(handler) as client:
            client.submit(QueryState(countries="USA"))
            return await client.wait()

    result = asyncio.run(scenario())

    assert not result.ok
    assert result.universities == []
    assert result.pagination["total"] == 0
    assert "500" in result.error


def test_network_error_gives_empty_result():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        async with make_client(handler) as client:
            return await client.fetch(QueryState())

    result = asyncio.run(scenario())

    assert not result.ok
    assert result.universities == []
