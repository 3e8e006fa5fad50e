import httpx
import pytest

from opportunity_scanner.core.content_fetcher import ContentFetcher
from opportunity_scanner.core.exceptions import FetchError


def make_fetcher(handler) -> ContentFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ContentFetcher(base_url="https://www.reddit.com/", client=client)


def test_build_url():
    fetcher = ContentFetcher(base_url="https://www.reddit.com/")
    assert fetcher.build_url("personalfinance") == "https://www.reddit.com/r/personalfinance"


@pytest.mark.asyncio
async def test_fetch_returns_markup():
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, text="<html><body>hello</body></html>")

    fetcher = make_fetcher(handler)
    markup = await fetcher.fetch("personalfinance")

    assert markup == "<html><body>hello</body></html>"
    assert requested == ["https://www.reddit.com/r/personalfinance"]
    await fetcher.client.aclose()


@pytest.mark.asyncio
async def test_fetch_non_2xx_raises_fetch_error():
    fetcher = make_fetcher(lambda request: httpx.Response(404, text="not found"))

    with pytest.raises(FetchError) as exc_info:
        await fetcher.fetch("doesnotexist")

    assert "404" in exc_info.value.message
    await fetcher.client.aclose()


@pytest.mark.asyncio
async def test_fetch_transport_error_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = make_fetcher(handler)

    with pytest.raises(FetchError) as exc_info:
        await fetcher.fetch("personalfinance")

    assert "connection refused" in exc_info.value.message
    assert isinstance(exc_info.value.original_error, httpx.ConnectError)
    await fetcher.client.aclose()


@pytest.mark.asyncio
async def test_close_leaves_injected_client_open():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    fetcher = ContentFetcher(client=client)

    await fetcher.close()

    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_close_closes_owned_client():
    fetcher = ContentFetcher()
    await fetcher.close()
    assert fetcher.client.is_closed


@pytest.mark.asyncio
async def test_fetch_invalid_url_raises_fetch_error():
    """A topic that cannot form a valid URL fails like any other fetch."""
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, text="<html><body>ok</body></html>")

    fetcher = make_fetcher(handler)

    with pytest.raises(FetchError) as exc_info:
        await fetcher.fetch("personal\x01finance")

    assert isinstance(exc_info.value.original_error, httpx.InvalidURL)
    assert requested == []
    await fetcher.client.aclose()
