from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from lib_log_datadog.adapters.http import API_KEY_HEADER, AsyncHttpDataDogClient, HttpDataDogClient, validate_intake_url
from lib_log_datadog.domain.config import DataDogConfig, HttpConfig
from lib_log_datadog.domain.record import DataDogLog
from lib_log_datadog.errors import DeliveryError, UrlParsingError
from tests.os_markers import OS_AGNOSTIC
from tests.recorders import make_log

pytestmark = [OS_AGNOSTIC]

_URL = "https://intake.test/v1/input"


def _config() -> DataDogConfig:
    return DataDogConfig(http=HttpConfig(url=_URL, timeout=2.0))


def test_send_posts_json_array_with_api_key() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    client = HttpDataDogClient(_config(), "secret", client=httpx.Client(transport=httpx.MockTransport(handler)))
    client.send([make_log(1), make_log(2)])
    client.close()

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == _URL
    assert request.headers[API_KEY_HEADER] == "secret"
    assert request.headers["content-type"] == "application/json"
    payload = json.loads(request.content)
    assert [item["message"] for item in payload] == ["message-1", "message-2"]
    assert payload[0]["ddsource"] == "pytest"


def test_non_success_status_raises_delivery_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(403, text="forbidden"))
    client = HttpDataDogClient(_config(), "bad", client=httpx.Client(transport=transport))

    with pytest.raises(DeliveryError, match="HTTP 403: forbidden"):
        client.send([make_log(1)])


def test_transport_failure_raises_delivery_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = HttpDataDogClient(_config(), "secret", client=httpx.Client(transport=httpx.MockTransport(handler)))

    with pytest.raises(DeliveryError, match="refused"):
        client.send([make_log(1)])


def test_async_client_posts_batch() -> None:
    bodies: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.content)
        return httpx.Response(202)

    async def scenario() -> None:
        client = AsyncHttpDataDogClient(
            _config(), "secret", client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
        )
        await client.send_async([make_log(7)])
        await client.aclose()

    asyncio.run(scenario())
    assert json.loads(bodies[0])[0]["message"] == "message-7"


def test_async_client_rejects_server_errors() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="oops"))

    async def scenario() -> None:
        client = AsyncHttpDataDogClient(_config(), "secret", client=httpx.AsyncClient(transport=transport))
        try:
            await client.send_async([make_log(1)])
        finally:
            await client.aclose()

    with pytest.raises(DeliveryError, match="HTTP 500"):
        asyncio.run(scenario())


@pytest.mark.parametrize("url", ["ftp://intake.test/v1", "not a url", "https://"])
def test_invalid_intake_url_is_rejected_at_construction(url: str) -> None:
    with pytest.raises(UrlParsingError):
        HttpDataDogClient(DataDogConfig(http=HttpConfig(url=url)), "secret")


def test_validate_intake_url_accepts_default() -> None:
    assert validate_intake_url(DataDogConfig().http.url).host == "http-intake.logs.datadoghq.com"


def test_lone_surrogates_are_replaced_instead_of_failing_the_batch() -> None:
    bodies: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.content)
        return httpx.Response(202)

    client = HttpDataDogClient(_config(), "secret", client=httpx.Client(transport=httpx.MockTransport(handler)))
    broken = DataDogLog("bad \udcff byte", None, "pytest", "", "", "info")

    client.send([make_log(1), broken])

    payload = json.loads(bodies[0])
    assert [item["message"] for item in payload] == ["message-1", "bad ? byte"]
