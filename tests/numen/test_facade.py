from __future__ import annotations

import asyncio

import httpx
import pytest
from fakes import CHAT_RESPONSE, COMPLETION_RESPONSE, Recorder, local_chat_server

import numen.client
from numen import facade
from numen.adapters.httpx_transport import HttpxTransport
from numen.core.abc import AbstractTransport, RawResponse
from numen.core.exceptions import NotConfiguredError, TransportError
from numen.facade import NumenFacade


def _transport(handler: Recorder) -> HttpxTransport:
    return HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def test_facade_is_a_singleton() -> None:
    assert NumenFacade() is facade.numen


def test_default_client_before_configure() -> None:
    with pytest.raises(NotConfiguredError):
        facade.default_client()


@pytest.mark.asyncio
async def test_operations_before_configure_raise() -> None:
    with pytest.raises(NotConfiguredError):
        await facade.complete_text('hello')
    with pytest.raises(NotConfiguredError):
        await facade.chat('hello')


@pytest.mark.asyncio
async def test_configured_complete_text() -> None:
    recorder = Recorder(payload=COMPLETION_RESPONSE)
    facade.configure('sk-facade', transport=_transport(recorder))

    assert await facade.complete_text('Say hello') == '\n\nHello there'
    assert recorder.requests[0].headers['Authorization'] == 'Bearer sk-facade'


@pytest.mark.asyncio
async def test_configured_chat() -> None:
    recorder = Recorder(payload=CHAT_RESPONSE)
    facade.configure('sk-facade', transport=_transport(recorder))

    response = await facade.chat('Hello!')

    assert response.first_message.content == 'hi'
    assert recorder.last_body['model'] == 'gpt-3.5-turbo'


@pytest.mark.asyncio
async def test_reconfigure_replaces_client() -> None:
    first = Recorder(payload=CHAT_RESPONSE)
    second = Recorder(payload=CHAT_RESPONSE)
    old_client = facade.configure('sk-one', transport=_transport(first))
    new_client = facade.configure('sk-two', transport=_transport(second))

    await facade.chat('Hello!')

    assert facade.default_client() is new_client is not old_client
    assert not first.requests
    assert second.requests[0].headers['Authorization'] == 'Bearer sk-two'


@pytest.mark.asyncio
async def test_transport_failure_is_not_retried() -> None:
    calls = {'cnt': 0}

    def refuse(request: httpx.Request) -> httpx.Response:
        calls['cnt'] += 1
        raise httpx.ConnectError('Connection refused', request=request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    facade.configure('sk-facade', transport=HttpxTransport(client=http_client))

    with pytest.raises(TransportError):
        await facade.chat('Hello!')
    assert calls['cnt'] == 1


def test_configure_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(numen.client, 'load_dotenv', lambda: False)
    monkeypatch.setenv('OPENAI_API_KEY', 'sk-env')

    client = facade.configure(timeout_sec=5.0)

    assert client.config.api_key.get_secret_value() == 'sk-env'
    assert client.config.timeout_sec == 5.0  # noqa: PLR2004


def test_configure_without_any_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(numen.client, 'load_dotenv', lambda: False)
    monkeypatch.delenv('OPENAI_API_KEY', raising=False)

    with pytest.raises(NotConfiguredError):
        facade.configure()
    with pytest.raises(NotConfiguredError):
        facade.default_client()


def test_calls_from_successive_event_loops(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ('HTTP_PROXY', 'HTTPS_PROXY', 'ALL_PROXY', 'http_proxy', 'https_proxy', 'all_proxy'):
        monkeypatch.delenv(var, raising=False)

    with local_chat_server() as base_url:
        facade.configure('sk-facade', base_url=base_url)

        first = asyncio.run(facade.chat('one'))
        second = asyncio.run(facade.chat('two'))

    assert first.first_message.content == 'hi'
    assert second.first_message.content == 'hi'


class ClosingTransport(AbstractTransport):
    def __init__(self) -> None:
        self.closed = 0

    async def _send(self, request: httpx.Request) -> RawResponse:  # noqa: ARG002
        return RawResponse(status_code=200, content=b'{}')

    async def aclose(self) -> None:
        self.closed += 1


@pytest.mark.asyncio
async def test_aclose_releases_client() -> None:
    transport = ClosingTransport()
    facade.configure('sk-facade', transport=transport)

    await facade.aclose()

    assert transport.closed == 1
    with pytest.raises(NotConfiguredError):
        facade.default_client()
    # 二度目の close は何もしない
    await facade.aclose()
    assert transport.closed == 1
