from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator

import httpx
import pytest
from fakes import Recorder

from numen.adapters.httpx_transport import HttpxTransport
from numen.client import ClientConfig, NumenClient
from numen.facade import numen


@pytest.fixture
def make_client() -> Callable[[Recorder], NumenClient]:
    def _make(handler: Recorder) -> NumenClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return NumenClient(ClientConfig(api_key='sk-test'), transport=HttpxTransport(client=http_client))

    return _make


@pytest.fixture(autouse=True)
def _reset_facade() -> Iterator[None]:
    numen.reset()
    yield
    asyncio.run(numen.aclose())
