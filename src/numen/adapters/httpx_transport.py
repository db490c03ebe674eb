"""adapters.httpx_transport

Concrete transport that bridges :class:`numen.core.abc.AbstractTransport`
with ``httpx.AsyncClient``.

An injected client (for instance one built on ``httpx.MockTransport`` in
tests) is reused for every call and left open for its owner to close.
Without one, each call opens and closes its own client: pooled connections
belong to the event loop that opened them, and the process-wide facade may be
called from several loops (one ``asyncio.run()`` after another).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from numen.core.abc import AbstractTransport, RawResponse

if TYPE_CHECKING:
    from types import TracebackType

DEFAULT_TIMEOUT_SEC = 60.0

# ---------------------------------------------------------------------------
# Transport implementation
# ---------------------------------------------------------------------------


class HttpxTransport(AbstractTransport):
    """Transport backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        *,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout_sec)
        self._client = client

    async def _send(self, request: httpx.Request) -> RawResponse:
        # Requests built outside the client carry no timeout of their own
        request.extensions.setdefault('timeout', self._timeout.as_dict())
        if self._client is not None:
            return self._to_raw(await self._client.send(request))

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return self._to_raw(await client.send(request))

    @staticmethod
    def _to_raw(response: httpx.Response) -> RawResponse:
        return RawResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
        )

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
