"""core.abc

Abstract base class that *all* transports must implement.

Design goals
============
1. **Single shot** - `send()` performs exactly one network exchange.  Nothing
    in *numen* retries; callers who want back-off wrap the client themselves.
2. **Uniform failures** - the public `send()` converts any `httpx.HTTPError`
    or `OSError` raised by a concrete transport into `TransportError`, so
    callers only ever see the *numen* exception hierarchy.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from numen.core.exceptions import TransportError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawResponse:
    """Status, headers and body bytes of a completed HTTP exchange."""

    status_code: int
    content: bytes
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300  # noqa: PLR2004


class AbstractTransport(ABC):
    """Network-independent transport interface."""

    # ------------------------------------------------------------------
    # Public async API
    # ------------------------------------------------------------------

    async def send(self, request: httpx.Request) -> RawResponse:
        """Send *request* and return the full response.

        Subclasses **must not** override this - override `_send()` instead.
        """
        started = time.perf_counter()
        try:
            response = await self._send(request)
        except (httpx.HTTPError, OSError) as exc:
            logger.debug('%s %s failed: %r', request.method, request.url, exc)
            raise TransportError(f'{request.method} {request.url} failed: {exc}') from exc

        logger.debug(
            '%s %s -> %d (%.3fs)',
            request.method,
            request.url,
            response.status_code,
            time.perf_counter() - started,
        )
        return response

    async def aclose(self) -> None:  # noqa: B027 - optional hook
        """Release any resources held by the transport."""

    # ------------------------------------------------------------------
    # Methods to implement in concrete transports
    # ------------------------------------------------------------------

    @abstractmethod
    async def _send(self, request: httpx.Request) -> RawResponse:
        """Transport-specific implementation (to be overridden)."""

    # ------------------------------------------------------------------
    # Helper - string representation
    # ------------------------------------------------------------------

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f'<{self.__class__.__name__}>'
