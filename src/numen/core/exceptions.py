"""core.exceptions

Centralised exception hierarchy for *numen*.

Every failure of a client call (configuration, encoding, network, provider
reply, decoding) is raised as a subclass of `NumenError`.  Each class also
names the `http_status` an application embedding the client would most likely
answer with, and `to_json()` reports it alongside the error type and message.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from numen.core.responses import ProviderErrorBody


# ---------------------------------------------------------------------------
# Base mixin with HTTP status information
# ---------------------------------------------------------------------------


class NumenError(Exception):
    """Base class for all *numen* errors."""

    #: Default HTTP status if not overridden by subclass.
    http_status: ClassVar[HTTPStatus] = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__name__)

    def to_json(self) -> dict[str, dict[str, Any]]:
        """Unified error body."""
        return {
            'error': {
                'type': self.__class__.__name__,
                'message': str(self),
                'status': int(self.http_status),
            },
        }


# ---------------------------------------------------------------------------
# Concrete error classes
# ---------------------------------------------------------------------------


class NotConfiguredError(NumenError):
    """Raised when the facade is used before an API key has been configured."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.SERVICE_UNAVAILABLE  # 503


class InvalidURLError(NumenError):
    """Raised when an endpoint path cannot be composed into an absolute URL."""


class EncodingError(NumenError):
    """Raised when a request payload cannot be serialised to JSON."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST  # 400


class TransportError(NumenError):
    """Network-level failure (DNS, TLS, connection reset, timeout).

    The underlying exception is always chained as ``__cause__``.
    """

    http_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_GATEWAY  # 502


class DecodingError(NumenError):
    """Raised when a response body does not match the expected schema."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_GATEWAY  # 502

    def __init__(self, message: str | None = None, *, field_path: str = '<root>') -> None:
        super().__init__(message)
        self.field_path = field_path

    def to_json(self) -> dict[str, dict[str, Any]]:
        body = super().to_json()
        body['error']['field'] = self.field_path
        return body


class EmptyChoicesError(NumenError):
    """Raised when the provider returned no choices but at least one was expected."""

    http_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_GATEWAY  # 502


class ProviderError(NumenError):
    """The provider answered with a non-2xx status.

    Attributes
    ----------
    status_code
        HTTP status returned by the provider.
    error
        Parsed ``{"error": {...}}`` envelope, or ``None`` when the body was
        not in the provider's error format.
    body
        Raw response body, kept for diagnostics.

    """

    http_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_GATEWAY  # 502

    def __init__(
        self,
        status_code: int,
        error: ProviderErrorBody | None = None,
        *,
        body: bytes = b'',
    ) -> None:
        self.status_code = status_code
        self.error = error
        self.body = body
        detail = error.message if error is not None else body[:200].decode('utf-8', errors='replace')
        super().__init__(f'Provider returned HTTP {status_code}: {detail or "empty response body"}')

    def to_json(self) -> dict[str, dict[str, Any]]:
        body = super().to_json()
        body['error']['status_code'] = self.status_code
        if self.error is not None and self.error.code is not None:
            body['error']['code'] = self.error.code
        return body

