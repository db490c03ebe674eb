"""client

Explicitly configured client for the completions and chat completions
endpoints.

A :class:`NumenClient` holds an immutable :class:`ClientConfig` and a
transport.  Every public method performs one build → send → decode cycle:

    payload ─► encode_body ─► build_request ─► transport.send ─► status check ─► decode_response

Nothing is retried.  All failures surface as :mod:`numen.core.exceptions`.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, TypeVar

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

from numen.adapters.httpx_transport import DEFAULT_TIMEOUT_SEC, HttpxTransport
from numen.api.endpoints import DEFAULT_BASE_URL, Endpoint
from numen.api.request_builder import build_request
from numen.core.codec import decode_error_body, decode_response, encode_body
from numen.core.exceptions import NotConfiguredError, ProviderError
from numen.core.responses import BaseCompletionResponse, ChatCompletionResponse, TextCompletionResponse
from numen.core.types import (
    DEFAULT_CHAT_MODEL,
    DEFAULT_COMPLETION_MODEL,
    ChatMessage,
    ChatRequestPayload,
    CompletionParameters,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from numen.core.abc import AbstractTransport

logger = logging.getLogger(__name__)

ResponseT = TypeVar('ResponseT', bound=BaseCompletionResponse)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ClientConfig(BaseModel):
    """Immutable connection settings for :class:`NumenClient`."""

    api_key: SecretStr = Field(..., description='Bearer token sent with every request')
    base_url: str = Field(DEFAULT_BASE_URL, description='API root the endpoint paths are joined onto')
    timeout_sec: float = Field(DEFAULT_TIMEOUT_SEC, gt=0.0, description='Per-request timeout (seconds)')
    organization: str | None = Field(None, description='Optional OpenAI-Organization header')

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @classmethod
    def from_env(cls, **overrides: object) -> ClientConfig:
        """Build a config from ``OPENAI_*`` environment variables (``.env`` honoured).

        Raises
        ------
        NotConfiguredError
            If no API key is available or a setting fails validation.

        """
        load_dotenv()
        api_key = overrides.pop('api_key', None) or os.getenv('OPENAI_API_KEY')
        if not api_key:
            raise NotConfiguredError('OPENAI_API_KEY is not set')

        values: dict[str, object] = {'api_key': api_key}
        if base_url := os.getenv('OPENAI_BASE_URL'):
            values['base_url'] = base_url
        if timeout := os.getenv('OPENAI_TIMEOUT_SEC'):
            values['timeout_sec'] = timeout
        if organization := os.getenv('OPENAI_ORGANIZATION'):
            values['organization'] = organization
        values.update(overrides)
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise NotConfiguredError(f'Invalid OPENAI_* configuration: {exc}') from exc


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class NumenClient:
    """Typed client for the completions and chat completions endpoints."""

    def __init__(self, config: ClientConfig, *, transport: AbstractTransport | None = None) -> None:
        if not config.api_key.get_secret_value():
            raise NotConfiguredError('API key must not be empty')
        self._config = config
        self._transport: AbstractTransport = transport or HttpxTransport(timeout_sec=config.timeout_sec)

    @property
    def config(self) -> ClientConfig:
        return self._config

    # ------------------------------------------------------------------
    # Endpoint-level API
    # ------------------------------------------------------------------

    async def create_completion(self, params: CompletionParameters) -> TextCompletionResponse:
        """POST *params* to ``/completions`` and return the decoded response."""
        return await self._post(Endpoint.COMPLETIONS, params, TextCompletionResponse)

    async def create_chat_completion(self, payload: ChatRequestPayload) -> ChatCompletionResponse:
        """POST *payload* to ``/chat/completions`` and return the decoded response."""
        return await self._post(Endpoint.CHAT_COMPLETIONS, payload, ChatCompletionResponse)

    # ------------------------------------------------------------------
    # Convenience API
    # ------------------------------------------------------------------

    async def complete_text(
        self,
        prompt: str,
        *,
        model: str = DEFAULT_COMPLETION_MODEL,
        temperature: float = 0.4,
        max_tokens: int = 2063,
        top_p: float = 1.0,
        frequency_penalty: float = 0.0,
        presence_penalty: float = 0.0,
    ) -> str:
        """Complete *prompt* and return the text of the first choice.

        Raises
        ------
        EmptyChoicesError
            If the provider returned no choices.

        """
        params = CompletionParameters(
            model=model,
            prompt=prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            top_p=top_p,
            frequency_penalty=frequency_penalty,
            presence_penalty=presence_penalty,
        )
        response = await self.create_completion(params)
        return response.first_text

    async def chat(
        self,
        message: str | ChatMessage | Sequence[ChatMessage],
        *,
        model: str = DEFAULT_CHAT_MODEL,
    ) -> ChatCompletionResponse:
        """Send a conversation and return the full response (all choices, usage).

        A plain string becomes a single ``user`` message; a sequence of
        messages is sent in the given order.
        """
        if isinstance(message, str):
            payload = ChatRequestPayload.from_text(message, model=model)
        elif isinstance(message, ChatMessage):
            payload = ChatRequestPayload(model=model, messages=(message,))
        else:
            payload = ChatRequestPayload(model=model, messages=tuple(message))
        return await self.create_chat_completion(payload)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> NumenClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _post(
        self,
        endpoint: Endpoint,
        payload: CompletionParameters | ChatRequestPayload,
        response_model: type[ResponseT],
    ) -> ResponseT:
        request = build_request(
            endpoint,
            self._config.api_key.get_secret_value(),
            encode_body(payload),
            base_url=self._config.base_url,
            organization=self._config.organization,
        )
        raw = await self._transport.send(request)

        if not raw.is_success:
            error = decode_error_body(raw.content)
            logger.warning(
                '%s returned HTTP %d (%s)',
                endpoint.value,
                raw.status_code,
                error.message if error is not None else 'no error body',
            )
            raise ProviderError(raw.status_code, error, body=raw.content)

        return decode_response(raw.content, response_model)

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f'<{self.__class__.__name__} base_url={self._config.base_url!r}>'
