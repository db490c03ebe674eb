"""facade

Process-wide entry point mirroring the explicit :class:`~numen.client.NumenClient`.

Configure once at start-up, then call the module-level helpers anywhere:

```python
from numen import facade

facade.configure('sk-...')            # or configure() to read OPENAI_API_KEY
text = await facade.complete_text('Say hi')
reply = await facade.chat('Hello!')
```

The configured client is published under a lock and never mutated afterwards,
so concurrent calls only ever read an immutable object.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from numen.client import ClientConfig, NumenClient
from numen.core.exceptions import NotConfiguredError
from numen.core.types import DEFAULT_CHAT_MODEL, DEFAULT_COMPLETION_MODEL

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numen.core.abc import AbstractTransport
    from numen.core.responses import ChatCompletionResponse
    from numen.core.types import ChatMessage

logger = logging.getLogger(__name__)


class _ThreadSafeSingleton(type):
    """Metaclass ensuring a single facade instance across threads."""

    _instance: NumenFacade | None = None
    _lock = threading.Lock()

    def __call__(cls, *args: object, **kwargs: object) -> NumenFacade:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class NumenFacade(metaclass=_ThreadSafeSingleton):
    """Holder of the process-wide :class:`NumenClient`."""

    def __init__(self) -> None:  # pragma: no cover - called once via singleton
        self._client: NumenClient | None = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(
        self,
        api_key: str | None = None,
        *,
        transport: AbstractTransport | None = None,
        **config_overrides: object,
    ) -> NumenClient:
        """Create and publish the process-wide client.

        Parameters
        ----------
        api_key
            Bearer token. When omitted, ``OPENAI_API_KEY`` (or ``.env``) is used.
        transport
            Optional transport forwarded to :class:`NumenClient`.
        **config_overrides
            Any other :class:`ClientConfig` field (``base_url``, ``timeout_sec`` ...).

        Raises
        ------
        NotConfiguredError
            If no API key is given and none is found in the environment.

        """
        if api_key is None:
            config = ClientConfig.from_env(**config_overrides)
        else:
            config = ClientConfig(api_key=api_key, **config_overrides)  # type: ignore[arg-type]

        client = NumenClient(config, transport=transport)
        with self._lock:
            replaced = self._client is not None
            self._client = client
        if replaced:
            logger.info('Replaced process-wide numen client (base_url=%s)', config.base_url)
        return client

    def reset(self) -> None:
        """Forget the configured client (mainly for tests)."""
        with self._lock:
            self._client = None

    async def aclose(self) -> None:
        """Unpublish the configured client and release its transport."""
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    def default_client(self) -> NumenClient:
        """Return the configured client.

        Raises
        ------
        NotConfiguredError
            If :meth:`configure` has not been called.

        """
        client = self._client
        if client is None:
            raise NotConfiguredError('numen is not configured; call configure() with an API key first')
        return client

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
        """See :meth:`NumenClient.complete_text`."""
        return await self.default_client().complete_text(
            prompt,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            top_p=top_p,
            frequency_penalty=frequency_penalty,
            presence_penalty=presence_penalty,
        )

    async def chat(
        self,
        message: str | ChatMessage | Sequence[ChatMessage],
        *,
        model: str = DEFAULT_CHAT_MODEL,
    ) -> ChatCompletionResponse:
        """See :meth:`NumenClient.chat`."""
        return await self.default_client().chat(message, model=model)


# Re-export a module-level instance and its bound methods for ergonomic usage
numen: NumenFacade = NumenFacade()

configure = numen.configure
reset = numen.reset
aclose = numen.aclose
default_client = numen.default_client
complete_text = numen.complete_text
chat = numen.chat
