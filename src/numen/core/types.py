"""core.types

Request-side DTOs and enums used throughout *numen*.

Attribute names mirror the provider's JSON field names (``max_tokens``,
``top_p`` ...), so ``model_dump()`` yields the wire body without aliasing.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_COMPLETION_MODEL = 'text-davinci-003'
DEFAULT_CHAT_MODEL = 'gpt-3.5-turbo'

# ---------------------------------------------------------------------------
# Chat roles
# ---------------------------------------------------------------------------


class Role(StrEnum):
    system = 'system'
    user = 'user'
    assistant = 'assistant'


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class ChatMessage(BaseModel):
    """Single chat message.

    ``role`` is deliberately a plain string: :class:`Role` lists the values
    the provider documents, but anything else is sent as-is.
    """

    role: str
    content: str

    # Immutable value-object
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Request payloads
#   • Numeric ranges are enforced by the provider, not here
# ---------------------------------------------------------------------------


class CompletionParameters(BaseModel):
    """Body of a legacy ``/v1/completions`` request."""

    model: str = DEFAULT_COMPLETION_MODEL
    prompt: str
    temperature: float = 0.4
    max_tokens: int = Field(2063, description='Maximum tokens in completion')
    top_p: float = 1.0
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0

    model_config = ConfigDict(frozen=True)


class ChatRequestPayload(BaseModel):
    """Body of a ``/v1/chat/completions`` request.

    Message order is conversation order and is kept exactly on the wire.
    """

    model: str = DEFAULT_CHAT_MODEL
    messages: tuple[ChatMessage, ...]

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_text(cls, text: str, *, model: str = DEFAULT_CHAT_MODEL) -> ChatRequestPayload:
        """Wrap a single string as a user-role message."""
        return cls(model=model, messages=(ChatMessage(role=Role.user, content=text),))
