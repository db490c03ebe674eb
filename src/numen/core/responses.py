"""core.responses

Response-side DTOs for both endpoint shapes.

A single family of models is used for every endpoint: the common envelope
(:class:`BaseCompletionResponse`) is shared, and each endpoint contributes a
variant with its own ``choices`` element type.  Sub-structures such as
:class:`Usage` and :class:`~numen.core.types.ChatMessage` are shared too.

Unknown fields are ignored so that new provider fields never break decoding.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from numen.core.exceptions import EmptyChoicesError
from numen.core.types import ChatMessage

_RESPONSE_CONFIG = ConfigDict(frozen=True, extra='ignore')


# ---------------------------------------------------------------------------
# Shared sub-structures
# ---------------------------------------------------------------------------


class Usage(BaseModel):
    """Token accounting reported by the provider."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    model_config = _RESPONSE_CONFIG


class LogProbs(BaseModel):
    """Per-token log-probabilities of a legacy completion choice.

    This is the provider's documented structure: parallel lists indexed by
    token position, ``top_logprobs`` holding the top-k alternatives for each
    position (``None`` where the provider omitted them).
    """

    tokens: list[str] = Field(default_factory=list)
    token_logprobs: list[float | None] = Field(default_factory=list)
    top_logprobs: list[dict[str, float] | None] | None = None
    text_offset: list[int] = Field(default_factory=list)

    model_config = _RESPONSE_CONFIG


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


class CompletionChoice(BaseModel):
    """One candidate from the legacy completions endpoint."""

    text: str
    index: int
    logprobs: LogProbs | None = None
    finish_reason: str | None = None

    model_config = _RESPONSE_CONFIG


class ChatChoice(BaseModel):
    """One candidate from the chat completions endpoint."""

    index: int
    message: ChatMessage
    finish_reason: str | None = None

    model_config = _RESPONSE_CONFIG


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------


class BaseCompletionResponse(BaseModel):
    """Fields common to both endpoint shapes."""

    id: str | None = None
    object: str | None = None
    created: int | None = None
    model: str | None = None
    usage: Usage | None = None

    model_config = _RESPONSE_CONFIG


class TextCompletionResponse(BaseCompletionResponse):
    """Decoded ``/v1/completions`` response."""

    choices: list[CompletionChoice]

    @property
    def first_text(self) -> str:
        """Text of the first choice.

        Raises
        ------
        EmptyChoicesError
            If the provider returned no choices.

        """
        if not self.choices:
            raise EmptyChoicesError('Completion response contained no choices')
        return self.choices[0].text


class ChatCompletionResponse(BaseCompletionResponse):
    """Decoded ``/v1/chat/completions`` response."""

    id: str
    object: str
    created: int
    choices: list[ChatChoice]
    usage: Usage

    @property
    def first_message(self) -> ChatMessage:
        if not self.choices:
            raise EmptyChoicesError('Chat response contained no choices')
        return self.choices[0].message


# ---------------------------------------------------------------------------
# Error envelope (non-2xx replies)
# ---------------------------------------------------------------------------


class ProviderErrorBody(BaseModel):
    """Inner object of the provider's ``{"error": {...}}`` envelope."""

    message: str = ''
    type: str | None = None
    param: str | None = None
    code: str | int | None = None

    model_config = _RESPONSE_CONFIG


class ProviderErrorEnvelope(BaseModel):
    error: ProviderErrorBody

    model_config = _RESPONSE_CONFIG
