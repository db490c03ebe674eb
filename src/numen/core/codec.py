"""core.codec

JSON encoding of request payloads and decoding of provider responses.

Encoding relies on the DTO attribute names already matching the provider's
snake_case schema; decoding delegates to pydantic and converts its
``ValidationError`` into :class:`~numen.core.exceptions.DecodingError`
carrying the dotted path of the offending field.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError

from numen.core.exceptions import DecodingError, EncodingError
from numen.core.responses import ProviderErrorEnvelope

if TYPE_CHECKING:
    from numen.core.responses import ProviderErrorBody
    from numen.core.types import ChatRequestPayload, CompletionParameters

logger = logging.getLogger(__name__)

ResponseT = TypeVar('ResponseT', bound=BaseModel)

_ROOT_PATH = '<root>'


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_body(payload: CompletionParameters | ChatRequestPayload) -> bytes:
    """Serialise *payload* to the UTF-8 JSON bytes sent on the wire.

    Raises
    ------
    EncodingError
        If the payload holds values JSON cannot represent (NaN, +/-inf).

    """
    try:
        # non-finite floats are not valid JSON
        return json.dumps(payload.model_dump(mode='python'), ensure_ascii=False, allow_nan=False).encode('utf-8')
    except (TypeError, ValueError) as exc:
        raise EncodingError(f'Cannot encode {type(payload).__name__}: {exc}') from exc


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _error_path(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors or not errors[0]['loc']:
        return _ROOT_PATH
    return '.'.join(str(part) for part in errors[0]['loc'])


def decode_response(content: bytes, model: type[ResponseT]) -> ResponseT:
    """Validate raw response bytes against *model*.

    Raises
    ------
    DecodingError
        If *content* is not JSON, or a required field is missing or mistyped.
        ``field_path`` names the first offending field.

    """
    try:
        return model.model_validate_json(content)
    except ValidationError as exc:
        path = _error_path(exc)
        first = exc.errors()[0]['msg'] if exc.error_count() else 'invalid payload'
        logger.debug('Failed to decode %s at %s: %s', model.__name__, path, first)
        raise DecodingError(f'Invalid {model.__name__} at {path}: {first}', field_path=path) from exc


def decode_error_body(content: bytes) -> ProviderErrorBody | None:
    """Parse the provider's error envelope, or return ``None`` if *content* is not one."""
    try:
        return ProviderErrorEnvelope.model_validate_json(content).error
    except ValidationError:
        return None
