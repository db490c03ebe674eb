"""api.endpoints

Provider endpoints and the URL-building helper.
"""

from __future__ import annotations

from enum import StrEnum

import httpx

from numen.core.exceptions import InvalidURLError

DEFAULT_BASE_URL = 'https://api.openai.com/v1/'


class Endpoint(StrEnum):
    """Supported endpoint paths, relative to the API base URL."""

    COMPLETIONS = 'completions'
    CHAT_COMPLETIONS = 'chat/completions'


def build_url(path: str, base_url: str = DEFAULT_BASE_URL) -> httpx.URL:
    """Join *path* onto *base_url*.

    ``base_url`` is treated as a directory, so ``https://host/v1`` and
    ``https://host/v1/`` both resolve ``completions`` to ``https://host/v1/completions``.

    Raises
    ------
    InvalidURLError
        If the result is not an absolute ``http``/``https`` URL with a host.

    """
    if not base_url.endswith('/'):
        base_url += '/'
    try:
        url = httpx.URL(base_url).join(path.lstrip('/'))
    except httpx.InvalidURL as exc:
        raise InvalidURLError(f'Cannot build URL from {base_url!r} and {path!r}: {exc}') from exc

    if url.scheme not in {'http', 'https'} or not url.host:
        raise InvalidURLError(f'Not an absolute http(s) URL: {url}')
    return url
