"""api.request_builder

Builds the authenticated ``POST`` request for an endpoint.
"""

from __future__ import annotations

import httpx

from numen.api.endpoints import DEFAULT_BASE_URL, build_url

JSON_CONTENT_TYPE = 'application/json'


def build_request(
    path: str,
    api_key: str,
    body: bytes,
    *,
    base_url: str = DEFAULT_BASE_URL,
    organization: str | None = None,
) -> httpx.Request:
    """Return a ready-to-send request carrying *body* to *path*.

    Parameters
    ----------
    path
        Endpoint path relative to *base_url* (see :class:`~numen.api.endpoints.Endpoint`).
    api_key
        Sent as ``Authorization: Bearer <api_key>``.
    body
        Already-encoded JSON bytes.
    organization
        Optional ``OpenAI-Organization`` header value.

    """
    headers = {
        'Content-Type': JSON_CONTENT_TYPE,
        'Authorization': f'Bearer {api_key}',
    }
    if organization:
        headers['OpenAI-Organization'] = organization

    return httpx.Request('POST', build_url(path, base_url), headers=headers, content=body)
