"""Canned provider payloads, a recording mock handler and a local HTTP server shared by the tests."""

from __future__ import annotations

import json
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

import httpx

CHAT_RESPONSE: dict[str, Any] = {
    'id': 'x',
    'object': 'chat.completion',
    'created': 1,
    'choices': [{'index': 0, 'message': {'role': 'assistant', 'content': 'hi'}, 'finish_reason': 'stop'}],
    'usage': {'prompt_tokens': 1, 'completion_tokens': 1, 'total_tokens': 2},
}

COMPLETION_RESPONSE: dict[str, Any] = {
    'id': 'cmpl-1',
    'object': 'text_completion',
    'created': 1,
    'model': 'text-davinci-003',
    'choices': [{'text': '\n\nHello there', 'index': 0, 'logprobs': None, 'finish_reason': 'stop'}],
    'usage': {'prompt_tokens': 2, 'completion_tokens': 3, 'total_tokens': 5},
}


class Recorder:
    """Mock HTTP handler that records every request it sees."""

    def __init__(self, status_code: int = 200, payload: Any = None) -> None:  # noqa: ANN401
        self.status_code = status_code
        self.payload = payload
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.payload, bytes):
            return httpx.Response(self.status_code, content=self.payload)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_body(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


class _ChatHandler(BaseHTTPRequestHandler):
    """Answers every POST with ``CHAT_RESPONSE`` over a keep-alive connection."""

    protocol_version = 'HTTP/1.1'

    def do_POST(self) -> None:  # noqa: N802
        self.rfile.read(int(self.headers.get('Content-Length', 0)))
        body = json.dumps(CHAT_RESPONSE).encode()
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        pass


@contextmanager
def local_chat_server() -> Iterator[str]:
    """Run a real HTTP/1.1 server on localhost and yield its ``/v1/`` base URL."""
    server = ThreadingHTTPServer(('127.0.0.1', 0), _ChatHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f'http://127.0.0.1:{server.server_address[1]}/v1/'
    finally:
        server.shutdown()
        server.server_close()
