"""WSGI middleware limiting the size of request bodies."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any, BinaryIO

WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]


class RequestTooLarge(Exception):
    """The request body is larger than the allowed limit."""

    def __init__(self, message: str = "http: request body too large") -> None:
        super().__init__(message)


class _LimitedInput:
    """Wraps a request body stream and fails once more than the limit is read."""

    def __init__(self, stream: BinaryIO, limit: int) -> None:
        self._stream = stream
        self._remaining = limit
        self._exceeded = False

    def _want(self, size: int | None) -> int:
        if size is None or size < 0 or size > self._remaining:
            return self._remaining + 1
        return size

    def _account(self, data: bytes) -> bytes:
        if len(data) > self._remaining:
            self._exceeded = True
            self._remaining = 0
            raise RequestTooLarge()
        self._remaining -= len(data)
        return data

    def read(self, size: int | None = -1) -> bytes:
        if self._exceeded:
            raise RequestTooLarge()
        return self._account(self._stream.read(self._want(size)))

    def readline(self, size: int | None = -1) -> bytes:
        if self._exceeded:
            raise RequestTooLarge()
        return self._account(self._stream.readline(self._want(size)))

    def readlines(self, hint: int | None = -1) -> list[bytes]:
        lines = []
        total = 0
        for line in self:
            lines.append(line)
            total += len(line)
            if hint is not None and 0 < hint <= total:
                break
        return lines

    def __iter__(self) -> Iterator[bytes]:
        while True:
            line = self.readline()
            if not line:
                return
            yield line


def with_max_bytes(app: WSGIApp, n: int) -> WSGIApp:
    """Wrap a WSGI app so reading more than ``n`` body bytes raises RequestTooLarge."""

    def limited(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        environ = {**environ, "wsgi.input": _LimitedInput(environ["wsgi.input"], n)}
        return app(environ, start_response)

    return limited