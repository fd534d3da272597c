import os
from typing import Iterable, Mapping, Optional

import pytest

# Config is initialised at import time, so set the environment at module level.
os.environ["EXECUTOR_URL"] = "http://test-executor:4000/graphql"
os.environ.setdefault("LOG_CONFIG_PATH", "/tmp/gqlhttp-missing-logging.yml")

from gqlhttp.gateway.models import IncomingRequest, PreParsedBody  # noqa: E402


class StreamProbe:
    """Async byte stream that records how far it was consumed."""

    def __init__(self, chunks: Iterable[bytes], error: Optional[Exception] = None):
        self.chunks = list(chunks)
        self.error = error
        self.consumed = 0
        self.opened = False

    async def __call__(self):
        self.opened = True
        for chunk in self.chunks:
            self.consumed += 1
            yield chunk
        if self.error is not None:
            raise self.error


@pytest.fixture
def make_request():
    """Factory for IncomingRequest objects backed by a StreamProbe."""

    def _make(
        headers: Optional[Mapping[str, str]] = None,
        chunks: Iterable[bytes] = (),
        body: Optional[PreParsedBody] = None,
        error: Optional[Exception] = None,
    ):
        probe = StreamProbe(chunks, error)
        request = IncomingRequest.from_parts(headers or {}, probe, body)
        return request, probe

    return _make
