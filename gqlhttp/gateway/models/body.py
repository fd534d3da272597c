"""
Request body models.

Framework-agnostic view of an inbound request as seen by the body parser.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, AsyncIterator, Callable, Mapping, Union

from starlette.datastructures import Headers


@dataclass(frozen=True)
class Absent:
    """No body was pre-parsed; the raw stream must be read."""


@dataclass(frozen=True)
class RawBytes:
    """Upstream middleware buffered the body without decoding it."""

    value: bytes


@dataclass(frozen=True)
class RawString:
    """Upstream middleware decoded the body to text."""

    value: str


@dataclass(frozen=True)
class Structured:
    """Upstream middleware already parsed the body into a mapping."""

    value: Mapping[str, Any]


PreParsedBody = Union[Absent, RawBytes, RawString, Structured]


def classify_body(value: Any) -> PreParsedBody:
    """Wrap a body value left by upstream middleware in its variant."""
    if value is None:
        return Absent()
    if isinstance(value, Mapping):
        return Structured(value)
    if isinstance(value, str):
        return RawString(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return RawBytes(bytes(value))
    # Unrecognised values carry nothing the parser can decode.
    return RawBytes(b"")


@dataclass(frozen=True)
class MediaTypeInfo:
    """Parsed Content-Type header: lower-cased type plus its parameters."""

    type: str
    parameters: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def charset(self) -> str | None:
        return self.parameters.get("charset")


@dataclass
class IncomingRequest:
    """
    Request handed to the body parser.

    The parser never owns the request: it reads the headers, inspects the
    pre-parsed body and consumes ``stream()`` at most once.
    """

    headers: Headers
    stream: Callable[[], AsyncIterator[bytes]]
    body: PreParsedBody = field(default_factory=Absent)

    @classmethod
    def from_parts(
        cls,
        headers: Mapping[str, str],
        stream: Callable[[], AsyncIterator[bytes]],
        body: PreParsedBody | None = None,
    ) -> "IncomingRequest":
        """Build a request from a plain header mapping (keys are case-insensitive)."""
        return cls(
            headers=Headers(headers=dict(headers)),
            stream=stream,
            body=body if body is not None else Absent(),
        )
