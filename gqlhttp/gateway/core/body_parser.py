"""
Request body ingestion.

Turns an inbound request into the parameter mapping handed to the GraphQL
executor:

    resolve pre-parsed body -> validate charset/encoding -> decompress
        -> bounded read -> decode by declared media type

Every failure is raised as a GraphQLHTTPError subclass; a request without a
decodable payload yields an empty mapping.
"""

import json
import logging
import re
import zlib
from typing import Any, AsyncIterator, Dict
from urllib.parse import parse_qsl

from python_multipart.multipart import parse_options_header

from ..models.body import (
    Absent,
    IncomingRequest,
    MediaTypeInfo,
    RawBytes,
    RawString,
    Structured,
)
from .exceptions import (
    GraphQLHTTPError,
    InvalidJSON,
    MalformedBody,
    PayloadTooLarge,
    UnsupportedCharset,
    UnsupportedEncoding,
)

logger = logging.getLogger("gateway.body_parser")

GRAPHQL_MEDIA_TYPE = "application/graphql"
JSON_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"

DEFAULT_CHARSET = "utf-8"
DEFAULT_CONTENT_ENCODING = "identity"
DEFAULT_MAX_BODY_BYTES = 100_000_000

# Accepted charsets (JSON RFC 7159 sec 8.1) and the codec decoding each.
CHARSET_CODECS = {
    "utf-8": "utf-8",
    "utf8": "utf-8",
    "utf16le": "utf-16-le",
}

# zlib window bits per accepted compressed Content-Encoding.
ENCODING_WBITS = {
    "deflate": zlib.MAX_WBITS,
    "gzip": 16 + zlib.MAX_WBITS,
}

# Upper bound on a single decompressed chunk.
DECOMPRESS_CHUNK_SIZE = 64 * 1024

# Header bytes opening every gzip member (RFC 1952 sec 2.3.1).
GZIP_MAGIC = b"\x1f\x8b"

# Object-opening brace as the first non-whitespace character.
# RFC 7159 whitespace: space, horizontal tab, line feed, carriage return.
JSON_OBJECT_START = re.compile(r"^[ \t\n\r]*\{")


def parse_media_type(content_type: str) -> MediaTypeInfo:
    """
    Parse a Content-Type header value.

    The type and parameter names are lower-cased; parameter values are kept
    as sent.
    """
    ctype, options = parse_options_header(content_type)
    return MediaTypeInfo(
        type=ctype.decode("latin-1").strip().lower(),
        parameters={
            key.decode("latin-1").lower(): value.decode("latin-1")
            for key, value in options.items()
        },
    )


def resolve_charset(media_type: MediaTypeInfo) -> str:
    """
    Return the Python codec for the media type's charset.

    Raises:
        UnsupportedCharset: if the charset is not one of the accepted values
    """
    charset = (media_type.charset or DEFAULT_CHARSET).lower()
    codec = CHARSET_CODECS.get(charset)
    if codec is None:
        raise UnsupportedCharset(charset)
    return codec


def decompressed(stream: AsyncIterator[bytes], encoding: str) -> AsyncIterator[bytes]:
    """
    Wrap a byte stream in the decoder for its Content-Encoding.

    Validation happens immediately; decompression happens lazily as the
    returned iterator is consumed.

    Raises:
        UnsupportedEncoding: for anything other than identity, deflate or gzip
    """
    if encoding == DEFAULT_CONTENT_ENCODING:
        return stream
    wbits = ENCODING_WBITS.get(encoding)
    if wbits is None:
        raise UnsupportedEncoding(encoding)
    return _inflate(stream, wbits)


async def _inflate(stream: AsyncIterator[bytes], wbits: int) -> AsyncIterator[bytes]:
    """
    Decompress a deflate or gzip stream.

    Concatenated gzip members are decoded in turn. Anything else following
    the end of the compressed data is ignored.
    """
    multi_member = wbits == ENCODING_WBITS["gzip"]
    decompressor = zlib.decompressobj(wbits)
    pending = b""
    finished = False

    async for chunk in stream:
        data = chunk
        while data and not finished:
            if decompressor.eof:
                data = pending + data
                pending = b""
                if not multi_member or not GZIP_MAGIC.startswith(data[: len(GZIP_MAGIC)]):
                    finished = True
                    break
                if len(data) < len(GZIP_MAGIC):
                    # Member header split across chunks.
                    pending = data
                    break
                decompressor = zlib.decompressobj(wbits)

            out = decompressor.decompress(data, DECOMPRESS_CHUNK_SIZE)
            if out:
                yield out
            if decompressor.eof:
                data = decompressor.unused_data
            else:
                data = decompressor.unconsumed_tail

    # Drain output still buffered inside zlib.
    while not decompressor.eof:
        out = decompressor.decompress(b"", DECOMPRESS_CHUNK_SIZE)
        if not out:
            break
        yield out

    tail = decompressor.flush()
    if tail:
        yield tail

    if not decompressor.eof:
        raise EOFError("unexpected end of file")


async def read_bounded(stream: AsyncIterator[bytes], max_bytes: int) -> bytes:
    """
    Read a whole stream into memory, never holding more than max_bytes.

    Raises:
        PayloadTooLarge: as soon as the stream produces more than max_bytes
        MalformedBody: for any other read or decompression failure
    """
    buffer = bytearray()
    try:
        async for chunk in stream:
            if len(buffer) + len(chunk) > max_bytes:
                raise PayloadTooLarge(max_bytes)
            buffer.extend(chunk)
    except GraphQLHTTPError:
        raise
    except Exception as e:
        raise MalformedBody(e) from e
    return bytes(buffer)


async def read_body(
    request: IncomingRequest,
    media_type: MediaTypeInfo,
    max_bytes: int = DEFAULT_MAX_BODY_BYTES,
) -> str:
    """
    Read, decompress and decode the request stream to text.
    """
    codec = resolve_charset(media_type)
    encoding = request.headers.get("content-encoding", DEFAULT_CONTENT_ENCODING).lower()
    stream = decompressed(request.stream(), encoding)

    raw = await read_bounded(stream, max_bytes)
    # Undecodable byte sequences become U+FFFD.
    return raw.decode(codec, errors="replace")


def _parse_form(text: str) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    for key, value in parse_qsl(text, keep_blank_values=True):
        if key not in params:
            params[key] = value
        elif isinstance(params[key], list):
            params[key].append(value)
        else:
            params[key] = [params[key], value]
    return params


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not JSON.
    raise ValueError(f"Invalid JSON constant: {name}")


def decode_body(media_type: MediaTypeInfo, text: str) -> Dict[str, Any]:
    """
    Decode body text according to the declared (never sniffed) media type.

    Raises:
        InvalidJSON: for a JSON body that is not a JSON object
    """
    if media_type.type == GRAPHQL_MEDIA_TYPE:
        return {"query": text}

    if media_type.type == JSON_MEDIA_TYPE:
        if JSON_OBJECT_START.match(text):
            try:
                return json.loads(text, parse_constant=_reject_constant)
            except (ValueError, RecursionError):
                pass
        raise InvalidJSON()

    if media_type.type == FORM_MEDIA_TYPE:
        return _parse_form(text)

    return {}


async def parse_body(
    request: IncomingRequest, *, max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
) -> Dict[str, Any]:
    """
    Resolve the request body into a GraphQL parameter mapping.

    A body already parsed upstream into a mapping is returned unchanged. A
    request without Content-Type, or with a pre-parsed body this function
    does not recognise, yields an empty mapping.
    """
    body = request.body

    if isinstance(body, Structured):
        return dict(body.value)

    content_type = request.headers.get("content-type")
    if content_type is None:
        return {}

    media_type = parse_media_type(content_type)

    if isinstance(body, RawString):
        if media_type.type == GRAPHQL_MEDIA_TYPE:
            return {"query": body.value}
        return {}

    if isinstance(body, RawBytes):
        return {}

    if not isinstance(body, Absent):
        raise TypeError(f"Unknown pre-parsed body variant: {type(body).__name__}")

    text = await read_body(request, media_type, max_body_bytes)
    params = decode_body(media_type, text)
    logger.debug(
        "Decoded request body",
        extra={
            "media_type": media_type.type,
            "body_chars": len(text),
            "param_keys": sorted(params),
        },
    )
    return params
