"""
Core logic package.

Provides request body ingestion, GraphQL parameter extraction, executor
forwarding and GraphiQL rendering.
"""

from .body_parser import (
    decode_body,
    decompressed,
    parse_body,
    parse_media_type,
    read_body,
    read_bounded,
    resolve_charset,
)
from .executor import ExecutionResult, ExecutorClient
from .graphiql import render_graphiql
from .params import get_graphql_params

__all__ = [
    "decode_body",
    "decompressed",
    "parse_body",
    "parse_media_type",
    "read_body",
    "read_bounded",
    "resolve_charset",
    "ExecutionResult",
    "ExecutorClient",
    "render_graphiql",
    "get_graphql_params",
]
