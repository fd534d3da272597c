"""
Data model definitions package.

Aggregates request body and GraphQL models for use in other modules.
"""

from .body import (
    Absent,
    IncomingRequest,
    classify_body,
    MediaTypeInfo,
    PreParsedBody,
    RawBytes,
    RawString,
    Structured,
)
from .graphql import GraphiQLData, GraphiQLOptions, GraphQLParams

__all__ = [
    "Absent",
    "IncomingRequest",
    "classify_body",
    "MediaTypeInfo",
    "PreParsedBody",
    "RawBytes",
    "RawString",
    "Structured",
    "GraphiQLData",
    "GraphiQLOptions",
    "GraphQLParams",
]
