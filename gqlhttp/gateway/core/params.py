"""
GraphQL parameter extraction.

Merges URL query parameters with the parsed request body. URL values take
precedence over body values.
"""

import json
from typing import Any, Mapping, Optional

from ..models.graphql import GraphQLParams
from .exceptions import InvalidVariables


def _pick(url_params: Mapping[str, Any], body: Mapping[str, Any], key: str) -> Any:
    value = url_params.get(key)
    if value is None:
        value = body.get(key)
    return value


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _parse_variables(value: Any) -> Optional[dict]:
    if isinstance(value, str):
        try:
            variables = json.loads(value)
        except ValueError:
            raise InvalidVariables() from None
        if variables is None:
            return None
        if not isinstance(variables, dict):
            raise InvalidVariables()
        return variables
    if isinstance(value, Mapping):
        return dict(value)
    return None


def get_graphql_params(
    url_params: Mapping[str, Any], body: Mapping[str, Any]
) -> GraphQLParams:
    """
    Build GraphQLParams from URL query parameters and a parsed body.

    Raises:
        InvalidVariables: if variables were sent as a string that is not a JSON object
    """
    raw = "raw" in url_params or "raw" in body
    return GraphQLParams(
        query=_as_str(_pick(url_params, body, "query")),
        variables=_parse_variables(_pick(url_params, body, "variables")),
        operation_name=_as_str(_pick(url_params, body, "operationName")),
        raw=raw,
    )
