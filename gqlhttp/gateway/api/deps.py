"""
Dependency Injection for Gateway API.

Manage request handler dependencies using FastAPI Depends.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..config import config
from ..core.body_parser import parse_body
from ..core.executor import ExecutorClient
from ..core.params import get_graphql_params
from ..models import GraphQLParams, IncomingRequest, classify_body

# request.state attribute where upstream middleware may leave a parsed body.
PARSED_BODY_STATE_ATTR = "parsed_body"


# ==========================================
# 1. Service Accessors
# ==========================================


def get_executor_client(request: Request) -> ExecutorClient:
    return request.app.state.executor_client


ExecutorClientDep = Annotated[ExecutorClient, Depends(get_executor_client)]


# ==========================================
# 2. Request Adapters
# ==========================================


def incoming_request_from_starlette(request: Request) -> IncomingRequest:
    """
    Adapt a Starlette request for the body parser.

    A body already parsed by upstream middleware is picked up from
    ``request.state.parsed_body``.
    """
    pre_parsed = getattr(request.state, PARSED_BODY_STATE_ATTR, None)
    return IncomingRequest(
        headers=request.headers,
        stream=request.stream,
        body=classify_body(pre_parsed),
    )


async def get_graphql_request_params(request: Request) -> GraphQLParams:
    """
    Extract GraphQL parameters from the URL and, for POST, the request body.
    """
    body = {}
    if request.method == "POST":
        body = await parse_body(
            incoming_request_from_starlette(request),
            max_body_bytes=config.MAX_BODY_BYTES,
        )
    return get_graphql_params(request.query_params, body)


GraphQLParamsDep = Annotated[GraphQLParams, Depends(get_graphql_request_params)]
