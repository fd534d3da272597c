"""
Where: gqlhttp/gateway/lifecycle.py
What: Gateway startup/shutdown orchestration for shared resources.
Why: Keep main.py focused on app assembly while preserving lifecycle behavior.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from gqlhttp.common.core.http_client import HttpClientFactory

from .config import GatewayConfig
from .core.executor import ExecutorClient
from .models import GraphiQLOptions

logger = logging.getLogger("gateway.main")


def graphiql_options_from_config(gateway_config: GatewayConfig) -> GraphiQLOptions:
    return GraphiQLOptions(
        default_query=gateway_config.GRAPHIQL_DEFAULT_QUERY,
        header_editor_enabled=gateway_config.GRAPHIQL_HEADER_EDITOR_ENABLED,
        should_persist_headers=gateway_config.GRAPHIQL_SHOULD_PERSIST_HEADERS,
        subscription_endpoint=gateway_config.GRAPHIQL_SUBSCRIPTION_ENDPOINT,
        websocket_client=gateway_config.GRAPHIQL_WEBSOCKET_CLIENT,
    )


@asynccontextmanager
async def manage_lifespan(app: FastAPI, gateway_config: GatewayConfig) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    factory = HttpClientFactory(gateway_config)
    client = factory.create_async_client(timeout=gateway_config.EXECUTOR_TIMEOUT)

    try:
        logger.info(
            "Initializing Gateway with GraphQL executor: %s",
            gateway_config.EXECUTOR_URL,
        )

        app.state.http_client = client
        app.state.executor_client = ExecutorClient(
            client,
            url=gateway_config.EXECUTOR_URL,
            timeout=gateway_config.EXECUTOR_TIMEOUT,
        )
        app.state.graphiql_options = graphiql_options_from_config(gateway_config)

        logger.info("Gateway initialized with shared resources.")
        yield
    finally:
        logger.info("Gateway shutting down, closing http client.")
        await client.aclose()
