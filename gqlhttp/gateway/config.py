"""
Gateway configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from typing import Literal, Optional

from pydantic import Field

from gqlhttp.common.core.config import BaseAppConfig

from .core.body_parser import DEFAULT_MAX_BODY_BYTES


class GatewayConfig(BaseAppConfig):
    """
    Configuration management for the GraphQL gateway service.
    """

    # Server settings
    UVICORN_BIND_ADDR: str = Field(default="0.0.0.0:8000", description="Listen address")

    # GraphQL endpoint
    GRAPHQL_PATH: str = Field(default="/graphql", description="GraphQL endpoint path")
    MAX_BODY_BYTES: int = Field(
        default=DEFAULT_MAX_BODY_BYTES, gt=0, description="Max decompressed body size (bytes)"
    )

    # External executor (required from env)
    EXECUTOR_URL: str = Field(..., description="URL of the GraphQL executor service")
    EXECUTOR_TIMEOUT: float = Field(default=30.0, description="Executor request timeout (seconds)")

    # GraphiQL explorer
    GRAPHIQL_ENABLED: bool = Field(default=True, description="Serve GraphiQL to browsers")
    GRAPHIQL_DEFAULT_QUERY: Optional[str] = Field(
        default=None, description="Query shown when no query was provided"
    )
    GRAPHIQL_HEADER_EDITOR_ENABLED: bool = Field(
        default=False, description="Enable the GraphiQL header editor"
    )
    GRAPHIQL_SHOULD_PERSIST_HEADERS: bool = Field(
        default=False, description="Persist GraphiQL headers in local storage"
    )
    GRAPHIQL_SUBSCRIPTION_ENDPOINT: Optional[str] = Field(
        default=None, description="Websocket endpoint for subscriptions"
    )
    GRAPHIQL_WEBSOCKET_CLIENT: Literal["v0", "v1"] = Field(
        default="v0", description="v0: subscriptions-transport-ws, v1: graphql-ws"
    )

    # FastAPI settings
    root_path: str = Field(default="", description="API root path (for proxy)")

    # model_config is inherited


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = GatewayConfig()
except Exception as e:
    # Fail fast; EXECUTOR_URL must be provided by the environment.
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
