"""
Executor client.

Forwards parsed GraphQL parameters to the external executor service and
returns its JSON result.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

from gqlhttp.common.core.request_context import get_request_id

from ..models.graphql import GraphQLParams
from .exceptions import ExecutorUnavailableError

logger = logging.getLogger("gateway.executor")

# Request headers passed through to the executor.
FORWARDED_HEADERS = ("authorization", "cookie")


@dataclass
class ExecutionResult:
    status_code: int
    content: Any


class ExecutorClient:
    """
    Thin HTTP client for the GraphQL executor.

    The httpx.AsyncClient is owned by the application lifespan and shared
    across requests.
    """

    def __init__(self, client: httpx.AsyncClient, url: str, timeout: float = 30.0):
        self.client = client
        self.url = url
        self.timeout = timeout

    def _build_headers(self, incoming: Optional[Mapping[str, str]]) -> dict:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if incoming:
            for name in FORWARDED_HEADERS:
                value = incoming.get(name)
                if value is not None:
                    headers[name] = value
        request_id = get_request_id()
        if request_id:
            headers["X-Request-Id"] = request_id
        return headers

    async def execute(
        self, params: GraphQLParams, headers: Optional[Mapping[str, str]] = None
    ) -> ExecutionResult:
        """
        Run one GraphQL operation on the executor.

        Raises:
            ExecutorUnavailableError: on transport failure or a non-JSON reply
        """
        try:
            response = await self.client.post(
                self.url,
                json=params.to_payload(),
                headers=self._build_headers(headers),
                timeout=self.timeout,
            )
        except httpx.RequestError as e:
            logger.error(
                f"Executor request failed: {self.url}",
                extra={
                    "executor_url": self.url,
                    "timeout": self.timeout,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            raise ExecutorUnavailableError(e) from e

        try:
            content = response.json()
        except ValueError as e:
            logger.error(
                "Executor returned a non-JSON response",
                extra={
                    "executor_url": self.url,
                    "status_code": response.status_code,
                    "snippet": response.text[:200],
                },
            )
            raise ExecutorUnavailableError(e) from e

        return ExecutionResult(status_code=response.status_code, content=content)
