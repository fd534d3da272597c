"""
GraphQL Gateway - GraphQL over HTTP ingestion server

Parses GraphQL requests (query string, JSON, form-encoded or raw GraphQL
bodies, optionally compressed) and forwards them to an external GraphQL
executor. Browsers are served the GraphiQL explorer.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse

from .api.deps import ExecutorClientDep, GraphQLParamsDep
from .config import config
from .core.exceptions import MissingQuery
from .core.graphiql import render_graphiql
from .core.logging_config import setup_logging
from .core.negotiation import prefers_html
from .exceptions import register_exception_handlers
from .lifecycle import manage_lifespan
from .middleware import request_id_middleware
from .models import GraphiQLData, GraphiQLOptions

# Logger setup
setup_logging()
logger = logging.getLogger("gateway.main")

# Allow header for the GraphQL endpoint.
ALLOWED_METHODS = "GET, POST"


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with manage_lifespan(app, config):
        yield


app = FastAPI(
    title="GraphQL Gateway", version="1.0.0", lifespan=lifespan, root_path=config.root_path
)

app.middleware("http")(request_id_middleware)
register_exception_handlers(app)


# ===========================================
# Endpoint definitions.
# ===========================================


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


def _should_render_graphiql(request: Request, raw: bool) -> bool:
    return (
        config.GRAPHIQL_ENABLED
        and request.method == "GET"
        and not raw
        and prefers_html(request.headers.get("accept"))
    )


@app.api_route(config.GRAPHQL_PATH, methods=["GET", "POST"])
async def graphql_handler(
    request: Request,
    params: GraphQLParamsDep,
    executor: ExecutorClientDep,
):
    """
    GraphQL endpoint.

    Forwards the operation to the executor and returns its JSON result, or
    the GraphiQL page when a browser asked for HTML.
    """
    show_graphiql = _should_render_graphiql(request, params.raw)
    options: GraphiQLOptions = request.app.state.graphiql_options

    if params.query is None:
        if show_graphiql:
            data = GraphiQLData(
                variables=params.variables, operation_name=params.operation_name
            )
            return HTMLResponse(render_graphiql(data, options))
        raise MissingQuery()

    result = await executor.execute(params, request.headers)

    if show_graphiql:
        data = GraphiQLData(
            query=params.query,
            variables=params.variables,
            operation_name=params.operation_name,
            result=result.content,
        )
        return HTMLResponse(render_graphiql(data, options))

    return JSONResponse(status_code=result.status_code, content=result.content)


@app.api_route(
    config.GRAPHQL_PATH,
    methods=["PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
async def graphql_method_not_allowed():
    raise HTTPException(
        status_code=405, detail="Method Not Allowed", headers={"Allow": ALLOWED_METHODS}
    )


if __name__ == "__main__":
    import uvicorn

    host, _, port = config.UVICORN_BIND_ADDR.rpartition(":")
    uvicorn.run(app, host=host or "0.0.0.0", port=int(port))
