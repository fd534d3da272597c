"""
GraphQL request and explorer models.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class GraphQLParams(BaseModel):
    """
    Parameters of a single GraphQL operation, merged from the URL query
    string and the request body.
    """

    query: Optional[str] = None
    variables: Optional[Dict[str, Any]] = None
    operation_name: Optional[str] = Field(default=None, alias="operationName")
    raw: bool = False

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """Body forwarded to the executor."""
        return self.model_dump(by_alias=True, exclude={"raw"})


class GraphiQLData(BaseModel):
    """Values pre-populated in the GraphiQL page."""

    query: Optional[str] = None
    variables: Optional[Dict[str, Any]] = None
    operation_name: Optional[str] = Field(default=None, alias="operationName")
    result: Optional[Any] = None

    model_config = ConfigDict(populate_by_name=True)


class GraphiQLOptions(BaseModel):
    """GraphiQL page options."""

    default_query: Optional[str] = Field(default=None, alias="defaultQuery")
    header_editor_enabled: bool = Field(default=False, alias="headerEditorEnabled")
    should_persist_headers: bool = Field(default=False, alias="shouldPersistHeaders")
    subscription_endpoint: Optional[str] = Field(default=None, alias="subscriptionEndpoint")
    # v0: subscriptions-transport-ws, v1: graphql-ws
    websocket_client: str = Field(default="v0", alias="websocketClient")

    model_config = ConfigDict(populate_by_name=True)
