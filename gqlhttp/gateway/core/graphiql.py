"""
GraphiQL page rendering.

When a browser asks the GraphQL endpoint for HTML, the gateway answers with
GraphiQL, pre-populated with the request's query and, if one was run, its
result.
"""

import json
from string import Template
from typing import Any, Optional

from ..models.graphql import GraphiQLData, GraphiQLOptions

GRAPHIQL_VERSION = "1.4.7"
REACT_VERSION = "16.14.0"

_SUBSCRIPTIONS_V0 = """
  <script src="//unpkg.com/subscriptions-transport-ws@0.9.18/browser/client.js"></script>
  <script src="//unpkg.com/graphiql-subscriptions-fetcher@0.0.2/browser/client.js"></script>"""

_SUBSCRIPTIONS_V1 = """
  <script src="//unpkg.com/graphql-ws@5.5.5/umd/graphql-ws.min.js"></script>"""

_PAGE = Template(
    """<!--
The request to this GraphQL server provided the header "Accept: text/html"
and as a result has been presented GraphiQL - an in-browser IDE for
exploring GraphQL.

If you wish to receive JSON, provide the header "Accept: application/json" or
add "&raw" to the end of the URL within a browser.
-->
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8" />
  <title>GraphiQL</title>
  <meta name="robots" content="noindex" />
  <meta name="referrer" content="origin" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <style>
    body {
      margin: 0;
      overflow: hidden;
    }
    #graphiql {
      height: 100vh;
    }
  </style>
  <link href="//unpkg.com/graphiql@$graphiql_version/graphiql.css" rel="stylesheet" />
  <script src="//unpkg.com/promise-polyfill@8.2.0/dist/polyfill.min.js"></script>
  <script src="//unpkg.com/unfetch@4.2.0/dist/unfetch.umd.js"></script>
  <script src="//unpkg.com/react@$react_version/umd/react.production.min.js"></script>
  <script src="//unpkg.com/react-dom@$react_version/umd/react-dom.production.min.js"></script>
  <script src="//unpkg.com/graphiql@$graphiql_version/graphiql.min.js"></script>$subscription_scripts
</head>
<body>
  <div id="graphiql">Loading...</div>
  <script>
    // Collect the URL parameters
    var parameters = {};
    window.location.search.substr(1).split('&').forEach(function (entry) {
      var eq = entry.indexOf('=');
      if (eq >= 0) {
        parameters[decodeURIComponent(entry.slice(0, eq))] =
          decodeURIComponent(entry.slice(eq + 1));
      }
    });

    // Produce a Location query string from a parameter object.
    function locationQuery(params) {
      return '?' + Object.keys(params).filter(function (key) {
        return Boolean(params[key]);
      }).map(function (key) {
        return encodeURIComponent(key) + '=' +
          encodeURIComponent(params[key]);
      }).join('&');
    }

    // Derive a fetch URL from the current URL, sans the GraphQL parameters.
    var graphqlParamNames = {
      query: true,
      variables: true,
      operationName: true
    };

    var otherParams = {};
    for (var k in parameters) {
      if (parameters.hasOwnProperty(k) && graphqlParamNames[k] !== true) {
        otherParams[k] = parameters[k];
      }
    }
    var fetchURL = locationQuery(otherParams);

    // Defines a GraphQL fetcher using the fetch API.
    function graphQLFetcher(graphQLParams, opts) {
      return fetch(fetchURL, {
        method: 'post',
        headers: Object.assign(
          {
            'Accept': 'application/json',
            'Content-Type': 'application/json'
          },
          opts && opts.headers
        ),
        body: JSON.stringify(graphQLParams),
        credentials: 'include',
      }).then(function (response) {
        return response.json();
      });
    }

    function makeFetcher() {
      var subscriptionEndpoint = $subscription_endpoint;
      if (typeof subscriptionEndpoint !== 'string') {
        return graphQLFetcher;
      }
      var url = window.location.href;
      if ($websocket_client === 'v1') {
        var wsClient = window.graphqlWs.createClient({ url: subscriptionEndpoint });
        return window.GraphiQL.createFetcher({ url: url, wsClient: wsClient });
      }
      var ClientClass = window.SubscriptionsTransportWs.SubscriptionClient;
      var legacyClient = new ClientClass(subscriptionEndpoint, { reconnect: true });
      return window.GraphiQL.createFetcher({ url: url, legacyClient: legacyClient });
    }

    // When the query and variables string is edited, update the URL bar so
    // that it can be easily shared.
    function onEditQuery(newQuery) {
      parameters.query = newQuery;
      updateURL();
    }

    function onEditVariables(newVariables) {
      parameters.variables = newVariables;
      updateURL();
    }

    function onEditOperationName(newOperationName) {
      parameters.operationName = newOperationName;
      updateURL();
    }

    function updateURL() {
      history.replaceState(null, null, locationQuery(parameters));
    }

    // Render <GraphiQL /> into the body.
    ReactDOM.render(
      React.createElement(GraphiQL, {
        fetcher: makeFetcher(),
        onEditQuery: onEditQuery,
        onEditVariables: onEditVariables,
        onEditOperationName: onEditOperationName,
        query: $query,
        response: $response,
        variables: $variables,
        operationName: $operation_name,
        defaultQuery: $default_query,
        headerEditorEnabled: $header_editor_enabled,
        shouldPersistHeaders: $should_persist_headers
      }),
      document.getElementById('graphiql')
    );
  </script>
</body>
</html>"""
)


def safe_serialize(value: Any) -> str:
    """
    JSON-encode a value for embedding in an inline script.

    Forward slashes are escaped so no value can close the script tag;
    None becomes ``undefined``.
    """
    if value is None:
        return "undefined"
    return json.dumps(value).replace("/", "\\/")


def _pretty(value: Any) -> Optional[str]:
    return json.dumps(value, indent=2) if value is not None else None


def render_graphiql(data: GraphiQLData, options: Optional[GraphiQLOptions] = None) -> str:
    """
    Render the GraphiQL page for the given request data and options.
    """
    options = options or GraphiQLOptions()

    subscription_scripts = ""
    if options.subscription_endpoint is not None:
        if options.websocket_client == "v1":
            subscription_scripts = _SUBSCRIPTIONS_V1
        else:
            subscription_scripts = _SUBSCRIPTIONS_V0

    return _PAGE.substitute(
        graphiql_version=GRAPHIQL_VERSION,
        react_version=REACT_VERSION,
        subscription_scripts=subscription_scripts,
        subscription_endpoint=safe_serialize(options.subscription_endpoint),
        websocket_client=safe_serialize(options.websocket_client),
        query=safe_serialize(data.query),
        response=safe_serialize(_pretty(data.result)),
        variables=safe_serialize(_pretty(data.variables)),
        operation_name=safe_serialize(data.operation_name),
        default_query=safe_serialize(options.default_query),
        header_editor_enabled=safe_serialize(options.header_editor_enabled),
        should_persist_headers=safe_serialize(options.should_persist_headers),
    )
