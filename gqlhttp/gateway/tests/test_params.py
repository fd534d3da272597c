import pytest

from gqlhttp.gateway.core.exceptions import InvalidVariables
from gqlhttp.gateway.core.params import get_graphql_params


def test_body_only_params():
    params = get_graphql_params(
        {}, {"query": "{ x }", "variables": {"a": 1}, "operationName": "Op"}
    )

    assert params.query == "{ x }"
    assert params.variables == {"a": 1}
    assert params.operation_name == "Op"
    assert params.raw is False


def test_url_params_take_precedence():
    params = get_graphql_params(
        {"query": "{ url }", "operationName": "UrlOp"},
        {"query": "{ body }", "operationName": "BodyOp"},
    )

    assert params.query == "{ url }"
    assert params.operation_name == "UrlOp"


def test_variables_string_is_decoded():
    params = get_graphql_params({"variables": '{"id": "1"}'}, {})

    assert params.variables == {"id": "1"}


@pytest.mark.parametrize("variables", ["{not json", "[1, 2]", '"text"'])
def test_invalid_variables_string(variables):
    with pytest.raises(InvalidVariables) as exc_info:
        get_graphql_params({"variables": variables}, {})

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Variables are invalid JSON."


def test_null_variables_string_means_no_variables():
    assert get_graphql_params({}, {"variables": "null"}).variables is None


def test_non_string_values_are_ignored():
    params = get_graphql_params({}, {"query": 42, "operationName": ["a"], "variables": 7})

    assert params.query is None
    assert params.operation_name is None
    assert params.variables is None


@pytest.mark.parametrize(
    "url_params, body",
    [({"raw": ""}, {}), ({}, {"raw": "1"}), ({"raw": "true"}, {"query": "{ x }"})],
)
def test_raw_flag_is_presence_based(url_params, body):
    assert get_graphql_params(url_params, body).raw is True


def test_payload_uses_graphql_names():
    params = get_graphql_params({}, {"query": "{ x }", "operationName": "Op", "raw": "1"})

    assert params.to_payload() == {"query": "{ x }", "variables": None, "operationName": "Op"}
