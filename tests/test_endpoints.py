import pytest

from phraseapp_client.endpoints import ENDPOINTS, Endpoint, get_endpoint
from phraseapp_client.exceptions import ConfigurationError


def test_endpoint_names_are_unique_and_match_keys():
    assert all(name == endpoint.name for name, endpoint in ENDPOINTS.items())


@pytest.mark.parametrize(
    "name, method, paginated",
    [
        ("list_projects", "GET", True),
        ("get_project", "GET", False),
        ("list_keys", "GET", True),
        ("search_keys", "POST", True),
        ("update_key", "PATCH", False),
        ("delete_key", "DELETE", False),
        ("search_translations", "POST", True),
    ],
)
def test_endpoint_table(name, method, paginated):
    endpoint = get_endpoint(name)

    assert endpoint.method == method
    assert endpoint.paginated is paginated


def test_path_params():
    assert get_endpoint("list_projects").path_params == frozenset()
    assert get_endpoint("update_key").path_params == {"project_id", "key_id"}


def test_path_fills_and_quotes_placeholders():
    path = get_endpoint("update_key").path(project_id="abc", key_id="a/b c")

    assert path == "projects/abc/keys/a%2Fb%20c"


def test_path_ignores_unused_parameters():
    assert get_endpoint("list_keys").path(project_id="abc", other="x") == (
        "projects/abc/keys"
    )


def test_path_missing_parameter():
    with pytest.raises(ConfigurationError, match="key_id, project_id"):
        get_endpoint("delete_key").path()


def test_unknown_endpoint():
    with pytest.raises(ConfigurationError, match="Unknown endpoint: 'nope'"):
        get_endpoint("nope")


def test_endpoint_is_frozen():
    endpoint = Endpoint(name="x", method="GET", path_template="x")

    with pytest.raises(ValueError):
        endpoint.paginated = True
