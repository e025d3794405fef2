"""Declarative table of the API endpoints exposed by the client.

Each row binds a name to an HTTP method, a path template and whether the
endpoint returns a link-paginated collection. The client dispatches calls by
name through this table (`PhraseAppClient.call` / `PhraseAppClient.stream`)
instead of hand-writing one method per resource and verb.
"""

import string
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

from .exceptions import ConfigurationError
from .types import HttpMethod

_FORMATTER = string.Formatter()


class Endpoint(BaseModel):
    """One API endpoint.

    Attributes:
        name: Unique name used for dispatch, e.g. "list_keys".
        method: HTTP method.
        path_template: Path relative to the base URL, with `{placeholders}`.
        paginated: Whether the endpoint returns a `Link`-paginated collection.
    """

    name: str
    method: HttpMethod
    path_template: str
    paginated: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def path_params(self) -> frozenset[str]:
        return frozenset(
            field for _, field, _, _ in _FORMATTER.parse(self.path_template) if field
        )

    def path(self, **path_params: str) -> str:
        """Fill in the path template; each value is URL-quoted.

        Raises:
            ConfigurationError: If a placeholder has no value.
        """
        missing = self.path_params - path_params.keys()
        if missing:
            raise ConfigurationError(
                f"Endpoint '{self.name}' requires path parameter(s): "
                f"{', '.join(sorted(missing))}"
            )
        quoted = {
            key: quote(str(value), safe="")
            for key, value in path_params.items()
            if key in self.path_params
        }
        return self.path_template.format(**quoted)


# --- Projects ---
LIST_PROJECTS = Endpoint(
    name="list_projects", method="GET", path_template="projects", paginated=True
)
GET_PROJECT = Endpoint(
    name="get_project", method="GET", path_template="projects/{project_id}"
)

# --- Locales ---
LIST_LOCALES = Endpoint(
    name="list_locales",
    method="GET",
    path_template="projects/{project_id}/locales",
    paginated=True,
)

# --- Keys ---
LIST_KEYS = Endpoint(
    name="list_keys",
    method="GET",
    path_template="projects/{project_id}/keys",
    paginated=True,
)
SEARCH_KEYS = Endpoint(
    name="search_keys",
    method="POST",
    path_template="projects/{project_id}/keys/search",
    paginated=True,
)
CREATE_KEY = Endpoint(
    name="create_key", method="POST", path_template="projects/{project_id}/keys"
)
UPDATE_KEY = Endpoint(
    name="update_key",
    method="PATCH",
    path_template="projects/{project_id}/keys/{key_id}",
)
DELETE_KEY = Endpoint(
    name="delete_key",
    method="DELETE",
    path_template="projects/{project_id}/keys/{key_id}",
)

# --- Translations ---
LIST_TRANSLATIONS = Endpoint(
    name="list_translations",
    method="GET",
    path_template="projects/{project_id}/translations",
    paginated=True,
)
LIST_TRANSLATIONS_FOR_KEY = Endpoint(
    name="list_translations_for_key",
    method="GET",
    path_template="projects/{project_id}/keys/{key_id}/translations",
    paginated=True,
)
SEARCH_TRANSLATIONS = Endpoint(
    name="search_translations",
    method="POST",
    path_template="projects/{project_id}/translations/search",
    paginated=True,
)
CREATE_TRANSLATION = Endpoint(
    name="create_translation",
    method="POST",
    path_template="projects/{project_id}/translations",
)

ENDPOINTS: dict[str, Endpoint] = {
    endpoint.name: endpoint
    for endpoint in (
        LIST_PROJECTS,
        GET_PROJECT,
        LIST_LOCALES,
        LIST_KEYS,
        SEARCH_KEYS,
        CREATE_KEY,
        UPDATE_KEY,
        DELETE_KEY,
        LIST_TRANSLATIONS,
        LIST_TRANSLATIONS_FOR_KEY,
        SEARCH_TRANSLATIONS,
        CREATE_TRANSLATION,
    )
}


def get_endpoint(name: str) -> Endpoint:
    """Look up an endpoint by name.

    Raises:
        ConfigurationError: If no endpoint has that name.
    """
    try:
        return ENDPOINTS[name]
    except KeyError:
        raise ConfigurationError(f"Unknown endpoint: '{name}'") from None
