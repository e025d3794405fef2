"""Operations scoped to a single project.

ProjectScope binds a project id onto the client's endpoint calls. Every
available operation is an explicit method, so the set of operations in a
project scope is fixed and visible to type checkers.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .log_config import logger

if TYPE_CHECKING:
    from .client import PhraseAppClient
    from .stream import PaginationStream


class ProjectScope:
    """The project-level operations of the API for one project.

    Attributes:
        project_id: The id bound onto every call.
        _client: The client performing the calls.
    """

    def __init__(self, client: "PhraseAppClient", project_id: str):
        self._client = client
        self.project_id = project_id
        logger.trace(f"ProjectScope created for project {project_id}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(project_id={self.project_id!r})"

    async def _call(self, endpoint_name: str, **kwargs: Any) -> Any | None:
        return await self._client.call(
            endpoint_name, project_id=self.project_id, **kwargs
        )

    def _stream(self, endpoint_name: str, **kwargs: Any) -> "PaginationStream":
        return self._client.stream(endpoint_name, project_id=self.project_id, **kwargs)

    async def get_info(self) -> Any | None:
        return await self._client.get_project(self.project_id)

    # --- Locales ---

    async def list_locales(
        self, *, params: Mapping[str, Any] | None = None
    ) -> list[Any] | None:
        return await self._call("list_locales", params=params)

    # --- Keys ---

    async def list_keys(
        self, *, params: Mapping[str, Any] | None = None
    ) -> list[Any] | None:
        return await self._call("list_keys", params=params)

    def list_keys_stream(
        self, *, params: Mapping[str, Any] | None = None
    ) -> "PaginationStream":
        return self._stream("list_keys", params=params)

    async def search_keys(
        self, query: Mapping[str, Any], *, params: Mapping[str, Any] | None = None
    ) -> list[Any] | None:
        """Search keys; `query` is sent as the JSON body (e.g. {"q": "name:foo*"})."""
        return await self._call("search_keys", params=params, body=dict(query))

    def search_keys_stream(
        self, query: Mapping[str, Any], *, params: Mapping[str, Any] | None = None
    ) -> "PaginationStream":
        return self._stream("search_keys", params=params, body=dict(query))

    async def create_key(self, key: Mapping[str, Any]) -> Any | None:
        return await self._call("create_key", body=dict(key))

    async def update_key(self, key_id: str, changes: Mapping[str, Any]) -> Any | None:
        return await self._call("update_key", key_id=key_id, body=dict(changes))

    async def delete_key(self, key_id: str) -> Any | None:
        return await self._call("delete_key", key_id=key_id)

    # --- Translations ---

    async def list_translations(
        self, *, params: Mapping[str, Any] | None = None
    ) -> list[Any] | None:
        return await self._call("list_translations", params=params)

    async def list_translations_for_key(
        self, key_id: str, *, params: Mapping[str, Any] | None = None
    ) -> list[Any] | None:
        return await self._call(
            "list_translations_for_key", key_id=key_id, params=params
        )

    async def search_translations(
        self, query: Mapping[str, Any], *, params: Mapping[str, Any] | None = None
    ) -> list[Any] | None:
        return await self._call("search_translations", params=params, body=dict(query))

    def search_translations_stream(
        self, query: Mapping[str, Any], *, params: Mapping[str, Any] | None = None
    ) -> "PaginationStream":
        return self._stream("search_translations", params=params, body=dict(query))

    async def create_translation(self, translation: Mapping[str, Any]) -> Any | None:
        return await self._call("create_translation", body=dict(translation))
