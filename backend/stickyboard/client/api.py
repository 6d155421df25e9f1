"""Async HTTP client for the StickyBoard REST API."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from stickyboard.api.v1.schemas.auth import AuthResponse
from stickyboard.api.v1.schemas.board import BoardRead
from stickyboard.api.v1.schemas.note import NoteRead, NoteReplace
from stickyboard.client.config import get_client_settings
from stickyboard.utils.logging import get_logger

if TYPE_CHECKING:
    from uuid import UUID

    from stickyboard.client.storage import LocalStore

logger = get_logger(__name__)

TOKEN_KEY = "token"
REFRESH_TOKEN_KEY = "refresh_token"


class ApiError(Exception):
    """Raised for non-2xx responses and transport failures (``status_code`` 0)."""

    def __init__(self, status_code: int, detail: Any = None) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class StickyBoardApi:
    """Thin typed wrapper over the REST endpoints.

    The bearer token is kept on the instance and, when a ``LocalStore`` is
    given, mirrored under the ``token`` key so a later session can reuse it.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        store: LocalStore | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_client_settings()
        self._store = store
        self._token = token or (store.get_item(TOKEN_KEY) if store else None)
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.api_url).rstrip("/"),
            timeout=timeout if timeout is not None else settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> StickyBoardApi:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str | None, refresh_token: str | None = None) -> None:
        self._token = token
        if self._store is None:
            return
        if token:
            self._store.set_item(TOKEN_KEY, token)
        else:
            self._store.remove_item(TOKEN_KEY)
        if refresh_token:
            self._store.set_item(REFRESH_TOKEN_KEY, refresh_token)
        elif not token:
            self._store.remove_item(REFRESH_TOKEN_KEY)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        try:
            response = await self._client.request(method, path, json=json, params=params, headers=headers)
        except httpx.HTTPError as err:
            logger.error("Request failed", extra={"method": method, "path": path, "error": str(err)})
            raise ApiError(0, str(err)) from err

        if response.status_code >= 400:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text or response.reason_phrase
            logger.warning(
                "API error",
                extra={"method": method, "path": path, "status": response.status_code, "detail": detail},
            )
            raise ApiError(response.status_code, detail)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Auth

    async def sign_up(self, email: str, password: str, confirm_password: str) -> AuthResponse:
        data = await self._request(
            "POST",
            "/auth/signup",
            json={"email": email, "password": password, "confirm_password": confirm_password},
        )
        auth = AuthResponse.model_validate(data)
        self.set_token(auth.access_token, auth.refresh_token)
        return auth

    async def sign_in(self, email: str, password: str) -> AuthResponse:
        data = await self._request("POST", "/auth/signin", json={"email": email, "password": password})
        auth = AuthResponse.model_validate(data)
        self.set_token(auth.access_token, auth.refresh_token)
        return auth

    async def sign_out(self) -> None:
        try:
            await self._request("POST", "/auth/signout")
        finally:
            self.set_token(None)

    async def validate(self) -> dict[str, Any]:
        return await self._request("GET", "/auth/validate")

    async def refresh(self, refresh_token: str | None = None) -> AuthResponse:
        token = refresh_token or (self._store.get_item(REFRESH_TOKEN_KEY) if self._store else None)
        data = await self._request("POST", "/auth/refresh", json={"refresh_token": token})
        auth = AuthResponse.model_validate(data)
        self.set_token(auth.access_token, auth.refresh_token)
        return auth

    # Boards

    async def list_boards(self) -> list[BoardRead]:
        data = await self._request("GET", "/boards/")
        return [BoardRead.model_validate(b) for b in data]

    async def count_boards(self) -> int:
        return int(await self._request("GET", "/boards/count"))

    async def get_board(self, board_id: UUID | str) -> BoardRead:
        return BoardRead.model_validate(await self._request("GET", f"/boards/{board_id}"))

    async def create_board(self, name: str) -> BoardRead:
        return BoardRead.model_validate(await self._request("POST", "/boards/", json={"name": name}))

    async def rename_board(self, board_id: UUID | str, name: str) -> BoardRead:
        return BoardRead.model_validate(await self._request("PUT", f"/boards/{board_id}", json={"name": name}))

    async def delete_board(self, board_id: UUID | str) -> None:
        await self._request("DELETE", f"/boards/{board_id}")

    # Notes

    async def list_notes(self, board_id: UUID | str | None = None) -> list[NoteRead]:
        params = {"board_id": str(board_id)} if board_id else None
        data = await self._request("GET", "/notes/", params=params)
        return [NoteRead.model_validate(n) for n in data]

    async def list_all_notes(self) -> list[NoteRead]:
        """Every note the user owns, across boards."""
        return await self.list_notes()

    async def get_note(self, note_id: UUID | str) -> NoteRead:
        return NoteRead.model_validate(await self._request("GET", f"/notes/{note_id}"))

    async def create_note(self, board_id: UUID | str, **fields: Any) -> NoteRead:
        payload = {**fields, "board_id": str(board_id)}
        return NoteRead.model_validate(await self._request("POST", "/notes/", json=payload))

    async def update_note(self, note: NoteRead) -> NoteRead:
        """Replace every editable field of ``note`` on the server (PUT)."""
        payload = note.model_dump(mode="json", include=set(NoteReplace.model_fields))
        return NoteRead.model_validate(await self._request("PUT", f"/notes/{note.id}", json=payload))

    async def patch_note(self, note_id: UUID | str, **changes: Any) -> NoteRead:
        return NoteRead.model_validate(await self._request("PATCH", f"/notes/{note_id}", json=changes))

    async def delete_note(self, note_id: UUID | str) -> None:
        await self._request("DELETE", f"/notes/{note_id}")

    async def notes_by_tag(self, tag: str) -> list[NoteRead]:
        data = await self._request("GET", "/notes/filter", params={"tag": tag})
        return [NoteRead.model_validate(n) for n in data]

    async def search_notes(
        self,
        query: str | None = None,
        *,
        tags: list[str] | None = None,
        match_all_tags: bool = False,
        board_id: UUID | str | None = None,
        limit: int = 50,
    ) -> list[NoteRead]:
        payload: dict[str, Any] = {"query": query, "tags": tags, "match_all_tags": match_all_tags, "limit": limit}
        if board_id:
            payload["board_id"] = str(board_id)
        data = await self._request("POST", "/notes/search", json=payload)
        return [NoteRead.model_validate(n) for n in data]

    # Metadata

    async def tags(self, board_id: UUID | str | None = None) -> list[str]:
        params = {"board_id": str(board_id)} if board_id else None
        data = await self._request("GET", "/metadata/tags", params=params)
        return list(data.get("tag_vocab", []))

    async def colors(self) -> list[str]:
        return list(await self._request("GET", "/metadata/colors"))
