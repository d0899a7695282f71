# File: /taskgrid/engine/remote.py | Version: 1.1 | Title: Remote state stores (HTTP + in-process SQLAlchemy)
from __future__ import annotations

import logging
from typing import Any, Dict, NamedTuple, Optional, Protocol

import httpx
from sqlalchemy.orm import Session

from taskgrid.core.config import settings
from taskgrid.core.errors import MalformedResponse, RemoteUnavailable
from taskgrid.crud import workspace_state as crud

log = logging.getLogger(__name__)

STATE_PATH = "/workspace-state"


class RemoteResult(NamedTuple):
    state: Optional[Dict[str, Any]]
    role: Optional[str]


class RemoteStore(Protocol):
    async def load_state(
        self, tenant_id: str, workspace_id: str, actor_email: Optional[str]
    ) -> RemoteResult: ...

    async def save_state(
        self,
        tenant_id: str,
        workspace_id: str,
        actor_email: Optional[str],
        state: Dict[str, Any],
    ) -> RemoteResult: ...


def _parse_envelope(resp: httpx.Response) -> RemoteResult:
    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedResponse(
            f"Unparsable body from {resp.request.url.path}", payload=resp.text[:200]
        ) from e

    if not isinstance(data, dict):
        raise MalformedResponse("Expected a JSON object", payload=data)
    if resp.status_code >= 400 or not data.get("ok"):
        err = data.get("error")
        message = err.get("message") if isinstance(err, dict) else err
        raise RemoteUnavailable(
            message or f"State service answered {resp.status_code}",
            status_code=resp.status_code,
        )

    state = data.get("state")
    if state is not None and not isinstance(state, dict):
        raise MalformedResponse("`state` must be an object or null", payload=state)
    role = data.get("role")
    return RemoteResult(state, role if isinstance(role, str) else None)


class HttpRemoteStore:
    """Talks to the state service (`GET`/`POST /workspace-state`)."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.STATE_SERVICE_URL,
            timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
        )

    async def load_state(
        self, tenant_id: str, workspace_id: str, actor_email: Optional[str]
    ) -> RemoteResult:
        params = {
            "locationId": tenant_id,
            "workspaceId": workspace_id,
            "userEmail": actor_email or "",
        }
        try:
            resp = await self._client.get(STATE_PATH, params=params)
        except httpx.HTTPError as e:
            raise RemoteUnavailable(f"GET {STATE_PATH} failed: {e}") from e
        return _parse_envelope(resp)

    async def save_state(
        self,
        tenant_id: str,
        workspace_id: str,
        actor_email: Optional[str],
        state: Dict[str, Any],
    ) -> RemoteResult:
        body = {
            "locationId": tenant_id,
            "workspaceId": workspace_id,
            "userEmail": actor_email,
            "state": state,
        }
        try:
            resp = await self._client.post(STATE_PATH, json=body)
        except httpx.HTTPError as e:
            raise RemoteUnavailable(f"POST {STATE_PATH} failed: {e}") from e
        return _parse_envelope(resp)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class SessionRemoteStore:
    """
    Same contract, straight against the state tables. Queries run inline on
    the event loop thread; use it for tests and single-process setups.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    async def load_state(
        self, tenant_id: str, workspace_id: str, actor_email: Optional[str]
    ) -> RemoteResult:
        row = crud.get_state(self.db, location_id=tenant_id, workspace_id=workspace_id)
        role = crud.get_role(
            self.db, location_id=tenant_id, workspace_id=workspace_id, user_email=actor_email
        )
        return RemoteResult(dict(row.state_json) if row else None, role)

    async def save_state(
        self,
        tenant_id: str,
        workspace_id: str,
        actor_email: Optional[str],
        state: Dict[str, Any],
    ) -> RemoteResult:
        row = crud.upsert_state(
            self.db, location_id=tenant_id, workspace_id=workspace_id, state=state
        )
        role = crud.get_role(
            self.db, location_id=tenant_id, workspace_id=workspace_id, user_email=actor_email
        )
        return RemoteResult(dict(row.state_json), role)
