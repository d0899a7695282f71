# File: /taskgrid/engine/sync.py | Version: 1.3 | Title: Sync Controller (debounced push, interval pull)
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import ValidationError

from taskgrid.core.config import settings
from taskgrid.core.errors import MalformedResponse, RemoteError
from taskgrid.engine.record_store import utcnow
from taskgrid.engine.remote import RemoteStore
from taskgrid.engine.scheduling import ScheduledTask
from taskgrid.engine.signals import Signal
from taskgrid.engine.workspace import Workspace
from taskgrid.schemas.state import WorkspaceDocument

log = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    idle = "idle"
    syncing = "syncing"
    ok = "ok"
    error = "error"


def parse_document(state: Optional[Dict[str, Any]]) -> Optional[WorkspaceDocument]:
    if state is None:
        return None
    try:
        return WorkspaceDocument.model_validate(state)
    except ValidationError as e:
        raise MalformedResponse(
            f"Workspace document failed validation ({e.error_count()} errors)",
            payload=sorted(state.keys()),
        ) from e


class SyncController:
    """
    Keeps a Workspace eventually consistent with the remote document.

    - pull: on workspace selection and every `pull_interval` seconds; a document
      with a task list replaces local state wholesale.
    - push: `push_delay` seconds after the last local change; sends the whole
      snapshot. Records echoed back replace the local ones.

    There is no version check between the two: the last write wins, and
    responses apply in whatever order they arrive.
    """

    def __init__(
        self,
        workspace: Workspace,
        remote: RemoteStore,
        *,
        push_delay: Optional[float] = None,
        pull_interval: Optional[float] = None,
    ) -> None:
        self.workspace = workspace
        self.remote = remote
        self.status = SyncStatus.idle
        self.last_error: Optional[str] = None
        self.last_synced_at: Optional[datetime] = None
        self.status_changed: Signal[SyncStatus] = Signal("sync_status")

        self._push_timer = ScheduledTask(
            settings.PUSH_DEBOUNCE_SECONDS if push_delay is None else push_delay,
            self.push_state,
            name="push",
        )
        self._pull_timer = ScheduledTask(
            settings.PULL_INTERVAL_SECONDS if pull_interval is None else pull_interval,
            self.load_remote,
            repeat=True,
            name="pull",
        )
        self._unsubscribe = workspace.changed.subscribe(self._on_change)

    # ---- Status ----

    def _set_status(self, status: SyncStatus, error: Optional[str] = None) -> None:
        if status is SyncStatus.ok:
            self.last_synced_at = utcnow()
        self.last_error = error if status is SyncStatus.error else None
        if status is self.status:
            return
        self.status = status
        self.status_changed.emit(status)

    @property
    def push_pending(self) -> bool:
        return self._push_timer.pending

    @property
    def polling(self) -> bool:
        return self._pull_timer.pending

    def _ready(self) -> bool:
        return bool(self.workspace.tenant_id and self.workspace.workspace_id)

    # ---- Pull ----

    async def load_remote(self) -> bool:
        ws = self.workspace
        if not self._ready():
            return False
        workspace_id = ws.workspace_id
        self._set_status(SyncStatus.syncing)
        try:
            result = await self.remote.load_state(ws.tenant_id, workspace_id, ws.actor_email)
            doc = parse_document(result.state)
        except RemoteError as e:
            log.warning("Pull failed for workspace %s: %s", workspace_id, e)
            self._set_status(SyncStatus.error, str(e))
            return False
        except Exception as e:
            log.exception("Unexpected pull failure for workspace %s", workspace_id)
            self._set_status(SyncStatus.error, str(e))
            return False

        if ws.workspace_id != workspace_id:
            log.info("Dropping pull result for %s (workspace switched)", workspace_id)
            return False
        if result.role:
            ws.role = result.role
        ws.apply_document(doc)
        self._set_status(SyncStatus.ok)
        return True

    # ---- Push ----

    def _on_change(self, reason: str) -> None:
        self.schedule_push()

    def schedule_push(self) -> None:
        """Restart the debounce window; bursts of edits collapse into one write."""
        try:
            self._push_timer.start()
        except RuntimeError:
            log.warning("No running event loop; push not scheduled")

    async def push_state(self) -> bool:
        ws = self.workspace
        if not self._ready():
            return False
        workspace_id = ws.workspace_id
        self._set_status(SyncStatus.syncing)
        snapshot = ws.snapshot()
        try:
            result = await self.remote.save_state(
                ws.tenant_id, workspace_id, ws.actor_email, snapshot
            )
            doc = parse_document(result.state)
        except RemoteError as e:
            log.warning("Push failed for workspace %s: %s", workspace_id, e)
            self._set_status(SyncStatus.error, str(e))
            return False
        except Exception as e:
            log.exception("Unexpected push failure for workspace %s", workspace_id)
            self._set_status(SyncStatus.error, str(e))
            return False

        if ws.workspace_id != workspace_id:
            return False
        if result.role:
            ws.role = result.role
        if doc is not None:
            ws.apply_echo(doc)
        self._set_status(SyncStatus.ok)
        return True

    async def flush(self) -> bool:
        """Push now if a debounced push is waiting."""
        if not self._push_timer.pending:
            return False
        self._push_timer.cancel()
        return await self.push_state()

    # ---- Lifecycle ----

    def start_polling(self) -> None:
        if self._ready():
            self._pull_timer.start()

    def stop_polling(self) -> None:
        self._pull_timer.cancel()

    async def select_workspace(self, workspace_id: Optional[str]) -> bool:
        await self.flush()
        self.stop_polling()
        self.workspace.select_workspace(workspace_id)
        self._set_status(SyncStatus.idle)
        if not workspace_id:
            return False
        loaded = await self.load_remote()
        self.start_polling()
        return loaded

    async def close(self) -> None:
        self._push_timer.cancel()
        self._pull_timer.cancel()
        await asyncio.gather(self._push_timer.drain(), self._pull_timer.drain())
        self._unsubscribe()
