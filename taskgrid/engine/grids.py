# File: /taskgrid/engine/grids.py | Version: 1.1 | Title: Saved grids (filter/group presets) + active filter set
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from taskgrid.core.errors import MutationRejected
from taskgrid.schemas._base import short_id
from taskgrid.schemas.filters import FilterSet, Grid

log = logging.getLogger(__name__)

DEFAULT_GRID_NAME = "Main Grid"


class GridBook:
    """
    Grids of one workspace, the current-grid pointer, the active filter set,
    and the per-workspace filter map persisted alongside them.

    The active filter set is always a copy; editing it goes through
    `update_filters`, which mirrors it into the current grid and the map.
    """

    def __init__(
        self,
        grids: Optional[Iterable[Grid]] = None,
        current_grid_id: Optional[str] = None,
        workspace_filters: Optional[Dict[str, FilterSet]] = None,
    ) -> None:
        self.grids: List[Grid] = list(grids or [])
        self.current_grid_id = current_grid_id
        self.workspace_filters: Dict[str, FilterSet] = dict(workspace_filters or {})
        self.filters = FilterSet()

    # ---- Queries ----

    def get(self, grid_id: Optional[str]) -> Optional[Grid]:
        for g in self.grids:
            if g.id == grid_id:
                return g
        return None

    @property
    def current(self) -> Optional[Grid]:
        return self.get(self.current_grid_id)

    def saved_filters(self, workspace_id: Optional[str]) -> FilterSet:
        saved = self.workspace_filters.get(workspace_id or "")
        return saved.model_copy(deep=True) if saved else FilterSet()

    # ---- Lifecycle ----

    def reset(self, workspace_id: Optional[str]) -> None:
        """Workspace switch: drop grids, restore that workspace's saved filters."""
        self.grids = []
        self.current_grid_id = None
        self.filters = self.saved_filters(workspace_id)

    def install(
        self, grids: Optional[Iterable[Grid]], current_grid_id: Optional[str]
    ) -> None:
        self.grids = list(grids or [])
        self.current_grid_id = current_grid_id

    def ensure_default_grid(self) -> Grid:
        if not self.grids:
            base = Grid(id=short_id("grid", 4), name=DEFAULT_GRID_NAME, filters=FilterSet())
            self.grids.append(base)
            self.current_grid_id = base.id
        if self.current is None:
            self.current_grid_id = self.grids[0].id
        active = self.current
        self.filters = active.filters.model_copy(deep=True)
        return active

    # ---- Mutations ----

    def _mirror(self, workspace_id: Optional[str]) -> None:
        if workspace_id:
            self.workspace_filters[workspace_id] = self.filters.model_copy(deep=True)
        grid = self.current
        if grid is not None:
            grid.filters = self.filters.model_copy(deep=True)

    def update_filters(self, workspace_id: Optional[str], **partial: Any) -> FilterSet:
        data = self.filters.model_dump()
        data.update(partial)
        self.filters = FilterSet.model_validate(data)
        self._mirror(workspace_id)
        return self.filters

    def select(self, grid_id: str, workspace_id: Optional[str]) -> Optional[Grid]:
        grid = self.get(grid_id)
        if grid is None:
            return None
        self.current_grid_id = grid.id
        self.filters = grid.filters.model_copy(deep=True)
        if workspace_id:
            self.workspace_filters[workspace_id] = self.filters.model_copy(deep=True)
        return grid

    def save(
        self,
        name: str,
        filter_set: Optional[FilterSet],
        workspace_id: Optional[str],
    ) -> Grid:
        label = (name or "").strip()
        if not label:
            raise MutationRejected("Grid name required", field="name")
        source = filter_set if filter_set is not None else self.filters
        grid = Grid(id=short_id("grid", 4), name=label, filters=source.model_copy(deep=True))
        self.grids.append(grid)
        self.select(grid.id, workspace_id)
        log.info("Grid saved: %s (%s)", grid.id, label)
        return grid

    def rename(self, grid_id: str, name: str) -> Optional[Grid]:
        label = (name or "").strip()
        if not label:
            raise MutationRejected("Grid name required", field="name")
        grid = self.get(grid_id)
        if grid is None or grid.name == label:
            return None
        grid.name = label
        return grid

    def delete(self, grid_id: str, workspace_id: Optional[str]) -> bool:
        grid = self.get(grid_id)
        if grid is None:
            return False
        if len(self.grids) == 1:
            raise MutationRejected("A workspace needs at least one grid", field="grid")
        self.grids.remove(grid)
        if self.current_grid_id == grid_id:
            self.select(self.grids[0].id, workspace_id)
        return True
