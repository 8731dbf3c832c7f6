from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Optional, Set

from ..config import FovSettings
from ..errors import OutOfBoundsError
from ..map.geometry import Point
from ..map.grid import Grid
from .shadowcast import compute_visible

logger = logging.getLogger(__name__)


class TilePaint(str, Enum):
    VISIBLE = "visible"                  # in view right now; full brightness
    PREVIOUSLY_SEEN = "previously_seen"  # revealed earlier; drawn greyed out
    INVISIBLE = "invisible"              # never seen; not drawn


class FogOfWar:
    """
    Tracks what a viewer sees and what the level remembers.

    Responsibilities:
    - Recomputes the visible set (shadowcasting) when the viewer moves.
    - Writes the ``revealed`` flag back through ``Grid.mark_revealed``; the grid
      itself is the memory of seen tiles.
    - Answers how each tile should be painted.

    ``global_vision`` is the debug "see everything" switch: every tile paints as
    visible while it is on, without touching the revealed flags.
    """

    def __init__(self, grid: Grid, settings: Optional[FovSettings] = None) -> None:
        self.grid = grid
        self.settings = settings or FovSettings()
        self.global_vision = self.settings.global_vision
        self._visible: Set[Point] = set()
        logger.debug(
            "FogOfWar initialized: %dx%d range=%d global_vision=%s",
            grid.width,
            grid.height,
            self.settings.view_range,
            self.global_vision,
        )

    def update(self, viewer: Point, *, view_range: Optional[int] = None) -> Set[Point]:
        """Recompute visibility from ``viewer`` and reveal what it sees. Returns the visible set."""
        if not self.grid.in_bounds(viewer):
            raise OutOfBoundsError(f"viewer {viewer} out of bounds")
        use_range = self.settings.view_range if view_range is None else view_range

        self._visible = compute_visible(self.grid, viewer, use_range)
        self.grid.mark_revealed(self._visible)

        logger.debug("FogOfWar updated at %s with range %d; %d visible tiles", viewer, use_range, len(self._visible))
        return set(self._visible)

    def paint(self, p: Point) -> TilePaint:
        tile = self.grid.get_tile(p)
        if tile is None:
            raise OutOfBoundsError(f"{p} out of bounds")
        if self.global_vision or p in self._visible:
            return TilePaint.VISIBLE
        if tile.revealed:
            return TilePaint.PREVIOUSLY_SEEN
        return TilePaint.INVISIBLE

    def paint_map(self) -> Dict[Point, TilePaint]:
        return {tile.position: self.paint(tile.position) for tile in self.grid}

    def visible_tiles(self) -> Set[Point]:
        return set(self._visible)

    def toggle_global_vision(self) -> bool:
        self.global_vision = not self.global_vision
        logger.debug("Global vision %s", "enabled" if self.global_vision else "disabled")
        return self.global_vision

    def on_map_changed(self, new_grid: Grid) -> None:
        """Switch to a freshly generated level; nothing is visible until the next update."""
        self.grid = new_grid
        self._visible.clear()
        logger.debug("FogOfWar map changed to %dx%d", new_grid.width, new_grid.height)
