"""Plain-text rendering of a World.

Maps each cell to a ``RenderKey`` and each key to a single glyph. Player and
exit markers are drawn over the terrain.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from delve.environment.tile_types import TILE_CLASS_RENDER_KEYS, RenderKey, TileClass

if TYPE_CHECKING:
    from delve.environment.world import World

DEFAULT_GLYPHS: dict[RenderKey, str] = {
    RenderKey.FLOOR: ".",
    RenderKey.WALL: "#",
    RenderKey.INNER_WALL: " ",
    RenderKey.PLAYER: "@",
    RenderKey.EXIT: ">",
}


def render_keys(world: World) -> list[list[RenderKey]]:
    """Render key for every cell, rows top to bottom."""
    keys = [
        [TILE_CLASS_RENDER_KEYS[TileClass(int(value))] for value in row]
        for row in world.classified()
    ]
    exit_row, exit_col = world.exit_position
    keys[exit_row][exit_col] = RenderKey.EXIT
    # The player is drawn last so it stays visible on a single-cell map.
    player_row, player_col = world.player_position
    keys[player_row][player_col] = RenderKey.PLAYER
    return keys


def render_ascii(world: World, glyphs: dict[RenderKey, str] | None = None) -> str:
    """Render the world as lines of text, one character per cell."""
    if glyphs is None:
        glyphs = DEFAULT_GLYPHS
    return "\n".join(
        "".join(glyphs[key] for key in row) for row in render_keys(world)
    )
