"""Player placement, turning and movement on a scene's map grid."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Sequence

from .mapfile import MapError

__all__ = [
    "FOV",
    "Player",
    "Keys",
    "find_player",
    "apply_movement",
]

FOV = 0.66


def _f32(value: float) -> float:
    """Round ``value`` to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


_WALKING_SPEED = 3
_WALK = _f32(0.015)
_TURN_SPEED = _f32(0.03)
# Distance covered by one step, computed in single precision.
_STEP = _f32(_WALKING_SPEED * _WALK)
# Collision probes look this many steps ahead.
_PROBE = 10

# Start direction and camera plane for each player marker.
_FACINGS: dict[str, tuple[tuple[float, float], tuple[float, float]]] = {
    "N": ((0.0, -1.0), (FOV, 0.0)),
    "S": ((0.0, 1.0), (-FOV, 0.0)),
    "W": ((-1.0, 0.0), (0.0, -FOV)),
    "E": ((1.0, 0.0), (0.0, FOV)),
}


def _row(grid: Sequence[str], index: int) -> str | None:
    if 0 <= index < len(grid):
        return grid[index]
    return None


def _blocks(grid: Sequence[str], row_index: int, column: int) -> bool:
    """True when the cell is a wall or lies outside the grid."""
    row = _row(grid, row_index)
    if row is None or not 0 <= column < len(row):
        return True
    return row[column] == "1"


@dataclass
class Player:
    """Position, view direction and camera plane of the player."""

    x: float
    y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float

    def turn(self, left: bool) -> None:
        """Rotate direction and camera plane by one turn step."""
        angle = -_TURN_SPEED if left else _TURN_SPEED
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        self.dir_x, self.dir_y = (
            self.dir_x * cos_a - self.dir_y * sin_a,
            self.dir_x * sin_a + self.dir_y * cos_a,
        )
        self.plane_x, self.plane_y = (
            self.plane_x * cos_a - self.plane_y * sin_a,
            self.plane_x * sin_a + self.plane_y * cos_a,
        )

    def step(self, grid: Sequence[str], dx: float, dy: float, sign: int) -> bool:
        """Move one step along ``(dx, dy)`` forwards (+1) or backwards (-1).

        The step is refused when the cell some distance ahead is a wall or off
        the map. Returns True when the player moved.
        """
        if sign not in (1, -1):
            raise ValueError(f"sign must be +1 or -1, not {sign!r}")
        reach_x = sign * dx * _WALKING_SPEED * _WALK
        reach_y = sign * dy * _WALKING_SPEED * _WALK
        if _row(grid, int(self.y + reach_y)) is None:
            return False
        if _blocks(grid, int(self.y + reach_y * _PROBE), int(self.x + reach_x * _PROBE)):
            return False
        self.x += sign * dx * _STEP
        self.y += sign * dy * _STEP
        return True


@dataclass
class Keys:
    """Which movement and turning keys are currently held."""

    w: bool = False
    a: bool = False
    s: bool = False
    d: bool = False
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    def active(self) -> bool:
        """True when any key that moves or turns the player is held."""
        return self.w or self.s or self.a or self.d or self.left or self.right


def find_player(grid: Sequence[str]) -> Player:
    """Locate the single N, S, E or W marker and build the player from it."""
    found: list[Player] = []
    for row_index, row in enumerate(grid):
        for column, cell in enumerate(row):
            facing = _FACINGS.get(cell)
            if facing is None:
                continue
            (dir_x, dir_y), (plane_x, plane_y) = facing
            found.append(
                Player(column + 0.5, row_index + 0.5, dir_x, dir_y, plane_x, plane_y)
            )
    if len(found) != 1:
        raise MapError(f"expected exactly one player, found {len(found)}")
    return found[0]


def apply_movement(player: Player, keys: Keys, grid: Sequence[str]) -> bool:
    """Apply one frame of held keys to ``player``; True if any key is active."""
    if keys.w:
        player.step(grid, player.dir_x, player.dir_y, 1)
    if keys.s:
        player.step(grid, player.dir_x, player.dir_y, -1)
    if keys.d:
        player.step(grid, player.plane_x, player.plane_y, 1)
    if keys.a:
        player.step(grid, player.plane_x, player.plane_y, -1)
    if keys.left or keys.right:
        player.turn(left=keys.left)
    return keys.active()