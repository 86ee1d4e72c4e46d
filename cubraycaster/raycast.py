"""Grid ray casting and textured column drawing into a frame buffer."""

from __future__ import annotations

import math
from array import array
from dataclasses import dataclass
from typing import Protocol, Sequence

__all__ = [
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "TEXTURE_SIZE",
    "Hit",
    "Frame",
    "cast_ray",
    "draw_column",
    "render",
]

SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
TEXTURE_SIZE = 64

_INT_MAX = 2**31 - 1
_INT_MIN = -(2**31)


class _Texture(Protocol):
    def pixel(self, x: int, y: int) -> int: ...


class _Viewer(Protocol):
    x: float
    y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float


@dataclass(frozen=True)
class Hit:
    """Result of casting one screen column's ray through the map grid."""

    found: bool
    side: int
    map_x: int
    map_y: int
    ray_dir_x: float
    ray_dir_y: float
    distance: float
    line_height: int
    draw_start: int
    draw_end: int
    wall_x: float
    wall: int


class Frame:
    """A screen-sized buffer of 32-bit pixel values stored row by row."""

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"frame size must be positive, not {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = array("I", [0]) * (width * height)

    def put(self, x: int, y: int, color: int) -> None:
        """Store ``color`` at ``(x, y)``; points outside the frame are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y * self.width + x] = color & 0xFFFFFFFF

    def get(self, x: int, y: int) -> int:
        """Return the pixel value at ``(x, y)``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        return self.pixels[y * self.width + x]


def _inverse_abs(value: float) -> float:
    return math.inf if value == 0 else abs(1 / value)


def _half(value: int) -> int:
    """Integer halving that truncates toward zero."""
    return value // 2 if value >= 0 else -((-value) // 2)


def _line_height(distance: float) -> int:
    if distance == 0:
        height = math.inf
    else:
        height = SCREEN_HEIGHT / distance
    if math.isnan(height):
        return 0
    if height >= _INT_MAX:
        return _INT_MAX
    if height <= _INT_MIN:
        return _INT_MIN
    return int(height)


def cast_ray(grid: Sequence[str], player: _Viewer, x: int) -> Hit:
    """Step the ray for screen column ``x`` cell by cell until it meets a wall.

    The walk also stops when the ray leaves the grid; ``found`` is then False.
    """
    camera_x = 2 * x / float(SCREEN_WIDTH) - 1
    ray_x = player.dir_x + player.plane_x * camera_x
    ray_y = player.dir_y + player.plane_y * camera_x
    map_x, map_y = int(player.x), int(player.y)
    delta_x, delta_y = _inverse_abs(ray_x), _inverse_abs(ray_y)

    if ray_x < 0:
        step_x, side_x = -1, (player.x - map_x) * delta_x
    else:
        step_x, side_x = 1, (map_x + 1.0 - player.x) * delta_x
    if ray_y < 0:
        step_y, side_y = -1, (player.y - map_y) * delta_y
    else:
        step_y, side_y = 1, (map_y + 1.0 - player.y) * delta_y

    found = False
    side = 0
    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        if not 0 <= map_y < len(grid):
            break
        row = grid[map_y]
        if not 0 <= map_x < len(row):
            break
        if row[map_x] == "1":
            found = True
            break

    distance = side_x - delta_x if side == 0 else side_y - delta_y
    line_height = _line_height(distance)
    draw_start = max(-_half(line_height) + SCREEN_HEIGHT // 2, 0)
    draw_end = min(_half(line_height) + SCREEN_HEIGHT // 2, SCREEN_HEIGHT)

    if side == 0:
        wall_x = player.y + distance * ray_y
        wall = 3 if map_x < player.x else 2
    else:
        wall_x = player.x + distance * ray_x
        wall = 1 if map_y < player.y else 0

    return Hit(
        found=found,
        side=side,
        map_x=map_x,
        map_y=map_y,
        ray_dir_x=ray_x,
        ray_dir_y=ray_y,
        distance=distance,
        line_height=line_height,
        draw_start=draw_start,
        draw_end=draw_end,
        wall_x=wall_x,
        wall=wall,
    )


def _texture_column(hit: Hit) -> int:
    if math.isfinite(hit.wall_x):
        fraction = hit.wall_x - math.floor(hit.wall_x)
    else:
        fraction = 0.0
    tex_x = int(fraction * TEXTURE_SIZE)
    if hit.side == 0 and hit.ray_dir_x > 0:
        tex_x = TEXTURE_SIZE - tex_x - 1
    if hit.side == 1 and hit.ray_dir_y < 0:
        tex_x = TEXTURE_SIZE - tex_x - 1
    return tex_x


def draw_column(
    frame: Frame,
    x: int,
    hit: Hit,
    textures: Sequence[_Texture],
    floor: int,
    ceiling: int,
) -> None:
    """Draw ceiling, textured wall slice and floor for screen column ``x``.

    ``textures`` is indexed by ``hit.wall``: north, south, west, east.
    """
    tex_x = _texture_column(hit)
    texture = textures[hit.wall]
    step = TEXTURE_SIZE / hit.line_height if hit.line_height else math.inf
    tex_pos = (hit.draw_start - SCREEN_HEIGHT // 2 + _half(hit.line_height)) * step
    for y in range(SCREEN_HEIGHT):
        if y < hit.draw_start:
            frame.put(x, y, ceiling)
        elif y < hit.draw_end:
            tex_y = int(tex_pos) & (TEXTURE_SIZE - 1)
            tex_pos += step
            frame.put(x, y, texture.pixel(tex_x, tex_y))
        else:
            frame.put(x, y, floor)


def render(
    frame: Frame,
    grid: Sequence[str],
    player: _Viewer,
    textures: Sequence[_Texture],
    floor: int,
    ceiling: int,
) -> list[Hit]:
    """Cast and draw every screen column; return the hit of each column."""
    hits = []
    for x in range(SCREEN_WIDTH):
        hit = cast_ray(grid, player, x)
        draw_column(frame, x, hit, textures, floor, ceiling)
        hits.append(hit)
    return hits