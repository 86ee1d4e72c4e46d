"""Reading ``.cub`` scene files: texture paths, floor and ceiling colours, map."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from itertools import dropwhile
from pathlib import Path
from typing import Iterator, Mapping

__all__ = [
    "MapError",
    "Scene",
    "TEXTURE_KEYS",
    "has_cub_extension",
    "parse_color",
    "pad_map",
    "check_map",
    "parse_scene",
    "read_scene",
]

# Texture slots in the order the renderer indexes them.
TEXTURE_KEYS = ("NO", "SO", "WE", "EA")

_MAP_CHARS = frozenset("10NSE W")
_OPEN_CELLS = frozenset("NSEW0")
_C_SPACES = "\t\n\v\f\r "
_LINE_END = re.compile(r"(?<=\n)")


class MapError(ValueError):
    """Raised when a scene file is malformed."""


@dataclass(frozen=True)
class Scene:
    """A parsed scene: wall texture paths, colours and the padded map grid."""

    textures: Mapping[str, str] = field(default_factory=dict)
    floor: int = 0
    ceiling: int = 0
    grid: tuple[str, ...] = ()

    @property
    def height(self) -> int:
        """Number of map rows."""
        return len(self.grid)

    @property
    def width(self) -> int:
        """Length of the longest map row."""
        return max((len(row) for row in self.grid), default=0)


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _atoi(text: str) -> int:
    """Integer prefix of ``text``; overflow gives -1 (or 0 when negative)."""
    pos = 0
    while pos < len(text) and text[pos] in _C_SPACES:
        pos += 1
    sign = 1
    if pos < len(text) and text[pos] in "+-":
        if text[pos] == "-":
            sign = -1
        pos += 1
    while pos < len(text) and text[pos] == "0":
        pos += 1
    value = 0
    while pos < len(text) and "0" <= text[pos] <= "9":
        value = _to_int32(value * 10 + ord(text[pos]) - ord("0"))
        pos += 1
        if value <= 0:
            return 0 if sign == -1 else -1
    return value * sign


def has_cub_extension(path: str | Path) -> bool:
    """True when ``path`` names a ``.cub`` file with a non-empty stem."""
    name = str(path)
    return len(name) >= 5 and name.endswith(".cub")


def parse_color(line: str) -> int:
    """Return the packed RGB value of an ``F r,g,b`` or ``C r,g,b`` line."""
    parts = [part for part in line.split(",") if part]
    if len(parts) < 3:
        raise MapError(f"colour needs three components: {line.rstrip()!r}")
    red = _atoi(parts[0][2:])
    green = _atoi(parts[1])
    blue = _atoi(parts[2])
    return _to_int32(red << 16 | green << 8 | blue)


def pad_map(rows: list[str], width: int) -> list[str]:
    """Pad each row with spaces to ``width`` after checking its characters."""
    padded = []
    for row in rows:
        bad = set(row) - _MAP_CHARS
        if bad:
            raise MapError(f"Unsupported character detected: {sorted(bad)[0]!r}")
        padded.append(row.ljust(width))
    return padded


def _row_is_closed(row: str) -> bool:
    inside = False
    for index, cell in enumerate(row):
        if not inside and cell == "1":
            inside = True
        if not inside and cell in _OPEN_CELLS:
            return False
        if inside and cell == " ":
            if row[index - 1] in _OPEN_CELLS:
                return False
            inside = False
    return True


def _column_is_closed(rows: list[str], column: int) -> bool:
    inside = False
    last = len(rows) - 1
    for index, row in enumerate(rows):
        if column >= len(row):
            break
        cell = row[column]
        if not inside and cell == "1":
            inside = True
        if not inside and cell in _OPEN_CELLS:
            return False
        if inside and cell == " ":
            above = rows[index - 1]
            if column < len(above) and above[column] in _OPEN_CELLS:
                return False
            inside = False
        if index == last and cell in _OPEN_CELLS:
            return False
    return True


def check_map(rows: list[str]) -> bool:
    """True when every open cell and the player are enclosed by walls."""
    rows = list(rows)
    if not all(_row_is_closed(row) for row in rows):
        return False
    if not rows:
        return True
    return all(_column_is_closed(rows, column) for column in range(len(rows[0])))


def _lines(text: str) -> Iterator[str]:
    return (line for line in _LINE_END.split(text) if line)


def _grid_width(rows: list[str]) -> int:
    # Width grows only to one past a longer row, then rows are filled to
    # one less than that, so later rows may stay longer than earlier ones.
    width = 0
    for row in rows:
        if width < len(row):
            width = len(row) + 1
    return max(width - 1, 0)


def parse_scene(text: str) -> Scene:
    """Parse the text of a ``.cub`` scene file."""
    lines = _lines(text)
    textures: dict[str, str] = {}
    floor: int | None = None
    ceiling: int | None = None

    for line in lines:
        if line.startswith("\n"):
            continue
        key = line[:3]
        if key in ("NO ", "SO ", "WE ", "EA "):
            textures[key[:2]] = line[3:][:-1]
        elif line.startswith("F "):
            floor = parse_color(line)
        elif line.startswith("C "):
            ceiling = parse_color(line)
        if floor is not None and ceiling is not None:
            break
    else:
        raise MapError("scene ended before both floor and ceiling colours")

    map_text = "".join(dropwhile(lambda line: line.startswith("\n"), lines))
    if not map_text:
        raise MapError("scene has no map")
    if "\n\n" in map_text:
        raise MapError("map contains an empty line")
    rows = [row for row in map_text.split("\n") if row]
    grid = pad_map(rows, _grid_width(rows))
    if not check_map(grid):
        raise MapError("Map & Player must be covered by wall(s)")
    return Scene(textures=textures, floor=floor, ceiling=ceiling, grid=tuple(grid))


def read_scene(path: str | Path) -> Scene:
    """Read and parse the ``.cub`` scene file at ``path``."""
    if not has_cub_extension(path):
        raise MapError("Wrong file format: correct file format: file.cub")
    try:
        text = Path(path).read_bytes().decode("latin-1")
    except OSError as exc:
        raise MapError(f"File Not Found :{path}") from exc
    return parse_scene(text)