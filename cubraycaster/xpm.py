"""Reader for XPM (X PixMap) texture images."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .colornames import color_value

__all__ = [
    "XpmError",
    "XpmImage",
    "strip_comments",
    "quoted_strings",
    "parse_xpm_lines",
    "parse_xpm",
    "load_xpm",
]

# Pixel value stored for the transparent colour "None".
TRANSPARENT = 0xFF000000

_QUOTED = re.compile(r'"([^"]*)"')
_WORD_SEPARATORS = re.compile(r"[ \t]+")
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


class XpmError(ValueError):
    """Raised when XPM data cannot be read or decoded."""


@dataclass(frozen=True)
class XpmImage:
    """A decoded image: 32-bit pixel values stored row by row."""

    width: int
    height: int
    pixels: tuple[int, ...]

    def pixel(self, x: int, y: int) -> int:
        """Return the pixel value at column ``x`` of row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.pixels[y * self.width + x]


def _blank_comments(text: str, opener: str, closer: str, extra: int) -> str:
    """Replace comments outside double quotes with spaces of equal length.

    A comment of ``opener`` followed by text up to ``closer`` is blanked over
    ``offset + extra`` characters, where ``offset`` is the position of the
    closer after the opener, or -1 when there is none.
    """
    in_quote = False
    pos = 0
    while pos + len(opener) <= len(text):
        if text[pos] == '"':
            in_quote = not in_quote
        if not in_quote and text.startswith(opener, pos):
            body = pos + len(opener)
            found = text.find(closer, body)
            offset = found - body if found >= 0 else -1
            length = min(offset + extra, len(text) - pos)
            text = text[:pos] + " " * length + text[pos + length:]
            continue
        pos += 1
    return text


def strip_comments(text: str) -> str:
    """Blank out ``/* */`` and ``//`` comments that lie outside quoted strings.

    The result has the same length as the input.
    """
    text = _blank_comments(text, "/*", "*/", 4)
    return _blank_comments(text, "//", "\n", 3)


def quoted_strings(text: str) -> Iterator[str]:
    """Yield the contents of successive double-quoted strings in ``text``."""
    for match in _QUOTED.finditer(text):
        yield match.group(1)


def _words(line: str) -> list[str]:
    return [word for word in _WORD_SEPARATORS.split(line) if word]


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _key(chunk: str, cpp: int) -> str:
    return chunk.ljust(cpp, "\0")


def _parse_header(line: str) -> tuple[int, int, int, int]:
    words = _words(line)
    if len(words) < 4:
        raise XpmError(f"incomplete XPM header: {line!r}")
    values = tuple(_atoi(word) for word in words[:4])
    if any(value <= 0 for value in values):
        raise XpmError(f"invalid XPM header values: {line!r}")
    width, height, ncolors, cpp = values
    return width, height, ncolors, cpp


def _parse_color_line(line: str, cpp: int) -> tuple[str, int]:
    words = _words(line[cpp:])
    try:
        index = words.index("c") + 1
    except ValueError:
        raise XpmError(f"colour line without 'c' key: {line!r}") from None
    if index >= len(words):
        raise XpmError(f"colour line without a colour value: {line!r}")
    extra = words[index + 1] if index + 1 < len(words) else None
    return _key(line[:cpp], cpp), color_value(words[index], extra)


def parse_xpm_lines(lines: Iterable[str]) -> XpmImage:
    """Decode an XPM image from its strings: header, colours, then pixel rows."""
    source = iter(lines)

    def next_line(what: str) -> str:
        try:
            return next(source)
        except StopIteration:
            raise XpmError(f"XPM data ended before {what}") from None

    width, height, ncolors, cpp = _parse_header(next_line("the header"))

    # Short codes overwrite earlier definitions; longer codes keep the first.
    overwrite = cpp <= 2
    palette: dict[str, int] = {}
    for _ in range(ncolors):
        key, rgb = _parse_color_line(next_line("all colours were defined"), cpp)
        if overwrite:
            palette[key] = rgb
        else:
            palette.setdefault(key, rgb)

    pixels: list[int] = []
    for _ in range(height):
        row = next_line("all pixel rows were read")
        for x in range(width):
            start = x * cpp
            color = palette.get(_key(row[start:start + cpp], cpp), 0)
            if color == -1:
                color = TRANSPARENT
            pixels.append(color & 0xFFFFFFFF)
    return XpmImage(width, height, tuple(pixels))


def parse_xpm(text: str) -> XpmImage:
    """Decode an image from the text of an XPM file."""
    return parse_xpm_lines(quoted_strings(strip_comments(text)))


def load_xpm(path: str | Path) -> XpmImage:
    """Read and decode the XPM file at ``path``."""
    try:
        text = Path(path).read_bytes().decode("latin-1")
    except OSError as exc:
        raise XpmError(f"cannot read XPM file {path}: {exc}") from exc
    return parse_xpm(text)