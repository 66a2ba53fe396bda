"""Loading wall textures from XPM images.

Only what the game needs is supported: a header of width, height, colour
count and characters per pixel, colour lines using the ``c`` key with either
``#RRGGBB`` values or colour names, and the pixel rows.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from .colornames import lookup_color

TRANSPARENT = 0xFF000000
"""Pixel value stored for the colour ``None``."""

_NAME_LIMIT = 63
_WORD_SPLIT = re.compile(r"[ \t]+")
_DECIMAL = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_HEX = re.compile(r"[ \t\n\v\f\r]*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")


class XpmError(Exception):
    """Raised when an XPM image cannot be read."""


@dataclass(frozen=True, eq=False)
class Texture:
    """A decoded image: ``pixels`` is a ``(height, width)`` array of uint32."""

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.shape != (self.height, self.width):
            raise ValueError(
                f"pixels have shape {self.pixels.shape}, "
                f"expected {(self.height, self.width)}"
            )


def _find_unquoted(text: str, needle: str) -> int:
    quoted = False
    for pos, char in enumerate(text):
        if char == '"':
            quoted = not quoted
        elif not quoted and text.startswith(needle, pos):
            return pos
    return -1


def _blank(text: str, begin: int, stop: int) -> str:
    stop = min(stop, len(text))
    return text[:begin] + " " * (stop - begin) + text[stop:]


def strip_comments(text: str) -> str:
    """Blank out C comments outside quoted strings, keeping the text length.

    Block comments go first, then line comments together with their newline.
    """
    while (begin := _find_unquoted(text, "/*")) != -1:
        end = text.find("*/", begin + 2)
        text = _blank(text, begin, end + 2 if end != -1 else begin + 3)
    while (begin := _find_unquoted(text, "//")) != -1:
        end = text.find("\n", begin + 2)
        text = _blank(text, begin, end + 1 if end != -1 else begin + 2)
    return text


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


def color_from_text(name: str, extra: Optional[str] = None) -> int:
    """Turn a colour value of an XPM colour line into ``0xRRGGBB``.

    ``#`` starts a hexadecimal value. Otherwise ``name``, joined with
    ``extra`` by a space when given, is looked up as a colour name; unknown
    names give 0 and ``none`` gives -1.
    """
    if name.startswith("#"):
        match = _HEX.match(name, 1)
        sign, digits = match.group(1), match.group(2)
        value = int(digits, 16) if digits else 0
        return _to_int32(-value if sign == "-" else value)
    if extra is not None:
        name = f"{name} {extra}"[:_NAME_LIMIT]
    try:
        return lookup_color(name)
    except KeyError:
        return 0


def _atoi(word: str) -> int:
    match = _DECIMAL.match(word)
    return int(match.group(1)) if match else 0


def _words(line: str) -> list[str]:
    return [word for word in _WORD_SPLIT.split(line) if word]


def _quoted_strings(text: str) -> Iterator[str]:
    pos = 0
    while True:
        opening = text.find('"', pos)
        if opening == -1:
            return
        closing = text.find('"', opening + 1)
        if closing == -1:
            return
        yield text[opening + 1 : closing]
        pos = closing + 1


def _next_line(lines: Iterator[str], what: str) -> str:
    line = next(lines, None)
    if line is None:
        raise XpmError(f"missing {what}")
    return line


def _pixel_value(color: int) -> int:
    return TRANSPARENT if color == -1 else color & 0xFFFFFFFF


def parse_xpm(text: str) -> Texture:
    """Decode the XPM image held in ``text``."""
    lines = _quoted_strings(strip_comments(text))
    header = _words(_next_line(lines, "XPM header"))
    if len(header) < 4:
        raise XpmError("XPM header needs width, height, colours and cpp")
    width, height, ncolors, cpp = (_atoi(word) for word in header[:4])
    if min(width, height, ncolors, cpp) <= 0:
        raise XpmError(f"invalid XPM header {header[:4]!r}")

    keep_last = cpp <= 2
    palette: dict[str, int] = {}
    for _ in range(ncolors):
        line = _next_line(lines, "colour definition")
        words = _words(line[cpp:])
        if "c" not in words:
            raise XpmError(f"colour line {line!r} has no 'c' key")
        index = words.index("c") + 1
        if index >= len(words):
            raise XpmError(f"colour line {line!r} has no colour value")
        extra = words[index + 1] if index + 1 < len(words) else None
        color = color_from_text(words[index], extra)
        key = line[:cpp]
        if keep_last or key not in palette:
            palette[key] = color

    pixels = np.zeros((height, width), dtype=np.uint32)
    for y in range(height):
        line = _next_line(lines, "pixel row")
        if len(line) < width * cpp:
            raise XpmError(f"pixel row {y} is shorter than {width} pixels")
        keys = (line[start : start + cpp] for start in range(0, width * cpp, cpp))
        pixels[y] = [_pixel_value(palette.get(key, 0)) for key in keys]
    return Texture(width=width, height=height, pixels=pixels)


def load_xpm(path) -> Texture:
    """Read and decode the XPM file at ``path``."""
    try:
        with open(os.fspath(path), encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise XpmError(f"cannot open this image: {path}") from exc
    return parse_xpm(text)