"""Reading and validating ``.cub`` scene descriptions.

A scene file holds six element lines (four wall textures and the floor and
ceiling colours) followed by a map made of ``0`` (floor), ``1`` (wall),
spaces (void) and exactly one of ``N``, ``S``, ``E``, ``W`` marking where the
player starts and which way it faces.
"""

from __future__ import annotations

import os
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

PI = 3.14159

MAP_CHARS = frozenset("NSEW01 ")
PLAYER_CHARS = frozenset("NSEW")

_TEXTURE_IDS = ("NO", "SO", "EA", "WE")
_COLOR_IDS = ("C", "F")
_ELEMENT_IDS = _TEXTURE_IDS + _COLOR_IDS
_MAP_START = "NWES10 "
_MAP_COUNT_START = "NWES10"
_OPEN_SIDE = " 1"
_DIGITS = frozenset("0123456789")

_START_ANGLES = {"N": PI / 2, "E": PI, "S": 3 * PI / 2, "W": 0.0}


class MapError(Exception):
    """Raised when a scene file or its map is rejected."""


@dataclass(frozen=True)
class PlayerStart:
    """Where the player starts, in tile units, and the angle it faces."""

    x: float
    y: float
    angle: float
    direction: str


@dataclass(frozen=True)
class Scene:
    """A parsed and validated scene."""

    north: Optional[str]
    south: Optional[str]
    west: Optional[str]
    east: Optional[str]
    floor_color: int
    ceiling_color: int
    grid: tuple[str, ...]
    player: Optional[PlayerStart]

    @property
    def width(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def height(self) -> int:
        return len(self.grid)

    @property
    def texture_paths(self) -> tuple[Optional[str], ...]:
        """Texture paths in drawing order: north, west, east, south."""
        return (self.north, self.west, self.east, self.south)


def check_extension(path) -> None:
    """Reject any path whose last dotted suffix is not exactly ``.cub``."""
    text = os.fspath(path)
    dot = text.rfind(".")
    if dot < 0 or text[dot:] != ".cub":
        raise MapError("Not the same '.cub'")


def _is_component(part: str) -> bool:
    return (
        bool(part)
        and all(char in _DIGITS for char in part)
        and len(part) < 4
        and 0 <= int(part) <= 255
    )


def parse_color(line: str) -> int:
    """Parse an ``F r,g,b`` or ``C r,g,b`` line, as read with its line ending.

    The character ending the line is dropped from the last component, so a
    line lacking its newline loses its final digit.
    """
    body = line[2:]
    first, sep, rest = body.partition(",")
    if not sep:
        raise MapError(f"invalid color line {line!r}")
    second, sep, rest = rest.partition(",")
    if not sep:
        raise MapError(f"invalid color line {line!r}")
    parts = (first, second, rest[:-1])
    for part in parts:
        if not _is_component(part):
            raise MapError(f"invalid color component {part!r}")
    red, green, blue = (int(part) for part in parts)
    return (red << 16) | (green << 8) | blue


def _element_of(line: str) -> Optional[str]:
    for ident in _ELEMENT_IDS:
        if line.startswith(ident + " "):
            return ident
    return None


def _starts_with_any(line: str, chars: str) -> bool:
    return not line or line[0] in chars


def pad_map(rows: Iterable[str], width: int) -> tuple[str, ...]:
    """Turn newlines into spaces and pad every row with spaces to ``width``."""
    padded = []
    for row in rows:
        cleaned = row.replace("\n", " ")
        if len(cleaned) > width:
            raise ValueError(f"row {row!r} is wider than {width}")
        padded.append(cleaned.ljust(width))
    return tuple(padded)


def find_player(grid: Sequence[str]) -> Optional[PlayerStart]:
    """Return the start marked in the grid, the last one if several, or None."""
    found = None
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell in PLAYER_CHARS:
                found = PlayerStart(x + 0.5, y + 0.5, _START_ANGLES[cell], cell)
    return found


class _Grid:
    def __init__(self, rows: Sequence[str]) -> None:
        self.rows = rows
        self.height = len(rows)
        self.width = max((len(row) for row in rows), default=0)

    def at(self, y: int, x: int) -> str:
        if 0 <= y < self.height and 0 <= x < self.width:
            row = self.rows[y]
            return row[x] if x < len(row) else " "
        return ""

    def open(self, y: int, x: int) -> bool:
        return self.at(y, x) in (" ", "1") and self.at(y, x) != ""


def _check_characters(grid: _Grid) -> None:
    for y in range(grid.height):
        for x in range(grid.width):
            if grid.at(y, x) not in MAP_CHARS:
                raise MapError("Invalid Map8.")


def _check_border(grid: _Grid, y: int) -> None:
    for x in range(grid.width):
        cell = grid.at(y, x)
        if not grid.open(y, x):
            raise MapError("Invalid Map1.")
        if y == 0 and cell == " ":
            if not grid.open(1, x):
                raise MapError("Invalid Map2.")
        elif y == grid.height - 1 and cell == " ":
            if not grid.open(y - 1, x):
                raise MapError("Invalid Map3.")


def _check_around(grid: _Grid, y: int, x: int) -> None:
    if grid.at(y, x) != " ":
        return
    vertical = grid.open(y - 1, x) and grid.open(y + 1, x)
    if x == 0:
        if not (grid.open(y, x + 1) and vertical):
            raise MapError("Invalid Map4.")
    elif x == grid.width - 1:
        if not (grid.open(y, x - 1) and vertical):
            raise MapError("Invalid Map5.")
    elif not (grid.open(y, x - 1) and grid.open(y, x + 1) and vertical):
        raise MapError("Invalid Map6.")


def _check_middle(grid: _Grid, y: int) -> None:
    for x in range(grid.width):
        if x in (0, grid.width - 1) and not grid.open(y, x):
            raise MapError("Invalid Map7.")
        _check_around(grid, y, x)


def validate_map(grid: Sequence[str]) -> None:
    """Check that the map is closed by walls and has at most one start."""
    cells = _Grid(grid)
    _check_characters(cells)
    for y in range(cells.height):
        if y in (0, cells.height - 1):
            _check_border(cells, y)
        else:
            _check_middle(cells, y)
    if any(not row.strip(" ") for row in grid):
        raise MapError("Invalid Map9.")
    if sum(cell in PLAYER_CHARS for row in grid for cell in row) > 1:
        raise MapError("Invalid Map10.")


def read_scene(lines: Iterable[str]) -> Scene:
    """Parse and validate a scene from lines that keep their line endings."""
    counts: Counter[str] = Counter()
    textures: dict[str, str] = {}
    colors = {"C": 0, "F": 0}
    map_lines: list[str] = []
    map_count = 0
    in_map = False
    score = 0

    for line in lines:
        ident = _element_of(line)
        if ident and not map_count:
            counts[ident] += 1
        elif _starts_with_any(line, _MAP_COUNT_START) or map_count:
            map_count += 1

        if ident in _TEXTURE_IDS and not in_map:
            textures[ident] = line.strip(ident + " \n\r")
        elif ident in _COLOR_IDS and not in_map:
            try:
                colors[ident] = parse_color(line)
            except MapError:
                score -= 1
            else:
                score += 1
        elif _starts_with_any(line, _MAP_START) or in_map:
            in_map = True
            map_lines.append(line)

        if score < 0:
            break

    if score < 2:
        raise MapError("invalid scene information")

    rows = [line[:-1] if line.endswith("\n") else line for line in map_lines]
    width = max((len(row) for row in rows), default=0)
    grid = pad_map(rows, width)
    player = find_player(grid)
    validate_map(grid)
    if any(counts[ident] != 1 for ident in _ELEMENT_IDS):
        raise MapError("Something missing")

    return Scene(
        north=textures.get("NO"),
        south=textures.get("SO"),
        west=textures.get("WE"),
        east=textures.get("EA"),
        floor_color=colors["F"],
        ceiling_color=colors["C"],
        grid=grid,
        player=player,
    )


def load_scene(path) -> Scene:
    """Read, parse and validate the ``.cub`` file at ``path``."""
    check_extension(path)
    try:
        with open(os.fspath(path), encoding="latin-1", newline="") as handle:
            return read_scene(handle)
    except OSError as exc:
        raise MapError("cannot open this file descriptor") from exc