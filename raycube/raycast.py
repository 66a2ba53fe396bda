"""Grid ray casting: where the ray of each screen column meets a wall."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

from .cubfile import PI

WIN_WIDTH = 1080
WIN_HEIGHT = 720
TILE_SIZE = 64
FOV = 1.0471975512
NUM_RAYS = WIN_WIDTH
PI_2 = PI / 2

_NUDGE = 0.001
_LIMIT_X = WIN_WIDTH * TILE_SIZE
_LIMIT_Y = WIN_HEIGHT * TILE_SIZE

_Start = Tuple[float, float, float, float]


@dataclass(frozen=True)
class Ray:
    """One cast ray and, once computed, the wall strip it draws.

    ``hit_vertical`` is True when the hit came from the march along
    horizontal grid lines; texture choice and texture offsets key on it.
    """

    angle: float
    horizontal_x: float = 0.0
    horizontal_y: float = 0.0
    vertical_x: float = 0.0
    vertical_y: float = 0.0
    wall_hit_x: float = 0.0
    wall_hit_y: float = 0.0
    distance: float = 0.0
    hit_vertical: bool = False
    offset_x: int = 0
    projection_distance: float = 0.0
    strip_height: float = 0.0
    top: float = 0.0
    bottom: float = 0.0


def normalize_angle(angle: float) -> float:
    """Bring an angle into ``[0, 2*PI)``."""
    result = math.fmod(angle, 2 * PI)
    if result < 0:
        result += 2 * PI
    return result


def is_wall(grid: Sequence[str], x: float, y: float) -> bool:
    """Tell whether the pixel position ``(x, y)`` is blocked.

    Anything outside the map counts as a wall; a column past the end of its
    row counts as open.
    """
    height = len(grid)
    width = len(grid[0]) if grid else 0
    if x < 0 or x > width * TILE_SIZE or y < 0 or y > height * TILE_SIZE:
        return True
    grid_x = int(x / TILE_SIZE)
    grid_y = int(y / TILE_SIZE)
    if grid_y >= height:
        return True
    row = grid[grid_y]
    return grid_x < len(row) and row[grid_x] == "1"


def distance_between_points(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2)


def _horizontal_start(px: float, py: float, angle: float) -> _Start:
    tangent = math.tan(angle)
    inverse = -1 / tangent if tangent else -math.copysign(math.inf, tangent)
    if angle > PI:
        y = int(py / TILE_SIZE) * TILE_SIZE - _NUDGE
        step_y = -TILE_SIZE
    elif angle < PI:
        y = int(py / TILE_SIZE) * TILE_SIZE + TILE_SIZE
        step_y = TILE_SIZE
    else:
        # Parallel to the horizontal grid lines: they are never met.
        return math.inf, math.inf, 0.0, 0.0
    x = (py - y) * inverse + px
    return x, y, -step_y * inverse, float(step_y)


def _vertical_start(px: float, py: float, angle: float) -> _Start:
    slope = -math.tan(angle)
    if PI / 2 < angle < 3 * PI / 2:
        x = int(px / TILE_SIZE) * TILE_SIZE - _NUDGE
        step_x = -TILE_SIZE
    elif angle < PI / 2 or angle > 3 * PI / 2:
        x = int(px / TILE_SIZE) * TILE_SIZE + TILE_SIZE
        step_x = TILE_SIZE
    else:
        # Parallel to the vertical grid lines: they are never met.
        return math.inf, math.inf, 0.0, 0.0
    y = (px - x) * slope + py
    return x, y, float(step_x), -step_x * slope


def _march(grid: Sequence[str], start: _Start) -> Tuple[float, float]:
    x, y, step_x, step_y = start
    while 0 <= x <= _LIMIT_X and 0 <= y <= _LIMIT_Y:
        if is_wall(grid, x, y):
            break
        x += step_x
        y += step_y
    return x, y


def cast_ray(grid: Sequence[str], px: float, py: float, angle: float) -> Ray:
    """Cast one ray from pixel position ``(px, py)`` at ``angle``."""
    hx, hy = _march(grid, _horizontal_start(px, py, angle))
    vx, vy = _march(grid, _vertical_start(px, py, angle))
    horizontal = distance_between_points(px, py, hx, hy)
    vertical = distance_between_points(px, py, vx, vy)
    if horizontal > vertical:
        hit_x, hit_y, distance, hit_vertical = vx, vy, vertical, False
    else:
        hit_x, hit_y, distance, hit_vertical = hx, hy, horizontal, True
    return Ray(
        angle=angle,
        horizontal_x=hx,
        horizontal_y=hy,
        vertical_x=vx,
        vertical_y=vy,
        wall_hit_x=hit_x,
        wall_hit_y=hit_y,
        distance=distance,
        hit_vertical=hit_vertical,
    )


def cast_all_rays(
    grid: Sequence[str], px: float, py: float, player_angle: float
) -> List[Ray]:
    """Cast one ray per screen column across the field of view."""
    current = normalize_angle(player_angle - FOV / 2)
    rays = []
    for _ in range(NUM_RAYS):
        rays.append(cast_ray(grid, px, py, normalize_angle(current)))
        current += FOV / NUM_RAYS
    return rays


def _texture_offset(value: float) -> int:
    if not math.isfinite(value):
        return 0
    return int(math.fmod(int(value), TILE_SIZE))


def compute_wall_geometry(ray: Ray, player_angle: float) -> Ray:
    """Return the ray with its wall strip height, span and texture column."""
    corrected = ray.distance * math.cos(ray.angle - player_angle)
    projection = (WIN_WIDTH // 2) / math.tan(FOV / 2)
    strip = TILE_SIZE / corrected * projection if corrected else math.inf
    top = WIN_HEIGHT // 2 - strip / 2
    if top < 0:
        top = 0.0
    bottom = top + strip
    if bottom > WIN_HEIGHT:
        bottom = float(WIN_HEIGHT)
    hit = ray.wall_hit_x if ray.hit_vertical else ray.wall_hit_y
    return replace(
        ray,
        distance=ray.distance * math.cos(FOV / 2),
        projection_distance=projection,
        strip_height=strip,
        top=top,
        bottom=bottom,
        offset_x=_texture_offset(hit),
    )


def choose_texture(ray: Ray) -> int:
    """Index of the wall texture to draw: north, west, east or south."""
    if ray.hit_vertical:
        return 0 if 0 < ray.angle < PI else 1
    return 2 if 0.5 * PI < ray.angle < 1.5 * PI else 3