"""Drawing a frame from cast rays: ceiling, textured wall strip and floor."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

from .raycast import WIN_HEIGHT, WIN_WIDTH, Ray, choose_texture
from .xpm import Texture

_MASK = 0xFFFFFFFF


def texture_color(texture: Texture, x: int, y: int) -> int:
    """Read a texel, returning 0 outside the texture.

    Rows are addressed with the texture height as stride, so for square
    textures this is the plain pixel at ``(x, y)``.
    """
    width, height = texture.width, texture.height
    if x < 0 or y < 0 or x > width or y > height:
        return 0
    index = y * height + x
    if index >= width * height:
        return 0
    return int(texture.pixels.reshape(-1)[index])


def _wall_colors(ray: Ray, texture: Texture, rows: np.ndarray) -> np.ndarray:
    strip = ray.strip_height
    if math.isfinite(strip) and strip:
        top_offset = np.trunc(rows + strip / 2 - WIN_HEIGHT // 2)
        offset_y = np.trunc(top_offset * (texture.height / strip)).astype(np.int64)
    else:
        offset_y = np.zeros(len(rows), dtype=np.int64)
    x = ray.offset_x
    flat = texture.pixels.reshape(-1)
    if x < 0 or x > texture.width or flat.size == 0:
        return np.zeros(len(rows), dtype=np.uint32)
    index = offset_y * texture.height + x
    valid = (offset_y >= 0) & (offset_y <= texture.height) & (index < flat.size)
    picked = flat[np.clip(index, 0, flat.size - 1)]
    return np.where(valid, picked, 0).astype(np.uint32)


def render_frame(
    rays: Iterable[Ray],
    textures: Sequence[Texture],
    floor_color: int,
    ceiling_color: int,
) -> np.ndarray:
    """Return a ``(WIN_HEIGHT, columns)`` uint32 frame, one column per ray.

    ``textures`` is indexed as :func:`choose_texture` picks: north, west,
    east, south. Rays past the window width are not drawn.
    """
    columns = list(rays)[:WIN_WIDTH]
    frame = np.empty((WIN_HEIGHT, len(columns)), dtype=np.uint32)
    rows = np.arange(WIN_HEIGHT)
    floor = np.uint32(floor_color & _MASK)
    ceiling = np.uint32(ceiling_color & _MASK)
    for column, ray in enumerate(columns):
        wall = (rows >= ray.top) & (rows <= ray.bottom)
        above = ~wall & (rows < ray.bottom)
        strip = np.full(WIN_HEIGHT, floor, dtype=np.uint32)
        strip[above] = ceiling
        if wall.any():
            strip[wall] = _wall_colors(ray, textures[choose_texture(ray)], rows[wall])
        frame[:, column] = strip
    return frame