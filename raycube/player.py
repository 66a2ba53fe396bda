"""The player: its position, heading and response to the keyboard."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

from .cubfile import PI, PlayerStart
from .raycast import PI_2, TILE_SIZE, is_wall, normalize_angle

MOVE_SPEED = 4.5
ROTATION_SPEED = 3.5 * (PI / 180)

_PROBES = ((0, 0), (2, 2), (-2, -2), (-2, 2), (2, -2))


class Key(IntEnum):
    """Key symbols the game reacts to."""

    A = 97
    D = 100
    S = 115
    W = 119
    LEFT = 65361
    RIGHT = 65363
    ESCAPE = 65307


_PRESSED = {
    Key.W: ("walk_direction", 1),
    Key.S: ("walk_direction", -1),
    Key.D: ("strafe_direction", 1),
    Key.A: ("strafe_direction", -1),
    Key.RIGHT: ("turn_direction", 1),
    Key.LEFT: ("turn_direction", -1),
}

_RELEASED = {
    Key.W: "walk_direction",
    Key.S: "walk_direction",
    Key.RIGHT: "turn_direction",
    Key.LEFT: "turn_direction",
    Key.D: "strafe_direction",
    Key.A: "strafe_direction",
}


@dataclass
class Player:
    """Player state in pixel coordinates."""

    x: float
    y: float
    angle: float = 0.0
    walk_direction: int = 0
    turn_direction: int = 0
    strafe_direction: int = 0
    move_speed: float = MOVE_SPEED
    rotation_speed: float = ROTATION_SPEED

    @classmethod
    def from_start(cls, start: PlayerStart) -> "Player":
        """Place a player at a start given in tile units."""
        return cls(x=start.x * TILE_SIZE, y=start.y * TILE_SIZE, angle=start.angle)

    def press(self, key: int) -> None:
        """Start moving or turning for a pressed key; other keys are ignored."""
        action = _PRESSED.get(key)
        if action is not None:
            name, value = action
            setattr(self, name, value)

    def release(self, key: int) -> None:
        """Stop the motion a released key controls."""
        name = _RELEASED.get(key)
        if name is not None:
            setattr(self, name, 0)

    def update(self, grid: Sequence[str]) -> None:
        """Advance one frame: turn, then move unless the new spot is blocked."""
        move_step = self.walk_direction * self.move_speed
        self.angle = normalize_angle(
            self.angle + self.turn_direction * self.rotation_speed
        )
        side_step = self.strafe_direction * self.move_speed
        next_x = self.x + math.cos(self.angle) * move_step
        next_y = self.y + math.sin(self.angle) * move_step
        next_x += math.cos(self.angle + PI_2) * side_step
        next_y += math.sin(self.angle + PI_2) * side_step
        if not any(is_wall(grid, next_x + dx, next_y + dy) for dx, dy in _PROBES):
            self.x = next_x
            self.y = next_y