"""The game window: loading textures, the frame loop and the command line."""

from __future__ import annotations

import os
import sys
from typing import Optional, Sequence, Tuple

import numpy as np

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

from .cubfile import MapError, Scene, load_scene  # noqa: E402
from .player import Key, Player  # noqa: E402
from .raycast import (  # noqa: E402
    WIN_HEIGHT,
    WIN_WIDTH,
    cast_all_rays,
    compute_wall_geometry,
)
from .render import render_frame  # noqa: E402
from .xpm import Texture, XpmError, load_xpm  # noqa: E402

WIN_NAME = "Cub3d"


def load_textures(scene: Scene) -> Tuple[Texture, ...]:
    """Load the four wall textures in drawing order: north, west, east, south."""
    textures = []
    for path in scene.texture_paths:
        if path is None:
            raise XpmError("cannot open this image")
        textures.append(load_xpm(path))
    return tuple(textures)


def _to_rgb(frame: np.ndarray) -> np.ndarray:
    rgb = np.stack(
        ((frame >> 16) & 0xFF, (frame >> 8) & 0xFF, frame & 0xFF), axis=-1
    ).astype(np.uint8)
    return rgb.transpose(1, 0, 2)


def _translate_key(key: int) -> int:
    special = {
        pygame.K_LEFT: Key.LEFT,
        pygame.K_RIGHT: Key.RIGHT,
        pygame.K_ESCAPE: Key.ESCAPE,
    }
    return int(special.get(key, key))


class Game:
    """A running scene: the player, its textures and the frames drawn."""

    def __init__(self, scene: Scene, textures: Sequence[Texture]) -> None:
        self.scene = scene
        self.textures = tuple(textures)
        if scene.player is not None:
            self.player = Player.from_start(scene.player)
        else:
            self.player = Player(x=0.0, y=0.0)
        self.running = True
        self.exit_code = 0

    def handle_key_down(self, key: int) -> bool:
        """React to a pressed key; return whether the game keeps running."""
        if key == Key.ESCAPE:
            self.running = False
            self.exit_code = 1
        else:
            self.player.press(key)
        return self.running

    def handle_key_up(self, key: int) -> None:
        """React to a released key."""
        self.player.release(key)

    def frame(self) -> np.ndarray:
        """Advance the player one step and draw the view as a pixel array."""
        grid = self.scene.grid
        self.player.update(grid)
        angle = self.player.angle
        rays = [
            compute_wall_geometry(ray, angle)
            for ray in cast_all_rays(grid, self.player.x, self.player.y, angle)
        ]
        return render_frame(
            rays, self.textures, self.scene.floor_color, self.scene.ceiling_color
        )

    def run(self) -> int:
        """Open the window and play until it is closed; return the exit code."""
        pygame.init()
        try:
            screen = pygame.display.set_mode((WIN_WIDTH, WIN_HEIGHT))
            pygame.display.set_caption(WIN_NAME)
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                        self.exit_code = 0
                    elif event.type == pygame.KEYDOWN:
                        self.handle_key_down(_translate_key(event.key))
                    elif event.type == pygame.KEYUP:
                        self.handle_key_up(_translate_key(event.key))
                if not self.running:
                    break
                surface = pygame.surfarray.make_surface(_to_rgb(self.frame()))
                screen.blit(surface, (0, 0))
                pygame.display.flip()
        finally:
            pygame.quit()
        return self.exit_code


def _fail(message: str, code: int) -> int:
    print("ERROR", file=sys.stderr)
    print(message, file=sys.stderr)
    return code


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load the ``.cub`` file named on the command line and play it."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        return _fail("to much args", 2)
    try:
        scene = load_scene(args[0])
        textures = load_textures(scene)
    except (MapError, XpmError) as exc:
        return _fail(str(exc), 1)
    return Game(scene, textures).run()


if __name__ == "__main__":
    sys.exit(main())