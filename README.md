# raycube

raycube reads a `.cub` scene file and shows a first-person, textured view of
a grid maze in a 1080×720 window, drawn with pygame.

## Installing

    pip install .

To run the tests as well:

    pip install ".[test]"
    pytest

## Running

    raycube path/to/level.cub

The same entry point can be started with `python -m raycube.app level.cub`.

The command takes exactly one argument, a file whose name ends in `.cub`.
Exit status:

| Status | When                                                        |
|--------|-------------------------------------------------------------|
| 0      | the window was closed                                       |
| 1      | the scene or a texture was rejected, or Esc was pressed     |
| 2      | not exactly one argument was given                          |

On an error, `ERROR` and a message are printed to standard error.

### Controls

| Key          | Action              |
|--------------|---------------------|
| W / S        | walk forward / back |
| A / D        | strafe              |
| Left / Right | turn                |
| Esc          | quit                |

## The `.cub` format

    NO ./textures/north.xpm
    SO ./textures/south.xpm
    WE ./textures/west.xpm
    EA ./textures/east.xpm
    F 220,100,0
    C 225,30,0

    111111
    100101
    1010N1
    111111

- `NO`, `SO`, `WE` and `EA` name the XPM texture of each wall face; `F` and
  `C` give the floor and ceiling colour as `R,G,B`. Each of the six must
  appear exactly once, before the map. Blank lines between them are ignored.
- Texture paths have the characters of their identifier, spaces and line
  endings stripped from both ends.
- Each colour part is 0–255, digits only, at most three digits. The last
  character of a colour line is taken to be its line ending, so a colour on
  the very last line of a file with no final newline loses its last digit.
- The map begins at the first other line starting with `N`, `W`, `E`, `S`,
  `1`, `0` or a space, and runs to the end of the file. It may hold only
  `0` (floor), `1` (wall), spaces and at most one of `N`, `S`, `E`, `W` (the
  start and facing). Rows are padded with spaces to the widest row.
- Walls must close the map: its edges hold only walls or spaces, and a space
  may touch only walls or other spaces. The map may not contain empty lines.

## Using it as a library

```python
from raycube.cubfile import load_scene
from raycube.player import Player
from raycube.raycast import cast_all_rays, compute_wall_geometry
from raycube.render import render_frame
from raycube.app import load_textures

scene = load_scene("level.cub")          # raises MapError if rejected
player = Player.from_start(scene.player)
rays = [
    compute_wall_geometry(ray, player.angle)
    for ray in cast_all_rays(scene.grid, player.x, player.y, player.angle)
]
frame = render_frame(rays, load_textures(scene),
                     scene.floor_color, scene.ceiling_color)
# frame is a (720, 1080) numpy array of 0xRRGGBB values
```

Modules:

- `raycube.cubfile`: `load_scene`, `read_scene`, `parse_color`,
  `validate_map`, `pad_map`, `find_player`, `check_extension`; the `Scene`
  and `PlayerStart` records and `MapError`.
- `raycube.raycast`: `cast_ray`, `cast_all_rays`, `compute_wall_geometry`,
  `choose_texture`, `is_wall`, `normalize_angle`, `distance_between_points`
  and the `Ray` record.
- `raycube.player`: `Player` (`from_start`, `press`, `release`, `update`)
  and the `Key` symbols it reacts to.
- `raycube.xpm`: `parse_xpm` and `load_xpm` decode XPM images into a
  `Texture`; `strip_comments`, `color_from_text`, `XpmError`.
- `raycube.colornames`: `lookup_color` resolves X11 colour names.
- `raycube.render`: `render_frame` and `texture_color`.
- `raycube.app`: `Game`, `load_textures` and the `main` command.

## Limits

- Textures must be XPM files; only the `c` colour key is read, with
  `#RRGGBB` values or colour names. Other image formats are not loaded.
- There is no minimap, no sound, no sprites or doors, and no saving: the
  window shows the walls, floor and ceiling of one scene.