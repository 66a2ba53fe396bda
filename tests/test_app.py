import numpy as np
import pytest

from raycube.app import Game, load_textures, main
from raycube.cubfile import Scene, read_scene
from raycube.player import MOVE_SPEED, ROTATION_SPEED, Key
from raycube.raycast import WIN_HEIGHT, WIN_WIDTH, normalize_angle
from raycube.xpm import Texture, XpmError

WALL = 0x123456

MAP_ROWS = ["111111\n", "100001\n", "10N001\n", "100001\n", "111111\n"]


def _xpm(color_hex):
    return (
        "/* XPM */\nstatic char *img[] = {\n"
        '"2 2 1 1",\n'
        f'"a c #{color_hex}",\n'
        '"aa",\n"aa"\n};\n'
    )


def _scene(paths=("n.xpm", "s.xpm", "w.xpm", "e.xpm")):
    north, south, west, east = paths
    lines = [
        f"NO {north}\n",
        f"SO {south}\n",
        f"WE {west}\n",
        f"EA {east}\n",
        "F 220,100,0\n",
        "C 225,30,0\n",
    ] + MAP_ROWS
    return read_scene(lines)


def _textures():
    pixels = np.full((64, 64), WALL, dtype=np.uint32)
    return [Texture(64, 64, pixels) for _ in range(4)]


def test_load_textures_order(tmp_path):
    names = {"north": "FF0000", "south": "00FF00", "west": "0000FF", "east": "FFFF00"}
    paths = {}
    for name, hexval in names.items():
        path = tmp_path / f"{name}.xpm"
        path.write_text(_xpm(hexval))
        paths[name] = str(path)
    scene = _scene((paths["north"], paths["south"], paths["west"], paths["east"]))
    textures = load_textures(scene)
    assert [int(t.pixels[0, 0]) for t in textures] == [
        int(names["north"], 16),
        int(names["west"], 16),
        int(names["east"], 16),
        int(names["south"], 16),
    ]


def test_load_textures_missing_path_raises():
    scene = Scene(
        north=None,
        south="s.xpm",
        west="w.xpm",
        east="e.xpm",
        floor_color=0,
        ceiling_color=0,
        grid=("1",),
        player=None,
    )
    with pytest.raises(XpmError):
        load_textures(scene)


def test_load_textures_unreadable_file_raises(tmp_path):
    missing = str(tmp_path / "nothing.xpm")
    with pytest.raises(XpmError):
        load_textures(_scene((missing, missing, missing, missing)))


def test_frame_shape_and_colors():
    scene = _scene()
    game = Game(scene, _textures())
    frame = game.frame()
    assert frame.shape == (WIN_HEIGHT, WIN_WIDTH)
    middle = WIN_WIDTH // 2
    assert int(frame[0, middle]) == scene.ceiling_color
    assert int(frame[WIN_HEIGHT - 1, middle]) == scene.floor_color
    assert int(frame[WIN_HEIGHT // 2, middle]) == WALL


def test_walk_forward_then_stop():
    game = Game(_scene(), _textures())
    start_y = game.player.y
    assert game.handle_key_down(Key.W) is True
    game.frame()
    moved_y = game.player.y
    assert moved_y == pytest.approx(start_y + MOVE_SPEED, abs=1e-3)
    game.handle_key_up(Key.W)
    game.frame()
    assert game.player.y == moved_y


def test_turn_right():
    game = Game(_scene(), _textures())
    start = game.player.angle
    game.handle_key_down(Key.RIGHT)
    game.frame()
    assert game.player.angle == pytest.approx(normalize_angle(start + ROTATION_SPEED))


def test_escape_stops_game():
    game = Game(_scene(), _textures())
    assert game.handle_key_down(Key.ESCAPE) is False
    assert game.running is False
    assert game.exit_code == 1


def test_main_wrong_argument_count(capsys):
    assert main([]) == 2
    assert "ERROR" in capsys.readouterr().err


def test_main_bad_extension(capsys):
    assert main(["scene.txt"]) == 1
    assert "Not the same '.cub'" in capsys.readouterr().err


def test_main_missing_textures(tmp_path, capsys):
    missing = str(tmp_path / "absent.xpm")
    lines = [
        f"NO {missing}\n",
        f"SO {missing}\n",
        f"WE {missing}\n",
        f"EA {missing}\n",
        "F 220,100,0\n",
        "C 225,30,0\n",
    ] + MAP_ROWS
    path = tmp_path / "room.cub"
    path.write_text("".join(lines))
    assert main([str(path)]) == 1
    assert "cannot open this image" in capsys.readouterr().err