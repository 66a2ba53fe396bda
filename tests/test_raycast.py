import math

import pytest

from raycube.cubfile import PI
from raycube.raycast import (
    FOV,
    NUM_RAYS,
    TILE_SIZE,
    WIN_HEIGHT,
    Ray,
    cast_all_rays,
    cast_ray,
    choose_texture,
    compute_wall_geometry,
    distance_between_points,
    is_wall,
    normalize_angle,
)

ROOM = ("11111", "10001", "10001", "10001", "11111")
CENTER = 2.5 * TILE_SIZE


@pytest.mark.parametrize("angle", [-7.0, -0.5, 0.0, 1.0, 6.5, 20.0])
def test_normalize_angle_in_range(angle):
    result = normalize_angle(angle)
    assert 0 <= result < 2 * PI


def test_normalize_angle_is_periodic():
    assert normalize_angle(1.0 + 2 * PI) == pytest.approx(normalize_angle(1.0))
    assert normalize_angle(1.0 - 2 * PI) == pytest.approx(1.0)


def test_normalize_angle_keeps_inner_values():
    assert normalize_angle(1.0) == 1.0


def test_is_wall_inside_and_on_walls():
    assert is_wall(ROOM, CENTER, CENTER) is False
    assert is_wall(ROOM, TILE_SIZE / 2, TILE_SIZE / 2) is True


def test_is_wall_outside_map():
    assert is_wall(ROOM, -1, CENTER) is True
    assert is_wall(ROOM, CENTER, -1) is True
    assert is_wall(ROOM, CENTER, 5 * TILE_SIZE + 1) is True
    assert is_wall(ROOM, CENTER, 5 * TILE_SIZE) is True


def test_is_wall_column_past_row_is_open():
    assert is_wall(ROOM, 5 * TILE_SIZE, CENTER) is False


def test_distance_between_points():
    assert distance_between_points(0, 0, 3, 4) == 5
    assert distance_between_points(2.0, 7.0, 2.0, 7.0) == 0


@pytest.mark.parametrize("angle", [0.3, 1.2, 2.0, 3.5, 4.4, 5.9])
def test_cast_ray_hits_a_wall(angle):
    ray = cast_ray(ROOM, CENTER, CENTER, angle)
    assert math.isfinite(ray.distance)
    assert is_wall(ROOM, ray.wall_hit_x, ray.wall_hit_y)
    assert ray.distance == pytest.approx(
        distance_between_points(CENTER, CENTER, ray.wall_hit_x, ray.wall_hit_y)
    )


@pytest.mark.parametrize("angle", [0.3, 2.0, 4.4])
def test_cast_ray_picks_nearest_intercept(angle):
    ray = cast_ray(ROOM, CENTER, CENTER, angle)
    horizontal = distance_between_points(
        CENTER, CENTER, ray.horizontal_x, ray.horizontal_y
    )
    vertical = distance_between_points(CENTER, CENTER, ray.vertical_x, ray.vertical_y)
    assert ray.distance == pytest.approx(min(horizontal, vertical))


def test_cast_ray_straight_along_x_axis():
    ray = cast_ray(ROOM, CENTER, CENTER, 0.0)
    assert ray.hit_vertical is False
    assert ray.wall_hit_y == CENTER
    assert ray.wall_hit_x > CENTER
    assert is_wall(ROOM, ray.wall_hit_x, ray.wall_hit_y)


def test_cast_all_rays_spans_field_of_view():
    rays = cast_all_rays(ROOM, CENTER, CENTER, 1.0)
    assert len(rays) == NUM_RAYS
    assert rays[0].angle == pytest.approx(normalize_angle(1.0 - FOV / 2))
    assert all(0 <= ray.angle < 2 * PI for ray in rays)
    assert all(is_wall(ROOM, r.wall_hit_x, r.wall_hit_y) for r in rays)


def test_wall_strip_shrinks_with_distance():
    near = compute_wall_geometry(Ray(angle=1.0, distance=100.0), 1.0)
    far = compute_wall_geometry(Ray(angle=1.0, distance=200.0), 1.0)
    assert near.strip_height == pytest.approx(far.strip_height * 2)
    assert far.top + far.strip_height / 2 == pytest.approx(WIN_HEIGHT / 2)
    assert far.bottom - far.top == pytest.approx(far.strip_height)


def test_wall_strip_clamped_to_screen():
    close = compute_wall_geometry(Ray(angle=1.0, distance=1.0), 1.0)
    assert close.top == 0
    assert close.bottom == WIN_HEIGHT
    touching = compute_wall_geometry(Ray(angle=1.0, distance=0.0), 1.0)
    assert touching.top == 0
    assert touching.bottom == WIN_HEIGHT


def test_wall_geometry_scales_distance_by_half_fov():
    geometry = compute_wall_geometry(Ray(angle=1.0, distance=100.0), 1.0)
    assert geometry.distance < 100.0
    assert geometry.distance > 0


def test_texture_offset_follows_flag():
    horizontal = compute_wall_geometry(
        Ray(angle=1.0, distance=50.0, wall_hit_x=10.0, wall_hit_y=40.0, hit_vertical=True),
        1.0,
    )
    vertical = compute_wall_geometry(
        Ray(angle=1.0, distance=50.0, wall_hit_x=10.0, wall_hit_y=40.0, hit_vertical=False),
        1.0,
    )
    assert horizontal.offset_x == 10
    assert vertical.offset_x == 40


def test_texture_offset_is_periodic():
    base = Ray(angle=1.0, distance=50.0, wall_hit_x=130.5, hit_vertical=True)
    shifted = Ray(angle=1.0, distance=50.0, wall_hit_x=130.5 + TILE_SIZE, hit_vertical=True)
    assert (
        compute_wall_geometry(base, 1.0).offset_x
        == compute_wall_geometry(shifted, 1.0).offset_x
    )


def test_offsets_within_tile_for_cast_rays():
    rays = [compute_wall_geometry(r, 1.0) for r in cast_all_rays(ROOM, CENTER, CENTER, 1.0)]
    assert all(0 <= r.offset_x < TILE_SIZE for r in rays)
    assert all(0 <= r.top <= r.bottom <= WIN_HEIGHT for r in rays)


@pytest.mark.parametrize(
    "angle, hit_vertical, expected",
    [
        (1.0, True, 0),
        (4.0, True, 1),
        (3.0, False, 2),
        (0.2, False, 3),
    ],
)
def test_choose_texture(angle, hit_vertical, expected):
    assert choose_texture(Ray(angle=angle, hit_vertical=hit_vertical)) == expected