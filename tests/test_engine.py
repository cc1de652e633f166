import math

import numpy as np
import pytest

from metaballs.engine import Blob, MetaballScene, Orbit, SceneParams


def test_blob_advance():
    b = Blob(x=1.0, y=1.0, vx=2.0, vy=-1.0)
    b.advance(0.5)
    assert (b.x, b.y) == (2.0, 0.5)


def test_reflect_off_right_wall():
    b = Blob(x=9.5, y=5.0, vx=2.0, vy=0.0)
    b.advance(0.5)
    b.reflect(10.0, 10.0)
    assert b.x == 10.0
    assert b.vx == -2.0


def test_reflect_off_floor_and_left_wall():
    b = Blob(x=0.2, y=0.1, vx=-1.0, vy=-3.0)
    b.advance(0.5)
    b.reflect(10.0, 10.0)
    assert (b.x, b.y) == (0.0, 0.0)
    assert (b.vx, b.vy) == (1.0, 3.0)


def test_reflect_inside_bounds_is_noop():
    b = Blob(x=5.0, y=5.0, vx=-1.0, vy=1.0)
    b.reflect(10.0, 10.0)
    assert (b.x, b.y, b.vx, b.vy) == (5.0, 5.0, -1.0, 1.0)


def test_non_positive_radius_is_clamped():
    assert Blob(radius=0.0).radius > 0
    assert Blob(radius=-2.0).radius > 0


def test_scene_stays_in_bounds():
    params = SceneParams(width=30.0, height=12.0, max_speed=40.0)
    scene = MetaballScene(blob_count=8, params=params, seed=3)
    for _ in range(500):
        scene.advance(0.1)
        for b in scene.blobs:
            assert 0.0 <= b.x <= params.width
            assert 0.0 <= b.y <= params.height


def test_invalid_dt_does_not_move_blobs():
    scene = MetaballScene(blob_count=3, seed=1)
    before = [(b.x, b.y) for b in scene.blobs]
    scene.advance(float("nan"))
    scene.advance(-1.0)
    scene.advance(float("inf"))
    assert [(b.x, b.y) for b in scene.blobs] == before
    assert scene.time == 0.0


def test_long_dt_is_split_into_substeps():
    params = SceneParams(width=100.0, height=100.0, max_step=0.1)
    scene = MetaballScene(params=params, blobs=[Blob(x=50.0, y=50.0, vx=10.0)])
    scene.advance(6.0)
    # hits the right wall after 5 s and comes back for 1 s
    assert scene.blobs[0].x == pytest.approx(91.0)
    assert scene.blobs[0].vx == -10.0
    assert scene.time == pytest.approx(6.0)


def test_long_dt_covers_full_distance():
    params = SceneParams(width=100.0, height=100.0, max_step=0.1)
    scene = MetaballScene(params=params, blobs=[Blob(x=50.0, y=50.0, vx=10.0)])
    scene.advance(0.5)
    assert scene.blobs[0].x == pytest.approx(55.0)
    assert scene.time == pytest.approx(0.5)


def test_seeded_scenes_match():
    a = MetaballScene(blob_count=6, seed=42)
    b = MetaballScene(blob_count=6, seed=42)
    for _ in range(20):
        a.advance(0.05)
        b.advance(0.05)
    assert [(p.x, p.y, p.vx, p.vy, p.radius) for p in a.blobs] == \
        [(p.x, p.y, p.vx, p.vy, p.radius) for p in b.blobs]


def test_random_blobs_respect_limits():
    params = SceneParams(min_radius=2.0, max_radius=3.0)
    scene = MetaballScene(blob_count=10, params=params, seed=9)
    assert scene.blob_count == 10
    assert all(2.0 <= b.radius <= 3.0 for b in scene.blobs)


def test_reset_changes_count():
    scene = MetaballScene(blob_count=4, seed=0)
    scene.advance(0.1)
    scene.reset(7)
    assert scene.blob_count == 7
    assert scene.time == 0.0


def test_unknown_preset():
    with pytest.raises(KeyError, match="Available"):
        MetaballScene(preset="spiral")


def test_orbit_follows_path():
    orbit = Orbit(cx=40.0, cy=17.5, ax=20.0, ay=10.0, fx=1.2, fy=1.2, py=-math.pi / 2)
    b = Blob(radius=3.0, orbit=orbit)
    assert (b.x, b.y) == pytest.approx((60.0, 17.5))
    b.advance(0.5)
    assert b.x == pytest.approx(40.0 + math.cos(0.6) * 20.0)
    assert b.y == pytest.approx(17.5 + math.sin(0.6) * 10.0)
    assert b.vx == pytest.approx(-20.0 * 1.2 * math.sin(0.6))


def test_orbit_preset():
    scene = MetaballScene(preset="orbit")
    assert [b.radius for b in scene.blobs] == [4.0, 3.0, 3.5, 2.5, 3.2]
    for _ in range(10):
        scene.advance(0.05)
    t = scene.blobs[0].time
    assert t == pytest.approx(0.5)
    # main blob wobbles about the centre
    assert scene.blobs[0].x == pytest.approx(40.0 + math.sin(t * 0.5) * 8.0)
    assert scene.blobs[0].y == pytest.approx(17.5 + math.cos(t * 0.7) * 4.0)
    assert scene.blobs[4].y == pytest.approx(17.5 + math.sin(t * 0.6 + math.pi * 1.5) * 12.0)
    for b in scene.blobs:
        assert 0.0 <= b.x <= 80.0 and 0.0 <= b.y <= 35.0


def test_field_grid_shape(three_blob_scene):
    xs, ys = np.meshgrid(np.arange(4.0), np.arange(3.0))
    assert three_blob_scene.field_grid(xs, ys).shape == (3, 4)
