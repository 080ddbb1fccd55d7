import math
import random

import numpy as np
import pytest

from sphwater.scene import GuiParameters, Scene, update_field_color
from sphwater.simulation import Particle


def make_scene(seed=7):
    return Scene(rng=random.Random(seed))


def test_initial_water_fills_right_half():
    scene = make_scene()
    h = scene.parameters.h
    positions = np.array([q.p for q in scene.particles])
    assert len(positions) > 0
    assert positions[:, 0].min() >= h
    assert positions[:, 0].max() < 1.0 - h + h / 8.0
    assert positions[:, 1].min() >= -1.0 + h
    assert positions[:, 1].max() < 1.0 - h + h / 8.0
    assert np.all(positions[:, 2] == 0.0)


def test_rock_is_a_ring_above_the_tank():
    scene = make_scene()
    assert len(scene.rock_particles) == 20
    for q in scene.rock_particles:
        assert math.hypot(q.p[0], q.p[1] - 1.0) == pytest.approx(0.1)
        assert q.rho == 1.0
        assert q.pressure == 1.0
    assert scene.rock_center() == pytest.approx([0.0, 1.0, 0.0], abs=1e-9)


def test_boat_is_a_grid():
    scene = make_scene()
    got = sorted((round(q.p[0], 6), round(q.p[1], 6)) for q in scene.boat_particles)
    expected = sorted((round(0.04 * i, 6), round(0.025 * j, 6)) for i in range(5) for j in range(2))
    assert got == expected


def test_initial_flags():
    scene = make_scene()
    assert scene.rock_mass == pytest.approx(0.005)
    assert scene.flags.reset_rock and scene.flags.reset_boat and scene.flags.reset_wave
    assert scene.flags.wave_alive
    assert not scene.flags.rock_alive
    assert not scene.flags.boat_alive
    assert scene.gui == GuiParameters()


def test_same_seed_gives_same_layout():
    a = make_scene(3)
    b = make_scene(3)
    assert len(a.particles) == len(b.particles)
    assert all(np.array_equal(p.p, q.p) for p, q in zip(a.particles, b.particles))


def test_step_advances_time_and_clears_resets():
    scene = make_scene()
    dt = scene.step()
    assert dt == pytest.approx(0.005)
    assert scene.t == pytest.approx(0.01)
    assert not scene.flags.reset_rock
    assert not scene.flags.reset_boat
    assert not scene.flags.reset_wave


def test_timer_scale_scales_dt():
    scene = make_scene()
    scene.timer_scale = 2.0
    assert scene.step() == pytest.approx(2.0 * 0.005)


def test_drop_flags_set_after_step():
    scene = make_scene()
    scene.step()
    scene.drop_rock()
    scene.drop_boat()
    scene.restart_wave()
    assert scene.flags.reset_rock
    assert scene.flags.reset_boat
    assert scene.flags.reset_wave


def test_rock_respawns_at_swing_position():
    scene = make_scene()
    scene.gui.display_rock = True
    scene.step()
    assert scene.flags.rock_alive
    center = scene.rock_center()
    assert center[0] == pytest.approx(0.8 * math.sin(scene.t), abs=1e-2)
    assert center[1] == pytest.approx(1.0, abs=1e-2)


def test_boat_respawns_at_swing_position():
    scene = make_scene()
    scene.gui.display_boat = True
    scene.step()
    xs = [q.p[0] for q in scene.boat_particles]
    ys = [q.p[1] for q in scene.boat_particles]
    assert min(xs) == pytest.approx(0.8 * math.sin(scene.t), abs=1e-2)
    assert min(ys) == pytest.approx(0.950, abs=1e-2)
    assert max(ys) == pytest.approx(0.975, abs=1e-2)
    velocities = np.array([q.v for q in scene.boat_particles])
    assert np.allclose(velocities, velocities[0])


def test_initialize_sph_restores_rock():
    scene = make_scene()
    scene.gui.display_rock = True
    scene.step()
    scene.initialize_sph()
    assert scene.rock_center() == pytest.approx([0.0, 1.0, 0.0], abs=1e-9)
    assert scene.flags.reset_rock


def test_field_without_particles_is_white():
    field = update_field_color([], 8)
    assert field.shape == (8, 8, 3)
    assert np.all(field == 1.0)


def test_field_darkest_under_particle_with_flipped_rows():
    size = 10
    field = update_field_color([Particle(p=(-1.0, -1.0, 0.0))], size)
    red = field[..., 0]
    assert np.unravel_index(np.argmin(red), red.shape) == (0, size - 1)
    assert np.all(field[..., 2] == 1.0)
    assert np.all((field >= 0.0) & (field <= 1.0))
    assert np.array_equal(field[..., 0], field[..., 1])


def test_field_rejects_tiny_size():
    with pytest.raises(ValueError):
        update_field_color([], 1)


def test_step_updates_field_when_color_shown():
    scene = make_scene()
    scene.step()
    assert scene.field.shape == (30, 30, 3)
    assert scene.field[..., 0].min() < 1.0