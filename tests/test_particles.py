import numpy as np
import pytest

from flowfield.grid import VectorGrid
from flowfield.particles import Particle, ParticleState


def uniform_grid(direction=(1.0, 0.0), rows=10, cols=10, cell_size=10):
    directions = np.tile(np.asarray(direction, dtype=float), (rows, cols, 1))
    return VectorGrid(directions, cell_size=cell_size, step=0.1)


def place(particle, x, y):
    particle.x, particle.y = x, y
    particle.trail.clear()
    particle.trail.append((x, y))


@pytest.fixture
def particle():
    return Particle((80, 60), np.random.default_rng(42), colour="#abcdef")


def test_new_particle(particle):
    assert 0 <= particle.x < 80
    assert 0 <= particle.y < 60
    assert list(particle.trail) == [(particle.x, particle.y)]
    assert particle.speed_modifier in (1, 2, 3)
    assert 10 <= particle.max_history_length < 210
    assert particle.timer == 2 * particle.max_history_length
    assert particle.state is ParticleState.ACTIVE
    assert particle.colour == "#abcdef"


def test_active_step_follows_the_grid(particle):
    place(particle, 20.0, 30.0)
    timer = particle.timer
    particle.step(uniform_grid((0.0, 1.0)))

    assert particle.timer == timer - 1
    assert (particle.speed_x, particle.speed_y) == (0.0, particle.speed_modifier)
    assert (particle.x, particle.y) == (20.0, 30.0 + particle.speed_modifier)
    assert list(particle.trail) == [(20.0, 30.0), (particle.x, particle.y)]


def test_particle_pauses_outside_the_grid(particle):
    place(particle, 20.0, 30.0)
    small = uniform_grid(rows=2, cols=2)
    timer = particle.timer
    particle.step(small)

    assert particle.timer == timer - 1
    assert (particle.x, particle.y) == (20.0, 30.0)
    assert list(particle.trail) == [(20.0, 30.0)]


def test_trail_never_exceeds_its_bound(particle):
    grid = uniform_grid(rows=7, cols=9)
    seen_states = set()
    for _ in range(5 * particle.max_history_length):
        particle.step(grid)
        seen_states.add(particle.state)
        assert 1 <= len(particle.trail) <= particle.max_history_length
    assert ParticleState.RETRACTING in seen_states


def test_retracting_drops_oldest_point(particle):
    place(particle, 10.0, 10.0)
    particle.trail.extend([(11.0, 10.0), (12.0, 10.0)])
    particle.timer = 1
    particle.step(uniform_grid())

    assert particle.timer == 0
    assert particle.state is ParticleState.RETRACTING
    assert list(particle.trail) == [(11.0, 10.0), (12.0, 10.0)]
    assert (particle.x, particle.y) == (10.0, 10.0)


def test_expired_particle_respawns(particle):
    speed, history = particle.speed_modifier, particle.max_history_length
    place(particle, 10.0, 10.0)
    particle.timer = 0
    assert particle.state is ParticleState.EXPIRED
    particle.step(uniform_grid())

    assert particle.timer == 2 * history
    assert 0 <= particle.x < 80 and 0 <= particle.y < 60
    assert list(particle.trail) == [(particle.x, particle.y)]
    assert (particle.speed_modifier, particle.max_history_length) == (speed, history)
    assert particle.state is ParticleState.ACTIVE


def test_particle_cycles_through_every_state(particle):
    grid = uniform_grid(rows=7, cols=9)
    states = []
    for _ in range(3 * particle.max_history_length + 2):
        states.append(particle.state)
        particle.step(grid)
    assert states[0] is ParticleState.ACTIVE
    assert ParticleState.RETRACTING in states
    respawns = [
        i for i in range(1, len(states))
        if states[i - 1] is not ParticleState.ACTIVE and states[i] is ParticleState.ACTIVE
    ]
    assert respawns


def test_trail_array_is_a_copy(particle):
    place(particle, 5.0, 6.0)
    points = particle.trail_array()
    assert points.shape == (1, 2)
    points[0, 0] = 99.0
    assert particle.trail[0] == (5.0, 6.0)
