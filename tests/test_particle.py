import logging

import numpy as np
import pytest

from particle import Particle, ParticleFactory, ParticleField
from utils import InvalidArgument


def test_same_seed_produces_same_field():
    factory = ParticleFactory()
    first = factory.create(10, (800, 600), 42)
    second = factory.create(10, (800, 600), 42)

    np.testing.assert_array_equal(first.positions, second.positions)
    np.testing.assert_array_equal(first.velocities, second.velocities)
    np.testing.assert_array_equal(first.sizes, second.sizes)
    np.testing.assert_array_equal(first.opacities, second.opacities)


def test_different_seeds_produce_different_fields():
    factory = ParticleFactory()
    first = factory.create(10, (800, 600), 1)
    second = factory.create(10, (800, 600), 2)
    assert not np.array_equal(first.positions, second.positions)


def test_created_particles_respect_default_ranges(rng):
    field = ParticleFactory().create(500, (800, 600), rng)

    assert len(field) == 500
    assert np.all((field.positions[:, 0] >= 0) & (field.positions[:, 0] <= 800))
    assert np.all((field.positions[:, 1] >= 0) & (field.positions[:, 1] <= 600))
    assert np.all((field.sizes >= 1) & (field.sizes <= 5))
    assert np.all(np.abs(field.velocities) <= 0.25)
    assert np.all((field.opacities >= 0.1) & (field.opacities <= 0.6))


def test_configured_ranges_are_used(rng):
    factory = ParticleFactory({
        "velocity_range": 2.0,
        "size_range": [3, 4],
        "opacity_range": [0.5, 0.5],
    })
    field = factory.create(200, (100, 100), rng)

    assert np.all(np.abs(field.velocities) <= 2.0)
    assert np.abs(field.velocities).max() > 0.25
    assert np.all((field.sizes >= 3) & (field.sizes <= 4))
    assert np.all(field.opacities == 0.5)


def test_zero_count_gives_empty_field(rng):
    field = ParticleFactory().create(0, (800, 600), rng)
    assert len(field) == 0
    assert field.positions.shape == (0, 2)
    assert list(field) == []


def test_negative_count_is_rejected(rng):
    with pytest.raises(InvalidArgument):
        ParticleFactory().create(-1, (800, 600), rng)


@pytest.mark.parametrize("bounds", [(0, 600), (800, 0), (-5, 600), (800, -1)])
def test_non_positive_bounds_are_rejected(bounds, rng):
    with pytest.raises(InvalidArgument):
        ParticleFactory().create(5, bounds, rng)


@pytest.mark.parametrize("params", [
    {"velocity_range": -0.1},
    {"size_range": [5, 1]},
    {"size_range": [-1, 5]},
    {"opacity_range": [0.1, 1.5]},
    {"opacity_range": "bright"},
])
def test_invalid_ranges_are_rejected(params):
    with pytest.raises(InvalidArgument):
        ParticleFactory(params)


def test_sizes_and_opacities_are_read_only(rng):
    field = ParticleFactory().create(3, (800, 600), rng)
    with pytest.raises(ValueError):
        field.sizes[0] = 10.0
    with pytest.raises(ValueError):
        field.opacities[0] = 1.0


def test_from_particles_keeps_order_and_values():
    particles = [Particle(1, 2, 3, 4, 1.5, 0.2), Particle(5, 6, -1, 0, 4.0, 0.5)]
    field = ParticleField.from_particles(particles)

    assert len(field) == 2
    assert field[0] == particles[0]
    assert list(field) == particles


def test_mismatched_arrays_are_rejected(caplog):
    with caplog.at_level(logging.CRITICAL):
        with pytest.raises(InvalidArgument):
            ParticleField(np.zeros((2, 2)), np.zeros((3, 2)), np.ones(2), np.ones(2))
    assert "disagree on length" in caplog.text


@pytest.mark.parametrize("count", [2.5, "ten"])
def test_fractional_count_is_rejected(count, rng):
    with pytest.raises(InvalidArgument):
        ParticleFactory().create(count, (800, 600), rng)
