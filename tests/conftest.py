import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from flowfield import FieldConfig, NoiseField, ParticleField, VectorGrid  # noqa: E402


@pytest.fixture
def noise():
    return NoiseField(width=8, height=8, seed=1234)


@pytest.fixture
def grid(noise):
    return VectorGrid.build(noise, rows=6, cols=6, cell_size=10, step=0.3)


@pytest.fixture
def config():
    return FieldConfig(width=120, height=80, cell_size=10, number_of_particles=25, noise_step=0.1, seed=7)


@pytest.fixture
def field(config):
    return ParticleField(config)
