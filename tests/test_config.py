import json
import logging

import numpy as np
import pytest

from flowfield.config import FieldConfig
from flowfield.errors import InvalidConfiguration


def test_defaults_are_valid():
    config = FieldConfig()
    assert config.validate() is config


@pytest.mark.parametrize(
    "changes",
    [
        {"cell_size": 0},
        {"cell_size": -4},
        {"width": 0},
        {"height": -1},
        {"noise_step": 0},
        {"noise_step": float("nan")},
        {"number_of_particles": -1},
        {"number_of_particles": 2.5},
        {"palette": "no-such-palette"},
        {"width": 40, "height": 40, "cell_size": 50},
    ],
)
def test_invalid_settings_are_rejected(changes):
    with pytest.raises(InvalidConfiguration):
        FieldConfig(**changes).validate()


def test_updated_leaves_original_untouched():
    config = FieldConfig()
    changed = config.updated(number_of_particles=10)
    assert changed.number_of_particles == 10
    assert config.number_of_particles == 500
    with pytest.raises(InvalidConfiguration):
        config.updated(cell_size=0)


def test_save_and_load(tmp_path):
    config = FieldConfig(width=300, height=200, palette="colormap:viridis", seed=3)
    path = tmp_path / "settings" / "flowfield.json"
    config.save(path)
    assert json.loads(path.read_text(encoding="utf-8"))["palette"] == "colormap:viridis"
    assert FieldConfig.load(path) == config


def test_unknown_keys_are_ignored(caplog):
    with caplog.at_level(logging.WARNING, logger="flowfield.config"):
        config = FieldConfig.from_dict({"cell_size": 20, "zoom": 3})
    assert config.cell_size == 20
    assert "zoom" in caplog.text


@pytest.mark.parametrize(
    "changes",
    [
        {"width": True},
        {"cell_size": True},
        {"number_of_particles": True},
        {"seed": True},
        {"seed": -1},
        {"seed": "abc"},
        {"palette": 5},
    ],
)
def test_booleans_and_wrong_types_are_rejected(changes):
    with pytest.raises(InvalidConfiguration):
        FieldConfig(**changes).validate()


def test_numpy_scalars_are_accepted_and_serialisable(tmp_path):
    config = FieldConfig(
        width=np.float64(300.0),
        height=np.int64(200),
        number_of_particles=np.int64(40),
        seed=np.int64(5),
    ).validate()
    path = tmp_path / "settings.json"
    config.save(path)
    loaded = FieldConfig.load(path)
    assert (loaded.width, loaded.height, loaded.number_of_particles, loaded.seed) == (300.0, 200, 40, 5)


def test_settings_must_be_an_object():
    with pytest.raises(InvalidConfiguration):
        FieldConfig.from_dict([["cell_size", 10]])
