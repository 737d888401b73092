import pytest

from hexworld import generate_world
from hexworld.errors import ConfigurationError
from hexworld.settings import WorldSettings


def test_defaults_are_valid():
    WorldSettings().validate()


@pytest.mark.parametrize(
    "overrides",
    [
        {"width": 0},
        {"height": 0},
        {"width": -3},
        {"width": 2, "wrap": True},
        {"seed": -1},
        {"seed": 2 ** 64},
        {"woods_chance": 1.5},
        {"oasis_chance": -0.1},
        {"river_source_chance": 2.0},
        {"land_ratio": 1.0},
        {"sea_level": 0.3, "hill_elevation": 0.2},
        {"hill_elevation": 0.6, "mountain_elevation": 0.55},
        {"mountain_elevation": 1.2},
        {"sample_density": 0.0},
        {"evolution_steps": 0},
        {"max_slope": 2.0},
        {"interpolation_neighbors": 0},
        {"max_river_length": 0},
        {"width": 4.5},
        {"wrap": "yes"},
        {"sea_level": 0.0},
        {"sea_level": -0.5},
        {"erodibility_power": float("nan")},
        {"sample_density": float("nan")},
        {"max_slope": float("inf")},
        {"woods_chance": "0.2"},
        {"hill_elevation": True},
        {"land_ratio": float("nan")},
        {"hills_share": 0.05, "mountains_share": 0.1},
        {"hills_share": 1.5},
        {"mountains_share": -0.1},
        {"fault_scale": -1.0},
    ],
)
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ConfigurationError):
        WorldSettings(**overrides).validate()


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        WorldSettings(width=0).validate()


def test_wrap_allowed_from_three_columns():
    WorldSettings(width=3, wrap=True).validate()


def test_settings_shared_between_peers():
    settings = WorldSettings(seed=99, width=12, height=9, wrap=True, land_ratio=0.4)
    assert WorldSettings.from_json(settings.to_json()) == settings


def test_unknown_shared_setting_rejected():
    data = WorldSettings().to_json()
    data["biome_distribution"] = {}
    with pytest.raises(ConfigurationError):
        WorldSettings.from_json(data)


def test_generation_rejects_non_finite_knobs_before_running():
    with pytest.raises(ConfigurationError):
        generate_world(1, 12, 8, settings=WorldSettings(erodibility_power=float("nan")))
