import pytest

from surf_report.models import Band, Observation, Reading, SpotProfile, Swell
from surf_report.spot_loader import SpotLoader


def make_spot(**overrides):
    fields = dict(
        id="herzliya_marina",
        name="Herzliya Marina",
        wave_height=Band(0.8, 1.5, 2.5),
        wave_period=Band(8, 12, 16),
        offshore_wind=frozenset({"E", "NE", "SE"}),
        best_swell=frozenset({"W", "NW", "SW"}),
        latitude=32.1667,
        longitude=34.8,
        country="Israel",
        timezone="Asia/Jerusalem",
    )
    fields.update(overrides)
    return SpotProfile(**fields)


def make_observation(**overrides):
    fields = dict(
        wave_height_avg=1.5,
        wave_period=12,
        wind_speed=5,
        wind_direction="E",
    )
    fields.update(overrides)
    return Observation(**fields)


def make_reading(source="test", **overrides):
    fields = dict(
        wave_height_min=1.0,
        wave_height_max=1.4,
        wave_height_avg=1.2,
        wave_period=10,
        wave_direction="W",
        swell=Swell(height=1.0, period=11, direction="W"),
        wind_speed=12.0,
        wind_direction="E",
        wind_gusts=18.0,
        air_temp=26.0,
        water_temp=24.0,
        cloud_cover="Clear",
    )
    fields.update(overrides)
    return Reading(source=source, **fields)


@pytest.fixture
def spot():
    return make_spot()


@pytest.fixture
def loader():
    spots = SpotLoader()
    spots.load()
    return spots


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
