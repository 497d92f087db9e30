from datetime import datetime, timedelta, timezone

import pytest

from surf_report.aggregator import hour_key, reconcile, reconcile_timeline
from surf_report.const import SWELL_CAP_MULTIPLIER
from surf_report.models import HourlyReading, Reading, Swell

from .conftest import make_reading


def test_single_reading_reconciles_to_itself():
    r = make_reading()
    obs = reconcile([r])
    assert obs.to_dict() == r.to_dict()


def test_identical_readings_collapse_to_one():
    readings = [make_reading(source=f"s{i}") for i in range(4)]
    assert reconcile(readings).to_dict() == readings[0].to_dict()


def test_swell_cap_mixed_height_scenario():
    a = Reading(wave_height_avg=1.2, wave_period=10, swell=Swell(height=1.0, period=11))
    b = Reading(wave_height_avg=1.8)
    obs = reconcile([a, b])
    # naive mean 1.5 is capped at swell height x 1.4
    assert obs.wave_height_avg == 1.0 * 1.4
    assert obs.swell.height == 1.0
    assert obs.swell.period == 11
    assert obs.wave_period == 10


def test_swell_cap_checked_before_rounding():
    a = Reading(wave_height_avg=1.45, swell=Swell(height=1.03))
    b = Reading(wave_height_avg=1.44)
    # naive mean 1.445 rounds to 1.4, under the cap, but exceeds it unrounded
    assert reconcile([a, b]).wave_height_avg == 1.03 * SWELL_CAP_MULTIPLIER

    c = Reading(wave_height_avg=1.5, swell=Swell(height=1.1))
    d = Reading(wave_height_avg=1.6, swell=Swell(height=1.1))
    assert reconcile([c, d]).wave_height_avg == 1.1 * SWELL_CAP_MULTIPLIER


def test_uncapped_mean_is_rounded():
    a = Reading(wave_height_avg=1.2, swell=Swell(height=1.0))
    b = Reading(wave_height_avg=1.25)
    assert reconcile([a, b]).wave_height_avg == 1.2


def test_range_rebuilt_from_average():
    a = Reading(wave_height_min=1.0, wave_height_max=1.4, wave_height_avg=1.2)
    b = Reading(wave_height_min=1.6, wave_height_max=2.0, wave_height_avg=1.8)
    obs = reconcile([a, b])
    assert obs.wave_height_avg == 1.5
    assert obs.wave_height_min == pytest.approx(1.4)
    assert obs.wave_height_max == pytest.approx(1.6)
    assert obs.wave_height_min <= obs.wave_height_avg <= obs.wave_height_max


def test_range_low_end_never_negative():
    a = Reading(wave_height_min=0.0, wave_height_max=0.1, wave_height_avg=0.0)
    b = Reading(wave_height_min=0.0, wave_height_max=0.2, wave_height_avg=0.0)
    obs = reconcile([a, b])
    assert obs.wave_height_min == 0.0
    assert obs.wave_height_max == 0.1


def test_no_range_when_no_source_reports_one():
    obs = reconcile([Reading(wave_height_avg=1.0), Reading(wave_height_avg=1.2)])
    assert obs.wave_height_avg == 1.1
    assert obs.wave_height_min is None
    assert obs.wave_height_max is None


def test_midpoint_used_when_average_missing():
    obs = reconcile([Reading(wave_height_min=1.0, wave_height_max=2.0), Reading(wave_height_avg=1.1)])
    assert obs.wave_height_avg == 1.3


def test_missing_values_are_excluded_not_zero():
    obs = reconcile([Reading(wind_speed=20.0), Reading(wind_speed=None, air_temp=25.0)])
    assert obs.wind_speed == 20.0
    assert obs.air_temp == 25.0
    assert obs.water_temp is None


def test_numeric_mean_is_rounded_to_canonical_precision():
    obs = reconcile([Reading(wind_speed=10.0, wave_period=9), Reading(wind_speed=13.0, wave_period=10)])
    assert obs.wind_speed == 12  # 11.5 rounds to even
    assert obs.wave_period == 10  # 9.5 rounds to even


def test_direction_mode_and_tie_break():
    assert reconcile([Reading(wind_direction="SW"), Reading(wind_direction="W")]).wind_direction == "SW"
    readings = [Reading(wind_direction="W"), Reading(wind_direction="SW"), Reading(wind_direction="SW")]
    assert reconcile(readings).wind_direction == "SW"


def test_swell_only_from_readings_that_report_it():
    obs = reconcile([Reading(swell=Swell(height=1.0, period=10, direction="W")), Reading(swell=Swell(height=1.2, period=12)), Reading()])
    assert obs.swell.height == 1.1
    assert obs.swell.period == 11
    assert obs.swell.direction == "W"


def test_no_swell_when_nobody_reports_height():
    assert reconcile([Reading(swell=Swell(period=10)), Reading()]).swell is None


def test_empty_input_gives_empty_observation():
    obs = reconcile([])
    assert obs.wave_height_avg is None
    assert obs.swell is None


def test_order_independent():
    a = make_reading(wave_height_avg=1.0, wind_speed=10.0, wind_direction="NE")
    b = make_reading(wave_height_avg=1.3, wind_speed=16.0, wind_direction="NE")
    c = make_reading(wave_height_avg=1.6, wind_speed=19.0, wind_direction="E")
    assert reconcile([a, b, c]).to_dict() == reconcile([c, a, b]).to_dict()


def test_hour_key_truncates():
    assert hour_key(datetime(2024, 6, 1, 6, 45, 12)) == datetime(2024, 6, 1, 6)


def test_timeline_merges_same_hour_and_sorts():
    a = Reading(
        hourly=[
            HourlyReading(time=datetime(2024, 6, 1, 7), wind_speed=10.0),
            HourlyReading(time=datetime(2024, 6, 1, 6), wind_speed=8.0, wave_height_avg=1.0),
        ]
    )
    b = Reading(
        hourly=[
            HourlyReading(time=datetime(2024, 6, 1, 6, 30), wind_speed=12.0),
            HourlyReading(time=None, wind_speed=99.0),
        ]
    )
    timeline = reconcile_timeline([a, b])
    assert [e.time for e in timeline] == [datetime(2024, 6, 1, 6), datetime(2024, 6, 1, 7)]
    assert timeline[0].observation.wind_speed == 10
    assert timeline[0].observation.wave_height_avg == 1.0
    assert timeline[1].observation.wind_speed == 10.0


def test_timeline_empty_without_hourly_data():
    assert reconcile_timeline([Reading(), Reading()]) == []


def test_timeline_merges_hours_across_zones():
    local = timezone(timedelta(hours=5, minutes=30))
    a = Reading(hourly=[HourlyReading(time=datetime(2024, 6, 1, 10, tzinfo=local), wind_speed=10.0)])
    # 05:00 UTC is 10:30 local
    b = Reading(hourly=[HourlyReading(time=datetime(2024, 6, 1, 5, tzinfo=timezone.utc), wind_speed=14.0)])
    timeline = reconcile_timeline([a, b])
    assert len(timeline) == 1
    assert timeline[0].time == datetime(2024, 6, 1, 10, tzinfo=local)
    assert timeline[0].observation.wind_speed == 12


def test_hour_key_converts_to_reference_zone():
    local = timezone(timedelta(hours=5, minutes=30))
    ts = datetime(2024, 6, 1, 5, 10, tzinfo=timezone.utc)
    assert hour_key(ts, local) == datetime(2024, 6, 1, 10, tzinfo=local)
    assert hour_key(ts).hour == 5
