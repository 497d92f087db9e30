from datetime import datetime, timedelta, timezone

from surf_report.models import HourlyEntry
from surf_report.trend import analyze_trend

from .conftest import make_observation

NOW = datetime(2024, 6, 1, 12, 0)
GOOD = dict(wave_height_avg=1.5, wave_period=12, wind_speed=5, wind_direction="E", wave_direction="W")
WINDY = dict(wave_height_avg=1.5, wave_period=12, wind_speed=30, wind_direction="W", wave_direction="W")


def make_timeline(hours, day=NOW.date(), **conditions):
    start = datetime(day.year, day.month, day.day)
    return [HourlyEntry(time=start + timedelta(hours=h), observation=make_observation(**conditions)) for h in hours]


def tomorrow():
    return NOW.date() + timedelta(days=1)


def test_too_few_entries_returns_none(spot):
    assert analyze_trend(make_timeline([12, 13]), spot, 50, now=NOW) is None
    assert analyze_trend([], spot, 50, now=NOW) is None


def test_no_matching_blocks_returns_none(spot):
    # night hours fall outside every block
    assert analyze_trend(make_timeline([0, 1, 2, 3]), spot, 50, now=NOW) is None


def test_improving_trend_names_best_window(spot):
    timeline = make_timeline(range(11, 21), **GOOD) + make_timeline(range(6, 21), day=tomorrow(), **GOOD)
    result = analyze_trend(timeline, spot, 40, now=NOW)
    assert result.trend == "improving"
    # all blocks tie, first strict maximum wins
    assert result.best_window.label == "Midday"
    assert result.best_window.score == 95
    assert result.best_window.rating == "EPIC"
    assert result.message == "Conditions improving midday - expect EPIC (95/100)."


def test_past_blocks_are_skipped(spot):
    timeline = make_timeline(range(6, 21), **GOOD) + make_timeline(range(6, 21), day=tomorrow(), **GOOD)
    result = analyze_trend(timeline, spot, 90, now=datetime(2024, 6, 1, 15, 30))
    labels = [b.label for b in result.blocks]
    assert labels[:2] == ["This afternoon", "This evening"]
    assert "This morning" not in labels
    assert "Midday" not in labels
    assert labels[-1] == "Tomorrow evening"


def test_message_names_wind_drivers(spot):
    timeline = make_timeline(range(11, 21), **WINDY) + make_timeline(range(6, 11), day=tomorrow(), **GOOD)
    result = analyze_trend(timeline, spot, 50, now=NOW)
    assert result.best_window.label == "Tomorrow morning"
    assert result.message.startswith("Wind should ease and wind shifting E (offshore) tomorrow morning - expect")


def test_offshore_tag_follows_spot(spot):
    timeline = make_timeline(range(11, 21), **WINDY) + make_timeline(range(6, 11), day=tomorrow(), **dict(GOOD, wind_direction="S"))
    result = analyze_trend(timeline, spot, 50, now=NOW)
    assert "wind shifting to S" in result.message
    assert "(offshore)" not in result.message


def test_declining_trend_says_go_now(spot):
    timeline = make_timeline(range(11, 21), **WINDY) + make_timeline(range(6, 21), day=tomorrow(), **WINDY)
    result = analyze_trend(timeline, spot, 95, now=NOW)
    assert result.trend == "declining"
    assert result.message == "Conditions are expected to decline - best to go now."


def test_stable_trend(spot):
    timeline = make_timeline(range(11, 21), **GOOD)
    result = analyze_trend(timeline, spot, 94, now=NOW)
    assert result.trend == "stable"
    assert result.message == "Conditions look stable for the next hours."


def test_slight_improvement(spot):
    timeline = make_timeline(range(11, 21), **GOOD)
    result = analyze_trend(timeline, spot, 91, now=NOW)
    assert result.message == "Slight improvement expected midday - EPIC (95/100)."


def test_aware_timestamps_compared_in_now_timezone(spot):
    local = timezone(timedelta(hours=3))
    # 09:00-11:00 UTC is 12:00-14:00 local, i.e. the Midday block
    timeline = [
        HourlyEntry(time=datetime(2024, 6, 1, h, tzinfo=timezone.utc), observation=make_observation(**GOOD))
        for h in (9, 10, 11)
    ]
    result = analyze_trend(timeline, spot, 50, now=datetime(2024, 6, 1, 12, 0, tzinfo=local))
    assert [b.label for b in result.blocks] == ["Midday", "This afternoon"]


def test_result_to_dict(spot):
    result = analyze_trend(make_timeline(range(11, 21), **GOOD), spot, 40, now=NOW)
    out = result.to_dict()
    assert out["trend"] == "improving"
    assert out["best_window"] == {"label": "Midday", "score": 95, "rating": "EPIC"}
    assert len(out["blocks"]) == 3
