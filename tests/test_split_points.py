"""Tests for split point derivation from stopovers."""

from besserbahn_mcp.models import JourneyCandidate, Leg, Stopover
from besserbahn_mcp.split_points import split_points

from conftest import at, candidate, station, stopover


def test_keeps_only_real_interchanges():
    journey = candidate(
        89.0,
        stopovers=[
            stopover("Wolfsburg", "10:58", "10:59"),  # 60s, technical stop
            stopover("Göttingen", "11:45", "11:47"),  # exactly 120s
            stopover("Kassel-Wilhelmshöhe", "12:05", "12:12"),
        ],
    )
    assert split_points(journey) == ["Kassel-Wilhelmshöhe", "Göttingen"]


def test_sorted_by_dwell_and_capped():
    journey = candidate(
        89.0,
        stopovers=[
            stopover("Halle", "10:40", "10:43"),
            stopover("Erfurt", "11:10", "11:20"),
            stopover("Bamberg", "12:00", "12:05"),
            stopover("Nürnberg", "12:40", "12:48"),
        ],
    )
    assert split_points(journey) == ["Erfurt", "Nürnberg", "Bamberg"]
    assert split_points(journey, max_points=1) == ["Erfurt"]


def test_scans_every_leg_and_counts_station_once():
    first = Leg(
        origin=station("Berlin"),
        destination=station("Frankfurt"),
        departure=at("10:00"),
        arrival=at("14:00"),
        stopovers=[stopover("Fulda", "13:00", "13:03")],
    )
    second = Leg(
        origin=station("Frankfurt"),
        destination=station("Stuttgart"),
        departure=at("14:20"),
        arrival=at("15:40"),
        stopovers=[stopover("Mannheim", "14:58", "15:06"), stopover("Fulda", "15:10", "15:20")],
    )
    journey = JourneyCandidate(legs=[first, second], price=70.0)
    assert split_points(journey) == ["Fulda", "Mannheim"]


def test_ignores_stopovers_without_times_and_endpoints():
    journey = candidate(
        89.0,
        stopovers=[
            Stopover(station=station("Berlin"), planned_departure=at("10:00")),
            stopover("Leipzig", "11:10", "11:20"),
            Stopover(station=station("München"), planned_arrival=at("14:00")),
        ],
    )
    assert split_points(journey) == ["Leipzig"]


def test_threshold_is_configurable():
    journey = candidate(89.0, stopovers=[stopover("Hildesheim", "10:30", "10:31")])
    assert split_points(journey) == []
    assert split_points(journey, min_dwell_seconds=60) == ["Hildesheim"]


def test_no_stopovers():
    assert split_points(candidate(89.0)) == []
