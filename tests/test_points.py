import math
import pytest
from pydantic import ValidationError
from lhgeo_core.points import extract_points, find_most_likely_activity, normalize_sample

def make_sample(ts, lat_e7=525200000, lon_e7=134050000, candidates=None, accuracy=10):
    sample = {
        "timestampMs": str(ts),
        "latitudeE7": lat_e7,
        "longitudeE7": lon_e7,
        "accuracy": accuracy,
    }
    if candidates is not None:
        sample["activity"] = [{"timestampMs": str(ts), "activity": candidates}]
    return sample

def test_coordinates_are_lon_lat_degrees():
    point = normalize_sample(make_sample(1500000000000, lat_e7=525200000, lon_e7=134050000))
    assert point.coordinates == (134050000 / 1e7, 525200000 / 1e7)
    assert point.timestampMs == 1500000000000
    assert point.accuracy == 10

def test_highest_confidence_wins():
    sample = make_sample(0, candidates=[
        {"type": "WALKING", "confidence": 0.3},
        {"type": "IN_VEHICLE", "confidence": 0.9},
    ])
    assert find_most_likely_activity(sample) == "IN_VEHICLE"

def test_no_activity_is_unknown():
    assert find_most_likely_activity(make_sample(0)) == "UNKNOWN"
    assert find_most_likely_activity({"activity": []}) == "UNKNOWN"
    assert find_most_likely_activity({"activity": [{"activity": []}]}) == "UNKNOWN"
    assert find_most_likely_activity({"activity": [{"activity": 5}]}) == "UNKNOWN"
    assert normalize_sample({"timestampMs": "1", "activity": [{"activity": 5}]}).activity == "UNKNOWN"

def test_confidence_tie_keeps_input_order():
    sample = make_sample(0, candidates=[
        {"type": "ON_FOOT", "confidence": 50},
        {"type": "WALKING", "confidence": 50},
        {"type": "STILL", "confidence": 10},
    ])
    assert find_most_likely_activity(sample) == "ON_FOOT"

def test_only_first_detection_pass_counts():
    sample = {
        "activity": [
            {"activity": [{"type": "STILL", "confidence": 40}]},
            {"activity": [{"type": "IN_VEHICLE", "confidence": 100}]},
        ]
    }
    assert find_most_likely_activity(sample) == "STILL"

def test_malformed_sample_does_not_raise():
    point = normalize_sample({"timestampMs": "garbage"})
    lon, lat = point.coordinates
    assert math.isnan(lon) and math.isnan(lat)
    assert point.timestampMs is None
    assert point.accuracy is None
    assert point.activity == "UNKNOWN"

def test_point_is_immutable():
    point = normalize_sample(make_sample(0))
    with pytest.raises(ValidationError):
        point.activity = "WALKING"

def test_extract_points_sorted_by_timestamp():
    samples = [make_sample(3000), make_sample(1000), make_sample(2000)]
    points = extract_points(samples)
    assert [p.timestampMs for p in points] == [1000, 2000, 3000]

def test_numeric_not_lexicographic_order():
    # "900" < "1000" numerically but not as strings
    points = extract_points([make_sample(1000), make_sample(900)])
    assert [p.timestampMs for p in points] == [900, 1000]

def test_permutations_give_identical_output():
    a = make_sample(1000, lat_e7=1)
    b = make_sample(2000, lat_e7=2)
    c = make_sample(3000, lat_e7=3)
    assert extract_points([a, b, c]) == extract_points([c, a, b])

def test_equal_timestamps_keep_input_order():
    first = make_sample(1000, lat_e7=111)
    second = make_sample(1000, lat_e7=222)
    earlier = make_sample(500, lat_e7=333)
    points = extract_points([first, second, earlier])
    assert [p.coordinates[1] for p in points] == [333 / 1e7, 111 / 1e7, 222 / 1e7]

def test_empty_locations():
    assert extract_points([]) == []

def test_missing_timestamps_sort_last():
    missing = {"latitudeE7": 2}
    garbage = make_sample("garbage", lat_e7=3)
    points = extract_points([missing, make_sample(1000), garbage, make_sample(500)])
    assert [p.timestampMs for p in points] == [500, 1000, None, None]
    assert [p.coordinates[1] for p in points[2:]] == [2 / 1e7, 3 / 1e7]
