import logging
import math
from typing import Any, Dict, List

from lhgeo_core.models import NormalizedPoint, Position, UNKNOWN_ACTIVITY
from lhgeo_core.utils import to_float, to_timestamp_ms

logger = logging.getLogger(__name__)


def find_most_likely_activity(sample: Dict[str, Any]) -> str:
    """
    Resolves the activity label of a raw sample.

    Only the first detection pass is consulted. Its candidates are ranked by
    confidence (highest first, ties keep their original order) and the top
    candidate's type wins. Samples without detections are "UNKNOWN".
    """
    detections = sample.get("activity")
    if not detections or not isinstance(detections, list):
        return UNKNOWN_ACTIVITY

    first_pass = detections[0]
    candidates = first_pass.get("activity") if isinstance(first_pass, dict) else None
    if not candidates or not isinstance(candidates, list):
        return UNKNOWN_ACTIVITY

    def confidence(candidate) -> float:
        value = to_float(candidate.get("confidence")) if isinstance(candidate, dict) else math.nan
        # Candidates without a usable confidence rank last
        return -math.inf if math.isnan(value) else value

    # sorted() is stable for reverse=True as well
    ranked = sorted(candidates, key=confidence, reverse=True)
    top = ranked[0]
    label = top.get("type") if isinstance(top, dict) else None
    return label if label else UNKNOWN_ACTIVITY


def extract_coordinates(sample: Dict[str, Any]) -> Position:
    """E7 fixed-point lat/lon -> (longitude, latitude) in degrees."""
    return (
        to_float(sample.get("longitudeE7")) / 1e7,
        to_float(sample.get("latitudeE7")) / 1e7,
    )


def normalize_sample(sample: Dict[str, Any]) -> NormalizedPoint:
    """Converts one raw history sample into a NormalizedPoint. Never raises on bad fields."""
    if not isinstance(sample, dict):
        sample = {}

    accuracy = sample.get("accuracy")
    if isinstance(accuracy, bool) or not isinstance(accuracy, (int, float)):
        accuracy = None

    return NormalizedPoint(
        coordinates=extract_coordinates(sample),
        timestampMs=to_timestamp_ms(sample.get("timestampMs")),
        accuracy=accuracy,
        activity=find_most_likely_activity(sample),
    )


def _sort_key(sample: Any):
    ts = to_timestamp_ms(sample.get("timestampMs")) if isinstance(sample, dict) else None
    # Missing or unparseable timestamps sort last
    return (ts is None, ts if ts is not None else 0)


def extract_points(locations: List[Dict[str, Any]]) -> List[NormalizedPoint]:
    """
    Normalizes and time-orders every sample of a location history.

    The sort is stable: samples sharing a timestamp keep their input order.
    """
    if not locations:
        return []

    ordered = sorted(locations, key=_sort_key)
    points = [normalize_sample(sample) for sample in ordered]

    malformed = sum(1 for p in points if p.timestampMs is None)
    if malformed:
        logger.warning(f"{malformed} sample(s) have no usable timestampMs.")
    logger.debug(f"Extracted {len(points)} points.")
    return points
