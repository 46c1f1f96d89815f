import logging
from typing import Dict, List, Optional, Sequence, Tuple

from lhgeo_core.config import SegmentationConfig
from lhgeo_core.models import NormalizedPoint, Position, TraceSegment, UNKNOWN_ACTIVITY
from lhgeo_core.utils import geodesic_distance_km

logger = logging.getLogger(__name__)


def dominant_activity(activities: Sequence[str]) -> Optional[str]:
    """
    Most frequent label; on equal counts the one seen most recently wins.
    Returns None for an empty window.
    """
    # label -> (count, index of last occurrence)
    tally: Dict[str, Tuple[int, int]] = {}
    for index, label in enumerate(activities):
        count, _ = tally.get(label, (0, -1))
        tally[label] = (count + 1, index)

    if not tally:
        return None
    return max(tally.items(), key=lambda item: item[1])[0]


def is_break(prev: NormalizedPoint, cur: NormalizedPoint, config: SegmentationConfig) -> bool:
    """True when the gap between two consecutive points ends the current trace."""
    if prev.timestampMs is None or cur.timestampMs is None:
        time_delta_minutes = float("nan")
    else:
        time_delta_minutes = abs(cur.timestampMs - prev.timestampMs) / 1000 / 60
    distance_delta_km = geodesic_distance_km(prev.coordinates, cur.coordinates)

    # NaN deltas compare False, so malformed points never force a break
    return time_delta_minutes > config.max_gap_minutes or distance_delta_km > config.max_gap_km


def segment_traces(points: Sequence[NormalizedPoint],
                   config: Optional[SegmentationConfig] = None) -> List[TraceSegment]:
    """
    Splits a time-ordered point sequence into movement traces.

    Consecutive pairs are compared starting at the second point. A time gap
    above `max_gap_minutes` or a distance gap above `max_gap_km` emits the
    accumulated trace and starts an empty one; otherwise the later point is
    added to the trace. The first point only serves as the reference of the
    first comparison.

    Whatever is still accumulated when the input ends is dropped unless
    `config.flush_trailing` is set.
    """
    config = config or SegmentationConfig()
    points = list(points)

    segments: List[TraceSegment] = []
    coordinates: List[Position] = []
    activities: List[str] = []

    for prev, cur in zip(points, points[1:]):
        if is_break(prev, cur, config):
            segments.append(TraceSegment(
                coordinates=coordinates,
                activity=dominant_activity(activities),
            ))
            coordinates, activities = [], []
            continue

        if cur.activity != UNKNOWN_ACTIVITY:
            activities.append(cur.activity)
        coordinates.append(cur.coordinates)

    if coordinates and config.flush_trailing:
        segments.append(TraceSegment(coordinates=coordinates, activity=dominant_activity(activities)))
    elif coordinates:
        logger.debug(f"Dropping trailing trace of {len(coordinates)} point(s).")

    logger.info(f"Segmented {len(points)} points into {len(segments)} traces.")
    return segments
