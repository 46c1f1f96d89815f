import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from lhgeo_core.config import SegmentationConfig
from lhgeo_core.models import NormalizedPoint, TraceSegment
from lhgeo_core.points import extract_points
from lhgeo_core.traces import segment_traces

logger = logging.getLogger(__name__)


def _position(coordinates) -> List[Optional[float]]:
    # NaN is not valid JSON; malformed axes serialize as null
    return [None if isinstance(v, float) and math.isnan(v) else v for v in coordinates]


def feature_collection(features: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": features
    }


def point_feature(point: NormalizedPoint) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "properties": {
            "activity": point.activity,
            "accuracy": point.accuracy,
            "timestampMs": point.timestampMs
        },
        "geometry": {
            "type": "Point",
            "coordinates": _position(point.coordinates)
        }
    }


def trace_feature(segment: TraceSegment) -> Dict[str, Any]:
    # A trace without any labelled point has no activity property at all
    properties = {}
    if segment.activity is not None:
        properties["activity"] = segment.activity

    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {
            "type": "LineString",
            "coordinates": [_position(c) for c in segment.coordinates]
        }
    }


def points_to_feature_collection(points: Sequence[NormalizedPoint]) -> Dict[str, Any]:
    """Wraps normalized points into Point features."""
    return feature_collection([point_feature(p) for p in points])


def traces_to_feature_collection(segments: Sequence[TraceSegment]) -> Dict[str, Any]:
    """Wraps trace segments into LineString features."""
    return feature_collection([trace_feature(s) for s in segments])


def _locations(location_history: Any) -> List[Dict[str, Any]]:
    if not isinstance(location_history, dict):
        logger.warning("Location history is not a JSON object; treating it as empty.")
        return []

    locations = location_history.get("locations")
    if locations is None:
        logger.warning("Location history has no 'locations' field; treating it as empty.")
        return []
    if not isinstance(locations, list):
        logger.warning(f"'locations' should be a list, got {type(locations).__name__}; treating it as empty.")
        return []
    return locations


def convert_location_history_to_points(location_history: Dict[str, Any]) -> Dict[str, Any]:
    """Location history -> FeatureCollection of timestamp-ordered Point features."""
    points = extract_points(_locations(location_history))
    return points_to_feature_collection(points)


def convert_location_history_to_traces(location_history: Dict[str, Any],
                                       config: Optional[SegmentationConfig] = None) -> Dict[str, Any]:
    """Location history -> FeatureCollection of LineString traces split on time/distance gaps."""
    points = extract_points(_locations(location_history))
    return traces_to_feature_collection(segment_traces(points, config))
