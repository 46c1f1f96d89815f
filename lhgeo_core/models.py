from typing import List, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict

UNKNOWN_ACTIVITY = "UNKNOWN"

# (longitude, latitude) in decimal degrees, GeoJSON axis order
Position = Tuple[float, float]


class NormalizedPoint(BaseModel):
    """
    One location sample after unit conversion and activity resolution.
    Malformed samples still produce a point (NaN coordinates, None timestamp).
    """
    model_config = ConfigDict(frozen=True)

    coordinates: Position
    timestampMs: Optional[int] = None
    accuracy: Optional[Union[int, float]] = None
    activity: str = UNKNOWN_ACTIVITY


class TraceSegment(BaseModel):
    """A run of points with no qualifying time/distance gap, reduced to a path and one activity."""
    model_config = ConfigDict(frozen=True)

    coordinates: List[Position] = []
    activity: Optional[str] = None
