import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


class LocationHistoryError(ValueError):
    """Raised when a location history file cannot be parsed as JSON."""


def load_location_history(input_path: str) -> Dict[str, Any]:
    """
    Reads a location history export fully into memory.

    Raises:
        FileNotFoundError: the file does not exist.
        LocationHistoryError: the file is not valid JSON.
    """
    path = Path(input_path)
    if not path.exists():
        raise FileNotFoundError(f"Location history not found: {input_path}")

    logger.info(f"Loading location history from {path}...")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise LocationHistoryError(f"Invalid JSON in {path.name}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("locations"), list):
        logger.info(f"Loaded {len(data['locations'])} location samples.")
    return data


def write_feature_collection(output_path: str, geojson: Dict[str, Any]) -> Path:
    """Serializes a FeatureCollection to `output_path` (UTF-8 JSON) and returns the path."""
    path = Path(output_path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(geojson, f)

    logger.info(f"GeoJSON written: {path} ({len(geojson.get('features', []))} features)")
    return path
