import logging
import yaml
from pathlib import Path
from pydantic import BaseModel, Field, ValidationError, AliasChoices

logger = logging.getLogger(__name__)

# --- 1. Define the Shapes (Schemas) ---

class SegmentationConfig(BaseModel):
    """
    Break thresholds for trace segmentation (configs/*.yaml)
    """
    # A gap strictly greater than either threshold closes the current trace
    max_gap_minutes: float = Field(
        5.0, gt=0, validation_alias=AliasChoices('max_gap_minutes', 'time_gap_minutes')
    )
    max_gap_km: float = Field(
        1.0, gt=0, validation_alias=AliasChoices('max_gap_km', 'distance_gap_km')
    )

    # Emit the in-progress trace when the input ends (the reference tool drops it)
    flush_trailing: bool = False

# --- 2. Define the Loaders ---

def load_segmentation_config(yaml_path: str) -> SegmentationConfig:
    """Reads a YAML file, unwraps the optional 'segmentation' block, and validates."""
    path = Path(yaml_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(path, "r", encoding="utf-8") as f:
        raw_data = yaml.safe_load(f) or {}

    # Thresholds may sit at the top level or under a 'segmentation' key
    data = raw_data.get("segmentation", raw_data) if isinstance(raw_data, dict) else {}
    if not isinstance(data, dict):
        data = {}

    try:
        return SegmentationConfig(**data)
    except ValidationError as e:
        logger.error(f"Configuration Error in {path.name}: {e.error_count()} invalid field(s)")
        raise e
