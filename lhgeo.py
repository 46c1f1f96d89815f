import argparse
import logging
import sys

from pydantic import ValidationError

from lhgeo_core.config import SegmentationConfig, load_segmentation_config
from lhgeo_core.geojson import convert_location_history_to_points, convert_location_history_to_traces
from lhgeo_core.store import LocationHistoryError, load_location_history, write_feature_collection

logger = logging.getLogger(__name__)


def run(input_path: str, output_path: str, extract_traces: bool = False, config: SegmentationConfig = None):
    """Reads the whole history, converts it, then writes the output file in one go."""
    location_history = load_location_history(input_path)

    if extract_traces:
        geojson = convert_location_history_to_traces(location_history, config)
    else:
        geojson = convert_location_history_to_points(location_history)

    return write_feature_collection(output_path, geojson)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        usage="%(prog)s <input> <output> [--traces]",
        description="Read a google location history file and turn it into GeoJSON"
    )
    parser.add_argument("input", nargs="?", help="Path to the location history JSON")
    parser.add_argument("output", nargs="?", help="Path of the GeoJSON file to write")
    parser.add_argument("--traces", action="store_true", help="Extract traces instead of points")
    parser.add_argument("--config", help="Path to segmentation YAML config", default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='%(message)s')

    # Both paths are needed; without them just show usage
    if not args.input or not args.output:
        parser.print_help()
        return 0

    config = None
    if args.config:
        try:
            config = load_segmentation_config(args.config)
        except (FileNotFoundError, ValidationError) as e:
            logger.error(f"❌ {e}")
            return 1

    try:
        out_file = run(args.input, args.output, extract_traces=args.traces, config=config)
    except (FileNotFoundError, LocationHistoryError) as e:
        logger.error(f"❌ {e}")
        return 1

    logger.info(f"📄 {'Traces' if args.traces else 'Points'} written to {out_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
