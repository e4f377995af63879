"""Command line entry point for inspecting datasets and palettes."""
import argparse
import json
import logging
import sys

import yaml

from ezchart.config import load_config
from ezchart.errors import EzChartError
from ezchart.transform import analyze
from ezchart import palette


def setup_logging(log_level: str, log_format: str):
    """Setup logging configuration."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "json":
        fmt = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

    # Logs go to stderr so stdout stays parseable JSON
    logging.basicConfig(
        level=level,
        format=fmt,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr
    )


def load_dataset(path: str):
    """Read a YAML or JSON dataset file."""
    with open(path, 'r') as f:
        return yaml.safe_load(f)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ezchart",
        description="Summarise, rotate and colour chart datasets"
    )
    parser.add_argument(
        "--config",
        "-c",
        help="Path to configuration YAML file"
    )
    parser.add_argument(
        "--log-level",
        help="Override the configured log level"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    summary_cmd = commands.add_parser("summary", help="Print the dataset summary")
    summary_cmd.add_argument("data", help="Dataset file (YAML or JSON)")

    rotate_cmd = commands.add_parser("rotate", help="Print the transposed dataset")
    rotate_cmd.add_argument("data", help="Dataset file (YAML or JSON)")

    palette_cmd = commands.add_parser("palette", help="Print a colour palette")
    kinds = palette_cmd.add_subparsers(dest="kind", required=True)

    for name in ("categorical", "diverging"):
        kind = kinds.add_parser(name, help=f"Fixed {name} palette")
        kind.add_argument("id", type=int, help="Palette id (1-3)")

    seq = kinds.add_parser("sequential", help="Luminosity ramp around a base colour")
    seq.add_argument("color", help="Base hex colour")
    seq.add_argument("count", type=int, help="Number of colours")

    shift = kinds.add_parser("shift", help="Shift the luminosity of colours")
    shift.add_argument("luminosity", type=float, help="Signed luminosity fraction")
    shift.add_argument("colors", nargs="+", help="Hex colours")

    return parser


def run(args, config):
    """Execute a parsed command and return the JSON-ready result."""
    logger = logging.getLogger(__name__)

    if args.command in ("summary", "rotate"):
        logger.info(f"Loading dataset from: {args.data}")
        transform = analyze(load_dataset(args.data), config.summary)
        if args.command == "summary":
            return transform.summary().as_dict()
        return transform.rotate()

    if args.kind == "categorical":
        result = palette.categorical(args.id)
    elif args.kind == "diverging":
        result = palette.diverging(args.id)
    elif args.kind == "sequential":
        result = palette.sequential(args.color, args.count, config.palette.luminosity_step)
    else:
        result = palette.lum_shift(args.colors, args.luminosity)

    if result is None:
        logger.warning(f"No {args.kind} palette with id {args.id}")
    return result


def main(argv=None):
    """Main function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load configuration
    try:
        config = load_config(args.config)
    except EzChartError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    # Setup logging
    setup_logging(args.log_level or config.global_.log_level, config.global_.log_format)
    logger = logging.getLogger(__name__)

    try:
        result = run(args, config)
    except (EzChartError, OSError, yaml.YAMLError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
