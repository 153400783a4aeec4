import argparse
import json
import logging
import os
import sys
import typing

import yaml

import uzu.constants
import uzu.event
import uzu.mini_notation


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "uzu.yaml"
DEFAULT_FORMAT = "json"
DEFAULT_PRECISION = 4


def load_config (config_path: str = DEFAULT_CONFIG_PATH, required: bool = False) -> dict:

	"""
	Load configuration from a YAML file.

	A missing file falls back to defaults. It is only worth a warning when the
	path was asked for explicitly.
	"""

	if not os.path.exists(config_path):

		if required:
			logger.warning(f"Config file {config_path} not found. Using defaults.")

		else:
			logger.debug(f"No config file at {config_path}. Using defaults.")

		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def format_table (events: typing.List[uzu.event.Event], precision: int = DEFAULT_PRECISION) -> str:

	"""
	Render events as an aligned text table, one row per event.
	"""

	header = ["time", "duration", "sound", "sample", "params"]

	rows = [
		[
			f"{event.time:.{precision}f}",
			f"{event.duration:.{precision}f}",
			event.sound,
			"" if event.sample is None else str(event.sample),
			json.dumps(event.params) if event.params else "",
		]
		for event in events
	]

	widths = [max(len(row[i]) for row in [header] + rows) for i in range(len(header))]

	lines = ["  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in [header] + rows]

	return "\n".join(lines)


def build_argument_parser () -> argparse.ArgumentParser:

	parser = argparse.ArgumentParser(prog="uzu", description="Parse a mini-notation pattern into the events of one cycle")
	parser.add_argument("pattern", help="Pattern text, e.g. \"bd(3,8) [~ sd]*2\"")
	parser.add_argument("--config", default=None, help=f"YAML config file (default: {DEFAULT_CONFIG_PATH})")
	parser.add_argument("--ast", action="store_true", help="Print the syntax tree instead of events")
	parser.add_argument("--format", choices=["json", "table"], default=None, help="Event output format (default: json)")
	parser.add_argument("--max-depth", type=int, default=None, help=f"Maximum group nesting (default: {uzu.constants.DEFAULT_MAX_DEPTH})")
	parser.add_argument("--verbose", action="store_true", help="Log parser decisions such as literal fallbacks")

	return parser


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Command-line entry point. Returns the process exit status.
	"""

	parser = build_argument_parser()
	args = parser.parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	config = load_config(args.config or DEFAULT_CONFIG_PATH, required=args.config is not None)

	parser_config = config.get('parser') or {}
	output_config = config.get('output') or {}

	max_depth = args.max_depth if args.max_depth is not None else parser_config.get('max_depth', uzu.constants.DEFAULT_MAX_DEPTH)
	output_format = args.format or output_config.get('format', DEFAULT_FORMAT)
	precision = output_config.get('precision', DEFAULT_PRECISION)

	if not 1 <= max_depth <= uzu.constants.MAX_DEPTH_LIMIT:
		parser.error(f"max depth must be between 1 and {uzu.constants.MAX_DEPTH_LIMIT}")

	if output_format not in ("json", "table"):
		parser.error(f"unknown output format {output_format!r}")

	if args.ast:
		result = uzu.mini_notation.parse_ast(args.pattern, max_depth=max_depth)
	else:
		result = uzu.mini_notation.parse(args.pattern, max_depth=max_depth)

	if isinstance(result, uzu.mini_notation.ParseError):
		logger.error(f"Could not parse pattern: {result}")
		print(f"error: {result}", file=sys.stderr)
		print(f"  at: {result.remaining}", file=sys.stderr)
		return 1

	if args.ast:
		print(json.dumps(result.to_dict(), indent=2))

	elif output_format == "table":
		print(format_table(result, precision))

	else:
		print(json.dumps([event.to_dict() for event in result], indent=2))

	return 0


if __name__ == "__main__":
	sys.exit(main())
