#!/usr/bin/env python3
"""
CLI entrypoint for statelabel.

Usage:
    statelabel <program.py> [options]
    statelabel toggle.py -c toggle.yml -o out/
    statelabel toggle.py --format dot --depth-limit 20

Returns:
    0: search finished, output written
    2: search terminated early or hit a constraint
    3: Error (missing program, bad configuration)
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import (
    DEPTH_LIMIT_KEY, FORMAT_KEY, MAX_STATES_KEY, OUTPUT_DIR_KEY, LabelConfig,
)
from .exceptions import ConfigurationError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statelabel",
        description="Explore a Python program's state space and label its states",
    )
    parser.add_argument("target", type=Path, help="Python program to explore")
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="YAML label configuration (providers and their targets)",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        help="Directory for the .lab/.dot files (default: label.output_dir or .)",
    )
    parser.add_argument(
        "--format",
        choices=["text", "dot", "both"],
        help="Output format(s) to write (default: both)",
    )
    parser.add_argument(
        "--depth-limit",
        type=int,
        help="Do not expand states deeper than this",
    )
    parser.add_argument(
        "--max-states",
        type=int,
        help="Stop the search after this many states",
    )
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    return parser


def _load_config(args: argparse.Namespace) -> LabelConfig:
    config = LabelConfig.load(args.config) if args.config else LabelConfig()
    overrides = {
        OUTPUT_DIR_KEY: str(args.output_dir) if args.output_dir else None,
        FORMAT_KEY: args.format,
        DEPTH_LIMIT_KEY: args.depth_limit,
        MAX_STATES_KEY: args.max_states,
    }
    return config.with_overrides(**{key.replace(".", "__"): value for key, value in overrides.items()})


def _create_writers(config: LabelConfig) -> list:
    from .labels import StateLabelDot, StateLabelText

    writers = []
    for fmt in config.formats:
        if fmt == "text":
            writers.append(StateLabelText(config))
        elif fmt == "dot":
            writers.append(StateLabelDot(config))
    return writers


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    if not args.target.exists():
        print(f"Error: File not found: {args.target}", file=sys.stderr)
        return 3
    if args.config and not args.config.exists():
        print(f"Error: File not found: {args.config}", file=sys.stderr)
        return 3

    try:
        config = _load_config(args)
        writers = _create_writers(config)
        from .search import Search
        search = Search(args.target, config, writers)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 3

    if args.verbose:
        names = ", ".join(type(p).__name__ for p in writers[0].providers) if writers else ""
        print(f"Exploring: {args.target}")
        print(f"Providers: {names or '(none)'}")

    try:
        search.run()
    except SyntaxError as e:
        print(f"Error: Cannot compile {args.target}: {e}", file=sys.stderr)
        return 3

    print(f"States: {search.state_count}")
    for writer in writers:
        print(f"Labels ({writer.extension}): {len(writer.registry)}")
    print(f"Output: {config.output_dir}")

    if search.terminated or search.search_constraint is not None:
        constraint = search.search_constraint or "terminated"
        print(f"Search incomplete: {constraint}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
