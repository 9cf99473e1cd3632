"""Command-line entry point: catalog snapshot in, Traefik dynamic config out."""

import argparse
import os
import sys

import yaml

from catalog2traefik.core.constants import DEFAULT_CONFIG_FILE, DEFAULT_OUTPUT_FILE
from catalog2traefik.core.convert import build_fragments
from catalog2traefik.core.merge import merge_configurations
from catalog2traefik.io.config import load_config, save_config
from catalog2traefik.io.output import write_configuration
from catalog2traefik.io.parsing import items_from_entries, parse_catalog
from catalog2traefik.pacts.errors import ConfigError
from catalog2traefik.pacts.types import BuildContext


def emit_warnings(warnings: list[str]) -> None:
    """Print all warnings to stderr."""
    for w in warnings:
        print(f"⚠ {w}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Convert a Consul catalog snapshot to a Traefik dynamic configuration"
    )
    parser.add_argument(
        "--catalog", required=True,
        help="YAML/JSON file with Consul health-service entries",
    )
    parser.add_argument(
        "--config",
        help=f"Path to {DEFAULT_CONFIG_FILE} (default: <output-dir>/{DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--output-dir", default=".",
        help="Where to write the dynamic configuration (default: .)",
    )
    parser.add_argument(
        "--output-file", default=DEFAULT_OUTPUT_FILE,
        help=f"Name of the generated file (default: {DEFAULT_OUTPUT_FILE})",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Also print why each skipped entry was skipped",
    )
    args = parser.parse_args(argv)

    config_path = args.config or os.path.join(args.output_dir, DEFAULT_CONFIG_FILE)
    first_run = not os.path.exists(config_path)
    try:
        config = load_config(config_path)
        entries = parse_catalog(args.catalog)
    except (OSError, ValueError, yaml.YAMLError, ConfigError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Parsed catalog: {len(entries)} entries", file=sys.stderr)

    ctx = BuildContext(config=config)
    items = items_from_entries(entries, config, ctx.warnings)
    report = build_fragments(items, ctx)
    conf = merge_configurations(report.configurations, ctx.warnings)

    emit_warnings(ctx.warnings)
    if args.verbose:
        for key, reason in report.skipped.items():
            print(f"skipped {key}: {reason}", file=sys.stderr)
    print(f"Built {len(report.configurations)} fragment(s), "
          f"skipped {len(report.skipped)}", file=sys.stderr)

    os.makedirs(args.output_dir, exist_ok=True)
    write_configuration(conf, args.output_dir, filename=args.output_file)

    # First run: persist the defaults next to the output
    if first_run:
        os.makedirs(os.path.dirname(config_path) or ".", exist_ok=True)
        save_config(config_path, config)
        print(f"Wrote {config_path}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
