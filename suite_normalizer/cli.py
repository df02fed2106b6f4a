"""CLI for the liblouis test-suite normalizer."""

import argparse
import logging
import sys
from pathlib import Path

from .config import configure_logging, load_config_from_env
from .errors import NormalizeError
from .models import SchemaRevision
from .normalize import normalize_to_yaml

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="suite-normalizer",
        description='A migration tool to "normalize" the liblouis yaml test files',
    )
    parser.add_argument("yaml", type=Path, help="The yaml file to convert")
    parser.add_argument(
        "-o", "--output", type=Path, metavar="FILE",
        help="Write output to FILE instead of stdout",
    )
    parser.add_argument(
        "--schema", choices=[r.value for r in SchemaRevision], default=None,
        help="Format revision of the input (default: SUITE_NORMALIZER_SCHEMA or 'current')",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config_from_env()
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    configure_logging(cfg, args.verbose)

    revision = SchemaRevision(args.schema) if args.schema else cfg.schema_revision

    try:
        raw = args.yaml.read_bytes()
    except OSError as e:
        print(f"Error: cannot read {args.yaml}: {e.strerror}", file=sys.stderr)
        return 1

    try:
        canonical = normalize_to_yaml(raw, revision)
    except NormalizeError as e:
        print(f"Error: {args.yaml}: {e}", file=sys.stderr)
        return 1

    if not args.output:
        sys.stdout.write(canonical)
        return 0

    try:
        args.output.write_text(canonical, encoding="utf-8")
    except OSError as e:
        print(f"Error: cannot write {args.output}: {e.strerror}", file=sys.stderr)
        return 1
    logger.info("Wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
