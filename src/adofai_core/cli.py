"""
Command-line shell around the level core.

This is the only module that reads or writes files. Every subcommand
reads one level, runs one core operation and writes the result to
--output (or back in place).

    adofai-core format level.adofai
    adofai-core upgrade level.adofai -o level_v16.adofai
    adofai-core info level.adofai
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from adofai_core.analyzer import analyze_level, format_report
from adofai_core.backends.adofai_format import export_level
from adofai_core.config import EVENT_PRESETS, ConfigError, FormatOptions, load_options
from adofai_core.level_edit import clear_decorations, clear_events
from adofai_core.level_utils import (
    DOWNGRADE,
    UPGRADE,
    compress_level_text,
    format_level_text,
    transform_level_text,
)
from adofai_core.serialization import document_to_yaml
from adofai_core.string_parser import LevelParseError, parse_level_metadata, parse_or_raise

logger = logging.getLogger(__name__)


def read_level_text(path: str) -> str:
    # utf-8-sig drops a BOM; the parser tolerates one anyway
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()


def write_text(path: str, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def _write_result(args: argparse.Namespace, result) -> int:
    if not result.success:
        logger.error("%s failed for %s: %s", args.command, args.level, result.message)
        return 1
    target = args.output or args.level
    write_text(target, result.content)
    logger.info("Wrote %s", target)
    return 0


def _cmd_format(args: argparse.Namespace, options: FormatOptions) -> int:
    return _write_result(args, format_level_text(read_level_text(args.level), options))


def _cmd_compress(args: argparse.Namespace, options: FormatOptions) -> int:
    return _write_result(args, compress_level_text(read_level_text(args.level)))


def _cmd_upgrade(args: argparse.Namespace, options: FormatOptions) -> int:
    return _write_result(args, transform_level_text(read_level_text(args.level), UPGRADE, options))


def _cmd_downgrade(args: argparse.Namespace, options: FormatOptions) -> int:
    return _write_result(args, transform_level_text(read_level_text(args.level), DOWNGRADE, options))


def _cmd_clear_events(args: argparse.Namespace, options: FormatOptions) -> int:
    document = parse_or_raise(read_level_text(args.level))
    if args.preset == "decorations":
        removed = clear_decorations(document)
    else:
        removed = clear_events(document, args.preset)
    logger.info("Removed %d entries", removed)
    target = args.output or args.level
    write_text(target, export_level(document, options))
    return 0


def _cmd_info(args: argparse.Namespace, options: FormatOptions) -> int:
    text = read_level_text(args.level)
    if args.metadata_only:
        document = parse_level_metadata(text, options.metadata_stop_key)
    else:
        document = parse_or_raise(text)
    print(format_report(analyze_level(document)))
    return 0


def _cmd_to_yaml(args: argparse.Namespace, options: FormatOptions) -> int:
    document = parse_or_raise(read_level_text(args.level))
    yaml_text = document_to_yaml(document)
    if args.output:
        write_text(args.output, yaml_text)
    else:
        sys.stdout.write(yaml_text)
    return 0


_COMMANDS = {
    "format": _cmd_format,
    "compress": _cmd_compress,
    "upgrade": _cmd_upgrade,
    "downgrade": _cmd_downgrade,
    "clear-events": _cmd_clear_events,
    "info": _cmd_info,
    "to-yaml": _cmd_to_yaml,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="adofai-core", description="Format, migrate and inspect .adofai levels")
    parser.add_argument("--config", help="YAML file with format options (indent_char, indent_step, ...)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("format", "Rewrite a level in the canonical layout"),
        ("compress", "Rewrite a level as single-line JSON"),
        ("upgrade", "Upgrade a level to version 15/16"),
        ("downgrade", "Downgrade a level to version 8"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("level", help="Path to .adofai file")
        cmd.add_argument("-o", "--output", help="Output path (default: overwrite input)")

    clear = sub.add_parser("clear-events", help="Remove events by preset")
    clear.add_argument("level", help="Path to .adofai file")
    clear.add_argument("preset", choices=sorted(EVENT_PRESETS) + ["decorations"])
    clear.add_argument("-o", "--output", help="Output path (default: overwrite input)")

    info = sub.add_parser("info", help="Print a level report")
    info.add_argument("level", help="Path to .adofai file")
    info.add_argument("--metadata-only", action="store_true", help="Stop parsing at the event list")

    to_yaml = sub.add_parser("to-yaml", help="Dump a parsed level as YAML")
    to_yaml.add_argument("level", help="Path to .adofai file")
    to_yaml.add_argument("-o", "--output", help="Output path (default: stdout)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        options = load_options(args.config) if args.config else FormatOptions()
        return _COMMANDS[args.command](args, options)
    except (OSError, UnicodeDecodeError, ConfigError, LevelParseError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
