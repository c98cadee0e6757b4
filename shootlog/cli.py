# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for shootlog

Prints the camera metadata summary of a JPEG file.

Copyright 2025 DNAi inc.
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from shootlog import __version__
from shootlog.core import ExifExtractor, FileReader, OSFileReader
from shootlog.exceptions import ShootlogError
from shootlog.exif_tags import tag_name

logger = logging.getLogger('shootlog')


def setup_logger(debug: bool) -> None:
    """Configure the shootlog logger."""
    if debug:
        log_level = logging.DEBUG
        log_format = '%(levelname)-5s  %(message)s'
    else:
        log_level = logging.WARNING
        log_format = '%(message)s'
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    stream = logging.StreamHandler()
    stream.setFormatter(logging.Formatter(log_format))
    stream.setLevel(log_level)
    logger.setLevel(log_level)
    logger.addHandler(stream)


def format_output(metadata: Dict[str, Any], format_type: str = "json") -> str:
    """
    Format metadata output based on format type.

    Args:
        metadata: Dictionary of metadata
        format_type: Output format ('json', 'text', 'csv')

    Returns:
        Formatted output string
    """
    if format_type == "json":
        return json.dumps(metadata, indent=2, ensure_ascii=False)
    elif format_type == "csv":
        lines = ["Tag,Value"]
        for tag, value in sorted(metadata.items()):
            # Escape quotes in CSV
            value_str = str(value).replace('"', '""')
            lines.append(f'"{tag}","{value_str}"')
        return "\n".join(lines)
    else:  # text format
        lines = []
        for tag, value in sorted(metadata.items()):
            lines.append(f"{tag}: {value}")
        return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shootlog",
        description="Extract camera metadata (EXIF) from a JPEG image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Summary as JSON
  shootlog --input photo.jpg

  # Every decoded tag as text
  shootlog --input photo.jpg --tags -f text
""",
    )
    parser.add_argument('--input', required=True, help="path to the image file")
    parser.add_argument('-f', '--format', dest='format_type', default='json',
                        choices=['json', 'text', 'csv'], help="output format (default: json)")
    parser.add_argument('--tags', action='store_true',
                        help="print every decoded tag instead of the summary")
    parser.add_argument('--max-entries', type=int, metavar='N',
                        help="maximum number of entries read from one IFD")
    parser.add_argument('--date-format', metavar='FMT',
                        help="strftime pattern for the date_time field")
    parser.add_argument('--no-detect-encoding', action='store_true',
                        help="decode non-UTF-8 text as Latin-1 without guessing")
    parser.add_argument('-d', '--debug', action='store_true', help="log decoding details to stderr")
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def _options_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    if args.max_entries is not None:
        options['MaxIFDEntries'] = args.max_entries
    if args.date_format is not None:
        options['DateFormat'] = args.date_format
    if args.no_detect_encoding:
        options['DetectEncoding'] = False
    return options


def main(argv: Optional[List[str]] = None, reader: Optional[FileReader] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status: 0 on success, 1 on extraction failure
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger(args.debug)

    try:
        extractor = ExifExtractor(_options_from_args(args))
    except ValueError as e:
        parser.error(str(e))

    reader = reader or OSFileReader()
    try:
        if args.tags:
            tags = extractor.read_tags(reader.read_file(args.input))
            metadata = {tag_name(tag_id): tag.value for tag_id, tag in tags.items()}
        else:
            metadata = extractor.extract_file(args.input, reader).to_dict()
    except ShootlogError as e:
        print(f"failed to extract exif: {e}", file=sys.stderr)
        return 1

    print(format_output(metadata, args.format_type))
    return 0


if __name__ == "__main__":
    sys.exit(main())
