"""Main CLI entry point for bsonlite."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .. import __version__
from ..cli.analyze import analyze_file, dump_file
from ..codec.options import CodecOptions
from ..exceptions import BsonliteError
from ..framing import encode_all

logger = logging.getLogger(__name__)


def main() -> int:
    """Main entry point for the bsonlite CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="bsonlite: Binary Document Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bsonlite --dump data.bson                       Print decoded documents
  bsonlite --inspect data.bson                    Show element sizes
  bsonlite --from-json doc.json -o data.bson      Encode JSON object(s)
  bsonlite --version                              Show version
        """,
    )

    commands = parser.add_mutually_exclusive_group()

    commands.add_argument(
        "--dump",
        metavar="FILE",
        type=str,
        help="Decode documents and print them",
    )

    commands.add_argument(
        "--inspect",
        metavar="FILE",
        type=str,
        help="Decode documents and show per-element byte sizes",
    )

    commands.add_argument(
        "--from-json",
        metavar="FILE",
        type=str,
        help="Encode a JSON object (or list of objects) to binary documents",
    )

    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        type=str,
        help="Output file for --from-json (default: stdout)",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject documents whose declared length does not match",
    )

    parser.add_argument(
        "--sort-keys",
        action="store_true",
        help="Write elements sorted by key",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"bsonlite {__version__}",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = CodecOptions(strict_length=args.strict, sort_keys=args.sort_keys)

    command = None
    if args.dump:
        command, path = dump_file, args.dump
    elif args.inspect:
        command, path = analyze_file, args.inspect
    elif args.from_json:
        command, path = None, args.from_json
    else:
        # If no command specified, show help
        parser.print_help()
        return 0

    file_path = Path(path)
    if not file_path.exists():
        print(f"Error: File not found: {file_path}", file=sys.stderr)
        return 1

    try:
        if command is not None:
            command(file_path, options)
        else:
            _encode_json(file_path, args.output, options)
        return 0
    except (BsonliteError, ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _encode_json(file_path: Path, output: str | None, options: CodecOptions) -> None:
    with file_path.open("r", encoding="utf-8") as fp:
        loaded = json.load(fp)

    documents = loaded if isinstance(loaded, list) else [loaded]
    data = encode_all(documents, options)
    logger.debug("Encoded %d document(s), %d bytes", len(documents), len(data))

    if output is None:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        Path(output).write_bytes(data)


if __name__ == "__main__":
    sys.exit(main())
