"""ishremote command line. Use --help for usage."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError

from config import IshRemoteConfig, load_config
from core.errors import IshRemoteError, error_logical_id
from core.logging.context import set_log_context
from core.logging.setup import generate_trace_id, setup_logging
from ishremote.folder_location import FolderLocationResolver
from ishremote.schemas import IshObject
from ishremote.session import IshSession, set_current_session

# Project root directory (where .env file is located)
PROJECT_ROOT = Path(__file__).parent.parent.parent

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

logger = logging.getLogger(__name__)

_ish_objects_adapter = TypeAdapter(List[IshObject])


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ishremote",
        description="Repository client operations for publication outputs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Folder path of one publication output
    python -m ishremote folder-location GUID-412E3A98-9AA8-484E-A1AA-3DE3B58947BD

    # Several identifiers, one per line on stdin
    cat ids.txt | python -m ishremote folder-location -

    # Object handles exported as JSON ([{"ishRef": "GUID-..."}, ...])
    python -m ishremote folder-location --objects outputs.json

    # Report every failure instead of stopping at the first one
    python -m ishremote folder-location --collect-errors GUID-1 GUID-2
        """,
    )
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-dir", type=Path, help="Write JSON log files to this directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show progress messages")
    parser.add_argument("--debug", action="store_true", help="Show debug messages")

    subparsers = parser.add_subparsers(dest="command", required=True)

    folder_location = subparsers.add_parser(
        "folder-location",
        help="Print the repository folder path of publication outputs",
    )
    folder_location.add_argument(
        "logical_ids",
        nargs="*",
        metavar="LOGICAL_ID",
        help="Logical identifiers; '-' reads one identifier per line from stdin",
    )
    folder_location.add_argument(
        "--objects",
        metavar="FILE",
        help="JSON array of repository objects carrying 'ishRef'; '-' reads stdin",
    )
    folder_location.add_argument("--ws-base-url", help="Repository web service base URL")
    folder_location.add_argument("--separator", help="Folder path separator (default from config)")
    folder_location.add_argument(
        "--concurrency",
        type=int,
        help="Number of lookups in flight (default from config, 1 = sequential)",
    )
    folder_location.add_argument(
        "--collect-errors",
        action="store_true",
        help="Resolve every identifier and report failures at the end",
    )
    folder_location.add_argument(
        "--json", action="store_true", help="Print results as a JSON array"
    )

    return parser.parse_args(argv)


def read_logical_ids(arguments: Sequence[str]) -> List[str]:
    """Expand '-' (or no arguments on a piped stdin) into identifiers read from stdin."""
    if not arguments and not sys.stdin.isatty():
        arguments = ["-"]

    logical_ids = []
    for argument in arguments:
        if argument == "-":
            logical_ids.extend(line.strip() for line in sys.stdin if line.strip())
        else:
            logical_ids.append(argument)
    return logical_ids


def read_ish_objects(source: str) -> List[IshObject]:
    if source == "-":
        raw = sys.stdin.read()
    else:
        raw = Path(source).read_text(encoding="utf-8")
    return _ish_objects_adapter.validate_json(raw)


def _apply_cli_overrides(config: IshRemoteConfig, args: argparse.Namespace) -> None:
    if args.ws_base_url:
        config.ws_base_url = args.ws_base_url
    if args.separator is not None:
        config.folder_path_separator = args.separator
    if args.concurrency is not None:
        config.resolve_concurrency = args.concurrency
    config.validate()


def _print_error(error: IshRemoteError) -> None:
    logical_id = error_logical_id(error)
    prefix = f"LogicalId[{logical_id}]: " if logical_id else ""
    print(f"Error: {prefix}{error}", file=sys.stderr)


async def run_folder_location(
    session: IshSession,
    args: argparse.Namespace,
    logical_ids: List[str],
    ish_objects: Optional[List[IshObject]],
    max_concurrent: int,
) -> int:
    async with session:
        resolver = FolderLocationResolver(session, max_concurrent=max_concurrent)

        if args.collect_errors:
            if ish_objects is not None:
                logical_ids = [ish_object.ish_ref for ish_object in ish_objects]
            results = await resolver.resolve_many_collect(logical_ids)
            if args.json:
                print(
                    json.dumps(
                        [
                            {
                                "logicalId": result.logical_id,
                                "folderPath": result.folder_path,
                                "error": str(result.error) if result.error else None,
                            }
                            for result in results
                        ],
                        indent=2,
                    )
                )
            else:
                for result in results:
                    if result.ok:
                        print(result.folder_path)
            for result in results:
                if not result.ok:
                    _print_error(result.error)
            return EXIT_OK if all(result.ok for result in results) else EXIT_FAILED

        try:
            if ish_objects is not None:
                folder_paths = await resolver.resolve_objects(ish_objects)
            else:
                folder_paths = await resolver.resolve_many(logical_ids)
        except IshRemoteError as e:
            logger.error(
                "Folder location resolution failed",
                extra={
                    "logical_id": error_logical_id(e),
                    "error_type": type(e).__name__,
                    "error_category": e.category.value,
                },
            )
            _print_error(e)
            return EXIT_FAILED

        if args.json:
            print(json.dumps(folder_paths, indent=2))
        else:
            for folder_path in folder_paths:
                print(folder_path)
        return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv(PROJECT_ROOT / ".env")
    args = parse_args(argv)

    try:
        config = load_config(config_path=args.config)
        _apply_cli_overrides(config, args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.debug:
        console_level = logging.DEBUG
    elif args.verbose:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING

    log_dir = args.log_dir or (Path(config.log_dir) if config.log_dir else None)
    setup_logging(
        session=config.effective_session_name,
        log_dir=log_dir,
        json_format=config.json_logs,
        console_level=console_level,
    )
    set_log_context(operation=args.command, trace_id=generate_trace_id())

    ish_objects = None
    logical_ids: List[str] = []
    try:
        if args.objects:
            ish_objects = read_ish_objects(args.objects)
        else:
            logical_ids = read_logical_ids(args.logical_ids)
    except (OSError, UnicodeDecodeError, ValidationError) as e:
        print(f"Error: cannot read input: {e}", file=sys.stderr)
        return EXIT_USAGE

    if not logical_ids and not ish_objects:
        print("Error: no logical identifiers given", file=sys.stderr)
        return EXIT_USAGE

    try:
        session = IshSession.from_config(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE
    set_current_session(session)

    return asyncio.run(
        run_folder_location(
            session, args, logical_ids, ish_objects, config.resolve_concurrency
        )
    )


if __name__ == "__main__":
    sys.exit(main())
