"""Main CLI entry point."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any


def main(argv: list[str] | None = None) -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(prog="jgrants-finder", description="J-Grants subsidy finder")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML (environment variables override it)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("ping", help="Health check")

    # search
    search_parser = subparsers.add_parser("search", help="Search subsidies")
    search_parser.add_argument("--keyword", type=str, default=None, help="Keyword (min 2 characters)")
    search_parser.add_argument(
        "--sort",
        choices=["created_date", "acceptance_start_datetime", "acceptance_end_datetime"],
        default=None,
    )
    search_parser.add_argument("--order", choices=["ASC", "DESC"], default=None)
    search_parser.add_argument(
        "--acceptance",
        type=int,
        choices=[0, 1],
        default=None,
        help="1: accepting applications only (default), 0: all",
    )
    search_parser.add_argument("--use-purpose", type=str, default=None)
    search_parser.add_argument("--industry", type=str, default=None)
    search_parser.add_argument("--target-number-of-employees", type=str, default=None)
    search_parser.add_argument("--target-area-search", type=str, default=None)
    search_parser.add_argument("--output", type=Path, default=None, help="Write JSON to file")

    # detail
    detail_parser = subparsers.add_parser("detail", help="Fetch a subsidy and store its attachments")
    detail_parser.add_argument("id", type=str, help="Subsidy id")
    detail_parser.add_argument(
        "--include-file-data",
        action="store_true",
        help="Keep base64 attachment data in the output",
    )
    detail_parser.add_argument("--output", type=Path, default=None, help="Write JSON to file")

    # file
    file_parser = subparsers.add_parser("file", help="Show a stored attachment as markdown or base64")
    file_parser.add_argument("file_id", type=str)
    file_parser.add_argument("--format", choices=["markdown", "base64"], default="markdown")
    file_parser.add_argument("--output", type=Path, default=None, help="Write JSON to file")

    # convert
    convert_parser = subparsers.add_parser("convert", help="Convert a local file to markdown")
    convert_parser.add_argument("path", type=Path)
    convert_parser.add_argument("--mime", type=str, default=None, help="Declared media type")
    convert_parser.add_argument("--output", type=Path, default=None, help="Write JSON to file")

    args = parser.parse_args(argv)

    from jgrants_finder.config import Settings

    settings = Settings.load(args.config)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "ping":
        _run_ping(args)
    elif args.command == "search":
        _run_search(args, settings)
    elif args.command == "detail":
        _run_detail(args, settings)
    elif args.command == "file":
        _run_file(args, settings)
    elif args.command == "convert":
        _run_convert(args)
    else:
        parser.print_help()


def _emit(data: Any, output: Path | None) -> None:
    text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    if output:
        output.write_text(text, encoding="utf-8")
        print(f"Wrote {output}")
    else:
        print(text)


def _run_ping(args: argparse.Namespace) -> None:
    from jgrants_finder.tools import ping

    _emit(ping(), None)


def _run_search(args: argparse.Namespace, settings) -> None:
    """Run search command."""
    from jgrants_finder.connectors.jgrants import JGrantsAPIError, JGrantsClient
    from jgrants_finder.models.subsidy import SearchParams
    from jgrants_finder.tools import search_subsidies

    params = SearchParams(
        keyword=args.keyword,
        sort=args.sort,
        order=args.order,
        acceptance=args.acceptance,
        use_purpose=args.use_purpose,
        industry=args.industry,
        target_number_of_employees=args.target_number_of_employees,
        target_area_search=args.target_area_search,
    )
    client = JGrantsClient(settings.api_base_url)
    try:
        data = search_subsidies(client, params)
    except JGrantsAPIError as e:
        raise SystemExit(f"search_subsidies failed: {e}")
    finally:
        client.close()
    _emit(data, args.output)


def _run_detail(args: argparse.Namespace, settings) -> None:
    """Run detail command."""
    from jgrants_finder.connectors.jgrants import JGrantsAPIError, JGrantsClient
    from jgrants_finder.tools import get_subsidy_detail, open_store

    store = open_store(settings)
    client = JGrantsClient(settings.api_base_url)
    try:
        data = get_subsidy_detail(client, store, args.id, include_file_data=args.include_file_data)
    except JGrantsAPIError as e:
        raise SystemExit(f"get_subsidy_detail failed: {e}")
    finally:
        client.close()
    _emit(data, args.output)
    for warning in data.get("file_warnings", []):
        print(warning, file=sys.stderr)


def _run_file(args: argparse.Namespace, settings) -> None:
    """Run file command."""
    from jgrants_finder.tools import FileNotFound, get_file_content, open_store

    store = open_store(settings)
    try:
        data = get_file_content(store, args.file_id, args.format)
    except FileNotFound as e:
        raise SystemExit(str(e))
    except OSError as e:
        raise SystemExit(f"get_file_content failed: {e}")
    _emit(data, args.output)


def _run_convert(args: argparse.Namespace) -> None:
    """Run convert command."""
    from jgrants_finder.attachments import convert_file_to_markdown

    result = convert_file_to_markdown(args.path, args.mime)
    _emit(result.model_dump(exclude_none=True), args.output)


if __name__ == "__main__":
    main()
