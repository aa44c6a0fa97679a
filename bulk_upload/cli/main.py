from __future__ import annotations

import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, UploadConfig, load_config
from ..locations.directory import LocationDataError, LocationDirectory, load_location_directory
from ..locations.locale import suggest_search_term
from ..locations.matcher import LocationMatcher
from ..logging.init import get_logger, log_summary, set_debug
from ..services.orchestrator import ProcessingError, UploadContext, build_context, process_all, scan_sheet_files
from ..services.summary import render_file_line, render_summary_line
from ..sheet.headers import build_header_map
from ..sheet.reader import SheetError, read_sheet_file, rows_to_properties

"""CLI entrypoint.

- Load .env, then the YAML config (--config / BULK_UPLOAD_CONFIG / config/upload.yml)
- Validate every spreadsheet in source_directory and print the SUMMARY line
- Lookup helpers: --search-city, --suggest, --inspect-data

Exit codes: 0 every row valid, 2 invalid rows or unreadable files, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_INVALID_ROWS = 2

CONFIG_ENV_VAR = "BULK_UPLOAD_CONFIG"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env via python-dotenv; existing variables are overridden."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="bulk-upload", description="Bulk property upload validator")
    p.add_argument("--config", help=f"Config file (default: ${CONFIG_ENV_VAR} or {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--auto-correct", action="store_true", help="Auto-correct high-confidence city typos")
    p.add_argument("--inspect-data", action="store_true", help="Print mapped headers & first rows then exit")
    p.add_argument("--search-city", metavar="QUERY", help="Search cities across all countries then exit")
    p.add_argument("--limit", type=int, default=10, help="Max hits for --search-city (default: 10)")
    p.add_argument("--suggest", metavar="QUERY", help="Print a 'did you mean' suggestion then exit")
    p.add_argument("--locale", help="Locale tag for --suggest (e.g. en-GB)")
    return p.parse_args(argv)


def _resolve_config_path(args: argparse.Namespace) -> Path:
    return Path(args.config or os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)


def _lookup_directory(config_path: Path) -> LocationDirectory:
    """Directory for lookup modes: config's locations_file when a config exists."""
    if config_path.exists():
        cfg = load_config(config_path)
        if cfg.locations_file:
            return load_location_directory(Path(cfg.locations_file))
    return load_location_directory()


def _search_city(directory: LocationDirectory, query: str, limit: int) -> int:
    hits = LocationMatcher(directory).search_cities_globally(query, limit)
    if not hits:
        print(f"search: no cities match '{query}'")
        return EXIT_SUCCESS_ALL
    for hit in hits:
        print(f"{hit.city}\t{hit.country}")
    return EXIT_SUCCESS_ALL


def _suggest(directory: LocationDirectory, query: str, locale: str | None) -> int:
    suggestion = suggest_search_term(query, locale, directory)
    if suggestion is None:
        print(f"suggest: no suggestion for '{query}'")
    else:
        print(f"did you mean: {suggestion.term} ({suggestion.source}, score={suggestion.score:.2f})")
    return EXIT_SUCCESS_ALL


def _inspect_data(cfg: UploadConfig) -> int:
    try:
        files = scan_sheet_files(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no spreadsheet files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            grid = read_sheet_file(f)
        except SheetError as e:
            print(f"  read_error: {e}")
            continue
        if not grid:
            print("  (empty)")
            continue
        header_map = build_header_map(list(grid[0]))
        mapped = {str(grid[0][i]): field.value for i, field in header_map.items()}
        unmapped = [h for i, h in enumerate(grid[0]) if i not in header_map and h is not None]
        print(f"  headers={mapped} unmapped={unmapped}")
        for row in rows_to_properties(grid[:4], source=f.name):
            values = {field.value: row.get(field) for field in header_map.values()}
            print(f"    row {row.row_number}: {values}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = get_logger()

    # None のときのみ sys.argv を読む ([] はテストからの明示的な空引数)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug()
        logger.debug("debug mode enabled")

    config_path = _resolve_config_path(args)

    if args.search_city is not None or args.suggest is not None:
        try:
            directory = _lookup_directory(config_path)
        except (ConfigError, LocationDataError) as e:
            logger.error(f"lookup: {e}")
            return EXIT_FATAL
        if args.search_city is not None:
            return _search_city(directory, args.search_city, args.limit)
        return _suggest(directory, args.suggest, args.locale)

    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory_path = Path(cfg.source_directory)
    if not directory_path.exists():
        logger.error(f"directory not found: {directory_path}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        context: UploadContext = build_context(cfg)
    except LocationDataError as e:
        logger.error(f"locations: {e}")
        return EXIT_FATAL
    if args.auto_correct and not context.auto_correct:
        context = replace(context, auto_correct=True)

    logger.info(f"Validating files from: {directory_path} auto_correct={context.auto_correct}")

    try:
        result = process_all(cfg, context)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    for stat in result.file_stats:
        if stat.status == "success":
            logger.info(render_file_line(stat))

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary が "SUMMARY " を付与するので除去して渡す
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0 or result.invalid_rows > 0:
        return EXIT_INVALID_ROWS
    return EXIT_SUCCESS_ALL
