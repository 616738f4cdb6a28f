"""
flowreader/cli.py
Command-line interface for flowreader.
Read-only: nothing here writes to the Wispr Flow database.

USAGE:
  python -m flowreader.cli list --limit 20 --app Slack
  python -m flowreader.cli search "deploy" --limit 5
  python -m flowreader.cli export --format csv --output june.csv \\
      --start-date 2025-06-01 --end-date 2025-06-30
  python -m flowreader.cli stats --group-by week
  python -m flowreader.cli patterns --input export.json

Every command is also available under the `wispr` group
(`flowreader wispr list ...`), for scripts written against that layout.

EXAMPLES:
  # Database somewhere else
  python -m flowreader.cli --db ~/Backups/flow.sqlite stats

  # Or via environment
  FLOWREADER_DB=~/Backups/flow.sqlite python -m flowreader.cli list
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from flowreader.aggregators.statistics import compute_statistics
from flowreader.aggregators.work_patterns import analyze_work_patterns, load_export_file
from flowreader.config import ensure_config, resolve_db_path
from flowreader.errors import FlowReaderError
from flowreader.exporters.formats import EXPORT_FORMATS, export_records, write_export
from flowreader.report import (
    render_listing,
    render_search_results,
    render_statistics,
    render_work_patterns,
)
from flowreader.store import RecordStore
from flowreader.timestamps import PERIOD_GRANULARITIES

logger = logging.getLogger(__name__)

# ANSI colors, used for status lines only, never for exported content
GREEN  = '\033[92m'
RED    = '\033[91m'
RESET  = '\033[0m'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog        = 'flowreader',
        description = 'Query and analyze Wispr Flow voice transcriptions',
        formatter_class = argparse.RawDescriptionHelpFormatter,
        epilog = """
PRIVACY NOTE:
  The database is opened read-only. All processing is local.
        """
    )
    parser.add_argument(
        '--db',
        default = None,
        help    = 'Path to flow.sqlite (default: config, $FLOWREADER_DB, or the Wispr Flow location)',
    )
    parser.add_argument(
        '--verbose', '-v',
        action  = 'store_true',
        help    = 'Enable debug logging',
    )

    commands = parser.add_subparsers(dest='command', metavar='COMMAND')
    commands.required = True
    _add_query_commands(commands)

    wispr = commands.add_parser('wispr', help='Commands for Wispr Flow transcriptions')
    wispr_commands = wispr.add_subparsers(dest='wispr_command', metavar='COMMAND')
    wispr_commands.required = True
    _add_query_commands(wispr_commands)

    return parser


def _add_query_commands(commands) -> None:
    p = commands.add_parser('list', help='List recent transcriptions')
    p.add_argument('--limit', '-l', type=int, default=None,
                   help='Number of transcriptions to show (default: 10)')
    p.add_argument('--app', '-a', default=None,
                   help='Filter by application name (exact match)')
    p.add_argument('--shared-only', action='store_true',
                   help='Show only shared transcriptions')
    p.set_defaults(func=_cmd_list)

    p = commands.add_parser('search', help='Search transcriptions by text')
    p.add_argument('query', help='Search query')
    p.add_argument('--limit', '-l', type=int, default=None,
                   help='Number of results to show (default: 10)')
    p.set_defaults(func=_cmd_search)

    p = commands.add_parser('export', help='Export transcriptions to json, csv or txt')
    p.add_argument('--format', '-f', type=str.lower, default=None,
                   choices=list(EXPORT_FORMATS),
                   help='Output format (default: json)')
    p.add_argument('--output', '-o', type=Path, default=None,
                   help='Output file path (default: stdout)')
    p.add_argument('--start-date', default=None, help='Start date (YYYY-MM-DD)')
    p.add_argument('--end-date', default=None, help='End date (YYYY-MM-DD), whole day included')
    p.set_defaults(func=_cmd_export)

    p = commands.add_parser('stats', help='Show statistics about transcriptions')
    p.add_argument('--group-by', default=None, choices=list(PERIOD_GRANULARITIES),
                   help='Group activity by period (default: day)')
    p.set_defaults(func=_cmd_stats)

    p = commands.add_parser('patterns', help='Analyze work-related dictation patterns')
    p.add_argument('--input', '-i', type=Path, default=None,
                   help='Analyze a JSON export instead of the database')
    p.add_argument('--start-date', default=None, help='Start date (YYYY-MM-DD)')
    p.add_argument('--end-date', default=None, help='End date (YYYY-MM-DD)')
    p.set_defaults(func=_cmd_patterns)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args   = parser.parse_args(argv)

    # ── LOGGING SETUP ────────────────────────────────────────
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level   = log_level,
        format  = '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt = '%H:%M:%S',
    )

    config  = ensure_config()
    db_path = resolve_db_path(args.db, config)
    logger.debug(f"Command {args.command} | db={db_path}")

    try:
        args.func(args, config, db_path)
    except (FlowReaderError, ValueError) as e:
        _error(str(e))
        return 1
    return 0


# ── COMMANDS ─────────────────────────────────────────────────

def _cmd_list(args, config: Dict[str, Any], db_path: Path) -> None:
    limit = args.limit if args.limit is not None else config['default_limit']
    with RecordStore(db_path) as store:
        records = store.list_transcriptions(
            limit       = limit,
            application = args.app,
            shared_only = args.shared_only,
        )
    _print(render_listing(records))


def _cmd_search(args, config: Dict[str, Any], db_path: Path) -> None:
    limit = args.limit if args.limit is not None else config['default_limit']
    with RecordStore(db_path) as store:
        records = store.search_transcriptions(args.query, limit=limit)
    _print(render_search_results(records, args.query))


def _cmd_export(args, config: Dict[str, Any], db_path: Path) -> None:
    fmt = args.format or config['export_format']
    with RecordStore(db_path) as store:
        records = store.export_range(args.start_date, args.end_date)
    content = export_records(records, fmt)

    if args.output is None:
        _print(content)
        return
    write_export(content, args.output)
    _ok(f"Exported {len(records)} transcriptions to {args.output}")


def _cmd_stats(args, config: Dict[str, Any], db_path: Path) -> None:
    group_by = args.group_by or config['group_by']
    with RecordStore(db_path) as store:
        records = store.all_transcriptions()
    _print(render_statistics(compute_statistics(records, group_by=group_by)))


def _cmd_patterns(args, config: Dict[str, Any], db_path: Path) -> None:
    if args.input is not None:
        records = load_export_file(args.input)
    else:
        with RecordStore(db_path) as store:
            records = store.export_range(args.start_date, args.end_date)
    _print(render_work_patterns(analyze_work_patterns(records)))


# ── PRINT HELPERS ────────────────────────────────────────────

def _ok(msg):    _print(f"{GREEN}✓{RESET} {msg}")
def _print(msg): print(msg)


def _error(msg):
    print(f"{RED}Error: {msg}{RESET}", file=sys.stderr)


if __name__ == '__main__':
    sys.exit(main())
