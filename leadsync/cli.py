"""Command line entry point: sync, dry-run or inspect form notification emails."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Tuple

from leadsync.core.config import Settings, load_settings
from leadsync.core.errors import LeadSyncError
from leadsync.core.logging import configure_logging
from leadsync.core.models import RawMessage
from leadsync.extraction.markup import DEFAULT_HEURISTICS, parse_html
from leadsync.extraction.patterns import resolve_field
from leadsync.ingestion import ImapMailbox, load_messages, read_mailbox
from leadsync.processing.pipeline import BatchSummary, run_batch
from leadsync.reporting import lead_to_row, leads_to_rows, write_csv, write_excel
from leadsync.storage import LeadStore

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 1000


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--eml-dir",
        type=Path,
        help="Read saved .eml files from this directory instead of the IMAP inbox",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one subcommand per operation."""

    parser = argparse.ArgumentParser(
        prog="leadsync",
        description="Turn quote-request emails into CRM leads",
    )
    parser.add_argument("--env-file", type=Path, help="Env file with IMAP and database settings")
    parser.add_argument("--log-level", help="Logging level (defaults to LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command")

    sync = subparsers.add_parser("sync", help="Extract leads and save them to the database")
    _add_source_args(sync)
    sync.add_argument("--database-url", help="SQLAlchemy URL (defaults to DATABASE_URL)")
    sync.add_argument(
        "--create-schema",
        action="store_true",
        help="Create the leads table when it does not exist",
    )

    test = subparsers.add_parser("test", help="Extract leads without saving them")
    _add_source_args(test)
    test.add_argument("--output", type=Path, help="CSV file to write extracted leads to")
    test.add_argument("--excel-output", type=Path, help="Excel file to write extracted leads to")

    debug = subparsers.add_parser("debug", help="Show how the first message is read")
    _add_source_args(debug)

    return parser


def _collect_messages(
    args: argparse.Namespace,
    settings: Settings,
    mark_seen: bool,
) -> Tuple[List[RawMessage], List[str]]:
    if args.eml_dir:
        return load_messages(args.eml_dir)
    with ImapMailbox(settings) as mailbox:
        return read_mailbox(mailbox, mark_seen=mark_seen)


def _log_alerts(summary: BatchSummary) -> None:
    if summary.alerts:
        logger.warning("Encountered %d alerts during the run", len(summary.alerts))
        for alert in summary.alerts:
            logger.warning("Alert: %s", alert)


def run_sync(args: argparse.Namespace, settings: Settings) -> int:
    database_url = args.database_url or settings.require_database()
    with LeadStore.from_url(database_url) as store:
        if args.create_schema:
            store.ensure_schema()
        messages, alerts = _collect_messages(args, settings, mark_seen=True)
        summary = run_batch(messages, store)
        stored = store.count()
    summary.alerts[:0] = alerts
    _log_alerts(summary)
    print(f"Email sync complete: {summary.describe()}")
    print(f"Leads in database: {stored}")
    return 0


def run_test(args: argparse.Namespace, settings: Settings) -> int:
    messages, alerts = _collect_messages(args, settings, mark_seen=False)
    summary = run_batch(messages, store=None)
    summary.alerts[:0] = alerts
    _log_alerts(summary)

    for outcome in summary.outcomes:
        print(f"--- {outcome.message.sender} | {outcome.message.subject}: {outcome.status}")
        if outcome.lead is None:
            continue
        for header, value in lead_to_row(outcome.lead).items():
            if value:
                print(f"  {header}: {value}")

    rows = leads_to_rows(summary.leads)
    if args.output:
        write_csv(rows, args.output)
        print(f"Wrote {args.output}")
    if args.excel_output:
        write_excel(rows, args.excel_output)
        print(f"Wrote {args.excel_output}")
    print(f"Test complete: {summary.describe()}")
    return 0


def run_debug(args: argparse.Namespace, settings: Settings) -> int:
    messages, _ = _collect_messages(args, settings, mark_seen=False)
    if not messages:
        print("No messages found.")
        return 0

    message = messages[0]
    print("--- EMAIL DEBUG ---")
    print(f"From: {message.sender}")
    print(f"Subject: {message.subject}")
    print(f"Date: {message.received_at.isoformat() if message.received_at else '-'}")

    if not message.is_html:
        print("\n--- TEXT PREVIEW ---")
        print(message.body[:PREVIEW_CHARS])
        return 0

    soup = parse_html(message.body)
    for heuristic in DEFAULT_HEURISTICS:
        print(f"\n--- {heuristic.name} ---")
        for label, value in heuristic.pairs(soup):
            key = resolve_field(label, value) or "unrecognized"
            print(f"{label}: {value!r} -> {key}")
    print("\n--- HTML PREVIEW ---")
    print(message.body[:PREVIEW_CHARS])
    return 0


COMMANDS = {
    "sync": run_sync,
    "test": run_test,
    "debug": run_debug,
}


def main(argv: List[str] | None = None) -> int:
    """Entrypoint for running leadsync from the command line."""

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        settings = load_settings(args.env_file)
        configure_logging(args.log_level or settings.log_level)
        return COMMANDS[args.command](args, settings)
    except LeadSyncError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
