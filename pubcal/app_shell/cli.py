import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from pubcal.app_shell.config import (
    Settings,
    pending_migrations,
    prepare_database,
    validate_rules,
)
from pubcal.app_shell.context import ServiceContext
from pubcal.core.errors import SchedulingError
from pubcal.core.ports.db import TransactionConflictError
from pubcal.rules.loader import load_rules

logger = logging.getLogger("pubcal.cli")


def get_context(settings: Settings) -> ServiceContext:
    if not Path(settings.rules_path).exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)

    try:
        rules = load_rules(settings.rules_path)
        validate_rules(rules)
    except ValueError as e:
        logger.error("Invalid rules: %s", e)
        sys.exit(1)
    return ServiceContext.create(settings.db_path, rules)


def parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD") from e


def report_errors(errors: list[SchedulingError]) -> None:
    for e in errors:
        logger.error("%s: %s", e.code, e.message)
    sys.exit(1)


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    if args.status:
        pending = pending_migrations(settings)
        print(f"Database {settings.db_path}: {len(pending)} migration(s) pending.")
        for filename in pending:
            print(f"  {filename}")
        return
    applied = prepare_database(settings)
    print(f"Database {settings.db_path}: {len(applied)} migration(s) applied.")


def handle_add_manuscript(ctx: ServiceContext, args: argparse.Namespace) -> None:
    with ctx.uow_factory() as uow:
        manuscript = uow.manuscripts.add(args.title)
        uow.commit()
    print(f"Manuscript {manuscript.id}: {manuscript.title}")


def handle_schedule(ctx: ServiceContext, args: argparse.Namespace) -> None:
    result, errors = ctx.scheduling.schedule_markets(args.manuscript_id, args.markets, args.start)
    if errors or result is None:
        report_errors(errors)
        return

    for a in result.assigned:
        print(f"  {a.market:<15} {a.date.isoformat()}  (publication {a.publication_id})")
    for market in result.skipped:
        print(f"  {market:<15} skipped (already scheduled or published)")
    for f in result.failed:
        print(f"  {f.market:<15} FAILED {f.code}: {f.message}")
    print(f"Scheduled {len(result.assigned)} of {len(args.markets)} market(s).")


def handle_block(ctx: ServiceContext, args: argparse.Namespace) -> None:
    result, errors = ctx.scheduling.block_date(args.date, args.reason)
    if errors or result is None:
        report_errors(errors)
        return

    print(f"Blocked {result.blocked_date.date.isoformat()} (id {result.blocked_date.id}).")
    for d in result.rescheduled:
        print(f"  publication {d.publication_id}: {d.from_date} -> {d.to_date}")
    for pid in result.unresolved:
        print(f"  publication {pid}: could not be moved")
    print(f"Rescheduled {result.rescheduled_count}, unresolved {len(result.unresolved)}.")


def handle_unblock(ctx: ServiceContext, args: argparse.Namespace) -> None:
    removed, errors = ctx.scheduling.unblock_date(args.blocked_date_id)
    if errors or removed is None:
        report_errors(errors)
        return
    print(f"Unblocked {removed.date.isoformat()}.")


def handle_reschedule(ctx: ServiceContext, args: argparse.Namespace) -> None:
    publication, errors = ctx.lifecycle.reschedule(args.publication_id, args.date)
    if errors or publication is None:
        report_errors(errors)
        return
    print(f"Publication {publication.id} scheduled for {publication.scheduled_date}.")


def handle_publish(ctx: ServiceContext, args: argparse.Namespace) -> None:
    publication, errors = ctx.lifecycle.mark_published(args.publication_id, args.kdp_url)
    if errors or publication is None:
        report_errors(errors)
        return
    print(f"Publication {publication.id} published on {publication.published_date}.")


def handle_delete(ctx: ServiceContext, args: argparse.Namespace) -> None:
    _, errors = ctx.lifecycle.delete(args.publication_id)
    if errors:
        report_errors(errors)
        return
    print(f"Publication {args.publication_id} deleted.")


def handle_calendar(ctx: ServiceContext, args: argparse.Namespace) -> None:
    if args.start and args.end:
        days, errors = ctx.calendar.get_calendar(args.start, args.end)
    else:
        today = ctx.scheduling.clock.today()
        days, errors = ctx.calendar.get_month(args.year or today.year, args.month or today.month)
    if errors:
        report_errors(errors)
        return

    for day in days:
        if day.blocked:
            print(f"{day.date.isoformat()}  BLOCKED {day.block_reason or ''}".rstrip())
            continue
        if not day.entries:
            continue
        print(f"{day.date.isoformat()}  {day.scheduled_count} scheduled")
        for e in day.entries:
            title = e.manuscript_title or f"manuscript {e.manuscript_id}"
            print(f"    [{e.status}] {e.market:<15} {title} (#{e.publication_id})")


def handle_stats(ctx: ServiceContext, args: argparse.Namespace) -> None:
    stats = ctx.calendar.publication_stats()
    t = stats.totals
    print(
        f"Total {t.total}: {t.scheduled} scheduled, {t.published} published, {t.pending} pending"
    )
    for market, c in stats.by_market.items():
        print(f"  {market:<15} {c.scheduled:>4} scheduled {c.published:>4} published")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Publication calendar CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Create or upgrade the database")
    migrate_parser.add_argument(
        "--status", action="store_true", help="List pending migrations without applying them"
    )

    # add-manuscript
    add_parser = subparsers.add_parser("add-manuscript", help="Register a manuscript")
    add_parser.add_argument("title")

    # schedule
    schedule_parser = subparsers.add_parser("schedule", help="Schedule a manuscript on markets")
    schedule_parser.add_argument("manuscript_id", type=int)
    schedule_parser.add_argument("markets", nargs="+", help="Market codes, in priority order")
    schedule_parser.add_argument("--start", type=parse_day, help="Earliest date (YYYY-MM-DD)")

    # block / unblock
    block_parser = subparsers.add_parser("block", help="Block a date")
    block_parser.add_argument("date", type=parse_day)
    block_parser.add_argument("--reason")

    unblock_parser = subparsers.add_parser("unblock", help="Remove a blocked date")
    unblock_parser.add_argument("blocked_date_id", type=int)

    # lifecycle
    reschedule_parser = subparsers.add_parser("reschedule", help="Move a publication")
    reschedule_parser.add_argument("publication_id", type=int)
    reschedule_parser.add_argument("date", type=parse_day)

    publish_parser = subparsers.add_parser("publish", help="Mark a publication as published")
    publish_parser.add_argument("publication_id", type=int)
    publish_parser.add_argument("--kdp-url")

    delete_parser = subparsers.add_parser("delete", help="Delete a publication")
    delete_parser.add_argument("publication_id", type=int)

    # calendar
    calendar_parser = subparsers.add_parser("calendar", help="Show the calendar")
    calendar_parser.add_argument("--year", type=int)
    calendar_parser.add_argument("--month", type=int)
    calendar_parser.add_argument("--start", type=parse_day)
    calendar_parser.add_argument("--end", type=parse_day)

    # stats
    subparsers.add_parser("stats", help="Publication counts by market")

    return parser


HANDLERS = {
    "add-manuscript": handle_add_manuscript,
    "schedule": handle_schedule,
    "block": handle_block,
    "unblock": handle_unblock,
    "reschedule": handle_reschedule,
    "publish": handle_publish,
    "delete": handle_delete,
    "calendar": handle_calendar,
    "stats": handle_stats,
}


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)
    settings = Settings()

    if args.command == "migrate":
        handle_migrate(settings, args)
        return

    ctx = get_context(settings)
    try:
        HANDLERS[args.command](ctx, args)
    except TransactionConflictError as e:
        logger.error("Database busy, try again: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
