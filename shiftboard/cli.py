"""Command-line interface for schedules, hours and time-off requests."""

from __future__ import annotations

import argparse
from datetime import date

from shiftboard.config import load_config
from shiftboard.domain.db import get_session_factory, init_database
from shiftboard.domain.repositories import WorkerRepository
from shiftboard.domain.shifts import DayKey, ShiftType, sunday_of_week
from shiftboard.domain.store import SqlScheduleWeekStore
from shiftboard.engine.reconciler import ReconcileResult, TimeOffReconciler
from shiftboard.engine.requests import TimeOffRequestLifecycle
from shiftboard.errors import ShiftboardError
from shiftboard.io.import_csv import import_shifts_csv, import_workers_csv
from shiftboard.logging_config import setup_logging
from shiftboard.services.hours import format_hours, hours_summary
from shiftboard.services.staffing import daily_counts


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date {value!r}; expected YYYY-MM-DD") from None


def _context(args: argparse.Namespace):
    cfg = load_config(args.config)
    if args.db:
        cfg.database_url = args.db
    SessionLocal = get_session_factory(cfg.database_url)
    store = SqlScheduleWeekStore(SessionLocal)
    return cfg, SessionLocal, store


def _lifecycle(args: argparse.Namespace):
    cfg, SessionLocal, store = _context(args)
    session = SessionLocal()
    return session, TimeOffRequestLifecycle(session, TimeOffReconciler(store), cfg)


def _report(result: ReconcileResult | None) -> None:
    if result is None:
        return
    print(
        f"[INFO] Schedule days updated: {len(result.touched)}, "
        f"unchanged: {len(result.unchanged)}, "
        f"published (skipped): {len(result.skipped_published)}"
    )
    if result.failed:
        dates = ", ".join(d.isoformat() for d in result.failed)
        print(f"[WARN] Failed to update: {dates} (retry the operation)")


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    cfg = load_config(args.config)
    db_url = args.db or cfg.database_url
    init_database(db_url)
    print(f"[OK] Database initialized: {db_url}")


def _cmd_import_csv(args: argparse.Namespace) -> None:
    """Import CSV data into database."""
    _, SessionLocal, store = _context(args)
    with SessionLocal() as session:
        if args.workers:
            count = import_workers_csv(session, args.workers)
            print(f"[OK] Imported {count} workers")
    if args.shifts:
        count = import_shifts_csv(store, args.shifts)
        print(f"[OK] Imported {count} shifts")


def _cmd_hours(args: argparse.Namespace) -> None:
    """Print the hours table for a week."""
    cfg, SessionLocal, store = _context(args)
    week = store.get(args.company, args.week)
    if week is None:
        raise SystemExit(f"No schedule for {args.company} week of {sunday_of_week(args.week)}")
    with SessionLocal() as session:
        workers = WorkerRepository.get_by_company(session, args.company)
    table = hours_summary(week, workers, cfg)
    if table.empty:
        print("No workers.")
        return
    for column in [d.value for d in DayKey] + ["total"]:
        table[column] = table[column].map(format_hours)
    print(table.to_string())


def _cmd_counts(args: argparse.Namespace) -> None:
    """Print opening/closing staffing counts for a week."""
    cfg, _, store = _context(args)
    week = store.get(args.company, args.week)
    if week is None:
        raise SystemExit(f"No schedule for {args.company} week of {sunday_of_week(args.week)}")
    counts = daily_counts(
        week.shifts,
        ShiftType.parse(args.kind),
        opening_mark=cfg.opening_mark,
        closing_mark=cfg.closing_mark,
    )
    print("  ".join(f"{day.value}:{label}" for day, label in counts.items()))


def _cmd_submit(args: argparse.Namespace) -> None:
    session, lifecycle = _lifecycle(args)
    with session:
        is_all_day = args.start_time is None and args.end_time is None
        outcome = lifecycle.submit_request(
            company_id=args.company,
            worker_id=args.worker,
            start_date=args.start,
            end_date=args.end,
            is_all_day=is_all_day,
            start_time=args.start_time,
            end_time=args.end_time,
            reason=args.reason or "",
        )
        print(f"[OK] Request {outcome.request.id} is {outcome.request.status}")
        _report(outcome.reconcile)


def _cmd_approve(args: argparse.Namespace) -> None:
    session, lifecycle = _lifecycle(args)
    with session:
        outcome = lifecycle.approve(args.request_id, args.by)
        print(f"[OK] Request {args.request_id} approved")
        _report(outcome.reconcile)


def _cmd_deny(args: argparse.Namespace) -> None:
    session, lifecycle = _lifecycle(args)
    with session:
        outcome = lifecycle.deny(args.request_id, args.by, confirm=args.yes)
        print(f"[OK] Request {args.request_id} denied")
        _report(outcome.reconcile)


def _cmd_retract(args: argparse.Namespace) -> None:
    session, lifecycle = _lifecycle(args)
    with session:
        outcome = lifecycle.retract(args.request_id, args.by)
        print(f"[OK] Request {args.request_id} retracted")
        _report(outcome.reconcile)


def _cmd_delete(args: argparse.Namespace) -> None:
    session, lifecycle = _lifecycle(args)
    with session:
        lifecycle.delete(args.request_id, args.by)
        print(f"[OK] Request {args.request_id} deleted")


def _cmd_publish(args: argparse.Namespace) -> None:
    _, _, store = _context(args)
    week = store.set_published(args.company, args.week, args.publish)
    state = "published" if week.is_published else "unpublished"
    print(f"[OK] Schedule {week.doc_id} {state}")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="shiftboard",
        description="Weekly staff schedules, worked hours and time-off requests",
    )

    # Global options
    parser.add_argument("--db", help="Database URL (overrides config)")
    parser.add_argument("--config", help="Path to config JSON/YAML")
    parser.add_argument("--log-level", default=None, help="Log level (default from config)")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Initialize database")
    init.set_defaults(func=_cmd_init_db)

    imp = sub.add_parser("import-csv", help="Import workers and/or shifts from CSV")
    imp.add_argument("--workers", help="Path to workers CSV")
    imp.add_argument("--shifts", help="Path to shifts CSV")
    imp.set_defaults(func=_cmd_import_csv)

    hrs = sub.add_parser("hours", help="Show worked hours for a week")
    hrs.add_argument("--company", required=True)
    hrs.add_argument("--week", required=True, type=_parse_date, help="Any date in the week")
    hrs.set_defaults(func=_cmd_hours)

    cnt = sub.add_parser("counts", help="Show opening/closing staffing counts for a week")
    cnt.add_argument("--company", required=True)
    cnt.add_argument("--week", required=True, type=_parse_date, help="Any date in the week")
    cnt.add_argument("--kind", default="GUARD", help="Shift kind (e.g., GUARD, FRONT)")
    cnt.set_defaults(func=_cmd_counts)

    sbm = sub.add_parser("submit", help="Submit a time-off request")
    sbm.add_argument("--company", required=True)
    sbm.add_argument("--worker", required=True)
    sbm.add_argument("--start", required=True, type=_parse_date)
    sbm.add_argument("--end", type=_parse_date, help="Defaults to --start")
    sbm.add_argument("--from", dest="start_time", help="Start time HH:MM for partial days")
    sbm.add_argument("--to", dest="end_time", help="End time HH:MM for partial days")
    sbm.add_argument("--reason")
    sbm.set_defaults(func=_cmd_submit)

    for name, func, help_text in (
        ("approve", _cmd_approve, "Approve a time-off request"),
        ("deny", _cmd_deny, "Deny a time-off request"),
        ("retract", _cmd_retract, "Retract your approved request"),
        ("delete", _cmd_delete, "Delete your pending request"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("request_id")
        p.add_argument("--by", required=True, help="Acting user id")
        if name == "deny":
            p.add_argument("--yes", action="store_true", help="Confirm removing scheduled OFF time")
        p.set_defaults(func=func)

    for name, flag in (("publish", True), ("unpublish", False)):
        p = sub.add_parser(name, help=f"{name.capitalize()} a schedule week")
        p.add_argument("--company", required=True)
        p.add_argument("--week", required=True, type=_parse_date, help="Any date in the week")
        p.set_defaults(func=_cmd_publish, publish=flag)

    args = parser.parse_args(argv)
    cfg = load_config(args.config)
    setup_logging(args.log_level or cfg.log_level, json=cfg.log_json)

    try:
        args.func(args)
    except ShiftboardError as e:
        print(f"[ERROR] {e}")
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
