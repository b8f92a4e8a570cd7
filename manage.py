#!/usr/bin/env python3
"""
Entity Hub management CLI.

Usage:
    python manage.py migrate               Apply pending schema migrations
    python manage.py migrate --status      Show migration status only
    python manage.py run-cycle             Advance filings and send reminders
    python manage.py preview-reminders     Show who would be reminded of what
    python manage.py serve                 Start the API server

run-cycle is the scheduler entry point (cron, systemd timer, k8s CronJob).
It exits 0 when the run reached DONE and 1 when it was aborted.
"""

import argparse
import asyncio
import json
import sys
from datetime import UTC, date, datetime

from entityhub.config import configure_logging, get_settings


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")


async def _migrate(status_only: bool) -> int:
    from entityhub.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        initialize_database,
        verify_schema_integrity,
    )

    if status_only:
        status = await get_migration_status()
        print(json.dumps(status, indent=2, default=str))
        return 0

    results = await initialize_database()
    for result in results:
        if result.success:
            print(f"Applied {result.version} {result.name} ({result.execution_time_ms} ms)")
        else:
            print(f"Error: migration {result.version} failed: {result.error}")
            return 1
    if not results:
        print("Database is up to date.")

    failed = [c for c in await verify_schema_integrity() if c["status"] != "PASS"]
    for check in failed:
        print(f"Warning: schema check {check['check']} failed: {check}")
    return 1 if failed else 0


async def _run_cycle(args: argparse.Namespace) -> int:
    from entityhub.application.use_cases import RunComplianceCycleUseCase
    from entityhub.core.entities.run_report import RunPhase
    from entityhub.infrastructure.notifications import close_notification_transport
    from entityhub.infrastructure.storage.sqlite import close_pool
    from entityhub.infrastructure.storage.sqlite.migrations import run_migrations

    await run_migrations()
    try:
        report = await RunComplianceCycleUseCase().execute(
            now=args.as_of or datetime.now(UTC),
            horizon_days=args.horizon_days,
            timeout_seconds=args.timeout,
        )
    finally:
        await close_notification_transport()
        await close_pool()

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(f"Run {report.run_id} as of {report.as_of}: {report.phase.value}")
        print(f"  Filings advanced:  {report.filings_advanced} "
              f"(skipped {report.filings_skipped}, considered {report.filings_considered})")
        print(f"  Tasks created:     {report.tasks_created}")
        print(f"  Tasks due:         {report.tasks_found} "
              f"(horizon {report.horizon_days} days)")
        print(f"  Reminders sent:    {report.reminders_sent} "
              f"(failed {report.reminder_failures})")
        if report.not_reached:
            print(f"  Not reached:       {', '.join(str(i) for i in report.not_reached)}")
        for error in report.errors:
            print(f"  ! {error.kind} [{error.item_id}]: {error.message}")

    return 0 if report.phase == RunPhase.DONE else 1


async def _preview(args: argparse.Namespace) -> int:
    from entityhub.application.use_cases import SendTaskRemindersUseCase
    from entityhub.core.services.filing_status import humanize_due, start_of_day
    from entityhub.infrastructure.storage.sqlite import close_pool

    as_of = args.as_of or start_of_day(datetime.now(UTC))
    try:
        selection = await SendTaskRemindersUseCase().preview(as_of, args.horizon_days)
    finally:
        await close_pool()

    print(f"As of {as_of.isoformat()}, horizon {selection.horizon_days} days: "
          f"{selection.outcome.value} ({selection.tasks_found} task(s) due)")
    for recipient_id in selection.recipient_ids:
        recipient = selection.recipient(recipient_id)
        name = recipient.display_name if recipient else recipient_id
        email = recipient.email if recipient else ""
        print(f"\n{name} <{email}>")
        for item in selection.buckets[recipient_id]:
            task = item.task
            print(f"  [{task.priority.value:>6}] {task.title} "
                  f"- {item.entity_name or ''} - {humanize_due(task.due_date, as_of)}")
    return 0


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    sys.exit(asyncio.run(_migrate(args.status)))


def cmd_run_cycle(args: argparse.Namespace) -> None:
    """Run one compliance cycle."""
    sys.exit(asyncio.run(_run_cycle(args)))


def cmd_preview(args: argparse.Namespace) -> None:
    """Print reminder buckets without sending."""
    sys.exit(asyncio.run(_preview(args)))


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "entityhub.api.main:app",
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload,
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Entity Hub management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Override LOG_LEVEL for this run")
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply schema migrations")
    p_migrate.add_argument("--status", action="store_true", help="Show status without migrating")
    p_migrate.set_defaults(func=cmd_migrate)

    # run-cycle
    p_run = sub.add_parser("run-cycle", help="Advance recurring filings and send reminders")
    p_run.add_argument("--horizon-days", type=int, default=None,
                       help="Reminder horizon in days (default: SCHEDULER_REMINDER_HORIZON_DAYS)")
    p_run.add_argument("--timeout", type=float, default=None,
                       help="Whole-run time limit in seconds (default: no limit)")
    p_run.add_argument("--as-of", type=_parse_date, default=None,
                       help="Run as of this date, YYYY-MM-DD (default: today, UTC)")
    p_run.add_argument("--json", action="store_true", help="Print the full run report as JSON")
    p_run.set_defaults(func=cmd_run_cycle)

    # preview-reminders
    p_preview = sub.add_parser("preview-reminders", help="Show reminder buckets without sending")
    p_preview.add_argument("--horizon-days", type=int, default=None, help="Reminder horizon in days")
    p_preview.add_argument("--as-of", type=_parse_date, default=None, help="YYYY-MM-DD")
    p_preview.set_defaults(func=cmd_preview)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default: API_HOST)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
