# main.py
from __future__ import annotations

import argparse
import logging
import sys

from core.exceptions import DomainError
from core.reporting import export_expenses_csv, export_finance_xlsx
from core.services.money import format_currency, format_percent
from infra.db.base import SessionLocal, db_url
from infra.logging_config import setup_logging
from infra.migrate import run_migrations
from infra.operational_support import traced_operation
from infra.services import build_service_graph

logger = logging.getLogger(__name__)


def build_services():
    run_migrations(db_url=db_url)
    session = SessionLocal()
    return build_service_graph(session)


def _print_summary(services, project_id: str, user_id: str) -> None:
    permissions = services.permission_resolver.resolve(project_id, user_id)
    snap = services.finance_service.get_project_finance(project_id, permissions)
    cur = snap.currency

    print(f"{snap.project_name} ({cur})")
    print(f"  Budget      {format_currency(snap.total_budget, cur)}")
    print(f"  Spent       {format_currency(snap.total_spent, cur)}  ({format_percent(snap.utilization_percent)})")
    print(f"  Remaining   {format_currency(snap.remaining, cur)}")
    print("  Categories")
    for ledger in snap.reconciliation.categories:
        status = ledger.status.value if ledger.status else "N/A"
        print(
            f"    {ledger.category:<24} {format_currency(ledger.spent, cur):>14} of "
            f"{format_currency(ledger.budgeted, cur):>14}  {format_percent(ledger.percent_used):>7}  {status}"
        )
    if snap.reconciliation.unlinked_expenses:
        print(f"    (unlinked) {format_currency(snap.reconciliation.unlinked_total, cur)}")
    for alert in snap.alerts:
        print(f"  ! {alert.category}: {alert.message}")
    inv = snap.invoices
    print(
        f"  Invoices    invoiced {format_currency(inv.total_invoiced, cur)}, "
        f"paid {format_currency(inv.total_paid, cur)}, pending {format_currency(inv.total_pending, cur)}, "
        f"overdue {format_currency(inv.total_overdue, cur)}"
    )
    fc = snap.forecast
    print(
        f"  Forecast    {format_currency(fc.projected_total, cur)} projected, "
        f"{format_currency(fc.daily_rate, cur)}/day, {fc.status.value}"
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="costflow", description="Project finance reconciliation and risk.")
    sub = parser.add_subparsers(dest="command", required=True)

    summary = sub.add_parser("summary", help="Print the finance summary of a project.")
    summary.add_argument("project_id")
    summary.add_argument("--user", required=True, help="Member whose role is checked.")

    exp = sub.add_parser("export-expenses", help="Write a project's expenses to CSV.")
    exp.add_argument("project_id")
    exp.add_argument("--out", default=".", help="Target file or directory.")
    exp.add_argument("--user", required=True, help="Member whose role is checked.")

    fin = sub.add_parser("export-finance", help="Write the finance workbook (xlsx).")
    fin.add_argument("project_id")
    fin.add_argument("--out", required=True)
    fin.add_argument("--user", required=True, help="Member whose role is checked.")

    args = parser.parse_args(argv)
    setup_logging()

    try:
        with traced_operation(args.command):
            services = build_services()
            if args.command == "summary":
                _print_summary(services, args.project_id, args.user)
            elif args.command == "export-expenses":
                permissions = services.permission_resolver.resolve(args.project_id, args.user)
                expenses = services.expense_service.list_expenses(args.project_id, permissions=permissions)
                print(export_expenses_csv(expenses, args.out))
            elif args.command == "export-finance":
                permissions = services.permission_resolver.resolve(args.project_id, args.user)
                snap = services.finance_service.get_project_finance(args.project_id, permissions)
                print(export_finance_xlsx(snap, args.out))
    except DomainError as exc:
        logger.warning("%s failed: %s (%s)", args.command, exc, exc.code)
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
