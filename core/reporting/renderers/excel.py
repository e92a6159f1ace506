from pathlib import Path
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side

from core.reporting.contexts import FinanceWorkbookContext

_STATUS_FILLS = {
    "critical": PatternFill("solid", fgColor="F8CBAD"),
    "warning": PatternFill("solid", fgColor="FFE699"),
    "on-track": PatternFill("solid", fgColor="C6EFCE"),
}


class FinanceWorkbookRenderer:
    def __init__(self) -> None:
        self.header_font = Font(bold=True)
        self.title_font = Font(bold=True, size=14)
        self.center = Alignment(horizontal="center")
        self.thin_border = Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin"),
        )
        self.header_fill = PatternFill("solid", fgColor="DDDDDD")

    def render(self, ctx: FinanceWorkbookContext, output_path: Path) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb = Workbook()

        ws = wb.active
        if ctx.snapshot is None:
            ws.title = "Budget"
            ws_budget = ws
        else:
            ws.title = "Overview"
            self._overview(ws, ctx)
            ws_budget = wb.create_sheet("Budget")

        self._budget(ws_budget, ctx)

        if ctx.reconciliation.unlinked_expenses:
            self._unlinked(wb.create_sheet("Unlinked expenses"), ctx)

        if ctx.alerts:
            ws_alerts = wb.create_sheet("Alerts")
            self._header_row(ws_alerts, ["Category", "Status", "% used", "Message"])
            for r, alert in enumerate(ctx.alerts, start=2):
                values = [alert.category, alert.status.value, round(alert.percent_used, 1), alert.message]
                for c, v in enumerate(values, 1):
                    ws_alerts.cell(r, c, v).border = self.thin_border
            ws_alerts.column_dimensions["A"].width = 28
            ws_alerts.column_dimensions["D"].width = 60

        wb.save(output_path)
        return output_path

    def _header_row(self, sheet, headers) -> None:
        for col_index, h in enumerate(headers, start=1):
            cell = sheet.cell(row=1, column=col_index, value=h)
            cell.font = self.header_font
            cell.alignment = self.center
            cell.fill = self.header_fill
            cell.border = self.thin_border

    # ---------------- Overview ----------------
    def _overview(self, ws, ctx: FinanceWorkbookContext) -> None:
        snap = ctx.snapshot
        ws["A1"] = f"Project Finance - {snap.project_name}"
        ws["A1"].font = self.title_font

        row = 3

        def kv(key, value):
            nonlocal row
            ws[f"A{row}"] = key
            ws[f"B{row}"] = value
            ws[f"A{row}"].font = self.header_font
            ws[f"A{row}"].border = self.thin_border
            ws[f"B{row}"].border = self.thin_border
            row += 1

        kv("Project ID", snap.project_id)
        kv("Currency", snap.currency)
        kv("As of", ctx.as_of.isoformat())

        row += 1
        kv("Total budget", snap.total_budget)
        kv("Total spent", snap.total_spent)
        kv("Remaining", snap.remaining)
        kv("Utilization (%)", round(snap.utilization_percent, 1))

        row += 1
        kv("Invoiced", snap.invoices.total_invoiced)
        kv("Paid", snap.invoices.total_paid)
        kv("Pending", snap.invoices.total_pending)
        kv("Overdue", snap.invoices.total_overdue)

        row += 1
        kv("Daily spend rate", round(snap.forecast.daily_rate, 2))
        kv("Projected total", round(snap.forecast.projected_total, 2))
        kv("Variance", round(snap.forecast.variance, 2))
        kv("Forecast status", snap.forecast.status.value)

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 25

    # ---------------- Budget ----------------
    def _budget(self, ws, ctx: FinanceWorkbookContext) -> None:
        self._header_row(ws, ["Category", "Budgeted", "Spent", "Remaining", "% used", "Status", "Expenses", "Notes"])

        for row_index, ledger in enumerate(ctx.reconciliation.categories, start=2):
            status = ledger.status.value if ledger.status else "N/A"
            values = [
                ledger.category,
                ledger.budgeted,
                ledger.spent,
                ledger.remaining,
                round(ledger.percent_used, 1) if ledger.percent_used is not None else "N/A",
                status,
                ledger.expense_count,
                ledger.notes,
            ]
            for c, v in enumerate(values, 1):
                ws.cell(row_index, c, v).border = self.thin_border
            fill = _STATUS_FILLS.get(status)
            if fill is not None:
                ws.cell(row_index, 6).fill = fill

        ws.column_dimensions["A"].width = 28
        for col_letter in ("B", "C", "D", "E", "F", "G"):
            ws.column_dimensions[col_letter].width = 15
        ws.column_dimensions["H"].width = 40

    # ---------------- Unlinked ----------------
    def _unlinked(self, ws, ctx: FinanceWorkbookContext) -> None:
        self._header_row(ws, ["Expense ID", "Category", "Date", "Vendor", "Amount", "Status"])
        for r, e in enumerate(ctx.reconciliation.unlinked_expenses, start=2):
            values = [
                e.id,
                e.category,
                e.expense_date.isoformat() if e.expense_date else "",
                e.vendor,
                e.amount,
                e.status.value,
            ]
            for c, v in enumerate(values, 1):
                ws.cell(r, c, v).border = self.thin_border
        ws.column_dimensions["A"].width = 36
        for col_letter in ("B", "C", "D", "E", "F"):
            ws.column_dimensions[col_letter].width = 18
