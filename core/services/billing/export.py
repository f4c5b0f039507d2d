from __future__ import annotations

import logging
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from core.domain.enums import Capability
from core.domain.money import to_display_amount
from core.services.auth.authorization import require_capability
from core.services.auth.session import UserSessionContext
from core.services.billing.service import MAX_PAGE_SIZE, BillingService

logger = logging.getLogger(__name__)

RECORD_HEADERS = [
    "Record ID",
    "User ID",
    "Type",
    "Quantity",
    "Unit price",
    "Total",
    "Period",
    "Period start",
    "Period end",
    "Status",
    "Reason",
    "Description",
    "Created at",
    "Paid at",
]


def _ensure_path(path: str | Path) -> Path:
    p = Path(path)
    if not p.parent.exists():
        p.parent.mkdir(parents=True, exist_ok=True)
    return p


class BillingExportService:
    def __init__(
        self,
        billing_service: BillingService,
        user_session: UserSessionContext | None = None,
    ):
        self._billing_service = billing_service
        self._user_session = user_session

    def export_billing_records(self, output_path: str | Path, user_id: str | None = None) -> Path:
        """Write billing records visible to the signed-in user into an .xlsx workbook."""
        require_capability(self._user_session, Capability.EXPORT_DATA, operation_label="export billing records")
        output_path = _ensure_path(output_path)

        records = []
        page = 1
        while True:
            batch = self._billing_service.list_billing_records(user_id, page=page, limit=MAX_PAGE_SIZE)
            records.extend(batch)
            if len(batch) < MAX_PAGE_SIZE:
                break
            page += 1

        wb = Workbook()
        header_font = Font(bold=True)
        title_font = Font(bold=True, size=14)
        center = Alignment(horizontal="center")
        thin_border = Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin"),
        )
        header_fill = PatternFill("solid", fgColor="DDDDDD")

        # ---------------- Overview ----------------
        ws = wb.active
        ws.title = "Overview"
        ws["A1"] = "Billing export"
        ws["A1"].font = title_font

        total = sum((record.total_amount for record in records), start=to_display_amount(0))
        overview = [
            ("Records", len(records)),
            ("Total amount", to_display_amount(total)),
            ("User filter", user_id or "all visible"),
        ]
        for row, (key, value) in enumerate(overview, start=3):
            ws[f"A{row}"] = key
            ws[f"B{row}"] = value
            ws[f"A{row}"].font = header_font
            ws[f"A{row}"].border = thin_border
            ws[f"B{row}"].border = thin_border
        ws.column_dimensions["A"].width = 20
        ws.column_dimensions["B"].width = 25

        # ---------------- Records ----------------
        ws_records = wb.create_sheet("Records")
        for col_index, h in enumerate(RECORD_HEADERS, start=1):
            cell = ws_records.cell(row=1, column=col_index, value=h)
            cell.font = header_font
            cell.alignment = center
            cell.fill = header_fill
            cell.border = thin_border

        for row_index, record in enumerate(records, start=2):
            values = [
                record.id,
                record.user_id,
                record.billing_type.value,
                record.quantity,
                record.unit_price,
                to_display_amount(record.total_amount),
                record.billing_period,
                record.period_start.isoformat() if record.period_start else "",
                record.period_end.isoformat() if record.period_end else "",
                record.status.value,
                record.reason.value if record.reason else "",
                record.description or "",
                record.created_at.isoformat() if record.created_at else "",
                record.paid_at.isoformat() if record.paid_at else "",
            ]
            for col_index, value in enumerate(values, start=1):
                ws_records.cell(row=row_index, column=col_index, value=value).border = thin_border

        ws_records.column_dimensions["A"].width = 36
        ws_records.column_dimensions["B"].width = 36
        for col_letter in ("C", "D", "E", "F", "G", "H", "I", "J", "K", "L", "M", "N"):
            ws_records.column_dimensions[col_letter].width = 16

        wb.save(output_path)
        logger.info("Exported %s billing record(s) to %s", len(records), output_path)
        return output_path


__all__ = ["BillingExportService", "RECORD_HEADERS"]
