from __future__ import annotations

import logging
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from entretelas.domain.arreglos_summary import split_arreglos_total

log = logging.getLogger(__name__)

EURO_FORMAT = '#,##0.00 "€"'


def _money(cell) -> None:
    cell.number_format = EURO_FORMAT


def _percent(ratio: float) -> str:
    return f"{round(ratio * 100, 2):g}%"


def _bold_row(ws, r: int) -> None:
    for c in ws[r]:
        c.font = Font(bold=True)


def _set_widths(ws, widths: dict[str, int]) -> None:
    for col, w in widths.items():
        ws.column_dimensions[col].width = w


def _add_table(ws, name: str, start_row: int, end_row: int, end_col: int) -> None:
    ref = f"A{start_row}:{get_column_letter(end_col)}{end_row}"
    tab = Table(displayName=name, ref=ref)
    tab.tableStyleInfo = TableStyleInfo(
        name="TableStyleMedium9",
        showRowStripes=True,
        showColumnStripes=False,
    )
    ws.add_table(tab)


class ReportingService:
    def __init__(self, facturas, arreglos):
        self.facturas = facturas
        self.arreglos = arreglos

    def _invoice_sheet(self, wb: Workbook, title: str, tipo: str, year: int) -> None:
        report = self.facturas.quarter_summary(tipo, year)
        ws = wb.create_sheet(title)
        ws["A1"] = f"{title} {year}"
        ws["A1"].font = Font(bold=True, size=14)

        ws.append([])
        ws.append(["Trimestre", "Mes", "Importe", "Importe + IVA"])
        _bold_row(ws, 3)

        for quarter in report.quarters:
            for month in quarter.months:
                ws.append([quarter.key, month.label, month.total.importe, month.total.amount_with_taxes])
            ws.append([quarter.key, "Total", quarter.total.importe, quarter.total.amount_with_taxes])
            _bold_row(ws, ws.max_row)
        ws.append(["Año", "Total", report.annual_total.importe, report.annual_total.amount_with_taxes])
        _bold_row(ws, ws.max_row)

        for row in ws.iter_rows(min_row=4, min_col=3, max_col=4):
            for cell in row:
                _money(cell)
        ws.freeze_panes = "A4"
        _set_widths(ws, {"A": 12, "B": 14, "C": 16, "D": 18})
        _add_table(ws, f"Resumen{title}", 3, ws.max_row, 4)

    def _arreglos_sheet(self, wb: Workbook, year: int) -> None:
        ws = wb.create_sheet("Arreglos")
        ws["A1"] = f"Arreglos {year}"
        ws["A1"].font = Font(bold=True, size=14)

        ws.append([])
        ratio = self.arreglos.rules.folder_share_ratio
        ws.append([
            "Mes", "Arreglos", "Total", "Entretelas", "Isa", "Loli",
            f"Carpetas ({_percent(ratio)})", f"Tienda ({_percent(1 - ratio)})",
        ])
        _bold_row(ws, 3)

        for bucket in self.arreglos.monthly_summary(year):
            split = split_arreglos_total(bucket.total_importe, self.arreglos.rules)
            ws.append([
                bucket.month_label, bucket.count, bucket.total_importe,
                bucket.entretelas, bucket.isa, bucket.loli,
                split.folder_share, split.tienda_share,
            ])

        for row in ws.iter_rows(min_row=4, min_col=3, max_col=8):
            for cell in row:
                _money(cell)
        ws.freeze_panes = "A4"
        _set_widths(ws, {"A": 20, "B": 10, "C": 14, "D": 14, "E": 14, "F": 14, "G": 16, "H": 16})
        if ws.max_row >= 4:
            _add_table(ws, "ResumenArreglos", 3, ws.max_row, 8)

    def export_summary_excel(self, path: Path | str, year: int) -> Path:
        wb = Workbook()
        wb.remove(wb.active)

        self._invoice_sheet(wb, "Compras", "compra", year)
        self._invoice_sheet(wb, "Ventas", "venta", year)
        self._arreglos_sheet(wb, year)

        target = Path(path)
        wb.save(target)
        log.info("summary_exported path=%s year=%s", target, year)
        return target
