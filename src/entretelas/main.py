from __future__ import annotations

import argparse
import logging
from datetime import date

from entretelas.application.container import AppContainer, build_container
from entretelas.config import get_app_paths, load_business_rules
from entretelas.domain.amounts import format_amount
from entretelas.domain.errors import AppError, user_message
from entretelas.logging_config import setup_logging

log = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="entretelas", description="Entretelas shop records")
    sub = parser.add_subparsers(dest="command", required=True)

    summary = sub.add_parser("summary", help="print quarterly and monthly totals")
    summary.add_argument("--year", type=int, default=date.today().year)

    export = sub.add_parser("export", help="write the yearly summary to an .xlsx file")
    export.add_argument("--year", type=int, default=date.today().year)
    export.add_argument("--out", required=True)

    sub.add_parser("backup", help="snapshot the database into the backups folder")
    return parser


def _print_summary(container: AppContainer, year: int) -> None:
    for tipo, title in (("compra", "Compras"), ("venta", "Ventas")):
        report = container.facturas.quarter_summary(tipo, year)
        print(f"{title} {year}")
        for quarter in report.quarters:
            print(
                f"  {quarter.key}: {format_amount(quarter.total.importe)}"
                f" ({format_amount(quarter.total.amount_with_taxes)} con IVA)"
            )
        print(f"  Total: {format_amount(report.annual_total.amount_with_taxes)} con IVA")

    print(f"Arreglos {year}")
    for bucket in container.arreglos.monthly_summary(year):
        split = container.arreglos.split(bucket.total_importe)
        print(
            f"  {bucket.month_label}: {bucket.count} arreglos, {format_amount(bucket.total_importe)}"
            f" (carpetas {format_amount(split.folder_share)}, tienda {format_amount(split.tienda_share)})"
        )


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    paths = get_app_paths()
    setup_logging(paths.logs_dir, level=logging.INFO, console=True)

    try:
        rules = load_business_rules()
    except ValueError as exc:
        log.error("invalid_configuration error=%s", exc)
        print(f"Configuración no válida: {exc}")
        return 1

    try:
        container = build_container(
            paths.db_path,
            rules=rules,
            backup_dir=paths.backups_dir,
        )
        if args.command == "summary":
            _print_summary(container, args.year)
        elif args.command == "export":
            target = container.reporting.export_summary_excel(args.out, args.year)
            print(f"Resumen exportado: {target}")
        elif args.command == "backup":
            target = container.backup.create_backup()
            print(f"Copia de seguridad creada: {target}")
    except AppError as exc:
        log.error("command_failed command=%s code=%s", args.command, exc.code, exc_info=True)
        print(user_message(exc))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
