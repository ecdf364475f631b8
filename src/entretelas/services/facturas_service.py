from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from entretelas.config import DEFAULT_RULES, BusinessRules
from entretelas.domain.amounts import try_parse_amount
from entretelas.domain.errors import NotFoundError, ValidationError
from entretelas.domain.invoice_summary import build_quarter_summary
from entretelas.domain.models import AmountTotals, Invoice, QuarterReport
from entretelas.services.validation import positive_id, required_text

log = logging.getLogger(__name__)

INVOICE_TIPOS = ("compra", "venta", "arreglos", "contabilidad")

# arreglos and contabilidad documents are filed without a proveedor or cliente (entidad_id 0)
ENTIDAD_BY_TIPO = {"compra": "proveedor", "venta": "cliente"}


def _valid_tipo(tipo: object) -> str:
    if tipo not in INVOICE_TIPOS:
        raise ValidationError(f"tipo must be one of: {', '.join(INVOICE_TIPOS)}")
    return str(tipo)


def _optional_date(value: object, field: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a YYYY-MM-DD date")
    try:
        return date.fromisoformat(value.strip()).isoformat()
    except ValueError as exc:
        raise ValidationError(f"{field} must be a YYYY-MM-DD date") from exc


def _optional_amount(value: object, field: str) -> Optional[float]:
    # blank clears the stored amount, which re-enables the tax fallback
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = try_parse_amount(value)
    if parsed is None:
        raise ValidationError(f"{field} must be a valid euro amount")
    return parsed


class FacturasService:
    """Invoice document metadata per proveedor/cliente.

    The document files themselves live outside the database; only the
    stored file name is recorded here.
    """

    def __init__(self, repo, rules: BusinessRules = DEFAULT_RULES):
        self.repo = repo
        self.rules = rules

    def _entidad_id(self, entidad_id: object, tipo: str, must_exist: bool = True) -> int:
        kind = ENTIDAD_BY_TIPO.get(tipo)
        if kind is None:
            if entidad_id not in (None, 0):
                raise ValidationError(f"{tipo} documents are not filed under a proveedor or cliente")
            return 0
        entidad_id = positive_id(entidad_id, "entidad_id")
        if must_exist and not self.repo.entidad_exists(kind, entidad_id):
            raise NotFoundError(f"{kind.capitalize()} not found")
        return entidad_id

    def get_all_for_entidad(self, entidad_id: Optional[int], tipo: str) -> list[Invoice]:
        tipo = _valid_tipo(tipo)
        return self.repo.list_invoices_for_entidad(self._entidad_id(entidad_id, tipo, must_exist=False), tipo)

    def upload_pdf(
        self,
        entidad_id: Optional[int],
        tipo: str,
        nombre_archivo: str,
        fecha: Optional[str] = None,
        importe: object = None,
        importe_iva_re: object = None,
        vencimiento: Optional[str] = None,
    ) -> Invoice:
        """``compra`` invoices belong to a proveedor and ``venta`` ones to a cliente; both must exist."""
        tipo = _valid_tipo(tipo)
        fields = dict(
            nombre_archivo=required_text(nombre_archivo, "nombre_archivo"),
            fecha=_optional_date(fecha, "fecha"),
            importe=_optional_amount(importe, "importe"),
            importe_iva_re=_optional_amount(importe_iva_re, "importe_iva_re"),
            vencimiento=_optional_date(vencimiento, "vencimiento"),
        )
        entidad_id = self._entidad_id(entidad_id, tipo)
        invoice_id = self.repo.create_invoice(entidad_id=entidad_id, tipo=tipo, **fields)
        log.info("invoice_uploaded id=%s entidad_id=%s tipo=%s", invoice_id, entidad_id, tipo)
        return self.repo.get_invoice(invoice_id)

    def update_pdf_metadata(self, invoice_id: int, **changes: Any) -> Invoice:
        invoice_id = positive_id(invoice_id)
        fields: dict[str, Any] = {}
        for field in ("fecha", "vencimiento"):
            if field in changes:
                fields[field] = _optional_date(changes[field], field)
        for field in ("importe", "importe_iva_re"):
            if field in changes:
                fields[field] = _optional_amount(changes[field], field)
        if "pagada" in changes:
            fields["pagada"] = 1 if changes["pagada"] else 0

        if not self.repo.update_invoice(invoice_id, fields):
            raise NotFoundError("Factura not found")
        log.info("invoice_updated id=%s fields=%s", invoice_id, ",".join(sorted(fields)))
        return self.repo.get_invoice(invoice_id)

    def delete_pdf(self, invoice_id: int) -> None:
        invoice_id = positive_id(invoice_id)
        if not self.repo.delete_invoice(invoice_id):
            raise NotFoundError("Factura not found")
        log.info("invoice_deleted id=%s", invoice_id)

    def quarter_summary(self, tipo: str, year: int) -> QuarterReport[AmountTotals]:
        rows = self.repo.list_invoices_for_year(_valid_tipo(tipo), int(year))
        return build_quarter_summary(rows, tipo, self.rules)
