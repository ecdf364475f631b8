from __future__ import annotations

import logging
from typing import Optional

from entretelas.domain.errors import AppError
from entretelas.domain.invoice_summary import build_quarter_summary
from entretelas.domain.models import AmountTotals, Invoice, QuarterReport
from entretelas.store.optimistic import OptimisticCollection

log = logging.getLogger(__name__)


class InvoiceStore:
    """Invoices of one entidad (proveedor or cliente) as shown in its list."""

    def __init__(self, service, tipo: str = "compra"):
        self.service = service
        self.tipo = tipo
        self.entidad_id: Optional[int] = None
        self._invoices: OptimisticCollection[Invoice] = OptimisticCollection()

    @property
    def invoices(self) -> tuple[Invoice, ...]:
        return self._invoices.entries

    def reset(self) -> None:
        self.entidad_id = None
        self._invoices.replace_all(())

    def load(self, entidad_id: int) -> tuple[Invoice, ...]:
        self._invoices.replace_all(self.service.get_all_for_entidad(entidad_id, self.tipo))
        self.entidad_id = entidad_id
        return self.invoices

    def upload(self, **metadata) -> Invoice:
        if self.entidad_id is None:
            raise RuntimeError("load() an entidad before uploading")
        created = self.service.upload_pdf(entidad_id=self.entidad_id, tipo=self.tipo, **metadata)
        self._invoices.add(created)
        return created

    def update_metadata(self, invoice_id: int, **changes) -> Invoice:
        updated = self.service.update_pdf_metadata(invoice_id, **changes)
        self._invoices.update(updated)
        return updated

    def delete(self, invoice_id: int) -> None:
        self.service.delete_pdf(invoice_id)
        self._invoices.remove(invoice_id)

    def toggle_pagada(self, invoice_id: int, pagada: bool) -> Invoice:
        """Flip the paid flag on screen first, then persist it.

        A failed save puts the previous record back and re-raises.
        """
        token = self._invoices.apply_optimistic(invoice_id, {"pagada": 1 if pagada else 0})
        try:
            saved = self.service.update_pdf_metadata(invoice_id, pagada=pagada)
        except AppError:
            self._invoices.revert(token)
            log.warning("pagada_toggle_reverted invoice_id=%s", invoice_id)
            raise
        self._invoices.commit(token, saved)
        return saved

    def quarter_summary(self) -> QuarterReport[AmountTotals]:
        return build_quarter_summary(self.invoices, self.tipo, self.service.rules)
