from __future__ import annotations

import logging
from typing import Any, Optional

from entretelas.domain.errors import NotFoundError
from entretelas.domain.models import Cliente, Proveedor
from entretelas.services.validation import optional_text, positive_id, required_text

log = logging.getLogger(__name__)


def _proveedor_fields(data: dict[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if "razon_social" in data:
        fields["razon_social"] = required_text(data["razon_social"], "razon_social")
    if "direccion" in data:
        fields["direccion"] = optional_text(data["direccion"], "direccion", max_length=255)
    if "nif" in data:
        fields["nif"] = optional_text(data["nif"], "nif", max_length=20)
    return fields


def _cliente_fields(data: dict[str, Any]) -> dict[str, Any]:
    fields = _proveedor_fields(data)
    if "numero_cliente" in data:
        fields["numero_cliente"] = required_text(data["numero_cliente"], "numero_cliente", max_length=50)
    return fields


class EntidadesService:
    """Proveedores (purchase invoices) and clientes (sales invoices)."""

    def __init__(self, repo):
        self.repo = repo

    # ---------- Proveedores ----------
    def get_proveedores(self) -> list[Proveedor]:
        return self.repo.list_proveedores()

    def create_proveedor(self, razon_social: str, direccion: Optional[str] = None, nif: Optional[str] = None) -> Proveedor:
        fields = _proveedor_fields({"razon_social": razon_social, "direccion": direccion, "nif": nif})
        proveedor_id = self.repo.create_proveedor(fields["razon_social"], fields["direccion"], fields["nif"])
        log.info("proveedor_created id=%s", proveedor_id)
        return self.repo.get_proveedor(proveedor_id)

    def update_proveedor(self, proveedor_id: int, **changes: Any) -> Proveedor:
        proveedor_id = positive_id(proveedor_id)
        fields = _proveedor_fields(changes)
        if not self.repo.update_proveedor(proveedor_id, fields):
            raise NotFoundError("Proveedor not found")
        log.info("proveedor_updated id=%s fields=%s", proveedor_id, ",".join(sorted(fields)))
        return self.repo.get_proveedor(proveedor_id)

    def delete_proveedor(self, proveedor_id: int) -> None:
        proveedor_id = positive_id(proveedor_id)
        if not self.repo.delete_entidad("proveedor", proveedor_id):
            raise NotFoundError("Proveedor not found")
        log.warning("proveedor_deleted id=%s", proveedor_id)

    # ---------- Clientes ----------
    def get_clientes(self) -> list[Cliente]:
        return self.repo.list_clientes()

    def create_cliente(
        self,
        razon_social: str,
        numero_cliente: str,
        direccion: Optional[str] = None,
        nif: Optional[str] = None,
    ) -> Cliente:
        fields = _cliente_fields(
            {"razon_social": razon_social, "numero_cliente": numero_cliente, "direccion": direccion, "nif": nif}
        )
        cliente_id = self.repo.create_cliente(
            fields["razon_social"], fields["numero_cliente"], fields["direccion"], fields["nif"]
        )
        log.info("cliente_created id=%s numero_cliente=%s", cliente_id, fields["numero_cliente"])
        return self.repo.get_cliente(cliente_id)

    def update_cliente(self, cliente_id: int, **changes: Any) -> Cliente:
        cliente_id = positive_id(cliente_id)
        fields = _cliente_fields(changes)
        if not self.repo.update_cliente(cliente_id, fields):
            raise NotFoundError("Cliente not found")
        log.info("cliente_updated id=%s fields=%s", cliente_id, ",".join(sorted(fields)))
        return self.repo.get_cliente(cliente_id)

    def delete_cliente(self, cliente_id: int) -> None:
        cliente_id = positive_id(cliente_id)
        if not self.repo.delete_entidad("cliente", cliente_id):
            raise NotFoundError("Cliente not found")
        log.warning("cliente_deleted id=%s", cliente_id)
