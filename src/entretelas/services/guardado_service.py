from __future__ import annotations

import logging
from typing import Any, Optional

from entretelas.domain.errors import NotFoundError, ValidationError
from entretelas.domain.models import Articulo, Asignacion, Compartimento, Lugar, Producto
from entretelas.services.validation import optional_id, optional_text, positive_id, required_text

log = logging.getLogger("entretelas.guardado")


class GuardadoService:
    def __init__(self, repo):
        self.repo = repo

    # ---------- Lugares ----------
    def get_lugares(self) -> list[Lugar]:
        return self.repo.list_lugares()

    def _require_lugar(self, lugar_id: int) -> None:
        if self.repo.get_lugar(lugar_id) is None:
            raise NotFoundError("Lugar not found")

    def _require_compartimento_in(self, compartimento_id: int, lugar_id: int) -> None:
        if not self.repo.compartimento_belongs_to(compartimento_id, lugar_id):
            raise NotFoundError("Compartimento not found or does not belong to specified lugar")

    def create_lugar(self, nombre: str, descripcion: Optional[str] = None) -> Lugar:
        nombre = required_text(nombre)
        descripcion = optional_text(descripcion, "descripcion")
        lugar_id = self.repo.create_lugar(nombre, descripcion)
        log.info("lugar_created id=%s nombre=%s", lugar_id, nombre)
        return self.repo.get_lugar(lugar_id)

    def update_lugar(self, lugar_id: int, nombre: str, descripcion: Optional[str] = None) -> Lugar:
        lugar_id = positive_id(lugar_id)
        nombre = required_text(nombre)
        descripcion = optional_text(descripcion, "descripcion")
        if not self.repo.update_lugar(lugar_id, nombre, descripcion):
            raise NotFoundError("Lugar not found")
        log.info("lugar_updated id=%s", lugar_id)
        return self.repo.get_lugar(lugar_id)

    def delete_lugar(self, lugar_id: int) -> None:
        lugar_id = positive_id(lugar_id)
        if not self.repo.delete_lugar(lugar_id):
            raise NotFoundError("Lugar not found")
        log.warning("lugar_deleted id=%s", lugar_id)

    # ---------- Compartimentos ----------
    def create_compartimento(self, lugar_id: int, nombre: str, descripcion: Optional[str] = None) -> Compartimento:
        lugar_id = positive_id(lugar_id, "lugar_id")
        nombre = required_text(nombre)
        descripcion = optional_text(descripcion, "descripcion")
        self._require_lugar(lugar_id)
        compartimento_id = self.repo.create_compartimento(lugar_id, nombre, descripcion)
        log.info("compartimento_created id=%s lugar_id=%s", compartimento_id, lugar_id)
        return self.repo.get_compartimento(compartimento_id)

    def update_compartimento(
        self, compartimento_id: int, nombre: str, descripcion: Optional[str] = None
    ) -> Compartimento:
        compartimento_id = positive_id(compartimento_id)
        nombre = required_text(nombre)
        descripcion = optional_text(descripcion, "descripcion")
        if not self.repo.update_compartimento(compartimento_id, nombre, descripcion):
            raise NotFoundError("Compartimento not found")
        log.info("compartimento_updated id=%s", compartimento_id)
        return self.repo.get_compartimento(compartimento_id)

    def delete_compartimento(self, compartimento_id: int) -> None:
        compartimento_id = positive_id(compartimento_id)
        if not self.repo.delete_compartimento(compartimento_id):
            raise NotFoundError("Compartimento not found")
        log.warning("compartimento_deleted id=%s", compartimento_id)

    # ---------- Productos ----------
    def get_productos(self) -> list[Producto]:
        return self.repo.list_productos()

    def create_producto(self, nombre: str, ref: Optional[str] = None, descripcion: Optional[str] = None) -> Producto:
        nombre = required_text(nombre)
        ref = optional_text(ref, "ref")
        descripcion = optional_text(descripcion, "descripcion")
        producto_id = self.repo.create_producto(nombre, ref, descripcion)
        log.info("producto_created id=%s nombre=%s", producto_id, nombre)
        return self.repo.get_producto(producto_id)

    def update_producto(
        self, producto_id: int, nombre: str, ref: Optional[str] = None, descripcion: Optional[str] = None
    ) -> Producto:
        producto_id = positive_id(producto_id)
        nombre = required_text(nombre)
        ref = optional_text(ref, "ref")
        descripcion = optional_text(descripcion, "descripcion")
        if not self.repo.update_producto(producto_id, nombre, ref, descripcion):
            raise NotFoundError("Producto not found")
        log.info("producto_updated id=%s", producto_id)
        return self.repo.get_producto(producto_id)

    def delete_producto(self, producto_id: int) -> None:
        producto_id = positive_id(producto_id)
        if not self.repo.delete_producto(producto_id):
            raise NotFoundError("Producto not found")
        log.warning("producto_deleted id=%s", producto_id)

    # ---------- Asignaciones ----------
    def create_asignacion(
        self,
        producto_id: int,
        lugar_id: int,
        compartimento_id: Optional[int] = None,
        notas: Optional[str] = None,
    ) -> Asignacion:
        producto_id = positive_id(producto_id, "producto_id")
        lugar_id = positive_id(lugar_id, "lugar_id")
        compartimento_id = optional_id(compartimento_id, "compartimento_id")
        notas = optional_text(notas, "notas")

        if self.repo.get_producto(producto_id) is None:
            raise NotFoundError("Producto not found")
        self._require_lugar(lugar_id)
        if compartimento_id is not None:
            self._require_compartimento_in(compartimento_id, lugar_id)

        asignacion_id = self.repo.create_asignacion(producto_id, lugar_id, compartimento_id, notas)
        log.info("asignacion_created id=%s producto_id=%s lugar_id=%s", asignacion_id, producto_id, lugar_id)
        return self.repo.get_asignacion(asignacion_id)

    def update_asignacion(self, asignacion_id: int, **changes: Any) -> Asignacion:
        """Accepts ``lugar_id``, ``compartimento_id`` and ``notas``.

        Moving to another lugar without naming a compartimento clears it.
        """
        asignacion_id = positive_id(asignacion_id)
        existing = self.repo.get_asignacion(asignacion_id)
        if existing is None:
            raise NotFoundError("Asignacion not found")

        lugar_id = existing.lugar_id
        compartimento_id = existing.compartimento_id
        if changes.get("lugar_id") is not None:
            lugar_id = positive_id(changes["lugar_id"], "lugar_id")
            if lugar_id != existing.lugar_id:
                self._require_lugar(lugar_id)
                compartimento_id = None
        if "compartimento_id" in changes:
            compartimento_id = optional_id(changes["compartimento_id"], "compartimento_id")
        if compartimento_id is not None:
            self._require_compartimento_in(compartimento_id, lugar_id)

        notas = existing.notas
        if "notas" in changes:
            notas = optional_text(changes["notas"], "notas")

        self.repo.update_asignacion(asignacion_id, lugar_id, compartimento_id, notas)
        log.info("asignacion_updated id=%s lugar_id=%s", asignacion_id, lugar_id)
        return self.repo.get_asignacion(asignacion_id)

    def delete_asignacion(self, asignacion_id: int) -> None:
        asignacion_id = positive_id(asignacion_id)
        if not self.repo.delete_asignacion(asignacion_id):
            raise NotFoundError("Asignacion not found")
        log.info("asignacion_deleted id=%s", asignacion_id)

    # ---------- Articulos ----------
    def _location(self, lugar_id: object, compartimento_id: object) -> tuple[Optional[int], Optional[int]]:
        lugar = optional_id(lugar_id, "lugar_id")
        compartimento = optional_id(compartimento_id, "compartimento_id")
        if lugar is None:
            if compartimento is not None:
                raise ValidationError("compartimento_id requires lugar_id")
            return None, None
        self._require_lugar(lugar)
        if compartimento is not None:
            self._require_compartimento_in(compartimento, lugar)
        return lugar, compartimento

    def create_articulo(
        self,
        producto_id: int,
        nombre: str,
        ref: Optional[str] = None,
        descripcion: Optional[str] = None,
        notas: Optional[str] = None,
        lugar_id: Optional[int] = None,
        compartimento_id: Optional[int] = None,
    ) -> Articulo:
        producto_id = positive_id(producto_id, "producto_id")
        nombre = required_text(nombre)
        ref = optional_text(ref, "ref")
        descripcion = optional_text(descripcion, "descripcion")
        notas = optional_text(notas, "notas")
        if self.repo.get_producto(producto_id) is None:
            raise NotFoundError("Producto not found")
        lugar, compartimento = self._location(lugar_id, compartimento_id)

        articulo_id = self.repo.create_articulo(producto_id, nombre, ref, descripcion, notas, lugar, compartimento)
        log.info("articulo_created id=%s producto_id=%s lugar_id=%s", articulo_id, producto_id, lugar)
        return self.repo.get_articulo(articulo_id)

    def update_articulo(self, articulo_id: int, **changes: Any) -> Articulo:
        """Partial update; a new ``lugar_id`` resets the compartimento unless one is given."""
        articulo_id = positive_id(articulo_id)
        existing = self.repo.get_articulo(articulo_id)
        if existing is None:
            raise NotFoundError("Articulo not found")

        nombre = existing.nombre
        if "nombre" in changes:
            nombre = required_text(changes["nombre"])
        ref = optional_text(changes["ref"], "ref") if "ref" in changes else existing.ref
        descripcion = (
            optional_text(changes["descripcion"], "descripcion") if "descripcion" in changes else existing.descripcion
        )
        notas = optional_text(changes["notas"], "notas") if "notas" in changes else existing.notas

        lugar_id = existing.lugar_id
        compartimento_id = existing.compartimento_id
        if "lugar_id" in changes:
            lugar_id = changes["lugar_id"]
            compartimento_id = None
        if "compartimento_id" in changes:
            compartimento_id = changes["compartimento_id"]
        lugar_id, compartimento_id = self._location(lugar_id, compartimento_id)

        self.repo.update_articulo(articulo_id, nombre, ref, descripcion, notas, lugar_id, compartimento_id)
        log.info("articulo_updated id=%s lugar_id=%s compartimento_id=%s", articulo_id, lugar_id, compartimento_id)
        return self.repo.get_articulo(articulo_id)

    def delete_articulo(self, articulo_id: int) -> None:
        articulo_id = positive_id(articulo_id)
        if not self.repo.delete_articulo(articulo_id):
            raise NotFoundError("Articulo not found")
        log.info("articulo_deleted id=%s", articulo_id)
