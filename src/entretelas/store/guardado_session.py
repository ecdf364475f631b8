from __future__ import annotations

from typing import Any, Optional

from entretelas.domain.models import Articulo, Asignacion, Compartimento, Lugar, Producto
from entretelas.store.guardado_store import GuardadoStore


class GuardadoSession:
    """Runs a Guardado mutation through the service, then mirrors it in the store.

    Service errors propagate and leave the store untouched.
    """

    def __init__(self, service, store: Optional[GuardadoStore] = None):
        self.service = service
        self.store = store if store is not None else GuardadoStore()

    def refresh(self) -> GuardadoStore:
        self.store.load(self.service.get_lugares(), self.service.get_productos())
        return self.store

    def create_lugar(self, nombre: str, descripcion: Optional[str] = None) -> Lugar:
        lugar = self.service.create_lugar(nombre, descripcion)
        self.store.add_lugar(lugar)
        return lugar

    def update_lugar(self, lugar_id: int, nombre: str, descripcion: Optional[str] = None) -> Lugar:
        lugar = self.service.update_lugar(lugar_id, nombre, descripcion)
        self.store.update_lugar(lugar)
        return lugar

    def delete_lugar(self, lugar_id: int) -> None:
        self.service.delete_lugar(lugar_id)
        self.store.delete_lugar(lugar_id)

    def create_compartimento(self, lugar_id: int, nombre: str, descripcion: Optional[str] = None) -> Compartimento:
        compartimento = self.service.create_compartimento(lugar_id, nombre, descripcion)
        self.store.add_compartimento(compartimento)
        return compartimento

    def update_compartimento(
        self, compartimento_id: int, nombre: str, descripcion: Optional[str] = None
    ) -> Compartimento:
        compartimento = self.service.update_compartimento(compartimento_id, nombre, descripcion)
        self.store.update_compartimento(compartimento)
        return compartimento

    def delete_compartimento(self, compartimento_id: int) -> None:
        self.service.delete_compartimento(compartimento_id)
        self.store.delete_compartimento(compartimento_id)

    def create_producto(self, nombre: str, ref: Optional[str] = None, descripcion: Optional[str] = None) -> Producto:
        producto = self.service.create_producto(nombre, ref, descripcion)
        self.store.add_producto(producto)
        return producto

    def update_producto(
        self, producto_id: int, nombre: str, ref: Optional[str] = None, descripcion: Optional[str] = None
    ) -> Producto:
        producto = self.service.update_producto(producto_id, nombre, ref, descripcion)
        self.store.update_producto(producto)
        return producto

    def delete_producto(self, producto_id: int) -> None:
        self.service.delete_producto(producto_id)
        self.store.delete_producto(producto_id)

    def create_asignacion(self, producto_id: int, lugar_id: int, **extra: Any) -> Asignacion:
        asignacion = self.service.create_asignacion(producto_id, lugar_id, **extra)
        self.store.add_asignacion(asignacion)
        return asignacion

    def update_asignacion(self, asignacion_id: int, **changes: Any) -> Asignacion:
        asignacion = self.service.update_asignacion(asignacion_id, **changes)
        self.store.update_asignacion(asignacion)
        return asignacion

    def delete_asignacion(self, asignacion_id: int) -> None:
        self.service.delete_asignacion(asignacion_id)
        self.store.delete_asignacion(asignacion_id)

    def create_articulo(self, producto_id: int, nombre: str, **extra: Any) -> Articulo:
        articulo = self.service.create_articulo(producto_id, nombre, **extra)
        self.store.add_articulo(articulo)
        return articulo

    def update_articulo(self, articulo_id: int, **changes: Any) -> Articulo:
        articulo = self.service.update_articulo(articulo_id, **changes)
        self.store.update_articulo(articulo)
        return articulo

    def delete_articulo(self, articulo_id: int) -> None:
        self.service.delete_articulo(articulo_id)
        self.store.delete_articulo(articulo_id)
