from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, Optional

from entretelas.domain.models import Articulo, Asignacion, Compartimento, Lugar, Producto
from entretelas.domain.storage import sort_by_nombre


def _without_location(record):
    return replace(
        record,
        lugar_id=None,
        lugar_nombre=None,
        compartimento_id=None,
        compartimento_nombre=None,
    )


def _without_compartimento(record):
    return replace(record, compartimento_id=None, compartimento_nombre=None)


class GuardadoStore:
    """Client-side copy of lugares and productos for the Guardado page.

    Rebuilt with ``load`` from the repository and then kept in step by
    calling one mutation per successful service call. Records are frozen;
    every mutation swaps in new tuples, so snapshots taken earlier stay
    valid.
    """

    def __init__(self, lugares: Iterable[Lugar] = (), productos: Iterable[Producto] = ()):
        self.lugares: tuple[Lugar, ...] = ()
        self.productos: tuple[Producto, ...] = ()
        self.load(lugares, productos)

    # ---------- Lifecycle ----------
    def load(self, lugares: Iterable[Lugar], productos: Iterable[Producto]) -> None:
        self.lugares = sort_by_nombre(
            replace(l, compartimentos=sort_by_nombre(l.compartimentos)) for l in lugares
        )
        self.productos = sort_by_nombre(
            replace(p, articulos=sort_by_nombre(p.articulos)) for p in productos
        )

    def reset(self) -> None:
        self.lugares = ()
        self.productos = ()

    # ---------- Lookups ----------
    def get_lugar(self, lugar_id: int) -> Optional[Lugar]:
        return next((l for l in self.lugares if l.id == lugar_id), None)

    def get_producto(self, producto_id: int) -> Optional[Producto]:
        return next((p for p in self.productos if p.id == producto_id), None)

    def _map_productos(self, fn: Callable[[Producto], Producto]) -> None:
        self.productos = tuple(fn(p) for p in self.productos)

    def _map_locations(self, asignacion_fn, articulo_fn) -> None:
        self._map_productos(
            lambda p: replace(
                p,
                asignaciones=tuple(asignacion_fn(a) for a in p.asignaciones),
                articulos=tuple(articulo_fn(a) for a in p.articulos),
            )
        )

    # ---------- Lugares ----------
    def add_lugar(self, lugar: Lugar) -> None:
        lugar = replace(lugar, compartimentos=sort_by_nombre(lugar.compartimentos))
        self.lugares = sort_by_nombre(self.lugares + (lugar,))

    def update_lugar(self, lugar: Lugar) -> None:
        if self.get_lugar(lugar.id) is None:
            return
        lugar = replace(lugar, compartimentos=sort_by_nombre(lugar.compartimentos))
        self.lugares = sort_by_nombre(lugar if l.id == lugar.id else l for l in self.lugares)

        def rename(record):
            if record.lugar_id != lugar.id:
                return record
            return replace(record, lugar_nombre=lugar.nombre)

        self._map_locations(rename, rename)

    def delete_lugar(self, lugar_id: int) -> None:
        removed = self.get_lugar(lugar_id)
        if removed is None:
            return
        compartimento_ids = {c.id for c in removed.compartimentos}
        self.lugares = tuple(l for l in self.lugares if l.id != lugar_id)

        def strip_articulo(art: Articulo) -> Articulo:
            if art.lugar_id == lugar_id:
                return _without_location(art)
            if art.compartimento_id in compartimento_ids:
                return _without_compartimento(art)
            return art

        self._map_productos(
            lambda p: replace(
                p,
                asignaciones=tuple(a for a in p.asignaciones if a.lugar_id != lugar_id),
                articulos=tuple(strip_articulo(a) for a in p.articulos),
            )
        )

    # ---------- Compartimentos ----------
    def _replace_lugar(self, lugar_id: int, fn: Callable[[Lugar], Lugar]) -> None:
        self.lugares = tuple(fn(l) if l.id == lugar_id else l for l in self.lugares)

    def add_compartimento(self, compartimento: Compartimento) -> None:
        self._replace_lugar(
            compartimento.lugar_id,
            lambda l: replace(l, compartimentos=sort_by_nombre(l.compartimentos + (compartimento,))),
        )

    def update_compartimento(self, compartimento: Compartimento) -> None:
        self._replace_lugar(
            compartimento.lugar_id,
            lambda l: replace(
                l,
                compartimentos=sort_by_nombre(
                    compartimento if c.id == compartimento.id else c for c in l.compartimentos
                ),
            ),
        )

        def rename(record):
            if record.compartimento_id != compartimento.id:
                return record
            return replace(record, compartimento_nombre=compartimento.nombre)

        self._map_locations(rename, rename)

    def delete_compartimento(self, compartimento_id: int) -> None:
        self.lugares = tuple(
            replace(l, compartimentos=tuple(c for c in l.compartimentos if c.id != compartimento_id))
            for l in self.lugares
        )

        def strip(record):
            if record.compartimento_id != compartimento_id:
                return record
            return _without_compartimento(record)

        self._map_locations(strip, strip)

    # ---------- Productos ----------
    def add_producto(self, producto: Producto) -> None:
        producto = replace(producto, articulos=sort_by_nombre(producto.articulos))
        self.productos = sort_by_nombre(self.productos + (producto,))

    def update_producto(self, producto: Producto) -> None:
        producto = replace(producto, articulos=sort_by_nombre(producto.articulos))
        self.productos = sort_by_nombre(
            producto if p.id == producto.id else p for p in self.productos
        )

    def delete_producto(self, producto_id: int) -> None:
        self.productos = tuple(p for p in self.productos if p.id != producto_id)

    def _replace_producto(self, producto_id: int, fn: Callable[[Producto], Producto]) -> None:
        self._map_productos(lambda p: fn(p) if p.id == producto_id else p)

    # ---------- Asignaciones ----------
    def add_asignacion(self, asignacion: Asignacion) -> None:
        self._replace_producto(
            asignacion.producto_id,
            lambda p: replace(p, asignaciones=p.asignaciones + (asignacion,)),
        )

    def update_asignacion(self, asignacion: Asignacion) -> None:
        self._replace_producto(
            asignacion.producto_id,
            lambda p: replace(
                p,
                asignaciones=tuple(asignacion if a.id == asignacion.id else a for a in p.asignaciones),
            ),
        )

    def delete_asignacion(self, asignacion_id: int) -> None:
        self._map_productos(
            lambda p: replace(p, asignaciones=tuple(a for a in p.asignaciones if a.id != asignacion_id))
        )

    # ---------- Articulos ----------
    def add_articulo(self, articulo: Articulo) -> None:
        self._replace_producto(
            articulo.producto_id,
            lambda p: replace(p, articulos=sort_by_nombre(p.articulos + (articulo,))),
        )

    def update_articulo(self, articulo: Articulo) -> None:
        self._replace_producto(
            articulo.producto_id,
            lambda p: replace(
                p,
                articulos=sort_by_nombre(articulo if a.id == articulo.id else a for a in p.articulos),
            ),
        )

    def delete_articulo(self, articulo_id: int) -> None:
        self._map_productos(
            lambda p: replace(p, articulos=tuple(a for a in p.articulos if a.id != articulo_id))
        )
