from __future__ import annotations

import unicodedata
from typing import Iterable, Optional, Union

from entretelas.domain.models import Articulo, Asignacion, LocationGroup, Producto

UNASSIGNED_KEY = "__unassigned__"


def name_sort_key(text: Optional[str]) -> tuple[str, str]:
    """Case- and accent-insensitive ordering for Spanish names.

    'Ático' sorts next to 'atico'; the casefolded original breaks ties so
    the order stays deterministic.
    """
    value = text or ""
    decomposed = unicodedata.normalize("NFKD", value)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return folded, value.casefold()


def sort_by_nombre(items: Iterable) -> tuple:
    return tuple(sorted(items, key=lambda it: name_sort_key(it.nombre)))


def location_key(lugar_id: Optional[int], compartimento_id: Optional[int]) -> str:
    if lugar_id is None:
        return UNASSIGNED_KEY
    return f"{lugar_id}:{'' if compartimento_id is None else compartimento_id}"


def group_articulos_by_location(articulos: Iterable[Articulo]) -> list[LocationGroup]:
    groups: dict[str, list[Articulo]] = {}
    for art in articulos:
        key = location_key(art.lugar_id, art.compartimento_id if art.lugar_id is not None else None)
        groups.setdefault(key, []).append(art)

    result = []
    unassigned = None
    for key, members in groups.items():
        first = members[0]
        if key == UNASSIGNED_KEY:
            unassigned = LocationGroup(
                loc_key=key,
                lugar_id=None,
                compartimento_id=None,
                lugar_nombre=None,
                compartimento_nombre=None,
                articulos=tuple(members),
            )
            continue
        result.append(
            LocationGroup(
                loc_key=key,
                lugar_id=first.lugar_id,
                compartimento_id=first.compartimento_id,
                lugar_nombre=first.lugar_nombre,
                compartimento_nombre=first.compartimento_nombre,
                articulos=tuple(members),
            )
        )

    result.sort(key=lambda g: (name_sort_key(g.lugar_nombre), name_sort_key(g.compartimento_nombre)))
    if unassigned is not None:
        result.append(unassigned)
    return result


def display_mode(producto: Producto) -> str:
    return "articulos" if producto.articulos else "asignaciones"


def location_entries(producto: Producto) -> Union[list[LocationGroup], tuple[Asignacion, ...]]:
    """What the Guardado page lists under a producto."""
    if display_mode(producto) == "articulos":
        return group_articulos_by_location(producto.articulos)
    return producto.asignaciones
