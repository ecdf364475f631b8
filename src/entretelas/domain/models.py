from __future__ import annotations
from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar, Union

Amount = Union[str, float, int, None]


# ---------- Proveedores / Clientes ----------
@dataclass(frozen=True)
class Proveedor:
    id: int
    razon_social: str
    direccion: Optional[str] = None
    nif: Optional[str] = None
    facturas_count: int = 0


@dataclass(frozen=True)
class Cliente:
    id: int
    razon_social: str
    numero_cliente: str
    direccion: Optional[str] = None
    nif: Optional[str] = None
    facturas_count: int = 0


# ---------- Facturas ----------
@dataclass(frozen=True)
class Invoice:
    id: int
    entidad_id: int
    tipo: str
    fecha: Optional[str]
    fecha_subida: Optional[str]
    importe: Amount = None
    importe_iva_re: Amount = None
    vencimiento: Optional[str] = None
    pagada: int = 0
    nombre_archivo: Optional[str] = None


# ---------- Arreglos ----------
@dataclass(frozen=True)
class Arreglo:
    id: int
    albaran: str
    fecha: str
    numero: str
    cliente: Optional[str]
    arreglo: Optional[str]
    importe: Amount


# ---------- Guardado ----------
@dataclass(frozen=True)
class Compartimento:
    id: int
    lugar_id: int
    nombre: str
    descripcion: Optional[str] = None
    orden: int = 0


@dataclass(frozen=True)
class Lugar:
    id: int
    nombre: str
    descripcion: Optional[str] = None
    compartimentos: tuple[Compartimento, ...] = ()


@dataclass(frozen=True)
class Asignacion:
    id: int
    producto_id: int
    lugar_id: Optional[int]
    compartimento_id: Optional[int] = None
    notas: Optional[str] = None
    lugar_nombre: Optional[str] = None
    compartimento_nombre: Optional[str] = None


@dataclass(frozen=True)
class Articulo:
    id: int
    producto_id: int
    nombre: str
    ref: Optional[str] = None
    descripcion: Optional[str] = None
    notas: Optional[str] = None
    lugar_id: Optional[int] = None
    compartimento_id: Optional[int] = None
    lugar_nombre: Optional[str] = None
    compartimento_nombre: Optional[str] = None


@dataclass(frozen=True)
class Producto:
    id: int
    nombre: str
    ref: Optional[str] = None
    descripcion: Optional[str] = None
    asignaciones: tuple[Asignacion, ...] = ()
    articulos: tuple[Articulo, ...] = ()


@dataclass(frozen=True)
class LocationGroup:
    loc_key: str
    lugar_id: Optional[int]
    compartimento_id: Optional[int]
    lugar_nombre: Optional[str]
    compartimento_nombre: Optional[str]
    articulos: tuple[Articulo, ...]


# ---------- Summaries ----------
@dataclass(frozen=True)
class MonthlyBucket:
    month_key: str
    month_label: str
    count: int = 0
    total_importe: float = 0.0
    entretelas: float = 0.0
    isa: float = 0.0
    loli: float = 0.0


@dataclass(frozen=True)
class AmountTotals:
    importe: float = 0.0
    amount_with_taxes: float = 0.0

    def __add__(self, other: "AmountTotals") -> "AmountTotals":
        return AmountTotals(
            importe=self.importe + other.importe,
            amount_with_taxes=self.amount_with_taxes + other.amount_with_taxes,
        )


@dataclass(frozen=True)
class FolderTotals:
    total: float = 0.0
    entretelas: float = 0.0
    isa: float = 0.0
    loli: float = 0.0

    def __add__(self, other: "FolderTotals") -> "FolderTotals":
        return FolderTotals(
            total=self.total + other.total,
            entretelas=self.entretelas + other.entretelas,
            isa=self.isa + other.isa,
            loli=self.loli + other.loli,
        )


T = TypeVar("T", AmountTotals, FolderTotals)


@dataclass(frozen=True)
class MonthTotal(Generic[T]):
    month_index: int
    label: str
    total: T


@dataclass(frozen=True)
class QuarterSummary(Generic[T]):
    key: str
    total: T
    months: tuple[MonthTotal[T], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class QuarterReport(Generic[T]):
    quarters: tuple[QuarterSummary[T], ...]
    annual_total: T


@dataclass(frozen=True)
class ArreglosSplit:
    total: float
    folder_share: float
    tienda_share: float
