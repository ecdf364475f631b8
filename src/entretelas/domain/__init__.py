from .models import (
    Proveedor,
    Cliente,
    Invoice,
    Arreglo,
    Lugar,
    Compartimento,
    Producto,
    Asignacion,
    Articulo,
    LocationGroup,
    MonthlyBucket,
    AmountTotals,
    FolderTotals,
    QuarterSummary,
    QuarterReport,
    ArreglosSplit,
)
from .errors import AppError, ValidationError, NotFoundError, PersistenceError, user_message

__all__ = [
    "Proveedor",
    "Cliente",
    "Invoice",
    "Arreglo",
    "Lugar",
    "Compartimento",
    "Producto",
    "Asignacion",
    "Articulo",
    "LocationGroup",
    "MonthlyBucket",
    "AmountTotals",
    "FolderTotals",
    "QuarterSummary",
    "QuarterReport",
    "ArreglosSplit",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    "user_message",
]
