from .guardado_service import GuardadoService
from .arreglos_service import ArreglosService
from .facturas_service import FacturasService
from .entidades_service import EntidadesService
from .reporting_service import ReportingService
from .backup_service import BackupService

__all__ = [
    "GuardadoService",
    "ArreglosService",
    "FacturasService",
    "EntidadesService",
    "ReportingService",
    "BackupService",
]
