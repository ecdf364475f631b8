from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from entretelas.config import DEFAULT_RULES, BusinessRules
from entretelas.repositories.sqlite_repo import SqliteRepository
from entretelas.services.arreglos_service import ArreglosService
from entretelas.services.backup_service import BackupService
from entretelas.services.entidades_service import EntidadesService
from entretelas.services.facturas_service import FacturasService
from entretelas.services.guardado_service import GuardadoService
from entretelas.services.reporting_service import ReportingService
from entretelas.store.guardado_session import GuardadoSession
from entretelas.store.guardado_store import GuardadoStore


@dataclass(frozen=True)
class AppContainer:
    repo: SqliteRepository
    rules: BusinessRules
    guardado: GuardadoService
    arreglos: ArreglosService
    entidades: EntidadesService
    facturas: FacturasService
    reporting: ReportingService
    backup: BackupService

    def guardado_session(self) -> GuardadoSession:
        """A fresh store bound to the Guardado service; each consumer gets its own."""
        return GuardadoSession(self.guardado, GuardadoStore())


def build_container(
    db_path: Path | str,
    rules: BusinessRules = DEFAULT_RULES,
    backup_dir: Path | str | None = None,
) -> AppContainer:
    repo = SqliteRepository(db_path)
    repo.init_db()

    guardado = GuardadoService(repo)
    arreglos = ArreglosService(repo, rules)
    entidades = EntidadesService(repo)
    facturas = FacturasService(repo, rules)
    reporting = ReportingService(facturas, arreglos)
    backup = BackupService(db_path, backup_dir or Path(db_path).parent / "backups")

    return AppContainer(
        repo=repo,
        rules=rules,
        guardado=guardado,
        arreglos=arreglos,
        entidades=entidades,
        facturas=facturas,
        reporting=reporting,
        backup=backup,
    )
