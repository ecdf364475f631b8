from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import sys


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    db_path: Path
    logs_dir: Path
    backups_dir: Path


@dataclass(frozen=True)
class BusinessRules:
    """Tax multipliers and the arreglos revenue split."""

    venta_multiplier: float = 1.21
    default_multiplier: float = 1.262
    folder_share_ratio: float = 0.65

    def tax_multiplier(self, tipo: str | None) -> float:
        if tipo == "venta":
            return self.venta_multiplier
        return self.default_multiplier


DEFAULT_RULES = BusinessRules()


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def get_app_paths(app_name: str = "Entretelas") -> AppPaths:
    override = os.environ.get("ENTRETELAS_HOME", "").strip()
    if override:
        base = Path(override)
    elif sys.platform.startswith("win"):
        base = _windows_appdata() / app_name
    elif sys.platform == "darwin":
        base = _mac_app_support() / app_name
    else:
        base = Path.home() / f".{app_name.lower()}"

    logs = base / "logs"
    backups = base / "backups"
    db = base / "entretelas.db"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, db_path=db, logs_dir=logs, backups_dir=backups)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")
    return value


def load_business_rules() -> BusinessRules:
    ratio = _env_float("ENTRETELAS_FOLDER_SHARE", DEFAULT_RULES.folder_share_ratio)
    if ratio > 1:
        raise ValueError(f"ENTRETELAS_FOLDER_SHARE must be <= 1, got {ratio}")
    return BusinessRules(
        venta_multiplier=_env_float("ENTRETELAS_IVA_VENTA", DEFAULT_RULES.venta_multiplier),
        default_multiplier=_env_float("ENTRETELAS_IVA_DEFAULT", DEFAULT_RULES.default_multiplier),
        folder_share_ratio=ratio,
    )
