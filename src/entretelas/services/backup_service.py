from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

log = logging.getLogger(__name__)

BACKUP_PATTERN = "entretelas-*.db"


def _backup_order(path: Path) -> tuple[str, int]:
    # entretelas-20260315-101500.db, then entretelas-20260315-101500-1.db, -2, ...
    parts = path.stem.split("-")
    if len(parts) == 4 and parts[3].isdigit():
        return "-".join(parts[:3]), int(parts[3])
    return path.stem, 0


class BackupService:
    def __init__(self, db_path: Path | str, backup_dir: Path | str, keep: int = 7):
        self.db_path = Path(db_path)
        self.backup_dir = Path(backup_dir)
        self.keep = keep

    def list_backups(self) -> list[Path]:
        if not self.backup_dir.exists():
            return []
        return sorted(self.backup_dir.glob(BACKUP_PATTERN), key=_backup_order)

    def create_backup(self) -> Path:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d-%H%M%S")
        target = self.backup_dir / f"entretelas-{ts}.db"
        suffix = 1
        while target.exists():
            target = self.backup_dir / f"entretelas-{ts}-{suffix}.db"
            suffix += 1

        src = sqlite3.connect(str(self.db_path))
        dst = sqlite3.connect(str(target))
        try:
            src.backup(dst)
        finally:
            dst.close()
            src.close()

        self._enforce_retention()
        log.info("backup_created path=%s", target)
        return target

    def restore_backup(self, backup_file: Path | str) -> Path:
        backup_path = Path(backup_file)
        if not backup_path.exists():
            raise FileNotFoundError(f"Backup not found: {backup_path}")

        src = sqlite3.connect(str(backup_path))
        dst = sqlite3.connect(str(self.db_path))
        try:
            src.backup(dst)
        finally:
            dst.close()
            src.close()
        log.warning("backup_restored source=%s", backup_path.name)
        return self.db_path

    def _enforce_retention(self) -> None:
        files = self.list_backups()
        if len(files) <= self.keep:
            return
        for old in files[: len(files) - self.keep]:
            old.unlink(missing_ok=True)
            log.info("backup_pruned path=%s", old.name)
