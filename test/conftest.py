import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def repo(tmp_path: Path):
    from entretelas.repositories.sqlite_repo import SqliteRepository

    r = SqliteRepository(tmp_path / "entretelas.db")
    r.init_db()
    return r


@pytest.fixture
def container(tmp_path: Path):
    from entretelas.application.container import build_container

    return build_container(tmp_path / "entretelas.db", backup_dir=tmp_path / "backups")
