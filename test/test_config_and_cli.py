import json
import logging
from pathlib import Path

import pytest

from entretelas.application.container import build_container
from entretelas.config import DEFAULT_RULES, get_app_paths, load_business_rules
from entretelas.domain.errors import NotFoundError, ValidationError, user_message
from entretelas.logging_config import JsonFormatter
from entretelas.main import main


def test_app_paths_honour_home_override(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("ENTRETELAS_HOME", str(tmp_path / "home"))
    paths = get_app_paths()

    assert paths.base_dir == tmp_path / "home"
    assert paths.db_path.name == "entretelas.db"
    assert paths.logs_dir.is_dir()


def test_business_rules_from_environment(monkeypatch):
    monkeypatch.setenv("ENTRETELAS_IVA_VENTA", "1.10")
    monkeypatch.delenv("ENTRETELAS_IVA_DEFAULT", raising=False)
    monkeypatch.delenv("ENTRETELAS_FOLDER_SHARE", raising=False)

    rules = load_business_rules()
    assert rules.venta_multiplier == pytest.approx(1.10)
    assert rules.default_multiplier == DEFAULT_RULES.default_multiplier
    assert rules.tax_multiplier("venta") == pytest.approx(1.10)
    assert rules.tax_multiplier("compra") == DEFAULT_RULES.default_multiplier
    assert rules.tax_multiplier(None) == DEFAULT_RULES.default_multiplier


@pytest.mark.parametrize(
    "name, value",
    [("ENTRETELAS_IVA_VENTA", "abc"), ("ENTRETELAS_IVA_DEFAULT", "-1"), ("ENTRETELAS_FOLDER_SHARE", "1.5")],
)
def test_bad_business_rules_are_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        load_business_rules()


def test_migrations_are_idempotent(tmp_path: Path):
    container = build_container(tmp_path / "m.db")
    assert container.repo.schema_version() == 4

    container.repo.init_db()
    assert container.repo.schema_version() == 4
    assert container.repo.integrity_check() == "ok"


def test_user_messages():
    assert user_message(ValidationError("nombre is required")) == "Por favor, revisa los datos ingresados"
    assert user_message(NotFoundError("Lugar not found")) == "Entrada no encontrada"
    assert user_message(RuntimeError("boom")) == "Error al guardar los datos"


def test_json_formatter_keeps_extra_context():
    record = logging.makeLogRecord(
        {"name": "entretelas.guardado", "levelno": logging.INFO, "levelname": "INFO",
         "msg": "lugar_deleted id=%s", "args": (3,), "lugar_id": 3}
    )
    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "lugar_deleted id=3"
    assert payload["logger"] == "entretelas.guardado"
    assert payload["context"] == {"lugar_id": 3}


def test_cli_summary_export_and_backup(monkeypatch, tmp_path: Path, capsys):
    monkeypatch.setenv("ENTRETELAS_HOME", str(tmp_path / "home"))
    for name in ("ENTRETELAS_IVA_VENTA", "ENTRETELAS_IVA_DEFAULT", "ENTRETELAS_FOLDER_SHARE"):
        monkeypatch.delenv(name, raising=False)

    container = build_container(get_app_paths().db_path)
    container.arreglos.create(albaran="Loli", fecha="2026-03-05", numero="7", importe=200)

    assert main(["summary", "--year", "2026"]) == 0
    out = capsys.readouterr().out
    assert "Compras 2026" in out
    assert "Marzo de 2026: 1 arreglos, 200,00 €" in out
    assert "carpetas 130,00 €, tienda 70,00 €" in out

    target = tmp_path / "resumen.xlsx"
    assert main(["export", "--year", "2026", "--out", str(target)]) == 0
    assert target.exists()

    assert main(["backup"]) == 0
    assert len(list((tmp_path / "home" / "backups").glob("entretelas-*.db"))) == 1


def test_cli_reports_bad_configuration(monkeypatch, tmp_path: Path, capsys):
    monkeypatch.setenv("ENTRETELAS_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("ENTRETELAS_FOLDER_SHARE", "abc")

    assert main(["summary"]) == 1
    assert "Configuración no válida" in capsys.readouterr().out
