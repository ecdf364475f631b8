from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from entretelas.config import DEFAULT_RULES, BusinessRules
from entretelas.domain.amounts import try_parse_amount
from entretelas.domain.arreglos_summary import (
    ALBARAN_OPTIONS,
    build_arreglos_quarter_summary,
    build_monthly_summary,
    normalize_folder_value,
    split_arreglos_total,
)
from entretelas.domain.dates import ISO_DATE
from entretelas.domain.errors import NotFoundError, ValidationError
from entretelas.domain.models import Arreglo, ArreglosSplit, FolderTotals, MonthlyBucket, QuarterReport
from entretelas.services.validation import optional_text, positive_id, required_text

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("albaran", "fecha", "numero", "importe")


def _valid_fecha(value: object) -> str:
    if not isinstance(value, str) or not ISO_DATE.fullmatch(value.strip()):
        raise ValidationError("fecha must be a valid YYYY-MM-DD date")
    text = value.strip()
    try:
        date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError("fecha must be a valid YYYY-MM-DD date") from exc
    return text


def _valid_albaran(value: object) -> str:
    folder = normalize_folder_value(value)
    if folder is None:
        raise ValidationError(f"albaran must be one of: {', '.join(ALBARAN_OPTIONS)}")
    return folder


def _valid_importe(value: object) -> float:
    parsed = try_parse_amount(value)
    if parsed is None or parsed < 0:
        raise ValidationError("importe must be a valid euro amount greater than or equal to 0")
    return parsed


_VALIDATORS = {
    "albaran": _valid_albaran,
    "fecha": _valid_fecha,
    "numero": lambda v: required_text(v, "numero", max_length=100),
    "cliente": lambda v: optional_text(v, "cliente", max_length=255),
    "arreglo": lambda v: optional_text(v, "arreglo", max_length=2000),
    "importe": _valid_importe,
}


def clean_arreglo_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Validate and normalize the fields present in ``data``; unknown keys are ignored."""
    cleaned = {}
    for field, validator in _VALIDATORS.items():
        if field in data and (data[field] is not None or field in ("cliente", "arreglo")):
            cleaned[field] = validator(data[field])
    return cleaned


class ArreglosService:
    def __init__(self, repo, rules: BusinessRules = DEFAULT_RULES):
        self.repo = repo
        self.rules = rules

    def get_all(self, year: Optional[int] = None) -> list[Arreglo]:
        return self.repo.list_arreglos(year)

    def create(self, **data: Any) -> Arreglo:
        for field in REQUIRED_FIELDS:
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"{field} is required")
        fields = clean_arreglo_fields(data)
        arreglo_id = self.repo.create_arreglo(
            albaran=fields["albaran"],
            fecha=fields["fecha"],
            numero=fields["numero"],
            cliente=fields.get("cliente"),
            arreglo=fields.get("arreglo"),
            importe=fields["importe"],
        )
        log.info("arreglo_created id=%s albaran=%s importe=%.2f", arreglo_id, fields["albaran"], fields["importe"])
        return self.repo.get_arreglo(arreglo_id)

    def update(self, arreglo_id: int, **changes: Any) -> Arreglo:
        arreglo_id = positive_id(arreglo_id)
        fields = clean_arreglo_fields(changes)
        if not self.repo.update_arreglo(arreglo_id, fields):
            raise NotFoundError("Arreglo entry not found")
        log.info("arreglo_updated id=%s fields=%s", arreglo_id, ",".join(sorted(fields)))
        return self.repo.get_arreglo(arreglo_id)

    def delete(self, arreglo_id: int) -> None:
        arreglo_id = positive_id(arreglo_id)
        if not self.repo.delete_arreglo(arreglo_id):
            raise NotFoundError("Arreglo entry not found")
        log.info("arreglo_deleted id=%s", arreglo_id)

    def monthly_summary(self, year: Optional[int] = None) -> list[MonthlyBucket]:
        return build_monthly_summary(self.repo.list_arreglos(year))

    def quarter_summary(self, year: int) -> QuarterReport[FolderTotals]:
        return build_arreglos_quarter_summary(self.repo.list_arreglos(year))

    def split(self, total_importe: object) -> ArreglosSplit:
        return split_arreglos_total(total_importe, self.rules)
