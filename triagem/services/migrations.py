"""Adapters from legacy candidate shapes to the canonical schema.

Candidate rows have existed in three shapes:

``sheets``
    Rows exported from the original spreadsheet: upper-case column names
    (``NOMECOMPLETO``, ``CPF``, ``AREAATUACAO`` ...) and every value a
    string, blanks included.
``wide``
    The same upper-case columns persisted flat, with typed system columns
    (``status``, ``assigned_*``, ``priority``) and a top-level ``notes``.
``normalized``
    The current schema: a few queryable columns plus the ``data`` JSON
    column (see ``triagem.models.candidate``).

``adapt_record()`` turns a row of any shape into a ``CandidateCreate``.
Columns the mapping does not know are kept verbatim inside ``data``.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from triagem.core.constants import (
    AREA_ADMINISTRATIVA,
    LEGACY_COLUMN_MAP,
    LEGACY_MARKER_COLUMNS,
    LEGACY_SYSTEM_COLUMNS,
)
from triagem.core.exceptions import LegacySchemaError
from triagem.models.candidate import CandidateCreate, CandidateData
from triagem.models.enums import SchemaVersion

logger = logging.getLogger(__name__)

# Columns owned by the database; never copied from an imported row.
_SERVER_COLUMNS: frozenset[str] = frozenset({"id", "created_at", "updated_at"})

_REQUIRED_COLUMNS: tuple[str, ...] = ("registration_number", "name", "area")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def detect_schema_version(row: dict[str, Any]) -> SchemaVersion:
    """Classify *row* as one of the known candidate shapes."""
    if not LEGACY_MARKER_COLUMNS.intersection(row):
        return SchemaVersion.normalized
    if all(isinstance(v, str) for v in row.values() if v is not None):
        return SchemaVersion.sheets
    return SchemaVersion.wide


def _coerce_priority(value: Any) -> int:
    if isinstance(value, bool):
        raise LegacySchemaError(f"Prioridade inválida: {value!r}")
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise LegacySchemaError(f"Prioridade inválida: {value!r}") from exc


def _cargo_key(area: str | None) -> str:
    if area and area.strip().lower() == AREA_ADMINISTRATIVA.lower():
        return "cargo_administrativo"
    return "cargo_assistencial"


def _from_legacy(row: dict[str, Any]) -> dict[str, Any]:
    """Map a ``sheets`` or ``wide`` row onto canonical column names."""
    canonical: dict[str, Any] = {}
    data: dict[str, Any] = {}
    cargo: str | None = None

    for key, value in row.items():
        if key in _SERVER_COLUMNS or _is_blank(value):
            continue
        if key == "CARGOPRETENDIDO":
            cargo = str(value).strip()
            continue

        target = LEGACY_COLUMN_MAP.get(key)
        if target is None:
            if key == "registration_number":
                canonical[key] = str(value).strip()
            elif key in LEGACY_SYSTEM_COLUMNS:
                canonical[key] = value.strip() if isinstance(value, str) else value
            else:
                data[key] = value
        elif target.startswith("data."):
            data[target.removeprefix("data.")] = str(value).strip()
        else:
            canonical[target] = str(value).strip()

    if cargo:
        data[_cargo_key(canonical.get("area"))] = cargo
    if "priority" in canonical:
        canonical["priority"] = _coerce_priority(canonical["priority"])

    canonical["data"] = data
    return canonical


def _from_normalized(row: dict[str, Any]) -> dict[str, Any]:
    canonical = {k: v for k, v in row.items() if k not in _SERVER_COLUMNS}
    if canonical.get("data") is None:
        canonical["data"] = {}
    if canonical.get("priority") is None:
        canonical.pop("priority", None)
    return canonical


def adapt_record(row: dict[str, Any]) -> CandidateCreate:
    """Adapt a candidate row of any known shape to ``CandidateCreate``.

    Raises ``LegacySchemaError`` when a required column is missing or a
    value cannot be converted.
    """
    version = detect_schema_version(row)
    if version is SchemaVersion.normalized:
        canonical = _from_normalized(row)
    else:
        canonical = _from_legacy(row)

    missing = [c for c in _REQUIRED_COLUMNS if _is_blank(canonical.get(c))]
    if missing:
        raise LegacySchemaError(
            f"Registro ({version.value}) sem campos obrigatórios: {', '.join(missing)}"
        )

    try:
        return CandidateCreate(
            **{k: v for k, v in canonical.items() if k != "data"},
            data=CandidateData.model_validate(canonical["data"]),
        )
    except ValidationError as exc:
        raise LegacySchemaError(
            f"Registro ({version.value}) inválido: {exc.error_count()} erro(s) de validação"
        ) from exc


def adapt_records(rows: list[dict[str, Any]]) -> list[CandidateCreate]:
    """Adapt a batch of rows; the first invalid row aborts the batch."""
    adapted: list[CandidateCreate] = []
    for index, row in enumerate(rows):
        try:
            adapted.append(adapt_record(row))
        except LegacySchemaError as exc:
            logger.error(
                "adapt_records_row_failed",
                extra={"row_index": index, "error_message": str(exc)},
            )
            raise LegacySchemaError(f"Linha {index + 1}: {exc}") from exc
    return adapted
