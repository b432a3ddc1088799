"""Spreadsheet parsing for bulk candidate import (CSV or Excel)."""
from __future__ import annotations

from pathlib import PurePath
from typing import IO, Any, Optional

import pandas as pd

from ..core.exceptions import ValidationError

# Spreadsheet header (case-insensitive) -> candidate column.
COLUMN_MAP = {
    "name": "name",
    "email": "email",
    "age": "age",
    "degree": "degree",
    "university": "university",
    "batch": "batch",
    "phone": "phone",
    "skills": "skills",
    "photo": "photo_url",
    "photo_url": "photo_url",
}


def source_kind(filename: str) -> str:
    return "CSV" if PurePath(filename or "").suffix.lower() == ".csv" else "Excel"


def _clean(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text or None


def _clean_age(value: Any) -> Optional[int]:
    text = _clean(value)
    if text is None:
        return None
    try:
        return int(float(text))
    except ValueError:
        return None


def read_candidate_rows(filename: str, stream: IO[bytes]) -> list[dict[str, Any]]:
    """Parse an uploaded sheet into candidate field dicts.

    Only the first worksheet of an Excel file is read. Values are kept as text
    (phone numbers must not lose leading zeros); ``age`` is coerced to int.
    """
    try:
        if source_kind(filename) == "CSV":
            df = pd.read_csv(stream, dtype=str, keep_default_na=False)
        else:
            df = pd.read_excel(stream, sheet_name=0, dtype=str, engine="openpyxl")
    except Exception as exc:
        raise ValidationError(f"Could not read uploaded file: {exc}") from exc

    renamed = {}
    for col in df.columns:
        key = str(col).strip().lower()
        if key in COLUMN_MAP and COLUMN_MAP[key] not in renamed.values():
            renamed[col] = COLUMN_MAP[key]
    df = df[list(renamed)].rename(columns=renamed)

    rows: list[dict[str, Any]] = []
    for record in df.to_dict(orient="records"):
        row = {col: _clean(value) for col, value in record.items()}
        if "age" in row:
            row["age"] = _clean_age(record.get("age"))
        rows.append(row)
    return rows
