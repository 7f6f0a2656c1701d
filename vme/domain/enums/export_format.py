# vme/domain/enums/export_format.py
from __future__ import annotations

from enum import StrEnum


class ExportFormat(StrEnum):
    JSON = "json"
    XML = "xml"
