from vme.domain.enums.export_format import ExportFormat
from vme.domain.enums.extraction_level import ExtractionLevel
__all__ = [
    "ExportFormat",
    "ExtractionLevel",
]
