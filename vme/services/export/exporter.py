# vme/services/export/exporter.py
from __future__ import annotations

import os
import re
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from vme.common.logging import get_logger
from vme.common.settings import get_settings
from vme.domain.entities.media_metadata import MediaMetadata
from vme.domain.enums.export_format import ExportFormat
from vme.domain.errors import SerializationError, UnsupportedFormatError, WriteError
from vme.services.mappers.metadata import to_media_metadata, to_metadata_schema
from vme.services.schemas.metadata import MediaMetadataSchema

logger = get_logger(__name__)

XML_ROOT = "MediaMetadata"
# exported (camelCase) section name -> XML element name
_XML_SECTIONS = {"fileInfo": "FileInfo", "movieInfo": "MovieInfo", "trackInfo": "TrackInfo"}
_XML_SECTIONS_REV = {v: k for k, v in _XML_SECTIONS.items()}
# list container -> item element
_XML_LIST_ITEMS = {"tags": "tag", "streams": "stream"}

# characters XML 1.0 cannot carry, even escaped
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def coerce_format(fmt: ExportFormat | str) -> ExportFormat:
    try:
        return ExportFormat(str(fmt).strip().lower())
    except ValueError:
        raise UnsupportedFormatError(f"unsupported format: {fmt!r} (use 'json' or 'xml')") from None


def output_filename(metadata: MediaMetadata, fmt: ExportFormat | str) -> str:
    """`<filename>-metadata.<format>`, the same for every run on the same source."""
    return f"{metadata.file_info.filename}-metadata.{coerce_format(fmt).value}"


# ---- serialization ------------------------------------------------------------
def serialize_metadata(metadata: MediaMetadata, fmt: ExportFormat | str) -> bytes:
    fmt = coerce_format(fmt)
    try:
        schema = to_metadata_schema(metadata)
        if fmt is ExportFormat.JSON:
            return schema.model_dump_json(by_alias=True, exclude_none=True, indent=2).encode("utf-8")
        return _to_xml(schema.model_dump(by_alias=True, exclude_none=True))
    except (ValidationError, PydanticSerializationError, ValueError, TypeError) as e:
        raise SerializationError(f"failed to marshal metadata: {e}") from e


def load_metadata(source: Path | str | bytes, fmt: ExportFormat | str) -> MediaMetadata:
    """Inverse of serialize_metadata; `source` is a file path or the encoded bytes."""
    fmt = coerce_format(fmt)
    if isinstance(source, (str, Path)):
        try:
            data = Path(source).read_bytes()
        except OSError as e:
            raise SerializationError(f"failed to read {source}: {e}") from e
    else:
        data = source

    try:
        if fmt is ExportFormat.JSON:
            schema = MediaMetadataSchema.model_validate_json(data)
        else:
            schema = MediaMetadataSchema.model_validate(_from_xml(data))
    except (ValidationError, ET.ParseError, ValueError) as e:
        raise SerializationError(f"failed to unmarshal metadata: {e}") from e
    return to_media_metadata(schema)


def _to_xml(doc: Dict[str, Any]) -> bytes:
    root = ET.Element(XML_ROOT)
    for section, body in doc.items():
        root.append(_element(_XML_SECTIONS.get(section, section), body))
    ET.indent(root, space="  ")
    payload = ET.tostring(root, encoding="utf-8", xml_declaration=True)
    # ElementTree leaves \r raw in text and parsers fold it into \n
    return payload.replace(b"\r", b"&#13;")


def _element(tag: str, value: Any, list_item: Optional[str] = None) -> ET.Element:
    el = ET.Element(tag)
    if isinstance(value, dict):
        for k, v in value.items():
            el.append(_element(k, v, list_item=_XML_LIST_ITEMS.get(k)))
    elif isinstance(value, list):
        for item in value:
            el.append(_element(list_item or "item", item))
    else:
        text = "" if value is None else str(value)
        if _XML_ILLEGAL.search(text):
            raise ValueError(f"value of <{tag}> contains characters XML cannot represent")
        el.text = text
    return el


def _from_xml(data: bytes | str) -> Dict[str, Any]:
    root = ET.fromstring(data)
    if root.tag != XML_ROOT:
        raise ValueError(f"unexpected root element <{root.tag}>")
    return {_XML_SECTIONS_REV.get(child.tag, child.tag): _value(child) for child in root}


def _value(el: ET.Element) -> Any:
    if el.tag in _XML_LIST_ITEMS:
        return [_value(child) for child in el]
    if len(el):
        return {child.tag: _value(child) for child in el}
    return el.text or ""


# ---- file output ---------------------------------------------------------------
def export_metadata(
    metadata: MediaMetadata,
    fmt: ExportFormat | str,
    out_dir: Optional[Path | str] = None,
) -> Path:
    """
    Serialize `metadata` and write it to `<out_dir>/<filename>-metadata.<fmt>`,
    replacing any existing file. The write goes through a temp file in the
    same directory, so the destination is either complete or untouched.
    """
    fmt = coerce_format(fmt)
    payload = serialize_metadata(metadata, fmt)

    if out_dir is None:
        out_dir = get_settings().output_dir or Path.cwd()
    out_dir = Path(out_dir)
    dest = out_dir / output_filename(metadata, fmt)

    tmp_name: Optional[str] = None
    try:
        fd, tmp_name = tempfile.mkstemp(dir=out_dir, prefix=".vme-", suffix=".tmp")
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, dest)
        tmp_name = None
    except OSError as e:
        raise WriteError(f"failed to write output file {dest}: {e}") from e
    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)

    logger.info("exported %s metadata to %s (%d bytes)", fmt.value.upper(), dest, len(payload))
    return dest
