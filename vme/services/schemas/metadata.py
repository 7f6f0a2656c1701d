# vme/services/schemas/metadata.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Wire shape of exported metadata. Field order here is the order written to
# JSON and XML; aliases are the exported names.
class _ExportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class MetadataTagSchema(_ExportModel):
    name: str
    value: str


class StreamInfoSchema(_ExportModel):
    index: int = Field(..., ge=0)
    type: str
    codec: str
    resolution: str = ""


class FileInfoSchema(_ExportModel):
    filename: str
    size: str = ""
    format: str = ""


class MovieInfoSchema(_ExportModel):
    title: str = ""
    duration: str = ""
    tags: List[MetadataTagSchema] = Field(default_factory=list)


class TrackInfoSchema(_ExportModel):
    bit_rate: str = Field("", alias="bitRate")
    streams: List[StreamInfoSchema] = Field(default_factory=list)


class MediaMetadataSchema(_ExportModel):
    file_info: FileInfoSchema = Field(..., alias="fileInfo")
    movie_info: Optional[MovieInfoSchema] = Field(None, alias="movieInfo")
    track_info: Optional[TrackInfoSchema] = Field(None, alias="trackInfo")
