# vme/services/mappers/metadata.py
from __future__ import annotations

from vme.domain.entities.media_metadata import (
    FileInfo,
    MediaMetadata,
    MetadataTag,
    MovieInfo,
    StreamInfo,
    TrackInfo,
)
from vme.services.schemas.metadata import (
    FileInfoSchema,
    MediaMetadataSchema,
    MetadataTagSchema,
    MovieInfoSchema,
    StreamInfoSchema,
    TrackInfoSchema,
)


def to_metadata_schema(md: MediaMetadata) -> MediaMetadataSchema:
    fi = md.file_info
    movie = md.movie_info
    track = md.track_info
    return MediaMetadataSchema(
        file_info=FileInfoSchema(filename=fi.filename, size=fi.size, format=fi.format),
        movie_info=None if movie is None else MovieInfoSchema(
            title=movie.title,
            duration=movie.duration,
            tags=[MetadataTagSchema(name=t.name, value=t.value) for t in movie.tags],
        ),
        track_info=None if track is None else TrackInfoSchema(
            bit_rate=track.bit_rate,
            streams=[
                StreamInfoSchema(index=s.index, type=s.type, codec=s.codec, resolution=s.resolution)
                for s in track.streams
            ],
        ),
    )


def to_media_metadata(schema: MediaMetadataSchema) -> MediaMetadata:
    fi = schema.file_info
    movie = schema.movie_info
    track = schema.track_info
    return MediaMetadata(
        file_info=FileInfo(filename=fi.filename, size=fi.size, format=fi.format),
        movie_info=None if movie is None else MovieInfo(
            title=movie.title,
            duration=movie.duration,
            tags=tuple(MetadataTag(name=t.name, value=t.value) for t in movie.tags),
        ),
        track_info=None if track is None else TrackInfo(
            bit_rate=track.bit_rate,
            streams=tuple(
                StreamInfo(index=s.index, type=s.type, codec=s.codec, resolution=s.resolution)
                for s in track.streams
            ),
        ),
    )
