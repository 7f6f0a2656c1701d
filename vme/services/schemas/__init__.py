from vme.services.schemas.metadata import (
    FileInfoSchema,
    MediaMetadataSchema,
    MetadataTagSchema,
    MovieInfoSchema,
    StreamInfoSchema,
    TrackInfoSchema,
)
__all__ = [
    "FileInfoSchema",
    "MediaMetadataSchema",
    "MetadataTagSchema",
    "MovieInfoSchema",
    "StreamInfoSchema",
    "TrackInfoSchema",
]
