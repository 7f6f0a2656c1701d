# tests/conftest.py
from __future__ import annotations

import copy

import pytest

from vme.common import settings as settings_mod
from vme.services.probe.ffprobe_adapter import parse_ffprobe_json

FFPROBE_DOC = {
    "streams": [
        {
            "index": 0,
            "codec_name": "h264",
            "codec_type": "video",
            "width": 1920,
            "height": 1080,
            "r_frame_rate": "25/1",
        },
        {
            "index": 1,
            "codec_name": "aac",
            "codec_type": "audio",
            "sample_rate": "48000",
            "channels": 2,
        },
    ],
    "format": {
        "filename": "/tmp/movie.mp4",
        "nb_streams": 2,
        "format_name": "mov,mp4,m4a,3gp,3g2,mj2",
        "duration": "12.480000",
        "size": "1048576",
        "bit_rate": "672164",
        "tags": {
            "major_brand": "isom",
            "encoder": "Lavf60.3.100",
            "title": "Demo",
            "genre": "Documentary",
            "creation_time": "2024-05-01T10:00:00.000000Z",
            "artist": "Someone",
            "unknown_key": "x",
        },
    },
}


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    # every test starts from defaults, independent of the caller's VME_* env
    for var in ("VME_S3_ACCESS_KEY", "VME_S3_SECRET_KEY", "VME_COLOR", "VME_OUTPUT_DIR", "NO_COLOR"):
        monkeypatch.delenv(var, raising=False)
    settings_mod.get_settings.cache_clear()
    yield
    settings_mod.get_settings.cache_clear()


@pytest.fixture()
def ffprobe_doc() -> dict:
    return copy.deepcopy(FFPROBE_DOC)


@pytest.fixture()
def raw_result(ffprobe_doc):
    return parse_ffprobe_json(ffprobe_doc)


@pytest.fixture()
def s3_env(monkeypatch):
    monkeypatch.setenv("VME_S3_ACCESS_KEY", "minioadmin")
    monkeypatch.setenv("VME_S3_SECRET_KEY", "minioadmin-secret")
    settings_mod.get_settings.cache_clear()
