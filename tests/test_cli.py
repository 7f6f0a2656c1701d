import json
from pathlib import Path

import pytest

from vme import cli
from vme.domain.errors import ProbeExecutionError
from vme.domain.policies.normalizer import normalize


class FakeExtractor:
    """Replaces MetadataExtractor; records calls and normalizes a canned probe result."""
    calls = []
    raw = None
    error = None

    def __init__(self, probe=None):
        pass

    def extract(self, path, level="basic"):
        type(self).calls.append((Path(path), str(level)))
        if type(self).error:
            raise type(self).error
        return normalize(type(self).raw, level)


@pytest.fixture()
def fake_extractor(monkeypatch, raw_result):
    FakeExtractor.calls = []
    FakeExtractor.raw = raw_result
    FakeExtractor.error = None
    monkeypatch.setattr(cli, "MetadataExtractor", FakeExtractor)
    return FakeExtractor


@pytest.fixture()
def media_file(tmp_path):
    f = tmp_path / "movie.mp4"
    f.write_bytes(b"\x00\x00\x00\x18ftypisom")
    return f


def test_default_level_is_basic_and_prints_report(fake_extractor, media_file, capsys, monkeypatch):
    monkeypatch.setenv("VME_COLOR", "false")
    assert cli.main([str(media_file)]) == 0
    out = capsys.readouterr().out
    assert "Filename: movie.mp4" in out
    assert "Movie Information" not in out
    assert fake_extractor.calls == [(media_file, "basic")]


@pytest.mark.parametrize("flag, level", [("-b", "basic"), ("-e", "extended"), ("-f", "full")])
def test_level_flags(fake_extractor, media_file, flag, level):
    assert cli.main([flag, str(media_file)]) == 0
    assert fake_extractor.calls[-1][1] == level


def test_level_flags_are_mutually_exclusive(fake_extractor, media_file):
    with pytest.raises(SystemExit) as ei:
        cli.main(["-e", "-f", str(media_file)])
    assert ei.value.code != 0


def test_exactly_one_input_required(fake_extractor):
    with pytest.raises(SystemExit) as ei:
        cli.main([])
    assert ei.value.code != 0


def test_export_json(fake_extractor, media_file, tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("VME_COLOR", "false")
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    assert cli.main(["-f", "-o", "JSON", "--output-dir", str(out_dir), str(media_file)]) == 0
    written = out_dir / "movie.mp4-metadata.json"
    assert json.loads(written.read_text())["trackInfo"]["bitRate"] == "672164"
    assert "Successfully exported metadata in JSON format" in capsys.readouterr().out


def test_invalid_format(fake_extractor, media_file, capsys):
    assert cli.main(["-o", "yaml", str(media_file)]) == 1
    err = capsys.readouterr().err
    assert "Error [input]" in err
    assert "json" in err
    assert fake_extractor.calls == []


def test_missing_input_file(fake_extractor, tmp_path, capsys):
    assert cli.main([str(tmp_path / "nope.mp4")]) == 1
    assert "input file not found" in capsys.readouterr().err


def test_probe_failure_reports_stage(fake_extractor, media_file, capsys):
    fake_extractor.error = ProbeExecutionError("ffprobe failed", stderr="Invalid data", rc=1)
    assert cli.main([str(media_file)]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error [probe]: ffprobe failed")


def test_s3_upload_requires_output_format(fake_extractor, media_file, capsys, s3_env):
    assert cli.main(["--s3-upload", "--s3-bucket", "b", str(media_file)]) == 1
    assert "requires an output format" in capsys.readouterr().err


def test_s3_upload_requires_bucket(fake_extractor, media_file, capsys, s3_env):
    assert cli.main(["-o", "json", "--s3-upload", str(media_file)]) == 1
    assert "--s3-bucket" in capsys.readouterr().err
    assert fake_extractor.calls == []


def test_s3_upload_requires_credentials(fake_extractor, media_file, capsys):
    assert cli.main(["-o", "json", "--s3-upload", "--s3-bucket", "b", str(media_file)]) == 1
    assert "VME_S3_SECRET_KEY" in capsys.readouterr().err


class FakeS3Client:
    uploads = []
    downloads = []

    def __init__(self, config, client=None):
        self.config = config

    def upload(self, local_path, key):
        type(self).uploads.append((self.config.bucket, Path(local_path).name, key))

    def download(self, key, dest_dir=None):
        type(self).downloads.append((self.config.bucket, key))
        target = Path(dest_dir) / Path(key).name
        target.write_bytes(b"data")
        return target


@pytest.fixture()
def fake_s3(monkeypatch):
    from vme.services.storage import s3_client
    FakeS3Client.uploads = []
    FakeS3Client.downloads = []
    monkeypatch.setattr(cli, "S3Client", FakeS3Client)
    monkeypatch.setattr(s3_client, "S3Client", FakeS3Client)
    return FakeS3Client


def test_export_then_upload(fake_extractor, fake_s3, media_file, tmp_path, capsys, s3_env):
    args = ["-e", "-o", "xml", "--output-dir", str(tmp_path), "--s3-upload", "--s3-bucket", "meta",
            "--s3-endpoint", "http://localhost:9000", "--no-s3-ssl", str(media_file)]
    assert cli.main(args) == 0
    assert fake_s3.uploads == [("meta", "movie.mp4-metadata.xml", "movie.mp4-metadata.xml")]
    assert "uploaded metadata to S3 bucket meta" in capsys.readouterr().out


def test_s3_input_is_downloaded_and_cleaned_up(fake_extractor, fake_s3, capsys, s3_env):
    assert cli.main(["-f", "s3://media/in/movie.mp4"]) == 0
    assert fake_s3.downloads == [("media", "in/movie.mp4")]
    probed, level = fake_extractor.calls[0]
    assert probed.name == "movie.mp4"
    assert level == "full"
    assert not probed.parent.exists()


def test_s3_input_cleaned_up_when_probe_fails(fake_extractor, fake_s3, s3_env):
    fake_extractor.error = ProbeExecutionError("ffprobe failed", rc=1)
    assert cli.main(["s3://media/movie.mp4"]) == 1
    probed, _ = fake_extractor.calls[0]
    assert not probed.parent.exists()


def test_malformed_s3_uri(fake_extractor, fake_s3, capsys, s3_env):
    assert cli.main(["s3://media"]) == 1
    assert "Error [input]" in capsys.readouterr().err
    assert fake_s3.downloads == []


def test_s3_uri_with_bad_bucket_is_reported(fake_extractor, fake_s3, capsys, s3_env):
    assert cli.main(["s3://[media/clip.mp4"]) == 1
    assert "Error [input]" in capsys.readouterr().err
    assert fake_s3.downloads == []
