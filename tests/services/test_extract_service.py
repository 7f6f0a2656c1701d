from pathlib import Path

from vme.domain.enums import ExtractionLevel
from vme.services.extract.service import MetadataExtractor


class FakeProbe:
    def __init__(self, result):
        self.result = result
        self.paths = []

    def probe(self, path: Path):
        self.paths.append(path)
        return self.result


def test_extract_probes_absolute_path_and_normalizes(raw_result, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    probe = FakeProbe(raw_result)
    md = MetadataExtractor(probe=probe).extract("movie.mp4", ExtractionLevel.extended)
    assert probe.paths == [Path.cwd() / "movie.mp4"]
    assert probe.paths[0].is_absolute()
    assert md.file_info.filename == "movie.mp4"
    assert md.movie_info is not None
    assert md.track_info is None


def test_extract_defaults_to_basic(raw_result):
    md = MetadataExtractor(probe=FakeProbe(raw_result)).extract("/tmp/movie.mp4")
    assert md.movie_info is None
