import json
import subprocess
from types import SimpleNamespace

import pytest

from vme.common.probe import ffprobe_helpers
from vme.common.probe.ffprobe_helpers import build_ffprobe_cmd, run_ffprobe
from vme.domain.errors import ProbeExecutionError, ProbeParseError


def test_build_ffprobe_cmd_uses_json_flags(tmp_path):
    f = tmp_path / "video.mp4"
    cmd = build_ffprobe_cmd(f)
    assert "ffprobe" in cmd[0].lower()
    # Core JSON-ish flags we rely on
    assert "-show_streams" in cmd
    assert "-show_format" in cmd
    assert cmd[cmd.index("-print_format") + 1] == "json"
    assert cmd[-2:] == ["--", str(f)]


def test_build_ffprobe_cmd_extra_args_stay_before_separator(tmp_path):
    f = tmp_path / "-odd name.mp4"
    cmd = build_ffprobe_cmd(f, ["-show_chapters"], ffprobe_bin="/opt/ffprobe", log_level="quiet")
    assert cmd[0] == "/opt/ffprobe"
    assert cmd[cmd.index("-v") + 1] == "quiet"
    assert cmd.index("-show_chapters") < cmd.index("--")
    assert cmd[-1] == str(f)


def _fake_run(stdout="", stderr="", returncode=0):
    def _run(cmd, **kwargs):
        return SimpleNamespace(stdout=stdout, stderr=stderr, returncode=returncode)
    return _run


def test_run_ffprobe_returns_document(monkeypatch):
    doc = {"format": {"filename": "a.mp4"}, "streams": []}
    monkeypatch.setattr(ffprobe_helpers.subprocess, "run", _fake_run(stdout=json.dumps(doc)))
    assert run_ffprobe(["ffprobe", "a.mp4"]) == doc


def test_run_ffprobe_nonzero_exit_keeps_diagnostic(monkeypatch):
    monkeypatch.setattr(
        ffprobe_helpers.subprocess, "run",
        _fake_run(stderr="a.mp4: Invalid data found when processing input\n", returncode=1),
    )
    with pytest.raises(ProbeExecutionError) as ei:
        run_ffprobe(["ffprobe", "a.mp4"])
    assert ei.value.rc == 1
    assert "Invalid data found" in str(ei.value)
    assert ei.value.stage == "probe"


def test_run_ffprobe_missing_binary(monkeypatch):
    def _boom(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])
    monkeypatch.setattr(ffprobe_helpers.subprocess, "run", _boom)
    with pytest.raises(ProbeExecutionError):
        run_ffprobe(["/nope/ffprobe", "a.mp4"])


def test_run_ffprobe_timeout(monkeypatch):
    def _slow(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs.get("timeout"))
    monkeypatch.setattr(ffprobe_helpers.subprocess, "run", _slow)
    with pytest.raises(ProbeExecutionError, match="timed out"):
        run_ffprobe(["ffprobe", "a.mp4"], timeout=3)


@pytest.mark.parametrize("stdout", ["", "not json", "[1, 2]"])
def test_run_ffprobe_bad_output(monkeypatch, stdout):
    monkeypatch.setattr(ffprobe_helpers.subprocess, "run", _fake_run(stdout=stdout))
    with pytest.raises(ProbeParseError):
        run_ffprobe(["ffprobe", "a.mp4"])
