"""Tests for the pagegraph-cli query client."""

import json
import subprocess
from pathlib import Path

import pytest

from sugarcoat_pipeline.errors import QueryCommandError, QueryOutputError
from sugarcoat_pipeline.pagegraph import PageGraphCLI

GRAPH = Path("/tmp/gen/graphs/page.graphml")


def _fake_run(calls, stdout="", returncode=0, stderr=""):
    def run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)
    return run


def test_adblock_rules_command(monkeypatch):
    calls = []
    out = json.dumps([{"requests": [["script", 12], ["image", 14]]}, {"requests": []}])
    monkeypatch.setattr(subprocess, "run", _fake_run(calls, out))

    records = PageGraphCLI(["./pagegraph-cli"], GRAPH).adblock_rules(Path("easylist.txt"))

    assert calls == [[
        "./pagegraph-cli", "-f", str(GRAPH), "adblock_rules", "-l", "easylist.txt",
    ]]
    assert [pair[1] for pair in records[0].requests] == [12, 14]
    assert records[1].requests == []


def test_adblock_rules_without_filter_list(monkeypatch):
    calls = []
    monkeypatch.setattr(subprocess, "run", _fake_run(calls, "[]"))

    assert PageGraphCLI(["pg"], GRAPH).adblock_rules() == []
    assert calls[0] == ["pg", "-f", str(GRAPH), "adblock_rules"]


def test_downstream_requests(monkeypatch):
    calls = []
    monkeypatch.setattr(subprocess, "run", _fake_run(calls, "[3, 5, 3]"))

    ids = PageGraphCLI(["pg"], GRAPH).downstream_requests("E1")

    assert ids == ["3", "5", "3"]
    assert calls[0] == ["pg", "-f", str(GRAPH), "downstream_requests", "E1", "--requests"]


def test_request_id_info(monkeypatch):
    calls = []
    out = json.dumps({"url": "http://cdn.example/track.js", "source": "var x=1;", "extra": 1})
    monkeypatch.setattr(subprocess, "run", _fake_run(calls, out))

    info = PageGraphCLI(["pg"], GRAPH).request_id_info("R1")

    assert info.url == "http://cdn.example/track.js"
    assert info.source == "var x=1;"
    assert calls[0] == ["pg", "-f", str(GRAPH), "request_id_info", "R1"]


def test_nonzero_exit_raises_command_error(monkeypatch):
    monkeypatch.setattr(subprocess, "run", _fake_run([], "", returncode=1, stderr="not a script\n"))

    with pytest.raises(QueryCommandError) as exc:
        PageGraphCLI(["pg"], GRAPH).request_id_info("R9")
    assert exc.value.returncode == 1
    assert "not a script" in str(exc.value)


def test_invalid_json_is_output_error(monkeypatch):
    monkeypatch.setattr(subprocess, "run", _fake_run([], "panic: oops"))

    with pytest.raises(QueryOutputError):
        PageGraphCLI(["pg"], GRAPH).downstream_requests("E1")


def test_wrong_shape_is_output_error(monkeypatch):
    monkeypatch.setattr(subprocess, "run", _fake_run([], '{"url": "x"}'))

    with pytest.raises(QueryOutputError):
        PageGraphCLI(["pg"], GRAPH).request_id_info("R1")


def test_missing_executable(monkeypatch):
    def run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])
    monkeypatch.setattr(subprocess, "run", run)

    with pytest.raises(QueryOutputError):
        PageGraphCLI(["./pagegraph-cli"], GRAPH).adblock_rules()


def test_output_decoded_as_utf8(monkeypatch):
    seen = {}

    def run(cmd, **kwargs):
        seen.update(kwargs)
        out = json.dumps({"url": "http://cdn.example/t.js", "source": "var s = 'héllo';"})
        return subprocess.CompletedProcess(cmd, 0, stdout=out, stderr="")
    monkeypatch.setattr(subprocess, "run", run)

    info = PageGraphCLI(["pg"], GRAPH).request_id_info("R1")

    assert seen["encoding"] == "utf-8"
    assert info.source == "var s = 'héllo';"
