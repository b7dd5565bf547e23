import io
import json
from urllib.error import URLError

import pytest

import models.puzzle_source as puzzle_source
from conftest import PUZZLE
from models.errors import PuzzleSourceError
from models.puzzle_source import PuzzleSource, load_puzzle_file, parse_payload


def dosuku_payload(grid):
    return {
        "newboard": {
            "grids": [{"value": grid, "solution": grid, "difficulty": "Medium"}],
            "results": 1,
            "message": "All Ok",
        }
    }


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def test_parse_payload_extracts_grid():
    assert parse_payload(dosuku_payload(PUZZLE)) == PUZZLE


@pytest.mark.parametrize("data", [
    {},
    {"newboard": {}},
    {"newboard": {"grids": []}},
    {"newboard": {"grids": [{"value": "530070000"}]}},
    {"newboard": {"grids": [{"value": [["x"] * 9] * 9}]}},
    [],
])
def test_parse_payload_rejects_unexpected_shapes(data):
    with pytest.raises(PuzzleSourceError):
        parse_payload(data)


def test_fetch_reads_remote_puzzle(monkeypatch):
    seen = {}

    def fake_urlopen(request, timeout):
        seen["url"] = request.full_url
        seen["timeout"] = timeout
        return FakeResponse(json.dumps(dosuku_payload(PUZZLE)).encode("utf-8"))

    monkeypatch.setattr(puzzle_source, "urlopen", fake_urlopen)

    source = PuzzleSource("http://example.test/api", timeout=3)
    assert source.fetch() == PUZZLE
    assert seen == {"url": "http://example.test/api", "timeout": 3}


def test_fetch_wraps_network_errors(monkeypatch):
    def fake_urlopen(request, timeout):
        raise URLError("connection refused")

    monkeypatch.setattr(puzzle_source, "urlopen", fake_urlopen)

    with pytest.raises(PuzzleSourceError, match="connection refused"):
        PuzzleSource("http://example.test/api").fetch()


def test_fetch_wraps_bad_json(monkeypatch):
    monkeypatch.setattr(puzzle_source, "urlopen",
                        lambda request, timeout: FakeResponse(b"<html>oops</html>"))

    with pytest.raises(PuzzleSourceError, match="not JSON"):
        PuzzleSource("http://example.test/api").fetch()


def test_load_puzzle_file_json(tmp_path):
    path = tmp_path / "puzzle.json"
    path.write_text(json.dumps(PUZZLE))
    assert load_puzzle_file(path) == PUZZLE


def test_load_puzzle_file_digits(tmp_path):
    path = tmp_path / "puzzle.txt"
    lines = ["".join(str(v) if v else "." for v in row) for row in PUZZLE]
    path.write_text("\n".join(lines) + "\n")
    assert load_puzzle_file(path) == PUZZLE


@pytest.mark.parametrize("text", ["123", "x" * 81, "[1, 2, 3]", "[[1, 2"])
def test_load_puzzle_file_rejects_garbage(tmp_path, text):
    path = tmp_path / "bad.txt"
    path.write_text(text)
    with pytest.raises(PuzzleSourceError):
        load_puzzle_file(path)


def test_source_reads_url_from_environment(monkeypatch):
    monkeypatch.setenv("SUDOKU_API_URL", "http://puzzles.test/api")
    assert PuzzleSource().url == "http://puzzles.test/api"
    assert PuzzleSource("http://other.test").url == "http://other.test"

    monkeypatch.delenv("SUDOKU_API_URL")
    assert PuzzleSource().url == puzzle_source.DEFAULT_PUZZLE_URL


def test_load_puzzle_file_wraps_read_errors(tmp_path):
    with pytest.raises(PuzzleSourceError, match="Cannot read"):
        load_puzzle_file(tmp_path / "missing.txt")

    path = tmp_path / "binary.txt"
    path.write_bytes(b"\xff\xfe" * 50)
    with pytest.raises(PuzzleSourceError, match="Cannot read"):
        load_puzzle_file(path)
