import pytest
import requests

from processing import sources
from processing.errors import ResourceUnavailableError
from processing.sources import first_success, load_text_resource, read_text_candidate


def test_first_success_returns_first_non_empty():
    calls = []

    def boom():
        calls.append("boom")
        raise OSError("nope")

    def empty():
        calls.append("empty")
        return ""

    def good():
        calls.append("good")
        return "content"

    def never():
        calls.append("never")
        return "later"

    result = first_success([("a", boom), ("b", empty), ("c", good), ("d", never)], "thing")
    assert result == "content"
    assert calls == ["boom", "empty", "good"]


def test_first_success_aggregates_failures():
    with pytest.raises(ResourceUnavailableError) as excinfo:
        first_success([("a", lambda: ""), ("b", lambda: 1 / 0)], "incident data")

    err = excinfo.value
    assert str(err) == "Could not load incident data"
    assert err.candidates == ["a", "b"]
    assert [d for d, _ in err.failures] == ["a", "b"]
    assert err.failures[0][1] == "empty content"


def test_first_success_with_no_attempts():
    with pytest.raises(ResourceUnavailableError):
        first_success([], "boundaries")


def test_load_text_resource_skips_missing_and_blank_files(tmp_path):
    (tmp_path / "blank.csv").write_text("  \n\n", encoding="utf-8")
    (tmp_path / "real.csv").write_text("\ufeffa,b\n1,2\n", encoding="utf-8")

    text = load_text_resource(["missing.csv", "blank.csv", "real.csv"], "incident data", base_dir=tmp_path)
    assert text == "a,b\n1,2\n"


def test_load_text_resource_all_fail(tmp_path):
    with pytest.raises(ResourceUnavailableError, match="Could not load district boundaries"):
        load_text_resource(["nope.geojson", "./nope"], "district boundaries", base_dir=tmp_path)


class FakeResponse:
    def __init__(self, text, status=200):
        self.text = text
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def test_urls_are_fetched_with_requests(monkeypatch):
    requested = []

    def fake_get(url, timeout, headers):
        requested.append(url)
        if url.endswith("missing.csv"):
            return FakeResponse("", status=404)
        return FakeResponse("a,b\n")

    monkeypatch.setattr(sources.requests, "get", fake_get)

    text = load_text_resource(
        ["https://example.org/missing.csv", "https://example.org/data.csv"], "incident data"
    )
    assert text == "a,b\n"
    assert requested == ["https://example.org/missing.csv", "https://example.org/data.csv"]


def test_read_text_candidate_absolute_path(tmp_path):
    path = tmp_path / "x.txt"
    path.write_text("hello", encoding="utf-8")
    assert read_text_candidate(str(path), base_dir="/does/not/matter") == "hello"
