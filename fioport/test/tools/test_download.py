"""Tests for fioport.tools.download module."""

from __future__ import annotations

from pathlib import Path

from fioport.core.result import Err, Ok
from fioport.tools.download import SnapshotDownloader
from fioport.tools.http import HttpError, MockHttpClient

TEMPLATE = "https://git.kernel.dk/?p=fio.git;a=snapshot;h={tag};sf=tgz"
URL = TEMPLATE.format(tag="fio-3.31")


def make_downloader(tmp_path: Path, http: MockHttpClient) -> SnapshotDownloader:
    return SnapshotDownloader(http, tmp_path / "cache", TEMPLATE)


class TestSnapshotDownloader:
    def test_url_for(self, tmp_path: Path) -> None:
        downloader = make_downloader(tmp_path, MockHttpClient())
        assert downloader.url_for("fio-3.31") == URL

    def test_downloads_with_announced_name(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(URL, b"snapshot", filename="fio-fio-3.31-6f8b2b3.tar.gz")
        downloader = make_downloader(tmp_path, http)

        result = downloader.fetch("fio-3.31")

        assert isinstance(result, Ok)
        assert result.value.path == tmp_path / "cache" / "fio-fio-3.31-6f8b2b3.tar.gz"
        assert not result.value.from_cache
        assert result.value.size == len(b"snapshot")
        assert http.calls == [("download", URL)]

    def test_fallback_name(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(URL, b"snapshot", filename="download.bin")
        downloader = make_downloader(tmp_path, http)

        result = downloader.fetch("fio-3.31")

        assert isinstance(result, Ok)
        assert result.value.path.name == "fio-fio-3.31-snapshot.tar.gz"

    def test_cache_hit_skips_network(self, tmp_path: Path) -> None:
        cache = tmp_path / "cache"
        cache.mkdir()
        cached = cache / "fio-fio-3.31-6f8b2b3.tar.gz"
        cached.write_bytes(b"cached")
        http = MockHttpClient()
        downloader = make_downloader(tmp_path, http)

        result = downloader.fetch("fio-3.31")

        assert result.unwrap().path == cached
        assert result.unwrap().from_cache
        assert http.calls == []

    def test_other_tag_is_not_a_hit(self, tmp_path: Path) -> None:
        cache = tmp_path / "cache"
        cache.mkdir()
        (cache / "fio-fio-3.30-aaaaaaa.tar.gz").write_bytes(b"old")
        http = MockHttpClient()
        http.set_download(URL, b"new", filename="fio-fio-3.31-bbbbbbb.tar.gz")

        result = make_downloader(tmp_path, http).fetch("fio-3.31")

        assert not result.unwrap().from_cache
        assert len(http.calls) == 1

    def test_second_fetch_uses_cache(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(URL, b"snapshot", filename="fio-fio-3.31-6f8b2b3.tar.gz")
        downloader = make_downloader(tmp_path, http)

        downloader.fetch("fio-3.31")
        second = downloader.fetch("fio-3.31")

        assert second.unwrap().from_cache
        assert len(http.calls) == 1

    def test_error_leaves_no_partial_file(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(URL, HttpError(url=URL, status=503, message="Service Unavailable"))
        downloader = make_downloader(tmp_path, http)

        result = downloader.fetch("fio-3.31")

        assert isinstance(result, Err)
        assert result.error.status == 503
        assert list((tmp_path / "cache").iterdir()) == []

    def test_unusable_cache_dir(self, tmp_path: Path) -> None:
        (tmp_path / "cache").write_bytes(b"")
        http = MockHttpClient()
        http.set_download(URL, b"snapshot", filename="fio-fio-3.31-6f8b2b3.tar.gz")

        result = make_downloader(tmp_path, http).fetch("fio-3.31")

        assert isinstance(result, Err)
        assert "cache unavailable" in result.error.message
        assert http.calls == []
