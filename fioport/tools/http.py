"""HTTP client abstraction for snapshot downloads.

This module provides:
- HttpClient: Protocol for HTTP downloads (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from fioport import __version__
from fioport.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "DownloadInfo",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@dataclass(frozen=True, slots=True)
class DownloadInfo:
    """A completed download.

    Attributes:
        path: Where the body was written
        filename: Name announced by the server (Content-Disposition), if any
    """

    path: Path
    filename: str | None = None


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP downloads."""

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[DownloadInfo, HttpError]:
        """Download URL to file.

        Args:
            url: URL to download
            dest: Destination path
            progress: Optional callback(downloaded, total) for progress

        Returns:
            Ok with DownloadInfo, or Err with HttpError
        """
        ...


def _safe_filename(raw: str | None) -> str | None:
    if not raw:
        return None
    name = Path(raw.replace("\\", "/")).name
    if name in ("", ".", ".."):
        return None
    return name


class RealHttpClient:
    """Real HTTP client using urllib (system certificates, timeouts, streaming)."""

    def __init__(self, timeout: float = 60.0, user_agent: str = f"fioport/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[DownloadInfo, HttpError]:
        """Download URL to dest, following redirects."""
        try:
            req = urllib.request.Request(
                url,
                headers={"User-Agent": self.user_agent},
            )
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                total = int(response.headers.get("Content-Length", 0) or 0)
                filename = _safe_filename(response.headers.get_filename())
                downloaded = 0
                chunk_size = 64 * 1024

                dest.parent.mkdir(parents=True, exist_ok=True)

                with open(dest, "wb") as f:
                    while True:
                        chunk = response.read(chunk_size)
                        if not chunk:
                            break
                        f.write(chunk)
                        downloaded += len(chunk)
                        if progress:
                            progress(downloaded, total)

                return Ok(DownloadInfo(path=dest, filename=filename))

        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Download timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_download(url, b"...", filename="fio-fio-3.31-abc1234.tar.gz")
        client.download(url, dest)
        assert client.calls == [("download", url)]
    """

    def __init__(self) -> None:
        self._download_responses: dict[str, tuple[bytes, str | None] | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    def set_download(
        self, url: str, response: bytes | HttpError, *, filename: str | None = None
    ) -> None:
        """Set download content (and announced filename) for URL."""
        if isinstance(response, HttpError):
            self._download_responses[url] = response
        else:
            self._download_responses[url] = (response, filename)

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[DownloadInfo, HttpError]:
        """Mock download - writes predefined content to dest."""
        self.calls.append(("download", url))

        if url not in self._download_responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._download_responses[url]
        if isinstance(response, HttpError):
            return Err(response)

        content, filename = response
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(content)

        if progress:
            progress(len(content), len(content))

        return Ok(DownloadInfo(path=dest, filename=_safe_filename(filename)))
