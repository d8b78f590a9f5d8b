"""Download and extraction infrastructure.

- HTTP client for snapshot downloads (http.py)
- Tag-keyed snapshot cache (download.py)
- Tar extraction with strip_components (extract.py)
"""

from fioport.tools.download import SnapshotDownloader, SnapshotResult
from fioport.tools.extract import ExtractError, Extractor, ExtractResult
from fioport.tools.http import (
    DownloadInfo,
    HttpClient,
    HttpError,
    MockHttpClient,
    RealHttpClient,
)

__all__ = [
    # HTTP
    "DownloadInfo",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # Download
    "SnapshotDownloader",
    "SnapshotResult",
    # Extract
    "ExtractError",
    "Extractor",
    "ExtractResult",
]
