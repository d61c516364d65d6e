"""HTTP download of the udev rules file."""

from __future__ import annotations

import http.client
import shutil
import urllib.error
import urllib.request
from pathlib import Path

from teensyctl.core.errors import DownloadError


class UrlDownloader:
    def download(self, url: str, dest: Path, *, timeout_s: float) -> Path:
        try:
            with urllib.request.urlopen(url, timeout=timeout_s) as response, dest.open("wb") as fh:
                shutil.copyfileobj(response, fh)
        except TimeoutError as exc:
            raise DownloadError(f"Timed out after {timeout_s:g}s downloading {url}") from exc
        except urllib.error.URLError as exc:
            raise DownloadError(f"Could not download {url}: {exc.reason}") from exc
        except http.client.HTTPException as exc:
            raise DownloadError(f"Could not download {url}: {exc!r}") from exc
        except OSError as exc:
            raise DownloadError(f"Could not download {url}: {exc}") from exc
        return dest
