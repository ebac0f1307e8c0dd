"""HTTP image fetcher with skip-if-exists policy and streaming writes."""

import logging
import os
from pathlib import Path
from typing import Optional

import httpx

from .config import DownloadConfig
from .extractor import filename_from_url
from .models import FetchOutcome, FetchResult

logger = logging.getLogger("image_scraper")


class Downloader:
    def __init__(self, config: Optional[DownloadConfig] = None):
        self.config = config or DownloadConfig()
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.config.timeout),
                follow_redirects=True,
                headers={"User-Agent": self.config.user_agent},
            )
        return self._client

    def close(self):
        if self._client and not self._client.is_closed:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def fetch(self, url: str, target_dir) -> FetchResult:
        """Fetch ``url`` into ``target_dir``. Never raises for network or disk errors."""
        local_path = Path(target_dir) / filename_from_url(url)

        if local_path.exists() and not self.config.overwrite_existing:
            logger.info(f"Skipped (already exists): {local_path}")
            return FetchResult(url, FetchOutcome.SKIPPED_EXISTS, destination=local_path)

        try:
            size = self._stream_download(url, local_path)
        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.error(f"Failed to download: {url} ({e})")
            return FetchResult(url, FetchOutcome.FAILED, destination=local_path, error=str(e))

        logger.info(f"Downloaded: {local_path} ({_format_bytes(size)})")
        return FetchResult(url, FetchOutcome.DOWNLOADED, destination=local_path, size=size)

    def _stream_download(self, url: str, local_path: Path) -> int:
        """Stream the response body to ``local_path``. Returns bytes written."""
        part_path = local_path.with_name(local_path.name + ".part")
        max_size = self.config.max_file_size
        size = 0

        try:
            with self.client.stream("GET", url) as resp:
                resp.raise_for_status()

                content_length = resp.headers.get("content-length")
                if max_size and content_length and content_length.isdigit() and int(content_length) > max_size:
                    raise ValueError(f"File too large: {content_length} bytes")

                with open(part_path, "wb") as f:
                    for chunk in resp.iter_bytes(chunk_size=self.config.chunk_size):
                        f.write(chunk)
                        size += len(chunk)
                        if max_size and size > max_size:
                            raise ValueError(f"File exceeded max size during download: {size} bytes")

            os.replace(part_path, local_path)
        except Exception:
            part_path.unlink(missing_ok=True)
            raise

        return size


def _format_bytes(n: int) -> str:
    if n < 1024:
        return f"{n} B"
    elif n < 1024 ** 2:
        return f"{n / 1024:.1f} KB"
    elif n < 1024 ** 3:
        return f"{n / 1024 ** 2:.1f} MB"
    else:
        return f"{n / 1024 ** 3:.2f} GB"
