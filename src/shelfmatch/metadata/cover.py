# ABOUTME: Downloads candidate cover images into the local covers directory.
# ABOUTME: Names files after the book, sanitized for every platform's filesystem.

import logging
import re
from pathlib import Path

from shelfmatch.metadata.http import HttpClient, MetadataFetchError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS_RE = re.compile(r'[/\\:*?"<>|]')


class CoverDownloadError(Exception):
    """Raised when a cover cannot be fetched or written to disk."""


def sanitize_filename(name: str) -> str:
    """Replace characters that are invalid in file names on any platform."""
    return _UNSAFE_CHARS_RE.sub("_", name)


def cover_extension(url: str) -> str:
    """``png`` when the URL mentions a .png file, otherwise ``jpg``."""
    return "png" if ".png" in url.lower() else "jpg"


class CoverStore:
    """Stores downloaded covers as ``<covers_dir>/<name>.<ext>``."""

    def __init__(self, covers_dir: Path, http_client: HttpClient) -> None:
        self._dir = covers_dir
        self._http = http_client

    @property
    def covers_dir(self) -> Path:
        return self._dir

    def path_for(self, url: str, name: str) -> Path:
        return self._dir / f"{sanitize_filename(name)}.{cover_extension(url)}"

    def download(self, url: str, name: str) -> Path:
        """Fetch a cover and write it, replacing any previous file of the same name.

        Args:
            url: Image URL from a metadata candidate.
            name: Base file name, usually the book id.

        Returns:
            Path of the written image.

        Raises:
            CoverDownloadError: If the request fails or the file cannot be written.
        """
        try:
            data = self._http.get_bytes(url)
        except MetadataFetchError as exc:
            raise CoverDownloadError(f"Could not download cover {url}: {exc}") from exc

        dest = self.path_for(url, name)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(data)
        except OSError as exc:
            raise CoverDownloadError(f"Could not write cover to {dest}: {exc}") from exc

        logger.info("Saved cover to %s", dest)
        return dest
