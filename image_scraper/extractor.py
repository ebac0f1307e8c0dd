"""Image link extraction from text files.

Links are found with a non-greedy pattern (``http``/``https`` up to the first
image extension that ends at a word boundary) and then validated. Matches that
do not parse as absolute URLs are logged and dropped; they never abort a file.
"""

import logging
import posixpath
import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
from urllib.parse import unquote, urlsplit

from .config import DEFAULT_IMAGE_EXTENSIONS

logger = logging.getLogger("image_scraper")

# RFC 3986 unreserved + reserved characters, a percent escape, or a printable
# non-ASCII character (percent-encoded by httpx on request)
_URL_CHARS = re.compile(
    r"^(?:[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=]|%[0-9A-Fa-f]{2}|[^\x00-\x7f\x80-\x9f\s])+$"
)


class SourceReadError(Exception):
    """A source file could not be read; the whole file is skipped."""

    def __init__(self, path, cause: Exception):
        super().__init__(f"cannot read {path}: {cause}")
        self.path = path
        self.cause = cause


def build_link_pattern(extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS) -> "re.Pattern[str]":
    alternatives = "|".join(re.escape(ext) for ext in extensions)
    return re.compile(
        rf"https?://[^\s\"'<>]+?\.(?:{alternatives})(?![a-z0-9])",
        re.IGNORECASE,
    )


def filename_from_url(url: str) -> str:
    """Last segment of the URL path, percent-decoded."""
    return posixpath.basename(unquote(urlsplit(url).path))


def parse_link(raw: str) -> Optional[str]:
    """Return ``raw`` if it is a well-formed absolute http(s) URL, else None."""
    if not _URL_CHARS.match(raw):
        return None
    try:
        parts = urlsplit(raw)
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        return None
    if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
        return None
    if any(c in parts.path + parts.query + parts.fragment for c in "[]"):
        return None
    if not filename_from_url(raw):
        return None
    return raw


class LinkExtractor:
    def __init__(self, image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
                 encoding: str = "utf-8"):
        self.pattern = build_link_pattern(image_extensions)
        self.encoding = encoding

    def scan_line(self, line: str) -> Tuple[List[str], int]:
        """Return (valid links, invalid match count) for a single line."""
        links = []
        invalid = 0
        for match in self.pattern.finditer(line):
            raw = match.group()
            link = parse_link(raw)
            if link is None:
                logger.warning(f"Invalid URL skipped: {raw}")
                invalid += 1
                continue
            links.append(link)
        return links, invalid

    def extract_from_lines(self, lines: Iterable[str]) -> Tuple[List[str], int]:
        links = []
        invalid = 0
        for line in lines:
            found, bad = self.scan_line(line)
            links.extend(found)
            invalid += bad
        return links, invalid

    def extract_from_text(self, text: str) -> List[str]:
        links, _ = self.extract_from_lines(text.splitlines())
        return links

    def extract(self, path) -> Tuple[List[str], int]:
        """Read ``path`` line by line and return (links in encounter order, invalid count).

        Raises SourceReadError if the file cannot be opened or read.
        """
        path = Path(path)
        try:
            with open(path, encoding=self.encoding, errors="replace") as f:
                return self.extract_from_lines(f)
        except OSError as e:
            raise SourceReadError(path, e) from e
