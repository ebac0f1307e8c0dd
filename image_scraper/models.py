"""Data models for the scraper."""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

_FINAL_EXTENSION = re.compile(r"\.[^.]+$")


@dataclass(frozen=True)
class SourceFile:
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def target_folder(self) -> Path:
        """Sibling directory named after the file with its final extension stripped."""
        stem = _FINAL_EXTENSION.sub("", self.path.name, count=1)
        return self.path.parent / (stem or self.path.name)


class FetchOutcome(str, Enum):
    DOWNLOADED = "downloaded"
    SKIPPED_EXISTS = "skipped-exists"
    FAILED = "failed"


@dataclass
class FetchResult:
    url: str
    outcome: FetchOutcome
    destination: Optional[Path] = None
    size: int = 0
    error: Optional[str] = None


@dataclass
class FileReport:
    source: SourceFile
    links: int = 0
    downloaded: int = 0
    skipped: int = 0
    failed: int = 0
    invalid_links: int = 0
    error: Optional[str] = None  # read or folder creation failure


@dataclass
class RunSummary:
    files_processed: int = 0
    images_downloaded: int = 0
    images_skipped: int = 0
    images_failed: int = 0
    invalid_links: int = 0
    files_with_errors: int = 0

    def add(self, report: FileReport):
        self.files_processed += 1
        self.images_downloaded += report.downloaded
        self.images_skipped += report.skipped
        self.images_failed += report.failed
        self.invalid_links += report.invalid_links
        if report.error:
            self.files_with_errors += 1
