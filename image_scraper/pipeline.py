"""Orchestrates collection, extraction and download for one directory."""

import logging
from pathlib import Path

from .collector import collect_source_files
from .config import AppConfig
from .downloader import Downloader
from .extractor import LinkExtractor, SourceReadError
from .models import FetchOutcome, FileReport, RunSummary, SourceFile

logger = logging.getLogger("image_scraper")


class DirectoryError(Exception):
    """The target path is missing or not a directory. Fatal for the run."""


class NoEligibleFilesError(Exception):
    """The directory holds no eligible source files. Ends the run successfully."""

    def __init__(self, directory):
        super().__init__(f"No eligible files found in {directory}")
        self.directory = directory


def validate_directory(directory) -> Path:
    path = Path(directory)
    if not path.is_dir():
        raise DirectoryError(f"invalid directory: {path}")
    return path


def process_file(source: SourceFile, extractor: LinkExtractor, downloader: Downloader) -> FileReport:
    """Extract links from one file and fetch them into its target folder."""
    report = FileReport(source)

    try:
        links, report.invalid_links = extractor.extract(source.path)
    except SourceReadError as e:
        logger.error(str(e))
        report.error = str(e)
        return report

    report.links = len(links)
    if not links:
        logger.debug(f"No image links in {source.name}")
        return report

    target = source.target_folder
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Cannot create folder {target}: {e}")
        report.error = str(e)
        report.failed = len(links)
        return report

    for url in links:
        result = downloader.fetch(url, target)
        if result.outcome is FetchOutcome.DOWNLOADED:
            report.downloaded += 1
        elif result.outcome is FetchOutcome.SKIPPED_EXISTS:
            report.skipped += 1
        else:
            report.failed += 1

    logger.debug(
        f"{source.name}: {report.links} links, {report.downloaded} downloaded, "
        f"{report.skipped} skipped, {report.failed} failed"
    )
    return report


def run_pipeline(directory, config: AppConfig = None, downloader: Downloader = None) -> RunSummary:
    """Scan ``directory`` and download every linked image.

    Raises DirectoryError for a bad target and NoEligibleFilesError when
    nothing matches the source extension allow-list.
    """
    config = config or AppConfig()
    path = validate_directory(directory)

    files = collect_source_files(path, config.scan.source_extensions)
    if not files:
        raise NoEligibleFilesError(path)

    logger.debug(f"Found {len(files)} eligible files in {path}")
    extractor = LinkExtractor(config.scan.image_extensions, config.scan.encoding)
    owns_downloader = downloader is None
    if owns_downloader:
        downloader = Downloader(config.download)

    summary = RunSummary()
    try:
        for source in files:
            summary.add(process_file(source, extractor, downloader))
    finally:
        if owns_downloader:
            downloader.close()

    return summary
