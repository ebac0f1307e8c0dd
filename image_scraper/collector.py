"""Lists eligible source files directly inside a directory."""

import logging
import os
from pathlib import Path
from typing import Iterable, List

from .config import DEFAULT_SOURCE_EXTENSIONS
from .models import SourceFile

logger = logging.getLogger("image_scraper")


def is_source_name(name: str, extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS) -> bool:
    return name.lower().endswith(tuple(extensions))


def collect_source_files(directory, extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS) -> List[SourceFile]:
    """Return regular files in ``directory`` (non-recursive) matching the extension allow-list.

    Results are sorted by name. A directory that cannot be listed yields an empty list.
    """
    extensions = tuple(ext.lower() for ext in extensions)
    directory = Path(directory)

    try:
        entries = list(os.scandir(directory))
    except OSError as e:
        logger.warning(f"Cannot list {directory}: {e}")
        return []

    files = []
    for entry in entries:
        if not is_source_name(entry.name, extensions):
            continue
        try:
            if not entry.is_file():
                continue
        except OSError as e:
            logger.debug(f"Cannot stat {entry.path}: {e}")
            continue
        files.append(SourceFile(directory / entry.name))

    files.sort(key=lambda f: f.name)
    return files
