"""YAML config loader."""

import os
from dataclasses import dataclass, field
from typing import List, Optional

import yaml

DEFAULT_SOURCE_EXTENSIONS = (".txt", ".csv", ".log", ".rtf")
DEFAULT_IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp", "bmp")


class ConfigError(Exception):
    """Raised when an explicitly requested config file cannot be used."""


@dataclass
class DownloadConfig:
    timeout: float = 30.0
    user_agent: str = "ImageScraper/1.0"
    overwrite_existing: bool = False
    max_file_size: int = 0  # 0 = unlimited
    chunk_size: int = 65536


@dataclass
class ScanConfig:
    source_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS))
    image_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_IMAGE_EXTENSIONS))
    encoding: str = "utf-8"


@dataclass
class AppConfig:
    log_dir: Optional[str] = None
    log_level: str = "INFO"
    download: DownloadConfig = field(default_factory=DownloadConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)


def _normalize_source_extensions(values) -> List[str]:
    exts = []
    for value in values:
        value = str(value).strip().lower()
        if value and not value.startswith("."):
            value = "." + value
        if value:
            exts.append(value)
    return exts


def _normalize_image_extensions(values) -> List[str]:
    return [str(v).strip().lower().lstrip(".") for v in values if str(v).strip(". ")]


def _section(raw: dict, name: str, config_path: str) -> dict:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"config file {config_path}: '{name}' must be a mapping")
    return value


def _build_download(dl_raw: dict, config_path: str) -> DownloadConfig:
    fields = {k: v for k, v in dl_raw.items() if k in DownloadConfig.__dataclass_fields__}
    try:
        download = DownloadConfig(**fields)
        download.timeout = float(download.timeout)
        download.max_file_size = int(download.max_file_size)
        download.chunk_size = int(download.chunk_size)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"config file {config_path}: invalid download setting: {e}") from e
    if not isinstance(download.overwrite_existing, bool):
        raise ConfigError(f"config file {config_path}: download.overwrite_existing must be true or false")
    if download.timeout <= 0 or download.chunk_size <= 0 or download.max_file_size < 0:
        raise ConfigError(
            f"config file {config_path}: download.timeout and download.chunk_size must be positive, "
            f"download.max_file_size non-negative"
        )
    download.user_agent = str(download.user_agent)
    return download


def _build_scan(scan_raw: dict, config_path: str) -> ScanConfig:
    scan = ScanConfig(**{k: v for k, v in scan_raw.items() if k in ScanConfig.__dataclass_fields__})
    for name in ("source_extensions", "image_extensions"):
        if not isinstance(getattr(scan, name), list):
            raise ConfigError(f"config file {config_path}: scan.{name} must be a list")
    scan.source_extensions = _normalize_source_extensions(scan.source_extensions)
    scan.image_extensions = _normalize_image_extensions(scan.image_extensions)
    if not scan.image_extensions:
        raise ConfigError(f"config file {config_path}: scan.image_extensions is empty")
    scan.encoding = str(scan.encoding)
    return scan


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load configuration from a YAML file, or return defaults when no path is given."""
    if config_path is None:
        return AppConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"cannot read config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"config file {config_path} must contain a mapping")

    download = _build_download(_section(raw, "download", config_path), config_path)
    scan = _build_scan(_section(raw, "scan", config_path), config_path)

    log_dir = raw.get("log_dir")
    return AppConfig(
        log_dir=os.path.expanduser(str(log_dir)) if log_dir else None,
        log_level=str(raw.get("log_level", "INFO")).upper(),
        download=download,
        scan=scan,
    )
