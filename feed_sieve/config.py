"""Configuration loading for feed_sieve."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from .errors import ConfigError
from .feeds import DEFAULT_CATEGORY_PATH, DEFAULT_ENTRY_PATH

logger = logging.getLogger(__name__)

DEFAULT_INPUT = "docs/rss.xml"
DEFAULT_OUTPUT = "docs/r-rss.xml"
DEFAULT_CATEGORY = "R"


@dataclass
class PathsConfig:
    entry: str = DEFAULT_ENTRY_PATH
    category: str = DEFAULT_CATEGORY_PATH


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class AppConfig:
    input_file: str = DEFAULT_INPUT
    output_file: str = DEFAULT_OUTPUT
    category: str = DEFAULT_CATEGORY
    paths: PathsConfig = field(default_factory=PathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _resolve_path(base_path: Path, target_path: str) -> str:
    """Resolve a path relative to the base config file if it's not absolute."""
    target = Path(target_path)
    if target.is_absolute():
        return str(target)
    return str((base_path.parent / target).resolve())


def _stripped(node: Optional[ET.Element]) -> Optional[str]:
    if node is None or node.text is None:
        return None
    return node.text.strip() or None


def parse_app_config(path: str) -> AppConfig:
    """Parse the main application configuration XML."""
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info("Loading application configuration from %s", config_path)
    try:
        tree = ET.parse(config_path)
    except ET.ParseError as exc:
        raise ConfigError(config_path, f"not valid XML ({exc})") from exc
    root = tree.getroot()
    if root.tag != "config":
        raise ConfigError(
            config_path, f"root element must be <config>, got <{root.tag}>"
        )

    config = AppConfig()

    # Feed locations
    input_file = _stripped(root.find("input"))
    if input_file:
        config.input_file = _resolve_path(config_path, input_file)

    output_file = _stripped(root.find("output"))
    if output_file:
        config.output_file = _resolve_path(config_path, output_file)

    # Category is matched exactly, so it is taken verbatim.
    category_node = root.find("category")
    if category_node is not None:
        if not category_node.text:
            raise ConfigError(config_path, "<category> must not be empty")
        config.category = category_node.text

    # XPath expressions
    paths_node = root.find("paths")
    if paths_node is not None:
        config.paths.entry = _stripped(paths_node.find("entry")) or DEFAULT_ENTRY_PATH
        config.paths.category = (
            _stripped(paths_node.find("category")) or DEFAULT_CATEGORY_PATH
        )

    # Logging
    log_node = root.find("logging")
    if log_node is not None:
        config.logging.level = _stripped(log_node.find("level")) or "INFO"
        log_file = _stripped(log_node.find("file"))
        if log_file:
            config.logging.file = _resolve_path(config_path, log_file)

    logger.debug("Parsed configuration: %s", config)
    return config
