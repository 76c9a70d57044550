"""High-level orchestration for the feed_sieve application."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from .feeds import (
    DEFAULT_CATEGORY_PATH,
    DEFAULT_ENTRY_PATH,
    build_result,
    filter_document,
    filter_feed,
    read_feed,
    require_category,
)
from .models import FilterResult

logger = logging.getLogger(__name__)


@dataclass
class RunConfig:
    """Runtime options for executing the application."""

    input_path: str
    output_path: str
    category: str
    entry_path: str = DEFAULT_ENTRY_PATH
    category_path: str = DEFAULT_CATEGORY_PATH
    dry_run: bool = False


@dataclass
class RunResult:
    """Returned data after executing the app."""

    output_text: str
    result: FilterResult


def _preview(config: RunConfig) -> FilterResult:
    require_category(config.category)
    source = read_feed(config.input_path)
    filtered = filter_document(
        source,
        config.category,
        entry_path=config.entry_path,
        category_path=config.category_path,
    )
    return build_result(
        source,
        filtered,
        input_path=config.input_path,
        output_path=None,
        target_category=config.category,
        entry_path=config.entry_path,
    )


def _render_report(result: FilterResult) -> str:
    report = {
        "input": result.input_path,
        "output": result.output_path,
        "category": result.category,
        "total": result.total_entries,
        "kept": result.kept_entries,
        "titles": result.kept_titles,
    }
    return json.dumps(report, indent=2, ensure_ascii=False)


def execute(config: RunConfig) -> RunResult:
    """Run the application logic and return the result payload."""
    if config.dry_run:
        logger.info("Dry run: %s will not be written", config.output_path)
        result = _preview(config)
    else:
        result = filter_feed(
            config.input_path,
            config.output_path,
            config.category,
            entry_path=config.entry_path,
            category_path=config.category_path,
        )

    if result.kept_entries == 0:
        logger.warning(
            "No entries in %s are tagged '%s'", config.input_path, config.category
        )
    else:
        logger.info(
            "Kept %d of %d entries tagged '%s'",
            result.kept_entries,
            result.total_entries,
            config.category,
        )

    return RunResult(output_text=_render_report(result), result=result)
