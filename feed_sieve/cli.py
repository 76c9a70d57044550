"""Command-line interface for the feed_sieve application."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import pprint
from pathlib import Path
from typing import List, Optional

from .config import AppConfig, parse_app_config
from .errors import FeedSieveError
from .runner import RunConfig, execute

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Keep only the RSS entries tagged with a given category."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional path to a configuration XML file.",
    )

    # Overrides for values that may also come from the config file
    parser.add_argument(
        "--input",
        default=None,
        help="Feed to read (default: docs/rss.xml).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Where to write the filtered feed (default: docs/r-rss.xml).",
    )
    parser.add_argument(
        "--category",
        default=None,
        help="Category label entries must carry, matched exactly (default: R).",
    )
    parser.add_argument(
        "--entry-path",
        metavar="XPATH",
        default=None,
        help="XPath locating entries, relative to the root element (default: //item).",
    )
    parser.add_argument(
        "--category-path",
        metavar="XPATH",
        default=None,
        help="XPath locating an entry's categories (default: category).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report which entries would be kept without writing the output.",
    )

    # Overrides for logging/debugging
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING). Overrides config.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional path to a log file. Overrides config.",
    )

    return parser


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Initialise logging according to options."""
    log_level = getattr(logging, level_name.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        if log_path.parent and not log_path.parent.exists():
            log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logger.debug(
            "Logger initialised with level %s and file output to %s",
            level_name.upper(),
            log_path,
        )
    else:
        logger.debug(
            "Logger initialised with console output at level %s", level_name.upper()
        )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = parse_app_config(args.config) if args.config else AppConfig()

        # Determine logging settings (CLI overrides Config)
        log_level = args.log_level or app_config.logging.level
        log_file = args.log_file or app_config.logging.file

        configure_logging(log_level, log_file)

        config = RunConfig(
            input_path=args.input or app_config.input_file,
            output_path=args.output or app_config.output_file,
            category=(
                args.category if args.category is not None else app_config.category
            ),
            entry_path=args.entry_path or app_config.paths.entry,
            category_path=args.category_path or app_config.paths.category,
            dry_run=args.dry_run,
        )

        logger.info(
            "Active Configuration:\n%s", pprint.pformat(dataclasses.asdict(config))
        )

        result = execute(config)
    except ValueError as exc:
        parser.error(str(exc))
    except FeedSieveError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error during execution.")
        return 1

    print(result.output_text)
    return 0
