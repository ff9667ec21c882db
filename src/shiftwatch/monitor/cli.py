"""CLI command for drift monitoring."""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from shiftwatch.common import setup_logging, ConfigLoader

from .config import MonitorConfig
from .cycle import CycleRunner
from .errors import ToolNotFoundError
from .tool_checker import check_required_tools

APP_NAME = "shiftwatch"

DEFAULT_INTERVAL_MINUTES = 60


def prompt_baseline_mode(input_fn: Callable[[str], str] = input) -> bool:
    """Ask whether remote files should be fetched as baselines first."""
    answer = input_fn("Grab remote files first as baseline? (y/n): ")
    return answer.strip().lower() == "y"


def prompt_interval(default: int = DEFAULT_INTERVAL_MINUTES, input_fn: Callable[[str], str] = input) -> int:
    """Ask for the cycle interval; blank or invalid input yields ``default``."""
    answer = input_fn(f"Enter interval in minutes (default {default}): ").strip()
    if not answer:
        return default
    try:
        value = int(answer)
    except ValueError:
        return default
    return value if value > 0 else default


def monitor_command(
    config: MonitorConfig,
    baseline: bool = False,
    once: bool = False,
    max_cycles: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Run baseline fetch (optionally) and monitoring cycles.

    Args:
        config: Configuration object (overrides already applied)
        baseline: Fetch remote counterparts as baselines before monitoring
        once: Run a single cycle and return
        max_cycles: Stop after this many cycles (None runs until interrupted)
        sleep: Sleep function used between cycles

    Returns:
        Exit code (0 for success)
    """
    logger = logging.getLogger(__package__ or __name__)
    watch = config.monitor

    logger.info(
        f"Configuration: {{'watch_directory': {watch.watch_directory or str(Path.cwd())!r}, "
        f"'base_url': {watch.base_url!r}, 'interval_minutes': {watch.interval_minutes}, "
        f"'use_ocr': {watch.use_ocr}}}"
    )

    try:
        check_required_tools(use_ocr=watch.use_ocr)
    except ToolNotFoundError as e:
        logger.error(e.message)
        return 1

    runner = CycleRunner.from_config(watch)
    if not runner.directory.is_dir():
        logger.error(f"Watch directory does not exist: {{'path': {str(runner.directory)!r}}}")
        runner.fetcher.close()
        return 1

    try:
        if baseline:
            runner.fetch_baselines()

        cycles = 0
        while True:
            runner.run_cycle()
            cycles += 1
            if once or (max_cycles is not None and cycles >= max_cycles):
                break
            sleep(watch.interval_minutes * 60)
    except KeyboardInterrupt:
        logger.info("Monitoring interrupted by user")
    finally:
        runner.fetcher.close()

    return 0


def main() -> int:
    """Main entry point for the shiftwatch command."""
    parser = argparse.ArgumentParser(
        description="Detect drift between local reference files and their remote counterparts"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults.toml)"
    )
    parser.add_argument(
        "--directory",
        type=Path,
        help="Directory holding local reference copies (overrides config)"
    )
    parser.add_argument(
        "--base-url",
        help="URL prefix of the remote counterparts (overrides config)"
    )
    parser.add_argument(
        "--interval",
        type=int,
        help="Minutes between cycles (overrides config)"
    )
    parser.add_argument(
        "--baseline",
        action="store_true",
        help="Fetch remote files as baselines before monitoring"
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt for baseline mode and interval"
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single cycle and exit"
    )
    parser.add_argument(
        "--no-ocr",
        action="store_true",
        help="Skip OCR comparison of monitored images"
    )

    args = parser.parse_args()

    loader = ConfigLoader(app_name=APP_NAME, config_class=MonitorConfig)
    try:
        config = loader.load(defaults_path=args.config)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(
        level=config.logging.level,
        format=config.logging.format,
        log_file=config.logging.log_path(),
    )

    baseline = args.baseline
    interval = args.interval
    if args.interactive:
        baseline = baseline or prompt_baseline_mode()
        if interval is None:
            interval = prompt_interval(default=config.monitor.interval_minutes)

    overrides = {}
    if args.directory is not None:
        overrides["watch_directory"] = str(args.directory)
    if args.base_url is not None:
        overrides["base_url"] = args.base_url
    if interval is not None:
        overrides["interval_minutes"] = interval
    if args.no_ocr:
        overrides["use_ocr"] = False

    try:
        config.monitor = config.monitor.model_validate(config.monitor.model_dump() | overrides)
    except ValidationError as e:
        logging.getLogger(__package__ or __name__).error(f"Invalid option: {e}")
        return 1

    return monitor_command(config, baseline=baseline, once=args.once)


if __name__ == "__main__":
    sys.exit(main())
