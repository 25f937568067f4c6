# ABOUTME: CLI entry point for the photo organizer using argparse.
# ABOUTME: Runs the organize engine on a worker thread and renders its progress with tqdm.

import argparse
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from photo_organizer.engine import OrganizeEngine
from photo_organizer.progress import ProgressChannel, RunState, RunSummary
from photo_organizer.utils.config import (
    DEFAULT_CONFIG,
    Config,
    DateLayout,
    load_config,
    save_config,
)
from photo_organizer.utils.report import default_report_name, save_report

logger = logging.getLogger("photo_organizer")

DEFAULT_CONFIG_PATH = Path.home() / ".photo_organizer.yml"
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with all subcommands."""
    # Common arguments shared across all subcommands
    common_parser = argparse.ArgumentParser(add_help=False)
    common_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging output.",
    )
    common_parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to config file (default: ~/.photo_organizer.yml).",
    )
    common_parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Path to log file for persistent logging output.",
    )

    parser = argparse.ArgumentParser(
        prog="photo-organizer",
        description="Move photos into dated folders based on when they were taken.",
        parents=[common_parser],
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    organize_parser = subparsers.add_parser(
        "organize", help="Organize the photos under a folder.", parents=[common_parser],
    )
    organize_parser.add_argument("source", help="Root folder to organize in place.")
    organize_parser.add_argument(
        "--layout",
        choices=[layout.value for layout in DateLayout],
        default=None,
        help="Date folder layout (default from config: YYYY/MM).",
    )
    organize_parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Write a JSON report of every file to this path.",
    )
    organize_parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not show a progress bar.",
    )

    init_parser = subparsers.add_parser(
        "init-config", help="Write the default config file.", parents=[common_parser],
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file.",
    )

    return parser


def configure_logging(verbose: bool, log_file: str | None) -> None:
    """Log to the console, and also to log_file when one is given."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )

    # Add file logging if requested
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
        logging.getLogger().addHandler(file_handler)


def watch_run(engine: OrganizeEngine, source: Path, show_progress: bool = True) -> RunSummary:
    """Start a run and follow its progress until the summary arrives.

    Ctrl-C asks the engine to stop after the file it is working on.
    """
    channel = ProgressChannel()
    engine.start(source, channel)
    progress = tqdm(total=0, desc="Organizing", unit="file", disable=not show_progress)

    while channel.summary is None:
        try:
            for event in channel.events():
                if event.total != progress.total:
                    progress.reset(total=event.total)
                progress.update(event.current - progress.n)
                logger.debug("(%d/%d) %s", event.current, event.total, event.message)
        except KeyboardInterrupt:
            logger.warning("Cancelling; waiting for the current file to finish...")
            engine.cancel()

    progress.close()
    return channel.summary


def exit_code_for(summary: RunSummary) -> int:
    if summary.state is RunState.CANCELLED:
        return EXIT_CANCELLED
    if summary.state is RunState.COMPLETED and summary.errors == 0:
        return 0
    return 1


def main() -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    args = parser.parse_args()

    configure_logging(getattr(args, "verbose", False), getattr(args, "log_file", None))

    if not args.command:
        parser.print_help()
        return 1

    config_path = Path(args.config) if args.config else DEFAULT_CONFIG_PATH

    if args.command == "init-config":
        if config_path.exists() and not args.force:
            logger.error("Config file already exists: %s (use --force)", config_path)
            return 1
        save_config(Config.from_dict(DEFAULT_CONFIG), config_path)
        logger.info("Wrote default config to %s", config_path)
        return 0

    try:
        config = load_config(config_path)
    except ValueError as e:
        logger.error("Invalid config %s: %s", config_path, e)
        return 1
    if args.layout:
        config.layout = DateLayout.parse(args.layout)

    source_dir = Path(args.source).expanduser().resolve()
    engine = OrganizeEngine(config=config)
    summary = watch_run(engine, source_dir, show_progress=not args.no_progress)

    if summary.state is RunState.FATAL_ERROR:
        logger.error("Could not organize %s: %s", source_dir, summary.fatal_error)
    elif summary.total == 0:
        logger.info("No image files found in %s", source_dir)
    else:
        logger.info(
            "Organization %s: processed %d files, errors %d",
            "cancelled" if summary.cancelled else "complete",
            summary.processed,
            summary.errors,
        )

    report_path = None
    if args.report:
        report_path = Path(args.report)
    elif config.report_dir:
        report_path = config.report_dir / default_report_name(summary)
    if report_path:
        save_report(summary, report_path)

    return exit_code_for(summary)


if __name__ == "__main__":
    sys.exit(main())
