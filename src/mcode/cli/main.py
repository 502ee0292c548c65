"""Main CLI interface for mcode."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import colorama
from colorama import Fore, Style
from tqdm.contrib.logging import logging_redirect_tqdm

from ..config.constants import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_OK
from ..core import ConfigManager, HandBrakeEngine, HandBrakeError, ProcessingStatus
from ..core.directory_processor import process_directory
from ..processors import Mp4Converter
from .failure_table import print_failure_table
from .progress import ProgressDisplay

LOG = logging.getLogger(__name__)


class HighlightFormatter(logging.Formatter):
    """Formatter that colours records logged with ``extra={"highlight": True}``."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if getattr(record, "highlight", False):
            return f"{Fore.RED}{message}{Style.RESET_ALL}"
        return message


class McodeCLI:
    """Command line front end: options, logging and the conversion run."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_manager = ConfigManager(config_path)

    @staticmethod
    def setup_logging(verbosity: int, default_level: str = "INFO") -> None:
        """Setup logging based on verbosity level, falling back to ``default_level``."""
        level = logging.DEBUG if verbosity >= 1 else logging.getLevelName(default_level.upper())
        if not isinstance(level, int):
            level = logging.INFO
        log_format = "%(levelname)s: %(name)s: %(message)s" if verbosity >= 1 else "%(message)s"

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(HighlightFormatter(log_format))
        logging.basicConfig(level=level, handlers=[handler], force=True)

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser."""
        config = self.config_manager.config
        parser = argparse.ArgumentParser(
            prog="mcode",
            description="Mp4 Encoder: a utility to transcode video files into mp4.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # See what would be converted
  mcode ~/Videos

  # Convert every .avi and .mpg below ~/Videos, removing the originals
  mcode -r -c -d ~/Videos

  # Re-encode .mkv files, overwriting earlier conversions
  mcode -c -f -e mkv --path ~/Videos
            """,
        )

        parser.add_argument("path_arg", nargs="?", metavar="path", help="The directory to process")
        parser.add_argument("--path", "-p", metavar="DIRECTORY", help="The directory to process")
        parser.add_argument("--commit", "-c", action="store_true", help="Commit changes (default is a dry run)")
        parser.add_argument("--delete", "-d", action="store_true", help="Delete original file")
        parser.add_argument("--force", "-f", action="store_true", help="Overwrite existing files")
        parser.add_argument("--recursive", "-r", action="store_true", help="Recursively process subdirectories")
        parser.add_argument(
            "--extensions",
            "-e",
            default=None,
            help=f"Comma delimited source extensions (default: {config.conversion.extensions})",
        )
        parser.add_argument(
            "--preset",
            default=None,
            help=f"HandBrake preset name (default: {config.engine.preset})",
        )
        parser.add_argument("--config", type=Path, help="Path to configuration file")
        parser.add_argument(
            "-v",
            "--verbose",
            action="count",
            default=0,
            help="Increase verbosity (-v for debug output)",
        )
        return parser

    @staticmethod
    def resolve_path(parser: argparse.ArgumentParser, args: argparse.Namespace) -> Path:
        """Pick the root directory from --path or the positional argument."""
        if args.path and args.path_arg and Path(args.path) != Path(args.path_arg):
            parser.error(f"ambiguous path: --path {args.path} and {args.path_arg}")
        path = args.path or args.path_arg
        if not path:
            parser.error("Path required!")
        return Path(path)

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parser = self.build_parser()
        parsed_args = parser.parse_args(args)
        root = self.resolve_path(parser, parsed_args)

        if parsed_args.config:
            self.config_manager = ConfigManager(parsed_args.config)

        colorama.just_fix_windows_console()
        self.setup_logging(parsed_args.verbose, self.config_manager.config.global_.log_level)

        if not root.is_dir():
            LOG.error("Directory does not exist: %s", root)
            return EXIT_FAILURE

        policy = self.config_manager.build_policy(
            commit=parsed_args.commit,
            force=parsed_args.force,
            delete=parsed_args.delete,
            recursive=parsed_args.recursive,
            extensions=parsed_args.extensions,
            preset=parsed_args.preset,
        )

        engine = HandBrakeEngine(self.config_manager.config.engine.binary)
        if policy.commit:
            try:
                engine.check_availability()
            except HandBrakeError:
                LOG.info("Install HandBrakeCLI or set engine.binary in config.yaml")
                return EXIT_FAILURE

        converter = Mp4Converter(engine=engine, observer=ProgressDisplay())

        try:
            with logging_redirect_tqdm():
                results = process_directory(root, converter, policy)
        except KeyboardInterrupt:
            LOG.info("Operation cancelled by user")
            return EXIT_INTERRUPTED

        failed = [r for r in results if r.status in (ProcessingStatus.FAILED, ProcessingStatus.ERROR)]
        if failed:
            print_failure_table(failed)
            return EXIT_FAILURE
        return EXIT_OK


def main(args: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    cli = McodeCLI()
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
