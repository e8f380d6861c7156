#!/usr/bin/env python3
"""
onelink CLI — replace duplicate files under a directory with hardlinks.
Runs the collect -> checksum -> merge pipeline and reports the space freed.
Every fatal condition is reported once here and mapped to a non-zero exit code.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import NoReturn, Optional

from onelink import __version__
from onelink.commands import HardlinkCommand
from onelink.core.errors import OneLinkError
from onelink.core.models import MergeParams, RunStats, TreeInfo, default_worker_count
from onelink.services.progress import ConsoleProgress, NullProgress
from onelink.utils.convert_utils import ConvertUtils
from onelink.aliases import (
    ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT,
    LOG_LEVEL_ALIASES, LOG_LEVEL_CHOICES, EPILOG_TEXT
)

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"

logger = logging.getLogger(__name__)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="onelink",
            description="onelink — Replace duplicate files with hardlinks to reclaim disk space",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "root",
            nargs="?",
            default=".",
            help="Directory to deduplicate. Default: current directory"
        )

        # Filtering options
        parser.add_argument(
            "--min-size", "-m",
            default="1",
            type=str,
            metavar='SIZE',
            help="Ignore files smaller than this (e.g., 4K, 1MB). Default: 1 (skip empty files)"
        )
        parser.add_argument(
            "--all", "-a",
            action="store_true",
            dest="include_dotfiles",
            help="Also consider files whose name starts with '.'"
        )

        # Hashing options
        parser.add_argument(
            "--jobs", "-j",
            type=int,
            default=default_worker_count(),
            metavar='N',
            help="Number of parallel jobs to use when checksumming. Default: number of CPUs"
        )
        parser.add_argument(
            "--algorithm",
            choices=ALGORITHM_CHOICES,
            default="sha256",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )

        # Actions
        parser.add_argument(
            "--dry-run", "-n",
            action="store_true",
            dest="dry_run",
            help="Do not do anything, just print what would be done"
        )

        # Output options
        parser.add_argument(
            "--log-level",
            choices=LOG_LEVEL_CHOICES,
            default=None,
            type=str,
            help="Log verbosity. Default: warn (info with --dry-run, debug with --verbose)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Do not output summary of actions"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Be verbose about what's going on, with progress display"
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.verbose and args.quiet:
            self.error_exit("--quiet and --verbose are mutually exclusive", code=2)

        if args.jobs < 1:
            self.error_exit("--jobs must be at least 1", code=2)

        root_path = Path(args.root)
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.root}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.root}")

        if not ConvertUtils.is_valid_size_format(args.min_size):
            self.error_exit(f"Invalid size format: {args.min_size}", code=2)

    @staticmethod
    def resolve_log_level(args: argparse.Namespace) -> str:
        """Explicit --log-level wins, then --verbose, then --dry-run."""
        if args.log_level:
            return args.log_level
        if args.verbose:
            return "debug"
        if args.dry_run:
            return "info"
        return "warning"

    def create_params(self, args: argparse.Namespace) -> MergeParams:
        """Create MergeParams from CLI arguments."""
        try:
            return MergeParams.from_human_readable(
                root_dir=args.root,
                min_size_str=args.min_size,
                dry_run=args.dry_run,
                workers=args.jobs,
                exclude_dotfiles=not args.include_dotfiles,
                algorithm=ALGORITHM_ALIASES[args.algorithm],
                log_level=self.resolve_log_level(args),
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}", code=2)

    @staticmethod
    def configure_logging(level_name: str) -> None:
        logging.basicConfig(
            level=LOG_LEVEL_ALIASES[level_name],
            format=LOG_FORMAT,
            force=True
        )

    def run_pipeline(self, params: MergeParams) -> tuple[TreeInfo, RunStats]:
        """Execute the hardlink run; fatal errors end the process with status 1."""
        progress = ConsoleProgress() if self.verbose else NullProgress()
        try:
            return HardlinkCommand().execute(params, progress=progress)
        except OneLinkError as e:
            self.error_exit(str(e))

    def output_results(self, tree: TreeInfo, stats: RunStats, params: MergeParams) -> None:
        """Print the final savings line and, when verbose, the stage statistics."""
        if self.verbose:
            print(stats.print_summary())

        if self.quiet:
            return

        saved = ConvertUtils.bytes_to_human(tree.bytes_saved)
        if params.dry_run:
            print(f"Would save {saved} of disk space ({tree.dupe_count} duplicates)")
        else:
            print(f"Saved {saved} of disk space ({tree.dupe_count} duplicates)")

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[list] = None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet

        self.validate_args(args)
        params = self.create_params(args)
        self.configure_logging(params.log_level)

        logger.info(f"Scanning directory: {params.root_dir}")
        tree, stats = self.run_pipeline(params)
        self.output_results(tree, stats, params)

        elapsed = time.time() - self.start_time
        logger.debug(f"Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
