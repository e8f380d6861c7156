import logging

from onelink.core.models import HashAlgorithmName

ALGORITHM_ALIASES = {
    "sha256": HashAlgorithmName.SHA256,
    "xxh128": HashAlgorithmName.XXH128,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Content hash used to decide that two files are identical:\n"
    f"  sha256 : {HashAlgorithmName.SHA256.description}\n"
    f"  xxh128 : {HashAlgorithmName.XXH128.description}\n"
    "Files are never compared byte by byte, the digest is the only check."
)

LOG_LEVEL_ALIASES = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

LOG_LEVEL_CHOICES = ["debug", "info", "warn", "warning", "error"]

EPILOG_TEXT = """
Examples:
  Preview how much space merging duplicates under a backup tree would free
  %(prog)s --dry-run /srv/backups

  Merge duplicates with 8 hashing workers, ignoring files under 4KB
  %(prog)s -j 8 -m 4K /srv/mirror

  Include dotfiles and show progress plus debug output
  %(prog)s --all --verbose ~/media

If a run is interrupted, files ending in .tmpdedupe may be left behind.
Inspect and resolve them by hand; %(prog)s refuses to run while they exist.
"""
