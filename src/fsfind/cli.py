"""
Command-line interface for fsfind.

Builds a SearchCriteria from find-style short flags and prints the matching
paths as the walk produces them.
"""

import argparse
import contextlib
import logging
import sys
from typing import List, Optional, Sequence

from pydantic import ValidationError

from . import __version__
from .config.parser import ConfigurationError, load_config
from .models.config import FindConfig, LoggingConfig, LogLevel
from .models.criteria import SearchCriteria, TypeFilter
from .tools.fs_walker import FSWalker


logger = logging.getLogger(__name__)

# Short flags that take a value, and those that don't and may precede one in a bundle
VALUE_FLAGS = frozenset('nisuptc')
SWITCH_FLAGS = frozenset('fdeq')


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="fsfind",
        description="Search a directory tree for entries matching every given criterion.",
        epilog=(
            "examples: fsfind -f -n '*.c' -e (empty .c files), "
            "fsfind -t +7 (modified more than 7 days ago), "
            "fsfind src -s -10k (smaller than 10 KiB)"
        ),
    )
    p.add_argument("path", nargs="?", help="Directory to search (default: current directory)")
    p.add_argument("-f", dest="files_only", action="store_true", help="Match regular files only")
    p.add_argument("-d", dest="dirs_only", action="store_true", help="Match directories only")
    p.add_argument("-e", dest="empty", action="store_true", help="Match empty files and directories")
    p.add_argument("-n", dest="name", metavar="PATTERN", help="Shell glob matched against the name")
    p.add_argument("-i", dest="iname", metavar="PATTERN", help="Like -n, ignoring case")
    p.add_argument("-s", dest="size", metavar="SIZE",
                   help="Size in bytes, +N larger, -N smaller; units k, M, G")
    p.add_argument("-u", dest="user", metavar="USER", help="Owned by USER")
    p.add_argument("-p", dest="perm", metavar="MODE", help="Exact octal permission bits, e.g. 644")
    p.add_argument("-t", dest="mtime", metavar="DAYS",
                   help="Modified N days ago; +N more than N days, -N less than N days")
    p.add_argument("--print0", dest="print0", action="store_true",
                   help="Separate output with NUL instead of newline")
    p.add_argument("--sort", action="store_true", help="Sort matches before printing")
    p.add_argument("-q", "--quiet", action="store_true", help="Suppress diagnostics")
    p.add_argument("-c", "--config", metavar="FILE", help="Configuration file")
    p.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging level (overrides config)")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def attach_option_values(argv: Sequence[str]) -> List[str]:
    """
    Join value flags with a following value that starts with ``-``.

    ``-s -100k`` becomes ``-s-100k`` so argparse does not mistake the value
    for an option. Bundles ending in a value flag (``-fs -1k``) are handled
    the same way.
    """
    args = list(argv)
    result = []
    i = 0
    while i < len(args):
        token = args[i]
        if token == "--":
            result.extend(args[i:])
            break
        if (
            len(token) > 1
            and token.startswith("-")
            and not token.startswith("--")
            and token[-1] in VALUE_FLAGS
            and all(ch in SWITCH_FLAGS for ch in token[1:-1])
            and i + 1 < len(args)
        ):
            value = args[i + 1]
            if value.startswith("-"):
                result.append(token + value)
            else:
                result.extend([token, value])
            i += 2
            continue
        result.append(token)
        i += 1
    return result


def configure_logging(config: LoggingConfig, quiet: bool = False, level: Optional[str] = None) -> None:
    """Send log records to stderr; quiet suppresses traversal diagnostics."""
    if level:
        config = config.model_copy(update={'level': LogLevel(level.upper())})
    log_level = logging.ERROR if quiet else config.get_level_number()
    logging.basicConfig(level=log_level, format=config.format, stream=sys.stderr, force=True)


def build_criteria(ns: argparse.Namespace, config: FindConfig) -> SearchCriteria:
    """
    Build criteria from parsed arguments.

    Raises:
        ValidationError: If a size, permission or age specification is malformed
    """
    type_filter = set()
    if ns.files_only:
        type_filter.add(TypeFilter.FILE)
    if ns.dirs_only:
        type_filter.add(TypeFilter.DIRECTORY)

    return SearchCriteria(
        root_path=ns.path or config.search_path,
        type_filter=type_filter,
        name_pattern=ns.name,
        name_pattern_case_insensitive=ns.iname,
        size_spec=ns.size,
        owner_name=ns.user,
        perm_spec=ns.perm,
        mtime_spec=ns.mtime,
        empty_only=ns.empty,
    )


def _write_paths(paths, separator: str) -> None:
    for path in paths:
        sys.stdout.write(path)
        sys.stdout.write(separator)
    sys.stdout.flush()


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = build_parser()
    ns = p.parse_args(attach_option_values(sys.argv[1:] if argv is None else argv))

    try:
        result = load_config(ns.config)
    except ConfigurationError as e:
        print(f"fsfind: {e}", file=sys.stderr)
        return 2

    config = result.config
    configure_logging(config.logging, quiet=ns.quiet, level=ns.log_level)
    for warning in result.warnings:
        logger.debug(warning)

    try:
        criteria = build_criteria(ns, config)
    except ValidationError as e:
        for error in e.errors():
            print(f"fsfind: {error['msg']}", file=sys.stderr)
        return 2

    logger.debug(f"Criteria: {criteria}")

    separator = "\0" if ns.print0 else config.output.get_separator()
    walker = FSWalker()
    paths = walker.walk(criteria)
    if ns.sort or config.output.sort:
        paths = sorted(paths)

    try:
        _write_paths(paths, separator)
    except BrokenPipeError:
        with contextlib.suppress(Exception):
            sys.stdout.close()
        return 0

    logger.debug(f"Walk statistics: {walker.get_stats()}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
