#!/usr/bin/env python3
"""
Heurisko — Ancient Greek εὑρίσκω (I find)

A filesystem search tool that walks a directory tree, keeps the regular
files matching every given filter (name substring, permission mask, owner,
depth range, hidden files) and prints their paths sorted by path, by file
name or by size.

Usage:
    heurisko                           # All non-hidden files below .
    heurisko ~/src -n .py -s f         # Python files sorted by file name
    heurisko /var -u root -m 644       # Files owned by root with rw-r--r--
    heurisko . -f 1 -t 2 -a            # Depth 1 to 2, hidden files included
    heurisko . -0 | xargs -0 ls -l     # Null-terminated output
    heurisko -s s -a --save-defaults   # Remember size sort and hidden files
"""

import argparse
import os
import sys
import time
from typing import Optional

from auxiliary import format_bytes, format_path_for_display
from console_ui import ConsoleUI
from errors import ConfigError, SearchError
from file_finder import FileFinder
from heurisko_config import SORT_FLAGS, DefaultsManager, HeuriskoDefaults, SearchConfig, build_config
from result_ordering import sort_key
from result_store import ResultStore

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class Heurisko:
    """Main application class for the Heurisko search tool."""

    def __init__(
        self,
        args: argparse.Namespace,
        ui: Optional[ConsoleUI] = None,
        defaults_manager: Optional[DefaultsManager] = None,
    ):
        self.args = args
        self.ui = ui or ConsoleUI()
        self.defaults_manager = defaults_manager or DefaultsManager()
        self.verbose = bool(getattr(args, "verbose", False))
        self.finder: Optional[FileFinder] = None

    # -- persisted defaults ---------------------------------------------------

    def show_defaults(self):
        defaults = self.defaults_manager.load()
        self.ui.show_configuration(
            {
                "Config file": format_path_for_display(str(self.defaults_manager.config_file)),
                "Sort by": defaults.sort,
                "Hidden files": "shown" if defaults.show_all else "skipped",
                "Terminator": "null byte" if defaults.null_terminator else "newline",
            }
        )

    def save_defaults(self):
        defaults = self.defaults_manager.load()
        sort_flag = getattr(self.args, "sort", None)
        updated = HeuriskoDefaults(
            sort=SORT_FLAGS[sort_flag].value if sort_flag else defaults.sort,
            show_all=bool(self.args.show_all) if self.args.show_all is not None else defaults.show_all,
            null_terminator=(
                bool(self.args.null_terminator) if self.args.null_terminator is not None else defaults.null_terminator
            ),
        )
        self.defaults_manager.save(updated)
        self.ui.print_info(f"Defaults saved to {format_path_for_display(str(self.defaults_manager.config_file))}")

    def reset_defaults(self):
        self.defaults_manager.reset()
        self.ui.print_info("Defaults cleared.")

    # -- searching -------------------------------------------------------------

    def search(self, config: SearchConfig) -> ResultStore:
        """Walk the tree and return the sorted results

        Raises:
            SearchError: If the start directory cannot be opened or memory runs out
        """
        store = ResultStore()
        self.finder = FileFinder(config, report=self.ui.print_warning)
        try:
            if self.verbose:
                progress = self.ui.create_activity_progress()
                with progress:
                    task = progress.add_task("Searching...", total=None)

                    def on_progress(directories: int, matched: int):
                        progress.update(task, description=f"Searching... {directories} dirs, {matched} matches")

                    self.finder.progress_callback = on_progress
                    self.finder.find(store)
            else:
                self.finder.find(store)
        except SearchError:
            store.release()
            raise

        store.sort(sort_key(config.sort_mode))
        return store

    def summary(self, store: ResultStore, duration: float):
        self.ui.print_info(
            f"Found {store.count:,} files ({format_bytes(store.total_size())}) "
            f"in {self.finder.directories_scanned:,} directories, {duration:.1f}s"
        )

    # -- main entry point ------------------------------------------------------

    def run(self) -> int:
        # Handle defaults commands (no search)
        if getattr(self.args, "show_defaults", False):
            self.show_defaults()
            return EXIT_SUCCESS
        if getattr(self.args, "reset_defaults", False):
            self.reset_defaults()
            return EXIT_SUCCESS
        if getattr(self.args, "save_defaults", False):
            self.save_defaults()
            return EXIT_SUCCESS

        try:
            config = build_config(self.args, self.defaults_manager.load())
        except ConfigError as e:
            self.ui.print_error(str(e))
            return EXIT_FAILURE

        if self.verbose:
            self.ui.print_header("Heurisko", f"Searching {format_path_for_display(config.start_directory)}")
            self.ui.show_configuration(config.describe())

        start = time.monotonic()
        try:
            store = self.search(config)
        except SearchError as e:
            self.ui.print_error(str(e))
            return EXIT_FAILURE

        try:
            self.ui.emit_paths(store.paths(), config.terminator)
            if self.verbose:
                self.summary(store, time.monotonic() - start)
        finally:
            store.release()

        return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heurisko",
        description="Heurisko — find files within a POSIX filesystem",
        epilog=(
            "Only the first non-option argument is used as the base directory. "
            "Without any filter every non-hidden regular file is listed."
        ),
    )
    parser.add_argument("path", nargs="?", help="Base directory to search (default: current directory)")
    parser.add_argument("-n", dest="name", metavar="NAME", help="Only files whose name contains NAME")
    parser.add_argument(
        "-s",
        dest="sort",
        choices=sorted(SORT_FLAGS),
        help="Sort by path (p, default), by file name (f) or by file size, largest first (s)",
    )
    parser.add_argument("-m", dest="mask", metavar="MASK", help="Only files with permissions MASK, in octal (e.g. 644)")
    parser.add_argument("-u", dest="user", metavar="USER", help="Only files owned by USER")
    parser.add_argument("-f", dest="min_depth", metavar="NUM", help="Only files at least NUM directories deep")
    parser.add_argument("-t", dest="max_depth", metavar="NUM", help="Only files at most NUM directories deep")
    parser.add_argument(
        "-a", dest="show_all", action="store_true", default=None, help="Show all files, hidden ones included"
    )
    parser.add_argument(
        "-0",
        dest="null_terminator",
        action="store_true",
        default=None,
        help="Terminate each path with a null byte instead of a newline",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show progress and a summary on stderr")
    parser.add_argument("--save-defaults", action="store_true", help="Remember the given -s, -a and -0 choices")
    parser.add_argument("--show-defaults", action="store_true", help="Show remembered defaults")
    parser.add_argument("--reset-defaults", action="store_true", help="Forget remembered defaults")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    app = Heurisko(args)
    try:
        return app.run()
    except KeyboardInterrupt:
        app.ui.print_warning("Interrupted.")
        return EXIT_INTERRUPTED
    except BrokenPipeError:
        # Reader went away (e.g. piped into head); silence the flush at exit
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
