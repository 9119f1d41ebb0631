#!/usr/bin/env python3
"""
Console UI Module using Rich

Diagnostics, summaries and progress go to stderr through a Rich console,
so that stdout carries nothing but the matching paths.
"""

import os
import sys
from typing import Any, Iterable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table


class ConsoleUI:
    """Console handler: Rich diagnostics on stderr, raw results on stdout"""

    def __init__(self, force_terminal: Optional[bool] = None):
        """Initialize console with optional terminal forcing"""
        self.console = Console(stderr=True, force_terminal=force_terminal, highlight=False)

    # Basic styled output methods
    def print_error(self, message: str):
        """Print error message in red"""
        self.console.print(escape(message), style="red bold", soft_wrap=True)

    def print_warning(self, message: str):
        """Print warning message in yellow"""
        self.console.print(escape(message), style="yellow", soft_wrap=True)

    def print_info(self, message: str):
        """Print info message in cyan"""
        self.console.print(escape(message), style="cyan", soft_wrap=True)

    def print_header(self, title: str, subtitle: Optional[str] = None):
        """Print a header with optional subtitle"""
        if subtitle:
            header_text = f"[bold]{escape(title)}[/bold]\n[dim]{escape(subtitle)}[/dim]"
        else:
            header_text = f"[bold]{escape(title)}[/bold]"

        panel = Panel(header_text, box=box.ROUNDED, padding=(0, 1))
        self.console.print(panel)

    def show_configuration(self, config: dict[str, Any]):
        """Display configuration in a formatted table"""
        table = Table(show_header=False, box=box.SIMPLE)
        table.add_column("Setting", style="cyan dim", min_width=20, justify="right")
        table.add_column("Value", style="cyan", min_width=30)

        for key, value in config.items():
            table.add_row(key, escape(str(value)))

        self.console.print(table)

    def create_activity_progress(self):
        """Create a Rich progress context manager for activity-only display (no counts)"""
        return Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )

    # Result output
    def emit_paths(self, paths: Iterable[str], terminator: str = "\n", stream=None):
        """Write each path followed by terminator, bypassing Rich markup

        Paths are written as filesystem bytes when the stream allows it,
        so names that are not valid UTF-8 come out unchanged.
        """
        stream = stream or sys.stdout
        binary = getattr(stream, "buffer", None)
        if binary is not None:
            stream.flush()
            end = terminator.encode()
            for path in paths:
                binary.write(os.fsencode(path) + end)
            binary.flush()
        else:
            for path in paths:
                stream.write(path + terminator)
            stream.flush()
