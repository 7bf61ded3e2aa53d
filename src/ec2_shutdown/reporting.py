"""Console reporting for EC2 Shutdown Manager.

Severity-tagged lines and the instance status table, rendered with rich.
"""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import InstanceRecord, StateTransition

CONSOLE_WIDTH = 100

TAG_STYLES = {
    "INFO": "blue",
    "SUCCESS": "bold green",
    "WARNING": "yellow",
    "ERROR": "bold red",
    "DATA": "cyan",
}


class ConsoleReporter:
    """User-facing output channel.

    ERROR lines go to ``error_console`` (stderr by default), everything else
    to ``console``.
    """

    def __init__(self, console: Console | None = None, error_console: Console | None = None):
        self.console = console or Console(width=CONSOLE_WIDTH, highlight=False)
        self.error_console = error_console or Console(stderr=True, width=CONSOLE_WIDTH, highlight=False)

    def _line(self, tag: str, message: str, console: Console | None = None) -> None:
        # Text, not markup: instance names and API errors may contain brackets.
        # soft_wrap keeps one tagged line per message whatever its length.
        line = Text.assemble((f"[{tag}]".ljust(9), TAG_STYLES[tag]), " ", message)
        (console or self.console).print(line, soft_wrap=True)

    def info(self, message: str) -> None:
        self._line("INFO", message)

    def success(self, message: str) -> None:
        self._line("SUCCESS", message)

    def warning(self, message: str) -> None:
        self._line("WARNING", message)

    def error(self, message: str) -> None:
        self._line("ERROR", message, self.error_console)

    def data(self, message: str) -> None:
        self._line("DATA", message)

    def blank(self) -> None:
        self.console.print()

    def heading(self, title: str) -> None:
        self.console.print(Text(title, style="bold"))

    def banner(self, title: str) -> None:
        self.console.print(Text(f"=== {title} ===", style="bold blue"))

    def status_table(self, records: Iterable[InstanceRecord]) -> None:
        """Display instance status table, one row per record in the given order."""
        table = Table(title="Instance Status", title_justify="left")
        table.add_column("INSTANCE ID", style="cyan", width=22, no_wrap=True)
        table.add_column("NAME", width=27, no_wrap=True, overflow="ellipsis")
        table.add_column("IP ADDRESS", style="yellow", width=15, no_wrap=True)
        table.add_column("STATUS", style="green", no_wrap=True)

        for record in records:
            table.add_row(record.instance_id, record.name, record.address, str(record.state))

        self.console.print(table)

    def current_state(self, records: Iterable[InstanceRecord]) -> None:
        self.heading("Current instance state:")
        for record in records:
            self.data(f"{record.instance_id} ({record.name}) - State: {record.state}")

    def transitions(self, transitions: Iterable[StateTransition]) -> None:
        self.heading("Instance state transitions:")
        for transition in transitions:
            self.data(
                f"{transition.instance_id}: {transition.previous_state} → {transition.current_state}"
            )
