"""Rich-powered console client implementing both delivery ports.

Purpose
-------
Let developers run the dispatcher without a Datadog account: batches are
printed instead of being shipped.

Contents
--------
* :data:`_STYLE_MAP` - default level-to-style mapping.
* :class:`RichConsoleClient` - dry-run client used by the ``demo`` command.

System Role
-----------
Local sink for the dispatch engine and renderer for self-log diagnostics in
the CLI.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from rich.console import Console

from lib_log_datadog.application.ports.client import AsyncDataDogClient, DataDogClient
from lib_log_datadog.domain.levels import DataDogLogLevel
from lib_log_datadog.domain.record import DataDogLog


#: Default Rich styles keyed by Datadog status string.
_STYLE_MAP: Mapping[str, str] = {
    DataDogLogLevel.DEBUG.status: "dim",
    DataDogLogLevel.INFO.status: "cyan",
    DataDogLogLevel.NOTICE.status: "bright_cyan",
    DataDogLogLevel.WARNING.status: "yellow",
    DataDogLogLevel.ERROR.status: "red",
    DataDogLogLevel.CRITICAL.status: "bold red",
    DataDogLogLevel.ALERT.status: "bold white on red",
    DataDogLogLevel.EMERGENCY.status: "bold white on red3",
}


class RichConsoleClient(DataDogClient, AsyncDataDogClient):
    """Print each batch with one line per record."""

    def __init__(self, *, console: Console | None = None, force_color: bool = False, no_color: bool = False) -> None:
        self._console = console if console is not None else Console(force_terminal=force_color, no_color=no_color)
        self._no_color = no_color
        self.batches_sent = 0

    def send(self, logs: Sequence[DataDogLog]) -> None:
        """Render ``logs`` under a batch header.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True)
        >>> client = RichConsoleClient(console=console)
        >>> client.send([DataDogLog('msg', None, 'python', 'host', 'svc', 'info')])
        >>> 'msg' in console.export_text()
        True
        """

        self.batches_sent += 1
        self._console.print(f"--- batch {self.batches_sent} ({len(logs)} logs) ---", style="bold", highlight=False, markup=False)
        for log in logs:
            style = "" if self._no_color else _STYLE_MAP.get(log.level, "")
            self._console.print(self._format_line(log), style=style, highlight=False, markup=False)

    async def send_async(self, logs: Sequence[DataDogLog]) -> None:
        self.send(logs)

    def print_selflog(self, messages: Iterable[str]) -> int:
        """Render self-log diagnostics and return how many were printed."""

        count = 0
        for message in messages:
            self._console.print(f"selflog: {message}", style="" if self._no_color else "magenta", highlight=False, markup=False)
            count += 1
        return count

    @staticmethod
    def _format_line(log: DataDogLog) -> str:
        """Return a human-friendly console line for ``log``."""

        origin = "/".join(part for part in (log.host, log.service) if part) or "-"
        tags = f" [{log.tags}]" if log.tags else ""
        return f"{log.level.upper():>9} {origin} ({log.source}) {log.message}{tags}"


__all__ = ["RichConsoleClient"]
