"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from pathlib import Path
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import CLI_LOG_FILE, LOG_ROOT, describe_target, write_cli_log, write_forward_log

console = Console()


class RequestInfo:
    """Info about a single forwarded request."""

    def __init__(
        self,
        method: str,
        target: str,
        status: int,
        size: int | None,
        timestamp: datetime,
        redirected: bool = False,
    ):
        self.method = method
        self.target = describe_target(target)
        self.status = status
        self.size = size
        self.timestamp = timestamp
        self.redirected = redirected


def _status_style(status: int) -> str:
    if status >= 500:
        return "red"
    if status >= 400:
        return "yellow"
    if status >= 300:
        return "cyan"
    return "green"


def _format_size(size: int | None) -> str:
    if size is None:
        return "-"
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


class Dashboard:
    """Real-time dashboard showing recent forwarded requests."""

    def __init__(self, config: Config, log_root: Path = LOG_ROOT):
        self.config = config
        self._log_root = log_root
        self._log_file = log_root / CLI_LOG_FILE.name
        self._lock = Lock()
        self._last: RequestInfo | None = None
        self._recent: list[RequestInfo] = []
        self._max_recent = 8
        self._request_count = {"forwarded": 0, "rejected": 0, "failed": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    @property
    def request_count(self) -> dict[str, int]:
        with self._lock:
            return dict(self._request_count)

    def log_forward(
        self,
        method: str,
        target_url: str,
        status: int,
        *,
        final_url: str,
        size: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Log a request relayed to its target."""
        with self._lock:
            self._request_count["forwarded"] += 1
            info = RequestInfo(
                method=method,
                target=final_url or target_url,
                status=status,
                size=size,
                timestamp=datetime.now(),
                redirected=bool(final_url) and final_url != target_url,
            )
            self._last = info
            self._recent.insert(0, info)
            self._recent = self._recent[: self._max_recent]
            self._refresh()

            if self.config.proxy.debug:
                write_forward_log(
                    method,
                    target_url,
                    status,
                    headers or {},
                    final_url=final_url,
                    size=size,
                    log_root=self._log_root,
                )
            write_cli_log("FORWARD", target_url, log_file=self._log_file, method=method, status=status)

    def log_rejected(self, method: str, status: int, message: str) -> None:
        """Log a request answered without contacting upstream."""
        with self._lock:
            self._request_count["rejected"] += 1
            self._refresh()
            write_cli_log("REJECTED", message, log_file=self._log_file, method=method, status=status)

    def log_error(self, target_url: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._request_count["failed"] += 1
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{describe_target(target_url, 30)} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], log_file=self._log_file, target=target_url, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["body"].split_row(
            Layout(name="last", ratio=1),
            Layout(name="recent", ratio=2),
        )

        layout["header"].update(self._build_header())
        layout["last"].update(self._build_last_panel())
        layout["recent"].update(self._build_recent_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("m3u8 proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Forwarded: {self._request_count['forwarded']}", style="green")
        stats.append("  |  ")
        stats.append(f"Rejected: {self._request_count['rejected']}", style="yellow")
        stats.append("  |  ")
        stats.append(f"Failed: {self._request_count['failed']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_last_panel(self) -> Panel:
        """Build panel for the most recent forwarded request."""
        if self._last:
            content = Table.grid(padding=(0, 1))
            content.add_column()
            content.add_column()

            content.add_row("[bold]Method:[/bold]", self._last.method)
            content.add_row("[bold]Target:[/bold]", self._last.target)
            content.add_row(
                "[bold]Status:[/bold]",
                Text(str(self._last.status), style=_status_style(self._last.status)),
            )
            content.add_row("[bold]Size:[/bold]", _format_size(self._last.size))
            if self._last.redirected:
                content.add_row("[bold]Redirected:[/bold]", "yes")
            content.add_row(
                "[bold]Time:[/bold]",
                self._last.timestamp.strftime("%H:%M:%S"),
            )
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Last Request[/blue]", border_style="blue")

    def _build_recent_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Status", width=6)
            table.add_column("Target", ratio=3)
            table.add_column("Size", ratio=1)

            for info in self._recent:
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    Text(str(info.status), style=_status_style(info.status)),
                    info.target,
                    _format_size(info.size),
                )

            content = table
        else:
            content = Text("No forwarded requests yet...", style="dim")

        return Panel(content, title="[magenta]Recent[/magenta]", border_style="magenta")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Request http://{self.config.proxy.host}:{self.config.proxy.port}/?url=<base64 url>",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")


class ConsoleLogger:
    """Plain one-line-per-request logger for headless runs."""

    def __init__(self, output: Console | None = None, log_file: Path | None = CLI_LOG_FILE):
        self._console = output or Console(stderr=True)
        self._log_file = log_file

    def log_forward(
        self,
        method: str,
        target_url: str,
        status: int,
        *,
        final_url: str,
        size: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        style = _status_style(status)
        self._console.print(
            f"[{style}]{status}[/{style}] {method} {describe_target(final_url or target_url)} "
            f"[dim]{_format_size(size)}[/dim]"
        )
        self._write("FORWARD", target_url, method=method, status=status)

    def log_rejected(self, method: str, status: int, message: str) -> None:
        self._console.print(f"[yellow]{status}[/yellow] {method} {message}")
        self._write("REJECTED", message, method=method, status=status)

    def log_error(self, target_url: str, status: int, message: str) -> None:
        self._console.print(f"[red]{status}[/red] {describe_target(target_url)} {message}")
        self._write("ERROR", message[:200], target=target_url, status=status)

    def _write(self, level: str, message: str, **extra) -> None:
        if self._log_file is not None:
            write_cli_log(level, message, log_file=self._log_file, **extra)
