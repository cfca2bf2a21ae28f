"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log

console = Console()


class ForwardInfo:
    """Info about a single forwarded request."""

    def __init__(self, operation: str, method: str, url: str, status: int, timestamp: datetime):
        self.operation = operation
        self.method = method
        self.url = url[:60] + "..." if len(url) > 60 else url
        self.status = status
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent forwarded requests."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[ForwardInfo] = []
        self._max_recent = 10
        self._forwarded = 0
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

    def log_forward(
        self,
        method: str,
        url: str,
        status: int,
        *,
        operation: str,
    ) -> None:
        """Log a request forwarded to the backend."""
        with self._lock:
            self._forwarded += 1
            info = ForwardInfo(
                operation=operation,
                method=method,
                url=url,
                status=status,
                timestamp=datetime.now(),
            )
            self._recent.insert(0, info)
            self._recent = self._recent[: self._max_recent]

            write_cli_log("FORWARD", f"{method} {url}", operation=operation, status=status)
            self._refresh()

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], route=route, status=status)

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

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_recent_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Key Vault Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Forwarded: {self._forwarded}", style="blue")
        stats.append("  |  ")
        stats.append(f"Backend: {self.config.backend.host or '-'}", style="magenta")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_recent_panel(self) -> Panel:
        """Build the recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Operation", width=24)
            table.add_column("Method", width=7)
            table.add_column("URL", ratio=2)
            table.add_column("Status", width=6)

            for info in self._recent:
                status_style = "green" if info.status < 400 else "red"
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.operation,
                    info.method,
                    info.url,
                    Text(str(info.status), style=status_style),
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Forwarded Requests[/blue]", border_style="blue")

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
                f"Send Key Vault requests to http://localhost:{self.config.proxy.port}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
