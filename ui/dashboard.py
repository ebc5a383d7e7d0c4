"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import ProxyConfig
from ui.log_utils import write_cli_log

console = Console()


class ForwardInfo:
    """Info about a single forwarded request."""

    def __init__(self, status: int, elapsed: float, timestamp: datetime):
        self.status = status
        self.elapsed = elapsed
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing forwarded, rejected and failed requests."""

    def __init__(self, config: ProxyConfig):
        self.config = config
        self._lock = Lock()
        self._recent: list[ForwardInfo] = []
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

    def log_forward(self, status: int, elapsed: float) -> None:
        """Record a request relayed from upstream."""
        with self._lock:
            self._request_count["forwarded"] += 1
            self._recent.insert(0, ForwardInfo(status, elapsed, datetime.now()))
            self._recent = self._recent[: self._max_recent]
            self._refresh()

    def log_rejected(self, status: int) -> None:
        """Record a request refused before reaching upstream."""
        with self._lock:
            self._request_count["rejected"] += 1
            self._refresh()

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._request_count["failed"] += 1
            truncated = message[:60] + "..." if len(message) > 60 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:500], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="recent"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["recent"].update(self._build_recent_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Image Generation Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Forwarded: {self._request_count['forwarded']}", style="green")
        stats.append("  |  ")
        stats.append(f"Rejected: {self._request_count['rejected']}", style="yellow")
        stats.append("  |  ")
        stats.append(f"Failed: {self._request_count['failed']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.server.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_recent_panel(self) -> Panel:
        """Build panel listing recent forwarded requests."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Status", width=8)
            table.add_column("Elapsed", ratio=1)

            for info in self._recent:
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    str(info.status),
                    f"{info.elapsed:.2f}s",
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[green]Recent generations[/green]", border_style="green")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            origins = (
                "*" if self.config.allows_any_origin else ", ".join(self.config.allowed_origins)
            )
            content = Text(
                f"POST http://{self.config.server.host}:{self.config.server.port}/api/generate"
                f"\nAllowed origins: {origins}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")


class PlainLogger:
    """Console logger used when the dashboard is disabled."""

    def log_forward(self, status: int, elapsed: float) -> None:
        pass

    def log_rejected(self, status: int) -> None:
        pass

    def log_error(self, route: str, status: int, message: str) -> None:
        console.print(f"[red][ERROR][/red] {route} {status}: {escape(message[:200])}", highlight=False)
        write_cli_log("ERROR", message[:500], route=route, status=status)
