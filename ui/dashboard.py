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

from core.config import Config
from ui.log_utils import write_cli_log

console = Console()


class RequestInfo:
    """Info about a single forwarded request."""

    def __init__(self, method: str, target: str, timestamp: datetime):
        self.method = method
        self.target = target
        self.label = target[:80] + "..." if len(target) > 80 else target
        self.timestamp = timestamp
        self.status: int | None = None
        self.elapsed_ms: float | None = None


class Dashboard:
    """Real-time dashboard showing recent forwards and failures."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RequestInfo] = []
        self._max_recent = 10
        self._counts = {"forwarded": 0, "succeeded": 0, "failed": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    @property
    def counts(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)

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

    def log_forward(self, method: str, target: str) -> None:
        """Log a request about to be forwarded."""
        with self._lock:
            self._counts["forwarded"] += 1
            self._recent.insert(0, RequestInfo(method, target, datetime.now()))
            self._recent = self._recent[: self._max_recent]
            self._refresh()
            write_cli_log("FORWARD", target, method=method)

    def log_response(self, method: str, target: str, status: int, elapsed_ms: float) -> None:
        """Log a relayed target response."""
        with self._lock:
            self._counts["succeeded"] += 1
            info = self._find(method, target)
            if info:
                info.status = status
                info.elapsed_ms = elapsed_ms
            self._refresh()
            write_cli_log("RESPONSE", target, status=status, ms=f"{elapsed_ms:.0f}")

    def log_error(self, target: str, status: int, message: str) -> None:
        """Log a failed forward."""
        with self._lock:
            self._counts["failed"] += 1
            info = self._find(None, target)
            if info:
                info.status = status
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{status} {target[:40]}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], target=target, status=status)

    def _find(self, method: str | None, target: str) -> RequestInfo | None:
        """Most recent pending entry for ``target``."""
        for info in self._recent:
            if info.status is not None or info.target != target:
                continue
            if method is None or info.method == method:
                return info
        return None

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
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("NetSuite External URL Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Forwarded: {self._counts['forwarded']}", style="blue")
        stats.append("  |  ")
        stats.append(f"OK: {self._counts['succeeded']}", style="green")
        stats.append("  |  ")
        stats.append(f"Failed: {self._counts['failed']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Status", width=6)
            table.add_column("ms", width=7, justify="right")
            table.add_column("Target", ratio=1)

            for info in self._recent:
                if info.status is None:
                    status = Text("...", style="dim")
                else:
                    style = "green" if info.status < 400 else "red"
                    status = Text(str(info.status), style=style)
                elapsed = f"{info.elapsed_ms:.0f}" if info.elapsed_ms is not None else ""
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    status,
                    elapsed,
                    info.label,
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            proxy = self.config.proxy
            content = Text(
                f"POST http://{proxy.host}:{proxy.port}/proxy?url=<EXTERNAL_URL>",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")


class ConsoleLogger:
    """Plain line-per-event logger for terminals without a live dashboard."""

    def __init__(self, out: Console | None = None):
        self._console = out or console

    def log_forward(self, method: str, target: str) -> None:
        self._console.print(f"[dim]{_timestamp()}[/dim] {method} {escape(target)}")
        write_cli_log("FORWARD", target, method=method)

    def log_response(self, method: str, target: str, status: int, elapsed_ms: float) -> None:
        self._console.print(f"  [green]✓[/green] Response {status} received ({elapsed_ms:.0f} ms)")
        write_cli_log("RESPONSE", target, status=status, ms=f"{elapsed_ms:.0f}")

    def log_error(self, target: str, status: int, message: str) -> None:
        self._console.print(f"  [red]✗ Error {status}:[/red] {escape(message)}")
        write_cli_log("ERROR", message[:200], target=target, status=status)


def _timestamp() -> str:
    return datetime.now().isoformat(timespec="seconds")
