"""
ui/jdk_panel.py
===============
Textual screen listing discovered JDKs with a version-range filter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, DataTable, Footer, Header, Input, Label

if TYPE_CHECKING:
    from jdk import JDK
    from jdk_manager import JDKRegistry


class JDKScreen(Screen):
    """Discovered JDKs: refresh, filter by version, inspect skipped paths."""

    DEFAULT_CSS = """
    .panel { padding: 1 2; }
    .panel-title { text-style: bold; color: #58a6ff; margin-bottom: 1; }
    #jdk-filter, #jdk-actions { height: auto; margin: 1 0; }
    #jdk-filter Input { width: 20; }
    .data-table { height: 1fr; border: round #30363d; }
    .action-btn { margin-right: 1; }
    """

    BINDINGS = [
        ("r", "refresh", "Refresh"),
        ("f", "apply_filter", "Filter"),
        ("s", "show_skipped", "Skipped"),
    ]

    def __init__(self, registry: "JDKRegistry") -> None:
        super().__init__()
        self.registry = registry

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Vertical(classes="panel"):
            yield Label("☕  Installed JDKs", classes="panel-title")
            yield Label("", id="jdk-summary")

            with Horizontal(id="jdk-filter"):
                yield Input(placeholder="min (e.g. 11)", id="jdk-min")
                yield Input(placeholder="max (e.g. 21)", id="jdk-max")
                yield Button("Filter", id="btn-filter", classes="action-btn btn-primary")

            yield DataTable(id="jdk-table", classes="data-table")

            with Horizontal(id="jdk-actions"):
                yield Button("🔍 Refresh", id="btn-refresh", classes="action-btn btn-primary")
                yield Button("⚠ Skipped", id="btn-skipped", classes="action-btn")

        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#jdk-table", DataTable)
        table.add_columns("Name", "Version", "Brand", "Path")
        self.action_refresh()

    # ── Table ──────────────────────────────────

    def _fill_table(self, jdks: List["JDK"]) -> None:
        table = self.query_one("#jdk-table", DataTable)
        table.clear()
        for jdk in jdks:
            brand = jdk.brand.name.lower() if jdk.brand else "unknown"
            table.add_row(jdk.name, str(jdk.version), brand, str(jdk.path))

        total = len(self.registry.get_available_jdks())
        self.query_one("#jdk-summary", Label).update(f"Showing {len(jdks)} of {total} JDK(s)")

    def _bounds(self) -> tuple:
        low = self.query_one("#jdk-min", Input).value.strip() or None
        high = self.query_one("#jdk-max", Input).value.strip() or None
        return low, high

    # ── Actions ────────────────────────────────

    def action_refresh(self) -> None:
        self.query_one("#jdk-summary", Label).update("Scanning…")
        self.run_worker(self._refresh_in_thread, thread=True, exclusive=True)

    def _refresh_in_thread(self) -> None:
        self.registry.refresh()
        self.app.call_from_thread(self._after_refresh)

    def _after_refresh(self) -> None:
        self.action_apply_filter()
        self.notify(f"Found {len(self.registry.get_available_jdks())} JDK(s)")

    def action_apply_filter(self) -> None:
        low, high = self._bounds()
        try:
            jdks = self.registry.get_jdks_in_version_range(low, high)
        except (TypeError, ValueError) as exc:
            self.notify(str(exc), severity="error")
            return
        self._fill_table(jdks)

    def action_show_skipped(self) -> None:
        report = self.registry.last_report
        skipped: Optional[list] = report.skipped if report else None
        if not skipped:
            self.notify("Nothing was skipped")
            return
        lines = [f"{o.source.value}: {o.candidate} ({o.reason.value if o.reason else '?'})" for o in skipped[:15]]
        if len(skipped) > 15:
            lines.append(f"… and {len(skipped) - 15} more")
        self.notify("\n".join(lines), title="Skipped candidates", timeout=10)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        btn = event.button.id
        if btn == "btn-refresh":
            self.action_refresh()
        elif btn == "btn-filter":
            self.action_apply_filter()
        elif btn == "btn-skipped":
            self.action_show_skipped()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.action_apply_filter()
