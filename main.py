#!/usr/bin/env python3
"""
main.py – JDK Manager
=====================
Entry point: Textual TUI listing discovered JDKs, plus a headless mode that
prints a rich table (or JSON) and edits the discovery settings.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from textual.app import App
from textual.binding import Binding

from jdk_manager import JDKRegistry
from jdk_settings import DEFAULT_SETTINGS_FILE, Settings

logger = logging.getLogger("jdk_manager")

LOG_DIR = Path("logs")


# ──────────────────────────────────────────────
#  Logging
# ──────────────────────────────────────────────

def configure_logging(verbose: bool = False, log_dir: Path = LOG_DIR) -> None:
    log_dir.mkdir(exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_dir / "jdk_manager.log", encoding="utf-8"),
            logging.StreamHandler(sys.stdout),
        ],
    )


# ──────────────────────────────────────────────
#  CLI
# ──────────────────────────────────────────────

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="☕ JDK Manager – discover installed JDKs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--settings", default=DEFAULT_SETTINGS_FILE, help="Path to jdk_settings.json")
    p.add_argument("--headless", action="store_true", help="No TUI, print the JDK list")
    p.add_argument("--json", action="store_true", help="Headless output as JSON")
    p.add_argument("--min", dest="min_version", default=None, help="Lowest version to list (inclusive)")
    p.add_argument("--max", dest="max_version", default=None, help="Highest version to list (inclusive)")
    p.add_argument("--exclude", action="append", default=[], metavar="PATH", help="Never report JDKs under PATH (saved)")
    p.add_argument("--add-jdk", action="append", default=[], metavar="PATH", help="Probe PATH directly (saved)")
    p.add_argument("--add-scan-path", action="append", default=[], metavar="PATH", help="Scan PATH's subdirectories (saved)")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def apply_setting_changes(settings: Settings, args: argparse.Namespace) -> None:
    for path in args.exclude:
        settings.add_excluded_path(path)
    for path in args.add_jdk:
        settings.add_additional_jdk(path)
    for path in args.add_scan_path:
        settings.add_scan_path(path)


# ──────────────────────────────────────────────
#  Main Application
# ──────────────────────────────────────────────

class JDKManagerApp(App):
    """Terminal UI over a JDKRegistry."""

    TITLE = "☕ JDK Manager"
    SUB_TITLE = "Installed Java Development Kits"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(self, registry: JDKRegistry, **kw) -> None:
        super().__init__(**kw)
        self.registry = registry

    def on_mount(self) -> None:
        from ui.jdk_panel import JDKScreen

        logger.info("App started")
        self.push_screen(JDKScreen(self.registry))


# ──────────────────────────────────────────────
#  Headless CLI
# ──────────────────────────────────────────────

def run_headless(registry: JDKRegistry, args: argparse.Namespace) -> int:
    from rich.console import Console
    from rich.table import Table

    console = Console()
    registry.refresh()
    try:
        jdks = registry.get_jdks_in_version_range(args.min_version, args.max_version)
    except (TypeError, ValueError) as exc:
        console.print(f"[bold red]Invalid version bound:[/] {exc}")
        return 2

    if args.json:
        print(json.dumps([jdk.to_dict() for jdk in jdks], indent=2))
        return 0

    if not jdks:
        console.print("[yellow]No JDK installations were found.[/]")
        return 0

    t = Table(title="Discovered JDKs")
    t.add_column("Name", style="cyan")
    t.add_column("Version", style="green")
    t.add_column("Brand", style="magenta")
    t.add_column("Path", style="white")
    newest = registry.newest(args.min_version, args.max_version)
    for jdk in jdks:
        marker = " *" if jdk is newest else ""
        brand = jdk.brand.name.lower() if jdk.brand else "unknown"
        t.add_row(jdk.name + marker, str(jdk.version), brand, str(jdk.path))
    console.print(t)
    return 0


# ──────────────────────────────────────────────
#  Entry Point
# ──────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    settings = Settings(args.settings)
    apply_setting_changes(settings, args)
    registry = JDKRegistry(settings)

    if args.headless or args.json:
        return run_headless(registry, args)

    JDKManagerApp(registry).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
