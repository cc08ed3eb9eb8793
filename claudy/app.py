"""
CLAUDY — Marketplace Browser
Terminal UI over the marketplace verifier and plugin validator.
"""

from __future__ import annotations
from pathlib import Path

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.reactive import reactive
from textual.widgets import Button, Footer, Header, Static

from .config import ConfigStore
from .discovery import available_plugins
from .screens.marketplace_screen import MarketplaceScreen
from .screens.plugin_screen import PluginScreen


class ClaudyApp(App):
    """Browse plugins and their validation results."""

    CSS_PATH = "themes/tokyo_night.tcss"
    TITLE = "CLAUDY"
    SUB_TITLE = "Plugin Marketplace"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("f1", "nav_marketplace", "Marketplace"),
        ("ctrl+r", "refresh_view", "Refresh"),
    ]

    active_section: reactive[str] = reactive("marketplace")

    def __init__(self, root: Path) -> None:
        super().__init__()
        self.root = root
        self.store = ConfigStore(root)
        self._labels: list[str] = []

    # ── Compose ──────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal(id="app-grid"):
            with Vertical(id="sidebar"):
                yield Static("  ◆ CLAUDY ◆", id="sidebar-logo")
                yield Button("  ◎  Marketplace", id="nav-marketplace", classes="nav-item")
                yield Static("  PLUGINS", classes="nav-section-label")
                yield VerticalScroll(id="plugin-nav")

            with Vertical(id="main-content"):
                yield Static("", id="top-bar-title")
                yield Container(id="content-area")

        yield Footer()

    async def on_mount(self) -> None:
        await self._build_plugin_nav()
        await self._load_section("marketplace")

    # ── Navigation ────────────────────────────────────────────

    async def _build_plugin_nav(self) -> None:
        nav = self.query_one("#plugin-nav", VerticalScroll)
        await nav.remove_children()
        self._labels = available_plugins(self.store.plugins_dir)
        await nav.mount_all(
            Button(f"  ⬡  {escape(label)}", id=f"nav-plugin-{index}", classes="nav-item")
            for index, label in enumerate(self._labels)
        )

    def _update_nav(self) -> None:
        for btn in self.query(".nav-item").results(Button):
            if btn.id == f"nav-{self.active_section}":
                btn.add_class("active")
            else:
                btn.remove_class("active")

    async def _load_section(self, section_id: str) -> None:
        self.active_section = section_id
        self._update_nav()

        content_area = self.query_one("#content-area")
        await content_area.remove_children()

        if section_id == "marketplace":
            self.query_one("#top-bar-title", Static).update("[bold #7dcfff]◎  MARKETPLACE VERIFICATION[/]")
            await content_area.mount(MarketplaceScreen(self.root, self.store.load()))
        else:
            label = self._labels[int(section_id.removeprefix("plugin-"))]
            self.query_one("#top-bar-title", Static).update(f"[bold #7dcfff]⬡  {escape(label)}[/]")
            await content_area.mount(PluginScreen(self.store.plugins_dir, label, self.store.load()))

    # ── Events ────────────────────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = event.button.id or ""
        if bid.startswith("nav-"):
            await self._load_section(bid.removeprefix("nav-"))

    # ── Actions ───────────────────────────────────────────────

    async def action_nav_marketplace(self) -> None:
        await self._load_section("marketplace")

    async def action_refresh_view(self) -> None:
        await self._build_plugin_nav()
        section = self.active_section
        if section.startswith("plugin-") and int(section.removeprefix("plugin-")) >= len(self._labels):
            section = "marketplace"
        await self._load_section(section)
        self.notify("✓ Refreshed", severity="information")
