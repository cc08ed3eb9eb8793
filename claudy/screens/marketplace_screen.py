"""
CLAUDY — Marketplace Screen
Marketplace manifest and per-plugin verification results.
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, ScrollableContainer
from textual.widgets import Button, Static

from ..config import ClaudyConfig
from ..marketplace import MarketplaceVerifier
from ..models import MarketplaceReport
from ..report import finding_markup


class MarketplaceScreen(Container):
    """Run the marketplace verifier and show its findings."""

    def __init__(self, root: Path, config: ClaudyConfig) -> None:
        super().__init__()
        self.verifier = MarketplaceVerifier(root, config)
        self._report: MarketplaceReport | None = None

    def compose(self) -> ComposeResult:
        yield ScrollableContainer(
            Static(f"[#565f89]Manifest:[/] [#c0caf5]{escape(str(self.verifier.manifest_path))}[/]\n"),
            Horizontal(
                Button("⟳ Verify", id="btn-verify", classes="btn-primary"),
                Button("◈ Deep Verify", id="btn-verify-deep", classes="btn-ghost"),
            ),
            Container(id="marketplace-summary"),
            Container(id="marketplace-findings"),
            classes="panel",
        )

    def on_mount(self) -> None:
        self.run_verify()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = event.button.id or ""
        if bid == "btn-verify":
            event.stop()
            self.run_verify()
        elif bid == "btn-verify-deep":
            event.stop()
            self.run_verify(deep=True)

    def run_verify(self, deep: bool = False) -> None:
        self._report = self.verifier.verify(deep=deep)
        self._render_report()

    def _render_report(self) -> None:
        summary = self.query_one("#marketplace-summary", Container)
        findings = self.query_one("#marketplace-findings", Container)
        summary.remove_children()
        findings.remove_children()

        if not self._report:
            return

        status = "[#9ece6a]ready[/]" if self._report.passed else "[#f7768e]needs fixes[/]"
        summary.mount(Static("\n[bold #7dcfff]Summary[/]"))
        summary.mount(Static(f"[#565f89]Status:[/] {status}"))
        summary.mount(Static(f"[#565f89]Plugins:[/] [#7aa2f7]{self._report.plugin_count}[/]"))
        summary.mount(Static(f"[#565f89]Errors:[/] [#f7768e]{self._report.errors}[/]"))
        summary.mount(Static(f"[#565f89]Warnings:[/] [#e0af68]{self._report.warnings}[/]"))

        findings.mount(Static("\n[bold #7dcfff]Checks[/]"))
        for finding in self._report.findings:
            findings.mount(Static(finding_markup(finding)))
