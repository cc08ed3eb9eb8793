"""
CLAUDY — Plugin Screen
Catalog details and validation findings for one plugin.
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, ScrollableContainer
from textual.widgets import Button, Static

from ..catalog import install_hint, summarize
from ..config import ClaudyConfig
from ..discovery import resolve_plugin
from ..report import finding_markup
from ..validator import PluginValidator


class PluginScreen(Container):
    """Single plugin view: what it ships and whether it validates."""

    def __init__(self, plugins_dir: Path, label: str, config: ClaudyConfig) -> None:
        super().__init__()
        self.label = label
        self.config = config
        self.plugin_dir = resolve_plugin(plugins_dir, label)
        self.validator = PluginValidator(config)

    def compose(self) -> ComposeResult:
        summary = summarize(self.plugin_dir, self.label)
        yield ScrollableContainer(
            Static(f"[#c0caf5]{escape(summary.description)}[/]\n"),
            Static(f"[#565f89]Version:[/] [#7aa2f7]{escape(summary.version or 'n/a')}[/]"),
            Static(f"[#565f89]Commands:[/] [#c0caf5]{escape(', '.join(summary.commands) or 'none')}[/]"),
            Static(f"[#565f89]Agents:[/] [#c0caf5]{escape(', '.join(summary.agents) or 'none')}[/]"),
            Static(f"[#565f89]Skills:[/] [#c0caf5]{escape(', '.join(summary.skills) or 'none')}[/]"),
            Static(f"[#565f89]Install:[/] [#9ece6a]{escape(install_hint(summary.name, self.config.marketplace_name))}[/]\n"),
            Horizontal(Button("⟳ Validate", id="btn-validate", classes="btn-primary")),
            Container(id="plugin-findings"),
            classes="panel",
        )

    def on_mount(self) -> None:
        self.run_validation()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-validate":
            event.stop()
            self.run_validation()

    def run_validation(self) -> None:
        report = self.validator.validate(self.plugin_dir, self.label)
        findings = self.query_one("#plugin-findings", Container)
        findings.remove_children()

        verdict = "[#9ece6a]✓ Plugin is valid[/]" if report.passed else "[#f7768e]✗ Plugin has errors[/]"
        findings.mount(Static(f"\n[bold #7dcfff]Validation[/]  {verdict}"))
        findings.mount(Static(f"[#565f89]Errors:[/] {report.errors}   [#565f89]Warnings:[/] {report.warnings}\n"))
        for finding in report.findings:
            findings.mount(Static(finding_markup(finding)))
