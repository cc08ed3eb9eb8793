"""
CLAUDY — Report Rendering
Rich console output for validation and marketplace reports.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import Finding, MarketplaceReport, PluginSummary, ValidationReport

SYMBOLS = {
    "ok": "[#9ece6a]✓[/]",
    "error": "[#f7768e]✗[/]",
    "warning": "[#e0af68]⚠[/]",
}


def finding_markup(finding: Finding) -> str:
    return f"{SYMBOLS[finding.level]} [#c0caf5]{escape(finding.message)}[/]"


def render_findings(console: Console, report: ValidationReport, *, quiet: bool = False) -> None:
    for finding in report.findings:
        if quiet and finding.level == "ok":
            continue
        console.print(f"  {finding_markup(finding)}", highlight=False)


def render_plugin_report(console: Console, report: ValidationReport, *, strict: bool = False, quiet: bool = False) -> None:
    console.print(f"[bold #7dcfff]Validating plugin: {escape(report.target)}[/]")
    console.rule(style="#565f89")
    render_findings(console, report, quiet=quiet)
    console.rule(style="#565f89")
    console.print("Validation complete!\n")
    _render_totals(console, report)

    if report.ok_for(strict):
        console.print("\n[#9ece6a]✓ Plugin is valid![/]")
    else:
        console.print("\n[#f7768e]✗ Plugin has errors that need to be fixed[/]")


def render_marketplace_report(console: Console, report: MarketplaceReport, *, strict: bool = False, quiet: bool = False) -> None:
    console.print(f"[bold #7dcfff]{escape(report.target.capitalize())} Marketplace Verification[/]")
    console.rule(style="#565f89")
    render_findings(console, report, quiet=quiet)
    console.rule(style="#565f89")
    console.print("Verification Complete!\n")
    console.print("Summary:")
    _render_totals(console, report)
    console.print(f"  Total Plugins: {report.plugin_count}")

    if report.ok_for(strict):
        console.print("\n[#9ece6a]✓ Marketplace is ready to use![/]")
        console.print("\nTo use the marketplace:")
        console.print("  1. Configure Claude Code to use this marketplace")
        console.print("  2. Run: /plugin")
        console.print("  3. Browse and install plugins")
    else:
        console.print("\n[#f7768e]✗ Please fix errors before using the marketplace[/]")


def _render_totals(console: Console, report: ValidationReport) -> None:
    console.print(f"  Errors: {report.errors}")
    console.print(f"  Warnings: {report.warnings}")


def plugins_table(summaries: list[PluginSummary]) -> Table:
    table = Table(title="Available Claude Code Plugins", header_style="bold #7dcfff")
    table.add_column("Plugin", style="#7aa2f7")
    table.add_column("Description", style="#c0caf5")
    table.add_column("Commands", justify="right")
    table.add_column("Agents", justify="right")
    for s in summaries:
        table.add_row(escape(s.name), escape(s.description), str(len(s.commands)), str(len(s.agents)))
    return table


def render_plugin_info(console: Console, summary: PluginSummary, hint: str) -> None:
    console.print(f"[bold #7dcfff]Plugin:[/] {escape(summary.name)}")
    console.print(f"[#565f89]Location:[/] {escape(summary.path)}\n")
    console.print("Plugin Information:")
    console.print(f"  description: {escape(summary.description)}")
    if summary.version:
        console.print(f"  version: {escape(summary.version)}")

    for label, items in (("Commands", summary.commands), ("Agents", summary.agents), ("Skills", summary.skills)):
        if items:
            console.print(f"\n{label}: {len(items)}")
            for item in items:
                console.print(f"  - {escape(item)}")

    console.print("\nTo install this plugin:")
    console.print("  1. In Claude Code, run: /plugin")
    console.print(f"  2. Or run: {escape(hint)}")
