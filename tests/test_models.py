from claudy.models import MarketplacePluginEntry, PluginManifest, ValidationReport, is_kebab_case, is_semver


def test_kebab_case():
    assert is_kebab_case("rails-workflow")
    assert is_kebab_case("a1-b2")
    assert not is_kebab_case("Rails-Workflow")
    assert not is_kebab_case("rails_workflow")
    assert not is_kebab_case("-rails")
    assert not is_kebab_case("rails--workflow")
    assert not is_kebab_case("")


def test_semver():
    assert is_semver("1.2.3")
    assert not is_semver("1.2")
    assert not is_semver("v1.2.3")


def test_report_counts_and_strictness():
    report = ValidationReport(target="demo")
    report.add_ok("A", "fine")
    report.add_warning("B", "meh")

    assert report.passed
    assert report.ok_for(strict=False)
    assert not report.ok_for(strict=True)

    report.add_error("C", "broken")
    assert report.errors == 1
    assert report.warnings == 1
    assert not report.passed


def test_report_extend_prefixes_messages():
    inner = ValidationReport(target="inner")
    inner.add_error("X", "plugin.json missing")
    outer = ValidationReport(target="outer")
    outer.extend(inner, prefix="rails-workflow")

    assert outer.findings[0].message == "rails-workflow: plugin.json missing"
    assert inner.findings[0].message == "plugin.json missing"


def test_marketplace_entry_sources():
    local = MarketplacePluginEntry(name="a", source="./plugins/a/")
    remote = MarketplacePluginEntry(name="b", source={"source": "github", "repo": "org/b"})

    assert local.is_local
    assert local.local_path == "plugins/a"
    assert not remote.is_local
    assert remote.source == "github:org/b"


def test_plugin_manifest_author_and_mcp():
    manifest = PluginManifest(
        name="db", description="d", version="1.0.0", author={"name": "Jane"}, mcpServers={"db": {}}
    )
    assert manifest.author_name == "Jane"
    assert manifest.has_mcp()
    assert PluginManifest(name="x", description="d", version="1.0.0", author="Bob").author_name == "Bob"
