# File: tests/test_cli.py
"""CLI tests with click.testing.CliRunner.
Cover the `walk`, `org` and `config` commands, `--version` and error handling.
"""
import asyncio
import json

import pytest
from click.testing import CliRunner

import docs_walker.engine as engine_module
from docs_walker.cli import cli
from docs_walker.crawler.models import CrawlTarget, FailureRecord, WalkResult
from docs_walker.crawler.scope import CrawlScope
from docs_walker.crawler.visited import VisitRecord
from docs_walker.exceptions import RepoListingError


def fake_result(base: str) -> WalkResult:
    visited = VisitRecord()
    visited.add_seed(CrawlTarget(base))
    visited.record_if_first(CrawlTarget(f"{base}missing"), base)
    return WalkResult(
        scope=CrawlScope(base),
        seed=CrawlTarget(base),
        visited=visited,
        pages=[base],
        failures=[FailureRecord(f"{base}missing", "HTTP 404", [base])],
    )


@pytest.fixture(autouse=True)
def patch_walks(monkeypatch):
    """Replace the walk coroutines so that nothing goes to the network."""
    calls = {}

    async def fake_walk_site(cfg):
        calls["site"] = cfg
        return fake_result(cfg.base_url)

    async def fake_walk_org(cfg, org, only=None):
        calls["org"] = (org, only)
        return [fake_result(f"https://github.com/{org}/a/tree/main/"), fake_result(f"https://github.com/{org}/b/tree/dev/")]

    monkeypatch.setattr(engine_module, "walk_site", fake_walk_site)
    monkeypatch.setattr(engine_module, "walk_org", fake_walk_org)
    return calls


@pytest.fixture()
def cfg_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        json.dumps({"base_url": "https://example.com/docs/", "concurrency": 2, "github": {"token": "hidden"}}),
        encoding="utf-8",
    )
    # a .yaml file holding JSON is valid YAML too
    return path


def invoke(*args):
    runner = CliRunner()
    return runner.invoke(cli, ["--log-level", "ERROR", *args])


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "DocsWalker" in result.output


def test_show_config(cfg_file):
    result = invoke("--config", str(cfg_file), "config")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["base_url"] == "https://example.com/docs/"
    assert data["concurrency"] == 2
    assert "token" not in data["github"]


def test_concurrency_override(cfg_file, patch_walks):
    result = invoke("--config", str(cfg_file), "--concurrency", "7", "walk")
    assert result.exit_code == 0
    assert patch_walks["site"].concurrency == 7


def test_walk_stdout_lists_pages(cfg_file):
    result = invoke("--config", str(cfg_file), "walk")
    assert result.exit_code == 0
    assert json.loads(result.output) == ["https://example.com/docs/"]


def test_walk_json_file(cfg_file, tmp_path):
    out = tmp_path / "out.json"
    result = invoke("--config", str(cfg_file), "walk", "--json", str(out))
    assert result.exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["pages"] == ["https://example.com/docs/"]
    assert data["failures"][0]["sources"] == ["https://example.com/docs/"]


def test_walk_html_file(cfg_file, tmp_path):
    out = tmp_path / "report.html"
    result = invoke("--config", str(cfg_file), "walk", "--html", str(out))
    assert result.exit_code == 0
    html = out.read_text(encoding="utf-8")
    assert "https://example.com/docs/missing" in html
    assert "HTTP 404" in html


def test_org_walks_every_repository(cfg_file, patch_walks):
    result = invoke("--config", str(cfg_file), "org", "dotnet", "--repo", "a", "--repo", "b")
    assert result.exit_code == 0
    assert patch_walks["org"] == ("dotnet", ("a", "b"))
    assert json.loads(result.output) == [
        "https://github.com/dotnet/a/tree/main/",
        "https://github.com/dotnet/b/tree/dev/",
    ]


def test_org_listing_error(cfg_file, monkeypatch):
    async def failing(cfg, org, only=None):
        raise RepoListingError(org, 404, "HTTP 404")

    monkeypatch.setattr(engine_module, "walk_org", failing)
    result = invoke("--config", str(cfg_file), "org", "ghost")
    assert result.exit_code == 1
    assert "Cannot list repositories" in result.output


def test_walk_timeout(cfg_file, monkeypatch):
    async def slow(cfg):
        await asyncio.sleep(2)

    monkeypatch.setattr(engine_module, "walk_site", slow)
    result = invoke("--config", str(cfg_file), "walk", "--walk-timeout", "0.2")
    assert result.exit_code == 1
    assert "did not finish" in result.output


def test_bad_config(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("concurrency: 3", encoding="utf-8")
    result = invoke("--config", str(bad), "config")
    assert result.exit_code == 1
    assert "Cannot load configuration" in result.output
