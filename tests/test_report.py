"""Tests for JSON and HTML reports."""

import base64
import json
import re
from pathlib import Path

from dep_inspector.analysis.risk import compute_package_risks
from dep_inspector.report import render_html, report_name, to_dict, to_json


class TestToDict:
    def test_keys(self, workspace_graph):
        data = to_dict(compute_package_risks(workspace_graph))
        assert set(data) == {
            "root_crates", "main_dependencies", "analysis_result", "duplicate_versions",
        }
        assert data["root_crates"] == ["app", "cli", "core"]

    def test_ids_rendered_as_strings(self, workspace_graph, pid):
        data = to_dict(compute_package_risks(workspace_graph))
        clap = data["analysis_result"][str(pid("clap"))]
        assert clap["exclusive_deps_introduced"] == [str(pid("bitflags"))]
        assert clap["root_importers"] == ["app 0.1.0", "cli 0.1.0"]
        assert str(pid("serde")) in data["main_dependencies"]

    def test_manifest_path_not_exported(self, workspace_graph):
        data = to_dict(compute_package_risks(workspace_graph))
        for entry in data["analysis_result"].values():
            assert "manifest_path" not in entry


class TestToJson:
    def test_valid_json(self, workspace_graph):
        text = to_json(compute_package_risks(workspace_graph), indent=2)
        assert json.loads(text)["root_crates"] == ["app", "cli", "core"]


class TestReportName:
    def test_parent_directory(self, tmp_path):
        assert report_name(tmp_path / "myproject" / "Cargo.toml") == "myproject"

    def test_relative_path(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        assert report_name(Path("Cargo.toml")) == tmp_path.resolve().name


class TestRenderHtml:
    def test_embeds_result(self, workspace_graph):
        result = compute_package_risks(workspace_graph)
        html = render_html(result, "myproject")
        assert "<title>dep-inspector · myproject</title>" in html
        payload = re.search(r'atob\("([A-Za-z0-9+/=]+)"\)', html).group(1)
        assert json.loads(base64.b64decode(payload)) == to_dict(result)

    def test_name_escaped(self, workspace_graph):
        html = render_html(compute_package_risks(workspace_graph), "<script>")
        assert "<h1>Third-party dependencies of &lt;script&gt;</h1>" in html
