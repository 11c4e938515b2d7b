"""JSON and HTML rendering of an analysis result."""

import base64
import html
import json
from pathlib import Path
from typing import Any

from dep_inspector.models import AnalysisResult

_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>dep-inspector · {{ NAME }}</title>
<style>
  body { font-family: system-ui, sans-serif; margin: 2rem; color: #222; }
  h1 { font-size: 1.4rem; }
  table { border-collapse: collapse; width: 100%; font-size: 0.9rem; }
  th, td { border-bottom: 1px solid #ddd; padding: 0.35rem 0.6rem; text-align: left; }
  th { cursor: pointer; background: #f4f4f4; position: sticky; top: 0; }
  td.num { text-align: right; font-variant-numeric: tabular-nums; }
  tr.main td:first-child { font-weight: bold; }
  .muted { color: #888; }
</style>
</head>
<body>
<h1>Third-party dependencies of {{ NAME }}</h1>
<p id="summary" class="muted"></p>
<table>
  <thead>
    <tr>
      <th data-key="name">Package</th>
      <th data-key="versions">Versions</th>
      <th data-key="transitive" class="num">Transitive deps</th>
      <th data-key="exclusive" class="num">Exclusive deps</th>
      <th data-key="importers" class="num">Root importers</th>
      <th data-key="rust_loc" class="num">Rust LOC</th>
      <th data-key="unsafe_loc" class="num">Unsafe LOC</th>
      <th data-key="stars" class="num">Stars</th>
      <th data-key="dependents" class="num">crates.io dependents</th>
    </tr>
  </thead>
  <tbody id="rows"></tbody>
</table>
<script>
const result = JSON.parse(atob("{{ RESULT_DATA }}"));
const main = new Set(result.main_dependencies);
const rows = Object.entries(result.analysis_result).map(([id, r]) => ({
  id: id,
  name: r.name,
  versions: r.versions.join(", "),
  transitive: r.transitive_dependencies.length,
  exclusive: r.exclusive_deps_introduced.length,
  importers: r.root_importers.length,
  rust_loc: r.rust_loc,
  unsafe_loc: r.unsafe_loc,
  stars: r.stargazers_count,
  dependents: r.crates_io_dependent,
}));
document.getElementById("summary").textContent =
  `${result.root_crates.length} root crate(s), ${main.size} main dependencies, ` +
  `${rows.length} packages in total`;
function render(key, desc) {
  rows.sort((a, b) => {
    const x = a[key] ?? -1, y = b[key] ?? -1;
    return (x > y ? 1 : x < y ? -1 : 0) * (desc ? -1 : 1);
  });
  const body = document.getElementById("rows");
  body.innerHTML = "";
  for (const r of rows) {
    const tr = document.createElement("tr");
    if (main.has(r.id)) tr.className = "main";
    for (const k of ["name", "versions", "transitive", "exclusive", "importers",
                     "rust_loc", "unsafe_loc", "stars", "dependents"]) {
      const td = document.createElement("td");
      td.textContent = r[k] ?? "—";
      if (typeof r[k] === "number") td.className = "num";
      tr.appendChild(td);
    }
    body.appendChild(tr);
  }
}
let sortKey = "transitive", sortDesc = true;
document.querySelectorAll("th").forEach(th => th.addEventListener("click", () => {
  sortDesc = th.dataset.key === sortKey ? !sortDesc : true;
  sortKey = th.dataset.key;
  render(sortKey, sortDesc);
}));
render(sortKey, sortDesc);
</script>
</body>
</html>
"""


def to_dict(result: AnalysisResult) -> dict[str, Any]:
    """JSON-ready representation with package ids rendered as strings."""
    return {
        "root_crates": sorted(result.root_crates),
        "main_dependencies": [str(d) for d in sorted(result.main_dependencies)],
        "analysis_result": {
            str(pkg_id): risk.model_dump(mode="json")
            for pkg_id, risk in sorted(result.analysis_result.items())
        },
        "duplicate_versions": result.duplicate_versions(),
    }


def to_json(result: AnalysisResult, indent: int | None = None) -> str:
    return json.dumps(to_dict(result), indent=indent)


def report_name(manifest_path: Path) -> str:
    """Name shown in the HTML report: the manifest's directory name."""
    return manifest_path.resolve().parent.name


def render_html(result: AnalysisResult, name: str) -> str:
    """Self-contained HTML page embedding the JSON result (base64)."""
    payload = base64.b64encode(to_json(result).encode()).decode("ascii")
    return (
        _HTML_TEMPLATE.replace("{{ NAME }}", html.escape(name))
        .replace("{{ RESULT_DATA }}", payload)
    )
