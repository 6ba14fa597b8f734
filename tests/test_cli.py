from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
SCRIPT = REPO_ROOT / "scripts" / "generate_tag.py"


def _run(*args):
    return subprocess.run([sys.executable, str(SCRIPT), *args], capture_output=True, text=True)


def test_generate_tag_cli_writes_parts_and_summary(config_file: Path, tmp_path: Path):
    out = tmp_path / "out"
    proc = _run("--config", str(config_file), "--output", str(out), "--name", "hello")
    assert proc.returncode == 0, proc.stderr
    assert "Tag: hello" in proc.stdout
    assert "| **Hello World**" in proc.stdout

    for part in ("subtitle", "base", "border", "keychainAttachment", "combined"):
        assert (out / f"hello_{part}.stl").exists()

    summary = json.loads((out / "hello_summary.json").read_text(encoding="utf-8"))
    assert summary["lines"] == ["**Hello World**"]
    assert set(summary["parts"]) == {"subtitle", "base", "border", "keychainAttachment", "combined"}


def test_generate_tag_cli_overrides_and_part_filter(tmp_path: Path):
    out = tmp_path / "out"
    proc = _run(
        "--text", "NFC\\ntag",
        "--placement", "right",
        "--output", str(out),
        "--parts", "combined",
    )
    assert proc.returncode == 0, proc.stderr
    assert sorted(p.name for p in out.iterdir()) == ["tag_combined.stl", "tag_summary.json"]
    summary = json.loads((out / "tag_summary.json").read_text(encoding="utf-8"))
    assert summary["lines"] == ["NFC", "tag"]
    assert summary["config"]["base"]["textPlacement"] == "right"


def test_generate_tag_cli_rejects_invalid_config(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"base": {"textPlacement": "diagonal"}}), encoding="utf-8")
    proc = _run("--config", str(path), "--output", str(tmp_path / "out"))
    assert proc.returncode == 2
    assert "invalid configuration" in proc.stderr
    assert not (tmp_path / "out").exists()


def test_generate_tag_cli_reports_validation_issues(tmp_path: Path):
    path = tmp_path / "thin.json"
    path.write_text(json.dumps({"base": {"width": 0}}), encoding="utf-8")
    proc = _run("--config", str(path), "--output", str(tmp_path / "out"))
    assert proc.returncode == 2
    assert "base.width must be positive" in proc.stderr
