import importlib.util
from pathlib import Path

import netthud.__main__ as netthud_main

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "update_site.py"


def load_script():
    spec = importlib.util.spec_from_file_location("update_site", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_output_is_forwarded_to_a_single_all_run(monkeypatch):
    calls = []
    monkeypatch.setattr(netthud_main, "main", lambda argv: calls.append(argv) or 0)
    script = load_script()
    assert script.main(["--data-dir", "build/data", "--output", "public/index.html"]) == 0
    assert calls == [["--data-dir", "build/data", "all", "--output", "public/index.html"]]


def test_default_run(monkeypatch):
    calls = []
    monkeypatch.setattr(netthud_main, "main", lambda argv: calls.append(argv) or 0)
    assert load_script().main([]) == 0
    assert calls == [["all"]]
