"""Test the cart command-line interface."""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from cart_cli import main


@pytest.fixture
def run(tmp_path, catalog_path):
    storage = tmp_path / "cart_storage.json"

    def _run(*args):
        return main(["--storage", str(storage), "--catalog", str(catalog_path), *args])

    _run.storage = storage
    return _run


def _stored(run, key):
    data = json.loads(run.storage.read_text(encoding="utf-8"))
    return json.loads(data[key])


class TestCartCommands:
    def test_add_and_merge(self, run, capsys):
        assert run("add", "p1") == 0
        assert run("add", "p1", "--quantity", "2") == 0
        assert _stored(run, "cart") == [{"id": "p1", "quantity": 3}]
        assert "3 x p1" in capsys.readouterr().out

    def test_add_rejects_zero(self, run, capsys):
        assert run("add", "p1", "--quantity", "0") == 1
        assert "Error" in capsys.readouterr().out

    def test_set_and_remove(self, run):
        run("add", "p2")
        assert run("set", "p2", "4") == 0
        assert _stored(run, "cart") == [{"id": "p2", "quantity": 4}]
        assert run("set", "p2", "0") == 0
        assert _stored(run, "cart") == []

    def test_remove_absent_reports_no_change(self, run, capsys):
        assert run("remove", "p9") == 1
        assert "no change" in capsys.readouterr().out

    def test_clear(self, run):
        run("add", "p1")
        assert run("clear") == 0
        assert _stored(run, "cart") == []


class TestSavedCommands:
    def test_save_twice(self, run):
        assert run("save", "p3") == 0
        assert run("save", "p3") == 1
        assert _stored(run, "savedItems") == ["p3"]

    def test_unsave(self, run):
        run("save", "p3")
        assert run("unsave", "p3") == 0
        assert _stored(run, "savedItems") == []

    def test_move(self, run):
        run("save", "p3")
        assert run("move", "p3") == 0
        assert _stored(run, "cart") == [{"id": "p3", "quantity": 1}]
        assert _stored(run, "savedItems") == []

    def test_move_all(self, run, capsys):
        run("save", "p1")
        run("save", "p2")
        assert run("move-all") == 0
        assert "Moved 2 saved items" in capsys.readouterr().out
        assert [e["id"] for e in _stored(run, "cart")] == ["p1", "p2"]


class TestShow:
    def test_show_lines_and_totals(self, run, capsys):
        run("add", "p1", "--quantity", "2")
        run("add", "gone")
        run("save", "p4")
        capsys.readouterr()

        assert run("show") == 0
        out = capsys.readouterr().out
        assert "2 x Granule za pse Premium [p1]  12,998.00 RSD" in out
        assert "(1 entries no longer in the catalog)" in out
        assert "Total: 12,998.00 RSD" in out
        assert "Gallery [p4]" in out

    def test_show_empty(self, run, capsys):
        assert run("show") == 0
        out = capsys.readouterr().out
        assert "(empty)" in out
        assert "(none)" in out

    def test_show_reads_legacy_cart(self, run, capsys):
        run.storage.write_text(json.dumps({"cart": json.dumps(["p2", "p2x"])}), encoding="utf-8")
        assert run("show") == 0
        assert "1 x Konzerva za mačke [p2]" in capsys.readouterr().out
        assert _stored(run, "cart") == [{"id": "p2", "quantity": 1}, {"id": "p2x", "quantity": 1}]
