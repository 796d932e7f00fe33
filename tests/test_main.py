"""
Tests for the command-line entry point.
"""
import json
import logging

import pytest

import main


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "expenses.csv"
    path.write_text(
        "date,category,name,price\n"
        "2023-01-15,Travel,Taxi,25\n"
        "2023-02-20,Software,IDE,200\n"
        "2024-04-10,Travel,Train,40\n",
        encoding="utf-8",
    )
    return path


class TestGroupCommand:

    def test_group_prints_json(self, csv_file, capsys):
        assert main.main(["group", str(csv_file), "--keys", "year,quarter"]) == 0
        rows = json.loads(capsys.readouterr().out)

        top = [(r["key"], r["sum"]) for r in rows if r["level"] == 0]
        assert top == [(2023, 225.0), (2024, 40.0)]
        leaf = next(r for r in rows if not r["hasChildren"])
        assert leaf["date"].startswith("2023-")

    def test_group_with_preset_and_locale(self, csv_file, capsys):
        assert main.main(["group", str(csv_file), "--preset", "Year / Month", "--locale", "de-DE"]) == 0
        rows = json.loads(capsys.readouterr().out)
        months = [r["name"] for r in rows if r["level"] == 1]
        assert months == ["Januar", "Februar", "April"]

    def test_group_writes_output_file(self, csv_file, tmp_path, capsys):
        out = tmp_path / "rows.json"
        assert main.main(["group", str(csv_file), "--keys", "category", "-o", str(out)]) == 0
        rows = json.loads(out.read_text(encoding="utf-8"))
        assert [r["key"] for r in rows if r["level"] == 0] == ["Software", "Travel"]
        assert "Wrote 5 rows" in capsys.readouterr().out

    def test_group_without_keys_lists_records(self, csv_file, capsys):
        assert main.main(["group", str(csv_file)]) == 0
        rows = json.loads(capsys.readouterr().out)
        assert [r["name"] for r in rows] == ["IDE", "Taxi", "Train"]

    def test_unknown_preset_fails(self, csv_file, capsys):
        assert main.main(["group", str(csv_file), "--preset", "Nope"]) == 1
        assert "Unknown preset" in capsys.readouterr().err

    def test_invalid_date_fails(self, tmp_path, capsys):
        path = tmp_path / "bad.csv"
        path.write_text("date,price\nnever,1\n", encoding="utf-8")
        assert main.main(["group", str(path), "--keys", "year"]) == 1
        assert "missing or unreadable date" in capsys.readouterr().err

    def test_missing_file_fails(self, tmp_path, capsys):
        assert main.main(["group", str(tmp_path / "nope.csv"), "--keys", "year"]) == 1
        assert "could not be read" in capsys.readouterr().err


class TestOtherCommands:

    def test_presets(self, capsys):
        assert main.main(["presets"]) == 0
        out = capsys.readouterr().out
        assert "Year / Quarter" in out
        assert "year, quarter" in out

    def test_setup(self, capsys):
        assert main.main(["setup"]) == 0
        out = capsys.readouterr().out
        assert "CONFIGURATION VALIDATION" in out
        assert "January" in out

    def test_no_command_prints_help(self, capsys):
        assert main.main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_malformed_dictionary_reports_configuration_error(self, tmp_path, monkeypatch, capsys, caplog):
        (tmp_path / "data_dictionary.yaml").write_text("aggregates: Year\n", encoding="utf-8")
        monkeypatch.setenv("GROUPING_CONFIG_DIR", str(tmp_path))
        caplog.set_level(logging.DEBUG)

        assert main.main(["setup"]) == 1
        assert "configuration is invalid" in capsys.readouterr().err
        assert '"category": "CONFIGURATION_ERROR"' in caplog.text

    def test_group_ignores_locale_without_month_key(self, csv_file, capsys):
        assert main.main(["group", str(csv_file), "--keys", "category", "--locale", "xx-XX"]) == 0
        rows = json.loads(capsys.readouterr().out)
        assert [r["key"] for r in rows if r["level"] == 0] == ["Software", "Travel"]
