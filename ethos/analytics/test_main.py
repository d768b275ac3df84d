"""Command line tests."""

import json

import pandas as pd

from ethos.analytics.__main__ import main

ROWS = [
    {"id": "A1", "category": "Fraud", "priority": "High", "status": "Resolved",
     "is_anonymous": "true", "created_at": "2024-02-01", "closed_at": "2024-02-08"},
    {"id": "A2", "category": "Theft", "priority": "Low", "status": "New",
     "is_anonymous": "false", "created_at": "2024-02-03", "closed_at": ""},
]


def write_csv(tmp_path, rows=ROWS):
    path = tmp_path / "records.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return str(path)


class TestMain:
    def test_json_output(self, tmp_path, capsys):
        code = main([write_csv(tmp_path), "2024-01-01", "2024-04-01", "--as-of", "2024-06-15", "--json"])
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["total_reports"] == 2
        assert data["resolution_metrics"]["resolution_rate"] == 50.0
        assert data["calculation_date"] == "2024-06-15T00:00:00"

    def test_text_output_includes_ingestion_report(self, tmp_path, capsys):
        code = main([write_csv(tmp_path), "2024-01-01", "2024-04-01", "--as-of", "2024-06-15"])
        out = capsys.readouterr().out
        assert code == 0
        assert "ETHOS INGESTION REPORT" in out
        assert "REPORTING CHANNEL ANALYTICS BRIEF" in out

    def test_reversed_window_exits_2(self, tmp_path, capsys):
        code = main([write_csv(tmp_path), "2024-04-01", "2024-01-01", "--as-of", "2024-06-15"])
        assert code == 2
        assert "INVALID REPORTING WINDOW" in capsys.readouterr().err

    def test_missing_file_exits_2(self, tmp_path, capsys):
        code = main([str(tmp_path / "nope.csv"), "2024-01-01", "2024-04-01"])
        assert code == 2
        assert "INGESTION HALT" in capsys.readouterr().err

    def test_bad_timestamp_argument_exits_1(self, tmp_path):
        assert main([write_csv(tmp_path), "first of may", "2024-04-01"]) == 1

    def test_employees_option(self, tmp_path, capsys):
        main([write_csv(tmp_path), "2024-01-01", "2024-04-01", "--as-of", "2024-06-15",
              "--employees", "40", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert data["compliance_status"]["channel_utilization_rate"] == 5.0
