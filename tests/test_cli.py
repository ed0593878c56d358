"""
Tests for the command-line scripts.
"""

import pytest

import predict_player
import run_report


def test_run_report(players_csv, capsys):
    """Test the report script prints the markdown report."""
    exit_code = run_report.main(["--data", str(players_csv), "--no-plots"])

    assert exit_code == 0
    assert "Accuracy" in capsys.readouterr().out


def test_run_report_schema_error(tmp_path, raw_players, capsys):
    """Test a missing column exits with status 1 and a message."""
    path = tmp_path / "broken.csv"
    raw_players.drop(columns=["age"]).to_csv(path, index=False)

    exit_code = run_report.main(["--data", str(path), "--no-plots"])

    assert exit_code == 1
    assert "age" in capsys.readouterr().err


def test_run_report_output_dir(tmp_path, players_csv):
    out_dir = tmp_path / "out"

    assert run_report.main(["--data", str(players_csv), "--output-dir", str(out_dir)]) == 0
    assert (out_dir / "model_report.md").exists()


def test_predict_player(players_csv, capsys):
    exit_code = predict_player.main(
        ["--age", "21", "--hours", "3.5", "--data", str(players_csv)]
    )

    assert exit_code == 0
    assert "Nearest Players" in capsys.readouterr().out


def test_invalid_log_level_rejected(players_csv, capsys):
    """Test an unknown logging level is reported as a usage error."""
    with pytest.raises(SystemExit) as exc_info:
        run_report.main(["--data", str(players_csv), "--log-level", "LOUD"])

    assert exc_info.value.code == 2
    assert "--log-level" in capsys.readouterr().err


def test_log_level_case_insensitive(players_csv):
    assert run_report.main(["--data", str(players_csv), "--no-plots", "--log-level", "info"]) == 0
