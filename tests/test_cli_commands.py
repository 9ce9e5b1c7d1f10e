from typer.testing import CliRunner

from cli.cli import app
from workload_report.services.report_generation import ReportGenerationService

runner = CliRunner()


def test_init_db(db_engine):
    result = runner.invoke(app, ["init-db"])

    assert result.exit_code == 0
    assert "Database tables ready" in result.output


def test_generate_prints_report(seeded_db):
    result = runner.invoke(
        app,
        ["generate", "team-1", "--period", "custom", "--start", "2024-03-01", "--end", "2024-03-31"],
    )

    assert result.exit_code == 0, result.output
    assert "Falcons Report" in result.output
    assert "totalAthletes" in result.output
    assert len(ReportGenerationService().list_reports("team-1")) == 1


def test_generate_unknown_team_exits_nonzero(seeded_db):
    result = runner.invoke(app, ["generate", "team-404", "--period", "weekly", "--today", "2024-03-31"])

    assert result.exit_code == 1
    assert "Report generation failed" in result.output


def test_generate_invalid_period_exits_nonzero(seeded_db):
    result = runner.invoke(app, ["generate", "team-1", "--period", "daily"])

    assert result.exit_code == 1


def test_list_reports_empty(seeded_db):
    result = runner.invoke(app, ["list-reports", "team-2"])

    assert result.exit_code == 0
    assert "No reports found" in result.output
