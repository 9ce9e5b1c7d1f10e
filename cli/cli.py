"""Team workload report CLI.

Developer CLI to create the schema, generate team reports against the
configured database, and run the API server.
"""

import json
from datetime import datetime

import typer
import uvicorn
from loguru import logger
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from workload_report.core.logger import setup_logger
from workload_report.db.session import init_db
from workload_report.reports.errors import ReportError
from workload_report.reports.period import ReportPeriod, period_label
from workload_report.services.report_generation import ReportGenerationService

console = Console()

app = typer.Typer(
    name="workload-report",
    help="Team workload report CLI",
    add_completion=False,
)

DATE_FORMATS = ["%Y-%m-%d"]


def _build_service() -> ReportGenerationService:
    return ReportGenerationService()


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")) -> None:
    setup_logger(level="DEBUG" if debug else None)


@app.command("init-db")
def init_db_command() -> None:
    """Create database tables that do not exist yet."""
    try:
        init_db()
    except Exception as e:
        console.print(f"[bold red]✗ Schema creation failed:[/bold red] {e}")
        logger.exception("Schema creation failed")
        raise typer.Exit(code=1) from e
    console.print("[bold green]✓ Database tables ready[/bold green]")


@app.command()
def generate(
    team_id: str = typer.Argument(..., help="Team ID"),
    period: str = typer.Option("monthly", "--period", "-p", help="weekly, monthly, quarterly, semi_annual, annual or custom"),
    start: datetime | None = typer.Option(None, "--start", formats=DATE_FORMATS, help="Custom period start"),
    end: datetime | None = typer.Option(None, "--end", formats=DATE_FORMATS, help="Custom period end"),
    today: datetime | None = typer.Option(None, "--today", formats=DATE_FORMATS, help="Reference date for relative periods"),
    generated_by: str | None = typer.Option(None, "--generated-by", help="Requesting user ID"),
) -> None:
    """Generate and store a team report, then print it as JSON."""
    service = _build_service()
    try:
        row = service.generate(
            team_id,
            period,
            today=today.date() if today else None,
            custom_start=start.date() if start else None,
            custom_end=end.date() if end else None,
            generated_by=generated_by,
        )
    except ReportError as e:
        console.print(Panel(Text("Report generation failed", style="bold red"), subtitle=str(e), border_style="red"))
        raise typer.Exit(code=1) from e

    payload = {
        "id": row.id,
        "title": row.title,
        "report_type": row.report_type,
        "period": period_label(ReportPeriod(start=row.period_start, end=row.period_end, type=row.report_type)),
        "period_start": row.period_start.isoformat(),
        "period_end": row.period_end.isoformat(),
        "summary_data": row.summary_data,
        "insights": row.insights,
        "recommendations": row.recommendations,
        "failures": row.detailed_data.get("failures", []),
    }
    console.print(JSON(json.dumps(payload, ensure_ascii=False)))


@app.command("list-reports")
def list_reports(
    team_id: str = typer.Argument(..., help="Team ID"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Maximum number of reports"),
) -> None:
    """List stored reports for a team, newest first."""
    rows = _build_service().list_reports(team_id, limit=limit)
    if not rows:
        console.print(f"[yellow]No reports found for team_id: {team_id}[/yellow]")
        return

    table = Table(title=f"Reports for {team_id}")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Views", justify="right")
    for row in rows:
        table.add_row(row.id, row.title, row.report_type, row.generation_status, str(row.view_count))
    console.print(table)


@app.command()
def server(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Run the FastAPI server."""
    logger.info(f"Starting FastAPI server on {host}:{port} (reload={reload})")
    uvicorn.run("workload_report.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
