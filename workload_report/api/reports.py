"""Team report endpoints.

Generation runs synchronously inside the request; the stored report row is
returned once the engine has finished.
"""

import datetime as dt
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from pydantic import BaseModel, ConfigDict

from workload_report.db.models import GeneratedReport
from workload_report.reports.errors import InvalidPeriodError, NotFoundError
from workload_report.reports.period import PeriodType
from workload_report.services.report_generation import ReportGenerationService

router = APIRouter(prefix="/reports", tags=["reports"])


class GenerateReportRequest(BaseModel):
    period_type: PeriodType = "monthly"
    start: dt.date | None = None
    end: dt.date | None = None
    today: dt.date | None = None
    generated_by: str | None = None


class GeneratedReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    report_type: str
    title: str
    period_start: dt.date
    period_end: dt.date
    team_id: str | None
    athlete_ids: list[str] | None
    summary_data: dict[str, Any]
    detailed_data: dict[str, Any]
    insights: list[str] | None
    recommendations: list[str] | None
    generation_status: str
    error_message: str | None
    generated_by: str | None
    generated_at: dt.datetime | None
    viewed_at: dt.datetime | None
    view_count: int
    created_at: dt.datetime


def get_report_service() -> ReportGenerationService:
    """FastAPI dependency providing the report service."""
    return ReportGenerationService()


def _to_response(row: GeneratedReport) -> GeneratedReportResponse:
    return GeneratedReportResponse.model_validate(row)


@router.post("/teams/{team_id}", status_code=status.HTTP_201_CREATED, response_model=GeneratedReportResponse)
def generate_team_report(
    team_id: str,
    payload: GenerateReportRequest,
    service: ReportGenerationService = Depends(get_report_service),
) -> GeneratedReportResponse:
    """Generate and store a team report for the requested period."""
    logger.info(f"Report generation requested for team_id={team_id}, period_type={payload.period_type}")
    try:
        row = service.generate(
            team_id,
            payload.period_type,
            today=payload.today,
            custom_start=payload.start,
            custom_end=payload.end,
            generated_by=payload.generated_by,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidPeriodError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return _to_response(row)


@router.get("/teams/{team_id}", response_model=list[GeneratedReportResponse])
def list_team_reports(
    team_id: str,
    limit: int | None = Query(default=None, ge=1, le=500),
    service: ReportGenerationService = Depends(get_report_service),
) -> list[GeneratedReportResponse]:
    """Stored reports for a team, newest first."""
    return [_to_response(row) for row in service.list_reports(team_id, limit=limit)]


@router.post("/{report_id}/viewed", status_code=status.HTTP_204_NO_CONTENT)
def mark_report_viewed(
    report_id: str,
    service: ReportGenerationService = Depends(get_report_service),
) -> None:
    try:
        service.mark_viewed(report_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_report(
    report_id: str,
    service: ReportGenerationService = Depends(get_report_service),
) -> None:
    try:
        service.delete_report(report_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
